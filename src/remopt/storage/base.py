"""
Remote experiment store protocol
================================

Operations of the tuning service consumed by the client.

The service is the source of truth of every experiment. Records are plain
dictionaries, as decoded from the service's JSON:

* experiment: ``{id, name, description, task}``
* setting: ``{id, name, type, min, max, size, units, scale, isOutput, experiment}``
* result (job): ``{id, task, variables, userProposed, description, runDate}``
* variable: ``{id, name, value, setting}``

Implementations: :class:`remopt.service.client.store.RESTStore` talks to the service
over HTTP, :class:`remopt.testing.EphemeralStore` lives in memory.

"""
from __future__ import annotations


class BaseRemoteStore:
    """Contract of the remote experiment store"""

    def create_experiment(self, name: str, description: str, settings: list) -> int:
        """Create an experiment and return its identifier

        Raises
        ------
        remopt.service.client.base.ExperimentAlreadyExists
            If an experiment with this name already exists for the caller.

        """
        raise NotImplementedError()

    def list_experiments(self, page: int = 1) -> dict:
        """Return one page of experiments ``{results: [...], next: ...}``.

        ``next`` is empty on the last page. Pages start at 1.
        """
        raise NotImplementedError()

    def get_experiment(self, experiment_id) -> dict | None:
        """Return the record of an experiment, or None if it does not exist"""
        raise NotImplementedError()

    def list_settings(self, experiment_id, page_size: int) -> list[dict]:
        """Return the settings (parameters and outcome) of an experiment"""
        raise NotImplementedError()

    def list_results(self, task_id, page_size: int) -> list[dict]:
        """Return the results (jobs) of a task"""
        raise NotImplementedError()

    def create_suggestion(self, task_id) -> dict:
        """Ask the optimizer for a new job ``{id, variables}``.

        ``variables`` is empty until the optimizer has chosen the parameter values.
        """
        raise NotImplementedError()

    def get_result(self, result_id) -> dict:
        """Return the current record of a job"""
        raise NotImplementedError()

    # pylint: disable=too-many-arguments
    def add_result(
        self,
        variables: list[dict],
        task_id,
        user_proposed: bool = True,
        description: str = "",
        run_date: str | None = None,
    ) -> dict:
        """Add a job proposed by the user, return its record ``{id, ...}``"""
        raise NotImplementedError()

    def replace_result(self, result: dict) -> dict:
        """Replace all the fields of an existing job with `result`"""
        raise NotImplementedError()

    def delete_result(self, result_id) -> None:
        """Delete a job"""
        raise NotImplementedError()

    def delete_experiment(self, experiment_id) -> None:
        """Delete an experiment and all its jobs"""
        raise NotImplementedError()
