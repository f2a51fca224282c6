"""
Synchronizer
============

Rebuild the local view of an experiment from the remote experiment store.

A pass resolves the experiment identifier (looking it up by name the first time),
fetches its settings and all its results, then replaces the content of the
:class:`~remopt.core.worker.cache.LocalCache` in one swap. Passes are not
incremental: each one costs a full fetch of the experiment.

The synchronizer is the only owner of the cache. The job manager records its
changes through :meth:`Synchronizer.commit` and :meth:`Synchronizer.forget`.

"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping

import remopt.core
from remopt.core.io.experiment_builder import ParameterSpec
from remopt.core.utils.exceptions import ExperimentNotFound, SynchronizationError
from remopt.core.worker.cache import LocalCache
from remopt.core.worker.job import parse_variables, split_variables
from remopt.core.worker.outcome import Outcome

log = logging.getLogger(__name__)

UNRESOLVED = -1


@dataclass(frozen=True)
class SyncResult:
    """State of the experiment after a synchronizer pass"""

    experiment_id: Any
    task_id: Any
    parameters: Dict[str, ParameterSpec]
    outcome_name: str
    id_to_params: Mapping[Any, Dict[str, Any]]
    id_to_outcome: Mapping[Any, Outcome]
    setting_ids: Mapping[str, Any]


class Synchronizer:
    """Keep a :class:`LocalCache` consistent with the remote store

    Parameters
    ----------
    store: `remopt.storage.base.BaseRemoteStore`
        Remote experiment store.
    name: str
        Name of the experiment, used to find its identifier on the first pass.
    experiment_id: int, optional
        Identifier of the experiment if already known. Default: unresolved.
    description: str, optional
    page_size: int, optional
        Page size used to fetch settings and results. Defaults to
        ``remopt.core.config.client.page_size``.

    """

    # pylint: disable=too-many-arguments
    def __init__(
        self, store, name, experiment_id=UNRESOLVED, description="", page_size=None
    ):
        if page_size is None:
            page_size = remopt.core.config.client.page_size

        self.store = store
        self.name = name
        self.description = description
        self.experiment_id = experiment_id
        self.task_id = UNRESOLVED
        self.outcome_name = ""
        self.parameters: Dict[str, ParameterSpec] = {}
        self.page_size = page_size
        self.cache = LocalCache()

    @property
    def is_resolved(self):
        """True once the experiment identifier is known. Zero or negative is unknown."""
        if self.experiment_id is None:
            return False
        if isinstance(self.experiment_id, int):
            return self.experiment_id > 0
        return True

    def resolve(self):
        """Find the identifier of the experiment, or refresh its record if known.

        Raises
        ------
        ExperimentNotFound
            If no experiment matches the name or the identifier.

        """
        if self.is_resolved:
            record = self.store.get_experiment(self.experiment_id)
            if record is None:
                raise ExperimentNotFound(
                    f'Experiment with id "{self.experiment_id}" not found.'
                )
            if record.get("id") != self.experiment_id:
                log.warning(
                    "Store returned experiment %s when asked for %s, record ignored",
                    record.get("id"),
                    self.experiment_id,
                )
                if self.task_id == UNRESOLVED:
                    self.task_id = self.experiment_id
                return self.experiment_id
        else:
            record = self._find_by_name()
            self.experiment_id = record["id"]

        self.name = record.get("name", self.name)
        self.description = record.get("description", self.description)
        self.task_id = record.get("task") or self.experiment_id
        return self.experiment_id

    def _find_by_name(self):
        page = 1
        while True:
            listing = self.store.list_experiments(page=page)
            for record in listing.get("results", []):
                # First match wins, duplicated names are not told apart.
                if record.get("name") == self.name:
                    log.debug("Found experiment %s on page %d", self.name, page)
                    return record

            if not listing.get("next"):
                break
            page += 1

        raise ExperimentNotFound(
            f'Experiment with name "{self.name}" and description '
            f'"{self.description}" not found.'
        )

    def resolve_and_sync(self) -> SyncResult:
        """Run a full pass and rebuild the cache.

        Raises
        ------
        ExperimentNotFound
            If the experiment does not exist on the remote store.
        SynchronizationError
            If the experiment has no outcome or an invalid identifier.

        """
        experiment_id = self.resolve()

        parameters, outcome_name, setting_ids = self._fetch_settings(experiment_id)
        id_to_params, id_to_outcome = self._fetch_results(outcome_name)

        if not outcome_name:
            raise SynchronizationError(
                f"Experiment {self.name} ({experiment_id}) has no outcome setting."
            )
        if isinstance(experiment_id, int) and experiment_id < 0:
            raise SynchronizationError(f"Invalid experiment identifier {experiment_id}")

        self.parameters = parameters
        self.outcome_name = outcome_name
        self.cache.rebuild(id_to_params, id_to_outcome, setting_ids)

        log.debug(
            "Synchronized experiment %s (%s): %d parameters, %d results",
            self.name,
            experiment_id,
            len(parameters),
            len(id_to_params),
        )

        state = self.cache.state
        return SyncResult(
            experiment_id=experiment_id,
            task_id=self.task_id,
            parameters=dict(parameters),
            outcome_name=outcome_name,
            id_to_params=state.id_to_params,
            id_to_outcome=state.id_to_outcome,
            setting_ids=state.setting_ids,
        )

    def _fetch_settings(self, experiment_id):
        parameters = {}
        outcome_name = ""
        setting_ids = {}

        for setting in self.store.list_settings(experiment_id, self.page_size):
            if setting.get("experiment", experiment_id) != experiment_id:
                continue

            setting_ids[setting["name"]] = setting["id"]
            if setting.get("isOutput"):
                outcome_name = setting["name"]
            else:
                parameters[setting["name"]] = ParameterSpec.from_setting(setting)

        return parameters, outcome_name, setting_ids

    def _fetch_results(self, outcome_name):
        id_to_params = {}
        id_to_outcome = {}

        for result in self.store.list_results(self.task_id, self.page_size):
            variables = parse_variables(result.get("variables"), outcome_name)
            if not variables:
                # Suggested job not filled in by the optimizer yet
                continue
            params, outcome = split_variables(variables)
            id_to_params[result["id"]] = params
            id_to_outcome[result["id"]] = outcome

        return id_to_params, id_to_outcome

    def commit(self, result_id, params=None, outcome=None):
        """Record in the cache a change already applied on the remote store"""
        self.cache.put(result_id, params=params, outcome=outcome)

    def forget(self, result_id):
        """Remove from the cache a job deleted from the remote store"""
        self.cache.remove(result_id)

    def parameter_names(self) -> List[str]:
        """Names of the parameters, as of the last pass"""
        return list(self.parameters)
