"""
Experiment client
=================

Client of one experiment of the tuning service.

"""
import logging

from remopt.core.worker.job_manager import JobManager
from remopt.core.worker.synchronizer import Synchronizer

log = logging.getLogger(__name__)


class ExperimentClient:
    """Suggest jobs and report their outcome to the tuning service

    Use :func:`remopt.client.create_experiment` to build one. Every method starts
    with a full synchronization with the service, so several clients (or processes)
    may work on the same experiment.

    Parameters
    ----------
    synchronizer: `remopt.core.worker.synchronizer.Synchronizer`
        Synchronizer of the experiment.
    job_manager: `remopt.core.worker.job_manager.JobManager`, optional
        Defaults to a job manager with the global polling configuration.

    Examples
    --------
    >>> client = create_experiment(
    ...     "sgd",
    ...     parameters={"lr": {"min": 1e-4, "max": 1.0}},
    ...     outcome={"name": "accuracy"},
    ... )
    >>> params = client.suggest()
    >>> client.update(params, train(**params))
    >>> client.best()

    """

    def __init__(self, synchronizer: Synchronizer, job_manager: JobManager = None):
        self._synchronizer = synchronizer
        self._jobs = job_manager or JobManager(synchronizer)

    def __repr__(self) -> str:
        return f"ExperimentClient(name={self.name}, id={self.id})"

    ###
    # Attributes
    ###

    @property
    def id(self):
        """Identifier of the experiment on the service"""
        return self._synchronizer.experiment_id

    @property
    def name(self):
        """Name of the experiment"""
        return self._synchronizer.name

    @property
    def description(self):
        """Description of the experiment"""
        return self._synchronizer.description

    @property
    def parameters(self):
        """Parameters of the experiment, as of the last synchronization"""
        return dict(self._synchronizer.parameters)

    @property
    def outcome_name(self):
        """Name of the outcome to maximize"""
        return self._synchronizer.outcome_name

    @property
    def store(self):
        """Remote experiment store in use"""
        return self._synchronizer.store

    @property
    def pending_ids(self):
        """Identifiers of the jobs suggested by this client and not updated yet"""
        return list(self._jobs.pending_ids)

    ###
    # Jobs
    ###

    def sync(self):
        """Synchronize with the service, see `Synchronizer.resolve_and_sync`"""
        return self._jobs.sync()

    def suggest(self, cancel_event=None, timeout=None):
        """See `~remopt.core.worker.job_manager.JobManager.suggest`"""
        return self._jobs.suggest(cancel_event=cancel_event, timeout=timeout)

    def update(self, params, outcome):
        """See `~remopt.core.worker.job_manager.JobManager.update`"""
        return self._jobs.update(params, outcome)

    def cancel(self, params_list):
        """See `~remopt.core.worker.job_manager.JobManager.cancel`"""
        return self._jobs.cancel(params_list)

    def pending(self):
        """See `~remopt.core.worker.job_manager.JobManager.pending`"""
        return self._jobs.pending()

    def clear_pending(self):
        """See `~remopt.core.worker.job_manager.JobManager.clear_pending`"""
        return self._jobs.clear_pending()

    def best(self):
        """See `~remopt.core.worker.job_manager.JobManager.best`"""
        return self._jobs.best()

    def get_id(self, params):
        """See `~remopt.core.worker.job_manager.JobManager.get_id`"""
        return self._jobs.get_id(params)

    def get_all_results(self):
        """See `~remopt.core.worker.job_manager.JobManager.get_all_results`"""
        return self._jobs.get_all_results()

    def delete(self):
        """Delete the experiment and all its results from the service.

        .. warning:: This cannot be undone.
        """
        self.store.delete_experiment(self.id)
        log.info("Experiment %s (%s) has been deleted", self.name, self.id)

    def close(self):
        """Close the connection to the service"""
        close = getattr(self.store, "close", None)
        if close is not None:
            close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
