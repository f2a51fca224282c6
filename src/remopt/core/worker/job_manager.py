"""
Job lifecycle
=============

Suggest, update, cancel and query the jobs of an experiment.

A job goes through the following states::

    suggested (unfilled) --> pending --> completed
                                 \\           \\
                                  +-----------+--> cancelled (deleted)

Every operation first runs a full synchronizer pass, then applies its transition on
the remote store, then records the change in the local cache. Operations are
serialized with a lock so that no pass can interleave with another operation's
mutation.

"""
import logging
import threading

import remopt.core
from remopt.core.utils.backoff import Backoff
from remopt.core.utils.exceptions import (
    InvalidJob,
    NoCompletedJobs,
    SuggestionCancelled,
    SuggestionTimeout,
)
from remopt.core.worker.cache import id_order
from remopt.core.worker.job import (
    Variable,
    VariableKind,
    parse_variables,
    split_variables,
)
from remopt.core.worker.outcome import Outcome

log = logging.getLogger(__name__)


class JobManager:
    """Apply job transitions of an experiment

    Parameters
    ----------
    synchronizer: `remopt.core.worker.synchronizer.Synchronizer`
        Synchronizer of the experiment. Gives access to the remote store.
    poll_interval: float, optional
        First wait between two polls of a suggested job.
    poll_backoff: float, optional
        Growth factor of the wait between polls.
    poll_max_interval: float, optional
        Maximum wait between two polls.
    poll_timeout: float, optional
        Maximum time to wait for a suggested job to be filled in. <= 0 waits forever.

    Polling options default to ``remopt.core.config.client``.

    """

    # pylint: disable=too-many-arguments
    def __init__(
        self,
        synchronizer,
        poll_interval=None,
        poll_backoff=None,
        poll_max_interval=None,
        poll_timeout=None,
    ):
        client_config = remopt.core.config.client
        self.synchronizer = synchronizer
        self.poll_interval = (
            client_config.poll_interval if poll_interval is None else poll_interval
        )
        self.poll_backoff = (
            client_config.poll_backoff if poll_backoff is None else poll_backoff
        )
        self.poll_max_interval = (
            client_config.poll_max_interval
            if poll_max_interval is None
            else poll_max_interval
        )
        self.poll_timeout = (
            client_config.poll_timeout if poll_timeout is None else poll_timeout
        )

        # Jobs suggested by this client with no outcome reported yet
        self.pending_ids = []
        self._lock = threading.RLock()

    @property
    def store(self):
        """Remote experiment store"""
        return self.synchronizer.store

    @property
    def cache(self):
        """Local cache of the synchronizer"""
        return self.synchronizer.cache

    def sync(self):
        """Run a synchronizer pass, see `Synchronizer.resolve_and_sync`"""
        with self._lock:
            return self.synchronizer.resolve_and_sync()

    def suggest(self, cancel_event=None, timeout=None):
        """Ask the service for a new job and wait until its values are filled in.

        Parameters
        ----------
        cancel_event: `threading.Event`, optional
            Set it from another thread to stop waiting.
        timeout: float, optional
            Overrides `poll_timeout` for this call.

        Returns
        -------
        dict
            Values of the parameters of the new job.

        Raises
        ------
        SuggestionTimeout
            If the job is not filled in within the timeout.
        SuggestionCancelled
            If `cancel_event` is set while waiting.

        """
        with self._lock:
            state = self.synchronizer.resolve_and_sync()
            job = self.store.create_suggestion(state.task_id)
            result_id = job["id"]
            self.pending_ids.append(result_id)

        log.debug("Waiting for job %s to be filled in", result_id)
        variables = self._wait_for_variables(
            result_id,
            job.get("variables"),
            state.outcome_name,
            cancel_event,
            self.poll_timeout if timeout is None else timeout,
        )
        params, _ = split_variables(variables)

        with self._lock:
            self.synchronizer.commit(
                result_id, params=params, outcome=Outcome.unreported()
            )

        log.info("Suggested job %s: %s", result_id, params)
        return params

    # pylint: disable=too-many-arguments
    def _wait_for_variables(self, result_id, records, outcome_name, cancel_event, timeout):
        backoff = Backoff(
            self.poll_interval,
            factor=self.poll_backoff,
            max_interval=self.poll_max_interval,
            timeout=timeout,
            cancel_event=cancel_event,
        )

        variables = parse_variables(records, outcome_name)
        try:
            while not variables:
                backoff.wait()
                record = self.store.get_result(result_id)
                variables = parse_variables(record.get("variables"), outcome_name)
        except (SuggestionTimeout, SuggestionCancelled) as e:
            log.warning("Stopped waiting for job %s: %s", result_id, e)
            raise

        return variables

    def get_id(self, params):
        """Return the identifier of the job with the given parameter values.

        Returns None if no job matches. If several jobs match, the one with the
        lowest identifier is returned.
        """
        with self._lock:
            self.synchronizer.resolve_and_sync()
            return self.cache.find_id(params)

    def update(self, params, outcome):
        """Report the outcome of the job with the given parameter values.

        If no job has these values, a new job proposed by the user is added.
        Non-finite outcomes are reported as constraint violations.

        Returns
        -------
        Identifier of the updated job.

        Raises
        ------
        InvalidJob
            If a new job has to be added and a parameter is missing from `params`.

        """
        outcome = Outcome.of(outcome)

        with self._lock:
            state = self.synchronizer.resolve_and_sync()
            result_id = self.cache.find_id(params)

            if result_id is None:
                result_id = self._add_job(state, params, outcome)
                self.synchronizer.commit(result_id, params=params)
                log.info("Added job %s with outcome %s", result_id, outcome.to_float())
            else:
                self._replace_outcome(state, result_id, outcome)
                if result_id in self.pending_ids:
                    self.pending_ids.remove(result_id)
                log.info("Updated job %s with outcome %s", result_id, outcome.to_float())

            self.synchronizer.commit(result_id, outcome=outcome)

        return result_id

    def _add_job(self, state, params, outcome):
        variables = []
        for name, setting_id in state.setting_ids.items():
            if name in params:
                variable = Variable(VariableKind.PARAM, name, params[name], setting_id)
            elif name == state.outcome_name:
                variable = Variable(VariableKind.OUTCOME, name, outcome, setting_id)
            else:
                raise InvalidJob(
                    f"The job specified is invalid: parameter {name} is missing."
                )
            variables.append(variable.to_wire())

        record = self.store.add_result(variables, state.task_id, user_proposed=True)
        return record["id"]

    def _replace_outcome(self, state, result_id, outcome):
        # The service replaces the whole record, all fields must be sent back.
        record = self.store.get_result(result_id)
        variables = parse_variables(record.get("variables"), state.outcome_name)

        if not any(v.kind is VariableKind.OUTCOME for v in variables):
            variables.append(
                Variable(
                    VariableKind.OUTCOME,
                    state.outcome_name,
                    outcome,
                    state.setting_ids.get(state.outcome_name),
                )
            )

        record = dict(record)
        record["variables"] = [
            (v.with_value(outcome) if v.kind is VariableKind.OUTCOME else v).to_wire()
            for v in variables
        ]
        self.store.replace_result(record)

    def cancel(self, params_list):
        """Cancel jobs, deleting them from the experiment.

        Parameters
        ----------
        params_list: dict or list of dict
            Parameter values of the job(s) to cancel. Jobs not found are skipped
            with a warning.

        Returns
        -------
        list
            Identifiers of the cancelled jobs.

        """
        if isinstance(params_list, dict):
            params_list = [params_list]

        cancelled = []
        with self._lock:
            for params in params_list:
                self.synchronizer.resolve_and_sync()
                result_id = self.cache.find_id(params)

                if result_id is None:
                    log.warning("Did not find job with the parameters %s", params)
                    continue

                self.store.delete_result(result_id)
                self.synchronizer.forget(result_id)
                if result_id in self.pending_ids:
                    self.pending_ids.remove(result_id)

                log.info("Cancelled job %s", result_id)
                cancelled.append(result_id)

        return cancelled

    def pending(self):
        """Return the parameter values of the jobs with no outcome reported yet"""
        with self._lock:
            state = self.synchronizer.resolve_and_sync()
            return [dict(state.id_to_params[uid]) for uid in self.cache.pending_ids()]

    def clear_pending(self):
        """Cancel all the pending jobs, return the identifiers cancelled"""
        with self._lock:
            jobs = self.pending()
            cancelled = self.cancel(jobs) if jobs else []
            self.synchronizer.resolve_and_sync()

        return cancelled

    def best(self):
        """Return the parameter values of the job with the highest outcome.

        Raises
        ------
        NoCompletedJobs
            If no job has a reported outcome value. Constraint violations do not count.

        """
        with self._lock:
            state = self.synchronizer.resolve_and_sync()
            result_id = self.cache.best_id()
            if result_id is None:
                raise NoCompletedJobs(
                    f"No job of experiment {self.synchronizer.name} has an outcome yet."
                )

            record = self.store.get_result(result_id)
            params, _ = split_variables(
                parse_variables(record.get("variables"), state.outcome_name)
            )

        return params

    def get_all_results(self):
        """Return all the jobs and their outcomes, ordered by identifier.

        Returns
        -------
        tuple of lists
            The parameter values of each job and their outcomes as floats:
            ``nan`` if not reported yet, ``-inf`` for constraint violations.

        """
        with self._lock:
            state = self.synchronizer.resolve_and_sync()
            ids = sorted(state.id_to_params, key=id_order)
            jobs = [dict(state.id_to_params[uid]) for uid in ids]
            outcomes = [
                state.id_to_outcome.get(uid, Outcome.unreported()).to_float()
                for uid in ids
            ]

        return jobs, outcomes
