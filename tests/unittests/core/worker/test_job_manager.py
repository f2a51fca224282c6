#!/usr/bin/env python
"""Example usage and tests for :mod:`remopt.core.worker.job_manager`."""
import math
import threading

import numpy
import pytest

from remopt.core.io.experiment_builder import build_settings
from remopt.core.utils.exceptions import (
    InvalidJob,
    NoCompletedJobs,
    SuggestionCancelled,
    SuggestionTimeout,
)
from remopt.core.worker.job_manager import JobManager
from remopt.core.worker.synchronizer import Synchronizer
from remopt.testing import EphemeralStore


def _calls(store, name):
    return [call for call in store.calls if call[0] == name]


@pytest.fixture
def manager(store, parameters, outcome):
    """Job manager of a new experiment, never sleeping"""
    store.create_experiment("exp", "", build_settings(parameters, outcome))
    return JobManager(Synchronizer(store, "exp"), poll_interval=0)


@pytest.fixture
def slow_store():
    """In-memory store which fills suggestions after 3 polls"""
    return EphemeralStore(fill_delay=3, seed=2)


@pytest.fixture
def slow_manager(slow_store, parameters, outcome):
    """Job manager on the slow store"""
    slow_store.create_experiment("exp", "", build_settings(parameters, outcome))
    return JobManager(Synchronizer(slow_store, "exp"), poll_interval=0)


@pytest.fixture
def stuck_manager(parameters, outcome):
    """Job manager on a store which never fills suggestions"""
    store = EphemeralStore(fill_delay=10**9)
    store.create_experiment("exp", "", build_settings(parameters, outcome))
    return JobManager(
        Synchronizer(store, "exp"), poll_interval=0.01, poll_timeout=0.05
    )


class TestSuggest:
    """Test suggestion of new jobs"""

    def test_suggest(self, manager, parameters):
        """Test that a suggested job is within bounds and pending"""
        params = manager.suggest()

        assert set(params) == set(parameters)
        assert 1e-4 <= params["lr"] <= 1.0
        assert isinstance(params["layers"], int)
        assert 1 <= params["layers"] <= 8

        result_id = manager.get_id(params)
        assert manager.pending_ids == [result_id]
        assert manager.pending() == [params]

    def test_suggest_twice(self, manager):
        """Test that two consecutive suggestions differ"""
        assert manager.suggest() != manager.suggest()
        assert len(manager.pending_ids) == 2

    def test_suggest_polls(self, slow_manager, slow_store):
        """Test that the job is polled until the service fills it in"""
        params = slow_manager.suggest()

        assert params
        assert len(_calls(slow_store, "get_result")) == 3

    def test_suggest_timeout(self, stuck_manager):
        """Test that waiting stops after the timeout"""
        with pytest.raises(SuggestionTimeout):
            stuck_manager.suggest()

        assert stuck_manager.pending() == []

    def test_suggest_timeout_override(self, stuck_manager):
        """Test that the timeout given to suggest takes precedence"""
        stuck_manager.poll_timeout = 3600
        with pytest.raises(SuggestionTimeout):
            stuck_manager.suggest(timeout=0.05)

    def test_suggest_cancelled(self, slow_manager):
        """Test that a set event stops the wait at once"""
        event = threading.Event()
        event.set()

        with pytest.raises(SuggestionCancelled):
            slow_manager.suggest(cancel_event=event)

    def test_suggest_cancelled_from_thread(self, stuck_manager):
        """Test that the wait is interrupted from another thread"""
        stuck_manager.poll_timeout = 0
        event = threading.Event()
        timer = threading.Timer(0.1, event.set)
        timer.start()

        try:
            with pytest.raises(SuggestionCancelled):
                stuck_manager.suggest(cancel_event=event)
        finally:
            timer.cancel()


class TestUpdate:
    """Test reporting outcomes"""

    def test_update_suggested(self, manager, store):
        """Test that the outcome of a suggested job replaces it on the store"""
        params = manager.suggest()
        result_id = manager.get_id(params)

        assert manager.update(params, 0.5) == result_id

        assert manager.pending_ids == []
        assert manager.pending() == []
        assert len(_calls(store, "replace_result")) == 1
        assert len(_calls(store, "add_result")) == 0
        _, outcomes = manager.get_all_results()
        assert outcomes == [0.5]

    def test_update_twice(self, manager, store):
        """Test that updating twice keeps a single job with the last outcome"""
        params = manager.suggest()

        first = manager.update(params, 0.5)
        second = manager.update(params, 0.7)

        assert first == second
        assert len(store.results) == 1
        jobs, outcomes = manager.get_all_results()
        assert jobs == [params]
        assert outcomes == [0.7]

    def test_update_new_job(self, manager, store):
        """Test that a job not suggested is added as proposed by the user"""
        params = {"lr": 0.5, "layers": 3}

        result_id = manager.update(params, 1.5)

        assert store.results[result_id]["userProposed"] is True
        assert manager.get_id(params) == result_id
        assert manager.best() == params

    def test_update_numpy_values(self, manager, store):
        """Test that numpy outcomes and parameter values reach the store"""
        params = manager.suggest()
        manager.update(params, numpy.float32(0.5))

        new_params = {"lr": 0.5, "layers": numpy.int64(3)}
        result_id = manager.update(new_params, 1.0)

        values = {v["name"]: v["value"] for v in store.results[result_id]["variables"]}
        assert values == {"lr": 0.5, "layers": 3, "accuracy": 1.0}
        _, outcomes = manager.get_all_results()
        assert sorted(outcomes) == [0.5, 1.0]

    def test_update_missing_parameter(self, manager, store):
        """Test that a new job must give every parameter"""
        with pytest.raises(InvalidJob) as exc:
            manager.update({"lr": 0.5}, 1.0)

        assert "The job specified is invalid: parameter layers is missing." in str(
            exc.value
        )
        assert store.results == {}

    @pytest.mark.parametrize("value", [math.inf, -math.inf, math.nan])
    def test_update_violation(self, manager, store, value):
        """Test that non-finite outcomes are sent as constraint violations"""
        params = manager.suggest()
        result_id = manager.update(params, value)

        outcome = next(
            variable["value"]
            for variable in store.results[result_id]["variables"]
            if variable["name"] == "accuracy"
        )
        assert outcome == "-infinity"
        assert manager.get_all_results()[1] == [-math.inf]

    def test_update_bad_outcome(self, manager, store):
        """Test that an invalid outcome is rejected before any call to the store"""
        calls = len(store.calls)
        with pytest.raises(TypeError):
            manager.update({"lr": 0.5, "layers": 3}, "high")

        assert len(store.calls) == calls


class TestCancel:
    """Test cancellation of jobs"""

    def test_cancel(self, manager, store):
        """Test that a cancelled job is deleted everywhere"""
        params = manager.suggest()
        result_id = manager.get_id(params)

        assert manager.cancel(params) == [result_id]

        assert result_id not in store.results
        assert manager.pending_ids == []
        assert manager.pending() == []
        assert manager.get_id(params) is None

    def test_cancel_unknown(self, manager, caplog):
        """Test that unknown jobs are skipped with a warning"""
        assert manager.cancel([{"lr": 0.5, "layers": 3}]) == []
        assert "Did not find job" in caplog.text

    def test_cancel_many(self, manager):
        """Test cancelling a list of jobs"""
        jobs = [manager.suggest() for _ in range(3)]

        cancelled = manager.cancel(jobs[:2])

        assert len(cancelled) == 2
        assert manager.pending() == jobs[2:]

    def test_clear_pending(self, manager):
        """Test that all pending jobs are cancelled, completed ones are kept"""
        done = manager.suggest()
        manager.update(done, 1.0)
        for _ in range(2):
            manager.suggest()

        assert len(manager.clear_pending()) == 2

        assert manager.pending() == []
        assert manager.get_all_results()[0] == [done]


class TestQueries:
    """Test best job and listing of results"""

    def test_best(self, manager):
        """Test that the job with the highest outcome is the best"""
        jobs = [manager.suggest() for _ in range(4)]
        for params, value in zip(jobs, [6.7, 12, -3, math.inf]):
            manager.update(params, value)

        assert manager.best() == jobs[1]

    def test_best_without_outcome(self, manager):
        """Test that best fails when no job has an outcome value"""
        params = manager.suggest()
        with pytest.raises(NoCompletedJobs):
            manager.best()

        manager.update(params, -math.inf)
        with pytest.raises(NoCompletedJobs):
            manager.best()

    def test_get_all_results(self, manager):
        """Test that all jobs are listed in order with their outcome"""
        jobs = [manager.suggest() for _ in range(3)]
        manager.update(jobs[0], 1.0)
        manager.update(jobs[2], math.inf)

        all_jobs, outcomes = manager.get_all_results()

        assert all_jobs == jobs
        assert outcomes[0] == 1.0
        assert math.isnan(outcomes[1])
        assert outcomes[2] == -math.inf

    def test_get_id_unknown(self, manager):
        """Test that get_id gives None for unknown parameter values"""
        assert manager.get_id({"lr": 0.5, "layers": 3}) is None

    def test_sees_other_clients(self, manager, store):
        """Test that jobs of another client are visible after a pass"""
        other = JobManager(Synchronizer(store, "exp"), poll_interval=0)
        params = other.suggest()
        other.update(params, 2.0)

        assert manager.best() == params
        assert manager.pending_ids == []
