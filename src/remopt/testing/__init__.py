"""
Common testing support module
=============================

In-memory remote experiment store, used by the test suite and by the debug mode.

"""
import itertools
import json
import logging
import threading

import numpy

from remopt.service.client.base import ExperimentAlreadyExists, RemoteException
from remopt.storage.base import BaseRemoteStore

log = logging.getLogger(__name__)


def _roundtrip(data):
    """Copy data through JSON, as it would be on its way to and from the service"""
    return json.loads(json.dumps(data))


# pylint: disable=too-many-instance-attributes
class EphemeralStore(BaseRemoteStore):
    """Non permanent remote experiment store

    Everything is lost when the object is garbage collected. Suggested jobs are
    filled in with random values drawn uniformly within the bounds of each
    parameter, after they have been polled `fill_delay` times.

    Parameters
    ----------
    fill_delay: int, optional
        Number of calls to `get_result` before a suggested job gets its values.
        Default: 0, the job is filled in at creation.
    page_size: int, optional
        Number of experiments per page of `list_experiments`. Default: 10
    seed: int, optional
        Seed of the random values of suggestions.

    """

    def __init__(self, fill_delay=0, page_size=10, seed=None):
        self.fill_delay = fill_delay
        self.page_size = page_size
        self.rng = numpy.random.RandomState(seed)

        self.experiments = {}
        self.settings = {}
        self.results = {}
        self.calls = []

        self._polls = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"{type(self).__qualname__}(fill_delay={self.fill_delay})"

    def _record_call(self, name, *args):
        self.calls.append((name,) + args)

    def _get_result_record(self, result_id):
        if result_id not in self.results:
            raise RemoteException(f"Result {result_id} not found", 404)
        return self.results[result_id]

    def create_experiment(self, name, description, settings):
        with self._lock:
            self._record_call("create_experiment", name)
            if any(exp["name"] == name for exp in self.experiments.values()):
                raise ExperimentAlreadyExists(
                    "Experiment with this User and Name already exists", 409
                )

            experiment_id = next(self._ids)
            self.experiments[experiment_id] = {
                "id": experiment_id,
                "name": name,
                "description": description,
                "task": experiment_id,
            }
            for setting in _roundtrip(settings):
                setting_id = next(self._ids)
                self.settings[setting_id] = dict(
                    setting, id=setting_id, experiment=experiment_id
                )

            log.debug("Created experiment %s with id %d", name, experiment_id)
            return experiment_id

    def list_experiments(self, page=1):
        self._record_call("list_experiments", page)
        with self._lock:
            records = sorted(self.experiments.values(), key=lambda r: r["id"])
        start = (page - 1) * self.page_size
        end = start + self.page_size
        return {
            "results": _roundtrip(records[start:end]),
            "next": page + 1 if end < len(records) else None,
        }

    def get_experiment(self, experiment_id):
        self._record_call("get_experiment", experiment_id)
        with self._lock:
            record = self.experiments.get(experiment_id)
            return _roundtrip(record) if record is not None else None

    def list_settings(self, experiment_id, page_size):
        self._record_call("list_settings", experiment_id)
        with self._lock:
            records = [
                s for s in self.settings.values() if s["experiment"] == experiment_id
            ]
            return _roundtrip(records[:page_size])

    def list_results(self, task_id, page_size):
        self._record_call("list_results", task_id)
        with self._lock:
            records = [r for r in self.results.values() if r["task"] == task_id]
            return _roundtrip(records[:page_size])

    def _experiment_settings(self, task_id):
        experiment_id = next(
            exp["id"] for exp in self.experiments.values() if exp["task"] == task_id
        )
        return [s for s in self.settings.values() if s["experiment"] == experiment_id]

    def _sample(self, setting):
        size = setting.get("size", 1)
        if setting.get("type") == "integer":
            values = self.rng.randint(
                int(setting["min"]), int(setting["max"]) + 1, size=size
            )
            values = [int(v) for v in values]
        else:
            values = [
                float(v) for v in self.rng.uniform(setting["min"], setting["max"], size)
            ]
        return values[0] if size == 1 else values

    def _fill(self, result):
        variables = []
        for setting in self._experiment_settings(result["task"]):
            value = None if setting.get("isOutput") else self._sample(setting)
            variables.append(
                {
                    "id": next(self._ids),
                    "name": setting["name"],
                    "value": value,
                    "setting": setting["id"],
                }
            )
        result["variables"] = variables

    def create_suggestion(self, task_id):
        with self._lock:
            self._record_call("create_suggestion", task_id)
            result_id = next(self._ids)
            result = {
                "id": result_id,
                "task": task_id,
                "variables": [],
                "userProposed": False,
                "description": "",
                "runDate": None,
            }
            self.results[result_id] = result
            self._polls[result_id] = 0
            if self.fill_delay <= 0:
                self._fill(result)
            return _roundtrip(result)

    def get_result(self, result_id):
        with self._lock:
            self._record_call("get_result", result_id)
            result = self._get_result_record(result_id)
            if not result["variables"]:
                self._polls[result_id] = self._polls.get(result_id, 0) + 1
                if self._polls[result_id] >= self.fill_delay:
                    self._fill(result)
            return _roundtrip(result)

    def add_result(
        self, variables, task_id, user_proposed=True, description="", run_date=None
    ):
        with self._lock:
            self._record_call("add_result", task_id)
            result_id = next(self._ids)
            variables = [
                dict(variable, id=variable.get("id") or next(self._ids))
                for variable in _roundtrip(variables)
            ]
            self.results[result_id] = {
                "id": result_id,
                "task": task_id,
                "variables": variables,
                "userProposed": user_proposed,
                "description": description,
                "runDate": run_date,
            }
            return _roundtrip(self.results[result_id])

    def replace_result(self, result):
        with self._lock:
            self._record_call("replace_result", result["id"])
            self._get_result_record(result["id"])
            self.results[result["id"]] = _roundtrip(result)
            return _roundtrip(result)

    def delete_result(self, result_id):
        with self._lock:
            self._record_call("delete_result", result_id)
            self._get_result_record(result_id)
            del self.results[result_id]
            self._polls.pop(result_id, None)

    def delete_experiment(self, experiment_id):
        with self._lock:
            self._record_call("delete_experiment", experiment_id)
            if experiment_id not in self.experiments:
                raise RemoteException(f"Experiment {experiment_id} not found", 404)

            task_id = self.experiments.pop(experiment_id)["task"]
            self.settings = {
                k: s for k, s in self.settings.items() if s["experiment"] != experiment_id
            }
            self.results = {k: r for k, r in self.results.items() if r["task"] != task_id}
