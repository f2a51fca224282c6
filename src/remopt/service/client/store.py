"""Remote experiment store over the service's REST API"""
import logging
from datetime import datetime, timezone

from remopt.service.client.base import BaseClientREST, RemoteException
from remopt.storage.base import BaseRemoteStore

log = logging.getLogger(__name__)


def _results(payload):
    """Extract the records of a list response, paginated or not"""
    if payload is None:
        return []
    if isinstance(payload, list):
        return payload
    return payload.get("results", [])


class RESTStore(BaseClientREST, BaseRemoteStore):
    """Implements :class:`~remopt.storage.base.BaseRemoteStore` over HTTP"""

    def create_experiment(self, name, description, settings):
        payload = self._post(
            "experiments/", name=name, description=description, settings=settings
        )
        log.debug("Created experiment %s with id %s", name, payload["id"])
        return payload["id"]

    def list_experiments(self, page=1):
        payload = self._get("experiments/", page=page)
        next_page = payload.get("next") if isinstance(payload, dict) else None
        return {"results": _results(payload), "next": next_page}

    def get_experiment(self, experiment_id):
        records = _results(self._get("experiments/", id=experiment_id))
        for record in records:
            if record.get("id") == experiment_id:
                return record
        return None

    def list_settings(self, experiment_id, page_size):
        return _results(
            self._get("settings/", experiment=experiment_id, page_size=page_size)
        )

    def list_results(self, task_id, page_size):
        return _results(self._get("results/", task=task_id, page_size=page_size))

    def create_suggestion(self, task_id):
        return self._post(f"tasks/{task_id}/suggest/")

    def get_result(self, result_id):
        return self._get(f"results/{result_id}/")

    # pylint: disable=too-many-arguments
    def add_result(
        self, variables, task_id, user_proposed=True, description="", run_date=None
    ):
        if run_date is None:
            run_date = datetime.now(timezone.utc).isoformat()

        result = self._post(
            "results/",
            variables=variables,
            task=task_id,
            userProposed=user_proposed,
            description=description,
            runDate=run_date,
        )
        if result is None or "id" not in result:
            raise RemoteException(f"Service did not return the new result: {result}")
        return result

    def replace_result(self, result):
        fields = {
            key: result.get(key)
            for key in ("variables", "task", "userProposed", "description", "runDate")
        }
        return self._put(f"results/{result['id']}/", id=result["id"], **fields)

    def delete_result(self, result_id):
        self._delete(f"results/{result_id}/")

    def delete_experiment(self, experiment_id):
        self._delete(f"experiments/{experiment_id}/")
