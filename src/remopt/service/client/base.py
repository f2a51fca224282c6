"""Request handling shared by the REST clients"""
import logging
from typing import Any

import requests

log = logging.getLogger(__name__)


class RemoteException(Exception):
    """Raised from a request that failed on the service side"""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class ExperimentAlreadyExists(RemoteException):
    """Raised when creating an experiment whose name is already taken"""


def _error_message(response):
    try:
        payload = response.json()
    except ValueError:
        return response.text

    if isinstance(payload, dict):
        for key in ("detail", "error", "message"):
            if key in payload:
                return str(payload[key])

    return str(payload)


def raise_remote_exception(response):
    """Build the exception matching a failed response and raise it"""
    message = _error_message(response)
    status = response.status_code

    if status == 409 or "already exists" in message:
        raise ExperimentAlreadyExists(message, status)

    raise RemoteException(
        f"Remote server returned error code {status}: {message}", status
    )


# pylint: disable=too-few-public-methods
class BaseClientREST:
    """Standard handling of REST requests for the tuning service

    Parameters
    ----------
    endpoint: str
        Base URL of the service, ex: ``https://tuning.example.org``
    token: str
        Access token, sent as ``Authorization: Bearer <token>``
    api_version: str, optional
        Path prefix of the API. Default: ``api``
    user_agent: str, optional
    timeout: float, optional
        Timeout of each request in seconds.

    """

    # pylint: disable=too-many-arguments
    def __init__(
        self,
        endpoint,
        token,
        api_version="api",
        user_agent="remopt_python_client",
        timeout=30.0,
    ) -> None:
        self.endpoint = endpoint.rstrip("/")
        self.token = token
        self.api_version = api_version.strip("/")
        self.timeout = timeout

        self.session = requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "User-Agent": user_agent,
                "Accept": "application/json",
            }
        )

    def url(self, path: str) -> str:
        """Full URL of a path of the API"""
        base = self.endpoint
        if self.api_version:
            base = f"{base}/{self.api_version}"
        return f"{base}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, **kwargs) -> Any:
        """Send a request, return the decoded JSON body (None if empty).

        Raises `RemoteException` on error responses. Transport errors from
        `requests` are not caught.
        """
        kwargs.setdefault("timeout", self.timeout)
        url = self.url(path)

        log.debug("client: %s %s %s", method, url, kwargs.get("json", ""))
        response = self.session.request(method, url, **kwargs)
        log.debug("client: %s %s -> %d", method, url, response.status_code)

        if not 200 <= response.status_code < 300:
            raise_remote_exception(response)

        if response.status_code == 204 or not response.content:
            return None

        return response.json()

    def _get(self, path: str, **params) -> Any:
        return self._request("GET", path, params=params or None)

    def _post(self, path: str, **data) -> Any:
        return self._request("POST", path, json=data)

    def _put(self, path: str, **data) -> Any:
        return self._request("PUT", path, json=data)

    def _delete(self, path: str) -> Any:
        return self._request("DELETE", path)

    def close(self):
        """Close the underlying HTTP session"""
        self.session.close()
