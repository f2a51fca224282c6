"""
Custom exceptions for remopt
============================

"""


NO_ACCESS_TOKEN = """\
No access token found for the tuning service.

You must specify your access token either when building the client
(``access_token=...``), in the environment variable ``$REMOPT_ACCESS_TOKEN``,
or in your ``~/.remopt.yaml`` file:
```
api:
    token: <your token>
```
"""


class NoAccessTokenError(Exception):
    """Raise when no access token is available to talk to the remote service."""

    def __init__(self, message=NO_ACCESS_TOKEN):
        super().__init__(message)


class ExperimentNotFound(Exception):
    """Raised when no experiment with the requested name exists remotely"""


class InvalidJob(Exception):
    """Raised when a job misses a parameter required by the experiment"""


class NoCompletedJobs(Exception):
    """Raised when asking for the best job while no job has a reported outcome"""


class SuggestionTimeout(Exception):
    """Raised when the service did not fill a suggested job in time"""


class SuggestionCancelled(Exception):
    """Raised when the wait for a suggested job is cancelled by the caller"""


class SynchronizationError(Exception):
    """Raised when the state fetched from the remote store is inconsistent"""
