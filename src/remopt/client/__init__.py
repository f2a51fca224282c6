"""
Python API
==========

Create, resume and delete experiments of the tuning service.

"""
import logging

import remopt.core
from remopt.client.experiment import ExperimentClient
from remopt.core.io.experiment_builder import build_settings, check_experiment
from remopt.core.utils.exceptions import ExperimentNotFound, NoAccessTokenError
from remopt.core.worker.job_manager import JobManager
from remopt.core.worker.synchronizer import UNRESOLVED, Synchronizer
from remopt.service.client.base import ExperimentAlreadyExists
from remopt.service.client.store import RESTStore

__all__ = [
    "ExperimentClient",
    "build_store",
    "create_experiment",
    "get_experiment",
    "delete_experiment",
]

log = logging.getLogger(__name__)

_DEBUG_STORE = None


def _debug_store():
    # pylint: disable=global-statement
    global _DEBUG_STORE
    if _DEBUG_STORE is None:
        from remopt.testing import EphemeralStore

        log.info("Debug mode: experiments are kept in memory")
        _DEBUG_STORE = EphemeralStore()
    return _DEBUG_STORE


def build_store(store=None, url=None, access_token=None, debug=None):
    """Return the remote experiment store to use.

    Parameters
    ----------
    store: `remopt.storage.base.BaseRemoteStore`, optional
        Returned as is if given.
    url: str, optional
        Base URL of the service. Defaults to ``remopt.core.config.api.url``.
    access_token: str, optional
        Defaults to ``remopt.core.config.api.token``.
    debug: bool, optional
        Use an in-memory store shared within the process.
        Defaults to ``remopt.core.config.debug``.

    Raises
    ------
    NoAccessTokenError
        If no access token is given nor configured.

    """
    if store is not None:
        return store

    config = remopt.core.config
    if debug is None:
        debug = config.debug
    if debug:
        return _debug_store()

    access_token = access_token or config.api.token
    if not access_token:
        raise NoAccessTokenError()

    return RESTStore(
        url or config.api.url,
        access_token,
        api_version=config.api.version,
        user_agent=config.api.user_agent,
        timeout=config.api.timeout,
    )


def _build_client(store, name, description, experiment_id=UNRESOLVED, **poll_config):
    synchronizer = Synchronizer(
        store, name, experiment_id=experiment_id, description=description
    )
    return ExperimentClient(synchronizer, JobManager(synchronizer, **poll_config))


# pylint: disable=too-many-arguments
def create_experiment(
    name,
    description="",
    parameters=None,
    outcome=None,
    resume=True,
    force_resume=True,
    access_token=None,
    url=None,
    store=None,
    debug=None,
    **poll_config,
):
    """Create an experiment, or resume it if it already exists.

    Parameters
    ----------
    name: str
        Name of the experiment. Must be unique for your account.
    description: str, optional
        Description of the experiment.
    parameters: dict or list of dict
        Parameters to tune, see :mod:`remopt.core.io.experiment_builder`.
        Ex: ``{"lr": {"min": 1e-4, "max": 1.0}, "layers": {"type": "integer",
        "min": 1, "max": 8}}``
    outcome: dict
        Outcome to maximize. Ex: ``{"name": "accuracy"}``
    resume: bool, optional
        Resume the experiment with the same name if it exists. `parameters` and
        `outcome` are then ignored. Default: True
    force_resume: bool, optional
        With `resume`, create the experiment if it does not exist. Default: True
    access_token, url, store, debug:
        See :func:`build_store`.
    poll_config:
        ``poll_interval``, ``poll_backoff``, ``poll_max_interval`` or
        ``poll_timeout``, see :class:`remopt.core.worker.job_manager.JobManager`.

    Raises
    ------
    ValueError
        If the name, description, parameters or outcome are invalid.
    ExperimentNotFound
        If resuming an experiment which does not exist and `force_resume` is False
        or no `parameters` and `outcome` were given to create it.
    `remopt.service.client.base.ExperimentAlreadyExists`
        If the experiment exists and `resume` is False.

    """
    check_experiment(name, description)

    settings = None
    if not resume or parameters is not None or outcome is not None:
        settings = build_settings(parameters, outcome)

    store = build_store(store, url, access_token, debug)

    if resume:
        client = _build_client(store, name, description, **poll_config)
        try:
            client.sync()
            log.info("Resuming experiment: %s", name)
            return client
        except ExperimentNotFound:
            if not force_resume or settings is None:
                raise

    try:
        experiment_id = store.create_experiment(name, description, settings)
    except ExperimentAlreadyExists:
        if not resume:
            raise
        # Another client created it since our lookup
        log.info("Experiment %s was created concurrently, resuming it", name)
        client = _build_client(store, name, description, **poll_config)
        client.sync()
        return client

    log.info("Created experiment %s with id %s", name, experiment_id)
    client = _build_client(store, name, description, experiment_id, **poll_config)
    client.sync()
    return client


def get_experiment(
    name, access_token=None, url=None, store=None, debug=None, **poll_config
):
    """Resume an existing experiment.

    See :func:`create_experiment` for the arguments.

    Raises
    ------
    ExperimentNotFound
        If there is no experiment with this name.

    """
    return create_experiment(
        name,
        resume=True,
        force_resume=False,
        access_token=access_token,
        url=url,
        store=store,
        debug=debug,
        **poll_config,
    )


def delete_experiment(name, access_token=None, url=None, store=None, debug=None):
    """Delete the experiment with the given name.

    .. warning:: This cancels the experiment and removes all its results.

    Raises
    ------
    ExperimentNotFound
        If there is no experiment with this name.

    """
    client = get_experiment(name, access_token, url, store, debug)
    client.delete()
