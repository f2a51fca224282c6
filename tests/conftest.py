#!/usr/bin/env python
"""Common fixtures and utils for unittests and functional tests."""
import pytest

import remopt.client
import remopt.core
from remopt.client import create_experiment
from remopt.testing import EphemeralStore

PARAMETERS = {
    "lr": {"min": 1e-4, "max": 1.0},
    "layers": {"type": "integer", "min": 1, "max": 8},
}
OUTCOME = {"name": "accuracy"}


@pytest.fixture(scope="session", autouse=True)
def shield_from_user_config(request):
    """Do not read user's yaml global config."""
    _pop_out_yaml_from_config(remopt.core.config)


def _pop_out_yaml_from_config(config):
    """Remove any configuration fetch from yaml file"""
    for key in config._config.keys():
        config._config[key].pop("yaml", None)

    for key in config._subconfigs.keys():
        _pop_out_yaml_from_config(config._subconfigs[key])


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Do not let the user's environment variables leak in the tests"""
    for env_var in (
        "REMOPT_API_URL",
        "REMOPT_API_VERSION",
        "REMOPT_ACCESS_TOKEN",
        "REMOPT_API_TIMEOUT",
        "REMOPT_POLL_INTERVAL",
        "REMOPT_POLL_TIMEOUT",
        "REMOPT_DEBUG",
    ):
        monkeypatch.delenv(env_var, raising=False)


@pytest.fixture(autouse=True)
def fresh_debug_store(monkeypatch):
    """Give each test its own in-memory store for the debug mode"""
    monkeypatch.setattr(remopt.client, "_DEBUG_STORE", None)


@pytest.fixture
def parameters():
    """Parameters of the test experiment"""
    return {name: dict(properties) for name, properties in PARAMETERS.items()}


@pytest.fixture
def outcome():
    """Outcome of the test experiment"""
    return dict(OUTCOME)


@pytest.fixture
def store():
    """In-memory store filling suggestions at once"""
    return EphemeralStore(seed=1)


@pytest.fixture
def client(store, parameters, outcome):
    """Client of a new experiment on the in-memory store, never sleeping"""
    return create_experiment(
        "test-exp",
        description="test experiment",
        parameters=parameters,
        outcome=outcome,
        store=store,
        poll_interval=0,
    )
