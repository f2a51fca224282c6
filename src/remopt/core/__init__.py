"""
remopt core
===========

Global configuration of the remopt client.

The configuration is built once at import time from the global and user YAML
configuration files, then from the dotfile ``~/.remopt.yaml``. Environment
variables and values set explicitly on :data:`config` take precedence.

Example of dotfile::

    api:
        url: https://tuning.example.org
        token: 0123456789abcdef
    client:
        poll_timeout: 120

"""
import logging
import os

from appdirs import AppDirs

from remopt.core.io.config import Configuration

logger = logging.getLogger(__name__)


__descr__ = "Client for remote hyperparameter tuning services"
__version__ = "0.1.0"
__license__ = "BSD-3-Clause"
__author__ = "remopt developers"
__author_short__ = "remopt"

DIRS = AppDirs(__name__.split(".", maxsplit=1)[0], __author_short__)
del AppDirs

DOTFILE_PATH = os.path.join("~", ".remopt.yaml")

DEF_CONFIG_FILES_PATHS = [
    os.path.join(DIRS.site_config_dir, "remopt_config.yaml"),
    os.path.join(DIRS.user_config_dir, "remopt_config.yaml"),
    DOTFILE_PATH,
]


def _to_bool(value):
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def define_config():
    """Create and define the fields of the configuration object."""
    config = Configuration()
    define_api_config(config)
    define_client_config(config)

    config.add_option(
        "debug",
        option_type=_to_bool,
        default=False,
        env_var="REMOPT_DEBUG",
        help="Use an in-memory experiment store instead of the remote service.",
    )

    return config


def define_api_config(config):
    """Create and define the fields of the remote service configuration."""
    api_config = Configuration()

    api_config.add_option(
        "url",
        option_type=str,
        default="http://127.0.0.1:8000",
        env_var="REMOPT_API_URL",
        help="Base URL of the tuning service.",
    )
    api_config.add_option(
        "version",
        option_type=str,
        default="api",
        env_var="REMOPT_API_VERSION",
        help="Path prefix of the REST API on the tuning service.",
    )
    api_config.add_option(
        "token",
        option_type=str,
        default="",
        env_var="REMOPT_ACCESS_TOKEN",
        help="Access token of your account, sent as a bearer token.",
    )
    api_config.add_option(
        "user_agent",
        option_type=str,
        default="remopt_python_client",
        help="User agent sent with every request.",
    )
    api_config.add_option(
        "timeout",
        option_type=float,
        default=30.0,
        env_var="REMOPT_API_TIMEOUT",
        help="Timeout in seconds of a single HTTP request.",
    )

    config.api = api_config


def define_client_config(config):
    """Create and define the fields of the experiment client configuration."""
    client_config = Configuration()

    client_config.add_option(
        "page_size",
        option_type=int,
        default=1000000,
        help=(
            "Page size used to fetch settings and results in a single request. "
            "Should be larger than any experiment."
        ),
    )
    client_config.add_option(
        "poll_interval",
        option_type=float,
        default=2.0,
        env_var="REMOPT_POLL_INTERVAL",
        help="Initial wait in seconds between two polls of a suggested job.",
    )
    client_config.add_option(
        "poll_backoff",
        option_type=float,
        default=1.5,
        help="Multiplicative factor applied to the wait after each unfilled poll.",
    )
    client_config.add_option(
        "poll_max_interval",
        option_type=float,
        default=30.0,
        help="Upper bound in seconds of the wait between two polls.",
    )
    client_config.add_option(
        "poll_timeout",
        option_type=float,
        default=600.0,
        env_var="REMOPT_POLL_TIMEOUT",
        help=(
            "Maximum time in seconds to wait for the service to fill a suggested job. "
            "A value <= 0 waits forever."
        ),
    )

    config.client = client_config


def build_config():
    """Define the config and fill it based on global configuration files."""
    config = define_config()
    for file_path in DEF_CONFIG_FILES_PATHS:
        if not os.path.exists(os.path.expanduser(file_path)):
            logger.debug("Config file not found: %s", file_path)
            continue

        config.load_yaml(file_path)

    return config


config = build_config()
