"""
Base class and function utilities for cli
=========================================
"""
import argparse
import logging
import sys
import textwrap

import yaml

import remopt.core
from remopt.client import get_experiment
from remopt.core.io.config import ConfigurationError
from remopt.core.utils.exceptions import (
    ExperimentNotFound,
    InvalidJob,
    NoAccessTokenError,
    NoCompletedJobs,
    SuggestionCancelled,
    SuggestionTimeout,
    SynchronizationError,
)
from remopt.service.client.base import RemoteException

CLI_DOC_HEADER = "remopt CLI to drive experiments of a remote tuning service"


class RemoptArgsParser:
    """Parser object handling the upper-level parsing of remopt's arguments."""

    def __init__(self, description=CLI_DOC_HEADER):
        """Create the pre-command arguments"""
        self.description = description

        self.parser = argparse.ArgumentParser(
            prog="remopt",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=textwrap.dedent(description),
        )

        self.parser.add_argument(
            "-V",
            "--version",
            action="version",
            version="remopt " + remopt.core.__version__,
        )

        self.parser.add_argument(
            "-v",
            "--verbose",
            action="count",
            default=0,
            help="logging levels of information about the process (-v: INFO. -vv: DEBUG)",
        )

        self.parser.add_argument(
            "-c",
            "--config",
            metavar="path-to-config",
            help="user provided remopt configuration file",
        )

        self.parser.add_argument(
            "--url", type=str, help="base URL of the tuning service"
        )

        self.parser.add_argument(
            "--token", type=str, help="access token of your account on the service"
        )

        self.parser.add_argument(
            "-d",
            "--debug",
            action="store_true",
            help="Use debugging mode with an in-memory experiment store.",
        )

        self.subparsers = self.parser.add_subparsers(dest="command")

    def get_subparsers(self):
        """Return the subparser object for this parser."""
        return self.subparsers

    def parse(self, argv):
        """Call argparse and generate a dictionary of arguments' value"""
        args = vars(self.parser.parse_args(argv))

        verbose = args.pop("verbose", 0)
        levels = {0: logging.WARNING, 1: logging.INFO, 2: logging.DEBUG}
        logging.basicConfig(
            format="%(asctime)-15s::%(levelname)s::%(name)s::%(message)s",
            level=levels.get(verbose, logging.DEBUG),
        )
        args["verbose"] = verbose

        if args["command"] is None:
            self.parser.parse_args(["--help"])

        function = args.pop("func", None)
        if function is None:
            self.parser.parse_args([args["command"], "--help"])

        config_path = args.pop("config", None)
        if config_path:
            remopt.core.config.load_yaml(config_path)

        return args, function

    def execute(self, argv):
        """Execute main function of the subparser"""
        args = {}
        try:
            args, function = self.parse(argv)
            returncode = function(args)
        except (
            ConfigurationError,
            ExperimentNotFound,
            InvalidJob,
            NoAccessTokenError,
            NoCompletedJobs,
            RemoteException,
            SuggestionCancelled,
            SuggestionTimeout,
            SynchronizationError,
            ValueError,
        ) as e:
            print("Error:", e, file=sys.stderr)

            if args.get("verbose", 0) >= 2:
                raise e

            return 1

        except KeyboardInterrupt:
            print("remopt is interrupted.")
            return 130

        return 0 if returncode is None else returncode


def get_basic_args_group(
    parser,
    group_name="remopt arguments",
    group_help="These arguments determine which experiment is used",
):
    """Return the basic arguments for any command."""
    basic_args_group = parser.add_argument_group(group_name, description=group_help)

    basic_args_group.add_argument(
        "-n",
        "--name",
        type=str,
        required=True,
        metavar="stringID",
        help="experiment's unique name",
    )

    return basic_args_group


def get_experiment_client(args):
    """Resume the experiment named in the arguments"""
    return get_experiment(
        args["name"],
        access_token=args.get("token"),
        url=args.get("url"),
        debug=args.get("debug") or None,
    )


def parse_params(pairs):
    """Convert ``name=value`` strings into a dictionary of parameter values.

    Values are parsed as YAML, so ``lr=0.1`` gives a float, ``layers=3`` an integer
    and ``sizes=[1,2]`` a list.

    Raises
    ------
    ValueError
        If a pair has no ``=``.

    """
    params = {}
    for pair in pairs:
        name, sep, raw = pair.partition("=")
        if not sep or not name:
            raise ValueError(f"Invalid parameter '{pair}', expected name=value.")

        value = yaml.safe_load(raw)
        if isinstance(value, str):
            # YAML 1.1 reads 1e-05 as a string
            try:
                value = float(value)
            except ValueError:
                pass
        params[name.strip()] = value

    return params
