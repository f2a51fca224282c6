"""
Functions that define console scripts
=====================================

Entry point of the ``remopt`` command.

"""
import logging

from remopt.core.cli import best, cancel, delete, init, pending, results, suggest, update
from remopt.core.cli.base import RemoptArgsParser

log = logging.getLogger(__name__)

COMMANDS = (init, suggest, update, cancel, pending, best, results, delete)


def load_modules_parser(remopt_parser):
    """Register the subparser of every command"""
    for module in COMMANDS:
        module.add_subparser(remopt_parser.get_subparsers())


def main(argv=None):
    """Entry point for `remopt.core` functionality."""
    remopt_parser = RemoptArgsParser()

    load_modules_parser(remopt_parser)

    return remopt_parser.execute(argv)


if __name__ == "__main__":
    returncode = main()
    if returncode > 0:
        raise SystemExit(returncode)
