"""
Module running the best command
===============================

Print the parameter values of the job with the highest outcome.

"""
import logging

from remopt.core.cli import base as cli
from remopt.core.cli.suggest import format_params

log = logging.getLogger(__name__)

SHORT_DESCRIPTION = "Get the best parameter values found so far"

DESCRIPTION = """
Print the parameter values of the job with the highest outcome reported, one
name=value pair per line.

$ remopt best -n my-exp-name
"""


def add_subparser(parser):
    """Add the subparser that needs to be used for this command"""
    best_parser = parser.add_parser(
        "best", help=SHORT_DESCRIPTION, description=DESCRIPTION
    )

    cli.get_basic_args_group(best_parser)

    best_parser.set_defaults(func=main)

    return best_parser


def main(args):
    """Print the best job"""
    client = cli.get_experiment_client(args)
    print(format_params(client.best()))
