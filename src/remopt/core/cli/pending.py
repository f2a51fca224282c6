"""
Module running the pending command
==================================

List the jobs with no outcome reported yet.

"""
import logging

import tabulate

from remopt.core.cli import base as cli

log = logging.getLogger(__name__)

SHORT_DESCRIPTION = "List the jobs with no outcome"

DESCRIPTION = """
Print the parameter values of every job of the experiment which has no outcome
reported yet.

$ remopt pending -n my-exp-name
"""


def add_subparser(parser):
    """Add the subparser that needs to be used for this command"""
    pending_parser = parser.add_parser(
        "pending", help=SHORT_DESCRIPTION, description=DESCRIPTION
    )

    cli.get_basic_args_group(pending_parser)

    pending_parser.set_defaults(func=main)

    return pending_parser


def main(args):
    """Print the pending jobs"""
    client = cli.get_experiment_client(args)
    jobs = client.pending()

    if not jobs:
        print("No pending job")
        return

    headers = sorted(client.parameters)
    lines = [[job.get(name) for name in headers] for job in jobs]
    print(tabulate.tabulate(lines, headers=headers))
