"""
Module running the results command
==================================

List all the jobs of an experiment with their outcome.

"""
import logging

import tabulate

from remopt.core.cli import base as cli

log = logging.getLogger(__name__)

SHORT_DESCRIPTION = "List the jobs and their outcome"

DESCRIPTION = """
Print every job of the experiment with its outcome: nan if it is not reported yet,
-inf if the job violates a constraint.

$ remopt results -n my-exp-name
"""


def add_subparser(parser):
    """Add the subparser that needs to be used for this command"""
    results_parser = parser.add_parser(
        "results", help=SHORT_DESCRIPTION, description=DESCRIPTION
    )

    cli.get_basic_args_group(results_parser)

    results_parser.set_defaults(func=main)

    return results_parser


def main(args):
    """Print the jobs and their outcome"""
    client = cli.get_experiment_client(args)
    jobs, outcomes = client.get_all_results()

    if not jobs:
        print("No job found")
        return

    names = sorted(client.parameters)
    headers = names + [client.outcome_name]
    lines = [
        [job.get(name) for name in names] + [outcome]
        for job, outcome in zip(jobs, outcomes)
    ]
    print(tabulate.tabulate(lines, headers=headers))
