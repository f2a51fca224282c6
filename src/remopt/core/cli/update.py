"""
Module running the update command
=================================

Report the outcome of a job.

"""
import logging
import math

from remopt.core.cli import base as cli

log = logging.getLogger(__name__)

SHORT_DESCRIPTION = "Report the outcome of a job"

DESCRIPTION = """
Report the outcome of the job with the given parameter values. If no such job exists,
it is added to the experiment.

$ remopt update -n my-exp-name lr=0.1 layers=3 --outcome 0.92

Use --violation if the parameter values turned out to be infeasible.
"""


def add_subparser(parser):
    """Add the subparser that needs to be used for this command"""
    update_parser = parser.add_parser(
        "update", help=SHORT_DESCRIPTION, description=DESCRIPTION
    )

    cli.get_basic_args_group(update_parser)

    update_parser.add_argument(
        "params", nargs="+", metavar="name=value", help="parameter values of the job"
    )

    outcome_group = update_parser.add_mutually_exclusive_group(required=True)
    outcome_group.add_argument(
        "-o", "--outcome", type=float, help="outcome of the job, to maximize"
    )
    outcome_group.add_argument(
        "--violation",
        action="store_true",
        help="report the parameter values as violating a constraint",
    )

    update_parser.set_defaults(func=main)

    return update_parser


def main(args):
    """Update the job and print its identifier"""
    params = cli.parse_params(args["params"])
    outcome = -math.inf if args.get("violation") else args["outcome"]

    client = cli.get_experiment_client(args)
    result_id = client.update(params, outcome)
    print(f"Updated job {result_id}")
