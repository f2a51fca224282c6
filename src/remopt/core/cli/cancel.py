"""
Module running the cancel command
=================================

Cancel jobs of an experiment.

"""
import logging

from remopt.core.cli import base as cli

log = logging.getLogger(__name__)

SHORT_DESCRIPTION = "Cancel jobs"

DESCRIPTION = """
Delete the job with the given parameter values from the experiment.

$ remopt cancel -n my-exp-name lr=0.1 layers=3

Or delete all jobs with no outcome reported yet.

$ remopt cancel -n my-exp-name --all-pending
"""


def add_subparser(parser):
    """Add the subparser that needs to be used for this command"""
    cancel_parser = parser.add_parser(
        "cancel", help=SHORT_DESCRIPTION, description=DESCRIPTION
    )

    cli.get_basic_args_group(cancel_parser)

    cancel_parser.add_argument(
        "params", nargs="*", metavar="name=value", help="parameter values of the job"
    )

    cancel_parser.add_argument(
        "--all-pending",
        action="store_true",
        help="cancel all the jobs with no outcome reported",
    )

    cancel_parser.set_defaults(func=main)

    return cancel_parser


def main(args):
    """Cancel the jobs and print how many were cancelled"""
    if not args.get("all_pending") and not args.get("params"):
        raise ValueError("Give the parameter values of a job or --all-pending.")

    client = cli.get_experiment_client(args)
    if args.get("all_pending"):
        cancelled = client.clear_pending()
    else:
        cancelled = client.cancel(cli.parse_params(args["params"]))

    if not cancelled:
        print("No job cancelled")
    else:
        print(f"Cancelled {len(cancelled)} job(s): {', '.join(map(str, cancelled))}")

    return 0
