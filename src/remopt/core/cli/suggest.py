"""
Module running the suggest command
==================================

Ask the tuning service for a new job and print its parameter values.

"""
import json
import logging

from remopt.core.cli import base as cli

log = logging.getLogger(__name__)

SHORT_DESCRIPTION = "Get parameter values to try next"

DESCRIPTION = """
Ask the tuning service for a new job of the experiment and print its parameter values,
one name=value pair per line. The pairs can be given back as is to `remopt update`.

$ remopt suggest -n my-exp-name
"""


def add_subparser(parser):
    """Add the subparser that needs to be used for this command"""
    suggest_parser = parser.add_parser(
        "suggest", help=SHORT_DESCRIPTION, description=DESCRIPTION
    )

    cli.get_basic_args_group(suggest_parser)

    suggest_parser.add_argument(
        "--timeout",
        type=float,
        help="maximum time in seconds to wait for the job (default: from config)",
    )

    suggest_parser.set_defaults(func=main)

    return suggest_parser


def format_params(params):
    """Format parameter values as ``name=value`` lines"""
    return "\n".join(f"{name}={json.dumps(value)}" for name, value in params.items())


def main(args):
    """Suggest a job and print it"""
    client = cli.get_experiment_client(args)
    params = client.suggest(timeout=args.get("timeout"))
    print(format_params(params))
