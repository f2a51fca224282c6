"""
Module running the delete command
=================================

Delete an experiment and all its jobs from the tuning service.

"""
import logging

from remopt.core.cli import base as cli
from remopt.core.utils.terminal import confirm_name

log = logging.getLogger(__name__)

SHORT_DESCRIPTION = "Delete an experiment"

DESCRIPTION = """
Delete the experiment and all its jobs. This cannot be undone.

$ remopt delete -n my-exp-name
"""

DELETE_MESSAGE = """
Experiment {name} and all its jobs will be deleted from the tuning service.

Make sure to stop any worker currently using this experiment.

To proceed, type again the name of the experiment: """


def add_subparser(parser):
    """Add the subparser that needs to be used for this command"""
    delete_parser = parser.add_parser(
        "delete", help=SHORT_DESCRIPTION, description=DESCRIPTION
    )

    cli.get_basic_args_group(delete_parser)

    delete_parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Force deletion without asking to enter experiment name twice.",
    )

    delete_parser.set_defaults(func=main)

    return delete_parser


def main(args):
    """Delete the experiment after confirmation"""
    client = cli.get_experiment_client(args)

    if not confirm_name(
        DELETE_MESSAGE.format(name=client.name), client.name, args.get("force", False)
    ):
        print("Confirmation failed, aborting operation.")
        return 1

    client.delete()
    print(f"Experiment {client.name} deleted")
    return 0
