"""
Module running the init command
===============================

Create an experiment on the tuning service from a YAML description file.

"""
import logging

import yaml

from remopt.client import create_experiment
from remopt.core.cli import base as cli

log = logging.getLogger(__name__)

SHORT_DESCRIPTION = "Create an experiment from a YAML file"

DESCRIPTION = """
Create an experiment on the tuning service. The experiment is described in a YAML
file with the parameters to tune and the outcome to maximize:

    description: Tune SGD
    parameters:
        lr:
            min: 0.0001
            max: 1.0
        layers:
            type: integer
            min: 1
            max: 8
    outcome:
        name: accuracy

$ remopt init -n my-exp-name experiment.yaml

If an experiment with the same name exists, it is resumed unless --no-resume is given.
"""


def add_subparser(parser):
    """Add the subparser that needs to be used for this command"""
    init_parser = parser.add_parser(
        "init", help=SHORT_DESCRIPTION, description=DESCRIPTION
    )

    cli.get_basic_args_group(init_parser)

    init_parser.add_argument(
        "file", metavar="path-to-experiment", help="YAML description of the experiment"
    )

    init_parser.add_argument(
        "--no-resume",
        action="store_true",
        help="Fail if an experiment with the same name already exists",
    )

    init_parser.set_defaults(func=main)

    return init_parser


def load_description(path):
    """Read the YAML description of an experiment"""
    with open(path, encoding="utf8") as f:
        description = yaml.safe_load(f) or {}

    if not isinstance(description, dict):
        raise ValueError(f"Experiment file {path} must contain a mapping.")

    return description


def main(args):
    """Create or resume the experiment and print its identifier"""
    description = load_description(args["file"])

    client = create_experiment(
        args["name"],
        description=description.get("description", ""),
        parameters=description.get("parameters"),
        outcome=description.get("outcome"),
        resume=not args.get("no_resume", False),
        access_token=args.get("token"),
        url=args.get("url"),
        debug=args.get("debug") or None,
    )

    print(f"Experiment {client.name} ready with id {client.id}")
