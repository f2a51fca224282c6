"""
Experiment builder
==================

Validate the description of an experiment and convert it into the settings
expected by the tuning service.

Parameters are described with a mapping of properties:

* ``'type'``: ``'float'`` or ``'integer'`` (default: ``'float'``)
* ``'min'``: minimum value of the parameter (required)
* ``'max'``: maximum value of the parameter (required)
* ``'size'``: size of the parameter, for vectors (default: ``1``)
* ``'units'``: units in which the parameter is measured (default: ``'Reals'``)
* ``'scale'``: scale used to explore the parameter values (default: ``'linear'``)

The outcome only needs a ``'name'``, and optionally a ``'type'``.

All errors are raised as `ValueError` before anything is sent to the service.

"""
import logging
import math
import numbers
from dataclasses import dataclass

log = logging.getLogger(__name__)

SUPPORTED_PROPERTIES = ("name", "type", "min", "max", "size", "scale", "units", "isOutput")
REQUIRED_PROPERTIES = ("min", "max")
SUPPORTED_TYPES = ("float", "integer")
DEFAULT_VALUES = {"type": "float", "size": 1, "scale": "linear", "units": "Reals"}

# Range the service uses to represent the outcome
OUTCOME_MIN = -100
OUTCOME_MAX = 100


@dataclass(frozen=True)
class ParameterSpec:
    """Parameter to tune"""

    name: str
    min: float
    max: float
    type: str = DEFAULT_VALUES["type"]
    size: int = DEFAULT_VALUES["size"]
    scale: str = DEFAULT_VALUES["scale"]
    units: str = DEFAULT_VALUES["units"]

    def to_setting(self):
        """Setting record of the parameter for the service"""
        return {
            "name": self.name,
            "type": self.type,
            "min": self.min,
            "max": self.max,
            "size": self.size,
            "scale": self.scale,
            "units": self.units,
            "isOutput": False,
        }

    @classmethod
    def from_setting(cls, setting):
        """Build back a parameter from a setting record of the service"""
        return cls(
            name=setting["name"],
            min=setting.get("min"),
            max=setting.get("max"),
            type=setting.get("type", DEFAULT_VALUES["type"]),
            size=setting.get("size", DEFAULT_VALUES["size"]),
            scale=setting.get("scale", DEFAULT_VALUES["scale"]),
            units=setting.get("units", DEFAULT_VALUES["units"]),
        )


@dataclass(frozen=True)
class OutcomeSpec:
    """Outcome to maximize"""

    name: str
    type: str = DEFAULT_VALUES["type"]
    scale: str = DEFAULT_VALUES["scale"]
    units: str = DEFAULT_VALUES["units"]

    def to_setting(self):
        """Setting record of the outcome for the service"""
        return {
            "name": self.name,
            "type": self.type,
            "min": OUTCOME_MIN,
            "max": OUTCOME_MAX,
            "size": 1,
            "scale": self.scale,
            "units": self.units,
            "isOutput": True,
        }


def check_experiment(name, description):
    """Verify the name and description of an experiment"""
    if not isinstance(name, str) or not name:
        raise ValueError("Name of experiment must be a non-empty string.")

    if not isinstance(description, str):
        raise ValueError("Description of experiment must be a string.")


def _is_number(value):
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def build_parameter(name, properties):
    """Validate the properties of a parameter and fill in the defaults"""
    if not isinstance(name, str) or not name:
        raise ValueError("You must specify a name for each parameter.")

    if properties.get("type") == "enum":
        raise ValueError("Enum types are not supported yet.  Please use integers instead.")

    for key in properties:
        if key not in SUPPORTED_PROPERTIES:
            raise ValueError(f"Parameter {name}: property {key} is not supported.")

    for key in REQUIRED_PROPERTIES:
        if key not in properties:
            raise ValueError(f"Parameter {name}: property {key} must be defined.")

    if properties.get("isOutput"):
        raise ValueError(
            f"Parameter {name}: outputs must be declared with the outcome, not as parameters."
        )

    values = dict(DEFAULT_VALUES)
    values.update(
        (key, value)
        for key, value in properties.items()
        if key not in ("name", "isOutput")
    )

    if values["type"] not in SUPPORTED_TYPES:
        raise ValueError(
            f"Parameter {name}: Type {values['type']} not a valid choice, "
            f"use one of {', '.join(SUPPORTED_TYPES)}."
        )

    low, high = values["min"], values["max"]
    if not _is_number(low) or not _is_number(high):
        raise ValueError(f"Parameter {name}: min and max should be numbers.")

    if not math.isfinite(low) or not math.isfinite(high):
        raise ValueError(f"Parameter {name}: min and max should be finite.")

    if low >= high:
        raise ValueError(f"Parameter {name}: min should be smaller than max.")

    size = values["size"]
    if not isinstance(size, numbers.Integral) or isinstance(size, bool) or size < 1:
        raise ValueError(f"Parameter {name}: size should be a positive integer.")

    return ParameterSpec(name=name, **values)


def build_parameters(parameters):
    """Build the list of `ParameterSpec` of an experiment.

    Parameters
    ----------
    parameters: dict or list of dict
        Either a mapping of parameter names to their properties, or a list of
        properties each containing a ``'name'``.

    """
    if isinstance(parameters, dict):
        items = list(parameters.items())
    elif isinstance(parameters, (list, tuple)):
        items = []
        for properties in parameters:
            if not isinstance(properties, dict):
                raise ValueError("Parameters of experiment must be dictionaries.")
            items.append((properties.get("name"), properties))
    else:
        raise ValueError(
            "Parameters of experiment must be a dictionary or a list of dictionaries."
        )

    specs = []
    names = set()
    for name, properties in items:
        spec = build_parameter(name, properties)
        if spec.name in names:
            raise ValueError(f"Parameter {spec.name} is defined more than once.")
        names.add(spec.name)
        specs.append(spec)

    return specs


def build_outcome(outcome):
    """Validate the description of the outcome"""
    if not isinstance(outcome, dict):
        raise ValueError("Outcome of experiment must be a non-empty dictionary.")

    if "name" not in outcome:
        raise ValueError("Argument outcome should have a field called: name.")

    name = outcome["name"]
    if not isinstance(name, str) or not name:
        raise ValueError("Name of the outcome must be a non-empty string.")

    for key in outcome:
        if key not in ("name", "type", "scale", "units"):
            raise ValueError(f"Outcome {name}: property {key} is not supported.")

    return OutcomeSpec(
        name=name,
        type=outcome.get("type", DEFAULT_VALUES["type"]),
        scale=outcome.get("scale", DEFAULT_VALUES["scale"]),
        units=outcome.get("units", DEFAULT_VALUES["units"]),
    )


def build_settings(parameters, outcome):
    """Validate parameters and outcome, return the settings to create the experiment"""
    specs = build_parameters(parameters)
    outcome_spec = build_outcome(outcome)

    if any(spec.name == outcome_spec.name for spec in specs):
        raise ValueError(
            f"Outcome {outcome_spec.name} has the same name as one of the parameters."
        )

    settings = [spec.to_setting() for spec in specs]
    settings.append(outcome_spec.to_setting())
    log.debug("Built %d settings", len(settings))
    return settings
