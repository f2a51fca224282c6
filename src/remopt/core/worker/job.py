"""
Job variables
=============

A job (a *result* on the service) carries a list of variables: one per parameter
and one for the outcome. Variables are decoded once when they come back from the
remote store, so the rest of the client never compares names to tell them apart.

"""
import enum
import numbers
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy

from remopt.core.worker.outcome import Outcome

PARAMS_ATOL = 1e-10


def to_builtin(value):
    """Convert numpy scalars and arrays, also nested in lists, to Python values"""
    if isinstance(value, numpy.generic):
        return value.item()
    if isinstance(value, numpy.ndarray):
        return value.tolist()
    if isinstance(value, (list, tuple)):
        return [to_builtin(item) for item in value]
    return value


class VariableKind(enum.Enum):
    """Discriminant of :class:`Variable`"""

    PARAM = "param"
    OUTCOME = "outcome"


@dataclass(frozen=True)
class Variable:
    """Variable of a job.

    ``value`` is the raw parameter value for ``PARAM`` variables and an
    :class:`~remopt.core.worker.outcome.Outcome` for the ``OUTCOME`` variable.
    ``setting`` and ``id`` are the remote identifiers, when known.
    """

    kind: VariableKind
    name: str
    value: Any
    setting: Optional[int] = None
    id: Optional[int] = field(default=None, compare=False)

    @classmethod
    def from_wire(cls, record, outcome_name):
        """Decode a variable record ``{id, name, value, setting}``"""
        name = record["name"]
        if name == outcome_name:
            return cls(
                VariableKind.OUTCOME,
                name,
                Outcome.from_wire(record.get("value")),
                record.get("setting"),
                record.get("id"),
            )

        return cls(
            VariableKind.PARAM,
            name,
            record.get("value"),
            record.get("setting"),
            record.get("id"),
        )

    def to_wire(self):
        """Encode the variable as a record for the remote store"""
        if self.kind is VariableKind.OUTCOME:
            value = self.value.to_wire()
        else:
            value = to_builtin(self.value)
        record = {"name": self.name, "value": value}
        if self.setting is not None:
            record["setting"] = self.setting
        if self.id is not None:
            record["id"] = self.id
        return record

    def with_value(self, value):
        """Return a copy of this variable holding another value"""
        return Variable(self.kind, self.name, value, self.setting, self.id)


def parse_variables(records, outcome_name) -> List[Variable]:
    """Decode the variable records of a job"""
    return [Variable.from_wire(record, outcome_name) for record in records or []]


def split_variables(variables) -> Tuple[Dict[str, Any], Outcome]:
    """Return the parameter values and the outcome of decoded variables.

    The outcome is unreported if no outcome variable is present.
    """
    params = {}
    outcome = Outcome.unreported()
    for variable in variables:
        if variable.kind is VariableKind.OUTCOME:
            outcome = variable.value
        else:
            params[variable.name] = variable.value

    return params, outcome


def _is_numeric(value):
    if isinstance(value, bool):
        return False
    if isinstance(value, numbers.Number):
        return True
    if isinstance(value, (list, tuple, numpy.ndarray)):
        array = numpy.asarray(value)
        return array.dtype.kind in "iuf"
    return False


def values_equal(a, b, atol=PARAMS_ATOL):
    """Compare two parameter values, numbers within an absolute tolerance"""
    if _is_numeric(a) and _is_numeric(b):
        a = numpy.asarray(a, dtype=float)
        b = numpy.asarray(b, dtype=float)
        if a.shape != b.shape:
            return False
        return bool(numpy.allclose(a, b, rtol=0, atol=atol))

    return a == b


def params_equal(a, b, atol=PARAMS_ATOL):
    """Compare two parameter-value dictionaries.

    They are equal if they have the same names and every pair of values is equal,
    numeric values being compared with an absolute tolerance of `atol` to absorb
    the noise of their round-trip through the service.

    Examples
    --------
    >>> params_equal({"lr": 0.1, "opt": "sgd"}, {"lr": 0.1 + 1e-16, "opt": "sgd"})
    True
    >>> params_equal({"lr": 0.1}, {"lr": 0.1, "momentum": 0.9})
    False

    """
    if set(a) != set(b):
        return False

    return all(values_equal(a[name], b[name], atol) for name in a)
