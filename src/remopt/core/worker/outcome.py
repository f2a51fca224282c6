"""
Outcome values
==============

An outcome is either unreported (the job is still pending), a constraint violation
(the caller reported the parameters as infeasible) or a number.

Mapping between local and wire representations:

==============  ========================  =====================  ==============
kind            wire (read)               wire (write)           float view
==============  ========================  =====================  ==============
``UNREPORTED``  ``None`` or ``""``        ``None``               ``nan``
``VIOLATION``   any other string          ``"-infinity"``        ``-inf``
``VALUE``       number                    number                 the number
==============  ========================  =====================  ==============

"""
import enum
import math
import numbers
from dataclasses import dataclass
from typing import Optional

VIOLATION_TOKEN = "-infinity"


class OutcomeKind(enum.Enum):
    """Discriminant of :class:`Outcome`"""

    UNREPORTED = "unreported"
    VIOLATION = "violation"
    VALUE = "value"


@dataclass(frozen=True)
class Outcome:
    """Outcome of a job. Use the constructors instead of building it directly."""

    kind: OutcomeKind
    value: Optional[float] = None

    @classmethod
    def unreported(cls):
        """Outcome of a job still pending"""
        return cls(OutcomeKind.UNREPORTED)

    @classmethod
    def violation(cls):
        """Outcome of a job whose parameters violate a constraint"""
        return cls(OutcomeKind.VIOLATION)

    @classmethod
    def of(cls, value):
        """Outcome reported by the caller.

        ``None`` is unreported. Any non-finite number (``inf``, ``-inf``, ``nan``)
        is a constraint violation.
        """
        if value is None:
            return cls.unreported()
        if isinstance(value, Outcome):
            return value
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise TypeError(f"Outcome must be a real number, got {value!r}")
        if not math.isfinite(value):
            return cls.violation()
        return cls(OutcomeKind.VALUE, value)

    @classmethod
    def from_wire(cls, raw):
        """Decode the value of an outcome variable as returned by the service"""
        if raw is None or raw == "":
            return cls.unreported()
        if isinstance(raw, str):
            return cls.violation()
        return cls(OutcomeKind.VALUE, raw)

    def to_wire(self):
        """Encode the outcome for the service"""
        if self.kind is OutcomeKind.VIOLATION:
            return VIOLATION_TOKEN
        if self.kind is OutcomeKind.UNREPORTED:
            return None
        return float(self.value)

    def to_float(self):
        """Return the float view: nan if unreported, -inf if violation"""
        if self.kind is OutcomeKind.UNREPORTED:
            return math.nan
        if self.kind is OutcomeKind.VIOLATION:
            return -math.inf
        return float(self.value)

    @property
    def is_reported(self):
        """True if the job is completed, including constraint violations"""
        return self.kind is not OutcomeKind.UNREPORTED

    @property
    def has_value(self):
        """True if the outcome is a real number"""
        return self.kind is OutcomeKind.VALUE
