#!/usr/bin/env python
"""Example usage and tests for :mod:`remopt.core.worker.outcome`."""
import math

import numpy
import pytest

from remopt.core.worker.outcome import VIOLATION_TOKEN, Outcome, OutcomeKind


@pytest.mark.parametrize("value", [math.inf, -math.inf, math.nan, numpy.inf])
def test_non_finite_is_violation(value):
    """Test that any non-finite number is a constraint violation"""
    outcome = Outcome.of(value)

    assert outcome.kind is OutcomeKind.VIOLATION
    assert outcome.to_wire() == VIOLATION_TOKEN
    assert outcome.to_float() == -math.inf


def test_none_is_unreported():
    """Test that None means no outcome reported"""
    outcome = Outcome.of(None)

    assert not outcome.is_reported
    assert outcome.to_wire() is None
    assert math.isnan(outcome.to_float())


def test_value():
    """Test a regular outcome"""
    outcome = Outcome.of(0.5)

    assert outcome.has_value
    assert outcome.is_reported
    assert outcome.to_wire() == 0.5
    assert outcome.to_float() == 0.5


def test_numpy_value():
    """Test that numpy scalars are accepted"""
    assert Outcome.of(numpy.float64(1.5)).to_float() == 1.5


def test_numpy_value_to_wire():
    """Test that numpy outcomes are sent as Python floats"""
    wire = Outcome.of(numpy.float32(0.5)).to_wire()

    assert type(wire) is float
    assert wire == 0.5


@pytest.mark.parametrize("value", ["0.5", True, [1.0]])
def test_invalid_value(value):
    """Test that only real numbers are accepted"""
    with pytest.raises(TypeError):
        Outcome.of(value)


@pytest.mark.parametrize(
    "raw,kind",
    [
        (None, OutcomeKind.UNREPORTED),
        ("", OutcomeKind.UNREPORTED),
        ("-infinity", OutcomeKind.VIOLATION),
        ("garbage", OutcomeKind.VIOLATION),
        (12, OutcomeKind.VALUE),
        (-3.5, OutcomeKind.VALUE),
    ],
)
def test_from_wire(raw, kind):
    """Test decoding of the outcome values returned by the service"""
    assert Outcome.from_wire(raw).kind is kind


def test_violation_is_reported_without_value():
    """Test that a violation completes a job but has no value"""
    outcome = Outcome.violation()

    assert outcome.is_reported
    assert not outcome.has_value
