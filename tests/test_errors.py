"""Tests for structured error reporting."""

from __future__ import annotations

from planet_sky.errors import (
    DegenerateGeometryError,
    ElementsParseError,
    HorizonsError,
    InvalidEccentricityError,
    NonConvergenceError,
    PlanetSkyError,
)


def test_message_and_inputs() -> None:
    """Errors carry kind and inputs and show the inputs in str()."""
    err = InvalidEccentricityError('Eccentricity must be in [0, 1)', eccentricity=1.5)
    assert err.kind == 'InvalidEccentricity'
    assert err.inputs == {'eccentricity': 1.5}
    assert str(err) == 'Eccentricity must be in [0, 1) (eccentricity=1.5)'


def test_message_without_inputs() -> None:
    """An error without inputs prints only its message."""
    assert str(PlanetSkyError('plain')) == 'plain'


def test_builtin_bases() -> None:
    """Each error also derives from the matching builtin exception."""
    assert issubclass(InvalidEccentricityError, ValueError)
    assert issubclass(DegenerateGeometryError, ValueError)
    assert issubclass(ElementsParseError, ValueError)
    assert issubclass(NonConvergenceError, RuntimeError)
    assert issubclass(HorizonsError, RuntimeError)
    for cls in (InvalidEccentricityError, NonConvergenceError, HorizonsError):
        assert issubclass(cls, PlanetSkyError)
