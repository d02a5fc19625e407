"""Tests for two-body orbit propagation."""

from __future__ import annotations

import math

import numpy as np
import pytest

from planet_sky.errors import InvalidEccentricityError
from planet_sky.geometry.orbits import (
    HeliocentricPosition,
    OrbitalElements,
    mean_motion,
    orbit_to_ecliptic_matrix,
    orbital_period,
    propagate,
)

AU = 1.495978707e11


def _circular(**overrides: float) -> OrbitalElements:
    values = {
        'semi_major_axis': AU,
        'eccentricity': 0.0,
        'inclination': 0.0,
        'argument_of_perihelion': 0.0,
        'longitude_of_ascending_node': 0.0,
        'mean_anomaly_at_epoch': 0.0,
    }
    values.update(overrides)
    return OrbitalElements(**values)


def test_earth_like_period_is_one_year() -> None:
    """One astronomical unit gives a sidereal year."""
    days = orbital_period(AU) / 86400.0
    assert days == pytest.approx(365.25, abs=0.1)
    assert mean_motion(AU) == pytest.approx(2.0 * math.pi / orbital_period(AU))


def test_circular_orbit_at_epoch_is_on_x_axis() -> None:
    """Zero angles put the body on the x axis."""
    pos = propagate(_circular())
    assert pos.as_tuple() == pytest.approx((AU, 0.0, 0.0), abs=1e-3)


def test_quarter_period_moves_a_quarter_turn() -> None:
    """A quarter period moves a circular orbit 90 degrees."""
    elements = _circular().at_elapsed(orbital_period(AU) / 4.0)
    pos = propagate(elements)
    assert pos.x == pytest.approx(0.0, abs=1e-6 * AU)
    assert pos.y == pytest.approx(AU, rel=1e-9)
    assert pos.z == pytest.approx(0.0, abs=1e-6 * AU)


def test_node_rotates_about_ecliptic_pole() -> None:
    """The node longitude rotates about z."""
    pos = propagate(_circular(longitude_of_ascending_node=math.pi / 2.0))
    assert pos.as_tuple() == pytest.approx((0.0, AU, 0.0), abs=1e-6 * AU)


def test_perihelion_on_node_line_tilted_by_inclination() -> None:
    """With ω = 90° and i = 90° the perihelion points at the ecliptic pole."""
    pos = propagate(
        _circular(inclination=math.pi / 2.0, argument_of_perihelion=math.pi / 2.0)
    )
    assert pos.as_tuple() == pytest.approx((0.0, 0.0, AU), abs=1e-6 * AU)


def test_distance_stays_between_apsides(mars_elements: OrbitalElements) -> None:
    """Distance stays within a(1 - e) and a(1 + e)."""
    a = mars_elements.semi_major_axis
    e = mars_elements.eccentricity
    period = orbital_period(a)
    for k in range(-20, 21):
        pos = propagate(mars_elements.at_elapsed(k * period / 17.0))
        assert a * (1.0 - e) * (1.0 - 1e-9) <= pos.distance() <= a * (1.0 + e) * (1.0 + 1e-9)


def test_perihelion_and_aphelion_distances() -> None:
    """M = 0 and M = π give the apsidal distances."""
    elements = _circular(eccentricity=0.2)
    assert propagate(elements).distance() == pytest.approx(0.8 * AU, rel=1e-12)
    half = elements.at_elapsed(orbital_period(AU) / 2.0)
    assert propagate(half).distance() == pytest.approx(1.2 * AU, rel=1e-9)


def test_propagation_is_periodic(mars_elements: OrbitalElements) -> None:
    """Whole periods later the body returns to the same place."""
    period = orbital_period(mars_elements.semi_major_axis)
    start = propagate(mars_elements.at_elapsed(1.0e7))
    later = propagate(mars_elements.at_elapsed(1.0e7 + 3.0 * period))
    assert start.distance_to(later) < 1.0e3


def test_at_elapsed_returns_new_instance(mars_elements: OrbitalElements) -> None:
    """at_elapsed leaves the original unchanged."""
    moved = mars_elements.at_elapsed(42.0)
    assert moved.elapsed_seconds == 42.0
    assert mars_elements.elapsed_seconds == 0.0
    assert moved.semi_major_axis == mars_elements.semi_major_axis


@pytest.mark.parametrize('a', [0.0, -1.0, math.nan, math.inf])
def test_semi_major_axis_must_be_positive(a: float) -> None:
    """Non-positive or non-finite a is rejected."""
    with pytest.raises(ValueError, match='Semi-major axis'):
        _circular(semi_major_axis=a)


@pytest.mark.parametrize('e', [1.0, 1.3, -0.01])
def test_non_elliptic_eccentricity_raises(e: float) -> None:
    """Propagation rejects e outside [0, 1)."""
    with pytest.raises(InvalidEccentricityError):
        propagate(_circular(eccentricity=e))


def test_position_helpers() -> None:
    """Distance and difference helpers agree with plain arithmetic."""
    p = HeliocentricPosition(3.0, 4.0, 12.0)
    q = HeliocentricPosition(1.0, 1.0, 1.0)
    assert p.distance() == pytest.approx(13.0)
    assert p.minus(q) == pytest.approx((2.0, 3.0, 11.0))
    assert p.distance_to(q) == pytest.approx(math.sqrt(4.0 + 9.0 + 121.0))


def test_rotation_matrix_is_orthonormal(mars_elements: OrbitalElements) -> None:
    """The perifocal rotation is a proper rotation."""
    m = orbit_to_ecliptic_matrix(mars_elements)
    assert m.shape == (3, 3)
    assert np.allclose(m @ m.T, np.eye(3), atol=1e-12)
    assert np.linalg.det(m) == pytest.approx(1.0)
    # Third column is the orbit pole, tilted from the ecliptic pole by i.
    assert m[2, 2] == pytest.approx(math.cos(mars_elements.inclination))


def test_earth_like_orbit_distance_over_a_year() -> None:
    """An Earth-like orbit stays within 2% of its apsidal bounds."""
    elements = OrbitalElements(
        semi_major_axis=1.496e11,
        eccentricity=0.0167,
        inclination=math.radians(7.155),
        argument_of_perihelion=math.radians(102.9373),
        longitude_of_ascending_node=math.radians(348.73936),
        mean_anomaly_at_epoch=math.radians(100.0),
    )
    low = 1.496e11 * (1.0 - 0.0167) * 0.98
    high = 1.496e11 * (1.0 + 0.0167) * 1.02
    for day in range(0, 366, 5):
        pos = propagate(elements.at_elapsed(day * 86400.0))
        assert low <= pos.distance() <= high
