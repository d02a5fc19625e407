"""Tests for the Newton-Raphson Kepler solver."""

from __future__ import annotations

import math

import pytest

from planet_sky.errors import InvalidEccentricityError, NonConvergenceError
from planet_sky.geometry.kepler import solve_kepler


def _residual(mean_anomaly: float, eccentricity: float) -> float:
    ecc_anomaly = solve_kepler(mean_anomaly, eccentricity)
    return ecc_anomaly - eccentricity * math.sin(ecc_anomaly) - mean_anomaly


@pytest.mark.parametrize('eccentricity', [0.0, 0.0167, 0.0934, 0.25, 0.5, 0.75, 0.9, 0.99])
def test_solution_satisfies_keplers_equation(eccentricity: float) -> None:
    """E - e sin E reproduces M over a full revolution."""
    for k in range(36):
        assert abs(_residual(k * math.pi / 18.0, eccentricity)) < 1e-6


@pytest.mark.parametrize('eccentricity', [0.998999, 0.999, 0.9999])
@pytest.mark.parametrize('mean_anomaly', [0.0942, 0.094, 0.01, 0.5, 2.0 * math.pi - 0.094])
def test_near_parabolic_orbits_converge(mean_anomaly: float, eccentricity: float) -> None:
    """Small M with e close to 1 still converges (the first start diverges there)."""
    assert abs(_residual(mean_anomaly, eccentricity)) < 1e-6


def test_dense_sweep_near_parabolic() -> None:
    """Every M on a fine grid converges for e = 0.999."""
    for k in range(20000):
        mean_anomaly = k * 2.0 * math.pi / 20000
        assert abs(_residual(mean_anomaly, 0.999)) < 1e-6


def test_later_revolutions_keep_their_turn() -> None:
    """M beyond 2π yields E on the same revolution."""
    base = solve_kepler(0.094, 0.9999)
    later = solve_kepler(0.094 + 4.0 * math.pi, 0.9999)
    assert later == pytest.approx(base + 4.0 * math.pi, abs=1e-6)


def test_circular_orbit_returns_mean_anomaly() -> None:
    """With e = 0 the eccentric anomaly equals the mean anomaly."""
    assert solve_kepler(1.234, 0.0) == 1.234


def test_apsides_are_fixed_points() -> None:
    """Perihelion and aphelion solve exactly."""
    assert solve_kepler(0.0, 0.6) == 0.0
    assert solve_kepler(math.pi, 0.6) == pytest.approx(math.pi, abs=1e-12)


@pytest.mark.parametrize('eccentricity', [-0.1, 1.0, 1.5, math.nan, math.inf])
def test_invalid_eccentricity(eccentricity: float) -> None:
    """Eccentricity outside [0, 1) is rejected as a ValueError."""
    with pytest.raises(InvalidEccentricityError) as info:
        solve_kepler(1.0, eccentricity)
    assert info.value.kind == 'InvalidEccentricity'
    assert isinstance(info.value, ValueError)


def test_iteration_cap_raises_with_last_estimate() -> None:
    """When both starts hit the cap the error carries M, e, and the estimate."""
    with pytest.raises(NonConvergenceError) as info:
        solve_kepler(1.0, 0.5, max_iterations=1)
    err = info.value
    assert err.kind == 'NonConvergence'
    assert isinstance(err, RuntimeError)
    assert err.inputs['iterations'] == 1
    assert err.inputs['mean_anomaly'] == 1.0
    assert err.inputs['eccentricity'] == 0.5
    assert math.isfinite(err.inputs['estimate'])
    assert 'did not converge' in str(err)
