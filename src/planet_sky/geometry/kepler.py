"""Kepler's equation for elliptic orbits."""

from __future__ import annotations

import logging
import math

from planet_sky.angle_utils import normalize_radians
from planet_sky.constants import KEPLER_MAX_ITERATIONS, KEPLER_TOLERANCE
from planet_sky.errors import InvalidEccentricityError, NonConvergenceError

logger = logging.getLogger(__name__)


def check_eccentricity(eccentricity: float) -> None:
    """Raise InvalidEccentricityError unless 0 <= e < 1."""
    if not (math.isfinite(eccentricity) and 0.0 <= eccentricity < 1.0):
        raise InvalidEccentricityError(
            'Eccentricity must be in [0, 1) for an elliptic orbit',
            eccentricity=eccentricity,
        )


def _newton(
    mean_anomaly: float,
    eccentricity: float,
    start: float,
    tolerance: float,
    max_iterations: int,
) -> tuple[float, int | None]:
    """Newton-Raphson from start; returns (estimate, iterations) or (estimate, None)."""
    ecc_anomaly = start
    for iteration in range(1, max_iterations + 1):
        step = (mean_anomaly - ecc_anomaly + eccentricity * math.sin(ecc_anomaly)) / (
            1.0 - eccentricity * math.cos(ecc_anomaly)
        )
        ecc_anomaly += step
        if abs(step) < tolerance:
            return ecc_anomaly, iteration
        if not math.isfinite(ecc_anomaly):
            break
    return ecc_anomaly, None


def solve_kepler(
    mean_anomaly: float,
    eccentricity: float,
    *,
    tolerance: float = KEPLER_TOLERANCE,
    max_iterations: int = KEPLER_MAX_ITERATIONS,
) -> float:
    """Solve M = E - e sin E for the eccentric anomaly E by Newton-Raphson.

    Starts from E0 = M + e sin M and iterates
    E <- E + (M - E + e sin E) / (1 - e cos E) until the step is below tolerance.
    Near e = 1 and small M that start can diverge; the iteration is then
    restarted from E0 = π (shifted to M's revolution), which converges for
    every 0 <= e < 1.

    Parameters:
        mean_anomaly: Mean anomaly M (radians). Not reduced; E tracks M's revolution.
        eccentricity: Orbital eccentricity, 0 <= e < 1.
        tolerance: Convergence threshold on |ΔE| (radians).
        max_iterations: Iteration cap for each start.

    Returns:
        Eccentric anomaly E (radians).

    Raises:
        InvalidEccentricityError: If e is outside [0, 1).
        NonConvergenceError: If neither start reaches tolerance within the cap.
    """
    check_eccentricity(eccentricity)
    revolution_start = mean_anomaly - normalize_radians(mean_anomaly)
    starts = (
        mean_anomaly + eccentricity * math.sin(mean_anomaly),
        revolution_start + math.pi,
    )
    ecc_anomaly = starts[0]
    for attempt, start in enumerate(starts, 1):
        ecc_anomaly, iterations = _newton(
            mean_anomaly, eccentricity, start, tolerance, max_iterations
        )
        if iterations is not None:
            logger.debug(
                'Kepler solved: M=%.9f e=%.9f E=%.9f in %d iterations (start %d)',
                mean_anomaly,
                eccentricity,
                ecc_anomaly,
                iterations,
                attempt,
            )
            return ecc_anomaly
        logger.debug(
            'Kepler start %d did not converge for M=%.9f e=%.9f',
            attempt,
            mean_anomaly,
            eccentricity,
        )
    raise NonConvergenceError(
        'Kepler iteration did not converge',
        mean_anomaly=mean_anomaly,
        eccentricity=eccentricity,
        estimate=ecc_anomaly,
        iterations=max_iterations,
    )
