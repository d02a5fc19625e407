"""Two-body propagation of Keplerian elements to heliocentric ecliptic positions."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

import cspyce

from planet_sky.angle_utils import normalize_radians
from planet_sky.constants import GM_SUN, TWOPI
from planet_sky.geometry.kepler import check_eccentricity, solve_kepler

if TYPE_CHECKING:
    import numpy as np


@dataclass(frozen=True)
class OrbitalElements:
    """Osculating heliocentric elements at an epoch plus the time elapsed since it.

    Attributes:
        semi_major_axis: a, meters (> 0).
        eccentricity: e, dimensionless; the propagator accepts [0, 1).
        inclination: i, radians, relative to the ecliptic.
        argument_of_perihelion: ω, radians, from the ascending node.
        longitude_of_ascending_node: Ω, radians, from the reference equinox.
        mean_anomaly_at_epoch: M0, radians.
        elapsed_seconds: Signed seconds from the elements epoch to the query instant.
    """

    semi_major_axis: float
    eccentricity: float
    inclination: float
    argument_of_perihelion: float
    longitude_of_ascending_node: float
    mean_anomaly_at_epoch: float
    elapsed_seconds: float = 0.0

    def __post_init__(self) -> None:
        if not (math.isfinite(self.semi_major_axis) and self.semi_major_axis > 0.0):
            raise ValueError(f'Semi-major axis must be positive, got {self.semi_major_axis!r}')

    def at_elapsed(self, elapsed_seconds: float) -> OrbitalElements:
        """Return the same elements evaluated at a different elapsed time."""
        return replace(self, elapsed_seconds=elapsed_seconds)


@dataclass(frozen=True)
class HeliocentricPosition:
    """Heliocentric ecliptic position in meters.

    Right-handed: x toward the reference equinox, z toward the ecliptic north pole.
    """

    x: float
    y: float
    z: float

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def distance(self) -> float:
        """Distance from the Sun (m)."""
        return float(cspyce.vnorm(self.as_tuple()))

    def minus(self, other: HeliocentricPosition) -> tuple[float, float, float]:
        """Vector from other to self."""
        diff = cspyce.vsub(self.as_tuple(), other.as_tuple())
        return (float(diff[0]), float(diff[1]), float(diff[2]))

    def distance_to(self, other: HeliocentricPosition) -> float:
        """Distance between the two positions (m)."""
        return float(cspyce.vdist(self.as_tuple(), other.as_tuple()))


def mean_motion(semi_major_axis: float) -> float:
    """Mean motion n = sqrt(GM_sun / a^3) in rad/s for a heliocentric orbit."""
    return math.sqrt(GM_SUN / semi_major_axis**3)


def orbital_period(semi_major_axis: float) -> float:
    """Sidereal orbital period in seconds (Kepler's third law)."""
    return TWOPI / mean_motion(semi_major_axis)


def orbit_to_ecliptic_matrix(elements: OrbitalElements) -> np.ndarray:
    """Rotation from the perifocal frame to the ecliptic frame.

    Composes ω about the orbit normal, i about the line of nodes, and Ω about
    the ecliptic pole. SPICE rotation matrices rotate frames, so each vector
    rotation angle enters with its sign flipped.
    """
    import numpy as np

    rotmat = cspyce.eul2m(
        -elements.longitude_of_ascending_node,
        -elements.inclination,
        -elements.argument_of_perihelion,
        3,
        1,
        3,
    )
    return np.array(rotmat, dtype=np.float64)


def propagate(elements: OrbitalElements) -> HeliocentricPosition:
    """Heliocentric ecliptic position of a body at its elapsed time.

    Parameters:
        elements: Orbital elements with elapsed seconds since their epoch.

    Returns:
        HeliocentricPosition in meters.

    Raises:
        InvalidEccentricityError: If eccentricity is outside [0, 1).
        NonConvergenceError: If Kepler's equation does not converge.
    """
    a = elements.semi_major_axis
    e = elements.eccentricity
    check_eccentricity(e)
    mean_anomaly = normalize_radians(
        elements.mean_anomaly_at_epoch + mean_motion(a) * elements.elapsed_seconds
    )
    ecc_anomaly = solve_kepler(mean_anomaly, e)
    perifocal = (
        a * (math.cos(ecc_anomaly) - e),
        a * math.sin(ecc_anomaly) * math.sqrt(1.0 - e * e),
        0.0,
    )
    x, y, z = cspyce.mxv(orbit_to_ecliptic_matrix(elements), perifocal)
    return HeliocentricPosition(float(x), float(y), float(z))
