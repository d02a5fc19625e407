"""Ecliptic-to-equatorial conversion: geocentric RA and Dec of a body."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import cspyce

from planet_sky.angle_utils import normalize_hours
from planet_sky.constants import DEGREES_PER_HOUR_RA, OBLIQUITY_J2000_DEG
from planet_sky.errors import DegenerateGeometryError
from planet_sky.geometry.orbits import HeliocentricPosition

if TYPE_CHECKING:
    import numpy as np

OBLIQUITY_RAD = math.radians(OBLIQUITY_J2000_DEG)


@dataclass(frozen=True)
class EquatorialCoordinates:
    """Right ascension (hours, [0, 24)) and declination (degrees, [-90, 90])."""

    right_ascension_hours: float
    declination_degrees: float

    @property
    def right_ascension_degrees(self) -> float:
        return self.right_ascension_hours * DEGREES_PER_HOUR_RA

    def is_valid(self) -> bool:
        """True if both coordinates lie within their astronomical ranges."""
        return (
            0.0 <= self.right_ascension_hours < 24.0
            and -90.0 <= self.declination_degrees <= 90.0
        )


def ecliptic_to_equatorial_matrix() -> np.ndarray:
    """Rotation taking ecliptic axes to mean equatorial axes (about x by the obliquity)."""
    import numpy as np

    return np.array(cspyce.rotate(-OBLIQUITY_RAD, 1), dtype=np.float64)


def to_equatorial(
    observer: HeliocentricPosition, target: HeliocentricPosition
) -> EquatorialCoordinates:
    """RA/Dec of target as seen from observer, both heliocentric ecliptic positions.

    Parameters:
        observer: Position of the observing body (normally Earth).
        target: Position of the observed body at the same instant.

    Returns:
        EquatorialCoordinates with RA in [0, 24) hours and Dec in [-90, 90] degrees.

    Raises:
        DegenerateGeometryError: If the two positions coincide.
    """
    relative = target.minus(observer)
    if cspyce.vnorm(relative) == 0.0:
        raise DegenerateGeometryError(
            'Observer and target positions coincide; direction is undefined',
            observer=observer.as_tuple(),
            target=target.as_tuple(),
        )
    equatorial = cspyce.mxv(ecliptic_to_equatorial_matrix(), relative)
    _, ra, dec = cspyce.recrad(equatorial)
    return EquatorialCoordinates(
        right_ascension_hours=normalize_hours(math.degrees(float(ra)) / DEGREES_PER_HOUR_RA),
        declination_degrees=math.degrees(float(dec)),
    )
