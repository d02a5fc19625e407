"""Horizon geometry for an observer on Earth: sidereal time, Alt/Az, rise/set.

Rise, set, and transit are estimated in local mean solar time from a
low-order solar position model. No time-zone or equation-of-time correction
is applied: the hours are mean solar time at the observer's meridian.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from planet_sky.angle_utils import normalize_degrees, normalize_hours, signed_degrees
from planet_sky.constants import DEGREES_PER_HOUR_RA, HORIZON_DIP_DEG, J2000_JD
from planet_sky.geometry.frames import EquatorialCoordinates
from planet_sky.time_utils import earth_rotation_angle, to_julian_date

# Below this, cos(lat)cos(dec) is treated as zero (observer or body at a pole).
_POLAR_EPSILON = 1e-12


def _check_latitude(latitude_degrees: float) -> None:
    if not -90.0 <= latitude_degrees <= 90.0:
        raise ValueError(f'Latitude must be between -90 and 90, got {latitude_degrees!r}')


@dataclass(frozen=True)
class ObserverSite:
    """Geographic position of an observer; longitude is east-positive."""

    latitude_degrees: float
    longitude_degrees: float

    def __post_init__(self) -> None:
        _check_latitude(self.latitude_degrees)
        if not -180.0 <= self.longitude_degrees <= 180.0:
            raise ValueError(
                f'Longitude must be between -180 and 180, got {self.longitude_degrees!r}'
            )


@dataclass(frozen=True)
class HorizonView:
    """Altitude above the horizon and azimuth east of north, both in degrees."""

    altitude_degrees: float
    azimuth_degrees: float


class DiurnalState(Enum):
    """Whether a body crosses the horizon during the day."""

    RISES_AND_SETS = 'rises_and_sets'
    ALWAYS_ABOVE = 'always_above'
    ALWAYS_BELOW = 'always_below'


@dataclass(frozen=True)
class RiseSetTransit:
    """Daily horizon events in local mean solar hours, each in [0, 24).

    rise_hours and set_hours are None unless state is RISES_AND_SETS.
    transit_hours is always given; for a body that never rises it is the time
    of its (unseen) upper culmination.
    """

    state: DiurnalState
    transit_hours: float
    rise_hours: float | None = None
    set_hours: float | None = None

    @property
    def crosses_horizon(self) -> bool:
        return self.state is DiurnalState.RISES_AND_SETS


def local_sidereal_time(instant: datetime, longitude_degrees: float) -> float:
    """Local sidereal time in degrees [0, 360), from the Earth rotation angle.

    Parameters:
        instant: UTC instant.
        longitude_degrees: East-positive longitude.

    Returns:
        Sidereal angle at the observer's meridian.
    """
    era = earth_rotation_angle(to_julian_date(instant))
    return normalize_degrees(math.degrees(era) + longitude_degrees)


def hour_angle(coords: EquatorialCoordinates, instant: datetime, longitude_degrees: float) -> float:
    """Hour angle in degrees, (-180, 180], positive west of the meridian."""
    lst = local_sidereal_time(instant, longitude_degrees)
    return signed_degrees(lst - coords.right_ascension_degrees)


def to_alt_az(
    coords: EquatorialCoordinates, instant: datetime, site: ObserverSite
) -> HorizonView:
    """Altitude and azimuth of a body for an observer at an instant.

    Parameters:
        coords: Body's right ascension and declination.
        instant: UTC instant.
        site: Observer latitude and longitude.

    Returns:
        HorizonView with altitude in [-90, 90] and azimuth in [0, 360), measured
        from north through east.
    """
    ha = math.radians(hour_angle(coords, instant, site.longitude_degrees))
    dec = math.radians(coords.declination_degrees)
    lat = math.radians(site.latitude_degrees)
    sin_alt = math.sin(dec) * math.sin(lat) + math.cos(dec) * math.cos(lat) * math.cos(ha)
    altitude = math.degrees(math.asin(max(-1.0, min(1.0, sin_alt))))
    azimuth = math.degrees(
        math.atan2(
            -math.sin(ha),
            math.tan(dec) * math.cos(lat) - math.sin(lat) * math.cos(ha),
        )
    )
    return HorizonView(altitude_degrees=altitude, azimuth_degrees=normalize_degrees(azimuth))


def solar_right_ascension(jd: float) -> float:
    """Apparent solar right ascension in degrees [0, 360), low-precision model.

    Mean longitude and anomaly with a two-term equation of center; good to
    about 0.01° over several decades around J2000.
    """
    n = jd - J2000_JD
    mean_longitude = normalize_degrees(280.460 + 0.9856474 * n)
    g = math.radians(normalize_degrees(357.528 + 0.9856003 * n))
    ecliptic_longitude = math.radians(
        mean_longitude + 1.915 * math.sin(g) + 0.020 * math.sin(2.0 * g)
    )
    obliquity = math.radians(23.439 - 0.0000004 * n)
    ra = math.atan2(
        math.cos(obliquity) * math.sin(ecliptic_longitude), math.cos(ecliptic_longitude)
    )
    return normalize_degrees(math.degrees(ra))


def estimate_rise_set_transit(
    coords: EquatorialCoordinates, date: datetime, latitude_degrees: float
) -> RiseSetTransit:
    """Estimate rise, set, and transit times of a body on a given date.

    Parameters:
        coords: Body's right ascension and declination.
        date: UTC date (time of day sets where the Sun's RA is sampled).
        latitude_degrees: Observer latitude.

    Returns:
        RiseSetTransit in local mean solar hours. When the body never crosses
        the horizon, state is ALWAYS_ABOVE or ALWAYS_BELOW and rise/set are None.
    """
    _check_latitude(latitude_degrees)
    lat = math.radians(latitude_degrees)
    dec = math.radians(coords.declination_degrees)
    numerator = math.sin(math.radians(HORIZON_DIP_DEG)) - math.sin(lat) * math.sin(dec)
    denominator = math.cos(lat) * math.cos(dec)

    sun_ra = solar_right_ascension(to_julian_date(date))
    transit = normalize_hours(
        12.0 - (sun_ra - coords.right_ascension_degrees) / DEGREES_PER_HOUR_RA
    )

    if denominator < _POLAR_EPSILON:
        cos_h = -math.inf if numerator < 0.0 else math.inf
    else:
        cos_h = numerator / denominator
    if cos_h < -1.0:
        return RiseSetTransit(state=DiurnalState.ALWAYS_ABOVE, transit_hours=transit)
    if cos_h > 1.0:
        return RiseSetTransit(state=DiurnalState.ALWAYS_BELOW, transit_hours=transit)

    half_arc = math.degrees(math.acos(cos_h)) / DEGREES_PER_HOUR_RA
    return RiseSetTransit(
        state=DiurnalState.RISES_AND_SETS,
        transit_hours=transit,
        rise_hours=normalize_hours(transit - half_arc),
        set_hours=normalize_hours(transit + half_arc),
    )
