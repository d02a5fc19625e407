"""Time scale: UTC instants, Julian Dates, and Earth rotation angle.

Date/time strings are parsed with rms-julian; the Julian Date arithmetic
itself works on aware ``datetime`` values so that microsecond precision is
kept through a round trip.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta, timezone

import julian

from planet_sky.angle_utils import normalize_radians
from planet_sky.config import get_leapsecs_path
from planet_sky.constants import (
    DEFAULT_MIN_INTERVAL_SECONDS,
    ERA_AT_J2000,
    ERA_RATE,
    J2000_JD,
    SECONDS_PER_DAY,
    SECONDS_PER_HOUR,
    SECONDS_PER_MINUTE,
    TWOPI,
)

logger = logging.getLogger(__name__)

J2000_EPOCH = datetime(2000, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

# rms-julian counts (day, sec) from J2000 midnight rather than noon.
_JULIAN_DAY_ZERO = datetime(2000, 1, 1, tzinfo=timezone.utc)

_MICROSECONDS_PER_DAY = 86_400_000_000

# Leap seconds loaded once at first use.
_leapsecs_loaded = False


def _ensure_leapsecs() -> None:
    """Load the leap seconds kernel for rms-julian if not already loaded.

    Uses JULIAN_LEAPSECS when it names a readable LSK, otherwise the kernel
    bundled with rms-julian.
    """
    global _leapsecs_loaded
    if _leapsecs_loaded:
        return
    path = get_leapsecs_path()
    if path is not None:
        try:
            julian.load_lsk(path)
            _leapsecs_loaded = True
            return
        except (OSError, KeyError, ValueError) as e:
            logger.info('Leap seconds from %s not used (%s); using bundled LSK.', path, e)
    julian.load_lsk()
    _leapsecs_loaded = True


def as_utc(instant: datetime) -> datetime:
    """Return instant as an aware UTC datetime; naive values are taken to be UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def to_julian_date(instant: datetime) -> float:
    """Convert a UTC instant to Julian Date.

    Parameters:
        instant: Date and time; naive values are read as UTC.

    Returns:
        Julian Date (days), exactly 2451545.0 at 2000-01-01T12:00:00 UTC.
    """
    delta = as_utc(instant) - J2000_EPOCH
    fraction = (delta.seconds + delta.microseconds / 1e6) / SECONDS_PER_DAY
    return J2000_JD + delta.days + fraction


def from_julian_date(jd: float) -> datetime:
    """Convert a Julian Date to an aware UTC datetime (inverse of to_julian_date).

    Parameters:
        jd: Julian Date.

    Returns:
        UTC datetime, rounded to the nearest microsecond.

    Raises:
        ValueError: If jd is not finite or falls outside the datetime range.
    """
    if not math.isfinite(jd):
        raise ValueError(f'Julian Date must be finite, got {jd!r}')
    offset = jd - J2000_JD
    days = math.floor(offset)
    micros = round((offset - days) * _MICROSECONDS_PER_DAY)
    try:
        return J2000_EPOCH + timedelta(days=days, microseconds=micros)
    except OverflowError as e:
        raise ValueError(f'Julian Date {jd!r} is outside the supported date range') from e


def earth_rotation_angle(jd: float) -> float:
    """Earth rotation angle (IAU 2000 linear model) in radians, in [0, 2π).

    Evaluated as 2π(frac(Δ) + 0.7790572732640 + 0.00273781191135448·Δ), which is
    the same angle modulo 2π as 2π(0.7790572732640 + 1.00273781191135448·Δ) but
    keeps more digits for large Δ.

    Parameters:
        jd: Julian Date (UT).

    Returns:
        Rotation angle in radians.
    """
    delta = jd - J2000_JD
    turns = math.fmod(delta, 1.0) + ERA_AT_J2000 + (ERA_RATE - 1.0) * delta
    return normalize_radians(TWOPI * turns)


def seconds_since(epoch: datetime, instant: datetime) -> float:
    """Signed seconds elapsed from epoch to instant."""
    return (as_utc(instant) - as_utc(epoch)).total_seconds()


def parse_datetime(string: str) -> tuple[int, float] | None:
    """Parse date/time string to UTC (day, sec) with rms-julian.

    Parameters:
        string: Date/time string (any format accepted by rms-julian, ISO "Z"
            suffix included).

    Returns:
        (day, sec) where day counts days since 2000-01-01 and sec is seconds
        within that day; None on parse failure.
    """
    _ensure_leapsecs()
    stripped = string.strip()
    candidates = [stripped]
    if stripped.endswith(('Z', 'z')):
        # rms-julian does not parse the ISO "Z" suffix; the value is UTC either way.
        candidates.append(stripped[:-1])
    for candidate in candidates:
        try:
            day, sec = julian.day_sec_from_string(candidate)[:2]
            return (int(day), float(sec))
        except (ValueError, TypeError, LookupError, OSError):
            continue
    return None


def datetime_from_string(string: str) -> datetime:
    """Parse a date/time string into an aware UTC datetime.

    Parameters:
        string: Date/time string, e.g. "2025-04-18T10:00:00Z".

    Returns:
        UTC datetime.

    Raises:
        ValueError: If the string cannot be parsed.
    """
    parsed = parse_datetime(string)
    if parsed is None:
        raise ValueError(f'Invalid date/time: {string!r}')
    day, sec = parsed
    return _JULIAN_DAY_ZERO + timedelta(days=day, seconds=sec)


def interval_seconds(
    interval: float,
    time_unit: str,
    *,
    min_seconds: float = DEFAULT_MIN_INTERVAL_SECONDS,
) -> float:
    """Convert a table step and its unit to seconds.

    Parameters:
        interval: Numeric step value (sign ignored).
        time_unit: One of 'sec', 'min', 'hour', 'day' (case-insensitive; longer
            spellings such as 'minutes' accepted).
        min_seconds: Smallest value returned.

    Returns:
        Step in seconds, at least min_seconds.
    """
    u = time_unit.strip().lower()
    if u.startswith('sec'):
        dsec = abs(interval)
    elif u.startswith('min'):
        dsec = abs(interval) * SECONDS_PER_MINUTE
    elif u.startswith('hour'):
        dsec = abs(interval) * SECONDS_PER_HOUR
    elif u.startswith('day'):
        dsec = abs(interval) * SECONDS_PER_DAY
    else:
        raise ValueError(f'Invalid time_unit {time_unit!r}; expected one of sec, min, hour, day')
    return max(dsec, min_seconds)
