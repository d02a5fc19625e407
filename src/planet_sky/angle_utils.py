"""Angle normalization, sexagesimal parsing, and formatting."""

from __future__ import annotations

import math
import re

from planet_sky.constants import (
    DEGREES_PER_CIRCLE,
    HALF_CIRCLE_DEGREES,
    HOURS_PER_DAY,
    SECONDS_PER_HOUR,
    SECONDS_PER_MINUTE,
    TWOPI,
)

_SEXAGESIMAL_SPLIT = re.compile(r'[\s:]+')


def _wrap(value: float, period: float) -> float:
    """Reduce value into [0, period); guards the float case where x % p == p."""
    result = value % period
    if result >= period:
        result -= period
    return result


def normalize_radians(angle: float) -> float:
    """Reduce an angle in radians to [0, 2π)."""
    return _wrap(angle, TWOPI)


def normalize_degrees(angle: float) -> float:
    """Reduce an angle in degrees to [0, 360)."""
    return _wrap(angle, DEGREES_PER_CIRCLE)


def normalize_hours(hours: float) -> float:
    """Reduce a time or right ascension in hours to [0, 24)."""
    return _wrap(hours, HOURS_PER_DAY)


def signed_degrees(angle: float) -> float:
    """Reduce an angle in degrees to (-180, 180]."""
    result = normalize_degrees(angle)
    if result > HALF_CIRCLE_DEGREES:
        result -= DEGREES_PER_CIRCLE
    return result


def parse_sexagesimal(string: str) -> float | None:
    """Parse "D", "D M", or "D M S" (space or colon separated) into a decimal value.

    Minutes and seconds must be non-negative and below 60. A leading minus sign
    applies to the whole value, so "-0 30" is -0.5.

    Parameters:
        string: Text such as "40.5", "40 30", "-75:30:00".

    Returns:
        Decimal value in the units of the first field, or None on parse failure.
    """
    s = string.strip()
    if not s:
        return None
    parts = _SEXAGESIMAL_SPLIT.split(s)
    if len(parts) > 3:
        return None
    try:
        fields = [float(p) for p in parts]
    except ValueError:
        return None
    if any(not math.isfinite(f) for f in fields):
        return None
    for sub in fields[1:]:
        if sub < 0 or sub >= 60.0:
            return None
    value = abs(fields[0])
    scale = 1.0
    for sub in fields[1:]:
        scale /= 60.0
        value += sub * scale
    return -value if s.startswith('-') else value


def hms_fields(value: float, ndecimal: int = 0) -> tuple[int, int, float]:
    """Split a non-negative value into whole units, minutes, and seconds.

    Seconds are rounded to ndecimal places first so that 59.9996 s never prints
    as "60".
    """
    total = round(abs(value) * SECONDS_PER_HOUR, ndecimal)
    whole = int(total // SECONDS_PER_HOUR)
    rest = total - whole * SECONDS_PER_HOUR
    minutes = int(rest // SECONDS_PER_MINUTE)
    seconds = round(rest - minutes * SECONDS_PER_MINUTE, ndecimal)
    return (whole, minutes, seconds)


def ra_string(hours: float, ndecimal: int = 2) -> str:
    """Format right ascension hours as "HHh MMm SS.SSs"."""
    h, m, s = hms_fields(normalize_hours(hours), ndecimal)
    if h >= 24:
        h -= 24
    width = 3 + ndecimal if ndecimal > 0 else 2
    return f'{h:02d}h {m:02d}m {s:0{width}.{ndecimal}f}s'


def dec_string(degrees: float, ndecimal: int = 1) -> str:
    """Format declination degrees as "+DD° MM' SS.S\"" with an explicit sign."""
    sign = '-' if degrees < 0 else '+'
    d, m, s = hms_fields(degrees, ndecimal)
    width = 3 + ndecimal if ndecimal > 0 else 2
    return f'{sign}{d:02d}° {m:02d}\' {s:0{width}.{ndecimal}f}"'


def ra_compact_string(hours: float) -> str:
    """Format right ascension as "HHhMMmin", truncating to whole minutes."""
    h = int(hours)
    m = int((hours - h) * 60.0)
    return f'{h:02d}h{m:02d}min'


def hm_string(hours: float) -> str:
    """Format a time of day in hours as "HH:MM", truncating to whole minutes."""
    h = int(hours)
    m = int((hours - h) * 60.0)
    return f'{h:02d}:{m:02d}'
