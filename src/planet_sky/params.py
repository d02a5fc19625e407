"""Query parameters and token parsers shared by the CLI and the ephemeris pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from planet_sky.angle_utils import parse_sexagesimal
from planet_sky.constants import BODY_NAME_TO_ID, DEFAULT_INTERVAL
from planet_sky.geometry.horizon import ObserverSite

logger = logging.getLogger(__name__)


def parse_body(value: str) -> str:
    """Parse a body specifier into a Horizons COMMAND value.

    Parameters:
        value: Horizons ID (e.g. '499', '-82', 'DES=2000433') or a planet name
            (case-insensitive).

    Returns:
        Horizons body identifier.

    Raises:
        ValueError: If value is empty.
    """
    v = value.strip()
    if not v:
        raise ValueError('Body must not be empty')
    key = v.lower()
    if key in BODY_NAME_TO_ID:
        return BODY_NAME_TO_ID[key]
    return v


def _parse_bounded_angle(value: str, label: str, limit: float) -> float:
    angle = parse_sexagesimal(value)
    if angle is None:
        raise ValueError(f'Invalid {label} {value!r}; use decimal degrees or "D M S"')
    if not -limit <= angle <= limit:
        raise ValueError(f'{label.capitalize()} must be between {-limit:g} and {limit:g}')
    return angle


def parse_latitude(value: str) -> float:
    """Parse latitude in decimal degrees or "D M S"; must lie in [-90, 90].

    Raises:
        ValueError: If value is malformed or out of range.
    """
    return _parse_bounded_angle(value, 'latitude', 90.0)


def parse_longitude(value: str) -> float:
    """Parse east-positive longitude in decimal degrees or "D M S"; must lie in [-180, 180].

    Raises:
        ValueError: If value is malformed or out of range.
    """
    return _parse_bounded_angle(value, 'longitude', 180.0)


def make_site(latitude_deg: float | None, longitude_deg: float | None) -> ObserverSite | None:
    """Observer site when both coordinates are given, otherwise None.

    A lone latitude or longitude is ignored (logged), as horizon output needs both.
    """
    if latitude_deg is None and longitude_deg is None:
        return None
    if latitude_deg is None or longitude_deg is None:
        logger.warning('Both latitude and longitude are needed for horizon output; ignoring')
        return None
    return ObserverSite(latitude_degrees=latitude_deg, longitude_degrees=longitude_deg)


@dataclass
class QueryParams:
    """Parameters for a single-instant sky position report.

    Parameters:
        body: Horizons body identifier of the target.
        time: UTC instant of the observation.
        latitude_deg: Observer latitude in degrees, or None.
        longitude_deg: Observer longitude in degrees (east-positive), or None.
        output: Output file path, or None for stdout.
    """

    body: str
    time: datetime
    latitude_deg: float | None = None
    longitude_deg: float | None = None
    output: str | None = None

    @property
    def site(self) -> ObserverSite | None:
        return make_site(self.latitude_deg, self.longitude_deg)


@dataclass
class TableParams:
    """Parameters for a time-series table of sky positions."""

    body: str
    start_time: datetime
    stop_time: datetime
    interval: float = DEFAULT_INTERVAL
    time_unit: str = 'hour'
    latitude_deg: float | None = None
    longitude_deg: float | None = None
    output: str | None = None

    @property
    def site(self) -> ObserverSite | None:
        return make_site(self.latitude_deg, self.longitude_deg)
