"""JPL Horizons client: fetch osculating elements and extract them from the text reply.

Horizons reports elements in km and degrees; everything returned from here is
in meters and radians, ready for the propagator.
"""

from __future__ import annotations

import logging
import math
import re
from datetime import datetime, timedelta, timezone
from typing import Any

import requests

from planet_sky.config import get_horizons_retries, get_horizons_timeout, get_horizons_url
from planet_sky.constants import METERS_PER_KM
from planet_sky.errors import ElementsParseError, HorizonsError
from planet_sky.geometry.orbits import OrbitalElements
from planet_sky.time_utils import seconds_since

logger = logging.getLogger(__name__)

# Epoch of the fetched elements and of the built-in Earth elements.
ELEMENTS_EPOCH = datetime(2025, 1, 1, 13, 0, 0, tzinfo=timezone.utc)

# Solar-system barycenter, matching the frame of the Earth elements below.
HORIZONS_CENTER = '500@0'

# Horizons element labels -> OrbitalElements fields
_ELEMENT_KEYS: dict[str, str] = {
    'A': 'semi_major_axis',
    'EC': 'eccentricity',
    'IN': 'inclination',
    'W': 'argument_of_perihelion',
    'OM': 'longitude_of_ascending_node',
    'MA': 'mean_anomaly_at_epoch',
}

_NUMBER = r'[-+]?(?:\d+\.?\d*|\.\d+)(?:[EeDd][-+]?\d+)?'

# A label must not be the tail of a longer one ("MA", "TA" end in "A").
_ELEMENT_PATTERNS: dict[str, re.Pattern[str]] = {
    key: re.compile(rf'(?<![A-Za-z]){key}\s*=\s*({_NUMBER})') for key in _ELEMENT_KEYS
}

_ERROR_MARKERS = ('API ERROR', 'No ephemeris for target', 'Cannot find central body')

# Earth's osculating elements at ELEMENTS_EPOCH (km and degrees), relative to
# the same center and reference plane as the Horizons query.
_EARTH_ELEMENTS_KM_DEG = {
    'A': 1.482723189000168e08,
    'EC': 1.293398280839581e-02,
    'IN': 7.530442636380576e-03,
    'W': 6.804721922709237e01,
    'OM': 6.787791105814221e00,
    'MA': 2.587134472915172e01,
}


def _horizons_time(instant: datetime) -> str:
    return instant.strftime("'%Y-%m-%d %H:%M'")


def horizons_query(body: str, epoch: datetime = ELEMENTS_EPOCH) -> dict[str, str]:
    """Query-string parameters for an osculating-elements request.

    Parameters:
        body: Horizons COMMAND value (e.g. '499' for Mars).
        epoch: Time of the first element record.

    Returns:
        Mapping of Horizons API parameters.
    """
    return {
        'format': 'text',
        'COMMAND': f"'{body}'",
        'OBJ_DATA': "'NO'",
        'MAKE_EPHEM': "'YES'",
        'EPHEM_TYPE': "'ELEMENTS'",
        'CENTER': f"'{HORIZONS_CENTER}'",
        'START_TIME': _horizons_time(epoch),
        'STOP_TIME': _horizons_time(epoch + timedelta(days=1)),
        'STEP_SIZE': "'1 d'",
    }


def fetch_elements_text(
    body: str,
    epoch: datetime = ELEMENTS_EPOCH,
    *,
    session: Any = None,
) -> str:
    """Fetch the raw Horizons elements reply for a body.

    Connection failures and timeouts are retried up to HORIZONS_RETRIES
    attempts; an HTTP error status is not retried.

    Parameters:
        body: Horizons COMMAND value.
        epoch: Time of the element record.
        session: Object with a requests-compatible ``get`` (e.g. requests.Session);
            None uses the requests module.

    Returns:
        Response body text.

    Raises:
        HorizonsError: If the service cannot be reached or reports an error.
    """
    http = session if session is not None else requests
    url = get_horizons_url()
    params = horizons_query(body, epoch)
    timeout = get_horizons_timeout()
    attempts = get_horizons_retries()
    last_error: Exception | None = None
    for attempt in range(1, attempts + 1):
        logger.debug('Horizons request %d/%d for body %s: %s', attempt, attempts, body, url)
        try:
            response = http.get(url, params=params, timeout=timeout)
            response.raise_for_status()
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            last_error = e
            logger.warning(
                'Horizons request for body %s failed (attempt %d/%d): %s',
                body,
                attempt,
                attempts,
                e,
            )
            continue
        except requests.exceptions.HTTPError as e:
            raise HorizonsError('Horizons returned an HTTP error', body=body, error=str(e)) from e
        text = response.text
        for marker in _ERROR_MARKERS:
            if marker in text:
                raise HorizonsError(f'Horizons rejected the query: {marker}', body=body)
        return text
    raise HorizonsError(
        'Could not reach Horizons', body=body, url=url, attempts=attempts
    ) from last_error


def _record_block(text: str) -> str:
    """Text of the first ephemeris record (between $$SOE and $$EOE when present)."""
    start = text.find('$$SOE')
    if start < 0:
        return text
    start += len('$$SOE')
    end = text.find('$$EOE', start)
    return text[start:] if end < 0 else text[start:end]


def extract_element_values(text: str) -> dict[str, float]:
    """Pull the A, EC, IN, W, OM, MA numbers out of a Horizons elements reply.

    Parameters:
        text: Horizons reply, or any text with "LABEL = value" fields.

    Returns:
        Mapping of Horizons label to its numeric value, in Horizons units.

    Raises:
        ElementsParseError: If any label is missing.
    """
    block = _record_block(text)
    values: dict[str, float] = {}
    for key, pattern in _ELEMENT_PATTERNS.items():
        match = pattern.search(block)
        if match is not None:
            values[key] = float(match.group(1).replace('D', 'E').replace('d', 'e'))
    missing = [key for key in _ELEMENT_KEYS if key not in values]
    if missing:
        raise ElementsParseError('Orbital elements missing from Horizons reply', missing=missing)
    return values


def elements_from_km_deg(values: dict[str, float], elapsed_seconds: float) -> OrbitalElements:
    """Build OrbitalElements from Horizons-unit values (km, degrees)."""
    return OrbitalElements(
        semi_major_axis=values['A'] * METERS_PER_KM,
        eccentricity=values['EC'],
        inclination=math.radians(values['IN']),
        argument_of_perihelion=math.radians(values['W']),
        longitude_of_ascending_node=math.radians(values['OM']),
        mean_anomaly_at_epoch=math.radians(values['MA']),
        elapsed_seconds=elapsed_seconds,
    )


def parse_elements(text: str, elapsed_seconds: float) -> OrbitalElements:
    """Parse a Horizons elements reply into OrbitalElements.

    Parameters:
        text: Horizons reply text.
        elapsed_seconds: Seconds from the elements epoch to the query instant.

    Returns:
        OrbitalElements in meters and radians.

    Raises:
        ElementsParseError: If a field is missing or the values are unusable.
    """
    values = extract_element_values(text)
    try:
        return elements_from_km_deg(values, elapsed_seconds)
    except ValueError as e:
        raise ElementsParseError(str(e), **values) from e


def earth_elements(elapsed_seconds: float) -> OrbitalElements:
    """Built-in Earth elements at ELEMENTS_EPOCH, evaluated at elapsed_seconds."""
    return elements_from_km_deg(_EARTH_ELEMENTS_KM_DEG, elapsed_seconds)


def get_body_elements(body: str, instant: datetime, *, session: Any = None) -> OrbitalElements:
    """Fetch a body's elements and set their elapsed time to reach instant.

    Parameters:
        body: Horizons COMMAND value.
        instant: UTC instant of the query.
        session: Optional requests-compatible session.

    Returns:
        OrbitalElements for the body.
    """
    text = fetch_elements_text(body, session=session)
    elements = parse_elements(text, seconds_since(ELEMENTS_EPOCH, instant))
    logger.info(
        'Elements for body %s: a=%.6e m e=%.6f',
        body,
        elements.semi_major_axis,
        elements.eccentricity,
    )
    return elements
