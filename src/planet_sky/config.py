"""Configuration: Horizons service and leap-second settings from environment."""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_HORIZONS_URL = 'https://ssd.jpl.nasa.gov/api/horizons.api'
DEFAULT_HORIZONS_TIMEOUT = 30.0
DEFAULT_HORIZONS_RETRIES = 3


def get_horizons_url() -> str:
    """Return the Horizons API endpoint (HORIZONS_URL env var or default).

    Returns:
        URL string.
    """
    return os.environ.get('HORIZONS_URL', '').strip() or DEFAULT_HORIZONS_URL


def get_horizons_timeout() -> float:
    """Return the per-request timeout in seconds (HORIZONS_TIMEOUT env var or default).

    Returns:
        Positive timeout in seconds.
    """
    raw = os.environ.get('HORIZONS_TIMEOUT', '').strip()
    if not raw:
        return DEFAULT_HORIZONS_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        logger.warning('Ignoring invalid HORIZONS_TIMEOUT %r', raw)
        return DEFAULT_HORIZONS_TIMEOUT
    if value <= 0:
        logger.warning('Ignoring non-positive HORIZONS_TIMEOUT %r', raw)
        return DEFAULT_HORIZONS_TIMEOUT
    return value


def get_horizons_retries() -> int:
    """Return how many times a failed Horizons request is attempted.

    Returns:
        Attempt count, at least 1.
    """
    raw = os.environ.get('HORIZONS_RETRIES', '').strip()
    if not raw:
        return DEFAULT_HORIZONS_RETRIES
    try:
        value = int(raw)
    except ValueError:
        logger.warning('Ignoring invalid HORIZONS_RETRIES %r', raw)
        return DEFAULT_HORIZONS_RETRIES
    return max(value, 1)


def get_leapsecs_path() -> str | None:
    """Return path to a NAIF LSK leap seconds file for rms-julian, if configured.

    Returns:
        Path string from JULIAN_LEAPSECS, or None to use rms-julian's bundled LSK.
    """
    path = os.environ.get('JULIAN_LEAPSECS', '').strip()
    return path or None
