"""Sky position pipeline: elements -> positions -> RA/Dec -> Alt/Az and rise/set.

Also renders the single-instant report and the time-series table.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, TextIO

from planet_sky.angle_utils import dec_string, hm_string, ra_compact_string, ra_string
from planet_sky.constants import BODY_ID_TO_NAME
from planet_sky.geometry.frames import EquatorialCoordinates, to_equatorial
from planet_sky.geometry.horizon import (
    DiurnalState,
    HorizonView,
    ObserverSite,
    RiseSetTransit,
    estimate_rise_set_transit,
    to_alt_az,
)
from planet_sky.geometry.orbits import HeliocentricPosition, OrbitalElements, propagate
from planet_sky.horizons import ELEMENTS_EPOCH, earth_elements, get_body_elements
from planet_sky.params import TableParams
from planet_sky.time_utils import as_utc, interval_seconds, seconds_since

logger = logging.getLogger(__name__)

MAX_TABLE_ROWS = 100_000

_STATE_LABELS = {
    DiurnalState.ALWAYS_ABOVE: 'always above the horizon',
    DiurnalState.ALWAYS_BELOW: 'always below the horizon',
}


@dataclass(frozen=True)
class SkyPosition:
    """Everything computed for one (body, instant, site) query."""

    body: str
    time: datetime
    observer_position: HeliocentricPosition
    target_position: HeliocentricPosition
    equatorial: EquatorialCoordinates
    site: ObserverSite | None = None
    horizon: HorizonView | None = None
    events: RiseSetTransit | None = None


def sky_position_from_elements(
    body: str,
    instant: datetime,
    target_elements: OrbitalElements,
    observer_elements: OrbitalElements,
    site: ObserverSite | None = None,
) -> SkyPosition:
    """Run the core pipeline on elements that already carry the query's elapsed time.

    Parameters:
        body: Target identifier (for reporting only).
        instant: UTC instant of the query.
        target_elements: Elements of the observed body.
        observer_elements: Elements of the observing body (normally Earth).
        site: Observer on Earth; when given, Alt/Az and rise/set are added.

    Returns:
        SkyPosition for the query.
    """
    observer_pos = propagate(observer_elements)
    target_pos = propagate(target_elements)
    equatorial = to_equatorial(observer_pos, target_pos)
    horizon = None
    events = None
    if site is not None:
        horizon = to_alt_az(equatorial, instant, site)
        events = estimate_rise_set_transit(equatorial, instant, site.latitude_degrees)
    return SkyPosition(
        body=body,
        time=as_utc(instant),
        observer_position=observer_pos,
        target_position=target_pos,
        equatorial=equatorial,
        site=site,
        horizon=horizon,
        events=events,
    )


def compute_sky_position(
    body: str,
    instant: datetime,
    site: ObserverSite | None = None,
    *,
    target_elements: OrbitalElements | None = None,
    observer_elements: OrbitalElements | None = None,
    session: Any = None,
) -> SkyPosition:
    """Sky position of a body seen from Earth at an instant.

    Parameters:
        body: Horizons body identifier.
        instant: UTC instant.
        site: Optional observer on Earth.
        target_elements: Elements to use instead of fetching them from Horizons;
            their elapsed time is reset to reach instant.
        observer_elements: Elements of the observing body; defaults to the built-in
            Earth elements. Their elapsed time is reset the same way.
        session: Optional requests-compatible session for the Horizons fetch.

    Returns:
        SkyPosition for the query.
    """
    elapsed = seconds_since(ELEMENTS_EPOCH, instant)
    if target_elements is None:
        target_elements = get_body_elements(body, instant, session=session)
    else:
        target_elements = target_elements.at_elapsed(elapsed)
    if observer_elements is None:
        observer_elements = earth_elements(elapsed)
    else:
        observer_elements = observer_elements.at_elapsed(elapsed)
    return sky_position_from_elements(body, instant, target_elements, observer_elements, site)


def _body_label(body: str) -> str:
    name = BODY_ID_TO_NAME.get(body)
    return f'{body} ({name})' if name else body


def format_report(position: SkyPosition) -> str:
    """Render a SkyPosition as the human-readable INFO/DATA report."""
    lines = [
        '##### INFO #####',
        f'Object ID: {_body_label(position.body)}',
        f'Time: {position.time.strftime("%Y-%m-%dT%H:%M:%SZ")}',
    ]
    if position.site is not None:
        lines.append(f'Latitude: {position.site.latitude_degrees:.2f}°')
        lines.append(f'Longitude: {position.site.longitude_degrees:.2f}°')
    ra = position.equatorial.right_ascension_hours
    dec = position.equatorial.declination_degrees
    lines += [
        '##### DATA #####',
        f'Earth–Sun Distance: {position.observer_position.distance():.5E} m',
        f'Planet–Sun Distance: {position.target_position.distance():.5E} m',
        f'RA: {ra_compact_string(ra)} ({ra_string(ra)})',
        f'Dec: {dec:.2f}° ({dec_string(dec)})',
    ]
    if position.horizon is not None:
        lines.append(f'Azimuth: {position.horizon.azimuth_degrees:.2f}°')
        lines.append(f'Altitude: {position.horizon.altitude_degrees:.2f}°')
    events = position.events
    if events is not None:
        if events.rise_hours is not None and events.set_hours is not None:
            lines.append(f'Rise Time: {hm_string(events.rise_hours)} h')
            lines.append(f'Set Time: {hm_string(events.set_hours)} h')
        else:
            lines.append(f'Rise/Set: {_STATE_LABELS[events.state]}')
        lines.append(f'Transit Time: {hm_string(events.transit_hours)} h')
    return '\n'.join(lines) + '\n'


def table_times(start: datetime, stop: datetime, step_seconds: float) -> list[datetime]:
    """Instants from start to stop inclusive, step_seconds apart.

    Raises:
        ValueError: If stop precedes start or the table would be too long.
    """
    start = as_utc(start)
    stop = as_utc(stop)
    if stop < start:
        raise ValueError('Stop time precedes start time')
    count = int((stop - start).total_seconds() // step_seconds) + 1
    if count > MAX_TABLE_ROWS:
        raise ValueError(f'Table would have {count} rows; limit is {MAX_TABLE_ROWS}')
    step = timedelta(seconds=step_seconds)
    return [start + i * step for i in range(count)]


def _table_header(with_site: bool) -> str:
    header = (
        f'{"UTC":<20} {"RA (h)":>10} {"Dec (deg)":>10}'
        f' {"r_sun (m)":>12} {"delta (m)":>12}'
    )
    if with_site:
        header += f' {"Alt (deg)":>10} {"Az (deg)":>10}'
    return header


def _table_row(position: SkyPosition) -> str:
    delta = position.target_position.distance_to(position.observer_position)
    row = (
        f'{position.time.strftime("%Y-%m-%d %H:%M:%S"):<20}'
        f' {position.equatorial.right_ascension_hours:10.5f}'
        f' {position.equatorial.declination_degrees:10.5f}'
        f' {position.target_position.distance():12.5E}'
        f' {delta:12.5E}'
    )
    if position.horizon is not None:
        row += (
            f' {position.horizon.altitude_degrees:10.4f}'
            f' {position.horizon.azimuth_degrees:10.4f}'
        )
    return row


def generate_table(params: TableParams, stream: TextIO, *, session: Any = None) -> int:
    """Write a time-series table of sky positions.

    Elements are fetched once; each row only changes their elapsed time.

    Parameters:
        params: Body, time range, step, and optional site.
        stream: Output text stream.
        session: Optional requests-compatible session for the Horizons fetch.

    Returns:
        Number of rows written.
    """
    times = table_times(
        params.start_time, params.stop_time, interval_seconds(params.interval, params.time_unit)
    )
    site = params.site
    elements = get_body_elements(params.body, times[0], session=session)
    logger.debug('Generating %d rows for body %s', len(times), params.body)
    stream.write(f'# Body: {_body_label(params.body)}\n')
    stream.write(_table_header(site is not None) + '\n')
    for instant in times:
        elapsed = seconds_since(ELEMENTS_EPOCH, instant)
        position = sky_position_from_elements(
            params.body,
            instant,
            elements.at_elapsed(elapsed),
            earth_elements(elapsed),
            site,
        )
        stream.write(_table_row(position) + '\n')
    return len(times)
