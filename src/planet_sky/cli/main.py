"""CLI entry point: planet-sky position|table subcommands."""

from __future__ import annotations

import argparse
import io
import logging
import os
import sys
from collections.abc import Callable

from planet_sky.constants import DEFAULT_INTERVAL
from planet_sky.ephemeris import compute_sky_position, format_report, generate_table
from planet_sky.errors import PlanetSkyError
from planet_sky.params import (
    QueryParams,
    TableParams,
    parse_body,
    parse_latitude,
    parse_longitude,
)
from planet_sky.time_utils import datetime_from_string

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool = False) -> None:
    """Configure logging for CLI (stderr, level from --verbose or PLANET_SKY_LOG)."""
    level = logging.DEBUG if verbose else logging.WARNING
    env_level = os.environ.get('PLANET_SKY_LOG', '').upper()
    if env_level in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
        level = getattr(logging, env_level)
    logging.basicConfig(
        level=level,
        format='%(levelname)s: %(name)s: %(message)s',
        stream=sys.stderr,
    )
    logging.getLogger('urllib3').setLevel(logging.WARNING)


def _emit(output: str | None, render: Callable[[], str]) -> int:
    """Write render() to stdout or to the named file; map failures to exit code 1.

    Nothing is written, and no file is created, unless render() succeeds.
    """
    try:
        text = render()
        if output is None:
            sys.stdout.write(text)
        else:
            with open(output, 'w', encoding='utf-8') as f:
                f.write(text)
            logger.info('Wrote %s', output)
    except (PlanetSkyError, ValueError, OSError) as e:
        logger.debug('Command failed', exc_info=True)
        print(f'Error: {e}', file=sys.stderr)
        return 1
    return 0


def _position_cmd(args: argparse.Namespace) -> int:
    """Report the sky position of one body at one instant (position subcommand).

    Parameters:
        args: Parsed args; time, body, latitude, longitude, file.

    Returns:
        Exit code 0 on success, 1 on error.
    """
    try:
        instant = datetime_from_string(args.time)
    except ValueError as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1
    params = QueryParams(
        body=args.body,
        time=instant,
        latitude_deg=args.latitude,
        longitude_deg=args.longitude,
        output=args.file,
    )

    def _render() -> str:
        return format_report(compute_sky_position(params.body, params.time, params.site))

    return _emit(params.output, _render)


def _table_cmd(args: argparse.Namespace) -> int:
    """Write a time series of sky positions (table subcommand).

    Parameters:
        args: Parsed args; body, start, stop, interval, time_unit, latitude,
            longitude, file.

    Returns:
        Exit code 0 on success, 1 on error.
    """
    try:
        start = datetime_from_string(args.start)
        stop = datetime_from_string(args.stop)
    except ValueError as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1
    params = TableParams(
        body=args.body,
        start_time=start,
        stop_time=stop,
        interval=args.interval,
        time_unit=args.time_unit,
        latitude_deg=args.latitude,
        longitude_deg=args.longitude,
        output=args.file,
    )

    def _render() -> str:
        buf = io.StringIO()
        generate_table(params, buf)
        return buf.getvalue()

    return _emit(params.output, _render)


def _add_site_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '-p',
        '--latitude',
        type=parse_latitude,
        default=None,
        help='Observer latitude in degrees (-90 to 90), decimal or "D M S"',
    )
    parser.add_argument(
        '-l',
        '--longitude',
        type=parse_longitude,
        default=None,
        help='Observer east longitude in degrees (-180 to 180), decimal or "D M S"',
    )
    parser.add_argument('-f', '--file', type=str, default=None, help='Output file name')


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for the planet-sky CLI."""
    parser = argparse.ArgumentParser(
        prog='planet-sky',
        description='Sky position of a solar-system body from Horizons orbital elements.',
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging to stderr')
    subparsers = parser.add_subparsers(dest='command', required=True)

    pos_parser = subparsers.add_parser('position', help='Report RA/Dec (and Alt/Az) at one time')
    pos_parser.add_argument(
        '-t',
        '--time',
        type=str,
        required=True,
        help='UTC date/time (e.g. 2025-04-18T10:00:00Z)',
    )
    pos_parser.add_argument(
        '-b',
        '--body',
        type=parse_body,
        required=True,
        help='Horizons body ID (e.g. 499) or planet name',
    )
    _add_site_arguments(pos_parser)
    pos_parser.set_defaults(func=_position_cmd)

    table_parser = subparsers.add_parser('table', help='Tabulate positions over a time range')
    table_parser.add_argument(
        '-b',
        '--body',
        type=parse_body,
        required=True,
        help='Horizons body ID (e.g. 499) or planet name',
    )
    table_parser.add_argument('--start', type=str, required=True, help='Start time (UTC)')
    table_parser.add_argument('--stop', type=str, required=True, help='Stop time (UTC)')
    table_parser.add_argument(
        '--interval', type=float, default=DEFAULT_INTERVAL, help='Time step between rows'
    )
    table_parser.add_argument(
        '--time-unit',
        type=str,
        default='hour',
        choices=['sec', 'min', 'hour', 'day'],
        help='Unit of --interval',
    )
    _add_site_arguments(table_parser)
    table_parser.set_defaults(func=_table_cmd)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the planet-sky CLI (position | table).

    Returns:
        Exit code 0 on success, 1 on failure.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    return int(args.func(args))


if __name__ == '__main__':
    sys.exit(main())
