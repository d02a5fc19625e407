"""Fixed constants: physical parameters, reference epochs, unit conversions."""

import math

# Gravitational parameter of the Sun (IAU 2012 best estimate), m^3/s^2
GM_SUN = 1.32712440041e20

# Mean obliquity of the ecliptic at J2000 (degrees)
OBLIQUITY_J2000_DEG = 23.43928

# Julian Date of the J2000 reference epoch, 2000-01-01T12:00:00 UTC
J2000_JD = 2451545.0

# Earth rotation angle model (IAU 2000): ERA = 2*pi*(ERA_AT_J2000 + ERA_RATE * days)
ERA_AT_J2000 = 0.7790572732640
ERA_RATE = 1.00273781191135448

# Standard altitude of a point source at rise/set (refraction + dip), degrees
HORIZON_DIP_DEG = -0.833

# Kepler solver
KEPLER_TOLERANCE = 1e-6
KEPLER_MAX_ITERATIONS = 1000

# Time: seconds per unit (for interval conversion and sexagesimal)
SECONDS_PER_MINUTE = 60.0
SECONDS_PER_HOUR = 3600.0
SECONDS_PER_DAY = 86400.0

# Angle
TWOPI = 2.0 * math.pi
DEGREES_PER_CIRCLE = 360.0
HALF_CIRCLE_DEGREES = 180.0
HOURS_PER_DAY = 24.0
DEGREES_PER_HOUR_RA = 15.0  # right ascension: 360° / 24 h

# Horizons element feed units
METERS_PER_KM = 1000.0

# Defaults (configuration)
DEFAULT_INTERVAL = 1.0
DEFAULT_MIN_INTERVAL_SECONDS = 1.0

# Horizons body ID of the default observer body (Earth)
EARTH_ID = '399'

# Body name -> Horizons major-body ID for --body
BODY_NAME_TO_ID: dict[str, str] = {
    'mercury': '199',
    'venus': '299',
    'earth': EARTH_ID,
    'mars': '499',
    'jupiter': '599',
    'saturn': '699',
    'uranus': '799',
    'neptune': '899',
    'pluto': '999',
}

BODY_ID_TO_NAME: dict[str, str] = {v: k.capitalize() for k, v in BODY_NAME_TO_ID.items()}
