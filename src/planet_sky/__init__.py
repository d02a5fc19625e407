"""Sky positions of solar-system bodies from Keplerian orbital elements.

This package provides:
- A numerical core: Kepler solver, two-body propagation, ecliptic to
  equatorial rotation, sidereal time, altitude/azimuth, rise/transit/set
- A JPL Horizons client that fetches osculating elements for a body
- The planet-sky command line tool (single-instant report and time tables)

Vector and rotation algebra uses cspyce; time strings are parsed with rms-julian.
"""

__all__: list[str] = []
