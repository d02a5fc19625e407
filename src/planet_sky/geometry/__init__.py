"""Numerical core: Kepler solver, orbit propagation, frames, horizon geometry."""

from planet_sky.geometry.frames import EquatorialCoordinates, to_equatorial
from planet_sky.geometry.horizon import (
    DiurnalState,
    HorizonView,
    ObserverSite,
    RiseSetTransit,
    estimate_rise_set_transit,
    local_sidereal_time,
    to_alt_az,
)
from planet_sky.geometry.kepler import solve_kepler
from planet_sky.geometry.orbits import HeliocentricPosition, OrbitalElements, propagate

__all__ = [
    'DiurnalState',
    'EquatorialCoordinates',
    'HeliocentricPosition',
    'HorizonView',
    'ObserverSite',
    'OrbitalElements',
    'RiseSetTransit',
    'estimate_rise_set_transit',
    'local_sidereal_time',
    'propagate',
    'solve_kepler',
    'to_alt_az',
    'to_equatorial',
]
