"""Shared fixtures: sample Horizons replies and Mars-like orbital elements."""

from __future__ import annotations

import math

import pytest

from planet_sky.geometry.orbits import OrbitalElements

MARS_REPLY = """\
*******************************************************************************
Ephemeris / API_USER Sat Jan  4 10:21:33 2025 Pasadena, USA      / Horizons
*******************************************************************************
Target body name: Mars (499)                      {source: mar099}
Center body name: Solar System Barycenter (0)     {source: DE441}
*******************************************************************************
$$SOE
2460677.041666667 = A.D. 2025-Jan-01 13:00:00.0000 TDB
 EC= 9.339409394787890E-02 QR= 2.066046825046046E+08 IN= 1.847800419818237E+00
 OM= 4.948875483418014E+01 W = 2.866812427373106E+02 Tp=  2460428.162127906270
 N = 6.065096232216063E-06 MA= 1.300549541085566E+02 TA= 1.424553108009312E+02
 A = 2.279008178283706E+08 AD= 2.491969531521366E+08 PR= 5.935592591591005E+07
$$EOE
*******************************************************************************
"""


@pytest.fixture
def mars_reply() -> str:
    return MARS_REPLY


@pytest.fixture
def mars_elements() -> OrbitalElements:
    return OrbitalElements(
        semi_major_axis=2.279008178283706e11,
        eccentricity=9.339409394787890e-02,
        inclination=math.radians(1.847800419818237),
        argument_of_perihelion=math.radians(2.866812427373106e02),
        longitude_of_ascending_node=math.radians(4.948875483418014e01),
        mean_anomaly_at_epoch=math.radians(1.300549541085566e02),
    )
