"""Exceptions raised by the sky-position pipeline.

Each error carries a ``kind`` tag and the offending ``inputs`` so callers can
report a structured reason. Subclasses also derive from the closest builtin
exception, so ``except ValueError`` and ``except RuntimeError`` still work.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


class PlanetSkyError(Exception):
    """Base class for all planet-sky failures."""

    kind = 'PlanetSkyError'

    def __init__(self, message: str, **inputs: Any) -> None:
        super().__init__(message)
        self.message = message
        self.inputs: Mapping[str, Any] = dict(inputs)

    def __str__(self) -> str:
        if not self.inputs:
            return self.message
        details = ', '.join(f'{k}={v!r}' for k, v in self.inputs.items())
        return f'{self.message} ({details})'


class InvalidEccentricityError(PlanetSkyError, ValueError):
    """Eccentricity outside [0, 1); the elliptic Kepler solution does not apply."""

    kind = 'InvalidEccentricity'


class NonConvergenceError(PlanetSkyError, RuntimeError):
    """Kepler iteration hit its cap before reaching tolerance."""

    kind = 'NonConvergence'


class DegenerateGeometryError(PlanetSkyError, ValueError):
    """Observer and target coincide, so the direction between them is undefined."""

    kind = 'DegenerateGeometry'


class ElementsParseError(PlanetSkyError, ValueError):
    """Orbital elements could not be extracted from a Horizons response."""

    kind = 'ElementsParse'


class HorizonsError(PlanetSkyError, RuntimeError):
    """The Horizons service could not be reached or reported an error."""

    kind = 'Horizons'
