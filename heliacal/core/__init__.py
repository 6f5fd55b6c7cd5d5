"""Core value types shared across :mod:`heliacal`."""

from __future__ import annotations

from .angles import delta_angle, norm360, normalize_residual
from .bodies import INNER_BODIES, OUTER_BODIES, CelestialBody
from .events import EventPair, EventType

__all__ = [
    "CelestialBody",
    "EventPair",
    "EventType",
    "INNER_BODIES",
    "OUTER_BODIES",
    "delta_angle",
    "norm360",
    "normalize_residual",
]
