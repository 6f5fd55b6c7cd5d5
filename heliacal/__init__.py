"""Conjunction finding and heliacal event search for the classical planets.

>>> from heliacal import CelestialBody, EventType, get_tables
>>> get_tables().synodic_period(CelestialBody.VENUS)
224.701
>>> EventType.MORNING_FIRST.label
'morning first'
"""

from __future__ import annotations

from .core import CelestialBody, EventPair, EventType, normalize_residual
from .engine import (
    INFERIOR_CONJUNCTION_MAX_DISTANCE_AU,
    BodyBelowHorizonThroughout,
    ConjunctionFinder,
    ConjunctionResult,
    HeliacalEvent,
    HeliacalSearch,
    NoEventFound,
    SearchOptions,
    SolverOptions,
    SynodicTables,
    find_conjunction,
    find_heliacal_event,
    get_tables,
)
from .ephemeris import EphemerisSample, PositionProvider, SwissPositionProvider
from .errors import (
    EphemerisUnavailableError,
    HeliacalError,
    NonConvergenceError,
    SearchCancelledError,
    UnsupportedBodyError,
    UnsupportedEventError,
)
from .visibility import (
    AtmosphereModel,
    ObserverLocation,
    ObserverOptics,
    SwissVisibilityService,
    VisibilityReading,
)

__version__ = "0.1.0"

__all__ = [
    "AtmosphereModel",
    "BodyBelowHorizonThroughout",
    "CelestialBody",
    "ConjunctionFinder",
    "ConjunctionResult",
    "EphemerisSample",
    "EphemerisUnavailableError",
    "EventPair",
    "EventType",
    "HeliacalError",
    "HeliacalEvent",
    "HeliacalSearch",
    "INFERIOR_CONJUNCTION_MAX_DISTANCE_AU",
    "NoEventFound",
    "NonConvergenceError",
    "ObserverLocation",
    "ObserverOptics",
    "PositionProvider",
    "SearchCancelledError",
    "SearchOptions",
    "SolverOptions",
    "SwissPositionProvider",
    "SwissVisibilityService",
    "SynodicTables",
    "UnsupportedBodyError",
    "UnsupportedEventError",
    "VisibilityReading",
    "__version__",
    "find_conjunction",
    "find_heliacal_event",
    "get_tables",
    "normalize_residual",
]
