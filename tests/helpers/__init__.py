"""Fakes shared across the engine, search and CLI tests."""

from .fakes import (
    SUN_RATE,
    FixedTwilight,
    FunctionEphemeris,
    LinearEphemeris,
    LinearTrack,
    ScriptedVisibility,
    conjunction_ephemeris,
)

__all__ = [
    "SUN_RATE",
    "FixedTwilight",
    "FunctionEphemeris",
    "LinearEphemeris",
    "LinearTrack",
    "ScriptedVisibility",
    "conjunction_ephemeris",
]
