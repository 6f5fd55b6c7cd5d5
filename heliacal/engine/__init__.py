"""Conjunction solver, seed tables and the heliacal search loop."""

from __future__ import annotations

from .conjunction import (
    INFERIOR_CONJUNCTION_MAX_DISTANCE_AU,
    ConjunctionFinder,
    ConjunctionResult,
    SolverOptions,
    aspect_for,
    disambiguate_inferior,
    find_conjunction,
    initial_estimate,
    needs_disambiguation,
)
from .heliacal import (
    BodyBelowHorizonThroughout,
    HeliacalEvent,
    HeliacalSearch,
    NoEventFound,
    SearchOptions,
    SearchOutcome,
    SearchState,
    find_heliacal_event,
    lead_days,
    scan_days,
)
from .tables import DEFAULT_PRESET, SynodicTables, available_presets, get_tables

__all__ = [
    "BodyBelowHorizonThroughout",
    "ConjunctionFinder",
    "ConjunctionResult",
    "DEFAULT_PRESET",
    "HeliacalEvent",
    "HeliacalSearch",
    "INFERIOR_CONJUNCTION_MAX_DISTANCE_AU",
    "NoEventFound",
    "SearchOptions",
    "SearchOutcome",
    "SearchState",
    "SolverOptions",
    "SynodicTables",
    "aspect_for",
    "available_presets",
    "disambiguate_inferior",
    "find_conjunction",
    "find_heliacal_event",
    "get_tables",
    "initial_estimate",
    "lead_days",
    "needs_disambiguation",
    "scan_days",
]
