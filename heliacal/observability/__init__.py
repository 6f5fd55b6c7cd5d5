"""Metrics emitted by the heliacal engine."""

from __future__ import annotations

from .metrics import (
    COMPUTE_ERRORS,
    CONJUNCTION_ITERATIONS,
    EPHEMERIS_QUERY_DURATION,
    SEARCH_OUTCOMES,
    SEARCH_TRIALS,
    ensure_metrics_registered,
    record_error,
)

__all__ = [
    "COMPUTE_ERRORS",
    "CONJUNCTION_ITERATIONS",
    "EPHEMERIS_QUERY_DURATION",
    "SEARCH_OUTCOMES",
    "SEARCH_TRIALS",
    "ensure_metrics_registered",
    "record_error",
]
