"""Prometheus metric definitions for the heliacal engine."""

from __future__ import annotations

from collections.abc import Iterable

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram

__all__ = [
    "COMPUTE_ERRORS",
    "CONJUNCTION_ITERATIONS",
    "EPHEMERIS_QUERY_DURATION",
    "SEARCH_OUTCOMES",
    "SEARCH_TRIALS",
    "ensure_metrics_registered",
    "record_error",
]


CONJUNCTION_ITERATIONS = Histogram(
    "heliacal_conjunction_iterations",
    "Newton iterations needed to converge on a conjunction.",
    ("body",),
    buckets=(1, 2, 3, 4, 5, 7, 10, 15, 25, 50),
    registry=None,
)


EPHEMERIS_QUERY_DURATION = Histogram(
    "heliacal_ephemeris_query_duration_seconds",
    "Duration of Swiss Ephemeris position and visibility lookups.",
    ("operation",),
    registry=None,
)


SEARCH_OUTCOMES = Counter(
    "heliacal_search_outcomes_total",
    "Heliacal searches grouped by body, event type and outcome.",
    ("body", "event_type", "outcome"),
    registry=None,
)


SEARCH_TRIALS = Histogram(
    "heliacal_search_trial_days",
    "Number of trial days evaluated per heliacal search.",
    ("body",),
    buckets=(1, 5, 10, 25, 50, 100, 200, 400, 800),
    registry=None,
)


COMPUTE_ERRORS = Counter(
    "heliacal_compute_errors_total",
    "Count of runtime failures across conjunction and heliacal searches.",
    ("component", "error"),
    registry=None,
)


def record_error(component: str, exc: BaseException) -> None:
    """Increment :data:`COMPUTE_ERRORS` for ``exc`` raised inside ``component``."""

    COMPUTE_ERRORS.labels(component=component, error=type(exc).__name__).inc()


def _iter_metrics() -> Iterable[Counter | Histogram]:
    yield CONJUNCTION_ITERATIONS
    yield EPHEMERIS_QUERY_DURATION
    yield SEARCH_OUTCOMES
    yield SEARCH_TRIALS
    yield COMPUTE_ERRORS


def ensure_metrics_registered(
    registry: CollectorRegistry | None = None,
) -> None:
    """Register the engine metrics with ``registry`` if not already present."""

    target = registry or REGISTRY
    for metric in _iter_metrics():
        try:
            target.register(metric)
        except ValueError:
            # Prometheus raises when a metric name already exists in the registry.
            continue
