from __future__ import annotations

import pytest
from prometheus_client import CollectorRegistry

from heliacal.core.bodies import CelestialBody
from heliacal.core.events import EventType
from heliacal.engine.conjunction import ConjunctionFinder
from heliacal.engine.heliacal import HeliacalSearch
from heliacal.errors import EphemerisUnavailableError
from heliacal.observability import (
    COMPUTE_ERRORS,
    CONJUNCTION_ITERATIONS,
    SEARCH_OUTCOMES,
    ensure_metrics_registered,
)
from heliacal.visibility.models import ObserverLocation
from tests.helpers import LinearEphemeris, ScriptedVisibility, conjunction_ephemeris

CONJUNCTION = 2451780.0
START = 2451697.5


def _sample(registry: CollectorRegistry, name: str, labels: dict[str, str]) -> float:
    return registry.get_sample_value(name, labels) or 0.0


@pytest.fixture
def registry() -> CollectorRegistry:
    registry = CollectorRegistry()
    ensure_metrics_registered(registry)
    return registry


def test_registration_is_idempotent(registry: CollectorRegistry) -> None:
    ensure_metrics_registered(registry)

    names = {metric.name for metric in registry.collect()}
    assert "heliacal_conjunction_iterations" in names
    assert "heliacal_search_outcomes" in names


def test_conjunction_iterations_are_observed(registry: CollectorRegistry) -> None:
    name = f"{CONJUNCTION_ITERATIONS._name}_count"  # type: ignore[attr-defined]
    before = _sample(registry, name, {"body": "venus"})

    ConjunctionFinder(conjunction_ephemeris(CelestialBody.VENUS, CONJUNCTION)).find(
        CelestialBody.VENUS, EventType.MORNING_FIRST, START
    )

    assert _sample(registry, name, {"body": "venus"}) == before + 1


def test_errors_are_counted_by_component(registry: CollectorRegistry) -> None:
    name = f"{COMPUTE_ERRORS._name}_total"  # type: ignore[attr-defined]
    labels = {"component": "conjunction", "error": "EphemerisUnavailableError"}
    before = _sample(registry, name, labels)

    with pytest.raises(EphemerisUnavailableError):
        ConjunctionFinder(LinearEphemeris({})).find(
            CelestialBody.MARS, EventType.EVENING_FIRST, START
        )

    assert _sample(registry, name, labels) == before + 1


def test_search_outcomes_are_labelled(registry: CollectorRegistry) -> None:
    name = f"{SEARCH_OUTCOMES._name}_total"  # type: ignore[attr-defined]
    labels = {"body": "venus", "event_type": "morning_first", "outcome": "NoEventFound"}
    before = _sample(registry, name, labels)
    search = HeliacalSearch(
        ConjunctionFinder(conjunction_ephemeris(CelestialBody.VENUS, CONJUNCTION)),
        ScriptedVisibility(lambda jd: -1.0),
    )

    search.search(
        CelestialBody.VENUS,
        EventType.MORNING_FIRST,
        START,
        ObserverLocation(latitude_deg=52.5, longitude_deg=13.4),
    )

    assert _sample(registry, name, labels) == before + 1
