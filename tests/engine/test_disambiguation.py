from __future__ import annotations

import logging

import pytest

from heliacal.core.bodies import CelestialBody
from heliacal.core.events import EventType
from heliacal.engine.conjunction import (
    ConjunctionFinder,
    ConjunctionResult,
    disambiguate_inferior,
    find_conjunction,
    needs_disambiguation,
)
from heliacal.errors import EphemerisUnavailableError
from tests.helpers import LinearEphemeris, conjunction_ephemeris

VENUS_PERIOD = 224.701
START = 2451697.5
SUPERIOR = 2451780.0
INFERIOR = SUPERIOR - VENUS_PERIOD / 2.0


def _near_inferior(jd: float) -> float:
    return 0.3 if jd < SUPERIOR - 50.0 else 1.2


def _result(**overrides: object) -> ConjunctionResult:
    values: dict[str, object] = dict(
        body=CelestialBody.VENUS,
        event_type=EventType.MORNING_FIRST,
        jd=SUPERIOR,
        distance_au=1.2,
        residual_deg=0.01,
        aspect_deg=0.0,
        iterations=2,
        initial_estimate_jd=SUPERIOR - 8.0,
    )
    values.update(overrides)
    return ConjunctionResult(**values)  # type: ignore[arg-type]


def test_far_inner_conjunction_is_shifted_half_a_period() -> None:
    provider = conjunction_ephemeris(
        CelestialBody.VENUS, SUPERIOR, distance_au=_near_inferior
    )

    result = find_conjunction(provider, CelestialBody.VENUS, EventType.MORNING_FIRST, START)

    assert result.disambiguated is True
    assert result.unadjusted_jd == pytest.approx(SUPERIOR, abs=1e-6)
    assert result.jd == pytest.approx(INFERIOR, abs=1e-6)
    assert result.distance_au < 0.8
    assert result.disambiguation_failed is False
    # exactly one corrective query, without speed, at the shifted time
    shifted_calls = [call for call in provider.calls if not call[2]]
    assert len(shifted_calls) == 1
    assert shifted_calls[0][0] == pytest.approx(INFERIOR, abs=1e-6)
    assert provider.calls[-1] == shifted_calls[0]


def test_near_inner_conjunction_is_left_alone() -> None:
    provider = conjunction_ephemeris(CelestialBody.VENUS, SUPERIOR, distance_au=0.27)

    result = find_conjunction(provider, CelestialBody.VENUS, EventType.EVENING_LAST, START)

    assert result.disambiguated is False
    assert result.jd == pytest.approx(SUPERIOR, abs=1e-6)
    assert result.disambiguation_failed is False


@pytest.mark.parametrize(
    "overrides",
    [
        {"body": CelestialBody.MARS},
        {"event_type": EventType.EVENING_FIRST},
        {"event_type": EventType.MORNING_LAST},
        {"aspect_deg": 180.0},
        {"distance_au": 0.8},
    ],
)
def test_rule_only_applies_to_far_inner_conjunctions(overrides: dict[str, object]) -> None:
    result = _result(**overrides)
    provider = LinearEphemeris({})

    assert needs_disambiguation(result) is False
    assert disambiguate_inferior(provider, result, VENUS_PERIOD) is result
    assert provider.calls == []


def test_threshold_is_overridable() -> None:
    provider = conjunction_ephemeris(CelestialBody.VENUS, SUPERIOR, distance_au=1.2)
    finder = ConjunctionFinder(provider, inferior_threshold_au=1.5)

    result = finder.find(CelestialBody.VENUS, EventType.MORNING_FIRST, START)

    assert result.disambiguated is False


def test_corrective_query_failure_propagates() -> None:
    class FailingShift(LinearEphemeris):
        def position(self, jd, body, *, with_speed=True):  # type: ignore[override]
            if not with_speed:
                raise EphemerisUnavailableError("outside coverage", jd=jd, body=body)
            return super().position(jd, body, with_speed=with_speed)

    base = conjunction_ephemeris(CelestialBody.VENUS, SUPERIOR, distance_au=1.2)
    provider = FailingShift(base.tracks)

    with pytest.raises(EphemerisUnavailableError) as excinfo:
        find_conjunction(provider, CelestialBody.VENUS, EventType.MORNING_FIRST, START)

    assert excinfo.value.jd == pytest.approx(INFERIOR, abs=1e-6)


def test_shift_that_stays_far_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    provider = conjunction_ephemeris(CelestialBody.VENUS, SUPERIOR, distance_au=1.2)

    with caplog.at_level(logging.WARNING, logger="heliacal.engine.conjunction"):
        result = find_conjunction(
            provider, CelestialBody.VENUS, EventType.MORNING_FIRST, START
        )

    assert result.disambiguated is True
    assert result.distance_au == pytest.approx(1.2)
    assert result.disambiguation_failed is True
    assert any("still exceeds" in record.getMessage() for record in caplog.records)
