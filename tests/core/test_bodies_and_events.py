from __future__ import annotations

import datetime as dt

import pytest

from heliacal.core.bodies import CelestialBody
from heliacal.core.events import EventPair, EventType
from heliacal.core.time import datetime_from_jd, julian_day, parse_moment


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Venus", CelestialBody.VENUS),
        ("MERCURY", CelestialBody.MERCURY),
        ("mercur", CelestialBody.MERCURY),
        ("neptun", CelestialBody.NEPTUNE),
        ("mean node", CelestialBody.MEAN_NODE),
        ("mean-node", CelestialBody.MEAN_NODE),
        (CelestialBody.MARS, CelestialBody.MARS),
    ],
)
def test_body_parse(raw: str, expected: CelestialBody) -> None:
    assert CelestialBody.parse(raw) is expected


def test_body_parse_rejects_unknown_names() -> None:
    with pytest.raises(ValueError):
        CelestialBody.parse("vulcan")
    with pytest.raises(ValueError):
        CelestialBody.parse("")


def test_body_classification() -> None:
    assert CelestialBody.VENUS.is_inner and not CelestialBody.VENUS.is_outer
    assert CelestialBody.SATURN.is_outer and not CelestialBody.SATURN.is_inner
    assert not CelestialBody.MOON.is_inner and not CelestialBody.MOON.is_outer
    assert CelestialBody.SUN.swe_code == 0
    assert CelestialBody.MEAN_NODE.swe_code == 10
    assert CelestialBody.MEAN_NODE.display_name == "Mean Node"


@pytest.mark.parametrize(
    ("event_type", "pair", "morning", "direction"),
    [
        (EventType.MORNING_FIRST, EventPair.MORNING_FIRST_EVENING_LAST, True, 1),
        (EventType.EVENING_LAST, EventPair.MORNING_FIRST_EVENING_LAST, False, -1),
        (EventType.EVENING_FIRST, EventPair.EVENING_FIRST_MORNING_LAST, False, 1),
        (EventType.MORNING_LAST, EventPair.EVENING_FIRST_MORNING_LAST, True, -1),
    ],
)
def test_event_type_properties(
    event_type: EventType, pair: EventPair, morning: bool, direction: int
) -> None:
    assert event_type.pair is pair
    assert event_type.is_morning is morning
    assert event_type.day_direction == direction


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (1, EventType.MORNING_FIRST),
        ("2", EventType.EVENING_LAST),
        ("evening-first", EventType.EVENING_FIRST),
        ("Morning Last", EventType.MORNING_LAST),
        ("MORNING_FIRST", EventType.MORNING_FIRST),
    ],
)
def test_event_type_parse(raw: object, expected: EventType) -> None:
    assert EventType.parse(raw) is expected  # type: ignore[arg-type]


def test_event_type_parse_rejects_unknown() -> None:
    with pytest.raises(ValueError):
        EventType.parse("acronychal")
    with pytest.raises(ValueError):
        EventType.parse(7)
    assert EventType.MORNING_FIRST.label == "morning first"


def test_julian_day_round_trip() -> None:
    j2000 = dt.datetime(2000, 1, 1, 12, tzinfo=dt.UTC)
    assert julian_day(j2000) == pytest.approx(2451545.0)
    assert datetime_from_jd(2451545.0) == j2000


def test_parse_moment_accepts_jd_and_iso() -> None:
    assert parse_moment("2451697.5") == 2451697.5
    assert parse_moment("2000-01-01T12:00:00Z") == pytest.approx(2451545.0)
    assert parse_moment("2000-06-01") == pytest.approx(2451696.5)
    with pytest.raises(ValueError):
        parse_moment("next tuesday")
