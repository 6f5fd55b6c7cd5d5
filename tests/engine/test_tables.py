from __future__ import annotations

import pytest

from heliacal.core.bodies import CelestialBody
from heliacal.core.events import EventPair, EventType
from heliacal.engine.tables import DEFAULT_PRESET, available_presets, get_tables
from heliacal.errors import UnsupportedBodyError


def test_default_preset_is_reference() -> None:
    assert DEFAULT_PRESET == "reference"
    assert get_tables() is get_tables("reference")
    assert set(available_presets()) == {"reference", "swiss"}


def test_reference_rows() -> None:
    tables = get_tables("reference")

    assert tables.synodic_period(CelestialBody.VENUS) == 224.701
    assert tables.reference_epoch(CelestialBody.VENUS, EventType.MORNING_FIRST) == 2451996.0
    assert tables.reference_epoch(
        CelestialBody.MARS, EventPair.EVENING_FIRST_MORNING_LAST
    ) == 2452179.0
    assert tables.reference_epoch(CelestialBody.MARS, EventType.EVENING_LAST) == 2451310.0


def test_event_types_share_a_row_per_pair() -> None:
    tables = get_tables("swiss")
    for body in (CelestialBody.MERCURY, CelestialBody.SATURN):
        assert tables.reference_epoch(body, EventType.MORNING_FIRST) == tables.reference_epoch(
            body, EventType.EVENING_LAST
        )
        assert tables.reference_epoch(body, EventType.EVENING_FIRST) == tables.reference_epoch(
            body, EventType.MORNING_LAST
        )


@pytest.mark.parametrize(
    "body",
    [CelestialBody.SUN, CelestialBody.MEAN_NODE, CelestialBody.MOON, CelestialBody.PLUTO],
)
def test_reference_preset_rejects_bodies_without_rows(body: CelestialBody) -> None:
    tables = get_tables("reference")
    assert not tables.supports(body)
    with pytest.raises(UnsupportedBodyError):
        tables.synodic_period(body)


def test_pluto_has_an_epoch_but_no_period_in_reference() -> None:
    tables = get_tables("reference")
    assert tables.reference_epoch(CelestialBody.PLUTO, EventType.MORNING_FIRST) == 2451629.0


def test_swiss_preset_covers_the_moon() -> None:
    tables = get_tables("swiss")
    assert tables.supports(CelestialBody.MOON)
    assert tables.synodic_period(CelestialBody.MOON) == pytest.approx(29.530588853)
    with pytest.raises(UnsupportedBodyError):
        tables.reference_epoch(CelestialBody.PLUTO, EventType.MORNING_FIRST)


def test_tables_are_read_only() -> None:
    tables = get_tables()
    with pytest.raises(TypeError):
        tables.synodic_periods[CelestialBody.VENUS] = 1.0  # type: ignore[index]
    with pytest.raises(AttributeError):
        tables.name = "other"  # type: ignore[misc]


def test_unknown_preset() -> None:
    with pytest.raises(ValueError, match="Unknown table preset"):
        get_tables("ptolemaic")
    assert get_tables(" Swiss ").name == "swiss"
