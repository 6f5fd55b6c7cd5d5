from __future__ import annotations

import pytest

from heliacal.core.angles import delta_angle, norm360, normalize_residual
from heliacal.core.bodies import CelestialBody
from heliacal.core.events import EventType
from heliacal.engine.conjunction import find_conjunction
from tests.helpers import conjunction_ephemeris

hypothesis = pytest.importorskip("hypothesis")
given = hypothesis.given
st = hypothesis.strategies
settings = hypothesis.settings

ANGLES = st.floats(
    min_value=-1e6,
    max_value=1e6,
    allow_nan=False,
    allow_infinity=False,
)


@settings(deadline=None)
@given(ANGLES)
def test_normalize_residual_half_open_range(angle: float) -> None:
    value = normalize_residual(angle)
    assert -180.0 < value <= 180.0


@settings(deadline=None)
@given(ANGLES)
def test_normalize_residual_preserves_direction(angle: float) -> None:
    value = normalize_residual(angle)
    difference = norm360(value - angle)
    assert min(difference, 360.0 - difference) < 1e-6


@settings(deadline=None)
@given(ANGLES, ANGLES)
def test_delta_angle_is_antisymmetric_off_the_cut(a: float, b: float) -> None:
    forward = delta_angle(a, b)
    hypothesis.assume(abs(abs(forward) - 180.0) > 1e-6)
    assert delta_angle(b, a) == pytest.approx(-forward, abs=1e-6)


@settings(deadline=None, max_examples=60)
@given(
    conjunction_offset=st.floats(min_value=-100.0, max_value=100.0),
    longitude=st.floats(min_value=0.0, max_value=359.999),
    body_rate=st.floats(min_value=1.1, max_value=4.0),
)
def test_finder_residual_within_tolerance(
    conjunction_offset: float, longitude: float, body_rate: float
) -> None:
    start = 2451697.5
    provider = conjunction_ephemeris(
        CelestialBody.MERCURY,
        start + conjunction_offset,
        body_rate=body_rate,
        longitude_deg=longitude,
    )

    result = find_conjunction(
        provider, CelestialBody.MERCURY, EventType.EVENING_FIRST, start
    )

    assert abs(result.residual_deg) <= 0.5
    assert result.iterations <= 50


def test_documented_examples() -> None:
    assert normalize_residual(359.0) == pytest.approx(-1.0)
    assert normalize_residual(-359.0) == pytest.approx(1.0)
    assert normalize_residual(180.0) == 180.0
    assert normalize_residual(-180.0) == 180.0
    assert normalize_residual(540.0) == 180.0
    assert normalize_residual(0.0) == 0.0
