from __future__ import annotations

import pytest

from heliacal.visibility.models import (
    AtmosphereModel,
    ObserverLocation,
    ObserverOptics,
    VisibilityReading,
)


def test_location_orders_geopos_for_swiss_ephemeris() -> None:
    location = ObserverLocation(latitude_deg=-33.9, longitude_deg=18.4, elevation_m=10.0)

    assert location.as_geopos() == (18.4, -33.9, 10.0)


@pytest.mark.parametrize(
    ("lat", "lon"),
    [(91.0, 0.0), (-90.5, 0.0), (0.0, -181.0), (0.0, 360.5)],
)
def test_location_rejects_out_of_range(lat: float, lon: float) -> None:
    with pytest.raises(ValueError):
        ObserverLocation(latitude_deg=lat, longitude_deg=lon)


def test_atmosphere_and_optics_tuples() -> None:
    assert AtmosphereModel().as_atmo() == (1013.25, 15.0, 40.0, 0.0)
    optics = ObserverOptics(age_years=60.0, binocular=True, magnification=7.0, aperture_mm=50.0)
    assert optics.as_observer() == (60.0, 1.0, 1.0, 7.0, 50.0, 0.0)


@pytest.mark.parametrize(
    ("reading", "visible"),
    [
        (VisibilityReading(jd=1.0, margin=0.4), True),
        (VisibilityReading(jd=1.0, margin=0.0), False),
        (VisibilityReading(jd=1.0, margin=-2.0), False),
        (VisibilityReading.horizon(1.0), False),
    ],
)
def test_reading_visibility(reading: VisibilityReading, visible: bool) -> None:
    assert reading.visible is visible


def test_horizon_reading_has_no_margin() -> None:
    reading = VisibilityReading.horizon(2451545.0)

    assert reading.below_horizon
    assert reading.margin is None
    assert reading.jd == 2451545.0
