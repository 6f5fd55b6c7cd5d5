"""Observer, atmosphere and optics descriptions passed to visibility models."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "AtmosphereModel",
    "ObserverLocation",
    "ObserverOptics",
    "VisibilityReading",
]


@dataclass(frozen=True, slots=True)
class ObserverLocation:
    """Geographic observer coordinates (degrees, metres)."""

    latitude_deg: float
    longitude_deg: float
    elevation_m: float = 0.0

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude_deg <= 90.0:
            raise ValueError("latitude_deg must be between -90 and 90")
        if not -180.0 <= self.longitude_deg <= 360.0:
            raise ValueError("longitude_deg must be between -180 and 360")

    def as_geopos(self) -> tuple[float, float, float]:
        """Return ``(longitude, latitude, elevation)`` in Swiss Ephemeris order."""

        return (self.longitude_deg, self.latitude_deg, self.elevation_m)


@dataclass(frozen=True, slots=True)
class AtmosphereModel:
    """Atmospheric conditions at the observing site.

    ``extinction`` is forwarded untouched: values below 1 are read as an
    extinction coefficient, larger values as meteorological range in km,
    and zero lets the model derive it from the other parameters.
    """

    pressure_hpa: float = 1013.25
    temperature_c: float = 15.0
    relative_humidity: float = 40.0
    extinction: float = 0.0

    def as_atmo(self) -> tuple[float, float, float, float]:
        return (
            self.pressure_hpa,
            self.temperature_c,
            self.relative_humidity,
            self.extinction,
        )


@dataclass(frozen=True, slots=True)
class ObserverOptics:
    """Observer physiology and optical aid.

    ``magnification``, ``aperture_mm`` and ``transmission`` only matter
    when an optical instrument is used; zeros select naked-eye defaults.
    """

    age_years: float = 36.0
    snellen_ratio: float = 1.0
    binocular: bool = False
    magnification: float = 1.0
    aperture_mm: float = 0.0
    transmission: float = 0.0

    def as_observer(self) -> tuple[float, float, float, float, float, float]:
        return (
            self.age_years,
            self.snellen_ratio,
            1.0 if self.binocular else 0.0,
            self.magnification,
            self.aperture_mm,
            self.transmission,
        )


@dataclass(frozen=True, slots=True)
class VisibilityReading:
    """One limiting-magnitude evaluation.

    ``margin`` is limiting magnitude minus the object's apparent magnitude;
    positive means visible.  It is ``None`` while the object is below the
    horizon.
    """

    jd: float
    margin: float | None
    below_horizon: bool = False
    limiting_magnitude: float | None = None
    object_magnitude: float | None = None

    @property
    def visible(self) -> bool:
        return not self.below_horizon and self.margin is not None and self.margin > 0.0

    @classmethod
    def horizon(cls, jd: float) -> "VisibilityReading":
        """Return a below-horizon reading at ``jd``."""

        return cls(jd=jd, margin=None, below_horizon=True)
