"""Visibility and twilight services backed by Swiss Ephemeris.

``swe.vis_limit_mag`` evaluates the Schaefer limiting-magnitude model for a
body at one instant; ``swe.rise_trans`` gives the Sun's rising and setting
times that anchor each daily trial of the heliacal search.
"""

from __future__ import annotations

import logging
from time import perf_counter
from typing import Protocol, runtime_checkable

from ..core.bodies import CelestialBody
from ..errors import EphemerisUnavailableError
from ..ephemeris.provider import configure_ephemeris_path
from ..ephemeris.swe import swe
from ..observability import EPHEMERIS_QUERY_DURATION
from .models import AtmosphereModel, ObserverLocation, ObserverOptics, VisibilityReading

__all__ = [
    "SwissVisibilityService",
    "TwilightLocator",
    "VisibilityService",
]

LOG = logging.getLogger(__name__)

# Result code of vis_limit_mag and rise_trans meaning "no valid value".
_SWE_BELOW_HORIZON = -2


@runtime_checkable
class VisibilityService(Protocol):
    """Scores how far a body is above the naked-eye visibility threshold."""

    def visibility_margin(
        self,
        jd: float,
        body: CelestialBody,
        location: ObserverLocation,
        atmosphere: AtmosphereModel,
        optics: ObserverOptics,
    ) -> VisibilityReading: ...


@runtime_checkable
class TwilightLocator(Protocol):
    """Finds the Sun's next rise (``morning=True``) or set after ``jd``."""

    def twilight(
        self,
        jd: float,
        location: ObserverLocation,
        atmosphere: AtmosphereModel,
        *,
        morning: bool,
    ) -> float | None: ...


class SwissVisibilityService:
    """Implements :class:`VisibilityService` and :class:`TwilightLocator`."""

    def __init__(self, ephemeris_path: str | None = None) -> None:
        self.ephemeris_path = configure_ephemeris_path(ephemeris_path)
        self._flags = int(swe.FLG_SWIEPH)

    def visibility_margin(
        self,
        jd: float,
        body: CelestialBody,
        location: ObserverLocation,
        atmosphere: AtmosphereModel,
        optics: ObserverOptics,
    ) -> VisibilityReading:
        start = perf_counter()
        try:
            status, dret = swe.vis_limit_mag(
                float(jd),
                location.as_geopos(),
                atmosphere.as_atmo(),
                optics.as_observer(),
                body.value,
                self._flags,
            )
        except swe.Error as exc:
            raise EphemerisUnavailableError(
                f"visibility of {body.value} unavailable at JD {jd:.5f}: {exc}",
                jd=jd,
                body=body,
            ) from exc
        finally:
            EPHEMERIS_QUERY_DURATION.labels(operation="visibility").observe(
                perf_counter() - start
            )

        if int(status) == _SWE_BELOW_HORIZON:
            return VisibilityReading.horizon(float(jd))
        limiting = float(dret[0])
        magnitude = float(dret[7])
        return VisibilityReading(
            jd=float(jd),
            margin=limiting - magnitude,
            below_horizon=False,
            limiting_magnitude=limiting,
            object_magnitude=magnitude,
        )

    def twilight(
        self,
        jd: float,
        location: ObserverLocation,
        atmosphere: AtmosphereModel,
        *,
        morning: bool,
    ) -> float | None:
        event = swe.CALC_RISE if morning else swe.CALC_SET
        start = perf_counter()
        try:
            status, tret = swe.rise_trans(
                float(jd),
                swe.SUN,
                int(event),
                location.as_geopos(),
                atmosphere.pressure_hpa,
                atmosphere.temperature_c,
                self._flags,
            )
        except swe.Error as exc:
            raise EphemerisUnavailableError(
                f"sun {'rise' if morning else 'set'} unavailable after JD {jd:.5f}: {exc}",
                jd=jd,
                body=CelestialBody.SUN,
            ) from exc
        finally:
            EPHEMERIS_QUERY_DURATION.labels(operation="twilight").observe(
                perf_counter() - start
            )

        if int(status) == _SWE_BELOW_HORIZON:
            LOG.debug("Sun circumpolar or never rising after JD %.3f", jd)
            return None
        return float(tret[0])
