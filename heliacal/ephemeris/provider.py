"""Position query service consumed by the conjunction finder."""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass
from time import perf_counter
from typing import Literal, Protocol, runtime_checkable

from ..core.bodies import CelestialBody
from ..errors import EphemerisUnavailableError
from ..observability import EPHEMERIS_QUERY_DURATION
from .swe import swe
from .utils import get_se_ephe_path

__all__ = [
    "EphemerisSample",
    "PositionProvider",
    "SwissPositionProvider",
    "configure_ephemeris_path",
]

LOG = logging.getLogger(__name__)

_PATH_LOCK = threading.Lock()
_CONFIGURED_PATH: list[str | None] = []


@dataclass(frozen=True, slots=True)
class EphemerisSample:
    """Geocentric ecliptic position of one body at one instant."""

    jd: float
    longitude_deg: float
    latitude_deg: float
    distance_au: float
    speed_longitude_deg_per_day: float = 0.0


@runtime_checkable
class PositionProvider(Protocol):
    """Anything able to answer ``position(jd, body)`` queries.

    Implementations raise :class:`~heliacal.errors.EphemerisUnavailableError`
    when ``jd`` falls outside their coverage.
    """

    def position(
        self, jd: float, body: CelestialBody, *, with_speed: bool = True
    ) -> EphemerisSample: ...


def configure_ephemeris_path(path: str | None = None) -> str | None:
    """Point Swiss Ephemeris at ``path`` (or a discovered directory) once.

    The path is process-wide state inside the C library; later calls with
    the same resolved directory are no-ops.
    """

    resolved = get_se_ephe_path(path)
    with _PATH_LOCK:
        if _CONFIGURED_PATH and _CONFIGURED_PATH[0] == resolved:
            return resolved
        if resolved:
            swe().set_ephe_path(resolved)
            LOG.debug("Swiss Ephemeris path set to %s", resolved)
        else:
            LOG.debug("No ephemeris files found; using built-in Moshier theory")
        _CONFIGURED_PATH[:] = [resolved]
    return resolved


class SwissPositionProvider:
    """:class:`PositionProvider` backed by :func:`swisseph.calc`.

    Parameters
    ----------
    ephemeris_path:
        Directory holding ``.se1`` files. ``None`` triggers discovery from the
        environment and well-known locations.
    time_scale:
        ``"TT"`` evaluates ``jd`` as Terrestrial Time (``swe.calc``),
        ``"UT"`` as Universal Time (``swe.calc_ut``).
    prefer_moshier:
        Skip ephemeris files and use the analytical Moshier theory.
    """

    def __init__(
        self,
        ephemeris_path: str | None = None,
        *,
        time_scale: Literal["TT", "UT"] = "TT",
        prefer_moshier: bool = False,
    ) -> None:
        if time_scale not in ("TT", "UT"):
            raise ValueError(f"time_scale must be 'TT' or 'UT', got {time_scale!r}")
        self.time_scale = time_scale
        self.ephemeris_path = None if prefer_moshier else configure_ephemeris_path(
            ephemeris_path
        )
        self._base_flags = int(swe.FLG_MOSEPH if prefer_moshier else swe.FLG_SWIEPH)

    def position(
        self, jd: float, body: CelestialBody, *, with_speed: bool = True
    ) -> EphemerisSample:
        flags = self._base_flags
        if with_speed:
            flags |= int(swe.FLG_SPEED)
        calc = swe.calc if self.time_scale == "TT" else swe.calc_ut
        start = perf_counter()
        try:
            values, _retflag = calc(float(jd), body.swe_code, flags)
        except swe.Error as exc:
            raise EphemerisUnavailableError(
                f"{body.value} position unavailable at JD {jd:.5f}: {exc}",
                jd=jd,
                body=body,
            ) from exc
        finally:
            EPHEMERIS_QUERY_DURATION.labels(operation="position").observe(
                perf_counter() - start
            )

        longitude = float(values[0])
        if not math.isfinite(longitude):
            raise EphemerisUnavailableError(
                f"{body.value} position is not finite at JD {jd:.5f}",
                jd=jd,
                body=body,
            )
        return EphemerisSample(
            jd=float(jd),
            longitude_deg=longitude % 360.0,
            latitude_deg=float(values[1]),
            distance_au=float(values[2]),
            speed_longitude_deg_per_day=float(values[3]) if with_speed else 0.0,
        )
