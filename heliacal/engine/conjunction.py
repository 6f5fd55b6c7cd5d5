"""Newton-iteration solver for conjunctions and oppositions with the Sun.

The solver seeds itself from :mod:`heliacal.engine.tables`, then drives the
normalised longitude difference ``body - sun - aspect`` to zero using the
relative longitude speed as the derivative.  For Mercury and Venus a
converged solution far from Earth is the superior conjunction, which is
shifted back by half a synodic period onto the inferior one.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace

from ..config.settings import INFERIOR_CONJUNCTION_MAX_DISTANCE_AU, Settings
from ..core.angles import delta_angle
from ..core.bodies import CelestialBody
from ..core.events import EventPair, EventType
from ..ephemeris.provider import EphemerisSample, PositionProvider
from ..errors import HeliacalError, NonConvergenceError
from ..observability import CONJUNCTION_ITERATIONS, record_error
from .tables import SynodicTables, get_tables

__all__ = [
    "ConjunctionFinder",
    "ConjunctionResult",
    "INFERIOR_CONJUNCTION_MAX_DISTANCE_AU",
    "SolverOptions",
    "aspect_for",
    "disambiguate_inferior",
    "find_conjunction",
    "initial_estimate",
    "needs_disambiguation",
]

LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SolverOptions:
    """Bounds applied to every Newton solve."""

    max_iterations: int = 50
    residual_tolerance_deg: float = 0.5
    min_relative_speed: float = 1e-9
    max_correction_days: float = 3650.0

    def __post_init__(self) -> None:
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        if self.residual_tolerance_deg <= 0.0:
            raise ValueError("residual_tolerance_deg must be positive")

    @classmethod
    def from_settings(cls, settings: Settings) -> "SolverOptions":
        cfg = settings.solver
        return cls(
            max_iterations=cfg.max_iterations,
            residual_tolerance_deg=cfg.residual_tolerance_deg,
            min_relative_speed=cfg.min_relative_speed,
            max_correction_days=cfg.max_correction_days,
        )


@dataclass(frozen=True, slots=True)
class ConjunctionResult:
    """Converged conjunction (or opposition) of ``body`` with the Sun.

    Attributes
    ----------
    jd:
        Time of the aspect, on the time scale of the position provider.
    distance_au:
        Geocentric distance of the body at ``jd``.
    residual_deg:
        Normalised ``body - sun - aspect`` at the Newton solution.  When
        ``disambiguated`` is set this still describes the solution at
        ``unadjusted_jd``; the half-period shift re-queries distance only.
    iterations:
        Newton corrections applied before the residual settled.
    disambiguation_failed:
        The half-period shift was applied but the shifted instant is still
        farther than the inferior-conjunction threshold.
    """

    body: CelestialBody
    event_type: EventType
    jd: float
    distance_au: float
    residual_deg: float
    aspect_deg: float
    iterations: int
    initial_estimate_jd: float
    disambiguated: bool = False
    unadjusted_jd: float | None = None
    disambiguation_failed: bool = False


def aspect_for(body: CelestialBody, event_type: EventType) -> float:
    """Return 180° for outer-planet evening-first/morning-last, else 0°."""

    if body.is_outer and event_type.pair is EventPair.EVENING_FIRST_MORNING_LAST:
        return 180.0
    return 0.0


def initial_estimate(epoch_jd: float, period_days: float, start_jd: float) -> float:
    """Advance ``epoch_jd`` by whole synodic periods past ``start_jd``.

    The count is ``floor((start - epoch) / period) + 1``, so the estimate is
    one full period beyond the most recent multiple at or before ``start_jd``.

    >>> initial_estimate(100.0, 10.0, 100.0)
    110.0
    >>> initial_estimate(100.0, 10.0, 75.0)
    80.0
    """

    cycles = math.floor((start_jd - epoch_jd) / period_days + 1.0)
    return epoch_jd + cycles * period_days


def needs_disambiguation(
    result: ConjunctionResult, threshold_au: float = INFERIOR_CONJUNCTION_MAX_DISTANCE_AU
) -> bool:
    """Return ``True`` when ``result`` looks like a superior conjunction."""

    return (
        result.body.is_inner
        and result.event_type.pair is EventPair.MORNING_FIRST_EVENING_LAST
        and result.aspect_deg == 0.0
        and result.distance_au > threshold_au
    )


def disambiguate_inferior(
    provider: PositionProvider,
    result: ConjunctionResult,
    period_days: float,
    threshold_au: float = INFERIOR_CONJUNCTION_MAX_DISTANCE_AU,
) -> ConjunctionResult:
    """Shift a superior-conjunction solution by ``-period/2``.

    Exactly one distance query is issued at the shifted time; its failure
    propagates.  Results that do not qualify are returned unchanged.
    """

    if not needs_disambiguation(result, threshold_au):
        return result

    shifted_jd = result.jd - period_days / 2.0
    sample = provider.position(shifted_jd, result.body, with_speed=False)
    failed = sample.distance_au > threshold_au
    if failed:
        LOG.warning(
            "%s: distance %.3f AU at JD %.4f still exceeds %.2f AU after "
            "half-period shift from JD %.4f",
            result.body.value,
            sample.distance_au,
            shifted_jd,
            threshold_au,
            result.jd,
        )
    else:
        LOG.debug(
            "%s: superior conjunction at JD %.4f (%.3f AU) moved to JD %.4f (%.3f AU)",
            result.body.value,
            result.jd,
            result.distance_au,
            shifted_jd,
            sample.distance_au,
        )
    return replace(
        result,
        jd=shifted_jd,
        distance_au=sample.distance_au,
        disambiguated=True,
        unadjusted_jd=result.jd,
        disambiguation_failed=failed,
    )


class ConjunctionFinder:
    """Locate Sun conjunctions and oppositions for heliacal searches.

    Parameters
    ----------
    provider:
        Position service answering ``position(jd, body, with_speed=...)``.
    tables:
        Seed epochs and synodic periods; defaults to the ``reference`` preset.
    options:
        Iteration bounds; see :class:`SolverOptions`.
    inferior_threshold_au:
        Distance above which an inner-planet solution is treated as a
        superior conjunction.
    """

    def __init__(
        self,
        provider: PositionProvider,
        *,
        tables: SynodicTables | None = None,
        options: SolverOptions | None = None,
        inferior_threshold_au: float = INFERIOR_CONJUNCTION_MAX_DISTANCE_AU,
    ) -> None:
        self.provider = provider
        self.tables = tables or get_tables()
        self.options = options or SolverOptions()
        self.inferior_threshold_au = float(inferior_threshold_au)

    @classmethod
    def from_settings(
        cls, provider: PositionProvider, settings: Settings
    ) -> "ConjunctionFinder":
        return cls(
            provider,
            tables=get_tables(settings.tables.preset),
            options=SolverOptions.from_settings(settings),
            inferior_threshold_au=settings.disambiguation.inferior_distance_threshold_au,
        )

    def find(
        self,
        body: CelestialBody,
        event_type: EventType,
        start_jd: float,
    ) -> ConjunctionResult:
        """Return the conjunction anchoring ``event_type`` for ``body``.

        Raises
        ------
        UnsupportedBodyError
            When the tables carry no epoch or period for ``body``.
        NonConvergenceError
            When the iteration bound, speed guard or step guard trips.
        EphemerisUnavailableError
            Propagated from the position provider.
        """

        body = CelestialBody.parse(body)
        event_type = EventType.parse(event_type)
        try:
            period = self.tables.synodic_period(body)
            epoch = self.tables.reference_epoch(body, event_type.pair)
            seed = initial_estimate(epoch, period, float(start_jd))
            result = self._solve(body, event_type, seed, aspect_for(body, event_type))
            result = disambiguate_inferior(
                self.provider, result, period, self.inferior_threshold_au
            )
        except HeliacalError as exc:
            record_error("conjunction", exc)
            raise

        CONJUNCTION_ITERATIONS.labels(body=body.value).observe(result.iterations)
        LOG.info(
            "%s %s conjunction at JD %.5f (residual %.4f°, %d iterations, %.3f AU)",
            body.value,
            event_type.label,
            result.jd,
            result.residual_deg,
            result.iterations,
            result.distance_au,
        )
        return result

    def _samples(self, jd: float, body: CelestialBody) -> tuple[EphemerisSample, EphemerisSample]:
        return (
            self.provider.position(jd, body, with_speed=True),
            self.provider.position(jd, CelestialBody.SUN, with_speed=True),
        )

    def _solve(
        self,
        body: CelestialBody,
        event_type: EventType,
        seed_jd: float,
        aspect_deg: float,
    ) -> ConjunctionResult:
        opts = self.options
        jd = seed_jd
        residual = math.nan
        settled = False

        # One extra pass confirms the residual after the final correction.
        for step in range(opts.max_iterations + 1):
            target, sun = self._samples(jd, body)
            residual = delta_angle(sun.longitude_deg + aspect_deg, target.longitude_deg)
            if settled and abs(residual) <= opts.residual_tolerance_deg:
                return ConjunctionResult(
                    body=body,
                    event_type=event_type,
                    jd=jd,
                    distance_au=target.distance_au,
                    residual_deg=residual,
                    aspect_deg=aspect_deg,
                    iterations=step,
                    initial_estimate_jd=seed_jd,
                )
            if step == opts.max_iterations:
                break

            relative_speed = (
                target.speed_longitude_deg_per_day - sun.speed_longitude_deg_per_day
            )
            if not (math.isfinite(residual) and math.isfinite(relative_speed)):
                raise NonConvergenceError(
                    f"{body.value}: non-finite residual or speed at JD {jd:.5f}",
                    body=body,
                    iterations=step,
                    last_jd=jd,
                    last_residual_deg=residual,
                )
            if abs(relative_speed) <= opts.min_relative_speed:
                raise NonConvergenceError(
                    f"{body.value}: relative speed {relative_speed:.3e}°/day "
                    f"vanishes at JD {jd:.5f}",
                    body=body,
                    iterations=step,
                    last_jd=jd,
                    last_residual_deg=residual,
                )
            correction = residual / relative_speed
            if abs(correction) > opts.max_correction_days:
                raise NonConvergenceError(
                    f"{body.value}: Newton step of {correction:.1f} days at JD "
                    f"{jd:.5f} exceeds {opts.max_correction_days:.0f}",
                    body=body,
                    iterations=step,
                    last_jd=jd,
                    last_residual_deg=residual,
                )

            jd -= correction
            settled = abs(residual) <= opts.residual_tolerance_deg
            LOG.debug(
                "%s iteration %d: residual %.6f°, step %.6f d -> JD %.6f",
                body.value,
                step + 1,
                residual,
                correction,
                jd,
            )

        raise NonConvergenceError(
            f"{body.value}: no convergence within {opts.max_iterations} iterations "
            f"(last residual {residual:.4f}° at JD {jd:.5f})",
            body=body,
            iterations=opts.max_iterations,
            last_jd=jd,
            last_residual_deg=residual,
        )


def find_conjunction(
    provider: PositionProvider,
    body: CelestialBody | str,
    event_type: EventType | int | str,
    start_jd: float,
    *,
    tables: SynodicTables | None = None,
    options: SolverOptions | None = None,
    inferior_threshold_au: float = INFERIOR_CONJUNCTION_MAX_DISTANCE_AU,
) -> ConjunctionResult:
    """Convenience wrapper around :meth:`ConjunctionFinder.find`."""

    finder = ConjunctionFinder(
        provider,
        tables=tables,
        options=options,
        inferior_threshold_au=inferior_threshold_au,
    )
    return finder.find(CelestialBody.parse(body), EventType.parse(event_type), start_jd)
