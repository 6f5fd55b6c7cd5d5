"""Heliacal rising and setting search.

Each search cycle anchors on the conjunction returned by
:class:`~heliacal.engine.conjunction.ConjunctionFinder` and steps whole days
away from it, scoring the body with a limiting-magnitude model at twilight.
The first change from invisible to visible along the scan brackets the
event, which is then refined by linear interpolation on the margins.

Morning-first and evening-first events follow their conjunction, so the
scan runs forward in time.  Evening-last and morning-last events precede it
and the scan runs backward; in scan order the body still goes from
invisible (close to the Sun) to visible.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from ..config.settings import Settings
from ..core.bodies import CelestialBody
from ..core.events import EventPair, EventType
from ..ephemeris.provider import PositionProvider
from ..errors import HeliacalError, SearchCancelledError, UnsupportedEventError
from ..observability import SEARCH_OUTCOMES, SEARCH_TRIALS, record_error
from ..visibility.models import (
    AtmosphereModel,
    ObserverLocation,
    ObserverOptics,
    VisibilityReading,
)
from ..visibility.service import TwilightLocator, VisibilityService
from .conjunction import ConjunctionFinder, ConjunctionResult, SolverOptions
from .tables import SynodicTables

__all__ = [
    "BodyBelowHorizonThroughout",
    "HeliacalEvent",
    "HeliacalSearch",
    "NoEventFound",
    "SearchOptions",
    "SearchOutcome",
    "SearchState",
    "find_heliacal_event",
    "lead_days",
    "scan_days",
    "scan_offset_days",
]

LOG = logging.getLogger(__name__)

_MINUTES_PER_DAY = 1440.0

_SCAN_DAYS: Mapping[CelestialBody, int] = MappingProxyType(
    {
        CelestialBody.MOON: 16,
        CelestialBody.MERCURY: 60,
        CelestialBody.VENUS: 300,
        CelestialBody.MARS: 400,
    }
)
_DEFAULT_SCAN_DAYS = 300

# Venus can already be visible at inferior conjunction; its scan starts this
# many days on the near side of the conjunction.
_PRE_CONJUNCTION_DAYS: Mapping[CelestialBody, float] = MappingProxyType(
    {CelestialBody.VENUS: 30.0}
)

_NO_CHANGE = "no visibility change within the search window"
_ALWAYS_BELOW = "body below the horizon at every trial"


def scan_days(body: CelestialBody) -> int:
    """Maximum number of days scanned away from one conjunction."""

    return _SCAN_DAYS.get(body, _DEFAULT_SCAN_DAYS)


def scan_offset_days(body: CelestialBody) -> float:
    """Days before the conjunction (in scan order) at which the scan starts."""

    return _PRE_CONJUNCTION_DAYS.get(body, 0.0)


def lead_days(body: CelestialBody) -> float:
    """Days before the requested start at which the first cycle begins."""

    return 30.0 if body is CelestialBody.MERCURY else 50.0


def _cycle_advance(body: CelestialBody, period_days: float) -> float:
    return 30.0 if body is CelestialBody.MERCURY else 0.6 * period_days


@dataclass(frozen=True, slots=True)
class SearchOptions:
    """Window and twilight sampling parameters for :class:`HeliacalSearch`."""

    horizon_synodic_periods: float = 1.0
    twilight_step_minutes: float = 5.0
    twilight_samples: int = 12
    details: bool = True

    def __post_init__(self) -> None:
        if self.horizon_synodic_periods <= 0.0:
            raise ValueError("horizon_synodic_periods must be positive")
        if self.twilight_samples < 0:
            raise ValueError("twilight_samples must be non-negative")

    @classmethod
    def from_settings(cls, settings: Settings) -> "SearchOptions":
        cfg = settings.search
        return cls(
            horizon_synodic_periods=cfg.horizon_synodic_periods,
            twilight_step_minutes=cfg.twilight_step_minutes,
            twilight_samples=cfg.twilight_samples,
            details=cfg.details,
        )


@dataclass(slots=True)
class SearchState:
    """Cursor of one scan; owned by a single :meth:`HeliacalSearch.search` call."""

    day_jd: float
    direction: int
    previous: VisibilityReading | None = None
    trials: int = 0
    below_horizon_trials: int = 0

    def advance(self) -> None:
        self.day_jd += self.direction


@dataclass(frozen=True, slots=True)
class HeliacalEvent:
    """A located heliacal event.

    ``bracket_jd`` holds the invisible and the visible trial instants (in
    scan order) and ``bracket_margins`` their margins; the invisible margin
    is ``None`` when the body was below the horizon.

    ``optimum_jd`` is the sample of the first visible day with the largest
    margin.  ``last_visible_jd`` is the last sample still visible when
    walking from the optimum toward the Sun's rise or set, where the
    brightening sky ends visibility.  Both are ``None`` when details are
    disabled.
    """

    body: CelestialBody
    event_type: EventType
    jd: float
    visible_jd: float
    conjunction: ConjunctionResult
    bracket_jd: tuple[float, float]
    bracket_margins: tuple[float | None, float]
    trials: int
    optimum_jd: float | None = None
    last_visible_jd: float | None = None

    @property
    def found(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class NoEventFound:
    """No invisible-to-visible transition inside the search window."""

    body: CelestialBody
    event_type: EventType
    start_jd: float
    horizon_jd: float
    trials: int
    reason: str = _NO_CHANGE

    @property
    def found(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class BodyBelowHorizonThroughout:
    """Every trial of the search window had the body below the horizon."""

    body: CelestialBody
    event_type: EventType
    start_jd: float
    horizon_jd: float
    trials: int
    reason: str = _ALWAYS_BELOW

    @property
    def found(self) -> bool:
        return False


SearchOutcome = HeliacalEvent | NoEventFound | BodyBelowHorizonThroughout


@dataclass(slots=True)
class _Totals:
    trials: int = 0
    below_horizon: int = 0
    seen: list[float] = field(default_factory=list)


def _margin(reading: VisibilityReading) -> float | None:
    return None if reading.below_horizon else reading.margin


def _day_details(samples: list[VisibilityReading]) -> tuple[float, float]:
    """Optimum and last visible instants of a visible day.

    ``samples`` run from the twilight anchor toward darkness, so the last
    visible instant is found by walking from the optimum back toward index 0.
    """

    visible = [index for index, sample in enumerate(samples) if sample.visible]
    optimum = max(visible, key=lambda index: samples[index].margin or 0.0)
    last = optimum
    while last > 0 and samples[last - 1].visible:
        last -= 1
    return samples[optimum].jd, samples[last].jd


def _interpolate(
    dim_jd: float, dim_margin: float | None, bright_jd: float, bright_margin: float
) -> float:
    """Zero crossing of the margin between two trials."""

    if dim_margin is None:
        return bright_jd
    span = bright_margin - dim_margin
    if span <= 0.0:
        return bright_jd
    return dim_jd + (bright_jd - dim_jd) * (-dim_margin / span)


class HeliacalSearch:
    """Find the next heliacal event of a body for one observer.

    Parameters
    ----------
    finder:
        Conjunction solver; its tables supply the synodic period.
    visibility:
        Limiting-magnitude scorer.
    twilight:
        Sun rise/set locator.  When omitted and ``visibility`` also
        implements :class:`TwilightLocator`, it is used for both.  Without
        one the trial day itself is the only sample instant.
    options:
        Window length and twilight sampling.
    should_stop:
        Polled between trial days; returning ``True`` aborts the search
        with :class:`SearchCancelledError`.
    """

    def __init__(
        self,
        finder: ConjunctionFinder,
        visibility: VisibilityService,
        *,
        twilight: TwilightLocator | None = None,
        options: SearchOptions | None = None,
        should_stop: Callable[[], bool] | None = None,
    ) -> None:
        self.finder = finder
        self.visibility = visibility
        if twilight is None and isinstance(visibility, TwilightLocator):
            twilight = visibility
        self.twilight = twilight
        self.options = options or SearchOptions()
        self.should_stop = should_stop

    @classmethod
    def from_settings(
        cls,
        provider: PositionProvider,
        visibility: VisibilityService,
        settings: Settings,
        *,
        twilight: TwilightLocator | None = None,
        should_stop: Callable[[], bool] | None = None,
    ) -> "HeliacalSearch":
        return cls(
            ConjunctionFinder.from_settings(provider, settings),
            visibility,
            twilight=twilight,
            options=SearchOptions.from_settings(settings),
            should_stop=should_stop,
        )

    @staticmethod
    def validate(body: CelestialBody, event_type: EventType) -> None:
        """Reject body/event combinations without a heliacal meaning."""

        if body in (CelestialBody.SUN, CelestialBody.MEAN_NODE):
            raise UnsupportedEventError(
                f"{body.display_name} has no heliacal events"
            )
        if (
            body is CelestialBody.MOON
            and event_type.pair is EventPair.MORNING_FIRST_EVENING_LAST
        ):
            raise UnsupportedEventError(
                "the Moon only has evening-first and morning-last events"
            )
        if body.is_outer and event_type.pair is EventPair.EVENING_FIRST_MORNING_LAST:
            raise UnsupportedEventError(
                f"{event_type.label} of {body.display_name} is an acronychal "
                "event, which the limiting-magnitude search does not provide"
            )

    def search(
        self,
        body: CelestialBody | str,
        event_type: EventType | int | str,
        start_jd: float,
        location: ObserverLocation,
        atmosphere: AtmosphereModel | None = None,
        optics: ObserverOptics | None = None,
    ) -> SearchOutcome:
        """Return the first ``event_type`` event of ``body`` after ``start_jd``.

        Conjunction and ephemeris failures propagate; an empty window is
        reported as :class:`NoEventFound` or
        :class:`BodyBelowHorizonThroughout`.
        """

        body = CelestialBody.parse(body)
        event_type = EventType.parse(event_type)
        atmosphere = atmosphere or AtmosphereModel()
        optics = optics or ObserverOptics()
        start_jd = float(start_jd)

        try:
            self.validate(body, event_type)
            period = self.finder.tables.synodic_period(body)
            outcome = self._run(
                body, event_type, start_jd, period, location, atmosphere, optics
            )
        except HeliacalError as exc:
            record_error("heliacal", exc)
            raise

        outcome_label = type(outcome).__name__
        SEARCH_OUTCOMES.labels(
            body=body.value, event_type=event_type.name.lower(), outcome=outcome_label
        ).inc()
        SEARCH_TRIALS.labels(body=body.value).observe(outcome.trials)
        if isinstance(outcome, HeliacalEvent):
            LOG.info(
                "%s %s at JD %.5f (conjunction JD %.5f, %d trials)",
                body.value,
                event_type.label,
                outcome.jd,
                outcome.conjunction.jd,
                outcome.trials,
            )
        else:
            LOG.info(
                "%s %s: %s between JD %.2f and %.2f",
                body.value,
                event_type.label,
                outcome.reason,
                outcome.start_jd,
                outcome.horizon_jd,
            )
        return outcome

    def _run(
        self,
        body: CelestialBody,
        event_type: EventType,
        start_jd: float,
        period: float,
        location: ObserverLocation,
        atmosphere: AtmosphereModel,
        optics: ObserverOptics,
    ) -> SearchOutcome:
        horizon_jd = start_jd + self.options.horizon_synodic_periods * period
        advance = _cycle_advance(body, period)
        totals = _Totals()
        cursor = start_jd - lead_days(body)
        beyond_horizon = False

        while cursor <= horizon_jd:
            conjunction = self.finder.find(body, event_type, cursor)
            if any(abs(conjunction.jd - seen) < 1.0 for seen in totals.seen):
                cursor += advance
                continue
            totals.seen.append(conjunction.jd)
            if event_type.day_direction > 0 and conjunction.jd > horizon_jd:
                beyond_horizon = True
                break

            event = self._scan(
                body,
                event_type,
                conjunction,
                start_jd,
                horizon_jd,
                location,
                atmosphere,
                optics,
                totals,
            )
            if event is not None:
                if event.jd > horizon_jd:
                    beyond_horizon = True
                    break
                if event.jd >= start_jd:
                    return event
                LOG.debug(
                    "%s %s at JD %.4f precedes start JD %.4f; next cycle",
                    body.value,
                    event_type.label,
                    event.jd,
                    start_jd,
                )
            cursor += advance

        if totals.trials and totals.below_horizon == totals.trials:
            return BodyBelowHorizonThroughout(
                body=body,
                event_type=event_type,
                start_jd=start_jd,
                horizon_jd=horizon_jd,
                trials=totals.trials,
            )
        reason = (
            "next event falls after the search horizon"
            if beyond_horizon
            else _NO_CHANGE
        )
        return NoEventFound(
            body=body,
            event_type=event_type,
            start_jd=start_jd,
            horizon_jd=horizon_jd,
            trials=totals.trials,
            reason=reason,
        )

    def _scan(
        self,
        body: CelestialBody,
        event_type: EventType,
        conjunction: ConjunctionResult,
        start_jd: float,
        horizon_jd: float,
        location: ObserverLocation,
        atmosphere: AtmosphereModel,
        optics: ObserverOptics,
        totals: _Totals,
    ) -> HeliacalEvent | None:
        state = SearchState(
            day_jd=conjunction.jd - scan_offset_days(body) * event_type.day_direction,
            direction=event_type.day_direction,
        )
        for _ in range(scan_days(body) + 1):
            if state.direction > 0 and state.day_jd > horizon_jd + 1.0:
                break
            if state.direction < 0 and state.day_jd < start_jd - 1.0:
                break
            if self.should_stop is not None and self.should_stop():
                raise SearchCancelledError(
                    f"search for {body.value} {event_type.label} cancelled at "
                    f"JD {state.day_jd:.1f}"
                )

            reading, samples = self._trial(
                state.day_jd, body, event_type, location, atmosphere, optics
            )
            state.trials += 1
            if reading.below_horizon:
                state.below_horizon_trials += 1
            LOG.debug(
                "%s trial JD %.4f: margin %s", body.value, reading.jd, _margin(reading)
            )

            previous = state.previous
            if previous is not None and not previous.visible and reading.visible:
                totals.trials += state.trials
                totals.below_horizon += state.below_horizon_trials
                bright = reading.margin or 0.0
                optimum_jd: float | None = None
                last_visible_jd: float | None = None
                if self.options.details:
                    optimum_jd, last_visible_jd = _day_details(samples)
                return HeliacalEvent(
                    body=body,
                    event_type=event_type,
                    jd=_interpolate(previous.jd, _margin(previous), reading.jd, bright),
                    visible_jd=reading.jd,
                    conjunction=conjunction,
                    bracket_jd=(previous.jd, reading.jd),
                    bracket_margins=(_margin(previous), bright),
                    trials=totals.trials,
                    optimum_jd=optimum_jd,
                    last_visible_jd=last_visible_jd,
                )
            state.previous = reading
            state.advance()

        totals.trials += state.trials
        totals.below_horizon += state.below_horizon_trials
        return None

    def _trial(
        self,
        day_jd: float,
        body: CelestialBody,
        event_type: EventType,
        location: ObserverLocation,
        atmosphere: AtmosphereModel,
        optics: ObserverOptics,
    ) -> tuple[VisibilityReading, list[VisibilityReading]]:
        """Best reading of one day and the samples it was picked from.

        Samples run from sunrise/sunset toward darkness.  The list is empty
        when the Sun neither rises nor sets that day.
        """

        if self.twilight is None:
            reading = self.visibility.visibility_margin(
                day_jd, body, location, atmosphere, optics
            )
            return reading, [reading]

        anchor = self.twilight.twilight(
            day_jd, location, atmosphere, morning=event_type.is_morning
        )
        if anchor is None:
            return VisibilityReading.horizon(day_jd), []

        # Darkness lies before sunrise and after sunset.
        step = self.options.twilight_step_minutes / _MINUTES_PER_DAY
        sign = -1.0 if event_type.is_morning else 1.0
        samples = [
            self.visibility.visibility_margin(
                anchor + sign * index * step, body, location, atmosphere, optics
            )
            for index in range(self.options.twilight_samples + 1)
        ]
        best: VisibilityReading | None = None
        best_margin = float("-inf")
        for reading in samples:
            margin = _margin(reading)
            if margin is not None and margin > best_margin:
                best, best_margin = reading, margin
        return (best if best is not None else VisibilityReading.horizon(anchor)), samples


def find_heliacal_event(
    provider: PositionProvider,
    visibility: VisibilityService,
    body: CelestialBody | str,
    event_type: EventType | int | str,
    start_jd: float,
    location: ObserverLocation,
    atmosphere: AtmosphereModel | None = None,
    optics: ObserverOptics | None = None,
    *,
    twilight: TwilightLocator | None = None,
    tables: SynodicTables | None = None,
    solver: SolverOptions | None = None,
    options: SearchOptions | None = None,
    should_stop: Callable[[], bool] | None = None,
) -> SearchOutcome:
    """Convenience wrapper building a :class:`HeliacalSearch` and running it."""

    search = HeliacalSearch(
        ConjunctionFinder(provider, tables=tables, options=solver),
        visibility,
        twilight=twilight,
        options=options,
        should_stop=should_stop,
    )
    return search.search(body, event_type, start_jd, location, atmosphere, optics)
