"""Julian day helpers used by the CLI.

The core algorithms work on bare Julian day numbers.  These helpers convert
between timezone-aware ``datetime`` values and Julian days.
"""

from __future__ import annotations

import datetime as _dt
from typing import Final

__all__ = [
    "SECONDS_PER_DAY",
    "ensure_utc",
    "julian_day",
    "datetime_from_jd",
    "parse_moment",
]


SECONDS_PER_DAY: Final[float] = 86_400.0
_UNIX_EPOCH_JD: Final[float] = 2440587.5


def ensure_utc(moment: _dt.datetime) -> _dt.datetime:
    """Return ``moment`` converted to UTC."""

    tzinfo = moment.tzinfo
    if tzinfo is None:
        return moment.replace(tzinfo=_dt.UTC)
    return moment.astimezone(_dt.UTC)


def julian_day(moment: _dt.datetime) -> float:
    """Return the Julian day for a UTC ``moment``."""

    moment = ensure_utc(moment)
    year = moment.year
    month = moment.month
    day = moment.day
    frac = (
        moment.hour + moment.minute / 60.0 + (moment.second + moment.microsecond / 1e6) / 3600.0
    ) / 24.0

    if month <= 2:
        year -= 1
        month += 12

    a = year // 100
    b = 2 - a + (a // 4)
    jd = int(365.25 * (year + 4716)) + int(30.6001 * (month + 1)) + day + b - 1524.5
    return jd + frac


def datetime_from_jd(jd: float) -> _dt.datetime:
    """Return the UTC ``datetime`` for Julian day ``jd``."""

    seconds = (float(jd) - _UNIX_EPOCH_JD) * SECONDS_PER_DAY
    epoch = _dt.datetime(1970, 1, 1, tzinfo=_dt.UTC)
    return epoch + _dt.timedelta(seconds=seconds)


def parse_moment(value: str) -> float:
    """Parse a Julian day number or an ISO-8601 date/time (UTC) into a JD."""

    token = value.strip()
    try:
        return float(token)
    except ValueError:
        pass
    try:
        moment = _dt.datetime.fromisoformat(token.replace("Z", "+00:00"))
    except ValueError as exc:
        raise ValueError(
            f"Expected a Julian day or ISO-8601 timestamp, got {value!r}"
        ) from exc
    return julian_day(moment)
