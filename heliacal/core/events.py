"""Heliacal event types and the table key they select."""

from __future__ import annotations

from enum import Enum, IntEnum

__all__ = ["EventPair", "EventType"]


class EventPair(str, Enum):
    """Second key of the reference epoch table.

    Morning-first and evening-last visibility bracket the same (lower)
    conjunction; evening-first and morning-last bracket the other one, which
    is the superior conjunction for inner planets and the opposition for
    outer planets.
    """

    MORNING_FIRST_EVENING_LAST = "morning_first_evening_last"
    EVENING_FIRST_MORNING_LAST = "evening_first_morning_last"


class EventType(IntEnum):
    """Heliacal event kinds, numbered as in the Swiss Ephemeris API."""

    MORNING_FIRST = 1
    EVENING_LAST = 2
    EVENING_FIRST = 3
    MORNING_LAST = 4

    @property
    def pair(self) -> EventPair:
        if self in (EventType.MORNING_FIRST, EventType.EVENING_LAST):
            return EventPair.MORNING_FIRST_EVENING_LAST
        return EventPair.EVENING_FIRST_MORNING_LAST

    @property
    def is_morning(self) -> bool:
        return self in (EventType.MORNING_FIRST, EventType.MORNING_LAST)

    @property
    def is_first(self) -> bool:
        return self in (EventType.MORNING_FIRST, EventType.EVENING_FIRST)

    @property
    def day_direction(self) -> int:
        """+1 when the event follows conjunction, -1 when it precedes it."""

        return 1 if self.is_first else -1

    @property
    def label(self) -> str:
        return self.name.lower().replace("_", " ")

    @classmethod
    def parse(cls, value: str | int | EventType) -> EventType:
        """Resolve ints (``1``..``4``), names and labels to an event type."""

        if isinstance(value, EventType):
            return value
        if isinstance(value, int):
            return cls(value)
        token = str(value).strip().lower().replace("-", "_").replace(" ", "_")
        if token.isdigit():
            return cls(int(token))
        try:
            return cls[token.upper()]
        except KeyError as exc:
            choices = ", ".join(member.name.lower() for member in cls)
            raise ValueError(
                f"Unknown event type {value!r}; expected one of {choices} or 1-4"
            ) from exc
