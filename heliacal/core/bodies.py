"""Celestial body identifiers and their Swiss Ephemeris codes."""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping

__all__ = ["CelestialBody", "INNER_BODIES", "OUTER_BODIES"]


class CelestialBody(str, Enum):
    """Bodies the heliacal engine can reason about."""

    SUN = "sun"
    MOON = "moon"
    MERCURY = "mercury"
    VENUS = "venus"
    MARS = "mars"
    JUPITER = "jupiter"
    SATURN = "saturn"
    URANUS = "uranus"
    NEPTUNE = "neptune"
    PLUTO = "pluto"
    MEAN_NODE = "mean_node"

    @property
    def swe_code(self) -> int:
        """Swiss Ephemeris body number (``swisseph.SUN`` … ``swisseph.MEAN_NODE``)."""

        return _SWE_CODES[self]

    @property
    def is_inner(self) -> bool:
        return self in INNER_BODIES

    @property
    def is_outer(self) -> bool:
        return self in OUTER_BODIES

    @property
    def display_name(self) -> str:
        return "Mean Node" if self is CelestialBody.MEAN_NODE else self.value.title()

    @classmethod
    def parse(cls, name: str | CelestialBody) -> CelestialBody:
        """Resolve ``name`` to a body.

        Matching is case-insensitive and accepts the prefixes used by the
        Swiss Ephemeris object lookup (``"mercur"``, ``"neptun"``) as well as
        ``"mean node"``/``"mean-node"`` spellings.
        """

        if isinstance(name, CelestialBody):
            return name
        token = (name or "").strip().lower().replace("-", "_").replace(" ", "_")
        if not token:
            raise ValueError("body name must be non-empty")
        try:
            return cls(token)
        except ValueError:
            pass
        for prefix, body in _PREFIXES:
            if token.startswith(prefix):
                return body
        raise ValueError(f"Unknown celestial body: {name!r}")


# Fixed by the Swiss Ephemeris C API (SE_SUN = 0 … SE_MEAN_NODE = 10).
_SWE_CODES: Mapping[CelestialBody, int] = MappingProxyType(
    {
        CelestialBody.SUN: 0,
        CelestialBody.MOON: 1,
        CelestialBody.MERCURY: 2,
        CelestialBody.VENUS: 3,
        CelestialBody.MARS: 4,
        CelestialBody.JUPITER: 5,
        CelestialBody.SATURN: 6,
        CelestialBody.URANUS: 7,
        CelestialBody.NEPTUNE: 8,
        CelestialBody.PLUTO: 9,
        CelestialBody.MEAN_NODE: 10,
    }
)

_PREFIXES: tuple[tuple[str, CelestialBody], ...] = (
    ("mercur", CelestialBody.MERCURY),
    ("neptun", CelestialBody.NEPTUNE),
    ("node", CelestialBody.MEAN_NODE),
)

INNER_BODIES: frozenset[CelestialBody] = frozenset(
    {CelestialBody.MERCURY, CelestialBody.VENUS}
)

OUTER_BODIES: frozenset[CelestialBody] = frozenset(
    {
        CelestialBody.MARS,
        CelestialBody.JUPITER,
        CelestialBody.SATURN,
        CelestialBody.URANUS,
        CelestialBody.NEPTUNE,
        CelestialBody.PLUTO,
    }
)
