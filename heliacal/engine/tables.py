"""Reference epochs and mean synodic periods used to seed conjunction searches.

Each preset is an immutable two-key mapping ``(body, event pair) -> JD`` plus
a ``body -> days`` period mapping.  The ``reference`` preset is the default
seed table; the ``swiss`` preset carries the values of the Swiss Ephemeris
heliacal module (synodic periods after Kelley/Milone/Aveni, "Exploring
Ancient Skies", p. 43).
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from ..core.bodies import CelestialBody
from ..core.events import EventPair, EventType
from ..errors import UnsupportedBodyError

__all__ = [
    "DEFAULT_PRESET",
    "SynodicTables",
    "available_presets",
    "get_tables",
]

_MF = EventPair.MORNING_FIRST_EVENING_LAST
_EF = EventPair.EVENING_FIRST_MORNING_LAST

DEFAULT_PRESET = "reference"


@dataclass(frozen=True)
class SynodicTables:
    """Static seed data for one table preset."""

    name: str
    reference_epochs: Mapping[tuple[CelestialBody, EventPair], float]
    synodic_periods: Mapping[CelestialBody, float]

    def reference_epoch(
        self, body: CelestialBody, pair: EventPair | EventType
    ) -> float:
        """Return the seed conjunction epoch (JD) for ``body`` and ``pair``."""

        if isinstance(pair, EventType):
            pair = pair.pair
        try:
            return self.reference_epochs[(body, pair)]
        except KeyError as exc:
            raise UnsupportedBodyError(
                f"no reference epoch for {body.value} ({pair.value}) "
                f"in the {self.name!r} table"
            ) from exc

    def synodic_period(self, body: CelestialBody) -> float:
        """Return the mean synodic period of ``body`` in days."""

        period = self.synodic_periods.get(body, 0.0)
        if period <= 0.0:
            raise UnsupportedBodyError(
                f"no synodic period for {body.value} in the {self.name!r} table"
            )
        return period

    def supports(self, body: CelestialBody) -> bool:
        return self.synodic_periods.get(body, 0.0) > 0.0 and all(
            (body, pair) in self.reference_epochs for pair in EventPair
        )


def _epochs(
    rows: Mapping[CelestialBody, tuple[float, float]],
) -> Mapping[tuple[CelestialBody, EventPair], float]:
    table: dict[tuple[CelestialBody, EventPair], float] = {}
    for body, (first_pair, second_pair) in rows.items():
        table[(body, _MF)] = first_pair
        table[(body, _EF)] = second_pair
    return MappingProxyType(table)


_REFERENCE = SynodicTables(
    name="reference",
    reference_epochs=_epochs(
        {
            CelestialBody.MERCURY: (2451550.0, 2451550.0),
            CelestialBody.VENUS: (2451996.0, 2451996.0),
            CelestialBody.MARS: (2451310.0, 2452179.0),
            CelestialBody.JUPITER: (2451163.0, 2451754.0),
            CelestialBody.SATURN: (2451294.0, 2451485.0),
            CelestialBody.URANUS: (2451704.0, 2451338.0),
            CelestialBody.NEPTUNE: (2451753.0, 2451569.0),
            CelestialBody.PLUTO: (2451629.0, 2451819.0),
        }
    ),
    synodic_periods=MappingProxyType(
        {
            CelestialBody.MERCURY: 87.969,
            CelestialBody.VENUS: 224.701,
            CelestialBody.MARS: 779.936,
            CelestialBody.JUPITER: 398.884,
            CelestialBody.SATURN: 378.092,
            CelestialBody.URANUS: 369.656,
            CelestialBody.NEPTUNE: 367.486,
            CelestialBody.PLUTO: 0.0,
            CelestialBody.MEAN_NODE: 0.0,
        }
    ),
)

_SWISS = SynodicTables(
    name="swiss",
    reference_epochs=_epochs(
        {
            CelestialBody.MOON: (2451550.0, 2451550.0),
            CelestialBody.MERCURY: (2451604.0, 2451670.0),
            CelestialBody.VENUS: (2451980.0, 2452280.0),
            CelestialBody.MARS: (2451727.0, 2452074.0),
            CelestialBody.JUPITER: (2451673.0, 2451877.0),
            CelestialBody.SATURN: (2451675.0, 2451868.0),
            CelestialBody.URANUS: (2451581.0, 2451768.0),
            CelestialBody.NEPTUNE: (2451568.0, 2451753.0),
        }
    ),
    synodic_periods=MappingProxyType(
        {
            CelestialBody.MOON: 29.530588853,
            CelestialBody.MERCURY: 115.8775,
            CelestialBody.VENUS: 583.9214,
            CelestialBody.MARS: 779.9361,
            CelestialBody.JUPITER: 398.8840,
            CelestialBody.SATURN: 378.0919,
            CelestialBody.URANUS: 369.6560,
            CelestialBody.NEPTUNE: 367.4867,
            CelestialBody.PLUTO: 366.7207,
        }
    ),
)

_PRESETS: Mapping[str, SynodicTables] = MappingProxyType(
    {_REFERENCE.name: _REFERENCE, _SWISS.name: _SWISS}
)


def available_presets() -> tuple[str, ...]:
    return tuple(_PRESETS)


def get_tables(name: str | None = None) -> SynodicTables:
    """Return the table preset called ``name`` (default ``"reference"``)."""

    key = (name or DEFAULT_PRESET).strip().lower()
    try:
        return _PRESETS[key]
    except KeyError as exc:
        raise ValueError(
            f"Unknown table preset {name!r}. Valid options: {sorted(_PRESETS)}"
        ) from exc
