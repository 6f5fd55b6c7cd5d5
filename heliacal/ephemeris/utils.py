"""Swiss Ephemeris data path discovery."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Iterator

__all__ = [
    "ENV_KEYS",
    "iter_candidate_paths",
    "get_se_ephe_path",
]

ENV_KEYS: tuple[str, ...] = (
    "HELIACAL_SE_EPHE_PATH",
    "SE_EPHE_PATH",
    "SWE_EPH_PATH",
)
"""Environment variables checked, in order, for an ephemeris directory."""

_OS_HINTS: tuple[Path, ...] = (
    Path.home() / ".sweph",
    Path.home() / ".heliacal" / "ephe",
    Path("/usr/share/sweph"),
    Path("/usr/share/libswisseph"),
    Path("/usr/local/share/sweph"),
)


def _first_env(keys: Iterable[str]) -> str | None:
    for key in keys:
        value = os.environ.get(key)
        if value:
            return value
    return None


def _as_dir(path: os.PathLike[str] | str | None) -> str | None:
    if not path:
        return None
    candidate = Path(path).expanduser()
    if candidate.is_dir():
        return str(candidate)
    return None


def iter_candidate_paths(
    configured: str | os.PathLike[str] | None = None,
) -> Iterator[str]:
    """Yield existing ephemeris directories in priority order.

    The configured path wins, then the environment, then well-known
    operating system locations.  Missing directories are skipped.
    """

    seen: set[str] = set()
    for raw in (configured, _first_env(ENV_KEYS), *_OS_HINTS):
        candidate = _as_dir(raw)
        if candidate and candidate not in seen:
            seen.add(candidate)
            yield candidate


def get_se_ephe_path(
    configured: str | os.PathLike[str] | None = None,
) -> str | None:
    """Return the first usable ephemeris directory, or ``None``.

    ``None`` lets Swiss Ephemeris fall back to its built-in Moshier theory.
    """

    return next(iter_candidate_paths(configured), None)
