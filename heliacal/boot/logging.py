"""Logging setup for the ``heliacal`` command line entry point."""

from __future__ import annotations

import logging
import os
from typing import Any

__all__ = ["configure_logging", "LOG_LEVEL_ENV"]

LOG_LEVEL_ENV = "HELIACAL_LOG_LEVEL"

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_DATEFMT = "%Y-%m-%dT%H:%M:%S"


def _coerce_level(value: str | int | None, fallback: int) -> int:
    """Translate a level name or number into a :mod:`logging` level.

    Unknown names resolve to ``fallback`` instead of raising.
    """

    if value is None:
        return fallback
    if isinstance(value, int):
        return value
    candidate = value.strip()
    if not candidate:
        return fallback
    if candidate.isdigit():
        return int(candidate)
    resolved = logging.getLevelName(candidate.upper())
    return resolved if isinstance(resolved, int) else fallback


def configure_logging(
    *,
    level: str | int | None = None,
    verbose: bool = False,
    **kwargs: Any,
) -> int:
    """Configure the root logger for command line use.

    Parameters
    ----------
    level:
        Explicit level. When omitted ``HELIACAL_LOG_LEVEL`` and then
        ``LOG_LEVEL`` are consulted.
    verbose:
        Lower the fallback level to ``DEBUG`` (the CLI ``--verbose`` flag).
    kwargs:
        Forwarded to :func:`logging.basicConfig`.

    Returns
    -------
    int
        The level applied to the root logger.
    """

    fallback = logging.DEBUG if verbose else logging.WARNING
    raw = level
    if raw is None:
        raw = os.environ.get(LOG_LEVEL_ENV) or os.environ.get("LOG_LEVEL")
    effective = _coerce_level(raw, fallback)

    logging.basicConfig(
        level=effective,
        format=kwargs.pop("format", _FORMAT),
        datefmt=kwargs.pop("datefmt", _DATEFMT),
        force=kwargs.pop("force", True),
        **kwargs,
    )
    return effective
