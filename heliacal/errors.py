"""Exception hierarchy raised by the heliacal engine.

Only genuine failures are exceptions.  "No event in the search window" and
"body below the horizon for the whole window" are ordinary results, see
:mod:`heliacal.engine.heliacal`.
"""

from __future__ import annotations

__all__ = [
    "HeliacalError",
    "NonConvergenceError",
    "EphemerisUnavailableError",
    "UnsupportedBodyError",
    "UnsupportedEventError",
    "SearchCancelledError",
]


class HeliacalError(RuntimeError):
    """Base class for heliacal engine failures."""


class NonConvergenceError(HeliacalError):
    """Raised when the Newton iteration cannot reach the residual tolerance."""

    def __init__(
        self,
        message: str,
        *,
        body: object | None = None,
        iterations: int = 0,
        last_jd: float | None = None,
        last_residual_deg: float | None = None,
    ) -> None:
        super().__init__(message)
        self.body = body
        self.iterations = iterations
        self.last_jd = last_jd
        self.last_residual_deg = last_residual_deg


class EphemerisUnavailableError(HeliacalError):
    """Raised when a position or visibility query fails for ``jd``/``body``."""

    def __init__(
        self,
        message: str,
        *,
        jd: float | None = None,
        body: object | None = None,
    ) -> None:
        super().__init__(message)
        self.jd = jd
        self.body = body


class UnsupportedBodyError(HeliacalError, ValueError):
    """Raised when the synodic tables have no row for a body."""


class UnsupportedEventError(HeliacalError, ValueError):
    """Raised for body/event combinations that have no heliacal meaning."""


class SearchCancelledError(HeliacalError):
    """Raised when a caller's cooperative stop flag interrupts a search."""
