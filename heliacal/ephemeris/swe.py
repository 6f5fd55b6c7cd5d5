"""Deferred loading of the pyswisseph extension.

Only :class:`~heliacal.ephemeris.provider.SwissPositionProvider` and
:class:`~heliacal.visibility.service.SwissVisibilityService` talk to Swiss
Ephemeris, and they do so through :data:`swe`.  The extension is imported on
first use, so the engine and its in-memory test providers work without it.
"""

from __future__ import annotations

import importlib
import importlib.util
from typing import Any

from ..errors import EphemerisUnavailableError

__all__ = ["REQUIRED_FUNCTIONS", "has_swe", "load_swisseph", "reset_swe", "swe"]

# Entry points used by the position provider and the visibility service.
REQUIRED_FUNCTIONS: tuple[str, ...] = (
    "calc",
    "calc_ut",
    "rise_trans",
    "set_ephe_path",
    "vis_limit_mag",
)

_module: Any | None = None


def load_swisseph() -> Any:
    """Import and cache :mod:`swisseph`.

    Raises
    ------
    EphemerisUnavailableError
        If the extension cannot be imported or is too old to provide the
        limiting-magnitude and rise/set functions the searches rely on.
    """

    global _module
    if _module is not None:
        return _module
    try:
        module = importlib.import_module("swisseph")
    except ImportError as exc:
        raise EphemerisUnavailableError(
            f"pyswisseph could not be imported ({exc}); install it with "
            "`pip install pyswisseph` and set HELIACAL_SE_EPHE_PATH or the "
            "`ephemeris.path` setting to the directory holding the .se1 files"
        ) from exc
    missing = [name for name in REQUIRED_FUNCTIONS if not hasattr(module, name)]
    if missing:
        raise EphemerisUnavailableError(
            "installed pyswisseph lacks " + ", ".join(missing) + "; upgrade to 2.10 or later"
        )
    _module = module
    return module


class _SweProxy:
    """Stand-in for the :mod:`swisseph` module.

    Calling the proxy returns the module; attribute access is forwarded to it.
    """

    def __call__(self) -> Any:
        return load_swisseph()

    def __getattr__(self, item: str) -> Any:
        return getattr(load_swisseph(), item)


swe = _SweProxy()


def reset_swe() -> None:
    """Forget the cached module so the next access imports it again."""

    global _module
    _module = None


def has_swe() -> bool:
    """Return ``True`` when pyswisseph is loaded or importable."""

    return _module is not None or importlib.util.find_spec("swisseph") is not None
