"""Ephemeris access for the heliacal engine."""

from __future__ import annotations

from .provider import (
    EphemerisSample,
    PositionProvider,
    SwissPositionProvider,
    configure_ephemeris_path,
)
from .swe import has_swe, load_swisseph, reset_swe, swe
from .utils import get_se_ephe_path, iter_candidate_paths

__all__ = [
    "EphemerisSample",
    "PositionProvider",
    "SwissPositionProvider",
    "configure_ephemeris_path",
    "get_se_ephe_path",
    "has_swe",
    "iter_candidate_paths",
    "load_swisseph",
    "reset_swe",
    "swe",
]
