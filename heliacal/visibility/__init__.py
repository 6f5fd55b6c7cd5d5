"""Visibility scoring used by the heliacal search loop."""

from __future__ import annotations

from .models import AtmosphereModel, ObserverLocation, ObserverOptics, VisibilityReading
from .service import SwissVisibilityService, TwilightLocator, VisibilityService

__all__ = [
    "AtmosphereModel",
    "ObserverLocation",
    "ObserverOptics",
    "SwissVisibilityService",
    "TwilightLocator",
    "VisibilityReading",
    "VisibilityService",
]
