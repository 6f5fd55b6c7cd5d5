"""Angle utilities shared by the conjunction finder and search loop."""

from __future__ import annotations

import math

__all__ = [
    "norm360",
    "normalize_residual",
    "delta_angle",
]


def norm360(x: float) -> float:
    """Normalize angle to [0, 360)."""

    y = math.fmod(x, 360.0)
    y = y + 360.0 if y < 0 else y
    # fmod of a tiny negative value can round up to exactly 360.0
    return 0.0 if y >= 360.0 else y


def normalize_residual(angle: float) -> float:
    """Return ``angle`` wrapped into the half-open interval (-180, 180].

    Newton residuals must be normalised before use: near the 0°/360° wrap a
    raw separation of 359° is really -1° and feeding the raw value into the
    correction term drives the iteration away from the root.

    >>> normalize_residual(359.0)
    -1.0
    >>> normalize_residual(-359.0)
    1.0
    >>> normalize_residual(-180.0)
    180.0
    """

    wrapped = norm360(float(angle))
    if wrapped > 180.0:
        return wrapped - 360.0
    return wrapped


def delta_angle(a: float, b: float) -> float:
    """Smallest signed delta from ``a``→``b`` in degrees in (-180, 180]."""

    return normalize_residual(b - a)
