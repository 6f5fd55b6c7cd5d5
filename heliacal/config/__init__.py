"""Configuration helpers exposed at :mod:`heliacal.config`."""

from __future__ import annotations

from .settings import (
    INFERIOR_CONJUNCTION_MAX_DISTANCE_AU,
    DisambiguationCfg,
    EphemerisCfg,
    ObserverCfg,
    SearchCfg,
    Settings,
    SolverCfg,
    TablesCfg,
    config_path,
    default_settings,
    get_config_home,
    load_settings,
    save_settings,
)

__all__ = [
    "INFERIOR_CONJUNCTION_MAX_DISTANCE_AU",
    "DisambiguationCfg",
    "EphemerisCfg",
    "ObserverCfg",
    "SearchCfg",
    "Settings",
    "SolverCfg",
    "TablesCfg",
    "config_path",
    "default_settings",
    "get_config_home",
    "load_settings",
    "save_settings",
]
