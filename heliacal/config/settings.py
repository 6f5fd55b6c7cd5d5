"""Configuration models and helpers for heliacal engine settings."""

from __future__ import annotations

import os
from copy import deepcopy
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

CURRENT_SETTINGS_SCHEMA_VERSION = 1

# Disambiguation cut-off between inferior (near) and superior (far)
# conjunctions of Mercury and Venus.
INFERIOR_CONJUNCTION_MAX_DISTANCE_AU = 0.8

# -------------------- Settings Schema --------------------


class SolverCfg(BaseModel):
    """Newton iteration bounds for the conjunction finder."""

    max_iterations: int = 50
    residual_tolerance_deg: float = 0.5
    min_relative_speed: float = 1e-9
    max_correction_days: float = 3650.0

    @field_validator("max_iterations", mode="before")
    @classmethod
    def _cap_iterations(cls, value: int) -> int:
        return max(1, min(10_000, int(value)))

    @field_validator("residual_tolerance_deg", mode="before")
    @classmethod
    def _cap_tolerance(cls, value: float) -> float:
        numeric = float(value)
        return max(1e-9, min(10.0, numeric))

    @field_validator("min_relative_speed", "max_correction_days", mode="before")
    @classmethod
    def _positive(cls, value: float) -> float:
        return max(0.0, float(value))


class DisambiguationCfg(BaseModel):
    """Inferior/superior conjunction rule for inner planets."""

    inferior_distance_threshold_au: float = INFERIOR_CONJUNCTION_MAX_DISTANCE_AU

    @field_validator("inferior_distance_threshold_au", mode="before")
    @classmethod
    def _cap_threshold(cls, value: float) -> float:
        numeric = float(value)
        return max(0.0, min(2.0, numeric))


class SearchCfg(BaseModel):
    """Heliacal search loop parameters."""

    horizon_synodic_periods: float = 1.0
    twilight_step_minutes: float = 5.0
    twilight_samples: int = 12
    details: bool = True

    @field_validator("horizon_synodic_periods", mode="before")
    @classmethod
    def _cap_periods(cls, value: float) -> float:
        numeric = float(value)
        return max(0.1, min(50.0, numeric))

    @field_validator("twilight_step_minutes", mode="before")
    @classmethod
    def _cap_step(cls, value: float) -> float:
        numeric = float(value)
        return max(0.5, min(60.0, numeric))

    @field_validator("twilight_samples", mode="before")
    @classmethod
    def _cap_samples(cls, value: int) -> int:
        return max(0, min(120, int(value)))


class TablesCfg(BaseModel):
    """Which seed table preset to use."""

    preset: Literal["reference", "swiss"] = "reference"


class EphemerisCfg(BaseModel):
    """Swiss Ephemeris source configuration."""

    path: Optional[str] = None
    time_scale: Literal["TT", "UT"] = "TT"
    prefer_moshier: bool = False


class ObserverCfg(BaseModel):
    """Default observer, atmosphere and optics used by the CLI."""

    latitude_deg: float = 52.5
    longitude_deg: float = 13.4
    elevation_m: float = 100.0
    pressure_hpa: float = 1013.25
    temperature_c: float = 15.0
    relative_humidity: float = 40.0
    extinction: float = 0.0
    age_years: float = 36.0
    snellen_ratio: float = 1.0

    @field_validator("latitude_deg", mode="before")
    @classmethod
    def _cap_latitude(cls, value: float) -> float:
        numeric = float(value)
        return max(-90.0, min(90.0, numeric))


class Settings(BaseModel):
    """Top-level settings model persisted on disk."""

    schema_version: int = Field(
        default=CURRENT_SETTINGS_SCHEMA_VERSION,
        ge=1,
        description="Version marker for persisted configuration payloads.",
    )
    solver: SolverCfg = Field(default_factory=SolverCfg)
    disambiguation: DisambiguationCfg = Field(default_factory=DisambiguationCfg)
    search: SearchCfg = Field(default_factory=SearchCfg)
    tables: TablesCfg = Field(default_factory=TablesCfg)
    ephemeris: EphemerisCfg = Field(default_factory=EphemerisCfg)
    observer: ObserverCfg = Field(default_factory=ObserverCfg)


# -------------------- I/O Helpers --------------------

CONFIG_FILENAME = "config.yaml"


def get_config_home() -> Path:
    """Return the directory where settings should be stored."""

    if os.name == "nt":
        base = Path(
            os.environ.get(
                "LOCALAPPDATA", str(Path.home() / "AppData" / "Local")
            )
        )
        return base / "Heliacal"
    return Path(os.environ.get("HELIACAL_HOME", str(Path.home() / ".heliacal")))


def config_path() -> Path:
    """Return the full path to the configuration file, creating directories as needed."""

    home = get_config_home()
    home.mkdir(parents=True, exist_ok=True)
    return home / CONFIG_FILENAME


def default_settings() -> Settings:
    """Instantiate a Settings object populated with defaults."""

    return Settings()


def save_settings(settings: Settings, path: Optional[Path] = None) -> Path:
    """Persist the given settings to disk as YAML."""

    target_path = Path(path) if path else config_path()
    target_path.parent.mkdir(parents=True, exist_ok=True)
    data = settings.model_dump()
    with target_path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(data, handle, sort_keys=False, allow_unicode=True)
    return target_path


def _coerce_schema_version(raw: object) -> int:
    """Return a normalised schema version value with sane bounds."""

    try:
        value = int(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 1
    return max(1, value)


def _upgrade_settings_payload(
    data: dict[str, object], *, schema_version: int
) -> tuple[dict[str, object], bool]:
    """Stamp older payloads with the current schema version."""

    upgraded = deepcopy(data)
    version = max(schema_version, CURRENT_SETTINGS_SCHEMA_VERSION)
    changed = upgraded.get("schema_version") != version
    upgraded["schema_version"] = version
    return upgraded, changed


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load settings from disk, creating defaults if missing."""

    source_path = Path(path) if path else config_path()
    if not source_path.exists():
        settings = default_settings()
        save_settings(settings, source_path)
        return settings
    with source_path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    if not isinstance(raw, dict):
        raw = {}
    schema_version = _coerce_schema_version(raw.get("schema_version"))
    data, upgraded = _upgrade_settings_payload(raw, schema_version=schema_version)
    settings = Settings(**data)
    if upgraded:
        save_settings(settings, source_path)
    return settings


__all__ = [
    "CONFIG_FILENAME",
    "CURRENT_SETTINGS_SCHEMA_VERSION",
    "DisambiguationCfg",
    "EphemerisCfg",
    "INFERIOR_CONJUNCTION_MAX_DISTANCE_AU",
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
