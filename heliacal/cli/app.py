"""Typer application behind the ``heliacal`` command."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import typer

from ..boot import configure_logging
from ..config.settings import CONFIG_FILENAME, Settings, get_config_home, load_settings
from ..core.bodies import CelestialBody
from ..core.events import EventType
from ..core.time import datetime_from_jd, parse_moment
from ..engine.conjunction import ConjunctionFinder, ConjunctionResult
from ..engine.heliacal import HeliacalEvent, HeliacalSearch, SearchOutcome
from ..engine.tables import available_presets, get_tables
from ..ephemeris.provider import PositionProvider, SwissPositionProvider
from ..errors import HeliacalError
from ..visibility.models import AtmosphereModel, ObserverLocation, ObserverOptics
from ..visibility.service import SwissVisibilityService, VisibilityService

__all__ = ["app", "build_position_provider", "build_visibility_service"]

LOG = logging.getLogger(__name__)

app = typer.Typer(help="Conjunction and heliacal event search.", no_args_is_help=True)


def build_position_provider(settings: Settings) -> PositionProvider:
    """Return the position provider configured in ``settings``."""

    return SwissPositionProvider(
        settings.ephemeris.path,
        time_scale=settings.ephemeris.time_scale,
        prefer_moshier=settings.ephemeris.prefer_moshier,
    )


def build_visibility_service(settings: Settings) -> VisibilityService:
    """Return the visibility service configured in ``settings``."""

    return SwissVisibilityService(settings.ephemeris.path)


def _settings(config: Optional[Path], tables: Optional[str]) -> Settings:
    path = config if config is not None else get_config_home() / CONFIG_FILENAME
    if config is not None or path.exists():
        settings = load_settings(path)
    else:
        settings = Settings()
    if tables is not None:
        try:
            get_tables(tables)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--tables") from exc
        settings = settings.model_copy(
            update={"tables": settings.tables.model_copy(update={"preset": tables})}
        )
    return settings


def _parse_body(value: str) -> CelestialBody:
    try:
        return CelestialBody.parse(value)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="BODY") from exc


def _parse_event(value: str) -> EventType:
    try:
        return EventType.parse(value)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="EVENT") from exc


def _parse_start(value: str) -> float:
    try:
        return parse_moment(value)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="START") from exc


def _jsonable(value: Any) -> Any:
    if isinstance(value, EventType):
        return value.label
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return value


def _with_timestamp(payload: dict[str, Any], key: str = "jd") -> dict[str, Any]:
    jd = payload.get(key)
    if isinstance(jd, float):
        payload[f"{key}_utc"] = datetime_from_jd(jd).isoformat()
    return payload


def conjunction_payload(result: ConjunctionResult) -> dict[str, Any]:
    return _with_timestamp(_jsonable(asdict(result)))


def outcome_payload(outcome: SearchOutcome) -> dict[str, Any]:
    payload = _jsonable(asdict(outcome))
    payload["outcome"] = type(outcome).__name__
    payload["found"] = outcome.found
    if isinstance(outcome, HeliacalEvent):
        payload["conjunction"] = conjunction_payload(outcome.conjunction)
        for key in ("jd", "visible_jd", "optimum_jd", "last_visible_jd"):
            _with_timestamp(payload, key)
    return payload


def _emit(payload: dict[str, Any]) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


@app.callback()
def main_callback(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log Newton iterations and trial days."
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Explicit logging level (overrides --verbose)."
    ),
) -> None:
    configure_logging(level=log_level, verbose=verbose)


@app.command("conjunction")
def conjunction_command(
    body: str = typer.Argument(..., help="Body name, e.g. venus or mars."),
    event: str = typer.Argument(
        ..., help="Event type: 1-4 or morning_first, evening_last, evening_first, morning_last."
    ),
    start: str = typer.Argument(..., help="Julian day or ISO-8601 UTC timestamp."),
    tables: Optional[str] = typer.Option(
        None, "--tables", help=f"Seed table preset ({', '.join(available_presets())})."
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", help="Settings YAML file.", dir_okay=False
    ),
) -> None:
    """Solve for the conjunction or opposition that anchors EVENT."""

    settings = _settings(config, tables)
    body_value = _parse_body(body)
    event_value = _parse_event(event)
    start_jd = _parse_start(start)
    try:
        finder = ConjunctionFinder.from_settings(build_position_provider(settings), settings)
        result = finder.find(body_value, event_value, start_jd)
    except HeliacalError as exc:
        typer.secho(f"Conjunction search failed: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from exc
    _emit(conjunction_payload(result))


@app.command("event")
def event_command(
    body: str = typer.Argument(..., help="Body name, e.g. venus or mercury."),
    event: str = typer.Argument(..., help="Event type: 1-4 or its name."),
    start: str = typer.Argument(..., help="Julian day or ISO-8601 UTC timestamp."),
    lat: Optional[float] = typer.Option(
        None, "--lat", min=-90.0, max=90.0, help="Observer latitude in degrees."
    ),
    lon: Optional[float] = typer.Option(
        None, "--lon", min=-180.0, max=360.0, help="Observer longitude in degrees (east positive)."
    ),
    elevation: Optional[float] = typer.Option(
        None, "--elevation", help="Observer elevation in metres."
    ),
    tables: Optional[str] = typer.Option(
        None, "--tables", help=f"Seed table preset ({', '.join(available_presets())})."
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", help="Settings YAML file.", dir_okay=False
    ),
) -> None:
    """Find the first EVENT of BODY after START for one observer."""

    settings = _settings(config, tables)
    body_value = _parse_body(body)
    event_value = _parse_event(event)
    start_jd = _parse_start(start)
    observer = settings.observer
    location = ObserverLocation(
        latitude_deg=observer.latitude_deg if lat is None else lat,
        longitude_deg=observer.longitude_deg if lon is None else lon,
        elevation_m=observer.elevation_m if elevation is None else elevation,
    )
    atmosphere = AtmosphereModel(
        pressure_hpa=observer.pressure_hpa,
        temperature_c=observer.temperature_c,
        relative_humidity=observer.relative_humidity,
        extinction=observer.extinction,
    )
    optics = ObserverOptics(
        age_years=observer.age_years, snellen_ratio=observer.snellen_ratio
    )

    try:
        search = HeliacalSearch.from_settings(
            build_position_provider(settings),
            build_visibility_service(settings),
            settings,
        )
        outcome = search.search(
            body_value, event_value, start_jd, location, atmosphere, optics
        )
    except HeliacalError as exc:
        typer.secho(f"Heliacal search failed: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from exc
    _emit(outcome_payload(outcome))


@app.command("tables")
def tables_command(
    preset: Optional[str] = typer.Argument(None, help="Preset name; default lists all."),
) -> None:
    """Print seed epochs and synodic periods."""

    names = [preset] if preset else list(available_presets())
    payload: dict[str, Any] = {}
    for name in names:
        try:
            table = get_tables(name)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="PRESET") from exc
        payload[table.name] = {
            "bodies": [body.value for body in CelestialBody if table.supports(body)],
            "synodic_periods": {
                body.value: period
                for body, period in table.synodic_periods.items()
                if period > 0.0
            },
            "reference_epochs": {
                f"{body.value}:{pair.value}": epoch
                for (body, pair), epoch in table.reference_epochs.items()
            },
        }
    _emit(payload)
