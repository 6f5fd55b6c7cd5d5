from __future__ import annotations

import warnings

import pytest

from heliacal.ephemeris.swe import has_swe

if not has_swe():
    warnings.warn(
        "pyswisseph not installed; Swiss-backed tests will be skipped.",
        RuntimeWarning,
        stacklevel=1,
    )


@pytest.fixture(autouse=True)
def _isolated_config_home(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep settings written by tests out of the real home directory."""

    home = tmp_path_factory.mktemp("heliacal-home")
    monkeypatch.setenv("HELIACAL_HOME", str(home))
    monkeypatch.setenv("LOCALAPPDATA", str(home))
