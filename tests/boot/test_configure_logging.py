from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from heliacal.boot import LOG_LEVEL_ENV, configure_logging


@pytest.fixture(autouse=True)
def _restore_root_logger(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


def test_defaults_to_warning() -> None:
    assert configure_logging() == logging.WARNING
    assert logging.getLogger().level == logging.WARNING


def test_verbose_lowers_fallback_to_debug() -> None:
    assert configure_logging(verbose=True) == logging.DEBUG


def test_explicit_level_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(LOG_LEVEL_ENV, "error")

    assert configure_logging(level="info", verbose=True) == logging.INFO
    assert configure_logging(level=15) == 15


def test_environment_levels(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "error")
    assert configure_logging() == logging.ERROR

    monkeypatch.setenv(LOG_LEVEL_ENV, "debug")
    assert configure_logging() == logging.DEBUG


def test_unknown_names_fall_back() -> None:
    assert configure_logging(level="chatty") == logging.WARNING
    assert configure_logging(level="  ", verbose=True) == logging.DEBUG
    assert configure_logging(level="20") == logging.INFO
