"""Shared fixtures for rrule_lite tests."""

import logging
from collections.abc import Generator
from datetime import datetime
from types import SimpleNamespace
from typing import Any, Callable

import pytest

from rrule_lite.calendar.lite_models import CalendarEvent


ENV_KEYS = (
    "RRULE_LITE_DEBUG",
    "RRULE_LITE_LOG_LEVEL",
    "RRULE_LITE_MAX_OCCURRENCES",
    "RRULE_LITE_WINDOW_DAYS",
)


def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Fast unit tests")


@pytest.fixture
def simple_settings() -> SimpleNamespace:
    """Lightweight settings object accepted anywhere a Config is.

    Fields:
      - max_occurrences_per_series: per-series cap used by the materializer
      - default_window_days: CLI window length when --to is omitted
      - log_level: logging level name
    """
    return SimpleNamespace(
        max_occurrences_per_series=50,
        default_window_days=31,
        log_level="INFO",
    )


@pytest.fixture
def fixed_now() -> datetime:
    """Deterministic "now" for ended-series checks."""
    return datetime(2025, 1, 1, 8, 0)


@pytest.fixture
def make_event() -> Callable[..., CalendarEvent]:
    """Factory for store-shaped events.

    Extra keyword arguments become pass-through fields on the event.
    """

    def _make(
        event_id: str = "evt-1",
        start: datetime = datetime(2025, 1, 6, 9, 0),
        end: Any = datetime(2025, 1, 6, 10, 30),
        rule: Any = None,
        **extra: Any,
    ) -> CalendarEvent:
        return CalendarEvent(id=event_id, start=start, end=end, recurrence_rule=rule, **extra)

    return _make


@pytest.fixture(autouse=True)
def clean_test_environment(monkeypatch: Any, tmp_path: Any) -> Generator[None, Any, None]:
    """Isolate tests from RRULE_LITE_* variables and any local .env/config file."""
    for key in ENV_KEYS:
        # setenv first so monkeypatch restores the original state on teardown,
        # including keys a .env file sets during the test
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    yield


@pytest.fixture(autouse=True)
def restore_root_log_level() -> Generator[None, Any, None]:
    """Undo logger level changes made by logging and CLI tests."""
    # "" is the root logger
    loggers = [logging.getLogger(name) for name in ("", "rrule_lite", "dateutil", "pydantic", "yaml")]
    levels = [lg.level for lg in loggers]
    yield
    for lg, level in zip(loggers, levels):
        lg.setLevel(level)
