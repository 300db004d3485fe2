"""Shared test configuration and fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from tempora.calendar.instant import Instant


ENV_OVERRIDES = (
    "TEMPORA_DATE_FORMAT",
    "TEMPORA_UTC_OFFSET",
    "TEMPORA_LOG_LEVEL",
    "TEMPORA_PASSES",
)


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer ``TEMPORA_*`` variables out of the tests."""
    for name in ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def reference() -> Instant:
    """Fixed reference instant: 2025-04-16T13:26:47.123Z (a Wednesday in Q2)."""
    return Instant.of_datetime(20250416132647).set_millisecond(123)


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "tempora" / "config.json"
