"""
Shared pytest fixtures and configuration for unwind tests.

This module provides:
- Settings cache reset and env isolation between tests
- Logging reconfiguration so structlog writes to the current test's streams
- A line recorder for code that emits output through a callable
"""

import os
import sys
from pathlib import Path
from typing import Generator

import pytest
import structlog

# Ensure unwind package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from unwind.core.logging import clear_context, configure_logging
from unwind.core.settings import UnwindSettings, reset_settings


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)

        if "cli" in test_path.parts:
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Drop UNWIND_* env vars and the cached settings around each test."""
    for key in [k for k in list(os.environ) if k.startswith("UNWIND_")]:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(Path(__file__).parent)  # keep a stray .env out of the way
    reset_settings()
    yield
    reset_settings()


@pytest.fixture(autouse=True)
def quiet_logging() -> Generator[None, None, None]:
    """Route logs to this test's stderr and drop bound context afterwards."""
    configure_logging(level="WARNING", json_format=True)
    yield
    clear_context()
    structlog.reset_defaults()


# =============================================================================
# Helpers
# =============================================================================


@pytest.fixture
def lines() -> list[str]:
    """Collector for functions that take an ``emit`` / ``log`` callable."""
    return []


@pytest.fixture
def trace_settings() -> UnwindSettings:
    """Settings with frame tracing on and runtime-error recovery off."""
    return UnwindSettings(trace_frames=True)
