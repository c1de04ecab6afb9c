"""Tests for core.settings module.

Covers:
- UnwindSettings defaults
- UNWIND_* environment overrides
- Validation of log_level and abort_exit_code
- get_settings caching and reset_settings
"""

import pytest
from pydantic import ValidationError

from unwind.core.settings import UnwindSettings, get_settings, reset_settings


class TestDefaults:
    def test_default_log_level(self):
        assert UnwindSettings().log_level == "WARNING"

    def test_default_abort_exit_code(self):
        assert UnwindSettings().abort_exit_code == 2

    def test_runtime_errors_not_recovered(self):
        assert UnwindSettings().recover_runtime_errors is False

    def test_json_logs_auto(self):
        assert UnwindSettings().json_logs is None

    def test_frame_log_level(self):
        assert UnwindSettings().frame_log_level == "debug"
        assert UnwindSettings(trace_frames=True).frame_log_level == "info"


class TestEnvOverride:
    def test_exit_code_from_env(self, monkeypatch):
        monkeypatch.setenv("UNWIND_ABORT_EXIT_CODE", "5")
        assert UnwindSettings().abort_exit_code == 5

    def test_recover_runtime_errors_from_env(self, monkeypatch):
        monkeypatch.setenv("UNWIND_RECOVER_RUNTIME_ERRORS", "true")
        assert UnwindSettings().recover_runtime_errors is True

    def test_log_level_normalized(self, monkeypatch):
        monkeypatch.setenv("UNWIND_LOG_LEVEL", "debug")
        assert UnwindSettings().log_level == "DEBUG"

    def test_unprefixed_vars_ignored(self, monkeypatch):
        monkeypatch.setenv("ABORT_EXIT_CODE", "9")
        assert UnwindSettings().abort_exit_code == 2


class TestValidation:
    def test_bad_log_level(self):
        with pytest.raises(ValidationError):
            UnwindSettings(log_level="LOUD")

    @pytest.mark.parametrize("code", [0, 256])
    def test_exit_code_bounds(self, code):
        with pytest.raises(ValidationError):
            UnwindSettings(abort_exit_code=code)


class TestCache:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_reset_rereads_env(self, monkeypatch):
        assert get_settings().abort_exit_code == 2
        monkeypatch.setenv("UNWIND_ABORT_EXIT_CODE", "4")
        assert get_settings().abort_exit_code == 2
        reset_settings()
        assert get_settings().abort_exit_code == 4
