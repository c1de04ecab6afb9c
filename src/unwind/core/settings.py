"""Runtime settings for unwind.

``UnwindSettings`` is read from ``UNWIND_*`` environment variables and an
optional ``.env`` file. The CLI loads it once at startup; library code reads
it through :func:`get_settings` when deciding how frames behave.

Fields
──────
log_level               : structlog level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
json_logs               : JSON log lines; None picks JSON when stderr is not a TTY
service_name            : ``service.name`` attached to every log event
abort_exit_code         : process exit status for an unrecovered abort
recover_runtime_errors  : recovery scopes also convert ordinary exceptions
trace_frames            : log frame and deferred events at INFO instead of DEBUG

Examples:
    >>> import os
    >>> os.environ["UNWIND_ABORT_EXIT_CODE"] = "3"
    >>> reset_settings()
    >>> get_settings().abort_exit_code
    3

Tags:
    settings, configuration, pydantic, environment, unwind-core
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class UnwindSettings(BaseSettings):
    """Unwind runtime configuration."""

    model_config = SettingsConfigDict(
        env_prefix="UNWIND_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "WARNING"
    json_logs: bool | None = None
    service_name: str = "unwind"
    trace_frames: bool = False

    # ── Abort handling ───────────────────────────────────────────
    abort_exit_code: int = Field(default=2, ge=1, le=255)
    recover_runtime_errors: bool = Field(
        default=False,
        description="Convert non-abort exceptions inside recovery scopes",
    )

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level

    @property
    def frame_log_level(self) -> str:
        """structlog method name for frame and deferred events."""
        return "info" if self.trace_frames else "debug"


@lru_cache(maxsize=1)
def get_settings() -> UnwindSettings:
    """Return the process-wide settings, loading them on first use."""
    return UnwindSettings()


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()


__all__ = ["UnwindSettings", "get_settings", "reset_settings"]
