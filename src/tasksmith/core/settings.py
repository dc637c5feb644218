"""Runtime settings for tasksmith.

Settings are read from ``TASKSMITH_*`` environment variables and an optional
``.env`` file.  Unknown variables are ignored.

Fields
──────
log_level         : structlog log level for entry points
json_logs         : force JSON (True) / console (False) logs, None = auto
timeout_reason    : reason passed to a child cancelled by ``timeout``
event_data_width  : width of the data column in ``format_event``
shell             : executable used by ``shell()`` (None = system default)

Examples:
    >>> from tasksmith.core.settings import get_settings
    >>> get_settings().timeout_reason
    'timeout elapsed'
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TasksmithSettings(BaseSettings):
    """Settings shared by the engine, the sinks, and the CLI."""

    model_config = SettingsConfigDict(
        env_prefix="TASKSMITH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    json_logs: bool | None = None

    # ── Engine ───────────────────────────────────────────────────
    timeout_reason: str = "timeout elapsed"

    # ── Formatting ───────────────────────────────────────────────
    event_data_width: int = Field(default=80, ge=10, description="Width of the event data column")

    # ── Operations ───────────────────────────────────────────────
    shell: str | None = None


@lru_cache(maxsize=1)
def get_settings() -> TasksmithSettings:
    """Return the process-wide settings instance."""
    return TasksmithSettings()


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()


__all__ = ["TasksmithSettings", "get_settings", "reset_settings"]
