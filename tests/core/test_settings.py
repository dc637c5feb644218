"""Tests for TasksmithSettings."""

import pytest
from pydantic import ValidationError

from tasksmith.core.settings import TasksmithSettings, get_settings, reset_settings


class TestSettings:
    """Tests for defaults and environment overrides."""

    def test_defaults(self, monkeypatch):
        """Test the documented defaults."""
        for name in ("LOG_LEVEL", "JSON_LOGS", "TIMEOUT_REASON", "EVENT_DATA_WIDTH", "SHELL"):
            monkeypatch.delenv(f"TASKSMITH_{name}", raising=False)
        settings = TasksmithSettings(_env_file=None)
        assert settings.log_level == "INFO"
        assert settings.json_logs is None
        assert settings.timeout_reason == "timeout elapsed"
        assert settings.event_data_width == 80
        assert settings.shell is None

    def test_env_overrides(self, monkeypatch):
        """Test TASKSMITH_* variables override defaults."""
        monkeypatch.setenv("TASKSMITH_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("TASKSMITH_JSON_LOGS", "true")
        monkeypatch.setenv("TASKSMITH_SHELL", "/bin/bash")
        settings = TasksmithSettings(_env_file=None)
        assert settings.log_level == "DEBUG"
        assert settings.json_logs is True
        assert settings.shell == "/bin/bash"

    def test_width_lower_bound(self, monkeypatch):
        """Test an unusably narrow data column is rejected."""
        monkeypatch.setenv("TASKSMITH_EVENT_DATA_WIDTH", "3")
        with pytest.raises(ValidationError):
            TasksmithSettings(_env_file=None)

    def test_cached_until_reset(self, monkeypatch):
        """Test get_settings is cached and reset_settings re-reads."""
        first = get_settings()
        assert get_settings() is first
        monkeypatch.setenv("TASKSMITH_TIMEOUT_REASON", "deadline")
        assert get_settings().timeout_reason == first.timeout_reason
        reset_settings()
        assert get_settings().timeout_reason == "deadline"
