"""Core primitives shared by every tasksmith layer: errors, logging, settings."""

from tasksmith.core.errors import (
    ErrorCategory,
    SignalAlreadyCancelledError,
    SignatureError,
    SubscriptionClosedError,
    TaskFailed,
    TaskLoadError,
    TaskReentrancyError,
    TasksmithError,
    TaskUsageError,
)
from tasksmith.core.logging import configure_logging, get_logger
from tasksmith.core.settings import TasksmithSettings, get_settings, reset_settings

__all__ = [
    "ErrorCategory",
    "SignalAlreadyCancelledError",
    "SignatureError",
    "SubscriptionClosedError",
    "TaskFailed",
    "TaskLoadError",
    "TaskReentrancyError",
    "TasksmithError",
    "TaskUsageError",
    "configure_logging",
    "get_logger",
    "TasksmithSettings",
    "get_settings",
    "reset_settings",
]
