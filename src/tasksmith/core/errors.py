"""
Structured error types for tasksmith.

Two very different things can go wrong around a task:

- **Usage errors** are programmer mistakes (running a task twice,
  subscribing too late, cancelling a signal twice, building a combinator
  with bad parameters).  They are raised synchronously at the call site and
  never travel through a task's result future.
- **Task failures** are the normal, expected way a unit of work ends badly.
  They are produced by ``context.fail(...)`` and surface as the rejection of
  the future returned by ``Task.run()``.

Cancellation is not an error type of its own.  By convention a cancelled
executor calls ``fail(reason)``, so it reaches callers as a ``TaskFailed``
whose ``reason`` is the cancellation reason.

Architecture:
    ::

        TasksmithError  (message, category)
          ├── TaskUsageError              (USAGE)
          │     ├── TaskReentrancyError
          │     ├── SubscriptionClosedError
          │     ├── SignalAlreadyCancelledError
          │     └── SignatureError
          ├── TaskFailed                  (TASK)
          └── TaskLoadError               (CONFIG)
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification."""

    USAGE = "USAGE"
    TASK = "TASK"
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"


class TasksmithError(Exception):
    """
    Base exception for all tasksmith errors.

    Every error carries a human readable ``message`` and an
    :class:`ErrorCategory`.  Subclasses set ``default_category``.

    Examples:
        >>> error = TasksmithError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.to_dict()["error_type"]
        'TasksmithError'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# USAGE ERRORS (raised synchronously, never part of a task result)
# =============================================================================


class TaskUsageError(TasksmithError):
    """A task or signal was used in a way the lifecycle does not allow."""

    default_category = ErrorCategory.USAGE


class TaskReentrancyError(TaskUsageError):
    """``run()`` was called on a task that is no longer pending."""

    def __init__(self, task_name: str, state: str):
        self.task_name = task_name
        self.state = state
        super().__init__(f"cannot run task '{task_name}': task is {state}, expected pending")


class SubscriptionClosedError(TaskUsageError):
    """``subscribe()`` was called after the task started."""

    def __init__(self, task_name: str):
        self.task_name = task_name
        super().__init__(f"can only subscribe to task '{task_name}' while it is pending")


class SignalAlreadyCancelledError(TaskUsageError):
    """A cancellation signal was cancelled (or subscribed to) after it fired."""


class SignatureError(TaskUsageError):
    """A combinator was built with parameters that do not fit its signature."""

    def __init__(self, combinator: str, message: str, *, fields: list[str] | None = None):
        self.combinator = combinator
        self.fields = fields or []
        super().__init__(f"{combinator}: {message}")


# =============================================================================
# TASK FAILURES (the async result channel)
# =============================================================================


class TaskFailed(TasksmithError):
    """
    Rejection value of a task's result future.

    ``reason`` is the joined failure message passed to ``context.fail``;
    it may be empty.
    """

    default_category = ErrorCategory.TASK

    def __init__(self, reason: str = "", *, task_id: str | None = None, task_name: str | None = None):
        self.reason = reason
        self.task_id = task_id
        self.task_name = task_name
        super().__init__(reason)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["task_id"] = self.task_id
        result["task_name"] = self.task_name
        return result


# =============================================================================
# LOADING ERRORS
# =============================================================================


class TaskLoadError(TasksmithError):
    """A tasks file or a named task inside it could not be loaded."""

    default_category = ErrorCategory.CONFIG


__all__ = [
    "ErrorCategory",
    "TasksmithError",
    "TaskUsageError",
    "TaskReentrancyError",
    "SubscriptionClosedError",
    "SignalAlreadyCancelledError",
    "SignatureError",
    "TaskFailed",
    "TaskLoadError",
]
