"""
Shared pytest fixtures for tasksmith tests.

This module provides:
- An event recorder for observing task runs
- Settings cache isolation between tests
- Small task builders used across test modules
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable

import pytest

from tasksmith.core.settings import reset_settings
from tasksmith.execution.task import Task, TaskContext
from tasksmith.observability.sinks import EventRecorder


# =============================================================================
# Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Re-read settings from the environment for every test."""
    reset_settings()
    yield
    reset_settings()


# =============================================================================
# Observation
# =============================================================================


@pytest.fixture
def recorder() -> EventRecorder:
    """Collects every event delivered to it."""
    return EventRecorder()


# =============================================================================
# Task builders
# =============================================================================


def hanging(name: str = "test/hanging", on_cancel: Callable[[str], None] | None = None) -> Task:
    """A task that never settles on its own and fails when cancelled."""

    def executor(context: TaskContext) -> None:
        def _cancelled(reason: str) -> None:
            if on_cancel is not None:
                on_cancel(reason)
            context.fail(reason)

        context.oncancel(_cancelled)

    return Task(name, executor)


def later(result: str | None = None, *, ms: float = 5, fail: bool = False, name: str = "test/later") -> Task:
    """A task that settles after ``ms`` milliseconds."""

    def executor(context: TaskContext) -> None:
        loop = asyncio.get_running_loop()
        settle = context.fail if fail else context.ok
        handle = loop.call_later(ms / 1000, settle, result)
        context.oncancel(lambda reason: (handle.cancel(), context.fail(reason)))

    return Task(name, executor)


@pytest.fixture
def make_hanging():
    return hanging


@pytest.fixture
def make_later():
    return later
