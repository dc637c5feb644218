"""Primitive tasks: ok, fail, noop, create, script.

These are the leaves every tree bottoms out in.  ``create`` wraps a plain
callback-style executor; ``script`` wraps an ``async def`` so a leaf can be
written as ordinary asyncio code::

    async def fetch_version(context):
        context.log("reading VERSION")
        text = await asyncio.to_thread(Path("VERSION").read_text)
        return text.strip()

    task = script("read/version", fetch_version)

The coroutine's return value resolves the task, raising ``TaskFailed`` (or
any exception) fails it, and cancelling the task cancels the coroutine.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

from tasksmith.core.errors import TaskFailed
from tasksmith.execution.task import Task, TaskContext
from tasksmith.orchestration.params import CombinatorParams, CreateParams, ScriptParams, validate_params


def ok(message: str | None = None, *, name: str = "core/ok") -> Task:
    """A task that completes immediately with ``message``."""
    params = validate_params("ok", CombinatorParams, message=message)
    return Task(name, lambda context: context.ok(params.message))


def fail(message: str | None = None, *, name: str = "core/fail") -> Task:
    """A task that fails immediately with ``message``."""
    params = validate_params("fail", CombinatorParams, message=message)
    return Task(name, lambda context: context.fail(params.message))


def noop(*, name: str = "core/noop") -> Task:
    """A task that completes immediately without a message."""
    return Task(name, lambda context: context.ok())


def create(name: str, executor: Callable[[TaskContext], None]) -> Task:
    """A task driven by a callback-style ``executor(context)``."""
    params = validate_params("create", CreateParams, executor=executor)
    return Task(name, params.executor)


def script(name: str, func: Callable[[TaskContext], Awaitable[Any]]) -> Task:
    """A task driven by the coroutine ``func(context)``."""
    params = validate_params("script", ScriptParams, func=func)

    def executor(context: TaskContext) -> None:
        driver = context.spawn(_drive(context, params.func))

        def _on_cancel(reason: str) -> None:
            driver.cancel()
            context.fail(reason)

        context.oncancel(_on_cancel)

    return Task(name, executor)


async def _drive(context: TaskContext, func: Callable[[TaskContext], Awaitable[Any]]) -> None:
    try:
        result = await func(context)
    except TaskFailed as exc:
        context.fail(exc.reason)
        return
    context.ok(result)


__all__ = ["ok", "fail", "noop", "create", "script"]
