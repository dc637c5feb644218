"""Asynchronous conditions used by ``dowhile``, ``ifelse`` and ``ifthen``.

A condition is a zero-argument callable returning an awaitable bool, so it
can do I/O (check that a file exists, ping a service) without blocking the
event loop::

    async def output_missing() -> bool:
        return not await asyncio.to_thread(Path("dist").exists)

Continuation-style predicates (``func(next)`` that eventually calls
``next(value)``) are adapted with :func:`from_callback`.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable

from tasksmith.execution.scope import ExecutionScope
from tasksmith.orchestration.params import Condition


def from_callback(func: Callable[[Callable[[bool], None]], None]) -> Condition:
    """Adapt ``func(next)`` into an awaitable condition.

    Only the first call to ``next`` counts.
    """

    async def condition() -> bool:
        future: asyncio.Future[bool] = asyncio.get_running_loop().create_future()

        def _next(value: bool) -> None:
            if not future.done():
                future.set_result(bool(value))

        func(_next)
        return await future

    return condition


def constant(value: bool) -> Condition:
    """A condition that always yields ``value``."""

    async def condition() -> bool:
        return value

    return condition


async def evaluate(scope: ExecutionScope, condition: Condition) -> bool | None:
    """Await ``condition`` on behalf of ``scope``.

    Returns None when the scope was cancelled while the condition was
    pending; the pending evaluation itself is cancelled by the scope.
    """
    scope.pending = asyncio.ensure_future(condition())
    try:
        result = await scope.pending
    except asyncio.CancelledError:
        if scope.cancelled:
            return None
        raise
    finally:
        scope.pending = None
    if scope.cancelled:
        return None
    return bool(result)


__all__ = ["from_callback", "constant", "evaluate"]
