"""Composition Operators — sequence, fan-out, and fallback.

WHY
───
Most task trees are built from three shapes: do these in order, do these
at the same time, and try this but fall back to that.  Each operator is a
factory returning an ordinary ``Task``, so they nest freely.

ARCHITECTURE
────────────
::

    series(tasks)          → run in order, stop at the first failure
    parallel(tasks)        → start all, ok when all ok, fail on first failure
    each(elements, func)   → series over func(element), built lazily
    trycatch(left, right)  → run left(); on failure run right()

    Every operator:
      - validates its parameters when called (SignatureError)
      - starts children only when its own task runs
      - forwards child events unchanged
      - on cancellation cancels its live children and fails with the reason

Example::

    build = series([
        shell("ruff check ."),
        parallel([shell("pytest tests/unit"), shell("pytest tests/cli")]),
    ])
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from functools import partial
from typing import Any

from tasksmith.core.errors import TaskFailed
from tasksmith.core.logging import get_logger
from tasksmith.execution.scope import ExecutionScope
from tasksmith.execution.task import Task, TaskContext, on_settled
from tasksmith.orchestration.params import (
    EachParams,
    ParallelParams,
    SeriesParams,
    TaskFactory,
    TryCatchParams,
    validate_params,
)

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# series: sequential composition
# ---------------------------------------------------------------------------


def series(tasks: Sequence[Task], *, message: str | None = None, name: str = "core/series") -> Task:
    """Run ``tasks`` one after another.

    The first failure fails the series with that task's reason and the
    remaining tasks never start.  An empty sequence resolves immediately.
    Cancellation cancels only the task currently running.
    """
    params = validate_params("series", SeriesParams, tasks=tasks, message=message)

    def executor(context: TaskContext) -> None:
        scope = ExecutionScope().bind(context)
        if params.message is not None:
            context.log(params.message)
        if not params.tasks:
            context.ok()
            return
        context.spawn(_run_in_order(context, scope, iter(params.tasks)))

    return Task(name, executor)


def each(
    elements: Sequence[Any],
    func: Callable[[Any], Task],
    *,
    message: str | None = None,
    name: str = "core/each",
) -> Task:
    """Run ``func(element)`` for every element, in order.

    Tasks are built only when their turn comes.
    """
    params = validate_params("each", EachParams, elements=elements, func=func, message=message)

    def executor(context: TaskContext) -> None:
        scope = ExecutionScope().bind(context)
        if params.message is not None:
            context.log(params.message)
        if not params.elements:
            context.ok()
            return
        context.spawn(_run_in_order(context, scope, (params.func(element) for element in params.elements)))

    return Task(name, executor)


async def _run_in_order(context: TaskContext, scope: ExecutionScope, tasks: Iterable[Task]) -> None:
    for task in tasks:
        if scope.cancelled:
            return
        scope.track(task)
        try:
            await context.run(task)
        except TaskFailed as exc:
            context.fail(exc.reason)
            return
        finally:
            scope.release(task)
    if not scope.cancelled:
        context.ok()


# ---------------------------------------------------------------------------
# parallel: concurrent composition
# ---------------------------------------------------------------------------


def parallel(
    tasks: Sequence[Task],
    *,
    message: str | None = None,
    cancel_siblings: bool = False,
    name: str = "core/parallel",
) -> Task:
    """Start every task at once; resolve when all of them have completed.

    The first child failure fails the parallel task immediately.  By default
    the other children are left running: their later events are dropped by
    the already settled parent.  Pass ``cancel_siblings=True`` to cancel
    them instead.  Cancelling the parallel task cancels every live child.
    """
    params = validate_params(
        "parallel", ParallelParams, tasks=tasks, message=message, cancel_siblings=cancel_siblings
    )

    def executor(context: TaskContext) -> None:
        scope = ExecutionScope().bind(context)
        if params.message is not None:
            context.log(params.message)
        if not params.tasks:
            context.ok()
            return
        for task in params.tasks:
            if scope.cancelled:
                return
            scope.track(task)
            on_settled(
                context.run(task),
                partial(_child_completed, context, scope, task, len(params.tasks)),
                partial(_child_failed, context, scope, task, params.cancel_siblings),
            )

    return Task(name, executor)


def _child_completed(context: TaskContext, scope: ExecutionScope, task: Task, total: int, _message: str) -> None:
    scope.release(task)
    scope.completed += 1
    if scope.completed == total:
        context.ok()


def _child_failed(
    context: TaskContext, scope: ExecutionScope, task: Task, cancel_siblings: bool, reason: str
) -> None:
    scope.release(task)
    if cancel_siblings and not scope.cancelled:
        logger.debug("cancelling_siblings", task_id=context.task_id, live=len(scope.live))
        scope.cancel_children(reason)
    context.fail(reason)


# ---------------------------------------------------------------------------
# trycatch: fallback
# ---------------------------------------------------------------------------


def trycatch(
    left: TaskFactory,
    right: TaskFactory,
    *,
    message: str | None = None,
    name: str = "core/trycatch",
) -> Task:
    """Run ``left()``; if it fails, run ``right()`` and take its outcome."""
    params = validate_params("trycatch", TryCatchParams, left=left, right=right, message=message)

    def executor(context: TaskContext) -> None:
        scope = ExecutionScope().bind(context)
        if params.message is not None:
            context.log(params.message)
        context.spawn(_run_fallback(context, scope, params.left, params.right))

    return Task(name, executor)


async def _run_fallback(context: TaskContext, scope: ExecutionScope, left: TaskFactory, right: TaskFactory) -> None:
    if scope.cancelled:
        return
    attempt = scope.track(left())
    try:
        await context.run(attempt)
    except TaskFailed as exc:
        logger.debug("trycatch_fallback", task_id=context.task_id, reason=exc.reason)
    else:
        context.ok()
        return
    finally:
        scope.release(attempt)

    if scope.cancelled:
        return
    fallback = scope.track(right())
    try:
        await context.run(fallback)
    except TaskFailed as exc:
        context.fail(exc.reason)
    else:
        context.ok()
    finally:
        scope.release(fallback)


__all__ = ["series", "parallel", "each", "trycatch"]
