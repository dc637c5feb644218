"""Looping combinators: retry, repeat, dowhile.

Each loop runs one child at a time, builds the next child only when the
previous one has settled, and stops as soon as it is cancelled.

    retry(n, taskfunc)       → up to n attempts, first success wins
    repeat(n, taskfunc)      → exactly n runs, first failure aborts
    dowhile(cond, taskfunc)  → run, then loop while ``await cond()``
"""

from __future__ import annotations

from tasksmith.core.errors import TaskFailed
from tasksmith.core.logging import get_logger
from tasksmith.execution.scope import ExecutionScope
from tasksmith.execution.task import Task, TaskContext
from tasksmith.orchestration.conditions import evaluate
from tasksmith.orchestration.params import (
    Condition,
    DoWhileParams,
    IterationFactory,
    RepeatParams,
    RetryParams,
    TaskFactory,
    validate_params,
)

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# retry
# ---------------------------------------------------------------------------


def retry(
    retries: int,
    taskfunc: IterationFactory,
    *,
    message: str | None = None,
    name: str = "core/retry",
) -> Task:
    """Call ``taskfunc(iteration)`` until an attempt succeeds.

    Iterations count from 1.  After ``retries`` failed attempts the retry
    task fails with the last attempt's reason.  Cancellation cancels the
    running attempt and stops further attempts.
    """
    params = validate_params("retry", RetryParams, retries=retries, taskfunc=taskfunc, message=message)

    def executor(context: TaskContext) -> None:
        scope = ExecutionScope().bind(context)
        if params.message is not None:
            context.log(params.message)
        context.spawn(_run_attempts(context, scope, params))

    return Task(name, executor)


async def _run_attempts(context: TaskContext, scope: ExecutionScope, params: RetryParams) -> None:
    reason = ""
    for iteration in range(1, params.retries + 1):
        if scope.cancelled:
            return
        attempt = scope.track(params.taskfunc(iteration))
        try:
            await context.run(attempt)
        except TaskFailed as exc:
            reason = exc.reason
            logger.debug("retry_attempt_failed", task_id=context.task_id, iteration=iteration, reason=reason)
            continue
        finally:
            scope.release(attempt)
        context.ok()
        return
    if not scope.cancelled:
        context.fail(reason)


# ---------------------------------------------------------------------------
# repeat
# ---------------------------------------------------------------------------


def repeat(
    iterations: int,
    taskfunc: IterationFactory,
    *,
    message: str | None = None,
    name: str = "core/repeat",
) -> Task:
    """Run ``taskfunc(iteration)`` exactly ``iterations`` times in sequence.

    Any failure aborts the repeat with that failure's reason.
    """
    params = validate_params(
        "repeat", RepeatParams, iterations=iterations, taskfunc=taskfunc, message=message
    )

    def executor(context: TaskContext) -> None:
        scope = ExecutionScope().bind(context)
        if params.message is not None:
            context.log(params.message)
        context.spawn(_run_repeat(context, scope, params))

    return Task(name, executor)


async def _run_repeat(context: TaskContext, scope: ExecutionScope, params: RepeatParams) -> None:
    previous: Task | None = None
    for iteration in range(1, params.iterations + 1):
        if scope.cancelled:
            return
        if previous is not None:
            # settled already; cancel is a no-op unless it misbehaved
            previous.cancel()
        previous = scope.track(params.taskfunc(iteration))
        try:
            await context.run(previous)
        except TaskFailed as exc:
            context.fail(exc.reason)
            return
        finally:
            scope.release(previous)
    if not scope.cancelled:
        context.ok()


# ---------------------------------------------------------------------------
# dowhile
# ---------------------------------------------------------------------------


def dowhile(
    condition: Condition,
    taskfunc: TaskFactory,
    *,
    message: str | None = None,
    name: str = "core/dowhile",
) -> Task:
    """Run ``taskfunc()``, then keep running it while ``await condition()``.

    The body always runs at least once.  The loop resolves ok once the
    condition yields False; a body failure fails the loop.
    """
    params = validate_params(
        "dowhile", DoWhileParams, condition=condition, taskfunc=taskfunc, message=message
    )

    def executor(context: TaskContext) -> None:
        scope = ExecutionScope().bind(context)
        if params.message is not None:
            context.log(params.message)
        context.spawn(_run_dowhile(context, scope, params))

    return Task(name, executor)


async def _run_dowhile(context: TaskContext, scope: ExecutionScope, params: DoWhileParams) -> None:
    while not scope.cancelled:
        body = scope.track(params.taskfunc())
        try:
            await context.run(body)
        except TaskFailed as exc:
            context.fail(exc.reason)
            return
        finally:
            scope.release(body)

        again = await evaluate(scope, params.condition)
        if again is None:
            return
        if not again:
            context.ok()
            return


__all__ = ["retry", "repeat", "dowhile"]
