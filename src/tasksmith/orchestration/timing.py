"""Timer combinators: delay and timeout.

Both arm a single ``loop.call_later`` timer and keep its handle on the
run's ExecutionScope so that every exit path can clear it.

    delay(ms, taskfunc=None)  → wait, then run taskfunc() (or resolve ok)
    timeout(ms, taskfunc)     → run taskfunc() now, fail if it takes too long
"""

from __future__ import annotations

import asyncio

from tasksmith.core.logging import get_logger
from tasksmith.core.settings import get_settings
from tasksmith.execution.scope import ExecutionScope
from tasksmith.execution.task import Task, TaskContext, on_settled
from tasksmith.orchestration.params import DelayParams, TaskFactory, TimeoutParams, validate_params

logger = get_logger(__name__)


def delay(
    ms: float,
    taskfunc: TaskFactory | None = None,
    *,
    message: str | None = None,
    name: str = "core/delay",
) -> Task:
    """Wait ``ms`` milliseconds, then run ``taskfunc()`` if given.

    Cancelling before the timer fires clears the timer and fails with the
    reason.  Cancelling afterwards cancels the child that was started.
    """
    params = validate_params("delay", DelayParams, ms=ms, taskfunc=taskfunc, message=message)

    def executor(context: TaskContext) -> None:
        scope = ExecutionScope().bind(context)
        if params.message is not None:
            context.log(params.message)
        if scope.cancelled:
            return
        loop = asyncio.get_running_loop()
        scope.timer = loop.call_later(params.ms / 1000, _delay_elapsed, context, scope, params.taskfunc)

    return Task(name, executor)


def _delay_elapsed(context: TaskContext, scope: ExecutionScope, taskfunc: TaskFactory | None) -> None:
    scope.timer = None
    if scope.cancelled:
        return
    if taskfunc is None:
        context.ok()
        return
    try:
        task = scope.track(taskfunc())
        future = context.run(task)
    except Exception as exc:
        logger.warning("delay_child_failed_to_start", task_id=context.task_id, exc_info=True)
        context.fail(str(exc))
        return
    on_settled(future, lambda _message: context.ok(), context.fail)


def timeout(
    ms: float,
    taskfunc: TaskFactory,
    *,
    message: str | None = None,
    reason: str | None = None,
    name: str = "core/timeout",
) -> Task:
    """Run ``taskfunc()`` and fail if it has not settled within ``ms`` milliseconds.

    On expiry the child is cancelled with the timeout reason (``reason`` or
    the ``timeout_reason`` setting) and the timeout task fails with it.
    Whichever way the child settles first, the timer is cleared.
    """
    params = validate_params(
        "timeout", TimeoutParams, ms=ms, taskfunc=taskfunc, message=message, reason=reason
    )

    def executor(context: TaskContext) -> None:
        scope = ExecutionScope().bind(context)
        if params.message is not None:
            context.log(params.message)
        if scope.cancelled:
            return
        expiry_reason = params.reason if params.reason is not None else get_settings().timeout_reason
        task = scope.track(params.taskfunc())
        future = context.run(task)
        loop = asyncio.get_running_loop()
        scope.timer = loop.call_later(params.ms / 1000, _timeout_expired, context, scope, task, expiry_reason)
        on_settled(
            future,
            lambda _message: _timeout_settled(context, scope, task, None),
            lambda failure: _timeout_settled(context, scope, task, failure),
        )

    return Task(name, executor)


def _timeout_expired(context: TaskContext, scope: ExecutionScope, task: Task, reason: str) -> None:
    scope.timer = None
    if scope.cancelled:
        return
    logger.debug("timeout_elapsed", task_id=context.task_id, child_id=task.id, reason=reason)
    task.cancel(reason)
    context.fail(reason)


def _timeout_settled(context: TaskContext, scope: ExecutionScope, task: Task, failure: str | None) -> None:
    scope.clear_timer()
    scope.release(task)
    if failure is None:
        context.ok()
    else:
        context.fail(failure)


__all__ = ["delay", "timeout"]
