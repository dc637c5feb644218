"""Conditional branching: ifelse and ifthen.

The condition is awaited once; the branch task is built only after the
condition has resolved.  A cancellation that arrives while the condition
is still pending cancels the evaluation, and no branch is started.
"""

from __future__ import annotations

from tasksmith.core.errors import TaskFailed
from tasksmith.execution.scope import ExecutionScope
from tasksmith.execution.task import Task, TaskContext
from tasksmith.orchestration.conditions import evaluate
from tasksmith.orchestration.params import (
    Condition,
    IfElseParams,
    IfThenParams,
    TaskFactory,
    validate_params,
)


def ifelse(
    condition: Condition,
    left: TaskFactory,
    right: TaskFactory,
    *,
    message: str | None = None,
    name: str = "core/ifelse",
) -> Task:
    """Run ``left()`` when the condition holds, otherwise ``right()``."""
    params = validate_params(
        "ifelse", IfElseParams, condition=condition, left=left, right=right, message=message
    )

    def executor(context: TaskContext) -> None:
        scope = ExecutionScope().bind(context)
        if params.message is not None:
            context.log(params.message)
        context.spawn(_branch(context, scope, params.condition, params.left, params.right))

    return Task(name, executor)


def ifthen(
    condition: Condition,
    taskfunc: TaskFactory,
    *,
    message: str | None = None,
    name: str = "core/ifthen",
) -> Task:
    """Run ``taskfunc()`` when the condition holds, otherwise resolve ok."""
    params = validate_params("ifthen", IfThenParams, condition=condition, taskfunc=taskfunc, message=message)

    def executor(context: TaskContext) -> None:
        scope = ExecutionScope().bind(context)
        if params.message is not None:
            context.log(params.message)
        context.spawn(_branch(context, scope, params.condition, params.taskfunc, None))

    return Task(name, executor)


async def _branch(
    context: TaskContext,
    scope: ExecutionScope,
    condition: Condition,
    left: TaskFactory,
    right: TaskFactory | None,
) -> None:
    if scope.cancelled:
        return
    result = await evaluate(scope, condition)
    if result is None:
        return
    taskfunc = left if result else right
    if taskfunc is None:
        context.ok()
        return

    branch = scope.track(taskfunc())
    try:
        await context.run(branch)
    except TaskFailed as exc:
        context.fail(exc.reason)
    else:
        context.ok()
    finally:
        scope.release(branch)


__all__ = ["ifelse", "ifthen"]
