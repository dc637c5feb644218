"""Parameter models for combinators.

Manifesto:
    Combinators must reject bad parameters at construction time, before
    anything runs, and say exactly which parameter was wrong.  Each
    combinator declares its parameters once as a pydantic model; optional
    leading messages and names are plain keyword arguments instead of
    positional overloads.

Example:
    >>> validate_params("retry", RetryParams, retries=-1, taskfunc=print)
    Traceback (most recent call last):
        ...
    tasksmith.core.errors.SignatureError: retry: retries: Input should be greater than or equal to 0
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Annotated, Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr, ValidationError

from tasksmith.core.errors import SignatureError
from tasksmith.execution.task import Task, TaskContext

Condition = Callable[[], Awaitable[bool]]
"""Asynchronous predicate: ``await condition()`` yields a bool."""

TaskFactory = Callable[[], Task]
IterationFactory = Callable[[int], Task]

NonNegativeInt = Annotated[StrictInt, Field(ge=0)]
Milliseconds = Annotated[float, Field(ge=0, strict=True)]


class CombinatorParams(BaseModel):
    """Base for every combinator's parameter model."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True, extra="forbid")

    message: StrictStr | None = None


class SeriesParams(CombinatorParams):
    tasks: list[Task]


class ParallelParams(CombinatorParams):
    tasks: list[Task]
    cancel_siblings: StrictBool = False


class EachParams(CombinatorParams):
    elements: list[Any]
    func: Callable[[Any], Task]


class RetryParams(CombinatorParams):
    retries: NonNegativeInt
    taskfunc: IterationFactory


class RepeatParams(CombinatorParams):
    iterations: NonNegativeInt
    taskfunc: IterationFactory


class DelayParams(CombinatorParams):
    ms: Milliseconds
    taskfunc: TaskFactory | None = None


class TimeoutParams(CombinatorParams):
    ms: Milliseconds
    taskfunc: TaskFactory
    reason: StrictStr | None = None


class DoWhileParams(CombinatorParams):
    condition: Condition
    taskfunc: TaskFactory


class IfElseParams(CombinatorParams):
    condition: Condition
    left: TaskFactory
    right: TaskFactory


class IfThenParams(CombinatorParams):
    condition: Condition
    taskfunc: TaskFactory


class TryCatchParams(CombinatorParams):
    left: TaskFactory
    right: TaskFactory


class CreateParams(CombinatorParams):
    executor: Callable[[TaskContext], None]


class ScriptParams(CombinatorParams):
    func: Callable[[TaskContext], Awaitable[Any]]


class ShellParams(CombinatorParams):
    command: Annotated[StrictStr, Field(min_length=1)]
    exitcode: StrictInt = 0


class CliParams(CombinatorParams):
    argv: list[StrictStr]
    options: dict[StrictStr, TaskFactory]


P = TypeVar("P", bound=CombinatorParams)


def validate_params(combinator: str, model: type[P], **values: Any) -> P:
    """Build ``model`` from ``values`` or raise :class:`SignatureError`."""
    try:
        return model(**values)
    except ValidationError as exc:
        errors = exc.errors()
        fields = [".".join(str(part) for part in err["loc"]) for err in errors]
        detail = "; ".join(f"{field}: {err['msg']}" for field, err in zip(fields, errors))
        raise SignatureError(combinator, detail, fields=fields) from exc


__all__ = [
    "Condition",
    "TaskFactory",
    "IterationFactory",
    "CombinatorParams",
    "SeriesParams",
    "ParallelParams",
    "EachParams",
    "RetryParams",
    "RepeatParams",
    "DelayParams",
    "TimeoutParams",
    "DoWhileParams",
    "IfElseParams",
    "IfThenParams",
    "TryCatchParams",
    "CreateParams",
    "ScriptParams",
    "ShellParams",
    "CliParams",
    "validate_params",
]
