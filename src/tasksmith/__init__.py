"""
tasksmith — composable, cancellable asynchronous tasks.

A Task is a single unit of work that starts once, reports what it is doing
as a stream of events, and settles exactly once as completed or failed.
Combinators build larger tasks out of smaller ones::

    from tasksmith import delay, parallel, retry, run_task, series, shell, timeout
    from tasksmith.observability import ConsoleSink

    build = series([
        shell("ruff check src"),
        parallel([shell("pytest tests/unit"), shell("pytest tests/cli")]),
        retry(3, lambda attempt: timeout(30_000, lambda: shell("make upload"))),
    ])
    outcome = run_task(build, ConsoleSink())

Layers:
    tasksmith.core           errors, logging, settings
    tasksmith.execution      Task, TaskContext, events, cancellation, runner
    tasksmith.orchestration  combinators
    tasksmith.operations     shell, cli
    tasksmith.observability  event formatting and sinks
    tasksmith.cli            the ``tasksmith`` command
"""

__version__ = "0.1.0"

from tasksmith.core.errors import (
    SignalAlreadyCancelledError,
    SignatureError,
    SubscriptionClosedError,
    TaskFailed,
    TaskLoadError,
    TaskReentrancyError,
    TasksmithError,
    TaskUsageError,
)
from tasksmith.execution import (
    CancellationSignal,
    EventType,
    ExecutionScope,
    Task,
    TaskContext,
    TaskEvent,
    TaskOutcome,
    TaskState,
    execute,
    run_task,
)
from tasksmith.observability import format_event
from tasksmith.operations import cli, shell
from tasksmith.orchestration import (
    constant,
    create,
    delay,
    dowhile,
    each,
    fail,
    from_callback,
    ifelse,
    ifthen,
    noop,
    ok,
    parallel,
    repeat,
    retry,
    script,
    series,
    timeout,
    trycatch,
)

__all__ = [
    "__version__",
    # errors
    "TasksmithError",
    "TaskUsageError",
    "TaskReentrancyError",
    "SubscriptionClosedError",
    "SignalAlreadyCancelledError",
    "SignatureError",
    "TaskFailed",
    "TaskLoadError",
    # execution
    "CancellationSignal",
    "EventType",
    "ExecutionScope",
    "Task",
    "TaskContext",
    "TaskEvent",
    "TaskOutcome",
    "TaskState",
    "execute",
    "run_task",
    "format_event",
    # combinators
    "series",
    "parallel",
    "each",
    "trycatch",
    "retry",
    "repeat",
    "dowhile",
    "delay",
    "timeout",
    "ifelse",
    "ifthen",
    "ok",
    "fail",
    "noop",
    "create",
    "script",
    "constant",
    "from_callback",
    # operations
    "shell",
    "cli",
]
