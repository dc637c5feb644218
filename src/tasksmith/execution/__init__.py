"""tasksmith execution — the Task abstraction and its supporting primitives.

ARCHITECTURE
────────────
::

    TaskEvent            ─ immutable lifecycle record
    EventChannel         ─ per-task publish/subscribe (sealed on start,
                           closed on settle)
    CancellationSignal   ─ one-shot cancellation broadcast
    Task / TaskContext   ─ the state machine and the executor's capabilities
    ExecutionScope       ─ per-run combinator state
    run_task / execute   ─ drive a root task to a TaskOutcome
"""

from tasksmith.execution.cancellation import CancellationSignal, SignalState
from tasksmith.execution.channel import ChannelSealedError, ChannelState, EventChannel
from tasksmith.execution.events import EventHandler, EventType, TaskEvent, format_arguments
from tasksmith.execution.runner import TaskOutcome, execute, run_task
from tasksmith.execution.scope import ExecutionScope
from tasksmith.execution.task import Executor, Task, TaskContext, TaskState, failure_reason, on_settled

__all__ = [
    "CancellationSignal",
    "SignalState",
    "ChannelSealedError",
    "ChannelState",
    "EventChannel",
    "EventHandler",
    "EventType",
    "TaskEvent",
    "format_arguments",
    "TaskOutcome",
    "execute",
    "run_task",
    "ExecutionScope",
    "Executor",
    "Task",
    "TaskContext",
    "TaskState",
    "failure_reason",
    "on_settled",
]
