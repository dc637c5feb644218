"""ExecutionScope — explicit per-run state of a combinator.

A combinator's executor needs a little mutable state while it supervises
its children: whether it has been cancelled, which children are live, the
timer it armed, the condition it is awaiting.  Rather than scattering that
across closure variables, each run creates one ``ExecutionScope``.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

from tasksmith.execution.task import Task, TaskContext


@dataclass
class ExecutionScope:
    """Mutable state owned by one combinator run."""

    cancelled: bool = False
    reason: str | None = None
    live: list[Task] = field(default_factory=list)
    timer: asyncio.TimerHandle | None = None
    pending: asyncio.Future[Any] | None = None
    completed: int = 0

    def bind(self, context: TaskContext) -> ExecutionScope:
        """Tear the scope down and fail ``context`` when it is cancelled."""

        def _on_cancel(reason: str) -> None:
            self.abort(reason)
            context.fail(reason)

        context.oncancel(_on_cancel)
        return self

    def track(self, task: Task) -> Task:
        self.live.append(task)
        return task

    def release(self, task: Task) -> None:
        if task in self.live:
            self.live.remove(task)

    def clear_timer(self) -> None:
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None

    def cancel_children(self, reason: str, *, exclude: Task | None = None) -> None:
        for task in list(self.live):
            if task is not exclude:
                task.cancel(reason)

    def abort(self, reason: str) -> None:
        """Mark the scope cancelled and tear down everything it holds."""
        self.cancelled = True
        self.reason = reason
        self.clear_timer()
        if self.pending is not None and not self.pending.done():
            self.pending.cancel()
        self.cancel_children(reason)


__all__ = ["ExecutionScope"]
