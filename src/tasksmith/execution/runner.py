"""Drive a root task to completion.

``execute`` awaits a task inside an existing event loop; ``run_task`` is the
synchronous entry point for scripts and the CLI and owns its own loop.
Neither raises on task failure: both return a :class:`TaskOutcome`.

Example::

    outcome = run_task(series([shell("make"), shell("make test")]), ConsoleSink())
    sys.exit(0 if outcome.ok else 1)
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any

from tasksmith.core.errors import TaskFailed
from tasksmith.core.logging import LogContext, get_logger
from tasksmith.execution.events import EventHandler
from tasksmith.execution.task import Task

logger = get_logger(__name__)


@dataclass(frozen=True)
class TaskOutcome:
    """Terminal result of a root task."""

    ok: bool
    message: str
    task_id: str
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"ok": self.ok, "message": self.message, "task_id": self.task_id, "name": self.name}


async def execute(task: Task, *sinks: EventHandler) -> TaskOutcome:
    """Subscribe ``sinks``, run ``task`` and wait for it to settle."""
    for sink in sinks:
        task.subscribe(sink)
    with LogContext(root_task=task.name):
        logger.debug("root_task_started", task_id=task.id)
        try:
            message = await task.run()
        except TaskFailed as exc:
            logger.debug("root_task_failed", task_id=task.id, reason=exc.reason)
            return TaskOutcome(ok=False, message=exc.reason, task_id=task.id, name=task.name)
        logger.debug("root_task_completed", task_id=task.id)
        return TaskOutcome(ok=True, message=message, task_id=task.id, name=task.name)


def run_task(task: Task, *sinks: EventHandler) -> TaskOutcome:
    """Run ``task`` on a fresh event loop and return its outcome."""
    return asyncio.run(execute(task, *sinks))


__all__ = ["TaskOutcome", "execute", "run_task"]
