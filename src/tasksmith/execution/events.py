"""Task Events — immutable records of a task's lifecycle.

WHY
───
Callers cannot see inside a running task tree.  Every task reports what it
is doing as a stream of small immutable events that bubble up through the
tree, so a single observer on the root sees the whole run.

ARCHITECTURE
────────────
::

    TaskEvent
      ├── id    ─ which task (opaque, stable for the task's lifetime)
      ├── name  ─ human label (e.g. "core/series")
      ├── time  ─ when (UTC)
      ├── type  ─ started / log / completed / failed
      └── data  ─ string payload

    Events are produced by a task during its own run and never mutated.

Related modules:
    channel.py   EventChannel, the per-task publish/subscribe bus
    task.py      Task, which emits these events
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


def utcnow() -> datetime:
    """Return timezone-aware UTC datetime."""
    return datetime.now(UTC)


class EventType(str, Enum):
    """Lifecycle moments a task reports."""

    STARTED = "started"
    LOG = "log"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class TaskEvent:
    """One moment in a task's lifecycle.

    Example:
        >>> event = TaskEvent(id="3f2a", name="core/delay", type=EventType.LOG, data="waiting")
        >>> event.to_dict()["type"]
        'log'
    """

    id: str
    name: str
    type: EventType
    data: str = ""
    time: datetime = field(default_factory=utcnow)

    @property
    def terminal(self) -> bool:
        return self.type in (EventType.COMPLETED, EventType.FAILED)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON/logging."""
        return {
            "id": self.id,
            "name": self.name,
            "time": self.time.isoformat(),
            "type": self.type.value,
            "data": self.data,
        }


EventHandler = Callable[[TaskEvent], None]
"""Observer signature: anything that accepts a ``TaskEvent``."""


def format_arguments(args: tuple[Any, ...] | list[Any]) -> str:
    """Join message arguments into an event payload.

    ``None`` and empty strings are skipped, a single remaining argument is
    returned verbatim, several are joined with spaces.

    >>> format_arguments(("copied", 3, None, "files"))
    'copied 3 files'
    """
    parts = []
    for arg in args:
        if arg is None:
            continue
        text = str(arg)
        if not text:
            continue
        parts.append(text)
    return parts[0] if len(parts) == 1 else " ".join(parts)


__all__ = ["EventType", "TaskEvent", "EventHandler", "format_arguments", "utcnow"]
