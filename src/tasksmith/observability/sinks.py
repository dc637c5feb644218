"""Event sinks: observers that send task events somewhere useful.

A sink is any ``(TaskEvent) -> None`` callable, so sinks subscribe to a
task like any other observer::

    task.subscribe(ConsoleSink()).subscribe(LogSink())

    ConsoleSink    ─ formatted, coloured lines on a rich Console
    LogSink        ─ structlog events with task_id / task_name / event_type
    EventRecorder  ─ keeps events in memory (tests, summaries)
"""

from __future__ import annotations

from rich.console import Console

from tasksmith.core.logging import get_logger
from tasksmith.execution.events import EventType, TaskEvent
from tasksmith.observability.format import format_event

_STYLES: dict[EventType, str] = {
    EventType.STARTED: "cyan",
    EventType.LOG: "",
    EventType.COMPLETED: "green",
    EventType.FAILED: "bold red",
}


class ConsoleSink:
    """Print each event through :func:`format_event` on a rich Console."""

    def __init__(self, console: Console | None = None, *, data_width: int | None = None) -> None:
        self.console = console or Console()
        self.data_width = data_width

    def __call__(self, event: TaskEvent) -> None:
        self.console.print(
            format_event(event, data_width=self.data_width),
            style=_STYLES.get(event.type) or None,
            markup=False,
            highlight=False,
            soft_wrap=True,
        )


class LogSink:
    """Forward events into structlog.

    ``failed`` events are logged at warning level, everything else at
    ``level``.
    """

    def __init__(self, level: str = "info", *, logger_name: str = "tasksmith.events") -> None:
        self.level = level.lower()
        self._logger = get_logger(logger_name)

    def __call__(self, event: TaskEvent) -> None:
        method = "warning" if event.type is EventType.FAILED else self.level
        getattr(self._logger, method)(
            "task_event",
            task_id=event.id,
            task_name=event.name,
            event_type=event.type.value,
            data=event.data,
        )


class EventRecorder:
    """Collect every event it receives.

    Example:
        >>> recorder = EventRecorder()
        >>> task.subscribe(recorder)
        >>> await task.run()
        >>> recorder.types()
        ['started', 'completed']
    """

    def __init__(self) -> None:
        self.events: list[TaskEvent] = []

    def __call__(self, event: TaskEvent) -> None:
        self.events.append(event)

    def __len__(self) -> int:
        return len(self.events)

    def clear(self) -> None:
        self.events.clear()

    def of_type(self, event_type: EventType | str) -> list[TaskEvent]:
        wanted = EventType(event_type)
        return [event for event in self.events if event.type is wanted]

    def for_name(self, name: str) -> list[TaskEvent]:
        return [event for event in self.events if event.name == name]

    def for_task(self, task_id: str) -> list[TaskEvent]:
        return [event for event in self.events if event.id == task_id]

    def types(self) -> list[str]:
        return [event.type.value for event in self.events]

    def logs(self) -> list[str]:
        """Payloads of all ``log`` events, in order."""
        return [event.data for event in self.of_type(EventType.LOG)]


__all__ = ["ConsoleSink", "LogSink", "EventRecorder"]
