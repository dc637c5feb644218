"""tasksmith observability — turning task events into output."""

from tasksmith.observability.format import Column, event_columns, format_event, tabulate
from tasksmith.observability.sinks import ConsoleSink, EventRecorder, LogSink

__all__ = [
    "Column",
    "event_columns",
    "format_event",
    "tabulate",
    "ConsoleSink",
    "EventRecorder",
    "LogSink",
]
