"""Tests for event sinks."""

import io

import pytest
from rich.console import Console
from structlog.testing import capture_logs

from tasksmith.core.errors import TaskFailed
from tasksmith.execution.events import EventType, TaskEvent
from tasksmith.observability.sinks import ConsoleSink, EventRecorder, LogSink
from tasksmith.orchestration.composition import series
from tasksmith.orchestration.primitives import fail, ok


class TestConsoleSink:
    """Tests for ConsoleSink."""

    def test_prints_formatted_event(self):
        """Test events are printed as formatted lines."""
        buffer = io.StringIO()
        sink = ConsoleSink(Console(file=buffer, force_terminal=False, width=200))
        sink(TaskEvent(id="1", name="core/shell", type=EventType.LOG, data="[bold]literal[/bold]"))
        output = buffer.getvalue()
        assert "core/shell" in output
        assert "[bold]literal[/bold]" in output


class TestLogSink:
    """Tests for LogSink."""

    def test_forwards_to_structlog(self):
        """Test events are logged with task fields."""
        with capture_logs() as logs:
            sink = LogSink()
            sink(TaskEvent(id="abc", name="core/ok", type=EventType.COMPLETED, data="done"))
        assert len(logs) == 1
        assert logs[0]["event"] == "task_event"
        assert logs[0]["log_level"] == "info"
        assert logs[0]["task_id"] == "abc"
        assert logs[0]["task_name"] == "core/ok"
        assert logs[0]["event_type"] == "completed"
        assert logs[0]["data"] == "done"

    def test_failures_logged_as_warning(self):
        """Test failed events use warning level."""
        with capture_logs() as logs:
            LogSink()(TaskEvent(id="abc", name="core/fail", type=EventType.FAILED, data="x"))
        assert logs[0]["log_level"] == "warning"


class TestEventRecorder:
    """Tests for EventRecorder."""

    @pytest.mark.asyncio
    async def test_queries(self):
        """Test recorded events can be filtered by type, name and task."""
        recorder = EventRecorder()
        first = ok(name="first")
        task = series([first, fail("nope", name="second")]).subscribe(recorder)
        with pytest.raises(TaskFailed):
            await task.run()
        assert len(recorder) == 6
        assert [e.name for e in recorder.of_type(EventType.FAILED)] == ["second", "core/series"]
        assert recorder.for_name("first")[0].type is EventType.STARTED
        assert {e.name for e in recorder.for_task(first.id)} == {"first"}
        recorder.clear()
        assert recorder.types() == []
