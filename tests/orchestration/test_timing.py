"""Tests for delay and timeout."""

import asyncio

import pytest

from tasksmith.core.errors import SignatureError, TaskFailed
from tasksmith.execution.task import TaskState
from tasksmith.orchestration.primitives import fail, ok
from tasksmith.orchestration.timing import delay, timeout


@pytest.fixture
def timer_handles(monkeypatch):
    """Record every TimerHandle armed on the running loop."""
    handles = []

    def install():
        loop = asyncio.get_running_loop()
        original = loop.call_later

        def spy(*args, **kwargs):
            handle = original(*args, **kwargs)
            handles.append(handle)
            return handle

        monkeypatch.setattr(loop, "call_later", spy)
        return handles

    return install


class TestDelay:
    """Tests for delay()."""

    @pytest.mark.asyncio
    async def test_waits_then_resolves(self):
        """Test delay(ms) resolves ok with no message after the wait."""
        loop = asyncio.get_running_loop()
        start = loop.time()
        assert await delay(30).run() == ""
        assert loop.time() - start >= 0.025

    @pytest.mark.asyncio
    async def test_runs_child_after_wait(self, recorder):
        """Test the child is built and started only once the timer fires."""
        built = []

        def child():
            built.append(True)
            return ok("child done", name="child")

        task = delay(20, child).subscribe(recorder)
        future = task.run()
        await asyncio.sleep(0)
        assert built == []
        await future
        assert built == [True]
        assert [e.name for e in recorder.of_type("started")] == ["core/delay", "child"]

    @pytest.mark.asyncio
    async def test_child_failure_propagates(self):
        """Test a failing child fails the delay."""
        with pytest.raises(TaskFailed, match="late failure"):
            await delay(1, lambda: fail("late failure")).run()

    @pytest.mark.asyncio
    async def test_cancel_before_timer(self, timer_handles):
        """Test cancelling before the timer fires clears it and fails."""
        handles = timer_handles()
        built = []
        task = delay(1000, lambda: built.append(True) or ok())
        future = task.run()
        task.cancel("not now")
        with pytest.raises(TaskFailed, match="not now"):
            await future
        assert handles[0].cancelled()
        assert built == []

    @pytest.mark.asyncio
    async def test_cancel_after_child_started(self, make_hanging):
        """Test cancelling after the timer fired cancels the started child."""
        child = make_hanging(name="child")
        task = delay(1, lambda: child)
        future = task.run()
        await asyncio.sleep(0.02)
        assert child.state is TaskState.STARTED
        task.cancel("stop")
        with pytest.raises(TaskFailed, match="stop"):
            await future
        assert child.state is TaskState.FAILED

    @pytest.mark.asyncio
    async def test_factory_error_fails_delay(self):
        """Test an exception from the factory fails the delay."""

        def broken():
            raise LookupError("no such task")

        with pytest.raises(TaskFailed, match="no such task"):
            await delay(1, broken).run()

    def test_negative_ms_rejected(self):
        """Test a negative delay is a signature error."""
        with pytest.raises(SignatureError):
            delay(-5)


class TestTimeout:
    """Tests for timeout()."""

    @pytest.mark.asyncio
    async def test_slow_child_times_out(self):
        """Test timeout(100, delay(1000)) fails after ~100ms, not 1000ms."""
        loop = asyncio.get_running_loop()
        start = loop.time()
        with pytest.raises(TaskFailed) as exc_info:
            await timeout(100, lambda: delay(1000)).run()
        elapsed = loop.time() - start
        assert exc_info.value.reason == "timeout elapsed"
        assert 0.09 <= elapsed < 0.5

    @pytest.mark.asyncio
    async def test_child_is_cancelled_with_reason(self, make_hanging):
        """Test the child receives the timeout reason as its cancellation."""
        reasons = []
        child = make_hanging(on_cancel=reasons.append)
        with pytest.raises(TaskFailed):
            await timeout(10, lambda: child).run()
        assert reasons == ["timeout elapsed"]
        assert child.state is TaskState.FAILED

    @pytest.mark.asyncio
    async def test_fast_child_wins_and_clears_timer(self, timer_handles):
        """Test a child finishing first resolves ok and clears the timer."""
        handles = timer_handles()
        task = timeout(1000, lambda: ok("quick"))
        assert await task.run() == ""
        await asyncio.sleep(0)
        assert handles and all(handle.cancelled() for handle in handles)

    @pytest.mark.asyncio
    async def test_child_failure_clears_timer(self, timer_handles):
        """Test a failing child fails the timeout and clears the timer."""
        handles = timer_handles()
        with pytest.raises(TaskFailed, match="child broke"):
            await timeout(1000, lambda: fail("child broke")).run()
        assert all(handle.cancelled() for handle in handles)

    @pytest.mark.asyncio
    async def test_custom_reason(self, make_hanging):
        """Test an explicit reason overrides the default."""
        with pytest.raises(TaskFailed, match="deploy took too long"):
            await timeout(5, lambda: make_hanging(), reason="deploy took too long").run()

    @pytest.mark.asyncio
    async def test_reason_from_settings(self, monkeypatch, make_hanging):
        """Test the default reason comes from TASKSMITH_TIMEOUT_REASON."""
        monkeypatch.setenv("TASKSMITH_TIMEOUT_REASON", "too slow")
        with pytest.raises(TaskFailed, match="too slow"):
            await timeout(5, lambda: make_hanging()).run()

    @pytest.mark.asyncio
    async def test_cancel_cancels_child(self, make_hanging, timer_handles):
        """Test cancelling the timeout cancels the child and the timer."""
        handles = timer_handles()
        child = make_hanging()
        task = timeout(1000, lambda: child)
        future = task.run()
        task.cancel("stop")
        with pytest.raises(TaskFailed, match="stop"):
            await future
        assert child.state is TaskState.FAILED
        assert handles[0].cancelled()

    def test_requires_factory(self):
        """Test timeout needs a task factory."""
        with pytest.raises(SignatureError):
            timeout(10, None)
