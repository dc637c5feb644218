"""Tests for ok, fail, noop, create and script."""

import asyncio

import pytest

from tasksmith.core.errors import SignatureError, TaskFailed
from tasksmith.execution.task import TaskState
from tasksmith.orchestration.primitives import create, fail, noop, ok, script


class TestLeafPrimitives:
    """Tests for the immediate tasks."""

    @pytest.mark.asyncio
    async def test_ok(self, recorder):
        """Test ok(message) completes with the message."""
        task = ok("all good").subscribe(recorder)
        assert await task.run() == "all good"
        assert task.name == "core/ok"

    @pytest.mark.asyncio
    async def test_fail(self):
        """Test fail(message) fails with the message."""
        with pytest.raises(TaskFailed, match="broken"):
            await fail("broken").run()

    @pytest.mark.asyncio
    async def test_fail_without_message(self):
        """Test fail() fails with an empty reason."""
        with pytest.raises(TaskFailed) as exc_info:
            await fail().run()
        assert exc_info.value.reason == ""

    @pytest.mark.asyncio
    async def test_noop(self, recorder):
        """Test noop completes silently."""
        task = noop().subscribe(recorder)
        assert await task.run() == ""
        assert recorder.types() == ["started", "completed"]

    def test_message_must_be_string(self):
        """Test ok rejects a non-string message."""
        with pytest.raises(SignatureError):
            ok(42)


class TestCreate:
    """Tests for create()."""

    @pytest.mark.asyncio
    async def test_wraps_executor(self):
        """Test create builds a named task from an executor."""
        task = create("custom/step", lambda context: context.ok("custom"))
        assert task.name == "custom/step"
        assert await task.run() == "custom"

    def test_rejects_non_callable(self):
        """Test create requires a callable executor."""
        with pytest.raises(SignatureError):
            create("custom/step", "not callable")


class TestScript:
    """Tests for script()."""

    @pytest.mark.asyncio
    async def test_return_value_resolves(self, recorder):
        """Test the coroutine's return value becomes the message."""

        async def work(context):
            context.log("working")
            await asyncio.sleep(0)
            return "result"

        task = script("user/work", work).subscribe(recorder)
        assert await task.run() == "result"
        assert recorder.logs() == ["working"]

    @pytest.mark.asyncio
    async def test_none_return_resolves_empty(self):
        """Test returning None resolves with an empty message."""

        async def work(context):
            return None

        assert await script("user/work", work).run() == ""

    @pytest.mark.asyncio
    async def test_task_failed_maps_to_reason(self):
        """Test raising TaskFailed fails with its reason."""

        async def work(context):
            raise TaskFailed("checks did not pass")

        with pytest.raises(TaskFailed) as exc_info:
            await script("user/work", work).run()
        assert exc_info.value.reason == "checks did not pass"

    @pytest.mark.asyncio
    async def test_other_exception_fails(self):
        """Test any other exception fails with its message."""

        async def work(context):
            raise ValueError("unexpected input")

        with pytest.raises(TaskFailed, match="unexpected input"):
            await script("user/work", work).run()

    @pytest.mark.asyncio
    async def test_cancel_cancels_coroutine(self):
        """Test cancellation cancels the coroutine and fails with the reason."""
        cancelled = []

        async def work(context):
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.append(True)
                raise

        task = script("user/work", work)
        future = task.run()
        await asyncio.sleep(0.01)
        task.cancel("stop")
        with pytest.raises(TaskFailed, match="stop"):
            await future
        await asyncio.sleep(0.01)
        assert cancelled == [True]
        assert task.state is TaskState.FAILED

    def test_rejects_non_callable(self):
        """Test script requires a coroutine function."""
        with pytest.raises(SignatureError):
            script("user/work", None)
