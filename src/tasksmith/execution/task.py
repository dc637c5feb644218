"""Task — a single cancellable, observable unit of asynchronous work.

WHY
───
Everything in tasksmith is a Task: leaf operations (run a process) and
combinators (run these in series) alike.  A uniform contract is what lets
combinators nest arbitrarily while still guaranteeing that every task
resolves exactly once and that cancellation reaches every live child.

ARCHITECTURE
────────────
::

    Task(name, executor, cancellor=None)
      ├── id          ─ uuid4, fixed at construction
      ├── state       ─ pending → started → completed | failed
      ├── channel     ─ EventChannel (subscribers, sealed on start)
      ├── cancellor   ─ CancellationSignal (may be shared by a parent)
      └── executor    ─ executor(context) → None, invoked exactly once

    run()  ──▶ emits "started", calls executor(TaskContext)
               returns asyncio.Future[str]
    context.ok(*args)   ──▶ "completed" event, future result = joined args
    context.fail(*args) ──▶ "failed" event, future raises TaskFailed(reason)
    cancel(reason)      ──▶ cancellor fires; the executor decides what to do

Cancellation never changes state by itself.  An executor that registered
``oncancel`` is expected to tear down its work and call ``fail(reason)``.

Related modules:
    cancellation.py   CancellationSignal
    channel.py        EventChannel
    scope.py          ExecutionScope, per-run combinator state

Example::

    def executor(context):
        context.log("working")
        context.ok("done")

    result = await Task("example", executor).run()   # "done"
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Callable, Coroutine
from enum import Enum
from typing import Any

from tasksmith.core.errors import SubscriptionClosedError, TaskFailed, TaskReentrancyError
from tasksmith.core.logging import get_logger
from tasksmith.execution.cancellation import CancelHandler, CancellationSignal
from tasksmith.execution.channel import EventChannel
from tasksmith.execution.events import EventHandler, EventType, TaskEvent, format_arguments

logger = get_logger(__name__)


class TaskState(str, Enum):
    """Lifecycle states of a task."""

    PENDING = "pending"
    STARTED = "started"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (TaskState.COMPLETED, TaskState.FAILED)


Executor = Callable[["TaskContext"], None]


class Task:
    """A unit of work with exactly-once resolution."""

    def __init__(
        self,
        name: str,
        executor: Executor,
        cancellor: CancellationSignal | None = None,
    ) -> None:
        self._id = str(uuid.uuid4())
        self._name = name
        self._state = TaskState.PENDING
        self._executor = executor
        self._cancellor = cancellor or CancellationSignal()
        self._channel = EventChannel()
        self._future: asyncio.Future[str] | None = None

    def __repr__(self) -> str:
        return f"Task(name={self._name!r}, id={self._id!r}, state={self._state.value})"

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def state(self) -> TaskState:
        return self._state

    @property
    def cancellor(self) -> CancellationSignal:
        return self._cancellor

    @property
    def future(self) -> asyncio.Future[str] | None:
        """The result future, available once the task has been run."""
        return self._future

    # ── Observation ──────────────────────────────────────────────

    def subscribe(self, handler: EventHandler) -> Task:
        """Register an observer.  Only allowed while the task is pending."""
        if self._state is not TaskState.PENDING:
            raise SubscriptionClosedError(self._name)
        self._channel.subscribe(handler)
        return self

    # ── Execution ────────────────────────────────────────────────

    def run(self) -> asyncio.Future[str]:
        """Start the task.  Must be called from inside a running event loop.

        Returns:
            Future resolving to the joined ``ok`` message, or raising
            :class:`TaskFailed` with the joined ``fail`` reason.

        Raises:
            TaskReentrancyError: if the task is not pending.
        """
        if self._state is not TaskState.PENDING:
            raise TaskReentrancyError(self._name, self._state.value)

        loop = asyncio.get_running_loop()
        self._future = loop.create_future()
        self._state = TaskState.STARTED
        self._channel.seal()
        logger.debug("task_started", task_id=self._id, task_name=self._name)
        self._publish(EventType.STARTED, "")

        context = TaskContext(self)
        try:
            self._executor(context)
        except Exception as exc:
            logger.warning("executor_raised", task_id=self._id, task_name=self._name, exc_info=True)
            context.fail(str(exc))
        return self._future

    def cancel(self, reason: str = "") -> None:
        """Request cancellation.  A no-op unless the task is started.

        The cancellation signal fires at most once; a task whose signal has
        already fired (for example through a shared scope) ignores the call.
        """
        if self._state is not TaskState.STARTED:
            return
        if self._cancellor.cancelled:
            logger.debug("cancel_ignored", task_id=self._id, task_name=self._name, reason=reason)
            return
        self._cancellor.cancel(reason)

    # ── Internal transitions (driven by TaskContext) ─────────────

    def _publish(self, event_type: EventType, data: str) -> None:
        self._channel.publish(TaskEvent(id=self._id, name=self._name, type=event_type, data=data))

    def _emit(self, event: TaskEvent) -> None:
        if self._state is TaskState.STARTED:
            self._channel.publish(event)

    def _log(self, args: tuple[Any, ...]) -> None:
        if self._state is TaskState.STARTED:
            self._publish(EventType.LOG, format_arguments(args))

    def _settle(self, state: TaskState, args: tuple[Any, ...]) -> bool:
        if self._state is not TaskState.STARTED:
            return False
        data = format_arguments(args)
        self._state = state
        logger.debug("task_settled", task_id=self._id, task_name=self._name, state=state.value, data=data)
        self._publish(EventType.COMPLETED if state is TaskState.COMPLETED else EventType.FAILED, data)
        self._channel.close()

        future = self._future
        if future is not None and not future.done():
            if state is TaskState.COMPLETED:
                future.set_result(data)
            else:
                future.set_exception(TaskFailed(data, task_id=self._id, task_name=self._name))
        return True

    def _oncancel(self, handler: CancelHandler) -> None:
        if self._state is not TaskState.STARTED:
            return
        if self._cancellor.cancelled:
            handler(self._cancellor.reason or "")
            return
        self._cancellor.subscribe(handler)


class TaskContext:
    """Capabilities handed to an executor for one run of its task.

    ``emit``, ``log``, ``ok`` and ``fail`` are silently dropped once the task
    has reached a terminal state.
    """

    def __init__(self, task: Task) -> None:
        self._task = task
        self._drivers: set[asyncio.Task[Any]] = set()

    @property
    def task_id(self) -> str:
        return self._task.id

    @property
    def name(self) -> str:
        return self._task.name

    @property
    def state(self) -> TaskState:
        return self._task.state

    @property
    def cancelled(self) -> bool:
        """True once a cancellation request has been delivered to this task."""
        return self._task.cancellor.cancelled

    def emit(self, event: TaskEvent) -> None:
        """Re-publish an event (usually a child's) to this task's observers."""
        self._task._emit(event)

    def log(self, *args: Any) -> None:
        self._task._log(args)

    def ok(self, *args: Any) -> None:
        self._task._settle(TaskState.COMPLETED, args)

    def fail(self, *args: Any) -> None:
        self._task._settle(TaskState.FAILED, args)

    def oncancel(self, handler: CancelHandler) -> None:
        """Register ``handler(reason)`` for cancellation of this task."""
        self._task._oncancel(handler)

    def run(self, child: Task) -> asyncio.Future[str]:
        """Run ``child`` with its events forwarded through this task."""
        child.subscribe(self.emit)
        return child.run()

    def spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        """Drive ``coro`` on the running loop on behalf of this task.

        The context keeps a reference until the coroutine finishes.  If the
        coroutine raises, the task fails with the exception's message.
        """
        driver = asyncio.get_running_loop().create_task(coro)
        self._drivers.add(driver)
        driver.add_done_callback(self._driver_done)
        return driver

    def _driver_done(self, driver: asyncio.Task[Any]) -> None:
        self._drivers.discard(driver)
        if driver.cancelled():
            return
        exc = driver.exception()
        if exc is not None:
            logger.warning(
                "driver_raised",
                task_id=self._task.id,
                task_name=self._task.name,
                exc_info=(type(exc), exc, exc.__traceback__),
            )
            self.fail(failure_reason(exc))


def failure_reason(exc: BaseException) -> str:
    """The reason string carried by a failed child's exception."""
    if isinstance(exc, TaskFailed):
        return exc.reason
    return str(exc)


def on_settled(
    future: asyncio.Future[str],
    on_ok: Callable[[str], None],
    on_fail: Callable[[str], None],
) -> None:
    """Call ``on_ok(message)`` or ``on_fail(reason)`` when ``future`` settles."""

    def _done(fut: asyncio.Future[str]) -> None:
        if fut.cancelled():
            on_fail("cancelled")
            return
        exc = fut.exception()
        if exc is None:
            on_ok(fut.result())
        else:
            on_fail(failure_reason(exc))

    future.add_done_callback(_done)


__all__ = ["Executor", "Task", "TaskContext", "TaskState", "failure_reason", "on_settled"]
