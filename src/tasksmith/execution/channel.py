"""EventChannel — the publish/subscribe bus owned by one task.

A channel moves through three phases::

    open ──seal()──▶ sealed ──close()──▶ closed
    subscribe ok     subscribe raises    subscribe raises
    publish ok       publish ok          publish dropped

A task seals its channel when it starts (so no subscriber can miss the
``started`` event) and closes it right after its terminal event (so late
events from orphaned children never reach observers of a settled task).
"""

from __future__ import annotations

from enum import Enum

from tasksmith.core.errors import TaskUsageError
from tasksmith.core.logging import get_logger
from tasksmith.execution.events import EventHandler, TaskEvent

logger = get_logger(__name__)


class ChannelState(str, Enum):
    OPEN = "open"
    SEALED = "sealed"
    CLOSED = "closed"


class ChannelSealedError(TaskUsageError):
    """Raised when subscribing to a sealed or closed channel."""


class EventChannel:
    """Ordered fan-out of events to subscribers.

    Subscribers are notified synchronously, in subscription order.  A
    subscriber that raises is logged and does not prevent the remaining
    subscribers from receiving the event.
    """

    def __init__(self) -> None:
        self._subscribers: list[EventHandler] = []
        self._state = ChannelState.OPEN

    @property
    def state(self) -> ChannelState:
        return self._state

    def __len__(self) -> int:
        return len(self._subscribers)

    def subscribe(self, handler: EventHandler) -> None:
        if self._state is not ChannelState.OPEN:
            raise ChannelSealedError(f"channel is {self._state.value}")
        self._subscribers.append(handler)

    def seal(self) -> None:
        if self._state is ChannelState.OPEN:
            self._state = ChannelState.SEALED

    def close(self) -> None:
        self._state = ChannelState.CLOSED
        self._subscribers = []

    def publish(self, event: TaskEvent) -> bool:
        """Deliver ``event``; returns False when the channel is closed."""
        if self._state is ChannelState.CLOSED:
            return False
        for handler in list(self._subscribers):
            try:
                handler(event)
            except Exception:
                logger.warning(
                    "subscriber_failed",
                    task_id=event.id,
                    task_name=event.name,
                    event_type=event.type.value,
                    exc_info=True,
                )
        return True


__all__ = ["ChannelState", "ChannelSealedError", "EventChannel"]
