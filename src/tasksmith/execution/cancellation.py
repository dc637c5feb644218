"""CancellationSignal — one-shot broadcast of a cancellation request.

A signal is owned by exactly one task unless a parent explicitly shares
it with its children to put them in one cancellation scope.  It fires at
most once: subscribers are notified in subscription order, then dropped,
and any further ``cancel()`` or ``subscribe()`` raises.

Example::

    signal = CancellationSignal()
    signal.subscribe(lambda reason: print("stopping:", reason))
    signal.cancel("user abort")   # prints "stopping: user abort"
    signal.cancel("again")        # raises SignalAlreadyCancelledError
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

from tasksmith.core.errors import SignalAlreadyCancelledError
from tasksmith.core.logging import get_logger

logger = get_logger(__name__)

CancelHandler = Callable[[str], None]


class SignalState(str, Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"


class CancellationSignal:
    """One-shot cancellation broadcaster."""

    def __init__(self) -> None:
        self._state = SignalState.ACTIVE
        self._subscribers: list[CancelHandler] = []
        self._reason: str | None = None

    @property
    def state(self) -> SignalState:
        return self._state

    @property
    def cancelled(self) -> bool:
        return self._state is SignalState.CANCELLED

    @property
    def reason(self) -> str | None:
        """The reason the signal fired with, or None while active."""
        return self._reason

    def subscribe(self, handler: CancelHandler) -> None:
        if self.cancelled:
            raise SignalAlreadyCancelledError("cannot subscribe to a cancellation signal that has already fired")
        self._subscribers.append(handler)

    def cancel(self, reason: str = "") -> None:
        """Fire the signal: notify every subscriber once, then forget them.

        A handler that raises is logged and the remaining handlers are still
        notified.
        """
        if self.cancelled:
            raise SignalAlreadyCancelledError("cannot cancel a cancellation signal more than once")
        subscribers, self._subscribers = self._subscribers, []
        self._state = SignalState.CANCELLED
        self._reason = reason
        logger.debug("cancellation_fired", reason=reason, subscribers=len(subscribers))
        for handler in subscribers:
            try:
                handler(reason)
            except Exception:
                logger.warning("cancel_handler_failed", reason=reason, exc_info=True)


__all__ = ["CancelHandler", "CancellationSignal", "SignalState"]
