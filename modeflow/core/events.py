"""Listener channel used to publish transition events."""

from __future__ import annotations

from collections.abc import Callable
import logging
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Disposable:
    """Handle returned by a subscription. Calling ``dispose`` twice is harmless."""

    def __init__(self, callback: Callable[[], None] | None = None) -> None:
        self._callback = callback

    def dispose(self) -> None:
        callback, self._callback = self._callback, None
        if callback is not None:
            callback()

    @property
    def disposed(self) -> bool:
        return self._callback is None


class EventEmitter(Generic[T]):
    """Synchronous fan-out of events to subscribed listeners.

    Listeners are called in subscription order. A listener that raises is
    logged and does not prevent delivery to the others.
    """

    def __init__(self) -> None:
        self._listeners: list[Callable[[T], None]] = []
        self._disposed = False

    def event(self, listener: Callable[[T], None]) -> Disposable:
        """Subscribe a listener.

        Args:
            listener: Called with every fired event

        Returns:
            Handle whose ``dispose`` unsubscribes the listener
        """
        if self._disposed:
            return Disposable()

        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return Disposable(_remove)

    def fire(self, event: T) -> None:
        if self._disposed:
            return
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.exception("Error in event listener %r: %s", listener, e)

    def dispose(self) -> None:
        self._listeners.clear()
        self._disposed = True

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def listener_count(self) -> int:
        return len(self._listeners)
