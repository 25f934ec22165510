"""Single-slot broadcast primitive with replay of the last published value."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[[T], None]
Unsubscribe = Callable[[], None]


class LastValueNotifier(Generic[T]):
    """Hold the latest value and deliver every publication to subscribers.

    New subscribers immediately receive the current value, so a late
    subscriber never misses state. Publications are delivered in publish
    order even when a listener publishes from inside its callback: nested
    publications are queued and drained after the current round.

    A failing listener is logged and does not prevent delivery to the others.
    """

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._listeners: list[Listener[T]] = []
        self._pending: deque[T] = deque()
        self._delivering = False

    @property
    def value(self) -> T:
        return self._value

    def subscribe(self, listener: Listener[T]) -> Unsubscribe:
        """Register ``listener``, replay the current value to it, return an unsubscribe handle.

        While a delivery round is draining queued publications, the listener
        is left to the drain instead, so it still sees values in publish order.
        """
        self._listeners.append(listener)
        if not self._pending:
            self._call(listener, self._value)

        def unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return unsubscribe

    def publish(self, value: T) -> None:
        """Store ``value`` as the latest and deliver it to all subscribers."""
        self._value = value
        self._pending.append(value)
        if self._delivering:
            return
        self._delivering = True
        try:
            while self._pending:
                current = self._pending.popleft()
                for listener in list(self._listeners):
                    self._call(listener, current)
        finally:
            self._delivering = False

    @property
    def subscriber_count(self) -> int:
        return len(self._listeners)

    @staticmethod
    def _call(listener: Listener[T], value: T) -> None:
        try:
            listener(value)
        except Exception:
            logger.exception("Listener %r failed", listener)


__all__ = ["LastValueNotifier", "Listener", "Unsubscribe"]
