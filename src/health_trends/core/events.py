"""Observable value feeds.

A feed holds the latest value of one input (samples, target, unit preference,
today's value) and notifies subscribers synchronously on every publish.
"""

from collections.abc import Callable
from typing import Generic, TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")


class Subscription:
    """Handle returned by ``ValueFeed.subscribe``."""

    def __init__(self, cancel: Callable[[], None]) -> None:
        self._cancel = cancel
        self.active = True

    def cancel(self) -> None:
        """Stop receiving notifications. Safe to call twice."""
        if self.active:
            self.active = False
            self._cancel()


class ValueFeed(Generic[T]):
    """Latest-value feed with a callback registry.

    Usage:
        unit = ValueFeed("unit", DisplayUnit.KILOGRAM)
        sub = unit.subscribe(lambda value: print(value))
        unit.publish(DisplayUnit.POUND)
        sub.cancel()
    """

    def __init__(self, name: str, initial: T) -> None:
        self.name = name
        self._value = initial
        self._subscribers: list[Callable[[T], None]] = []
        self.logger = logger.bind(feed=name)

    @property
    def value(self) -> T:
        """Most recently published value."""
        return self._value

    def subscribe(self, callback: Callable[[T], None]) -> Subscription:
        """Register a callback for future publishes."""
        self._subscribers.append(callback)

        def _remove() -> None:
            self._subscribers.remove(callback)

        return Subscription(_remove)

    def publish(self, value: T) -> None:
        """Store a new value and notify every subscriber in order."""
        self._value = value
        self.logger.debug("Feed published", subscribers=len(self._subscribers))
        for callback in list(self._subscribers):
            callback(value)
