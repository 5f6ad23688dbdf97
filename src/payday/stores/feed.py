"""In-process change feed pushing store snapshots to subscribers.

The feed provides:
- Subscription with a per-subscriber record filter
- Snapshot delivery (each push carries the full filtered record list)
- Error isolation (a failing subscriber doesn't stop the others)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[[list[T]], None]
Unsubscribe = Callable[[], None]


@dataclass
class Subscription(Generic[T]):
    """Registration of a snapshot listener."""

    listener: Listener[T]
    accepts: Callable[[T], bool]


class ChangeFeed(Generic[T]):
    """Publishes snapshots of a record collection.

    Usage:
        feed = ChangeFeed()
        unsubscribe = feed.subscribe(render, accepts=lambda r: r.month == month)
        feed.publish(all_records)
        unsubscribe()
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._subscriptions: list[Subscription[T]] = []

    def __len__(self) -> int:
        return len(self._subscriptions)

    def subscribe(
        self,
        listener: Listener[T],
        accepts: Callable[[T], bool] | None = None,
    ) -> Unsubscribe:
        """Register a listener. Returns a callable that removes it."""
        sub = Subscription(listener=listener, accepts=accepts or (lambda _: True))
        self._subscriptions.append(sub)

        def unsubscribe() -> None:
            if sub in self._subscriptions:
                self._subscriptions.remove(sub)

        return unsubscribe

    def deliver(self, listener: Listener[T], snapshot: list[T]) -> Exception | None:
        """Call one listener, logging instead of raising on failure."""
        try:
            listener(snapshot)
        except Exception as e:
            logger.exception("Subscriber %s failed on %s feed", listener, self.name)
            return e
        return None

    def publish(self, records: Iterable[T]) -> list[Exception]:
        """Push the filtered snapshot to every subscriber.

        Returns list of any exceptions raised by subscribers.
        """
        records = list(records)
        errors: list[Exception] = []
        for sub in list(self._subscriptions):
            snapshot = [r for r in records if sub.accepts(r)]
            error = self.deliver(sub.listener, snapshot)
            if error is not None:
                errors.append(error)
        return errors
