"""In-process implementations of the storage and invalidation ports.

Several sessions in one process share a single ``InMemoryKeyValueStore`` and
``LocalInvalidationBus``; this is how tests simulate multiple tabs.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from huevify.domain.model import SyncTopic
    from huevify.domain.ports import InvalidationListener

log = logging.getLogger(__name__)


@dataclass(slots=True)
class InMemoryKeyValueStore:
    data: dict[str, str] = field(default_factory=dict[str, str])
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def get(self, key: str) -> str | None:
        with self._lock:
            return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self.data[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self.data.pop(key, None)


@dataclass(slots=True, eq=False)
class _Subscription:
    listener: InvalidationListener
    origin: str | None


class LocalInvalidationBus:
    """Synchronous fan-out to every subscriber except the publishing session."""

    def __init__(self) -> None:
        self._subscriptions: list[_Subscription] = []
        self._lock = threading.Lock()

    def subscribe(
        self, listener: InvalidationListener, *, origin: str | None = None
    ) -> Callable[[], None]:
        subscription = _Subscription(listener=listener, origin=origin)
        with self._lock:
            self._subscriptions.append(subscription)

        def unsubscribe() -> None:
            with self._lock:
                if subscription in self._subscriptions:
                    self._subscriptions.remove(subscription)

        return unsubscribe

    def publish(self, topic: SyncTopic, *, origin: str | None = None) -> None:
        with self._lock:
            targets = [
                s for s in self._subscriptions if origin is None or s.origin != origin
            ]
        for subscription in targets:
            try:
                subscription.listener(topic)
            except Exception:
                log.exception("Invalidation listener failed for %s", topic)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)
