"""Port for signalling other sessions that shared state changed."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable

    from huevify.domain.model import SyncTopic

type InvalidationListener = Callable[[SyncTopic], None]


@runtime_checkable
class InvalidationBus(Protocol):
    """Best-effort, topic-only broadcast. No delivery or ordering guarantees."""

    def publish(self, topic: SyncTopic, *, origin: str | None = None) -> None: ...

    def subscribe(
        self, listener: InvalidationListener, *, origin: str | None = None
    ) -> Callable[[], None]:
        """Register ``listener``; events published with the same ``origin`` are skipped.

        Returns a callable that removes the subscription.
        """
        ...
