"""Background timers that drive scheduled publication and play accrual."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from huevify.config import SchedulerConfig
    from huevify.domain.accrual import PlayAccrualService
    from huevify.domain.lifecycle import ReleaseLifecycle

log = logging.getLogger(__name__)


class PeriodicTask:
    """Run ``callback`` every ``interval`` seconds on a daemon thread.

    A run always finishes before the next wait starts, so callbacks never
    overlap. Exceptions are logged and the timer keeps going.
    """

    def __init__(
        self,
        name: str,
        interval: float,
        callback: Callable[[], object],
        *,
        run_immediately: bool = True,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.name = name
        self.interval = interval
        self.callback = callback
        self.run_immediately = run_immediately
        self.runs = 0
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name=self.name, daemon=True)
        self._thread.start()
        log.debug("Started %s (every %ss)", self.name, self.interval)

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        self._thread = None

    def run_once(self) -> None:
        try:
            self.callback()
        except Exception:
            log.exception("%s failed", self.name)
        finally:
            self.runs += 1

    def _loop(self) -> None:
        if self.run_immediately:
            self.run_once()
        while not self._stop.wait(self.interval):
            self.run_once()


class BackgroundScheduler:
    """Owns the publication timer and the ambient/chart timer for one session."""

    def __init__(
        self,
        lifecycle: ReleaseLifecycle,
        accrual: PlayAccrualService,
        config: SchedulerConfig,
    ) -> None:
        self.lifecycle = lifecycle
        self.accrual = accrual
        self.tasks = [
            PeriodicTask("huevify-publish", config.publish_interval_seconds, self.publish_tick),
            PeriodicTask("huevify-ambient", config.ambient_poll_seconds, self.ambient_tick),
        ]

    def publish_tick(self) -> None:
        result = self.lifecycle.publish_due_releases()
        if not result.ok:
            log.warning("Scheduled publication failed: %s", result.message)

    def ambient_tick(self) -> None:
        self.accrual.ambient_tick()
        self.accrual.refresh_chart()

    def start(self) -> None:
        for task in self.tasks:
            task.start()

    def stop(self) -> None:
        for task in self.tasks:
            task.stop()
        log.info("Background scheduler stopped")

    def __enter__(self) -> BackgroundScheduler:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
