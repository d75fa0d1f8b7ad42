"""Application wiring: adapters assembled into ready-to-use hub sessions."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from huevify.adapters.memory import LocalInvalidationBus
from huevify.adapters.sqlalchemy import SqlAlchemyKeyValueStore, is_started, startup
from huevify.adapters.state_repository import KeyValueStateRepository
from huevify.adapters.timers import BackgroundScheduler
from huevify.config import get_scheduler_config
from huevify.domain.accrual import PlayAccrualService
from huevify.domain.clock import utcnow
from huevify.domain.lifecycle import ReleaseLifecycle

if TYPE_CHECKING:
    import random

    from huevify.config import SchedulerConfig
    from huevify.domain.clock import Clock
    from huevify.domain.ports import InvalidationBus, KeyValueStore

log = getLogger(__name__)


@dataclass(slots=True)
class HubSession:
    """One actor's view of the hub: lifecycle engine plus play accrual."""

    lifecycle: ReleaseLifecycle
    accrual: PlayAccrualService
    config: SchedulerConfig

    def scheduler(self) -> BackgroundScheduler:
        return BackgroundScheduler(self.lifecycle, self.accrual, self.config)

    def close(self) -> None:
        self.lifecycle.close()


def open_session(
    *,
    store: KeyValueStore | None = None,
    bus: InvalidationBus | None = None,
    clock: Clock = utcnow,
    rng: random.Random | None = None,
    config: SchedulerConfig | None = None,
) -> HubSession:
    """Open a session on ``store`` (the configured database by default)."""

    if store is None:
        if not is_started():
            startup()
        store = SqlAlchemyKeyValueStore()
    effective_config = config or get_scheduler_config()
    lifecycle = ReleaseLifecycle(
        KeyValueStateRepository(store),
        bus or LocalInvalidationBus(),
        clock=clock,
        rng=rng,
    )
    accrual = PlayAccrualService(
        lifecycle,
        rng=rng,
        ambient_minute=effective_config.ambient_minute,
        chart_cutover=effective_config.chart_cutover,
    )
    log.debug("Opened hub session %s", lifecycle.session_id)
    return HubSession(lifecycle=lifecycle, accrual=accrual, config=effective_config)
