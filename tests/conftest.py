from __future__ import annotations

import os
import random
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.pool import StaticPool

from huevify.adapters.memory import InMemoryKeyValueStore, LocalInvalidationBus
from huevify.adapters.sqlalchemy import shutdown, startup
from huevify.adapters.state_repository import KeyValueStateRepository
from huevify.domain.lifecycle import ReleaseLifecycle
from tests.helpers.hub import MODERATOR_PASSWORD, MODERATOR_USERNAME, FixedClock

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def bus() -> LocalInvalidationBus:
    return LocalInvalidationBus()


@pytest.fixture
def repository(store: InMemoryKeyValueStore) -> KeyValueStateRepository:
    return KeyValueStateRepository(store)


@pytest.fixture
def make_lifecycle(
    store: InMemoryKeyValueStore,
    bus: LocalInvalidationBus,
    clock: FixedClock,
    rng: random.Random,
) -> Iterator[Callable[[], ReleaseLifecycle]]:
    """Open additional sessions on the shared store and bus."""

    opened: list[ReleaseLifecycle] = []

    def factory() -> ReleaseLifecycle:
        lifecycle = ReleaseLifecycle(KeyValueStateRepository(store), bus, clock=clock, rng=rng)
        opened.append(lifecycle)
        return lifecycle

    yield factory
    for lifecycle in opened:
        lifecycle.close()


@pytest.fixture
def moderator(make_lifecycle: Callable[[], ReleaseLifecycle]) -> ReleaseLifecycle:
    lifecycle = make_lifecycle()
    assert lifecycle.register_moderator(MODERATOR_USERNAME, MODERATOR_PASSWORD).ok
    assert lifecycle.login_moderator(MODERATOR_USERNAME, MODERATOR_PASSWORD).ok
    return lifecycle


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    startup(engine=engine, force=True)
    try:
        yield engine
    finally:
        shutdown()
