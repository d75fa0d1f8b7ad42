from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import inspect, select

from huevify.adapters.sqlalchemy import (
    SqlAlchemyKeyValueStore,
    StartupError,
    configured_engine,
    kv_store_table,
    shutdown,
    startup,
)
from huevify.adapters.state_repository import KeyValueStateRepository
from huevify.domain.ports import KeyValueStore
from tests.helpers.hub import START, make_request

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


def test_startup_migrates_schema(sqlite_engine: Engine) -> None:
    inspector = inspect(sqlite_engine)

    assert "kv_store" in inspector.get_table_names()
    assert "alembic_version" in inspector.get_table_names()
    assert configured_engine() is sqlite_engine


def test_second_startup_requires_force(sqlite_engine: Engine) -> None:
    with pytest.raises(StartupError):
        startup(engine=sqlite_engine)


def test_store_requires_startup() -> None:
    shutdown()

    with pytest.raises(StartupError):
        SqlAlchemyKeyValueStore()


def test_get_set_delete(sqlite_engine: Engine) -> None:
    store = SqlAlchemyKeyValueStore()
    assert isinstance(store, KeyValueStore)

    assert store.get("k") is None
    store.set("k", "v1")
    store.set("k", "v2")
    assert store.get("k") == "v2"

    store.delete("k")
    assert store.get("k") is None


def test_set_stamps_updated_at(sqlite_engine: Engine) -> None:
    SqlAlchemyKeyValueStore().set("k", "v")

    with sqlite_engine.connect() as connection:
        updated_at = connection.execute(
            select(kv_store_table.c.updated_at).where(kv_store_table.c.key == "k")
        ).scalar_one()

    assert updated_at.tzinfo is not None


def test_repository_over_sql_store(sqlite_engine: Engine) -> None:
    repository = KeyValueStateRepository(SqlAlchemyKeyValueStore())
    request = make_request()

    repository.save_release_requests([request])
    repository.save_play_counts({"t1": 5})

    other = KeyValueStateRepository(SqlAlchemyKeyValueStore())
    (loaded,) = other.load_release_requests()
    assert loaded == request
    assert loaded.release_date < START
    assert other.load_play_counts() == {"t1": 5}
