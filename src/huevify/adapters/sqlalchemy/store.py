"""Key/value store persisted in a single SQL table."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from huevify.adapters.sqlalchemy.engine import session_factory
from huevify.adapters.sqlalchemy.mappings import kv_store_table
from huevify.domain.clock import utcnow

if TYPE_CHECKING:
    from sqlalchemy.orm import Session, sessionmaker

log = logging.getLogger(__name__)


class SqlAlchemyKeyValueStore:
    """One short session per call; every write commits immediately."""

    def __init__(self, sessions: sessionmaker[Session] | None = None) -> None:
        self.sessions = sessions or session_factory()

    def get(self, key: str) -> str | None:
        with self.sessions() as session:
            return session.execute(
                select(kv_store_table.c.value).where(kv_store_table.c.key == str(key))
            ).scalar_one_or_none()

    def set(self, key: str, value: str) -> None:
        key = str(key)
        now = utcnow()
        with self.sessions() as session:
            updated = session.execute(
                kv_store_table.update()
                .where(kv_store_table.c.key == key)
                .values(value=value, updated_at=now)
            ).rowcount
            if not updated:
                session.execute(
                    kv_store_table.insert().values(key=key, value=value, updated_at=now)
                )
            try:
                session.commit()
            except IntegrityError:
                # Another writer inserted the key first; last writer wins.
                session.rollback()
                log.debug("Concurrent insert of %s, retrying as update", key)
                session.execute(
                    kv_store_table.update()
                    .where(kv_store_table.c.key == key)
                    .values(value=value, updated_at=now)
                )
                session.commit()

    def delete(self, key: str) -> None:
        with self.sessions() as session:
            session.execute(delete(kv_store_table).where(kv_store_table.c.key == str(key)))
            session.commit()
