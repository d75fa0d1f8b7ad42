"""SQLAlchemy adapter package for Huevify."""

from __future__ import annotations

from .engine import (
    StartupError,
    configured_engine,
    is_started,
    session_factory,
    shutdown,
    startup,
)
from .mappings import kv_store_table, metadata
from .store import SqlAlchemyKeyValueStore

__all__ = [
    "SqlAlchemyKeyValueStore",
    "StartupError",
    "configured_engine",
    "is_started",
    "kv_store_table",
    "metadata",
    "session_factory",
    "shutdown",
    "startup",
]
