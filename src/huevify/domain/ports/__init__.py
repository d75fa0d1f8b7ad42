"""Domain port definitions for adapters."""

from __future__ import annotations

from .notifications import InvalidationBus, InvalidationListener
from .persistence import KeyValueStore, StateRepository

__all__ = [
    "InvalidationBus",
    "InvalidationListener",
    "KeyValueStore",
    "StateRepository",
]
