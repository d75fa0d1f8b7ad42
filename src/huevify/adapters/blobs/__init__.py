"""JSON blob schemas and translators for persisted hub state."""

from __future__ import annotations

from . import schema, translator

__all__ = ["schema", "translator"]
