"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_int
from .errors import ConfigurationError
from .logging import configure_logging
from .scheduling import SchedulerConfig, get_scheduler_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "SchedulerConfig",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_scheduler_config",
    "get_storage_config",
    "optional_env_int",
]
