"""Application configuration helpers."""

from __future__ import annotations

from .env import require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .feed import FeedConfig, get_feed_config
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import bind_logger, configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config
from .sync import SyncConfig, get_sync_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "FeedConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "SyncConfig",
    "bind_logger",
    "configure_logging",
    "get_database_config",
    "get_feed_config",
    "get_storage_config",
    "get_sync_config",
    "require_env_vars",
]
