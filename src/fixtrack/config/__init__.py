"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .fixture_types import FixtureTypesConfig, get_fixture_types_config
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .reconciliation import LockMode, ReconciliationConfig, get_reconciliation_config
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_database_uri,
    get_http_cache_path,
    get_storage_config,
)

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "FixtureTypesConfig",
    "LockMode",
    "MissingConfigurationError",
    "RateLimit",
    "ReconciliationConfig",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_database_uri",
    "get_fixture_types_config",
    "get_http_cache_path",
    "get_reconciliation_config",
    "get_storage_config",
    "optional_env_var",
    "require_env_var",
    "require_env_vars",
]
