"""Fixture type-mapping service configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, require_env_vars
from .http_resilience import CacheBackend, CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .storage import get_http_cache_path

FIXTURE_TYPES_TIMEOUT_SECONDS = 10.0
FIXTURE_TYPES_CACHE_TTL_SECONDS = 15 * 60.0


@dataclass(frozen=True)
class FixtureTypesConfig:
    """Holds the block-name to fixture-type service configuration."""

    base_url: str
    resilience: ResilienceConfig


def get_fixture_types_config(*, resilience: ResilienceConfig | None = None) -> FixtureTypesConfig:
    values = require_env_vars(("FIXTURE_TYPES_API_BASE_URL",))
    base_url = values["FIXTURE_TYPES_API_BASE_URL"].strip().rstrip("/")
    timeout = optional_env_var(
        "FIXTURE_TYPES_API_TIMEOUT", float, FIXTURE_TYPES_TIMEOUT_SECONDS
    )
    backend = optional_env_var("FIXTURE_TYPES_CACHE_BACKEND", _parse_cache_backend, "memory")
    return FixtureTypesConfig(
        base_url=base_url,
        resilience=resilience
        or ResilienceConfig(
            name="fixture-types",
            base_url=base_url,
            timeout_seconds=timeout,
            retry=RetryPolicy(total=3),
            ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
            cache=CacheConfig(
                backend=backend,
                sqlite_path=str(get_http_cache_path()) if backend == "sqlite" else None,
                default_ttl_seconds=FIXTURE_TYPES_CACHE_TTL_SECONDS,
            ),
        ),
    )


def _parse_cache_backend(value: str) -> CacheBackend:
    match value.lower():
        case "memory":
            return "memory"
        case "sqlite":
            return "sqlite"
        case _:
            raise ValueError(value)
