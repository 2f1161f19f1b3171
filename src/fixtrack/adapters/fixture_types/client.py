"""HTTP client for the block-name to fixture-type service."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING, Final

import httpx

from fixtrack.adapters.http_resilience import ResilientClient
from fixtrack.domain.errors import MappingLookupError

from .schema import parse_block_types

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from fixtrack.config.fixture_types import FixtureTypesConfig
    from fixtrack.config.http_resilience import ResilienceConfig

log = getLogger(__name__)

BLOCK_TYPES_PATH: Final[str] = "/api/fixtures/block-types"


class HttpFixtureTypeLookup:
    """Fixture type lookup backed by the block-types endpoint.

    The full mapping is fetched once and kept for the lifetime of the instance; the
    resilient client adds retries and an HTTP cache underneath.
    """

    def __init__(
        self,
        *,
        config: FixtureTypesConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or ResilientClient
        self._mapping: dict[str, str] | None = None

    def __call__(self, names: Sequence[str]) -> dict[str, str]:
        mapping = self.load()
        return {name: mapping[name] for name in names if name in mapping}

    def load(self) -> dict[str, str]:
        if self._mapping is None:
            self._mapping = asyncio.run(self._fetch_mapping_async())
            log.info("Loaded %s block to fixture type mappings", len(self._mapping))
        return self._mapping

    def clear_cache(self) -> None:
        self._mapping = None

    async def _fetch_mapping_async(self) -> dict[str, str]:
        url = f"{self._config.base_url}{BLOCK_TYPES_PATH}"
        try:
            async with self._client_factory(self._config.resilience) as client:
                response = await client.get(url)
                response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise MappingLookupError(f"Fixture type lookup failed: {exc}") from exc
        try:
            payload = response.json()
        except ValueError as exc:
            raise MappingLookupError("Fixture type service returned invalid JSON") from exc
        return parse_block_types(payload)
