"""Fixture type-mapping service adapter."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fixtrack.config.fixture_types import get_fixture_types_config

from .client import BLOCK_TYPES_PATH, HttpFixtureTypeLookup
from .schema import BlockTypeItem, BlockTypesResponse, parse_block_types

if TYPE_CHECKING:
    from fixtrack.config.fixture_types import FixtureTypesConfig


def build_http_fixture_type_lookup(
    config: FixtureTypesConfig | None = None,
) -> HttpFixtureTypeLookup:
    """Return a lookup wired to the configured fixture type service."""

    return HttpFixtureTypeLookup(config=config or get_fixture_types_config())


__all__ = [
    "BLOCK_TYPES_PATH",
    "BlockTypeItem",
    "BlockTypesResponse",
    "HttpFixtureTypeLookup",
    "build_http_fixture_type_lookup",
    "parse_block_types",
]
