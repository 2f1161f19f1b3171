"""Payload schemas for the block-name to fixture-type service.

The service has shipped three payload shapes over time and all are still accepted:

- ``{"block_fixture_types": {"RTL-4W": "4-WAY", ...}}``
- ``[{"blockName": "RTL-4W", "fixtureType": "4-WAY"}, ...]`` (or snake_case keys)
- ``{"RTL-4W": "4-WAY", ...}``
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from fixtrack.domain.errors import MappingLookupError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

log = getLogger(__name__)


class BlockTypeItem(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    block_name: str | None = Field(
        default=None, validation_alias=AliasChoices("blockName", "block_name")
    )
    fixture_type: str | None = Field(
        default=None, validation_alias=AliasChoices("fixtureType", "fixture_type")
    )


class BlockTypesResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    block_fixture_types: dict[str, object]


def parse_block_types(payload: object) -> dict[str, str]:
    """Return the block-name to fixture-type mapping carried by ``payload``.

    Entries whose type is not a non-empty string are dropped.
    """

    if isinstance(payload, dict) and isinstance(payload.get("block_fixture_types"), dict):
        response = BlockTypesResponse.model_validate(payload)
        return _string_entries(response.block_fixture_types)
    if isinstance(payload, list):
        return _item_entries(payload)
    if isinstance(payload, dict):
        return _string_entries(payload)
    raise MappingLookupError(
        f"Unexpected fixture type payload of type {type(payload).__name__}"
    )


def _string_entries(raw: Mapping[object, object]) -> dict[str, str]:
    return {
        str(name): value
        for name, value in raw.items()
        if isinstance(value, str) and value
    }


def _item_entries(items: Iterable[object]) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for item in items:
        try:
            parsed = BlockTypeItem.model_validate(item)
        except ValidationError:
            log.debug("Skipping malformed fixture type item: %r", item)
            continue
        if parsed.block_name and parsed.fixture_type:
            mapping[parsed.block_name] = parsed.fixture_type
    return mapping
