from __future__ import annotations

import pytest

from fixtrack.adapters.fixture_types import parse_block_types
from fixtrack.domain.errors import MappingLookupError


def test_parses_wrapped_mapping() -> None:
    payload = {"block_fixture_types": {"RTL-4W": "4-WAY", "RTL-SR": "SHELF", "BAD": 3}}

    assert parse_block_types(payload) == {"RTL-4W": "4-WAY", "RTL-SR": "SHELF"}


def test_parses_item_list_with_either_key_style() -> None:
    payload = [
        {"blockName": "RTL-4W", "fixtureType": "4-WAY"},
        {"block_name": "RTL-SR", "fixture_type": "SHELF", "id": 7},
        {"blockName": "RTL-NT"},
        {"blockName": "RTL-X", "fixtureType": ""},
        {"blockName": "RTL-Y", "fixtureType": 12},
        "not-an-item",
    ]

    assert parse_block_types(payload) == {"RTL-4W": "4-WAY", "RTL-SR": "SHELF"}


def test_parses_flat_mapping() -> None:
    payload = {"RTL-4W": "4-WAY", "RTL-SR": None, "RTL-TB": "TABLE"}

    assert parse_block_types(payload) == {"RTL-4W": "4-WAY", "RTL-TB": "TABLE"}


def test_wrapped_key_without_object_falls_back_to_flat_mapping() -> None:
    payload = {"block_fixture_types": "nope", "RTL-4W": "4-WAY"}

    assert parse_block_types(payload) == {"block_fixture_types": "nope", "RTL-4W": "4-WAY"}


@pytest.mark.parametrize("payload", ["text", 42, None])
def test_rejects_unexpected_payloads(payload: object) -> None:
    with pytest.raises(MappingLookupError):
        parse_block_types(payload)
