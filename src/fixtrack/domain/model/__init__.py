"""Domain model for fixture identity tracking."""

from __future__ import annotations

from .fixtures import STORAGE_BRAND, UNKNOWN_BRAND, CurrentFixture, FixtureRecord
from .history import FixtureHistory, latest_per_fixture, split_active_parked
from .identifiers import (
    FIXTURE_ID_ALPHABET,
    FIXTURE_ID_LENGTH,
    IdentifierMinter,
    generate_fixture_id,
    is_valid_fixture_id,
)

__all__ = [
    "FIXTURE_ID_ALPHABET",
    "FIXTURE_ID_LENGTH",
    "STORAGE_BRAND",
    "UNKNOWN_BRAND",
    "CurrentFixture",
    "FixtureHistory",
    "FixtureRecord",
    "IdentifierMinter",
    "generate_fixture_id",
    "is_valid_fixture_id",
    "latest_per_fixture",
    "split_active_parked",
]
