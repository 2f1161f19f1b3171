"""Fixture snapshot rows and persisted fixture identifier records."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from datetime import datetime

STORAGE_BRAND: Final[str] = "STORAGE"
UNKNOWN_BRAND: Final[str] = "unknown"


@dataclass(frozen=True, slots=True)
class CurrentFixture:
    """One fixture of the snapshot being published, as read from the manifest.

    ``raw_type`` is the block name used in the layout; it is resolved to a canonical
    fixture type before matching. ``pos_z`` is carried through but never matched on.
    """

    raw_type: str
    floor_index: int
    pos_x: float
    pos_y: float
    pos_z: float
    brand: str


@dataclass(kw_only=True)
class FixtureRecord:
    """Append-only identifier row for one fixture of one store.

    ``created_at`` is the first-ever appearance of ``fixture_id`` and is carried over
    unchanged by every later row for the same identifier, parked rows included.
    ``recorded_at`` is when this row was written and ``row_id`` is the surrogate key
    assigned by the record store; together they order the history of an identifier.
    """

    fixture_id: str
    store_id: str
    fixture_type: str
    brand: str
    floor_index: int
    pos_x: float
    pos_y: float
    pos_z: float
    created_at: datetime
    recorded_at: datetime | None = None
    row_id: int | None = None

    @property
    def is_parked(self) -> bool:
        return self.brand == STORAGE_BRAND

    def parked(self, *, recorded_at: datetime | None = None) -> FixtureRecord:
        """Return a new ``STORAGE`` row keeping identity, type, floor and position."""

        return replace(self, brand=STORAGE_BRAND, recorded_at=recorded_at, row_id=None)
