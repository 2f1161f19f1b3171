"""Materialized view over the append-only fixture record log.

Every fixture identifier accumulates one row per publish. The current state of an
identifier is its newest row; this module is the single place that reduces a log
to that state and splits it into active and parked identifiers.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .fixtures import FixtureRecord

_EPOCH = datetime.min.replace(tzinfo=UTC)


def _recency(record: FixtureRecord) -> tuple[datetime, int]:
    recorded_at = record.recorded_at or _EPOCH
    return recorded_at, -1 if record.row_id is None else record.row_id


def latest_per_fixture(rows: Iterable[FixtureRecord]) -> list[FixtureRecord]:
    """Reduce a record log to the newest row per ``fixture_id``.

    Rows are ordered by ``recorded_at`` and then by ``row_id``; on a full tie the row
    seen last wins. The result keeps the order in which identifiers first appear.
    """

    latest: dict[str, FixtureRecord] = {}
    for row in rows:
        current = latest.get(row.fixture_id)
        if current is None or _recency(row) >= _recency(current):
            latest[row.fixture_id] = row
    return list(latest.values())


def split_active_parked(
    latest: Iterable[FixtureRecord],
) -> tuple[list[FixtureRecord], list[FixtureRecord]]:
    active: list[FixtureRecord] = []
    parked: list[FixtureRecord] = []
    for record in latest:
        (parked if record.is_parked else active).append(record)
    return active, parked


@dataclass(frozen=True, slots=True)
class FixtureHistory:
    """Current identifier state of one store, derived from its full record log."""

    store_id: str
    active: tuple[FixtureRecord, ...] = ()
    parked: tuple[FixtureRecord, ...] = ()

    @classmethod
    def from_rows(cls, store_id: str, rows: Iterable[FixtureRecord]) -> FixtureHistory:
        active, parked = split_active_parked(latest_per_fixture(rows))
        return cls(store_id=store_id, active=tuple(active), parked=tuple(parked))

    @property
    def is_empty(self) -> bool:
        return not self.active and not self.parked

    @property
    def known_ids(self) -> frozenset[str]:
        return frozenset(record.fixture_id for record in (*self.active, *self.parked))
