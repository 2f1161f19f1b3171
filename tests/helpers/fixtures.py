"""Reusable builders and in-memory fakes for fixture publishing tests."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Literal

from fixtrack.domain.errors import RecordFetchError, RecordWriteError
from fixtrack.domain.model import CurrentFixture, FixtureHistory, FixtureRecord
from fixtrack.domain.ports.persistence import DEFAULT_PAGE_SIZE
from fixtrack.domain.ports.unit_of_work import FixtureRepositories

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import TracebackType

BASE_TIME = datetime(2025, 1, 6, 9, 0, tzinfo=UTC)
STORE_ID = "S001"


def make_fixture(
    raw_type: str = "RTL-4W",
    *,
    floor: int = 0,
    x: float = 0.0,
    y: float = 0.0,
    z: float = 0.0,
    brand: str = "Nike",
) -> CurrentFixture:
    return CurrentFixture(
        raw_type=raw_type,
        floor_index=floor,
        pos_x=x,
        pos_y=y,
        pos_z=z,
        brand=brand,
    )


def make_record(
    fixture_id: str,
    *,
    fixture_type: str = "RTL-4W",
    store_id: str = STORE_ID,
    floor: int = 0,
    x: float = 0.0,
    y: float = 0.0,
    z: float = 0.0,
    brand: str = "Nike",
    created_at: datetime = BASE_TIME,
    recorded_at: datetime | None = BASE_TIME,
    row_id: int | None = None,
) -> FixtureRecord:
    return FixtureRecord(
        fixture_id=fixture_id,
        store_id=store_id,
        fixture_type=fixture_type,
        brand=brand,
        floor_index=floor,
        pos_x=x,
        pos_y=y,
        pos_z=z,
        created_at=created_at,
        recorded_at=recorded_at,
        row_id=row_id,
    )


class SequentialMinter:
    """Deterministic stand-in for the identifier minter: ``N000000001``, ``N000000002``..."""

    def __init__(self, prefix: str = "N") -> None:
        self._prefix = prefix
        self.minted: list[str] = []

    def __call__(self) -> str:
        value = f"{self._prefix}{len(self.minted) + 1:0{10 - len(self._prefix)}d}"
        self.minted.append(value)
        return value


@dataclass(slots=True)
class FixedClock:
    now: datetime = BASE_TIME

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> datetime:
        self.now = self.now + timedelta(**delta)
        return self.now


class InMemoryFixtureRecordRepository:
    """Append-only record store that keeps rows staged until the unit of work commits."""

    def __init__(self, rows: Sequence[FixtureRecord] = ()) -> None:
        self.rows: list[FixtureRecord] = []
        self.pending: list[FixtureRecord] = []
        self.page_sizes: list[int] = []
        self.fail_fetch = False
        self.fail_append = False
        self._next_row_id = 1
        for row in rows:
            self.rows.append(self._stored(row))

    def _stored(self, row: FixtureRecord) -> FixtureRecord:
        stored = replace(row, row_id=self._next_row_id)
        self._next_row_id += 1
        return stored

    def _visible(self, store_id: str) -> list[FixtureRecord]:
        return [row for row in (*self.rows, *self.pending) if row.store_id == store_id]

    def fetch_history(
        self, store_id: str, *, page_size: int = DEFAULT_PAGE_SIZE
    ) -> list[FixtureRecord]:
        if self.fail_fetch:
            raise RecordFetchError(f"Failed to fetch fixture records for store {store_id}")
        self.page_sizes.append(page_size)
        return self._visible(store_id)

    def fetch_active_records(self, store_id: str) -> list[FixtureRecord]:
        return list(FixtureHistory.from_rows(store_id, self.fetch_history(store_id)).active)

    def fetch_parked_records(self, store_id: str) -> list[FixtureRecord]:
        return list(FixtureHistory.from_rows(store_id, self.fetch_history(store_id)).parked)

    def append_records(self, rows: Sequence[FixtureRecord]) -> None:
        if self.fail_append:
            raise RecordWriteError(f"Failed to append {len(rows)} fixture records")
        self.pending.extend(self._stored(row) for row in rows)

    def fixture_history(self, store_id: str, fixture_id: str) -> list[FixtureRecord]:
        rows = [row for row in self._visible(store_id) if row.fixture_id == fixture_id]
        return list(reversed(rows))

    def active_fixtures(
        self,
        store_id: str,
        *,
        floor_index: int | None = None,
        brand: str | None = None,
    ) -> list[FixtureRecord]:
        return [
            record
            for record in self.fetch_active_records(store_id)
            if (floor_index is None or record.floor_index == floor_index)
            and (brand is None or record.brand == brand)
        ]

    def fixture_id_exists(self, fixture_id: str) -> bool:
        return any(row.fixture_id == fixture_id for row in (*self.rows, *self.pending))

    def commit(self) -> None:
        self.rows.extend(self.pending)
        self.pending.clear()

    def rollback(self) -> None:
        self.pending.clear()


class InMemoryStoreRevisionRepository:
    def __init__(self) -> None:
        self.revisions: dict[str, int] = {}
        self.pending: dict[str, int] = {}
        self.on_read: Callable[[str], None] | None = None

    def current(self, store_id: str) -> int:
        revision = self.revisions.get(store_id, 0)
        if self.on_read is not None:
            self.on_read(store_id)
        return revision

    def advance(self, store_id: str, *, expected: int) -> bool:
        if self.revisions.get(store_id, 0) != expected:
            return False
        self.pending[store_id] = expected + 1
        return True

    def commit(self) -> None:
        self.revisions.update(self.pending)
        self.pending.clear()

    def rollback(self) -> None:
        self.pending.clear()


@dataclass(slots=True)
class FakeFixtureUnitOfWork:
    fixtures: InMemoryFixtureRecordRepository = field(
        default_factory=InMemoryFixtureRecordRepository
    )
    revisions: InMemoryStoreRevisionRepository = field(
        default_factory=InMemoryStoreRevisionRepository
    )
    commits: int = 0
    rollbacks: int = 0

    @property
    def repositories(self) -> FixtureRepositories:
        return FixtureRepositories(fixtures=self.fixtures, revisions=self.revisions)

    def __enter__(self) -> FakeFixtureUnitOfWork:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        return False

    def commit(self) -> None:
        self.fixtures.commit()
        self.revisions.commit()
        self.commits += 1

    def rollback(self) -> None:
        self.fixtures.rollback()
        self.revisions.rollback()
        self.rollbacks += 1
