"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, cast

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from fixtrack.adapters.sqlalchemy.mappings import fixture_record_table, store_revision_table
from fixtrack.domain.clock import utcnow
from fixtrack.domain.errors import RecordFetchError, RecordWriteError
from fixtrack.domain.model import FixtureHistory, FixtureRecord
from fixtrack.domain.ports.persistence import DEFAULT_PAGE_SIZE

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.engine import CursorResult
    from sqlalchemy.orm import Session

    from fixtrack.domain.clock import Clock

log = logging.getLogger(__name__)

_columns = fixture_record_table.c


class SqlAlchemyFixtureRecordRepository:
    def __init__(self, session: Session, *, clock: Clock = utcnow) -> None:
        self.session = session
        self._clock = clock

    def fetch_history(
        self, store_id: str, *, page_size: int = DEFAULT_PAGE_SIZE
    ) -> list[FixtureRecord]:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        base = (
            select(FixtureRecord)
            .where(_columns.store_id == store_id)
            .order_by(
                _columns.fixture_id.asc(),
                _columns.recorded_at.desc(),
                _columns.row_id.desc(),
            )
        )
        rows: list[FixtureRecord] = []
        offset = 0
        try:
            while True:
                page = list(
                    self.session.execute(base.limit(page_size).offset(offset)).scalars()
                )
                rows.extend(page)
                if len(page) < page_size:
                    break
                offset += page_size
        except SQLAlchemyError as exc:
            raise RecordFetchError(
                f"Failed to fetch fixture records for store {store_id} at offset {offset}"
            ) from exc
        log.debug("Fetched %s fixture records for store %s", len(rows), store_id)
        return rows

    def fetch_active_records(self, store_id: str) -> list[FixtureRecord]:
        return list(self._history(store_id).active)

    def fetch_parked_records(self, store_id: str) -> list[FixtureRecord]:
        return list(self._history(store_id).parked)

    def append_records(self, rows: Sequence[FixtureRecord]) -> None:
        if not rows:
            return
        now = self._clock()
        for row in rows:
            if row.row_id is not None:
                raise RecordWriteError(
                    f"Fixture record {row.fixture_id} is already stored as row {row.row_id}"
                )
            if row.recorded_at is None:
                row.recorded_at = now
        try:
            self.session.add_all(rows)
            self.session.flush()
        except SQLAlchemyError as exc:
            raise RecordWriteError(f"Failed to append {len(rows)} fixture records") from exc

    def fixture_history(self, store_id: str, fixture_id: str) -> list[FixtureRecord]:
        stmt = (
            select(FixtureRecord)
            .where(_columns.store_id == store_id)
            .where(_columns.fixture_id == fixture_id)
            .order_by(_columns.recorded_at.desc(), _columns.row_id.desc())
        )
        try:
            return list(self.session.execute(stmt).scalars())
        except SQLAlchemyError as exc:
            raise RecordFetchError(f"Failed to fetch history of fixture {fixture_id}") from exc

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
        stmt = select(_columns.row_id).where(_columns.fixture_id == fixture_id).limit(1)
        try:
            return self.session.execute(stmt).first() is not None
        except SQLAlchemyError as exc:
            raise RecordFetchError(f"Failed to look up fixture id {fixture_id}") from exc

    def _history(self, store_id: str) -> FixtureHistory:
        return FixtureHistory.from_rows(store_id, self.fetch_history(store_id))


class SqlAlchemyStoreRevisionRepository:
    """Compare-and-set revision counter stored in ``store_revision``."""

    def __init__(self, session: Session, *, clock: Clock = utcnow) -> None:
        self.session = session
        self._clock = clock

    def current(self, store_id: str) -> int:
        stmt = select(store_revision_table.c.revision).where(
            store_revision_table.c.store_id == store_id
        )
        revision = self.session.execute(stmt).scalar_one_or_none()
        return 0 if revision is None else int(revision)

    def advance(self, store_id: str, *, expected: int) -> bool:
        now = self._clock()
        stmt = (
            update(store_revision_table)
            .where(store_revision_table.c.store_id == store_id)
            .where(store_revision_table.c.revision == expected)
            .values(revision=expected + 1, updated_at=now)
        )
        result = cast("CursorResult[object]", self.session.execute(stmt))
        if result.rowcount == 1:
            return True
        if expected != 0:
            log.warning("Store %s moved past revision %s", store_id, expected)
            return False
        try:
            self.session.execute(
                insert(store_revision_table).values(store_id=store_id, revision=1, updated_at=now)
            )
        except IntegrityError:
            log.warning("Store %s was first published concurrently", store_id)
            return False
        return True
