"""Ports for persisting fixture identifier records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from fixtrack.domain.model import FixtureRecord

DEFAULT_PAGE_SIZE: Final[int] = 1000


@runtime_checkable
class FixtureRecordRepository(Protocol):
    """Append-only record store for fixture identifiers.

    Rows are only ever inserted. ``fetch_history`` returns every row of a store,
    paging through the backend eagerly; the ``fetch_*_records`` helpers reduce that
    log to the latest row per identifier.
    """

    def fetch_history(
        self, store_id: str, *, page_size: int = DEFAULT_PAGE_SIZE
    ) -> list[FixtureRecord]: ...

    def fetch_active_records(self, store_id: str) -> list[FixtureRecord]: ...

    def fetch_parked_records(self, store_id: str) -> list[FixtureRecord]: ...

    def append_records(self, rows: Sequence[FixtureRecord]) -> None: ...

    def fixture_history(self, store_id: str, fixture_id: str) -> list[FixtureRecord]: ...

    def active_fixtures(
        self,
        store_id: str,
        *,
        floor_index: int | None = None,
        brand: str | None = None,
    ) -> list[FixtureRecord]: ...

    def fixture_id_exists(self, fixture_id: str) -> bool: ...


@runtime_checkable
class StoreRevisionRepository(Protocol):
    """Per-store revision counter used as an optimistic concurrency token."""

    def current(self, store_id: str) -> int: ...

    def advance(self, store_id: str, *, expected: int) -> bool: ...
