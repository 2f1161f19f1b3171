"""Shared reconciliation contract components.

This module holds only the value types passed between the classifier, the
identifier allocator and the orchestrator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from datetime import datetime

    from fixtrack.domain.model import CurrentFixture, FixtureRecord


class Positioned(Protocol):
    """Anything that can be matched spatially: a type on a floor at an XY position."""

    @property
    def fixture_type(self) -> str: ...

    @property
    def floor_index(self) -> int: ...

    @property
    def pos_x(self) -> float: ...

    @property
    def pos_y(self) -> float: ...


@dataclass(frozen=True, slots=True)
class FixturePosition:
    """Matching view of a snapshot fixture after type resolution."""

    fixture_type: str
    floor_index: int
    pos_x: float
    pos_y: float


@dataclass(slots=True)
class Classification:
    """Snapshot partitioned against the active records of a store.

    ``unchanged_indexes`` and ``addition_indexes`` give the snapshot position of each
    entry of ``unchanged`` and ``additions``.
    """

    unchanged: list[tuple[CurrentFixture, FixtureRecord]] = field(
        default_factory=list["tuple[CurrentFixture, FixtureRecord]"]
    )
    deletions: list[FixtureRecord] = field(default_factory=list["FixtureRecord"])
    additions: list[CurrentFixture] = field(default_factory=list["CurrentFixture"])
    unchanged_indexes: list[int] = field(default_factory=list[int])
    addition_indexes: list[int] = field(default_factory=list[int])


class AssignmentSource(StrEnum):
    """Where the identifier of an addition came from."""

    REUSED = "reused"
    RECYCLED = "recycled"
    MINTED = "minted"


@dataclass(frozen=True, slots=True)
class Assignment:
    fixture: CurrentFixture
    fixture_id: str
    created_at: datetime
    source: AssignmentSource


@dataclass(slots=True)
class Allocation:
    """Identifiers handed to additions plus the pool entries they consumed."""

    assignments: list[Assignment] = field(default_factory=list["Assignment"])
    consumed_from_reuse: set[str] = field(default_factory=set[str])
    consumed_from_parked: set[str] = field(default_factory=set[str])

    def count(self, source: AssignmentSource) -> int:
        return sum(1 for assignment in self.assignments if assignment.source is source)


@dataclass(frozen=True, slots=True)
class ReconciliationStats:
    unchanged: int = 0
    additions: int = 0
    deletions: int = 0
    reused: int = 0
    recycled: int = 0
    minted: int = 0
    parked: int = 0


@dataclass(frozen=True, slots=True)
class ReconciliationOutcome:
    """Everything a caller needs to append after one reconciliation run.

    ``final_batch`` holds one row per snapshot fixture. ``park_for_reuse`` lists the
    orphaned identifiers nobody picked up; ``parked_rows`` are the matching
    ``STORAGE`` rows to append alongside the batch. ``fixture_ids`` follows the
    snapshot order, so it can be written back next to the manifest rows.
    """

    store_id: str
    first_publish: bool
    final_batch: tuple[FixtureRecord, ...]
    park_for_reuse: tuple[str, ...]
    parked_rows: tuple[FixtureRecord, ...]
    fixture_ids: tuple[str, ...]
    stats: ReconciliationStats

    @property
    def rows_to_append(self) -> tuple[FixtureRecord, ...]:
        return (*self.final_batch, *self.parked_rows)
