"""Orchestrator for fixture identity reconciliation.

Two lifecycles are supported. A store without any history gets a fresh identifier
for every fixture. A store with history runs classification and allocation and
shapes the rows to append: unchanged and assigned fixtures become the final batch,
orphaned identifiers nobody picked up are parked in ``STORAGE`` for later runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from fixtrack.domain.clock import Clock, utcnow
from fixtrack.domain.model import FixtureRecord, IdentifierMinter

from .allocate import allocate_identifiers
from .classify import classify_fixtures
from .contracts import AssignmentSource, ReconciliationOutcome, ReconciliationStats
from .spatial import DEFAULT_MATCH_THRESHOLD
from .types import resolve_fixture_type

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence
    from datetime import datetime

    from fixtrack.domain.model import CurrentFixture, FixtureHistory

log = getLogger(__name__)


def reconcile_first_publish(
    store_id: str,
    current: Sequence[CurrentFixture],
    *,
    mapping: Mapping[str, str],
    now: datetime,
    mint: Callable[[], str],
) -> ReconciliationOutcome:
    """Mint an identifier for every fixture of a store published for the first time."""

    batch = tuple(
        _record_for(
            store_id,
            fixture,
            fixture_id=mint(),
            fixture_type=resolve_fixture_type(fixture.raw_type, mapping),
            created_at=now,
            recorded_at=now,
        )
        for fixture in current
    )
    log.info("First publish of store %s: minted %s fixture ids", store_id, len(batch))
    return ReconciliationOutcome(
        store_id=store_id,
        first_publish=True,
        final_batch=batch,
        park_for_reuse=(),
        parked_rows=(),
        fixture_ids=tuple(record.fixture_id for record in batch),
        stats=ReconciliationStats(additions=len(batch), minted=len(batch)),
    )


def reconcile_republish(
    store_id: str,
    current: Sequence[CurrentFixture],
    history: FixtureHistory,
    *,
    mapping: Mapping[str, str],
    now: datetime,
    mint: Callable[[], str],
    threshold: float = DEFAULT_MATCH_THRESHOLD,
) -> ReconciliationOutcome:
    """Carry identifiers over from ``history`` to the fixtures of ``current``."""

    classification = classify_fixtures(
        current,
        history.active,
        mapping=mapping,
        threshold=threshold,
    )
    allocation = allocate_identifiers(
        classification.additions,
        classification.deletions,
        history.parked,
        mapping=mapping,
        now=now,
        mint=mint,
    )

    ids_by_index: dict[int, str] = {}
    batch: list[FixtureRecord] = []

    for snapshot_index, (fixture, existing) in zip(
        classification.unchanged_indexes, classification.unchanged, strict=True
    ):
        batch.append(
            _record_for(
                store_id,
                fixture,
                fixture_id=existing.fixture_id,
                fixture_type=existing.fixture_type,
                created_at=existing.created_at,
                recorded_at=now,
            )
        )
        ids_by_index[snapshot_index] = existing.fixture_id

    for snapshot_index, assignment in zip(
        classification.addition_indexes, allocation.assignments, strict=True
    ):
        batch.append(
            _record_for(
                store_id,
                assignment.fixture,
                fixture_id=assignment.fixture_id,
                fixture_type=resolve_fixture_type(assignment.fixture.raw_type, mapping),
                created_at=assignment.created_at,
                recorded_at=now,
            )
        )
        ids_by_index[snapshot_index] = assignment.fixture_id

    leftovers = [
        record
        for record in classification.deletions
        if record.fixture_id not in allocation.consumed_from_reuse
    ]
    parked_rows = tuple(record.parked(recorded_at=now) for record in leftovers)

    stats = ReconciliationStats(
        unchanged=len(classification.unchanged),
        additions=len(classification.additions),
        deletions=len(classification.deletions),
        reused=allocation.count(AssignmentSource.REUSED),
        recycled=allocation.count(AssignmentSource.RECYCLED),
        minted=allocation.count(AssignmentSource.MINTED),
        parked=len(parked_rows),
    )
    log.info(
        "Re-publish of store %s: %s unchanged, %s additions, %s deletions, %s parked",
        store_id,
        stats.unchanged,
        stats.additions,
        stats.deletions,
        stats.parked,
    )
    return ReconciliationOutcome(
        store_id=store_id,
        first_publish=False,
        final_batch=tuple(batch),
        park_for_reuse=tuple(record.fixture_id for record in leftovers),
        parked_rows=parked_rows,
        fixture_ids=tuple(ids_by_index[index] for index in range(len(current))),
        stats=stats,
    )


@dataclass(slots=True)
class ReconciliationEngine:
    """Pick the lifecycle for a store and run it with a pinned clock and threshold."""

    threshold: float = DEFAULT_MATCH_THRESHOLD
    clock: Clock = field(default=utcnow)

    def reconcile(
        self,
        store_id: str,
        current: Sequence[CurrentFixture],
        history: FixtureHistory,
        *,
        mapping: Mapping[str, str],
        mint: Callable[[], str] | None = None,
    ) -> ReconciliationOutcome:
        now = self.clock()
        effective_mint = mint or IdentifierMinter(reserved=history.known_ids)
        if history.is_empty:
            return reconcile_first_publish(
                store_id,
                current,
                mapping=mapping,
                now=now,
                mint=effective_mint,
            )
        return reconcile_republish(
            store_id,
            current,
            history,
            mapping=mapping,
            now=now,
            mint=effective_mint,
            threshold=self.threshold,
        )


def _record_for(
    store_id: str,
    fixture: CurrentFixture,
    *,
    fixture_id: str,
    fixture_type: str,
    created_at: datetime,
    recorded_at: datetime,
) -> FixtureRecord:
    return FixtureRecord(
        fixture_id=fixture_id,
        store_id=store_id,
        fixture_type=fixture_type,
        brand=fixture.brand,
        floor_index=fixture.floor_index,
        pos_x=fixture.pos_x,
        pos_y=fixture.pos_y,
        pos_z=fixture.pos_z,
        created_at=created_at,
        recorded_at=recorded_at,
    )
