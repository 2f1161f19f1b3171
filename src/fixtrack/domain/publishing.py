"""Application service publishing a store layout snapshot.

One publish resolves block names to fixture types, reconciles the snapshot against
the record history of the store and appends the resulting rows. The final batch and
the rows parking orphaned identifiers are written in one unit of work, so either
both land or neither does.
"""

from __future__ import annotations

from contextlib import nullcontext
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from fixtrack.domain.clock import utcnow
from fixtrack.domain.errors import ConcurrentPublishError, MappingLookupError
from fixtrack.domain.model import FixtureHistory, IdentifierMinter
from fixtrack.domain.model.identifiers import DEFAULT_MAX_MINT_ATTEMPTS
from fixtrack.domain.ports.persistence import DEFAULT_PAGE_SIZE
from fixtrack.domain.reconciliation import DEFAULT_MATCH_THRESHOLD, ReconciliationEngine

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from fixtrack.domain.clock import Clock
    from fixtrack.domain.model import CurrentFixture
    from fixtrack.domain.ports import FixtureTypeLookup, FixtureUnitOfWork, StoreLock
    from fixtrack.domain.reconciliation import ReconciliationOutcome

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PublishRequest:
    store_id: str
    fixtures: Sequence[CurrentFixture]
    dry_run: bool = False


@dataclass(frozen=True, slots=True)
class PublishResult:
    """Outcome of one publish, including whether anything was written."""

    store_id: str
    outcome: ReconciliationOutcome
    written: int
    dry_run: bool
    type_lookup_degraded: bool = False

    @property
    def fixture_ids(self) -> tuple[str, ...]:
        return self.outcome.fixture_ids


def publish_snapshot(
    request: PublishRequest,
    *,
    unit_of_work_factory: Callable[[], FixtureUnitOfWork],
    type_lookup: FixtureTypeLookup | None = None,
    store_lock: StoreLock | None = None,
    check_revision: bool = True,
    page_size: int = DEFAULT_PAGE_SIZE,
    match_threshold: float = DEFAULT_MATCH_THRESHOLD,
    max_mint_attempts: int = DEFAULT_MAX_MINT_ATTEMPTS,
    clock: Clock = utcnow,
) -> PublishResult:
    """Reconcile ``request.fixtures`` against the store history and append the result.

    ``store_lock`` serialises publishes inside one process. With ``check_revision``
    the store revision is read before the history is fetched and bumped with a
    compare-and-set just before the append; losing that race raises
    ``ConcurrentPublishError`` and nothing is written.
    """

    store_id = request.store_id
    mapping, degraded = _resolve_mapping(request.fixtures, type_lookup)
    engine = ReconciliationEngine(threshold=match_threshold, clock=clock)
    critical_section = store_lock.hold(store_id) if store_lock is not None else nullcontext()

    with critical_section, unit_of_work_factory() as uow:
        fixtures_repo = uow.repositories.fixtures
        revisions_repo = uow.repositories.revisions

        revision = revisions_repo.current(store_id) if check_revision else None
        rows = fixtures_repo.fetch_history(store_id, page_size=page_size)
        history = FixtureHistory.from_rows(store_id, rows)
        log.info(
            "Store %s history: %s rows, %s active, %s parked",
            store_id,
            len(rows),
            len(history.active),
            len(history.parked),
        )

        minter = IdentifierMinter(
            reserved=history.known_ids,
            exists=fixtures_repo.fixture_id_exists,
            max_attempts=max_mint_attempts,
        )
        outcome = engine.reconcile(
            store_id,
            request.fixtures,
            history,
            mapping=mapping,
            mint=minter,
        )

        if request.dry_run:
            log.info(
                "Dry run for store %s: %s rows not written",
                store_id,
                len(outcome.rows_to_append),
            )
            return PublishResult(
                store_id=store_id,
                outcome=outcome,
                written=0,
                dry_run=True,
                type_lookup_degraded=degraded,
            )

        if revision is not None and not revisions_repo.advance(store_id, expected=revision):
            raise ConcurrentPublishError(store_id)

        rows_to_append = outcome.rows_to_append
        fixtures_repo.append_records(rows_to_append)
        uow.commit()

    log.info("Published store %s: %s rows appended", store_id, len(rows_to_append))
    return PublishResult(
        store_id=store_id,
        outcome=outcome,
        written=len(rows_to_append),
        dry_run=False,
        type_lookup_degraded=degraded,
    )


def _resolve_mapping(
    fixtures: Sequence[CurrentFixture],
    type_lookup: FixtureTypeLookup | None,
) -> tuple[Mapping[str, str], bool]:
    if type_lookup is None:
        return {}, False
    names = sorted({fixture.raw_type for fixture in fixtures})
    if not names:
        return {}, False
    try:
        return type_lookup(names), False
    except MappingLookupError as exc:
        log.warning("Fixture type lookup failed, using raw block names: %s", exc)
        return {}, True
