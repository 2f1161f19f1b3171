"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from fixtrack.adapters.fixture_types import build_http_fixture_type_lookup
from fixtrack.adapters.locking import ProcessStoreLock
from fixtrack.adapters.manifest import annotate_location_master, read_location_master
from fixtrack.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyFixtureUnitOfWork,
    is_started,
    startup,
)
from fixtrack.config import LockMode, get_reconciliation_config
from fixtrack.domain.ports.unit_of_work import FixtureUnitOfWork
from fixtrack.domain.publishing import PublishRequest, PublishResult, publish_snapshot

if TYPE_CHECKING:
    from pathlib import Path

    from fixtrack.config import ReconciliationConfig
    from fixtrack.domain.model import FixtureRecord
    from fixtrack.domain.ports import FixtureTypeLookup, ManifestReader, StoreLock

UnitOfWorkFactory = Callable[[], FixtureUnitOfWork]

log = getLogger(__name__)

_PROCESS_LOCK = ProcessStoreLock()


def publish_layout(
    *,
    store_id: str,
    manifest: Path,
    dry_run: bool = False,
    annotate_to: Path | None = None,
    use_type_lookup: bool = True,
    manifest_reader: ManifestReader | None = None,
    type_lookup: FixtureTypeLookup | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: ReconciliationConfig | None = None,
) -> PublishResult:
    """Publish the layout in ``manifest`` for ``store_id`` using the configured adapters."""

    settings = config or get_reconciliation_config()
    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    fixtures = (manifest_reader or read_location_master)(manifest)
    lookup = type_lookup
    if lookup is None and use_type_lookup:
        lookup = build_http_fixture_type_lookup()

    log.info(
        "Starting publish: store=%s, fixtures=%s, lock_mode=%s, dry_run=%s",
        store_id,
        len(fixtures),
        settings.lock_mode,
        dry_run,
    )
    result = publish_snapshot(
        PublishRequest(store_id=store_id, fixtures=fixtures, dry_run=dry_run),
        unit_of_work_factory=effective_uow,
        type_lookup=lookup,
        store_lock=_store_lock(settings.lock_mode),
        check_revision=settings.lock_mode is LockMode.OPTIMISTIC,
        page_size=settings.page_size,
        match_threshold=settings.match_threshold,
        max_mint_attempts=settings.max_mint_attempts,
    )

    stats = result.outcome.stats
    log.info(
        f"Finished publish of {store_id}: written={result.written}, "
        f"unchanged={stats.unchanged}, reused={stats.reused}, recycled={stats.recycled}, "
        f"minted={stats.minted}, parked={stats.parked}, "
        f"first_publish={result.outcome.first_publish}"
    )

    if annotate_to is not None:
        if result.dry_run:
            log.info("Dry run: not annotating %s", annotate_to)
        else:
            annotate_location_master(manifest, result.fixture_ids, annotate_to)

    return result


def fixture_history(
    *,
    store_id: str,
    fixture_id: str,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> list[FixtureRecord]:
    """Return every record of ``fixture_id`` in ``store_id``, newest first."""

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    with effective_uow() as uow:
        return uow.repositories.fixtures.fixture_history(store_id, fixture_id)


def list_fixtures(
    *,
    store_id: str,
    floor_index: int | None = None,
    brand: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> list[FixtureRecord]:
    """Return the active fixtures of ``store_id``, optionally narrowed by floor or brand."""

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    with effective_uow() as uow:
        return uow.repositories.fixtures.active_fixtures(
            store_id,
            floor_index=floor_index,
            brand=brand,
        )


def _default_unit_of_work_factory() -> UnitOfWorkFactory:
    if not is_started():
        startup()
    return SqlAlchemyFixtureUnitOfWork


def _store_lock(mode: LockMode) -> StoreLock | None:
    return _PROCESS_LOCK if mode is LockMode.PROCESS else None
