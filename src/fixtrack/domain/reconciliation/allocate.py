"""Hand identifiers to snapshot additions.

Each addition first tries the identifiers orphaned by this run (the deletions), then
those parked in ``STORAGE`` by earlier runs, and only then gets a freshly minted one.
Reused identifiers keep their original ``created_at``.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from .contracts import Allocation, Assignment, AssignmentSource
from .spatial import closest
from .types import fixture_position

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence
    from datetime import datetime

    from fixtrack.domain.model import CurrentFixture, FixtureRecord

    from .contracts import FixturePosition

log = getLogger(__name__)


def allocate_identifiers(
    additions: Sequence[CurrentFixture],
    reuse_pool: Sequence[FixtureRecord],
    parked_pool: Sequence[FixtureRecord],
    *,
    mapping: Mapping[str, str],
    now: datetime,
    mint: Callable[[], str],
) -> Allocation:
    """Assign an identifier to every addition, in order.

    Pool lookups go through ``closest``: the fixture type must match, the floor need
    not. Each pool entry is handed out at most once.
    """

    allocation = Allocation()

    for fixture in additions:
        position = fixture_position(fixture, mapping)

        record = _take_closest(position, reuse_pool, allocation.consumed_from_reuse)
        if record is not None:
            allocation.assignments.append(
                Assignment(fixture, record.fixture_id, record.created_at, AssignmentSource.REUSED)
            )
            log.debug("Reused %s for %s", record.fixture_id, position.fixture_type)
            continue

        record = _take_closest(position, parked_pool, allocation.consumed_from_parked)
        if record is not None:
            allocation.assignments.append(
                Assignment(
                    fixture, record.fixture_id, record.created_at, AssignmentSource.RECYCLED
                )
            )
            log.debug("Recycled parked %s for %s", record.fixture_id, position.fixture_type)
            continue

        fixture_id = mint()
        allocation.assignments.append(
            Assignment(fixture, fixture_id, now, AssignmentSource.MINTED)
        )
        log.debug("Minted %s for %s", fixture_id, position.fixture_type)

    log.info(
        "Assigned %s additions: %s reused, %s recycled, %s minted",
        len(allocation.assignments),
        len(allocation.consumed_from_reuse),
        len(allocation.consumed_from_parked),
        allocation.count(AssignmentSource.MINTED),
    )
    return allocation


def _take_closest(
    position: FixturePosition,
    pool: Sequence[FixtureRecord],
    consumed: set[str],
) -> FixtureRecord | None:
    available = [record for record in pool if record.fixture_id not in consumed]
    match = closest(position, available)
    if match is not None:
        consumed.add(match.fixture_id)
    return match
