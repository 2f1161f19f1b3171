"""Partition a snapshot against the active records of a store."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from .contracts import Classification
from .spatial import DEFAULT_MATCH_THRESHOLD, is_match
from .types import fixture_position

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from fixtrack.domain.model import CurrentFixture, FixtureRecord

    from .contracts import FixturePosition

log = getLogger(__name__)


def classify_fixtures(
    current: Sequence[CurrentFixture],
    existing_active: Sequence[FixtureRecord],
    *,
    mapping: Mapping[str, str],
    threshold: float = DEFAULT_MATCH_THRESHOLD,
) -> Classification:
    """Split ``current`` into unchanged pairs and additions, and collect deletions.

    Matching is greedy and first-fit: snapshot fixtures are visited in order and each
    takes the first not-yet-matched record that ``is_match`` accepts. There is no
    backtracking, so with several same-type fixtures within ``threshold`` of each
    other the pairing depends on input order. Records left unmatched are deletions.
    Parked records are never matched even if they are passed in.
    """

    candidates = [record for record in existing_active if not record.is_parked]
    matched: set[int] = set()
    result = Classification()

    for snapshot_index, fixture in enumerate(current):
        position = fixture_position(fixture, mapping)
        index = _first_match(position, candidates, matched, threshold)
        if index is None:
            log.debug(
                "Addition: %s on floor %s at (%.2f, %.2f)",
                position.fixture_type,
                position.floor_index,
                position.pos_x,
                position.pos_y,
            )
            result.additions.append(fixture)
            result.addition_indexes.append(snapshot_index)
            continue
        matched.add(index)
        result.unchanged.append((fixture, candidates[index]))
        result.unchanged_indexes.append(snapshot_index)

    for index, record in enumerate(candidates):
        if index in matched:
            continue
        log.debug(
            "Deletion: %s (%s) on floor %s at (%.2f, %.2f)",
            record.fixture_type,
            record.fixture_id,
            record.floor_index,
            record.pos_x,
            record.pos_y,
        )
        result.deletions.append(record)

    log.info(
        "Classification: %s unchanged, %s deletions, %s additions",
        len(result.unchanged),
        len(result.deletions),
        len(result.additions),
    )
    return result


def _first_match(
    position: FixturePosition,
    candidates: Sequence[FixtureRecord],
    matched: set[int],
    threshold: float,
) -> int | None:
    for index, record in enumerate(candidates):
        if index not in matched and is_match(position, record, threshold):
            return index
    return None
