"""Fixture identity reconciliation core.

Flow for one publish of one store:
1) resolve block names to canonical fixture types
2) classify the snapshot against active records (unchanged / additions / deletions)
3) allocate identifiers to additions from deletions, then parked records, then mint
4) shape the append-only batch and the identifiers to park in ``STORAGE``
"""

from __future__ import annotations

from .allocate import allocate_identifiers
from .classify import classify_fixtures
from .contracts import (
    Allocation,
    Assignment,
    AssignmentSource,
    Classification,
    FixturePosition,
    Positioned,
    ReconciliationOutcome,
    ReconciliationStats,
)
from .engine import ReconciliationEngine, reconcile_first_publish, reconcile_republish
from .spatial import DEFAULT_MATCH_THRESHOLD, closest, is_match, planar_distance
from .types import fixture_position, resolve_fixture_type

__all__ = [
    "DEFAULT_MATCH_THRESHOLD",
    "Allocation",
    "Assignment",
    "AssignmentSource",
    "Classification",
    "FixturePosition",
    "Positioned",
    "ReconciliationEngine",
    "ReconciliationOutcome",
    "ReconciliationStats",
    "allocate_identifiers",
    "classify_fixtures",
    "closest",
    "fixture_position",
    "is_match",
    "planar_distance",
    "reconcile_first_publish",
    "reconcile_republish",
    "resolve_fixture_type",
]
