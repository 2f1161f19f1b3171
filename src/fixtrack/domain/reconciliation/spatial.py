"""Spatial matching of fixtures on the horizontal plane.

Only type, floor and the XY position take part; the floor index already encodes the
vertical level so ``pos_z`` is ignored.
"""

from __future__ import annotations

import math
from logging import getLogger
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .contracts import Positioned

log = getLogger(__name__)

DEFAULT_MATCH_THRESHOLD: Final[float] = 0.3


def planar_distance(a: Positioned, b: Positioned) -> float:
    return math.hypot(a.pos_x - b.pos_x, a.pos_y - b.pos_y)


def is_match(a: Positioned, b: Positioned, threshold: float = DEFAULT_MATCH_THRESHOLD) -> bool:
    """Return whether ``a`` and ``b`` are the same fixture left in place.

    Same type, same floor and at most ``threshold`` metres apart; the bound is closed.
    """

    return (
        a.fixture_type == b.fixture_type
        and a.floor_index == b.floor_index
        and planar_distance(a, b) <= threshold
    )


def closest[T: Positioned](target: Positioned, candidates: Sequence[T]) -> T | None:
    """Return the nearest candidate of the same type, preferring the target's floor.

    Candidates on other floors are only considered when none of the matching type
    share the target's floor. There is no distance bound; ties go to the candidate
    that comes first.
    """

    same_type = [c for c in candidates if c.fixture_type == target.fixture_type]
    if not same_type:
        return None

    same_floor = [c for c in same_type if c.floor_index == target.floor_index]
    search = same_floor or same_type

    best: T | None = None
    best_distance = math.inf
    for candidate in search:
        distance = planar_distance(target, candidate)
        if best is None or distance < best_distance:
            best = candidate
            best_distance = distance

    log.debug(
        "Closest %s on floor %s: %s of %s candidates on %s, distance %.2f",
        target.fixture_type,
        target.floor_index,
        len(search),
        len(same_type),
        "same floor" if same_floor else "other floors",
        best_distance,
    )
    return best
