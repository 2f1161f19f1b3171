"""Resolve layout block names to canonical fixture types."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .contracts import FixturePosition

if TYPE_CHECKING:
    from collections.abc import Mapping

    from fixtrack.domain.model import CurrentFixture


def resolve_fixture_type(raw_type: str, mapping: Mapping[str, str]) -> str:
    """Return the canonical type for ``raw_type``, or ``raw_type`` itself on a miss."""

    return mapping.get(raw_type) or raw_type


def fixture_position(fixture: CurrentFixture, mapping: Mapping[str, str]) -> FixturePosition:
    return FixturePosition(
        fixture_type=resolve_fixture_type(fixture.raw_type, mapping),
        floor_index=fixture.floor_index,
        pos_x=fixture.pos_x,
        pos_y=fixture.pos_y,
    )
