from __future__ import annotations

from fixtrack.domain.reconciliation import fixture_position, resolve_fixture_type
from tests.helpers.fixtures import make_fixture


def test_resolve_fixture_type_uses_mapping() -> None:
    assert resolve_fixture_type("RTL-4W", {"RTL-4W": "4-WAY"}) == "4-WAY"


def test_resolve_fixture_type_falls_back_to_raw_label() -> None:
    assert resolve_fixture_type("RTL-SR", {"RTL-4W": "4-WAY"}) == "RTL-SR"
    assert resolve_fixture_type("RTL-SR", {}) == "RTL-SR"


def test_resolve_fixture_type_treats_blank_mapping_as_miss() -> None:
    assert resolve_fixture_type("RTL-SR", {"RTL-SR": ""}) == "RTL-SR"


def test_fixture_position_carries_resolved_type_and_plane() -> None:
    fixture = make_fixture("RTL-4W", floor=2, x=1.0, y=2.0, z=3.0)

    position = fixture_position(fixture, {"RTL-4W": "4-WAY"})

    assert position.fixture_type == "4-WAY"
    assert (position.floor_index, position.pos_x, position.pos_y) == (2, 1.0, 2.0)
