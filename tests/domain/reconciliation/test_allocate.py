from __future__ import annotations

from datetime import timedelta

from fixtrack.domain.model import STORAGE_BRAND
from fixtrack.domain.reconciliation import AssignmentSource, allocate_identifiers
from tests.helpers.fixtures import BASE_TIME, SequentialMinter, make_fixture, make_record

NOW = BASE_TIME + timedelta(days=30)


def test_addition_reuses_orphaned_identifier_of_same_type() -> None:
    orphan = make_record("AAAAAAAAAA", floor=0, x=0.0)
    moved = make_fixture(floor=1, x=8.0)
    minter = SequentialMinter()

    allocation = allocate_identifiers([moved], [orphan], [], mapping={}, now=NOW, mint=minter)

    (assignment,) = allocation.assignments
    assert assignment.fixture is moved
    assert assignment.fixture_id == "AAAAAAAAAA"
    assert assignment.created_at == orphan.created_at
    assert assignment.source is AssignmentSource.REUSED
    assert allocation.consumed_from_reuse == {"AAAAAAAAAA"}
    assert minter.minted == []


def test_parked_identifier_is_recycled_before_minting() -> None:
    parked_created = BASE_TIME - timedelta(days=90)
    parked = make_record("PPPPPPPPPP", brand=STORAGE_BRAND, created_at=parked_created)
    minter = SequentialMinter()

    allocation = allocate_identifiers(
        [make_fixture()], [], [parked], mapping={}, now=NOW, mint=minter
    )

    (assignment,) = allocation.assignments
    assert assignment.fixture_id == "PPPPPPPPPP"
    assert assignment.created_at == parked_created
    assert assignment.source is AssignmentSource.RECYCLED
    assert allocation.consumed_from_parked == {"PPPPPPPPPP"}
    assert minter.minted == []


def test_reuse_pool_is_tried_before_parked_pool() -> None:
    orphan = make_record("AAAAAAAAAA", floor=3, x=50.0)
    parked = make_record("PPPPPPPPPP", brand=STORAGE_BRAND, floor=0, x=0.0)

    allocation = allocate_identifiers(
        [make_fixture(floor=0, x=0.0)],
        [orphan],
        [parked],
        mapping={},
        now=NOW,
        mint=SequentialMinter(),
    )

    assert allocation.assignments[0].fixture_id == "AAAAAAAAAA"
    assert allocation.consumed_from_parked == set()


def test_identifier_is_minted_when_no_pool_has_the_type() -> None:
    orphan = make_record("AAAAAAAAAA", fixture_type="SHELF")
    minter = SequentialMinter()

    allocation = allocate_identifiers(
        [make_fixture("RTL-4W")], [orphan], [], mapping={}, now=NOW, mint=minter
    )

    (assignment,) = allocation.assignments
    assert assignment.fixture_id == minter.minted[0]
    assert assignment.created_at == NOW
    assert assignment.source is AssignmentSource.MINTED
    assert allocation.consumed_from_reuse == set()


def test_pool_entries_are_handed_out_once() -> None:
    orphan = make_record("AAAAAAAAAA")
    parked = make_record("PPPPPPPPPP", brand=STORAGE_BRAND)
    additions = [make_fixture(x=0.0), make_fixture(x=1.0), make_fixture(x=2.0)]
    minter = SequentialMinter()

    allocation = allocate_identifiers(
        additions, [orphan], [parked], mapping={}, now=NOW, mint=minter
    )

    assert [a.fixture_id for a in allocation.assignments] == [
        "AAAAAAAAAA",
        "PPPPPPPPPP",
        minter.minted[0],
    ]
    assert allocation.count(AssignmentSource.REUSED) == 1
    assert allocation.count(AssignmentSource.RECYCLED) == 1
    assert allocation.count(AssignmentSource.MINTED) == 1


def test_allocation_matches_pools_on_resolved_type() -> None:
    orphan = make_record("AAAAAAAAAA", fixture_type="4-WAY")

    allocation = allocate_identifiers(
        [make_fixture("RTL-4W-V2")],
        [orphan],
        [],
        mapping={"RTL-4W-V2": "4-WAY"},
        now=NOW,
        mint=SequentialMinter(),
    )

    assert allocation.assignments[0].source is AssignmentSource.REUSED
