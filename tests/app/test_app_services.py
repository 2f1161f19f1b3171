from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

import pytest

from fixtrack import app as app_module
from fixtrack.config import LockMode, ReconciliationConfig
from fixtrack.domain.errors import ConcurrentPublishError
from fixtrack.domain.model import STORAGE_BRAND
from tests.helpers.fixtures import STORE_ID, FakeFixtureUnitOfWork, make_fixture, make_record
from tests.helpers.manifests import write_manifest

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from pathlib import Path

    from fixtrack.domain.model import CurrentFixture


class RecordingLock:
    def __init__(self) -> None:
        self.held: list[str] = []

    @contextmanager
    def hold(self, store_id: str) -> Iterator[None]:
        self.held.append(store_id)
        yield


class StaticLookup:
    def __init__(self, mapping: dict[str, str]) -> None:
        self.mapping = mapping
        self.calls = 0

    def __call__(self, names: Sequence[str]) -> dict[str, str]:
        self.calls += 1
        return {name: self.mapping[name] for name in names if name in self.mapping}


@pytest.fixture
def manifest(tmp_path: Path) -> Path:
    fixtures = [
        make_fixture("RTL-4W", x=1.0, y=1.0),
        make_fixture("RTL-SR", x=4.0, y=1.0, brand="Adidas"),
    ]
    return write_manifest(tmp_path / "location-master.csv", fixtures)


def test_publish_layout_appends_and_annotates(
    fake_uow: FakeFixtureUnitOfWork, manifest: Path, tmp_path: Path
) -> None:
    lookup = StaticLookup({"RTL-4W": "4-WAY"})
    annotated = tmp_path / "annotated.csv"

    result = app_module.publish_layout(
        store_id=STORE_ID,
        manifest=manifest,
        annotate_to=annotated,
        type_lookup=lookup,
        unit_of_work_factory=lambda: fake_uow,
        config=ReconciliationConfig(),
    )

    assert result.written == 2
    assert lookup.calls == 1
    assert [row.fixture_type for row in fake_uow.fixtures.rows] == ["4-WAY", "RTL-SR"]
    lines = annotated.read_text(encoding="utf-8").splitlines()
    assert lines[0].endswith("Fixture ID")
    assert [line.split(",")[14] for line in lines[1:]] == list(result.fixture_ids)


def test_publish_layout_dry_run_skips_annotation(
    fake_uow: FakeFixtureUnitOfWork, manifest: Path, tmp_path: Path
) -> None:
    annotated = tmp_path / "annotated.csv"

    result = app_module.publish_layout(
        store_id=STORE_ID,
        manifest=manifest,
        dry_run=True,
        annotate_to=annotated,
        use_type_lookup=False,
        unit_of_work_factory=lambda: fake_uow,
        config=ReconciliationConfig(),
    )

    assert result.dry_run
    assert result.written == 0
    assert fake_uow.fixtures.rows == []
    assert not annotated.exists()


def test_publish_layout_without_type_lookup_never_builds_client(
    fake_uow: FakeFixtureUnitOfWork, manifest: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def fail_build() -> None:
        raise AssertionError("type lookup must not be built")

    monkeypatch.setattr(app_module, "build_http_fixture_type_lookup", fail_build)

    result = app_module.publish_layout(
        store_id=STORE_ID,
        manifest=manifest,
        use_type_lookup=False,
        unit_of_work_factory=lambda: fake_uow,
        config=ReconciliationConfig(),
    )

    assert result.written == 2
    assert not result.type_lookup_degraded


def test_publish_layout_process_lock_mode(
    fake_uow: FakeFixtureUnitOfWork, manifest: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    lock = RecordingLock()
    monkeypatch.setattr(app_module, "_PROCESS_LOCK", lock)

    def conflicting_read(store_id: str) -> None:
        fake_uow.revisions.revisions[store_id] = 5

    fake_uow.revisions.on_read = conflicting_read

    result = app_module.publish_layout(
        store_id=STORE_ID,
        manifest=manifest,
        use_type_lookup=False,
        unit_of_work_factory=lambda: fake_uow,
        config=ReconciliationConfig(lock_mode=LockMode.PROCESS),
    )

    assert lock.held == [STORE_ID]
    assert result.written == 2


def test_publish_layout_optimistic_mode_detects_conflict(
    fake_uow: FakeFixtureUnitOfWork, manifest: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    lock = RecordingLock()
    monkeypatch.setattr(app_module, "_PROCESS_LOCK", lock)

    def conflicting_read(store_id: str) -> None:
        fake_uow.revisions.revisions[store_id] = 5

    fake_uow.revisions.on_read = conflicting_read

    with pytest.raises(ConcurrentPublishError):
        app_module.publish_layout(
            store_id=STORE_ID,
            manifest=manifest,
            use_type_lookup=False,
            unit_of_work_factory=lambda: fake_uow,
            config=ReconciliationConfig(lock_mode=LockMode.OPTIMISTIC),
        )

    assert lock.held == []
    assert fake_uow.fixtures.rows == []
    assert fake_uow.rollbacks == 1


def test_fixture_history_and_list_fixtures(fake_uow: FakeFixtureUnitOfWork) -> None:
    fake_uow.fixtures.rows.extend(
        [
            make_record("A000000001", floor=0),
            make_record("A000000002", floor=1, brand="Adidas"),
            make_record("A000000003", floor=1, brand=STORAGE_BRAND),
        ]
    )

    history = app_module.fixture_history(
        store_id=STORE_ID,
        fixture_id="A000000002",
        unit_of_work_factory=lambda: fake_uow,
    )
    on_floor_one = app_module.list_fixtures(
        store_id=STORE_ID,
        floor_index=1,
        unit_of_work_factory=lambda: fake_uow,
    )

    assert [record.brand for record in history] == ["Adidas"]
    assert [record.fixture_id for record in on_floor_one] == ["A000000002"]


def test_publish_layout_uses_injected_manifest_reader(
    fake_uow: FakeFixtureUnitOfWork, tmp_path: Path
) -> None:
    read: list[Path] = []

    def reader(path: Path) -> list[CurrentFixture]:
        read.append(path)
        return [make_fixture(x=2.0)]

    result = app_module.publish_layout(
        store_id=STORE_ID,
        manifest=tmp_path / "layout.csv",
        use_type_lookup=False,
        manifest_reader=reader,
        unit_of_work_factory=lambda: fake_uow,
        config=ReconciliationConfig(),
    )

    assert read == [tmp_path / "layout.csv"]
    assert result.written == 1
