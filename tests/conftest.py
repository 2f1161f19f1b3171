from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from fixtrack.adapters.sqlalchemy import start_mappers
from fixtrack.adapters.sqlalchemy.migrations import upgrade_head
from fixtrack.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyFixtureUnitOfWork,
    shutdown,
    startup,
)
from tests.helpers.fixtures import FakeFixtureUnitOfWork

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    start_mappers()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True, expire_on_commit=False)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyFixtureUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyFixtureUnitOfWork:
        return SqlAlchemyFixtureUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()


@pytest.fixture
def fake_uow() -> FakeFixtureUnitOfWork:
    return FakeFixtureUnitOfWork()
