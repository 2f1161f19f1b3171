"""SQLAlchemy adapter package for fixtrack."""

from __future__ import annotations

from .mappings import (
    fixture_record_table,
    mapper_registry,
    start_mappers,
    store_revision_table,
)
from .repositories import SqlAlchemyFixtureRecordRepository, SqlAlchemyStoreRevisionRepository
from .unit_of_work import SqlAlchemyFixtureUnitOfWork, shutdown, startup

__all__ = [
    "SqlAlchemyFixtureRecordRepository",
    "SqlAlchemyFixtureUnitOfWork",
    "SqlAlchemyStoreRevisionRepository",
    "fixture_record_table",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "store_revision_table",
]
