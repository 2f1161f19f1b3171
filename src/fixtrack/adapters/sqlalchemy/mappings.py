"""SQLAlchemy mapping metadata for fixture identifier records."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import cache

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Float,
    Index,
    Integer,
    String,
    Table,
    TypeDecorator,
    orm,
)
from sqlalchemy.orm import configure_mappers

from fixtrack.domain.model import FIXTURE_ID_LENGTH, FixtureRecord

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Append-only identifier log ----------------------------------------------------

fixture_record_table = Table(
    "fixture_record",
    mapper_registry.metadata,
    Column("id", Integer, key="row_id", primary_key=True, autoincrement=True),
    Column("fixture_id", String(FIXTURE_ID_LENGTH), nullable=False),
    Column("store_id", String, nullable=False),
    Column("fixture_type", String, nullable=False),
    Column("brand", String, nullable=False),
    Column("floor_index", Integer, nullable=False),
    Column("pos_x", Float, nullable=False),
    Column("pos_y", Float, nullable=False),
    Column("pos_z", Float, nullable=False),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("recorded_at", UTCDateTime(), nullable=False),
)

Index(
    "ix_fixture_record_store_id_fixture_id",
    fixture_record_table.c.store_id,
    fixture_record_table.c.fixture_id,
)
Index("ix_fixture_record_fixture_id", fixture_record_table.c.fixture_id)

# Optimistic concurrency token per store ------------------------------------------

store_revision_table = Table(
    "store_revision",
    mapper_registry.metadata,
    Column("store_id", String, primary_key=True),
    Column("revision", Integer, nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(FixtureRecord, fixture_record_table)

    configure_mappers()
    return mapper_registry
