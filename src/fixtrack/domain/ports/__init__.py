"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import FixtureTypeLookup, ManifestReader
from .locking import StoreLock
from .persistence import DEFAULT_PAGE_SIZE, FixtureRecordRepository, StoreRevisionRepository
from .unit_of_work import (
    FixtureRepositories,
    FixtureUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "FixtureRecordRepository",
    "FixtureRepositories",
    "FixtureTypeLookup",
    "FixtureUnitOfWork",
    "ManifestReader",
    "RepositoryCollection",
    "StoreLock",
    "StoreRevisionRepository",
    "UnitOfWork",
]
