"""Port for serialising publishes of the same store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from contextlib import AbstractContextManager


@runtime_checkable
class StoreLock(Protocol):
    """Hold a per-store critical section around fetch, reconcile and append."""

    def hold(self, store_id: str) -> AbstractContextManager[None]: ...
