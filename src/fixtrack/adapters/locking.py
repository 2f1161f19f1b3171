"""In-process per-store locks."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

log = getLogger(__name__)


class ProcessStoreLock:
    """One ``threading.Lock`` per store id, created on first use.

    Publishes of different stores never wait on each other. This does not protect
    against other processes writing to the same database.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def _lock_for(self, store_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(store_id)
            if lock is None:
                lock = self._locks[store_id] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, store_id: str) -> Iterator[None]:
        lock = self._lock_for(store_id)
        if not lock.acquire(blocking=False):
            log.info("Waiting for running publish of store %s", store_id)
            lock.acquire()
        try:
            yield
        finally:
            lock.release()
