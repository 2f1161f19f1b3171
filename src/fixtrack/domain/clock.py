"""Clock abstraction so reconciliation timestamps can be pinned in tests."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Protocol


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def utcnow() -> datetime:
    return datetime.now(UTC)


__all__ = ["Clock", "utcnow"]
