"""Reconciliation tuning and per-store locking configuration."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import StrEnum

from fixtrack.domain.model.identifiers import DEFAULT_MAX_MINT_ATTEMPTS
from fixtrack.domain.ports.persistence import DEFAULT_PAGE_SIZE
from fixtrack.domain.reconciliation.spatial import DEFAULT_MATCH_THRESHOLD

from .env import optional_env_var
from .errors import ConfigurationError


class LockMode(StrEnum):
    """How concurrent publishes for the same store are serialised."""

    NONE = "none"
    PROCESS = "process"
    OPTIMISTIC = "optimistic"


@dataclass(frozen=True, slots=True)
class ReconciliationConfig:
    match_threshold: float = DEFAULT_MATCH_THRESHOLD
    page_size: int = DEFAULT_PAGE_SIZE
    lock_mode: LockMode = LockMode.OPTIMISTIC
    max_mint_attempts: int = DEFAULT_MAX_MINT_ATTEMPTS

    def __post_init__(self) -> None:
        if not math.isfinite(self.match_threshold) or self.match_threshold < 0:
            raise ConfigurationError("Match threshold must be a finite non-negative number")
        if self.page_size <= 0:
            raise ConfigurationError("Page size must be positive")
        if self.max_mint_attempts <= 0:
            raise ConfigurationError("Max mint attempts must be positive")


def get_reconciliation_config() -> ReconciliationConfig:
    return ReconciliationConfig(
        match_threshold=optional_env_var(
            "FIXTRACK_MATCH_THRESHOLD", float, DEFAULT_MATCH_THRESHOLD
        ),
        page_size=optional_env_var("FIXTRACK_PAGE_SIZE", int, DEFAULT_PAGE_SIZE),
        lock_mode=optional_env_var("FIXTRACK_LOCK_MODE", _parse_lock_mode, LockMode.OPTIMISTIC),
        max_mint_attempts=optional_env_var(
            "FIXTRACK_MAX_MINT_ATTEMPTS", int, DEFAULT_MAX_MINT_ATTEMPTS
        ),
    )


def _parse_lock_mode(value: str) -> LockMode:
    return LockMode(value.lower())
