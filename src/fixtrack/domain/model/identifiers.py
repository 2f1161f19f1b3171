"""Fixture identifier minting."""

from __future__ import annotations

import secrets
import string
from logging import getLogger
from typing import TYPE_CHECKING, Final

from fixtrack.domain.errors import IdentifierExhaustedError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

log = getLogger(__name__)

FIXTURE_ID_ALPHABET: Final[str] = string.ascii_uppercase + string.digits
FIXTURE_ID_LENGTH: Final[int] = 10
DEFAULT_MAX_MINT_ATTEMPTS: Final[int] = 8


def generate_fixture_id() -> str:
    """Return a random 10-character identifier drawn uniformly from ``[A-Z0-9]``."""

    return "".join(secrets.choice(FIXTURE_ID_ALPHABET) for _ in range(FIXTURE_ID_LENGTH))


def is_valid_fixture_id(value: str) -> bool:
    return len(value) == FIXTURE_ID_LENGTH and all(char in FIXTURE_ID_ALPHABET for char in value)


class IdentifierMinter:
    """Mint identifiers that are unused by the store history and by this run.

    ``exists`` can widen the check to the whole record store (identifiers are looked
    up across stores by QR codes). A candidate is rejected if it is reserved, was
    already minted by this minter, or ``exists`` reports it.
    """

    def __init__(
        self,
        *,
        reserved: Iterable[str] = (),
        exists: Callable[[str], bool] | None = None,
        max_attempts: int = DEFAULT_MAX_MINT_ATTEMPTS,
        generate: Callable[[], str] = generate_fixture_id,
    ) -> None:
        if max_attempts <= 0:
            raise ValueError("max_attempts must be positive")
        self._taken: set[str] = set(reserved)
        self._exists = exists
        self._max_attempts = max_attempts
        self._generate = generate
        self.minted: list[str] = []

    def __call__(self) -> str:
        for attempt in range(1, self._max_attempts + 1):
            candidate = self._generate()
            if candidate in self._taken or (self._exists is not None and self._exists(candidate)):
                log.warning("Fixture id collision on attempt %s: %s", attempt, candidate)
                continue
            self._taken.add(candidate)
            self.minted.append(candidate)
            return candidate
        raise IdentifierExhaustedError(
            f"Could not mint an unused fixture id in {self._max_attempts} attempts"
        )
