"""Error taxonomy for fixture publishing."""

from __future__ import annotations


class FixtrackError(RuntimeError):
    """Base class for fixture identity errors."""


class MappingLookupError(FixtrackError):
    """Raised when the fixture type-mapping service cannot be queried.

    Recoverable: publishing degrades to raw block names instead of aborting.
    """


class ManifestParseError(FixtrackError):
    """Raised when a layout manifest is not a complete, well-formed snapshot."""

    def __init__(self, message: str, *, line_number: int | None = None) -> None:
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class RecordFetchError(FixtrackError):
    """Raised when the fixture history of a store cannot be fetched completely."""


class RecordWriteError(FixtrackError):
    """Raised when appending fixture records fails."""


class ConcurrentPublishError(FixtrackError):
    """Raised when another publish for the same store committed first."""

    def __init__(self, store_id: str) -> None:
        super().__init__(
            f"Store {store_id} was published concurrently; nothing was written, retry the publish"
        )
        self.store_id = store_id


class IdentifierExhaustedError(FixtrackError):
    """Raised when no unused fixture identifier could be minted."""
