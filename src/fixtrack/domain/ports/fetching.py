"""Ports for fetching inputs from external collaborators."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path

    from fixtrack.domain.model import CurrentFixture


@runtime_checkable
class FixtureTypeLookup(Protocol):
    """Callable port mapping block names to canonical fixture types.

    Names without a mapping are simply absent from the result. Implementations
    raise ``MappingLookupError`` when the service cannot be reached.
    """

    def __call__(self, names: Sequence[str]) -> Mapping[str, str]: ...


@runtime_checkable
class ManifestReader(Protocol):
    """Callable port producing the snapshot of a store from a layout manifest."""

    def __call__(self, path: Path) -> list[CurrentFixture]: ...


__all__ = ["FixtureTypeLookup", "ManifestReader"]
