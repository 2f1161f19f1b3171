"""Reader and writer for ``location-master.csv`` layout manifests.

The manifest has a header row followed by one fixture per row. Only a handful of the
columns matter here::

    0  Block Name     1  Floor Index
    5  Pos X (m)      6  Pos Y (m)      7  Pos Z (m)
    11 Brand          14 Fixture ID (written back after a publish)
"""

from __future__ import annotations

import csv
import io
import math
from logging import getLogger
from typing import TYPE_CHECKING, Final

from fixtrack.domain.errors import ManifestParseError
from fixtrack.domain.model import UNKNOWN_BRAND, CurrentFixture

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from pathlib import Path

log = getLogger(__name__)

BLOCK_NAME_COLUMN: Final[int] = 0
FLOOR_INDEX_COLUMN: Final[int] = 1
POS_X_COLUMN: Final[int] = 5
POS_Y_COLUMN: Final[int] = 6
POS_Z_COLUMN: Final[int] = 7
BRAND_COLUMN: Final[int] = 11
FIXTURE_ID_COLUMN: Final[int] = 14
FIXTURE_ID_HEADER: Final[str] = "Fixture ID"
MIN_COLUMNS: Final[int] = 14

MANIFEST_ENCODING: Final[str] = "utf-8-sig"


def parse_location_master(text: str) -> list[CurrentFixture]:
    """Parse manifest text into the snapshot of a store, in row order."""

    fixtures = [_parse_row(row, line_number) for line_number, row in _data_rows(text)]
    log.info("Parsed %s fixtures from location master", len(fixtures))
    return fixtures


def read_location_master(path: Path) -> list[CurrentFixture]:
    return parse_location_master(path.read_text(encoding=MANIFEST_ENCODING))


def annotate_location_master_text(text: str, fixture_ids: Sequence[str]) -> str:
    """Return ``text`` with ``fixture_ids`` written into the Fixture ID column.

    ``fixture_ids`` must line up with the fixtures ``parse_location_master`` returns
    for the same text. Blank lines are dropped from the output.
    """

    header, rows = _split_header(text)
    data_rows = [row for _, row in rows]
    if len(data_rows) != len(fixture_ids):
        raise ManifestParseError(
            f"Manifest has {len(data_rows)} fixtures but {len(fixture_ids)} fixture ids were given"
        )

    header = [cell.strip() for cell in header]
    if len(header) <= FIXTURE_ID_COLUMN or not header[FIXTURE_ID_COLUMN]:
        header = _with_cell(header, FIXTURE_ID_COLUMN, FIXTURE_ID_HEADER)

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(header)
    for row, fixture_id in zip(data_rows, fixture_ids, strict=True):
        writer.writerow(_with_cell(row, FIXTURE_ID_COLUMN, fixture_id))
    return buffer.getvalue()


def annotate_location_master(
    source: Path,
    fixture_ids: Sequence[str],
    destination: Path,
) -> Path:
    """Write a copy of the ``source`` manifest annotated with fixture ids."""

    text = source.read_text(encoding=MANIFEST_ENCODING)
    annotated = annotate_location_master_text(text, fixture_ids)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(annotated, encoding="utf-8", newline="")
    log.info("Wrote %s fixture ids to %s", len(fixture_ids), destination)
    return destination


def _split_header(text: str) -> tuple[list[str], list[tuple[int, list[str]]]]:
    rows = list(_non_blank_rows(text))
    if not rows:
        raise ManifestParseError("Manifest is empty, expected a header row", line_number=1)
    (_, header), *data = rows
    return header, data


def _data_rows(text: str) -> list[tuple[int, list[str]]]:
    return _split_header(text)[1]


def _non_blank_rows(text: str) -> Iterator[tuple[int, list[str]]]:
    reader = csv.reader(io.StringIO(text))
    for row in reader:
        if not any(cell.strip() for cell in row):
            continue
        yield reader.line_num, row


def _parse_row(row: list[str], line_number: int) -> CurrentFixture:
    if len(row) < MIN_COLUMNS:
        raise ManifestParseError(
            f"Expected at least {MIN_COLUMNS} columns, found {len(row)}",
            line_number=line_number,
        )
    block_name = row[BLOCK_NAME_COLUMN].strip()
    if not block_name:
        raise ManifestParseError("Missing block name", line_number=line_number)

    return CurrentFixture(
        raw_type=block_name,
        floor_index=_parse_int(row[FLOOR_INDEX_COLUMN], "floor index", line_number),
        pos_x=_parse_float(row[POS_X_COLUMN], "pos x", line_number),
        pos_y=_parse_float(row[POS_Y_COLUMN], "pos y", line_number),
        pos_z=_parse_float(row[POS_Z_COLUMN], "pos z", line_number),
        brand=row[BRAND_COLUMN].strip() or UNKNOWN_BRAND,
    )


def _parse_float(raw: str, label: str, line_number: int) -> float:
    value = raw.strip()
    if not value:
        return 0.0
    try:
        number = float(value)
    except ValueError as exc:
        raise ManifestParseError(f"Invalid {label}: {raw!r}", line_number=line_number) from exc
    if not math.isfinite(number):
        raise ManifestParseError(f"Invalid {label}: {raw!r}", line_number=line_number)
    return number


def _parse_int(raw: str, label: str, line_number: int) -> int:
    value = _parse_float(raw, label, line_number)
    if not value.is_integer():
        raise ManifestParseError(f"Invalid {label}: {raw!r}", line_number=line_number)
    return int(value)


def _with_cell(row: list[str], index: int, value: str) -> list[str]:
    padded = [*row, *([""] * (index + 1 - len(row)))]
    padded[index] = value
    return padded
