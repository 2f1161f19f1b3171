"""Layout manifest adapters."""

from __future__ import annotations

from .location_master import (
    FIXTURE_ID_COLUMN,
    FIXTURE_ID_HEADER,
    annotate_location_master,
    annotate_location_master_text,
    parse_location_master,
    read_location_master,
)

__all__ = [
    "FIXTURE_ID_COLUMN",
    "FIXTURE_ID_HEADER",
    "annotate_location_master",
    "annotate_location_master_text",
    "parse_location_master",
    "read_location_master",
]
