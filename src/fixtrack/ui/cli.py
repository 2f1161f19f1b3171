# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from fixtrack.app import fixture_history, list_fixtures, publish_layout
from fixtrack.config import configure_logging
from fixtrack.domain.model import is_valid_fixture_id

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from fixtrack.domain.model import FixtureRecord

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Publish store layouts and track fixture ids")
    subparsers = parser.add_subparsers(dest="command", required=True)

    publish = subparsers.add_parser("publish", help="Publish a store layout manifest")
    publish.add_argument("--store", type=str, required=True, help="Store id to publish")
    publish.add_argument(
        "--manifest",
        type=Path,
        required=True,
        help="Path to the location-master.csv of the layout",
    )
    publish.add_argument(
        "--dry-run",
        action="store_true",
        help="Reconcile and report without writing any records",
    )
    publish.add_argument(
        "--annotate",
        type=Path,
        metavar="PATH",
        help="Write a copy of the manifest with the assigned fixture ids to PATH",
    )
    publish.add_argument(
        "--no-type-lookup",
        action="store_true",
        help="Skip the fixture type service and match on raw block names",
    )

    history = subparsers.add_parser("history", help="Show the record history of a fixture id")
    history.add_argument("--store", type=str, required=True, help="Store id")
    history.add_argument("--fixture-id", type=str, required=True, help="Fixture id to look up")

    listing = subparsers.add_parser("list", help="List the active fixtures of a store")
    listing.add_argument("--store", type=str, required=True, help="Store id")
    listing.add_argument("--floor", type=int, help="Only fixtures on this floor index")
    listing.add_argument("--brand", type=str, help="Only fixtures of this brand")

    return parser.parse_args(list(argv))


def _validate_args(args: argparse.Namespace) -> None:
    if not args.store.strip():
        raise ValueError("Store id must not be blank")
    if args.command == "publish" and not args.manifest.is_file():
        raise ValueError(f"Manifest not found: {args.manifest}")
    if args.command == "history" and not is_valid_fixture_id(args.fixture_id):
        raise ValueError(f"Invalid fixture id: {args.fixture_id}")


def _format_record(record: FixtureRecord) -> str:
    recorded = record.recorded_at.isoformat() if record.recorded_at else "-"
    return (
        f"{record.fixture_id:<12} {record.fixture_type:<20} {record.brand:<20} "
        f"{record.floor_index:<5} ({record.pos_x:.2f}, {record.pos_y:.2f}, {record.pos_z:.2f}) "
        f"{recorded}"
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    try:
        _validate_args(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    store_id = parsed_args.store.strip()
    try:
        if parsed_args.command == "publish":
            result = publish_layout(
                store_id=store_id,
                manifest=parsed_args.manifest,
                dry_run=parsed_args.dry_run,
                annotate_to=parsed_args.annotate,
                use_type_lookup=not parsed_args.no_type_lookup,
            )
            if result.type_lookup_degraded:
                log.warning("Fixture types were not resolved; raw block names were used")
            for record in result.outcome.final_batch:
                print(_format_record(record))
            for fixture_id in result.outcome.park_for_reuse:
                print(f"STORAGE {fixture_id}")
        elif parsed_args.command == "history":
            for record in fixture_history(store_id=store_id, fixture_id=parsed_args.fixture_id):
                print(_format_record(record))
        elif parsed_args.command == "list":
            for record in list_fixtures(
                store_id=store_id,
                floor_index=parsed_args.floor,
                brand=parsed_args.brand,
            ):
                print(_format_record(record))
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point: load ``.env``, trap Ctrl+C and run the CLI."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
