"""
Command line for listing-sheet maintenance.

Usage:
    propsheet import /path/to/september_listing.pdf
    propsheet search --area "vasant vihar" --size-min 150 --size-unit yd
    propsheet search --floors ground,first --admin
    propsheet search --type plot --budget-min 4000000 --budget-max 6000000
    propsheet export
    propsheet reset --yes

Settings come from PROPSHEET_* environment variables or a .env file in
the working directory.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

from propsheet_core.exceptions import PropsheetError
from propsheet_core.export import ExcelExportWriter
from propsheet_core.models import PropertyStatus, PropertyType, SizeUnit
from propsheet_core.search import Role, SearchCriteria, search_properties

from .config import PropsheetConfig
from .ingestion import IngestionPipeline
from .logging import configure_logging
from .store import build_store


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="propsheet",
        description="Import, search and export listing-sheet properties",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_cmd = subparsers.add_parser("import", help="Import a listing-sheet PDF")
    import_cmd.add_argument("pdf", help="Path to the PDF file")

    reset_cmd = subparsers.add_parser("reset", help="Delete every stored property")
    reset_cmd.add_argument("--yes", action="store_true", help="Do not ask for confirmation")

    subparsers.add_parser("export", help="Regenerate the Excel export")

    search_cmd = subparsers.add_parser("search", help="Search stored properties")
    search_cmd.add_argument("--city")
    search_cmd.add_argument("--area")
    search_cmd.add_argument("--size-min", type=float)
    search_cmd.add_argument("--size-max", type=float)
    search_cmd.add_argument(
        "--size-unit",
        choices=[unit.value for unit in SizeUnit],
        default=SizeUnit.SQFT.value,
    )
    search_cmd.add_argument("--bedrooms", type=int, help="Minimum bedrooms")
    search_cmd.add_argument("--floors", help="Comma-separated floors, e.g. ground,first")
    search_cmd.add_argument("--type", dest="property_type", choices=[t.value for t in PropertyType])
    search_cmd.add_argument("--status", choices=[s.value for s in PropertyStatus])
    search_cmd.add_argument("--budget-min", type=float, help="Lowest price in rupees")
    search_cmd.add_argument("--budget-max", type=float, help="Highest price in rupees")
    search_cmd.add_argument("--page", type=int, default=1)
    search_cmd.add_argument("--limit", type=int, default=20)
    search_cmd.add_argument("--admin", action="store_true", help="Show unfiltered detail")

    return parser


def run_import(args: argparse.Namespace, config: PropsheetConfig) -> int:
    print(f"Processing PDF: {args.pdf}")
    try:
        pipeline = IngestionPipeline.from_config(config)
        result = asyncio.run(pipeline.ingest_file(Path(args.pdf).resolve()))
    except (PropsheetError, FileNotFoundError) as e:
        print(f"Error processing PDF: {e}", file=sys.stderr)
        return 1

    print(f"Import complete. Saved: {result.saved}, Errors: {result.errors}")
    if not result.export_written and config.ingestion.export_enabled:
        print("Export was not regenerated; see the log for details", file=sys.stderr)
    return 0


def run_reset(args: argparse.Namespace, config: PropsheetConfig) -> int:
    try:
        store = build_store(config)
    except PropsheetError as e:
        print(f"Error opening store: {e}", file=sys.stderr)
        return 1

    count = store.count()
    print(f"Found {count} properties")
    if count == 0:
        print("No properties to delete.")
        return 0

    if not args.yes:
        answer = input(f"Delete all {count} properties? [y/N] ")
        if answer.strip().lower() not in {"y", "yes"}:
            print("Aborted.")
            return 1

    try:
        deleted = store.delete_all()
    except PropsheetError as e:
        print(f"Error deleting properties: {e}", file=sys.stderr)
        return 1
    print(f"Deleted {deleted} properties")
    return 0


def run_export(args: argparse.Namespace, config: PropsheetConfig) -> int:
    writer = ExcelExportWriter(config.export_path)
    try:
        store = build_store(config)
        rows = writer.write_denormalized_export(store.find_all())
    except PropsheetError as e:
        print(f"Error writing export: {e}", file=sys.stderr)
        return 1
    print(f"Wrote {rows} properties to {config.export_path}")
    return 0


def run_search(args: argparse.Namespace, config: PropsheetConfig) -> int:
    try:
        criteria = SearchCriteria(
            city=args.city,
            area=args.area,
            size_min=args.size_min,
            size_max=args.size_max,
            size_unit=args.size_unit,
            bedrooms=args.bedrooms,
            floors=args.floors or [],
            property_type=args.property_type,
            status=args.status,
            budget_min=args.budget_min,
            budget_max=args.budget_max,
            page=args.page,
            limit=args.limit,
        )
    except ValueError as e:
        print(f"Invalid search: {e}", file=sys.stderr)
        return 2

    try:
        store = build_store(config)
    except PropsheetError as e:
        print(f"Error opening store: {e}", file=sys.stderr)
        return 1

    role = Role.ADMIN if args.admin else Role.BROKER
    page = search_properties(store.find_all(), criteria, role=role)
    print(json.dumps(page.model_dump(mode="json"), indent=2, ensure_ascii=False))
    return 0


COMMANDS = {
    "import": run_import,
    "reset": run_reset,
    "export": run_export,
    "search": run_search,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    config = PropsheetConfig()
    configure_logging(config.log_level, config.log_format.value)
    return COMMANDS[args.command](args, config)


if __name__ == "__main__":
    sys.exit(main())
