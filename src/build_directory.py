"""Build the bookstore directory from CSV and optionally search it.

Reads the bookstore CSV, writes the JSON export consumed by the site and
prints a summary of provinces and rejected rows. With ``--query`` or any
filter flag it also prints the matching stores.

Usage
-----
python -m src.build_directory --csv data/bookstores.csv --output output/data
python -m src.build_directory --query "bellwood" --min-rating 4 --open-weekends
python -m src.build_directory --near 43.65,-79.38 --max-distance 5
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from src.exceptions import AppError, UserInputError
from src.pipeline.directory import (
    ProcessedBookstore,
    StoreFilters,
    UserLocation,
    request_user_location,
    search_stores,
    write_directory_json,
)
from src.pipeline.directory.config import DirectorySettings
from src.pipeline.directory.runner import (
    DirectoryBuild,
    build_directory,
    configure_logging,
)

logger = logging.getLogger(__name__)

MAX_LISTED_ERRORS = 20


def parse_location(text: str) -> UserLocation:
    """Parse ``"LAT,LNG"`` into a :class:`UserLocation`.

    Raises
    ------
    UserInputError
        If the text is not two comma-separated numbers in range.
    """
    parts = [part.strip() for part in text.split(",")]
    try:
        lat, lng = (float(part) for part in parts)
    except ValueError as exc:
        raise UserInputError(
            f"Expected LAT,LNG but got {text!r}", context={"value": text}
        ) from exc
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        raise UserInputError(f"Coordinates out of range: {text!r}")
    return UserLocation(lat, lng)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Build the bookstore directory JSON from the bookstore CSV."
    )
    parser.add_argument("--csv", type=Path, default=None)
    parser.add_argument("--output", type=Path, default=None)
    parser.add_argument("--log-level", type=str, default="INFO")
    search = parser.add_argument_group("search")
    search.add_argument("--query", type=str, default="")
    search.add_argument("--min-rating", type=float, default=0.0)
    search.add_argument("--province", type=str, default=None)
    search.add_argument("--price-level", type=int, default=None)
    search.add_argument("--has-website", action="store_true")
    search.add_argument("--open-now", action="store_true")
    search.add_argument("--open-late", action="store_true")
    search.add_argument("--open-weekends", action="store_true")
    search.add_argument("--near", type=str, default=None, metavar="LAT,LNG")
    search.add_argument("--max-distance", type=float, default=None, metavar="KM")
    return parser


def filters_from_args(args: argparse.Namespace) -> StoreFilters:
    return StoreFilters(
        open_now=args.open_now,
        has_website=args.has_website,
        min_rating=args.min_rating,
        max_distance=args.max_distance,
        price_level=args.price_level,
        province=args.province,
        open_late=args.open_late,
        open_weekends=args.open_weekends,
    )


def wants_search(args: argparse.Namespace) -> bool:
    return bool(args.query.strip()) or filters_from_args(args) != StoreFilters()


def print_summary(console: Console, build: DirectoryBuild) -> None:
    table = Table(title="Bookstores by province")
    table.add_column("Province")
    table.add_column("Code")
    table.add_column("Stores", justify="right")
    table.add_column("Top city")
    for province in build.provinces:
        top_city = province.cities[0].name if province.cities else ""
        table.add_row(province.name, province.code, str(province.total_stores), top_city)
    console.print(table)
    errors = build.parse_result.errors
    warnings = build.parse_result.warnings
    console.print(
        f"[bold]{len(build.stores)}[/bold] stores loaded, "
        f"[bold]{len(errors)}[/bold] rows rejected, "
        f"[bold]{len(warnings)}[/bold] data warnings"
    )
    for error in errors[:MAX_LISTED_ERRORS]:
        console.print(f"  [yellow]{escape(error.message)}[/yellow]")
    if len(errors) > MAX_LISTED_ERRORS:
        console.print(f"  ... {len(errors) - MAX_LISTED_ERRORS} more")
    for warning in warnings[:MAX_LISTED_ERRORS]:
        where = f"Row {warning.row}" if warning.row is not None else "Header"
        console.print(f"  [dim]{where}: {escape(warning.message)}[/dim]")
    if len(warnings) > MAX_LISTED_ERRORS:
        console.print(f"  ... {len(warnings) - MAX_LISTED_ERRORS} more warnings")


def print_results(console: Console, stores: Sequence[ProcessedBookstore]) -> None:
    table = Table(title=f"{len(stores)} matching stores")
    table.add_column("Name")
    table.add_column("City")
    table.add_column("Province")
    table.add_column("Rating", justify="right")
    table.add_column("Slug")
    for store in stores:
        rating = f"{store.rating:.1f}" if store.rating is not None else "-"
        table.add_row(store.name, store.city, store.province, rating, store.slug)
    console.print(table)


def main(argv: Sequence[str] | None = None, console: Console | None = None) -> int:
    """CLI entrypoint; returns the process exit code."""
    args = build_parser().parse_args(argv)
    configure_logging(
        args.log_level, enable_file=not bool(os.environ.get("DISABLE_FILE_LOGS"))
    )
    console = console or Console()
    try:
        settings = DirectorySettings()
        location = None
        if args.near:
            near = parse_location(args.near)
            location = request_user_location(
                lambda: near, timeout=settings.geolocation_timeout
            )
        csv_path = args.csv or settings.csv_path
        output_dir = args.output or settings.output_dir
        build = build_directory(csv_path, settings.fuzzy_threshold)
        write_directory_json(build.stores, build.provinces, build.cities, output_dir)
    except AppError as exc:
        logger.error("%s", exc)
        console.print(f"[red]{escape(str(exc))}[/red]")
        return 1
    except OSError:
        logger.exception("Failed to write directory output")
        return 1
    print_summary(console, build)
    if wants_search(args):
        results = search_stores(
            build.stores,
            args.query,
            filters_from_args(args),
            index=build.index,
            user_location=location,
            late_hour=settings.late_hour,
        )
        print_results(console, results)
    return 0


if __name__ == "__main__":
    sys.exit(main())
