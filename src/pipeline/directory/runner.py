"""Headless runner for building the bookstore directory.

Parses the CSV, processes every record, groups stores geographically,
builds the search index and writes the JSON export. Intended for
programmatic use by the CLI and tests.

Examples
--------
>>> from src.pipeline.directory.runner import configure_logging, run_from_config
>>> configure_logging("INFO", enable_file=False)
>>> ok = run_from_config()  # doctest: +SKIP
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from src.config import (
    LOG_DIR,
    LOG_FILENAME_BUILD_DIRECTORY,
    LOG_FORMAT,
    SEARCH_FUZZY_THRESHOLD,
)
from src.pipeline.csv_ingest import ParseResult, parse_bookstores

from .config import DirectorySettings
from .exporter import write_directory_json
from .geographic import CityInfo, ProvinceInfo, extract_cities, extract_provinces
from .processor import ProcessedBookstore, process_bookstores
from .search import SearchIndex, initialize_search

logger = logging.getLogger(__name__)


@dataclass
class DirectoryBuild:
    """Everything derived from one CSV read."""

    parse_result: ParseResult
    stores: list[ProcessedBookstore]
    provinces: list[ProvinceInfo]
    cities: list[CityInfo]
    index: SearchIndex


def configure_logging(log_level: str = "INFO", enable_file: bool = True) -> None:
    """Configure console and optional file logging for a directory build.

    Existing root handlers are removed first, so repeated calls are safe.
    Failure to create the log file falls back to console-only logging.
    """
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if enable_file:
        try:
            LOG_DIR.mkdir(exist_ok=True)
            handlers.insert(
                0,
                logging.FileHandler(LOG_DIR / LOG_FILENAME_BUILD_DIRECTORY, mode="a"),
            )
        except OSError:
            pass
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )


def build_directory(
    csv_path: Path, fuzzy_threshold: float = SEARCH_FUZZY_THRESHOLD
) -> DirectoryBuild:
    """Run parse, process, geographic grouping and indexing for ``csv_path``.

    Raises
    ------
    src.exceptions.CsvSourceError
        If the CSV cannot be read.
    """
    parse_result = parse_bookstores(csv_path)
    stores = process_bookstores(parse_result.records)
    index = initialize_search(stores, threshold=fuzzy_threshold)
    return DirectoryBuild(
        parse_result=parse_result,
        stores=stores,
        provinces=extract_provinces(stores),
        cities=extract_cities(stores),
        index=index,
    )


def run_from_config(
    csv_path: Path | None = None,
    output_dir: Path | None = None,
) -> bool:
    """Build the directory and write its JSON export.

    If an argument is ``None`` the value from :class:`DirectorySettings` is
    used. Returns ``True`` on success and ``False`` on any failure; failures
    are logged.
    """
    try:
        settings = DirectorySettings()
        csv_path = Path(csv_path) if csv_path is not None else settings.csv_path
        output_dir = Path(output_dir) if output_dir is not None else settings.output_dir
        build = build_directory(csv_path, settings.fuzzy_threshold)
        write_directory_json(build.stores, build.provinces, build.cities, output_dir)
    except Exception:
        logger.exception("Failed to build bookstore directory")
        return False
    logger.info(
        "Built directory: %d stores in %d provinces (%d rows rejected, %d warnings)",
        len(build.stores),
        len(build.provinces),
        len(build.parse_result.errors),
        len(build.parse_result.warnings),
    )
    return True


__all__ = ["DirectoryBuild", "build_directory", "configure_logging", "run_from_config"]
