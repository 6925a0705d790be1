"""Parse a bookstore CSV into validated records plus a per-row error list.

Every data row is accounted for exactly once: it either becomes a
:class:`BookstoreRecord` or a :class:`RowError`. A bad row never aborts the
parse, not even one with more fields than the header; only an unusable file
(missing, unreadable) raises. Accepted rows may additionally carry
:class:`DataWarning` findings, which never reject them.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from src.exceptions import SchemaValidationError

from .data_loader import MalformedLine, RawRecord, map_row_to_schema, read_bookstore_csv
from .quality import DataWarning, check_record
from .schema import BookstoreRecord, validate_record

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RowError:
    """A CSV row that could not be turned into a record.

    Attributes
    ----------
    row : int
        1-based data row number (the header is not counted).
    message : str
        Why the row was rejected.
    raw : dict[str, str]
        The row exactly as read from the CSV.
    """

    row: int
    message: str
    raw: RawRecord


@dataclass
class ParseResult:
    records: list[BookstoreRecord] = field(default_factory=list)
    errors: list[RowError] = field(default_factory=list)
    warnings: list[DataWarning] = field(default_factory=list)

    @property
    def total_rows(self) -> int:
        return len(self.records) + len(self.errors)


def _reject(result: ParseResult, row_number: int, reason: str, raw: RawRecord) -> None:
    message = f"Row {row_number}: {reason}"
    logger.warning(message)
    result.errors.append(RowError(row_number, message, raw))


def parse_rows(rows: Sequence[RawRecord | MalformedLine]) -> ParseResult:
    """Map and validate already-read CSV rows.

    Parameters
    ----------
    rows : Sequence[dict[str, str] | MalformedLine]
        Raw rows keyed by CSV column names, in file order. Malformed lines
        become row errors without being mapped.

    Returns
    -------
    ParseResult
        Validated records, row errors and data-quality warnings. Rows whose
        ``place_id`` repeats an already accepted record are reported as
        errors.
    """
    result = ParseResult()
    seen_place_ids: set[str] = set()
    for row_number, raw in enumerate(rows, start=1):
        if isinstance(raw, MalformedLine):
            _reject(
                result,
                row_number,
                f"expected {raw.expected} fields, found {raw.field_count} "
                "(unquoted comma?)",
                raw.raw,
            )
            continue
        try:
            record = validate_record(map_row_to_schema(raw))
        except SchemaValidationError as exc:
            _reject(result, row_number, exc.message, raw)
            continue
        if record.place_id in seen_place_ids:
            _reject(result, row_number, f"duplicate place_id {record.place_id!r}", raw)
            continue
        seen_place_ids.add(record.place_id)
        result.records.append(record)
        result.warnings.extend(check_record(row_number, record))
    return result


def parse_bookstores(csv_path: Path) -> ParseResult:
    """Read, map and validate the bookstore CSV at ``csv_path``.

    Parameters
    ----------
    csv_path : Path
        Path to the UTF-8 CSV export.

    Returns
    -------
    ParseResult
        ``records`` holds every valid row, ``errors`` every rejected one and
        ``warnings`` header and content findings, header findings first.

    Raises
    ------
    src.exceptions.CsvSourceError
        If the file is missing or cannot be read as CSV.

    Examples
    --------
    >>> result = parse_bookstores(Path("data/bookstores.csv"))  # doctest: +SKIP
    >>> result.total_rows == len(result.records) + len(result.errors)  # doctest: +SKIP
    True
    """
    table = read_bookstore_csv(Path(csv_path))
    result = parse_rows(table.rows)
    result.warnings[:0] = table.header_warnings
    logger.info(
        "Parsed %s: %d valid records, %d rejected rows, %d warnings",
        csv_path,
        len(result.records),
        len(result.errors),
        len(result.warnings),
    )
    return result
