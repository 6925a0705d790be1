"""CSV loading and column mapping for the bookstore export.

This module reads the raw bookstore CSV (a Google Maps style export whose
column names differ from the internal schema) and maps each raw row onto
schema field names. It does not validate records: mapped rows are handed to
:func:`src.pipeline.csv_ingest.schema.validate_record` by the parser. Lines
with surplus fields are kept in place as :class:`MalformedLine` values.

Column mapping
--------------
=================  ===============
CSV column         Schema field
=================  ===============
name               name
description        description
street             address
city               city
state              province
postal_code        postal_code
phone              phone
site               website
email              email
latitude           lat
longitude          lng
rating             rating
reviews            num_reviews
price_level        price_level
place_id           place_id
location_link      place_url
photo              photos_url
street_view        street_view
business_status    status
working_hours      mon_hours .. sun_hours
reviewN_*          reviewN_*
=================  ===============
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd

from src.config import REVIEW_SLOT_COUNT
from src.exceptions import CsvSourceError

from .hours import parse_working_hours
from .quality import DataWarning, check_header
from .schema import HOURS_FIELDS, REVIEW_PARTS

logger = logging.getLogger(__name__)

RawRecord = dict[str, str]

COLUMN_MAP: dict[str, str] = {
    "name": "name",
    "description": "description",
    "street": "address",
    "city": "city",
    "state": "province",
    "postal_code": "postal_code",
    "phone": "phone",
    "site": "website",
    "email": "email",
    "location_link": "place_url",
    "place_id": "place_id",
    "photo": "photos_url",
    "street_view": "street_view",
    "business_status": "status",
}

REVIEW_SLOTS: range = range(1, REVIEW_SLOT_COUNT + 1)


# Placeholder written into the first cell of a malformed line so the line
# keeps its position among the data rows.
_MALFORMED_MARKER = "\x00malformed-line:"


@dataclass(frozen=True)
class MalformedLine:
    """A data line with more fields than the header has columns.

    ``raw`` maps header columns to the leading fields; surplus fields are
    kept under ``_extra_1``, ``_extra_2`` and so on.
    """

    raw: RawRecord
    field_count: int
    expected: int


@dataclass
class CsvTable:
    """Rows of one CSV file, in file order, plus header findings."""

    columns: list[str] = field(default_factory=list)
    rows: list[RawRecord | MalformedLine] = field(default_factory=list)
    header_warnings: list[DataWarning] = field(default_factory=list)


def _read_frame(csv_path: Path, **options) -> pd.DataFrame:
    return pd.read_csv(
        csv_path,
        dtype=object,
        keep_default_na=False,
        skip_blank_lines=True,
        encoding="utf-8-sig",
        engine="python",
        **options,
    )


def _text(value: object) -> str:
    return "" if pd.isna(value) else str(value)


def _line_fields(values: tuple[object, ...]) -> list[str]:
    """Cell texts of one line; trailing cells pandas padded with NaN are dropped."""
    end = len(values)
    while end and pd.isna(values[end - 1]):
        end -= 1
    return [_text(value) for value in values[:end]]


def column_keys(header_cells: list[str]) -> list[str]:
    """Row keys for the header cells, naming blanks and duplicates like pandas.

    >>> column_keys(["name", "", "name"])
    ['name', 'Unnamed: 1', 'name.1']
    """
    keys: list[str] = []
    seen: dict[str, int] = {}
    for position, cell in enumerate(header_cells):
        key = cell or f"Unnamed: {position}"
        if key in seen:
            seen[key] += 1
            key = f"{key}.{seen[key]}"
        else:
            seen[key] = 0
        keys.append(key)
    return keys


def _malformed_line(columns: list[str], fields: list[str]) -> MalformedLine:
    raw = dict(zip(columns, fields))
    for position, value in enumerate(fields[len(columns) :], start=1):
        raw[f"_extra_{position}"] = value
    return MalformedLine(raw=raw, field_count=len(fields), expected=len(columns))


def read_bookstore_csv(csv_path: Path) -> CsvTable:
    """Read a bookstore CSV into raw string rows.

    The header row names the columns (surrounding whitespace and a UTF-8 BOM
    are stripped), blank lines are skipped and every cell is kept as a string;
    empty cells stay empty strings instead of becoming NaN. A line with more
    fields than the header (typically an unquoted comma) does not stop the
    read: it is returned as a :class:`MalformedLine` in its place.

    Parameters
    ----------
    csv_path : Path
        Path to the UTF-8 encoded, comma-delimited CSV file.

    Returns
    -------
    CsvTable
        Header columns, one entry per data row in file order, and warnings
        for empty or duplicated header cells. An empty file yields an empty
        table.

    Raises
    ------
    CsvSourceError
        If the file does not exist, cannot be read or is not parseable CSV.
    """
    bad_lines: list[list[str]] = []
    width = 0

    def _keep_bad_line(fields: list[str]) -> list[str]:
        bad_lines.append(fields)
        return [f"{_MALFORMED_MARKER}{len(bad_lines) - 1}"] + [""] * (width - 1)

    try:
        header = _read_frame(csv_path, header=None, nrows=1)
        header_cells = [_text(value).strip() for value in header.iloc[0]]
        width = len(header_cells)
        dataframe = _read_frame(csv_path, on_bad_lines=_keep_bad_line)
    except FileNotFoundError as exc:
        raise CsvSourceError(
            f"CSV file not found: {csv_path}", context={"path": str(csv_path)}
        ) from exc
    except pd.errors.EmptyDataError:
        logger.warning("CSV file %s is empty", csv_path)
        return CsvTable()
    except (OSError, UnicodeDecodeError, pd.errors.ParserError) as exc:
        raise CsvSourceError(
            f"Failed to parse CSV file {csv_path}: {exc}",
            context={"path": str(csv_path)},
        ) from exc

    if not isinstance(dataframe.index, pd.RangeIndex):
        # A first data line wider than the header makes pandas use the surplus
        # leading fields as an index; fold them back into the rows.
        dataframe = dataframe.reset_index()
    columns = column_keys(header_cells)
    table = CsvTable(columns=columns, header_warnings=check_header(header_cells))
    for values in dataframe.itertuples(index=False, name=None):
        fields = _line_fields(values)
        if fields and fields[0].startswith(_MALFORMED_MARKER):
            fields = bad_lines[int(fields[0][len(_MALFORMED_MARKER) :])]
        if len(fields) > len(columns):
            table.rows.append(_malformed_line(columns, fields))
        else:
            table.rows.append(
                {
                    column: fields[position] if position < len(fields) else ""
                    for position, column in enumerate(columns)
                }
            )
    malformed = sum(isinstance(row, MalformedLine) for row in table.rows)
    if malformed:
        logger.warning("CSV file %s has %d malformed lines", csv_path, malformed)
    return table


def coerce_float(value: str | None) -> float:
    """Permissively parse a float, returning 0.0 for anything unparseable.

    >>> coerce_float(" 4.5 "), coerce_float("n/a"), coerce_float(None)
    (4.5, 0.0, 0.0)
    """
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def coerce_int(value: str | None) -> int:
    """Permissively parse an integer (``"12.0"`` -> 12), defaulting to 0.

    >>> coerce_int("12"), coerce_int("12.7"), coerce_int("")
    (12, 12, 0)
    """
    return int(coerce_float(value))


def _format_number(number: float) -> str:
    return str(int(number)) if number.is_integer() else str(number)


def normalize_coordinate(value: str | None) -> str:
    """Normalise a latitude/longitude cell without zero-filling it.

    Finite numbers are re-serialised; anything else keeps its stripped source
    text so that blanks still fail required-field validation and garbage is
    later reported as missing coordinates, never as (0, 0).
    """
    text = (value or "").strip()
    try:
        number = float(text)
    except ValueError:
        return text
    return str(number) if math.isfinite(number) else text


def _cell(row: RawRecord, column: str) -> str:
    value = row.get(column)
    return "" if value is None else str(value).strip()


def map_row_to_schema(row: RawRecord) -> dict[str, str]:
    """Rename source CSV columns to schema fields and derive composite fields.

    Optional fields absent from the row become empty strings. Rating, review
    count and price level go through the permissive numeric coercion.
    ``working_hours`` is unpacked into the seven ``*_hours`` fields; when it is
    empty, per-day ``*_hours`` columns are used if the CSV carries them.

    Parameters
    ----------
    row : dict[str, str]
        Raw row keyed by CSV column names.

    Returns
    -------
    dict[str, str]
        Row keyed by schema field names, every value a string.

    Examples
    --------
    >>> mapped = map_row_to_schema({"name": "X", "state": "ON", "rating": "bad"})
    >>> mapped["province"], mapped["rating"], mapped["mon_hours"]
    ('ON', '0', '')
    """
    mapped = {field: _cell(row, column) for column, field in COLUMN_MAP.items()}
    mapped["lat"] = normalize_coordinate(row.get("latitude"))
    mapped["lng"] = normalize_coordinate(row.get("longitude"))
    mapped["rating"] = _format_number(coerce_float(row.get("rating")))
    mapped["num_reviews"] = str(coerce_int(row.get("reviews")))
    mapped["price_level"] = str(coerce_int(row.get("price_level")))

    working_hours = _cell(row, "working_hours")
    if working_hours:
        mapped.update(parse_working_hours(working_hours))
    else:
        mapped.update({field: _cell(row, field) for field in HOURS_FIELDS})

    for slot in REVIEW_SLOTS:
        for part in REVIEW_PARTS:
            field = f"review{slot}_{part}"
            mapped[field] = _cell(row, field)
    return mapped
