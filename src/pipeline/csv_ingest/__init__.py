"""CSV ingestion pipeline package.

Public API for turning the raw bookstore CSV export into schema-validated
:class:`BookstoreRecord` values. Consumers (the directory builder, the CLI,
tests) should import from this package rather than its submodules.

- ``schema``: the record schema and validator.
- ``hours``: packed ``working_hours`` unpacking and per-day schedule parsing.
- ``data_loader``: CSV reading, column mapping and permissive coercion.
- ``quality``: header and content checks that warn without rejecting.
- ``parser``: the row loop producing records, row errors and warnings.
"""

from .data_loader import (
    CsvTable,
    MalformedLine,
    coerce_float,
    coerce_int,
    map_row_to_schema,
    normalize_coordinate,
    read_bookstore_csv,
)
from .hours import (
    DaySchedule,
    DayState,
    TimeRange,
    Weekday,
    parse_day_hours,
    parse_time,
    parse_time_range,
    parse_working_hours,
)
from .parser import ParseResult, RowError, parse_bookstores, parse_rows
from .quality import DataWarning, check_header, check_record
from .schema import BookstoreRecord, validate_record

__all__ = [
    "BookstoreRecord",
    "CsvTable",
    "DataWarning",
    "DaySchedule",
    "DayState",
    "MalformedLine",
    "ParseResult",
    "RowError",
    "TimeRange",
    "Weekday",
    "check_header",
    "check_record",
    "coerce_float",
    "coerce_int",
    "map_row_to_schema",
    "normalize_coordinate",
    "parse_bookstores",
    "parse_day_hours",
    "parse_rows",
    "parse_time",
    "parse_time_range",
    "parse_working_hours",
    "read_bookstore_csv",
    "validate_record",
]
