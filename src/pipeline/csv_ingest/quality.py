"""Data-quality checks that warn but never reject.

The schema validator only checks that fields are present and string-shaped.
The checks here look at content: header problems, coordinates outside the
valid range, malformed email addresses, unusual phone numbers and websites
without a scheme. Each finding is a :class:`DataWarning`; rows carrying
warnings are still accepted.
"""

from __future__ import annotations

import logging
import math
import re
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

from .schema import BookstoreRecord

logger = logging.getLogger(__name__)

_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PHONE = re.compile(r"^[\d\s\-().+]+$")
_URL_SCHEME = re.compile(r"^https?://", re.IGNORECASE)

_COORDINATE_LIMITS = (("lat", "latitude", 90.0), ("lng", "longitude", 180.0))


@dataclass(frozen=True)
class DataWarning:
    """A suspicious value that did not stop the row from being accepted.

    Attributes
    ----------
    row : int | None
        1-based data row number, or None for header-level findings.
    field : str
        Schema field (or CSV column, for header findings) concerned.
    message : str
        Human-readable description.
    """

    row: int | None
    field: str
    message: str


def check_header(columns: Sequence[str]) -> list[DataWarning]:
    """Report empty and duplicated header cells.

    >>> [w.message for w in check_header(["name", "", "name"])]
    ['Empty header at column 2', 'Duplicate header "name" appears 2 times']
    """
    warnings = [
        DataWarning(None, "", f"Empty header at column {position}")
        for position, column in enumerate(columns, start=1)
        if not column.strip()
    ]
    counts = Counter(column.strip() for column in columns if column.strip())
    warnings.extend(
        DataWarning(None, column, f'Duplicate header "{column}" appears {count} times')
        for column, count in counts.items()
        if count > 1
    )
    for warning in warnings:
        logger.warning("CSV header: %s", warning.message)
    return warnings


def _check_coordinate(row: int, field: str, label: str, text: str, limit: float):
    try:
        value = float(text)
    except ValueError:
        return DataWarning(row, field, f"Invalid {label} value: {text!r}")
    if not math.isfinite(value):
        return DataWarning(row, field, f"Invalid {label} value: {text!r}")
    if not -limit <= value <= limit:
        return DataWarning(
            row, field, f"{label.capitalize()} out of range (-{limit:g} to {limit:g}): {value:g}"
        )
    return None


def check_record(row: int, record: BookstoreRecord) -> list[DataWarning]:
    """Run the content checks over one validated record.

    Parameters
    ----------
    row : int
        1-based data row number, used in the warnings.
    record : BookstoreRecord
        The accepted record.

    Returns
    -------
    list[DataWarning]
        Findings in field order; empty when the record looks clean.
    """
    warnings: list[DataWarning] = []
    for field, label, limit in _COORDINATE_LIMITS:
        warning = _check_coordinate(row, field, label, getattr(record, field).strip(), limit)
        if warning is not None:
            warnings.append(warning)
    email = record.email.strip()
    if email and not _EMAIL.match(email):
        warnings.append(DataWarning(row, "email", f"Invalid email format: {email!r}"))
    phone = record.phone.strip()
    if phone and not _PHONE.match(phone):
        warnings.append(DataWarning(row, "phone", f"Unusual phone number format: {phone!r}"))
    website = record.website.strip()
    if website and not _URL_SCHEME.match(website):
        warnings.append(
            DataWarning(
                row, "website", f"URL should start with http:// or https://: {website!r}"
            )
        )
    for warning in warnings:
        logger.debug("Row %d: %s", row, warning.message)
    return warnings
