"""Bookstore record schema and validator.

Defines :class:`BookstoreRecord`, the canonical, immutable, string-typed view
of one bookstore row, and :func:`validate_record`, the single entry point that
turns a loosely-typed mapping into a record or raises
:class:`src.exceptions.SchemaValidationError`.

The validator only checks shape: required fields must be non-blank strings
and optional fields must be strings when present. Numeric parsing (rating,
coordinates, review counts) is deliberately left to the record processor.

Examples
--------
>>> rec = validate_record({
...     "name": "Bellwoods Books", "address": "1 Queen St", "city": "Toronto",
...     "province": "ON", "postal_code": "M5V", "lat": "43.6", "lng": "-79.4",
...     "place_id": "abc",
... })
>>> rec.city
'Toronto'
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from src.exceptions import SchemaValidationError

REQUIRED_FIELDS: tuple[str, ...] = (
    "name",
    "address",
    "city",
    "province",
    "postal_code",
    "lat",
    "lng",
    "place_id",
)

HOURS_FIELDS: tuple[str, ...] = (
    "mon_hours",
    "tue_hours",
    "wed_hours",
    "thu_hours",
    "fri_hours",
    "sat_hours",
    "sun_hours",
)

REVIEW_PARTS: tuple[str, ...] = ("author", "rating", "time", "text")


def review_field_names(slot: int) -> tuple[str, str, str, str]:
    """Return the four schema field names of review ``slot`` (1-based)."""
    author, rating, time, text = (f"review{slot}_{part}" for part in REVIEW_PARTS)
    return author, rating, time, text


class BookstoreRecord(BaseModel):
    """Schema-validated bookstore row; every value is kept as source text."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    # Basic info
    name: str
    address: str
    city: str
    province: str
    postal_code: str
    description: str = ""
    phone: str = ""
    website: str = ""
    email: str = ""

    # Location
    lat: str
    lng: str

    # Business data
    rating: str = ""
    num_reviews: str = ""
    price_level: str = ""

    # External place identifiers
    place_id: str
    place_url: str = ""
    photos_url: str = ""
    street_view: str = ""

    # Status and hours
    status: str = ""
    mon_hours: str = ""
    tue_hours: str = ""
    wed_hours: str = ""
    thu_hours: str = ""
    fri_hours: str = ""
    sat_hours: str = ""
    sun_hours: str = ""

    # Reviews
    review1_author: str = ""
    review1_rating: str = ""
    review1_time: str = ""
    review1_text: str = ""
    review2_author: str = ""
    review2_rating: str = ""
    review2_time: str = ""
    review2_text: str = ""
    review3_author: str = ""
    review3_rating: str = ""
    review3_time: str = ""
    review3_text: str = ""
    review4_author: str = ""
    review4_rating: str = ""
    review4_time: str = ""
    review4_text: str = ""
    review5_author: str = ""
    review5_rating: str = ""
    review5_time: str = ""
    review5_text: str = ""

    @field_validator(*REQUIRED_FIELDS)
    @classmethod
    def _require_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("required field is empty")
        return value

    @field_validator("*", mode="before")
    @classmethod
    def _absent_is_empty(cls, value: Any) -> Any:
        # Absent optional values arrive as None; required ones then fail the
        # non-blank check above instead of a type error.
        return "" if value is None else value


def validate_record(data: Mapping[str, Any]) -> BookstoreRecord:
    """Validate a mapped row and return an immutable :class:`BookstoreRecord`.

    Parameters
    ----------
    data : Mapping[str, Any]
        Loosely-typed row keyed by schema field names. Unknown keys are
        ignored.

    Returns
    -------
    BookstoreRecord
        The validated record.

    Raises
    ------
    SchemaValidationError
        If a required field is missing or blank, or any field is not a string.
        ``fields`` names every violating field.
    """
    try:
        return BookstoreRecord.model_validate(dict(data))
    except ValidationError as exc:
        fields: list[str] = []
        messages: list[str] = []
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"]) or "<record>"
            if field not in fields:
                fields.append(field)
            messages.append(f"{field}: {error['msg']}")
        raise SchemaValidationError("; ".join(messages), fields=fields) from exc
