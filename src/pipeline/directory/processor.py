"""Turn validated bookstore records into display-ready values.

:class:`BookstoreRecord` keeps every field as source text. This module
derives :class:`ProcessedBookstore`, the numeric and display-oriented view
consumed by the geographic index, the search engine and the page layer:
parsed coordinates, a rating summary with reviews, per-day hours, a resolved
photo URL and a routing slug.

Processing is pure and never fails: malformed numbers become ``None``.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from typing import Any

from src.config import (
    DEFAULT_STORE_STATUS,
    KNOWN_STORE_STATUSES,
    PLACEHOLDER_PHOTO_URL,
    REVIEW_SLOT_COUNT,
)
from src.pipeline.csv_ingest import BookstoreRecord, Weekday
from src.pipeline.csv_ingest.schema import review_field_names

from .slugs import generate_store_slug


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float


@dataclass(frozen=True)
class Review:
    """One customer review. ``rating`` is 0 when the source was unparseable."""

    author: str
    rating: float
    time: str
    text: str


@dataclass(frozen=True)
class RatingInfo:
    rating: float
    num_reviews: int
    reviews: tuple[Review, ...] = ()


@dataclass(frozen=True)
class ProcessedBookstore:
    """Display-ready bookstore.

    ``hours`` maps every weekday name to its hour text, or to ``None`` when
    the data is missing; ``"Closed"`` is kept as an explicit value.
    ``photos_url`` is never empty.
    """

    place_id: str
    name: str
    address: str
    city: str
    province: str
    postal_code: str
    formatted_address: str
    photos_url: str
    status: str
    slug: str
    description: str = ""
    phone: str = ""
    website: str = ""
    email: str = ""
    place_url: str = ""
    coordinates: Coordinates | None = None
    rating_info: RatingInfo | None = None
    price_level: int | None = None
    hours: dict[str, str | None] = field(default_factory=dict)

    @property
    def rating(self) -> float | None:
        return self.rating_info.rating if self.rating_info else None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serialisable dictionary of the store."""
        return asdict(self)


def parse_number(value: str | None) -> float | None:
    """Parse a finite float, returning None for blank or malformed text.

    >>> parse_number("4.5"), parse_number(""), parse_number("abc"), parse_number("nan")
    (4.5, None, None, None)
    """
    if value is None or not value.strip():
        return None
    try:
        number = float(value.strip())
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def process_review(
    author: str | None, rating: str | None, time: str | None, text: str | None
) -> Review | None:
    """Build a :class:`Review` from one slot, or None if every part is empty."""
    parts = [(part or "").strip() for part in (author, rating, time, text)]
    if not any(parts):
        return None
    author_text, rating_text, time_text, review_text = parts
    return Review(
        author=author_text,
        rating=parse_number(rating_text) or 0.0,
        time=time_text,
        text=review_text,
    )


def collect_reviews(record: BookstoreRecord) -> tuple[Review, ...]:
    reviews: list[Review] = []
    for slot in range(1, REVIEW_SLOT_COUNT + 1):
        review = process_review(
            *(getattr(record, name) for name in review_field_names(slot))
        )
        if review is not None:
            reviews.append(review)
    return tuple(reviews)


def format_address(record: BookstoreRecord) -> str:
    """Return ``"address, city, province postal"``.

    >>> from src.pipeline.csv_ingest import validate_record
    >>> rec = validate_record({"name": "A", "address": "1 Main St", "city": "Guelph",
    ...     "province": "ON", "postal_code": "N1H", "lat": "1", "lng": "2", "place_id": "p"})
    >>> format_address(rec)
    '1 Main St, Guelph, ON N1H'
    """
    return f"{record.address}, {record.city}, {record.province} {record.postal_code}".strip()


def resolve_photo_url(photos_url: str | None) -> str:
    """Return the trimmed source URL, or the placeholder image when blank."""
    trimmed = (photos_url or "").strip()
    return trimmed or PLACEHOLDER_PHOTO_URL


def resolve_status(status: str | None) -> str:
    normalized = (status or "").strip().upper()
    return normalized if normalized in KNOWN_STORE_STATUSES else DEFAULT_STORE_STATUS


def build_hours(record: BookstoreRecord) -> dict[str, str | None]:
    hours: dict[str, str | None] = {}
    for day in Weekday:
        text = getattr(record, day.hours_field).strip()
        hours[day.value] = text or None
    return hours


def process_bookstore(record: BookstoreRecord) -> ProcessedBookstore:
    """Derive the display-ready view of one validated record.

    Parameters
    ----------
    record : BookstoreRecord
        A schema-validated record.

    Returns
    -------
    ProcessedBookstore
        ``coordinates`` is set only when both lat and lng parse to finite
        numbers; ``rating_info`` only when the rating parses. Review slots
        whose four parts are all empty are dropped.
    """
    latitude = parse_number(record.lat)
    longitude = parse_number(record.lng)
    coordinates = (
        Coordinates(latitude, longitude)
        if latitude is not None and longitude is not None
        else None
    )

    rating = parse_number(record.rating)
    rating_info = None
    if rating is not None:
        num_reviews = parse_number(record.num_reviews)
        rating_info = RatingInfo(
            rating=rating,
            num_reviews=int(num_reviews) if num_reviews is not None else 0,
            reviews=collect_reviews(record),
        )

    price_level = parse_number(record.price_level)

    return ProcessedBookstore(
        place_id=record.place_id,
        name=record.name,
        address=record.address,
        city=record.city,
        province=record.province,
        postal_code=record.postal_code,
        formatted_address=format_address(record),
        photos_url=resolve_photo_url(record.photos_url),
        status=resolve_status(record.status),
        slug=generate_store_slug(record.name, record.city, record.province),
        description=record.description,
        phone=record.phone,
        website=record.website.strip(),
        email=record.email,
        place_url=record.place_url,
        coordinates=coordinates,
        rating_info=rating_info,
        price_level=int(price_level) if price_level else None,
        hours=build_hours(record),
    )


def process_bookstores(records: list[BookstoreRecord]) -> list[ProcessedBookstore]:
    return [process_bookstore(record) for record in records]
