"""URL slug helpers shared by stores, provinces and cities.

Slugs are deterministic, lowercase ASCII, hyphen-separated and never start
or end with a hyphen. Uniqueness is not enforced: two stores with the same
name, city and province produce the same slug.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from collections.abc import Iterable
from typing import TypeVar

logger = logging.getLogger(__name__)

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")

StoreT = TypeVar("StoreT")


def create_slug(text: str | None) -> str:
    """Create a URL-safe slug.

    Accented letters are folded to ASCII, anything that is not a letter,
    digit, space or hyphen is dropped, whitespace runs become one hyphen.

    >>> create_slug("  Bellwoods Books & Café ")
    'bellwoods-books-cafe'
    >>> create_slug("--Saint-Jean--")
    'saint-jean'
    """
    folded = unicodedata.normalize("NFKD", text or "")
    ascii_text = folded.encode("ascii", "ignore").decode("ascii")
    slug = _DISALLOWED.sub("", ascii_text.lower().strip())
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug)
    return slug.strip("-")


def create_city_slug(city: str | None) -> str:
    return create_slug(city)


def generate_store_slug(
    name: str, city: str | None = None, province: str | None = None
) -> str:
    """Slug for a store; city and province are appended when both are given.

    >>> generate_store_slug("Type Books", "Toronto", "ON")
    'type-books-toronto-on'
    >>> generate_store_slug("Type Books")
    'type-books'
    """
    slug = create_slug(name)
    if city and city.strip() and province and province.strip():
        parts = [slug, create_slug(city), create_slug(province)]
        slug = "-".join(part for part in parts if part)
    return slug


def create_slug_mapping(stores: Iterable[StoreT]) -> dict[str, StoreT]:
    """Map each store's slug to the store for reverse lookup.

    Stores need ``name``, ``city`` and ``province`` attributes. Colliding
    slugs are logged and the later store wins.
    """
    mapping: dict[str, StoreT] = {}
    for store in stores:
        slug = generate_store_slug(
            getattr(store, "name"), getattr(store, "city"), getattr(store, "province")
        )
        if slug in mapping:
            logger.warning("Slug collision for %r; keeping the later store", slug)
        mapping[slug] = store
    return mapping
