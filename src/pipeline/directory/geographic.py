"""Province and city grouping of bookstores.

Province strings are normalised through a fixed alias table before any
grouping or comparison, so ``"ON"``, ``"on"`` and ``"Ontario"`` land in the
same group. Unrecognised provinces pass through unchanged as their own group.

Functions accept any store objects exposing ``province`` and ``city``
attributes: both :class:`BookstoreRecord` and :class:`ProcessedBookstore`
qualify. Nothing is cached; every call recomputes from its input.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, TypeVar

from src.config import UNKNOWN_LOCATION_NAME

from .slugs import create_city_slug, create_slug

StoreT = TypeVar("StoreT")

PROVINCE_CODES: dict[str, str] = {
    "Ontario": "ON",
    "British Columbia": "BC",
    "Alberta": "AB",
    "Quebec": "QC",
    "Nova Scotia": "NS",
    "New Brunswick": "NB",
    "Manitoba": "MB",
    "Saskatchewan": "SK",
    "Prince Edward Island": "PE",
    "Newfoundland and Labrador": "NL",
    "Northwest Territories": "NT",
    "Nunavut": "NU",
    "Yukon": "YT",
}

_EXTRA_ALIASES: dict[str, str] = {
    "québec": "Quebec",
    "pei": "Prince Edward Island",
    "p.e.i.": "Prince Edward Island",
    "nwt": "Northwest Territories",
    "yukon territory": "Yukon",
    "newfoundland": "Newfoundland and Labrador",
}

PROVINCE_ALIASES: dict[str, str] = {
    **{name.lower(): name for name in PROVINCE_CODES},
    **{code.lower(): name for name, code in PROVINCE_CODES.items()},
    **_EXTRA_ALIASES,
}


@dataclass(frozen=True)
class CityInfo:
    name: str
    province: str
    province_code: str
    store_count: int
    slug: str


@dataclass(frozen=True)
class ProvinceInfo:
    name: str
    code: str
    total_stores: int
    slug: str
    cities: list[CityInfo] = field(default_factory=list)


def normalize_province(province: str | None) -> str:
    """Return the canonical province name.

    >>> normalize_province("ON"), normalize_province(" ontario "), normalize_province("Bavaria")
    ('Ontario', 'Ontario', 'Bavaria')
    >>> normalize_province("")
    'Unknown'
    """
    trimmed = (province or "").strip()
    if not trimmed:
        return UNKNOWN_LOCATION_NAME
    return PROVINCE_ALIASES.get(trimmed.lower(), trimmed)


def get_province_code(province: str | None) -> str:
    """Two-letter code of a province; unknown provinces return their name."""
    normalized = normalize_province(province)
    return PROVINCE_CODES.get(normalized, normalized)


def create_province_slug(province: str | None) -> str:
    return create_slug(normalize_province(province))


def _city_name(store: Any) -> str:
    return (getattr(store, "city", "") or "").strip() or UNKNOWN_LOCATION_NAME


def _count_order(name: str, count: int) -> tuple[int, str, str]:
    return (-count, name.casefold(), name)


def extract_provinces(stores: Iterable[Any]) -> list[ProvinceInfo]:
    """Group stores by normalised province and city.

    Returns
    -------
    list[ProvinceInfo]
        Provinces sorted by store count descending, then name; cities inside
        each province sorted the same way. ``sum(p.total_stores)`` equals the
        number of input stores.
    """
    city_counts: dict[str, Counter[str]] = {}
    for store in stores:
        province = normalize_province(getattr(store, "province", ""))
        city_counts.setdefault(province, Counter())[_city_name(store)] += 1

    provinces: list[ProvinceInfo] = []
    for province, counts in city_counts.items():
        code = get_province_code(province)
        cities = [
            CityInfo(
                name=city,
                province=province,
                province_code=code,
                store_count=count,
                slug=create_city_slug(city),
            )
            for city, count in counts.items()
        ]
        cities.sort(key=lambda city: _count_order(city.name, city.store_count))
        provinces.append(
            ProvinceInfo(
                name=province,
                code=code,
                total_stores=sum(counts.values()),
                slug=create_slug(province),
                cities=cities,
            )
        )
    provinces.sort(key=lambda info: _count_order(info.name, info.total_stores))
    return provinces


def extract_cities(stores: Iterable[Any]) -> list[CityInfo]:
    """Flat list of cities (keyed by city and province) with store counts."""
    cities = [city for province in extract_provinces(stores) for city in province.cities]
    cities.sort(key=lambda city: _count_order(city.name, city.store_count))
    return cities


def get_stores_by_province(stores: Sequence[StoreT], province: str) -> list[StoreT]:
    """Stores whose normalised province equals the normalised ``province``."""
    wanted = normalize_province(province)
    return [
        store
        for store in stores
        if normalize_province(getattr(store, "province", "")) == wanted
    ]


def get_stores_by_city(
    stores: Sequence[StoreT], province: str, city: str
) -> list[StoreT]:
    """Stores in ``city`` (case-insensitive) of the given province."""
    wanted_city = city.strip().lower()
    return [
        store
        for store in get_stores_by_province(stores, province)
        if (getattr(store, "city", "") or "").strip().lower() == wanted_city
    ]


def find_province_by_slug(
    provinces: Iterable[ProvinceInfo], slug: str
) -> ProvinceInfo | None:
    """Find a province by its slug or its two-letter code."""
    wanted = slug.strip().lower()
    for province in provinces:
        if province.slug == wanted or province.code.lower() == wanted:
            return province
    return None


def find_city_by_slug(cities: Iterable[CityInfo], slug: str) -> CityInfo | None:
    wanted = slug.strip().lower()
    return next((city for city in cities if city.slug == wanted), None)
