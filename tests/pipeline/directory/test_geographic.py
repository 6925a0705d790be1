"""Tests for province normalisation and geographic grouping."""

import pytest

from src.pipeline.directory.geographic import (
    create_province_slug,
    extract_cities,
    extract_provinces,
    find_city_by_slug,
    find_province_by_slug,
    get_province_code,
    get_stores_by_city,
    get_stores_by_province,
    normalize_province,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("ON", "Ontario"),
        ("on", "Ontario"),
        (" Ontario ", "Ontario"),
        ("QC", "Quebec"),
        ("Québec", "Quebec"),
        ("PEI", "Prince Edward Island"),
        ("Bavaria", "Bavaria"),
        ("", "Unknown"),
        (None, "Unknown"),
    ],
)
def test_normalize_province(raw, expected):
    assert normalize_province(raw) == expected


def test_province_code_and_slug():
    assert get_province_code("British Columbia") == "BC"
    assert get_province_code("bc") == "BC"
    assert get_province_code("Bavaria") == "Bavaria"
    assert create_province_slug("NL") == "newfoundland-and-labrador"


def test_abbreviation_and_full_name_share_a_group(make_store):
    stores = [
        make_store(place_id="a", province="ON"),
        make_store(place_id="b", province="Ontario"),
    ]
    provinces = extract_provinces(stores)
    assert len(provinces) == 1
    ontario = provinces[0]
    assert ontario.name == "Ontario"
    assert ontario.code == "ON"
    assert ontario.total_stores == 2
    assert ontario.slug == "ontario"
    assert [(city.name, city.store_count) for city in ontario.cities] == [("Toronto", 2)]


def test_extract_provinces_sorting_and_totals(make_store):
    stores = [
        make_store(place_id="1", province="BC", city="Vancouver"),
        make_store(place_id="2", province="ON", city="Ottawa"),
        make_store(place_id="3", province="ON", city="Toronto"),
        make_store(place_id="4", province="ON", city="Toronto"),
        make_store(place_id="5", province="AB", city="Calgary"),
        make_store(place_id="6", province="Bavaria", city="Munich"),
    ]
    provinces = extract_provinces(stores)
    assert [p.name for p in provinces] == [
        "Ontario",
        "Alberta",
        "Bavaria",
        "British Columbia",
    ]
    assert sum(p.total_stores for p in provinces) == len(stores)
    ontario = provinces[0]
    assert [city.name for city in ontario.cities] == ["Toronto", "Ottawa"]
    assert ontario.cities[0].province_code == "ON"
    assert provinces[2].code == "Bavaria"


def test_extract_provinces_empty():
    assert extract_provinces([]) == []
    assert extract_cities([]) == []


def test_extract_cities_keys_by_city_and_province(make_store):
    stores = [
        make_store(place_id="1", city="London", province="ON"),
        make_store(place_id="2", city="London", province="ON"),
        make_store(place_id="3", city="Victoria", province="BC"),
    ]
    cities = extract_cities(stores)
    assert [(c.name, c.province, c.store_count) for c in cities] == [
        ("London", "Ontario", 2),
        ("Victoria", "British Columbia", 1),
    ]
    assert cities[0].slug == "london"


def test_store_lookups(make_store):
    stores = [
        make_store(place_id="1", province="ON", city="Toronto"),
        make_store(place_id="2", province="Ontario", city="toronto"),
        make_store(place_id="3", province="BC", city="Victoria"),
    ]
    assert len(get_stores_by_province(stores, "on")) == 2
    assert len(get_stores_by_city(stores, "Ontario", "TORONTO")) == 2
    assert get_stores_by_city(stores, "BC", "Toronto") == []


def test_find_by_slug(make_store):
    provinces = extract_provinces(
        [make_store(place_id="1", province="BC", city="North Vancouver")]
    )
    assert find_province_by_slug(provinces, "british-columbia") is provinces[0]
    assert find_province_by_slug(provinces, "BC") is provinces[0]
    assert find_province_by_slug(provinces, "ontario") is None
    cities = extract_cities([make_store(place_id="1", city="North Vancouver")])
    assert find_city_by_slug(cities, "north-vancouver").name == "North Vancouver"
    assert find_city_by_slug(cities, "nowhere") is None
