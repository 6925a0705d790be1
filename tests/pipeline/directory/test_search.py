"""Tests for fuzzy search, suggestions and compound filters."""

from datetime import datetime

import pytest

from src.pipeline.directory.location import UserLocation
from src.pipeline.directory.search import (
    SearchIndex,
    StoreFilters,
    get_search_suggestions,
    initialize_search,
    matches_filters,
    search_stores,
)

TORONTO = UserLocation(43.6532, -79.3832)


@pytest.fixture
def stores(make_store):
    return [
        make_store(
            place_id="1",
            name="Bellwoods Books",
            rating="4.6",
            mon_hours="10AM-9PM",
            sat_hours="10:00-17:00",
            price_level="2",
        ),
        make_store(
            place_id="2",
            name="Type Books",
            rating="3.5",
            website="",
            lat="43.6455",
            lng="-79.4111",
            sun_hours="Closed",
            sat_hours="Closed",
        ),
        make_store(
            place_id="3",
            name="Munro's Books",
            city="Victoria",
            province="BC",
            rating="4.8",
            lat="48.4245",
            lng="-123.3656",
            sun_hours="11:00-18:00",
            price_level="3",
        ),
        make_store(place_id="4", name="Unrated Reads", rating="", lat="x", lng="x"),
    ]


def test_blank_query_without_filters_returns_all_in_order(stores):
    assert search_stores(stores, "") == stores
    assert search_stores(stores, "   ") == stores


def test_blank_query_with_min_rating_keeps_order(stores):
    result = search_stores(stores, "", StoreFilters(min_rating=4))
    assert [s.name for s in result] == ["Bellwoods Books", "Munro's Books"]


def test_typo_still_matches(stores):
    result = search_stores(stores, "belwood")
    assert result[0].name == "Bellwoods Books"


def test_exact_substring_ranks_first_and_searches_all_keys(stores):
    assert search_stores(stores, "victoria")[0].name == "Munro's Books"
    assert [s.name for s in search_stores(stores, "type books")][0] == "Type Books"
    assert search_stores(stores, "zzzzqqq") == []


def test_near_miss_names_do_not_match(stores):
    assert [s.name for s in search_stores(stores, "bellwood")] == ["Bellwoods Books"]
    assert [s.name for s in search_stores(stores, "belwood")] == ["Bellwoods Books"]
    assert "Type Books" not in [s.name for s in search_stores(stores, "bellwoods")]


def test_search_respects_threshold(stores):
    strict = SearchIndex(stores, threshold=0.0)
    assert strict.search("belwood") == []
    assert len(strict.search("bellwoods")) == 1


def test_reusing_an_explicit_index(stores):
    index = initialize_search(stores)
    assert len(index) == 4
    result = search_stores(stores, "munro", StoreFilters(), index=index)
    assert [s.place_id for s in result] == ["3"]


def test_get_search_suggestions(stores):
    index = initialize_search(stores)
    assert get_search_suggestions(index, "books", limit=2) == [
        "Bellwoods Books",
        "Type Books",
    ]
    assert get_search_suggestions(index, "") == []


def test_filters_combine(stores):
    result = search_stores(
        stores, "books", StoreFilters(min_rating=4, has_website=True, province="on")
    )
    assert [s.name for s in result] == ["Bellwoods Books"]


def test_province_filter_normalises(stores):
    result = search_stores(stores, "", StoreFilters(province="British Columbia"))
    assert [s.name for s in result] == ["Munro's Books"]


def test_price_level_filter(stores):
    assert [s.place_id for s in search_stores(stores, "", StoreFilters(price_level=3))] == [
        "3"
    ]


def test_open_late_and_weekends_filters(stores):
    late = search_stores(stores, "", StoreFilters(open_late=True))
    assert [s.place_id for s in late] == ["1"]
    weekends = search_stores(stores, "", StoreFilters(open_weekends=True))
    assert [s.place_id for s in weekends] == ["1", "3"]


def test_saturday_until_five_is_not_late(make_store):
    store = make_store(sat_hours="10:00-17:00")
    assert search_stores([store], "", StoreFilters(open_late=True)) == []


def test_open_now_filter_uses_given_moment(stores):
    monday_evening = datetime(2024, 1, 1, 20, 0)
    result = search_stores(stores, "", StoreFilters(open_now=True), now=monday_evening)
    assert [s.place_id for s in result] == ["1"]


def test_distance_filter_skipped_without_location(stores):
    result = search_stores(stores, "", StoreFilters(max_distance=5))
    assert result == stores


def test_distance_filter_with_location(stores):
    result = search_stores(
        stores, "", StoreFilters(max_distance=10), user_location=TORONTO
    )
    assert [s.place_id for s in result] == ["1", "2"]


def test_matches_filters_defaults_pass_everything(stores):
    assert all(matches_filters(store, StoreFilters()) for store in stores)
