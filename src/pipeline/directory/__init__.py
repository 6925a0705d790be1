"""Bookstore directory pipeline package.

Import surface for everything derived from validated bookstore records:
record processing, slugs, geographic grouping, opening-hours checks, fuzzy
search with compound filters, listing/JSON export and the headless runner.
No logic lives here; see the submodules.
"""

from .exporter import StorePage, paginate_stores, query_stores, write_directory_json
from .geographic import (
    CityInfo,
    ProvinceInfo,
    extract_cities,
    extract_provinces,
    find_city_by_slug,
    find_province_by_slug,
    get_province_code,
    get_stores_by_city,
    get_stores_by_province,
    normalize_province,
)
from .location import UserLocation, haversine_distance, request_user_location
from .processor import (
    Coordinates,
    ProcessedBookstore,
    RatingInfo,
    Review,
    process_bookstore,
    process_bookstores,
)
from .search import (
    SearchIndex,
    StoreFilters,
    get_search_suggestions,
    initialize_search,
    search_stores,
)
from .slugs import create_slug, create_slug_mapping, generate_store_slug
from .store_hours import (
    get_formatted_hours,
    is_open_late,
    is_open_weekends,
    is_store_open,
)

__all__ = [
    "CityInfo",
    "Coordinates",
    "ProcessedBookstore",
    "ProvinceInfo",
    "RatingInfo",
    "Review",
    "SearchIndex",
    "StoreFilters",
    "StorePage",
    "UserLocation",
    "create_slug",
    "create_slug_mapping",
    "extract_cities",
    "extract_provinces",
    "find_city_by_slug",
    "find_province_by_slug",
    "generate_store_slug",
    "get_formatted_hours",
    "get_province_code",
    "get_search_suggestions",
    "get_stores_by_city",
    "get_stores_by_province",
    "haversine_distance",
    "initialize_search",
    "is_open_late",
    "is_open_weekends",
    "is_store_open",
    "normalize_province",
    "paginate_stores",
    "process_bookstore",
    "process_bookstores",
    "query_stores",
    "request_user_location",
    "search_stores",
    "write_directory_json",
]
