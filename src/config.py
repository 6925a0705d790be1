"""Global configuration constants for the project.

Defines paths, filenames and tuning values used across the bookstore
directory pipeline. Values that may be overridden at runtime are read by
``src.pipeline.directory.config.DirectorySettings``.
"""

from __future__ import annotations

from pathlib import Path

# Project directories
PROJECT_ROOT: Path = Path(__file__).resolve().parents[1]
SRC_DIR: Path = PROJECT_ROOT / "src"
LOG_DIR: Path = PROJECT_ROOT / "logs"
DATA_DIR: Path = PROJECT_ROOT / "data"

# Input / output
BOOKSTORES_CSV_PATH: Path = DATA_DIR / "bookstores.csv"
OUTPUT_DATA_DIR: Path = PROJECT_ROOT / "output" / "data"
BOOKSTORES_JSON_FILENAME: str = "bookstores.json"
PROVINCES_JSON_FILENAME: str = "provinces.json"
CITIES_JSON_FILENAME: str = "cities.json"

# Logging
LOG_FILENAME_BUILD_DIRECTORY: str = "build_directory.log"
LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Record processing defaults
PLACEHOLDER_PHOTO_URL: str = "https://placehold.co/400x300?text=No+Image"
DEFAULT_STORE_STATUS: str = "OPERATIONAL"
KNOWN_STORE_STATUSES: frozenset[str] = frozenset(
    {"OPERATIONAL", "CLOSED_TEMPORARILY", "CLOSED_PERMANENTLY"}
)
REVIEW_SLOT_COUNT: int = 5
UNKNOWN_LOCATION_NAME: str = "Unknown"

# Search defaults
SEARCH_KEYS: tuple[str, ...] = ("name", "address", "city", "province")
SEARCH_FUZZY_THRESHOLD: float = 0.3
SEARCH_SUGGESTION_LIMIT: int = 5
LATE_HOUR_THRESHOLD: int = 20
GEOLOCATION_TIMEOUT_SECONDS: float = 10.0
EARTH_RADIUS_KM: float = 6371.0

# Listing defaults
DEFAULT_PAGE_SIZE: int = 12
