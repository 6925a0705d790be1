"""Pytest configuration for test environment setup.

- Forces ``DISABLE_FILE_LOGS=1`` to avoid writing log files during tests.
- Ensures the project root is available on ``sys.path`` for imports.
- Provides factories for bookstore CSV files and validated records.
"""

import csv
import os
import signal
import sys

os.environ.setdefault("DISABLE_FILE_LOGS", "1")  # Avoid creating log files during tests
from pathlib import Path

import pytest

# Ensure project root is on sys.path
ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

from src.pipeline.csv_ingest import validate_record  # noqa: E402
from src.pipeline.directory import process_bookstore  # noqa: E402

CSV_HEADER = [
    "name",
    "street",
    "city",
    "state",
    "postal_code",
    "phone",
    "site",
    "latitude",
    "longitude",
    "rating",
    "reviews",
    "price_level",
    "place_id",
    "location_link",
    "photo",
    "business_status",
    "working_hours",
]

_TEST_TIMEOUT = int(os.environ.get("PYTEST_TEST_TIMEOUT", "10"))


def _timeout_handler(signum, frame):
    """Test Timeout handler."""
    raise TimeoutError(f"Test exceeded {_TEST_TIMEOUT} seconds timeout")


def pytest_runtest_setup(item):
    """Test Pytest runtest setup."""
    try:
        signal.signal(signal.SIGALRM, _timeout_handler)
        signal.alarm(_TEST_TIMEOUT)
    except (AttributeError, ValueError):
        pass


def pytest_runtest_teardown(item, nextitem):
    """Test Pytest runtest teardown."""
    try:
        signal.alarm(0)
    except AttributeError:
        pass


def _csv_row(**overrides):
    row = {
        "name": "Bellwoods Books",
        "street": "1 Ossington Ave",
        "city": "Toronto",
        "state": "ON",
        "postal_code": "M6J 2Y7",
        "phone": "416-555-0100",
        "site": "https://bellwoods.example",
        "latitude": "43.6465",
        "longitude": "-79.4196",
        "rating": "4.6",
        "reviews": "120",
        "price_level": "2",
        "place_id": "place-1",
        "location_link": "https://maps.example/place-1",
        "photo": "https://img.example/1.jpg",
        "business_status": "OPERATIONAL",
        "working_hours": "{Monday: 10AM-6PM, Saturday: 10:00-17:00, Sunday: Closed}",
    }
    row.update(overrides)
    return row


@pytest.fixture
def csv_row():
    """Factory for a complete, valid CSV row keyed by source column names."""
    return _csv_row


@pytest.fixture
def write_csv(tmp_path):
    """Factory writing rows to a CSV file and returning its path."""

    def _write(rows, header=None, name="bookstores.csv"):
        path = tmp_path / name
        fieldnames = header or CSV_HEADER
        with path.open("w", encoding="utf-8", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=fieldnames, extrasaction="ignore")
            writer.writeheader()
            for row in rows:
                writer.writerow(row)
        return path

    return _write


def record_data(**overrides):
    """A valid schema-keyed mapping for ``validate_record``."""
    data = {
        "name": "Bellwoods Books",
        "address": "1 Ossington Ave",
        "city": "Toronto",
        "province": "ON",
        "postal_code": "M6J 2Y7",
        "lat": "43.6465",
        "lng": "-79.4196",
        "place_id": "place-1",
        "rating": "4.6",
        "num_reviews": "120",
        "website": "https://bellwoods.example",
        "status": "OPERATIONAL",
    }
    data.update(overrides)
    return data


@pytest.fixture
def make_record():
    """Factory for validated ``BookstoreRecord`` values."""

    def _make(**overrides):
        return validate_record(record_data(**overrides))

    return _make


@pytest.fixture
def make_store():
    """Factory for ``ProcessedBookstore`` values."""

    def _make(**overrides):
        return process_bookstore(validate_record(record_data(**overrides)))

    return _make
