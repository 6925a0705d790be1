"""Tests for distance computation and the location request timeout."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from src.pipeline.directory.location import (
    UserLocation,
    haversine_distance,
    request_user_location,
)


def test_haversine_zero_and_known_distance():
    assert haversine_distance(43.65, -79.38, 43.65, -79.38) == 0.0
    toronto_to_ottawa = haversine_distance(43.6532, -79.3832, 45.4215, -75.6972)
    assert toronto_to_ottawa == pytest.approx(352, abs=2)


def test_haversine_is_symmetric():
    there = haversine_distance(49.2827, -123.1207, 44.6488, -63.5752)
    back = haversine_distance(44.6488, -63.5752, 49.2827, -123.1207)
    assert there == pytest.approx(back)


def test_request_user_location_success():
    location = UserLocation(45.5, -73.56)
    assert request_user_location(lambda: location, timeout=1) == location


def test_request_user_location_denied_returns_none():
    assert request_user_location(lambda: None, timeout=1) is None


def test_request_user_location_provider_error(caplog):
    def failing():
        raise PermissionError("user denied geolocation")

    with caplog.at_level(logging.WARNING):
        assert request_user_location(failing, timeout=1) is None
    assert "user denied geolocation" in caplog.text


def test_request_user_location_timeout(caplog):
    release = threading.Event()

    def slow():
        release.wait(5)
        return UserLocation(0.0, 0.0)

    try:
        with caplog.at_level(logging.WARNING):
            assert request_user_location(slow, timeout=0.05) is None
        assert "timed out" in caplog.text
    finally:
        release.set()


def test_request_user_location_uses_caller_executor():
    location = UserLocation(49.28, -123.12)
    with ThreadPoolExecutor(max_workers=1) as executor:
        assert request_user_location(lambda: location, timeout=1, executor=executor) == location
        # The caller's executor stays usable after the call.
        assert executor.submit(lambda: 42).result(timeout=1) == 42


def test_request_user_location_timeout_leaves_caller_executor_open():
    release = threading.Event()
    with ThreadPoolExecutor(max_workers=1) as executor:
        try:
            assert (
                request_user_location(
                    lambda: release.wait(5), timeout=0.05, executor=executor
                )
                is None
            )
        finally:
            release.set()
        assert executor.submit(lambda: "done").result(timeout=1) == "done"
