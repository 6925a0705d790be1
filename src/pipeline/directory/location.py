"""Caller location and great-circle distance.

The caller's location is an explicit optional input to the search filters.
:func:`request_user_location` wraps a possibly slow or denied location
provider (a browser bridge, a GeoIP lookup, a CLI flag) with a fixed timeout
and turns every failure into ``None``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from concurrent.futures import Executor, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from dataclasses import dataclass

from src.config import EARTH_RADIUS_KM, GEOLOCATION_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserLocation:
    lat: float
    lng: float


LocationProvider = Callable[[], "UserLocation | None"]


def haversine_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in kilometres between two points.

    >>> round(haversine_distance(43.6532, -79.3832, 45.4215, -75.6972))
    352
    """
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def request_user_location(
    provider: LocationProvider,
    timeout: float = GEOLOCATION_TIMEOUT_SECONDS,
    executor: Executor | None = None,
) -> UserLocation | None:
    """Ask ``provider`` for the caller's location, waiting at most ``timeout``.

    Parameters
    ----------
    provider : Callable[[], UserLocation | None]
        Returns the location, returns None when permission is denied, or
        raises when the lookup fails.
    timeout : float
        Seconds to wait before giving up.
    executor : concurrent.futures.Executor | None
        Executor to run ``provider`` on. The caller keeps ownership and
        shuts it down. When omitted, a single-thread pool is created and
        shut down without waiting.

    Returns
    -------
    UserLocation | None
        The location, or None if it is unavailable for any reason.

    Notes
    -----
    A running provider cannot be cancelled. After a timeout its worker
    thread keeps running until the provider returns, and a private pool's
    thread is never joined here; the interpreter joins it at exit. Pass an
    ``executor`` to control that thread's lifetime.
    """
    owned = executor is None
    if owned:
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="geolocation")
    future = executor.submit(provider)
    try:
        return future.result(timeout=timeout)
    except FuturesTimeoutError:
        logger.warning("Geolocation timed out after %.1f seconds", timeout)
        return None
    except Exception as exc:
        logger.warning("Geolocation unavailable: %s", exc)
        return None
    finally:
        if owned:
            executor.shutdown(wait=False, cancel_futures=True)
