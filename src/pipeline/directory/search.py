"""Fuzzy search and compound filtering over processed bookstores.

The search index is an explicit value: :func:`initialize_search` builds a
:class:`SearchIndex` that the caller owns and passes to
:func:`search_stores`. Several independent indexes can coexist.

Matching uses :class:`difflib.SequenceMatcher` over the casefolded ``name``,
``address``, ``city`` and ``province`` fields. A query matches a field when
it is a substring of it, or when its similarity to the best window of
words in the field is within the fuzzy threshold (``0.3`` by default, i.e.
at least 70% similar), so one or two typos still match.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from difflib import SequenceMatcher

from src.config import (
    LATE_HOUR_THRESHOLD,
    SEARCH_FUZZY_THRESHOLD,
    SEARCH_KEYS,
    SEARCH_SUGGESTION_LIMIT,
)

from .geographic import normalize_province
from .location import UserLocation, haversine_distance
from .processor import ProcessedBookstore
from .store_hours import is_open_late, is_open_weekends, is_store_open

logger = logging.getLogger(__name__)

_WORD = re.compile(r"\w+")


@dataclass
class StoreFilters:
    """Compound filter; every active criterion must hold."""

    open_now: bool = False
    has_website: bool = False
    min_rating: float = 0.0
    max_distance: float | None = None
    price_level: int | None = None
    province: str | None = None
    open_late: bool = False
    open_weekends: bool = False


@dataclass(frozen=True)
class SearchHit:
    store: ProcessedBookstore
    score: float


@dataclass(frozen=True)
class _IndexedField:
    text: str
    words: tuple[str, ...]


def _windows(words: tuple[str, ...], size: int) -> list[str]:
    if len(words) <= size:
        return [" ".join(words)]
    return [" ".join(words[i : i + size]) for i in range(len(words) - size + 1)]


class SearchIndex:
    """Fuzzy-match index over a fixed list of stores.

    Parameters
    ----------
    stores : Sequence[ProcessedBookstore]
        Stores to index; results keep references to these objects.
    keys : Sequence[str]
        Store attributes to search.
    threshold : float
        Maximum score (0 = exact, 1 = unrelated) for a match.
    """

    def __init__(
        self,
        stores: Sequence[ProcessedBookstore],
        keys: Sequence[str] = SEARCH_KEYS,
        threshold: float = SEARCH_FUZZY_THRESHOLD,
    ) -> None:
        self.stores = list(stores)
        self.keys = tuple(keys)
        self.threshold = threshold
        self._fields: list[list[_IndexedField]] = [
            [self._index_field(getattr(store, key, "") or "") for key in self.keys]
            for store in self.stores
        ]

    @staticmethod
    def _index_field(value: str) -> _IndexedField:
        text = value.casefold().strip()
        return _IndexedField(text, tuple(_WORD.findall(text)))

    def __len__(self) -> int:
        return len(self.stores)

    @staticmethod
    def _score(
        query: str,
        query_size: int,
        indexed: _IndexedField,
        matcher: SequenceMatcher,
    ) -> float:
        if not indexed.text:
            return 1.0
        if query in indexed.text:
            return 0.0
        best = 0.0
        for candidate in _windows(indexed.words, query_size):
            matcher.set_seq1(candidate)
            best = max(best, matcher.ratio())
        return 1.0 - best

    def search(self, query: str) -> list[SearchHit]:
        """Return matching stores ranked by score, best first.

        Ties keep index order. A blank query returns no hits.
        """
        normalized = " ".join(_WORD.findall(query.casefold()))
        if not normalized:
            return []
        query_size = len(normalized.split())
        matcher = SequenceMatcher(autojunk=False)
        matcher.set_seq2(normalized)
        scored: list[tuple[float, int]] = []
        for position, fields in enumerate(self._fields):
            score = min(
                (
                    self._score(normalized, query_size, indexed, matcher)
                    for indexed in fields
                ),
                default=1.0,
            )
            if score <= self.threshold:
                scored.append((score, position))
        scored.sort()
        return [SearchHit(self.stores[position], score) for score, position in scored]


def initialize_search(
    stores: Sequence[ProcessedBookstore], threshold: float = SEARCH_FUZZY_THRESHOLD
) -> SearchIndex:
    """Build a fuzzy-search index over ``stores``."""
    index = SearchIndex(stores, threshold=threshold)
    logger.debug("Search index built over %d stores", len(index))
    return index


def get_search_suggestions(
    index: SearchIndex, query: str, limit: int = SEARCH_SUGGESTION_LIMIT
) -> list[str]:
    """Names of the best ``limit`` matches for ``query``."""
    if not query or not query.strip():
        return []
    return [hit.store.name for hit in index.search(query)[:limit]]


def matches_filters(
    store: ProcessedBookstore,
    filters: StoreFilters,
    user_location: UserLocation | None = None,
    now: datetime | None = None,
    late_hour: int = LATE_HOUR_THRESHOLD,
) -> bool:
    """Evaluate every active filter against ``store``.

    The distance filter is skipped entirely when ``user_location`` is None;
    with a location, stores without coordinates are excluded.
    """
    if filters.has_website and not store.website:
        return False
    if filters.min_rating > 0:
        rating = store.rating
        if rating is None or rating < filters.min_rating:
            return False
    if filters.province and normalize_province(store.province) != normalize_province(
        filters.province
    ):
        return False
    if filters.price_level is not None and store.price_level != filters.price_level:
        return False
    if filters.max_distance is not None and user_location is not None:
        if store.coordinates is None:
            return False
        distance = haversine_distance(
            user_location.lat,
            user_location.lng,
            store.coordinates.lat,
            store.coordinates.lng,
        )
        if distance > filters.max_distance:
            return False
    if filters.open_now and not is_store_open(store, now):
        return False
    if filters.open_late and not is_open_late(store, late_hour):
        return False
    if filters.open_weekends and not is_open_weekends(store):
        return False
    return True


def search_stores(
    stores: Sequence[ProcessedBookstore],
    query: str = "",
    filters: StoreFilters | None = None,
    *,
    index: SearchIndex | None = None,
    user_location: UserLocation | None = None,
    now: datetime | None = None,
    late_hour: int = LATE_HOUR_THRESHOLD,
) -> list[ProcessedBookstore]:
    """Search and filter stores.

    Parameters
    ----------
    stores : Sequence[ProcessedBookstore]
        The full store list.
    query : str
        Free text. Blank returns every store in its original order; otherwise
        stores are ranked by fuzzy score.
    filters : StoreFilters | None
        Compound filter applied to the candidates.
    index : SearchIndex | None
        Index built from ``stores``; built on the fly when omitted.
    user_location : UserLocation | None
        Caller location for ``max_distance``; None skips that filter.
    now : datetime | None
        Moment used by ``open_now``; defaults to the current local time.
    late_hour : int
        Closing hour from which a store counts as open late.

    Returns
    -------
    list[ProcessedBookstore]
        Matching stores.
    """
    if query and query.strip():
        search_index = index if index is not None else initialize_search(stores)
        candidates = [hit.store for hit in search_index.search(query)]
    else:
        candidates = list(stores)
    if filters is None:
        return candidates
    if filters.max_distance is not None and user_location is None:
        logger.info("No user location available; skipping distance filter")
    return [
        store
        for store in candidates
        if matches_filters(store, filters, user_location, now, late_hour)
    ]
