"""Listing and JSON export of the processed directory.

The page layer consumes plain JSON files written here:

- ``bookstores.json``: ``{"success": true, "data": [store, ...]}``
- ``provinces.json``: province aggregates with nested cities
- ``cities.json``: the flat city list

:func:`query_stores` reproduces the paginated listing endpoint of the site
(case-insensitive substring filters, then ``offset``/``limit``).
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from src.config import (
    BOOKSTORES_JSON_FILENAME,
    CITIES_JSON_FILENAME,
    DEFAULT_PAGE_SIZE,
    PROVINCES_JSON_FILENAME,
)

from .geographic import CityInfo, ProvinceInfo
from .processor import ProcessedBookstore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StorePage:
    stores: list[ProcessedBookstore]
    total: int


def paginate_stores(
    stores: Sequence[ProcessedBookstore],
    offset: int = 0,
    limit: int = DEFAULT_PAGE_SIZE,
) -> StorePage:
    """Slice ``stores``; ``total`` counts every store before slicing.

    Negative offsets and limits are clamped to zero.
    """
    offset = max(offset, 0)
    limit = max(limit, 0)
    return StorePage(list(stores[offset : offset + limit]), len(stores))


def query_stores(
    stores: Sequence[ProcessedBookstore],
    search: str = "",
    city: str = "",
    province: str = "",
    offset: int = 0,
    limit: int = DEFAULT_PAGE_SIZE,
) -> StorePage:
    """Filter by case-insensitive substrings of name, city and province, then page.

    Examples
    --------
    >>> page = query_stores([], search="books")
    >>> page.total
    0
    """
    search, city, province = (
        value.strip().lower() for value in (search or "", city or "", province or "")
    )
    selected = [
        store
        for store in stores
        if (not search or search in store.name.lower())
        and (not city or city in store.city.lower())
        and (not province or province in store.province.lower())
    ]
    return paginate_stores(selected, offset, limit)


def _write_json(payload: Any, output_file: Path) -> Path:
    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8"
    )
    logger.debug("Wrote %s", output_file)
    return output_file


def write_directory_json(
    stores: Sequence[ProcessedBookstore],
    provinces: Sequence[ProvinceInfo],
    cities: Sequence[CityInfo],
    output_dir: Path,
) -> list[Path]:
    """Write the three directory JSON files into ``output_dir``.

    Parameters
    ----------
    stores : Sequence[ProcessedBookstore]
        Processed stores.
    provinces : Sequence[ProvinceInfo]
        Output of ``extract_provinces``.
    cities : Sequence[CityInfo]
        Output of ``extract_cities``.
    output_dir : Path
        Destination directory, created if missing.

    Returns
    -------
    list[Path]
        Paths of the written files.

    Raises
    ------
    OSError
        If a file cannot be written.
    """
    output_dir = Path(output_dir)
    return [
        _write_json(
            {"success": True, "data": [store.to_dict() for store in stores]},
            output_dir / BOOKSTORES_JSON_FILENAME,
        ),
        _write_json(
            [asdict(province) for province in provinces],
            output_dir / PROVINCES_JSON_FILENAME,
        ),
        _write_json(
            [asdict(city) for city in cities], output_dir / CITIES_JSON_FILENAME
        ),
    ]
