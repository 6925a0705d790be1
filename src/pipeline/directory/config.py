"""Runtime settings for building the bookstore directory.

:class:`DirectorySettings` resolves input/output paths and search tuning from
environment variables and an optional ``.env`` file at the project root,
falling back to the defaults in :mod:`src.config`.

Examples
--------
>>> from src.pipeline.directory.config import DirectorySettings
>>> settings = DirectorySettings()
>>> 0.0 <= settings.fuzzy_threshold <= 1.0
True
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

import src.config as _project_config
from src.config import (
    BOOKSTORES_CSV_PATH,
    GEOLOCATION_TIMEOUT_SECONDS,
    LATE_HOUR_THRESHOLD,
    OUTPUT_DATA_DIR,
    SEARCH_FUZZY_THRESHOLD,
)
from src.exceptions import ConfigurationError


def _env_number(name: str, default: float, cast: type) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise ConfigurationError(
            f"{name} must be a number, got {raw!r}", context={"variable": name}
        ) from exc


class DirectorySettings:
    """Validated directory build settings.

    Attributes
    ----------
    csv_path : Path
        Bookstore CSV (``BOOKSTORES_CSV_PATH``).
    output_dir : Path
        Directory for the JSON export (``DIRECTORY_OUTPUT_DIR``).
    fuzzy_threshold : float
        Search threshold in [0, 1] (``SEARCH_FUZZY_THRESHOLD``).
    late_hour : int
        Closing hour that counts as "open late" (``LATE_HOUR_THRESHOLD``).
    geolocation_timeout : float
        Seconds to wait for a location (``GEOLOCATION_TIMEOUT_SECONDS``).

    Raises
    ------
    ConfigurationError
        If a variable is not a number or is out of range.
    """

    def __init__(self) -> None:
        # Resolve the root through the module so tests can monkeypatch it.
        env_path = Path(_project_config.PROJECT_ROOT) / ".env"
        if env_path.exists():
            load_dotenv(env_path, override=True)
        self.csv_path: Path = Path(os.getenv("BOOKSTORES_CSV_PATH") or BOOKSTORES_CSV_PATH)
        self.output_dir: Path = Path(os.getenv("DIRECTORY_OUTPUT_DIR") or OUTPUT_DATA_DIR)
        self.fuzzy_threshold = float(
            _env_number("SEARCH_FUZZY_THRESHOLD", SEARCH_FUZZY_THRESHOLD, float)
        )
        self.late_hour = int(_env_number("LATE_HOUR_THRESHOLD", LATE_HOUR_THRESHOLD, int))
        self.geolocation_timeout = float(
            _env_number(
                "GEOLOCATION_TIMEOUT_SECONDS", GEOLOCATION_TIMEOUT_SECONDS, float
            )
        )
        if not 0.0 <= self.fuzzy_threshold <= 1.0:
            raise ConfigurationError("SEARCH_FUZZY_THRESHOLD must be between 0 and 1")
        if not 0 <= self.late_hour <= 24:
            raise ConfigurationError("LATE_HOUR_THRESHOLD must be between 0 and 24")
        if self.geolocation_timeout <= 0:
            raise ConfigurationError("GEOLOCATION_TIMEOUT_SECONDS must be positive")
