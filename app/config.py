"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from db.config import load_env_files


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_timezone_env(name: str, default: str) -> str:
    """
    Read an IANA timezone name, falling back when the zone is unknown.
    """

    candidate = _get_str_env(name, default)
    try:
        ZoneInfo(candidate)
    except (ZoneInfoNotFoundError, ValueError):
        return default
    return candidate


@dataclass(frozen=True)
class DataImportSettings:
    """
    Runtime settings for the bulk data-import pipeline.

    Chunk size and the rollback window are part of the import contract and
    are not read from the environment.
    """

    default_timezone: str = "UTC"
    max_rows: int = 50_000
    log_validation_errors: bool = True
    history_limit: int = 50


@lru_cache(maxsize=1)
def get_data_import_settings() -> DataImportSettings:
    """
    Return cached data-import settings from environment variables.
    """

    return DataImportSettings(
        default_timezone=_get_timezone_env("IMPORT_DEFAULT_TIMEZONE", "UTC"),
        max_rows=max(1, _get_int_env("IMPORT_MAX_ROWS", 50_000)),
        log_validation_errors=_get_bool_env("IMPORT_LOG_VALIDATION_ERRORS", True),
        history_limit=max(1, _get_int_env("IMPORT_HISTORY_LIMIT", 50)),
    )
