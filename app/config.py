"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

_PROJECT_ROOT = Path(__file__).resolve().parents[1]
_DEFAULT_FIXTURE_PATH = Path(__file__).resolve().parent / "data" / "fixtures.json"

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    for filename in (".env", ".env.local"):
        env_path = _PROJECT_ROOT / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


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


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
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


@dataclass(frozen=True)
class DashboardSettings:
    """
    Settings for the Streamlit dashboard shell.
    """

    page_title: str = "Aadhaar Activity Dashboard"
    fixture_path: Path = _DEFAULT_FIXTURE_PATH
    log_level: str = "INFO"


@dataclass(frozen=True)
class CSVSourceSettings:
    """
    Runtime settings for CSV dataset loading.

    ``data_root`` may be a local directory or an ``http(s)`` base URL.
    """

    data_root: str = "data"
    timeout_seconds: float = 15.0
    max_workers: int = 4


@lru_cache(maxsize=1)
def get_dashboard_settings() -> DashboardSettings:
    """
    Return cached dashboard settings from environment variables.
    """

    fixture_raw = _get_str_env("DASHBOARD_FIXTURE_PATH", "")
    return DashboardSettings(
        page_title=_get_str_env("DASHBOARD_PAGE_TITLE", "Aadhaar Activity Dashboard"),
        fixture_path=Path(fixture_raw) if fixture_raw else _DEFAULT_FIXTURE_PATH,
        log_level=_get_str_env("LOG_LEVEL", "INFO").upper(),
    )


@lru_cache(maxsize=1)
def get_csv_source_settings() -> CSVSourceSettings:
    """
    Return cached CSV source settings from environment variables.
    """

    return CSVSourceSettings(
        data_root=_get_str_env("CSV_DATA_ROOT", "data"),
        timeout_seconds=max(1.0, _get_float_env("CSV_HTTP_TIMEOUT_SECONDS", 15.0)),
        max_workers=max(1, _get_int_env("CSV_MAX_WORKERS", 4)),
    )


def configure_logging(level: str | None = None) -> None:
    """
    Configure root logging once for the dashboard process.
    """

    log_level = (level or get_dashboard_settings().log_level).strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format=LOG_FORMAT,
    )
