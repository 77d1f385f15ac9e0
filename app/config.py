"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

_PROJECT_ROOT = Path(__file__).resolve().parents[1]


def load_env_files(project_root: Path | None = None) -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    root = project_root or _PROJECT_ROOT
    for filename in (".env", ".env.local"):
        env_path = root / filename
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


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _get_list_env(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw_value = _get_optional_str_env(name)
    if raw_value is None:
        return default
    items = tuple(item.strip() for item in raw_value.split(",") if item.strip())
    return items or default


@dataclass(frozen=True)
class DataSettings:
    """
    Location of the surveillance data tree and its distinguished tables.
    """

    root: Path
    gps_log_path: str = "F2/gps_log.csv"
    system_metrics_path: str = "floMobility123_F1/system_metrics.csv"
    metadata_filename: str = "metadata.csv"
    images_dirname: str = "images"
    read_workers: int = 4


@dataclass(frozen=True)
class APISettings:
    """
    HTTP-facing defaults.
    """

    cors_allow_origins: tuple[str, ...] = ("*",)
    search_default_limit: int = 100
    heatmap_default_precision: int = 4
    port: int = 8081


def _require_data_root() -> Path:
    """
    Read SURVEILLANCE_DATA_PATH from the environment.

    The variable must be set and non-empty; the directory itself may be
    missing at startup and is reported by the startup scan instead.
    """

    raw = _get_optional_str_env("SURVEILLANCE_DATA_PATH")
    if raw is None:
        raise RuntimeError("SURVEILLANCE_DATA_PATH must be set to the surveillance data directory.")
    return Path(raw).expanduser()


@lru_cache(maxsize=1)
def get_data_settings() -> DataSettings:
    """
    Return cached data-tree settings from environment variables.

    Raises RuntimeError if SURVEILLANCE_DATA_PATH is missing.
    """

    return DataSettings(
        root=_require_data_root(),
        gps_log_path=_get_str_env("GPS_LOG_PATH", "F2/gps_log.csv"),
        system_metrics_path=_get_str_env("SYSTEM_METRICS_PATH", "floMobility123_F1/system_metrics.csv"),
        metadata_filename=_get_str_env("METADATA_FILENAME", "metadata.csv"),
        images_dirname=_get_str_env("IMAGES_DIRNAME", "images"),
        read_workers=max(1, _get_int_env("DATA_READ_WORKERS", 4)),
    )


@lru_cache(maxsize=1)
def get_api_settings() -> APISettings:
    """
    Return cached API settings from environment variables.
    """

    return APISettings(
        cors_allow_origins=_get_list_env("CORS_ALLOW_ORIGINS", ("*",)),
        search_default_limit=max(1, _get_int_env("SEARCH_DEFAULT_LIMIT", 100)),
        heatmap_default_precision=min(8, max(0, _get_int_env("HEATMAP_DEFAULT_PRECISION", 4))),
        port=_get_int_env("PORT", 8081),
    )
