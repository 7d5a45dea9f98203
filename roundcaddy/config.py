"""Configuration helpers for the RoundCaddy service."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_ROOT = Path(__file__).resolve().parent
DEFAULT_BUNDLE_PATH = PACKAGE_ROOT / "data" / "courses-bundle.json"


class _Settings(BaseSettings):
    data_dir: Path = Field(
        default=Path.home() / ".roundcaddy", alias="ROUNDCADDY_DATA_DIR"
    )
    course_bundle_path: Path = Field(
        default=DEFAULT_BUNDLE_PATH, alias="COURSE_BUNDLE_PATH"
    )
    supabase_url: str = Field(
        default="https://localhost.supabase.co", alias="SUPABASE_URL"
    )
    supabase_anon_key: str = Field(default="", alias="SUPABASE_ANON_KEY")
    course_sync_interval_hours: float = Field(
        default=24.0, alias="COURSE_SYNC_INTERVAL_HOURS"
    )
    course_sync_limit: int = Field(default=1000, alias="COURSE_SYNC_LIMIT")
    open_meteo_url: str = Field(
        default="https://api.open-meteo.com/v1/forecast", alias="OPEN_METEO_URL"
    )
    http_timeout_s: float = Field(default=10.0, alias="ROUNDCADDY_HTTP_TIMEOUT")

    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", populate_by_name=True
    )


@lru_cache(maxsize=1)
def get_settings() -> _Settings:
    """Return cached application settings."""

    return _Settings()  # type: ignore[call-arg]


def reset_settings_cache() -> None:
    """Clear cached settings (primarily for tests)."""

    get_settings.cache_clear()


def env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


NEARBY_DEFAULT_RADIUS_MILES: float = _float_env("NEARBY_DEFAULT_RADIUS_MILES", 50.0)
ROUNDS_LIST_LIMIT: int = _int_env("ROUNDS_LIST_LIMIT", 20)
WEATHER_CACHE_TTL_S: int = _int_env("WEATHER_CACHE_TTL_S", 60 * 15)

