from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict, Tuple

import httpx

from roundcaddy.config import WEATHER_CACHE_TTL_S, get_settings

from .cache import CacheEntry, ProviderCache
from .errors import ProviderError

_CURRENT_FIELDS = (
    "temperature_2m,relative_humidity_2m,precipitation,"
    "weather_code,wind_speed_10m,wind_direction_10m"
)
_COMPASS_POINTS = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
)  # fmt: skip

_cache = ProviderCache("weather", WEATHER_CACHE_TTL_S)


@dataclass
class WeatherReport:
    temperature_f: float
    wind_speed_mph: float
    wind_direction_deg: float
    humidity_pct: float
    weather_code: int
    etag: str
    expires_at: float

    @property
    def ttl_seconds(self) -> int:
        return max(0, int(self.expires_at - time.time()))

    @property
    def conditions(self) -> str:
        return weather_conditions(self.weather_code)[0]

    @property
    def icon(self) -> str:
        return weather_conditions(self.weather_code)[1]

    @property
    def wind_direction(self) -> str:
        return wind_direction_label(self.wind_direction_deg)

    @property
    def is_good_for_golf(self) -> bool:
        return 50 <= self.temperature_f <= 95 and self.wind_speed_mph <= 20


def weather_conditions(code: int) -> Tuple[str, str]:
    """Map a WMO weather code to a (label, icon) pair."""

    if code == 0:
        return "Clear", "sun"
    if code in (1, 2):
        return "Partly Cloudy", "cloud.sun"
    if code == 3:
        return "Cloudy", "cloud"
    if code in (45, 48):
        return "Foggy", "cloud.fog"
    if code in (51, 53, 55, 61, 63, 65, 80, 81, 82):
        return "Rainy", "cloud.rain"
    if code in (71, 73, 75, 77, 85, 86):
        return "Snow", "snowflake"
    if code in (95, 96, 99):
        return "Thunderstorm", "cloud.bolt"
    return "Unknown", "questionmark"


def wind_direction_label(degrees: float) -> str:
    index = int(((degrees % 360) + 11.25) / 22.5) % 16
    return _COMPASS_POINTS[index]


def _http_client_factory(**kwargs: Any) -> httpx.Client:
    timeout = kwargs.pop("timeout", 10.0)
    return httpx.Client(timeout=timeout, **kwargs)


def _cache_key(lat: float, lon: float) -> str:
    return f"{lat:.3f},{lon:.3f}"


def _cache_entry_to_report(entry: CacheEntry) -> WeatherReport:
    data = entry.value
    return WeatherReport(
        temperature_f=float(data["temperature_f"]),
        wind_speed_mph=float(data["wind_speed_mph"]),
        wind_direction_deg=float(data["wind_direction_deg"]),
        humidity_pct=float(data["humidity_pct"]),
        weather_code=int(data["weather_code"]),
        etag=entry.etag,
        expires_at=entry.expires_at,
    )


def get_weather(lat: float, lon: float) -> WeatherReport:
    key = _cache_key(lat, lon)
    entry = _cache.get(key)
    if entry:
        return _cache_entry_to_report(entry)

    payload = _fetch_current(lat, lon)
    entry = _cache.set(key, payload, ttl=WEATHER_CACHE_TTL_S)
    return _cache_entry_to_report(entry)


def _fetch_current(lat: float, lon: float) -> Dict[str, float]:
    settings = get_settings()
    params = {
        "latitude": lat,
        "longitude": lon,
        "current": _CURRENT_FIELDS,
        "temperature_unit": "fahrenheit",
        "wind_speed_unit": "mph",
    }
    try:
        with _http_client_factory(timeout=settings.http_timeout_s) as client:
            response = client.get(settings.open_meteo_url, params=params)
    except httpx.RequestError as exc:
        raise ProviderError(f"open-meteo forecast request failed: {exc}") from exc
    if response.status_code != 200:
        raise ProviderError(
            f"open-meteo forecast failed: {response.status_code}",
            status_code=response.status_code,
        )
    try:
        payload = response.json()
    except ValueError as exc:
        raise ProviderError("open-meteo forecast returned invalid JSON") from exc
    current = payload.get("current") if isinstance(payload, dict) else None
    if not isinstance(current, dict):
        raise ProviderError("open-meteo current conditions missing")
    return {
        "temperature_f": _current_value(current, "temperature_2m"),
        "wind_speed_mph": _current_value(current, "wind_speed_10m"),
        "wind_direction_deg": _current_value(current, "wind_direction_10m"),
        "humidity_pct": _current_value(current, "relative_humidity_2m"),
        "weather_code": int(_current_value(current, "weather_code")),
    }


def _current_value(current: Dict[str, Any], field: str) -> float:
    value = current.get(field)
    if value is None:
        raise ProviderError(f"open-meteo {field} null value")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ProviderError(f"open-meteo {field} invalid value") from exc


__all__ = [
    "WeatherReport",
    "get_weather",
    "weather_conditions",
    "wind_direction_label",
]
