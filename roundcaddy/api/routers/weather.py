from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pydantic import BaseModel

from roundcaddy.providers import ProviderError, get_weather
from roundcaddy.security import require_api_key

router = APIRouter(tags=["weather"], dependencies=[Depends(require_api_key)])


class WeatherOut(BaseModel):
    temperature_f: float
    wind_speed_mph: float
    wind_direction_deg: float
    wind_direction: str
    humidity_pct: float
    conditions: str
    icon: str
    is_good_for_golf: bool


@router.get("/api/weather", response_model=WeatherOut)
def read_weather(
    response: Response,
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
) -> WeatherOut:
    try:
        report = get_weather(lat, lon)
    except ProviderError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))

    response.headers["ETag"] = f'"{report.etag}"'
    response.headers["Cache-Control"] = f"public, max-age={report.ttl_seconds}"
    return WeatherOut(
        temperature_f=report.temperature_f,
        wind_speed_mph=report.wind_speed_mph,
        wind_direction_deg=report.wind_direction_deg,
        wind_direction=report.wind_direction,
        humidity_pct=report.humidity_pct,
        conditions=report.conditions,
        icon=report.icon,
        is_good_for_golf=report.is_good_for_golf,
    )


__all__ = ["router"]
