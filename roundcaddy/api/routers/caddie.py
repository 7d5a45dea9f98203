"""API surface for plays-like distances."""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from roundcaddy.caddie.playslike import (
    PlaysLikeConditions,
    describe_adjustments,
    plays_like,
)
from roundcaddy.providers import ProviderError, get_weather
from roundcaddy.security import require_api_key

router = APIRouter(dependencies=[Depends(require_api_key)])

logger = logging.getLogger(__name__)


class PlaysLikeIn(BaseModel):
    distance_yards: int = Field(gt=0)
    wind_speed_mph: Optional[float] = Field(default=None, ge=0)
    wind_from_deg: Optional[float] = None
    bearing_deg: Optional[float] = None
    elevation_change_ft: Optional[float] = None
    temperature_f: Optional[float] = None
    humidity_pct: Optional[float] = Field(default=None, ge=0, le=100)
    altitude_m: Optional[float] = None
    # When both are set, missing wind/temperature/humidity come from live weather.
    lat: Optional[float] = Field(default=None, ge=-90, le=90)
    lon: Optional[float] = Field(default=None, ge=-180, le=180)


class AdjustmentsOut(BaseModel):
    wind: int
    slope: int
    temperature: int
    humidity: int
    altitude: int
    total: int


class FactorOut(BaseModel):
    name: str
    yards: int
    label: str


class PlaysLikeOut(BaseModel):
    distance_yards: int
    plays_like_yards: int
    adjustments: AdjustmentsOut
    factors: List[FactorOut]


def _conditions_from(body: PlaysLikeIn) -> PlaysLikeConditions:
    conditions = PlaysLikeConditions(
        wind_speed_mph=body.wind_speed_mph,
        wind_from_deg=body.wind_from_deg,
        bearing_deg=body.bearing_deg,
        elevation_change_ft=body.elevation_change_ft,
        temperature_f=body.temperature_f,
        humidity_pct=body.humidity_pct,
        altitude_m=body.altitude_m,
    )
    if body.lat is None or body.lon is None:
        return conditions

    report = get_weather(body.lat, body.lon)
    if conditions.wind_speed_mph is None:
        conditions.wind_speed_mph = report.wind_speed_mph
    if conditions.wind_from_deg is None:
        conditions.wind_from_deg = report.wind_direction_deg
    if conditions.temperature_f is None:
        conditions.temperature_f = report.temperature_f
    if conditions.humidity_pct is None:
        conditions.humidity_pct = report.humidity_pct
    return conditions


@router.post("/api/caddie/plays-like", response_model=PlaysLikeOut)
def post_plays_like(body: PlaysLikeIn) -> PlaysLikeOut:
    """Return the plays-like distance with its per-factor breakdown."""
    try:
        conditions = _conditions_from(body)
    except ProviderError as exc:
        logger.warning(
            "weather lookup for plays-like failed", extra={"error": str(exc)}
        )
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))

    effective, adjustments = plays_like(body.distance_yards, conditions)
    return PlaysLikeOut(
        distance_yards=body.distance_yards,
        plays_like_yards=effective,
        adjustments=AdjustmentsOut(
            wind=adjustments.wind,
            slope=adjustments.slope,
            temperature=adjustments.temperature,
            humidity=adjustments.humidity,
            altitude=adjustments.altitude,
            total=adjustments.total,
        ),
        factors=[
            FactorOut(name=f.name, yards=f.yards, label=f.label)
            for f in describe_adjustments(adjustments)
        ],
    )


__all__ = ["router"]
