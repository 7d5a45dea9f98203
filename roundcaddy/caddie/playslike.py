"""Plays-like distance: the yardage a shot effectively plays after conditions."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from roundcaddy.metrics.playslike_metrics import observe_adjustment

FEET_PER_METRE = 3.28084
BASELINE_TEMP_F = 70.0
BASELINE_HUMIDITY_PCT = 50.0


def _round_half_away(value: float) -> int:
    """Round to the nearest yard with .5 moving away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


@dataclass
class PlaysLikeConditions:
    wind_speed_mph: Optional[float] = None
    wind_from_deg: Optional[float] = None
    bearing_deg: Optional[float] = None
    elevation_change_ft: Optional[float] = None
    temperature_f: Optional[float] = None
    humidity_pct: Optional[float] = None
    altitude_m: Optional[float] = None


@dataclass(frozen=True)
class PlaysLikeAdjustments:
    wind: int = 0
    slope: int = 0
    temperature: int = 0
    humidity: int = 0
    altitude: int = 0

    @property
    def total(self) -> int:
        return self.wind + self.slope + self.temperature + self.humidity + self.altitude


def wind_adjustment(
    speed_mph: Optional[float],
    wind_from_deg: Optional[float],
    bearing_deg: Optional[float],
) -> int:
    # + = headwind (plays longer), - = tailwind
    if speed_mph is None or wind_from_deg is None or bearing_deg is None:
        return 0
    relative = math.radians(wind_from_deg - bearing_deg)
    return _round_half_away(speed_mph * math.cos(relative))


def slope_adjustment(elevation_change_ft: Optional[float]) -> int:
    if elevation_change_ft is None:
        return 0
    return _round_half_away(elevation_change_ft / 3.0)


def temperature_adjustment(temperature_f: Optional[float]) -> int:
    if temperature_f is None:
        return 0
    return _round_half_away((BASELINE_TEMP_F - temperature_f) / 10.0 * 2.0)


def humidity_adjustment(humidity_pct: Optional[float]) -> int:
    if humidity_pct is None:
        return 0
    return _round_half_away(-((humidity_pct - BASELINE_HUMIDITY_PCT) / 25.0))


def altitude_adjustment(distance_yards: float, altitude_m: Optional[float]) -> int:
    if altitude_m is None:
        return 0
    altitude_ft = altitude_m * FEET_PER_METRE
    return _round_half_away(-(distance_yards * altitude_ft / 1000.0 * 0.02))


def compute_adjustments(
    distance_yards: float, conditions: PlaysLikeConditions
) -> PlaysLikeAdjustments:
    return PlaysLikeAdjustments(
        wind=wind_adjustment(
            conditions.wind_speed_mph, conditions.wind_from_deg, conditions.bearing_deg
        ),
        slope=slope_adjustment(conditions.elevation_change_ft),
        temperature=temperature_adjustment(conditions.temperature_f),
        humidity=humidity_adjustment(conditions.humidity_pct),
        altitude=altitude_adjustment(distance_yards, conditions.altitude_m),
    )


def plays_like(
    distance_yards: int, conditions: PlaysLikeConditions
) -> Tuple[int, PlaysLikeAdjustments]:
    """Return the plays-like yardage and the per-factor breakdown."""
    adjustments = compute_adjustments(distance_yards, conditions)
    observe_adjustment(adjustments.total)
    return distance_yards + adjustments.total, adjustments


@dataclass(frozen=True)
class AdjustmentFactor:
    name: str
    yards: int
    label: str


def _label(yards: int, positive: str, negative: str) -> str:
    return positive if yards > 0 else negative


def describe_adjustments(adjustments: PlaysLikeAdjustments) -> List[AdjustmentFactor]:
    candidates = [
        ("wind", adjustments.wind, _label(adjustments.wind, "Into wind", "Downwind")),
        ("slope", adjustments.slope, _label(adjustments.slope, "Uphill", "Downhill")),
        (
            "temperature",
            adjustments.temperature,
            _label(adjustments.temperature, "Cold air", "Warm air"),
        ),
        (
            "humidity",
            adjustments.humidity,
            _label(adjustments.humidity, "Dry air", "Humid air"),
        ),
        ("altitude", adjustments.altitude, "Altitude"),
    ]
    return [
        AdjustmentFactor(name=name, yards=yards, label=label)
        for name, yards, label in candidates
        if yards != 0
    ]


__all__ = [
    "AdjustmentFactor",
    "PlaysLikeAdjustments",
    "PlaysLikeConditions",
    "compute_adjustments",
    "describe_adjustments",
    "plays_like",
]
