from __future__ import annotations

import pytest

from roundcaddy.caddie.playslike import (
    PlaysLikeAdjustments,
    PlaysLikeConditions,
    altitude_adjustment,
    compute_adjustments,
    describe_adjustments,
    humidity_adjustment,
    plays_like,
    slope_adjustment,
    temperature_adjustment,
    wind_adjustment,
)


def test_no_conditions_plays_as_measured():
    distance, adjustments = plays_like(150, PlaysLikeConditions())
    assert distance == 150
    assert adjustments == PlaysLikeAdjustments()
    assert describe_adjustments(adjustments) == []


def test_total_is_sum_of_components():
    conditions = PlaysLikeConditions(
        wind_speed_mph=10,
        wind_from_deg=0,
        bearing_deg=0,
        elevation_change_ft=30,
        temperature_f=50,
        humidity_pct=75,
        altitude_m=1000,
    )

    distance, adjustments = plays_like(150, conditions)

    assert adjustments == PlaysLikeAdjustments(
        wind=10, slope=10, temperature=4, humidity=-1, altitude=-10
    )
    assert adjustments.total == 13
    assert distance == 163


@pytest.mark.parametrize(
    "wind_from, expected",
    [(0, 10), (180, -10), (90, 0), (270, 0), (60, 5)],
)
def test_wind_uses_headwind_component(wind_from, expected):
    assert wind_adjustment(10, wind_from, 0) == expected


def test_wind_needs_speed_direction_and_bearing():
    assert wind_adjustment(None, 0, 0) == 0
    assert wind_adjustment(10, None, 0) == 0
    assert wind_adjustment(10, 0, None) == 0


def test_rounding_is_half_away_from_zero():
    assert slope_adjustment(1.5) == 1
    assert slope_adjustment(-1.5) == -1
    assert temperature_adjustment(72.5) == -1
    assert temperature_adjustment(67.5) == 1


def test_each_component_ignores_missing_input():
    assert slope_adjustment(None) == 0
    assert temperature_adjustment(None) == 0
    assert humidity_adjustment(None) == 0
    assert altitude_adjustment(150, None) == 0


def test_temperature_and_humidity_baselines():
    assert temperature_adjustment(70) == 0
    assert temperature_adjustment(90) == -4
    assert humidity_adjustment(50) == 0
    assert humidity_adjustment(0) == 2


def test_altitude_scales_with_distance():
    assert altitude_adjustment(200, 1524) == -20
    assert altitude_adjustment(100, 1524) == -10


def test_describe_adjustments_labels_and_skips_zero():
    adjustments = compute_adjustments(
        150,
        PlaysLikeConditions(
            wind_speed_mph=12, wind_from_deg=180, bearing_deg=0, elevation_change_ft=-15
        ),
    )
    factors = {factor.name: factor for factor in describe_adjustments(adjustments)}
    assert set(factors) == {"wind", "slope"}
    assert factors["wind"].label == "Downwind"
    assert factors["wind"].yards == -12
    assert factors["slope"].label == "Downhill"
    assert factors["slope"].yards == -5
