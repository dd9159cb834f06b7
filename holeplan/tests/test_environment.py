from __future__ import annotations

import pytest

from holeplan.services.planner.environment import (
    analyze_wind,
    effective_reach,
    plays_like,
    plays_like_distance,
    wind_bearing,
    wind_components,
)
from holeplan.services.planner.models import Weather


def test_calm_conditions_play_true() -> None:
    assert plays_like_distance(150.0) == pytest.approx(150.0)
    reach = effective_reach("7_iron", 150.0)
    assert reach.effective_reach == pytest.approx(150.0)
    assert reach.adjustments.total == pytest.approx(0.0)


def test_wind_components_for_direct_headwind() -> None:
    headwind, crosswind = wind_components(15.0, "N", 0.0)
    assert headwind == pytest.approx(15.0)
    assert crosswind == pytest.approx(0.0, abs=1e-9)


def test_unknown_wind_direction_is_ignored() -> None:
    assert wind_bearing("XYZ") is None
    assert wind_components(20.0, "XYZ", 0.0) == (0.0, 0.0)


def test_headwind_lengthens_and_tailwind_shortens() -> None:
    into = Weather(wind_speed=15, wind_direction="N")
    helping = Weather(wind_speed=15, wind_direction="S")
    assert plays_like_distance(150.0, into, 0.0) > 150.0
    assert plays_like_distance(150.0, helping, 0.0) < 150.0
    assert plays_like_distance(150.0, into, 0.0) == pytest.approx(168.0)


@pytest.mark.parametrize(
    "weather",
    [
        Weather(wind_speed=12, wind_direction="NE", temperature=50, course_elevation=5000),
        Weather(wind_speed=8, wind_direction="S", temperature=95),
        Weather(temperature=40, course_elevation=-200),
    ],
)
def test_effective_reach_inverts_plays_like(weather: Weather) -> None:
    reach = effective_reach("6_iron", 170.0, weather, 20.0, 10.0, 40.0)
    assert plays_like_distance(reach.effective_reach, weather, 20.0, 10.0, 40.0) == (
        pytest.approx(170.0, abs=1e-6)
    )


def test_reach_is_monotone_in_club_distance() -> None:
    weather = Weather(wind_speed=10, wind_direction="W", temperature=60)
    reaches = [
        effective_reach("x", distance, weather, 45.0).effective_reach
        for distance in (100, 130, 160, 190, 220)
    ]
    assert reaches == sorted(reaches)


def test_uphill_target_plays_longer() -> None:
    flat = plays_like_distance(150.0)
    uphill = plays_like_distance(150.0, None, 0.0, 0.0, 30.0)
    assert uphill == pytest.approx(flat + 10.0)


def test_altitude_and_cold_cancel_directionally() -> None:
    high = Weather(course_elevation=5000)
    cold = Weather(temperature=40)
    assert plays_like_distance(150.0, high) < 150.0
    assert plays_like_distance(150.0, cold) > 150.0


def test_plays_like_breakdown_describes_conditions() -> None:
    weather = Weather(wind_speed=15, wind_direction="N", temperature=45)
    result = plays_like(150.0, weather, 0.0)
    assert result.base_distance == 150.0
    assert result.plays_like > 150.0
    assert result.adjustments.wind > 0
    assert result.adjustments.temperature > 0
    assert result.wind.effect == "into"
    assert "Cold conditions" in result.temperature_description
    assert result.summary.startswith("150 yards plays like")


def test_crosswind_aims_into_the_wind() -> None:
    analysis = analyze_wind(Weather(wind_speed=10, wind_direction="W"), 0.0, 150.0)
    assert analysis.crosswind > 0
    assert analysis.aim_direction == "left"
    assert analysis.aim_offset == 20.0
    assert analysis.effect == "crosswind-right"


def test_headwind_rate_is_configurable(monkeypatch: pytest.MonkeyPatch) -> None:
    from holeplan.config import reset_settings_cache

    monkeypatch.setenv("HOLEPLAN_HEADWIND_PCT_PER_MPH", "0.01")
    reset_settings_cache()
    into = Weather(wind_speed=10, wind_direction="N")
    assert plays_like_distance(100.0, into, 0.0) == pytest.approx(110.0)


def test_stronger_headwind_strictly_shortens_reach() -> None:
    reaches = [
        effective_reach(
            "7_iron", 165.0, Weather(wind_speed=speed, wind_direction="N"), 0.0
        ).effective_reach
        for speed in range(0, 60, 5)
    ]
    assert reaches[0] == pytest.approx(165.0)
    assert all(longer > shorter for longer, shorter in zip(reaches, reaches[1:]))


def test_unreachable_uphill_target_books_loss_to_elevation() -> None:
    reach = effective_reach("pw", 100.0, None, 0.0, 0.0, 600.0)
    assert reach.effective_reach == 0.0
    assert reach.adjustments.wind == 0.0
    assert reach.adjustments.temperature == 0.0
    assert reach.adjustments.elevation == pytest.approx(-100.0)
    assert reach.adjustments.total == pytest.approx(-100.0)
