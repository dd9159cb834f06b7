"""Plays-like adjustments for wind, temperature and elevation.

The forward model maps a raw distance to the distance it *plays like*::

    after_wind = d * (1 + wind_pct)
    after_temp = after_wind * (1 + temp_pct)
    plays_like = after_temp + slope - after_temp * altitude_pct

``effective_reach`` is its exact algebraic inverse: the raw distance a club
of nominal carry ``C`` reaches once the same conditions are applied, so
``plays_like_distance(effective_reach(C)) == C`` up to float error.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from holeplan.config import get_settings
from holeplan.geometry import signed_angle

from .models import (
    CALM,
    Adjustments,
    EffectiveReach,
    PlaysLike,
    Weather,
    WindAnalysis,
    ZERO_ADJUSTMENTS,
)

CARDINAL_BEARINGS: dict[str, float] = {
    label: index * 22.5
    for index, label in enumerate(
        (
            "N",
            "NNE",
            "NE",
            "ENE",
            "E",
            "ESE",
            "SE",
            "SSE",
            "S",
            "SSW",
            "SW",
            "WSW",
            "W",
            "WNW",
            "NW",
            "NNW",
        )
    )
}

BASELINE_TEMPERATURE_F = 70.0
TEMPERATURE_PCT_PER_DEGREE = 0.002
MIN_TEMPERATURE_F = -40.0
MAX_TEMPERATURE_F = 130.0
ALTITUDE_PCT_PER_1000_FT = 0.02
MIN_ALTITUDE_PCT = -0.2
MAX_ALTITUDE_PCT = 0.5
FEET_PER_YARD_OF_SLOPE = 3.0
MIN_WIND_PCT = -0.5


@dataclass(frozen=True, slots=True)
class ConditionFactors:
    headwind: float
    crosswind: float
    wind_pct: float
    temperature: float
    temperature_pct: float
    slope_yards: float
    altitude_pct: float
    course_elevation: float


def wind_bearing(direction: Optional[str]) -> Optional[float]:
    """Bearing the wind blows *from*, or ``None`` for unknown labels."""

    if not direction:
        return None
    return CARDINAL_BEARINGS.get(direction.strip().upper())


def wind_components(
    speed: float, direction: Optional[str], shot_bearing: float
) -> tuple[float, float]:
    """Return ``(headwind, crosswind)`` mph; crosswind > 0 pushes the ball right."""

    source = wind_bearing(direction)
    if speed <= 0 or source is None:
        return 0.0, 0.0
    diff = math.radians(signed_angle(shot_bearing - source))
    return speed * math.cos(diff), speed * math.sin(diff)


def _wind_effect_label(speed: float, headwind: float, crosswind: float) -> str:
    if speed <= 0 or (headwind == 0 and crosswind == 0):
        return "calm"
    if abs(headwind) > 2 * abs(crosswind):
        return "into" if headwind > 0 else "helping"
    side = "right" if crosswind > 0 else "left"
    if abs(crosswind) > 2 * abs(headwind):
        return f"crosswind-{side}"
    return f"{'into' if headwind > 0 else 'helping'}-{side}"


def _aim_factor(base_distance: float) -> float:
    if base_distance > 180:
        return 2.5
    if base_distance > 140:
        return 2.0
    return 1.5


def analyze_wind(
    weather: Optional[Weather],
    shot_bearing: float,
    base_distance: float,
    distance_effect: float = 0.0,
) -> WindAnalysis:
    weather = weather or CALM
    headwind, crosswind = wind_components(
        weather.wind_speed, weather.wind_direction, shot_bearing
    )
    aim_offset = float(round(abs(crosswind) * _aim_factor(base_distance)))
    if crosswind > 0:
        aim_direction: Optional[str] = "left"
    elif crosswind < 0:
        aim_direction = "right"
    else:
        aim_direction = None

    parts = []
    if abs(distance_effect) >= 5:
        parts.append(f"{distance_effect:+.0f} yards for wind.")
    if aim_offset >= 3 and aim_direction:
        parts.append(
            f"Aim {aim_offset:.0f} yards {aim_direction} to compensate for crosswind."
        )
    description = " ".join(parts) or "Minimal wind effect on this shot."

    return WindAnalysis(
        headwind=round(headwind, 2),
        crosswind=round(crosswind, 2),
        aim_offset=aim_offset,
        aim_direction=aim_direction,
        effect=_wind_effect_label(weather.wind_speed, headwind, crosswind),
        description=description,
    )


def _wind_pct(headwind: float) -> float:
    settings = get_settings()
    if headwind > 0:
        pct = headwind * settings.headwind_pct_per_mph
    else:
        pct = headwind * settings.tailwind_pct_per_mph
    return max(MIN_WIND_PCT, pct)


def condition_factors(
    weather: Optional[Weather],
    shot_bearing: float,
    player_elevation: Optional[float] = None,
    target_elevation: Optional[float] = None,
) -> ConditionFactors:
    """Resolve weather and elevations into the coefficients of the model."""

    weather = weather or CALM
    headwind, crosswind = wind_components(
        weather.wind_speed, weather.wind_direction, shot_bearing
    )
    temperature = (
        BASELINE_TEMPERATURE_F if weather.temperature is None else weather.temperature
    )
    temperature = min(MAX_TEMPERATURE_F, max(MIN_TEMPERATURE_F, temperature))
    slope = 0.0
    if player_elevation is not None and target_elevation is not None:
        slope = (target_elevation - player_elevation) / FEET_PER_YARD_OF_SLOPE
    altitude_pct = ALTITUDE_PCT_PER_1000_FT * weather.course_elevation / 1000.0
    altitude_pct = min(MAX_ALTITUDE_PCT, max(MIN_ALTITUDE_PCT, altitude_pct))
    return ConditionFactors(
        headwind=headwind,
        crosswind=crosswind,
        wind_pct=_wind_pct(headwind),
        temperature=temperature,
        temperature_pct=TEMPERATURE_PCT_PER_DEGREE
        * (BASELINE_TEMPERATURE_F - temperature),
        slope_yards=slope,
        altitude_pct=altitude_pct,
        course_elevation=weather.course_elevation,
    )


def _forward(distance: float, factors: ConditionFactors) -> tuple[float, Adjustments]:
    after_wind = distance * (1 + factors.wind_pct)
    after_temp = after_wind * (1 + factors.temperature_pct)
    elevation = factors.slope_yards - after_temp * factors.altitude_pct
    plays_like = after_temp + elevation
    return plays_like, Adjustments(
        wind=after_wind - distance,
        temperature=after_temp - after_wind,
        elevation=elevation,
        total=plays_like - distance,
    )


def plays_like_distance(
    distance: float,
    weather: Optional[Weather] = None,
    shot_bearing: float = 0.0,
    player_elevation: Optional[float] = None,
    target_elevation: Optional[float] = None,
) -> float:
    factors = condition_factors(weather, shot_bearing, player_elevation, target_elevation)
    return _forward(distance, factors)[0]


def _temperature_description(temperature: float, delta: float) -> str:
    if abs(delta) < 1:
        return "Temperature has minimal effect on distance"
    if temperature < BASELINE_TEMPERATURE_F:
        return (
            f"Cold conditions ({temperature:.0f}\N{DEGREE SIGN}F) - ball travels "
            f"{abs(delta):.0f} yards shorter"
        )
    return (
        f"Warm conditions ({temperature:.0f}\N{DEGREE SIGN}F) - ball travels "
        f"{abs(delta):.0f} yards farther"
    )


def _elevation_description(
    factors: ConditionFactors, altitude_delta: float
) -> str:
    parts = []
    if round(factors.slope_yards) != 0:
        feet = abs(factors.slope_yards * FEET_PER_YARD_OF_SLOPE)
        label = "uphill" if factors.slope_yards > 0 else "downhill"
        parts.append(f"{label} {feet:.0f}ft ({factors.slope_yards:+.0f} yards)")
    if round(altitude_delta) != 0:
        if altitude_delta > 0:
            parts.append(
                f"altitude bonus -{altitude_delta:.0f} yards "
                f"({factors.course_elevation:.0f}ft elevation)"
            )
        else:
            parts.append(
                f"below sea level +{abs(altitude_delta):.0f} yards "
                f"({factors.course_elevation:.0f}ft elevation)"
            )
    return ", ".join(parts) or "No significant elevation effect"


def plays_like(
    distance: float,
    weather: Optional[Weather] = None,
    shot_bearing: float = 0.0,
    player_elevation: Optional[float] = None,
    target_elevation: Optional[float] = None,
) -> PlaysLike:
    """Full plays-like breakdown for a raw distance to a target."""

    factors = condition_factors(weather, shot_bearing, player_elevation, target_elevation)
    result, adjustments = _forward(distance, factors)
    altitude_delta = (distance + adjustments.wind + adjustments.temperature) * (
        factors.altitude_pct
    )

    if abs(adjustments.total) < 3:
        summary = f"{distance:.0f} yards - plays true to distance"
    else:
        parts = []
        for label, value in (
            ("wind", adjustments.wind),
            ("temp", adjustments.temperature),
            ("elevation", adjustments.elevation),
        ):
            if abs(value) >= 0.5:
                parts.append(f"{label} {value:+.0f}")
        summary = f"{distance:.0f} yards plays like {result:.0f} ({', '.join(parts)})"

    return PlaysLike(
        base_distance=round(distance, 1),
        plays_like=round(result, 1),
        adjustments=adjustments.rounded(),
        wind=analyze_wind(weather, shot_bearing, distance, adjustments.wind),
        temperature_description=_temperature_description(
            factors.temperature, adjustments.temperature
        ),
        elevation_description=_elevation_description(factors, altitude_delta),
        summary=summary,
    )


def effective_reach(
    club_id: str,
    club_distance: float,
    weather: Optional[Weather] = None,
    shot_bearing: float = 0.0,
    player_elevation: Optional[float] = None,
    target_elevation: Optional[float] = None,
) -> EffectiveReach:
    """Raw distance a club covers under the given conditions.

    Adjustments are reported as landing shifts, negative when the conditions
    cost distance. Values are kept unrounded.
    """

    if club_distance <= 0:
        return EffectiveReach(club_id, club_distance, 0.0, ZERO_ADJUSTMENTS)

    factors = condition_factors(weather, shot_bearing, player_elevation, target_elevation)
    after_elevation = (club_distance - factors.slope_yards) / (1 - factors.altitude_pct)
    if after_elevation <= 0:
        # an uphill target the club cannot carry; the whole club goes to elevation
        lost = Adjustments(elevation=-club_distance, total=-club_distance)
        return EffectiveReach(club_id, club_distance, 0.0, lost)
    after_temp = after_elevation / (1 + factors.temperature_pct)
    reach = after_temp / (1 + factors.wind_pct)
    adjustments = Adjustments(
        wind=reach - after_temp,
        temperature=after_temp - after_elevation,
        elevation=after_elevation - club_distance,
        total=reach - club_distance,
    )
    return EffectiveReach(club_id, club_distance, reach, adjustments)


__all__ = [
    "CARDINAL_BEARINGS",
    "ConditionFactors",
    "analyze_wind",
    "condition_factors",
    "effective_reach",
    "plays_like",
    "plays_like_distance",
    "wind_bearing",
    "wind_components",
]
