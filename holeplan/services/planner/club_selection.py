"""Rule-based club filtering and distance-to-club helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

from .clubs import (
    DRIVER,
    MIN_TARGET_DISTANCE,
    TEE_CLUBS,
    TROUBLE_LIE_BANNED_CLUBS,
    club_category,
    normalize_club_id,
    sorted_by_distance,
)
from .environment import effective_reach
from .models import EffectiveReach, LieType, Weather

APPROACH_SHORT_TOLERANCE = 5.0
APPROACH_LONG_TOLERANCE = 15.0
MAX_OVERREACH_RATIO = 1.67
# float slack for reach windows computed from geodesic distances
_EPSILON = 1e-6

LIE_DISTANCE_FACTORS: dict[str, float] = {
    "tee": 1.0,
    "fairway": 1.0,
    "rough": 0.9,
    "heavy_rough": 0.8,
    "bunker": 0.95,
    "divot": 0.9,
    "hardpan": 0.9,
}
PRIMARY_GAP_MIN = -5.0
PRIMARY_GAP_MAX = 10.0

AWKWARD_MIN = 30.0
AWKWARD_MAX = 50.0
DEFAULT_IDEAL_LEAVE = 80.0
DEFAULT_WEDGE_RANGE = (80.0, 120.0, 100.0)
WEDGE_RANGE_FLOOR = 75.0
WEDGE_RANGE_CEILING = 130.0
DEFAULT_APPROACH_DISTANCE = 120.0

_LADDER = (
    (120, "pw"),
    (140, "9_iron"),
    (155, "8_iron"),
    (170, "7_iron"),
    (185, "6_iron"),
    (200, "5_iron"),
    (220, "4_hybrid"),
    (240, "3_wood"),
)


class ShotType(str, Enum):
    TEE = "tee"
    APPROACH = "approach"
    LAYUP = "layup"


@dataclass(frozen=True, slots=True)
class ClubChoice:
    primary: str
    primary_distance: float
    alternate: Optional[str]
    alternate_distance: Optional[float]
    gap: float


@dataclass(frozen=True, slots=True)
class AwkwardDistance:
    distance: float
    suggested_leave: float
    message: str


@dataclass(frozen=True, slots=True)
class WedgeRange:
    minimum: float
    maximum: float
    sweet: float


def get_valid_clubs_for_shot(
    shot_type: ShotType | str,
    lie_type: LieType | str,
    target_distance: float,
    club_distances: Mapping[str, float],
    weather: Optional[Weather] = None,
    shot_bearing: float = 0.0,
    player_elevation: Optional[float] = None,
    target_elevation: Optional[float] = None,
) -> list[EffectiveReach]:
    """Clubs whose effective reach suits a shot of ``target_distance`` yards.

    Approach shots need reach within ``[target - 5, target + 15]``; tee shots
    and layups need reach no longer than 1.67x the target and a target at
    least the club's minimum. Driver is only playable off the tee and long
    clubs are barred from bunkers and heavy rough.
    """

    shot_type = ShotType(shot_type)
    lie = LieType(lie_type)
    valid = []
    for raw_club, distance in club_distances.items():
        club = normalize_club_id(raw_club)
        if distance <= 0:
            continue
        if club == DRIVER and shot_type is not ShotType.TEE:
            continue
        if shot_type is ShotType.TEE and club not in TEE_CLUBS:
            continue
        if lie in (LieType.BUNKER, LieType.HEAVY_ROUGH) and club in TROUBLE_LIE_BANNED_CLUBS:
            continue
        if target_distance + _EPSILON < MIN_TARGET_DISTANCE.get(club, 0.0):
            continue

        reach = effective_reach(
            club, distance, weather, shot_bearing, player_elevation, target_elevation
        )
        if shot_type is ShotType.APPROACH:
            low = target_distance - APPROACH_SHORT_TOLERANCE - _EPSILON
            high = target_distance + APPROACH_LONG_TOLERANCE + _EPSILON
            if not low <= reach.effective_reach <= high:
                continue
        elif reach.effective_reach > MAX_OVERREACH_RATIO * target_distance + _EPSILON:
            continue
        valid.append(reach)
    return valid


def select_clubs_for_distance(
    distance: float,
    club_distances: Mapping[str, float],
    lie_type: str = "fairway",
) -> Optional[ClubChoice]:
    """Primary and alternate club for a distance from the given lie."""

    factor = LIE_DISTANCE_FACTORS.get(lie_type, 1.0)
    adjusted = [(club, dist * factor) for club, dist in sorted_by_distance(club_distances)]
    if not adjusted:
        return None
    in_window = [
        item for item in adjusted if PRIMARY_GAP_MIN <= item[1] - distance <= PRIMARY_GAP_MAX
    ]
    pool = in_window or adjusted
    primary = min(pool, key=lambda item: (abs(item[1] - distance), item[1]))
    others = [item for item in adjusted if item[0] != primary[0]]
    alternate = min(others, key=lambda item: abs(item[1] - distance)) if others else None
    return ClubChoice(
        primary=primary[0],
        primary_distance=round(primary[1], 1),
        alternate=alternate[0] if alternate else None,
        alternate_distance=round(alternate[1], 1) if alternate else None,
        gap=round(primary[1] - distance, 1),
    )


def find_club_covering(
    distance: float, club_distances: Mapping[str, float]
) -> Optional[tuple[str, float]]:
    """Shortest club reaching ``distance``, else the longest club."""

    ordered = sorted_by_distance(club_distances, descending=False)
    if not ordered:
        return None
    for club, club_distance in ordered:
        if club_distance >= distance:
            return club, club_distance
    return ordered[-1]


def default_club_for_distance(distance: float) -> str:
    for limit, club in _LADDER:
        if distance <= limit:
            return club
    return DRIVER


def ideal_wedge_range(club_distances: Mapping[str, float]) -> WedgeRange:
    """Full-swing scoring range from wedges and 9-iron; median is the sweet spot."""

    scoring = sorted(
        dist
        for club, dist in club_distances.items()
        if dist > 0 and (club_category(club) == "wedge" or normalize_club_id(club) == "9_iron")
    )
    if not scoring:
        return WedgeRange(*DEFAULT_WEDGE_RANGE)
    return WedgeRange(
        minimum=max(WEDGE_RANGE_FLOOR, scoring[0]),
        maximum=min(WEDGE_RANGE_CEILING, scoring[-1]),
        sweet=scoring[len(scoring) // 2],
    )


def ideal_approach_distance(club_distances: Mapping[str, float]) -> float:
    wedges = [
        dist for club, dist in club_distances.items() if dist > 0 and club_category(club) == "wedge"
    ]
    if wedges:
        return max(wedges)
    for club in ("9_iron", "pw"):
        if club_distances.get(club, 0) > 0:
            return float(club_distances[club])
    return DEFAULT_APPROACH_DISTANCE


def detect_awkward_distance(
    distance_after: float, club_distances: Mapping[str, float]
) -> Optional[AwkwardDistance]:
    """Flag a leave of 30-50 yards and suggest a full-wedge leave instead."""

    if not AWKWARD_MIN <= distance_after <= AWKWARD_MAX:
        return None
    wedges = [
        dist for club, dist in club_distances.items() if dist > 0 and club_category(club) == "wedge"
    ]
    suggested = min(wedges) + 10 if wedges else DEFAULT_IDEAL_LEAVE
    return AwkwardDistance(
        distance=round(distance_after, 1),
        suggested_leave=suggested,
        message=(
            f"{distance_after:.0f} yards is an awkward half swing - "
            f"consider leaving {suggested:.0f} yards"
        ),
    )


__all__ = [
    "AwkwardDistance",
    "ClubChoice",
    "ShotType",
    "WedgeRange",
    "default_club_for_distance",
    "detect_awkward_distance",
    "find_club_covering",
    "get_valid_clubs_for_shot",
    "ideal_approach_distance",
    "ideal_wedge_range",
    "select_clubs_for_distance",
]
