"""Hazard conflicts, landing-zone search and hazard-aware target shifting."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from holeplan.config.scoring import hazard_severity, is_penalty_hazard
from holeplan.geometry import (
    GeoPoint,
    bearing_deg,
    distance_yards,
    min_distance_to_polygon,
    normalize_bearing,
    offset_laterally,
    point_in_polygon,
    polygon_centroid,
    project,
    shot_relative,
)

from .models import (
    AvoidZone,
    CoursePolygon,
    HazardConflict,
    HazardRange,
    LandingAdjustment,
    LandingZone,
    PolygonType,
    SafeZone,
)

HAZARD_TYPES = frozenset(
    {
        PolygonType.BUNKER,
        PolygonType.WATER,
        PolygonType.OB,
        PolygonType.PENALTY,
        PolygonType.WASTE_AREA,
    }
)
SHOT_LINE_HAZARD_TYPES = HAZARD_TYPES | {PolygonType.TREES}

DEFAULT_DISPERSION_RADIUS = 15.0
LATERAL_SEARCH_OFFSETS = (15.0, 25.0, 35.0, -15.0, -25.0, -35.0)
DISTANCE_SEARCH_OFFSETS = (-10.0, -20.0, 10.0, 20.0)
SHOT_CORRIDOR_YARDS = 40.0
RELEVANT_CORRIDOR_YARDS = 50.0

MAX_FAIRWAY_BIAS = 20.0
MIN_FAIRWAY_BIAS = 3.0
PENALTY_BIAS_WEIGHT = 2.5
FAIRWAY_BIAS_SCALE = 0.3

GREEN_INFLUENCE_YARDS = 30.0
GREEN_LATERAL_SCALE = 0.2
GREEN_DEPTH_SCALE = 0.15
MAX_GREEN_LATERAL = 10.0
MAX_GREEN_DEPTH = 8.0
MIN_GREEN_SHIFT = 2.0

DEFAULT_SAFE_SPACE = 50.0
MAX_SAFE_SPACE = 100.0


@dataclass(frozen=True, slots=True)
class RelevantHazard:
    polygon: CoursePolygon
    distance: float
    lateral_offset: float
    threat: str


def _hazards(
    polygons: Iterable[CoursePolygon], types: frozenset[PolygonType] = HAZARD_TYPES
) -> list[CoursePolygon]:
    return [p for p in polygons if p.type in types and p.is_usable]


def _fairways(polygons: Iterable[CoursePolygon]) -> list[CoursePolygon]:
    return [p for p in polygons if p.type is PolygonType.FAIRWAY and p.is_usable]


def is_in_fairway(point: GeoPoint, polygons: Iterable[CoursePolygon]) -> bool:
    return any(point_in_polygon(point, fw.coordinates) for fw in _fairways(polygons))


def check_hazard_conflicts(
    point: GeoPoint,
    polygons: Iterable[CoursePolygon],
    dispersion_radius: float = DEFAULT_DISPERSION_RADIUS,
) -> list[HazardConflict]:
    """Hazards the point lies in or whose edge is within ``dispersion_radius``."""

    conflicts = []
    for hazard in _hazards(polygons):
        if point_in_polygon(point, hazard.coordinates):
            conflicts.append(
                HazardConflict(
                    type="inside",
                    hazard_type=hazard.type.value,
                    name=hazard.display_name,
                    severity="critical" if hazard.type is PolygonType.WATER else "high",
                    distance_to_edge=0.0,
                    overlap_percentage=100.0,
                )
            )
            continue
        edge = min_distance_to_polygon(point, hazard.coordinates)
        if edge < dispersion_radius:
            conflicts.append(
                HazardConflict(
                    type="dispersion_overlap",
                    hazard_type=hazard.type.value,
                    name=hazard.display_name,
                    severity="high" if edge < dispersion_radius / 2 else "medium",
                    distance_to_edge=round(edge, 1),
                    overlap_percentage=float(
                        round((1 - edge / dispersion_radius) * 100)
                    ),
                )
            )
    return conflicts


def is_safe(
    point: GeoPoint,
    polygons: Iterable[CoursePolygon],
    dispersion_radius: float = DEFAULT_DISPERSION_RADIUS,
) -> bool:
    return not check_hazard_conflicts(point, polygons, dispersion_radius)


def calculate_hazard_overlap(
    point: GeoPoint, dispersion_radius: float, hazard: CoursePolygon
) -> float:
    """Percentage of the dispersion radius consumed by ``hazard``."""

    if not hazard.is_usable:
        return 0.0
    if point_in_polygon(point, hazard.coordinates):
        return 100.0
    if dispersion_radius <= 0:
        return 0.0
    edge = min_distance_to_polygon(point, hazard.coordinates)
    if edge >= dispersion_radius:
        return 0.0
    return (1 - edge / dispersion_radius) * 100


def describe_landing_zone(
    point: GeoPoint,
    origin: GeoPoint,
    bearing: float,
    polygons: Iterable[CoursePolygon],
) -> str:
    polygons = list(polygons)
    along, lateral = shot_relative(origin, point, bearing)
    if abs(lateral) < 5:
        side = "center"
    else:
        side = "right side" if lateral > 0 else "left side"
    surface = "fairway" if is_in_fairway(point, polygons) else "rough"
    return f"{side} of {surface}, {distance_yards(origin, point):.0f} yards out"


def find_safe_alternative(
    point: GeoPoint,
    origin: GeoPoint,
    bearing: float,
    polygons: Iterable[CoursePolygon],
    dispersion_radius: float = DEFAULT_DISPERSION_RADIUS,
) -> Optional[LandingZone]:
    """First hazard-free point near ``point``: lateral offsets, then distance."""

    polygons = list(polygons)
    for offset in LATERAL_SEARCH_OFFSETS:
        candidate = offset_laterally(point, offset, bearing)
        if is_safe(candidate, polygons, dispersion_radius):
            return LandingZone(
                position=candidate,
                description=describe_landing_zone(candidate, origin, bearing, polygons),
                is_optimal=False,
                adjustment=LandingAdjustment(
                    kind="lateral",
                    amount=abs(offset),
                    direction="right" if offset > 0 else "left",
                ),
            )
    for offset in DISTANCE_SEARCH_OFFSETS:
        candidate = project(point, offset, bearing)
        if is_safe(candidate, polygons, dispersion_radius):
            return LandingZone(
                position=candidate,
                description=describe_landing_zone(candidate, origin, bearing, polygons),
                is_optimal=False,
                adjustment=LandingAdjustment(
                    kind="distance",
                    amount=abs(offset),
                    direction="shorter" if offset < 0 else "longer",
                ),
            )
    return None


def calculate_landing_zone(
    origin: GeoPoint,
    distance: float,
    bearing: float,
    polygons: Iterable[CoursePolygon],
    dispersion_radius: float = DEFAULT_DISPERSION_RADIUS,
) -> LandingZone:
    polygons = list(polygons)
    target = project(origin, distance, bearing)
    conflicts = check_hazard_conflicts(target, polygons, dispersion_radius)
    if not conflicts:
        return LandingZone(
            position=target,
            description=describe_landing_zone(target, origin, bearing, polygons),
        )
    alternative = find_safe_alternative(
        target, origin, bearing, polygons, dispersion_radius
    )
    if alternative is not None:
        return alternative
    return LandingZone(
        position=target,
        description=describe_landing_zone(target, origin, bearing, polygons),
        is_optimal=False,
        has_risk=True,
        main_threat=conflicts[0].name,
    )


def avoid_landing_hazards(
    point: GeoPoint,
    bearing: float,
    polygons: Iterable[CoursePolygon],
    dispersion_radius: float = DEFAULT_DISPERSION_RADIUS,
) -> GeoPoint:
    """Nudge ``point`` sideways off the shot line until it clears hazards."""

    polygons = list(polygons)
    if is_safe(point, polygons, dispersion_radius):
        return point
    for offset in LATERAL_SEARCH_OFFSETS:
        candidate = offset_laterally(point, offset, bearing)
        if is_safe(candidate, polygons, dispersion_radius):
            return candidate
    return point


def apply_hazard_bias_to_target(
    target: GeoPoint,
    bearing: float,
    polygons: Iterable[CoursePolygon],
    dispersion_radius: float = DEFAULT_DISPERSION_RADIUS,
) -> GeoPoint:
    """Shift a fairway target away from hazards within twice the dispersion.

    The shift is kept only if the target stays inside a fairway (full shift
    first, then half); holes without fairway polygons take the full shift.
    """

    polygons = list(polygons)
    influence = 2 * dispersion_radius
    if influence <= 0:
        return target

    bias = 0.0
    for hazard in _hazards(polygons, SHOT_LINE_HAZARD_TYPES):
        edge = min_distance_to_polygon(target, hazard.coordinates)
        if edge >= influence:
            continue
        strength = hazard_severity(hazard.type.value) * (1 - edge / influence)
        if is_penalty_hazard(hazard.type.value):
            strength *= PENALTY_BIAS_WEIGHT
        strength *= FAIRWAY_BIAS_SCALE
        center = polygon_centroid(hazard.coordinates)
        _, lateral = shot_relative(target, center, bearing)
        bias += -strength if lateral >= 0 else strength

    bias = max(-MAX_FAIRWAY_BIAS, min(MAX_FAIRWAY_BIAS, bias))
    if abs(bias) < MIN_FAIRWAY_BIAS:
        return target

    fairways = _fairways(polygons)
    for factor in (1.0, 0.5):
        candidate = offset_laterally(target, bias * factor, bearing)
        if not fairways or is_in_fairway(candidate, fairways):
            return candidate
    return target


def calculate_safe_green_target(
    green: GeoPoint,
    approach_bearing: float,
    polygons: Iterable[CoursePolygon],
) -> GeoPoint:
    """Aim point on the green shifted away from greenside hazards."""

    lateral_shift = 0.0
    depth_shift = 0.0
    for hazard in _hazards(polygons):
        edge = min_distance_to_polygon(green, hazard.coordinates)
        if edge >= GREEN_INFLUENCE_YARDS:
            continue
        strength = hazard_severity(hazard.type.value) * (1 - edge / GREEN_INFLUENCE_YARDS)
        if is_penalty_hazard(hazard.type.value):
            strength *= PENALTY_BIAS_WEIGHT
        center = polygon_centroid(hazard.coordinates)
        along, lateral = shot_relative(green, center, approach_bearing)
        angle = math.atan2(lateral, along)
        if lateral != 0:
            lateral_shift -= math.copysign(
                strength * GREEN_LATERAL_SCALE * abs(math.sin(angle)), lateral
            )
        depth = strength * GREEN_DEPTH_SCALE * abs(math.cos(angle))
        # hazards in front push the aim deeper, hazards behind pull it short
        depth_shift += depth if along < 0 else -depth

    lateral_shift = max(-MAX_GREEN_LATERAL, min(MAX_GREEN_LATERAL, lateral_shift))
    depth_shift = max(-MAX_GREEN_DEPTH, min(MAX_GREEN_DEPTH, depth_shift))
    if abs(lateral_shift) < MIN_GREEN_SHIFT and abs(depth_shift) < MIN_GREEN_SHIFT:
        return green

    target = green
    if abs(depth_shift) >= MIN_GREEN_SHIFT:
        target = project(target, depth_shift, approach_bearing)
    if abs(lateral_shift) >= MIN_GREEN_SHIFT:
        target = offset_laterally(target, lateral_shift, approach_bearing)
    return target.with_elevation(green.elevation)


def _sector(relative_bearing: float) -> str:
    if 225 <= relative_bearing < 315:
        return "left"
    if 45 <= relative_bearing < 135:
        return "right"
    if 135 <= relative_bearing < 225:
        return "short"
    return "long"


def calculate_safe_zone(
    target: GeoPoint,
    dispersion_radius: Optional[float],
    polygons: Iterable[CoursePolygon],
    pin: Optional[GeoPoint] = None,
    approach_bearing: float = 0.0,
) -> SafeZone:
    """Favoured miss side around ``target`` from the room left by hazards."""

    hazards = _hazards(polygons)
    space = {side: DEFAULT_SAFE_SPACE for side in ("left", "right", "short", "long")}
    touched: dict[str, CoursePolygon] = {}
    for hazard in hazards:
        center = polygon_centroid(hazard.coordinates)
        relative = normalize_bearing(bearing_deg(target, center) - approach_bearing)
        side = _sector(relative)
        edge = min_distance_to_polygon(target, hazard.coordinates)
        if side not in touched or edge < space[side]:
            space[side] = edge
            touched[side] = hazard
    space = {side: min(MAX_SAFE_SPACE, value) for side, value in space.items()}

    if space["left"] > space["right"]:
        direction = "left"
    elif space["right"] > space["left"]:
        direction = "right"
    else:
        direction = "center"

    room = max(space["left"], space["right"])
    offset = min(dispersion_radius or DEFAULT_DISPERSION_RADIUS, room)
    if direction == "left":
        position = offset_laterally(target, -offset / 2, approach_bearing)
        description = "Favor left side, avoid short-siding"
    elif direction == "right":
        position = offset_laterally(target, offset / 2, approach_bearing)
        description = "Favor right side, avoid short-siding"
    else:
        offset = 0.0
        position = target
        description = "Favor center, equal room on both sides"

    warning = None
    if pin is not None:
        _, pin_lateral = shot_relative(target, pin, approach_bearing)
        pin_side = "right" if pin_lateral > 0 else "left"
        if abs(pin_lateral) > 3 and pin_side in touched and space[pin_side] < 15:
            other = "left" if pin_side == "right" else "right"
            warning = (
                f"Pin tucked {pin_side} near {touched[pin_side].display_name} "
                f"- miss {other} to avoid short-siding"
            )

    return SafeZone(
        position=position,
        direction=direction,
        offset=round(offset, 1),
        left_space=round(space["left"], 1),
        right_space=round(space["right"], 1),
        short_space=round(space["short"], 1),
        long_space=round(space["long"], 1),
        description=description,
        short_side_warning=warning,
    )


def get_avoid_zones(
    start: GeoPoint,
    end: GeoPoint,
    polygons: Iterable[CoursePolygon],
    corridor: float = SHOT_CORRIDOR_YARDS,
) -> list[AvoidZone]:
    """Hazards around a shot, classified short/long/left/right of its line."""

    shot_length = distance_yards(start, end)
    bearing = bearing_deg(start, end)
    zones = []
    for hazard in _hazards(polygons):
        center = polygon_centroid(hazard.coordinates)
        from_player = distance_yards(start, center)
        if from_player > shot_length + 30:
            continue
        along, lateral = shot_relative(start, center, bearing)
        if abs(lateral) > corridor or along < -corridor:
            continue
        if along < 0.3 * shot_length:
            direction = "short"
        elif along > 0.9 * shot_length:
            direction = "long"
        else:
            direction = "right" if lateral > 0 else "left"
        zones.append(
            AvoidZone(
                type=hazard.type.value,
                name=hazard.display_name,
                direction=direction,
                distance_to_edge=round(min_distance_to_polygon(end, hazard.coordinates), 1),
                distance_from_player=round(from_player, 1),
                lateral_offset=round(lateral, 1),
            )
        )
    zones.sort(key=lambda zone: zone.distance_from_player)
    return zones


def analyze_hazards_along_shot_line(
    start: GeoPoint,
    end: GeoPoint,
    polygons: Iterable[CoursePolygon],
    corridor: float = SHOT_CORRIDOR_YARDS,
) -> list[HazardRange]:
    """Front/back carry distances of hazards inside the shot corridor."""

    bearing = bearing_deg(start, end)
    ranges = []
    for hazard in _hazards(polygons, SHOT_LINE_HAZARD_TYPES):
        alongs = []
        for vertex in hazard.coordinates:
            along, lateral = shot_relative(start, vertex, bearing)
            if abs(lateral) <= corridor and along >= 0:
                alongs.append(along)
        if not alongs:
            continue
        ranges.append(
            HazardRange(
                type=hazard.type.value,
                name=hazard.display_name,
                front_distance=round(min(alongs), 1),
                back_distance=round(max(alongs), 1),
                is_penalty=is_penalty_hazard(hazard.type.value),
                severity=hazard_severity(hazard.type.value),
            )
        )
    ranges.sort(key=lambda item: item.front_distance)
    return ranges


def filter_relevant_hazards(
    start: GeoPoint,
    bearing: float,
    max_distance: float,
    polygons: Iterable[CoursePolygon],
    corridor: float = RELEVANT_CORRIDOR_YARDS,
) -> list[RelevantHazard]:
    """Hazards within reach of a shot, rated high/medium/low threat."""

    relevant = []
    for hazard in _hazards(polygons, SHOT_LINE_HAZARD_TYPES):
        best: Optional[tuple[float, float]] = None
        for vertex in hazard.coordinates:
            along, lateral = shot_relative(start, vertex, bearing)
            if along < 0 or along > max_distance + 50 or abs(lateral) > corridor:
                continue
            if best is None or abs(lateral) < abs(best[1]):
                best = (along, lateral)
        if best is None:
            continue
        penalty = is_penalty_hazard(hazard.type.value)
        if penalty and abs(best[1]) < 20:
            threat = "high"
        elif penalty or abs(best[1]) < 20:
            threat = "medium"
        else:
            threat = "low"
        relevant.append(
            RelevantHazard(
                polygon=hazard,
                distance=round(best[0], 1),
                lateral_offset=round(best[1], 1),
                threat=threat,
            )
        )
    relevant.sort(key=lambda item: item.distance)
    return relevant


__all__ = [
    "DEFAULT_DISPERSION_RADIUS",
    "HAZARD_TYPES",
    "RelevantHazard",
    "SHOT_LINE_HAZARD_TYPES",
    "analyze_hazards_along_shot_line",
    "apply_hazard_bias_to_target",
    "avoid_landing_hazards",
    "calculate_hazard_overlap",
    "calculate_landing_zone",
    "calculate_safe_green_target",
    "calculate_safe_zone",
    "check_hazard_conflicts",
    "describe_landing_zone",
    "filter_relevant_hazards",
    "find_safe_alternative",
    "get_avoid_zones",
    "is_in_fairway",
    "is_safe",
]
