"""Recompute tiers for dragging a planned shot's landing point.

Tier 1 runs on every pointer move and only does distance maths plus a
binary search over pre-sorted club reaches. Tier 2 adds point-in-polygon
rules for a traffic-light colour. Tier 3 runs on release: it re-scores the
shots and cascades club and distance changes downstream.

All per-hole pre-computation lives in an immutable :class:`DragContext`,
cached by a fingerprint of (hole, weather, player) so a weather change can
never serve a stale reach table.
"""

from __future__ import annotations

import bisect
import hashlib
import json
import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Optional, Sequence

from holeplan.config import get_settings
from holeplan.config.scoring import ScoringConfig, get_scoring_config, is_penalty_hazard
from holeplan.geometry import (
    GeoPoint,
    bearing_deg,
    distance_yards,
    point_in_polygon,
    polygon_centroid,
)

from .clubs import club_display_name
from .dispersion import calculate_dispersion
from .environment import effective_reach, plays_like_distance
from .hazards import DEFAULT_DISPERSION_RADIUS, check_hazard_conflicts, is_in_fairway
from .models import (
    CALM,
    Adjustments,
    CoursePolygon,
    DragFrameUpdate,
    DragShot,
    FullShotUpdate,
    Hole,
    LieType,
    PlayerProfile,
    PolygonType,
    ShotColor,
    ShotOption,
    Weather,
)
from .scorer import score_shot

logger = logging.getLogger(__name__)

CENTROID_HAZARD_TYPES = frozenset(
    {
        PolygonType.WATER,
        PolygonType.OB,
        PolygonType.BUNKER,
        PolygonType.PENALTY,
        PolygonType.WASTE_AREA,
        PolygonType.TREES,
    }
)
PENALTY_TYPES = frozenset({PolygonType.WATER, PolygonType.OB, PolygonType.PENALTY})

MAX_CLUB_GAP_YARDS = 20.0
AWKWARD_ZONE = (30.0, 60.0)
PENALTY_CENTROID_YARDS = 15.0
BUNKER_CENTROID_YARDS = 8.0
RED_SCORE = -20.0
CRITICAL_HAZARD_PENALTY = -30.0
CRITICAL_FLIGHT_PENALTY = -50.0


@dataclass(frozen=True, slots=True)
class ClubReach:
    club: str
    club_distance: float
    effective_reach: float
    adjustments: Adjustments
    display_name: str


@dataclass(frozen=True, slots=True)
class ClubMatch:
    reach: ClubReach
    gap: float


@dataclass(frozen=True, slots=True)
class HazardCentroid:
    type: PolygonType
    centroid: GeoPoint
    is_penalty: bool


@dataclass(frozen=True)
class DragContext:
    key: str
    start: GeoPoint
    green: GeoPoint
    weather: Weather
    hole_bearing: float
    reaches: tuple[ClubReach, ...]
    reach_values: tuple[float, ...]
    hazard_centroids: tuple[HazardCentroid, ...]
    polygons: tuple[CoursePolygon, ...]

    def previous_position(self, shots: Sequence[DragShot], index: int) -> GeoPoint:
        return self.start if index == 0 else shots[index - 1].landing_zone


def context_key(hole: Hole, player: PlayerProfile, weather: Optional[Weather]) -> str:
    """Stable fingerprint of everything a :class:`DragContext` depends on."""

    material = {
        "hole": hole.model_dump(mode="json"),
        "player": player.model_dump(mode="json"),
        "weather": (weather or CALM).model_dump(mode="json"),
    }
    encoded = json.dumps(material, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


def pre_compute_club_reaches(
    club_distances: dict[str, float],
    weather: Optional[Weather],
    hole_bearing: float,
) -> tuple[ClubReach, ...]:
    reaches = []
    for club, distance in club_distances.items():
        if distance <= 0:
            continue
        reach = effective_reach(club, distance, weather, hole_bearing)
        reaches.append(
            ClubReach(
                club=club,
                club_distance=distance,
                effective_reach=reach.effective_reach,
                adjustments=reach.adjustments,
                display_name=club_display_name(club),
            )
        )
    reaches.sort(key=lambda item: item.effective_reach)
    return tuple(reaches)


def pre_compute_hazard_centroids(
    polygons: Sequence[CoursePolygon],
) -> tuple[HazardCentroid, ...]:
    centroids = []
    for polygon in polygons:
        if polygon.type not in CENTROID_HAZARD_TYPES or not polygon.is_usable:
            continue
        center = polygon_centroid(polygon.coordinates)
        if center is None:
            continue
        centroids.append(
            HazardCentroid(
                type=polygon.type,
                centroid=center,
                is_penalty=is_penalty_hazard(polygon.type.value),
            )
        )
    return tuple(centroids)


def prepare_drag_context(
    hole: Hole, player: PlayerProfile, weather: Optional[Weather] = None
) -> DragContext:
    start = player.position or hole.tee
    if start is None or hole.green is None:
        raise ValueError("dragging requires a start position and a green")
    bearing = bearing_deg(start, hole.green)
    reaches = pre_compute_club_reaches(player.club_distances, weather, bearing)
    polygons = tuple(p for p in hole.polygons if p.is_usable)
    return DragContext(
        key=context_key(hole, player, weather),
        start=start,
        green=hole.green,
        weather=weather or CALM,
        hole_bearing=bearing,
        reaches=reaches,
        reach_values=tuple(r.effective_reach for r in reaches),
        hazard_centroids=pre_compute_hazard_centroids(polygons),
        polygons=polygons,
    )


class DragContextCache:
    """Bounded LRU of drag contexts, safe to share between threads."""

    def __init__(self, maxsize: Optional[int] = None) -> None:
        self._maxsize = maxsize or get_settings().drag_cache_size
        self._entries: OrderedDict[str, DragContext] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(
        self, hole: Hole, player: PlayerProfile, weather: Optional[Weather] = None
    ) -> DragContext:
        key = context_key(hole, player, weather)
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                self._entries.move_to_end(key)
                return cached
        context = prepare_drag_context(hole, player, weather)
        with self._lock:
            self._entries[key] = context
            self._entries.move_to_end(key)
            while len(self._entries) > self._maxsize:
                self._entries.popitem(last=False)
        return context

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


def find_best_club(distance: float, ctx: DragContext) -> Optional[ClubMatch]:
    """Club whose effective reach is nearest ``distance`` (binary search)."""

    if not ctx.reaches or distance <= 0:
        return None
    index = bisect.bisect_left(ctx.reach_values, distance)
    candidates = [i for i in (index - 1, index) if 0 <= i < len(ctx.reaches)]
    best = min(candidates, key=lambda i: abs(ctx.reach_values[i] - distance))
    return ClubMatch(
        reach=ctx.reaches[best], gap=abs(ctx.reach_values[best] - distance)
    )


def compute_drag_frame_update(
    new_position: GeoPoint, prev_position: GeoPoint, ctx: DragContext
) -> DragFrameUpdate:
    """Tier 1: distances, plays-like and nearest club for a pointer move."""

    distance = round(distance_yards(prev_position, new_position))
    to_green = round(distance_yards(new_position, ctx.green))
    match = find_best_club(distance, ctx)
    plays_like = plays_like_distance(
        distance, ctx.weather, bearing_deg(prev_position, new_position)
    )
    if match is None:
        return DragFrameUpdate(
            distance=distance,
            effective_distance=round(plays_like),
            distance_to_green=to_green,
        )
    return DragFrameUpdate(
        distance=distance,
        effective_distance=round(plays_like),
        distance_to_green=to_green,
        club=match.reach.club,
        club_distance=match.reach.club_distance,
        effective_reach=round(match.reach.effective_reach, 1),
        display_name=match.reach.display_name,
        gap=round(match.gap),
    )


def assess_shot_color_lightweight(
    position: GeoPoint,
    prev_position: GeoPoint,
    ctx: DragContext,
    is_approach: bool,
) -> ShotColor:
    """Tier 2: traffic-light colour from cheap geometric rules."""

    for polygon in ctx.polygons:
        if polygon.type in PENALTY_TYPES and point_in_polygon(position, polygon.coordinates):
            return ShotColor.RED
    for polygon in ctx.polygons:
        if polygon.type is PolygonType.BUNKER and point_in_polygon(
            position, polygon.coordinates
        ):
            return ShotColor.YELLOW

    match = find_best_club(distance_yards(prev_position, position), ctx)
    if match is None or match.gap > MAX_CLUB_GAP_YARDS:
        return ShotColor.RED

    if not is_approach:
        low, high = AWKWARD_ZONE
        if low <= distance_yards(position, ctx.green) <= high:
            return ShotColor.YELLOW

    for hazard in ctx.hazard_centroids:
        dist = distance_yards(position, hazard.centroid)
        if hazard.is_penalty and dist < PENALTY_CENTROID_YARDS:
            return ShotColor.YELLOW
        if hazard.type is PolygonType.BUNKER and dist < BUNKER_CENTROID_YARDS:
            return ShotColor.YELLOW

    if not is_approach and not is_in_fairway(position, ctx.polygons):
        return ShotColor.YELLOW
    return ShotColor.GREEN


def assess_shot_color_full(
    shot: ShotOption,
    player: Optional[PlayerProfile] = None,
    polygons: Sequence[CoursePolygon] = (),
    config: Optional[ScoringConfig] = None,
) -> ShotColor:
    """Tier 3: colour from the real scorer."""

    score, breakdown = score_shot(
        shot, player=player, polygons=polygons, config=config or get_scoring_config()
    )
    critical = any(
        (item.type == "hazard" and item.value <= CRITICAL_HAZARD_PENALTY)
        or (item.type == "flightPath" and item.value <= CRITICAL_FLIGHT_PENALTY)
        for item in breakdown.penalties
    )
    if critical or score < RED_SCORE:
        return ShotColor.RED
    if score < 0:
        return ShotColor.YELLOW
    return ShotColor.GREEN


def _check_index(shots: Sequence[DragShot], index: int) -> None:
    if index < 0 or index >= len(shots):
        raise ValueError(f"shot index {index} out of range for {len(shots)} shots")


def recalculate_downstream_shots(
    shots: Sequence[DragShot], from_index: int, ctx: DragContext
) -> list[DragShot]:
    """New shot list with distances and clubs refreshed from ``from_index``.

    Landing points are kept; only what depends on them changes.
    """

    if not shots:
        return []
    _check_index(shots, from_index)
    updated = list(shots)
    for index in range(from_index, len(updated)):
        shot = updated[index]
        prev = ctx.previous_position(updated, index)
        distance = round(distance_yards(prev, shot.landing_zone))
        match = find_best_club(distance, ctx)
        plays_like = plays_like_distance(
            distance, ctx.weather, bearing_deg(prev, shot.landing_zone)
        )
        updated[index] = shot.model_copy(
            update={
                "distance": float(distance),
                "club": match.reach.display_name if match else "No club",
                "club_id": match.reach.club if match else None,
                "club_distance": match.reach.club_distance if match else 0.0,
                "effective_distance": float(round(plays_like)),
                "adjustments": (
                    match.reach.adjustments.rounded() if match else Adjustments()
                ),
                "distance_remaining": float(
                    round(distance_yards(shot.landing_zone, ctx.green))
                ),
            }
        )
    return updated


def _shot_option(
    shot: DragShot,
    index: int,
    shots: Sequence[DragShot],
    ctx: DragContext,
    player: PlayerProfile,
) -> ShotOption:
    prev = ctx.previous_position(shots, index)
    distance = distance_yards(prev, shot.landing_zone)
    match = find_best_club(distance, ctx)
    club = match.reach.club if match else "unknown"
    radius = DEFAULT_DISPERSION_RADIUS
    if match is not None:
        radius = calculate_dispersion(
            club,
            match.reach.effective_reach,
            player.handicap,
            player.measured_stats.get(club),
        ).radius
    is_approach = index == len(shots) - 1
    has_fairways = any(p.type is PolygonType.FAIRWAY for p in ctx.polygons)
    expected_lie = None
    if has_fairways and not is_approach:
        expected_lie = (
            LieType.FAIRWAY if is_in_fairway(shot.landing_zone, ctx.polygons) else LieType.ROUGH
        )
    return ShotOption(
        shot_number=shot.shot_number,
        club=club,
        club_distance=match.reach.club_distance if match else 0.0,
        raw_distance=match.reach.effective_reach if match else distance,
        target_distance=distance,
        distance_remaining=0.0
        if is_approach
        else distance_yards(shot.landing_zone, ctx.green),
        start=prev,
        landing_zone=shot.landing_zone,
        dispersion_radius=radius,
        is_approach=is_approach,
        hazard_conflicts=tuple(
            check_hazard_conflicts(shot.landing_zone, ctx.polygons, radius)
        ),
        expected_lie=expected_lie,
    )


def compute_full_shot_update(
    shots: Sequence[DragShot],
    dragged_index: int,
    ctx: DragContext,
    player: PlayerProfile,
    config: Optional[ScoringConfig] = None,
) -> FullShotUpdate:
    """Tier 3: cascade from the dragged shot, then colour every shot."""

    if not shots:
        return FullShotUpdate(updated_shots=[], colors=[])
    updated = recalculate_downstream_shots(shots, dragged_index, ctx)
    config = config or get_scoring_config()
    colors = [
        assess_shot_color_full(
            _shot_option(shot, index, updated, ctx, player),
            player,
            ctx.polygons,
            config,
        )
        for index, shot in enumerate(updated)
    ]
    logger.debug(
        "drag release on shot %d: %s",
        dragged_index + 1,
        ", ".join(color.value for color in colors),
    )
    return FullShotUpdate(updated_shots=updated, colors=colors)


__all__ = [
    "ClubMatch",
    "ClubReach",
    "DragContext",
    "DragContextCache",
    "HazardCentroid",
    "assess_shot_color_full",
    "assess_shot_color_lightweight",
    "compute_drag_frame_update",
    "compute_full_shot_update",
    "context_key",
    "find_best_club",
    "pre_compute_club_reaches",
    "pre_compute_hazard_centroids",
    "prepare_drag_context",
    "recalculate_downstream_shots",
]
