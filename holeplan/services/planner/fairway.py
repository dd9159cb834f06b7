"""Fairway geometry queries: dogleg-aware targets and width estimates."""

from __future__ import annotations

from typing import Iterable, Optional

from holeplan.geometry import (
    GeoPoint,
    bearing_deg,
    centroid,
    distance_yards,
    normalize_bearing,
    point_in_polygon,
    polygon_centroid,
    project,
    shot_relative,
)

from .models import CoursePolygon, PolygonType

CENTERLINE_WINDOW_YARDS = 30.0
WIDTH_WINDOW_YARDS = 25.0
DEFAULT_HALF_WIDTH_YARDS = 20.0
SECTOR_HALF_ANGLE = 45.0


def _fairways(polygons: Iterable[CoursePolygon]) -> list[CoursePolygon]:
    return [p for p in polygons if p.type is PolygonType.FAIRWAY and p.is_usable]


def _lateral_spread(
    vertices: list[GeoPoint], origin: GeoPoint, bearing: float
) -> float:
    laterals = [shot_relative(origin, v, bearing)[1] for v in vertices]
    return max(laterals) - min(laterals)


def fairway_centerline_target(
    origin: GeoPoint,
    bearing: float,
    distance: float,
    polygons: Iterable[CoursePolygon],
) -> GeoPoint:
    """Fairway centre at ``distance`` yards from ``origin``.

    Uses the vertices of each fairway lying within the distance window; the
    widest fairway section wins. Falls back to a straight projection along
    ``bearing`` when no fairway has two vertices in the window.
    """

    straight = project(origin, distance, bearing)
    best: Optional[GeoPoint] = None
    best_width = -1.0
    for fairway in _fairways(polygons):
        nearby = [
            v
            for v in fairway.coordinates
            if abs(distance_yards(origin, v) - distance) <= CENTERLINE_WINDOW_YARDS
        ]
        if len(nearby) < 2:
            continue
        candidate = centroid(nearby)
        if candidate is None:
            continue
        if not point_in_polygon(candidate, fairway.coordinates):
            candidate = min(nearby, key=lambda v: distance_yards(v, straight))
            candidate = GeoPoint(lat=candidate.lat, lng=candidate.lng)
        width = _lateral_spread(nearby, origin, bearing)
        if width > best_width:
            best, best_width = candidate, width
    return best if best is not None else straight


def fairway_width_at_distance(
    origin: GeoPoint,
    bearing: float,
    distance: float,
    polygons: Iterable[CoursePolygon],
) -> Optional[float]:
    """Widest fairway spread across the shot line near ``distance``."""

    widest: Optional[float] = None
    for fairway in _fairways(polygons):
        nearby = [
            v
            for v in fairway.coordinates
            if abs(distance_yards(origin, v) - distance) <= WIDTH_WINDOW_YARDS
        ]
        if len(nearby) < 2:
            continue
        width = _lateral_spread(nearby, origin, bearing)
        if widest is None or width > widest:
            widest = width
    return widest


def estimate_fairway_width(
    point: GeoPoint,
    hole_bearing: float,
    polygons: Iterable[CoursePolygon],
) -> Optional[float]:
    """Width across the hole at ``point`` from fairway vertices beside it.

    Vertices within 45 degrees of perpendicular on each side give that side's
    half width; a side with no vertices counts as 20 yards. Returns ``None``
    when the hole has no fairway polygons.
    """

    fairways = _fairways(polygons)
    if not fairways:
        return None
    containing = [fw for fw in fairways if point_in_polygon(point, fw.coordinates)]
    candidates = containing or [
        min(
            fairways,
            key=lambda fw: distance_yards(point, polygon_centroid(fw.coordinates)),
        )
    ]
    right_axis = normalize_bearing(hole_bearing + 90)
    left_axis = normalize_bearing(hole_bearing - 90)
    left: Optional[float] = None
    right: Optional[float] = None
    for fairway in candidates:
        for vertex in fairway.coordinates:
            d = distance_yards(point, vertex)
            if d == 0:
                continue
            b = bearing_deg(point, vertex)
            if _within(b, right_axis):
                right = d if right is None else min(right, d)
            elif _within(b, left_axis):
                left = d if left is None else min(left, d)
    return (left if left is not None else DEFAULT_HALF_WIDTH_YARDS) + (
        right if right is not None else DEFAULT_HALF_WIDTH_YARDS
    )


def _within(bearing: float, axis: float) -> bool:
    diff = abs(normalize_bearing(bearing - axis))
    return min(diff, 360 - diff) <= SECTOR_HALF_ANGLE


def fairway_targets(
    tee: GeoPoint,
    polygons: Iterable[CoursePolygon],
    min_distance: float = 150.0,
    max_distance: float = 350.0,
) -> list[GeoPoint]:
    """Fairway centroids in tee-shot range, nearest first."""

    targets = []
    for fairway in _fairways(polygons):
        center = polygon_centroid(fairway.coordinates)
        if center is None:
            continue
        if min_distance <= distance_yards(tee, center) <= max_distance:
            targets.append(center)
    targets.sort(key=lambda p: distance_yards(tee, p))
    return targets


__all__ = [
    "estimate_fairway_width",
    "fairway_centerline_target",
    "fairway_targets",
    "fairway_width_at_distance",
]
