"""Polygon containment and proximity on small geographic polygons."""

from __future__ import annotations

import math
from typing import Sequence

from .geodesy import EARTH_RADIUS_YD, centroid, distance_yards
from .point import GeoPoint

BOUNDARY_TOLERANCE_YARDS = 0.05


def _to_plane(origin: GeoPoint, point: GeoPoint) -> tuple[float, float]:
    """Local equirectangular projection around ``origin`` in yards."""

    scale = math.cos(math.radians(origin.lat))
    x = math.radians(point.lng - origin.lng) * scale * EARTH_RADIUS_YD
    y = math.radians(point.lat - origin.lat) * EARTH_RADIUS_YD
    return x, y


def _segment_distance(
    px: float, py: float, ax: float, ay: float, bx: float, by: float
) -> float:
    dx = bx - ax
    dy = by - ay
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return math.hypot(px - ax, py - ay)
    t = ((px - ax) * dx + (py - ay) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    return math.hypot(px - (ax + t * dx), py - (ay + t * dy))


def _edge_distance(point: GeoPoint, vertices: Sequence[GeoPoint]) -> float:
    plane = [_to_plane(point, v) for v in vertices]
    best = math.inf
    count = len(plane)
    for i in range(count):
        ax, ay = plane[i]
        bx, by = plane[(i + 1) % count]
        best = min(best, _segment_distance(0.0, 0.0, ax, ay, bx, by))
    return best


def point_in_polygon(point: GeoPoint, vertices: Sequence[GeoPoint]) -> bool:
    """Ray-casting containment; points on the boundary count as inside."""

    if len(vertices) < 3:
        return False
    for vertex in vertices:
        if vertex.lat == point.lat and vertex.lng == point.lng:
            return True

    inside = False
    x, y = point.lng, point.lat
    j = len(vertices) - 1
    for i in range(len(vertices)):
        xi, yi = vertices[i].lng, vertices[i].lat
        xj, yj = vertices[j].lng, vertices[j].lat
        if (yi > y) != (yj > y):
            x_cross = (xj - xi) * (y - yi) / (yj - yi) + xi
            if x < x_cross:
                inside = not inside
        j = i
    if inside:
        return True
    return _edge_distance(point, vertices) <= BOUNDARY_TOLERANCE_YARDS


def min_distance_to_polygon(point: GeoPoint, vertices: Sequence[GeoPoint]) -> float:
    """Shortest distance in yards from ``point`` to any vertex or edge."""

    if not vertices:
        return math.inf
    vertex_best = min(distance_yards(point, v) for v in vertices)
    if len(vertices) < 2:
        return vertex_best
    return min(vertex_best, _edge_distance(point, vertices))


def polygon_centroid(vertices: Sequence[GeoPoint]) -> GeoPoint | None:
    return centroid(vertices)


__all__ = [
    "BOUNDARY_TOLERANCE_YARDS",
    "min_distance_to_polygon",
    "point_in_polygon",
    "polygon_centroid",
]
