"""Spherical-earth distance, bearing and projection helpers.

All distances are in yards and all bearings in degrees clockwise from true
north in ``[0, 360)``. Accuracy is sufficient for the sub-kilometre scale of
a golf hole.
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence

from .point import GeoPoint

EARTH_RADIUS_M = 6_371_000.0
METERS_PER_YARD = 0.9144
EARTH_RADIUS_YD = EARTH_RADIUS_M / METERS_PER_YARD


def normalize_bearing(bearing: float) -> float:
    value = bearing % 360.0
    # -1e-15 % 360 rounds to 360.0
    return 0.0 if value >= 360.0 else value


def signed_angle(angle: float) -> float:
    """Fold ``angle`` into ``(-180, 180]``."""

    value = normalize_bearing(angle)
    return value - 360.0 if value > 180.0 else value


def distance_yards(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle (haversine) distance between two points."""

    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    dlat = lat2 - lat1
    dlng = math.radians(b.lng - a.lng)
    h = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    )
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_YD * math.asin(math.sqrt(h))


def bearing_deg(a: GeoPoint, b: GeoPoint) -> float:
    """Initial great-circle bearing from ``a`` to ``b``."""

    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    dlng = math.radians(b.lng - a.lng)
    y = math.sin(dlng) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(
        dlng
    )
    return normalize_bearing(math.degrees(math.atan2(y, x)))


def project(origin: GeoPoint, distance: float, bearing: float) -> GeoPoint:
    """Destination point ``distance`` yards from ``origin`` along ``bearing``."""

    if distance == 0:
        return GeoPoint(lat=origin.lat, lng=origin.lng)
    delta = distance / EARTH_RADIUS_YD
    theta = math.radians(bearing)
    lat1 = math.radians(origin.lat)
    lng1 = math.radians(origin.lng)
    sin_lat2 = math.sin(lat1) * math.cos(delta) + math.cos(lat1) * math.sin(
        delta
    ) * math.cos(theta)
    lat2 = math.asin(max(-1.0, min(1.0, sin_lat2)))
    lng2 = lng1 + math.atan2(
        math.sin(theta) * math.sin(delta) * math.cos(lat1),
        math.cos(delta) - math.sin(lat1) * sin_lat2,
    )
    lng = (math.degrees(lng2) + 540.0) % 360.0 - 180.0
    return GeoPoint(lat=math.degrees(lat2), lng=lng)


def offset_laterally(point: GeoPoint, yards: float, bearing: float) -> GeoPoint:
    """Shift ``point`` perpendicular to ``bearing``; positive is right."""

    if yards >= 0:
        return project(point, yards, normalize_bearing(bearing + 90.0))
    return project(point, abs(yards), normalize_bearing(bearing - 90.0))


def shot_relative(
    origin: GeoPoint, point: GeoPoint, bearing: float
) -> tuple[float, float]:
    """Return ``(along, lateral)`` yards of ``point`` relative to a shot line.

    ``along`` is positive ahead of ``origin``; ``lateral`` is positive to the
    right of the line.
    """

    distance = distance_yards(origin, point)
    if distance == 0:
        return 0.0, 0.0
    diff = math.radians(bearing_deg(origin, point) - bearing)
    return distance * math.cos(diff), distance * math.sin(diff)


def centroid(points: Iterable[GeoPoint]) -> GeoPoint | None:
    pts: Sequence[GeoPoint] = list(points)
    if not pts:
        return None
    lat = sum(p.lat for p in pts) / len(pts)
    lng = sum(p.lng for p in pts) / len(pts)
    return GeoPoint(lat=lat, lng=lng)


__all__ = [
    "EARTH_RADIUS_M",
    "EARTH_RADIUS_YD",
    "METERS_PER_YARD",
    "bearing_deg",
    "centroid",
    "distance_yards",
    "normalize_bearing",
    "offset_laterally",
    "project",
    "shot_relative",
    "signed_angle",
]
