from .geodesy import (
    bearing_deg,
    centroid,
    distance_yards,
    normalize_bearing,
    offset_laterally,
    project,
    shot_relative,
    signed_angle,
)
from .point import GeoPoint
from .polygons import min_distance_to_polygon, point_in_polygon, polygon_centroid

__all__ = [
    "GeoPoint",
    "bearing_deg",
    "centroid",
    "distance_yards",
    "min_distance_to_polygon",
    "normalize_bearing",
    "offset_laterally",
    "point_in_polygon",
    "polygon_centroid",
    "project",
    "shot_relative",
    "signed_angle",
]
