from __future__ import annotations

import pytest

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
    signed_angle,
)

from .conftest import TEE, along


def test_project_then_measure_round_trips() -> None:
    for bearing in (0.0, 45.0, 137.0, 270.0):
        target = project(TEE, 250.0, bearing)
        assert distance_yards(TEE, target) == pytest.approx(250.0, abs=0.01)
        assert bearing_deg(TEE, target) == pytest.approx(bearing, abs=0.01)


def test_zero_distance_projection_is_origin() -> None:
    assert project(TEE, 0.0, 90.0) == GeoPoint(lat=TEE.lat, lng=TEE.lng)
    assert distance_yards(TEE, TEE) == 0.0


def test_bearing_is_normalized() -> None:
    assert normalize_bearing(-90.0) == pytest.approx(270.0)
    assert normalize_bearing(720.0) == 0.0
    assert 0.0 <= bearing_deg(along(100), TEE) < 360.0
    assert bearing_deg(along(100), TEE) == pytest.approx(180.0, abs=0.01)


def test_signed_angle_folds_into_half_open_range() -> None:
    assert signed_angle(190.0) == pytest.approx(-170.0)
    assert signed_angle(-180.0) == pytest.approx(180.0)
    assert signed_angle(45.0) == pytest.approx(45.0)


def test_offset_laterally_right_is_positive() -> None:
    right = offset_laterally(TEE, 20.0, 0.0)
    left = offset_laterally(TEE, -20.0, 0.0)
    assert right.lng > TEE.lng
    assert left.lng < TEE.lng
    _, lateral = shot_relative(TEE, along(100, 20), 0.0)
    assert lateral == pytest.approx(20.0, abs=0.5)


def test_point_in_polygon_counts_vertices_and_edges_as_inside() -> None:
    square = [along(100, -10), along(100, 10), along(120, 10), along(120, -10)]
    assert point_in_polygon(along(110), square)
    assert point_in_polygon(square[0], square)
    assert not point_in_polygon(along(130), square)
    assert not point_in_polygon(along(110), square[:2])


def test_min_distance_to_polygon_uses_edges() -> None:
    square = [along(100, -10), along(100, 10), along(120, 10), along(120, -10)]
    assert min_distance_to_polygon(along(90), square) == pytest.approx(10.0, abs=0.1)
    assert min_distance_to_polygon(along(90), []) == float("inf")


def test_polygon_centroid_of_empty_is_none() -> None:
    assert polygon_centroid([]) is None
    center = polygon_centroid([along(100, -10), along(100, 10), along(120, 10), along(120, -10)])
    assert distance_yards(center, along(110)) == pytest.approx(0.0, abs=0.1)


def test_geopoint_accepts_long_coordinate_names() -> None:
    point = GeoPoint.model_validate({"latitude": 1.5, "longitude": 2.5})
    assert (point.lat, point.lng) == (1.5, 2.5)
    with pytest.raises(ValueError):
        GeoPoint(lat=95.0, lng=0.0)
