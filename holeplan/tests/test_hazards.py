from __future__ import annotations

import pytest

from holeplan.geometry import shot_relative
from holeplan.services.planner.hazards import (
    analyze_hazards_along_shot_line,
    apply_hazard_bias_to_target,
    avoid_landing_hazards,
    calculate_hazard_overlap,
    calculate_landing_zone,
    calculate_safe_green_target,
    calculate_safe_zone,
    check_hazard_conflicts,
    filter_relevant_hazards,
    get_avoid_zones,
    is_safe,
)
from holeplan.services.planner.models import PolygonType

from .conftest import TEE, along, rect


def test_point_on_water_vertex_is_critical_inside() -> None:
    pond = rect(PolygonType.WATER, 200, 230, 5, 30, label="Pond")
    conflicts = check_hazard_conflicts(pond.coordinates[0], [pond], 15.0)
    assert len(conflicts) == 1
    assert conflicts[0].type == "inside"
    assert conflicts[0].severity == "critical"
    assert conflicts[0].overlap_percentage == 100.0
    assert conflicts[0].name == "Pond"


@pytest.mark.parametrize("radius", [0.0, -5.0, 1.0, 40.0])
@pytest.mark.parametrize("kind", [PolygonType.WATER, PolygonType.BUNKER, PolygonType.OB])
def test_inside_point_conflicts_for_any_radius(kind, radius: float) -> None:
    hazard = rect(kind, 200, 220, -10, 10)
    conflicts = check_hazard_conflicts(along(210), [hazard], radius)
    assert [conflict.type for conflict in conflicts] == ["inside"]


def test_inside_bunker_is_high_not_critical() -> None:
    bunker = rect(PolygonType.BUNKER, 200, 220, -10, 10)
    conflicts = check_hazard_conflicts(along(210), [bunker], 15.0)
    assert conflicts[0].severity == "high"


def test_dispersion_overlap_grades_by_edge_distance() -> None:
    bunker = rect(PolygonType.BUNKER, 200, 220, 10, 30)
    near = check_hazard_conflicts(along(210, 5), [bunker], 15.0)
    far = check_hazard_conflicts(along(210, -2), [bunker], 15.0)
    assert near[0].type == "dispersion_overlap"
    assert near[0].severity == "high"
    assert far[0].severity == "medium"
    assert near[0].overlap_percentage > far[0].overlap_percentage
    assert check_hazard_conflicts(along(210, -20), [bunker], 15.0) == []


def test_non_hazard_polygons_never_conflict() -> None:
    fairway = rect(PolygonType.FAIRWAY, 150, 300, -20, 20)
    trees = rect(PolygonType.TREES, 200, 220, -5, 5)
    assert is_safe(along(210), [fairway, trees])


def test_hazard_overlap_percentage() -> None:
    bunker = rect(PolygonType.BUNKER, 200, 220, 10, 30)
    assert calculate_hazard_overlap(along(210, 20), 15.0, bunker) == 100.0
    assert calculate_hazard_overlap(along(210, -30), 15.0, bunker) == 0.0
    assert calculate_hazard_overlap(along(210), 20.0, bunker) == pytest.approx(50.0, abs=1)


def test_landing_zone_shifts_laterally_off_water() -> None:
    pond = rect(PolygonType.WATER, 230, 270, -8, 8)
    zone = calculate_landing_zone(TEE, 250.0, 0.0, [pond], 10.0)
    assert zone.is_optimal is False
    assert zone.adjustment is not None
    assert zone.adjustment.kind == "lateral"
    assert zone.adjustment.amount == 25.0
    assert zone.adjustment.direction == "right"
    assert is_safe(zone.position, [pond], 10.0)


def test_landing_zone_reports_risk_when_boxed_in() -> None:
    lake = rect(PolygonType.WATER, 150, 350, -80, 80, label="Lake")
    zone = calculate_landing_zone(TEE, 250.0, 0.0, [lake], 10.0)
    assert zone.has_risk is True
    assert zone.main_threat == "Lake"


def test_avoid_landing_hazards_returns_original_when_safe() -> None:
    target = along(250)
    assert avoid_landing_hazards(target, 0.0, [], 15.0) is target


def test_hazard_bias_pushes_target_away_from_water() -> None:
    water = rect(PolygonType.WATER, 230, 270, 12, 40)
    target = along(250)
    shifted = apply_hazard_bias_to_target(target, 0.0, [water], 15.0)
    _, lateral = shot_relative(TEE, shifted, 0.0)
    assert lateral < -3.0


def test_hazard_bias_stays_inside_fairway() -> None:
    water = rect(PolygonType.WATER, 230, 270, 12, 40)
    fairway = rect(PolygonType.FAIRWAY, 150, 350, -12, 11)
    shifted = apply_hazard_bias_to_target(along(250), 0.0, [water, fairway], 15.0)
    _, lateral = shot_relative(TEE, shifted, 0.0)
    # full shift leaves the fairway, half shift stays in
    assert lateral == pytest.approx(-9.0, abs=0.5)


def test_safe_green_target_moves_away_from_greenside_water() -> None:
    green = along(150)
    water = rect(PolygonType.WATER, 140, 160, 12, 30)
    aim = calculate_safe_green_target(green, 0.0, [water])
    _, lateral = shot_relative(green, aim, 0.0)
    assert lateral < 0
    assert calculate_safe_green_target(green, 0.0, []) is green


def test_safe_zone_prefers_the_open_side() -> None:
    target = along(150)
    bunker = rect(PolygonType.BUNKER, 145, 155, 8, 20, label="Greenside bunker")
    zone = calculate_safe_zone(target, 10.0, [bunker], pin=along(150, 6), approach_bearing=0.0)
    assert zone.direction == "left"
    assert zone.left_space == 50.0
    assert zone.right_space < 10.0
    assert zone.short_side_warning is not None
    assert "miss left" in zone.short_side_warning


def test_safe_zone_centered_without_hazards() -> None:
    zone = calculate_safe_zone(along(150), 10.0, [])
    assert zone.direction == "center"
    assert zone.offset == 0.0


def test_avoid_zones_classify_direction() -> None:
    end = along(250)
    polygons = [
        rect(PolygonType.BUNKER, 20, 40, -5, 5, label="Front"),
        rect(PolygonType.WATER, 150, 170, 15, 30, label="Creek"),
        rect(PolygonType.BUNKER, 240, 250, -35, -20, label="Left trap"),
    ]
    zones = {zone.name: zone for zone in get_avoid_zones(TEE, end, polygons)}
    assert zones["Front"].direction == "short"
    assert zones["Creek"].direction == "right"
    assert zones["Left trap"].direction == "long"


def test_hazards_along_shot_line_sorted_by_front_distance() -> None:
    polygons = [
        rect(PolygonType.WATER, 180, 200, -10, 10, label="Creek"),
        rect(PolygonType.TREES, 90, 110, -5, 5),
        rect(PolygonType.BUNKER, 150, 160, 60, 80),
    ]
    ranges = analyze_hazards_along_shot_line(TEE, along(250), polygons)
    assert [r.type for r in ranges] == ["trees", "water"]
    assert ranges[1].front_distance == pytest.approx(180.0, abs=0.5)
    assert ranges[1].back_distance == pytest.approx(200.0, abs=0.5)
    assert ranges[1].is_penalty is True


def test_relevant_hazards_rate_threat() -> None:
    polygons = [
        rect(PolygonType.WATER, 200, 220, 5, 25),
        rect(PolygonType.BUNKER, 200, 220, 30, 45),
    ]
    relevant = filter_relevant_hazards(TEE, 0.0, 250.0, polygons)
    threats = {item.polygon.type: item.threat for item in relevant}
    assert threats[PolygonType.WATER] == "high"
    assert threats[PolygonType.BUNKER] == "low"
