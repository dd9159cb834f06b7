from __future__ import annotations

import pytest

from holeplan.config import reset_settings_cache
from holeplan.services.planner.models import (
    AvoidZone,
    Hole,
    PlanningStrategy,
    ShotOption,
    ShotSequence,
    StrategyType,
)
from holeplan.services.planner.orchestrator import (
    MISSING_POSITION,
    NO_SEQUENCES,
    compute_hole_plan,
    create_error_plan,
    plan_from_sequences,
    risk_assessment_for,
    success_probability,
    target_score,
)

from .conftest import TEE, along, make_hole, make_player


def test_forward_plan_commits_to_best_sequence(par4_hole, scenario_a_player) -> None:
    plan = compute_hole_plan(par4_hole, scenario_a_player)
    assert plan.error is None
    assert [shot.shot_number for shot in plan.shots] == [1, 2]
    assert plan.shots[0].club == "Driver"
    assert plan.shots[0].club_id == "driver"
    assert plan.metadata.planning_strategy is PlanningStrategy.FORWARD
    assert plan.metadata.shot_count == 2
    assert plan.metadata.total_distance == pytest.approx(400.0, abs=0.5)
    assert 0.3 <= plan.metadata.success_probability <= 0.95
    assert plan.target_score == target_score(4, plan.strategy)


def test_alternatives_are_runners_up(par4_hole, full_bag_player) -> None:
    plan = compute_hole_plan(par4_hole, full_bag_player)
    assert len(plan.alternative_sequences) <= 2
    scores = [alt.score for alt in plan.alternative_sequences]
    assert all(score <= plan.metadata.strategy_score for score in scores)


def test_top_sequences_setting_limits_alternatives(
    monkeypatch: pytest.MonkeyPatch, par4_hole, full_bag_player
) -> None:
    monkeypatch.setenv("HOLEPLAN_TOP_SEQUENCES", "1")
    reset_settings_cache()
    plan = compute_hole_plan(par4_hole, full_bag_player)
    assert plan.alternative_sequences == []


def test_backward_strategy_is_selectable(par4_hole, full_bag_player) -> None:
    plan = compute_hole_plan(
        par4_hole, full_bag_player, strategy=PlanningStrategy.BACKWARD
    )
    assert plan.metadata.planning_strategy is PlanningStrategy.BACKWARD
    assert plan.metadata.sequences_considered == 1
    assert plan.shots


def test_backward_strategy_from_environment(
    monkeypatch: pytest.MonkeyPatch, par4_hole, full_bag_player
) -> None:
    monkeypatch.setenv("HOLEPLAN_PLANNING_STRATEGY", "backward")
    reset_settings_cache()
    plan = compute_hole_plan(par4_hole, full_bag_player)
    assert plan.metadata.planning_strategy is PlanningStrategy.BACKWARD


def test_missing_geometry_returns_error_plan(scenario_a_player) -> None:
    plan = compute_hole_plan(Hole(par=4, tee=TEE), scenario_a_player)
    assert plan.error == MISSING_POSITION
    assert plan.shots == []
    assert plan.risk_assessment.main_threat == "Unknown"
    assert plan.metadata is None


def test_empty_search_falls_back_to_backward(par4_hole, caplog) -> None:
    player = make_player({"pw": 120})
    with caplog.at_level("WARNING"):
        plan = compute_hole_plan(par4_hole, player)
    assert plan.error is None
    assert plan.metadata.planning_strategy is PlanningStrategy.BACKWARD
    assert "backward planner" in caplog.text


def test_empty_search_without_fallback_is_error(par4_hole) -> None:
    plan = compute_hole_plan(par4_hole, make_player({"pw": 120}), fallback=False)
    assert plan.error == NO_SEQUENCES
    assert plan.strategy is StrategyType.SMART


def test_plan_from_no_sequences_is_error(par4_hole) -> None:
    assert plan_from_sequences(par4_hole, [], 400.0).error == NO_SEQUENCES


def test_plan_is_deterministic(par4_hole, full_bag_player) -> None:
    first = compute_hole_plan(par4_hole, full_bag_player)
    second = compute_hole_plan(par4_hole, full_bag_player)
    assert first == second


@pytest.mark.parametrize(
    ("score", "expected"),
    [(-200.0, 0.3), (0.0, 0.5), (50.0, 0.75), (500.0, 0.95)],
)
def test_success_probability_is_clamped(score, expected) -> None:
    assert success_probability(score) == expected


def test_target_score_by_strategy() -> None:
    assert target_score(5, StrategyType.AGGRESSIVE) == 4
    assert target_score(5, StrategyType.SMART) == 5


def _sequence(zones, total=10.0) -> ShotSequence:
    shot = ShotOption(
        shot_number=1,
        club="driver",
        club_distance=250,
        raw_distance=250,
        target_distance=400,
        distance_remaining=150,
        start=TEE,
        landing_zone=along(250),
        dispersion_radius=30,
        is_approach=False,
        avoid_zones=tuple(zones),
    )
    return ShotSequence(shots=(shot,), strategy_type=StrategyType.SMART, total_score=total)


def _zone(kind: str, direction: str, name: str = "") -> AvoidZone:
    return AvoidZone(
        type=kind,
        name=name or kind,
        direction=direction,
        distance_to_edge=10,
        distance_from_player=200,
        lateral_offset=-20,
    )


def test_risk_assessment_prioritises_water() -> None:
    risk = risk_assessment_for(_sequence([_zone("water", "left", "Pond")]))
    assert risk.main_threat == "Water left"
    assert risk.worst_case == "Penalty stroke and drop"
    assert risk.bailout == "Aim away from left"


def test_risk_assessment_for_ob_and_bunkers() -> None:
    ob = risk_assessment_for(_sequence([_zone("ob", "right")]))
    assert ob.main_threat == "OB right"
    assert ob.worst_case == "Stroke and distance"
    bunker = risk_assessment_for(_sequence([_zone("bunker", "short", "Cross bunker")]))
    assert bunker.main_threat == "Cross bunker short"


def test_risk_assessment_for_losing_sequence() -> None:
    risk = risk_assessment_for(_sequence([], total=-12.0))
    assert risk.main_threat == "None"
    assert risk.worst_case == "High risk of bogey or worse"


def test_error_plan_shape() -> None:
    plan = create_error_plan("boom")
    assert plan.error == "boom"
    assert plan.target_score == 0
    assert plan.risk_assessment.bailout == "Play conservatively"


def test_par3_plan(full_bag_player) -> None:
    plan = compute_hole_plan(make_hole(3, 152), full_bag_player)
    assert len(plan.shots) == 1
    assert plan.shots[0].next_shot_distance == 0.0
