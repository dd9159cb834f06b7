from __future__ import annotations

import pytest

from holeplan.geometry import distance_yards, point_in_polygon
from holeplan.services.planner.generator import (
    build_context,
    derive_strategy_type,
    generate_forward_sequences,
    is_from_tee,
    layup_options,
)
from holeplan.services.planner.models import (
    Hole,
    LieType,
    PolygonType,
    StrategyType,
)

from .conftest import PAR5_BAG, TEE, along, make_hole, make_player, rect


def test_par4_driver_then_approach(par4_hole, scenario_a_player) -> None:
    sequences = generate_forward_sequences(par4_hole, scenario_a_player)
    assert sequences
    for sequence in sequences:
        assert sequence.shot_count == 2
        tee_shot, approach = sequence.shots
        assert tee_shot.club == "driver"
        assert tee_shot.distance_remaining == pytest.approx(400 - 250, abs=0.5)
        assert approach.is_approach
        assert approach.distance_remaining == 0.0
    assert "8_iron" in {sequence.shots[1].club for sequence in sequences}


def test_sequences_sorted_best_first(par4_hole, full_bag_player) -> None:
    sequences = generate_forward_sequences(par4_hole, full_bag_player)
    scores = [sequence.total_score for sequence in sequences]
    assert scores == sorted(scores, reverse=True)
    assert all(
        sequence.total_score == pytest.approx(sum(shot.score for shot in sequence.shots))
        for sequence in sequences
    )


def test_par3_is_single_approach(full_bag_player) -> None:
    hole = make_hole(3, 152)
    sequences = generate_forward_sequences(hole, full_bag_player)
    assert sequences
    assert {sequence.shots[0].club for sequence in sequences} == {"7_iron", "8_iron"}
    assert all(sequence.shot_count == 1 for sequence in sequences)
    assert sequences[0].summary in {"7 Iron", "8 Iron"}


def test_par5_has_go_for_it_and_layup(par5_hole) -> None:
    player = make_player(PAR5_BAG)
    sequences = generate_forward_sequences(par5_hole, player)
    aggressive = [s for s in sequences if s.shot_count == 2]
    layups = [s for s in sequences if s.shot_count == 3]
    assert aggressive and layups
    assert all(s.strategy_type is StrategyType.AGGRESSIVE for s in aggressive)
    assert all(s.sequence_id.endswith("-go") for s in aggressive)
    assert [shot.club for shot in aggressive[0].shots] == ["driver", "3_wood"]
    assert all(s.strategy_type is StrategyType.SMART for s in layups)
    assert any(
        [shot.club for shot in s.shots] == ["driver", "9_iron", "gw"] for s in layups
    )


def test_layup_options_leave_near_sweet_spot(par5_hole) -> None:
    player = make_player(PAR5_BAG)
    ctx = build_context(par5_hole, player)
    options = layup_options(ctx, along(280), 240.0)
    assert [option.reach.club_id for option in options] == ["9_iron"]
    assert options[0].leaves == pytest.approx(100.0)


def test_tee_shot_steers_off_water() -> None:
    water = rect(PolygonType.WATER, 240, 260, -10, 10, label="Pond")
    hole = make_hole(4, 400, [water])
    player = make_player({"driver": 250, "8_iron": 155, "7_iron": 165})
    sequences = generate_forward_sequences(hole, player)
    assert sequences
    for sequence in sequences:
        assert not point_in_polygon(sequence.shots[0].landing_zone, water.coordinates)


def test_fairway_landing_sets_expected_lie() -> None:
    fairway = rect(PolygonType.FAIRWAY, 200, 300, -25, 25)
    hole = make_hole(4, 400, [fairway])
    player = make_player({"driver": 250, "8_iron": 155})
    sequences = generate_forward_sequences(hole, player)
    assert sequences[0].shots[0].expected_lie is LieType.FAIRWAY
    assert sequences[0].shots[0].fairway_width is not None


def test_missing_green_yields_nothing(scenario_a_player) -> None:
    hole = Hole(par=4, tee=TEE)
    assert generate_forward_sequences(hole, scenario_a_player) == []


def test_generation_does_not_mutate_inputs(par4_hole, scenario_a_player) -> None:
    before_hole = par4_hole.model_dump()
    before_player = scenario_a_player.model_dump()
    generate_forward_sequences(par4_hole, scenario_a_player)
    assert par4_hole.model_dump() == before_hole
    assert scenario_a_player.model_dump() == before_player


def test_player_position_overrides_tee(par4_hole) -> None:
    player = make_player(
        {"9_iron": 145, "pw": 135, "gw": 120}, position=along(250), lie_type="rough"
    )
    ctx = build_context(par4_hole, player)
    assert ctx.lie is LieType.ROUGH
    assert ctx.total_distance == pytest.approx(150.0, abs=0.5)
    assert distance_yards(ctx.start, along(250)) == 0.0


def test_is_from_tee_radius(par4_hole) -> None:
    assert is_from_tee(par4_hole, None)
    assert is_from_tee(par4_hole, along(5))
    assert not is_from_tee(par4_hole, along(50))


@pytest.mark.parametrize(
    ("score", "conflicts", "expected"),
    [
        (45.0, 0, StrategyType.AGGRESSIVE),
        (45.0, 1, StrategyType.SMART),
        (10.0, 3, StrategyType.CONSERVATIVE),
        (-5.0, 0, StrategyType.CONSERVATIVE),
        (15.0, 0, StrategyType.SMART),
    ],
)
def test_derive_strategy_type(score, conflicts, expected) -> None:
    assert derive_strategy_type(score, conflicts) is expected
