from __future__ import annotations

from typing import Optional

import pytest

from holeplan.config.scoring import merge_scoring_config
from holeplan.services.planner.models import (
    HazardConflict,
    HazardRange,
    LieType,
    PlayerArea,
    ShotOption,
)
from holeplan.services.planner.scorer import club_utilization, score_sequence, score_shot

from .conftest import TEE, along, make_player


def _shot(
    club: str = "7_iron",
    raw: float = 150.0,
    target: float = 150.0,
    remaining: float = 0.0,
    is_approach: bool = True,
    lie: Optional[LieType] = None,
    **kwargs,
) -> ShotOption:
    return ShotOption(
        shot_number=1,
        club=club,
        club_distance=raw,
        raw_distance=raw,
        target_distance=target,
        distance_remaining=remaining,
        start=TEE,
        landing_zone=along(raw),
        dispersion_radius=kwargs.pop("dispersion_radius", 12.0),
        is_approach=is_approach,
        expected_lie=lie,
        **kwargs,
    )


def _types(items) -> list[str]:
    return [item.type for item in items]


def test_perfect_approach_collects_bonuses() -> None:
    score, breakdown = score_shot(_shot())
    assert breakdown.penalties == []
    assert _types(breakdown.bonuses) == ["fullSwing", "distanceAccuracy", "safeMiss"]
    assert score == 25


def test_score_is_sum_of_breakdown() -> None:
    shot = _shot(raw=150.0, target=100.0)
    score, breakdown = score_shot(shot)
    assert "partialSwing" in _types(breakdown.penalties)
    assert "overGreen" in _types(breakdown.penalties)
    assert score == sum(i.value for i in breakdown.penalties) + sum(
        i.value for i in breakdown.bonuses
    )
    assert score == -35


def test_half_swing_leave_is_penalized() -> None:
    score, breakdown = score_shot(_shot(remaining=45.0, is_approach=False))
    assert "halfSwing" in _types(breakdown.penalties)
    assert score == -10


def test_full_wedge_leave_and_fairway_landing_are_rewarded() -> None:
    score, breakdown = score_shot(
        _shot(remaining=100.0, is_approach=False, lie=LieType.FAIRWAY)
    )
    assert {"wedgeApproach", "fairwayLanding"} <= set(_types(breakdown.bonuses))
    missed, _ = score_shot(_shot(remaining=100.0, is_approach=False, lie=LieType.ROUGH))
    assert missed == score - 30


def test_more_hazard_overlap_scores_lower() -> None:
    def conflict(overlap: float) -> HazardConflict:
        return HazardConflict("dispersion_overlap", "water", "Pond", "high", 3.0, overlap)

    light, _ = score_shot(_shot(hazard_conflicts=(conflict(25.0),)))
    heavy, breakdown = score_shot(_shot(hazard_conflicts=(conflict(50.0),)))
    assert heavy < light
    hazard = next(item for item in breakdown.penalties if item.type == "hazard")
    assert hazard.value == -20


def test_tighter_dispersion_scores_no_lower() -> None:
    wide, _ = score_shot(
        _shot(remaining=100.0, is_approach=False, fairway_width=40.0, dispersion_radius=25.0)
    )
    tight, _ = score_shot(
        _shot(remaining=100.0, is_approach=False, fairway_width=40.0, dispersion_radius=8.0)
    )
    assert tight > wide


def test_carry_over_water_penalized_in_flight_path() -> None:
    creek = HazardRange("water", "Creek", 80.0, 100.0, True, 40.0)
    score, breakdown = score_shot(_shot(hazard_ranges=(creek,)))
    flight = next(item for item in breakdown.penalties if item.type == "flightPath")
    assert flight.value == -25
    assert "Creek" in flight.reason


def test_trees_in_flight_path_dominate() -> None:
    trees = HazardRange("trees", "trees", 60.0, 80.0, False, 15.0)
    score, _ = score_shot(_shot(hazard_ranges=(trees,)))
    assert score <= -75


def test_player_strength_and_weakness() -> None:
    player = make_player(
        {"pw": 120}, best_area=PlayerArea.WEDGES, worst_area=PlayerArea.SHORT_IRONS
    )
    wedge, wedge_breakdown = score_shot(_shot(club="pw", raw=120, target=120), player=player)
    iron, iron_breakdown = score_shot(_shot(club="8_iron", raw=120, target=120), player=player)
    assert "strength" in _types(wedge_breakdown.bonuses)
    assert "weakness" in _types(iron_breakdown.penalties)
    assert wedge - iron == 25


def test_utilization_only_applies_to_approaches() -> None:
    assert club_utilization(_shot(raw=150, target=120), True) == pytest.approx(0.8)
    assert club_utilization(_shot(raw=150, target=120), False) == 1.0


def test_overrides_change_weights() -> None:
    config = merge_scoring_config({"bonuses": {"fullSwing": 40}})
    score, _ = score_shot(_shot(), config=config)
    assert score == 55


def test_sequence_treats_last_shot_as_approach() -> None:
    tee = _shot(club="driver", raw=250, target=400, remaining=150.0, is_approach=False)
    approach = _shot(raw=150, target=150)
    total, results = score_sequence([tee, approach])
    assert len(results) == 2
    assert total == pytest.approx(results[0][0] + results[1][0])
    assert "distanceAccuracy" in _types(results[1][1].bonuses)
