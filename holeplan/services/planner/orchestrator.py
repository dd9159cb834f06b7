"""Hole plan orchestration.

Runs forward generation (or the legacy backward planner), commits to the
best sequence and shapes the uniform :class:`Plan` output. Missing geometry
or an empty search never raises; an error plan is returned instead.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence

from holeplan.config import get_settings
from holeplan.config.scoring import ScoringConfig
from holeplan.geometry import distance_yards

from .backward import plan_backward
from .formatting import format_sequence, format_shot
from .generator import generate_forward_sequences
from .insights import apply_player_insights
from .models import (
    AlternativeSequence,
    Hole,
    Plan,
    PlanMetadata,
    PlanningStrategy,
    PlayerProfile,
    RiskAssessment,
    ShotSequence,
    StrategyType,
    Weather,
)

logger = logging.getLogger(__name__)

MISSING_POSITION = "Missing position data"
NO_SEQUENCES = "Could not generate shot sequences"

MIN_SUCCESS_PROBABILITY = 0.3
MAX_SUCCESS_PROBABILITY = 0.95
SCORE_FLOOR = -100.0
SCORE_CEILING = 100.0

_PENALTY_ZONE_TYPES = {"water": "Water", "ob": "OB"}


def create_error_plan(message: str) -> Plan:
    return Plan(
        shots=[],
        strategy=StrategyType.SMART,
        target_score=0,
        risk_assessment=RiskAssessment(
            main_threat="Unknown",
            worst_case="Unable to compute plan",
            bailout="Play conservatively",
        ),
        error=message,
    )


def target_score(par: int, strategy: StrategyType) -> int:
    return par - 1 if strategy is StrategyType.AGGRESSIVE else par


def success_probability(total_score: float) -> float:
    """Map a sequence score onto a 0.3-0.95 probability."""

    normalized = (total_score - SCORE_FLOOR) / (SCORE_CEILING - SCORE_FLOOR)
    return round(max(MIN_SUCCESS_PROBABILITY, min(MAX_SUCCESS_PROBABILITY, normalized)), 2)


def risk_assessment_for(sequence: ShotSequence) -> RiskAssessment:
    """Main threat from the first avoid zone of each shot.

    A water or OB zone wins outright; otherwise the first named hazard found
    is reported.
    """

    main_threat = "None"
    worst_case = "Miss the fairway"
    bailout = "Play conservatively"
    for shot in sequence.shots:
        if not shot.avoid_zones:
            continue
        zone = shot.avoid_zones[0]
        label = _PENALTY_ZONE_TYPES.get(zone.type)
        if label is not None:
            main_threat = f"{label} {zone.direction}".strip()
            worst_case = (
                "Penalty stroke and drop" if zone.type == "water" else "Stroke and distance"
            )
            bailout = f"Aim away from {zone.direction or 'hazard'}"
            break
        if main_threat == "None":
            main_threat = f"{zone.name or zone.type} {zone.direction}".strip()
    if sequence.total_score < 0:
        worst_case = "High risk of bogey or worse"
    return RiskAssessment(main_threat=main_threat, worst_case=worst_case, bailout=bailout)


def _alternative(
    sequence: ShotSequence,
    weather: Optional[Weather],
    club_distances: Optional[Mapping[str, float]],
) -> AlternativeSequence:
    return AlternativeSequence(
        shots=format_sequence(sequence, weather, club_distances),
        score=round(sequence.total_score, 1),
        summary=sequence.summary,
        strategy_type=sequence.strategy_type,
    )


def plan_from_sequences(
    hole: Hole,
    sequences: Sequence[ShotSequence],
    total_distance: float,
    weather: Optional[Weather] = None,
    top_n: int = 3,
    club_distances: Optional[Mapping[str, float]] = None,
) -> Plan:
    """Commit to ``sequences[0]`` and list the runners-up as alternatives."""

    if not sequences:
        return create_error_plan(NO_SEQUENCES)
    top = list(sequences[:top_n])
    best = top[0]
    for rank, sequence in enumerate(top, start=1):
        logger.debug(
            "#%d %s (score %.1f)", rank, sequence.summary, sequence.total_score
        )
    return Plan(
        shots=format_sequence(best, weather, club_distances),
        strategy=best.strategy_type,
        target_score=target_score(hole.par, best.strategy_type),
        risk_assessment=risk_assessment_for(best),
        metadata=PlanMetadata(
            total_distance=round(total_distance, 1),
            shot_count=best.shot_count,
            strategy_score=round(best.total_score, 1),
            success_probability=success_probability(best.total_score),
            planning_strategy=PlanningStrategy.FORWARD,
            sequences_considered=len(sequences),
        ),
        alternative_sequences=[
            _alternative(seq, weather, club_distances) for seq in top[1:]
        ],
    )


def compute_backward_plan(
    hole: Hole, player: PlayerProfile, weather: Optional[Weather] = None
) -> Plan:
    result = plan_backward(hole, player, weather)
    if result is None:
        return create_error_plan(MISSING_POSITION)
    if not result.shots:
        return create_error_plan(NO_SEQUENCES)
    return Plan(
        shots=[
            format_shot(shot, weather, player.club_distances) for shot in result.shots
        ],
        strategy=result.strategy.type,
        target_score=target_score(hole.par, result.strategy.type),
        risk_assessment=result.risk_assessment,
        metadata=PlanMetadata(
            total_distance=round(result.total_distance, 1),
            shot_count=result.shot_count,
            strategy_score=result.strategy.total_score,
            success_probability=result.strategy.success_probability,
            planning_strategy=PlanningStrategy.BACKWARD,
            sequences_considered=1,
        ),
    )


def compute_hole_plan(
    hole: Hole,
    player: PlayerProfile,
    weather: Optional[Weather] = None,
    *,
    strategy: Optional[PlanningStrategy] = None,
    config: Optional[ScoringConfig] = None,
    fallback: Optional[bool] = None,
) -> Plan:
    """Plan the hole for ``player``.

    ``strategy`` and ``fallback`` default to the configured planner settings.
    With fallback enabled, a forward search that yields no sequences is
    retried with the backward planner before an error plan is returned.
    """

    settings = get_settings()
    strategy = PlanningStrategy(strategy or settings.planning_strategy)
    fallback = settings.backward_fallback if fallback is None else fallback

    player = apply_player_insights(player)
    start = player.position or hole.tee
    if start is None or hole.green is None:
        return create_error_plan(MISSING_POSITION)

    if strategy is PlanningStrategy.BACKWARD:
        return compute_backward_plan(hole, player, weather)

    sequences = generate_forward_sequences(hole, player, weather, config)
    if sequences:
        return plan_from_sequences(
            hole,
            sequences,
            distance_yards(start, hole.green),
            weather,
            settings.top_sequences,
            player.club_distances,
        )
    if fallback:
        logger.warning(
            "forward planning produced no sequences; using backward planner",
            extra={"holeplan": {"par": hole.par, "hole": hole.number}},
        )
        return compute_backward_plan(hole, player, weather)
    return create_error_plan(NO_SEQUENCES)


__all__ = [
    "MISSING_POSITION",
    "NO_SEQUENCES",
    "compute_backward_plan",
    "compute_hole_plan",
    "create_error_plan",
    "plan_from_sequences",
    "risk_assessment_for",
    "success_probability",
    "target_score",
]
