"""Shot and sequence scoring.

Each term contributes one :class:`ScoreItem` to the breakdown when its value
is non-zero; the shot score is the sum of all items (higher is better).
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from holeplan.config.scoring import (
    ScoringConfig,
    clubs_for_area,
    get_scoring_config,
    hazard_severity,
)

from .clubs import club_display_name
from .models import (
    CoursePolygon,
    LieType,
    PlayerProfile,
    PolygonType,
    ScoreBreakdown,
    ScoreItem,
    ShotOption,
)

_SAFE_MISS_HAZARDS = frozenset(
    {PolygonType.WATER, PolygonType.OB, PolygonType.BUNKER, PolygonType.PENALTY}
)


def _item(kind: str, value: float, reason: str) -> Optional[ScoreItem]:
    if value == 0:
        return None
    return ScoreItem(type=kind, value=value, reason=reason)


def club_utilization(shot: ShotOption, is_approach: bool) -> float:
    """Fraction of the club's reach the shot asks for.

    Tee shots and layups are full swings; an approach only needs
    ``min(target, reach) / reach``.
    """

    if not is_approach or shot.raw_distance <= 0:
        return 1.0
    return min(shot.target_distance, shot.raw_distance) / shot.raw_distance


def _remaining_distance_term(remaining: float, config: ScoringConfig) -> Optional[ScoreItem]:
    t, p = config.thresholds, config.penalties
    if t.awkward_min <= remaining <= t.awkward_max:
        return _item(
            "halfSwing",
            p.half_swing_30_60,
            f"{remaining:.0f} yards is worst distance - too far for chip, "
            "too short for full swing",
        )
    if t.secondary_awkward_min <= remaining <= t.secondary_awkward_max:
        return _item(
            "awkwardDistance",
            p.awkward_61_74,
            f"{remaining:.0f} yards is awkward - partial wedge required",
        )
    return None


def _partial_swing_term(utilization: float, config: ScoringConfig) -> Optional[ScoreItem]:
    t, p = config.thresholds, config.penalties
    if utilization < t.severe_partial_swing:
        return _item(
            "partialSwing",
            p.partial_swing_under_75,
            f"Only {utilization * 100:.0f}% of club - requires significant decel",
        )
    if utilization < t.partial_swing:
        return _item(
            "partialSwing",
            p.partial_swing_under_85,
            f"Only {utilization * 100:.0f}% of club - partial swing needed",
        )
    return None


def _hazard_term(shot: ShotOption) -> Optional[ScoreItem]:
    if not shot.hazard_conflicts:
        return None
    total = 0.0
    names = []
    for conflict in shot.hazard_conflicts:
        total -= round(
            hazard_severity(conflict.hazard_type) * conflict.overlap_percentage / 100
        )
        names.append(conflict.name)
    return _item("hazard", total, f"Dispersion overlaps {', '.join(names)}")


def _fairway_term(
    shot: ShotOption, config: ScoringConfig
) -> Optional[ScoreItem]:
    if shot.expected_lie is None:
        return None
    if shot.expected_lie is LieType.FAIRWAY:
        return _item(
            "fairwayLanding", config.bonuses.fairway_landing, "Landing zone is in fairway"
        )
    return _item("fairwayMiss", config.penalties.fairway_miss, "Landing zone is in rough")


def _over_green_term(shot: ShotOption, config: ScoringConfig) -> Optional[ScoreItem]:
    if shot.target_distance <= 0:
        return None
    ratio = shot.raw_distance / shot.target_distance
    if ratio > config.thresholds.over_green:
        return _item(
            "overGreen",
            config.penalties.over_the_green,
            f"Club flies {(ratio - 1) * 100:.0f}% past target - risk of going over green",
        )
    return None


def _area_terms(
    shot: ShotOption, player: Optional[PlayerProfile], config: ScoringConfig
) -> list[Optional[ScoreItem]]:
    if player is None:
        return []
    name = club_display_name(shot.club)
    items: list[Optional[ScoreItem]] = []
    worst = player.worst_area.value if player.worst_area else None
    best = player.best_area.value if player.best_area else None
    if worst and shot.club in clubs_for_area(worst):
        items.append(
            _item(
                "weakness",
                config.penalties.player_weakness,
                f"{name} is in your weak area ({worst})",
            )
        )
    if best and shot.club in clubs_for_area(best):
        items.append(
            _item(
                "strength",
                config.bonuses.player_strength,
                f"{name} is your strength ({best})",
            )
        )
    return items


def _distance_hazard_term(shot: ShotOption, config: ScoringConfig) -> Optional[ScoreItem]:
    if not shot.hazard_ranges or shot.raw_distance <= 0:
        return None
    spread = (shot.dispersion_radius or 15) * 0.8
    landing_min = shot.raw_distance - spread
    landing_max = shot.raw_distance + spread
    window = landing_max - landing_min
    total = 0.0
    reasons = []
    for hazard in shot.hazard_ranges:
        if landing_max >= hazard.front_distance and landing_min <= hazard.back_distance:
            overlap = min(landing_max, hazard.back_distance) - max(
                landing_min, hazard.front_distance
            )
            overlap_pct = overlap / window * 100 if window > 0 else 100.0
            penalty = hazard.severity * overlap_pct / 100
            if hazard.is_penalty:
                penalty *= 2.0
            total -= round(penalty)
            reasons.append(
                f"Landing distance overlaps {hazard.name} "
                f"({hazard.front_distance:.0f}-{hazard.back_distance:.0f} yds)"
            )
            continue
        buffer = max(hazard.front_distance - landing_max, landing_min - hazard.back_distance)
        if 0 < buffer < config.thresholds.tight_margin_yards:
            total += -8 if hazard.is_penalty else -3
            reasons.append(f"Lands {buffer:.0f} yds from {hazard.name} - tight margin")
    return _item("distanceHazard", total, "; ".join(reasons))


def _flight_path_term(shot: ShotOption, config: ScoringConfig) -> Optional[ScoreItem]:
    if not shot.hazard_ranges or shot.raw_distance <= 0:
        return None
    p = config.penalties
    total = 0.0
    reasons = []
    for hazard in shot.hazard_ranges:
        if not (hazard.back_distance < shot.raw_distance - 10 and hazard.front_distance > 0):
            continue
        span = f"({hazard.front_distance:.0f}-{hazard.back_distance:.0f} yds)"
        if hazard.type == PolygonType.TREES.value:
            total += p.trees_in_flight_path
            reasons.append(f"Trees block flight path {span}")
        elif hazard.is_penalty:
            total += p.carry_over_water
            reasons.append(f"Must carry over {hazard.name} {span}")
        elif hazard.type == PolygonType.BUNKER.value:
            total += p.carry_over_hazard
            reasons.append(f"Carries over {hazard.name}")
    return _item("flightPath", total, "; ".join(reasons))


def _next_shot_term(shot: ShotOption, config: ScoringConfig) -> Optional[ScoreItem]:
    if not shot.next_shot_hazard_ranges or shot.distance_remaining <= 0:
        return None
    p = config.penalties
    total = 0.0
    reasons = []
    for hazard in shot.next_shot_hazard_ranges:
        if not (
            hazard.front_distance > 0
            and hazard.back_distance < shot.distance_remaining - 10
        ):
            continue
        if hazard.type == PolygonType.TREES.value:
            total += p.next_shot_over_trees
            reasons.append(f"Next shot must clear trees ({hazard.name})")
        elif hazard.is_penalty:
            total += p.next_shot_over_water
            reasons.append(f"Next shot must carry {hazard.name}")
        elif hazard.type == PolygonType.BUNKER.value:
            total += p.next_shot_over_bunker
            reasons.append(f"Next shot carries over {hazard.name}")
    return _item("nextShotHazard", total, "; ".join(reasons))


def _full_swing_term(utilization: float, config: ScoringConfig) -> Optional[ScoreItem]:
    t = config.thresholds
    if t.sweet_spot_min <= utilization <= t.sweet_spot_max:
        return _item("fullSwing", config.bonuses.full_swing, "Full comfortable swing")
    return None


def _wedge_term(remaining: float, config: ScoringConfig) -> Optional[ScoreItem]:
    t = config.thresholds
    if t.full_wedge_min <= remaining <= t.full_wedge_max:
        return _item(
            "wedgeApproach",
            config.bonuses.full_wedge_approach,
            f"Leaves {remaining:.0f} yards - ideal full wedge distance",
        )
    return None


def _safe_miss_term(
    shot: ShotOption, polygons: Sequence[CoursePolygon], config: ScoringConfig
) -> Optional[ScoreItem]:
    if not shot.hazard_conflicts and shot.safe_zone is not None:
        return _item("safeMiss", config.bonuses.safe_miss_zone, "Safe miss zone available")
    if not any(p.type in _SAFE_MISS_HAZARDS and p.is_usable for p in polygons):
        return _item("safeMiss", config.bonuses.safe_miss_zone, "No hazards in play")
    return None


def _fairway_width_term(shot: ShotOption, config: ScoringConfig) -> Optional[ScoreItem]:
    if not shot.fairway_width:
        return None
    ratio = shot.fairway_width / ((shot.dispersion_radius or 15) * 2)
    if ratio >= config.thresholds.wide_fairway_ratio:
        return _item(
            "fairwayWidth",
            config.bonuses.wide_fairway,
            f"Wide fairway ({shot.fairway_width:.0f} yds) at landing zone",
        )
    if ratio < config.thresholds.narrow_fairway_ratio:
        return _item(
            "fairwayWidth",
            config.penalties.narrow_fairway,
            f"Narrow fairway ({shot.fairway_width:.0f} yds) at landing zone "
            "- consider different club",
        )
    return None


def _accuracy_term(shot: ShotOption, config: ScoringConfig) -> Optional[ScoreItem]:
    if abs(shot.raw_distance - shot.target_distance) <= config.thresholds.distance_accuracy_yards:
        return _item(
            "distanceAccuracy",
            config.bonuses.distance_accuracy,
            "Club reach matches the distance to the pin",
        )
    return None


def score_shot(
    shot: ShotOption,
    is_approach: Optional[bool] = None,
    player: Optional[PlayerProfile] = None,
    polygons: Iterable[CoursePolygon] = (),
    config: Optional[ScoringConfig] = None,
) -> tuple[float, ScoreBreakdown]:
    """Score one shot and return ``(score, breakdown)``."""

    config = config or get_scoring_config()
    polygons = list(polygons)
    approach = shot.is_approach if is_approach is None else is_approach
    utilization = club_utilization(shot, approach)

    penalties: list[Optional[ScoreItem]] = [
        _remaining_distance_term(shot.distance_remaining, config),
        _partial_swing_term(utilization, config),
        _hazard_term(shot),
    ]
    bonuses: list[Optional[ScoreItem]] = [_full_swing_term(utilization, config)]

    if approach:
        penalties.append(_over_green_term(shot, config))
        bonuses.append(_accuracy_term(shot, config))
    else:
        penalties.append(_distance_hazard_term(shot, config))
        penalties.append(_next_shot_term(shot, config))
        bonuses.append(_wedge_term(shot.distance_remaining, config))
        fairway = _fairway_term(shot, config)
        if fairway is not None and fairway.value > 0:
            bonuses.append(fairway)
        else:
            penalties.append(fairway)
        width = _fairway_width_term(shot, config)
        if width is not None and width.value > 0:
            bonuses.append(width)
        else:
            penalties.append(width)
    penalties.append(_flight_path_term(shot, config))
    bonuses.append(_safe_miss_term(shot, polygons, config))

    for item in _area_terms(shot, player, config):
        if item is None:
            continue
        (bonuses if item.value > 0 else penalties).append(item)

    breakdown = ScoreBreakdown(
        penalties=[item for item in penalties if item is not None],
        bonuses=[item for item in bonuses if item is not None],
    )
    score = sum(item.value for item in breakdown.penalties) + sum(
        item.value for item in breakdown.bonuses
    )
    return score, breakdown


def score_sequence(
    shots: Sequence[ShotOption],
    player: Optional[PlayerProfile] = None,
    polygons: Iterable[CoursePolygon] = (),
    config: Optional[ScoringConfig] = None,
) -> tuple[float, list[tuple[float, ScoreBreakdown]]]:
    """Score every shot, treating the last one as the approach."""

    config = config or get_scoring_config()
    polygons = list(polygons)
    results = []
    for index, shot in enumerate(shots):
        results.append(
            score_shot(
                shot,
                is_approach=index == len(shots) - 1,
                player=player,
                polygons=polygons,
                config=config,
            )
        )
    return sum(score for score, _ in results), results


__all__ = ["club_utilization", "score_sequence", "score_shot"]
