"""Legacy strategy-first planner.

Picks one strategy (aggressive, conservative or smart) from hole and player
heuristics, decides how many shots to take and then places the shots
working back from the green. Kept as a selectable mode and as the fallback
when forward generation produces nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Sequence

from holeplan.geometry import GeoPoint, bearing_deg, distance_yards, normalize_bearing

from .club_selection import (
    AWKWARD_MAX,
    AWKWARD_MIN,
    DEFAULT_IDEAL_LEAVE,
    default_club_for_distance,
    find_club_covering,
    ideal_approach_distance,
    select_clubs_for_distance,
)
from .clubs import DRIVER, FALLBACK_CLUB_DISTANCE, longest_club
from .dispersion import calculate_dispersion
from .environment import effective_reach
from .generator import HoleContext, build_context
from .hazards import (
    analyze_hazards_along_shot_line,
    calculate_landing_zone,
    calculate_safe_zone,
    check_hazard_conflicts,
    get_avoid_zones,
)
from .models import (
    CoursePolygon,
    Hole,
    LieType,
    PlayerProfile,
    PolygonType,
    RiskAssessment,
    ShotOption,
    StrategyType,
    Weather,
)

logger = logging.getLogger(__name__)

DEFAULT_HANDICAP = 15.0
DEFAULT_MAX_DISTANCE = 250.0
MIN_LAYUP_YARDS = 100.0

HAZARD_COUNT_TYPES = frozenset(
    {PolygonType.WATER, PolygonType.BUNKER, PolygonType.OB, PolygonType.PENALTY}
)
SEVERE_HAZARD_TYPES = frozenset({PolygonType.WATER, PolygonType.OB, PolygonType.PENALTY})


@dataclass(frozen=True, slots=True)
class StrategyProfile:
    type: StrategyType
    description: str
    risk_tolerance: float
    distance_multiplier: float
    target_score_offset: int
    reward_multiplier: float
    risk_multiplier: float
    success_modifier: float
    inherent_risk: float


STRATEGY_PROFILES: dict[StrategyType, StrategyProfile] = {
    StrategyType.AGGRESSIVE: StrategyProfile(
        type=StrategyType.AGGRESSIVE,
        description="Attack the hole - maximize distance and birdie opportunities",
        risk_tolerance=0.7,
        distance_multiplier=1.0,
        target_score_offset=-1,
        reward_multiplier=1.3,
        risk_multiplier=1.5,
        success_modifier=0.85,
        inherent_risk=3.0,
    ),
    StrategyType.CONSERVATIVE: StrategyProfile(
        type=StrategyType.CONSERVATIVE,
        description="Play safe - prioritize fairway and avoid trouble",
        risk_tolerance=0.9,
        distance_multiplier=0.9,
        target_score_offset=0,
        reward_multiplier=0.9,
        risk_multiplier=0.7,
        success_modifier=1.1,
        inherent_risk=-1.0,
    ),
    StrategyType.SMART: StrategyProfile(
        type=StrategyType.SMART,
        description="Balanced approach - optimize for expected score",
        risk_tolerance=0.8,
        distance_multiplier=0.95,
        target_score_offset=0,
        reward_multiplier=1.1,
        risk_multiplier=1.0,
        success_modifier=1.0,
        inherent_risk=1.0,
    ),
}


@dataclass(frozen=True, slots=True)
class StrategyOption:
    profile: StrategyProfile
    shot_count: int
    suitability: float

    @property
    def type(self) -> StrategyType:
        return self.profile.type


@dataclass(frozen=True, slots=True)
class ScoredStrategy:
    option: StrategyOption
    success_probability: float
    expected_score: float
    risk_score: float
    total_score: float

    @property
    def type(self) -> StrategyType:
        return self.option.type


@dataclass(frozen=True, slots=True)
class LayupTarget:
    target_distance: float
    leaving_distance: float
    reason: str


@dataclass(frozen=True, slots=True)
class BackwardPlan:
    strategy: ScoredStrategy
    shot_count: int
    shots: tuple[ShotOption, ...]
    risk_assessment: RiskAssessment
    total_distance: float


def _handicap(player: PlayerProfile) -> float:
    return DEFAULT_HANDICAP if player.handicap is None else player.handicap


def _count(polygons: Iterable[CoursePolygon], types: frozenset[PolygonType]) -> int:
    return sum(1 for p in polygons if p.type in types)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _max_distance(club_distances: Mapping[str, float]) -> float:
    longest = longest_club(club_distances)
    return longest[1] if longest else DEFAULT_MAX_DISTANCE


def aggressive_shot_count(par: int, yardage: float, max_distance: float) -> int:
    if par == 3:
        return 1
    if par == 5:
        return 2 if max_distance * 2 >= yardage else 3
    return 2


def smart_shot_count(par: int, yardage: float, max_distance: float, handicap: float) -> int:
    if par == 3:
        return 1
    if par == 5:
        # low handicaps may go for shorter par 5s
        if handicap <= 10 and max_distance * 2 >= yardage - 20:
            return 2
        return 3
    return 2


def strategy_suitability(
    strategy_type: StrategyType, hole: Hole, handicap: float, yardage: float
) -> float:
    hazards = _count(hole.polygons, HAZARD_COUNT_TYPES)
    if strategy_type is StrategyType.AGGRESSIVE:
        suitability = 0.5 + (15 - handicap) * 0.02 - hazards * 0.05
        if hole.par == 4 and yardage < 380:
            suitability += 0.1
        if hole.par == 5 and yardage < 500:
            suitability += 0.15
    elif strategy_type is StrategyType.CONSERVATIVE:
        suitability = 0.5 + (handicap - 10) * 0.02 + hazards * 0.05
        if hole.par == 4 and yardage > 420:
            suitability += 0.1
        if hole.par == 5 and yardage > 550:
            suitability += 0.1
    else:
        suitability = 0.8 if 8 <= handicap <= 20 else 0.7
    return _clamp(suitability, 0.0, 1.0)


def generate_strategies(
    hole: Hole, player: PlayerProfile, yardage: float
) -> list[StrategyOption]:
    handicap = _handicap(player)
    max_distance = _max_distance(player.club_distances)
    regulation = {3: 1, 4: 2, 5: 3}[hole.par]
    counts = {
        StrategyType.AGGRESSIVE: aggressive_shot_count(hole.par, yardage, max_distance),
        StrategyType.CONSERVATIVE: regulation,
        StrategyType.SMART: smart_shot_count(hole.par, yardage, max_distance, handicap),
    }
    return [
        StrategyOption(
            profile=STRATEGY_PROFILES[kind],
            shot_count=count,
            suitability=strategy_suitability(kind, hole, handicap, yardage),
        )
        for kind, count in counts.items()
    ]


def success_probability(
    option: StrategyOption, hole: Hole, player: PlayerProfile, yardage: float
) -> float:
    base = 0.9 - _handicap(player) * 0.015
    hazard_penalty = (
        _count(hole.polygons, HAZARD_COUNT_TYPES) * 0.03 * option.profile.risk_multiplier
    )
    if yardage > 450:
        distance_factor = 0.95
    elif yardage > 400:
        distance_factor = 0.97
    else:
        distance_factor = 1.0
    shot_factor = 0.95 if option.shot_count == 3 else 1.0
    probability = (
        base * option.profile.success_modifier * distance_factor * shot_factor
        - hazard_penalty
    )
    return _clamp(probability, 0.3, 0.95)


def expected_score(option: StrategyOption, probability: float, par: int) -> float:
    target = par + option.profile.target_score_offset
    failure = par + 1 + (1 - probability) * option.profile.risk_multiplier
    return probability * target + (1 - probability) * failure


def strategy_risk(option: StrategyOption, hole: Hole, player: PlayerProfile) -> float:
    """Risk on a 1-10 scale, higher is riskier."""

    risk = 3.0 + option.profile.inherent_risk
    risk += _count(hole.polygons, SEVERE_HAZARD_TYPES) * 0.8
    risk += _count(hole.polygons, frozenset({PolygonType.BUNKER})) * 0.3
    risk += (_handicap(player) - 10) * 0.1
    if option.shot_count == 2 and hole.par == 5:
        risk += 2
    return _clamp(risk, 1.0, 10.0)


def rank_strategies(
    options: Sequence[StrategyOption],
    hole: Hole,
    player: PlayerProfile,
    yardage: float,
) -> list[ScoredStrategy]:
    scored = []
    for option in options:
        probability = success_probability(option, hole, player, yardage)
        expected = expected_score(option, probability, hole.par)
        risk = strategy_risk(option, hole, player)
        total = (
            probability * 0.35
            + (10 - expected) / 10 * 0.35
            + option.suitability * 0.15
            + (10 - risk) / 10 * 0.15
        )
        scored.append(
            ScoredStrategy(
                option=option,
                success_probability=round(probability, 2),
                expected_score=round(expected, 2),
                risk_score=round(risk, 2),
                total_score=round(total, 2),
            )
        )
    scored.sort(key=lambda item: item.total_score, reverse=True)
    return scored


def determine_optimal_shot_count(
    total_distance: float,
    club_distances: Mapping[str, float],
    par: int,
    strategy_type: StrategyType,
) -> int:
    if not club_distances:
        return par - 1
    max_distance = _max_distance(club_distances)
    if par == 3:
        return 1
    if par == 4:
        if total_distance <= max_distance and strategy_type is StrategyType.AGGRESSIVE:
            return 1
        return 2
    if max_distance * 2 >= total_distance and strategy_type is not StrategyType.CONSERVATIVE:
        return 2
    return 3


def ideal_layup_distance(
    distance_to_green: float, club_distances: Mapping[str, float]
) -> LayupTarget:
    approach = ideal_approach_distance(club_distances)
    if AWKWARD_MIN <= approach <= AWKWARD_MAX:
        return LayupTarget(
            target_distance=distance_to_green - DEFAULT_IDEAL_LEAVE,
            leaving_distance=DEFAULT_IDEAL_LEAVE,
            reason="Adjusted to avoid awkward yardage",
        )
    return LayupTarget(
        target_distance=distance_to_green - approach,
        leaving_distance=approach,
        reason=f"Leaves {approach:.0f} yard approach",
    )


def generate_risk_assessment(
    shots: Sequence[ShotOption], hole: Hole
) -> RiskAssessment:
    """Hole-level threat summary refined by the first shot's avoid zones."""

    main_threat = "None - open hole"
    worst_case = "Bogey if you miss fairway"
    bailout = "Center of fairway/green"

    usable = [p for p in hole.polygons if p.is_usable]
    water = next((p for p in usable if p.type is PolygonType.WATER), None)
    ob = next((p for p in usable if p.type is PolygonType.OB), None)
    bunker = next((p for p in usable if p.type is PolygonType.BUNKER), None)
    if water is not None:
        main_threat = f"Water {water.label or ''}".strip()
        worst_case = "Double bogey or worse if ball finds water"
        bailout = "Play away from water, accept longer approach"
    elif ob is not None:
        main_threat = "Out of bounds"
        worst_case = "Stroke and distance penalty"
        bailout = "Play to safe side of fairway"
    elif bunker is not None:
        main_threat = f"Bunker {bunker.label or ''}".strip()
        worst_case = "Bogey from poor bunker shot"
        bailout = "Aim away from bunkers, take extra club"

    if shots and shots[0].avoid_zones:
        zone = shots[0].avoid_zones[0]
        main_threat = f"{zone.type} {zone.direction}"

    return RiskAssessment(main_threat=main_threat, worst_case=worst_case, bailout=bailout)


def find_best_club_for_distance(
    distance: float, club_distances: Mapping[str, float]
) -> str:
    covering = find_club_covering(distance, club_distances)
    return covering[0] if covering else DRIVER


def _pick_club(
    target_distance: float,
    club_distances: Mapping[str, float],
    lie: str,
    fallback: str,
) -> tuple[str, float]:
    choice = select_clubs_for_distance(target_distance, club_distances, lie)
    club = choice.primary if choice else fallback
    return club, float(club_distances.get(club, target_distance or FALLBACK_CLUB_DISTANCE))


def _shot(
    ctx: HoleContext,
    number: int,
    origin: GeoPoint,
    landing: GeoPoint,
    lie: str,
    fallback_club: str,
    is_approach: bool,
) -> ShotOption:
    target_distance = distance_yards(origin, landing)
    club, club_distance = _pick_club(target_distance, ctx.club_distances, lie, fallback_club)
    bearing = bearing_deg(origin, landing)
    reach = effective_reach(
        club, club_distance, ctx.weather, bearing, origin.elevation, landing.elevation
    )
    radius = calculate_dispersion(
        club, reach.effective_reach, ctx.player.handicap, ctx.player.measured_stats.get(club)
    ).radius
    return ShotOption(
        shot_number=number,
        club=club,
        club_distance=club_distance,
        raw_distance=reach.effective_reach,
        target_distance=target_distance,
        distance_remaining=0.0 if is_approach else distance_yards(landing, ctx.green),
        start=origin,
        landing_zone=landing,
        dispersion_radius=radius,
        is_approach=is_approach,
        hazard_conflicts=tuple(check_hazard_conflicts(landing, ctx.polygons, radius)),
        avoid_zones=tuple(get_avoid_zones(origin, landing, ctx.polygons)),
        safe_zone=calculate_safe_zone(
            landing,
            radius,
            ctx.polygons,
            pin=ctx.green if is_approach else None,
            approach_bearing=bearing,
        ),
        adjustments=reach.adjustments,
        expected_lie=None if is_approach else LieType.FAIRWAY,
        hazard_ranges=tuple(analyze_hazards_along_shot_line(origin, landing, ctx.polygons)),
    )


def build_shot_sequence(ctx: HoleContext, shot_count: int) -> list[ShotOption]:
    """Place ``shot_count`` shots from the start to the green.

    Intermediate landing spots are fixed back from the green first (the
    ideal approach distance, then the layup), and the shots are then
    walked forward from the start.
    """

    green, start = ctx.green, ctx.start
    lie = ctx.lie.value
    if shot_count <= 1:
        fallback = default_club_for_distance(ctx.total_distance)
        return [_shot(ctx, 1, start, green, lie, fallback, True)]

    from_green = normalize_bearing(ctx.bearing + 180)
    approach = ideal_approach_distance(ctx.club_distances)

    if shot_count == 2:
        tee_club = find_best_club_for_distance(
            ctx.total_distance - approach, ctx.club_distances
        )
        tee_radius = calculate_dispersion(
            tee_club,
            ctx.club_distances.get(tee_club, _max_distance(ctx.club_distances)),
            ctx.player.handicap,
        ).radius
        landing = calculate_landing_zone(
            green, approach, from_green, ctx.polygons, tee_radius
        ).position
        return [
            _shot(ctx, 1, start, landing, lie, tee_club, False),
            _shot(ctx, 2, landing, green, LieType.FAIRWAY.value, "pw", True),
        ]

    layup_radius = calculate_dispersion(
        "7_iron", ctx.club_distances.get("7_iron", FALLBACK_CLUB_DISTANCE), ctx.player.handicap
    ).radius
    leave = ideal_layup_distance(ctx.total_distance, ctx.club_distances).leaving_distance
    layup_zone = calculate_landing_zone(
        green, leave, from_green, ctx.polygons, layup_radius
    ).position
    to_layup = distance_yards(start, layup_zone)
    tee_carry = max(0.0, min(_max_distance(ctx.club_distances), to_layup - MIN_LAYUP_YARDS))
    driver_radius = calculate_dispersion(
        DRIVER, _max_distance(ctx.club_distances), ctx.player.handicap
    ).radius
    tee_landing = calculate_landing_zone(
        start, tee_carry, bearing_deg(start, layup_zone), ctx.polygons, driver_radius
    ).position
    layup_club = find_best_club_for_distance(
        distance_yards(tee_landing, layup_zone), ctx.club_distances
    )
    return [
        _shot(ctx, 1, start, tee_landing, lie, DRIVER, False),
        _shot(ctx, 2, tee_landing, layup_zone, LieType.FAIRWAY.value, layup_club, False),
        _shot(ctx, 3, layup_zone, green, LieType.FAIRWAY.value, "pw", True),
    ]


def plan_backward(
    hole: Hole,
    player: PlayerProfile,
    weather: Optional[Weather] = None,
) -> Optional[BackwardPlan]:
    """Strategy-first plan, or ``None`` when start or green is missing."""

    ctx = build_context(hole, player, weather)
    if ctx is None:
        return None
    yardage = hole.yardage or ctx.total_distance
    best = rank_strategies(generate_strategies(hole, player, yardage), hole, player, yardage)[0]
    shot_count = determine_optimal_shot_count(
        ctx.total_distance, ctx.club_distances, hole.par, best.type
    )
    shots = tuple(build_shot_sequence(ctx, shot_count))
    logger.debug(
        "backward plan: %s strategy, %d shots over %.0f yards",
        best.type.value,
        shot_count,
        ctx.total_distance,
    )
    return BackwardPlan(
        strategy=best,
        shot_count=shot_count,
        shots=shots,
        risk_assessment=generate_risk_assessment(shots, hole),
        total_distance=ctx.total_distance,
    )


__all__ = [
    "BackwardPlan",
    "LayupTarget",
    "STRATEGY_PROFILES",
    "ScoredStrategy",
    "StrategyOption",
    "StrategyProfile",
    "build_shot_sequence",
    "determine_optimal_shot_count",
    "expected_score",
    "find_best_club_for_distance",
    "generate_risk_assessment",
    "generate_strategies",
    "ideal_layup_distance",
    "plan_backward",
    "rank_strategies",
    "strategy_risk",
    "strategy_suitability",
    "success_probability",
]
