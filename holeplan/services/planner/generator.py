"""Forward (tee to green) shot sequence generation.

Each par has its own builder. Builders enumerate club combinations, place
every shot with dogleg-aware and hazard-aware targeting, score the result
and return :class:`ShotSequence` records. Nothing here mutates its inputs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional, Sequence

from holeplan.config.scoring import ScoringConfig, get_scoring_config
from holeplan.geometry import GeoPoint, bearing_deg, distance_yards

from .club_selection import ShotType, WedgeRange, get_valid_clubs_for_shot, ideal_wedge_range
from .clubs import LAYUP_CLUBS, normalize_club_id
from .dispersion import calculate_dispersion
from .environment import effective_reach
from .fairway import (
    estimate_fairway_width,
    fairway_centerline_target,
    fairway_width_at_distance,
)
from .formatting import sequence_summary
from .hazards import (
    analyze_hazards_along_shot_line,
    apply_hazard_bias_to_target,
    avoid_landing_hazards,
    calculate_safe_green_target,
    calculate_safe_zone,
    check_hazard_conflicts,
    get_avoid_zones,
    is_in_fairway,
)
from .models import (
    CALM,
    CoursePolygon,
    EffectiveReach,
    HazardRange,
    Hole,
    LieType,
    PlayerProfile,
    PolygonType,
    ShotOption,
    ShotSequence,
    StrategyType,
    Weather,
)
from .scorer import score_sequence

logger = logging.getLogger(__name__)

FROM_TEE_RADIUS_YARDS = 10.0
LAYUP_WINDOW_YARDS = 30.0
LAYUP_AWKWARD_LEAVE = (30.0, 60.0)
MAX_LAYUP_OPTIONS = 3
AGGRESSIVE_SCORE = 30.0
MAX_CONFLICTS_FOR_SMART = 2


@dataclass(frozen=True)
class HoleContext:
    """Per-call inputs shared by the par builders."""

    hole: Hole
    player: PlayerProfile
    weather: Weather
    config: ScoringConfig
    start: GeoPoint
    green: GeoPoint
    polygons: tuple[CoursePolygon, ...]
    lie: LieType
    total_distance: float
    bearing: float
    has_fairways: bool
    wedge_range: WedgeRange

    @property
    def club_distances(self) -> dict[str, float]:
        return self.player.club_distances


@dataclass(frozen=True, slots=True)
class LayupOption:
    reach: EffectiveReach
    leaves: float


def is_from_tee(hole: Hole, position: Optional[GeoPoint]) -> bool:
    if position is None:
        return True
    return hole.tee is not None and distance_yards(position, hole.tee) < FROM_TEE_RADIUS_YARDS


def build_context(
    hole: Hole,
    player: PlayerProfile,
    weather: Optional[Weather] = None,
    config: Optional[ScoringConfig] = None,
) -> Optional[HoleContext]:
    """Resolve start, green and hole bearing; ``None`` when geometry is missing."""

    start = player.position or hole.tee
    if start is None or hole.green is None:
        return None
    polygons = tuple(p for p in hole.polygons if p.is_usable)
    return HoleContext(
        hole=hole,
        player=player,
        weather=weather or CALM,
        config=config or get_scoring_config(),
        start=start,
        green=hole.green,
        polygons=polygons,
        lie=LieType.TEE if is_from_tee(hole, player.position) else player.lie_type,
        total_distance=distance_yards(start, hole.green),
        bearing=bearing_deg(start, hole.green),
        has_fairways=any(p.type is PolygonType.FAIRWAY for p in polygons),
        wedge_range=ideal_wedge_range(player.club_distances),
    )


def _dispersion_radius(ctx: HoleContext, club: str, distance: float) -> float:
    return calculate_dispersion(
        club,
        distance,
        ctx.player.handicap,
        ctx.player.measured_stats.get(club),
    ).radius


def _lie_after(ctx: HoleContext, landing: GeoPoint) -> Optional[LieType]:
    if not ctx.has_fairways:
        return None
    return LieType.FAIRWAY if is_in_fairway(landing, ctx.polygons) else LieType.ROUGH


def _plan_landing(
    ctx: HoleContext, origin: GeoPoint, reach: float, radius: float
) -> GeoPoint:
    bearing = bearing_deg(origin, ctx.green)
    target = fairway_centerline_target(origin, bearing, reach, ctx.polygons)
    target = apply_hazard_bias_to_target(target, bearing, ctx.polygons, radius)
    return avoid_landing_hazards(target, bearing, ctx.polygons, radius)


def _positional_shot(
    ctx: HoleContext,
    number: int,
    origin: GeoPoint,
    reach: EffectiveReach,
    target_distance: float,
    hazard_ranges: Sequence[HazardRange],
) -> ShotOption:
    """A tee shot or layup: lands short of the green, leaves a next shot."""

    radius = _dispersion_radius(ctx, reach.club_id, reach.effective_reach)
    landing = _plan_landing(ctx, origin, reach.effective_reach, radius)
    bearing = bearing_deg(origin, ctx.green)
    width = fairway_width_at_distance(origin, bearing, reach.effective_reach, ctx.polygons)
    if width is None:
        width = estimate_fairway_width(landing, ctx.bearing, ctx.polygons)
    return ShotOption(
        shot_number=number,
        club=reach.club_id,
        club_distance=reach.club_distance,
        raw_distance=reach.effective_reach,
        target_distance=target_distance,
        distance_remaining=distance_yards(landing, ctx.green),
        start=origin,
        landing_zone=landing,
        dispersion_radius=radius,
        is_approach=False,
        hazard_conflicts=tuple(check_hazard_conflicts(landing, ctx.polygons, radius)),
        avoid_zones=tuple(get_avoid_zones(origin, landing, ctx.polygons)),
        adjustments=reach.adjustments,
        expected_lie=_lie_after(ctx, landing),
        fairway_width=width,
        hazard_ranges=tuple(hazard_ranges),
        next_shot_hazard_ranges=tuple(
            analyze_hazards_along_shot_line(landing, ctx.green, ctx.polygons)
        ),
    )


def _approach_shot(
    ctx: HoleContext,
    number: int,
    origin: GeoPoint,
    reach: EffectiveReach,
    hazard_ranges: Sequence[HazardRange],
) -> ShotOption:
    bearing = bearing_deg(origin, ctx.green)
    aim = calculate_safe_green_target(ctx.green, bearing, ctx.polygons)
    radius = _dispersion_radius(ctx, reach.club_id, reach.effective_reach)
    return ShotOption(
        shot_number=number,
        club=reach.club_id,
        club_distance=reach.club_distance,
        raw_distance=reach.effective_reach,
        target_distance=distance_yards(origin, ctx.green),
        distance_remaining=0.0,
        start=origin,
        landing_zone=aim,
        dispersion_radius=radius,
        is_approach=True,
        hazard_conflicts=tuple(check_hazard_conflicts(aim, ctx.polygons, radius)),
        avoid_zones=tuple(get_avoid_zones(origin, aim, ctx.polygons)),
        safe_zone=calculate_safe_zone(
            aim, radius, ctx.polygons, pin=ctx.green, approach_bearing=bearing
        ),
        adjustments=reach.adjustments,
        hazard_ranges=tuple(hazard_ranges),
    )


def _approach_clubs(
    ctx: HoleContext, origin: GeoPoint, lie: Optional[LieType]
) -> list[EffectiveReach]:
    return get_valid_clubs_for_shot(
        ShotType.APPROACH,
        lie or LieType.FAIRWAY,
        distance_yards(origin, ctx.green),
        ctx.club_distances,
        ctx.weather,
        bearing_deg(origin, ctx.green),
        origin.elevation,
        ctx.green.elevation,
    )


def _tee_clubs(ctx: HoleContext) -> list[EffectiveReach]:
    return get_valid_clubs_for_shot(
        ShotType.TEE,
        ctx.lie,
        ctx.total_distance,
        ctx.club_distances,
        ctx.weather,
        ctx.bearing,
        ctx.start.elevation,
        ctx.start.elevation,
    )


def derive_strategy_type(score: float, conflicts: int) -> StrategyType:
    if score > AGGRESSIVE_SCORE and conflicts == 0:
        return StrategyType.AGGRESSIVE
    if score < 0 or conflicts > MAX_CONFLICTS_FOR_SMART:
        return StrategyType.CONSERVATIVE
    return StrategyType.SMART


def _finish(
    ctx: HoleContext,
    shots: Sequence[ShotOption],
    strategy: Optional[StrategyType] = None,
    suffix: str = "",
) -> ShotSequence:
    total, results = score_sequence(shots, ctx.player, ctx.polygons, ctx.config)
    scored = tuple(
        replace(shot, score=score, score_breakdown=breakdown)
        for shot, (score, breakdown) in zip(shots, results)
    )
    clubs = [shot.club for shot in scored]
    sequence = ShotSequence(
        shots=scored,
        strategy_type=strategy or StrategyType.SMART,
        total_score=total,
        summary=sequence_summary(clubs),
        sequence_id="-".join(clubs) + suffix,
    )
    if strategy is None:
        sequence = replace(
            sequence,
            strategy_type=derive_strategy_type(total, sequence.conflict_count),
        )
    logger.debug(
        "sequence %s scored %.1f (%s)",
        sequence.sequence_id,
        total,
        sequence.strategy_type.value,
    )
    return sequence


def build_par3(ctx: HoleContext) -> list[ShotSequence]:
    hazard_ranges = analyze_hazards_along_shot_line(ctx.start, ctx.green, ctx.polygons)
    sequences = []
    for reach in _approach_clubs(ctx, ctx.start, ctx.lie):
        shot = _approach_shot(ctx, 1, ctx.start, reach, hazard_ranges)
        sequences.append(_finish(ctx, [shot]))
    return sequences


def build_par4(ctx: HoleContext) -> list[ShotSequence]:
    hazard_ranges = analyze_hazards_along_shot_line(ctx.start, ctx.green, ctx.polygons)
    sequences = []
    for tee_reach in _tee_clubs(ctx):
        tee_shot = _positional_shot(
            ctx, 1, ctx.start, tee_reach, ctx.total_distance, hazard_ranges
        )
        origin = tee_shot.landing_zone
        for reach in _approach_clubs(ctx, origin, tee_shot.expected_lie):
            approach = _approach_shot(
                ctx, 2, origin, reach, tee_shot.next_shot_hazard_ranges
            )
            sequences.append(_finish(ctx, [tee_shot, approach]))
    return sequences


def layup_options(
    ctx: HoleContext, origin: GeoPoint, distance_to_green: float
) -> list[LayupOption]:
    """Up to three layup clubs that leave close to the ideal wedge distance."""

    sweet = ctx.wedge_range.sweet
    ideal_carry = distance_to_green - sweet
    bearing = bearing_deg(origin, ctx.green)
    low, high = LAYUP_AWKWARD_LEAVE
    options = []
    for raw_club, distance in ctx.club_distances.items():
        club = normalize_club_id(raw_club)
        if club not in LAYUP_CLUBS:
            continue
        reach = effective_reach(
            club, distance, ctx.weather, bearing, origin.elevation, origin.elevation
        )
        if abs(reach.effective_reach - ideal_carry) > LAYUP_WINDOW_YARDS:
            continue
        leaves = distance_to_green - reach.effective_reach
        if low <= leaves <= high:
            continue
        options.append(LayupOption(reach=reach, leaves=leaves))
    options.sort(key=lambda option: abs(option.leaves - sweet))
    return options[:MAX_LAYUP_OPTIONS]


def build_par5(ctx: HoleContext) -> list[ShotSequence]:
    hazard_ranges = analyze_hazards_along_shot_line(ctx.start, ctx.green, ctx.polygons)
    longest = max(ctx.club_distances.values())
    can_reach_in_two = longest * 2 >= ctx.total_distance
    sequences = []
    for tee_reach in _tee_clubs(ctx):
        tee_shot = _positional_shot(
            ctx, 1, ctx.start, tee_reach, ctx.total_distance, hazard_ranges
        )
        origin = tee_shot.landing_zone
        after_tee = tee_shot.distance_remaining

        if can_reach_in_two:
            for reach in _approach_clubs(ctx, origin, tee_shot.expected_lie):
                approach = _approach_shot(
                    ctx, 2, origin, reach, tee_shot.next_shot_hazard_ranges
                )
                sequences.append(
                    _finish(ctx, [tee_shot, approach], StrategyType.AGGRESSIVE, "-go")
                )

        for option in layup_options(ctx, origin, after_tee):
            layup = _positional_shot(
                ctx, 2, origin, option.reach, after_tee, tee_shot.next_shot_hazard_ranges
            )
            layup_origin = layup.landing_zone
            for reach in _approach_clubs(ctx, layup_origin, layup.expected_lie):
                approach = _approach_shot(
                    ctx, 3, layup_origin, reach, layup.next_shot_hazard_ranges
                )
                sequences.append(
                    _finish(ctx, [tee_shot, layup, approach], StrategyType.SMART)
                )
    return sequences


_BUILDERS = {3: build_par3, 4: build_par4, 5: build_par5}


def generate_forward_sequences(
    hole: Hole,
    player: PlayerProfile,
    weather: Optional[Weather] = None,
    config: Optional[ScoringConfig] = None,
) -> list[ShotSequence]:
    """All candidate sequences for the hole, best total score first.

    Returns an empty list when the hole has no green, there is neither a
    position nor a tee, or no club combination survives selection.
    """

    ctx = build_context(hole, player, weather, config)
    if ctx is None:
        return []
    sequences = _BUILDERS[hole.par](ctx)
    sequences.sort(key=lambda sequence: sequence.total_score, reverse=True)
    logger.debug(
        "generated %d sequences for par %d (%.0f yards)",
        len(sequences),
        hole.par,
        ctx.total_distance,
    )
    return sequences


__all__ = [
    "HoleContext",
    "LayupOption",
    "build_context",
    "build_par3",
    "build_par4",
    "build_par5",
    "derive_strategy_type",
    "generate_forward_sequences",
    "is_from_tee",
    "layup_options",
]
