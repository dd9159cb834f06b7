"""Scoring weights for shot and sequence evaluation."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from functools import lru_cache
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)

SCORING_OVERRIDES_ENV = "HOLEPLAN_SCORING_OVERRIDES"

HAZARD_SEVERITY: dict[str, float] = {
    "water": 40,
    "ob": 50,
    "penalty": 40,
    "bunker": 15,
    "deep_bunker": 20,
    "fairway_bunker": 12,
    "greenside_bunker": 15,
    "waste_area": 8,
    "trees": 15,
    "heavy_rough": 10,
}
DEFAULT_HAZARD_SEVERITY = 10.0

PENALTY_HAZARD_TYPES = frozenset({"water", "ob", "penalty"})

AREA_TO_CLUBS: dict[str, tuple[str, ...]] = {
    "driver": ("driver",),
    "long_irons": (
        "3_iron",
        "4_iron",
        "5_iron",
        "3_wood",
        "5_wood",
        "7_wood",
        "3_hybrid",
        "4_hybrid",
        "5_hybrid",
    ),
    "short_irons": ("6_iron", "7_iron", "8_iron", "9_iron"),
    "wedges": (
        "pw",
        "gw",
        "sw",
        "lw",
        "w_46",
        "w_48",
        "w_50",
        "w_52",
        "w_54",
        "w_56",
        "w_58",
        "w_60",
    ),
    "chipping": ("sw", "lw", "w_54", "w_56", "w_58", "w_60"),
    "putting": (),
}


@dataclass(frozen=True)
class ScoringPenalties:
    half_swing_30_60: float = -30
    awkward_61_74: float = -10
    partial_swing_under_75: float = -25
    partial_swing_under_85: float = -10
    fairway_miss: float = -15
    over_the_green: float = -20
    player_weakness: float = -15
    narrow_fairway: float = -15
    trees_in_flight_path: float = -100
    carry_over_water: float = -25
    carry_over_hazard: float = -5
    next_shot_over_water: float = -30
    next_shot_over_trees: float = -50
    next_shot_over_bunker: float = -10


@dataclass(frozen=True)
class ScoringBonuses:
    full_swing: float = 10
    full_wedge_approach: float = 20
    fairway_landing: float = 15
    safe_miss_zone: float = 10
    player_strength: float = 10
    wide_fairway: float = 12
    distance_accuracy: float = 5


@dataclass(frozen=True)
class ScoringThresholds:
    awkward_min: float = 30
    awkward_max: float = 60
    secondary_awkward_min: float = 61
    secondary_awkward_max: float = 74
    full_wedge_min: float = 75
    full_wedge_max: float = 130
    sweet_spot_min: float = 0.90
    sweet_spot_max: float = 1.00
    partial_swing: float = 0.85
    severe_partial_swing: float = 0.75
    over_green: float = 1.10
    wide_fairway_ratio: float = 2.0
    narrow_fairway_ratio: float = 1.0
    distance_accuracy_yards: float = 5
    tight_margin_yards: float = 15


@dataclass(frozen=True)
class ScoringConfig:
    penalties: ScoringPenalties = ScoringPenalties()
    bonuses: ScoringBonuses = ScoringBonuses()
    thresholds: ScoringThresholds = ScoringThresholds()


DEFAULT_SCORING_CONFIG = ScoringConfig()

# camelCase keys accepted from JSON payloads and the environment
_ALIASES: dict[str, dict[str, str]] = {
    "penalties": {
        "halfSwing30_60": "half_swing_30_60",
        "awkward61_74": "awkward_61_74",
        "partialSwingUnder75": "partial_swing_under_75",
        "partialSwingUnder85": "partial_swing_under_85",
        "fairwayMiss": "fairway_miss",
        "overTheGreen": "over_the_green",
        "playerWeakness": "player_weakness",
        "narrowFairway": "narrow_fairway",
        "treesInFlightPath": "trees_in_flight_path",
        "carryOverWater": "carry_over_water",
        "carryOverHazard": "carry_over_hazard",
        "nextShotOverWater": "next_shot_over_water",
        "nextShotOverTrees": "next_shot_over_trees",
        "nextShotOverBunker": "next_shot_over_bunker",
    },
    "bonuses": {
        "fullSwing": "full_swing",
        "fullWedgeApproach": "full_wedge_approach",
        "fairwayLanding": "fairway_landing",
        "safeMissZone": "safe_miss_zone",
        "playerStrength": "player_strength",
        "wideFairway": "wide_fairway",
        "distanceAccuracy": "distance_accuracy",
    },
    "thresholds": {
        "awkwardMin": "awkward_min",
        "awkwardMax": "awkward_max",
        "secondaryAwkwardMin": "secondary_awkward_min",
        "secondaryAwkwardMax": "secondary_awkward_max",
        "fullWedgeMin": "full_wedge_min",
        "fullWedgeMax": "full_wedge_max",
        "utilizationSweetSpotMin": "sweet_spot_min",
        "utilizationSweetSpotMax": "sweet_spot_max",
        "utilizationPartialThreshold": "partial_swing",
        "utilizationSeverePartialThreshold": "severe_partial_swing",
        "overGreenThreshold": "over_green",
        "wideFairwayRatio": "wide_fairway_ratio",
        "narrowFairwayRatio": "narrow_fairway_ratio",
        "distanceAccuracyYards": "distance_accuracy_yards",
        "tightMarginYards": "tight_margin_yards",
    },
}


def hazard_severity(hazard_type: str) -> float:
    return float(HAZARD_SEVERITY.get(hazard_type, DEFAULT_HAZARD_SEVERITY))


def is_penalty_hazard(hazard_type: str) -> bool:
    return hazard_type in PENALTY_HAZARD_TYPES


def clubs_for_area(area: Optional[str]) -> tuple[str, ...]:
    if not area:
        return ()
    return AREA_TO_CLUBS.get(area, ())


def _float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)) and value == value:
        return float(value)
    if isinstance(value, str):
        try:
            parsed = float(value)
        except ValueError:
            return None
        if parsed == parsed:
            return parsed
    return None


def _merge_section(section: Any, name: str, overrides: Any) -> Any:
    if not isinstance(overrides, Mapping):
        return section
    allowed = {field.name for field in fields(section)}
    aliases = _ALIASES[name]
    updates: dict[str, float] = {}
    for key, raw in overrides.items():
        attr = aliases.get(key, key)
        if attr not in allowed:
            continue
        parsed = _float(raw)
        if parsed is None:
            continue
        updates[attr] = parsed
    if not updates:
        return section
    return replace(section, **updates)


def merge_scoring_config(
    overrides: Optional[Mapping[str, Any]],
    base: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> ScoringConfig:
    """Overlay ``overrides`` (snake_case or camelCase keys) onto ``base``.

    Unknown keys and non-numeric values are ignored.
    """

    if not overrides:
        return base
    return ScoringConfig(
        penalties=_merge_section(
            base.penalties, "penalties", overrides.get("penalties")
        ),
        bonuses=_merge_section(base.bonuses, "bonuses", overrides.get("bonuses")),
        thresholds=_merge_section(
            base.thresholds, "thresholds", overrides.get("thresholds")
        ),
    )


@lru_cache(maxsize=1)
def get_scoring_config() -> ScoringConfig:
    """Return the scoring config with environment overrides applied."""

    raw = os.getenv(SCORING_OVERRIDES_ENV)
    if not raw:
        return DEFAULT_SCORING_CONFIG
    try:
        overrides = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("invalid %s; using default scoring", SCORING_OVERRIDES_ENV)
        return DEFAULT_SCORING_CONFIG
    if not isinstance(overrides, Mapping):
        return DEFAULT_SCORING_CONFIG
    return merge_scoring_config(overrides)


__all__ = [
    "AREA_TO_CLUBS",
    "DEFAULT_SCORING_CONFIG",
    "HAZARD_SEVERITY",
    "PENALTY_HAZARD_TYPES",
    "ScoringBonuses",
    "ScoringConfig",
    "ScoringPenalties",
    "ScoringThresholds",
    "clubs_for_area",
    "get_scoring_config",
    "hazard_severity",
    "is_penalty_hazard",
    "merge_scoring_config",
]
