"""Turn scored shot options into presentation-ready planned shots."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional

from holeplan.geometry import bearing_deg, distance_yards

from .club_selection import detect_awkward_distance
from .clubs import club_display_name
from .environment import plays_like_distance
from .models import (
    PlannedShot,
    ShotConfidence,
    ShotOption,
    ShotSequence,
    Weather,
)

logger = logging.getLogger(__name__)

SUMMARY_SEPARATOR = " \N{RIGHTWARDS ARROW} "


def _landing_window(shot: ShotOption) -> tuple[float, float]:
    spread = (shot.dispersion_radius or 15) * 0.8
    return shot.raw_distance - spread, shot.raw_distance + spread


def target_description(shot: ShotOption) -> str:
    if shot.is_approach:
        return "Center of green - safe two-putt position"

    parts = []
    remaining = round(shot.distance_remaining)
    if remaining > 0:
        parts.append(f"Leave {remaining} yards to green")

    if shot.fairway_width:
        diameter = (shot.dispersion_radius or 15) * 2
        if shot.fairway_width >= diameter * 2:
            parts.append("wide fairway")
        elif shot.fairway_width < diameter:
            parts.append("narrow fairway")

    if shot.hazard_ranges:
        low, high = _landing_window(shot)
        overlapping = [
            hr for hr in shot.hazard_ranges
            if high >= hr.front_distance and low <= hr.back_distance
        ]
        cleared = [
            hr for hr in shot.hazard_ranges
            if low > hr.back_distance or high < hr.front_distance
        ]
        if cleared and not overlapping:
            parts.append(f"clears {cleared[0].name}")

    return " - ".join(parts) if parts else "Center of fairway"


def shot_confidence(shot: ShotOption) -> ShotConfidence:
    """Confidence from how closely the reach matches the intended carry.

    Approaches compare reach with the distance to the green; other shots
    compare it with the distance to their (possibly shifted) landing point.
    """

    if shot.is_approach:
        intended = shot.target_distance
    else:
        intended = distance_yards(shot.start, shot.landing_zone)
    accuracy = shot.raw_distance / intended if intended > 0 else 1.0
    conflicts = len(shot.hazard_conflicts)
    if 0.95 <= accuracy <= 1.05 and conflicts == 0:
        return ShotConfidence.HIGH
    if 0.9 <= accuracy <= 1.1 and conflicts <= 1:
        return ShotConfidence.MEDIUM
    return ShotConfidence.LOW


def shot_reasoning(shot: ShotOption) -> str:
    if shot.is_approach:
        return "Aim for center of green"

    if shot.hazard_ranges:
        low, high = _landing_window(shot)
        for hr in shot.hazard_ranges:
            if high < hr.front_distance and hr.front_distance - high < 20:
                return f"Stays short of {hr.name}"
            if low > hr.back_distance and low - hr.back_distance < 20:
                return f"Clears past {hr.name}"

    remaining = round(shot.distance_remaining)
    if 80 <= remaining <= 120:
        return "Sets up comfortable wedge approach"
    if 0 < remaining < 80:
        return "Short pitch to follow"
    return "Good position for next shot"


def _awkward_warning(
    shot: ShotOption, club_distances: Optional[Mapping[str, float]]
) -> Optional[str]:
    if shot.is_approach or not club_distances:
        return None
    awkward = detect_awkward_distance(shot.distance_remaining, club_distances)
    return awkward.message if awkward else None


def format_shot(
    shot: ShotOption,
    weather: Optional[Weather] = None,
    club_distances: Optional[Mapping[str, float]] = None,
) -> PlannedShot:
    """Presentation form of ``shot``.

    With ``club_distances`` a non-approach shot leaving a half-swing yardage
    carries an awkward-distance warning.
    """

    gps_distance = distance_yards(shot.start, shot.landing_zone)
    bearing = bearing_deg(shot.start, shot.landing_zone)
    effective = plays_like_distance(
        round(gps_distance),
        weather,
        bearing,
        shot.start.elevation,
        shot.landing_zone.elevation,
    )
    if shot.is_approach and gps_distance < shot.target_distance - 10:
        logger.warning(
            "approach lands short of target",
            extra={
                "holeplan": {
                    "club": shot.club,
                    "landing_yards": round(gps_distance),
                    "target_yards": round(shot.target_distance),
                }
            },
        )
    return PlannedShot(
        shot_number=shot.shot_number,
        club=club_display_name(shot.club),
        club_id=shot.club,
        distance=round(gps_distance),
        effective_distance=round(effective),
        expected_distance=round(gps_distance),
        landing_zone=shot.landing_zone,
        target=target_description(shot),
        safe_zone=shot.safe_zone,
        avoid_zones=list(shot.avoid_zones),
        dispersion_radius=round(shot.dispersion_radius, 1),
        adjustments=shot.adjustments.rounded(),
        confidence=shot_confidence(shot),
        reasoning=shot_reasoning(shot),
        next_shot_distance=round(shot.distance_remaining, 1),
        score_breakdown=shot.score_breakdown,
        awkward_warning=_awkward_warning(shot, club_distances),
    )


def format_sequence(
    sequence: ShotSequence,
    weather: Optional[Weather] = None,
    club_distances: Optional[Mapping[str, float]] = None,
) -> list[PlannedShot]:
    return [format_shot(shot, weather, club_distances) for shot in sequence.shots]


def sequence_summary(clubs: Iterable[str]) -> str:
    return SUMMARY_SEPARATOR.join(club_display_name(club) for club in clubs)


__all__ = [
    "format_sequence",
    "format_shot",
    "sequence_summary",
    "shot_confidence",
    "shot_reasoning",
    "target_description",
]
