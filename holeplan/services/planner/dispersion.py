"""Shot dispersion model: formula radius blended with measured stats."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from holeplan.geometry import GeoPoint, offset_laterally, project

from .clubs import (
    CATEGORY_DISPERSION_FACTORS,
    CLUB_DISPERSION_FACTORS,
    club_category,
    normalize_club_id,
)
from .models import Dispersion, HazardConflict, MeasuredStats, MissPattern

BASE_DISPERSION_PCT = 0.08
HANDICAP_BASE = 0.7
HANDICAP_STEP = 0.03
MAX_HANDICAP = 36.0
LATERAL_RATIO = 0.6
DISTANCE_RATIO = 0.8
MIN_RADIUS_YARDS = 1.0
FORMULA_CONFIDENCE = 0.5
MIN_MEASURED_SHOTS = 5

# (minimum shots, weight) pairs, highest threshold first
_MEASURED_CONFIDENCE_STEPS = ((50, 0.95), (30, 0.9), (20, 0.8), (10, 0.65), (5, 0.4))
_DISTANCE_BLEND_STEPS = ((50, 0.85), (30, 0.75), (20, 0.6), (10, 0.4), (5, 0.2))


@dataclass(frozen=True, slots=True)
class ConfidenceAnalysis:
    level: float
    label: str
    ratio: float
    description: str


def _step(total_shots: int, steps: tuple[tuple[int, float], ...]) -> float:
    for threshold, weight in steps:
        if total_shots >= threshold:
            return weight
    return 0.0


def measured_confidence(total_shots: int) -> float:
    """Weight given to measured dispersion; nondecreasing in ``total_shots``."""

    return _step(total_shots, _MEASURED_CONFIDENCE_STEPS)


def distance_blend_weight(total_shots: int) -> float:
    """Weight given to a measured average distance over the entered one."""

    return _step(total_shots, _DISTANCE_BLEND_STEPS)


def club_dispersion_factor(club_id: str) -> float:
    club = normalize_club_id(club_id)
    if club in CLUB_DISPERSION_FACTORS:
        return CLUB_DISPERSION_FACTORS[club]
    return CATEGORY_DISPERSION_FACTORS.get(club_category(club), 1.0)


def handicap_factor(handicap: Optional[float]) -> float:
    if handicap is None:
        return 1.0
    clamped = min(MAX_HANDICAP, max(0.0, handicap))
    return HANDICAP_BASE + HANDICAP_STEP * clamped


def _blend(measured: float, formula: float, weight: float) -> float:
    return measured * weight + formula * (1 - weight)


def calculate_dispersion(
    club_id: str,
    distance: float,
    handicap: Optional[float] = None,
    measured: Optional[MeasuredStats] = None,
) -> Dispersion:
    """Dispersion radius in yards for ``club_id`` hit ``distance`` yards."""

    hf = handicap_factor(handicap)
    cf = club_dispersion_factor(club_id)
    radius = max(0.0, distance) * BASE_DISPERSION_PCT * hf * cf
    lateral = radius * LATERAL_RATIO
    depth = radius * DISTANCE_RATIO

    if (
        measured is not None
        and measured.total_shots >= MIN_MEASURED_SHOTS
        and measured.dispersion_radius is not None
    ):
        weight = measured_confidence(measured.total_shots)
        measured_lateral = (
            measured.lateral_dispersion
            if measured.lateral_dispersion is not None
            else measured.dispersion_radius * LATERAL_RATIO
        )
        measured_depth = (
            measured.distance_dispersion
            if measured.distance_dispersion is not None
            else measured.dispersion_radius * DISTANCE_RATIO
        )
        return Dispersion(
            radius=max(MIN_RADIUS_YARDS, _blend(measured.dispersion_radius, radius, weight)),
            lateral=max(0.0, _blend(measured_lateral, lateral, weight)),
            distance=max(0.0, _blend(measured_depth, depth, weight)),
            data_source="measured",
            confidence=weight,
            sample_size=measured.total_shots,
            handicap_factor=hf,
            club_factor=cf,
        )

    return Dispersion(
        radius=max(MIN_RADIUS_YARDS, radius),
        lateral=lateral,
        distance=depth,
        data_source="formula",
        confidence=FORMULA_CONFIDENCE,
        sample_size=measured.total_shots if measured is not None else 0,
        handicap_factor=hf,
        club_factor=cf,
    )


def _magnitude(value: float, strong: float, moderate: float) -> str:
    if value > strong:
        return "strong"
    if value > moderate:
        return "moderate"
    return "slight"


def predict_miss_pattern(
    club_id: str,
    handicap: Optional[float] = None,
    measured: Optional[MeasuredStats] = None,
    shot_shape: Optional[str] = None,
) -> MissPattern:
    if measured is not None and measured.total_shots >= MIN_MEASURED_SHOTS:
        if measured.avg_offline > 2:
            lateral_bias = "right"
        elif measured.avg_offline < -2:
            lateral_bias = "left"
        else:
            lateral_bias = "center"
        distance_bias = (
            "short" if measured.miss_short_pct > measured.miss_long_pct else "long"
        )
        lateral_likelihood = (measured.miss_left_pct + measured.miss_right_pct) / 100
        distance_likelihood = (measured.miss_short_pct + measured.miss_long_pct) / 100
        return MissPattern(
            lateral_bias=lateral_bias,
            distance_bias=distance_bias,
            lateral_likelihood=lateral_likelihood,
            distance_likelihood=distance_likelihood,
            magnitude=_magnitude(abs(measured.avg_offline), 12, 6),
            primary_miss=(
                lateral_bias if lateral_likelihood >= distance_likelihood else distance_bias
            ),
            data_source="measured",
        )

    factor = club_dispersion_factor(club_id)
    lateral_bias = "left" if (shot_shape or "").lower() == "draw" else "right"
    lateral_likelihood = 0.6 if factor > 1.2 else 0.4
    distance_likelihood = 0.7 if factor < 0.8 else 0.5
    return MissPattern(
        lateral_bias=lateral_bias,
        distance_bias="short",
        lateral_likelihood=lateral_likelihood,
        distance_likelihood=distance_likelihood,
        magnitude=_magnitude(handicap if handicap is not None else 15.0, 20, 12),
        primary_miss=(
            lateral_bias if lateral_likelihood >= distance_likelihood else "short"
        ),
        data_source="formula",
    )


def analyze_confidence(
    dispersion: Dispersion,
    target_radius: float,
    conflicts: Iterable[HazardConflict] = (),
) -> ConfidenceAnalysis:
    """Rate how well a dispersion pattern fits inside a target area."""

    ratio = dispersion.radius / target_radius if target_radius > 0 else math.inf
    if ratio <= 0.5:
        level = 0.85
    elif ratio <= 0.75:
        level = 0.7
    elif ratio <= 1.0:
        level = 0.55
    else:
        level = 0.4

    conflicts = list(conflicts)
    if conflicts:
        critical = any(c.severity == "critical" for c in conflicts)
        level -= 0.15 if critical else 0.08
    level = max(0.1, level)

    if level >= 0.7:
        label, description = "high", "Dispersion fits comfortably in the target"
    elif level >= 0.5:
        label, description = "medium", "Dispersion uses most of the target"
    else:
        label, description = "low", "Dispersion exceeds the target area"
    return ConfidenceAnalysis(
        level=round(level, 2), label=label, ratio=ratio, description=description
    )


def find_most_accurate_club(
    club_distances: Mapping[str, float],
    handicap: Optional[float] = None,
    measured_stats: Optional[Mapping[str, MeasuredStats]] = None,
) -> Optional[str]:
    """Club with the smallest dispersion relative to its distance."""

    measured_stats = measured_stats or {}
    best: Optional[tuple[float, float, str]] = None
    for club, distance in club_distances.items():
        if distance <= 0:
            continue
        dispersion = calculate_dispersion(
            club, distance, handicap, measured_stats.get(club)
        )
        key = (dispersion.radius / distance, -distance, club)
        if best is None or key < best:
            best = key
    return best[2] if best else None


def dispersion_ellipse(
    center: GeoPoint,
    lateral: float,
    distance: float,
    bearing: float,
    points: int = 32,
) -> list[GeoPoint]:
    """Outline of the dispersion ellipse oriented along ``bearing``."""

    count = max(3, points)
    outline = []
    for i in range(count):
        theta = 2 * math.pi * i / count
        along = distance * math.cos(theta)
        across = lateral * math.sin(theta)
        outline.append(offset_laterally(project(center, along, bearing), across, bearing))
    return outline


__all__ = [
    "ConfidenceAnalysis",
    "analyze_confidence",
    "calculate_dispersion",
    "club_dispersion_factor",
    "dispersion_ellipse",
    "distance_blend_weight",
    "find_most_accurate_club",
    "handicap_factor",
    "measured_confidence",
    "predict_miss_pattern",
]
