"""Club catalogue: identifiers, categories, display names and defaults."""

from __future__ import annotations

import re
from typing import Mapping

DRIVER = "driver"

CLUB_DISPERSION_FACTORS: dict[str, float] = {
    "driver": 1.4,
    "3_wood": 1.25,
    "5_wood": 1.2,
    "4_hybrid": 1.15,
    "5_hybrid": 1.1,
    "3_iron": 1.15,
    "4_iron": 1.1,
    "5_iron": 1.05,
    "6_iron": 1.0,
    "7_iron": 0.95,
    "8_iron": 0.9,
    "9_iron": 0.85,
    "pw": 0.75,
    "w_46": 0.7,
    "w_48": 0.7,
    "w_50": 0.7,
    "gw": 0.7,
    "w_52": 0.7,
    "w_54": 0.65,
    "sw": 0.65,
    "w_56": 0.65,
    "w_58": 0.6,
    "w_60": 0.6,
    "lw": 0.6,
}

CATEGORY_DISPERSION_FACTORS: dict[str, float] = {
    "driver": 1.4,
    "wood": 1.2,
    "hybrid": 1.1,
    "iron": 1.0,
    "wedge": 0.7,
}

DEFAULT_CLUB_DISTANCES: dict[str, float] = {
    "driver": 230,
    "3_wood": 210,
    "5_wood": 195,
    "4_hybrid": 185,
    "5_hybrid": 175,
    "3_iron": 185,
    "4_iron": 175,
    "5_iron": 165,
    "6_iron": 155,
    "7_iron": 145,
    "8_iron": 135,
    "9_iron": 125,
    "pw": 115,
    "gw": 100,
    "sw": 85,
    "lw": 70,
}
FALLBACK_CLUB_DISTANCE = 150.0

TEE_CLUBS = (
    "driver",
    "3_wood",
    "5_wood",
    "3_hybrid",
    "4_hybrid",
    "5_hybrid",
    "3_iron",
    "4_iron",
)

LAYUP_CLUBS = (
    "5_iron",
    "6_iron",
    "7_iron",
    "8_iron",
    "9_iron",
    "5_wood",
    "5_hybrid",
    "4_hybrid",
)

TROUBLE_LIE_BANNED_CLUBS = frozenset(
    {"driver", "3_wood", "5_wood", "7_wood", "3_hybrid", "4_hybrid"}
)

MIN_TARGET_DISTANCE: dict[str, float] = {
    "driver": 200,
    "3_wood": 180,
    "5_wood": 160,
    "3_hybrid": 150,
    "4_hybrid": 140,
    "5_hybrid": 130,
    "3_iron": 150,
    "4_iron": 140,
    "5_iron": 130,
}

_NAMED_WEDGES = {
    "pw": "Pitching Wedge",
    "gw": "Gap Wedge",
    "aw": "Approach Wedge",
    "sw": "Sand Wedge",
    "lw": "Lob Wedge",
}

_LOFT_WEDGE = re.compile(r"^w_(\d+)$")
_SEPARATORS = re.compile(r"[\s\-]+")


def normalize_club_id(club: str) -> str:
    """Canonical club id: lowercase with underscores (``"7 Iron"`` -> ``"7_iron"``)."""

    return _SEPARATORS.sub("_", club.strip().lower())


def club_category(club_id: str) -> str:
    club = normalize_club_id(club_id)
    if club == DRIVER:
        return "driver"
    if club == "putter":
        return "putter"
    if "wood" in club:
        return "wood"
    if "hybrid" in club:
        return "hybrid"
    if club in _NAMED_WEDGES or club.startswith("w_") or club.endswith("wedge"):
        return "wedge"
    if "iron" in club:
        return "iron"
    return "other"


def is_wedge(club_id: str) -> bool:
    return club_category(club_id) == "wedge"


def club_display_name(club_id: str) -> str:
    club = normalize_club_id(club_id)
    if club in _NAMED_WEDGES:
        return _NAMED_WEDGES[club]
    match = _LOFT_WEDGE.match(club)
    if match:
        return f"{match.group(1)}\N{DEGREE SIGN} Wedge"
    return " ".join(part.capitalize() for part in club.split("_") if part)


def default_club_distance(club_id: str) -> float:
    return float(DEFAULT_CLUB_DISTANCES.get(normalize_club_id(club_id), FALLBACK_CLUB_DISTANCE))


def longest_club(club_distances: Mapping[str, float]) -> tuple[str, float] | None:
    usable = [(club, dist) for club, dist in club_distances.items() if dist > 0]
    if not usable:
        return None
    return max(usable, key=lambda item: item[1])


def sorted_by_distance(
    club_distances: Mapping[str, float], *, descending: bool = True
) -> list[tuple[str, float]]:
    usable = [(club, dist) for club, dist in club_distances.items() if dist > 0]
    return sorted(usable, key=lambda item: item[1], reverse=descending)


__all__ = [
    "CATEGORY_DISPERSION_FACTORS",
    "CLUB_DISPERSION_FACTORS",
    "DEFAULT_CLUB_DISTANCES",
    "DRIVER",
    "FALLBACK_CLUB_DISTANCE",
    "LAYUP_CLUBS",
    "MIN_TARGET_DISTANCE",
    "TEE_CLUBS",
    "TROUBLE_LIE_BANNED_CLUBS",
    "club_category",
    "club_display_name",
    "default_club_distance",
    "is_wedge",
    "longest_club",
    "normalize_club_id",
    "sorted_by_distance",
]
