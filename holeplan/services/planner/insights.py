"""Blend entered club distances with a player's measured shot history."""

from __future__ import annotations

from .dispersion import MIN_MEASURED_SHOTS, distance_blend_weight
from .models import DataLevel, PlayerProfile

DISTANCE_OVERRIDE_LEVELS = frozenset({DataLevel.MODERATE, DataLevel.STRONG})


def effective_club_distance(player: PlayerProfile, club: str) -> float:
    """Entered distance for ``club`` pulled toward its measured average."""

    entered = player.club_distances[club]
    stats = player.measured_stats.get(club)
    if stats is None or not stats.avg_distance or stats.total_shots < MIN_MEASURED_SHOTS:
        return entered
    weight = distance_blend_weight(stats.total_shots)
    return float(round(entered * (1 - weight) + stats.avg_distance * weight))


def apply_player_insights(player: PlayerProfile) -> PlayerProfile:
    """Return a profile whose distances reflect measured averages.

    Distances are only overridden at the moderate and strong data levels;
    otherwise the profile is returned unchanged. Measured dispersion is
    used regardless, through the profile's ``measured_stats``.
    """

    if player.data_level not in DISTANCE_OVERRIDE_LEVELS or not player.measured_stats:
        return player
    blended = {
        club: effective_club_distance(player, club) for club in player.club_distances
    }
    if blended == player.club_distances:
        return player
    return player.model_copy(update={"club_distances": blended})


__all__ = ["apply_player_insights", "effective_club_distance"]
