from __future__ import annotations

from prometheus_client import Counter, Histogram

from . import REGISTRY

PLAYS_LIKE_EVALUATIONS_TOTAL = Counter(
    "holeplan_plays_like_evaluations_total",
    "Count of plays-like evaluations served by the API",
    registry=REGISTRY,
)

PLAYS_LIKE_WIND_DELTA_YD = Histogram(
    "holeplan_plays_like_wind_delta_yd",
    "Magnitude of wind plays-like adjustments (yards)",
    buckets=(0.0, 1.0, 2.5, 5.0, 10.0, 15.0, 20.0, 30.0),
    registry=REGISTRY,
)

PLAYS_LIKE_TEMP_DELTA_YD = Histogram(
    "holeplan_plays_like_temp_delta_yd",
    "Magnitude of temperature plays-like adjustments (yards)",
    buckets=(0.0, 0.5, 1.0, 2.5, 5.0, 7.5, 10.0),
    registry=REGISTRY,
)

PLAYS_LIKE_ELEVATION_DELTA_YD = Histogram(
    "holeplan_plays_like_elevation_delta_yd",
    "Magnitude of slope and altitude plays-like adjustments (yards)",
    buckets=(0.0, 0.5, 1.0, 2.5, 5.0, 7.5, 10.0, 15.0, 20.0),
    registry=REGISTRY,
)


def observe_plays_like_deltas(
    wind_delta: float, temperature_delta: float, elevation_delta: float
) -> None:
    """Record metrics for a plays-like evaluation."""

    PLAYS_LIKE_EVALUATIONS_TOTAL.inc()
    PLAYS_LIKE_WIND_DELTA_YD.observe(abs(wind_delta))
    PLAYS_LIKE_TEMP_DELTA_YD.observe(abs(temperature_delta))
    PLAYS_LIKE_ELEVATION_DELTA_YD.observe(abs(elevation_delta))


__all__ = [
    "PLAYS_LIKE_EVALUATIONS_TOTAL",
    "PLAYS_LIKE_WIND_DELTA_YD",
    "PLAYS_LIKE_TEMP_DELTA_YD",
    "PLAYS_LIKE_ELEVATION_DELTA_YD",
    "observe_plays_like_deltas",
]
