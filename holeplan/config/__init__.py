"""Configuration helpers for planner constants."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


__all__ = [
    "PlannerSettings",
    "env_bool",
    "get_settings",
    "reset_settings_cache",
]


@dataclass(frozen=True)
class PlannerSettings:
    headwind_pct_per_mph: float = 0.008
    tailwind_pct_per_mph: float = 0.005
    top_sequences: int = 3
    planning_strategy: str = "forward"
    backward_fallback: bool = True
    drag_cache_size: int = 32


@lru_cache(maxsize=1)
def get_settings() -> PlannerSettings:
    """Return cached planner settings."""

    strategy = os.getenv("HOLEPLAN_PLANNING_STRATEGY", "forward").strip().lower()
    if strategy not in {"forward", "backward"}:
        strategy = "forward"
    return PlannerSettings(
        headwind_pct_per_mph=max(
            0.0, _float_env("HOLEPLAN_HEADWIND_PCT_PER_MPH", 0.008)
        ),
        tailwind_pct_per_mph=max(
            0.0, _float_env("HOLEPLAN_TAILWIND_PCT_PER_MPH", 0.005)
        ),
        top_sequences=max(1, _int_env("HOLEPLAN_TOP_SEQUENCES", 3)),
        planning_strategy=strategy,
        backward_fallback=env_bool("HOLEPLAN_BACKWARD_FALLBACK", True),
        drag_cache_size=max(1, _int_env("HOLEPLAN_DRAG_CACHE_SIZE", 32)),
    )


def reset_settings_cache() -> None:
    """Clear cached settings (primarily for tests)."""

    get_settings.cache_clear()
    from .scoring import get_scoring_config

    get_scoring_config.cache_clear()


def env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        parsed = float(value)
    except ValueError:
        return default
    if parsed != parsed:
        return default
    return parsed
