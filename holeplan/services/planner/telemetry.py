"""Telemetry helpers for the hole planner."""

from __future__ import annotations

import os
from typing import Iterable

from prometheus_client import Counter, Histogram

from holeplan.metrics import REGISTRY

_plan_histogram = Histogram(
    "holeplan_plan_latency_ms",
    "Latency of hole plan computations in milliseconds",
    labelnames=("par", "strategy"),
    registry=REGISTRY,
)

_plan_counter = Counter(
    "holeplan_plans_total",
    "Total hole plan computations",
    labelnames=("par", "strategy", "planning"),
    registry=REGISTRY,
)

_sequences_histogram = Histogram(
    "holeplan_sequences_generated",
    "Number of candidate sequences generated per plan",
    labelnames=("par",),
    buckets=(0, 1, 2, 5, 10, 20, 50, 100, 200),
    registry=REGISTRY,
)

_error_plans = Counter(
    "holeplan_error_plans_total",
    "Plans returned without shots",
    labelnames=("reason",),
    registry=REGISTRY,
)

_drag_histogram = Histogram(
    "holeplan_drag_latency_ms",
    "Latency of interactive drag recomputes in milliseconds",
    labelnames=("tier",),
    buckets=(0.5, 1, 2, 5, 10, 20, 40, 80, 160),
    registry=REGISTRY,
)


def record_plan_metrics(
    *,
    duration_ms: float,
    par: int,
    strategy: str,
    planning: str,
    sequences: int,
) -> None:
    """Publish Prometheus metrics for a computed plan."""
    _plan_histogram.labels(par=str(par), strategy=strategy).observe(duration_ms)
    _plan_counter.labels(par=str(par), strategy=strategy, planning=planning).inc()
    _sequences_histogram.labels(par=str(par)).observe(sequences)


def record_error_plan(reason: str) -> None:
    _error_plans.labels(reason=reason).inc()


def record_drag_metrics(*, tier: str, duration_ms: float) -> None:
    _drag_histogram.labels(tier=tier).observe(duration_ms)


def build_structured_log_payload(
    *,
    telemetry_id: str,
    plan: dict,
    alternatives: Iterable[str] = (),
    duration_ms: float | None = None,
) -> dict:
    """Build a structured log record for downstream sinks."""
    payload = {
        "telemetry_id": telemetry_id,
        "plan": plan,
        "alternatives": list(alternatives),
        "build_version": os.getenv("BUILD_VERSION", "unknown"),
        "git_sha": os.getenv("GIT_SHA", "unknown"),
    }
    if duration_ms is not None:
        payload["duration_ms"] = duration_ms
    return payload


__all__ = [
    "build_structured_log_payload",
    "record_drag_metrics",
    "record_error_plan",
    "record_plan_metrics",
]
