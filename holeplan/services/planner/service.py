"""Service orchestration for the hole planner API."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Tuple

from holeplan.config.scoring import merge_scoring_config

from .models import Plan, PlanRequest, PlanResponse
from .orchestrator import compute_hole_plan
from .telemetry import build_structured_log_payload, record_error_plan


def _plan_summary(plan: Plan) -> dict[str, object]:
    return {
        "strategy": plan.strategy.value,
        "target_score": plan.target_score,
        "clubs": [shot.club_id for shot in plan.shots],
        "score": plan.metadata.strategy_score if plan.metadata else None,
        "planning": plan.metadata.planning_strategy.value if plan.metadata else None,
        "error": plan.error,
    }


def plan_hole(payload: PlanRequest) -> Tuple[PlanResponse, dict]:
    config = merge_scoring_config(payload.scoring) if payload.scoring else None
    plan = compute_hole_plan(
        payload.hole,
        payload.player,
        payload.weather,
        strategy=payload.strategy,
        config=config,
    )
    if plan.error:
        record_error_plan(plan.error)

    telemetry_id = f"hp-{uuid.uuid4()}"
    response = PlanResponse(
        plan=plan,
        telemetry_id=telemetry_id,
        generated_at=datetime.now(UTC),
    )
    log_payload = build_structured_log_payload(
        telemetry_id=telemetry_id,
        plan=_plan_summary(plan),
        alternatives=[alt.summary for alt in plan.alternative_sequences],
    )
    log_payload["par"] = payload.hole.par
    if payload.hole.number is not None:
        log_payload["hole"] = payload.hole.number
    return response, log_payload


__all__ = ["plan_hole"]
