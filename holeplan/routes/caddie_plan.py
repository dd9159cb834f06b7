"""API routes for hole plans and plays-like distances."""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from holeplan.metrics.plays_like_metrics import observe_plays_like_deltas
from holeplan.schemas import caddie_plan as schemas
from holeplan.services.planner import service, telemetry
from holeplan.services.planner.environment import plays_like

logger = logging.getLogger("holeplan")

router = APIRouter(prefix="/caddie", tags=["caddie"])


def _validation_error(exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content=schemas.ErrorEnvelope(
            error_code="validation_error", message=str(exc), details=None
        ).model_dump(),
    )


@router.post("/plan", response_model=schemas.PlanResponseBody)
def post_plan(payload: dict):
    start = time.perf_counter()

    try:
        # Validate incoming payload explicitly to control 422 envelope shape
        domain_payload = schemas.to_domain(schemas.PlanRequest.model_validate(payload))
        response, log_payload = service.plan_hole(domain_payload)
    except (ValueError, TypeError) as exc:
        return _validation_error(exc)

    duration_ms = (time.perf_counter() - start) * 1000

    plan = response.plan
    telemetry.record_plan_metrics(
        duration_ms=duration_ms,
        par=domain_payload.hole.par,
        strategy=plan.strategy.value,
        planning=plan.metadata.planning_strategy.value if plan.metadata else "none",
        sequences=plan.metadata.sequences_considered if plan.metadata else 0,
    )

    log_payload["duration_ms"] = duration_ms
    logger.info("caddie_plan", extra={"holeplan": log_payload})

    return schemas.from_domain(response)


@router.post("/plays-like")
def post_plays_like(payload: dict):
    try:
        request = schemas.PlaysLikeRequest.model_validate(payload)
    except (ValueError, TypeError) as exc:
        return _validation_error(exc)

    result = plays_like(
        request.distance,
        request.weather,
        request.bearing,
        request.player_elevation,
        request.target_elevation,
    )
    observe_plays_like_deltas(
        result.adjustments.wind,
        result.adjustments.temperature,
        result.adjustments.elevation,
    )
    return result.model_dump(mode="json", by_alias=True)
