"""API routes backing interactive landing-point dragging.

``/frame`` is hit on every pointer move, ``/color`` while hovering and
``/release`` once the drag ends. Contexts are cached per process.
"""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from holeplan.config.scoring import merge_scoring_config
from holeplan.schemas import caddie_plan as schemas
from holeplan.services.planner import telemetry
from holeplan.services.planner.interactive import (
    DragContextCache,
    assess_shot_color_lightweight,
    compute_drag_frame_update,
    compute_full_shot_update,
)

logger = logging.getLogger("holeplan")

router = APIRouter(prefix="/caddie/drag", tags=["caddie"])

drag_contexts = DragContextCache()


def _validation_error(exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content=schemas.ErrorEnvelope(
            error_code="validation_error", message=str(exc), details=None
        ).model_dump(),
    )


@router.post("/frame")
def post_drag_frame(payload: dict):
    start = time.perf_counter()
    try:
        request = schemas.DragFrameRequest.model_validate(payload)
        ctx = drag_contexts.get(request.hole, request.player, request.weather)
    except (ValueError, TypeError) as exc:
        return _validation_error(exc)

    update = compute_drag_frame_update(
        request.position, request.previous or ctx.start, ctx
    )
    telemetry.record_drag_metrics(
        tier="frame", duration_ms=(time.perf_counter() - start) * 1000
    )
    return update.model_dump(mode="json", by_alias=True)


@router.post("/color", response_model=schemas.DragColorResponse)
def post_drag_color(payload: dict):
    start = time.perf_counter()
    try:
        request = schemas.DragColorRequest.model_validate(payload)
        ctx = drag_contexts.get(request.hole, request.player, request.weather)
    except (ValueError, TypeError) as exc:
        return _validation_error(exc)

    color = assess_shot_color_lightweight(
        request.position, request.previous or ctx.start, ctx, request.is_approach
    )
    telemetry.record_drag_metrics(
        tier="color", duration_ms=(time.perf_counter() - start) * 1000
    )
    return schemas.DragColorResponse(color=color).model_dump(mode="json")


@router.post("/release")
def post_drag_release(payload: dict):
    start = time.perf_counter()
    try:
        request = schemas.DragReleaseRequest.model_validate(payload)
        ctx = drag_contexts.get(request.hole, request.player, request.weather)
        config = merge_scoring_config(request.scoring) if request.scoring else None
        update = compute_full_shot_update(
            request.shots, request.dragged_index, ctx, request.player, config
        )
    except (ValueError, TypeError) as exc:
        return _validation_error(exc)

    duration_ms = (time.perf_counter() - start) * 1000
    telemetry.record_drag_metrics(tier="release", duration_ms=duration_ms)
    logger.info(
        "caddie_drag_release",
        extra={
            "holeplan": {
                "dragged_index": request.dragged_index,
                "shots": len(update.updated_shots),
                "colors": [color.value for color in update.colors],
                "duration_ms": duration_ms,
            }
        },
    )
    return update.model_dump(mode="json", by_alias=True)
