"""FastAPI schemas for the hole plan endpoints."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from holeplan.geometry import GeoPoint
from holeplan.services.planner import models as domain


class PlanRequest(domain.PlanRequest):
    model_config = {"from_attributes": True}


class PlanResponseBody(domain.PlanResponse):
    model_config = {"from_attributes": True}


class PlaysLikeRequest(BaseModel):
    distance: float = Field(..., gt=0)
    weather: Optional[domain.Weather] = None
    bearing: float = Field(default=0.0, ge=0, lt=360)
    player_elevation: Optional[float] = Field(default=None, alias="playerElevation")
    target_elevation: Optional[float] = Field(default=None, alias="targetElevation")

    model_config = ConfigDict(populate_by_name=True)


class DragFrameRequest(BaseModel):
    hole: domain.Hole
    player: domain.PlayerProfile
    weather: Optional[domain.Weather] = None
    position: GeoPoint
    previous: Optional[GeoPoint] = None

    model_config = ConfigDict(populate_by_name=True)


class DragColorRequest(DragFrameRequest):
    is_approach: bool = Field(default=False, alias="isApproach")


class DragReleaseRequest(BaseModel):
    hole: domain.Hole
    player: domain.PlayerProfile
    weather: Optional[domain.Weather] = None
    shots: list[domain.DragShot] = Field(..., min_length=1)
    dragged_index: int = Field(..., ge=0, alias="draggedIndex")
    scoring: Optional[dict[str, Any]] = None

    model_config = ConfigDict(populate_by_name=True)


class DragColorResponse(BaseModel):
    color: domain.ShotColor


class ErrorEnvelope(BaseModel):
    error_code: str
    message: str
    details: dict | None = None


def to_domain(payload: PlanRequest) -> domain.PlanRequest:
    return domain.PlanRequest.model_validate(payload.model_dump())


def from_domain(response: domain.PlanResponse) -> dict[str, Any]:
    body = PlanResponseBody.model_validate(response.model_dump())
    return body.model_dump(mode="json", by_alias=True)
