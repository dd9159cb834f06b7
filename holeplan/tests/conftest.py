from __future__ import annotations

from typing import Iterable, Optional

import pytest
from fastapi.testclient import TestClient

from holeplan.config import reset_settings_cache
from holeplan.geometry import GeoPoint, offset_laterally, project
from holeplan.services.planner.models import (
    CoursePolygon,
    Hole,
    PlayerProfile,
    PolygonType,
)

TEE = GeoPoint(lat=40.0, lng=-75.0)
NORTH = 0.0

SCENARIO_A_BAG = {"driver": 250, "8_iron": 155, "7_iron": 165, "pw": 135}
PAR5_BAG = {
    "driver": 280,
    "3_wood": 240,
    "9_iron": 140,
    "pw": 125,
    "gw": 105,
    "sw": 95,
}
FULL_BAG = {
    "driver": 250,
    "3_wood": 230,
    "5_wood": 215,
    "4_hybrid": 200,
    "5_iron": 185,
    "6_iron": 175,
    "7_iron": 165,
    "8_iron": 155,
    "9_iron": 145,
    "pw": 135,
    "gw": 120,
    "sw": 105,
    "lw": 85,
}


def along(distance: float, lateral: float = 0.0, origin: GeoPoint = TEE) -> GeoPoint:
    """Point ``distance`` yards up a north-running hole, ``lateral`` right."""

    point = project(origin, distance, NORTH)
    if lateral:
        point = offset_laterally(point, lateral, NORTH)
    return point


def rect(
    kind: PolygonType | str,
    near: float,
    far: float,
    left: float,
    right: float,
    label: Optional[str] = None,
) -> CoursePolygon:
    """Axis-aligned polygon in hole coordinates (yards from the tee)."""

    corners = [
        along(near, left),
        along(near, right),
        along(far, right),
        along(far, left),
    ]
    return CoursePolygon(type=kind, coordinates=corners, label=label)


def make_hole(
    par: int,
    yardage: float,
    polygons: Iterable[CoursePolygon] = (),
    number: Optional[int] = None,
) -> Hole:
    return Hole(
        par=par,
        tee=TEE,
        green=along(yardage),
        yardage=yardage,
        number=number,
        polygons=list(polygons),
    )


def make_player(clubs: dict[str, float], **kwargs) -> PlayerProfile:
    kwargs.setdefault("handicap", 15)
    return PlayerProfile(club_distances=clubs, **kwargs)


def point_payload(point: GeoPoint) -> dict:
    return {"lat": point.lat, "lng": point.lng}


def hole_payload(hole: Hole) -> dict:
    return hole.model_dump(mode="json", by_alias=True, exclude_none=True)


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch):
    """Start every test from default planner settings."""

    for name in (
        "HOLEPLAN_PLANNING_STRATEGY",
        "HOLEPLAN_BACKWARD_FALLBACK",
        "HOLEPLAN_TOP_SEQUENCES",
        "HOLEPLAN_SCORING_OVERRIDES",
        "HOLEPLAN_HEADWIND_PCT_PER_MPH",
        "HOLEPLAN_TAILWIND_PCT_PER_MPH",
        "HOLEPLAN_DRAG_CACHE_SIZE",
        "API_KEY",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
def par4_hole() -> Hole:
    """Flat 400 yard par 4 without polygons."""

    return make_hole(4, 400)


@pytest.fixture
def par5_hole() -> Hole:
    """Flat 520 yard par 5 without polygons."""

    return make_hole(5, 520)


@pytest.fixture
def scenario_a_player() -> PlayerProfile:
    return make_player(SCENARIO_A_BAG)


@pytest.fixture
def full_bag_player() -> PlayerProfile:
    return make_player(FULL_BAG)


@pytest.fixture
def client() -> TestClient:
    from holeplan.app import app

    with TestClient(app, raise_server_exceptions=False) as client:
        yield client
