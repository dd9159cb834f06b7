from __future__ import annotations

import pytest

from holeplan.services.planner.interactive import (
    DragContextCache,
    assess_shot_color_full,
    assess_shot_color_lightweight,
    compute_drag_frame_update,
    compute_full_shot_update,
    context_key,
    find_best_club,
    pre_compute_hazard_centroids,
    prepare_drag_context,
    recalculate_downstream_shots,
)
from holeplan.services.planner.models import (
    DragShot,
    HazardConflict,
    Hole,
    PolygonType,
    ShotColor,
    ShotOption,
    Weather,
)

from .conftest import TEE, along, make_hole, rect


@pytest.fixture
def ctx(par4_hole, scenario_a_player):
    return prepare_drag_context(par4_hole, scenario_a_player)


def _shots() -> list[DragShot]:
    return [
        DragShot(shot_number=1, landing_zone=along(245)),
        DragShot(shot_number=2, landing_zone=along(400)),
    ]


def test_context_reaches_are_sorted(ctx) -> None:
    assert [reach.club for reach in ctx.reaches] == ["pw", "8_iron", "7_iron", "driver"]
    assert list(ctx.reach_values) == sorted(ctx.reach_values)
    assert ctx.reaches[0].display_name == "Pitching Wedge"


def test_find_best_club_nearest_reach(ctx) -> None:
    match = find_best_club(150.0, ctx)
    assert match.reach.club == "8_iron"
    assert match.gap == pytest.approx(5.0)
    assert find_best_club(400.0, ctx).reach.club == "driver"
    assert find_best_club(0.0, ctx) is None


def test_frame_update_reports_club_and_distances(ctx) -> None:
    update = compute_drag_frame_update(along(250), TEE, ctx)
    assert update.distance == 250
    assert update.distance_to_green == 150
    assert update.club == "driver"
    assert update.display_name == "Driver"
    assert update.gap == 0
    assert update.effective_distance == 250


def test_frame_update_applies_weather(par4_hole, scenario_a_player) -> None:
    weather = Weather(wind_speed=15, wind_direction="N")
    ctx = prepare_drag_context(par4_hole, scenario_a_player, weather)
    update = compute_drag_frame_update(along(150), TEE, ctx)
    assert update.effective_distance == 168
    assert update.effective_reach < update.club_distance


def test_lightweight_color_rules(par4_hole, scenario_a_player) -> None:
    water = rect(PolygonType.WATER, 300, 320, -10, 10)
    bunker = rect(PolygonType.BUNKER, 330, 340, 20, 30)
    fairway = rect(PolygonType.FAIRWAY, 200, 300, -25, 25)
    hole = make_hole(4, 400, [water, bunker, fairway])
    ctx = prepare_drag_context(hole, scenario_a_player)

    assert assess_shot_color_lightweight(along(310), along(150), ctx, False) is ShotColor.RED
    assert assess_shot_color_lightweight(along(335, 25), along(180), ctx, False) is ShotColor.YELLOW
    assert assess_shot_color_lightweight(along(205), TEE, ctx, False) is ShotColor.RED
    assert assess_shot_color_lightweight(along(250), TEE, ctx, False) is ShotColor.GREEN
    assert assess_shot_color_lightweight(along(250, 40), TEE, ctx, False) is ShotColor.YELLOW
    assert assess_shot_color_lightweight(along(400), along(250), ctx, True) is ShotColor.GREEN


def test_awkward_leave_is_yellow(ctx) -> None:
    assert assess_shot_color_lightweight(along(355), along(190), ctx, False) is ShotColor.YELLOW


def test_near_penalty_centroid_is_yellow(scenario_a_player) -> None:
    water = rect(PolygonType.WATER, 255, 265, 10, 20)
    fairway = rect(PolygonType.FAIRWAY, 200, 300, -25, 25)
    hole = make_hole(4, 400, [water, fairway])
    ctx = prepare_drag_context(hole, scenario_a_player)
    assert assess_shot_color_lightweight(along(250, 5), TEE, ctx, False) is ShotColor.YELLOW


def test_hazard_centroids_skip_non_hazards() -> None:
    polygons = [
        rect(PolygonType.FAIRWAY, 200, 300, -25, 25),
        rect(PolygonType.OB, 100, 300, 40, 60),
    ]
    centroids = pre_compute_hazard_centroids(polygons)
    assert len(centroids) == 1
    assert centroids[0].is_penalty is True


def test_full_color_from_scorer(scenario_a_player) -> None:
    inside = HazardConflict("inside", "water", "Pond", "critical", 0.0, 100.0)
    shot = ShotOption(
        shot_number=1,
        club="8_iron",
        club_distance=155,
        raw_distance=155,
        target_distance=155,
        distance_remaining=0.0,
        start=TEE,
        landing_zone=along(155),
        dispersion_radius=12,
        is_approach=True,
        hazard_conflicts=(inside,),
    )
    assert assess_shot_color_full(shot, scenario_a_player) is ShotColor.RED
    clean = ShotOption(
        shot_number=1,
        club="8_iron",
        club_distance=155,
        raw_distance=155,
        target_distance=155,
        distance_remaining=0.0,
        start=TEE,
        landing_zone=along(155),
        dispersion_radius=12,
        is_approach=True,
    )
    assert assess_shot_color_full(clean, scenario_a_player) is ShotColor.GREEN


def test_downstream_recalculation_returns_new_list(ctx) -> None:
    shots = _shots()
    updated = recalculate_downstream_shots(shots, 0, ctx)
    assert updated is not shots
    assert shots[0].club is None
    assert [shot.club_id for shot in updated] == ["driver", "8_iron"]
    assert updated[0].distance == 245
    assert updated[0].distance_remaining == 155
    assert updated[1].distance == 155
    assert updated[1].distance_remaining == 0
    assert updated[1].landing_zone == shots[1].landing_zone


def test_downstream_recalculation_leaves_earlier_shots(ctx) -> None:
    shots = _shots()
    updated = recalculate_downstream_shots(shots, 1, ctx)
    assert updated[0] is shots[0]
    assert updated[1].club == "8 Iron"


def test_out_of_range_index_raises(ctx) -> None:
    with pytest.raises(ValueError):
        recalculate_downstream_shots(_shots(), 5, ctx)
    with pytest.raises(ValueError):
        compute_full_shot_update(_shots(), -1, ctx, None)


def test_full_update_colors_every_shot(ctx, scenario_a_player) -> None:
    result = compute_full_shot_update(_shots(), 0, ctx, scenario_a_player)
    assert len(result.updated_shots) == 2
    assert len(result.colors) == 2
    assert all(color in ShotColor for color in result.colors)
    assert compute_full_shot_update([], 0, ctx, scenario_a_player).colors == []


def test_prepare_requires_green(scenario_a_player) -> None:
    with pytest.raises(ValueError):
        prepare_drag_context(Hole(par=4, tee=TEE), scenario_a_player)


def test_context_key_tracks_weather(par4_hole, scenario_a_player) -> None:
    calm = context_key(par4_hole, scenario_a_player, None)
    windy = context_key(par4_hole, scenario_a_player, Weather(wind_speed=10, wind_direction="N"))
    assert calm != windy
    assert calm == context_key(par4_hole, scenario_a_player, Weather())


def test_cache_reuses_and_evicts(par4_hole, scenario_a_player) -> None:
    cache = DragContextCache(maxsize=2)
    first = cache.get(par4_hole, scenario_a_player)
    assert cache.get(par4_hole, scenario_a_player) is first
    assert len(cache) == 1

    for speed in (5, 10):
        cache.get(par4_hole, scenario_a_player, Weather(wind_speed=speed, wind_direction="N"))
    assert len(cache) == 2
    assert cache.get(par4_hole, scenario_a_player) is not first

    cache.clear()
    assert len(cache) == 0


def test_cache_size_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    from holeplan.config import reset_settings_cache

    monkeypatch.setenv("HOLEPLAN_DRAG_CACHE_SIZE", "1")
    reset_settings_cache()
    assert DragContextCache()._maxsize == 1
