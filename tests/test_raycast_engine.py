"""Tests for the raycast viewport engine."""

from __future__ import annotations

import math

import pytest

from core.input import Control, KeyEvent
from core.scene import RaycastScene
from minigames.raycast.engine import DEFAULT_MAP, RaycastAction, RaycastEngine
from minigames.raycast.shading import brighten_color, distance_shade, shade_color
from minigames.raycast.tracing import HitKind, trace_ray


def _room(size: int = 5) -> list[list[int]]:
    return [
        [1 if x in (0, size - 1) or y in (0, size - 1) else 0 for x in range(size)]
        for y in range(size)
    ]


def _started(**kwargs) -> RaycastEngine:
    engine = RaycastEngine(**kwargs)
    engine.reset(0)
    return engine


def test_hitscan_sees_enemy_ahead() -> None:
    engine = _started()

    hit = engine.hitscan()

    assert hit.kind == HitKind.ENEMY
    assert hit.enemy_index == 0
    assert hit.distance == pytest.approx(2.5)
    assert hit.side == 0


def test_wall_hit_distance_is_perpendicular() -> None:
    tile_map = [list(row) for row in DEFAULT_MAP]
    tile_map[8][11] = 3
    engine = _started(tile_map=tile_map, enemy_spawns=())

    hit = engine.hitscan()

    assert hit.kind == HitKind.WALL
    assert hit.wall_type == 3
    assert hit.side == 0
    assert hit.distance == pytest.approx(2.5)


def test_center_column_matches_hitscan() -> None:
    engine = _started()

    columns = engine.compute_columns(5, now=0)

    assert len(columns) == 5
    assert columns[2].hit_kind == HitKind.ENEMY
    assert columns[2].distance == engine.hitscan().distance
    assert all(0.0 <= c.top <= c.bottom <= 1.0 for c in columns)


def test_ray_leaving_open_map_reports_no_hit() -> None:
    engine = _started(tile_map=[[0, 0], [0, 0]], enemy_spawns=(), start_pose=(0.5, 0.5, 0.0))

    hit = engine.hitscan()
    sample = engine.compute_columns(1, now=0)[0]

    assert hit.kind == HitKind.NONE
    assert math.isinf(hit.distance)
    assert (sample.top, sample.bottom) == (0.5, 0.5)


def test_diagonal_tie_steps_along_y() -> None:
    tile_map = [[0, 2, 0], [3, 0, 0], [0, 0, 0]]

    hit = trace_ray(tile_map, [], 0.5, 0.5, 1.0, 1.0)

    assert hit.kind == HitKind.WALL
    assert hit.wall_type == 3
    assert hit.side == 1
    assert hit.distance == pytest.approx(math.sqrt(0.5))


def test_step_budget_bounds_the_walk() -> None:
    tile_map = [[0] * 40]

    hit = trace_ray(tile_map, [], 0.5, 0.5, 1.0, 0.0, max_steps=5)

    assert hit.kind == HitKind.NONE


def test_fire_kills_enemy_and_flashes() -> None:
    engine = _started()

    assert engine.handle_input(KeyEvent(Control.PRIMARY), now=100)

    assert engine.remaining_enemies == 3
    assert not engine.enemies[0].alive
    assert engine.is_flash_active(150)
    assert not engine.is_flash_active(220)

    hit = engine.hitscan()
    assert hit.kind == HitKind.WALL
    assert hit.distance == pytest.approx(6.5)


def test_fire_at_wall_only_flashes() -> None:
    engine = _started(start_pose=(8.5, 8.5, math.pi / 2))

    engine.apply_action(RaycastAction.FIRE, now=0)

    assert engine.remaining_enemies == 4
    assert engine.describe_scene(50).flash_active


def test_held_forward_moves_with_elapsed_time() -> None:
    engine = _started()

    engine.handle_input(KeyEvent(Control.UP), now=0)
    engine.update(100)
    assert engine.pos_x == pytest.approx(8.8)
    assert engine.pos_y == pytest.approx(8.5)

    engine.handle_input(KeyEvent(Control.UP, pressed=False), now=100)
    engine.update(200)
    assert engine.pos_x == pytest.approx(8.8)


def test_long_frame_is_clamped() -> None:
    engine = _started()

    engine.update_with_input(
        5_000,
        move_forward=True,
        move_backward=False,
        strafe_left=False,
        strafe_right=False,
        turn_left=False,
        turn_right=False,
    )

    assert engine.pos_x == pytest.approx(8.5 + 3.0 * 0.2)


def test_blocked_axis_slides_along_wall() -> None:
    engine = _started(tile_map=_room(), enemy_spawns=(), start_pose=(3.8, 2.0, math.pi / 4))

    engine.update_with_input(
        200,
        move_forward=True,
        move_backward=False,
        strafe_left=False,
        strafe_right=False,
        turn_left=False,
        turn_right=False,
    )

    assert engine.pos_x == 3.8
    assert engine.pos_y == pytest.approx(2.0 + 0.6 * math.sin(math.pi / 4))


def test_strafe_moves_perpendicular_to_heading() -> None:
    engine = _started(enemy_spawns=())

    engine.handle_input(KeyEvent(Control.STRAFE_RIGHT), now=0)
    engine.update(200)

    assert engine.pos_x == pytest.approx(8.5)
    assert engine.pos_y == pytest.approx(8.5 + 2.5 * 0.2)


def test_turning_wraps_angle() -> None:
    engine = _started(start_pose=(8.5, 8.5, math.pi - 0.01))

    engine.handle_input(KeyEvent(Control.RIGHT), now=0)
    engine.update(200)

    assert -math.pi < engine.angle <= math.pi
    assert engine.angle == pytest.approx(math.pi - 0.01 + math.pi / 2 * 0.2 - 2 * math.pi)


def test_reset_restores_pose_and_enemies() -> None:
    engine = _started()
    engine.apply_action(RaycastAction.FIRE, now=10)
    engine.handle_input(KeyEvent(Control.LEFT), now=10)
    engine.update(150)

    engine.handle_input(KeyEvent(Control.RESET), now=300)

    assert (engine.pos_x, engine.pos_y, engine.angle) == (8.5, 8.5, 0.0)
    assert engine.remaining_enemies == 4
    assert not engine.is_flash_active(300)
    assert engine.held == set()


def test_scene_has_configured_column_count() -> None:
    engine = _started(params={"view_columns": 32})

    scene = engine.describe_scene(0)

    assert isinstance(scene, RaycastScene)
    assert len(scene.columns) == 32
    assert scene.remaining_enemies == 4
    assert scene.position == (8.5, 8.5)


def test_shading_helpers() -> None:
    assert shade_color(0xFF808080, 0.5) == 0xFF404040
    assert brighten_color(0xFF808080, 0.5) == 0xFF808080
    assert brighten_color(0xFFC0C0C0, 2.0) == 0xFFFFFFFF
    assert distance_shade(0.0, 0) == 1.0
    assert distance_shade(100.0, 0) == 0.2
    assert distance_shade(0.0, 1) == pytest.approx(0.8)


@pytest.mark.parametrize(
    ("action", "expected"),
    [
        (RaycastAction.MOVE_FORWARD, (8.8, 8.5)),
        (RaycastAction.MOVE_BACKWARD, (8.2, 8.5)),
        (RaycastAction.STRAFE_LEFT, (8.5, 8.25)),
        (RaycastAction.STRAFE_RIGHT, (8.5, 8.75)),
    ],
)
def test_discrete_move_scales_with_elapsed_time(action: RaycastAction, expected: tuple[float, float]) -> None:
    engine = _started()

    engine.apply_action(action, now=100)

    assert (engine.pos_x, engine.pos_y) == (pytest.approx(expected[0]), pytest.approx(expected[1]))
    assert engine.last_update == 100


def test_discrete_action_without_elapsed_time_does_not_move() -> None:
    engine = _started()

    engine.apply_action(RaycastAction.MOVE_FORWARD, now=0)
    engine.apply_action(RaycastAction.TURN_LEFT, now=0)

    assert (engine.pos_x, engine.pos_y, engine.angle) == (8.5, 8.5, 0.0)


def test_discrete_move_uses_clamped_step() -> None:
    engine = _started()

    engine.apply_action(RaycastAction.MOVE_FORWARD, now=5_000)

    assert engine.pos_x == pytest.approx(8.5 + 3.0 * 0.2)


def test_discrete_turns_wrap_heading() -> None:
    engine = _started(start_pose=(8.5, 8.5, math.pi - 0.01))

    engine.apply_action(RaycastAction.TURN_RIGHT, now=200)
    assert -math.pi < engine.angle < 0.0
    assert engine.angle == pytest.approx(math.pi - 0.01 + math.pi / 2 * 0.2 - 2 * math.pi)

    engine.apply_action(RaycastAction.TURN_LEFT, now=300)
    assert engine.angle == pytest.approx(math.pi - 0.01 + math.pi / 2 * 0.1 - 2 * math.pi)
