"""Grid raycasting viewport with sliding movement and hit-scan firing."""

from __future__ import annotations

import enum
import logging
import math
import random
from typing import Any, Mapping, Sequence

from core.input import Control, InputEvent, KeyEvent
from core.scene import ColumnSample, RaycastScene
from minigames.base_engine import MinigameEngine, MinigameKind
from minigames.raycast.shading import (
    CEILING_COLOR,
    EMPTY_COLOR,
    FALLBACK_ENEMY_COLOR,
    FLOOR_COLOR,
    brighten_color,
    distance_shade,
    shade_color,
    wall_color,
)
from minigames.raycast.tracing import Enemy, HitKind, RayHit, trace_ray

LOGGER = logging.getLogger(__name__)

# 0 = open, >0 = wall type.
DEFAULT_MAP: tuple[tuple[int, ...], ...] = (
    (1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1),
    (1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1),
    (1, 0, 2, 0, 0, 0, 3, 0, 0, 0, 2, 0, 0, 0, 0, 1),
    (1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1),
    (1, 0, 0, 0, 4, 4, 0, 0, 0, 0, 0, 4, 4, 0, 0, 1),
    (1, 0, 0, 0, 4, 4, 0, 0, 0, 0, 0, 4, 4, 0, 0, 1),
    (1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1),
    (1, 0, 5, 0, 0, 0, 6, 0, 0, 0, 5, 0, 0, 0, 0, 1),
    (1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1),
    (1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1),
    (1, 0, 2, 0, 0, 0, 3, 0, 0, 0, 2, 0, 0, 0, 0, 1),
    (1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1),
    (1, 0, 0, 0, 4, 4, 0, 0, 0, 0, 0, 4, 4, 0, 0, 1),
    (1, 0, 0, 0, 4, 4, 0, 0, 0, 0, 0, 4, 4, 0, 0, 1),
    (1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1),
    (1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1),
)

# (x, y, color): ahead, either side of the center line, and behind the start.
DEFAULT_ENEMIES: tuple[tuple[float, float, int], ...] = (
    (11.5, 8.5, 0xFFFF5555),
    (11.5, 6.5, 0xFF55FF55),
    (11.5, 10.5, 0xFF5599FF),
    (5.5, 8.5, 0xFFFFAA00),
)

START_POSE = (8.5, 8.5, 0.0)


class RaycastAction(str, enum.Enum):
    MOVE_FORWARD = "move_forward"
    MOVE_BACKWARD = "move_backward"
    STRAFE_LEFT = "strafe_left"
    STRAFE_RIGHT = "strafe_right"
    TURN_LEFT = "turn_left"
    TURN_RIGHT = "turn_right"
    FIRE = "fire"
    RESET = "reset"


# (forward, strafe, turn) signs per directional action.
_ACTION_SIGNALS = {
    RaycastAction.MOVE_FORWARD: (1.0, 0.0, 0.0),
    RaycastAction.MOVE_BACKWARD: (-1.0, 0.0, 0.0),
    RaycastAction.STRAFE_LEFT: (0.0, -1.0, 0.0),
    RaycastAction.STRAFE_RIGHT: (0.0, 1.0, 0.0),
    RaycastAction.TURN_LEFT: (0.0, 0.0, -1.0),
    RaycastAction.TURN_RIGHT: (0.0, 0.0, 1.0),
}

_HELD_CONTROLS = frozenset(
    {Control.UP, Control.DOWN, Control.LEFT, Control.RIGHT, Control.STRAFE_LEFT, Control.STRAFE_RIGHT}
)


class RaycastEngine(MinigameEngine):
    """First-person walk through a static tile map with stationary enemies.

    Movement and turning scale with elapsed time, clamped so a long pause
    cannot launch the player across the map.
    """

    kind = MinigameKind.RAYCAST

    def __init__(
        self,
        params: Mapping[str, Any] | None = None,
        rng: random.Random | None = None,
        tile_map: Sequence[Sequence[int]] | None = None,
        enemy_spawns: Sequence[tuple[float, float, int]] | None = None,
        start_pose: tuple[float, float, float] = START_POSE,
    ) -> None:
        super().__init__(params=params, rng=rng)
        self.move_speed = float(self.params.get("move_speed", 3.0))
        self.strafe_speed = float(self.params.get("strafe_speed", 2.5))
        self.turn_speed = math.radians(float(self.params.get("turn_speed_deg", 90.0)))
        self.fov = math.radians(float(self.params.get("fov_deg", 70.0)))
        self.max_ray_steps = int(self.params.get("max_ray_steps", 96))
        self.flash_ms = int(self.params.get("flash_ms", 120))
        self.max_step_ms = int(self.params.get("max_step_ms", 200))
        self.view_columns = int(self.params.get("view_columns", 160))

        source = DEFAULT_MAP if tile_map is None else tile_map
        self.tile_map: tuple[tuple[int, ...], ...] = tuple(tuple(int(v) for v in row) for row in source)
        self.map_height = len(self.tile_map)
        self.map_width = len(self.tile_map[0]) if self.map_height else 0
        self.enemy_spawns = tuple(DEFAULT_ENEMIES if enemy_spawns is None else enemy_spawns)
        self.start_pose = start_pose

        self.pos_x, self.pos_y, self.angle = start_pose
        self.enemies: list[Enemy] = []
        self.flash_until: int | None = None
        self.held: set[Control] = set()
        self._spawn_enemies()

    @property
    def remaining_enemies(self) -> int:
        return sum(1 for enemy in self.enemies if enemy.alive)

    def reset(self, now: int) -> None:
        self.pos_x, self.pos_y, self.angle = self.start_pose
        self.last_update = now
        self.flash_until = None
        self.held = set()
        self._spawn_enemies()

    def is_flash_active(self, now: int) -> bool:
        return self.flash_until is not None and now < self.flash_until

    def apply_action(self, action: RaycastAction, now: int) -> None:
        """Apply one discrete action."""
        if action == RaycastAction.RESET:
            self.reset(now)
            return
        if action == RaycastAction.FIRE:
            self._shoot(now)
            return

        dt = self._delta_seconds(now)
        forward, strafe, turn = _ACTION_SIGNALS[action]
        if forward or strafe:
            self._move(forward, strafe, dt)
        if turn:
            self._turn(turn, dt)

    def update_with_input(
        self,
        now: int,
        move_forward: bool,
        move_backward: bool,
        strafe_left: bool,
        strafe_right: bool,
        turn_left: bool,
        turn_right: bool,
    ) -> None:
        """Apply held movement and turning together in one time step."""
        dt = self._delta_seconds(now)
        if dt <= 0.0:
            return

        forward = float(move_forward) - float(move_backward)
        strafe = float(strafe_right) - float(strafe_left)
        turn = float(turn_right) - float(turn_left)

        if forward != 0.0 or strafe != 0.0:
            self._move(forward, strafe, dt)
        if turn != 0.0:
            self._turn(turn, dt)

    def update(self, now: int) -> None:
        held = self.held
        self.update_with_input(
            now,
            move_forward=Control.UP in held,
            move_backward=Control.DOWN in held,
            strafe_left=Control.STRAFE_LEFT in held,
            strafe_right=Control.STRAFE_RIGHT in held,
            turn_left=Control.LEFT in held,
            turn_right=Control.RIGHT in held,
        )

    def handle_input(self, event: InputEvent, now: int) -> bool:
        if not isinstance(event, KeyEvent):
            return False
        control = event.control
        if control in _HELD_CONTROLS:
            if event.pressed:
                self.held.add(control)
            else:
                self.held.discard(control)
            return True
        if not event.pressed:
            return False
        if control == Control.PRIMARY:
            self.apply_action(RaycastAction.FIRE, now)
        elif control == Control.RESET:
            self.apply_action(RaycastAction.RESET, now)
        else:
            return False
        return True

    def cast(self, dir_x: float, dir_y: float) -> RayHit:
        return trace_ray(self.tile_map, self.enemies, self.pos_x, self.pos_y, dir_x, dir_y, self.max_ray_steps)

    def hitscan(self) -> RayHit:
        """Center-of-view ray along the current heading."""
        return self.cast(math.cos(self.angle), math.sin(self.angle))

    def compute_columns(self, column_count: int, now: int) -> tuple[ColumnSample, ...]:
        """Trace ``column_count`` rays across the field of view, left to right."""
        if column_count <= 0:
            return ()

        dir_x = math.cos(self.angle)
        dir_y = math.sin(self.angle)
        plane_length = math.tan(self.fov / 2.0)
        plane_x = -dir_y * plane_length
        plane_y = dir_x * plane_length
        flash_active = self.is_flash_active(now)

        samples: list[ColumnSample] = []
        for column in range(column_count):
            camera_x = 0.0 if column_count == 1 else 2.0 * column / (column_count - 1) - 1.0
            hit = self.cast(dir_x + plane_x * camera_x, dir_y + plane_y * camera_x)
            samples.append(self._sample(hit, flash_active))
        return tuple(samples)

    def describe_scene(self, now: int) -> RaycastScene:
        return RaycastScene(
            columns=self.compute_columns(self.view_columns, now),
            position=(self.pos_x, self.pos_y),
            angle=self.angle,
            remaining_enemies=self.remaining_enemies,
            flash_active=self.is_flash_active(now),
        )

    # --- Internal helpers -----------------------------------------------------

    def _spawn_enemies(self) -> None:
        self.enemies = [Enemy(x=float(x), y=float(y), color=int(color)) for x, y, color in self.enemy_spawns]

    def _sample(self, hit: RayHit, flash_active: bool) -> ColumnSample:
        if hit.kind == HitKind.NONE:
            return ColumnSample(
                top=0.5,
                bottom=0.5,
                wall_color=EMPTY_COLOR,
                ceiling_color=CEILING_COLOR,
                floor_color=FLOOR_COLOR,
                hit_kind=hit.kind,
                distance=hit.distance,
            )

        distance = max(hit.distance, 0.0001)
        # Closer hits are taller.
        height = min(1.5, max(0.1, 1.2 / distance))
        top = max(0.0, 0.5 - height / 2.0)
        bottom = min(1.0, 0.5 + height / 2.0)

        if hit.kind == HitKind.WALL:
            base = wall_color(hit.wall_type)
        elif 0 <= hit.enemy_index < len(self.enemies):
            base = self.enemies[hit.enemy_index].color
        else:
            base = FALLBACK_ENEMY_COLOR

        color = shade_color(base, distance_shade(distance, hit.side))
        if flash_active and hit.kind == HitKind.WALL:
            # Enemies stay readable during the muzzle flash.
            color = brighten_color(color, 1.4)

        return ColumnSample(
            top=top,
            bottom=bottom,
            wall_color=color,
            ceiling_color=CEILING_COLOR,
            floor_color=FLOOR_COLOR,
            hit_kind=hit.kind,
            distance=hit.distance,
        )

    def _shoot(self, now: int) -> None:
        self.flash_until = now + self.flash_ms
        hit = self.hitscan()
        if hit.kind == HitKind.ENEMY and 0 <= hit.enemy_index < len(self.enemies):
            self.enemies[hit.enemy_index].alive = False
            LOGGER.debug("Enemy %d down, %d remaining", hit.enemy_index, self.remaining_enemies)

    def _delta_seconds(self, now: int) -> float:
        if self.last_update is None:
            self.last_update = now
            return 0.0
        raw = min(now - self.last_update, self.max_step_ms)
        self.last_update = now
        return raw / 1000.0

    def _move(self, forward: float, strafe: float, dt: float) -> None:
        if dt <= 0.0:
            return
        forward_step = self.move_speed * forward * dt
        strafe_step = self.strafe_speed * strafe * dt
        dir_x = math.cos(self.angle)
        dir_y = math.sin(self.angle)

        dx = dir_x * forward_step - dir_y * strafe_step
        dy = dir_y * forward_step + dir_x * strafe_step
        new_x = self.pos_x + dx
        new_y = self.pos_y + dy

        # Each axis commits independently so the player slides along walls.
        if self._is_walkable(new_x, self.pos_y):
            self.pos_x = new_x
        if self._is_walkable(self.pos_x, new_y):
            self.pos_y = new_y

    def _turn(self, sign: float, dt: float) -> None:
        if dt <= 0.0:
            return
        self.angle += self.turn_speed * sign * dt
        if self.angle > math.pi:
            self.angle -= 2.0 * math.pi
        elif self.angle <= -math.pi:
            self.angle += 2.0 * math.pi

    def _is_walkable(self, x: float, y: float) -> bool:
        if x < 0.0 or y < 0.0:
            return False
        ix = int(x)
        iy = int(y)
        if ix >= self.map_width or iy >= self.map_height:
            return False
        return self.tile_map[iy][ix] == 0
