"""Grid DDA ray traversal against a tile map and point enemies."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Sequence


class HitKind(str, enum.Enum):
    NONE = "none"
    WALL = "wall"
    ENEMY = "enemy"


@dataclass
class Enemy:
    x: float
    y: float
    color: int
    alive: bool = True


@dataclass(frozen=True)
class RayHit:
    """Result of one ray.

    ``side`` is 0 when the final step crossed a vertical grid line (x axis)
    and 1 for a horizontal one.
    """

    kind: HitKind
    distance: float
    side: int = 0
    wall_type: int = 0
    enemy_index: int = -1


NO_HIT = RayHit(HitKind.NONE, math.inf)


def enemy_at_cell(enemies: Sequence[Enemy], cell_x: int, cell_y: int) -> int:
    """Index of the first live enemy standing in the cell, or -1."""
    for index, enemy in enumerate(enemies):
        if enemy.alive and int(enemy.x) == cell_x and int(enemy.y) == cell_y:
            return index
    return -1


def trace_ray(
    tile_map: Sequence[Sequence[int]],
    enemies: Sequence[Enemy],
    pos_x: float,
    pos_y: float,
    dir_x: float,
    dir_y: float,
    max_steps: int = 96,
) -> RayHit:
    """Walk the grid from the player's cell until a wall or live enemy.

    The cell holding the player is never tested. Leaving the map or running
    out of steps reports no hit at infinite distance.
    """
    map_height = len(tile_map)
    map_width = len(tile_map[0]) if map_height else 0
    map_x = int(pos_x)
    map_y = int(pos_y)

    delta_x = math.inf if dir_x == 0.0 else math.sqrt(1.0 + (dir_y * dir_y) / (dir_x * dir_x))
    delta_y = math.inf if dir_y == 0.0 else math.sqrt(1.0 + (dir_x * dir_x) / (dir_y * dir_y))

    if dir_x < 0:
        step_x = -1
        side_x = (pos_x - map_x) * delta_x
    else:
        step_x = 1
        side_x = (map_x + 1.0 - pos_x) * delta_x

    if dir_y < 0:
        step_y = -1
        side_y = (pos_y - map_y) * delta_y
    else:
        step_y = 1
        side_y = (map_y + 1.0 - pos_y) * delta_y

    side = 0
    for _ in range(max_steps):
        # Ties advance along y.
        if side_x < side_y:
            side_x += delta_x
            map_x += step_x
            side = 0
        else:
            side_y += delta_y
            map_y += step_y
            side = 1

        if not (0 <= map_x < map_width and 0 <= map_y < map_height):
            return NO_HIT

        enemy_index = enemy_at_cell(enemies, map_x, map_y)
        if enemy_index != -1:
            return RayHit(HitKind.ENEMY, _perpendicular(side, side_x, side_y, delta_x, delta_y), side, 0, enemy_index)

        wall_type = tile_map[map_y][map_x]
        if wall_type != 0:
            return RayHit(HitKind.WALL, _perpendicular(side, side_x, side_y, delta_x, delta_y), side, wall_type)

    return NO_HIT


def _perpendicular(side: int, side_x: float, side_y: float, delta_x: float, delta_y: float) -> float:
    # Undo the last accumulation to get the distance to the crossed grid line.
    if side == 0:
        return side_x - delta_x
    return side_y - delta_y
