"""Immutable scene contracts consumed by the external renderer.

Scenes are passive data: grid cells, board ids, column extents and ARGB
colors. All pixel drawing, text layout and theme lookup happen elsewhere.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from minigames.base_engine import MinigameKind
from minigames.raycast.tracing import HitKind


@dataclass(frozen=True)
class Cell:
    """Integer grid coordinate."""

    x: int
    y: int


@dataclass(frozen=True)
class SnakeScene:
    columns: int
    rows: int
    segments: tuple[Cell, ...]
    food: Cell
    alive: bool
    score: int


@dataclass(frozen=True)
class BlockFallScene:
    """Board occupancy plus the falling piece and HUD counters.

    ``board`` holds piece ids (0 empty, 1..7 locked piece type) row-major from
    the top row. ``next_cells`` are relative to a (0, 0) preview origin.
    """

    columns: int
    rows: int
    board: tuple[tuple[int, ...], ...]
    active_cells: tuple[Cell, ...]
    active_piece: int
    next_piece: int
    next_cells: tuple[Cell, ...]
    score: int
    lines_cleared: int
    level: int
    game_over: bool


@dataclass(frozen=True)
class FractalScene:
    width: int
    height: int
    pixels: Any
    center: tuple[float, float]
    span: tuple[float, float]
    max_iterations: int
    zoom_level: float


@dataclass(frozen=True)
class ColumnSample:
    """One vertical slice of the raycast viewport.

    ``top`` and ``bottom`` are normalized (0..1) vertical positions.
    """

    top: float
    bottom: float
    wall_color: int
    ceiling_color: int
    floor_color: int
    hit_kind: HitKind
    distance: float


@dataclass(frozen=True)
class RaycastScene:
    columns: tuple[ColumnSample, ...]
    position: tuple[float, float]
    angle: float
    remaining_enemies: int
    flash_active: bool


@dataclass(frozen=True)
class PanelScene:
    """Top-level frame emitted by the dispatcher."""

    timestamp: int
    active: MinigameKind | None
    available: tuple[tuple[str, MinigameKind], ...]
    content: SnakeScene | BlockFallScene | FractalScene | RaycastScene | None
