"""ARGB color helpers and the wall palette for raycast columns."""

from __future__ import annotations

CEILING_COLOR = 0xFF101010
FLOOR_COLOR = 0xFF303030
EMPTY_COLOR = 0xFF000000
FALLBACK_ENEMY_COLOR = 0xFFFF0000

WALL_COLORS = {
    1: 0xFF606060,
    2: 0xFF8B3A3A,
    3: 0xFF3A8B8B,
    4: 0xFF707020,
    5: 0xFF5A2A8B,
    6: 0xFF8B7A3A,
}
DEFAULT_WALL_COLOR = 0xFF606060


def wall_color(wall_type: int) -> int:
    return WALL_COLORS.get(wall_type, DEFAULT_WALL_COLOR)


def _scale_channels(color: int, factor: float) -> int:
    alpha = (color >> 24) & 0xFF
    red = min(255, max(0, int(((color >> 16) & 0xFF) * factor)))
    green = min(255, max(0, int(((color >> 8) & 0xFF) * factor)))
    blue = min(255, max(0, int((color & 0xFF) * factor)))
    return (alpha << 24) | (red << 16) | (green << 8) | blue


def shade_color(color: int, factor: float) -> int:
    """Scale RGB channels by ``factor`` clamped to [0, 1.5]; alpha kept."""
    return _scale_channels(color, min(1.5, max(0.0, factor)))


def brighten_color(color: int, factor: float) -> int:
    """Scale RGB channels by ``factor``, never darkening."""
    return _scale_channels(color, max(1.0, factor))


def distance_shade(distance: float, side: int) -> float:
    """Fog factor for a hit: darker with distance, darker again on y-sides."""
    shade = min(1.0, max(0.2, 1.0 / (1.0 + distance * 0.4)))
    return shade * (0.8 if side == 1 else 1.0)
