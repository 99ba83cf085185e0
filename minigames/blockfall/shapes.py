"""Tetromino types and their per-rotation cell tables."""

from __future__ import annotations

import enum


class Tetromino(enum.IntEnum):
    """Piece types; the value is the id stamped into the board."""

    I = 1  # noqa: E741
    O = 2  # noqa: E741
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Offsets = tuple[tuple[int, int], ...]

# Relative (dx, dy) cells indexed by rotation 0..3 clockwise; y grows downward.
SHAPES: dict[Tetromino, tuple[Offsets, Offsets, Offsets, Offsets]] = {
    Tetromino.I: (
        ((-1, 0), (0, 0), (1, 0), (2, 0)),
        ((1, -1), (1, 0), (1, 1), (1, 2)),
        ((-1, 1), (0, 1), (1, 1), (2, 1)),
        ((0, -1), (0, 0), (0, 1), (0, 2)),
    ),
    Tetromino.O: (((0, 0), (1, 0), (0, 1), (1, 1)),) * 4,
    Tetromino.T: (
        ((-1, 0), (0, 0), (1, 0), (0, 1)),
        ((0, -1), (0, 0), (0, 1), (1, 0)),
        ((-1, 0), (0, 0), (1, 0), (0, -1)),
        ((0, -1), (0, 0), (0, 1), (-1, 0)),
    ),
    Tetromino.S: (
        ((0, 0), (1, 0), (-1, 1), (0, 1)),
        ((0, -1), (0, 0), (1, 0), (1, 1)),
        ((0, 0), (1, 0), (-1, 1), (0, 1)),
        ((0, -1), (0, 0), (1, 0), (1, 1)),
    ),
    Tetromino.Z: (
        ((-1, 0), (0, 0), (0, 1), (1, 1)),
        ((1, -1), (0, 0), (1, 0), (0, 1)),
        ((-1, 0), (0, 0), (0, 1), (1, 1)),
        ((1, -1), (0, 0), (1, 0), (0, 1)),
    ),
    Tetromino.J: (
        ((-1, 0), (0, 0), (1, 0), (-1, 1)),
        ((0, -1), (0, 0), (0, 1), (1, 1)),
        ((-1, 0), (0, 0), (1, 0), (1, -1)),
        ((0, -1), (0, 0), (0, 1), (-1, -1)),
    ),
    Tetromino.L: (
        ((-1, 0), (0, 0), (1, 0), (1, 1)),
        ((0, -1), (0, 0), (0, 1), (1, -1)),
        ((-1, 0), (0, 0), (1, 0), (-1, -1)),
        ((0, -1), (0, 0), (0, 1), (-1, 1)),
    ),
}

# Horizontal offsets probed, in order, when a rotation does not fit in place.
KICK_OFFSETS: tuple[int, ...] = (0, -1, 1, -2, 2)

# Score per simultaneous clear count before the level multiplier.
LINE_CLEAR_SCORES = {1: 100, 2: 300, 3: 500, 4: 800}


def shape_cells(piece: Tetromino, rotation: int) -> Offsets:
    """Return relative cells for ``piece``; rotation is taken modulo 4."""
    return SHAPES[piece][rotation & 3]


def line_clear_score(cleared: int) -> int:
    return LINE_CLEAR_SCORES.get(cleared, cleared * 200)
