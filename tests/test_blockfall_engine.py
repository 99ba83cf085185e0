"""Tests for the falling-block engine."""

from __future__ import annotations

import random

import pytest

from core.input import Control, KeyEvent
from core.scene import BlockFallScene
from minigames.blockfall.engine import ActivePiece, BlockFallEngine
from minigames.blockfall.shapes import Tetromino, line_clear_score, shape_cells


class ScriptedRandom(random.Random):
    """Returns queued piece indices, repeating the last one when exhausted."""

    def __init__(self, values: list[int]) -> None:
        super().__init__(0)
        self.values = list(values)

    def randrange(self, start, stop=None, step=1):  # type: ignore[override]
        if len(self.values) > 1:
            return self.values.pop(0)
        return self.values[0]


def _o_engine(**params) -> BlockFallEngine:
    # Index 1 of the piece table is the O piece.
    engine = BlockFallEngine(params or None, rng=ScriptedRandom([1]))
    engine.reset(0)
    return engine


def _assert_piece_valid(engine: BlockFallEngine) -> None:
    if engine.active is None:
        return
    for cell in engine.active.cells():
        assert 0 <= cell.x < engine.columns
        assert 0 <= cell.y < engine.rows
        assert engine.board[cell.y][cell.x] == 0


def test_spawn_position_and_next_piece() -> None:
    # init roll, active piece roll, next piece roll
    engine = BlockFallEngine(rng=ScriptedRandom([0, 2, 6]))
    engine.reset(0)

    assert engine.active == ActivePiece(Tetromino.T, rotation=0, x=3, y=0)
    assert engine.next_piece == Tetromino.L


def test_hard_drop_o_piece_locks_on_floor() -> None:
    engine = _o_engine()

    engine.hard_drop()

    assert engine.score == 36
    assert engine.board[18][3] == engine.board[18][4] == int(Tetromino.O)
    assert engine.board[19][3] == engine.board[19][4] == int(Tetromino.O)
    assert engine.active == ActivePiece(Tetromino.O, rotation=0, x=3, y=0)
    assert not engine.game_over


def test_double_line_clear_scores_and_shifts_board() -> None:
    engine = _o_engine()
    for row in (18, 19):
        engine.board[row] = [1, 1, 1, 0, 0, 1, 1, 1, 1, 1]
    engine.board[17][0] = 5

    engine.hard_drop()

    assert engine.lines_cleared == 2
    assert engine.score == 36 + 300
    assert engine.board[19] == [5, 0, 0, 0, 0, 0, 0, 0, 0, 0]
    assert all(cell == 0 for row in engine.board[:19] for cell in row)


def test_soft_drop_scores_one_per_row() -> None:
    engine = _o_engine()

    engine.soft_drop()
    engine.soft_drop()

    assert engine.active.y == 2
    assert engine.score == 2


def test_rotation_kicks_off_the_wall() -> None:
    engine = BlockFallEngine(rng=ScriptedRandom([0]))
    engine.reset(0)
    engine.active = ActivePiece(Tetromino.I, rotation=3, x=0, y=5)

    engine.rotate_cw()

    assert engine.active == ActivePiece(Tetromino.I, rotation=0, x=1, y=5)
    _assert_piece_valid(engine)


def test_blocked_rotation_leaves_piece_unchanged() -> None:
    engine = BlockFallEngine(rng=ScriptedRandom([0]))
    engine.reset(0)
    engine.active = ActivePiece(Tetromino.I, rotation=1, x=3, y=5)
    for y in range(engine.rows):
        for x in range(engine.columns):
            if x != 4:
                engine.board[y][x] = 1

    engine.rotate_ccw()

    assert engine.active == ActivePiece(Tetromino.I, rotation=1, x=3, y=5)


def test_moves_stop_at_walls() -> None:
    engine = _o_engine()

    for _ in range(10):
        engine.move_left()
    assert engine.active.x == 0

    for _ in range(10):
        engine.move_right()
    assert engine.active.x == engine.columns - 2


def test_blocked_spawn_ends_the_game() -> None:
    engine = _o_engine()
    engine.board[2] = [0] + [1] * 9

    engine.hard_drop()

    assert engine.game_over
    assert engine.is_game_over
    assert engine.active is None

    board = [row[:] for row in engine.board]
    engine.update(10_000)
    engine.move_left()
    engine.hard_drop()
    assert engine.board == board
    assert engine.describe_scene(0).active_cells == ()


def test_gravity_steps_once_per_interval() -> None:
    engine = _o_engine()

    engine.update(799)
    assert engine.active.y == 0

    engine.update(800)
    assert engine.active.y == 1

    engine.update(60_000)
    assert engine.active.y == 2


@pytest.mark.parametrize(
    ("lines_cleared", "expected"),
    [(0, 800), (10, 720), (20, 648), (200, 183)],
)
def test_gravity_interval_by_level(lines_cleared: int, expected: int) -> None:
    engine = _o_engine()
    engine.lines_cleared = lines_cleared

    assert engine.gravity_interval() == expected


def test_gravity_interval_has_floor() -> None:
    engine = _o_engine(gravity_start_ms=100)
    engine.lines_cleared = 140

    assert engine.gravity_interval() == 80


def test_line_clear_score_table() -> None:
    assert [line_clear_score(n) for n in (1, 2, 3, 4, 5)] == [100, 300, 500, 800, 1000]


def test_rotation_index_wraps() -> None:
    assert shape_cells(Tetromino.T, 4) == shape_cells(Tetromino.T, 0)
    assert shape_cells(Tetromino.T, 7) == shape_cells(Tetromino.T, 3)


def test_random_play_keeps_piece_valid() -> None:
    engine = BlockFallEngine(rng=random.Random(11))
    engine.reset(0)
    moves = random.Random(5)
    controls = [Control.LEFT, Control.RIGHT, Control.DOWN, Control.UP, Control.ROTATE_CCW, Control.PRIMARY]

    now = 0
    for _ in range(600):
        if engine.game_over:
            engine.reset(now)
        now += 50
        engine.handle_input(KeyEvent(moves.choice(controls)), now)
        engine.update(now)
        _assert_piece_valid(engine)
        assert all(len(row) == engine.columns for row in engine.board)
        assert len(engine.board) == engine.rows


def test_handle_input_mapping() -> None:
    engine = _o_engine()

    assert engine.handle_input(KeyEvent(Control.LEFT), now=0)
    assert engine.active.x == 2
    assert engine.handle_input(KeyEvent(Control.PRIMARY), now=0)
    assert engine.score == 36
    assert not engine.handle_input(KeyEvent(Control.ZOOM_IN), now=0)
    assert not engine.handle_input(KeyEvent(Control.LEFT, pressed=False), now=0)

    assert engine.handle_input(KeyEvent(Control.RESET), now=5)
    assert engine.score == 0
    assert all(cell == 0 for row in engine.board for cell in row)


def test_scene_contents() -> None:
    engine = _o_engine()
    scene = engine.describe_scene(0)

    assert isinstance(scene, BlockFallScene)
    assert scene.active_piece == int(Tetromino.O)
    assert len(scene.active_cells) == 4
    assert scene.next_piece == int(Tetromino.O)
    assert scene.level == 1
    assert len(scene.board) == 20 and len(scene.board[0]) == 10


def test_first_update_starts_a_game_when_never_reset() -> None:
    engine = BlockFallEngine(rng=ScriptedRandom([1]))
    assert engine.active is None

    engine.update(0)
    assert engine.active == ActivePiece(Tetromino.O, rotation=0, x=3, y=0)
    assert engine.last_update == 0

    for now in range(100, 5_001, 100):
        engine.update(now)

    assert not engine.game_over
    assert engine.active.y == 6
