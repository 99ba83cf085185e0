"""Falling-block puzzle automaton with wall kicks and line clearing."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from typing import Any, Mapping

from core.input import Control, InputEvent, KeyEvent
from core.scene import BlockFallScene, Cell
from minigames.base_engine import MinigameEngine, MinigameKind
from minigames.blockfall.shapes import KICK_OFFSETS, Tetromino, line_clear_score, shape_cells

LOGGER = logging.getLogger(__name__)

_PIECES: tuple[Tetromino, ...] = tuple(Tetromino)


@dataclass(frozen=True)
class ActivePiece:
    type: Tetromino
    rotation: int
    x: int
    y: int

    def cells(self) -> list[Cell]:
        return [Cell(self.x + dx, self.y + dy) for dx, dy in shape_cells(self.type, self.rotation)]


class BlockFallEngine(MinigameEngine):
    """Tetromino board driven by time-based gravity and discrete moves.

    Every mutation of the active piece goes through ``fits``, so the piece
    never overlaps a locked cell or leaves the board.
    """

    kind = MinigameKind.BLOCKFALL

    def __init__(self, params: Mapping[str, Any] | None = None, rng: random.Random | None = None) -> None:
        super().__init__(params=params, rng=rng)
        self.columns = int(self.params.get("columns", 10))
        self.rows = int(self.params.get("rows", 20))
        self.gravity_start_ms = int(self.params.get("gravity_start_ms", 800))
        self.gravity_floor_ms = int(self.params.get("gravity_floor_ms", 80))
        self.gravity_decay = float(self.params.get("gravity_decay", 0.9))
        self.max_speed_level = int(self.params.get("max_speed_level", 15))

        self.board: list[list[int]] = [[0] * self.columns for _ in range(self.rows)]
        self.active: ActivePiece | None = None
        self.next_piece: Tetromino = self._roll_piece()
        self.score = 0
        self.lines_cleared = 0
        self.game_over = False

    @property
    def level(self) -> int:
        return 1 + self.lines_cleared // 10

    @property
    def is_game_over(self) -> bool:
        return self.game_over

    def gravity_interval(self) -> int:
        """Milliseconds between gravity steps at the current level."""
        level = min(self.level, self.max_speed_level)
        factor = self.gravity_decay ** (level - 1)
        return max(self.gravity_floor_ms, int(self.gravity_start_ms * factor))

    def reset(self, now: int) -> None:
        self.board = [[0] * self.columns for _ in range(self.rows)]
        self.score = 0
        self.lines_cleared = 0
        self.game_over = False
        self.last_update = now
        self.active = None
        self.next_piece = self._roll_piece()
        self._spawn_piece()

    def update(self, now: int) -> None:
        if self.game_over:
            return
        if self.active is None:
            # Never reset yet: start a fresh game on this clock.
            self.reset(now)
            return
        if self.last_update is None:
            self.last_update = now
            return
        if now - self.last_update >= self.gravity_interval():
            self._tick_down()
            self.last_update = now

    def move_left(self) -> None:
        self._move_horizontal(-1)

    def move_right(self) -> None:
        self._move_horizontal(1)

    def soft_drop(self) -> None:
        if self.game_over:
            return
        if self._tick_down():
            self.score += 1

    def hard_drop(self) -> None:
        if self.game_over:
            return
        rows_dropped = 0
        while self._tick_down():
            rows_dropped += 1
        self.score += rows_dropped * 2

    def rotate_cw(self) -> None:
        self._rotate(1)

    def rotate_ccw(self) -> None:
        # Three clockwise quarter turns.
        self._rotate(3)

    def fits(self, piece: ActivePiece) -> bool:
        for cell in piece.cells():
            if not (0 <= cell.x < self.columns and 0 <= cell.y < self.rows):
                return False
            if self.board[cell.y][cell.x] != 0:
                return False
        return True

    def handle_input(self, event: InputEvent, now: int) -> bool:
        if not isinstance(event, KeyEvent) or not event.pressed:
            return False
        control = event.control
        if control == Control.LEFT:
            self.move_left()
        elif control == Control.RIGHT:
            self.move_right()
        elif control == Control.DOWN:
            self.soft_drop()
        elif control == Control.UP:
            self.rotate_cw()
        elif control == Control.ROTATE_CCW:
            self.rotate_ccw()
        elif control == Control.PRIMARY:
            self.hard_drop()
        elif control == Control.RESET:
            self.reset(now)
        else:
            return False
        return True

    def describe_scene(self, now: int) -> BlockFallScene:
        active_cells = tuple(self.active.cells()) if self.active is not None else ()
        return BlockFallScene(
            columns=self.columns,
            rows=self.rows,
            board=tuple(tuple(row) for row in self.board),
            active_cells=active_cells,
            active_piece=int(self.active.type) if self.active is not None else 0,
            next_piece=int(self.next_piece),
            next_cells=tuple(Cell(dx, dy) for dx, dy in shape_cells(self.next_piece, 0)),
            score=self.score,
            lines_cleared=self.lines_cleared,
            level=self.level,
            game_over=self.game_over,
        )

    # ---------- Internal logic ----------

    def _roll_piece(self) -> Tetromino:
        return _PIECES[self.rng.randrange(len(_PIECES))]

    def _spawn_piece(self) -> None:
        piece = ActivePiece(self.next_piece, rotation=0, x=self.columns // 2 - 2, y=0)
        self.next_piece = self._roll_piece()
        if self.fits(piece):
            self.active = piece
        else:
            self.game_over = True
            self.active = None
            LOGGER.debug("Block fall topped out with score %d", self.score)

    def _move_horizontal(self, dx: int) -> None:
        if self.game_over or self.active is None:
            return
        candidate = replace(self.active, x=self.active.x + dx)
        if self.fits(candidate):
            self.active = candidate

    def _tick_down(self) -> bool:
        """Advance one row; returns False when the piece locked instead."""
        piece = self.active
        if piece is None:
            return False
        candidate = replace(piece, y=piece.y + 1)
        if self.fits(candidate):
            self.active = candidate
            return True
        self._lock_piece(piece)
        self._clear_lines()
        self._spawn_piece()
        return False

    def _rotate(self, steps_cw: int) -> None:
        if self.game_over or self.active is None:
            return
        rotated = replace(self.active, rotation=(self.active.rotation + steps_cw) & 3)
        for dx in KICK_OFFSETS:
            kicked = replace(rotated, x=rotated.x + dx)
            if self.fits(kicked):
                self.active = kicked
                return

    def _lock_piece(self, piece: ActivePiece) -> None:
        for cell in piece.cells():
            if 0 <= cell.y < self.rows and 0 <= cell.x < self.columns:
                self.board[cell.y][cell.x] = int(piece.type)
        self.active = None

    def _clear_lines(self) -> None:
        cleared = 0
        row = self.rows - 1
        while row >= 0:
            if all(self.board[row]):
                # Shift everything above down; the same index is checked again.
                del self.board[row]
                self.board.insert(0, [0] * self.columns)
                cleared += 1
            else:
                row -= 1
        if cleared:
            self.lines_cleared += cleared
            self.score += line_clear_score(cleared) * self.level
