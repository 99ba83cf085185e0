"""Grid snake automaton."""

from __future__ import annotations

import enum
import logging
import random
from collections import deque
from typing import Any, Mapping

from core.input import Control, InputEvent, KeyEvent
from core.scene import Cell, SnakeScene
from minigames.base_engine import MinigameEngine, MinigameKind

LOGGER = logging.getLogger(__name__)


class Direction(enum.Enum):
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    def is_opposite(self, other: Direction) -> bool:
        return self.value[0] == -other.value[0] and self.value[1] == -other.value[1]


_CONTROL_DIRECTIONS = {
    Control.UP: Direction.UP,
    Control.DOWN: Direction.DOWN,
    Control.LEFT: Direction.LEFT,
    Control.RIGHT: Direction.RIGHT,
}


class GridSnakeEngine(MinigameEngine):
    """Snake on a bounded grid, advanced by fixed-interval ticks.

    The body is stored tail first, so the head is always the last element.
    """

    kind = MinigameKind.SNAKE

    def __init__(self, params: Mapping[str, Any] | None = None, rng: random.Random | None = None) -> None:
        super().__init__(params=params, rng=rng)
        self.columns = int(self.params.get("columns", 24))
        self.rows = int(self.params.get("rows", 18))
        self.tick_ms = int(self.params.get("tick_ms", 150))
        self.food_attempts = int(self.params.get("food_attempts", 1000))

        self.body: deque[Cell] = deque()
        self.direction = Direction.RIGHT
        self.pending_direction: Direction | None = None
        self.food = Cell(0, 0)
        self.alive = True
        self.score = 0
        self.reset(0)
        # Constructed engines start unclocked; the first update only records time.
        self.last_update = None

    @property
    def segments(self) -> list[Cell]:
        """Snake cells from tail to head."""
        return list(self.body)

    @property
    def is_game_over(self) -> bool:
        return not self.alive

    def reset(self, now: int) -> None:
        start_x = self.columns // 2
        start_y = self.rows // 2
        self.body = deque([Cell(start_x - 1, start_y), Cell(start_x, start_y)])
        self.direction = Direction.RIGHT
        self.pending_direction = None
        self.score = 0
        self.alive = True
        self.last_update = now
        self._spawn_food()

    def change_direction(self, direction: Direction) -> None:
        """Queue a direction change, applied on the next tick."""
        if not self.alive:
            return
        self.pending_direction = direction

    def update(self, now: int) -> None:
        if not self.alive:
            return
        if self.last_update is None:
            self.last_update = now
            return
        if now - self.last_update < self.tick_ms:
            return
        self.last_update = now

        if self.pending_direction is not None:
            if not self.pending_direction.is_opposite(self.direction):
                self.direction = self.pending_direction
            self.pending_direction = None

        head = self.body[-1]
        dx, dy = self.direction.value
        nxt = Cell(head.x + dx, head.y + dy)

        if not (0 <= nxt.x < self.columns and 0 <= nxt.y < self.rows) or nxt in self.body:
            self.alive = False
            LOGGER.debug("Snake died at %s with score %d", nxt, self.score)
            return

        self.body.append(nxt)
        if nxt == self.food:
            self.score += 1
            self._spawn_food()
        else:
            self.body.popleft()

    def handle_input(self, event: InputEvent, now: int) -> bool:
        if not isinstance(event, KeyEvent) or not event.pressed:
            return False
        if event.control == Control.RESET:
            self.reset(now)
            return True
        direction = _CONTROL_DIRECTIONS.get(event.control)
        if direction is None:
            return False
        self.change_direction(direction)
        return True

    def describe_scene(self, now: int) -> SnakeScene:
        return SnakeScene(
            columns=self.columns,
            rows=self.rows,
            segments=tuple(self.body),
            food=self.food,
            alive=self.alive,
            score=self.score,
        )

    def _spawn_food(self) -> None:
        # A full board pins food to the head.
        if len(self.body) >= self.columns * self.rows:
            self.food = self.body[-1]
            return

        occupied = set(self.body)
        for _ in range(self.food_attempts):
            candidate = Cell(self.rng.randrange(self.columns), self.rng.randrange(self.rows))
            if candidate not in occupied:
                self.food = candidate
                return

        self.food = self.body[-1]
