"""Base minigame engine contract."""

from __future__ import annotations

import enum
import random
from abc import ABC, abstractmethod
from typing import Any, Mapping

from core.input import InputEvent


class MinigameKind(str, enum.Enum):
    """Identity of each embedded minigame, in sidebar order."""

    SNAKE = "snake"
    BLOCKFALL = "blockfall"
    FRACTAL = "fractal"
    RAYCAST = "raycast"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    MinigameKind.SNAKE: "Snake",
    MinigameKind.BLOCKFALL: "Block Fall",
    MinigameKind.FRACTAL: "Fractal",
    MinigameKind.RAYCAST: "Raycaster",
}


class MinigameEngine(ABC):
    """Abstract minigame engine interface.

    All simulation state must be instance-local. Engines never read the wall
    clock: every state advance receives an explicit ``now`` in milliseconds,
    so identical timestamp and input traces replay identically.
    """

    kind: MinigameKind

    def __init__(self, params: Mapping[str, Any] | None = None, rng: random.Random | None = None) -> None:
        """Store engine parameters and RNG.

        Args:
            params: Engine-specific validated parameters.
            rng: Deterministic RNG owned by the caller.
        """
        self.params = dict(params or {})
        self.rng = rng if rng is not None else random.Random(0)
        self.last_update: int | None = None

    @abstractmethod
    def reset(self, now: int) -> None:
        """Restore the initial state and take ``now`` as the clock reference."""

    @abstractmethod
    def update(self, now: int) -> None:
        """Advance time-based state; bounded work, at most one tick per call."""

    @abstractmethod
    def handle_input(self, event: InputEvent, now: int) -> bool:
        """Apply a normalized input event and report whether it was consumed."""

    @abstractmethod
    def describe_scene(self, now: int) -> Any:
        """Return an immutable scene snapshot (data only)."""

    @property
    def is_game_over(self) -> bool:
        return False

    def resync_clock(self) -> None:
        """Forget the last update so the next ``update`` acts as a first tick."""
        self.last_update = None
