"""Dispatcher that owns the minigame engines and drives the active one."""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, Mapping

from core.deterministic_rng import DeterministicRNG
from core.input import InputEvent
from core.scene import PanelScene
from core.settings import EnablePredicate, settings_predicate
from minigames.base_engine import MinigameEngine, MinigameKind
from minigames.blockfall.engine import BlockFallEngine
from minigames.fractal.engine import FractalViewportEngine
from minigames.raycast.engine import RaycastEngine
from minigames.snake.engine import GridSnakeEngine

LOGGER = logging.getLogger(__name__)


def _always_enabled(kind: MinigameKind) -> bool:
    return True


class MinigameDispatcher:
    """Coordinates the minigames shown in the settings panel.

    Exactly one engine is active at a time. Updates, scene queries and input
    only ever reach the active engine, and only while it is enabled.
    """

    def __init__(
        self,
        engine_params: Mapping[MinigameKind, Mapping[str, Any]] | None = None,
        enabled: EnablePredicate | None = None,
        seed: int = 0,
    ) -> None:
        params = dict(engine_params or {})
        self.rng = DeterministicRNG(seed)
        self.enabled = enabled or _always_enabled

        self.snake = GridSnakeEngine(params.get(MinigameKind.SNAKE), rng=self.rng.stream("snake"))
        self.blockfall = BlockFallEngine(params.get(MinigameKind.BLOCKFALL), rng=self.rng.stream("blockfall"))
        self.fractal = FractalViewportEngine(params.get(MinigameKind.FRACTAL), rng=self.rng.stream("fractal"))
        self.raycast = RaycastEngine(params.get(MinigameKind.RAYCAST), rng=self.rng.stream("raycast"))

        self.active = MinigameKind.SNAKE
        self._pending_input: deque[InputEvent] = deque()

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> MinigameDispatcher:
        """Build from the normalized mapping returned by ``load_config``."""
        settings = config["settings"]
        return cls(
            engine_params=config.get("engine_params"),
            enabled=settings_predicate(lambda: settings),
            seed=int(config.get("seed", 0)),
        )

    def engine(self, kind: MinigameKind) -> MinigameEngine:
        if kind == MinigameKind.SNAKE:
            return self.snake
        if kind == MinigameKind.BLOCKFALL:
            return self.blockfall
        if kind == MinigameKind.FRACTAL:
            return self.fractal
        return self.raycast

    @property
    def active_engine(self) -> MinigameEngine:
        return self.engine(self.active)

    def is_enabled(self, kind: MinigameKind) -> bool:
        """Read the enable flag; unreadable settings count as enabled."""
        try:
            return bool(self.enabled(kind))
        except Exception as exc:
            LOGGER.debug("Enable flag for %s unavailable (%s); treating as enabled", kind.value, exc)
            return True

    def available(self) -> list[tuple[str, MinigameKind]]:
        """Enabled minigames as (label, kind) in sidebar order."""
        return [(kind.label, kind) for kind in MinigameKind if self.is_enabled(kind)]

    def enter(self, now: int) -> None:
        """Open the panel: pick the first enabled game and reset every engine."""
        enabled = self.available()
        self.active = enabled[0][1] if enabled else MinigameKind.SNAKE
        self._pending_input.clear()
        for kind in MinigameKind:
            self.engine(kind).reset(now)
        LOGGER.info("Minigame panel entered with %s active", self.active.value)

    def select(self, kind: MinigameKind, now: int) -> bool:
        """Switch to ``kind`` and restart it; disabled games are refused."""
        if not self.is_enabled(kind):
            return False
        self.active = kind
        self._pending_input.clear()
        self.engine(kind).reset(now)
        LOGGER.debug("Selected minigame %s", kind.value)
        return True

    def render(self, now: int) -> PanelScene:
        """Advance the active engine, describe it, then deliver queued input."""
        enabled = self.available()
        kinds = [kind for _, kind in enabled]
        if not kinds:
            return PanelScene(timestamp=now, active=None, available=(), content=None)

        if self.active not in kinds:
            # Fallback engine starts from a fresh clock instead of a huge delta.
            self.active = kinds[0]
            self.active_engine.resync_clock()

        engine = self.active_engine
        engine.update(now)
        content = engine.describe_scene(now)

        while self._pending_input:
            self.handle_input(self._pending_input.popleft(), now)

        return PanelScene(timestamp=now, active=self.active, available=tuple(enabled), content=content)

    def handle_input(self, event: InputEvent, now: int) -> bool:
        """Forward an input event to the active engine if it is enabled."""
        if not self.is_enabled(self.active):
            return False
        return self.active_engine.handle_input(event, now)

    def post_input(self, event: InputEvent) -> None:
        """Queue an event for delivery after the next frame's scene query."""
        self._pending_input.append(event)
