"""Tests for the minigame dispatcher."""

from __future__ import annotations

from core.dispatcher import MinigameDispatcher
from core.input import Control, KeyEvent
from core.scene import BlockFallScene, Cell, FractalScene, SnakeScene
from core.settings import MinigameSettings, settings_predicate
from minigames.base_engine import MinigameKind
from streaming.state_serializer import serialize_state


def _small_params() -> dict:
    return {MinigameKind.FRACTAL: {"grid_width": 16, "grid_height": 12}}


def test_enter_starts_with_first_enabled_game() -> None:
    dispatcher = MinigameDispatcher(_small_params())
    dispatcher.enter(0)

    frame = dispatcher.render(0)

    assert frame.active == MinigameKind.SNAKE
    assert isinstance(frame.content, SnakeScene)
    assert [label for label, _ in frame.available] == ["Snake", "Block Fall", "Fractal", "Raycaster"]


def test_enter_skips_disabled_games() -> None:
    settings = MinigameSettings(enable_snake=False)
    dispatcher = MinigameDispatcher(enabled=settings_predicate(lambda: settings))

    dispatcher.enter(0)

    assert dispatcher.active == MinigameKind.BLOCKFALL


def test_failing_enable_lookup_counts_as_enabled() -> None:
    def broken(kind: MinigameKind) -> bool:
        raise RuntimeError("settings not loaded")

    dispatcher = MinigameDispatcher(enabled=broken)

    assert dispatcher.is_enabled(MinigameKind.RAYCAST)
    assert len(dispatcher.available()) == 4


def test_disabling_active_game_falls_back_on_next_render() -> None:
    settings = MinigameSettings()
    dispatcher = MinigameDispatcher(_small_params(), enabled=settings_predicate(lambda: settings))
    dispatcher.enter(0)
    dispatcher.render(0)

    settings.enable_snake = False
    frame = dispatcher.render(100_000)

    assert frame.active == MinigameKind.BLOCKFALL
    assert isinstance(frame.content, BlockFallScene)
    # The fallback starts from a fresh clock, so no gravity step happened.
    assert dispatcher.blockfall.active.y == 0


def test_no_enabled_games_renders_empty_panel() -> None:
    dispatcher = MinigameDispatcher(enabled=lambda kind: False)
    dispatcher.enter(0)

    frame = dispatcher.render(10)

    assert frame.active is None
    assert frame.available == ()
    assert frame.content is None


def test_select_refuses_disabled_game() -> None:
    settings = MinigameSettings(enable_fractal=False)
    dispatcher = MinigameDispatcher(enabled=settings_predicate(lambda: settings))
    dispatcher.enter(0)

    assert not dispatcher.select(MinigameKind.FRACTAL, now=10)
    assert dispatcher.active == MinigameKind.SNAKE

    assert dispatcher.select(MinigameKind.RAYCAST, now=10)
    assert dispatcher.active == MinigameKind.RAYCAST
    assert dispatcher.raycast.last_update == 10


def test_posted_input_arrives_after_scene_query() -> None:
    dispatcher = MinigameDispatcher()
    dispatcher.enter(0)
    dispatcher.snake.food = Cell(0, 0)

    dispatcher.post_input(KeyEvent(Control.UP))
    first = dispatcher.render(10)
    assert dispatcher.snake.pending_direction is not None
    assert first.content.segments[-1] == Cell(12, 9)

    second = dispatcher.render(149)
    assert second.content.segments[-1] == Cell(12, 9)
    third = dispatcher.render(150)
    assert third.content.segments[-1] == Cell(12, 8)


def test_only_active_engine_advances() -> None:
    dispatcher = MinigameDispatcher(_small_params())
    dispatcher.enter(0)

    dispatcher.render(5_000)

    assert dispatcher.snake.last_update == 5_000
    assert dispatcher.blockfall.last_update == 0
    assert dispatcher.raycast.last_update == 0


def test_input_ignored_while_active_game_disabled() -> None:
    settings = MinigameSettings()
    dispatcher = MinigameDispatcher(enabled=settings_predicate(lambda: settings))
    dispatcher.enter(0)

    settings.enable_snake = False

    assert not dispatcher.handle_input(KeyEvent(Control.UP), now=5)
    assert dispatcher.snake.pending_direction is None


def test_select_switches_scene_type() -> None:
    dispatcher = MinigameDispatcher(_small_params())
    dispatcher.enter(0)

    dispatcher.select(MinigameKind.FRACTAL, now=20)
    frame = dispatcher.render(30)

    assert isinstance(frame.content, FractalScene)
    assert frame.content.pixels.shape == (12, 16)


def test_from_config_uses_settings_and_params() -> None:
    config = {
        "seed": 3,
        "settings": MinigameSettings(enable_snake=False),
        "engine_params": {MinigameKind.BLOCKFALL: {"columns": 8, "rows": 12}},
    }

    dispatcher = MinigameDispatcher.from_config(config)
    dispatcher.enter(0)
    frame = dispatcher.render(0)

    assert frame.active == MinigameKind.BLOCKFALL
    assert frame.content.columns == 8
    assert frame.content.rows == 12


def test_same_seed_replays_identically() -> None:
    def run(seed: int) -> bytes:
        dispatcher = MinigameDispatcher(seed=seed)
        dispatcher.enter(0)
        dispatcher.select(MinigameKind.BLOCKFALL, now=0)
        for step in range(1, 40):
            if step % 3 == 0:
                dispatcher.post_input(KeyEvent(Control.PRIMARY))
            frame = dispatcher.render(step * 100)
        return serialize_state(frame)

    assert run(9) == run(9)


def test_render_before_enter_runs_the_default_game() -> None:
    dispatcher = MinigameDispatcher()
    dispatcher.snake.food = Cell(0, 0)

    dispatcher.render(0)
    frame = dispatcher.render(200)

    assert frame.active == MinigameKind.SNAKE
    assert frame.content.segments[-1] == Cell(13, 9)
