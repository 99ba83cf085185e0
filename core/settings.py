"""Enable flags read by the dispatcher from the host's settings object."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from minigames.base_engine import MinigameKind

EnablePredicate = Callable[[MinigameKind], bool]


@dataclass
class MinigameSettings:
    """Per-minigame enable toggles as stored by the settings screen."""

    enable_snake: bool = True
    enable_blockfall: bool = True
    enable_fractal: bool = True
    enable_raycast: bool = True


def settings_predicate(provider: Callable[[], Any]) -> EnablePredicate:
    """Build a predicate that looks up ``enable_<kind>`` on a live settings object.

    ``provider`` is called on every lookup so toggles take effect immediately.
    Any error it raises propagates to the caller.
    """

    def is_enabled(kind: MinigameKind) -> bool:
        return bool(getattr(provider(), f"enable_{kind.value}"))

    return is_enabled
