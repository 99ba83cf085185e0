"""Host-agnostic input events forwarded to the active minigame.

Host key codes and mouse buttons are translated into these identifiers by the
embedding UI before they reach the dispatcher.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Union


class Control(str, enum.Enum):
    """Normalized discrete controls."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    STRAFE_LEFT = "strafe_left"
    STRAFE_RIGHT = "strafe_right"
    ROTATE_CCW = "rotate_ccw"
    PRIMARY = "primary"
    ZOOM_IN = "zoom_in"
    ZOOM_OUT = "zoom_out"
    RESET = "reset"


@dataclass(frozen=True)
class KeyEvent:
    """Press or release of one normalized control."""

    control: Control
    pressed: bool = True


@dataclass(frozen=True)
class PointerDrag:
    """Pointer drag expressed as fractions of the viewport size."""

    dx: float
    dy: float


@dataclass(frozen=True)
class PointerScroll:
    """Wheel scroll at a cursor position normalized to [0, 1] on each axis."""

    nx: float
    ny: float
    amount: float


InputEvent = Union[KeyEvent, PointerDrag, PointerScroll]
