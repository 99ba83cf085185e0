"""Pan/zoom viewport over the Mandelbrot set with a memoized pixel cache."""

from __future__ import annotations

import logging
import random
from typing import Any, Mapping

import numpy as np

from core.input import Control, InputEvent, KeyEvent, PointerDrag, PointerScroll
from core.scene import FractalScene
from minigames.base_engine import MinigameEngine, MinigameKind
from minigames.fractal.palette import colorize, escape_counts

LOGGER = logging.getLogger(__name__)

DEFAULT_CENTER = (-0.5, 0.0)
# Span of the default view; zoom level and iteration scaling are relative to it.
REFERENCE_SPAN = 3.5

KEY_ZOOM_IN = 0.7
KEY_ZOOM_OUT = 1.3
SCROLL_ZOOM_IN = 0.8
SCROLL_ZOOM_OUT = 1.25


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class FractalViewportEngine(MinigameEngine):
    """Camera state plus an escape-time color cache.

    The cache is recomputed in full, once, after any camera change and is a
    pure function of the camera and iteration budget.
    """

    kind = MinigameKind.FRACTAL

    def __init__(self, params: Mapping[str, Any] | None = None, rng: random.Random | None = None) -> None:
        super().__init__(params=params, rng=rng)
        self.grid_width = int(self.params.get("grid_width", 128))
        self.grid_height = int(self.params.get("grid_height", 96))
        self.base_iterations = int(self.params.get("base_iterations", 80))
        self.pan_scale = float(self.params.get("pan_scale", 0.15))
        self.min_span = float(self.params.get("min_span", 1e-15))
        self.max_span = float(self.params.get("max_span", 4.0))

        self.center_x, self.center_y = DEFAULT_CENTER
        self.span_x = REFERENCE_SPAN
        self.max_iterations = self.base_iterations
        self.pixels = np.zeros((self.grid_height, self.grid_width), dtype=np.uint32)
        self.dirty = True
        self.recompute_count = 0

    @property
    def span_y(self) -> float:
        """Vertical span derived from the cache aspect ratio."""
        return self.span_x * self.grid_height / self.grid_width

    @property
    def zoom_level(self) -> float:
        return REFERENCE_SPAN / self.span_x

    def reset(self, now: int | None = None) -> None:
        self.center_x, self.center_y = DEFAULT_CENTER
        self.span_x = REFERENCE_SPAN
        self.max_iterations = self.base_iterations
        self.last_update = now
        self.dirty = True

    def pan(self, dx: float, dy: float) -> None:
        """Shift the center by normalized screen-direction signals."""
        self.center_x += dx * self.span_x * self.pan_scale
        self.center_y += dy * self.span_y * self.pan_scale
        self.dirty = True

    def zoom(self, factor: float) -> None:
        """Resize the view around its current center."""
        self._apply_span(self.span_x * factor)

    def zoom_around_cursor(self, nx: float, ny: float, factor: float) -> None:
        """Zoom while keeping the complex point under the cursor fixed."""
        nx = _clamp(nx, 0.0, 1.0)
        ny = _clamp(ny, 0.0, 1.0)
        focus_x, focus_y = self.point_at(nx, ny)
        self._apply_span(self.span_x * factor)
        self.center_x = focus_x - (nx - 0.5) * self.span_x
        self.center_y = focus_y - (ny - 0.5) * self.span_y

    def point_at(self, nx: float, ny: float) -> tuple[float, float]:
        """Complex-plane point at normalized viewport coordinates."""
        return (
            self.center_x + (nx - 0.5) * self.span_x,
            self.center_y + (ny - 0.5) * self.span_y,
        )

    def recompute_if_needed(self) -> bool:
        """Rebuild the pixel cache when the camera changed; returns True if it did."""
        if not self.dirty:
            return False
        counts = escape_counts(
            center=(self.center_x, self.center_y),
            span=(self.span_x, self.span_y),
            width=self.grid_width,
            height=self.grid_height,
            max_iterations=self.max_iterations,
        )
        self.pixels = colorize(counts, self.max_iterations)
        self.recompute_count += 1
        self.dirty = False
        return True

    def update(self, now: int) -> None:
        self.last_update = now
        self.recompute_if_needed()

    def handle_input(self, event: InputEvent, now: int) -> bool:
        if isinstance(event, PointerDrag):
            # Inverted so dragging right moves the view right.
            norm_dx = _clamp(-event.dx, -1.0, 1.0)
            norm_dy = _clamp(-event.dy, -1.0, 1.0)
            if norm_dx == 0.0 and norm_dy == 0.0:
                return False
            self.pan(norm_dx, norm_dy)
            return True

        if isinstance(event, PointerScroll):
            if event.amount == 0.0:
                return False
            factor = SCROLL_ZOOM_IN if event.amount > 0.0 else SCROLL_ZOOM_OUT
            self.zoom_around_cursor(event.nx, event.ny, factor)
            return True

        if not isinstance(event, KeyEvent) or not event.pressed:
            return False
        control = event.control
        if control == Control.LEFT:
            self.pan(-1.0, 0.0)
        elif control == Control.RIGHT:
            self.pan(1.0, 0.0)
        elif control == Control.UP:
            self.pan(0.0, -1.0)
        elif control == Control.DOWN:
            self.pan(0.0, 1.0)
        elif control == Control.ZOOM_IN:
            self.zoom(KEY_ZOOM_IN)
        elif control == Control.ZOOM_OUT:
            self.zoom(KEY_ZOOM_OUT)
        elif control == Control.RESET:
            self.reset(now)
        else:
            return False
        return True

    def describe_scene(self, now: int) -> FractalScene:
        self.recompute_if_needed()
        pixels = self.pixels.copy()
        pixels.setflags(write=False)
        return FractalScene(
            width=self.grid_width,
            height=self.grid_height,
            pixels=pixels,
            center=(self.center_x, self.center_y),
            span=(self.span_x, self.span_y),
            max_iterations=self.max_iterations,
            zoom_level=self.zoom_level,
        )

    def _apply_span(self, span: float) -> None:
        self.span_x = _clamp(span, self.min_span, self.max_span)
        target = int(self.base_iterations * (REFERENCE_SPAN / self.span_x))
        self.max_iterations = int(_clamp(target, self.base_iterations, self.base_iterations * 4))
        self.dirty = True
        LOGGER.debug("Fractal span %.3g, %d iterations", self.span_x, self.max_iterations)
