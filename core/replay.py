"""Deterministic replay of timestamped input traces through the dispatcher."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Sequence

import yaml

from core.dispatcher import MinigameDispatcher
from core.input import Control, InputEvent, KeyEvent, PointerDrag, PointerScroll
from core.scene import PanelScene
from minigames.base_engine import MinigameKind


class ReplayTraceError(ValueError):
    """Raised when a trace file cannot be turned into frames."""


@dataclass(frozen=True)
class TraceFrame:
    """One frame of a recorded session."""

    at: int
    select: MinigameKind | None = None
    inputs: tuple[InputEvent, ...] = field(default_factory=tuple)


def _pair(value: Any, name: str) -> tuple[float, float]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ReplayTraceError(f"'{name}' must be a two-element list.")
    try:
        return float(value[0]), float(value[1])
    except (TypeError, ValueError) as exc:
        raise ReplayTraceError(f"'{name}' must hold two numbers, got {value!r}.") from exc


def parse_input(raw: Mapping[str, Any]) -> InputEvent:
    """Build an input event from its trace mapping form."""
    if "key" in raw:
        try:
            control = Control(str(raw["key"]))
        except ValueError as exc:
            raise ReplayTraceError(f"Unknown control '{raw['key']}'.") from exc
        return KeyEvent(control=control, pressed=bool(raw.get("pressed", True)))
    if "drag" in raw:
        dx, dy = _pair(raw["drag"], "drag")
        return PointerDrag(dx=dx, dy=dy)
    if "scroll" in raw:
        nx, ny = _pair(raw.get("cursor", [0.5, 0.5]), "cursor")
        try:
            amount = float(raw["scroll"])
        except (TypeError, ValueError) as exc:
            raise ReplayTraceError(f"'scroll' must be a number, got {raw['scroll']!r}.") from exc
        return PointerScroll(nx=nx, ny=ny, amount=amount)
    raise ReplayTraceError(f"Input entry needs one of 'key', 'drag' or 'scroll': {dict(raw)}")


def parse_frames(payload: Any) -> list[TraceFrame]:
    """Validate a raw trace payload (list of frames or ``{"frames": [...]}``)."""
    if isinstance(payload, Mapping):
        payload = payload.get("frames")
    if not isinstance(payload, list):
        raise ReplayTraceError("Trace must be a list of frames.")

    frames: list[TraceFrame] = []
    previous_at: int | None = None
    for index, raw in enumerate(payload):
        if not isinstance(raw, Mapping) or "at" not in raw:
            raise ReplayTraceError(f"Frame {index} must be a mapping with an 'at' timestamp.")
        try:
            at = int(raw["at"])
        except (TypeError, ValueError) as exc:
            raise ReplayTraceError(f"Frame {index} has a non-integer 'at' timestamp: {raw['at']!r}.") from exc
        if previous_at is not None and at < previous_at:
            raise ReplayTraceError(f"Frame {index} goes back in time ({at} < {previous_at}).")
        previous_at = at

        select = None
        if raw.get("select") is not None:
            try:
                select = MinigameKind(str(raw["select"]))
            except ValueError as exc:
                raise ReplayTraceError(f"Frame {index} selects unknown minigame '{raw['select']}'.") from exc

        raw_inputs = raw.get("inputs") or []
        if not isinstance(raw_inputs, list) or not all(isinstance(item, Mapping) for item in raw_inputs):
            raise ReplayTraceError(f"Frame {index} 'inputs' must be a list of mappings.")
        inputs = tuple(parse_input(item) for item in raw_inputs)
        frames.append(TraceFrame(at=at, select=select, inputs=inputs))
    return frames


def load_trace(path: str | Path) -> list[TraceFrame]:
    """Read frames from a YAML or JSON trace file."""
    trace_path = Path(path)
    if not trace_path.exists():
        raise ReplayTraceError(f"Trace file not found: {trace_path}")
    text = trace_path.read_text(encoding="utf-8")
    try:
        if trace_path.suffix.lower() == ".json":
            payload = json.loads(text)
        else:
            payload = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ReplayTraceError(f"Failed to parse trace '{trace_path}': {exc}") from exc
    return parse_frames(payload)


class ReplayRunner:
    """Drives a dispatcher frame by frame from a recorded trace.

    Inputs of a frame are queued and delivered after that frame's scene, so
    they show up in the following frame exactly as in the live panel.
    """

    def __init__(self, dispatcher: MinigameDispatcher) -> None:
        self.dispatcher = dispatcher

    def run(self, frames: Sequence[TraceFrame]) -> list[PanelScene]:
        if not frames:
            return []
        self.dispatcher.enter(frames[0].at)

        scenes: list[PanelScene] = []
        for frame in frames:
            if frame.select is not None:
                self.dispatcher.select(frame.select, frame.at)
            for event in frame.inputs:
                self.dispatcher.post_input(event)
            scenes.append(self.dispatcher.render(frame.at))
        return scenes
