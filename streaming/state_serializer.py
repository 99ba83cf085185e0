"""Scene serialization utilities."""

from __future__ import annotations

import dataclasses
import enum
import json
import math
from typing import Any, Iterable


MAX_FRAME_BYTES = 10 * 1024 * 1024


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        # Field by field so pixel arrays are not deep-copied by ``asdict``.
        return {field.name: _to_jsonable(getattr(value, field.name)) for field in dataclasses.fields(value)}
    if hasattr(value, "tolist"):
        return value.tolist()
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {str(k): _to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(v) for v in value]
    return value


def serialize_state(scene: Any) -> bytes:
    """Serialize a scene into deterministic JSON bytes.

    Non-finite floats (a ray that hit nothing) are written as ``null``.
    """
    payload = _to_jsonable(scene)
    data = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
    if len(data) > MAX_FRAME_BYTES:
        raise ValueError(
            f"Serialized frame exceeds max size ({len(data)} bytes > {MAX_FRAME_BYTES})."
        )
    return data


def serialize_frames(scenes: Iterable[Any]) -> bytes:
    """Serialize scenes as newline-delimited JSON, one frame per line."""
    return b"".join(serialize_state(scene) + b"\n" for scene in scenes)
