"""Deterministic RNG container with serializable state snapshots."""

from __future__ import annotations

import base64
import hashlib
import pickle
import random
from dataclasses import dataclass
from typing import Any


@dataclass
class DeterministicRNG:
    """Owns deterministic RNG streams without touching global random state.

    Each engine draws from its own named stream so that food placement and
    piece rolls stay reproducible no matter which engine is active.
    """

    seed: int

    def __post_init__(self) -> None:
        self._streams: dict[str, random.Random] = {}

    def stream(self, name: str) -> random.Random:
        """Return independent deterministic stream by name."""
        if name not in self._streams:
            # Use stable cross-process seed derivation instead of built-in hash().
            digest = hashlib.sha256(f"{self.seed}:{name}".encode("utf-8")).digest()
            derived_seed = int.from_bytes(digest[:8], byteorder="big", signed=False) & 0xFFFFFFFF
            self._streams[name] = random.Random(derived_seed)
        return self._streams[name]

    def snapshot(self) -> dict[str, Any]:
        """Export RNG state to JSON-compatible dictionary."""
        return {
            "seed": self.seed,
            "streams": {
                name: base64.b64encode(pickle.dumps(rng.getstate())).decode("ascii")
                for name, rng in self._streams.items()
            },
        }

    def restore(self, state: dict[str, Any]) -> None:
        """Restore RNG state exported by ``snapshot``.

        Existing stream objects are rewound in place so engines holding a
        reference keep drawing from the restored sequence.
        """
        self.seed = int(state["seed"])
        for name, encoded in dict(state.get("streams", {})).items():
            stream_rng = self.stream(name)
            stream_rng.setstate(pickle.loads(base64.b64decode(encoded.encode("ascii"))))
