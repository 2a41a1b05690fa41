"""Seedable random source for gossip rolls.

Every draw is derived from ``(salt, seed, stream key, scope, draw index)``
through sha256, so a roll for one rumor does not depend on how many rolls
other rumors consumed before it.  Two services built with the same seed
produce the same rolls for the same call sequence per stream.
"""

from __future__ import annotations

import json
import random
from dataclasses import dataclass, field
from hashlib import sha256
from typing import Dict, Mapping


def _to_jsonable(value: object) -> object:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(item) for item in value]
    if isinstance(value, Mapping):
        return {str(k): _to_jsonable(v) for k, v in value.items()}
    raise TypeError(f"Unsupported scope value type: {type(value)!r}")


def _canonical_scope(scope: Mapping[str, object] | None) -> str:
    if not scope:
        return "{}"
    return json.dumps(_to_jsonable(scope), sort_keys=True, separators=(",", ":"))


@dataclass
class RNGService:
    seed: int
    salt: str = "rng-v1"
    counters: Dict[str, int] = field(default_factory=dict)

    def _stream_id(self, stream_key: str, scope_json: str) -> str:
        digest = sha256(f"{self.salt}|{self.seed}|{stream_key}|{scope_json}".encode()).hexdigest()
        return digest[:16]

    def _derive_random(self, stream_key: str, scope: Mapping[str, object] | None) -> random.Random:
        scope_json = _canonical_scope(scope)
        stream_id = self._stream_id(stream_key, scope_json)
        draw_index = self.counters.get(stream_id, 0)
        self.counters[stream_id] = draw_index + 1
        blob = f"{self.salt}|{self.seed}|{stream_key}|{scope_json}|{draw_index}"
        derived = int.from_bytes(sha256(blob.encode()).digest()[:8], "big", signed=False)
        return random.Random(derived)

    def stream(self, stream_key: str, *, scope: Mapping[str, object] | None = None) -> random.Random:
        return self._derive_random(stream_key, scope)

    def rand(self, stream_key: str, *, scope: Mapping[str, object] | None = None) -> float:
        return self._derive_random(stream_key, scope).random()

    def chance(self, stream_key: str, probability: float, *, scope: Mapping[str, object] | None = None) -> bool:
        """Roll once and report whether the draw fell under ``probability``."""

        if probability <= 0.0:
            return False
        if probability >= 1.0:
            return True
        return self.rand(stream_key, scope=scope) < probability

    def signature(self) -> str:
        payload = json.dumps(sorted(self.counters.items()), separators=(",", ":"))
        return sha256(payload.encode()).hexdigest()[:16]


__all__ = ["RNGService"]
