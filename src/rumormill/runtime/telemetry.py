from __future__ import annotations

import json
from dataclasses import dataclass, field
from hashlib import sha256
from typing import Any, Mapping


@dataclass(slots=True)
class TopKEntry:
    key: str
    score: float


@dataclass(slots=True)
class TopK:
    """Leaderboard of the ``k`` highest scores; re-adding a key replaces it."""

    k: int = 10
    entries: list[TopKEntry] = field(default_factory=list)

    def add(self, key: str, score: float) -> None:
        self.entries = [entry for entry in self.entries if entry.key != key]
        self.entries.append(TopKEntry(key=key, score=float(score)))
        self.entries.sort(key=lambda e: (-e.score, e.key))
        del self.entries[max(1, int(self.k)):]

    def snapshot(self) -> list[Mapping[str, object]]:
        return [{"key": entry.key, "score": entry.score} for entry in self.entries]


@dataclass(slots=True)
class Metrics:
    """Counters, gauges and top-k boards for one gossip session."""

    counters: dict[str, float] = field(default_factory=dict)
    gauges: dict[str, Any] = field(default_factory=dict)
    topk: dict[str, TopK] = field(default_factory=dict)

    def inc(self, path: str, n: float = 1.0) -> float:
        self.counters[path] = self.counters.get(path, 0.0) + float(n)
        return self.counters[path]

    def get(self, path: str, default: float = 0.0) -> float:
        return self.counters.get(path, default)

    def set_gauge(self, path: str, value: Any) -> Any:
        self.gauges[path] = value
        return value

    def topk_add(self, path: str, key: str, score: float) -> None:
        self.topk.setdefault(path, TopK()).add(key, score)

    def snapshot_signature(self) -> str:
        """sha256 over every counter, gauge and board; equal sessions hash equal."""

        canonical = {
            "counters": dict(sorted(self.counters.items())),
            "gauges": {k: v if isinstance(v, (int, float, str, bool)) or v is None else str(v)
                       for k, v in sorted(self.gauges.items())},
            "topk": {k: bucket.snapshot() for k, bucket in sorted(self.topk.items())},
        }
        payload = json.dumps(canonical, sort_keys=True, separators=(",", ":")).encode("utf-8")
        return sha256(payload).hexdigest()


__all__ = ["Metrics", "TopK", "TopKEntry"]
