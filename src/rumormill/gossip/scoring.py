from __future__ import annotations

from .rumor import Rumor


def relevance_score(rumor: Rumor, current_turn: int, *, knowers_weight: int = 2) -> int:
    """Higher for widely known, recent rumors; negative for stale, narrow ones."""

    age = int(current_turn) - int(rumor.created_turn)
    return len(rumor.known_by) * knowers_weight - age


def eviction_key(rumor: Rumor, current_turn: int, position: int, *, knowers_weight: int = 2) -> tuple[int, int, int]:
    """Sort key for least-relevant-first: score, then age, then store position."""

    return (
        relevance_score(rumor, current_turn, knowers_weight=knowers_weight),
        int(rumor.created_turn),
        position,
    )


__all__ = ["eviction_key", "relevance_score"]
