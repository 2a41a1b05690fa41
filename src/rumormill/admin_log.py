"""Admin event log for the gossip subsystem.

A bounded stream of structured records describing what happened to rumors
("created", "spread", "faded", "archived", "evicted", "rejected") so that
debug tooling and tests can reason about a session without poking through
store internals.  The log keeps a fixed number of events; the oldest drop
off first.

The log stays decoupled from any rendering code so that it is usable from
tests and batch simulations alike.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, List, Mapping, MutableMapping, Optional, Sequence, Tuple


@dataclass(slots=True)
class AdminEvent:
    """Structured record for a single admin/debug event."""

    tick: int
    event_type: str
    payload: MutableMapping[str, Any]
    rumor_id: Optional[str] = None
    agent_ids: Tuple[str, ...] = field(default_factory=tuple)
    tags: Tuple[str, ...] = field(default_factory=tuple)

    def summary(self) -> str:
        """Return a compact string summarising the payload."""

        if self.event_type == "RUMOR_SPREAD":
            before = self.payload.get("distortion_before")
            after = self.payload.get("distortion_after")
            if before is not None and after is not None:
                return f"{self.rumor_id} Δ{after - before:0.2f}"
            return str(self.rumor_id)
        if self.event_type == "RUMOR_TRANSITION":
            return f"{self.rumor_id} {self.payload.get('from', '?')}->{self.payload.get('to', '?')}"
        if self.event_type == "RUMOR_EVICTED":
            return f"{self.rumor_id} (score {self.payload.get('score', '?')})"
        if self.event_type == "MAINTENANCE":
            return (
                f"swept={self.payload.get('swept')} faded={self.payload.get('faded', 0)} "
                f"archived={self.payload.get('archived', 0)} evicted={self.payload.get('evicted', 0)}"
            )
        return ", ".join(f"{k}={v}" for k, v in sorted(self.payload.items()))


class AdminEventLog:
    """Fixed-size event history suitable for admin dashboards."""

    def __init__(self, capacity: int = 1_000) -> None:
        self.capacity = max(1, capacity)
        self._events: Deque[AdminEvent] = deque(maxlen=self.capacity)

    # ------------------------------------------------------------------
    # Recording helpers
    # ------------------------------------------------------------------
    def record(
        self,
        *,
        tick: int,
        event_type: str,
        payload: Mapping[str, Any],
        rumor_id: Optional[str] = None,
        agent_ids: Sequence[str] = (),
        tags: Sequence[str] = (),
    ) -> AdminEvent:
        event = AdminEvent(
            tick=tick,
            event_type=event_type,
            payload=dict(payload),
            rumor_id=rumor_id,
            agent_ids=tuple(agent_ids),
            tags=tuple(tags),
        )
        self._events.append(event)
        return event

    def log_rumor_created(
        self,
        *,
        tick: int,
        rumor_id: str,
        category: str,
        spin: str,
        witnesses: Sequence[str],
    ) -> AdminEvent:
        return self.record(
            tick=tick,
            event_type="RUMOR_CREATED",
            payload={"category": category, "spin": spin, "witness_count": len(witnesses)},
            rumor_id=rumor_id,
            agent_ids=witnesses,
            tags=[category],
        )

    def log_rumor_spread(
        self,
        *,
        tick: int,
        speaker_id: str,
        listener_id: str,
        rumor_id: str,
        distortion_before: float,
        distortion_after: float,
        known_by: int,
    ) -> AdminEvent:
        """Record a RUMOR_SPREAD event for one successful hop."""

        payload = {
            "distortion_before": distortion_before,
            "distortion_after": distortion_after,
            "known_by": known_by,
        }
        return self.record(
            tick=tick,
            event_type="RUMOR_SPREAD",
            payload=payload,
            rumor_id=rumor_id,
            agent_ids=[speaker_id, listener_id],
        )

    def log_rumor_transition(self, *, tick: int, rumor_id: str, from_status: str, to_status: str) -> AdminEvent:
        return self.record(
            tick=tick,
            event_type="RUMOR_TRANSITION",
            payload={"from": from_status, "to": to_status},
            rumor_id=rumor_id,
            tags=[to_status],
        )

    def log_rumor_evicted(self, *, tick: int, rumor_id: str, score: int) -> AdminEvent:
        return self.record(
            tick=tick,
            event_type="RUMOR_EVICTED",
            payload={"score": score},
            rumor_id=rumor_id,
            tags=["LRF"],
        )

    def log_rumor_rejected(
        self,
        *,
        tick: int,
        reason: str,
        detail: str,
        rumor_id: Optional[str] = None,
    ) -> AdminEvent:
        """Record an operation that was downgraded to a no-op."""

        return self.record(
            tick=tick,
            event_type="RUMOR_REJECTED",
            payload={"reason": reason, "detail": detail},
            rumor_id=rumor_id,
            tags=[reason],
        )

    def log_maintenance(
        self,
        *,
        tick: int,
        swept: bool,
        faded: int,
        archived: int,
        evicted: int,
        remaining: int,
    ) -> AdminEvent:
        payload = {
            "swept": swept,
            "faded": faded,
            "archived": archived,
            "evicted": evicted,
            "remaining": remaining,
        }
        return self.record(tick=tick, event_type="MAINTENANCE", payload=payload)

    # ------------------------------------------------------------------
    # Introspection helpers
    # ------------------------------------------------------------------
    def __len__(self) -> int:  # pragma: no cover - trivial
        return len(self._events)

    def get_recent(
        self,
        *,
        event_type: Optional[str] = None,
        rumor_id: Optional[str] = None,
        limit: int = 100,
    ) -> List[AdminEvent]:
        """Return the newest events matching the optional filters, oldest first."""

        selected: List[AdminEvent] = []
        for event in reversed(self._events):
            if event_type and event.event_type != event_type:
                continue
            if rumor_id and event.rumor_id != rumor_id:
                continue
            selected.append(event)
            if len(selected) >= limit:
                break
        return list(reversed(selected))


__all__ = ["AdminEvent", "AdminEventLog"]
