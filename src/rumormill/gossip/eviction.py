from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from ..admin_log import AdminEventLog
from ..runtime.telemetry import Metrics
from .config import GossipConfig
from .rumor import Rumor
from .scoring import eviction_key, relevance_score
from .store import RumorStore


@dataclass
class LRFEvictor:
    """Least-relevant-first safety valve keeping the store under the hard cap.

    Evicted rumors are deleted outright; they never pass through FADED.
    """

    store: RumorStore
    config: GossipConfig
    admin_log: Optional[AdminEventLog] = None
    metrics: Optional[Metrics] = None

    def _least_relevant(self, current_turn: int) -> Rumor:
        weight = self.config.knowers_weight
        ranked = enumerate(self.store.all())
        _, victim = min(ranked, key=lambda item: eviction_key(item[1], current_turn, item[0], knowers_weight=weight))
        return victim

    def evict(self, current_turn: int) -> List[Rumor]:
        evicted: List[Rumor] = []
        while self.store.count() > self.config.hard_cap:
            victim = self._least_relevant(current_turn)
            self.store.remove_where(lambda r: r is victim)
            evicted.append(victim)
            if self.admin_log is not None:
                self.admin_log.log_rumor_evicted(
                    tick=current_turn,
                    rumor_id=victim.id,
                    score=relevance_score(victim, current_turn, knowers_weight=self.config.knowers_weight),
                )
        if evicted and self.metrics is not None:
            self.metrics.inc("gossip.evicted", len(evicted))
        return evicted


def should_evict(rumor_count: int, config: GossipConfig) -> bool:
    return rumor_count > config.hard_cap


__all__ = ["LRFEvictor", "should_evict"]
