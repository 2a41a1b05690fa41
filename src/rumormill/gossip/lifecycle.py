"""Rumor lifecycle sweep.

States move forward only::

    ACTIVE --(>= 75% of important characters know it)--> FADED
    FADED  --(> 50 turns since fading)-----------------> ARCHIVED (deleted)

The sweep visits every rumor once and each transition depends only on the
rumor's own fields, the current turn and the set of important characters
(computed once per pass), so evaluation order does not matter and a second
pass in the same turn is a no-op.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, FrozenSet, List, Optional

from ..admin_log import AdminEventLog
from ..runtime.telemetry import Metrics
from .config import GossipConfig
from .rumor import Rumor, RumorStatus
from .store import RumorStore


@dataclass(slots=True)
class SweepResult:
    turn: int
    faded: List[str] = field(default_factory=list)
    archived: List[Rumor] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.faded or self.archived)


def important_characters(directory: Any) -> FrozenSet[str]:
    if directory is None:
        return frozenset()
    return frozenset(name for name in directory.characters() if directory.is_important(name))


def knowledge_ratio(rumor: Rumor, important: FrozenSet[str]) -> float:
    if not important:
        return 0.0
    knowers = sum(1 for name in rumor.known_by if name in important)
    return knowers / len(important)


@dataclass
class LifecycleSweeper:
    store: RumorStore
    config: GossipConfig
    directory: Any = None
    admin_log: Optional[AdminEventLog] = None
    metrics: Optional[Metrics] = None

    def _transition(self, rumor: Rumor, to_status: RumorStatus, turn: int) -> None:
        from_status = rumor.status
        rumor.status = to_status
        if to_status is RumorStatus.FADED:
            rumor.faded_at_turn = turn
        if self.admin_log is not None:
            self.admin_log.log_rumor_transition(
                tick=turn,
                rumor_id=rumor.id,
                from_status=from_status.value,
                to_status=to_status.value,
            )

    def sweep(self, current_turn: int) -> SweepResult:
        result = SweepResult(turn=current_turn)
        important = important_characters(self.directory)
        threshold = self.config.fade_knowledge_ratio

        for rumor in self.store.all():
            if rumor.status is RumorStatus.ACTIVE:
                if knowledge_ratio(rumor, important) >= threshold:
                    self._transition(rumor, RumorStatus.FADED, current_turn)
                    result.faded.append(rumor.id)
            elif rumor.status is RumorStatus.FADED:
                if rumor.faded_at_turn is None:
                    # Imported without a fade turn: the archive window starts now.
                    rumor.faded_at_turn = current_turn
                elif current_turn - rumor.faded_at_turn > self.config.archive_after_turns:
                    self._transition(rumor, RumorStatus.ARCHIVED, current_turn)

        result.archived = self.store.remove_where(lambda r: r.status is RumorStatus.ARCHIVED)

        if self.metrics is not None:
            self.metrics.inc("gossip.sweeps")
            self.metrics.inc("gossip.faded", len(result.faded))
            self.metrics.inc("gossip.archived", len(result.archived))
        return result


def should_sweep(current_turn: int, rumor_count: int, config: GossipConfig) -> bool:
    """Periodic trigger: every ``sweep_interval_turns`` or when the store is crowded."""

    return current_turn % config.sweep_interval_turns == 0 or rumor_count > config.sweep_count_trigger


__all__ = [
    "LifecycleSweeper",
    "SweepResult",
    "important_characters",
    "knowledge_ratio",
    "should_sweep",
]
