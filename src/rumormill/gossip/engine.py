"""Gossip engine: rumor creation, propagation and maintenance.

One engine is built per simulation session and handed to every call site;
it owns the rumor store and wires the propagator, the lifecycle sweeper and
the least-relevant-first evictor around it.  Per turn the host is expected
to call, in order:

1. :meth:`GossipEngine.observe` for narrative text (may create rumors),
2. :meth:`GossipEngine.spread_rumor` / :meth:`GossipEngine.auto_propagate`
   any number of times,
3. :meth:`GossipEngine.maybe_run_maintenance` exactly once.

Propagation therefore always lands before maintenance, so a rumor that
crosses the fade threshold fades in the same turn.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from statistics import mean
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from ..admin_log import AdminEventLog
from ..runtime.rng_service import RNGService
from ..runtime.telemetry import Metrics
from .config import GossipConfig
from .errors import GossipError, RumorNotFoundError
from .eviction import LRFEvictor, should_evict
from .lifecycle import LifecycleSweeper, should_sweep
from .observer import Observer, RumorSeed
from .propagator import Propagator
from .rumor import Rumor, RumorCategory, RumorSpin, RumorStatus
from .store import RumorStore

TurnSource = Callable[[], int]
Detector = Callable[[str], Optional[RumorSeed]]

REPUTATION_DELTAS: Mapping[RumorCategory, float] = {
    RumorCategory.BETRAYAL: -10.0,
    RumorCategory.CONFLICT: -5.0,
    RumorCategory.ROMANCE: 2.0,
    RumorCategory.ACHIEVEMENT: 5.0,
    RumorCategory.CUSTOM: 0.0,
}

SPIN_DELTAS: Mapping[RumorSpin, float] = {
    RumorSpin.NEGATIVE: -3.0,
    RumorSpin.NEUTRAL: 0.0,
    RumorSpin.POSITIVE: 3.0,
}


@dataclass(slots=True)
class MaintenanceReport:
    turn: int
    swept: bool = False
    faded: List[str] = field(default_factory=list)
    archived: List[str] = field(default_factory=list)
    evicted: List[str] = field(default_factory=list)
    remaining: int = 0


class GossipEngine:
    def __init__(
        self,
        directory: Any,
        *,
        config: Optional[GossipConfig] = None,
        turn_source: Optional[TurnSource] = None,
        detector: Optional[Detector] = None,
        rng: Any = None,
        seed: int = 0,
        store: Optional[RumorStore] = None,
    ) -> None:
        self.config = config or GossipConfig()
        self.config.validate()
        self.directory = directory
        self.turn_source = turn_source
        self.detector: Detector = detector or Observer(directory)
        self.rng = rng if rng is not None else RNGService(seed=seed, salt=self.config.rng_salt)
        self.store = store if store is not None else RumorStore()
        self.admin_log = AdminEventLog(capacity=self.config.admin_log_capacity)
        self.metrics = Metrics()
        self._id_seq = itertools.count(1)

        self.propagator = Propagator(
            store=self.store,
            config=self.config,
            rng=self.rng,
            admin_log=self.admin_log,
            metrics=self.metrics,
            turn_source=self.current_turn,
        )
        self.sweeper = LifecycleSweeper(
            store=self.store,
            config=self.config,
            directory=directory,
            admin_log=self.admin_log,
            metrics=self.metrics,
        )
        self.evictor = LRFEvictor(
            store=self.store,
            config=self.config,
            admin_log=self.admin_log,
            metrics=self.metrics,
        )

    # ------------------------------------------------------------------
    # Turn and id helpers
    # ------------------------------------------------------------------
    def current_turn(self) -> int:
        if self.turn_source is None:
            return 0
        return int(self.turn_source())

    def generate_rumor_id(self) -> str:
        turn = self.current_turn()
        while True:
            candidate = f"rumor_{turn}_{next(self._id_seq)}"
            if candidate not in self.store:
                return candidate

    def _reject(self, exc: GossipError, rumor_id: Optional[str] = None) -> None:
        self.metrics.inc(f"gossip.rejected.{exc.kind}")
        self.admin_log.log_rumor_rejected(
            tick=self.current_turn(),
            reason=exc.kind,
            detail=str(exc),
            rumor_id=rumor_id,
        )

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------
    def _witnesses(self, seed: RumorSeed) -> List[str]:
        witnesses = [seed.subject]
        if seed.target:
            witnesses.append(seed.target)
        is_in_focus = getattr(self.directory, "is_in_focus", None)
        if is_in_focus is not None:
            witnesses.extend(name for name in self.directory.characters() if is_in_focus(name))
        return list(dict.fromkeys(witnesses))

    def interpret_spin(self, seed: RumorSeed, witnesses: Sequence[str]) -> RumorSpin:
        """Interpretation matrix: witnesses' feelings about the subject colour the spin."""

        relation = getattr(self.directory, "relation", None)
        observers = [name for name in witnesses if name not in (seed.subject, seed.target)]
        if relation is None or not observers:
            return seed.spin
        feelings = [float(relation(name, seed.subject)) for name in observers]
        if min(feelings) <= self.config.hostile_relation:
            return RumorSpin.NEGATIVE
        if seed.spin is RumorSpin.NEUTRAL and mean(feelings) >= self.config.friendly_relation:
            return RumorSpin.POSITIVE
        return seed.spin

    def observe(self, text: str) -> Optional[Rumor]:
        """Run the detector over narrative text and store a rumor on a match."""

        seed = self.detector(text)
        if seed is None:
            return None
        witnesses = self._witnesses(seed)
        rumor = Rumor(
            id=self.generate_rumor_id(),
            text=seed.text,
            subject=seed.subject,
            target=seed.target,
            category=seed.category,
            spin=self.interpret_spin(seed, witnesses),
            created_turn=self.current_turn(),
            known_by=witnesses,
        )
        self.store.insert(rumor)
        self.metrics.inc("gossip.created")
        self.admin_log.log_rumor_created(
            tick=rumor.created_turn,
            rumor_id=rumor.id,
            category=rumor.category.value,
            spin=rumor.spin.value,
            witnesses=rumor.known_by,
        )
        return rumor

    def insert(self, rumor: Union[Rumor, Mapping[str, Any]]) -> Optional[Rumor]:
        """Store a prepared rumor (or a persisted record); None when rejected."""

        try:
            record = rumor if isinstance(rumor, Rumor) else Rumor.from_dict(rumor)
            self.store.insert(record)
        except GossipError as exc:
            rumor_id = rumor.id if isinstance(rumor, Rumor) else None
            if rumor_id is None and isinstance(rumor, Mapping):
                rumor_id = rumor.get("id") if isinstance(rumor.get("id"), str) else None
            self._reject(exc, rumor_id)
            return None
        self.metrics.inc("gossip.inserted")
        return record

    def restore(self, records: Iterable[Mapping[str, Any]]) -> int:
        """Ingest persisted records, skipping malformed ones; returns how many were stored."""

        return sum(1 for record in records if self.insert(record) is not None)

    def export(self) -> List[Dict[str, Any]]:
        return [rumor.to_dict() for rumor in self.store.all()]

    # ------------------------------------------------------------------
    # Propagation
    # ------------------------------------------------------------------
    def spread_rumor(self, rumor_id: str, from_character: str, to_character: str) -> bool:
        return self.propagator.spread_rumor(rumor_id, from_character, to_character)

    def auto_propagate(self, from_character: str, to_character: str) -> List[str]:
        return self.propagator.auto_propagate(from_character, to_character)

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------
    def maybe_run_maintenance(self, current_turn: int, rumor_count: Optional[int] = None) -> MaintenanceReport:
        """Periodic sweep when due, then the capacity check unconditionally."""

        count = self.store.count() if rumor_count is None else int(rumor_count)
        report = MaintenanceReport(turn=current_turn)
        if should_sweep(current_turn, count, self.config):
            self._apply_sweep(report, current_turn)
        self._apply_eviction(report, current_turn)
        return self._finish(report)

    def run_garbage_collection(self, current_turn: Optional[int] = None) -> MaintenanceReport:
        """Unconditional sweep plus capacity enforcement."""

        turn = self.current_turn() if current_turn is None else int(current_turn)
        report = MaintenanceReport(turn=turn)
        self._apply_sweep(report, turn)
        self._apply_eviction(report, turn)
        return self._finish(report)

    def _apply_sweep(self, report: MaintenanceReport, turn: int) -> None:
        result = self.sweeper.sweep(turn)
        report.swept = True
        report.faded.extend(result.faded)
        report.archived.extend(rumor.id for rumor in result.archived)

    def _apply_eviction(self, report: MaintenanceReport, turn: int) -> None:
        if not should_evict(self.store.count(), self.config):
            return
        report.evicted.extend(rumor.id for rumor in self.evictor.evict(turn))

    def _finish(self, report: MaintenanceReport) -> MaintenanceReport:
        report.remaining = self.store.count()
        counts = self.stats()
        self.metrics.set_gauge("gossip.rumors", report.remaining)
        self.metrics.set_gauge("gossip.active", counts[RumorStatus.ACTIVE.value])
        self.metrics.set_gauge("gossip.faded", counts[RumorStatus.FADED.value])
        self.admin_log.log_maintenance(
            tick=report.turn,
            swept=report.swept,
            faded=len(report.faded),
            archived=len(report.archived),
            evicted=len(report.evicted),
            remaining=report.remaining,
        )
        return report

    # ------------------------------------------------------------------
    # Queries and host hooks
    # ------------------------------------------------------------------
    def all(self) -> tuple[Rumor, ...]:
        return self.store.all()

    def get(self, rumor_id: str) -> Optional[Rumor]:
        return self.store.get(rumor_id)

    def rumors_known_by(self, character_ids: Iterable[str], *, active_only: bool = True) -> List[Rumor]:
        wanted = set(character_ids)
        return [
            rumor
            for rumor in self.store.all()
            if (rumor.is_active or not active_only) and wanted.intersection(rumor.known_by)
        ]

    def stats(self) -> Dict[str, int]:
        counts = {status.value: 0 for status in RumorStatus}
        for rumor in self.store.all():
            counts[rumor.status.value] += 1
        return counts

    def mark_verified(self, rumor_id: str, verified: bool = True) -> bool:
        rumor = self.store.get(rumor_id)
        if rumor is None:
            self._reject(RumorNotFoundError(f"No rumor {rumor_id!r}"), rumor_id)
            return False
        rumor.verified = verified
        return True

    def update_reputation(self, rumor_id: str) -> Optional[float]:
        """Shift the subject's reputation by the rumor's category and spin."""

        rumor = self.store.get(rumor_id)
        if rumor is None:
            self._reject(RumorNotFoundError(f"No rumor {rumor_id!r}"), rumor_id)
            return None
        adjust = getattr(self.directory, "adjust_reputation", None)
        if adjust is None:
            return None
        delta = REPUTATION_DELTAS.get(rumor.category, 0.0) + SPIN_DELTAS.get(rumor.spin, 0.0)
        if delta == 0.0:
            return None
        return adjust(rumor.subject, delta)


__all__ = ["GossipEngine", "MaintenanceReport", "REPUTATION_DELTAS", "SPIN_DELTAS"]
