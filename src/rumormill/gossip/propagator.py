from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from ..admin_log import AdminEventLog
from ..runtime.telemetry import Metrics
from .config import GossipConfig
from .errors import GossipError, InvalidTransitionError, MalformedRumorError, RumorNotFoundError
from .rumor import Rumor
from .store import RumorStore

AUTO_PROPAGATE_STREAM = "gossip.auto_propagate"


@dataclass
class Propagator:
    """Moves rumor knowledge from one character to another.

    Writes ``known_by`` and ``distortion`` only; status changes belong to the
    lifecycle sweeper.  ``rng`` is any object exposing
    ``chance(stream_key, probability, *, scope)`` (see ``RNGService``).
    """

    store: RumorStore
    config: GossipConfig
    rng: Any
    admin_log: Optional[AdminEventLog] = None
    metrics: Optional[Metrics] = None
    turn_source: Optional[Callable[[], int]] = None

    def _tick(self) -> int:
        return int(self.turn_source()) if self.turn_source is not None else 0

    def _require_active(self, rumor_id: str) -> Rumor:
        rumor = self.store.get(rumor_id)
        if rumor is None:
            raise RumorNotFoundError(f"No rumor {rumor_id!r}")
        if not rumor.is_active:
            raise InvalidTransitionError(f"Rumor {rumor_id!r} is {rumor.status.value} and cannot spread")
        return rumor

    def _reject(self, exc: GossipError, rumor_id: Optional[str]) -> None:
        if self.metrics is not None:
            self.metrics.inc(f"gossip.rejected.{exc.kind}")
        if self.admin_log is not None:
            self.admin_log.log_rumor_rejected(tick=self._tick(), reason=exc.kind, detail=str(exc), rumor_id=rumor_id)

    def spread_rumor(self, rumor_id: str, from_character: str, to_character: str) -> bool:
        """Tell ``to_character`` the rumor; False when nothing changed."""

        try:
            if not to_character:
                raise MalformedRumorError("Listener id must be a non-empty string")
            rumor = self._require_active(rumor_id)
        except GossipError as exc:
            self._reject(exc, rumor_id)
            return False

        if rumor.knows(to_character):
            return False

        before = rumor.distortion
        rumor.known_by.append(to_character)
        rumor.distortion = before + self.config.distortion_per_hop

        if self.metrics is not None:
            self.metrics.inc("gossip.spread")
            self.metrics.topk_add("gossip.most_known", rumor.id, len(rumor.known_by))
        if self.admin_log is not None:
            self.admin_log.log_rumor_spread(
                tick=self._tick(),
                speaker_id=from_character,
                listener_id=to_character,
                rumor_id=rumor.id,
                distortion_before=before,
                distortion_after=rumor.distortion,
                known_by=len(rumor.known_by),
            )
        return True

    def auto_propagate(self, from_character: str, to_character: str) -> List[str]:
        """Incidental gossip during an unrelated interaction.

        Every ACTIVE rumor the speaker knows gets one independent roll.
        Returns the ids that reached the listener.
        """

        if not from_character or not to_character or from_character == to_character:
            return []
        spread: List[str] = []
        for rumor in self.store.all():
            if not rumor.is_active or not rumor.knows(from_character) or rumor.knows(to_character):
                continue
            scope = {"rumor": rumor.id, "from": from_character, "to": to_character}
            if not self.rng.chance(AUTO_PROPAGATE_STREAM, self.config.auto_propagate_chance, scope=scope):
                continue
            if self.spread_rumor(rumor.id, from_character, to_character):
                spread.append(rumor.id)
        return spread


__all__ = ["AUTO_PROPAGATE_STREAM", "Propagator"]
