from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class GossipConfig:
    """
    Thresholds and cadences for rumor maintenance.

    Turn counts are simulation turns as reported by the host's turn source.
    Defaults match the long-running social sessions the engine was tuned for
    and can be overridden per session.
    """

    # Absolute maximum number of rumors left in the store after maintenance
    hard_cap: int = 150

    # Periodic sweep cadence, plus the store size that forces an early sweep
    sweep_interval_turns: int = 25
    sweep_count_trigger: int = 100

    # ACTIVE -> FADED once this share of important characters knows the rumor
    fade_knowledge_ratio: float = 0.75

    # FADED -> ARCHIVED once more than this many turns passed since fading
    archive_after_turns: int = 50

    # Chance that one rumor slips out during an unrelated interaction
    auto_propagate_chance: float = 0.2

    # Retelling drift added per successful hop
    distortion_per_hop: float = 0.1

    # Relevance = known_by * knowers_weight - age
    knowers_weight: int = 2

    # Interpretation matrix thresholds on the directory's relation scale
    hostile_relation: float = -20.0
    friendly_relation: float = 20.0

    rng_salt: str = "gossip-v1"
    admin_log_capacity: int = 1_000

    def validate(self) -> None:
        if self.hard_cap < 1:
            raise ValueError(f"hard_cap must be positive, got {self.hard_cap}")
        if self.sweep_interval_turns < 1:
            raise ValueError(f"sweep_interval_turns must be positive, got {self.sweep_interval_turns}")
        if not 0.0 < self.fade_knowledge_ratio <= 1.0:
            raise ValueError(f"fade_knowledge_ratio must be in (0, 1], got {self.fade_knowledge_ratio}")
        if self.archive_after_turns < 0:
            raise ValueError(f"archive_after_turns must be non-negative, got {self.archive_after_turns}")
        if not 0.0 <= self.auto_propagate_chance <= 1.0:
            raise ValueError(f"auto_propagate_chance must be in [0, 1], got {self.auto_propagate_chance}")
        if self.distortion_per_hop < 0.0:
            raise ValueError(f"distortion_per_hop must be non-negative, got {self.distortion_per_hop}")


__all__ = ["GossipConfig"]
