"""rumormill public façade: bounded, self-pruning rumor store for turn-based simulations."""

from .admin_log import AdminEvent, AdminEventLog
from .gossip import (
    GossipConfig,
    GossipEngine,
    MaintenanceReport,
    Rumor,
    RumorCategory,
    RumorSpin,
    RumorStatus,
    RumorStore,
)
from .roster import CharacterRoster
from .runtime.rng_service import RNGService

__all__ = [
    "AdminEvent",
    "AdminEventLog",
    "CharacterRoster",
    "GossipConfig",
    "GossipEngine",
    "MaintenanceReport",
    "RNGService",
    "Rumor",
    "RumorCategory",
    "RumorSpin",
    "RumorStatus",
    "RumorStore",
]
