"""Rumor lifecycle and garbage collection."""

from .config import GossipConfig
from .engine import GossipEngine, MaintenanceReport
from .errors import (
    DuplicateRumorError,
    GossipError,
    InvalidTransitionError,
    MalformedRumorError,
    RumorNotFoundError,
)
from .eviction import LRFEvictor, should_evict
from .lifecycle import LifecycleSweeper, SweepResult, should_sweep
from .observer import Observer, RumorSeed
from .propagator import Propagator
from .rumor import Rumor, RumorCategory, RumorSpin, RumorStatus
from .scoring import relevance_score
from .store import RumorStore

__all__ = [
    "DuplicateRumorError",
    "GossipConfig",
    "GossipEngine",
    "GossipError",
    "InvalidTransitionError",
    "LRFEvictor",
    "LifecycleSweeper",
    "MaintenanceReport",
    "MalformedRumorError",
    "Observer",
    "Propagator",
    "Rumor",
    "RumorCategory",
    "RumorNotFoundError",
    "RumorSeed",
    "RumorSpin",
    "RumorStatus",
    "RumorStore",
    "SweepResult",
    "relevance_score",
    "should_evict",
    "should_sweep",
]
