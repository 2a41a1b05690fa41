"""Runtime helpers shared by the gossip subsystem (randomness, telemetry)."""

from .rng_service import RNGService
from .telemetry import Metrics, TopK, TopKEntry

__all__ = ["Metrics", "RNGService", "TopK", "TopKEntry"]
