"""Exception taxonomy for the gossip subsystem.

The store and the record schema raise these; the engine and the propagator
catch them and downgrade to no-ops so that one bad rumor never aborts a turn.
"""

from __future__ import annotations


class GossipError(RuntimeError):
    """Base class for rumor bookkeeping failures."""

    kind = "gossip"


class RumorNotFoundError(GossipError, KeyError):
    """Raised when an operation names a rumor id absent from the store."""

    kind = "not_found"


class InvalidTransitionError(GossipError):
    """Raised when a rumor is asked to do something its status forbids."""

    kind = "invalid_transition"


class MalformedRumorError(GossipError, ValueError):
    """Raised when an ingested record misses required fields or has bad types."""

    kind = "malformed"


class DuplicateRumorError(GossipError, KeyError):
    """Raised when inserting a rumor whose id is already stored."""

    kind = "duplicate"


__all__ = [
    "DuplicateRumorError",
    "GossipError",
    "InvalidTransitionError",
    "MalformedRumorError",
    "RumorNotFoundError",
]
