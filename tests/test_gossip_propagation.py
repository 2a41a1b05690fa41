import pytest

from rumormill.gossip import GossipConfig, GossipEngine, Rumor, RumorStatus
from rumormill.gossip.propagator import AUTO_PROPAGATE_STREAM
from rumormill.roster import CharacterRoster


class FixedRoll:
    """Random source stub: every roll returns ``value``."""

    def __init__(self, value: float) -> None:
        self.value = value
        self.calls = []

    def chance(self, stream_key, probability, *, scope=None):
        self.calls.append((stream_key, dict(scope or {})))
        return self.value < probability


def _roster() -> CharacterRoster:
    roster = CharacterRoster()
    for name in ("Alice", "Bob", "Charlie", "Diana"):
        roster.add(name)
    return roster


def _engine(**kwargs) -> GossipEngine:
    return GossipEngine(_roster(), turn_source=lambda: 20, **kwargs)


def _rumor(rumor_id: str, known_by, status=RumorStatus.ACTIVE, **kwargs) -> Rumor:
    return Rumor(
        id=rumor_id,
        text=f"rumor {rumor_id}",
        subject="Alice",
        created_turn=10,
        known_by=list(known_by),
        status=status,
        **kwargs,
    )


def test_spread_adds_listener_once_and_grows_distortion():
    engine = _engine()
    engine.insert(_rumor("r1", ["Charlie"]))

    assert engine.spread_rumor("r1", "Charlie", "Diana") is True
    rumor = engine.get("r1")
    assert rumor.known_by == ["Charlie", "Diana"]
    assert rumor.distortion == pytest.approx(0.1)

    assert engine.spread_rumor("r1", "Charlie", "Diana") is False
    assert rumor.known_by == ["Charlie", "Diana"]
    assert rumor.distortion == pytest.approx(0.1)


def test_distortion_accumulates_per_hop():
    engine = _engine(config=GossipConfig(distortion_per_hop=0.25))
    engine.insert(_rumor("r1", ["Alice"]))

    engine.spread_rumor("r1", "Alice", "Bob")
    engine.spread_rumor("r1", "Bob", "Charlie")

    assert engine.get("r1").distortion == pytest.approx(0.5)


def test_spread_never_changes_status():
    engine = _engine()
    engine.insert(_rumor("r1", ["Alice", "Bob"]))

    engine.spread_rumor("r1", "Alice", "Charlie")
    engine.spread_rumor("r1", "Alice", "Diana")

    assert engine.get("r1").status is RumorStatus.ACTIVE


def test_faded_rumor_does_not_spread():
    engine = _engine()
    engine.insert(_rumor("faded", ["Diana"], status=RumorStatus.FADED, faded_at_turn=15))

    assert engine.spread_rumor("faded", "Diana", "Charlie") is False
    assert engine.get("faded").known_by == ["Diana"]
    assert engine.get("faded").distortion == 0.0
    assert engine.metrics.get("gossip.rejected.invalid_transition") == 1
    rejected = engine.admin_log.get_recent(event_type="RUMOR_REJECTED")
    assert rejected[-1].rumor_id == "faded"


def test_unknown_rumor_is_a_silent_noop():
    engine = _engine()

    assert engine.spread_rumor("missing", "Alice", "Bob") is False
    assert engine.metrics.get("gossip.rejected.not_found") == 1


def test_empty_listener_is_rejected():
    engine = _engine()
    engine.insert(_rumor("r1", ["Alice"]))

    assert engine.spread_rumor("r1", "Alice", "") is False
    assert engine.get("r1").known_by == ["Alice"]
    assert engine.metrics.get("gossip.rejected.malformed") == 1


def test_legacy_rumor_without_status_spreads():
    engine = _engine()
    engine.insert(
        {"id": "legacy", "text": "old", "subject": "Alice", "turn": 5, "knownBy": ["Alice"], "distortion": 0}
    )

    assert engine.spread_rumor("legacy", "Alice", "Bob") is True
    assert engine.get("legacy").known_by == ["Alice", "Bob"]


def test_auto_propagate_only_rolls_for_active_rumors_known_by_speaker():
    roll = FixedRoll(0.0)
    engine = _engine(rng=roll)
    engine.insert(_rumor("active", ["Charlie"]))
    engine.insert(_rumor("faded", ["Charlie"], status=RumorStatus.FADED, faded_at_turn=12))
    engine.insert(_rumor("unknown", ["Alice"]))
    engine.insert(_rumor("already", ["Charlie", "Diana"]))

    spread = engine.auto_propagate("Charlie", "Diana")

    assert spread == ["active"]
    assert engine.get("faded").known_by == ["Charlie"]
    assert engine.get("unknown").known_by == ["Alice"]
    assert [scope["rumor"] for _, scope in roll.calls] == ["active"]
    assert all(stream == AUTO_PROPAGATE_STREAM for stream, _ in roll.calls)


def test_auto_propagate_respects_probability():
    engine = _engine(rng=FixedRoll(0.5))
    engine.insert(_rumor("r1", ["Charlie"]))

    assert engine.auto_propagate("Charlie", "Diana") == []
    assert engine.get("r1").known_by == ["Charlie"]


def test_auto_propagate_to_self_is_noop():
    roll = FixedRoll(0.0)
    engine = _engine(rng=roll)
    engine.insert(_rumor("r1", ["Charlie"]))

    assert engine.auto_propagate("Charlie", "Charlie") == []
    assert roll.calls == []


def test_auto_propagate_eventually_spreads_active_but_never_faded():
    engine = _engine(seed=7)
    engine.insert(_rumor("active", ["Charlie"]))
    engine.insert(_rumor("faded", ["Charlie"], status=RumorStatus.FADED, faded_at_turn=20))

    for _ in range(50):
        engine.auto_propagate("Charlie", "Diana")

    assert "Diana" in engine.get("active").known_by
    assert "Diana" not in engine.get("faded").known_by


def test_auto_propagate_is_deterministic_per_seed():
    def run(seed: int):
        engine = _engine(seed=seed)
        for index in range(20):
            engine.insert(_rumor(f"r{index}", ["Charlie"]))
        return engine.auto_propagate("Charlie", "Diana"), engine.metrics.snapshot_signature()

    assert run(11) == run(11)
