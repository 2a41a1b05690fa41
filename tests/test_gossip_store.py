import pytest

from rumormill.gossip.errors import DuplicateRumorError
from rumormill.gossip.rumor import Rumor, RumorStatus
from rumormill.gossip.store import RumorStore


def _rumor(rumor_id: str, turn: int = 1, **kwargs) -> Rumor:
    return Rumor(id=rumor_id, text=f"text {rumor_id}", subject="Alice", created_turn=turn, known_by=["Alice"], **kwargs)


def test_insert_preserves_order_and_rejects_duplicates():
    store = RumorStore()
    for rumor_id in ("r1", "r2", "r3"):
        store.insert(_rumor(rumor_id))

    assert [r.id for r in store.all()] == ["r1", "r2", "r3"]
    assert store.count() == 3
    assert "r2" in store

    with pytest.raises(DuplicateRumorError):
        store.insert(_rumor("r2"))
    assert store.count() == 3


def test_remove_where_returns_matches_and_keeps_survivor_order():
    store = RumorStore()
    for index in range(6):
        store.insert(_rumor(f"r{index}", turn=index))

    removed = store.remove_where(lambda r: r.created_turn % 2 == 0)

    assert [r.id for r in removed] == ["r0", "r2", "r4"]
    assert [r.id for r in store.all()] == ["r1", "r3", "r5"]
    assert store.get("r2") is None
    assert store.get("r3") is not None


def test_remove_where_without_matches_is_noop():
    store = RumorStore()
    store.insert(_rumor("r1"))
    before = store.signature()

    assert store.remove_where(lambda r: r.status is RumorStatus.ARCHIVED) == []
    assert store.signature() == before


def test_all_is_a_snapshot():
    store = RumorStore()
    store.insert(_rumor("r1"))
    snapshot = store.all()
    store.insert(_rumor("r2"))

    assert isinstance(snapshot, tuple)
    assert [r.id for r in snapshot] == ["r1"]


def test_signature_tracks_content():
    a = RumorStore()
    b = RumorStore()
    a.insert(_rumor("r1"))
    b.insert(_rumor("r1"))
    assert a.signature() == b.signature()

    a.get("r1").known_by.append("Bob")
    assert a.signature() != b.signature()
