import pytest

from rumormill.gossip import GossipConfig, Rumor, RumorStatus, RumorStore
from rumormill.gossip.eviction import LRFEvictor, should_evict
from rumormill.gossip.scoring import relevance_score


def _rumor(rumor_id: str, turn: int, known_by=("Alice",), **kwargs) -> Rumor:
    return Rumor(id=rumor_id, text=rumor_id, subject="Alice", created_turn=turn, known_by=list(known_by), **kwargs)


def _evictor(hard_cap: int, *rumors: Rumor) -> LRFEvictor:
    store = RumorStore()
    for rumor in rumors:
        store.insert(rumor)
    return LRFEvictor(store=store, config=GossipConfig(hard_cap=hard_cap))


@pytest.mark.parametrize(
    "turn,known_by,expected",
    [
        (50, [], -50),
        (50, ["Alice", "Bob", "Charlie"], -44),
        (95, [], -5),
        (95, ["Alice", "Bob", "Charlie", "Diana"], 3),
    ],
)
def test_relevance_score(turn, known_by, expected):
    assert relevance_score(_rumor("r", turn, known_by), 100) == expected


def test_oldest_rumors_evicted_first_and_newest_kept_in_order():
    rumors = [_rumor(f"r{turn}", turn) for turn in range(1, 161)]
    evictor = _evictor(150, *rumors)

    evicted = evictor.evict(160)

    assert [r.id for r in evicted] == [f"r{turn}" for turn in range(1, 11)]
    assert [r.id for r in evictor.store.all()] == [f"r{turn}" for turn in range(11, 161)]
    assert all(r.status is RumorStatus.ACTIVE for r in evicted)


def test_least_relevant_removed_before_widely_known():
    rumors = [
        _rumor(f"rumor_{i}", 50 if i < 5 else 90, known_by=[] if i < 5 else ["Alice", "Bob"]) for i in range(155)
    ]
    evictor = _evictor(150, *rumors)

    evicted = evictor.evict(100)

    assert sorted(r.id for r in evicted) == [f"rumor_{i}" for i in range(5)]
    assert evictor.store.count() == 150


def test_tie_broken_by_earliest_creation_turn():
    newer = _rumor("newer", 100, known_by=["Alice"])
    older = _rumor("older", 98, known_by=["Alice", "Bob"])
    evictor = _evictor(1, newer, older)

    assert relevance_score(newer, 110) == relevance_score(older, 110)
    evicted = evictor.evict(110)

    assert [r.id for r in evicted] == ["older"]
    assert [r.id for r in evictor.store.all()] == ["newer"]


def test_full_tie_broken_by_insertion_order():
    evictor = _evictor(2, _rumor("first", 5), _rumor("second", 5), _rumor("third", 5))

    evicted = evictor.evict(10)

    assert [r.id for r in evicted] == ["first"]


def test_under_cap_nothing_evicted():
    evictor = _evictor(3, _rumor("a", 1), _rumor("b", 2), _rumor("c", 3))

    assert evictor.evict(1_000) == []
    assert evictor.store.count() == 3


def test_faded_rumors_are_evicted_like_any_other():
    evictor = _evictor(
        1,
        _rumor("faded", 1, status=RumorStatus.FADED, faded_at_turn=2),
        _rumor("fresh", 9),
    )

    evicted = evictor.evict(10)

    assert [r.id for r in evicted] == ["faded"]


def test_should_evict():
    cfg = GossipConfig(hard_cap=150)
    assert should_evict(151, cfg) is True
    assert should_evict(150, cfg) is False
