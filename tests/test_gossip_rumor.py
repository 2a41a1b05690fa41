import pytest

from rumormill.gossip.errors import MalformedRumorError
from rumormill.gossip.rumor import Rumor, RumorCategory, RumorSpin, RumorStatus


def _legacy_record(**overrides):
    record = {
        "id": "test_rumor_7",
        "text": "old rumor without status",
        "type": "romance",
        "subject": "Alice",
        "target": "Bob",
        "spin": "neutral",
        "turn": 30,
        "knownBy": ["Charlie"],
        "distortion": 0,
        "verified": False,
    }
    record.update(overrides)
    return record


def test_new_rumor_defaults():
    rumor = Rumor(id="r1", text="t", subject="Alice", created_turn=3, known_by=["Alice"])

    assert rumor.status is RumorStatus.ACTIVE
    assert rumor.distortion == 0.0
    assert rumor.faded_at_turn is None
    assert rumor.verified is False


def test_missing_status_migrates_to_active():
    rumor = Rumor.from_dict(_legacy_record())

    assert rumor.status is RumorStatus.ACTIVE
    assert rumor.created_turn == 30
    assert rumor.known_by == ["Charlie"]
    assert rumor.category is RumorCategory.ROMANCE
    assert rumor.spin is RumorSpin.NEUTRAL


def test_none_status_on_direct_construction_is_active():
    rumor = Rumor(id="r1", text="t", subject="Alice", created_turn=1, status=None)

    assert rumor.status is RumorStatus.ACTIVE


def test_unknown_category_falls_back_to_custom():
    rumor = Rumor.from_dict(_legacy_record(type="academic_failure"))

    assert rumor.category is RumorCategory.CUSTOM


def test_legacy_faded_fields_are_read():
    rumor = Rumor.from_dict(_legacy_record(status="FADED", fadedAtTurn=49))

    assert rumor.status is RumorStatus.FADED
    assert rumor.faded_at_turn == 49


@pytest.mark.parametrize(
    "overrides",
    [
        {"id": None},
        {"turn": "thirty"},
        {"knownBy": "Charlie"},
        {"knownBy": None},
        {"status": "LOST"},
    ],
)
def test_malformed_records_raise(overrides):
    record = _legacy_record(**overrides)
    if record.get("id") is None:
        del record["id"]

    with pytest.raises(MalformedRumorError):
        Rumor.from_dict(record)


def test_non_mapping_record_raises():
    with pytest.raises(MalformedRumorError):
        Rumor.from_dict(["not", "a", "record"])


def test_known_by_deduplicated_in_order():
    rumor = Rumor(id="r1", text="t", subject="Alice", created_turn=1, known_by=["Bob", "Alice", "Bob"])

    assert rumor.known_by == ["Bob", "Alice"]


def test_to_dict_round_trip():
    rumor = Rumor(
        id="r1",
        text="Alice kissed Bob",
        subject="Alice",
        target="Bob",
        created_turn=4,
        category=RumorCategory.ROMANCE,
        spin=RumorSpin.NEGATIVE,
        known_by=["Alice", "Bob"],
        distortion=0.3,
        status=RumorStatus.FADED,
        faded_at_turn=9,
    )

    assert Rumor.from_dict(rumor.to_dict()) == rumor
