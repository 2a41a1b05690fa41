"""Rumor records and their (de)serialization.

A rumor is a unit of socially propagating information.  The record is
mutable but every field belongs to exactly one writer:

* the propagator owns ``known_by`` and ``distortion``;
* the lifecycle sweeper and the LRF evictor own ``status``,
  ``faded_at_turn`` and deletion;
* the host owns ``verified``.

Records persisted by older sessions may lack fields (most commonly
``status``).  Migration happens once, when the record is built, so the rest
of the subsystem can rely on a closed :class:`RumorStatus` enum.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

from .errors import MalformedRumorError

E = TypeVar("E", bound=Enum)


class RumorStatus(str, Enum):
    ACTIVE = "ACTIVE"
    FADED = "FADED"
    ARCHIVED = "ARCHIVED"


class RumorCategory(str, Enum):
    ROMANCE = "ROMANCE"
    CONFLICT = "CONFLICT"
    BETRAYAL = "BETRAYAL"
    ACHIEVEMENT = "ACHIEVEMENT"
    CUSTOM = "CUSTOM"


class RumorSpin(str, Enum):
    NEUTRAL = "NEUTRAL"
    POSITIVE = "POSITIVE"
    NEGATIVE = "NEGATIVE"


def _coerce_enum(enum_cls: Type[E], value: object, default: E, *, strict: bool = False) -> E:
    if isinstance(value, enum_cls):
        return value
    if value is None or value == "":
        return default
    if isinstance(value, str):
        try:
            return enum_cls(value.strip().upper())
        except ValueError:
            pass
    if strict:
        raise MalformedRumorError(f"{enum_cls.__name__} has no member {value!r}")
    return default


@dataclass(slots=True)
class Rumor:
    id: str
    text: str
    subject: str
    created_turn: int
    category: RumorCategory = RumorCategory.CUSTOM
    target: Optional[str] = None
    spin: RumorSpin = RumorSpin.NEUTRAL
    known_by: List[str] = field(default_factory=list)
    distortion: float = 0.0
    verified: bool = False
    status: RumorStatus = RumorStatus.ACTIVE
    faded_at_turn: Optional[int] = None

    def __post_init__(self) -> None:
        # Legacy records: absent status means the rumor never left ACTIVE.
        self.status = _coerce_enum(RumorStatus, self.status, RumorStatus.ACTIVE, strict=True)
        self.category = _coerce_enum(RumorCategory, self.category, RumorCategory.CUSTOM)
        self.spin = _coerce_enum(RumorSpin, self.spin, RumorSpin.NEUTRAL)
        self.known_by = list(dict.fromkeys(self.known_by))
        self.distortion = max(0.0, float(self.distortion))

    @property
    def is_active(self) -> bool:
        return self.status is RumorStatus.ACTIVE

    def knows(self, character_id: str) -> bool:
        return character_id in self.known_by

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "category": self.category.value,
            "subject": self.subject,
            "target": self.target,
            "spin": self.spin.value,
            "created_turn": self.created_turn,
            "known_by": list(self.known_by),
            "distortion": round(float(self.distortion), 6),
            "verified": self.verified,
            "status": self.status.value,
            "faded_at_turn": self.faded_at_turn,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Rumor":
        """Build a rumor from a persisted record, migrating legacy fields."""

        if not isinstance(payload, Mapping):
            raise MalformedRumorError(f"Rumor record must be a mapping, got {type(payload)!r}")
        data = migrate_record(payload)
        RUMOR_SCHEMA.validate(data)
        faded_at = data.get("faded_at_turn")
        return cls(
            id=data["id"],
            text=data["text"],
            subject=data["subject"],
            created_turn=int(data["created_turn"]),
            category=data.get("category"),
            target=data.get("target"),
            spin=data.get("spin"),
            known_by=[str(name) for name in data.get("known_by", [])],
            distortion=float(data.get("distortion", 0.0) or 0.0),
            verified=bool(data.get("verified", False)),
            status=data.get("status"),
            faded_at_turn=int(faded_at) if faded_at is not None else None,
        )


_LEGACY_KEYS: Mapping[str, str] = {
    "turn": "created_turn",
    "createdTurn": "created_turn",
    "knownBy": "known_by",
    "fadedAtTurn": "faded_at_turn",
    "type": "category",
}


def migrate_record(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``payload`` with legacy key names mapped to current ones."""

    data = dict(payload)
    for legacy, current in _LEGACY_KEYS.items():
        if legacy in data and current not in data:
            data[current] = data.pop(legacy)
    return data


@dataclass(frozen=True)
class RumorSchema:
    """Minimal structural schema for ingesting rumor records."""

    required: Mapping[str, tuple[type, ...]]
    optional: Mapping[str, tuple[type, ...]] = field(default_factory=dict)
    non_null: frozenset[str] = frozenset()

    def validate(self, payload: Mapping[str, Any]) -> None:
        missing = [key for key in self.required if key not in payload]
        if missing:
            raise MalformedRumorError(f"Missing required fields: {missing}")
        for key, expected in self.required.items():
            if not isinstance(payload[key], expected):
                raise MalformedRumorError(
                    f"Field '{key}' has type {type(payload[key])!r}, expected {expected!r}"
                )
        for key, expected in self.optional.items():
            if key in self.non_null and key in payload and payload[key] is None:
                raise MalformedRumorError(f"Field '{key}' may be omitted but not null")
            if key in payload and payload[key] is not None and not isinstance(payload[key], expected):
                raise MalformedRumorError(
                    f"Field '{key}' has type {type(payload[key])!r}, expected {expected!r}"
                )


NUMERIC = (int, float)

RUMOR_SCHEMA = RumorSchema(
    required={
        "id": (str,),
        "text": (str,),
        "subject": (str,),
        "created_turn": (int,),
    },
    optional={
        "category": (str, RumorCategory),
        "target": (str,),
        "spin": (str, RumorSpin),
        "known_by": (list, tuple),
        "distortion": NUMERIC,
        "verified": (bool,),
        "status": (str, RumorStatus),
        "faded_at_turn": (int,),
    },
    non_null=frozenset({"known_by"}),
)


__all__ = [
    "RUMOR_SCHEMA",
    "Rumor",
    "RumorCategory",
    "RumorSchema",
    "RumorSpin",
    "RumorStatus",
    "migrate_record",
]
