"""In-memory character directory.

The gossip engine only needs a narrow view of the cast: who exists, who is
important, who is currently in focus, how characters feel about each other
and where their reputation stands.  Hosts with their own character model
can pass any object exposing the same methods; this roster is the reference
implementation used by tests and the demo script.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

REPUTATION_MIN = 0.0
REPUTATION_MAX = 100.0


@dataclass(slots=True)
class CharacterRecord:
    name: str
    important: bool = True
    in_focus: bool = False
    reputation: float = 50.0
    aliases: Tuple[str, ...] = field(default_factory=tuple)


def _stem(name: str) -> str:
    # Drop one trailing letter so inflected forms still match ("Хлоя" -> "Хлою").
    name = name.strip()
    if len(name) > 3:
        return name[: max(3, len(name) - 1)]
    return name


@dataclass
class CharacterRoster:
    records: Dict[str, CharacterRecord] = field(default_factory=dict)
    relations: Dict[Tuple[str, str], float] = field(default_factory=dict)

    def add(
        self,
        name: str,
        *,
        important: bool = True,
        in_focus: bool = False,
        reputation: float = 50.0,
        aliases: Iterable[str] = (),
    ) -> CharacterRecord:
        record = CharacterRecord(
            name=name,
            important=important,
            in_focus=in_focus,
            reputation=reputation,
            aliases=tuple(aliases),
        )
        self.records[name] = record
        return record

    def characters(self) -> List[str]:
        return list(self.records)

    def is_important(self, name: str) -> bool:
        record = self.records.get(name)
        return bool(record and record.important)

    def is_in_focus(self, name: str) -> bool:
        record = self.records.get(name)
        return bool(record and record.in_focus)

    def set_focus(self, names: Iterable[str]) -> None:
        wanted = set(names)
        for name, record in self.records.items():
            record.in_focus = name in wanted

    def set_relation(self, source: str, target: str, value: float) -> None:
        self.relations[(source, target)] = float(value)

    def relation(self, source: str, target: str) -> float:
        return self.relations.get((source, target), 0.0)

    def reputation(self, name: str) -> Optional[float]:
        record = self.records.get(name)
        return record.reputation if record else None

    def adjust_reputation(self, name: str, delta: float) -> Optional[float]:
        record = self.records.get(name)
        if record is None:
            return None
        record.reputation = min(REPUTATION_MAX, max(REPUTATION_MIN, record.reputation + float(delta)))
        return record.reputation

    def find_mentions(self, text: str) -> List[str]:
        """Return characters mentioned in ``text``, in order of first mention."""

        first_seen: Dict[str, int] = {}
        for name, record in self.records.items():
            for form in (name, *record.aliases):
                stem = _stem(form)
                if not stem:
                    continue
                match = re.search(rf"(?<!\w){re.escape(stem)}\w*", text, flags=re.IGNORECASE)
                if match is None:
                    continue
                if name not in first_seen or match.start() < first_seen[name]:
                    first_seen[name] = match.start()
        return [name for name, _ in sorted(first_seen.items(), key=lambda item: (item[1], item[0]))]


__all__ = ["CharacterRecord", "CharacterRoster", "REPUTATION_MAX", "REPUTATION_MIN"]
