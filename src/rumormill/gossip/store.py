from __future__ import annotations

import json
from dataclasses import dataclass, field
from hashlib import sha256
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from .errors import DuplicateRumorError
from .rumor import Rumor

RumorPredicate = Callable[[Rumor], bool]


@dataclass(slots=True)
class RumorStore:
    """Insertion-ordered rumor collection with id lookup.

    The store holds no policy: it never decides what to remove.  Callers
    (the sweeper, the evictor) pass predicates to :meth:`remove_where`.
    """

    _rumors: List[Rumor] = field(default_factory=list, repr=False)
    _index: Dict[str, Rumor] = field(default_factory=dict, repr=False)

    def insert(self, rumor: Rumor) -> None:
        if rumor.id in self._index:
            raise DuplicateRumorError(f"Rumor {rumor.id!r} is already stored")
        self._rumors.append(rumor)
        self._index[rumor.id] = rumor

    def get(self, rumor_id: str) -> Optional[Rumor]:
        return self._index.get(rumor_id)

    def remove_where(self, predicate: RumorPredicate) -> List[Rumor]:
        """Remove every matching rumor and return them in store order."""

        removed: List[Rumor] = []
        survivors: List[Rumor] = []
        for rumor in self._rumors:
            (removed if predicate(rumor) else survivors).append(rumor)
        if removed:
            self._rumors = survivors
            for rumor in removed:
                del self._index[rumor.id]
        return removed

    def all(self) -> Tuple[Rumor, ...]:
        return tuple(self._rumors)

    def count(self) -> int:
        return len(self._rumors)

    def __len__(self) -> int:  # pragma: no cover - trivial
        return len(self._rumors)

    def __contains__(self, rumor_id: object) -> bool:
        return rumor_id in self._index

    def __iter__(self) -> Iterator[Rumor]:
        return iter(tuple(self._rumors))

    def signature(self) -> str:
        canonical = [rumor.to_dict() for rumor in self._rumors]
        payload = json.dumps(canonical, sort_keys=True, separators=(",", ":")).encode("utf-8")
        return sha256(payload).hexdigest()


__all__ = ["RumorPredicate", "RumorStore"]
