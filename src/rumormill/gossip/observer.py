"""Default text-event detector.

Lightweight keyword heuristics that turn a line of narrative into a
:class:`RumorSeed`.  Hosts can replace the detector with anything callable
as ``detector(text) -> RumorSeed | None``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional, Pattern, Sequence, Tuple

from .rumor import RumorCategory, RumorSpin

MAX_TEXT_LENGTH = 240


@dataclass(slots=True, frozen=True)
class RumorSeed:
    text: str
    category: RumorCategory
    subject: str
    target: Optional[str] = None
    spin: RumorSpin = RumorSpin.NEUTRAL


def _compile(*words: str) -> Pattern[str]:
    return re.compile(r"\b(?:" + "|".join(words) + r")\b", re.IGNORECASE)


# Checked in order; the first matching category wins.
EVENT_PATTERNS: Sequence[Tuple[RumorCategory, Pattern[str]]] = (
    (
        RumorCategory.BETRAYAL,
        _compile(r"betray\w*", r"cheated on", r"backstabb\w*", r"lied to", r"предал\w*", r"изменил\w*", r"обманул\w*"),
    ),
    (
        RumorCategory.CONFLICT,
        _compile(
            r"fought", r"fight\w*", r"punch\w*", r"slapp\w*", r"attack\w*", r"insult\w*", r"argued",
            r"подрал\w*", r"удари\w*", r"поссорил\w*", r"оскорби\w*", r"напал\w*",
        ),
    ),
    (
        RumorCategory.ROMANCE,
        _compile(
            r"kiss\w*", r"dating", r"hugg\w*", r"flirt\w*", r"confessed",
            r"поцелова\w*", r"целовал\w*", r"обнял\w*", r"встречается", r"флиртова\w*",
        ),
    ),
    (
        RumorCategory.ACHIEVEMENT,
        _compile(r"won", r"praised", r"awarded", r"promoted", r"победил\w*", r"выиграл\w*", r"похвали\w*"),
    ),
)

DEFAULT_SPIN = {
    RumorCategory.BETRAYAL: RumorSpin.NEGATIVE,
    RumorCategory.CONFLICT: RumorSpin.NEGATIVE,
    RumorCategory.ACHIEVEMENT: RumorSpin.POSITIVE,
}


def detect_category(text: str) -> Optional[RumorCategory]:
    for category, pattern in EVENT_PATTERNS:
        if pattern.search(text):
            return category
    return None


class Observer:
    """Detects rumor-worthy events in narrative text.

    A seed needs a recognised event verb and at least one known character:
    the first character mentioned is the subject, the second the target.
    """

    def __init__(self, directory: Any) -> None:
        self.directory = directory

    def __call__(self, text: str) -> Optional[RumorSeed]:
        return self.observe(text)

    def observe(self, text: str) -> Optional[RumorSeed]:
        if not isinstance(text, str) or not text.strip():
            return None
        category = detect_category(text)
        if category is None:
            return None
        find_mentions = getattr(self.directory, "find_mentions", None)
        if find_mentions is None:
            return None
        mentioned = list(find_mentions(text))
        if not mentioned:
            return None
        return RumorSeed(
            text=" ".join(text.split())[:MAX_TEXT_LENGTH],
            category=category,
            subject=mentioned[0],
            target=mentioned[1] if len(mentioned) > 1 else None,
            spin=DEFAULT_SPIN.get(category, RumorSpin.NEUTRAL),
        )


__all__ = ["DEFAULT_SPIN", "EVENT_PATTERNS", "Observer", "RumorSeed", "detect_category"]
