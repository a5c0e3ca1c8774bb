"""
Mood scoring for events.

An event's mood score is a signed integer: the sum of lexicon scores of the words
in its name, description and tags, plus a fixed bonus or penalty for its type.
The score is stored on the event and later matched against mood bands by the
recommendation filter.
"""

import json
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from eventhub.core.config import settings

DEFAULT_WORD_SCORES: dict[str, int] = {
    # positive
    "amazing": 4,
    "awesome": 4,
    "beautiful": 3,
    "best": 3,
    "bright": 2,
    "celebrate": 3,
    "celebration": 3,
    "cheerful": 3,
    "dance": 2,
    "dancing": 2,
    "delight": 3,
    "enjoy": 2,
    "excited": 3,
    "exciting": 3,
    "fantastic": 4,
    "festive": 3,
    "friendly": 2,
    "fun": 4,
    "funny": 3,
    "glad": 3,
    "good": 3,
    "great": 3,
    "happy": 3,
    "joy": 3,
    "joyful": 3,
    "laugh": 2,
    "love": 3,
    "lovely": 3,
    "music": 1,
    "party": 2,
    "play": 1,
    "smile": 2,
    "sunny": 2,
    "wonderful": 4,
    # negative
    "awful": -3,
    "bad": -3,
    "crisis": -3,
    "cry": -2,
    "dark": -1,
    "death": -3,
    "disaster": -3,
    "farewell": -2,
    "fear": -2,
    "funeral": -4,
    "grief": -3,
    "illness": -2,
    "lonely": -2,
    "loss": -3,
    "memorial": -2,
    "mourning": -4,
    "pain": -2,
    "poverty": -2,
    "sad": -2,
    "sorrow": -3,
    "tragedy": -3,
    "war": -3,
}

DEFAULT_EVENT_TYPE_SCORES: dict[str, int] = {
    "CONCERT": 2,
    "LECTURE": -1,
    "WEBINAR": -1,
    "WORKSHOP": -1,
    "SEMINAR": 0,
    "MEETUP": -1,
    "EXHIBITION": -1,
    "CONFERENCE": -1,
    "FESTIVAL": 2,
    "PARTY": 2,
    "GALA": 1,
    "SPORTS": 1,
    "CHARITY": -1,
}


@dataclass(frozen=True)
class MoodLexicon:
    """Immutable word and event-type score tables."""

    word_scores: Mapping[str, int] = field(default_factory=dict)
    event_type_scores: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self):
        words = {str(k).lower(): int(v) for k, v in dict(self.word_scores).items()}
        types = {str(k).upper(): int(v) for k, v in dict(self.event_type_scores).items()}
        object.__setattr__(self, "word_scores", MappingProxyType(words))
        object.__setattr__(self, "event_type_scores", MappingProxyType(types))

    @classmethod
    def from_file(cls, path: str | Path) -> "MoodLexicon":
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls(
            word_scores=data.get("words", {}),
            event_type_scores=data.get("event_types", {}),
        )


DEFAULT_LEXICON = MoodLexicon(DEFAULT_WORD_SCORES, DEFAULT_EVENT_TYPE_SCORES)


@lru_cache
def get_lexicon() -> MoodLexicon:
    if settings.mood_lexicon_path:
        return MoodLexicon.from_file(settings.mood_lexicon_path)
    return DEFAULT_LEXICON


def analyze_text(text: Optional[str], lexicon: MoodLexicon = DEFAULT_LEXICON) -> int:
    if not text:
        return 0
    return sum(lexicon.word_scores.get(word, 0) for word in text.lower().split())


def evaluate_event(
    name: Optional[str],
    description: Optional[str],
    event_type: Optional[str],
    tags: Optional[Iterable[str]] = None,
    lexicon: MoodLexicon = DEFAULT_LEXICON,
) -> int:
    score = analyze_text(name, lexicon) + analyze_text(description, lexicon)

    if event_type:
        score += lexicon.event_type_scores.get(event_type.upper(), 0)

    if isinstance(tags, (list, tuple)):
        for tag in tags:
            if isinstance(tag, str):
                score += analyze_text(tag, lexicon)

    return score
