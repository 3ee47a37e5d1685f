from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class Tag(str, Enum):
    EMOTION_SCORE = "emotion_score"  # positive, negative or neutral
    GROWTH = "growth"  # personal growth, learning, self-improvement
    FAMILY = "family"
    WORK = "work"  # job, career
    HEALTH = "health"  # wellness or illness
    RELATIONSHIPS = "relationships"  # friends, partners, social ties
    FINANCE = "finance"
    STRESS = "stress"  # stress, anxiety, pressure
    ACHIEVEMENT = "achievement"
    GRATITUDE = "gratitude"

    def __str__(self) -> str:
        return self.value


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"

    def __str__(self) -> str:
        return self.value


TAGS: tuple[Tag, ...] = tuple(Tag)
TOPICAL_TAGS: tuple[Tag, ...] = tuple(t for t in Tag if t is not Tag.EMOTION_SCORE)
SENTIMENT_VALUES: frozenset[str] = frozenset(s.value for s in Sentiment)


@dataclass(frozen=True)
class DetectionResult:
    """Tags detected in a piece of text.

    ``tags`` holds ``Tag`` members when produced locally. Results coming back
    from the model keep whatever the service sent in the tag list.
    """

    tags: tuple[Any, ...]
    emotion_score: Optional[Sentiment] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "tags": [t.value if isinstance(t, Enum) else t for t in self.tags],
        }
        if self.emotion_score is not None:
            data["emotion_score"] = self.emotion_score.value
        return data


FALLBACK_RESULT = DetectionResult(tags=(Tag.EMOTION_SCORE,), emotion_score=Sentiment.NEUTRAL)
