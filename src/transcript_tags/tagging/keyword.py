from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

from transcript_tags.core.vocabulary import (
    TOPICAL_TAGS,
    DetectionResult,
    Sentiment,
    Tag,
)
from transcript_tags.tagging.base import TagClassifier

TAG_KEYWORDS: Mapping[Tag, tuple[str, ...]] = MappingProxyType({
    Tag.GROWTH: ("learn", "improve", "grew", "develop", "progress", "self-improvement", "skill"),
    Tag.FAMILY: ("family", "mother", "father", "sister", "brother", "parent", "child", "children"),
    Tag.WORK: ("work", "job", "career", "office", "boss", "colleague", "promotion", "project"),
    Tag.HEALTH: ("health", "sick", "ill", "wellness", "doctor", "hospital", "exercise", "diet"),
    Tag.RELATIONSHIPS: ("friend", "partner", "relationship", "girlfriend", "boyfriend", "spouse", "marriage"),
    Tag.FINANCE: ("money", "finance", "salary", "expense", "cost", "pay", "debt", "savings"),
    Tag.STRESS: ("stress", "anxiety", "pressure", "overwhelmed", "tense", "worried"),
    Tag.ACHIEVEMENT: ("achieve", "accomplish", "success", "win", "award", "goal", "milestone"),
    Tag.GRATITUDE: ("grateful", "thankful", "appreciate", "gratitude", "thanks"),
})

# Kept apart from TAG_KEYWORDS even where the words overlap
POSITIVE_WORDS = ("happy", "joy", "excited", "grateful", "thankful", "win", "success", "achievement")
NEGATIVE_WORDS = ("sad", "angry", "upset", "depressed", "sick", "anxiety", "stress", "worried")


def detect_emotion_score(text: Optional[str]) -> Sentiment:
    """Score sentiment by counting signal words present in the text.

    Each positive word found adds one, each negative word subtracts one.
    Matching is plain substring containment on the lower-cased text.

    Example:
        detect_emotion_score("I am happy and grateful")  # Sentiment.POSITIVE
        detect_emotion_score("I feel sad and stressed")  # Sentiment.NEGATIVE
        detect_emotion_score("The weather is cloudy")    # Sentiment.NEUTRAL
    """
    t = (text or "").lower()
    score = sum(1 for w in POSITIVE_WORDS if w in t)
    score -= sum(1 for w in NEGATIVE_WORDS if w in t)
    if score > 0:
        return Sentiment.POSITIVE
    if score < 0:
        return Sentiment.NEGATIVE
    return Sentiment.NEUTRAL


def detect_tags(text: Optional[str]) -> DetectionResult:
    """Detect vocabulary tags in transcribed text using keyword matching.

    Topical tags come first in vocabulary order, each at most once.
    ``emotion_score`` is always appended last together with its sentiment,
    so the result is never empty.

    Example:
        detect_tags("I'm learning new skills at work")
        # tags=(Tag.GROWTH, Tag.WORK, Tag.EMOTION_SCORE), emotion_score=NEUTRAL
    """
    lower = (text or "").lower()
    detected = [
        tag for tag in TOPICAL_TAGS
        if any(keyword in lower for keyword in TAG_KEYWORDS[tag])
    ]
    detected.append(Tag.EMOTION_SCORE)
    return DetectionResult(tags=tuple(detected), emotion_score=detect_emotion_score(lower))


class KeywordTagClassifier(TagClassifier):
    """Deterministic offline tagger. Needs no credentials or network."""

    name = "keyword"

    def detect(self, text: str) -> DetectionResult:
        return detect_tags(text)

    async def detect_async(self, text: str) -> DetectionResult:
        return self.detect(text)
