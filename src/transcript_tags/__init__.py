from __future__ import annotations

from .core.vocabulary import FALLBACK_RESULT, TAGS, DetectionResult, Sentiment, Tag
from .tagging import (
    KeywordTagClassifier,
    OpenAITagClassifier,
    TagClassifier,
    detect_tags,
    make_classifier,
)

__all__ = [
    "DetectionResult",
    "FALLBACK_RESULT",
    "KeywordTagClassifier",
    "OpenAITagClassifier",
    "Sentiment",
    "TAGS",
    "Tag",
    "TagClassifier",
    "detect_tags",
    "make_classifier",
]
