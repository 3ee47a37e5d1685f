from __future__ import annotations

from typing import Optional

from transcript_tags.config import Settings
from transcript_tags.core.logger import get_logger

from .base import TagClassifier
from .keyword import KeywordTagClassifier, detect_emotion_score, detect_tags
from .openai_model import OpenAITagClassifier

log = get_logger("tagging")


def make_classifier(settings: Settings, strategy: Optional[str] = None) -> TagClassifier:
    """Create a tag classifier based on configuration.

    ``auto`` uses the model when a usable API key is configured and the
    keyword tagger otherwise.
    """
    strategy = (strategy or settings.tagger_strategy).lower()
    if strategy == "openai" or (strategy == "auto" and settings.has_openai_credentials()):
        log.info(f"Using OpenAITagClassifier ({settings.openai_model}).")
        return OpenAITagClassifier.from_settings(settings)
    if strategy not in ("auto", "keyword"):
        raise ValueError(f"Unknown tagging strategy: {strategy}")
    log.info("Using KeywordTagClassifier.")
    return KeywordTagClassifier()


__all__ = [
    "KeywordTagClassifier",
    "OpenAITagClassifier",
    "TagClassifier",
    "detect_emotion_score",
    "detect_tags",
    "make_classifier",
]
