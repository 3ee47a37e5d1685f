from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Iterable

from transcript_tags.core.vocabulary import DetectionResult


class TagClassifier(ABC):
    name: str = "base"

    @abstractmethod
    async def detect_async(self, text: str) -> DetectionResult:
        raise NotImplementedError

    async def detect_many(self, texts: Iterable[str]) -> list[DetectionResult]:
        """Classify several texts concurrently, preserving input order."""
        return list(await asyncio.gather(*(self.detect_async(t) for t in texts)))
