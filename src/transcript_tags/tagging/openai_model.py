from __future__ import annotations

import json
from typing import Any, Callable, Optional

import httpx

from transcript_tags.config import Settings
from transcript_tags.core.logger import get_logger
from transcript_tags.core.vocabulary import (
    FALLBACK_RESULT,
    SENTIMENT_VALUES,
    TAGS,
    DetectionResult,
    Sentiment,
)
from transcript_tags.tagging.base import TagClassifier

log = get_logger("openai")

SYSTEM_PROMPT = (
    "You are a helpful assistant that analyzes text and identifies relevant tags. "
    "Always respond with valid JSON."
)

TAG_DETECTION_PROMPT = f"""Analyze the following text and identify relevant tags from this list: {', '.join(t.value for t in TAGS)}.

For emotion_score, determine if the overall sentiment is positive, negative, or neutral.

Return your response as valid JSON in this exact format:
{{
  "tags": ["tag1", "tag2", "emotion_score"],
  "emotion_score": "positive|negative|neutral"
}}

Text to analyze: """


class TagModelError(Exception):
    """Base exception for model-backed tagging errors."""
    pass


class TagResponseError(TagModelError):
    """The service answered, but not with a usable tag payload."""
    pass


def build_user_message(text: str) -> str:
    return TAG_DETECTION_PROMPT + text


def extract_content(data: Any) -> str:
    """Return the message content of the first completion choice."""
    choices = data.get("choices") if isinstance(data, dict) else None
    if not choices or not isinstance(choices, list):
        raise TagResponseError("No choices in completion response")

    first = choices[0] if isinstance(choices[0], dict) else {}
    message = first.get("message") or {}
    content = message.get("content") if isinstance(message, dict) else None
    if not content or not isinstance(content, str):
        raise TagResponseError("No response content from model")
    return content


def validate_payload(payload: Any) -> None:
    """Check the parsed reply has the ``{"tags": [...], "emotion_score": ...}`` shape.

    Tag elements are not checked against the vocabulary.
    """
    if not isinstance(payload, dict):
        raise TagResponseError(f"Expected a JSON object, got {type(payload).__name__}")

    tags = payload.get("tags")
    if not isinstance(tags, list):
        raise TagResponseError("Invalid response format: missing or invalid tags array")

    emotion = payload.get("emotion_score")
    if not isinstance(emotion, str) or emotion not in SENTIMENT_VALUES:
        raise TagResponseError("Invalid response format: missing or invalid emotion_score")


def parse_detection(content: str) -> DetectionResult:
    """Parse and validate model output into a DetectionResult.

    Raises:
        TagResponseError: If the content is not valid JSON or has the wrong shape
    """
    try:
        payload = json.loads(content)
    except json.JSONDecodeError as e:
        raise TagResponseError(f"Failed to parse JSON response: {content[:100]}") from e

    validate_payload(payload)
    return DetectionResult(
        tags=tuple(payload["tags"]),
        emotion_score=Sentiment(payload["emotion_score"]),
    )


class OpenAITagClassifier(TagClassifier):
    """Tag classifier backed by an OpenAI-compatible chat completions endpoint.

    Every failure (no credentials, transport errors, empty or malformed
    replies) resolves to ``FALLBACK_RESULT``; ``detect_async`` never raises.

    Configuration:
        OPENAI_API_KEY: API key
        OPENAI_BASE_URL: API base URL (default: https://api.openai.com/v1)
        OPENAI_MODEL: Model to use (default: gpt-3.5-turbo)

    Without an injected ``client`` a fresh ``httpx.AsyncClient`` is opened and
    closed for every call, so instances hold no connection state and can be
    driven from separate event loops.

    Usage:
        tagger = OpenAITagClassifier.from_settings(get_settings())
        result = asyncio.run(tagger.detect_async("I finally got the promotion"))
        print(result.to_dict())
    """

    name = "openai"

    def __init__(
        self,
        api_key: str = "",
        credential_check: Optional[Callable[[], bool]] = None,
        base_url: str = "https://api.openai.com/v1",
        model: str = "gpt-3.5-turbo",
        temperature: float = 0.1,
        max_tokens: int = 200,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout

        self._credential_check = credential_check or (lambda: bool(self.api_key))
        # Injected clients are owned and closed by the caller
        self._client = client

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        client: Optional[httpx.AsyncClient] = None,
    ) -> "OpenAITagClassifier":
        return cls(
            api_key=settings.openai_api_key,
            credential_check=settings.has_openai_credentials,
            base_url=settings.openai_base_url,
            model=settings.openai_model,
            temperature=settings.openai_temperature,
            max_tokens=settings.openai_max_tokens,
            timeout=settings.openai_timeout,
            client=client,
        )

    def build_payload(self, text: str) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_user_message(text)},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

    async def _post(self, payload: dict[str, Any]) -> httpx.Response:
        url = f"{self.base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        if self._client is not None:
            return await self._client.post(url, json=payload, headers=headers)

        # Connection pools are bound to the running event loop, so each call
        # gets its own client.
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(url, json=payload, headers=headers)

    async def _request_tags(self, text: str) -> DetectionResult:
        response = await self._post(self.build_payload(text))
        response.raise_for_status()

        try:
            data = response.json()
        except ValueError as e:
            raise TagResponseError("Completion response body is not JSON") from e

        return parse_detection(extract_content(data))

    def _classify_failure(self, error: Exception) -> DetectionResult:
        """Map any failure cause to the fallback result."""
        if isinstance(error, httpx.HTTPStatusError):
            reason = f"API error: {error.response.status_code}"
        elif isinstance(error, httpx.RequestError):
            reason = f"Request error: {error!r}"
        elif isinstance(error, TagModelError):
            reason = str(error)
        else:
            reason = f"Unexpected error: {error!r}"

        log.debug(
            f"Model tagging failed, using fallback: {reason}",
            extra={"strategy": self.name, "model": self.model, "error": reason},
        )
        return FALLBACK_RESULT

    async def detect_async(self, text: str) -> DetectionResult:
        """Detect tags in text using the model.

        Args:
            text: Transcribed text to analyze

        Returns:
            The model's tags and sentiment, or FALLBACK_RESULT on any failure
        """
        try:
            if not self._credential_check():
                log.debug("No usable OpenAI credentials; returning fallback tags")
                return FALLBACK_RESULT
            result = await self._request_tags(text)
        except Exception as e:
            return self._classify_failure(e)

        log.debug(
            f"Tags: {list(result.tags)} ({result.emotion_score}) for: {text[:50]}...",
            extra={"strategy": self.name, "model": self.model, "text_length": len(text)},
        )
        return result
