from __future__ import annotations

import logging
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

STRATEGIES = ("auto", "keyword", "openai")

# Values shipped in example env files; never sent to the API
_PLACEHOLDER_PREFIXES = ("your", "sk-your", "sk-xxx", "sk-...", "<")
_PLACEHOLDER_VALUES = {"changeme", "change-me", "dummy", "none", "null", "placeholder"}


class Settings(BaseSettings):
    """Tagger settings with validation.

    All settings are loaded from environment variables (or a local .env file).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # OpenAI-compatible chat completions
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-3.5-turbo"
    openai_temperature: float = 0.1
    openai_max_tokens: int = 200
    openai_timeout: float = 30.0

    # auto picks the model when a real key is configured
    tagger_strategy: str = "auto"

    log_level: str = "INFO"

    @field_validator("openai_base_url")
    @classmethod
    def base_url_scheme(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"openai_base_url must start with http:// or https://, got {v}")
        return v.rstrip("/")

    @field_validator("openai_model")
    @classmethod
    def model_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("openai_model must not be empty")
        return v.strip()

    @field_validator("openai_temperature")
    @classmethod
    def temperature_range(cls, v: float) -> float:
        if not 0 <= v <= 2:
            raise ValueError(f"openai_temperature must be in [0, 2], got {v}")
        return v

    @field_validator("openai_max_tokens")
    @classmethod
    def max_tokens_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"openai_max_tokens must be >= 1, got {v}")
        return v

    @field_validator("openai_timeout")
    @classmethod
    def timeout_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"openai_timeout must be > 0, got {v}")
        return v

    @field_validator("tagger_strategy")
    @classmethod
    def strategy_known(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in STRATEGIES:
            raise ValueError(f"tagger_strategy must be one of {', '.join(STRATEGIES)}, got {v}")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_known(cls, v: str) -> str:
        v = v.strip().upper()
        if not isinstance(logging.getLevelName(v), int):
            raise ValueError(f"Invalid log_level: {v}")
        return v

    def has_openai_credentials(self) -> bool:
        """True when an API key is set and does not look like a placeholder."""
        key = self.openai_api_key.strip()
        if not key:
            return False
        lowered = key.lower()
        if lowered in _PLACEHOLDER_VALUES:
            return False
        return not lowered.startswith(_PLACEHOLDER_PREFIXES)

    def validate_openai_credentials(self) -> None:
        """Raise if OpenAI credentials are missing."""
        if not self.has_openai_credentials():
            raise ValueError("OPENAI_API_KEY must be set for model-backed tagging")


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Force reload settings from environment."""
    global _settings
    _settings = Settings()
    return _settings
