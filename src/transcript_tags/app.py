from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import List, Optional

import typer

from transcript_tags.config import STRATEGIES, Settings, get_settings
from transcript_tags.core.logger import get_logger, set_correlation_id, setup_logging
from transcript_tags.core.vocabulary import TOPICAL_TAGS, DetectionResult, Tag
from transcript_tags.tagging import make_classifier
from transcript_tags.tagging.keyword import NEGATIVE_WORDS, POSITIVE_WORDS, TAG_KEYWORDS

log = get_logger("cli")
cli_app = typer.Typer(help="Tag transcribed text with topics and sentiment.")


def _load_settings() -> Settings:
    try:
        return get_settings()
    except Exception as e:
        log.error(f"Configuration error: {e}")
        raise typer.Exit(code=1)


def _resolve_log_level(override: Optional[str], settings: Settings) -> str:
    if override is None:
        return settings.log_level
    level = override.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        typer.echo(f"Invalid log level: {override}", err=True)
        raise typer.Exit(code=1)
    return level


async def _tag_texts(settings: Settings, texts: list[str], strategy: Optional[str]) -> list[DetectionResult]:
    classifier = make_classifier(settings, strategy=strategy)
    return await classifier.detect_many(texts)


@cli_app.command()
def tag(
    texts: Optional[List[str]] = typer.Argument(None, help="Text(s) to tag. Reads stdin lines when omitted."),
    strategy: Optional[str] = typer.Option(None, "--strategy", "-s", help="auto, keyword or openai"),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit JSON structured logs"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override LOG_LEVEL"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Also write JSON logs to this file"),
):
    """Detect tags and print one JSON object per text."""
    settings = _load_settings()
    setup_logging(_resolve_log_level(log_level, settings), json_output=json_logs, log_file=log_file)
    set_correlation_id()

    if strategy is not None and strategy.lower() not in STRATEGIES:
        log.error(f"Unknown strategy: {strategy}")
        raise typer.Exit(code=1)

    if not texts:
        texts = [line.rstrip("\n") for line in sys.stdin if line.strip()]

    log.info(f"Tagging {len(texts)} text(s)", extra={"strategy": strategy or settings.tagger_strategy})
    results = asyncio.run(_tag_texts(settings, texts, strategy))
    for result in results:
        typer.echo(json.dumps(result.to_dict()))


@cli_app.command()
def vocab():
    """List the tag vocabulary with its trigger words."""
    typer.echo(f"{Tag.EMOTION_SCORE.value}: +[{', '.join(POSITIVE_WORDS)}] -[{', '.join(NEGATIVE_WORDS)}]")
    for t in TOPICAL_TAGS:
        typer.echo(f"{t.value}: {', '.join(TAG_KEYWORDS[t])}")


@cli_app.command()
def validate():
    """Validate configuration and report the strategy that would be used."""
    settings = _load_settings()
    setup_logging(settings.log_level)

    if settings.tagger_strategy == "openai":
        try:
            settings.validate_openai_credentials()
        except ValueError as e:
            log.error(f"Configuration validation failed: {e}")
            raise typer.Exit(code=1)

    log.info("Configuration validation passed!")
    log.info(f"  Strategy: {settings.tagger_strategy}")
    log.info(f"  Model: {settings.openai_model} @ {settings.openai_base_url}")
    if settings.has_openai_credentials():
        log.info("  OpenAI: API key configured")
    else:
        log.info("  OpenAI: no usable API key (keyword tagging / fallback)")


if __name__ == "__main__":
    cli_app()
