from __future__ import annotations

import json
import logging
import os
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional

from rich.logging import RichHandler

# Correlation ID shared by every record emitted for one classification request
_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")

# Record attributes copied into structured output when present
EXTRA_FIELDS = ("strategy", "model", "error", "text_length")


def get_correlation_id() -> str:
    """Get the current correlation ID."""
    return _correlation_id.get()


def set_correlation_id(cid: Optional[str] = None) -> str:
    """Set a correlation ID for request tracing.

    Args:
        cid: Correlation ID to set. If None, generates a new UUID.

    Returns:
        The correlation ID that was set.
    """
    if cid is None:
        cid = str(uuid.uuid4())[:8]
    _correlation_id.set(cid)
    return cid


class StructuredFormatter(logging.Formatter):
    """JSON structured log formatter for production use."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        cid = get_correlation_id()
        if cid:
            log_data["correlation_id"] = cid

        for key in EXTRA_FIELDS:
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ContextFilter(logging.Filter):
    """Stamp the current correlation ID onto every record a handler sees."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        return True


def _json_from_env() -> bool:
    return os.getenv("LOG_JSON", "").lower() in ("1", "true", "yes")


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """Set up logging configuration.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_output: If True, use JSON structured format
        log_file: Optional file path; receives JSON lines regardless of console format

    Raises:
        ValueError: If level is not a known logging level name

    Examples:
        # Rich console output while developing
        setup_logging("DEBUG")

        # JSON lines for log shippers
        setup_logging("INFO", json_output=True)

        # Also keep a JSON log file
        setup_logging("INFO", log_file="tags.log")
    """
    if _json_from_env():
        json_output = True

    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers:
        if any(isinstance(f, ContextFilter) for f in handler.filters):
            handler.close()
    root.handlers = []

    if json_output:
        console_handler: logging.Handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(StructuredFormatter())
    else:
        console_handler = RichHandler(
            rich_tracebacks=True,
            show_time=True,
            show_path=False,
        )
        console_handler.setFormatter(logging.Formatter("[%(correlation_id)s] %(message)s"))

    # Logger-level filters skip records propagated from child loggers
    console_handler.addFilter(ContextFilter())
    root.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(StructuredFormatter())
        file_handler.addFilter(ContextFilter())
        root.addHandler(file_handler)

    # Reduce noise from the HTTP stack
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger by name.

    Args:
        name: Logger name (e.g., "keyword", "openai", "cli")

    Returns:
        Logger instance
    """
    return logging.getLogger(f"transcript_tags.{name}")
