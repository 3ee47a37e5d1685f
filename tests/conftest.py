"""Pytest configuration and fixtures for tagger tests."""
from __future__ import annotations

import json
import os
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Callable, Generator, Optional

import httpx
import pytest

# Keep real credentials out of the test run
for _key in (
    "OPENAI_API_KEY", "OPENAI_BASE_URL", "OPENAI_MODEL", "TAGGER_STRATEGY", "LOG_JSON",
    "HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy",
):
    os.environ.pop(_key, None)

from transcript_tags.config import Settings, reload_settings
from transcript_tags.tagging.keyword import KeywordTagClassifier
from transcript_tags.tagging.openai_model import OpenAITagClassifier


def completion_response(content: Optional[str], status_code: int = 200) -> httpx.Response:
    """Build a chat completions response carrying ``content`` in the first choice."""
    return httpx.Response(
        status_code,
        json={"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]},
    )


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: list[httpx.Request] = []

        def _handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_handler)

    def payloads(self) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def keyword_tagger() -> KeywordTagClassifier:
    return KeywordTagClassifier()


@pytest.fixture
def make_transport() -> Callable[..., RecordingTransport]:
    return RecordingTransport


@pytest.fixture
def make_openai_tagger() -> Callable[..., OpenAITagClassifier]:
    """Factory for a model classifier wired to a mock transport."""

    def _make(
        transport: httpx.MockTransport,
        has_credentials: bool = True,
        **kwargs: Any,
    ) -> OpenAITagClassifier:
        client = httpx.AsyncClient(transport=transport)
        return OpenAITagClassifier(
            api_key="sk-test",
            credential_check=lambda: has_credentials,
            client=client,
            **kwargs,
        )

    return _make


@pytest.fixture
def test_settings() -> Settings:
    """Settings reloaded from the (scrubbed) test environment."""
    return reload_settings()


class _CompletionHandler(BaseHTTPRequestHandler):
    """Chat completions endpoint answering with a fixed tag payload over keep-alive."""

    protocol_version = "HTTP/1.1"
    reply = json.dumps({"tags": ["work"], "emotion_score": "positive"})

    def do_POST(self) -> None:
        length = int(self.headers.get("Content-Length", 0))
        self.server.requests_seen.append(json.loads(self.rfile.read(length)))

        body = json.dumps({"choices": [{"message": {"role": "assistant", "content": self.reply}}]}).encode()
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: Any) -> None:
        pass


@pytest.fixture
def completion_server() -> Generator[tuple[str, list[dict[str, Any]]], None, None]:
    """Local HTTP/1.1 server; yields its base URL and the request bodies it received."""
    server = ThreadingHTTPServer(("127.0.0.1", 0), _CompletionHandler)
    server.daemon_threads = True
    server.requests_seen = []
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}/v1", server.requests_seen
    finally:
        server.shutdown()
        server.server_close()
