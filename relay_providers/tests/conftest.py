"""Pytest configuration for the relay test suite.

- Every test runs with provider-related environment variables cleared and
  module caches (config file, timeouts, pooled clients) reset, so results do
  not depend on the developer's shell or a local ``.env``.
- ``make_client`` builds an ``httpx.Client`` over ``httpx.MockTransport`` so no
  test touches the network.
- ``sse_client`` serves a streamed body split at caller-chosen chunk boundaries.
- ``log_messages`` captures the JSON messages emitted under the ``relay``
  logger (which does not propagate to the root logger).
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Callable, Dict, Iterable, Iterator, List

import httpx
import pytest

from relay_providers.base.http import close_all_clients
from relay_providers.base.logging import BASE_LOGGER_NAME, get_logger
from relay_providers.config import reset_config_cache

_ENV_PREFIXES = ("OPENAI_", "DEEPSEEK_", "MOONSHOT_", "KIMI_", "OPENROUTER_", "ANTHROPIC_", "CLAUDE_", "OLLAMA_", "RELAY_")


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Clear provider env vars and point ``.env`` loading at an empty location."""
    for name in list(os.environ):
        if name.startswith(_ENV_PREFIXES):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "missing.env"))
    reset_config_cache()
    close_all_clients()
    yield
    reset_config_cache()
    close_all_clients()


@pytest.fixture()
def make_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.Client]:
    """Return a factory building mock-transport clients; all are closed at teardown."""
    clients: List[httpx.Client] = []

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.Client:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _make
    for c in clients:
        c.close()


class _ListHandler(logging.Handler):
    """Capture log records into a list for assertions."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.messages: List[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())


class LogCapture:
    def __init__(self, handler: _ListHandler) -> None:
        self._handler = handler

    @property
    def raw(self) -> List[str]:
        return list(self._handler.messages)

    def events(self, name: str | None = None) -> List[Dict[str, Any]]:
        out = []
        for msg in self._handler.messages:
            try:
                payload = json.loads(msg)
            except ValueError:
                continue
            if name is None or payload.get("event") == name:
                out.append(payload)
        return out


@pytest.fixture()
def log_messages() -> Iterator[LogCapture]:
    logger = get_logger(BASE_LOGGER_NAME)
    handler = _ListHandler()
    previous = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    try:
        yield LogCapture(handler)
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous)


def chunked_response(chunks: Iterable[bytes], status_code: int = 200) -> httpx.Response:
    """Build a response whose body is delivered exactly as the given chunks."""
    return httpx.Response(
        status_code,
        headers={"Content-Type": "text/event-stream"},
        content=iter(list(chunks)),
    )


@pytest.fixture()
def sse_client(make_client):
    """Return ``(factory, seen)`` where ``factory(chunks)`` builds a client streaming ``chunks``.

    ``seen`` collects every request the mock server received.
    """
    seen: List[httpx.Request] = []

    def _factory(chunks: Iterable[bytes], status_code: int = 200) -> httpx.Client:
        data = [c if isinstance(c, bytes) else c.encode("utf-8") for c in chunks]

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return chunked_response(data, status_code)

        return make_client(handler)

    return _factory, seen
