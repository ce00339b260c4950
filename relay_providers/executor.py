"""Non-streaming completion executor.

Sends one translated request, waits for the complete body and extracts the
completion text for the provider's dialect:

- OpenAI-compatible: ``choices[0].message.content``
- Claude: ``content[0].text``
- Ollama: ``message.content``

A missing, null or mistyped field (or a body that is not JSON at all)
resolves to ``""``. Only transport failures (``NetworkError``) and non-2xx
statuses (``ApiError``) are errors. Nothing is retried.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Mapping, Optional, Union

import httpx

from .base.errors import ProviderError
from .base.http import get_httpx_client, send
from .base.logging import LogContext, get_logger, normalized_log_event
from .base.models import CompletionRequest, Dialect, parse_completion_request
from .catalog import dialect_for, resolve_model
from .translate import build_completion_request

CHAT_CLIENT_PURPOSE = "relay.chat"

_logger = get_logger("relay.executor")


def _index(value: Any, key: Union[int, str]) -> Any:
    if isinstance(key, int):
        if isinstance(value, list) and len(value) > key:
            return value[key]
        return None
    if isinstance(value, dict):
        return value.get(key)
    return None


def _dig(data: Any, *path: Union[int, str]) -> Any:
    for key in path:
        data = _index(data, key)
        if data is None:
            return None
    return data


def extract_completion_text(dialect: Dialect, data: Any) -> str:
    """Return the completion text held in a decoded response body."""
    if dialect is Dialect.OPENAI_COMPAT:
        text = _dig(data, "choices", 0, "message", "content")
    elif dialect is Dialect.CLAUDE:
        text = _dig(data, "content", 0, "text")
    elif dialect is Dialect.OLLAMA:
        text = _dig(data, "message", "content")
    else:  # pragma: no cover - closed enum
        text = None
    return text if isinstance(text, str) else ""


def _decode_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


def execute(
    request: Union[CompletionRequest, Mapping[str, Any]],
    *,
    client: Optional[httpx.Client] = None,
) -> str:
    """Run ``request`` to completion and return the completion text.

    Raises:
        InvalidInputError: malformed request, raised before any network call.
        ApiError: non-2xx status.
        NetworkError: timeout, connection or other transport failure.
    """
    request = parse_completion_request(request)
    provider = request.provider
    dialect = dialect_for(provider)
    model = resolve_model(provider, request.model)
    outbound = build_completion_request(request, stream=False)
    ctx = LogContext(provider=provider.value, model=model, dialect=dialect.value, url=outbound.url)
    http = client or get_httpx_client(CHAT_CLIENT_PURPOSE)

    normalized_log_event(_logger, "chat.start", ctx, phase="start", emitted=False)
    t0 = time.perf_counter()
    try:
        response = send(http, outbound, provider=provider.value, model=model)
    except ProviderError as exc:
        normalized_log_event(
            _logger,
            "chat.error",
            ctx,
            phase="finalize",
            error_code=exc.code.value,
            emitted=False,
            level=logging.ERROR,
            status=getattr(exc, "status", None),
            error=exc.message,
        )
        raise
    text = extract_completion_text(dialect, _decode_json(response))
    normalized_log_event(
        _logger,
        "chat.end",
        ctx,
        phase="finalize",
        emitted=bool(text),
        status=response.status_code,
        response_chars=len(text),
        latency_ms=round((time.perf_counter() - t0) * 1000.0, 3),
    )
    return text


__all__ = ["CHAT_CLIENT_PURPOSE", "extract_completion_text", "execute"]
