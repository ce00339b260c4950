"""Request translation: one normalized request into each provider's wire format.

Purpose:
    Build the outbound HTTP request (method, URL, headers, JSON body) for a
    :class:`CompletionRequest` or a connectivity probe. Every dialect
    difference for URL layout, message shape, parameter placement and
    authentication lives in this module, one function per concern, each
    branching over :class:`Dialect`.

External dependencies:
    None. This module performs no I/O; its only failure mode is a request
    for a provider outside the closed set, which surfaces as
    ``InvalidInputError``.

URL rule:
    OpenAI-compatible and Claude endpoints share :func:`join_v1_path`: when the
    trimmed base already ends with ``/v1`` the tail is appended directly,
    otherwise ``/v1`` is inserted first. Ollama endpoints bypass the rule and
    append ``/api/...`` to the trimmed base.

Credentials:
    Secrets are trimmed of surrounding whitespace. An empty secret yields no
    auth header. Headers are never logged.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from .base.errors import ErrorCode, ProviderError
from .base.models import CompletionRequest, Dialect, OutboundRequest, Provider
from .catalog import dialect_for, resolve_base_url, resolve_model
from .config import get_provider_config
from .config.defaults import (
    CLAUDE_API_VERSION,
    CLAUDE_DEFAULT_MAX_TOKENS,
    OPENROUTER_DEFAULT_REFERER,
    OPENROUTER_DEFAULT_TITLE,
)

CHAT_COMPLETIONS_PATH = "/chat/completions"
MESSAGES_PATH = "/messages"
MODELS_PATH = "/models"
OLLAMA_CHAT_PATH = "/api/chat"
OLLAMA_TAGS_PATH = "/api/tags"


def join_v1_path(base: str, tail: str) -> str:
    """Join ``base`` and ``tail`` making sure exactly one ``/v1`` segment precedes the tail.

    >>> join_v1_path("https://x/v1", "/models")
    'https://x/v1/models'
    >>> join_v1_path("https://x/", "/chat/completions")
    'https://x/v1/chat/completions'
    """
    trimmed = base.rstrip("/")
    if trimmed.endswith("/v1"):
        return f"{trimmed}{tail}"
    return f"{trimmed}/v1{tail}"


def join_plain_path(base: str, tail: str) -> str:
    """Append ``tail`` to ``base`` with trailing slashes removed (Ollama layout)."""
    return f"{base.rstrip('/')}{tail}"


def _unreachable(dialect: Any) -> ProviderError:
    return ProviderError(code=ErrorCode.INTERNAL, message=f"unhandled dialect: {dialect!r}")


def endpoint_url(provider: Provider, base_url: str, *, probe: bool = False) -> str:
    """Return the generation (or model-listing, when ``probe``) URL for ``provider``."""
    dialect = dialect_for(provider)
    if dialect is Dialect.OPENAI_COMPAT:
        return join_v1_path(base_url, MODELS_PATH if probe else CHAT_COMPLETIONS_PATH)
    if dialect is Dialect.CLAUDE:
        return join_v1_path(base_url, MODELS_PATH if probe else MESSAGES_PATH)
    if dialect is Dialect.OLLAMA:
        return join_plain_path(base_url, OLLAMA_TAGS_PATH if probe else OLLAMA_CHAT_PATH)
    raise _unreachable(dialect)


def _openrouter_headers() -> Dict[str, str]:
    cfg = get_provider_config(Provider.OPENROUTER.value)
    return {
        "HTTP-Referer": str(cfg.get("referer") or OPENROUTER_DEFAULT_REFERER),
        "X-Title": str(cfg.get("title") or OPENROUTER_DEFAULT_TITLE),
    }


def auth_headers(provider: Provider, secret: Optional[str]) -> Dict[str, str]:
    """Return the authentication (and informational) headers for ``provider``.

    - OpenAI-compatible: ``Authorization: Bearer <secret>``; OpenRouter also
      gets ``HTTP-Referer`` and ``X-Title``.
    - Claude: ``x-api-key`` plus the fixed ``anthropic-version``.
    - Ollama: none.
    """
    key = (secret or "").strip()
    dialect = dialect_for(provider)
    headers: Dict[str, str] = {}
    if dialect is Dialect.OPENAI_COMPAT:
        if key:
            headers["Authorization"] = f"Bearer {key}"
        if provider is Provider.OPENROUTER:
            headers |= _openrouter_headers()
        return headers
    if dialect is Dialect.CLAUDE:
        if key:
            headers["x-api-key"] = key
        headers["anthropic-version"] = CLAUDE_API_VERSION
        return headers
    if dialect is Dialect.OLLAMA:
        return headers
    raise _unreachable(dialect)


def build_messages(request: CompletionRequest, dialect: Dialect) -> List[Dict[str, Any]]:
    """Translate the request's turns (or prompt pair) into the dialect's message list.

    With explicit turns, each role/content pair is carried verbatim; the
    Claude dialect wraps content in a text block and coerces every
    non-``assistant`` role to ``user``. Without turns, a non-empty system
    prompt becomes a leading ``system`` message (except for Claude, which
    carries it in the top-level ``system`` field) followed by the user prompt.
    """
    if dialect is Dialect.CLAUDE:
        if request.messages:
            return [
                {
                    "role": "assistant" if turn.role == "assistant" else "user",
                    "content": [{"type": "text", "text": turn.content}],
                }
                for turn in request.messages
            ]
        return [{"role": "user", "content": [{"type": "text", "text": request.prompt}]}]

    if dialect in (Dialect.OPENAI_COMPAT, Dialect.OLLAMA):
        if request.messages:
            return [{"role": turn.role, "content": turn.content} for turn in request.messages]
        messages: List[Dict[str, Any]] = []
        if request.system_prompt:
            messages.append({"role": "system", "content": request.system_prompt})
        messages.append({"role": "user", "content": request.prompt})
        return messages

    raise _unreachable(dialect)


def build_body(request: CompletionRequest, *, stream: bool) -> Dict[str, Any]:
    """Assemble the JSON body for a completion request.

    Ollama bodies always carry ``"stream": false`` because streaming for
    that dialect is served through the non-streaming path.
    """
    provider = request.provider
    dialect = dialect_for(provider)
    model = resolve_model(provider, request.model)
    messages = build_messages(request, dialect)

    if dialect is Dialect.OPENAI_COMPAT:
        body: Dict[str, Any] = {"model": model, "messages": messages}
        if request.temperature is not None:
            body["temperature"] = request.temperature
        if request.max_tokens is not None:
            body["max_tokens"] = request.max_tokens
        if stream:
            body["stream"] = True
        return body

    if dialect is Dialect.CLAUDE:
        body = {
            "model": model,
            "messages": messages,
            "max_tokens": request.max_tokens or CLAUDE_DEFAULT_MAX_TOKENS,
        }
        if request.system_prompt:
            body["system"] = request.system_prompt
        if request.temperature is not None:
            body["temperature"] = request.temperature
        if stream:
            body["stream"] = True
        return body

    if dialect is Dialect.OLLAMA:
        body = {"model": model, "messages": messages, "stream": False}
        options: Dict[str, Any] = {}
        if request.temperature is not None:
            options["temperature"] = request.temperature
        if request.max_tokens is not None:
            options["num_predict"] = request.max_tokens
        if options:
            body["options"] = options
        return body

    raise _unreachable(dialect)


def build_completion_request(request: CompletionRequest, *, stream: bool = False) -> OutboundRequest:
    """Translate ``request`` into a POST addressed to the provider's generation endpoint."""
    provider = request.provider
    base = resolve_base_url(provider, request.base_url)
    headers = auth_headers(provider, request.secret())
    if stream:
        headers["Accept"] = "text/event-stream"
        if dialect_for(provider) is Dialect.OPENAI_COMPAT:
            headers["Cache-Control"] = "no-cache"
    else:
        headers["Accept"] = "application/json"
    return OutboundRequest(
        method="POST",
        url=endpoint_url(provider, base),
        headers=headers,
        body=build_body(request, stream=stream),
    )


def build_probe_request(
    provider: Provider,
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
) -> OutboundRequest:
    """Translate a probe into a body-less GET against the model/tag listing endpoint."""
    provider = Provider.parse(provider)
    base = resolve_base_url(provider, base_url)
    headers = auth_headers(provider, api_key)
    headers["Accept"] = "application/json"
    return OutboundRequest(method="GET", url=endpoint_url(provider, base, probe=True), headers=headers)


__all__ = [
    "join_v1_path",
    "join_plain_path",
    "endpoint_url",
    "auth_headers",
    "build_messages",
    "build_body",
    "build_completion_request",
    "build_probe_request",
]
