"""Connectivity probe and model listing.

Both operations issue a single body-less GET against the provider's
model-listing endpoint (``/api/tags`` for Ollama) with the same URL and auth
rules as generation requests. They never send a generation request, so a
probe incurs no usage cost.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Optional

import httpx

from .base.errors import ApiError, ProviderError
from .base.http import get_httpx_client, send
from .base.logging import LogContext, get_logger, normalized_log_event
from .base.models import ConnectivityResult, Provider
from .catalog import dialect_for, display_name
from .translate import build_probe_request

PROBE_CLIENT_PURPOSE = "relay.probe"

_logger = get_logger("relay.probe")


def _probe(
    provider: Provider,
    api_key: Optional[str],
    base_url: Optional[str],
    client: Optional[httpx.Client],
    operation: str,
) -> httpx.Response:
    outbound = build_probe_request(provider, api_key, base_url)
    ctx = LogContext(
        provider=provider.value,
        dialect=dialect_for(provider).value,
        url=outbound.url,
        extra={"operation": operation},
    )
    http = client or get_httpx_client(PROBE_CLIENT_PURPOSE)
    normalized_log_event(_logger, "probe.start", ctx, phase="start")
    t0 = time.perf_counter()
    try:
        response = send(http, outbound, provider=provider.value)
    except ProviderError as exc:
        normalized_log_event(
            _logger,
            "probe.error",
            ctx,
            phase="finalize",
            error_code=exc.code.value,
            level=logging.WARNING,
            status=getattr(exc, "status", None),
            error=exc.message,
        )
        raise
    normalized_log_event(
        _logger,
        "probe.end",
        ctx,
        phase="finalize",
        status=response.status_code,
        latency_ms=round((time.perf_counter() - t0) * 1000.0, 3),
    )
    return response


def test_connection(
    provider: Any,
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    *,
    client: Optional[httpx.Client] = None,
) -> str:
    """Check reachability and credentials; return a confirmation message.

    Any 2xx status counts as success, e.g. ``"OpenAI API is reachable"``.

    Raises:
        InvalidInputError: unknown provider.
        ApiError: non-2xx status.
        NetworkError: transport failure.
    """
    resolved = Provider.parse(provider)
    _probe(resolved, api_key, base_url, client, "test_connection")
    return f"{display_name(resolved)} API is reachable"


def list_models(
    provider: Any,
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    *,
    client: Optional[httpx.Client] = None,
) -> Any:
    """Return the provider's model listing document unmodified.

    Raises:
        ApiError: non-2xx status, or a 2xx body that is not JSON.
        NetworkError: transport failure.
    """
    resolved = Provider.parse(provider)
    response = _probe(resolved, api_key, base_url, client, "list_models")
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ApiError(
            response.status_code,
            "invalid JSON in response",
            provider=resolved.value,
        ) from None


def probe_connectivity(
    provider: Any,
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    *,
    client: Optional[httpx.Client] = None,
) -> ConnectivityResult:
    """Non-raising form of :func:`test_connection`."""
    try:
        return ConnectivityResult(ok=True, message=test_connection(provider, api_key, base_url, client=client))
    except ProviderError as exc:
        return ConnectivityResult(ok=False, message=exc.message)


__all__ = ["PROBE_CLIENT_PURPOSE", "test_connection", "list_models", "probe_connectivity"]
