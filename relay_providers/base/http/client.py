"""Shared HTTP transport for the relay.

Purpose:
    Provide a thread-safe pool of reusable ``httpx.Client`` instances and the
    two send primitives every component uses: :func:`send` for a complete
    response and :func:`open_stream` for an incrementally consumed one. Both
    map transport failures and non-2xx statuses onto the package's error
    kinds so callers never see raw ``httpx`` exceptions.

External dependencies:
    - ``httpx`` for the underlying synchronous HTTP client.

Timeout strategy:
    - Pooled clients take their timeouts from :func:`get_timeout_config` at
      creation time. Injected clients keep their own settings.

Lifecycle & cleanup:
    - Clients are cached per ``purpose`` string ("relay.chat",
      "relay.stream", "relay.probe"). URLs are always absolute, so no base
      URL is bound to a pooled client.
    - All clients are closed at interpreter exit via ``atexit``; tests may call
      :func:`close_all_clients` explicitly.

Failure semantics:
    - ``httpx.TimeoutException`` -> ``NetworkError(code=timeout)``
    - ``httpx.ConnectError`` -> ``NetworkError(code=unavailable)``
    - any other ``httpx.HTTPError`` -> ``NetworkError(code=transient)``
    - non-2xx -> ``ApiError(status, body)`` with the body redacted and capped.
    Messages are generic; the original exception is chained for debugging.
"""

from __future__ import annotations

import atexit
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

import httpx

from ..errors import ApiError, ErrorCode, NetworkError
from ..models import OutboundRequest
from ..timeouts import get_timeout_config

# Bytes of an error body read from a streaming response before giving up.
_ERROR_BODY_READ_LIMIT = 4096

_CLIENTS: Dict[str, httpx.Client] = {}
_LOCK = threading.RLock()


def get_httpx_client(purpose: str) -> httpx.Client:
    """Return a pooled ``httpx.Client`` for ``purpose``.

    Thread-safety:
        Safe for concurrent use; per-key creation is guarded by a re-entrant lock.
    """
    client = _CLIENTS.get(purpose)
    if client is not None:
        return client
    with _LOCK:
        client = _CLIENTS.get(purpose)
        if client is not None:
            return client
        client = httpx.Client(timeout=get_timeout_config().to_httpx())
        _CLIENTS[purpose] = client
        return client


def close_all_clients() -> None:
    """Close and clear all pooled HTTP clients."""
    with _LOCK:
        for c in _CLIENTS.values():
            try:
                c.close()
            except Exception:  # nosec B110 - best-effort shutdown
                pass
        _CLIENTS.clear()


atexit.register(close_all_clients)


def network_error_from(exc: httpx.HTTPError, *, provider: str, model: Optional[str] = None) -> NetworkError:
    """Map an ``httpx`` exception to a generic, credential-free ``NetworkError``."""
    if isinstance(exc, httpx.TimeoutException):
        return NetworkError("request timed out", code=ErrorCode.TIMEOUT, provider=provider, model=model)
    if isinstance(exc, httpx.ConnectError):
        return NetworkError(
            "could not connect to server", code=ErrorCode.UNAVAILABLE, provider=provider, model=model
        )
    return NetworkError("network request failed", code=ErrorCode.TRANSIENT, provider=provider, model=model)


def _build(client: httpx.Client, outbound: OutboundRequest) -> httpx.Request:
    if outbound.body is None:
        return client.build_request(outbound.method, outbound.url, headers=outbound.headers)
    return client.build_request(outbound.method, outbound.url, headers=outbound.headers, json=outbound.body)


def raise_for_status(response: httpx.Response, *, provider: str, model: Optional[str] = None) -> None:
    """Raise ``ApiError`` for a non-2xx response whose body has been read."""
    if response.is_success:
        return
    raise ApiError(response.status_code, response.text, provider=provider, model=model)


def send(
    client: httpx.Client,
    outbound: OutboundRequest,
    *,
    provider: str,
    model: Optional[str] = None,
) -> httpx.Response:
    """Send ``outbound`` and return the fully read 2xx response."""
    try:
        response = client.send(_build(client, outbound))
    except httpx.HTTPError as exc:
        raise network_error_from(exc, provider=provider, model=model) from exc
    raise_for_status(response, provider=provider, model=model)
    return response


def _read_capped(response: httpx.Response, limit: int = _ERROR_BODY_READ_LIMIT) -> str:
    buf = bytearray()
    try:
        for chunk in response.iter_bytes():
            buf.extend(chunk)
            if len(buf) >= limit:
                break
    except httpx.HTTPError:
        pass  # the status alone is enough to report
    return bytes(buf[:limit]).decode("utf-8", errors="replace")


@contextmanager
def open_stream(
    client: httpx.Client,
    outbound: OutboundRequest,
    *,
    provider: str,
    model: Optional[str] = None,
) -> Iterator[httpx.Response]:
    """Open a streaming response and yield it once the status is known to be 2xx.

    The connection is closed when the context exits, including when the
    consumer abandons iteration early.
    """
    try:
        response = client.send(_build(client, outbound), stream=True)
    except httpx.HTTPError as exc:
        raise network_error_from(exc, provider=provider, model=model) from exc
    try:
        if not response.is_success:
            raise ApiError(response.status_code, _read_capped(response), provider=provider, model=model)
        yield response
    finally:
        response.close()


__all__ = [
    "get_httpx_client",
    "close_all_clients",
    "network_error_from",
    "raise_for_status",
    "send",
    "open_stream",
]
