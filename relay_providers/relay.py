"""Streaming relay.

Purpose:
    Drive one upstream streaming connection through
    :class:`StreamFramer` and :class:`StreamNormalizer` and hand the resulting
    canonical events to the caller, either as a generator (:func:`iter_stream`)
    or by pushing into a sink callable (:func:`complete_stream`).

Contract:
    - Events arrive in the order their frames were received.
    - A successful or cleanly ended stream ends with exactly one
      :class:`TerminalEvent`. When the body closes without ``data: [DONE]``
      the terminal event is synthesized.
    - Consumption stops at the first terminal event; the connection is closed
      even if upstream bytes remain.
    - A consumer that closes the generator early still gets a ``stream.end``
      log event, without ``terminal_source``.
    - A transport failure after the stream has started raises ``NetworkError``
      and no terminal event is produced. Events already delivered stay valid.
    - Cancellation via :class:`CancellationToken` is checked after each chunk;
      it closes the connection and raises ``StreamCancelledError`` without a
      terminal event.

Ollama:
    The Ollama streaming entry point runs the non-streaming executor and
    yields its text as a single :class:`DataEvent` (omitted when empty)
    followed by the terminal event.

Flow control:
    Events are produced synchronously as each chunk arrives; there is no
    internal queue, so the transport's own flow control is the only
    backpressure.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator, Mapping, Optional, Union

import httpx

from .base.cancellation import CancellationToken
from .base.errors import ErrorCode, ProviderError
from .base.http import get_httpx_client, network_error_from, open_stream
from .base.logging import LogContext, get_logger, normalized_log_event
from .base.models import CompletionRequest, Dialect, Provider, parse_completion_request
from .base.streaming import (
    CanonicalEvent,
    DataEvent,
    StreamFramer,
    StreamMetrics,
    StreamNormalizer,
    TerminalEvent,
)
from .catalog import dialect_for, resolve_model
from .executor import execute
from .translate import build_completion_request

STREAM_CLIENT_PURPOSE = "relay.stream"

_logger = get_logger("relay.stream")


def _log_error(ctx: LogContext, exc: ProviderError, metrics: StreamMetrics) -> None:
    metrics.finish()
    cancelled = exc.code is ErrorCode.CANCELLED
    normalized_log_event(
        _logger,
        "stream.cancelled" if cancelled else "stream.error",
        ctx,
        phase="finalize",
        error_code=exc.code.value,
        emitted=metrics.emitted > 0,
        level=logging.INFO if cancelled else logging.ERROR,
        error=exc.message,
        **metrics.to_fields(),
    )


def _log_end(ctx: LogContext, metrics: StreamMetrics, terminal_source: Optional[str]) -> None:
    metrics.finish()
    normalized_log_event(
        _logger,
        "stream.end",
        ctx,
        phase="finalize",
        emitted=metrics.emitted > 0,
        terminal_source=terminal_source,
        **metrics.to_fields(),
    )


def _iter_ollama(
    request: CompletionRequest,
    client: Optional[httpx.Client],
    cancellation_token: Optional[CancellationToken],
    ctx: LogContext,
    metrics: StreamMetrics,
) -> Iterator[CanonicalEvent]:
    text = execute(request, client=client)
    if cancellation_token is not None:
        cancellation_token.raise_if_cancelled(provider=ctx.provider or "unknown", model=ctx.model)
    if text:
        metrics.record_event()
        yield DataEvent(text)
    _log_end(ctx, metrics, "eof")
    yield TerminalEvent()


def _iter_sse(
    request: CompletionRequest,
    client: Optional[httpx.Client],
    cancellation_token: Optional[CancellationToken],
    ctx: LogContext,
    metrics: StreamMetrics,
) -> Iterator[CanonicalEvent]:
    provider = ctx.provider or "unknown"
    outbound = build_completion_request(request, stream=True)
    http = client or get_httpx_client(STREAM_CLIENT_PURPOSE)
    framer = StreamFramer()
    normalizer = StreamNormalizer()

    with open_stream(http, outbound, provider=provider, model=ctx.model) as response:
        chunks = response.iter_bytes()
        while not normalizer.done:
            try:
                chunk = next(chunks, None)
            except httpx.HTTPError as exc:
                raise network_error_from(exc, provider=provider, model=ctx.model) from exc
            if chunk is None:
                break
            for frame in framer.feed(chunk):
                event = normalizer.feed(frame)
                if event is None:
                    continue
                if isinstance(event, TerminalEvent):
                    break
                metrics.record_event()
                yield event
            if cancellation_token is not None and not normalizer.done:
                cancellation_token.raise_if_cancelled(provider=provider, model=ctx.model)

    discarded = framer.close()
    if discarded:
        normalized_log_event(
            _logger,
            "stream.tail_discarded",
            ctx,
            phase="finalize",
            emitted=metrics.emitted > 0,
            level=logging.DEBUG,
            discarded_chars=discarded,
        )
    normalizer.finish()
    _log_end(ctx, metrics, normalizer.terminal_source)
    yield TerminalEvent()


def iter_stream(
    request: Union[CompletionRequest, Mapping[str, Any]],
    *,
    client: Optional[httpx.Client] = None,
    cancellation_token: Optional[CancellationToken] = None,
) -> Iterator[CanonicalEvent]:
    """Yield canonical events for a streaming completion.

    Closing the generator early (``gen.close()`` or leaving a ``for`` loop)
    closes the upstream connection.

    Raises:
        InvalidInputError: malformed request, before any network call.
        ApiError: non-2xx status at stream start, before any event.
        NetworkError: transport failure, before or during the stream.
        StreamCancelledError: ``cancellation_token`` was cancelled.
    """
    request = parse_completion_request(request)
    provider: Provider = request.provider
    dialect = dialect_for(provider)
    model = resolve_model(provider, request.model)
    ctx = LogContext(provider=provider.value, model=model, dialect=dialect.value)
    metrics = StreamMetrics()
    if cancellation_token is not None:
        cancellation_token.raise_if_cancelled(provider=provider.value, model=model)

    normalized_log_event(_logger, "stream.start", ctx, phase="start", emitted=False)
    body = _iter_ollama if dialect is Dialect.OLLAMA else _iter_sse
    try:
        yield from body(request, client, cancellation_token, ctx, metrics)
    except ProviderError as exc:
        _log_error(ctx, exc, metrics)
        raise
    except GeneratorExit:
        # closed by the consumer before the terminal event was logged
        if metrics.total_duration_ms is None:
            _log_end(ctx, metrics, None)
        raise


def complete_stream(
    request: Union[CompletionRequest, Mapping[str, Any]],
    sink: Callable[[CanonicalEvent], None],
    *,
    client: Optional[httpx.Client] = None,
    cancellation_token: Optional[CancellationToken] = None,
) -> None:
    """Push every canonical event of a streaming completion into ``sink``.

    On success ``sink`` receives zero or more :class:`DataEvent` values and
    then exactly one :class:`TerminalEvent`. Errors propagate as in
    :func:`iter_stream`; the sink never sees a terminal event for a failed
    stream.
    """
    stream = iter_stream(request, client=client, cancellation_token=cancellation_token)
    try:
        for event in stream:
            sink(event)
    finally:
        stream.close()


__all__ = ["STREAM_CLIENT_PURPOSE", "iter_stream", "complete_stream"]
