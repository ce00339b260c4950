"""Streaming relay end-to-end over a mock transport."""
from __future__ import annotations

import json
from typing import List

import httpx
import pytest

from relay_providers import complete_stream, iter_stream
from relay_providers.base.cancellation import CancellationToken
from relay_providers.base.errors import (
    ApiError,
    ErrorCode,
    InvalidInputError,
    NetworkError,
    StreamCancelledError,
)
from relay_providers.base.streaming import CanonicalEvent, DataEvent, TerminalEvent

REQ = {"provider": "openai", "prompt": "Hi", "api_key": "sk-test"}


def test_split_chunks_scenario(sse_client):
    factory, seen = sse_client
    client = factory([b"data: foo\nda", b"ta: bar\n\n", b"data: [DONE]\n"])
    received: List[CanonicalEvent] = []
    complete_stream(REQ, received.append, client=client)
    assert received == [DataEvent("data: foo"), DataEvent("data: bar"), TerminalEvent()]
    req = seen[0]
    assert req.headers["accept"] == "text/event-stream"
    assert json.loads(req.content)["stream"] is True


def test_consumption_stops_at_sentinel(sse_client):
    factory, _ = sse_client
    client = factory([b"data: a\ndata: [DONE]\ndata: late\n", b"data: later\n"])
    assert list(iter_stream(REQ, client=client)) == [DataEvent("data: a"), TerminalEvent()]


def test_clean_eof_synthesizes_terminal(sse_client):
    factory, _ = sse_client
    client = factory([b"event: ping\n", b"data: x\n", b"data: unterminated"])
    assert list(iter_stream(REQ, client=client)) == [
        DataEvent("event: ping"),
        DataEvent("data: x"),
        TerminalEvent(),
    ]


def test_claude_stream_uses_messages_endpoint(sse_client):
    factory, seen = sse_client
    client = factory([b"event: message_start\ndata: {\"type\":\"message_start\"}\n\n"])
    events = list(iter_stream({"provider": "claude", "prompt": "x", "api_key": "k"}, client=client))
    assert events[0] == DataEvent("event: message_start")
    assert events[-1] == TerminalEvent()
    assert str(seen[0].url) == "https://api.anthropic.com/v1/messages"
    assert "cache-control" not in seen[0].headers


def test_non_2xx_at_start_raises_before_any_event(sse_client):
    factory, _ = sse_client
    client = factory([b'{"error": "bad key Bearer sk-live-123"}'], status_code=401)
    received: List[CanonicalEvent] = []
    with pytest.raises(ApiError) as ei:
        complete_stream(REQ, received.append, client=client)
    assert received == []
    assert ei.value.status == 401
    assert "sk-live-123" not in ei.value.body


def test_midstream_transport_error_has_no_terminal(make_client):
    def body():
        yield b"data: one\n"
        raise httpx.ReadError("connection reset")

    client = make_client(lambda r: httpx.Response(200, content=body()))
    received: List[CanonicalEvent] = []
    with pytest.raises(NetworkError):
        complete_stream(REQ, received.append, client=client)
    assert received == [DataEvent("data: one")]


def test_cancellation_stops_without_terminal(make_client):
    token = CancellationToken()
    received: List[CanonicalEvent] = []

    def body():
        yield b"data: one\n"
        yield b"data: two\n"
        yield b"data: [DONE]\n"

    def sink(event: CanonicalEvent) -> None:
        received.append(event)
        token.cancel("user stop")

    client = make_client(lambda r: httpx.Response(200, content=body()))
    with pytest.raises(StreamCancelledError) as ei:
        complete_stream(REQ, sink, client=client, cancellation_token=token)
    assert ei.value.reason == "user stop"
    assert received == [DataEvent("data: one")]


def test_pre_cancelled_token_sends_nothing(make_client):
    calls = []
    client = make_client(lambda r: calls.append(r) or httpx.Response(200))
    token = CancellationToken()
    token.cancel()
    with pytest.raises(StreamCancelledError):
        list(iter_stream(REQ, client=client, cancellation_token=token))
    assert calls == []


def test_early_close_closes_upstream(make_client):
    closed = []

    class Body(httpx.SyncByteStream):
        def __iter__(self):
            yield b"data: a\n"
            yield b"data: b\n"

        def close(self) -> None:
            closed.append(True)

    client = make_client(lambda r: httpx.Response(200, stream=Body()))
    gen = iter_stream(REQ, client=client)
    assert next(gen) == DataEvent("data: a")
    gen.close()
    assert closed


def test_ollama_stream_uses_non_streaming_path(make_client):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"message": {"content": "whole answer"}})

    events = list(iter_stream({"provider": "ollama", "prompt": "x"}, client=make_client(handler)))
    assert events == [DataEvent("whole answer"), TerminalEvent()]
    assert json.loads(seen[0].content)["stream"] is False


def test_ollama_empty_text_only_terminal(make_client):
    client = make_client(lambda r: httpx.Response(200, json={"message": {"content": ""}}))
    assert list(iter_stream({"provider": "ollama", "prompt": "x"}, client=client)) == [TerminalEvent()]


def test_invalid_request_rejected():
    with pytest.raises(InvalidInputError):
        complete_stream({"provider": "openai"}, lambda e: None)


@pytest.mark.parametrize(
    "exc_type,code",
    [(httpx.ConnectError, ErrorCode.UNAVAILABLE), (httpx.ConnectTimeout, ErrorCode.TIMEOUT)],
)
def test_connect_failure_raises_network_error(make_client, exc_type, code):
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc_type("no route", request=request)

    received: List[CanonicalEvent] = []
    with pytest.raises(NetworkError) as ei:
        complete_stream(REQ, received.append, client=make_client(handler))
    assert ei.value.code is code
    assert received == []


def test_read_error_before_first_event(make_client):
    def body():
        yield b"data: par"
        raise httpx.ReadTimeout("idle")

    client = make_client(lambda r: httpx.Response(200, content=body()))
    received: List[CanonicalEvent] = []
    with pytest.raises(NetworkError) as ei:
        complete_stream(REQ, received.append, client=client)
    assert ei.value.code is ErrorCode.TIMEOUT
    assert received == []
