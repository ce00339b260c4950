"""Structured logging emitted by the streaming relay."""
from __future__ import annotations

import httpx
import pytest

from relay_providers import iter_stream
from relay_providers.base.errors import ApiError


def test_stream_end_metrics_sentinel(sse_client, log_messages):
    factory, _ = sse_client
    client = factory([b"data: a\n", b"data: b\n", b"data: [DONE]\n"])
    list(iter_stream({"provider": "deepseek", "prompt": "x", "api_key": "sk-hidden1"}, client=client))
    assert log_messages.events("stream.start")
    (end,) = log_messages.events("stream.end")
    assert end["emitted_count"] == 2
    assert end["terminal_source"] == "sentinel"
    assert end["time_to_first_event_ms"] is not None
    assert end["total_duration_ms"] >= end["time_to_first_event_ms"]
    assert end["provider"] == "deepseek"
    assert all("sk-hidden1" not in m for m in log_messages.raw)


def test_stream_end_eof_and_tail_discarded(sse_client, log_messages):
    factory, _ = sse_client
    client = factory([b"data: a\ndata: cut"])
    list(iter_stream({"provider": "openai", "prompt": "x"}, client=client))
    (end,) = log_messages.events("stream.end")
    assert end["terminal_source"] == "eof"
    (tail,) = log_messages.events("stream.tail_discarded")
    assert tail["discarded_chars"] == len("data: cut")


def test_stream_error_event(sse_client, log_messages):
    factory, _ = sse_client
    client = factory([b"nope"], status_code=429)
    with pytest.raises(ApiError):
        list(iter_stream({"provider": "openrouter", "prompt": "x"}, client=client))
    (err,) = log_messages.events("stream.error")
    assert err["error_code"] == "rate_limit"
    assert err["emitted_count"] == 0


def test_early_close_logs_stream_end(sse_client, log_messages):
    factory, _ = sse_client
    client = factory([b"data: a\n", b"data: b\n", b"data: [DONE]\n"])
    gen = iter_stream({"provider": "openai", "prompt": "x"}, client=client)
    next(gen)
    gen.close()
    (end,) = log_messages.events("stream.end")
    assert end["emitted_count"] == 1
    assert end.get("terminal_source") is None
    assert not log_messages.events("stream.error")


def test_close_after_terminal_logs_once(sse_client, log_messages):
    factory, _ = sse_client
    client = factory([b"data: a\n", b"data: [DONE]\n"])
    gen = iter_stream({"provider": "openai", "prompt": "x"}, client=client)
    for event in gen:
        if event.is_terminal:
            break
    gen.close()
    (end,) = log_messages.events("stream.end")
    assert end["terminal_source"] == "sentinel"
