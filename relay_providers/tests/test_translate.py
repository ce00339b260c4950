"""RequestTranslator tests: URL joining, headers and per-dialect bodies."""
from __future__ import annotations

import pytest

from relay_providers.base.models import CompletionRequest, Dialect, Provider
from relay_providers.translate import (
    build_body,
    build_completion_request,
    build_messages,
    build_probe_request,
    join_v1_path,
)


def _req(**kw) -> CompletionRequest:
    kw.setdefault("provider", "openai")
    kw.setdefault("prompt", "Hi")
    return CompletionRequest(**kw)


@pytest.mark.parametrize(
    "base,expected",
    [
        ("https://api.openai.com", "https://api.openai.com/v1/chat/completions"),
        ("https://api.openai.com/", "https://api.openai.com/v1/chat/completions"),
        ("https://api.openai.com/v1", "https://api.openai.com/v1/chat/completions"),
        ("https://api.openai.com/v1/", "https://api.openai.com/v1/chat/completions"),
        ("https://openrouter.ai/api", "https://openrouter.ai/api/v1/chat/completions"),
    ],
)
def test_join_v1_path(base, expected):
    assert join_v1_path(base, "/chat/completions") == expected


def test_same_rule_for_every_tail():
    for tail in ("/chat/completions", "/messages", "/models"):
        assert join_v1_path("https://x.test/v1", tail) == f"https://x.test/v1{tail}"
        assert join_v1_path("https://x.test", tail) == f"https://x.test/v1{tail}"


def test_endpoints_per_dialect():
    assert build_completion_request(_req(provider="claude")).url == "https://api.anthropic.com/v1/messages"
    assert build_completion_request(_req(provider="ollama")).url == "http://127.0.0.1:11434/api/chat"
    ollama_v1 = _req(provider="ollama", base_url="http://box:11434/v1/")
    # Ollama ignores the /v1 rule
    assert build_completion_request(ollama_v1).url == "http://box:11434/v1/api/chat"
    assert build_probe_request(Provider.OLLAMA).url == "http://127.0.0.1:11434/api/tags"
    assert build_probe_request(Provider.KIMI).url == "https://api.moonshot.cn/v1/models"


def test_openai_body_and_bearer_auth():
    out = build_completion_request(_req(api_key="  sk-test  ", temperature=0.3, max_tokens=64))
    assert out.method == "POST"
    assert out.headers["Authorization"] == "Bearer sk-test"
    assert out.headers["Accept"] == "application/json"
    assert out.body == {
        "model": "gpt-4o-mini",
        "messages": [{"role": "user", "content": "Hi"}],
        "temperature": 0.3,
        "max_tokens": 64,
    }
    assert "sk-test" not in repr(out)


def test_system_prompt_becomes_leading_turn():
    msgs = build_messages(_req(system_prompt="Be brief"), Dialect.OPENAI_COMPAT)
    assert msgs == [{"role": "system", "content": "Be brief"}, {"role": "user", "content": "Hi"}]


def test_turn_list_replaces_prompt():
    req = _req(
        prompt="ignored",
        system_prompt="also ignored",
        messages=[
            {"role": "system", "content": "S"},
            {"role": "user", "content": "A"},
            {"role": "assistant", "content": "B"},
        ],
    )
    assert build_messages(req, Dialect.OPENAI_COMPAT) == [
        {"role": "system", "content": "S"},
        {"role": "user", "content": "A"},
        {"role": "assistant", "content": "B"},
    ]


def test_streaming_flag_and_headers():
    out = build_completion_request(_req(), stream=True)
    assert out.body["stream"] is True
    assert out.headers["Accept"] == "text/event-stream"
    assert out.headers["Cache-Control"] == "no-cache"
    assert "stream" not in build_body(_req(), stream=False)


def test_empty_key_sends_no_auth_header():
    out = build_completion_request(_req(api_key="   "))
    assert "Authorization" not in out.headers


def test_openrouter_informational_headers(monkeypatch):
    out = build_completion_request(_req(provider="openrouter", api_key="k"))
    assert out.headers["HTTP-Referer"] == "https://github.com/"
    assert out.headers["X-Title"] == "relay-providers"
    monkeypatch.setenv("OPENROUTER_TITLE", "My App")
    assert build_probe_request(Provider.OPENROUTER, "k").headers["X-Title"] == "My App"


def test_claude_turn_list_without_system():
    req = _req(provider="claude", api_key="k", messages=[{"role": "user", "content": "Hi"}])
    body = build_body(req, stream=False)
    assert body["messages"] == [{"role": "user", "content": [{"type": "text", "text": "Hi"}]}]
    assert "system" not in body
    assert body["max_tokens"] == 1024


def test_claude_system_field_and_role_coercion():
    req = _req(
        provider="claude",
        system_prompt="Be kind",
        messages=[
            {"role": "system", "content": "x"},
            {"role": "assistant", "content": "y"},
        ],
        max_tokens=10,
        temperature=1.0,
    )
    body = build_body(req, stream=True)
    assert body["system"] == "Be kind"
    assert [m["role"] for m in body["messages"]] == ["user", "assistant"]
    assert body["max_tokens"] == 10
    assert body["temperature"] == 1.0
    assert body["stream"] is True


def test_claude_headers():
    out = build_completion_request(_req(provider="claude", api_key=" key "))
    assert out.headers["x-api-key"] == "key"
    assert out.headers["anthropic-version"] == "2023-06-01"
    assert "Authorization" not in out.headers


def test_ollama_body_nests_options_and_never_streams():
    req = _req(provider="ollama", temperature=0.5, max_tokens=12)
    body = build_body(req, stream=True)
    assert body["stream"] is False
    assert body["options"] == {"temperature": 0.5, "num_predict": 12}
    out = build_completion_request(req)
    assert out.headers == {"Accept": "application/json"}


def test_ollama_without_options():
    assert "options" not in build_body(_req(provider="ollama"), stream=False)


def test_probe_request_is_bodyless_get():
    out = build_probe_request(Provider.CLAUDE, "k", "https://proxy.test/v1")
    assert out.method == "GET"
    assert out.body is None
    assert out.url == "https://proxy.test/v1/models"
