"""Tests for the provider catalog and base URL / model resolution."""
from __future__ import annotations

import pytest

from relay_providers.base.models import Dialect, Provider
from relay_providers.catalog import (
    default_base_url,
    default_model,
    dialect_for,
    display_name,
    resolve_base_url,
    resolve_model,
)

EXPECTED = {
    Provider.OPENAI: ("https://api.openai.com", "gpt-4o-mini"),
    Provider.DEEPSEEK: ("https://api.deepseek.com", "deepseek-chat"),
    Provider.KIMI: ("https://api.moonshot.cn", "moonshot-v1-8k"),
    Provider.OPENROUTER: ("https://openrouter.ai/api", "openrouter/auto"),
    Provider.CLAUDE: ("https://api.anthropic.com", "claude-3-5-sonnet-latest"),
    Provider.OLLAMA: ("http://127.0.0.1:11434", "llama3"),
}


@pytest.mark.parametrize("provider", list(Provider))
def test_defaults_are_total_over_providers(provider):
    base, model = EXPECTED[provider]
    assert default_base_url(provider) == base
    assert default_model(provider) == model


def test_dialects():
    assert dialect_for(Provider.CLAUDE) is Dialect.CLAUDE
    assert dialect_for(Provider.OLLAMA) is Dialect.OLLAMA
    for p in (Provider.OPENAI, Provider.DEEPSEEK, Provider.KIMI, Provider.OPENROUTER):
        assert dialect_for(p) is Dialect.OPENAI_COMPAT


def test_display_names():
    assert display_name(Provider.OPENROUTER) == "OpenRouter"
    assert display_name(Provider.KIMI) == "Kimi"


def test_resolution_order_override_then_env_then_default(monkeypatch):
    assert resolve_base_url(Provider.OPENAI) == "https://api.openai.com"
    monkeypatch.setenv("OPENAI_BASE_URL", "https://proxy.internal")
    monkeypatch.setenv("OPENAI_MODEL", "gpt-4.1")
    assert resolve_base_url(Provider.OPENAI) == "https://proxy.internal"
    assert resolve_model(Provider.OPENAI) == "gpt-4.1"
    assert resolve_base_url(Provider.OPENAI, " https://override.local ") == "https://override.local"
    assert resolve_model(Provider.OPENAI, "gpt-4o") == "gpt-4o"


def test_blank_override_falls_back():
    assert resolve_model(Provider.DEEPSEEK, "   ") == "deepseek-chat"
