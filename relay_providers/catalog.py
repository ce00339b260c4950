"""Static provider knowledge: default base URL, default model and dialect.

Pure, total functions over the closed :class:`Provider` set. Configuration
overrides (environment, config file, per-request values) are layered on top
by :func:`resolve_base_url` and :func:`resolve_model`.
"""
from __future__ import annotations

from typing import Dict, Optional

from .base.models import Dialect, Provider
from .config import get_provider_config
from .config.defaults import (
    CLAUDE_DEFAULT_BASE_URL,
    CLAUDE_DEFAULT_MODEL,
    DEEPSEEK_DEFAULT_BASE_URL,
    DEEPSEEK_DEFAULT_MODEL,
    KIMI_DEFAULT_BASE_URL,
    KIMI_DEFAULT_MODEL,
    OLLAMA_DEFAULT_BASE_URL,
    OLLAMA_DEFAULT_MODEL,
    OPENAI_DEFAULT_BASE_URL,
    OPENAI_DEFAULT_MODEL,
    OPENROUTER_DEFAULT_BASE_URL,
    OPENROUTER_DEFAULT_MODEL,
)

_BASE_URLS: Dict[Provider, str] = {
    Provider.OPENAI: OPENAI_DEFAULT_BASE_URL,
    Provider.DEEPSEEK: DEEPSEEK_DEFAULT_BASE_URL,
    Provider.KIMI: KIMI_DEFAULT_BASE_URL,
    Provider.OPENROUTER: OPENROUTER_DEFAULT_BASE_URL,
    Provider.CLAUDE: CLAUDE_DEFAULT_BASE_URL,
    Provider.OLLAMA: OLLAMA_DEFAULT_BASE_URL,
}

_MODELS: Dict[Provider, str] = {
    Provider.OPENAI: OPENAI_DEFAULT_MODEL,
    Provider.DEEPSEEK: DEEPSEEK_DEFAULT_MODEL,
    Provider.KIMI: KIMI_DEFAULT_MODEL,
    Provider.OPENROUTER: OPENROUTER_DEFAULT_MODEL,
    Provider.CLAUDE: CLAUDE_DEFAULT_MODEL,
    Provider.OLLAMA: OLLAMA_DEFAULT_MODEL,
}

_DIALECTS: Dict[Provider, Dialect] = {
    Provider.OPENAI: Dialect.OPENAI_COMPAT,
    Provider.DEEPSEEK: Dialect.OPENAI_COMPAT,
    Provider.KIMI: Dialect.OPENAI_COMPAT,
    Provider.OPENROUTER: Dialect.OPENAI_COMPAT,
    Provider.CLAUDE: Dialect.CLAUDE,
    Provider.OLLAMA: Dialect.OLLAMA,
}

_DISPLAY_NAMES: Dict[Provider, str] = {
    Provider.OPENAI: "OpenAI",
    Provider.DEEPSEEK: "DeepSeek",
    Provider.KIMI: "Kimi",
    Provider.OPENROUTER: "OpenRouter",
    Provider.CLAUDE: "Claude",
    Provider.OLLAMA: "Ollama",
}


def default_base_url(provider: Provider) -> str:
    """Return the built-in base URL for ``provider``."""
    return _BASE_URLS[Provider.parse(provider)]


def default_model(provider: Provider) -> str:
    """Return the built-in model name for ``provider``."""
    return _MODELS[Provider.parse(provider)]


def dialect_for(provider: Provider) -> Dialect:
    """Return the wire dialect ``provider`` speaks."""
    return _DIALECTS[Provider.parse(provider)]


def display_name(provider: Provider) -> str:
    """Return the human-readable provider name used in confirmations."""
    return _DISPLAY_NAMES[Provider.parse(provider)]


def resolve_base_url(provider: Provider, override: Optional[str] = None) -> str:
    """Return the effective base URL: override, then configuration, then default."""
    if override and override.strip():
        return override.strip()
    configured = get_provider_config(provider.value).get("base_url")
    if isinstance(configured, str) and configured.strip():
        return configured.strip()
    return default_base_url(provider)


def resolve_model(provider: Provider, override: Optional[str] = None) -> str:
    """Return the effective model: override, then configuration, then default."""
    if override and override.strip():
        return override.strip()
    configured = get_provider_config(provider.value).get("model")
    if isinstance(configured, str) and configured.strip():
        return configured.strip()
    return default_model(provider)


__all__ = [
    "default_base_url",
    "default_model",
    "dialect_for",
    "display_name",
    "resolve_base_url",
    "resolve_model",
]
