"""Per-provider settings: default model, base URL and OpenRouter headers.

Values are layered, later layers winning:

1. the built-in table in :mod:`relay_providers.config.defaults`
2. the file named by ``RELAY_PROVIDERS_CONFIG_FILE`` (JSON, or YAML when it
   does not parse as JSON), keyed by provider
3. ``<PROVIDER>_MODEL`` / ``<PROVIDER>_BASE_URL`` in the environment, plus
   ``OPENROUTER_REFERER`` and ``OPENROUTER_TITLE``
4. the ``overrides`` mapping handed to :func:`get_provider_config`

A ``.env`` file (``DOTENV_FILE`` or ``./.env``) is read once; it only fills
variables that are unset or hold a placeholder. Example config file::

    openai:
      model: gpt-4o
    ollama:
      base_url: http://gpu-box:11434
    openrouter:
      title: my-editor

API keys are not part of this layer; see :mod:`relay_providers.config.env`.
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from .defaults import (
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
    OPENROUTER_DEFAULT_REFERER,
    OPENROUTER_DEFAULT_TITLE,
)
from .env import is_placeholder

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "openai": {"model": OPENAI_DEFAULT_MODEL, "base_url": OPENAI_DEFAULT_BASE_URL},
    "deepseek": {"model": DEEPSEEK_DEFAULT_MODEL, "base_url": DEEPSEEK_DEFAULT_BASE_URL},
    "kimi": {"model": KIMI_DEFAULT_MODEL, "base_url": KIMI_DEFAULT_BASE_URL},
    "openrouter": {
        "model": OPENROUTER_DEFAULT_MODEL,
        "base_url": OPENROUTER_DEFAULT_BASE_URL,
        "referer": OPENROUTER_DEFAULT_REFERER,
        "title": OPENROUTER_DEFAULT_TITLE,
    },
    "claude": {"model": CLAUDE_DEFAULT_MODEL, "base_url": CLAUDE_DEFAULT_BASE_URL},
    "ollama": {"model": OLLAMA_DEFAULT_MODEL, "base_url": OLLAMA_DEFAULT_BASE_URL},
}

# config field -> env var suffix, e.g. base_url -> OLLAMA_BASE_URL
ENV_FIELD_MAP: Dict[str, str] = {
    "model": "MODEL",
    "base_url": "BASE_URL",
    "referer": "REFERER",
    "title": "TITLE",
}

_state: Dict[str, Any] = {"file": None, "dotenv_done": False}


def _parse_dotenv_line(line: str) -> Optional[Tuple[str, str]]:
    line = line.strip()
    if not line or line.startswith("#") or "=" not in line:
        return None
    key, value = line.split("=", 1)
    key = key.strip()
    if key.startswith("export "):
        key = key[len("export ") :].strip()
    return (key, value.strip().strip("'\"")) if key else None


def _load_dotenv_once() -> None:
    """Copy ``KEY=VALUE`` pairs from ``$DOTENV_FILE`` (default ``.env``) into the environment.

    Runs once per cache lifetime. A variable already set wins unless its value
    is a placeholder.
    """
    if _state["dotenv_done"]:
        return
    _state["dotenv_done"] = True
    path = Path(os.getenv("DOTENV_FILE", ".env"))
    if not path.is_file():
        return
    for raw in path.read_text(encoding="utf-8").splitlines():
        pair = _parse_dotenv_line(raw)
        if pair is None:
            continue
        key, value = pair
        if key not in os.environ or is_placeholder(os.environ[key]):
            os.environ[key] = value


def _parse_config_text(text: str) -> Dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError:
            return {}
    return data if isinstance(data, dict) else {}


def _load_external_config() -> Dict[str, Any]:
    cached = _state["file"]
    if cached is not None:
        return cached
    location = os.getenv("RELAY_PROVIDERS_CONFIG_FILE")
    path = Path(location) if location else None
    data = _parse_config_text(path.read_text(encoding="utf-8")) if path and path.is_file() else {}
    _state["file"] = data
    return data


def _env_overrides(provider: str) -> Dict[str, Any]:
    prefix = provider.upper()
    out: Dict[str, Any] = {}
    for field, suffix in ENV_FIELD_MAP.items():
        value = (os.getenv(f"{prefix}_{suffix}") or "").strip()
        if value:
            out[field] = value
    return out


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged configuration for a provider.

    Merge order (later wins): defaults -> external config -> env vars -> overrides.
    ``None`` values in ``overrides`` are ignored.
    """
    _load_dotenv_once()
    name = (provider or "").strip().lower()
    merged: Dict[str, Any] = dict(DEFAULTS.get(name, {}))
    from_file = _load_external_config().get(name)
    if isinstance(from_file, dict):
        merged.update(from_file)
    merged.update(_env_overrides(name))
    merged.update({k: v for k, v in (overrides or {}).items() if v is not None})
    return merged


def get_model(provider: str) -> Optional[str]:
    return get_provider_config(provider).get("model")


def reset_config_cache() -> None:
    """Forget the cached config file and ``.env`` state (used by tests)."""
    _state["file"] = None
    _state["dotenv_done"] = False


__all__ = [
    "DEFAULTS",
    "ENV_FIELD_MAP",
    "get_provider_config",
    "get_model",
    "reset_config_cache",
]
