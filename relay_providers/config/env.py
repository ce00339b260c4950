"""relay_providers.config.env
==========================

Where provider API keys live in the process environment.

Each credentialed provider has an ordered tuple of variable names; the first
is canonical and wins when several are set (``MOONSHOT_API_KEY`` before
``KIMI_API_KEY``, ``ANTHROPIC_API_KEY`` before ``CLAUDE_API_KEY``). Ollama is a
local daemon and has none.

Only the CLI consults these helpers. Library entry points take keys as
explicit arguments and never read them from the environment.
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, Optional, Tuple

_KEY_VARS: Dict[str, Tuple[str, ...]] = {
    "openai": ("OPENAI_API_KEY",),
    "deepseek": ("DEEPSEEK_API_KEY",),
    "kimi": ("MOONSHOT_API_KEY", "KIMI_API_KEY"),
    "openrouter": ("OPENROUTER_API_KEY",),
    "claude": ("ANTHROPIC_API_KEY", "CLAUDE_API_KEY"),
}

# provider -> canonical variable
ENV_MAP: Dict[str, str] = {p: names[0] for p, names in _KEY_VARS.items()}

# providers accepting more than one variable, canonical first
ENV_ALIASES: Dict[str, Tuple[str, ...]] = {p: names for p, names in _KEY_VARS.items() if len(names) > 1}

_PLACEHOLDER_MARKERS = ("placeholder", "changeme", "example", "your_api_key", "your-api-key")


def is_placeholder(val: Optional[str]) -> bool:
    """Whether ``val`` looks like a template value rather than a real key.

    Case-insensitive; ``test_`` prefixes and markers such as ``changeme``
    count as placeholders.
    """
    if val is None:
        return False
    lowered = str(val).strip().lower()
    return lowered.startswith("test_") or any(marker in lowered for marker in _PLACEHOLDER_MARKERS)


def get_env_var_name(provider: str) -> Optional[str]:
    return ENV_MAP.get(provider.strip().lower()) if provider else None


def get_env_var_candidates(provider: str) -> Iterable[str]:
    """Yield the variable names for ``provider`` in precedence order."""
    yield from _KEY_VARS.get((provider or "").strip().lower(), ())


def resolve_provider_key(provider: str) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(value, variable)`` for the first non-empty candidate, else ``(None, None)``."""
    for name in get_env_var_candidates(provider):
        value = os.environ.get(name)
        if value:
            return value, name
    return None, None


__all__ = [
    "ENV_MAP",
    "ENV_ALIASES",
    "is_placeholder",
    "get_env_var_name",
    "get_env_var_candidates",
    "resolve_provider_key",
]
