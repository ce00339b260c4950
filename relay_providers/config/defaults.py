"""relay_providers.config.defaults
===============================

Central place for small, stable default values used across the
relay_providers package. These defaults can be overridden via environment
variables or external configuration, but provide sensible fallbacks for local
development and tests.

Module Purpose
--------------
- Provide a single import location for conservative default constants (no I/O).
- Keep the translator, probe and CLI free of magic literals.

This module intentionally avoids importing from other relay_providers modules
to prevent circular dependencies. Only plain constants live here.
"""

from __future__ import annotations

# ---- Provider base URLs (without the /v1 segment) ----
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com"
DEEPSEEK_DEFAULT_BASE_URL = "https://api.deepseek.com"
KIMI_DEFAULT_BASE_URL = "https://api.moonshot.cn"
OPENROUTER_DEFAULT_BASE_URL = "https://openrouter.ai/api"
CLAUDE_DEFAULT_BASE_URL = "https://api.anthropic.com"
OLLAMA_DEFAULT_BASE_URL = "http://127.0.0.1:11434"

# ---- Provider default models ----
OPENAI_DEFAULT_MODEL = "gpt-4o-mini"
DEEPSEEK_DEFAULT_MODEL = "deepseek-chat"
KIMI_DEFAULT_MODEL = "moonshot-v1-8k"
OPENROUTER_DEFAULT_MODEL = "openrouter/auto"
CLAUDE_DEFAULT_MODEL = "claude-3-5-sonnet-latest"
OLLAMA_DEFAULT_MODEL = "llama3"

# ---- Claude (Anthropic Messages API) ----
# Fixed API version header value sent with every Claude request.
CLAUDE_API_VERSION = "2023-06-01"
# The Messages API rejects requests without max_tokens.
CLAUDE_DEFAULT_MAX_TOKENS = 1024

# ---- OpenRouter informational headers ----
OPENROUTER_DEFAULT_REFERER = "https://github.com/"
OPENROUTER_DEFAULT_TITLE = "relay-providers"

# ---- Streaming ----
# Payload that ends an OpenAI-style event stream.
STREAM_DONE_SENTINEL = "[DONE]"
# Field prefix of an event-stream data line.
STREAM_DATA_PREFIX = "data:"

# ---- Error surfaces ----
# Maximum length of a sanitized error text shown to humans.
ERROR_MESSAGE_MAX_CHARS = 200

# ---- Timeouts (seconds) ----
HTTP_CONNECT_TIMEOUT_SECONDS = 10.0
HTTP_READ_TIMEOUT_SECONDS = 60.0
HTTP_WRITE_TIMEOUT_SECONDS = 30.0

# ---- CLI ----
CLI_DEFAULT_PROVIDER = "openai"


__all__ = [
    "OPENAI_DEFAULT_BASE_URL",
    "DEEPSEEK_DEFAULT_BASE_URL",
    "KIMI_DEFAULT_BASE_URL",
    "OPENROUTER_DEFAULT_BASE_URL",
    "CLAUDE_DEFAULT_BASE_URL",
    "OLLAMA_DEFAULT_BASE_URL",
    "OPENAI_DEFAULT_MODEL",
    "DEEPSEEK_DEFAULT_MODEL",
    "KIMI_DEFAULT_MODEL",
    "OPENROUTER_DEFAULT_MODEL",
    "CLAUDE_DEFAULT_MODEL",
    "OLLAMA_DEFAULT_MODEL",
    "CLAUDE_API_VERSION",
    "CLAUDE_DEFAULT_MAX_TOKENS",
    "OPENROUTER_DEFAULT_REFERER",
    "OPENROUTER_DEFAULT_TITLE",
    "STREAM_DONE_SENTINEL",
    "STREAM_DATA_PREFIX",
    "ERROR_MESSAGE_MAX_CHARS",
    "HTTP_CONNECT_TIMEOUT_SECONDS",
    "HTTP_READ_TIMEOUT_SECONDS",
    "HTTP_WRITE_TIMEOUT_SECONDS",
    "CLI_DEFAULT_PROVIDER",
]
