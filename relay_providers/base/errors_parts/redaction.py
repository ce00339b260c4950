"""
Credential redaction for human-visible error text.

Upstream error bodies and transport messages may echo the credentials that
were sent (bearer tokens, ``sk-`` keys, ``Authorization:`` headers). Every
error message built by this package passes through
:func:`sanitize_error_message` before it reaches a log line, a CLI or a
caller.
"""
from __future__ import annotations

import re
from typing import Optional, Pattern, Tuple

from ...config.defaults import ERROR_MESSAGE_MAX_CHARS

_ELLIPSIS = "..."

# Applied in order; the key/value pattern runs first so "Authorization: <scheme> x"
# collapses into a single marker.
_PATTERNS: Tuple[Tuple[Pattern[str], str], ...] = (
    (re.compile(r"(api[_-]?key|token|authorization)[:\s=]+(?:(?:bearer|basic|token)\s+)?\S+", re.IGNORECASE), "[REDACTED]"),
    (re.compile(r"Bearer\s+\S+", re.IGNORECASE), "Bearer [REDACTED]"),
    (re.compile(r"sk-[a-zA-Z0-9_\-]+"), "[REDACTED]"),
)


def redact_secrets(text: str) -> str:
    """Return ``text`` with credential-shaped substrings replaced."""
    result = text
    for pattern, replacement in _PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def sanitize_error_message(text: Optional[str], limit: Optional[int] = ERROR_MESSAGE_MAX_CHARS) -> str:
    """Redact secrets and cap the length of an error text.

    Parameters:
        text: Raw message or response body; ``None`` yields an empty string.
        limit: Maximum length of the result including the trailing ``...``
            marker. ``None`` disables truncation.

    Returns:
        The redacted text, truncated to ``limit - 3`` characters plus ``...``
        when it was longer than ``limit``.
    """
    if not text:
        return ""
    result = redact_secrets(text)
    if limit is not None and len(result) > limit:
        result = result[: max(limit - len(_ELLIPSIS), 0)] + _ELLIPSIS
    return result


__all__ = ["redact_secrets", "sanitize_error_message"]
