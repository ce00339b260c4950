"""Root exception of the relay.

Every failure surfaced by translation, execution, streaming or probing is a
``ProviderError`` subclass tagged with an :class:`ErrorCode`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode
from .redaction import sanitize_error_message


@dataclass
class ProviderError(Exception):
    """A categorized failure.

    ``message`` is passed through secret redaction when the error is built,
    so ``str(err)`` and ``err.args`` can be logged or printed as they are.
    ``retryable`` only informs callers; the relay never retries on its own.
    """

    code: ErrorCode
    message: str
    provider: str = "unknown"
    model: Optional[str] = None
    retryable: bool = False

    def __post_init__(self) -> None:
        self.message = sanitize_error_message(self.message, limit=None)
        self.args = (self.message,)

    def __str__(self) -> str:
        return f"{self.provider}:{self.model or '-'} {self.code.value}: {self.message}"


__all__ = ["ProviderError"]
