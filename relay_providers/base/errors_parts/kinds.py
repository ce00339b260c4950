"""
Concrete error kinds surfaced by the gateway.

Each kind is a :class:`ProviderError` with a fixed shape:

- :class:`ApiError` - the provider answered with a non-2xx status.
- :class:`NetworkError` - the request never produced a response (timeout,
  refused connection, TLS or other transport failure). Its message is generic
  and never echoes the transport exception.
- :class:`InvalidInputError` - a request was rejected before any I/O.
- :class:`UnauthorizedError` - a credential store could not supply a secret.
- :class:`StreamCancelledError` - the caller cancelled a running stream.
"""
from __future__ import annotations

from typing import Optional

from ...config.defaults import ERROR_MESSAGE_MAX_CHARS
from .classification import RETRYABLE_CODES, code_for_status
from .error_code import ErrorCode
from .provider_error import ProviderError
from .redaction import sanitize_error_message


class ApiError(ProviderError):
    """Non-2xx HTTP response from a provider.

    Attributes:
        status: HTTP status code returned by the provider.
        body: Redacted response text capped to ``ERROR_MESSAGE_MAX_CHARS``.
    """

    def __init__(
        self,
        status: int,
        body: str = "",
        *,
        provider: str = "unknown",
        model: Optional[str] = None,
    ) -> None:
        self.status = int(status)
        self.body = sanitize_error_message(body, limit=ERROR_MESSAGE_MAX_CHARS)
        code = code_for_status(self.status)
        message = f"API error ({self.status})"
        if self.body:
            message = f"{message}: {self.body}"
        super().__init__(
            code=code,
            message=message,
            provider=provider,
            model=model,
            retryable=code in RETRYABLE_CODES,
        )


class NetworkError(ProviderError):
    """Transport-level failure; no HTTP response was received."""

    def __init__(
        self,
        message: str = "network request failed",
        *,
        code: ErrorCode = ErrorCode.TRANSIENT,
        provider: str = "unknown",
        model: Optional[str] = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            provider=provider,
            model=model,
            retryable=True,
        )


class InvalidInputError(ProviderError):
    """Malformed request shape, detected before any network call."""

    def __init__(self, message: str, *, provider: str = "unknown") -> None:
        super().__init__(code=ErrorCode.VALIDATION, message=message, provider=provider)


class UnauthorizedError(ProviderError):
    """Credential lookup failed in an external secret store."""

    def __init__(
        self,
        message: str = "authentication failed, check the API key",
        *,
        provider: str = "unknown",
    ) -> None:
        super().__init__(code=ErrorCode.AUTH, message=message, provider=provider)


class StreamCancelledError(ProviderError):
    """Raised when a stream observes a cancellation request."""

    def __init__(
        self,
        reason: Optional[str] = None,
        *,
        provider: str = "unknown",
        model: Optional[str] = None,
    ) -> None:
        self.reason = reason
        super().__init__(
            code=ErrorCode.CANCELLED,
            message=reason or "stream cancelled",
            provider=provider,
            model=model,
        )


__all__ = [
    "ApiError",
    "NetworkError",
    "InvalidInputError",
    "UnauthorizedError",
    "StreamCancelledError",
]
