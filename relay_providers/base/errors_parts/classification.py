"""
Map HTTP statuses and raised exceptions onto :class:`ErrorCode`.

``code_for_status`` is what the executor, streaming relay and probe use to
tag an ``ApiError``. ``classify_exception`` is the catch-all used when some
other exception escapes (an httpx transport failure, a timeout, or anything
carrying a ``status_code``).
"""
from __future__ import annotations

import asyncio
from typing import Mapping, Optional, Tuple

import httpx

from .error_code import ErrorCode
from .provider_error import ProviderError

_STATUS_CODES: Mapping[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    409: ErrorCode.CONFLICT,
    422: ErrorCode.VALIDATION,
    429: ErrorCode.RATE_LIMIT,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.TRANSIENT,
    503: ErrorCode.UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
}

RETRYABLE_CODES = frozenset(
    {ErrorCode.TRANSIENT, ErrorCode.RATE_LIMIT, ErrorCode.TIMEOUT, ErrorCode.UNAVAILABLE}
)

# first match wins; "rate" + "limit" is handled before this table
_MESSAGE_HINTS: Tuple[Tuple[str, ErrorCode], ...] = (
    ("timeout", ErrorCode.TIMEOUT),
    ("timed out", ErrorCode.TIMEOUT),
    ("unauthorized", ErrorCode.AUTH),
    ("forbidden", ErrorCode.AUTH),
    ("api key", ErrorCode.AUTH),
    ("connection refused", ErrorCode.UNAVAILABLE),
    ("unavailable", ErrorCode.UNAVAILABLE),
    ("not found", ErrorCode.NOT_FOUND),
    ("invalid", ErrorCode.VALIDATION),
    ("malformed", ErrorCode.VALIDATION),
)


def code_for_status(status: int) -> ErrorCode:
    """Return the error code for an HTTP status.

    Statuses without an explicit entry fall back by class: any other 4xx is
    ``VALIDATION``, any other 5xx ``SERVER_ERROR``, everything else ``UNKNOWN``.
    """
    known = _STATUS_CODES.get(status)
    if known is not None:
        return known
    family = status // 100
    if family == 4:
        return ErrorCode.VALIDATION
    if family == 5:
        return ErrorCode.SERVER_ERROR
    return ErrorCode.UNKNOWN


def _valid_status(value: object) -> Optional[int]:
    return value if isinstance(value, int) and 100 <= value < 600 else None


def status_of(exc: BaseException) -> Optional[int]:
    """Find an HTTP status on ``exc`` (``status_code``, ``status`` or ``response.status_code``)."""
    found = _valid_status(getattr(exc, "status_code", None)) or _valid_status(getattr(exc, "status", None))
    if found is None:
        found = _valid_status(getattr(getattr(exc, "response", None), "status_code", None))
    return found


def _code_from_text(text: str) -> ErrorCode:
    lowered = text.lower()
    if "rate" in lowered and "limit" in lowered:
        return ErrorCode.RATE_LIMIT
    return next((code for hint, code in _MESSAGE_HINTS if hint in lowered), ErrorCode.UNKNOWN)


def classify_exception(exc: BaseException) -> ErrorCode:
    """Pick an :class:`ErrorCode` for ``exc``.

    A ``ProviderError`` keeps its own code. Timeouts and connection failures
    are recognized by type, then an attached HTTP status decides, then any
    remaining httpx transport failure counts as transient. Only after all of
    that is the message text consulted.
    """
    if isinstance(exc, ProviderError):
        return exc.code
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError, httpx.TimeoutException)):
        return ErrorCode.TIMEOUT
    if isinstance(exc, httpx.ConnectError):
        return ErrorCode.UNAVAILABLE
    status = status_of(exc)
    if status is not None:
        return code_for_status(status)
    if isinstance(exc, httpx.TransportError):
        return ErrorCode.TRANSIENT
    return _code_from_text(str(exc))


__all__ = [
    "classify_exception",
    "code_for_status",
    "status_of",
    "RETRYABLE_CODES",
]
