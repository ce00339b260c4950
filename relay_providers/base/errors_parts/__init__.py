"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `relay_providers.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import ProviderError
from .classification import classify_exception, code_for_status
from .kinds import (
    ApiError,
    InvalidInputError,
    NetworkError,
    StreamCancelledError,
    UnauthorizedError,
)
from .redaction import redact_secrets, sanitize_error_message

__all__ = [
    "ErrorCode",
    "ProviderError",
    "classify_exception",
    "code_for_status",
    "ApiError",
    "InvalidInputError",
    "NetworkError",
    "StreamCancelledError",
    "UnauthorizedError",
    "redact_secrets",
    "sanitize_error_message",
]
