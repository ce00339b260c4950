"""Unified provider error taxonomy public surface.

This module re-exports the implementations under
``relay_providers.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import ProviderError
from .errors_parts.classification import classify_exception, code_for_status
from .errors_parts.kinds import (
    ApiError,
    InvalidInputError,
    NetworkError,
    StreamCancelledError,
    UnauthorizedError,
)
from .errors_parts.redaction import redact_secrets, sanitize_error_message

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
