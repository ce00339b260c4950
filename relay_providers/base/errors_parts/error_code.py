"""Failure categories shared by every relay error.

The string values appear as ``error_code`` in log events and in the CLI's
``--json`` error output, so they do not change between releases.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    # caller or credentials
    AUTH = "auth"
    VALIDATION = "validation"
    UNSUPPORTED = "unsupported"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    # upstream pressure or outages
    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    TRANSIENT = "transient"
    UNAVAILABLE = "unavailable"
    SERVER_ERROR = "server_error"
    # local
    CANCELLED = "cancelled"
    INTERNAL = "internal"
    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]
