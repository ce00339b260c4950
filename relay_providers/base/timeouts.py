"""Unified timeout configuration for the relay's HTTP transport.

Timeouts are the responsibility of the HTTP transport (``httpx``); this module
only centralizes the values so no call site carries ad-hoc numeric literals.
A timeout observed by the transport surfaces as a ``NetworkError`` with code
``timeout``.

get_timeout_config()
    Returns a process-cached configuration, parsing environment overrides on
    first use and whenever the relevant variables change. Supported
    environment variables (all optional, positive floats):
        RELAY_TIMEOUT_CONNECT_SECONDS
        RELAY_TIMEOUT_READ_SECONDS
        RELAY_TIMEOUT_WRITE_SECONDS
"""
from __future__ import annotations

import os
from dataclasses import dataclass

import httpx

from ..config.defaults import (
    HTTP_CONNECT_TIMEOUT_SECONDS,
    HTTP_READ_TIMEOUT_SECONDS,
    HTTP_WRITE_TIMEOUT_SECONDS,
)

_ENV_VARS = (
    "RELAY_TIMEOUT_CONNECT_SECONDS",
    "RELAY_TIMEOUT_READ_SECONDS",
    "RELAY_TIMEOUT_WRITE_SECONDS",
)


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        connect_timeout_seconds: Time allowed to establish the TCP/TLS connection.
        read_timeout_seconds: Maximum gap between two received chunks. For a
            stream this is the idle allowance between events, not a cap on
            the whole stream.
        write_timeout_seconds: Time allowed to send the request body.
    """

    connect_timeout_seconds: float = HTTP_CONNECT_TIMEOUT_SECONDS
    read_timeout_seconds: float = HTTP_READ_TIMEOUT_SECONDS
    write_timeout_seconds: float = HTTP_WRITE_TIMEOUT_SECONDS

    def to_httpx(self) -> httpx.Timeout:
        """Return the equivalent ``httpx.Timeout``."""
        return httpx.Timeout(
            self.read_timeout_seconds,
            connect=self.connect_timeout_seconds,
            read=self.read_timeout_seconds,
            write=self.write_timeout_seconds,
        )


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Parse a positive float from the environment, falling back to ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = "/".join(os.getenv(name, "") for name in _ENV_VARS)
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED
    _CACHED = TimeoutConfig(
        connect_timeout_seconds=_parse_env_float(_ENV_VARS[0], HTTP_CONNECT_TIMEOUT_SECONDS),
        read_timeout_seconds=_parse_env_float(_ENV_VARS[1], HTTP_READ_TIMEOUT_SECONDS),
        write_timeout_seconds=_parse_env_float(_ENV_VARS[2], HTTP_WRITE_TIMEOUT_SECONDS),
    )
    _ENV_GUARD = guard
    return _CACHED


__all__ = ["TimeoutConfig", "get_timeout_config"]
