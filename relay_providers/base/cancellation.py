"""Cooperative cancellation for running streams.

A :class:`CancellationToken` is handed to ``iter_stream`` / ``complete_stream``
and may be cancelled from any thread. The relay checks it after every
upstream chunk; on observing cancellation it closes the connection and raises
:class:`~relay_providers.base.errors.StreamCancelledError`.
"""

from __future__ import annotations

import threading
from typing import Optional

from .errors import StreamCancelledError


class CancellationToken:
    """One-way cancellation flag carrying the reason given by the first ``cancel``."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._guard = threading.Lock()
        self._reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def cancel(self, reason: Optional[str] = None) -> None:
        with self._guard:
            if not self._event.is_set():
                self._reason = reason
                self._event.set()

    def raise_if_cancelled(self, *, provider: str = "unknown", model: Optional[str] = None) -> None:
        if self._event.is_set():
            raise StreamCancelledError(self._reason, provider=provider, model=model)

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.cancelled}, reason={self._reason!r})"


__all__ = ["CancellationToken"]
