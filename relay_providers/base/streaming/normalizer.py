"""Frame classifier producing canonical events.

State machine: ``open -> (data)* -> done``. Once ``done`` no further event is
produced, so at most one :class:`TerminalEvent` exists per stream and it is
always last.
"""

from __future__ import annotations

from typing import Optional

from ...config.defaults import STREAM_DATA_PREFIX, STREAM_DONE_SENTINEL
from .events import CanonicalEvent, DataEvent, TerminalEvent

TERMINAL_SOURCE_SENTINEL = "sentinel"
TERMINAL_SOURCE_EOF = "eof"


class StreamNormalizer:
    """Classify frames from :class:`StreamFramer` into canonical events."""

    def __init__(self) -> None:
        self._done = False
        self.terminal_source: Optional[str] = None

    @property
    def done(self) -> bool:
        return self._done

    def feed(self, frame: str) -> Optional[CanonicalEvent]:
        """Return the event for ``frame`` or ``None`` when nothing is emitted.

        ``data: [DONE]`` yields the terminal event; every frame after it is
        ignored.
        """
        if self._done:
            return None
        frame = frame.strip()
        if not frame:
            return None
        if frame.startswith(STREAM_DATA_PREFIX):
            payload = frame[len(STREAM_DATA_PREFIX) :].strip()
            if payload == STREAM_DONE_SENTINEL:
                return self._terminate(TERMINAL_SOURCE_SENTINEL)
            return DataEvent(f"{STREAM_DATA_PREFIX} {payload}")
        # event:, id:, comments and other control lines pass through untouched
        return DataEvent(frame)

    def finish(self) -> Optional[TerminalEvent]:
        """Synthesize the terminal event for a body that ended without the sentinel."""
        if self._done:
            return None
        return self._terminate(TERMINAL_SOURCE_EOF)

    def _terminate(self, source: str) -> TerminalEvent:
        self._done = True
        self.terminal_source = source
        return TerminalEvent()


__all__ = [
    "StreamNormalizer",
    "TERMINAL_SOURCE_SENTINEL",
    "TERMINAL_SOURCE_EOF",
]
