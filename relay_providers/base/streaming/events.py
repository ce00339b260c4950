"""Canonical stream events.

Only two kinds ever cross the relay's output boundary:

- :class:`DataEvent` carries one payload string in arrival order.
- :class:`TerminalEvent` marks the end of a stream. Exactly one is emitted per
  successful or gracefully ended stream and it is always the last event.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class DataEvent:
    """One payload-bearing event.

    Fields:
      payload: for SSE dialects the canonical ``data: <payload>`` form, or a
               non-data frame forwarded verbatim; for Ollama the raw text.
    """

    payload: str

    @property
    def is_terminal(self) -> bool:
        return False


@dataclass(frozen=True)
class TerminalEvent:
    """End-of-stream marker."""

    @property
    def is_terminal(self) -> bool:
        return True


CanonicalEvent = Union[DataEvent, TerminalEvent]


__all__ = ["DataEvent", "TerminalEvent", "CanonicalEvent"]
