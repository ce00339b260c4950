"""Streaming primitives: canonical events, the line framer and the normalizer."""

from .events import CanonicalEvent, DataEvent, TerminalEvent
from .framer import StreamFramer
from .metrics import StreamMetrics
from .normalizer import TERMINAL_SOURCE_EOF, TERMINAL_SOURCE_SENTINEL, StreamNormalizer

__all__ = [
    "CanonicalEvent",
    "DataEvent",
    "TerminalEvent",
    "StreamFramer",
    "StreamMetrics",
    "StreamNormalizer",
    "TERMINAL_SOURCE_EOF",
    "TERMINAL_SOURCE_SENTINEL",
]
