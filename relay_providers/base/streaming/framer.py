"""Incremental line framer for streamed response bodies.

Purpose:
    Turn byte chunks with arbitrary boundaries into complete logical lines
    ("frames"). A chunk may end mid-line, mid-field or mid-character; the
    framer holds the unterminated tail until a later chunk supplies the line
    feed.

Behavior:
    - Bytes are decoded with an incremental UTF-8 decoder (``errors="replace"``)
      so a multi-byte character split across chunks decodes intact and invalid
      sequences never raise.
    - Each line is cut at ``\\n``; surrounding whitespace (including a trailing
      ``\\r``) is stripped.
    - Blank frames are dropped.
    - Text left without a line feed when the body ends is discarded by
      :meth:`StreamFramer.close`.

The framer performs no I/O and holds no external resources.
"""

from __future__ import annotations

import codecs
from typing import List


class StreamFramer:
    """Stateful ``bytes -> frames`` splitter for one stream."""

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self._closed = False

    @property
    def pending(self) -> str:
        """Unterminated text held since the last line feed."""
        return self._buffer

    def feed(self, chunk: bytes) -> List[str]:
        """Append ``chunk`` and return every frame it completes, in order."""
        if self._closed:
            raise RuntimeError("framer is closed")
        self._buffer += self._decoder.decode(chunk)
        frames: List[str] = []
        while True:
            idx = self._buffer.find("\n")
            if idx < 0:
                break
            line = self._buffer[:idx].strip()
            self._buffer = self._buffer[idx + 1 :]
            if line:
                frames.append(line)
        return frames

    def close(self) -> int:
        """Flush the decoder, discard the unterminated tail and return its length."""
        if self._closed:
            return 0
        self._closed = True
        tail = self._buffer + self._decoder.decode(b"", final=True)
        self._buffer = ""
        return len(tail)


__all__ = ["StreamFramer"]
