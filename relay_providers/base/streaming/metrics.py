"""Per-stream timing and emission counters."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class StreamMetrics:
    """Collected metrics for a single relayed stream.

    ``emitted`` counts data events only; the terminal event is not included.
    """

    emitted: int = 0
    time_to_first_event_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None
    _started: float = field(default_factory=time.perf_counter, repr=False)

    def record_event(self) -> None:
        if self.time_to_first_event_ms is None:
            self.time_to_first_event_ms = self._elapsed_ms()
        self.emitted += 1

    def finish(self) -> None:
        self.total_duration_ms = self._elapsed_ms()

    def _elapsed_ms(self) -> float:
        return round((time.perf_counter() - self._started) * 1000.0, 3)

    def to_fields(self) -> Dict[str, Any]:
        return {
            "emitted_count": self.emitted,
            "time_to_first_event_ms": self.time_to_first_event_ms,
            "total_duration_ms": self.total_duration_ms,
        }


__all__ = ["StreamMetrics"]
