"""Per-call logging context.

One :class:`LogContext` is built per relay call and attached to every event
it emits. It never holds credentials.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    provider: Optional[str] = None
    model: Optional[str] = None
    dialect: Optional[str] = None
    url: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Flatten into event fields; ``extra`` keys merge in and ``None`` values are dropped."""
        out = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "extra"}
        out.update(self.extra or {})
        return {key: value for key, value in out.items() if value is not None}


__all__ = ["LogContext"]
