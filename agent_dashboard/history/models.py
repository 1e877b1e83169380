"""
Data models for the history store.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any


def now_ms() -> int:
    """Current wall-clock time in integer milliseconds since the epoch."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class HistoryPoint:
    """One sample of a named series: {timestamp (ms since epoch), value}."""

    timestamp: int
    value: float

    @classmethod
    def from_dict(cls, item: Any) -> "HistoryPoint | None":
        """Build from a persisted {timestamp, value} object; None if malformed."""
        if not isinstance(item, dict):
            return None
        ts = item.get("timestamp")
        value = item.get("value")
        if isinstance(ts, bool) or not isinstance(ts, (int, float)):
            return None
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        return cls(timestamp=int(ts), value=value)

    def to_dict(self) -> dict[str, Any]:
        return {"timestamp": self.timestamp, "value": self.value}
