"""
Durable store of named scalar time series, persisted as one JSON snapshot.

Snapshot format: {"<series>": [{"timestamp": <ms>, "value": <number>}, ...], ...}
with default {"wallet": [], "trust": []}. Series are created lazily on first
write and every write evicts points older than the retention window.

load() never fails visibly: a missing, unreadable or corrupt snapshot reads as
the default mapping and is overwritten by the next write. save() replaces the
file atomically (temp file in the same directory + os.replace), so a reader
never observes a partial snapshot.

Each append is a read-modify-write of the whole mapping, so writers for
different keys must still serialise; the store-wide re-entrant lock does that
and is shared with ThrottledSampler for its check-then-append.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any

from agent_dashboard.dashboard_logging import get_logger
from agent_dashboard.history.models import HistoryPoint, now_ms

logger = get_logger(__name__)

RETENTION_MS = 7 * 24 * 60 * 60 * 1000
DEFAULT_SERIES = ("wallet", "trust")

HistoryMapping = dict[str, list[HistoryPoint]]


def default_history() -> HistoryMapping:
    return {key: [] for key in DEFAULT_SERIES}


class HistoryStore:
    """JSON-file backed history of scalar series with a fixed retention window."""

    def __init__(self, path: str | Path, *, retention_ms: int = RETENTION_MS) -> None:
        self._path = Path(path)
        self._retention_ms = retention_ms
        self._lock = threading.RLock()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def retention_ms(self) -> int:
        return self._retention_ms

    @property
    def lock(self) -> threading.RLock:
        """Store-wide write lock; hold it across any check-then-append sequence."""
        return self._lock

    def load(self) -> HistoryMapping:
        """Return the persisted mapping, or the default mapping if none is readable."""
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return default_history()
        except OSError as e:
            logger.warning("history_read_failed", path=str(self._path), error=str(e))
            return default_history()
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, TypeError, ValueError) as e:
            logger.warning("history_corrupt", path=str(self._path), error=str(e))
            return default_history()
        if not isinstance(data, dict):
            logger.warning("history_corrupt", path=str(self._path), error="snapshot is not an object")
            return default_history()

        history: HistoryMapping = {}
        for key, items in data.items():
            if not isinstance(items, list):
                logger.warning("history_series_skipped", key=key, reason="not_a_list")
                continue
            points = [p for p in (HistoryPoint.from_dict(item) for item in items) if p is not None]
            if len(points) != len(items):
                logger.warning(
                    "history_points_skipped",
                    key=key,
                    skipped=len(items) - len(points),
                )
            history[str(key)] = points
        return history

    def save(self, history: HistoryMapping) -> None:
        """Atomically overwrite the snapshot with the full mapping."""
        payload: dict[str, Any] = {
            key: [p.to_dict() for p in points] for key, points in history.items()
        }
        directory = self._path.parent
        directory.mkdir(parents=True, exist_ok=True)
        with self._lock:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=directory
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(payload, f, indent=2)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, self._path)
            except BaseException:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
                raise

    def series(self, key: str) -> list[HistoryPoint]:
        return list(self.load().get(key, []))

    def last_point(self, key: str) -> HistoryPoint | None:
        """Most recently appended point of a series, or None."""
        points = self.load().get(key) or []
        return points[-1] if points else None

    def append_point(self, key: str, value: float, at_ms: int | None = None) -> HistoryPoint:
        """
        Append {timestamp: at_ms, value} to series key (created if absent), evict
        every point with timestamp <= at_ms - retention, and persist the mapping.
        """
        at_ms = now_ms() if at_ms is None else int(at_ms)
        cutoff = at_ms - self._retention_ms
        point = HistoryPoint(timestamp=at_ms, value=value)
        with self._lock:
            history = self.load()
            history.setdefault(key, []).append(point)
            evicted = 0
            for series_key, points in history.items():
                kept = [p for p in points if p.timestamp > cutoff]
                evicted += len(points) - len(kept)
                history[series_key] = kept
            self.save(history)
        logger.info(
            "history_point_appended",
            key=key,
            value=value,
            timestamp=at_ms,
            evicted=evicted,
        )
        return point

    def to_json(self) -> dict[str, list[dict[str, Any]]]:
        """Full mapping as JSON-ready data (GET /api/history)."""
        return {key: [p.to_dict() for p in points] for key, points in self.load().items()}
