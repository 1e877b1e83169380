"""
Throttled sampler: records a polled value into the history store at most once
per interval, so a source polled on every dashboard refresh is stored hourly.

Only the last stored point of the series is compared, not a sliding window.
"""

from __future__ import annotations

from agent_dashboard.dashboard_logging import get_logger
from agent_dashboard.history.models import now_ms
from agent_dashboard.history.store import HistoryStore

logger = get_logger(__name__)

DEFAULT_MIN_INTERVAL_MS = 60 * 60 * 1000


class ThrottledSampler:
    """Decides whether an observation is recorded, then appends it."""

    def __init__(self, store: HistoryStore, *, min_interval_ms: int = DEFAULT_MIN_INTERVAL_MS) -> None:
        self._store = store
        self._min_interval_ms = min_interval_ms

    @property
    def store(self) -> HistoryStore:
        return self._store

    def maybe_sample(
        self,
        key: str,
        value: float,
        at_ms: int | None = None,
        min_interval_ms: int | None = None,
    ) -> bool:
        """
        Append value to series key when the series is empty or its last point is
        older than at_ms - min_interval_ms. Returns True when a point was written.

        The check and the append run under the store lock, so two samples for the
        same window cannot both pass the check.
        """
        at_ms = now_ms() if at_ms is None else int(at_ms)
        interval = self._min_interval_ms if min_interval_ms is None else min_interval_ms
        with self._store.lock:
            last = self._store.last_point(key)
            if last is not None and last.timestamp >= at_ms - interval:
                logger.debug(
                    "history_sample_throttled",
                    key=key,
                    last_timestamp=last.timestamp,
                    timestamp=at_ms,
                )
                return False
            self._store.append_point(key, value, at_ms)
        return True
