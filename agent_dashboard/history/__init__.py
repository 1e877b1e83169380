"""
Retained scalar time series and the hourly sampler.
"""

from agent_dashboard.history.models import HistoryPoint
from agent_dashboard.history.sampler import ThrottledSampler
from agent_dashboard.history.store import DEFAULT_SERIES, RETENTION_MS, HistoryStore

__all__ = [
    "DEFAULT_SERIES",
    "RETENTION_MS",
    "HistoryPoint",
    "HistoryStore",
    "ThrottledSampler",
]
