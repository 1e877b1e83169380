"""
Tests for the throttled sampler: first sample, throttling inside the interval,
sampling once the interval has passed, and serialised concurrent samples.
"""

from __future__ import annotations

import threading

from agent_dashboard.history.models import HistoryPoint
from agent_dashboard.history.sampler import ThrottledSampler

HOUR_MS = 60 * 60 * 1000


def test_first_sample_is_written(sampler, history_store):
    assert sampler.maybe_sample("wallet", 2100, 1_000) is True
    assert history_store.series("wallet") == [HistoryPoint(timestamp=1_000, value=2100)]


def test_trust_scenario_throttles_then_samples(sampler, history_store):
    """Point at t=0 blocks a sample at t=1000 but not at t=3_700_000."""
    history_store.append_point("trust", 50, 0)

    assert sampler.maybe_sample("trust", 60, 1_000, min_interval_ms=3_600_000) is False
    assert history_store.series("trust") == [HistoryPoint(timestamp=0, value=50)]

    assert sampler.maybe_sample("trust", 60, 3_700_000, min_interval_ms=3_600_000) is True
    assert history_store.series("trust") == [
        HistoryPoint(timestamp=0, value=50),
        HistoryPoint(timestamp=3_700_000, value=60),
    ]


def test_same_timestamp_twice_stores_one_point(sampler, history_store):
    sampler.maybe_sample("wallet", 10, 5_000)
    sampler.maybe_sample("wallet", 11, 5_000)
    assert history_store.series("wallet") == [HistoryPoint(timestamp=5_000, value=10)]


def test_boundary_exactly_one_interval_is_throttled(sampler, history_store):
    history_store.append_point("wallet", 1, 0)
    # last.timestamp < now - interval is required; equality does not sample
    assert sampler.maybe_sample("wallet", 2, HOUR_MS) is False
    assert sampler.maybe_sample("wallet", 2, HOUR_MS + 1) is True


def test_keys_are_throttled_independently(sampler, history_store):
    assert sampler.maybe_sample("wallet", 1, 1_000) is True
    assert sampler.maybe_sample("trust", 2, 1_000) is True
    assert len(history_store.series("wallet")) == 1
    assert len(history_store.series("trust")) == 1


def test_default_interval_from_constructor(history_store):
    sampler = ThrottledSampler(history_store, min_interval_ms=10)
    assert sampler.maybe_sample("wallet", 1, 100) is True
    assert sampler.maybe_sample("wallet", 2, 105) is False
    assert sampler.maybe_sample("wallet", 3, 111) is True


def test_concurrent_samples_write_once_per_window(sampler, history_store):
    """Threads sampling the same window: exactly one point; other keys not lost."""
    barrier = threading.Barrier(8)

    def worker(i: int) -> None:
        barrier.wait()
        sampler.maybe_sample("wallet", i, 10_000)
        sampler.maybe_sample(f"series-{i}", i, 10_000)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    history = history_store.load()
    assert len(history["wallet"]) == 1
    for i in range(8):
        assert history[f"series-{i}"] == [HistoryPoint(timestamp=10_000, value=i)]
