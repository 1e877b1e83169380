"""
Tests for DVM result summaries and content previews.
"""

from __future__ import annotations

from agent_dashboard.nostr.dvm import content_preview, dvm_filters, summarize_dvm_results
from agent_dashboard.nostr.models import RawEvent
from fakes import AGENT_PUBKEY, make_event


def test_preview_short_content_unchanged():
    assert content_preview("hello") == "hello"
    assert content_preview("x" * 100) == "x" * 100


def test_preview_truncates_long_content():
    preview = content_preview("y" * 150)
    assert preview == "y" * 100 + "…"


def test_summarize_results_in_delivery_order():
    events = [
        RawEvent.from_dict(make_event("r1", pubkey=AGENT_PUBKEY, created_at=5, content="short", kind=6050)),
        RawEvent.from_dict(make_event("r2", pubkey=AGENT_PUBKEY, created_at=9, content="z" * 101, kind=6050)),
    ]
    summary = summarize_dvm_results(events)
    assert summary["count"] == 2
    assert summary["recentResults"] == [
        {"id": "r1", "timestamp": 5, "contentPreview": "short"},
        {"id": "r2", "timestamp": 9, "contentPreview": "z" * 100 + "…"},
    ]


def test_dvm_filters():
    (flt,) = dvm_filters(AGENT_PUBKEY)
    assert flt.to_dict() == {"kinds": [6050], "authors": [AGENT_PUBKEY], "limit": 10}
