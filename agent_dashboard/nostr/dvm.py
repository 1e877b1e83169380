"""
DVM activity: recent job results (kind 6050) published by the agent.
"""

from __future__ import annotations

from typing import Any, Iterable

from agent_dashboard.nostr.models import RawEvent, RelayFilter

DVM_RESULT_KIND = 6050
DVM_RESULT_LIMIT = 10
PREVIEW_CHARS = 100
PREVIEW_ELLIPSIS = "…"


def dvm_filters(pubkey_hex: str, limit: int = DVM_RESULT_LIMIT) -> list[RelayFilter]:
    return [RelayFilter(kinds=(DVM_RESULT_KIND,), authors=(pubkey_hex,), limit=limit)]


def content_preview(content: str, max_chars: int = PREVIEW_CHARS) -> str:
    """First max_chars characters, with an ellipsis appended only when truncated."""
    if len(content) <= max_chars:
        return content
    return content[:max_chars] + PREVIEW_ELLIPSIS


def summarize_dvm_results(events: Iterable[RawEvent]) -> dict[str, Any]:
    """{recentResults: [{id, timestamp, contentPreview}], count} in relay delivery order."""
    results = [
        {
            "id": e.id,
            "timestamp": e.created_at,
            "contentPreview": content_preview(e.content),
        }
        for e in events
    ]
    return {"recentResults": results, "count": len(results)}
