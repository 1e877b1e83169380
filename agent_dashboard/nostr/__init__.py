"""
Nostr relay package.

Opens short-lived relay subscriptions, collects stored events until the relay
signals end-of-stored-events or a deadline elapses, and summarises DVM results.
"""

from agent_dashboard.nostr.collector import CollectionWindow, RelayCollector
from agent_dashboard.nostr.dvm import DVM_RESULT_KIND, dvm_filters, summarize_dvm_results
from agent_dashboard.nostr.models import RawEvent, RelayFilter

__all__ = [
    "DVM_RESULT_KIND",
    "CollectionWindow",
    "RawEvent",
    "RelayCollector",
    "RelayFilter",
    "dvm_filters",
    "summarize_dvm_results",
]
