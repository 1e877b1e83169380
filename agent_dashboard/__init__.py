"""
Agent Dashboard — self-hosted status aggregator for an autonomous agent.

Polls a Lightning wallet, a web-of-trust scoring API, a Nostr relay and local
process supervision, and republishes their state as JSON plus a bounded
time-series history of wallet balance and trust score.
"""

__version__ = "0.1.0"
