"""
External collaborators polled by the aggregator: Lightning wallet, trust score
API, systemd service probes and the agent's Nostr identity.
"""

from agent_dashboard.collaborators.identity import identity_view, npub_encode
from agent_dashboard.collaborators.services import ServiceProbe, ServiceStatus
from agent_dashboard.collaborators.trust import TrustClient
from agent_dashboard.collaborators.wallet import HttpWalletClient, WalletBalance

__all__ = [
    "HttpWalletClient",
    "ServiceProbe",
    "ServiceStatus",
    "TrustClient",
    "WalletBalance",
    "identity_view",
    "npub_encode",
]
