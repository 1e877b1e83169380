"""
Shared exceptions for the dashboard.
"""

from agent_dashboard.core.exceptions import (
    ConfigurationMissing,
    DashboardError,
    IdentityNotConfigured,
    RelayConnectionError,
    TrustLookupError,
    WalletError,
    WalletNotConfigured,
)

__all__ = [
    "ConfigurationMissing",
    "DashboardError",
    "IdentityNotConfigured",
    "RelayConnectionError",
    "TrustLookupError",
    "WalletError",
    "WalletNotConfigured",
]
