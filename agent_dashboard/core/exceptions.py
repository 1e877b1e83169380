"""
Application-level exceptions.

The aggregator renders every one of these as {"error": str(exc)} in the JSON
view where it happened; none of them is fatal to the process. Malformed relay
events and a corrupt history snapshot are not errors and have no class here.
"""

from __future__ import annotations


class DashboardError(Exception):
    """Base class for dashboard errors."""


class RelayConnectionError(DashboardError, ConnectionError):
    """Relay unreachable, or the subscription request could not be sent."""

    def __init__(self, relay_url: str, reason: str) -> None:
        super().__init__(f"Relay connection failed ({relay_url}): {reason}")
        self.relay_url = relay_url
        self.reason = reason


class ConfigurationMissing(DashboardError):
    """Required configuration absent; handlers short-circuit before any I/O."""


class IdentityNotConfigured(ConfigurationMissing):
    def __init__(self) -> None:
        super().__init__("No identity configured")


class WalletNotConfigured(ConfigurationMissing):
    def __init__(self) -> None:
        super().__init__("No wallet configured")


class WalletError(DashboardError):
    """Wallet API call failed or returned an unusable balance."""


class TrustLookupError(DashboardError):
    """Trust score API call failed or returned non-JSON."""
