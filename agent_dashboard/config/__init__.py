"""
Configuration: environment loading and the immutable settings value.
"""

from agent_dashboard.config.settings import (
    DashboardSettings,
    Identity,
    WalletConfig,
    get_settings,
    load_settings,
)

__all__ = [
    "DashboardSettings",
    "Identity",
    "WalletConfig",
    "get_settings",
    "load_settings",
]
