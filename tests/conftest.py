"""
Pytest fixtures for dashboard tests: temp history store, sampler and settings
with a configured identity and wallet.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from agent_dashboard.config.settings import DashboardSettings, Identity, WalletConfig
from agent_dashboard.history.sampler import ThrottledSampler
from agent_dashboard.history.store import HistoryStore
from fakes import AGENT_PUBKEY


@pytest.fixture
def history_path(tmp_path: Path) -> Path:
    return tmp_path / "history.json"


@pytest.fixture
def history_store(history_path: Path) -> HistoryStore:
    return HistoryStore(history_path)


@pytest.fixture
def sampler(history_store: HistoryStore) -> ThrottledSampler:
    return ThrottledSampler(history_store)


@pytest.fixture
def settings(tmp_path: Path, history_path: Path) -> DashboardSettings:
    return DashboardSettings(
        config_dir=tmp_path,
        history_path=history_path,
        static_dir=tmp_path / "public",
        services=("jeletor-dvm", "jeletor-wot-api"),
        relay_max_wait_ms=250,
        identity=Identity(public_key_hex=AGENT_PUBKEY, secret_key_hex="11" * 32),
        wallet=WalletConfig(api_url="https://wallet.example", api_key="k", lightning_address="agent@example.com"),
    )
