"""
Application settings.

Loaded once before serving begins (get_settings() is cached) and replaced only by
a process restart. The settings value is frozen and passed explicitly into the
aggregator, relay collector and collaborators.

Identity and wallet credentials live in JSON files under CONFIG_DIR:
  nostr-keys.json     {"publicKeyHex": "...", "secretKeyHex": "..."}
  wallet-config.json  {"apiUrl": "...", "apiKey": "...", "lightningAddress": "..."}
A missing or unreadable file leaves the corresponding value as None.
"""

from __future__ import annotations

import functools
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from agent_dashboard.config.env import (
    PROJECT_ROOT,
    env_float,
    env_int,
    env_list,
    env_path,
    env_str,
    load_dashboard_env,
)
from agent_dashboard.dashboard_logging import get_logger

logger = get_logger(__name__)

DEFAULT_PORT = 8406
DEFAULT_RELAY_URL = "wss://relay.damus.io"
DEFAULT_WOT_API_URL = "https://wot.jeletor.cc"
DEFAULT_AGENT_NAME = "Jeletor"
DEFAULT_SERVICES = (
    "jeletor-dvm",
    "jeletor-wot-api",
    "jeletor-wot-dvm",
    "jeletor-writing",
    "jeletor-monitor",
    "jeletor-wot-graph",
)
DEFAULT_RELAY_MAX_WAIT_MS = 5000
DEFAULT_SAMPLE_INTERVAL_MS = 60 * 60 * 1000
DEFAULT_HTTP_TIMEOUT_SEC = 10.0

IDENTITY_FILENAME = "nostr-keys.json"
WALLET_FILENAME = "wallet-config.json"


@dataclass(frozen=True)
class Identity:
    """Agent's Nostr keypair (hex). Loaded once at startup."""

    public_key_hex: str
    secret_key_hex: str = field(default="", repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Identity":
        pubkey = str(data.get("publicKeyHex") or "").strip().lower()
        if not pubkey:
            raise ValueError("publicKeyHex must be non-empty")
        return cls(
            public_key_hex=pubkey,
            secret_key_hex=str(data.get("secretKeyHex") or "").strip(),
        )


@dataclass(frozen=True)
class WalletConfig:
    """Lightning wallet access: HTTP wallet API base URL, key and public address."""

    api_url: str
    api_key: str = field(default="", repr=False)
    lightning_address: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WalletConfig":
        return cls(
            api_url=str(data.get("apiUrl") or "").strip(),
            api_key=str(data.get("apiKey") or "").strip(),
            lightning_address=(str(data["lightningAddress"]).strip() or None)
            if data.get("lightningAddress")
            else None,
        )

    @property
    def configured(self) -> bool:
        return bool(self.api_url)


@dataclass(frozen=True)
class DashboardSettings:
    """Immutable dashboard configuration."""

    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    config_dir: Path = PROJECT_ROOT.parent / "bitcoin"
    history_path: Path = PROJECT_ROOT / "history.json"
    static_dir: Path = PROJECT_ROOT / "public"
    relay_url: str = DEFAULT_RELAY_URL
    wot_api_url: str = DEFAULT_WOT_API_URL
    agent_name: str = DEFAULT_AGENT_NAME
    services: tuple[str, ...] = DEFAULT_SERVICES
    relay_max_wait_ms: int = DEFAULT_RELAY_MAX_WAIT_MS
    sample_interval_ms: int = DEFAULT_SAMPLE_INTERVAL_MS
    http_timeout_sec: float = DEFAULT_HTTP_TIMEOUT_SEC
    identity: Identity | None = None
    wallet: WalletConfig | None = None


def _read_json_file(path: Path) -> dict[str, Any] | None:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError):
        return None
    return data if isinstance(data, dict) else None


def load_identity(config_dir: Path) -> Identity | None:
    """Read nostr-keys.json from config_dir; None (with a warning) when absent or invalid."""
    path = config_dir / IDENTITY_FILENAME
    data = _read_json_file(path)
    if data is None:
        logger.warning("identity_not_found", path=str(path))
        return None
    try:
        return Identity.from_dict(data)
    except ValueError as e:
        logger.warning("identity_invalid", path=str(path), error=str(e))
        return None


def load_wallet_config(config_dir: Path) -> WalletConfig | None:
    """Read wallet-config.json from config_dir; None (with a warning) when absent."""
    path = config_dir / WALLET_FILENAME
    data = _read_json_file(path)
    if data is None:
        logger.warning("wallet_config_not_found", path=str(path))
        return None
    return WalletConfig.from_dict(data)


def load_settings() -> DashboardSettings:
    """Build settings from .env, environment variables and CONFIG_DIR files."""
    load_dashboard_env()
    config_dir = env_path("CONFIG_DIR", PROJECT_ROOT.parent / "bitcoin")
    settings = DashboardSettings(
        host=env_str("HOST", "0.0.0.0"),
        port=env_int("PORT", DEFAULT_PORT),
        config_dir=config_dir,
        history_path=env_path("HISTORY_FILE", PROJECT_ROOT / "history.json"),
        static_dir=env_path("STATIC_DIR", PROJECT_ROOT / "public"),
        relay_url=env_str("RELAY_URL", DEFAULT_RELAY_URL),
        wot_api_url=env_str("WOT_API_URL", DEFAULT_WOT_API_URL).rstrip("/"),
        agent_name=env_str("AGENT_NAME", DEFAULT_AGENT_NAME),
        services=env_list("DASHBOARD_SERVICES", DEFAULT_SERVICES),
        relay_max_wait_ms=max(1, env_int("RELAY_MAX_WAIT_MS", DEFAULT_RELAY_MAX_WAIT_MS)),
        sample_interval_ms=max(0, env_int("HISTORY_SAMPLE_INTERVAL_MS", DEFAULT_SAMPLE_INTERVAL_MS)),
        http_timeout_sec=env_float("HTTP_TIMEOUT_SEC", DEFAULT_HTTP_TIMEOUT_SEC),
        identity=load_identity(config_dir),
        wallet=load_wallet_config(config_dir),
    )
    logger.info(
        "settings_loaded",
        config_dir=str(settings.config_dir),
        history_path=str(settings.history_path),
        relay_url=settings.relay_url,
        identity_configured=settings.identity is not None,
        wallet_configured=settings.wallet is not None and settings.wallet.configured,
    )
    return settings


@functools.lru_cache(maxsize=1)
def get_settings() -> DashboardSettings:
    """Return the process-wide settings, loading them on first use."""
    return load_settings()
