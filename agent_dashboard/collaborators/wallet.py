"""
Lightning wallet balance over an LNbits-compatible HTTP wallet API.

GET {api_url}/api/v1/wallet with header X-Api-Key returns {"balance": <msats>, ...}.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from agent_dashboard.core.exceptions import WalletError
from agent_dashboard.dashboard_logging import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SEC = 10.0
WALLET_PATH = "/api/v1/wallet"


@dataclass(frozen=True)
class WalletBalance:
    balance_msats: int

    @property
    def balance_sats(self) -> int:
        return self.balance_msats // 1000

    def to_dict(self) -> dict[str, Any]:
        return {"balanceSats": self.balance_sats, "balanceMsats": self.balance_msats}


class HttpWalletClient:
    """Reads the wallet balance; one short-lived HTTP request per call."""

    def __init__(
        self,
        api_url: str,
        api_key: str,
        *,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = api_url.rstrip("/") + WALLET_PATH
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    async def get_balance(self) -> WalletBalance:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.get(self._url, headers={"X-Api-Key": self._api_key})
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPError as e:
            logger.warning("wallet_balance_failed", url=self._url, error=str(e))
            raise WalletError(f"Wallet request failed: {e}") from e
        except ValueError as e:
            raise WalletError("Wallet API returned invalid JSON") from e

        balance = data.get("balance") if isinstance(data, dict) else None
        if isinstance(balance, bool) or not isinstance(balance, (int, float)):
            raise WalletError("Wallet API response has no numeric balance")
        return WalletBalance(balance_msats=int(balance))
