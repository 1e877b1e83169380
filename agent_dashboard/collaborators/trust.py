"""
Web-of-trust score lookup: GET {base_url}/v1/score/{pubkey}, JSON passed through.
"""

from __future__ import annotations

from typing import Any

import httpx

from agent_dashboard.core.exceptions import TrustLookupError
from agent_dashboard.dashboard_logging import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SEC = 10.0


class TrustClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def fetch_score(self, pubkey_hex: str) -> dict[str, Any]:
        """Return the score document, e.g. {"score": 42, ...}."""
        url = f"{self._base_url}/v1/score/{pubkey_hex}"
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.get(url)
                data = resp.json()
        except httpx.HTTPError as e:
            logger.warning("trust_score_failed", url=url, error=str(e))
            raise TrustLookupError(f"Trust score request failed: {e}") from e
        except ValueError as e:
            raise TrustLookupError("Trust score API returned invalid JSON") from e
        if not isinstance(data, dict):
            raise TrustLookupError("Trust score API returned a non-object")
        return data


def numeric_score(data: dict[str, Any]) -> float | None:
    """The document's score when it is a number, else None."""
    score = data.get("score")
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        return None
    return score
