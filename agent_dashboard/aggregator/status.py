"""
Status aggregator: one coroutine per dashboard view.

Every view returns plain JSON data. Failures inside a view (missing config,
collaborator or relay errors) are caught here and rendered as {"error": str};
they never reach the HTTP layer and never affect sibling views. Wallet balance
and trust score are recorded into history through the throttled sampler.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Protocol, Sequence

from agent_dashboard.attestations.classifier import attestation_filters, classify
from agent_dashboard.collaborators.identity import identity_view
from agent_dashboard.collaborators.services import ServiceProbe, ServiceStatus
from agent_dashboard.collaborators.trust import TrustClient, numeric_score
from agent_dashboard.collaborators.wallet import HttpWalletClient, WalletBalance
from agent_dashboard.config.settings import DashboardSettings, Identity
from agent_dashboard.core.exceptions import IdentityNotConfigured, WalletNotConfigured
from agent_dashboard.dashboard_logging import get_logger
from agent_dashboard.history.sampler import ThrottledSampler
from agent_dashboard.history.store import HistoryStore
from agent_dashboard.nostr.collector import RelayCollector
from agent_dashboard.nostr.dvm import dvm_filters, summarize_dvm_results
from agent_dashboard.nostr.models import RawEvent, RelayFilter

logger = get_logger(__name__)

SERIES_WALLET = "wallet"
SERIES_TRUST = "trust"

JsonView = dict[str, Any]


class WalletSource(Protocol):
    async def get_balance(self) -> WalletBalance: ...


class TrustSource(Protocol):
    async def fetch_score(self, pubkey_hex: str) -> dict[str, Any]: ...


class ServiceSource(Protocol):
    def probe_all(self, names: Sequence[str]) -> list[ServiceStatus]: ...


class EventSource(Protocol):
    async def collect(self, filters: Sequence[RelayFilter], max_wait_ms: int = ...) -> list[RawEvent]: ...


def _error(view: str, exc: Exception) -> JsonView:
    logger.warning("view_failed", view=view, error=str(exc), error_type=type(exc).__name__)
    return {"error": str(exc)}


class StatusAggregator:
    """Builds dashboard views from explicitly injected collaborators."""

    def __init__(
        self,
        settings: DashboardSettings,
        *,
        sampler: ThrottledSampler,
        collector: EventSource,
        trust: TrustSource,
        services: ServiceSource,
        wallet: WalletSource | None = None,
    ) -> None:
        self._settings = settings
        self._sampler = sampler
        self._collector = collector
        self._trust = trust
        self._services = services
        self._wallet = wallet

    @property
    def settings(self) -> DashboardSettings:
        return self._settings

    @property
    def history_store(self) -> HistoryStore:
        return self._sampler.store

    def _require_identity(self) -> Identity:
        if self._settings.identity is None:
            raise IdentityNotConfigured()
        return self._settings.identity

    async def _guarded(self, view: str, fn: Callable[[], Awaitable[Any]]) -> Any:
        try:
            return await fn()
        except Exception as e:
            return _error(view, e)

    async def identity(self) -> JsonView:
        async def _view() -> JsonView:
            identity = self._require_identity()
            return identity_view(self._settings.agent_name, identity, self._settings.wallet)

        return await self._guarded("identity", _view)

    async def wallet(self) -> JsonView:
        async def _view() -> JsonView:
            config = self._settings.wallet
            if self._wallet is None or config is None or not config.configured:
                raise WalletNotConfigured()
            balance = await self._wallet.get_balance()
            self._sampler.maybe_sample(SERIES_WALLET, balance.balance_sats)
            return {"balance": balance.to_dict(), "currency": "sats"}

        return await self._guarded("wallet", _view)

    async def trust(self) -> JsonView:
        async def _view() -> JsonView:
            identity = self._require_identity()
            data = await self._trust.fetch_score(identity.public_key_hex)
            score = numeric_score(data)
            if score is not None:
                self._sampler.maybe_sample(SERIES_TRUST, score)
            return data

        return await self._guarded("trust", _view)

    def history(self) -> dict[str, list[dict[str, Any]]]:
        return self.history_store.to_json()

    async def attestations(self) -> JsonView:
        async def _view() -> JsonView:
            identity = self._require_identity()
            events = await self._collector.collect(
                attestation_filters(identity.public_key_hex),
                self._settings.relay_max_wait_ms,
            )
            batch = classify(events, identity.public_key_hex)
            logger.info(
                "attestations_classified",
                received=len(batch.received),
                given=len(batch.given),
            )
            return batch.to_dict()

        return await self._guarded("attestations", _view)

    async def dvm(self) -> JsonView:
        async def _view() -> JsonView:
            identity = self._require_identity()
            events = await self._collector.collect(
                dvm_filters(identity.public_key_hex),
                self._settings.relay_max_wait_ms,
            )
            return summarize_dvm_results(events)

        return await self._guarded("dvm", _view)

    async def services(self) -> list[dict[str, Any]] | JsonView:
        async def _view() -> list[dict[str, Any]]:
            # Blocking probes run off the event loop so relay timers keep firing
            statuses = await asyncio.to_thread(self._services.probe_all, self._settings.services)
            return [s.to_dict() for s in statuses]

        return await self._guarded("services", _view)

    async def status(self) -> JsonView:
        """Combined snapshot; each part is gathered concurrently and fails independently."""
        identity, wallet, trust, services = await asyncio.gather(
            self.identity(),
            self.wallet(),
            self.trust(),
            self.services(),
        )
        return {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "identity": identity,
            "wallet": wallet,
            "trust": trust,
            "services": services,
        }


def build_aggregator(settings: DashboardSettings) -> StatusAggregator:
    """Wire the production collaborators from settings."""
    store = HistoryStore(settings.history_path)
    sampler = ThrottledSampler(store, min_interval_ms=settings.sample_interval_ms)
    wallet = None
    if settings.wallet is not None and settings.wallet.configured:
        wallet = HttpWalletClient(
            settings.wallet.api_url,
            settings.wallet.api_key,
            timeout=settings.http_timeout_sec,
        )
    return StatusAggregator(
        settings,
        sampler=sampler,
        collector=RelayCollector(settings.relay_url),
        trust=TrustClient(settings.wot_api_url, timeout=settings.http_timeout_sec),
        services=ServiceProbe(),
        wallet=wallet,
    )
