"""
API route definitions: one GET endpoint per dashboard view.

Views that can fail render {"error": message} with status 200, so each
response model is a union of the view's shape and ErrorResponse.
"""

from __future__ import annotations

from typing import Any, Union

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, ConfigDict, Field

from agent_dashboard.aggregator.status import StatusAggregator

router = APIRouter()


# -----------------------------------------------------------------------------
# Response models
# -----------------------------------------------------------------------------

class ErrorResponse(BaseModel):
    """A view that could not be built."""

    error: str = Field(..., description="Human-readable failure message")


class IdentityOut(BaseModel):
    """GET /api/identity response."""

    name: str = Field(..., description="Agent display name")
    pubkey: str = Field(..., description="Public key, 64 lowercase hex chars")
    npub: str = Field(..., description="Public key in NIP-19 bech32 form")
    lightningAddress: str = Field(..., description="Lightning address or 'Not configured'")


class WalletBalanceOut(BaseModel):
    balanceSats: int = Field(..., description="Balance in whole sats (rounded down)")
    balanceMsats: int = Field(..., description="Balance in millisats as reported by the wallet")


class WalletOut(BaseModel):
    """GET /api/wallet response."""

    balance: WalletBalanceOut
    currency: str = Field("sats", description="Unit of balanceSats")


class TrustOut(BaseModel):
    """GET /api/trust response: the trust service document, passed through."""

    model_config = ConfigDict(extra="allow")

    score: Any = Field(None, description="Trust score as reported; only numeric scores are sampled")


class HistoryPointOut(BaseModel):
    timestamp: int = Field(..., description="Sample time, ms since epoch")
    value: Union[int, float] = Field(..., description="Sampled value")


class AttestationOut(BaseModel):
    """One attestation; `to` and `type` are omitted when the event had no such tag."""

    id: str
    from_: str = Field(..., alias="from", description="Author public key")
    to: str | None = Field(None, description="Subject public key (first p tag)")
    type: str | None = Field(None, description="ai.wot label (first namespaced l tag)")
    comment: str = Field("", description="First comment tag, '' when absent")
    timestamp: int = Field(..., description="Event created_at, seconds since epoch")
    direction: str = Field(..., description="'given' or 'received'")


class AttestationBatchOut(BaseModel):
    """GET /api/attestations response, each list newest first."""

    received: list[AttestationOut]
    given: list[AttestationOut]


class DvmResultOut(BaseModel):
    id: str
    timestamp: int
    contentPreview: str = Field(..., description="First 100 chars of the result, '…' appended when cut")


class DvmSummary(BaseModel):
    """GET /api/dvm response."""

    recentResults: list[DvmResultOut]
    count: int


class ServiceStatusOut(BaseModel):
    name: str
    status: str = Field(..., description="'active' or 'inactive'")
    healthy: bool


class StatusOut(BaseModel):
    """GET /api/status response; each part fails independently."""

    timestamp: str = Field(..., description="ISO-8601 UTC time the snapshot was assembled")
    identity: Union[IdentityOut, ErrorResponse]
    wallet: Union[WalletOut, ErrorResponse]
    trust: TrustOut
    services: Union[list[ServiceStatusOut], ErrorResponse]


# -----------------------------------------------------------------------------
# Routes
# -----------------------------------------------------------------------------

def get_aggregator(request: Request) -> StatusAggregator:
    """Dependency: the app-scoped aggregator built at startup."""
    return request.app.state.aggregator


@router.get("/identity", response_model=Union[IdentityOut, ErrorResponse])
async def get_identity(aggregator: StatusAggregator = Depends(get_aggregator)) -> dict[str, Any]:
    return await aggregator.identity()


@router.get("/wallet", response_model=Union[WalletOut, ErrorResponse])
async def get_wallet(aggregator: StatusAggregator = Depends(get_aggregator)) -> dict[str, Any]:
    """Wallet balance in sats; sampled into the wallet history at most hourly."""
    return await aggregator.wallet()


@router.get("/history", response_model=dict[str, list[HistoryPointOut]])
def get_history(aggregator: StatusAggregator = Depends(get_aggregator)) -> dict[str, Any]:
    return aggregator.history()


@router.get("/trust", response_model=TrustOut, response_model_exclude_none=True)
async def get_trust(aggregator: StatusAggregator = Depends(get_aggregator)) -> dict[str, Any]:
    """Trust score document; sampled into the trust history at most hourly."""
    return await aggregator.trust()


@router.get(
    "/attestations",
    response_model=Union[AttestationBatchOut, ErrorResponse],
    response_model_exclude_none=True,
)
async def get_attestations(aggregator: StatusAggregator = Depends(get_aggregator)) -> dict[str, Any]:
    return await aggregator.attestations()


@router.get("/services", response_model=Union[list[ServiceStatusOut], ErrorResponse])
async def get_services(aggregator: StatusAggregator = Depends(get_aggregator)) -> Any:
    return await aggregator.services()


@router.get("/dvm", response_model=Union[DvmSummary, ErrorResponse])
async def get_dvm(aggregator: StatusAggregator = Depends(get_aggregator)) -> dict[str, Any]:
    return await aggregator.dvm()


@router.get("/status", response_model=StatusOut, response_model_exclude_none=True)
async def get_status(aggregator: StatusAggregator = Depends(get_aggregator)) -> dict[str, Any]:
    return await aggregator.status()
