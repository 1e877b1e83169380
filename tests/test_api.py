"""
Tests for the aggregator views through the FastAPI app: success payloads,
{"error"} short-circuits, history sampling, and sibling isolation in /api/status.
"""

from __future__ import annotations

import dataclasses
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from agent_dashboard.aggregator.status import StatusAggregator
from agent_dashboard.api_server.server import create_app
from agent_dashboard.core.exceptions import RelayConnectionError, WalletError
from agent_dashboard.nostr.models import RawEvent
from fakes import (
    AGENT_PUBKEY,
    OTHER_PUBKEY,
    FakeCollector,
    FakeServices,
    FakeTrust,
    FakeWallet,
    make_event,
)


def _aggregator(settings, sampler, **overrides) -> StatusAggregator:
    parts = {
        "collector": FakeCollector(),
        "trust": FakeTrust(),
        "services": FakeServices(active={"jeletor-dvm"}),
        "wallet": FakeWallet(),
    }
    parts.update(overrides)
    return StatusAggregator(settings, sampler=sampler, **parts)


@pytest.fixture
def make_client(settings, sampler):
    def _make(settings_override=None, **overrides) -> TestClient:
        aggregator = _aggregator(settings_override or settings, sampler, **overrides)
        return TestClient(create_app(aggregator=aggregator))

    return _make


def test_health(make_client):
    assert make_client().get("/health").json() == {"status": "ok"}


def test_identity(make_client):
    data = make_client().get("/api/identity").json()
    assert data["name"] == "Jeletor"
    assert data["pubkey"] == AGENT_PUBKEY
    assert data["npub"].startswith("npub1")
    assert data["lightningAddress"] == "agent@example.com"


def test_views_without_identity_short_circuit(make_client, settings):
    collector = FakeCollector()
    trust = FakeTrust()
    client = make_client(dataclasses.replace(settings, identity=None), collector=collector, trust=trust)
    for path in ("/api/identity", "/api/trust", "/api/attestations", "/api/dvm"):
        resp = client.get(path)
        assert resp.status_code == 200
        assert resp.json() == {"error": "No identity configured"}
    assert collector.calls == []
    assert trust.requested == []


def test_wallet_without_config_short_circuits(make_client, settings):
    wallet = FakeWallet()
    client = make_client(dataclasses.replace(settings, wallet=None), wallet=wallet)
    assert client.get("/api/wallet").json() == {"error": "No wallet configured"}
    assert wallet.calls == 0


def test_wallet_balance_sampled_hourly(make_client, history_store):
    client = make_client(wallet=FakeWallet(balance_msats=2_100_000))
    first = client.get("/api/wallet").json()
    assert first == {"balance": {"balanceSats": 2100, "balanceMsats": 2_100_000}, "currency": "sats"}
    client.get("/api/wallet")
    points = history_store.series("wallet")
    assert len(points) == 1
    assert points[0].value == 2100


def test_wallet_error_rendered(make_client, history_store):
    client = make_client(wallet=FakeWallet(error=WalletError("Wallet request failed: 401")))
    assert client.get("/api/wallet").json() == {"error": "Wallet request failed: 401"}
    assert history_store.series("wallet") == []


def test_trust_passthrough_and_sampling(make_client, history_store):
    client = make_client(trust=FakeTrust({"score": 42, "rank": 7}))
    assert client.get("/api/trust").json() == {"score": 42, "rank": 7}
    assert [p.value for p in history_store.series("trust")] == [42]


def test_trust_without_score_not_sampled(make_client, history_store):
    client = make_client(trust=FakeTrust({"error": "unknown pubkey"}))
    assert client.get("/api/trust").json() == {"error": "unknown pubkey"}
    assert history_store.series("trust") == []


def test_history_view(make_client, history_store):
    history_store.append_point("trust", 50, 1_000)
    assert make_client().get("/api/history").json() == {
        "wallet": [],
        "trust": [{"timestamp": 1_000, "value": 50}],
    }


def test_attestations_partitioned(make_client, settings):
    events = [
        RawEvent.from_dict(
            make_event("r1", pubkey=OTHER_PUBKEY, created_at=10, tags=[["p", AGENT_PUBKEY], ["l", "trust", "ai.wot"]])
        ),
        RawEvent.from_dict(make_event("g1", pubkey=AGENT_PUBKEY, created_at=20, tags=[["p", OTHER_PUBKEY]])),
        RawEvent.from_dict(make_event("r2", pubkey=OTHER_PUBKEY, created_at=30)),
    ]
    collector = FakeCollector(events)
    data = make_client(collector=collector).get("/api/attestations").json()
    assert [a["id"] for a in data["received"]] == ["r2", "r1"]
    assert [a["id"] for a in data["given"]] == ["g1"]
    assert data["received"][1]["type"] == "trust"
    assert "to" not in data["received"][0]
    filters, max_wait = collector.calls[0]
    assert len(filters) == 2
    assert max_wait == settings.relay_max_wait_ms


def test_attestations_relay_failure(make_client):
    collector = FakeCollector(error=RelayConnectionError("wss://relay.example", "refused"))
    data = make_client(collector=collector).get("/api/attestations").json()
    assert data == {"error": "Relay connection failed (wss://relay.example): refused"}


def test_dvm_view(make_client):
    events = [RawEvent.from_dict(make_event("d1", pubkey=AGENT_PUBKEY, created_at=3, content="ok", kind=6050))]
    data = make_client(collector=FakeCollector(events)).get("/api/dvm").json()
    assert data == {"recentResults": [{"id": "d1", "timestamp": 3, "contentPreview": "ok"}], "count": 1}


def test_services_view(make_client):
    data = make_client().get("/api/services").json()
    assert data == [
        {"name": "jeletor-dvm", "status": "active", "healthy": True},
        {"name": "jeletor-wot-api", "status": "inactive", "healthy": False},
    ]


def test_status_isolates_failures(make_client):
    client = make_client(
        wallet=FakeWallet(error=WalletError("wallet down")),
        trust=FakeTrust({"score": 12}),
    )
    data = client.get("/api/status").json()
    assert data["wallet"] == {"error": "wallet down"}
    assert data["trust"] == {"score": 12}
    assert data["identity"]["pubkey"] == AGENT_PUBKEY
    assert len(data["services"]) == 2
    assert data["timestamp"].endswith("Z")


def test_openapi_declares_response_models(make_client):
    schemas = make_client().get("/openapi.json").json()["components"]["schemas"]
    for name in (
        "ErrorResponse",
        "IdentityOut",
        "WalletOut",
        "TrustOut",
        "HistoryPointOut",
        "AttestationOut",
        "AttestationBatchOut",
        "DvmSummary",
        "ServiceStatusOut",
        "StatusOut",
    ):
        assert name in schemas
    assert "from" in schemas["AttestationOut"]["properties"]


def test_attestation_without_tags_omits_to_and_type(make_client):
    events = [RawEvent.from_dict(make_event("bare", pubkey=AGENT_PUBKEY, created_at=9, tags=[["p", None]]))]
    data = make_client(collector=FakeCollector(events)).get("/api/attestations").json()
    assert data == {
        "received": [],
        "given": [{"id": "bare", "from": AGENT_PUBKEY, "comment": "", "timestamp": 9, "direction": "given"}],
    }


def test_create_app_with_aggregator_does_not_load_settings(settings, sampler):
    import agent_dashboard.api_server.server as server

    assert not hasattr(server, "app")
    with patch("agent_dashboard.api_server.server.get_settings") as get_settings:
        with TestClient(create_app(aggregator=_aggregator(settings, sampler))) as client:
            assert client.get("/health").json() == {"status": "ok"}
    get_settings.assert_not_called()


def test_static_index_served(make_client, settings):
    static_dir = settings.static_dir
    static_dir.mkdir()
    (static_dir / "index.html").write_text("<h1>Agent Dashboard</h1>", encoding="utf-8")
    (static_dir / "app.js").write_text("console.log(1)", encoding="utf-8")
    client = make_client()
    assert "Agent Dashboard" in client.get("/").text
    assert client.get("/app.js").status_code == 200
    assert client.get("/api/history").status_code == 200
