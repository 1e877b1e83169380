"""
Agent identity view: hex pubkey plus its NIP-19 npub (bech32) encoding.
"""

from __future__ import annotations

from typing import Any

from bech32 import bech32_encode, convertbits

from agent_dashboard.config.settings import Identity, WalletConfig

NOT_CONFIGURED = "Not configured"


def npub_encode(pubkey_hex: str) -> str:
    """Encode a 32-byte hex public key as npub1...; raises ValueError on bad input."""
    raw = bytes.fromhex(pubkey_hex)
    if len(raw) != 32:
        raise ValueError(f"public key must be 32 bytes, got {len(raw)}")
    words = convertbits(raw, 8, 5)
    if words is None:
        raise ValueError("public key could not be converted to bech32 words")
    return bech32_encode("npub", words)


def identity_view(name: str, identity: Identity, wallet: WalletConfig | None) -> dict[str, Any]:
    lightning_address = wallet.lightning_address if wallet is not None else None
    return {
        "name": name,
        "pubkey": identity.public_key_hex,
        "npub": npub_encode(identity.public_key_hex),
        "lightningAddress": lightning_address or NOT_CONFIGURED,
    }
