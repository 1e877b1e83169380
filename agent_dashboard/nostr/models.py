"""
Data models for relay subscriptions: raw events and REQ filters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

Tag = tuple[Optional[str], ...]


def _coerce_tags(raw: Any) -> tuple[Tag, ...]:
    """
    Normalise tags to tuples. Non-list entries become empty tags and non-string
    slots become None, so a null value reads as absent rather than "None".
    """
    if not isinstance(raw, (list, tuple)):
        return ()
    out = []
    for tag in raw:
        if isinstance(tag, (list, tuple)):
            out.append(tuple(v if isinstance(v, str) else None for v in tag))
        else:
            out.append(())
    return tuple(out)


def _coerce_int(raw: Any) -> int:
    if isinstance(raw, bool):
        return 0
    try:
        return int(raw)
    except (TypeError, ValueError):
        return 0


@dataclass(frozen=True)
class RawEvent:
    """
    Event as delivered by the relay. Structurally normalised but not validated:
    missing fields take empty defaults and signatures are never checked.
    """

    id: str
    pubkey: str
    created_at: int
    tags: tuple[Tag, ...] = ()
    content: str = ""
    kind: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RawEvent":
        """Build from an EVENT message payload."""
        kind = data.get("kind")
        return cls(
            id=str(data.get("id") or ""),
            pubkey=str(data.get("pubkey") or ""),
            created_at=_coerce_int(data.get("created_at")),
            tags=_coerce_tags(data.get("tags")),
            content=data["content"] if isinstance(data.get("content"), str) else "",
            kind=kind if isinstance(kind, int) and not isinstance(kind, bool) else None,
        )


@dataclass(frozen=True)
class RelayFilter:
    """
    One REQ filter: event kinds, tag predicates ({"L": ["ai.wot"]} becomes
    "#L"), optional author constraint and a per-filter result cap.
    """

    kinds: tuple[int, ...] = ()
    tags: dict[str, tuple[str, ...]] = field(default_factory=dict)
    authors: tuple[str, ...] = ()
    limit: int | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.kinds:
            out["kinds"] = list(self.kinds)
        for name, values in self.tags.items():
            out[f"#{name}"] = list(values)
        if self.authors:
            out["authors"] = list(self.authors)
        if self.limit is not None:
            out["limit"] = self.limit
        return out
