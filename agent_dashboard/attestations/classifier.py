"""
Attestation classifier: raw label events to structured attestations.

Pure transformation, no I/O. For each event:
  to      = value of the first "p" tag
  type    = value of the first "l" tag whose third element is the ai.wot namespace
  comment = value of the first "comment" tag, "" when absent
  direction = "given" when the event author is the reference identity, else "received"

Tag lookup is first-match: the earliest matching tag wins even if a later one
has a value. Missing tags are normal and yield None / "".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional, Sequence

from agent_dashboard.nostr.models import RawEvent, RelayFilter

ATTESTATION_KIND = 1985
LABEL_NAMESPACE = "ai.wot"
ATTESTATION_LIMIT = 20

DIRECTION_GIVEN = "given"
DIRECTION_RECEIVED = "received"

TagPredicate = Callable[[Sequence[Optional[str]]], bool]


def find_tag(
    tags: Iterable[Sequence[Optional[str]]],
    name: str,
    predicate: TagPredicate | None = None,
    value_index: int = 1,
) -> str | None:
    """
    Return tag[value_index] of the first tag whose first element is name and
    which satisfies predicate (if given). The first matching tag decides: if it
    has no string at value_index the result is None, later tags are not tried.
    """
    for tag in tags:
        if not tag or tag[0] != name:
            continue
        if predicate is not None and not predicate(tag):
            continue
        value = tag[value_index] if len(tag) > value_index else None
        return value if isinstance(value, str) else None
    return None


def _in_namespace(tag: Sequence[Optional[str]]) -> bool:
    return len(tag) > 2 and tag[2] == LABEL_NAMESPACE


@dataclass(frozen=True)
class Attestation:
    """One trust claim between two identities, derived from a label event."""

    id: str
    from_pubkey: str
    to_pubkey: str | None
    type: str | None
    comment: str
    timestamp: int
    direction: str

    def to_dict(self) -> dict[str, Any]:
        """JSON view; `to` and `type` are omitted when the event had no such tag."""
        out: dict[str, Any] = {"id": self.id, "from": self.from_pubkey}
        if self.to_pubkey is not None:
            out["to"] = self.to_pubkey
        if self.type is not None:
            out["type"] = self.type
        out["comment"] = self.comment
        out["timestamp"] = self.timestamp
        out["direction"] = self.direction
        return out


@dataclass(frozen=True)
class AttestationBatch:
    """Attestations partitioned by direction, each newest first."""

    received: list[Attestation] = field(default_factory=list)
    given: list[Attestation] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "received": [a.to_dict() for a in self.received],
            "given": [a.to_dict() for a in self.given],
        }


def to_attestation(event: RawEvent, reference_pubkey: str) -> Attestation:
    return Attestation(
        id=event.id,
        from_pubkey=event.pubkey,
        to_pubkey=find_tag(event.tags, "p"),
        type=find_tag(event.tags, "l", _in_namespace),
        comment=find_tag(event.tags, "comment") or "",
        timestamp=event.created_at,
        direction=DIRECTION_GIVEN if event.pubkey == reference_pubkey else DIRECTION_RECEIVED,
    )


def classify(events: Iterable[RawEvent], reference_pubkey: str) -> AttestationBatch:
    """
    Build attestations and split them by direction. Both lists are sorted by
    timestamp descending; equal timestamps keep their input order.
    """
    attestations = [to_attestation(e, reference_pubkey) for e in events]
    # sorted() is stable with reverse=True: ties stay in input order
    attestations = sorted(attestations, key=lambda a: a.timestamp, reverse=True)
    return AttestationBatch(
        received=[a for a in attestations if a.direction == DIRECTION_RECEIVED],
        given=[a for a in attestations if a.direction == DIRECTION_GIVEN],
    )


def attestation_filters(pubkey_hex: str, limit: int = ATTESTATION_LIMIT) -> list[RelayFilter]:
    """REQ filters for attestations about the agent and attestations it authored."""
    namespace = {"L": (LABEL_NAMESPACE,)}
    return [
        RelayFilter(
            kinds=(ATTESTATION_KIND,),
            tags={**namespace, "p": (pubkey_hex,)},
            limit=limit,
        ),
        RelayFilter(
            kinds=(ATTESTATION_KIND,),
            tags=dict(namespace),
            authors=(pubkey_hex,),
            limit=limit,
        ),
    ]
