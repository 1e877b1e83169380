"""
Web-of-trust label events (kind 1985, namespace ai.wot)
classified into attestations received by and given by the agent.
"""

from agent_dashboard.attestations.classifier import (
    ATTESTATION_KIND,
    DIRECTION_GIVEN,
    DIRECTION_RECEIVED,
    LABEL_NAMESPACE,
    Attestation,
    AttestationBatch,
    attestation_filters,
    classify,
    find_tag,
    to_attestation,
)

__all__ = [
    "ATTESTATION_KIND",
    "DIRECTION_GIVEN",
    "DIRECTION_RECEIVED",
    "LABEL_NAMESPACE",
    "Attestation",
    "AttestationBatch",
    "attestation_filters",
    "classify",
    "find_tag",
    "to_attestation",
]
