"""Domain value objects for DevTyper."""

from devtyper.domain.value.identifiers import AttemptId, SnippetId, UserId
from devtyper.domain.value.types import (
    AttemptMode,
    FailureReason,
    FlowTransport,
    LinkFlow,
    ProviderIdentity,
    Session,
    StateToken,
)

__all__ = [
    # Identifiers
    "UserId",
    "AttemptId",
    "SnippetId",
    # Types
    "AttemptMode",
    "FailureReason",
    "FlowTransport",
    "LinkFlow",
    "ProviderIdentity",
    "Session",
    "StateToken",
]
