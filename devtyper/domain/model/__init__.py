"""Domain model entities for DevTyper."""

from devtyper.domain.model.attempt import Attempt
from devtyper.domain.model.link import (
    AlreadyLinkedElsewhere,
    AlreadyLinkedSelf,
    Linked,
    LinkOutcome,
)
from devtyper.domain.model.profile import ExternalIdentity, Profile
from devtyper.domain.model.user_stats import UserStats

__all__ = [
    "Profile",
    "ExternalIdentity",
    "Linked",
    "AlreadyLinkedSelf",
    "AlreadyLinkedElsewhere",
    "LinkOutcome",
    "Attempt",
    "UserStats",
]
