"""Profile entity.

Profiles belong to accounts created by the hosted auth service. A profile
can carry one linked GitHub identity.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field, model_validator

from devtyper.domain.model.common import DomainModel
from devtyper.domain.value import ProviderIdentity, UserId


class ExternalIdentity(DomainModel):
    """GitHub identity as stored on a profile.

    The four fields are always written together.
    """

    provider_user_id: str
    provider_username: str
    avatar_url: Optional[str] = None
    linked_at: datetime

    @classmethod
    def from_provider(
        cls, identity: ProviderIdentity, linked_at: datetime | None = None
    ) -> "ExternalIdentity":
        """Stamp a freshly fetched provider record with its link time."""
        return cls(
            provider_user_id=identity.provider_user_id,
            provider_username=identity.provider_username,
            avatar_url=identity.avatar_url,
            linked_at=linked_at or datetime.now(timezone.utc),
        )


class Profile(DomainModel):
    """Local user profile."""

    id: UserId
    username: str
    github: Optional[ExternalIdentity] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def github_id(self) -> str | None:
        """Linked GitHub id, if any."""
        return self.github.provider_user_id if self.github else None


