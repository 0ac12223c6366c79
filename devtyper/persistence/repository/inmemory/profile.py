"""In-memory profile repository for testing."""

from datetime import datetime, timezone
from typing import Optional

from devtyper.domain.error import IdentityAlreadyLinkedError, WriteFailedError
from devtyper.domain.model import ExternalIdentity, Profile
from devtyper.domain.repository import ProfileRepository
from devtyper.domain.value import UserId


class InMemoryProfileRepository(ProfileRepository):
    """In-memory implementation of ProfileRepository for testing.

    Check-and-write on the GitHub id happens without yielding to the event
    loop, which stands in for the unique constraint.
    """

    def __init__(self) -> None:
        self._profiles: dict[UserId, Profile] = {}

    async def find_by_id(self, user_id: UserId) -> Optional[Profile]:
        """Find a profile by ID."""
        return self._profiles.get(user_id)

    async def find_by_github_id(self, github_id: str) -> Optional[Profile]:
        """Find the profile holding a GitHub id."""
        return self._holder(github_id)

    async def find_by_github_username(self, github_username: str) -> Optional[Profile]:
        """Find the profile holding a GitHub login, ignoring case."""
        wanted = github_username.lower()
        for profile in self._profiles.values():
            if profile.github and profile.github.provider_username.lower() == wanted:
                return profile
        return None

    async def link_github_identity(
        self, user_id: UserId, identity: ExternalIdentity
    ) -> Profile:
        """Write the GitHub identity onto a profile.

        Raises:
            IdentityAlreadyLinkedError: If another profile holds the GitHub id
            WriteFailedError: If the profile does not exist
        """
        profile = self._profiles.get(user_id)
        if profile is None:
            raise WriteFailedError(f"Profile not found: {user_id}")

        holder = self._holder(identity.provider_user_id)
        if holder is not None and holder.id != user_id:
            raise IdentityAlreadyLinkedError(identity.provider_user_id)

        updated = profile.model_copy(
            update={"github": identity, "updated_at": datetime.now(timezone.utc)}
        )
        self._profiles[user_id] = updated
        return updated

    async def save(self, profile: Profile) -> Profile:
        """Save a profile.

        Raises:
            IdentityAlreadyLinkedError: If another profile holds the GitHub id
        """
        if profile.github is not None:
            holder = self._holder(profile.github.provider_user_id)
            if holder is not None and holder.id != profile.id:
                raise IdentityAlreadyLinkedError(profile.github.provider_user_id)

        self._profiles[profile.id] = profile
        return profile

    def _holder(self, github_id: str) -> Optional[Profile]:
        for profile in self._profiles.values():
            if profile.github_id == github_id:
                return profile
        return None
