"""Profile repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from devtyper.domain.model.profile import ExternalIdentity, Profile
from devtyper.domain.value import UserId


class ProfileRepository(ABC):
    """Repository for Profile entity.

    The store enforces that a GitHub id is held by at most one profile.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Optional[Profile]:
        """Find a profile by user ID.

        Args:
            user_id: The user's unique identifier

        Returns:
            The profile if found, None otherwise

        Raises:
            LookupFailedError: If the store cannot be read
        """
        pass

    @abstractmethod
    async def find_by_github_id(self, github_id: str) -> Optional[Profile]:
        """Find the profile currently holding a GitHub identity.

        Args:
            github_id: Stable GitHub user id

        Returns:
            The owning profile if any, None otherwise

        Raises:
            LookupFailedError: If the store cannot be read
        """
        pass

    @abstractmethod
    async def find_by_github_username(self, github_username: str) -> Optional[Profile]:
        """Find the profile holding a GitHub login, ignoring case.

        Logins can be renamed, so prefer find_by_github_id when the id is known.

        Raises:
            LookupFailedError: If the store cannot be read
        """
        pass

    @abstractmethod
    async def link_github_identity(
        self, user_id: UserId, identity: ExternalIdentity
    ) -> Profile:
        """Write all GitHub identity fields onto a profile in one update.

        Args:
            user_id: Profile to update
            identity: Identity to store

        Returns:
            The updated profile

        Raises:
            IdentityAlreadyLinkedError: If another profile holds the GitHub id
            WriteFailedError: If the profile does not exist or the write fails
        """
        pass

    @abstractmethod
    async def save(self, profile: Profile) -> Profile:
        """Save a profile (create or update).

        Args:
            profile: The profile to save

        Returns:
            The saved profile
        """
        pass
