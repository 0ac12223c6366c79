"""Identity link domain service.

Owns the rule that a GitHub identity belongs to at most one profile.
"""

import logfire

from devtyper.domain.error import IdentityAlreadyLinkedError, WriteFailedError
from devtyper.domain.model.link import (
    AlreadyLinkedElsewhere,
    AlreadyLinkedSelf,
    Linked,
    LinkOutcome,
)
from devtyper.domain.model.profile import ExternalIdentity, Profile
from devtyper.domain.repository.profile import ProfileRepository
from devtyper.domain.value import ProviderIdentity, UserId

from .base import Service


class IdentityLinkService(Service):
    """Domain service for linking GitHub identities to profiles."""

    def __init__(self, profile_repository: ProfileRepository) -> None:
        """Initialize identity link service.

        Args:
            profile_repository: Profile repository
        """
        self.profile_repository = profile_repository

    async def find_owner(self, provider_user_id: str) -> Profile | None:
        """Find the profile holding a GitHub identity.

        Args:
            provider_user_id: GitHub user id

        Returns:
            Owning profile if any, None otherwise

        Raises:
            LookupFailedError: If the store cannot be read
        """
        with logfire.span(
            "identity_link_service.find_owner", github_id=provider_user_id
        ):
            owner = await self.profile_repository.find_by_github_id(provider_user_id)
            logfire.info(
                "GitHub owner lookup",
                github_id=provider_user_id,
                owner=str(owner.id) if owner else None,
            )
            return owner

    async def find_owner_by_username(self, provider_username: str) -> Profile | None:
        """Find the profile holding a GitHub login, ignoring case.

        Raises:
            LookupFailedError: If the store cannot be read
        """
        with logfire.span(
            "identity_link_service.find_owner_by_username",
            github_username=provider_username,
        ):
            return await self.profile_repository.find_by_github_username(
                provider_username
            )

    async def link(
        self, subject_user_id: UserId, identity: ProviderIdentity
    ) -> LinkOutcome:
        """Link a GitHub identity to a profile.

        Args:
            subject_user_id: Profile receiving the identity
            identity: Identity fetched from GitHub

        Returns:
            Linked, AlreadyLinkedSelf or AlreadyLinkedElsewhere

        Raises:
            LookupFailedError: If the owner lookup fails
            WriteFailedError: If the profile is missing or the write fails
        """
        with logfire.span(
            "identity_link_service.link",
            user_id=str(subject_user_id),
            github_id=identity.provider_user_id,
        ):
            owner = await self.find_owner(identity.provider_user_id)
            if owner is not None:
                return self._existing_owner_outcome(subject_user_id, owner)

            external = ExternalIdentity.from_provider(identity)
            try:
                profile = await self.profile_repository.link_github_identity(
                    subject_user_id, external
                )
            except IdentityAlreadyLinkedError:
                # Lost a concurrent race to the unique constraint
                logfire.warn(
                    "GitHub link lost race",
                    user_id=str(subject_user_id),
                    github_id=identity.provider_user_id,
                )
                owner = await self.find_owner(identity.provider_user_id)
                if owner is None:
                    raise WriteFailedError(
                        f"GitHub id {identity.provider_user_id} rejected but has no owner"
                    )
                return self._existing_owner_outcome(subject_user_id, owner)

            logfire.info(
                "GitHub account linked",
                user_id=str(subject_user_id),
                github_id=identity.provider_user_id,
                github_username=identity.provider_username,
            )
            return Linked(identity=profile.github or external)

    def _existing_owner_outcome(
        self, subject_user_id: UserId, owner: Profile
    ) -> LinkOutcome:
        if owner.id == subject_user_id and owner.github is not None:
            logfire.info("GitHub account already linked to subject", user_id=str(owner.id))
            return AlreadyLinkedSelf(identity=owner.github)

        logfire.warn(
            "GitHub account linked to another profile",
            user_id=str(subject_user_id),
            existing_user=str(owner.id),
        )
        return AlreadyLinkedElsewhere(
            existing_user=owner.id, existing_username=owner.username
        )
