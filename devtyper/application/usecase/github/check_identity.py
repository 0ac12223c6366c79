"""Check whether a GitHub identity is already linked."""

from pydantic import BaseModel, field_validator

from devtyper.application.usecase.base import BaseUseCase
from devtyper.domain.error import ValidationError
from devtyper.domain.model.profile import Profile
from devtyper.domain.service import IdentityLinkService
from devtyper.domain.value import UserId


class CheckGitHubIdentityRequest(BaseModel):
    """Check request. At least one of the two fields must be set."""

    github_id: str | None = None
    github_username: str | None = None

    @field_validator("github_id", mode="before")
    @classmethod
    def normalise_id(cls, v: object) -> object:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class CheckGitHubIdentityResponse(BaseModel):
    """Check result."""

    is_linked: bool
    existing_user_id: UserId | None = None
    existing_username: str | None = None


class CheckGitHubIdentityUseCase(BaseUseCase):
    """Use case for the pre-sign-up availability check."""

    def __init__(self, identity_link_service: IdentityLinkService) -> None:
        self.identity_link_service = identity_link_service

    async def execute(
        self, request: CheckGitHubIdentityRequest
    ) -> CheckGitHubIdentityResponse:
        """Look up the current owner of a GitHub id or login.

        The id wins when both are given, since logins can be renamed.

        Raises:
            ValidationError: If neither github_id nor github_username is set
            LookupFailedError: If the store cannot be read
        """
        owner: Profile | None
        if request.github_id:
            owner = await self.identity_link_service.find_owner(request.github_id)
        elif request.github_username:
            owner = await self.identity_link_service.find_owner_by_username(
                request.github_username
            )
        else:
            raise ValidationError("github_username or github_id required")

        if owner is None:
            return CheckGitHubIdentityResponse(is_linked=False)

        return CheckGitHubIdentityResponse(
            is_linked=True,
            existing_user_id=owner.id,
            existing_username=owner.username,
        )
