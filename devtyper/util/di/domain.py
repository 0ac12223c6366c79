"""Domain layer DI providers."""

from dishka import Scope, provide

from devtyper.config import AttemptSettings, AuthSettings
from devtyper.domain.repository import (
    AttemptRepository,
    ConsumedStateRepository,
    ProfileRepository,
)
from devtyper.domain.service import (
    AuthService,
    IdentityLinkService,
    JWTService,
    OAuthClient,
    StateTokenService,
    StatsService,
)
from devtyper.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_auth_service(self, oauth_client: OAuthClient) -> AuthService:
        """Provide GitHub authentication domain service."""
        return AuthService(oauth_client=oauth_client)

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide session token domain service."""
        return JWTService(auth_settings=auth_settings)

    @provide
    def get_state_token_service(
        self,
        auth_settings: AuthSettings,
        consumed_state_repository: ConsumedStateRepository,
    ) -> StateTokenService:
        """Provide OAuth state token domain service."""
        return StateTokenService(
            auth_settings=auth_settings,
            consumed_state_repository=consumed_state_repository,
        )

    @provide
    def get_identity_link_service(
        self, profile_repository: ProfileRepository
    ) -> IdentityLinkService:
        """Provide identity link domain service."""
        return IdentityLinkService(profile_repository=profile_repository)

    @provide
    def get_stats_service(
        self,
        attempt_repository: AttemptRepository,
        attempt_settings: AttemptSettings,
    ) -> StatsService:
        """Provide stats domain service."""
        return StatsService(
            attempt_repository=attempt_repository, attempt_settings=attempt_settings
        )
