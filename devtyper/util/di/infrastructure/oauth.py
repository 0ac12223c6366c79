"""OAuth infrastructure provider."""

from dishka import Scope, provide

from devtyper.adapter.github.client import GitHubOAuthClient
from devtyper.domain.service.auth_service import OAuthClient
from devtyper.util.di.base import ProviderBase


class OAuthClientProvider(ProviderBase):
    """Provider that exposes the GitHub client under the domain interface."""

    scope = Scope.APP

    @provide(scope=Scope.APP)
    def get_oauth_client(self, github_oauth_client: GitHubOAuthClient) -> OAuthClient:
        """Provide the OAuth client used by AuthService.

        Args:
            github_oauth_client: GitHub OAuth client (specific type)

        Returns:
            The same client, typed as the domain interface
        """
        return github_oauth_client
