"""GitHub infrastructure providers."""

from dishka import Scope, provide

from devtyper.adapter.github.client import GitHubOAuthClient, RealGitHubOAuthClient
from devtyper.config import GitHubOAuthSettings
from devtyper.util.di.base import ProviderBase
from devtyper.util.error import ConfigurationError
from devtyper.util.observability import instrument_httpx


class GitHubProvider(ProviderBase):
    """GitHub component base."""

    __mock_component__ = "github"


class ProdGitHubProvider(GitHubProvider):
    """Production GitHub provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_github_oauth_client(
        self, github_settings: GitHubOAuthSettings
    ) -> GitHubOAuthClient:
        """Provide GitHub OAuth client.

        Raises:
            ConfigurationError: If GitHub OAuth credentials are not configured
        """
        if not github_settings.client_id:
            raise ConfigurationError("GitHub OAuth client ID must be configured")
        if not github_settings.client_secret:
            raise ConfigurationError("GitHub OAuth client secret must be configured")

        # Instrument outbound calls for observability
        instrument_httpx()
        return RealGitHubOAuthClient(settings=github_settings)
