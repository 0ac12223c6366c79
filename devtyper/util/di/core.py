"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from devtyper.config import AttemptSettings, AuthSettings, GitHubOAuthSettings, Settings
from devtyper.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        """Provide auth settings."""
        return settings.auth

    @provide(scope=Scope.APP)
    def provide_github_settings(self, settings: Settings) -> GitHubOAuthSettings:
        """Provide GitHub OAuth app settings."""
        return settings.auth.github

    @provide(scope=Scope.APP)
    def provide_attempt_settings(self, settings: Settings) -> AttemptSettings:
        """Provide attempt settings."""
        return settings.attempts
