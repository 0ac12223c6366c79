"""GitHub authentication domain service."""

import logfire

from devtyper.domain.value import ProviderIdentity

from .base import Service


class OAuthClient:
    """OAuth client interface for the identity provider."""

    def authorization_url(self, state: str, redirect_uri: str) -> str:
        """Build the provider authorize URL.

        Args:
            state: Signed state token
            redirect_uri: Where the provider sends the user back

        Returns:
            Authorization URL to redirect user to
        """
        raise NotImplementedError

    async def exchange_code(self, code: str, redirect_uri: str) -> str:
        """Exchange an authorization code for an access token.

        Args:
            code: Authorization code from the callback
            redirect_uri: Redirect URI used when the code was issued

        Returns:
            Provider access token

        Raises:
            ExchangeFailedError: If the provider rejects the code or is unreachable
        """
        raise NotImplementedError

    async def fetch_identity(self, access_token: str) -> ProviderIdentity:
        """Fetch the provider's user record.

        Args:
            access_token: Provider access token

        Returns:
            Canonical provider identity

        Raises:
            IdentityFetchFailedError: If the record is unavailable or incomplete
        """
        raise NotImplementedError


class AuthService(Service):
    """Domain service for the GitHub OAuth round trip.

    Calls are never retried; a failure ends the flow.
    """

    def __init__(self, oauth_client: OAuthClient) -> None:
        """Initialize auth service.

        Args:
            oauth_client: GitHub OAuth client implementation
        """
        self.oauth_client = oauth_client

    def authorization_url(self, state: str, redirect_uri: str) -> str:
        """Build the GitHub authorize URL for a state token."""
        return self.oauth_client.authorization_url(state, redirect_uri)

    async def resolve_identity(self, code: str, redirect_uri: str) -> ProviderIdentity:
        """Exchange a callback code and fetch the GitHub identity behind it.

        Args:
            code: Authorization code from the callback
            redirect_uri: Redirect URI used when the code was issued

        Returns:
            GitHub identity

        Raises:
            ExchangeFailedError: If the code exchange fails
            IdentityFetchFailedError: If the user record cannot be fetched
        """
        with logfire.span("auth_service.resolve_identity"):
            access_token = await self.oauth_client.exchange_code(code, redirect_uri)
            identity = await self.oauth_client.fetch_identity(access_token)
            logfire.info(
                "GitHub identity resolved",
                github_id=identity.provider_user_id,
                github_username=identity.provider_username,
            )
            return identity
