"""GitHub OAuth client implementation.

Implements the OAuth web application flow used to link a GitHub account:
authorize, exchange the code for a token, read the user record.
"""

from urllib.parse import urlencode

import httpx
import logfire

from devtyper.adapter.error import ProviderError
from devtyper.config import GitHubOAuthSettings
from devtyper.domain.error import ExchangeFailedError, IdentityFetchFailedError
from devtyper.domain.service.auth_service import OAuthClient
from devtyper.domain.value import ProviderIdentity


class GitHubOAuthError(ProviderError):
    """GitHub OAuth error."""

    pass


class GitHubOAuthClient(OAuthClient):
    """Base class for GitHub OAuth clients.

    Provides type distinction for dependency injection.
    """

    pass


class RealGitHubOAuthClient(GitHubOAuthClient):
    """GitHub OAuth client backed by httpx."""

    def __init__(
        self,
        settings: GitHubOAuthSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize GitHub OAuth client.

        Args:
            settings: GitHub OAuth app settings
            transport: Optional httpx transport, used by tests
        """
        self.settings = settings
        self.transport = transport

    def authorization_url(self, state: str, redirect_uri: str) -> str:
        """Build the GitHub authorize URL.

        Sign-up on the GitHub side is disabled so linking never creates a new
        GitHub account.
        """
        params = {
            "client_id": self.settings.client_id,
            "redirect_uri": redirect_uri,
            "scope": self.settings.scope,
            "state": state,
            "allow_signup": "false",
        }
        return f"{self.settings.authorize_url}?{urlencode(params)}"

    async def exchange_code(self, code: str, redirect_uri: str) -> str:
        """Exchange an authorization code for an access token.

        GitHub answers a bad or reused code with HTTP 200 and an ``error``
        field, so the payload is checked as well as the status.

        Raises:
            ExchangeFailedError: If the exchange fails
        """
        data = {
            "client_id": self.settings.client_id,
            "client_secret": self.settings.client_secret,
            "code": code,
            "redirect_uri": redirect_uri,
        }

        try:
            result = await self._request(
                "POST",
                self.settings.token_url,
                data=data,
                headers={"Accept": "application/json"},
            )
        except GitHubOAuthError as e:
            raise ExchangeFailedError(str(e)) from e

        if "error" in result:
            logfire.error(
                "GitHub token exchange rejected",
                error=result.get("error"),
                error_description=result.get("error_description"),
            )
            raise ExchangeFailedError(f"Token exchange rejected: {result['error']}")

        access_token = result.get("access_token")
        if not access_token:
            logfire.error("GitHub token exchange returned no access token")
            raise ExchangeFailedError("Token exchange returned no access token")

        return access_token

    async def fetch_identity(self, access_token: str) -> ProviderIdentity:
        """Fetch the GitHub user record.

        Raises:
            IdentityFetchFailedError: If the request fails or ``id``/``login`` is missing
        """
        try:
            user_info = await self._request(
                "GET",
                f"{self.settings.api_url}/user",
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Accept": "application/vnd.github.v3+json",
                },
            )
        except GitHubOAuthError as e:
            raise IdentityFetchFailedError(str(e)) from e

        github_id = user_info.get("id")
        login = user_info.get("login")
        if github_id is None or not login:
            logfire.error(
                "GitHub user record incomplete",
                has_id=github_id is not None,
                has_login=bool(login),
            )
            raise IdentityFetchFailedError("GitHub user record lacks id or login")

        identity = ProviderIdentity(
            provider_user_id=github_id,
            provider_username=login,
            avatar_url=user_info.get("avatar_url"),
        )

        logfire.info(
            "GitHub user fetched",
            github_id=identity.provider_user_id,
            github_username=identity.provider_username,
        )

        return identity

    async def _request(self, method: str, url: str, **kwargs) -> dict:
        """Send a request to GitHub and decode the JSON body.

        Raises:
            GitHubOAuthError: On transport errors, non-200 responses or bad JSON
        """
        try:
            async with httpx.AsyncClient(
                transport=self.transport, timeout=self.settings.timeout
            ) as client:
                response = await client.request(method, url, **kwargs)

                if response.status_code != 200:
                    logfire.error(
                        "GitHub request failed",
                        method=method,
                        url=url,
                        status_code=response.status_code,
                        error=response.text,
                    )
                    raise GitHubOAuthError(
                        f"GitHub request failed: {response.status_code}"
                    )

                result = response.json()

        except httpx.HTTPError as e:
            logfire.error("GitHub HTTP error", method=method, url=url, error=str(e))
            raise GitHubOAuthError(f"HTTP error calling GitHub: {e}") from e
        except ValueError as e:
            logfire.error("GitHub returned invalid JSON", method=method, url=url)
            raise GitHubOAuthError("Invalid JSON from GitHub") from e

        if not isinstance(result, dict):
            raise GitHubOAuthError("Unexpected response shape from GitHub")
        return result


class MockGitHubOAuthClient(GitHubOAuthClient):
    """Mock GitHub OAuth client for testing.

    Returns deterministic test data without making real API calls. Records
    every network-equivalent call so tests can assert none were made.
    """

    def __init__(self) -> None:
        self.identity = ProviderIdentity(
            provider_user_id="4242",
            provider_username="mockuser",
            avatar_url="https://avatars.githubusercontent.com/u/4242",
        )
        self.exchange_error: Exception | None = None
        self.fetch_error: Exception | None = None
        self.exchanged_codes: list[str] = []
        self.fetched_tokens: list[str] = []

    @property
    def network_calls(self) -> int:
        return len(self.exchanged_codes) + len(self.fetched_tokens)

    def authorization_url(self, state: str, redirect_uri: str) -> str:
        params = {"state": state, "redirect_uri": redirect_uri, "mock": "true"}
        return f"https://github.com/login/oauth/authorize?{urlencode(params)}"

    async def exchange_code(self, code: str, redirect_uri: str) -> str:
        self.exchanged_codes.append(code)
        if self.exchange_error is not None:
            raise self.exchange_error
        return f"mock-token-{code}"

    async def fetch_identity(self, access_token: str) -> ProviderIdentity:
        self.fetched_tokens.append(access_token)
        if self.fetch_error is not None:
            raise self.fetch_error
        return self.identity
