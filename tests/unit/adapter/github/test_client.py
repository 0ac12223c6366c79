"""Unit tests for the GitHub OAuth client."""

from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from devtyper.adapter.github import RealGitHubOAuthClient
from devtyper.config import GitHubOAuthSettings
from devtyper.domain.error import ExchangeFailedError, IdentityFetchFailedError

REDIRECT_URI = "http://localhost:8000/auth/github/callback"


def make_client(handler) -> RealGitHubOAuthClient:
    settings = GitHubOAuthSettings(client_id="client-123", client_secret="secret-456")
    return RealGitHubOAuthClient(settings, transport=httpx.MockTransport(handler))


class TestAuthorizationUrl:
    """Tests for authorization_url method."""

    def test_includes_oauth_parameters(self):
        client = make_client(lambda request: httpx.Response(500))

        url = client.authorization_url("state-abc", REDIRECT_URI)

        parsed = urlparse(url)
        params = parse_qs(parsed.query)
        assert parsed.netloc == "github.com"
        assert parsed.path == "/login/oauth/authorize"
        assert params["client_id"] == ["client-123"]
        assert params["redirect_uri"] == [REDIRECT_URI]
        assert params["scope"] == ["read:user"]
        assert params["state"] == ["state-abc"]
        assert params["allow_signup"] == ["false"]


class TestExchangeCode:
    """Tests for exchange_code method."""

    @pytest.mark.asyncio
    async def test_returns_access_token(self):
        """Should post the code and return the token from the JSON body."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["accept"] = request.headers["accept"]
            seen["body"] = parse_qs(request.content.decode())
            return httpx.Response(200, json={"access_token": "gho_abc"})

        token = await make_client(handler).exchange_code("code-1", REDIRECT_URI)

        assert token == "gho_abc"
        assert seen["method"] == "POST"
        assert seen["accept"] == "application/json"
        assert seen["body"]["code"] == ["code-1"]
        assert seen["body"]["client_secret"] == ["secret-456"]
        assert seen["body"]["redirect_uri"] == [REDIRECT_URI]

    @pytest.mark.asyncio
    async def test_error_payload_with_200_fails(self):
        """GitHub reports bad codes with HTTP 200 and an error field."""
        client = make_client(
            lambda request: httpx.Response(
                200,
                json={
                    "error": "bad_verification_code",
                    "error_description": "The code passed is incorrect or expired.",
                },
            )
        )

        with pytest.raises(ExchangeFailedError, match="bad_verification_code"):
            await client.exchange_code("stale", REDIRECT_URI)

    @pytest.mark.asyncio
    async def test_missing_access_token_fails(self):
        client = make_client(lambda request: httpx.Response(200, json={}))

        with pytest.raises(ExchangeFailedError):
            await client.exchange_code("code", REDIRECT_URI)

    @pytest.mark.asyncio
    async def test_non_200_fails(self):
        client = make_client(lambda request: httpx.Response(503, text="unavailable"))

        with pytest.raises(ExchangeFailedError):
            await client.exchange_code("code", REDIRECT_URI)

    @pytest.mark.asyncio
    async def test_transport_error_fails(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ExchangeFailedError):
            await make_client(handler).exchange_code("code", REDIRECT_URI)

    @pytest.mark.asyncio
    async def test_invalid_json_fails(self):
        client = make_client(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(ExchangeFailedError):
            await client.exchange_code("code", REDIRECT_URI)


class TestFetchIdentity:
    """Tests for fetch_identity method."""

    @pytest.mark.asyncio
    async def test_normalises_numeric_id(self):
        """Integer ids from GitHub come back as strings."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["authorization"] = request.headers["authorization"]
            return httpx.Response(
                200,
                json={
                    "id": 42,
                    "login": "octocat",
                    "avatar_url": "https://avatars.githubusercontent.com/u/42",
                    "email": "octocat@github.com",
                },
            )

        identity = await make_client(handler).fetch_identity("gho_abc")

        assert identity.provider_user_id == "42"
        assert identity.provider_username == "octocat"
        assert identity.avatar_url == "https://avatars.githubusercontent.com/u/42"
        assert seen["url"] == "https://api.github.com/user"
        assert seen["authorization"] == "Bearer gho_abc"

    @pytest.mark.asyncio
    async def test_avatar_is_optional(self):
        client = make_client(
            lambda request: httpx.Response(200, json={"id": 7, "login": "ghost"})
        )

        identity = await client.fetch_identity("token")

        assert identity.avatar_url is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"login": "octocat"},
            {"id": 42},
            {"id": 42, "login": ""},
        ],
    )
    async def test_incomplete_record_fails(self, payload):
        client = make_client(lambda request: httpx.Response(200, json=payload))

        with pytest.raises(IdentityFetchFailedError):
            await client.fetch_identity("token")

    @pytest.mark.asyncio
    async def test_unauthorized_fails(self):
        client = make_client(
            lambda request: httpx.Response(401, json={"message": "Bad credentials"})
        )

        with pytest.raises(IdentityFetchFailedError):
            await client.fetch_identity("revoked")

    @pytest.mark.asyncio
    async def test_non_object_body_fails(self):
        client = make_client(lambda request: httpx.Response(200, json=[1, 2]))

        with pytest.raises(IdentityFetchFailedError):
            await client.fetch_identity("token")
