"""Unit tests for GitHubLinkFlowUseCase."""

from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs, urlparse
from uuid import uuid4

import pytest

from devtyper.adapter.github import GitHubOAuthClient
from devtyper.application.usecase.github import GitHubLinkFlowUseCase
from devtyper.application.usecase.github.link_flow import (
    GitHubCallbackRequest,
    StartGitHubFlowRequest,
)
from devtyper.config import AuthSettings
from devtyper.domain.error import (
    ExchangeFailedError,
    IdentityFetchFailedError,
    LookupFailedError,
)
from devtyper.domain.repository import ConsumedStateRepository, ProfileRepository
from devtyper.domain.service import StateTokenService
from devtyper.domain.value import FailureReason, FlowTransport, LinkFlow, UserId
from tests.conftest import make_identity, make_profile
from tests.harness import create_env_fixture

# Unit test fixture - GitHub and persistence mocked
unit_env = create_env_fixture()


async def start(use_case, transport, user_id=None) -> str:
    """Start a flow and return the state token."""
    response = use_case.start(
        StartGitHubFlowRequest(transport=transport, subject_user_id=user_id)
    )
    return response.state_token


class TestStart:
    """Tests for starting a flow."""

    @pytest.mark.asyncio
    async def test_redirect_flow_targets_api_callback(self, unit_env):
        use_case = await unit_env.get(GitHubLinkFlowUseCase)

        response = use_case.start(
            StartGitHubFlowRequest(
                transport=FlowTransport.REDIRECT, subject_user_id=UserId(uuid4())
            )
        )

        params = parse_qs(urlparse(response.authorize_url).query)
        assert params["state"] == [response.state_token]
        assert params["redirect_uri"][0].endswith("/auth/github/callback")

    @pytest.mark.asyncio
    async def test_connect_flow_targets_frontend(self, unit_env):
        use_case = await unit_env.get(GitHubLinkFlowUseCase)

        response = use_case.start(
            StartGitHubFlowRequest(
                transport=FlowTransport.RESPONSE, subject_user_id=UserId(uuid4())
            )
        )

        params = parse_qs(urlparse(response.authorize_url).query)
        assert params["redirect_uri"][0].endswith("/auth/github/connect")

    @pytest.mark.asyncio
    async def test_link_flow_requires_subject(self, unit_env):
        use_case = await unit_env.get(GitHubLinkFlowUseCase)

        with pytest.raises(ValueError):
            use_case.start(StartGitHubFlowRequest(transport=FlowTransport.REDIRECT))

    @pytest.mark.asyncio
    async def test_signup_flow_ignores_subject(self, unit_env):
        """Sign-up state never carries a subject."""
        use_case = await unit_env.get(GitHubLinkFlowUseCase)
        state_service = await unit_env.get(StateTokenService)

        token = await start(use_case, FlowTransport.SIGNUP, UserId(uuid4()))

        decoded = state_service.decode(token)
        assert decoded.flow == LinkFlow.SIGNUP
        assert decoded.subject_user_id is None


class TestLinkCallback:
    """Tests for link callbacks (redirect and response transports)."""

    @pytest.mark.asyncio
    async def test_links_identity_to_subject(self, unit_env):
        # Arrange
        use_case = await unit_env.get(GitHubLinkFlowUseCase)
        profile_repo = await unit_env.get(ProfileRepository)
        profile = await profile_repo.save(make_profile("alice"))
        state = await start(use_case, FlowTransport.REDIRECT, profile.id)

        # Act
        response = await use_case.execute(
            GitHubCallbackRequest(
                transport=FlowTransport.REDIRECT, code="code-1", state=state
            )
        )

        # Assert
        assert response.outcome.kind == "success"
        assert response.outcome.username == "mockuser"
        stored = await profile_repo.find_by_id(profile.id)
        assert stored.github_id == "4242"

    @pytest.mark.asyncio
    async def test_identity_held_elsewhere_is_conflict(self, unit_env):
        """U2 linking the GitHub account U1 holds reports U1."""
        # Arrange
        use_case = await unit_env.get(GitHubLinkFlowUseCase)
        profile_repo = await unit_env.get(ProfileRepository)
        owner = await profile_repo.save(
            make_profile("u1", github=make_identity(provider_user_id="4242"))
        )
        intruder = await profile_repo.save(make_profile("u2"))
        state = await start(use_case, FlowTransport.REDIRECT, intruder.id)

        # Act
        response = await use_case.execute(
            GitHubCallbackRequest(
                transport=FlowTransport.REDIRECT, code="code", state=state
            )
        )

        # Assert
        assert response.outcome.kind == "conflict"
        assert response.outcome.existing_user == owner.id
        assert response.outcome.existing_username == "u1"
        assert (await profile_repo.find_by_id(intruder.id)).github is None

    @pytest.mark.asyncio
    async def test_expired_state_makes_no_network_call(self, unit_env):
        """A state issued 11 minutes ago is rejected before GitHub is called."""
        # Arrange
        use_case = await unit_env.get(GitHubLinkFlowUseCase)
        client = await unit_env.get(GitHubOAuthClient)
        issued = datetime.now(timezone.utc) - timedelta(minutes=11)
        issuer = StateTokenService(
            auth_settings=await unit_env.get(AuthSettings),
            consumed_state_repository=await unit_env.get(ConsumedStateRepository),
            clock=lambda: issued,
        )
        state = issuer.encode(UserId(uuid4()), LinkFlow.LINK)

        # Act
        response = await use_case.execute(
            GitHubCallbackRequest(
                transport=FlowTransport.REDIRECT, code="code", state=state
            )
        )

        # Assert
        assert response.outcome.kind == "invalid_state"
        assert client.network_calls == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("state", [None, "", "not-a-token"])
    async def test_missing_or_garbage_state_is_invalid(self, unit_env, state):
        use_case = await unit_env.get(GitHubLinkFlowUseCase)
        client = await unit_env.get(GitHubOAuthClient)

        response = await use_case.execute(
            GitHubCallbackRequest(
                transport=FlowTransport.REDIRECT, code="code", state=state
            )
        )

        assert response.outcome.kind == "invalid_state"
        assert client.network_calls == 0

    @pytest.mark.asyncio
    async def test_signup_state_rejected_by_link_callback(self, unit_env):
        use_case = await unit_env.get(GitHubLinkFlowUseCase)
        state = await start(use_case, FlowTransport.SIGNUP)

        response = await use_case.execute(
            GitHubCallbackRequest(
                transport=FlowTransport.REDIRECT, code="code", state=state
            )
        )

        assert response.outcome.kind == "invalid_state"

    @pytest.mark.asyncio
    async def test_provider_error_is_reported_without_network_call(self, unit_env):
        # Arrange
        use_case = await unit_env.get(GitHubLinkFlowUseCase)
        client = await unit_env.get(GitHubOAuthClient)
        state = await start(use_case, FlowTransport.REDIRECT, UserId(uuid4()))

        # Act
        response = await use_case.execute(
            GitHubCallbackRequest(
                transport=FlowTransport.REDIRECT, state=state, error="access_denied"
            )
        )

        # Assert
        assert response.outcome.kind == "provider_denied"
        assert response.outcome.error == "access_denied"
        assert client.network_calls == 0

    @pytest.mark.asyncio
    async def test_missing_code_is_provider_denied(self, unit_env):
        use_case = await unit_env.get(GitHubLinkFlowUseCase)
        state = await start(use_case, FlowTransport.REDIRECT, UserId(uuid4()))

        response = await use_case.execute(
            GitHubCallbackRequest(transport=FlowTransport.REDIRECT, state=state)
        )

        assert response.outcome.kind == "provider_denied"
        assert response.outcome.error == "missing_code"

    @pytest.mark.asyncio
    async def test_replayed_state_is_invalid(self, unit_env):
        """A state token works for exactly one callback."""
        # Arrange
        use_case = await unit_env.get(GitHubLinkFlowUseCase)
        client = await unit_env.get(GitHubOAuthClient)
        profile_repo = await unit_env.get(ProfileRepository)
        profile = await profile_repo.save(make_profile("alice"))
        state = await start(use_case, FlowTransport.REDIRECT, profile.id)
        request = GitHubCallbackRequest(
            transport=FlowTransport.REDIRECT, code="code", state=state
        )
        first = await use_case.execute(request)

        # Act
        second = await use_case.execute(request)

        # Assert
        assert first.outcome.kind == "success"
        assert second.outcome.kind == "invalid_state"
        assert client.exchanged_codes == ["code"]

    @pytest.mark.asyncio
    async def test_connect_rejects_state_for_another_session(self, unit_env):
        """The connect transport binds the state to the signed-in caller."""
        use_case = await unit_env.get(GitHubLinkFlowUseCase)
        client = await unit_env.get(GitHubOAuthClient)
        state = await start(use_case, FlowTransport.RESPONSE, UserId(uuid4()))

        response = await use_case.execute(
            GitHubCallbackRequest(
                transport=FlowTransport.RESPONSE,
                code="code",
                state=state,
                session_user_id=UserId(uuid4()),
            )
        )

        assert response.outcome.kind == "invalid_state"
        assert client.network_calls == 0

    @pytest.mark.asyncio
    async def test_connect_links_for_matching_session(self, unit_env):
        use_case = await unit_env.get(GitHubLinkFlowUseCase)
        profile_repo = await unit_env.get(ProfileRepository)
        profile = await profile_repo.save(make_profile("alice"))
        state = await start(use_case, FlowTransport.RESPONSE, profile.id)

        response = await use_case.execute(
            GitHubCallbackRequest(
                transport=FlowTransport.RESPONSE,
                code="code",
                state=state,
                session_user_id=profile.id,
            )
        )

        assert response.outcome.kind == "success"
        assert response.outcome.avatar_url == (
            "https://avatars.githubusercontent.com/u/4242"
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "attr, error, reason",
        [
            (
                "exchange_error",
                ExchangeFailedError("bad_verification_code"),
                FailureReason.EXCHANGE_FAILED,
            ),
            (
                "fetch_error",
                IdentityFetchFailedError("no login"),
                FailureReason.IDENTITY_FETCH_FAILED,
            ),
        ],
    )
    async def test_provider_failures_are_transient(
        self, unit_env, attr, error, reason
    ):
        # Arrange
        use_case = await unit_env.get(GitHubLinkFlowUseCase)
        client = await unit_env.get(GitHubOAuthClient)
        setattr(client, attr, error)
        state = await start(use_case, FlowTransport.REDIRECT, UserId(uuid4()))

        # Act
        response = await use_case.execute(
            GitHubCallbackRequest(
                transport=FlowTransport.REDIRECT, code="code", state=state
            )
        )

        # Assert
        assert response.outcome.kind == "transient_failure"
        assert response.outcome.reason == reason

    @pytest.mark.asyncio
    async def test_missing_profile_is_update_failure(self, unit_env):
        use_case = await unit_env.get(GitHubLinkFlowUseCase)
        state = await start(use_case, FlowTransport.REDIRECT, UserId(uuid4()))

        response = await use_case.execute(
            GitHubCallbackRequest(
                transport=FlowTransport.REDIRECT, code="code", state=state
            )
        )

        assert response.outcome.kind == "transient_failure"
        assert response.outcome.reason == FailureReason.UPDATE_FAILED

    @pytest.mark.asyncio
    async def test_lookup_failure_is_transient(self, unit_env, monkeypatch):
        # Arrange
        use_case = await unit_env.get(GitHubLinkFlowUseCase)
        profile_repo = await unit_env.get(ProfileRepository)
        state = await start(use_case, FlowTransport.REDIRECT, UserId(uuid4()))

        async def broken_lookup(github_id):
            raise LookupFailedError("connection reset")

        monkeypatch.setattr(profile_repo, "find_by_github_id", broken_lookup)

        # Act
        response = await use_case.execute(
            GitHubCallbackRequest(
                transport=FlowTransport.REDIRECT, code="code", state=state
            )
        )

        # Assert
        assert response.outcome.kind == "transient_failure"
        assert response.outcome.reason == FailureReason.LOOKUP_FAILED


class TestSignupCallback:
    """Tests for the sign-up collision check."""

    @pytest.mark.asyncio
    async def test_unlinked_identity_allows_signup(self, unit_env):
        use_case = await unit_env.get(GitHubLinkFlowUseCase)
        state = await start(use_case, FlowTransport.SIGNUP)

        response = await use_case.execute(
            GitHubCallbackRequest(transport=FlowTransport.SIGNUP, code="c", state=state)
        )

        assert response.outcome.kind == "signup_allowed"
        assert response.outcome.username == "mockuser"

    @pytest.mark.asyncio
    async def test_linked_identity_blocks_signup(self, unit_env):
        # Arrange
        use_case = await unit_env.get(GitHubLinkFlowUseCase)
        profile_repo = await unit_env.get(ProfileRepository)
        await profile_repo.save(
            make_profile("existing", github=make_identity(provider_user_id="4242"))
        )
        state = await start(use_case, FlowTransport.SIGNUP)

        # Act
        response = await use_case.execute(
            GitHubCallbackRequest(transport=FlowTransport.SIGNUP, code="c", state=state)
        )

        # Assert
        assert response.outcome.kind == "signup_blocked"
        assert response.outcome.existing_username == "existing"

    @pytest.mark.asyncio
    async def test_link_state_rejected_by_signup_callback(self, unit_env):
        use_case = await unit_env.get(GitHubLinkFlowUseCase)
        state = await start(use_case, FlowTransport.REDIRECT, UserId(uuid4()))

        response = await use_case.execute(
            GitHubCallbackRequest(transport=FlowTransport.SIGNUP, code="c", state=state)
        )

        assert response.outcome.kind == "invalid_state"
