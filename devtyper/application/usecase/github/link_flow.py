"""GitHub link flow use case.

One orchestrator serves every GitHub entry point. The transport decides
which redirect URI the provider sends the user back to and how the route
renders the outcome; the invariants are the same for all of them:

1. The state token is checked before anything else. A bad, expired,
   replayed or mismatched token ends the flow without calling GitHub.
2. A provider error (or a missing code) ends the flow without calling GitHub.
3. Only then is the code exchanged and the identity linked or checked.
"""

from typing import Annotated, Literal, Union

import logfire
from pydantic import BaseModel, Field

from devtyper.application.usecase.base import BaseUseCase
from devtyper.config import Settings
from devtyper.domain.error import (
    ExchangeFailedError,
    IdentityFetchFailedError,
    InvalidStateError,
    LookupFailedError,
    WriteFailedError,
)
from devtyper.domain.model.link import AlreadyLinkedElsewhere
from devtyper.domain.service import AuthService, IdentityLinkService, StateTokenService
from devtyper.domain.value import (
    FailureReason,
    FlowTransport,
    LinkFlow,
    ProviderIdentity,
    StateToken,
    UserId,
)


class Success(BaseModel):
    """Identity is linked to the subject."""

    kind: Literal["success"] = "success"
    username: str
    avatar_url: str | None = None


class Conflict(BaseModel):
    """Identity belongs to another profile."""

    kind: Literal["conflict"] = "conflict"
    existing_user: UserId
    existing_username: str


class InvalidState(BaseModel):
    """State token could not be trusted."""

    kind: Literal["invalid_state"] = "invalid_state"
    detail: str


class ProviderDenied(BaseModel):
    """User declined at GitHub, or GitHub returned no code."""

    kind: Literal["provider_denied"] = "provider_denied"
    error: str


class TransientFailure(BaseModel):
    """Provider or storage fault. The user can restart the flow."""

    kind: Literal["transient_failure"] = "transient_failure"
    reason: FailureReason


class SignupAllowed(BaseModel):
    """Nobody holds the identity; sign-up may continue."""

    kind: Literal["signup_allowed"] = "signup_allowed"
    username: str


class SignupBlocked(BaseModel):
    """Identity already belongs to an account; sign in instead."""

    kind: Literal["signup_blocked"] = "signup_blocked"
    existing_username: str


FlowOutcome = Annotated[
    Union[
        Success,
        Conflict,
        InvalidState,
        ProviderDenied,
        TransientFailure,
        SignupAllowed,
        SignupBlocked,
    ],
    Field(discriminator="kind"),
]


class StartGitHubFlowRequest(BaseModel):
    """Start a GitHub flow."""

    transport: FlowTransport
    subject_user_id: UserId | None = None  # Required except for sign-up


class StartGitHubFlowResponse(BaseModel):
    """State token and the GitHub URL to send the user to."""

    state_token: str
    authorize_url: str


class GitHubCallbackRequest(BaseModel):
    """Parameters GitHub sends back, plus the caller's session if any."""

    transport: FlowTransport
    code: str | None = None
    state: str | None = None
    error: str | None = None
    session_user_id: UserId | None = None  # Set for the connect (response) transport


class GitHubCallbackResponse(BaseModel):
    """Terminal outcome of a flow."""

    transport: FlowTransport
    outcome: FlowOutcome


class GitHubLinkFlowUseCase(BaseUseCase):
    """Use case for linking GitHub accounts and checking sign-up collisions."""

    def __init__(
        self,
        auth_service: AuthService,
        state_token_service: StateTokenService,
        identity_link_service: IdentityLinkService,
        settings: Settings,
    ) -> None:
        """Initialize link flow use case.

        Args:
            auth_service: GitHub OAuth domain service
            state_token_service: State token domain service
            identity_link_service: Identity link domain service
            settings: Application settings
        """
        self.auth_service = auth_service
        self.state_token_service = state_token_service
        self.identity_link_service = identity_link_service
        self.settings = settings

    def redirect_uri(self, transport: FlowTransport) -> str:
        """Where GitHub sends the user back for a transport."""
        api = self.settings.api
        if transport == FlowTransport.REDIRECT:
            return api.github_callback_url
        if transport == FlowTransport.SIGNUP:
            return api.github_signup_callback_url
        return api.github_connect_url

    @staticmethod
    def expected_flow(transport: FlowTransport) -> LinkFlow:
        if transport == FlowTransport.SIGNUP:
            return LinkFlow.SIGNUP
        return LinkFlow.LINK

    def start(self, request: StartGitHubFlowRequest) -> StartGitHubFlowResponse:
        """Issue a state token and build the GitHub authorize URL.

        Raises:
            ValueError: If a link transport is started without a subject
        """
        flow = self.expected_flow(request.transport)
        subject = request.subject_user_id if flow == LinkFlow.LINK else None
        state_token = self.state_token_service.encode(subject, flow)
        authorize_url = self.auth_service.authorization_url(
            state_token, self.redirect_uri(request.transport)
        )

        logfire.info(
            "GitHub flow started",
            transport=request.transport.value,
            user_id=str(subject) if subject else None,
        )

        return StartGitHubFlowResponse(
            state_token=state_token, authorize_url=authorize_url
        )

    async def execute(self, request: GitHubCallbackRequest) -> GitHubCallbackResponse:
        """Resolve a GitHub callback into a terminal outcome.

        Never raises for expected failures; every failure is an outcome.
        """
        with logfire.span(
            "github_link_flow.callback", transport=request.transport.value
        ):
            outcome = await self._resolve(request)
            logfire.info(
                "GitHub flow resolved",
                transport=request.transport.value,
                outcome=outcome.kind,
            )
            return GitHubCallbackResponse(transport=request.transport, outcome=outcome)

    async def _resolve(self, request: GitHubCallbackRequest) -> FlowOutcome:
        state = self._check_state(request)
        if isinstance(state, InvalidState):
            return state

        if request.error or not request.code:
            logfire.warn(
                "GitHub authorization denied",
                error=request.error,
                has_code=bool(request.code),
            )
            return ProviderDenied(error=request.error or "missing_code")

        try:
            if not await self.state_token_service.consume(state):
                return InvalidState(detail="State token already used")
        except LookupFailedError as e:
            logfire.error("State consumption failed", error=str(e))
            return TransientFailure(reason=FailureReason.LOOKUP_FAILED)

        try:
            identity = await self.auth_service.resolve_identity(
                request.code, self.redirect_uri(request.transport)
            )
        except ExchangeFailedError as e:
            logfire.warn("GitHub code exchange failed", error=str(e))
            return TransientFailure(reason=FailureReason.EXCHANGE_FAILED)
        except IdentityFetchFailedError as e:
            logfire.warn("GitHub identity fetch failed", error=str(e))
            return TransientFailure(reason=FailureReason.IDENTITY_FETCH_FAILED)

        try:
            if state.flow == LinkFlow.SIGNUP:
                return await self._check_signup(identity)
            return await self._link(state.subject_user_id, identity)
        except LookupFailedError as e:
            logfire.error("GitHub owner lookup failed", error=str(e))
            return TransientFailure(reason=FailureReason.LOOKUP_FAILED)
        except WriteFailedError as e:
            logfire.error("GitHub link write failed", error=str(e))
            return TransientFailure(reason=FailureReason.UPDATE_FAILED)

    def _check_state(self, request: GitHubCallbackRequest) -> StateToken | InvalidState:
        if not request.state:
            return InvalidState(detail="Missing state")

        try:
            state = self.state_token_service.decode(request.state)
        except InvalidStateError as e:
            return InvalidState(detail=str(e))

        if state.flow != self.expected_flow(request.transport):
            logfire.warn(
                "State token used for the wrong flow",
                flow=state.flow.value,
                transport=request.transport.value,
            )
            return InvalidState(detail="State token issued for another flow")

        if (
            request.transport == FlowTransport.RESPONSE
            and state.subject_user_id != request.session_user_id
        ):
            logfire.warn(
                "State token subject does not match session",
                user_id=str(request.session_user_id),
            )
            return InvalidState(detail="State token issued for another user")

        return state

    async def _link(self, subject: UserId, identity: ProviderIdentity) -> FlowOutcome:
        result = await self.identity_link_service.link(subject, identity)
        if isinstance(result, AlreadyLinkedElsewhere):
            return Conflict(
                existing_user=result.existing_user,
                existing_username=result.existing_username,
            )
        return Success(
            username=result.identity.provider_username,
            avatar_url=result.identity.avatar_url,
        )

    async def _check_signup(self, identity: ProviderIdentity) -> FlowOutcome:
        owner = await self.identity_link_service.find_owner(identity.provider_user_id)
        if owner is not None:
            return SignupBlocked(existing_username=owner.username)
        return SignupAllowed(username=identity.provider_username)
