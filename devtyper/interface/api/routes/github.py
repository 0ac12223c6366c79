"""GitHub account routes.

Three transports share one flow:

- ``response``: the frontend posts ``{code, state}`` to ``/auth/github/connect``
  with the session token and gets JSON back.
- ``redirect``: GitHub redirects to ``/auth/github/callback`` and the user is
  sent on to the frontend profile page.
- ``signup``: before hosted sign-up, ``/auth/github/signup/callback`` checks
  that the GitHub account is not already linked.
"""

import logging
from urllib.parse import urlencode

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Header, HTTPException, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, Field

from devtyper.application.usecase.github import (
    CheckGitHubIdentityRequest,
    CheckGitHubIdentityResponse,
    CheckGitHubIdentityUseCase,
    Conflict,
    FlowOutcome,
    GitHubCallbackRequest,
    GitHubLinkFlowUseCase,
    InvalidState,
    ProviderDenied,
    SignupAllowed,
    SignupBlocked,
    StartGitHubFlowRequest,
    StartGitHubFlowResponse,
    Success,
    TransientFailure,
)
from devtyper.config import Settings
from devtyper.domain.error import LookupFailedError, ValidationError
from devtyper.domain.service import JWTService
from devtyper.domain.value import FailureReason, FlowTransport
from devtyper.interface.api.session import require_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth/github", tags=["github"], route_class=DishkaRoute)

# Provider faults are reported as bad gateway, storage faults as server errors
_FAILURE_STATUS = {
    FailureReason.EXCHANGE_FAILED: status.HTTP_502_BAD_GATEWAY,
    FailureReason.IDENTITY_FETCH_FAILED: status.HTTP_502_BAD_GATEWAY,
    FailureReason.LOOKUP_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    FailureReason.UPDATE_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class StartGitHubAPIRequest(BaseModel):
    """API request for starting a link flow."""

    transport: FlowTransport = FlowTransport.RESPONSE


class ConnectGitHubAPIRequest(BaseModel):
    """API request carrying the code the frontend received from GitHub."""

    code: str = Field(min_length=1)
    state: str = Field(min_length=1)


class ConnectGitHubResponse(BaseModel):
    """Connect response."""

    success: bool
    provider_username: str
    avatar_url: str | None = None


def _redirect(base_url: str, params: dict[str, str]) -> RedirectResponse:
    return RedirectResponse(
        url=f"{base_url}?{urlencode(params)}", status_code=status.HTTP_302_FOUND
    )


def _profile_redirect(settings: Settings, outcome: FlowOutcome) -> RedirectResponse:
    """Encode a link outcome for the frontend profile page."""
    profile_url = f"{settings.api.frontend_url}/profile"

    if isinstance(outcome, Success):
        params = {"github_connected": "success", "github_username": outcome.username}
    elif isinstance(outcome, Conflict):
        params = {
            "github_error": "already_linked",
            "existing_user": outcome.existing_username,
        }
    elif isinstance(outcome, InvalidState):
        params = {"github_error": "invalid_state"}
    elif isinstance(outcome, ProviderDenied):
        params = {"github_error": "provider_denied"}
    elif isinstance(outcome, TransientFailure):
        params = {"github_error": outcome.reason.value}
    else:
        # Sign-up outcomes never reach the link redirect
        params = {"github_error": "invalid_state"}

    return _redirect(profile_url, params)


def _signup_redirect(settings: Settings, outcome: FlowOutcome) -> RedirectResponse:
    """Send the user on to hosted sign-up, or back to sign in."""
    if isinstance(outcome, SignupAllowed):
        return RedirectResponse(
            url=settings.auth.signup_url, status_code=status.HTTP_302_FOUND
        )

    origin = f"{settings.api.frontend_url}/"
    if isinstance(outcome, SignupBlocked):
        params = {
            "auth_error": "github_already_linked",
            "existing_user": outcome.existing_username,
        }
    elif isinstance(outcome, ProviderDenied):
        params = {"auth_error": "provider_denied"}
    elif isinstance(outcome, TransientFailure):
        params = {"auth_error": outcome.reason.value}
    else:
        params = {"auth_error": "invalid_state"}

    return _redirect(origin, params)


@router.post("/start", response_model=StartGitHubFlowResponse)
async def start_github_flow(
    request: StartGitHubAPIRequest,
    link_flow_use_case: FromDishka[GitHubLinkFlowUseCase],
    jwt_service: FromDishka[JWTService],
    authorization: str | None = Header(default=None),
) -> StartGitHubFlowResponse:
    """Issue a state token and the GitHub authorize URL.

    Requires authentication for link transports.
    """
    subject = None
    if request.transport != FlowTransport.SIGNUP:
        subject = require_session(jwt_service, authorization).user_id

    logger.info(f"Starting GitHub {request.transport.value} flow")
    return link_flow_use_case.start(
        StartGitHubFlowRequest(transport=request.transport, subject_user_id=subject)
    )


@router.get("/callback")
async def github_callback(
    link_flow_use_case: FromDishka[GitHubLinkFlowUseCase],
    settings: FromDishka[Settings],
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
) -> RedirectResponse:
    """Handle the GitHub redirect for the link flow.

    The subject comes from the signed state token. Every outcome is a
    redirect to the frontend profile page.
    """
    result = await link_flow_use_case.execute(
        GitHubCallbackRequest(
            transport=FlowTransport.REDIRECT, code=code, state=state, error=error
        )
    )
    return _profile_redirect(settings, result.outcome)


@router.post("/connect", response_model=ConnectGitHubResponse)
async def connect_github(
    request: ConnectGitHubAPIRequest,
    link_flow_use_case: FromDishka[GitHubLinkFlowUseCase],
    jwt_service: FromDishka[JWTService],
    authorization: str | None = Header(default=None),
) -> ConnectGitHubResponse:
    """Link GitHub to the signed-in account.

    Returns:
        Linked GitHub username and avatar

    Raises:
        HTTPException: 401 without a valid session, 400 for a bad state or a
            denied authorization, 409 if another account holds the GitHub
            identity, 502 on GitHub failures, 500 on storage failures
    """
    session = require_session(jwt_service, authorization)

    result = await link_flow_use_case.execute(
        GitHubCallbackRequest(
            transport=FlowTransport.RESPONSE,
            code=request.code,
            state=request.state,
            session_user_id=session.user_id,
        )
    )
    outcome = result.outcome

    if isinstance(outcome, Success):
        return ConnectGitHubResponse(
            success=True,
            provider_username=outcome.username,
            avatar_url=outcome.avatar_url,
        )
    if isinstance(outcome, Conflict):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "error": "already_linked",
                "existing_username": outcome.existing_username,
            },
        )
    if isinstance(outcome, TransientFailure):
        raise HTTPException(
            status_code=_FAILURE_STATUS[outcome.reason],
            detail={"error": outcome.reason.value},
        )
    if isinstance(outcome, ProviderDenied):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "provider_denied"},
        )
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"error": "invalid_state"},
    )


@router.get("/signup")
async def github_signup(
    link_flow_use_case: FromDishka[GitHubLinkFlowUseCase],
) -> RedirectResponse:
    """Start the sign-up collision check by redirecting to GitHub."""
    started = link_flow_use_case.start(
        StartGitHubFlowRequest(transport=FlowTransport.SIGNUP)
    )
    return RedirectResponse(url=started.authorize_url, status_code=status.HTTP_302_FOUND)


@router.get("/signup/callback")
async def github_signup_callback(
    link_flow_use_case: FromDishka[GitHubLinkFlowUseCase],
    settings: FromDishka[Settings],
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
) -> RedirectResponse:
    """Continue to hosted sign-up unless the GitHub account is already linked."""
    result = await link_flow_use_case.execute(
        GitHubCallbackRequest(
            transport=FlowTransport.SIGNUP, code=code, state=state, error=error
        )
    )
    return _signup_redirect(settings, result.outcome)


@router.post("/check", response_model=CheckGitHubIdentityResponse)
async def check_github_identity(
    request: CheckGitHubIdentityRequest,
    check_use_case: FromDishka[CheckGitHubIdentityUseCase],
) -> CheckGitHubIdentityResponse:
    """Report whether a GitHub id or login is already linked to an account."""
    try:
        return await check_use_case.execute(request)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except LookupFailedError as e:
        logger.error(f"GitHub identity check failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="failed to check github identity",
        )
