"""GitHub account use cases."""

from .check_identity import (
    CheckGitHubIdentityRequest,
    CheckGitHubIdentityResponse,
    CheckGitHubIdentityUseCase,
)
from .link_flow import (
    Conflict,
    FlowOutcome,
    GitHubCallbackRequest,
    GitHubCallbackResponse,
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

__all__ = [
    "CheckGitHubIdentityRequest",
    "CheckGitHubIdentityResponse",
    "CheckGitHubIdentityUseCase",
    "Conflict",
    "FlowOutcome",
    "GitHubCallbackRequest",
    "GitHubCallbackResponse",
    "GitHubLinkFlowUseCase",
    "InvalidState",
    "ProviderDenied",
    "SignupAllowed",
    "SignupBlocked",
    "StartGitHubFlowRequest",
    "StartGitHubFlowResponse",
    "Success",
    "TransientFailure",
]
