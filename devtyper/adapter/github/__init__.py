"""GitHub OAuth adapter."""

from devtyper.adapter.github.client import (
    GitHubOAuthClient,
    GitHubOAuthError,
    MockGitHubOAuthClient,
    RealGitHubOAuthClient,
)

__all__ = [
    "GitHubOAuthClient",
    "GitHubOAuthError",
    "MockGitHubOAuthClient",
    "RealGitHubOAuthClient",
]
