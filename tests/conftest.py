"""Test configuration and shared helpers."""

import os
from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from devtyper.config import Settings
from devtyper.domain.model import Attempt, ExternalIdentity, Profile
from devtyper.domain.value import (
    AttemptId,
    AttemptMode,
    ProviderIdentity,
    SnippetId,
    UserId,
)
from devtyper.util.jwt import create_token

# Integration tests talk to a real database only when one is configured
requires_database = pytest.mark.skipif(
    not os.environ.get("DATABASE__URL"),
    reason="DATABASE__URL not set; PostgreSQL integration tests skipped",
)


def make_profile(
    username: str = "alice",
    user_id: UserId | None = None,
    github: ProviderIdentity | None = None,
) -> Profile:
    """Build a profile with a fresh id, optionally already linked to GitHub."""
    return Profile(
        id=user_id or UserId(uuid4()),
        username=username,
        github=ExternalIdentity.from_provider(github) if github else None,
    )


def make_identity(
    provider_user_id: str = "42",
    provider_username: str = "octocat",
    avatar_url: str | None = "https://avatars.githubusercontent.com/u/42",
) -> ProviderIdentity:
    """Build a GitHub identity as returned by the provider."""
    return ProviderIdentity(
        provider_user_id=provider_user_id,
        provider_username=provider_username,
        avatar_url=avatar_url,
    )


def make_attempt(
    user_id: UserId,
    wpm: str | int = 50,
    accuracy: str | int = 90,
    elapsed_ms: int = 30_000,
    mode: AttemptMode = AttemptMode.PRACTICE,
    created_at: datetime | None = None,
) -> Attempt:
    """Build an attempt for a user."""
    return Attempt(
        id=AttemptId(uuid4()),
        user_id=user_id,
        snippet_id=SnippetId(uuid4()),
        mode=mode,
        wpm=Decimal(str(wpm)),
        accuracy=Decimal(str(accuracy)),
        elapsed_ms=elapsed_ms,
        created_at=created_at or datetime.now(timezone.utc),
    )


def bearer(user_id: UserId, settings: Settings | None = None) -> dict[str, str]:
    """Authorization header carrying a session token for a user."""
    settings = settings or Settings()
    token = create_token(str(user_id), f"{user_id}@example.com", settings.auth)
    return {"Authorization": f"Bearer {token}"}
