"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict
from uuid import UUID

from devtyper.domain.model import Attempt, ExternalIdentity, Profile, UserStats
from devtyper.domain.value import UserId


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_profile(row: Dict[str, Any]) -> Profile:
    """Convert database row to Profile domain model.

    Args:
        row: Database row as dict

    Returns:
        Profile domain model
    """
    github = None
    if row.get("github_id") is not None:
        github = ExternalIdentity(
            provider_user_id=row["github_id"],
            provider_username=row["github_username"],
            avatar_url=row.get("github_avatar_url"),
            linked_at=row["github_connected_at"],
        )

    return Profile(
        id=UserId(_uuid(row["id"])),
        username=row["username"],
        github=github,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def profile_to_dict(profile: Profile) -> Dict[str, Any]:
    """Convert Profile domain model to database dict."""
    return {
        "id": profile.id,
        "username": profile.username,
        **identity_to_dict(profile.github),
        "created_at": profile.created_at,
        "updated_at": profile.updated_at,
    }


def identity_to_dict(identity: ExternalIdentity | None) -> Dict[str, Any]:
    """Convert a GitHub identity to the four profile columns.

    None clears all four.
    """
    if identity is None:
        return {
            "github_id": None,
            "github_username": None,
            "github_avatar_url": None,
            "github_connected_at": None,
        }
    return {
        "github_id": identity.provider_user_id,
        "github_username": identity.provider_username,
        "github_avatar_url": identity.avatar_url,
        "github_connected_at": identity.linked_at,
    }


def attempt_to_dict(attempt: Attempt) -> Dict[str, Any]:
    """Convert Attempt domain model to database dict."""
    return {
        "id": attempt.id,
        "user_id": attempt.user_id,
        "snippet_id": attempt.snippet_id,
        "mode": attempt.mode.value,
        "wpm": attempt.wpm,
        "accuracy": attempt.accuracy,
        "elapsed_ms": attempt.elapsed_ms,
        "created_at": attempt.created_at,
    }


def row_to_user_stats(row: Dict[str, Any]) -> UserStats:
    """Convert database row to UserStats domain model."""
    return UserStats(
        user_id=UserId(_uuid(row["user_id"])),
        total_attempts=row["total_attempts"],
        avg_wpm=row["avg_wpm"],
        avg_accuracy=row["avg_accuracy"],
        best_wpm=row["best_wpm"],
        best_accuracy=row["best_accuracy"],
        total_time_ms=row["total_time_ms"],
        updated_at=row["updated_at"],
    )
