"""Unit tests for row mappers."""

from datetime import datetime, timezone
from uuid import uuid4

from devtyper.domain.model import ExternalIdentity
from devtyper.persistence.mappers import profile_to_dict, row_to_profile
from tests.conftest import make_identity, make_profile


def profile_row(**overrides):
    now = datetime.now(timezone.utc)
    row = {
        "id": str(uuid4()),
        "username": "alice",
        "github_id": None,
        "github_username": None,
        "github_avatar_url": None,
        "github_connected_at": None,
        "created_at": now,
        "updated_at": now,
    }
    row.update(overrides)
    return row


class TestProfileMapping:
    """Tests for profile row mapping."""

    def test_unlinked_row_has_no_identity(self):
        profile = row_to_profile(profile_row())

        assert profile.github is None
        assert profile.github_id is None

    def test_linked_row_carries_all_identity_fields(self):
        linked_at = datetime(2024, 5, 1, tzinfo=timezone.utc)

        profile = row_to_profile(
            profile_row(
                github_id="42",
                github_username="octocat",
                github_avatar_url=None,
                github_connected_at=linked_at,
            )
        )

        assert profile.github == ExternalIdentity(
            provider_user_id="42",
            provider_username="octocat",
            avatar_url=None,
            linked_at=linked_at,
        )

    def test_unlinked_profile_clears_identity_columns(self):
        """Identity columns are written together, even when empty."""
        data = profile_to_dict(make_profile())

        assert data["github_id"] is None
        assert data["github_username"] is None
        assert data["github_avatar_url"] is None
        assert data["github_connected_at"] is None

    def test_round_trip_keeps_identity(self):
        profile = make_profile(github=make_identity("7", "ghost"))

        restored = row_to_profile(profile_to_dict(profile))

        assert restored == profile
