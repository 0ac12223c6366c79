"""initial_schema

Create the schema for DevTyper:
- Profiles (one per hosted-auth account, optional linked GitHub identity)
- Attempts (append-only practice results)
- User stats (running aggregate per user)
- Consumed OAuth states (single-use state token nonces)

Revision ID: 3f1c9a7d2b64
Revises:
Create Date: 2026-10-18 10:12:44.381920

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f1c9a7d2b64"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # ========================================================================
    # PROFILES table
    # ========================================================================
    op.create_table(
        "profiles",
        sa.Column("id", sa.UUID(), nullable=False),  # Hosted-auth user id
        sa.Column("username", sa.String(255), nullable=False),
        sa.Column("github_id", sa.String(64), nullable=True),
        sa.Column("github_username", sa.String(255), nullable=True),
        sa.Column("github_avatar_url", sa.Text(), nullable=True),
        sa.Column("github_connected_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("github_id", name="uq_profiles_github_id"),
    )
    op.create_index("idx_profiles_username", "profiles", ["username"])
    op.create_index(
        "idx_profiles_github_username_lower",
        "profiles",
        [sa.text("lower(github_username)")],
    )

    # ========================================================================
    # ATTEMPTS table
    # ========================================================================
    op.create_table(
        "attempts",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("snippet_id", sa.UUID(), nullable=False),
        sa.Column("mode", sa.String(20), nullable=False),  # 'daily', 'practice'
        sa.Column("wpm", sa.Numeric(), nullable=False),
        sa.Column("accuracy", sa.Numeric(), nullable=False),
        sa.Column("elapsed_ms", sa.BigInteger(), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("mode IN ('daily', 'practice')", name="attempts_mode_check"),
        sa.CheckConstraint("wpm >= 0", name="attempts_wpm_check"),
        sa.CheckConstraint(
            "accuracy >= 0 AND accuracy <= 100", name="attempts_accuracy_check"
        ),
        sa.CheckConstraint("elapsed_ms >= 0", name="attempts_elapsed_ms_check"),
    )
    op.create_index(
        "idx_attempts_user_mode_created",
        "attempts",
        ["user_id", "mode", "created_at"],
    )

    # ========================================================================
    # USER_STATS table
    # ========================================================================
    op.create_table(
        "user_stats",
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("total_attempts", sa.Integer(), nullable=False),
        sa.Column("avg_wpm", sa.Numeric(), nullable=False),
        sa.Column("avg_accuracy", sa.Numeric(), nullable=False),
        sa.Column("best_wpm", sa.Numeric(), nullable=False),
        sa.Column("best_accuracy", sa.Numeric(), nullable=False),
        sa.Column("total_time_ms", sa.BigInteger(), nullable=False),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("user_id"),
        sa.CheckConstraint(
            "total_attempts >= 1", name="user_stats_total_attempts_check"
        ),
    )

    # ========================================================================
    # CONSUMED_OAUTH_STATES table
    # ========================================================================
    op.create_table(
        "consumed_oauth_states",
        sa.Column("nonce", sa.String(64), nullable=False),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("nonce"),
    )
    op.create_index(
        "idx_consumed_oauth_states_expires_at",
        "consumed_oauth_states",
        ["expires_at"],
    )


def downgrade() -> None:
    """Downgrade schema."""
    # Drop tables (in reverse order of dependencies)
    op.drop_table("consumed_oauth_states")
    op.drop_table("user_stats")
    op.drop_table("attempts")
    op.drop_table("profiles")
