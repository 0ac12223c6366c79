"""SQLAlchemy table definitions for DevTyper.

They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# PROFILES TABLE (one row per hosted-auth account)
# ============================================================================
profiles_table = Table(
    "profiles",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),  # Hosted-auth user id
    Column("username", String(255), nullable=False),
    # Linked GitHub identity, written all together or not at all
    Column("github_id", String(64), nullable=True),
    Column("github_username", String(255), nullable=True),
    Column("github_avatar_url", Text, nullable=True),
    Column("github_connected_at", TIMESTAMP(timezone=True), nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    # One profile per GitHub account
    UniqueConstraint("github_id", name="uq_profiles_github_id"),
)

Index("idx_profiles_username", profiles_table.c.username)
# Sign-up check by GitHub login
Index(
    "idx_profiles_github_username_lower", func.lower(profiles_table.c.github_username)
)

# ============================================================================
# ATTEMPTS TABLE (append-only)
# ============================================================================
attempts_table = Table(
    "attempts",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column(
        "user_id",
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("snippet_id", UUID(as_uuid=True), nullable=False),
    Column("mode", String(20), nullable=False),  # 'daily', 'practice'
    Column("wpm", Numeric, nullable=False),
    Column("accuracy", Numeric, nullable=False),
    Column("elapsed_ms", BigInteger, nullable=False),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    CheckConstraint("mode IN ('daily', 'practice')", name="attempts_mode_check"),
    CheckConstraint("wpm >= 0", name="attempts_wpm_check"),
    CheckConstraint("accuracy >= 0 AND accuracy <= 100", name="attempts_accuracy_check"),
    CheckConstraint("elapsed_ms >= 0", name="attempts_elapsed_ms_check"),
)

Index(
    "idx_attempts_user_mode_created",
    attempts_table.c.user_id,
    attempts_table.c.mode,
    attempts_table.c.created_at,
)

# ============================================================================
# USER STATS TABLE (running aggregate per user)
# ============================================================================
user_stats_table = Table(
    "user_stats",
    metadata,
    Column(
        "user_id",
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("total_attempts", Integer, nullable=False),
    Column("avg_wpm", Numeric, nullable=False),
    Column("avg_accuracy", Numeric, nullable=False),
    Column("best_wpm", Numeric, nullable=False),
    Column("best_accuracy", Numeric, nullable=False),
    Column("total_time_ms", BigInteger, nullable=False),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    CheckConstraint("total_attempts >= 1", name="user_stats_total_attempts_check"),
)

# ============================================================================
# CONSUMED OAUTH STATES TABLE (single-use state tokens)
# ============================================================================
consumed_oauth_states_table = Table(
    "consumed_oauth_states",
    metadata,
    Column("nonce", String(64), primary_key=True),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=False),
)

Index("idx_consumed_oauth_states_expires_at", consumed_oauth_states_table.c.expires_at)
