"""PostgreSQL repository implementations."""

from devtyper.persistence.repository.attempt import PostgresAttemptRepository
from devtyper.persistence.repository.oauth_state import PostgresConsumedStateRepository
from devtyper.persistence.repository.profile import PostgresProfileRepository

__all__ = [
    "PostgresProfileRepository",
    "PostgresAttemptRepository",
    "PostgresConsumedStateRepository",
]
