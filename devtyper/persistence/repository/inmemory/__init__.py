"""In-memory repository implementations for testing."""

from .attempt import InMemoryAttemptRepository
from .oauth_state import InMemoryConsumedStateRepository
from .profile import InMemoryProfileRepository

__all__ = [
    "InMemoryAttemptRepository",
    "InMemoryConsumedStateRepository",
    "InMemoryProfileRepository",
]
