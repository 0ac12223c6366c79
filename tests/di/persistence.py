"""Mock persistence providers for testing."""

from dishka import Scope, provide

from devtyper.domain.repository import (
    AttemptRepository,
    ConsumedStateRepository,
    ProfileRepository,
)
from devtyper.persistence.repository.inmemory import (
    InMemoryAttemptRepository,
    InMemoryConsumedStateRepository,
    InMemoryProfileRepository,
)
from devtyper.util.di.infrastructure.persistence import PersistenceProvider


class MockPersistenceProvider(PersistenceProvider):
    """Mock persistence provider using in-memory repositories.

    Uses APP scope so data survives across requests served by one container
    (a link flow spans several). Each test builds its own container, which
    keeps tests isolated.
    """

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_profile_repository(self) -> ProfileRepository:
        """Provide in-memory profile repository."""
        return InMemoryProfileRepository()

    @provide(scope=Scope.APP)
    def get_attempt_repository(self) -> AttemptRepository:
        """Provide in-memory attempt repository."""
        return InMemoryAttemptRepository()

    @provide(scope=Scope.APP)
    def get_consumed_state_repository(self) -> ConsumedStateRepository:
        """Provide in-memory consumed state repository."""
        return InMemoryConsumedStateRepository()
