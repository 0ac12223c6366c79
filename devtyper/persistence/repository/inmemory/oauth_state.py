"""In-memory consumed state repository for testing."""

from datetime import datetime

from devtyper.domain.repository import ConsumedStateRepository


class InMemoryConsumedStateRepository(ConsumedStateRepository):
    """In-memory implementation of ConsumedStateRepository for testing."""

    def __init__(self) -> None:
        self._consumed: dict[str, datetime] = {}

    async def consume(self, nonce: str, expires_at: datetime) -> bool:
        """Record the nonce; False if it was already recorded."""
        if nonce in self._consumed:
            return False
        self._consumed[nonce] = expires_at
        return True
