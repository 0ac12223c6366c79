"""Consumed OAuth state repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime


class ConsumedStateRepository(ABC):
    """Short-lived record of state token nonces that were already used."""

    @abstractmethod
    async def consume(self, nonce: str, expires_at: datetime) -> bool:
        """Mark a nonce as used.

        Args:
            nonce: State token nonce
            expires_at: When the record may be purged

        Returns:
            True on first use, False if the nonce was already consumed
        """
        pass
