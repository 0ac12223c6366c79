"""Attempt repository interface."""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from devtyper.domain.model.attempt import Attempt
from devtyper.domain.model.user_stats import UserStats
from devtyper.domain.value import UserId


class AttemptRepository(ABC):
    """Repository for attempts and the per-user aggregate they feed."""

    @abstractmethod
    async def record(self, attempt: Attempt) -> UserStats:
        """Append an attempt and fold it into the user's aggregate.

        Both writes happen atomically. Concurrent calls for the same user
        never lose an update.

        Args:
            attempt: The attempt to record

        Returns:
            The aggregate after the fold

        Raises:
            StorageFailedError: If nothing could be recorded
        """
        pass

    @abstractmethod
    async def find_stats(self, user_id: UserId) -> Optional[UserStats]:
        """Get a user's aggregate.

        Args:
            user_id: The user's unique identifier

        Returns:
            The aggregate if the user has any attempts, None otherwise
        """
        pass

    @abstractmethod
    async def count_daily(self, user_id: UserId, day: date) -> int:
        """Count daily-challenge attempts made by a user on a UTC day.

        Args:
            user_id: The user's unique identifier
            day: UTC calendar day

        Returns:
            Number of daily-mode attempts
        """
        pass
