"""In-memory attempt repository for testing."""

import asyncio
from collections import defaultdict
from datetime import date, timezone
from typing import Optional

from devtyper.domain.model import Attempt, UserStats
from devtyper.domain.repository import AttemptRepository
from devtyper.domain.value import AttemptMode, UserId


class InMemoryAttemptRepository(AttemptRepository):
    """In-memory implementation of AttemptRepository for testing.

    Writes for one user are serialised with a per-user lock.
    """

    def __init__(self) -> None:
        self._attempts: list[Attempt] = []
        self._stats: dict[UserId, UserStats] = {}
        self._locks: defaultdict[UserId, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def record(self, attempt: Attempt) -> UserStats:
        """Append the attempt and fold it into the aggregate."""
        async with self._locks[attempt.user_id]:
            current = self._stats.get(attempt.user_id)
            stats = (
                current.fold(attempt) if current else UserStats.first(attempt)
            )
            self._attempts.append(attempt)
            self._stats[attempt.user_id] = stats
            return stats

    async def find_stats(self, user_id: UserId) -> Optional[UserStats]:
        """Get a user's aggregate."""
        return self._stats.get(user_id)

    async def count_daily(self, user_id: UserId, day: date) -> int:
        """Count daily-mode attempts on a UTC day."""
        return sum(
            1
            for a in self._attempts
            if a.user_id == user_id
            and a.mode == AttemptMode.DAILY
            and a.created_at.astimezone(timezone.utc).date() == day
        )

    def attempts_for(self, user_id: UserId) -> list[Attempt]:
        """Attempts recorded for a user, oldest first."""
        return [a for a in self._attempts if a.user_id == user_id]
