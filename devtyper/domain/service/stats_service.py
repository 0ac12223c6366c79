"""Attempt statistics domain service."""

from datetime import date, timezone

import logfire

from devtyper.config import AttemptSettings
from devtyper.domain.error import DailyLimitExceededError
from devtyper.domain.model.attempt import Attempt
from devtyper.domain.model.user_stats import UserStats
from devtyper.domain.repository.attempt import AttemptRepository
from devtyper.domain.value import AttemptMode, UserId

from .base import Service


class StatsService(Service):
    """Domain service for recording attempts and reading aggregates."""

    def __init__(
        self, attempt_repository: AttemptRepository, attempt_settings: AttemptSettings
    ) -> None:
        """Initialize stats service.

        Args:
            attempt_repository: Attempt repository
            attempt_settings: Attempt configuration (daily limit)
        """
        self.attempt_repository = attempt_repository
        self.attempt_settings = attempt_settings

    async def record_attempt(self, attempt: Attempt) -> UserStats:
        """Record an attempt and return the updated aggregate.

        Daily-challenge attempts are capped per UTC day.

        Args:
            attempt: Attempt to record

        Returns:
            Aggregate including the attempt

        Raises:
            DailyLimitExceededError: If the user has no daily attempts left
            StorageFailedError: If the attempt could not be recorded
        """
        with logfire.span(
            "stats_service.record_attempt",
            user_id=str(attempt.user_id),
            mode=attempt.mode.value,
        ):
            if attempt.mode == AttemptMode.DAILY:
                day = attempt.created_at.astimezone(timezone.utc).date()
                used = await self.attempt_repository.count_daily(attempt.user_id, day)
                if used >= self.attempt_settings.daily_limit:
                    logfire.warn(
                        "Daily attempts exhausted",
                        user_id=str(attempt.user_id),
                        used=used,
                    )
                    raise DailyLimitExceededError(self.attempt_settings.daily_limit)

            stats = await self.attempt_repository.record(attempt)
            logfire.info(
                "Attempt recorded",
                user_id=str(attempt.user_id),
                total_attempts=stats.total_attempts,
            )
            return stats

    async def get_stats(self, user_id: UserId) -> UserStats | None:
        """Get a user's aggregate, if any."""
        with logfire.span("stats_service.get_stats", user_id=str(user_id)):
            return await self.attempt_repository.find_stats(user_id)

    async def daily_attempts_used(self, user_id: UserId, day: date) -> int:
        """Count daily-challenge attempts used on a UTC day."""
        return await self.attempt_repository.count_daily(user_id, day)
