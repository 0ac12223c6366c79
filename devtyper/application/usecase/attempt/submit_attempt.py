"""Submit attempt use case."""

from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

from pydantic import BaseModel, Field

from devtyper.application.usecase.base import BaseUseCase
from devtyper.domain.model.attempt import Attempt
from devtyper.domain.model.user_stats import UserStats
from devtyper.domain.service import StatsService
from devtyper.domain.value import AttemptId, AttemptMode, SnippetId, UserId


class SubmitAttemptRequest(BaseModel):
    """Submit attempt request."""

    user_id: UserId  # From the verified session, never the request body
    snippet_id: SnippetId
    mode: AttemptMode
    wpm: Decimal = Field(ge=0)
    accuracy: Decimal = Field(ge=0, le=100)
    elapsed_ms: int = Field(ge=0)


class UserStatsResponse(BaseModel):
    """Aggregate snapshot."""

    user_id: str
    total_attempts: int
    avg_wpm: float
    avg_accuracy: float
    best_wpm: float
    best_accuracy: float
    total_time_ms: int
    updated_at: datetime

    @classmethod
    def from_stats(cls, stats: UserStats) -> "UserStatsResponse":
        return cls(
            user_id=str(stats.user_id),
            total_attempts=stats.total_attempts,
            avg_wpm=float(stats.avg_wpm),
            avg_accuracy=float(stats.avg_accuracy),
            best_wpm=float(stats.best_wpm),
            best_accuracy=float(stats.best_accuracy),
            total_time_ms=stats.total_time_ms,
            updated_at=stats.updated_at,
        )


class SubmitAttemptUseCase(BaseUseCase):
    """Use case for recording a finished attempt."""

    def __init__(self, stats_service: StatsService) -> None:
        """Initialize submit attempt use case.

        Args:
            stats_service: Stats domain service
        """
        self.stats_service = stats_service

    async def execute(self, request: SubmitAttemptRequest) -> UserStatsResponse:
        """Record the attempt and return the updated aggregate.

        Args:
            request: Submit attempt request

        Returns:
            Aggregate snapshot including this attempt

        Raises:
            DailyLimitExceededError: If no daily attempts are left today
            StorageFailedError: If the attempt could not be recorded
        """
        attempt = Attempt(
            id=AttemptId(uuid4()),
            user_id=request.user_id,
            snippet_id=request.snippet_id,
            mode=request.mode,
            wpm=request.wpm,
            accuracy=request.accuracy,
            elapsed_ms=request.elapsed_ms,
            created_at=datetime.now(timezone.utc),
        )

        stats = await self.stats_service.record_attempt(attempt)
        return UserStatsResponse.from_stats(stats)
