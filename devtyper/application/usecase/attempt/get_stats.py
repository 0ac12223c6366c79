"""Read-side attempt use cases."""

from datetime import date, datetime, timezone

from pydantic import BaseModel

from devtyper.application.usecase.attempt.submit_attempt import UserStatsResponse
from devtyper.application.usecase.base import BaseUseCase
from devtyper.config import AttemptSettings
from devtyper.domain.error import NotFoundError
from devtyper.domain.service import StatsService
from devtyper.domain.value import UserId


class GetStatsRequest(BaseModel):
    """Get stats request."""

    user_id: UserId


class GetStatsUseCase(BaseUseCase):
    """Use case for reading a user's aggregate."""

    def __init__(self, stats_service: StatsService) -> None:
        self.stats_service = stats_service

    async def execute(self, request: GetStatsRequest) -> UserStatsResponse:
        """Get the aggregate.

        Raises:
            NotFoundError: If the user has no attempts yet
        """
        stats = await self.stats_service.get_stats(request.user_id)
        if stats is None:
            raise NotFoundError("UserStats", str(request.user_id))
        return UserStatsResponse.from_stats(stats)


class GetDailyAttemptsRequest(BaseModel):
    """Daily attempts request."""

    user_id: UserId
    day: date | None = None  # Defaults to the current UTC day


class GetDailyAttemptsResponse(BaseModel):
    """Daily challenge allowance for one UTC day."""

    attempts_used: int
    attempts_remaining: int
    max_attempts: int


class GetDailyAttemptsUseCase(BaseUseCase):
    """Use case for reporting how many daily attempts are left."""

    def __init__(
        self, stats_service: StatsService, attempt_settings: AttemptSettings
    ) -> None:
        self.stats_service = stats_service
        self.attempt_settings = attempt_settings

    async def execute(self, request: GetDailyAttemptsRequest) -> GetDailyAttemptsResponse:
        day = request.day or datetime.now(timezone.utc).date()
        used = await self.stats_service.daily_attempts_used(request.user_id, day)
        limit = self.attempt_settings.daily_limit
        return GetDailyAttemptsResponse(
            attempts_used=used,
            attempts_remaining=max(0, limit - used),
            max_attempts=limit,
        )
