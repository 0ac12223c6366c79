"""Attempt use cases."""

from .get_stats import (
    GetDailyAttemptsRequest,
    GetDailyAttemptsResponse,
    GetDailyAttemptsUseCase,
    GetStatsRequest,
    GetStatsUseCase,
)
from .submit_attempt import SubmitAttemptRequest, SubmitAttemptUseCase, UserStatsResponse

__all__ = [
    "GetDailyAttemptsRequest",
    "GetDailyAttemptsResponse",
    "GetDailyAttemptsUseCase",
    "GetStatsRequest",
    "GetStatsUseCase",
    "SubmitAttemptRequest",
    "SubmitAttemptUseCase",
    "UserStatsResponse",
]
