"""Attempt routes."""

import logging
from decimal import Decimal
from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Header, HTTPException, status
from pydantic import BaseModel, Field

from devtyper.application.usecase.attempt import (
    GetDailyAttemptsRequest,
    GetDailyAttemptsResponse,
    GetDailyAttemptsUseCase,
    SubmitAttemptRequest,
    SubmitAttemptUseCase,
    UserStatsResponse,
)
from devtyper.domain.error import DailyLimitExceededError, StorageError
from devtyper.domain.service import JWTService
from devtyper.domain.value import AttemptMode, SnippetId
from devtyper.interface.api.session import require_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/attempts", tags=["attempts"], route_class=DishkaRoute)


class SubmitAttemptAPIRequest(BaseModel):
    """API request for submitting an attempt."""

    snippet_id: UUID
    mode: AttemptMode
    wpm: Decimal = Field(ge=0)
    accuracy: Decimal = Field(ge=0, le=100)
    elapsed_ms: int = Field(ge=0)


@router.post(
    "", response_model=UserStatsResponse, status_code=status.HTTP_201_CREATED
)
async def submit_attempt(
    request: SubmitAttemptAPIRequest,
    submit_attempt_use_case: FromDishka[SubmitAttemptUseCase],
    jwt_service: FromDishka[JWTService],
    authorization: str | None = Header(default=None),
) -> UserStatsResponse:
    """Record a finished attempt and return the updated statistics.

    Requires authentication. The attempt is always recorded for the caller.
    """
    session = require_session(jwt_service, authorization)

    try:
        return await submit_attempt_use_case.execute(
            SubmitAttemptRequest(
                user_id=session.user_id,
                snippet_id=SnippetId(request.snippet_id),
                mode=request.mode,
                wpm=request.wpm,
                accuracy=request.accuracy,
                elapsed_ms=request.elapsed_ms,
            )
        )
    except DailyLimitExceededError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="daily attempts exhausted",
        )
    except StorageError as e:
        logger.error(f"Failed to record attempt: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="failed to record attempt",
        )


@router.get("/daily", response_model=GetDailyAttemptsResponse)
async def daily_attempts(
    daily_attempts_use_case: FromDishka[GetDailyAttemptsUseCase],
    jwt_service: FromDishka[JWTService],
    authorization: str | None = Header(default=None),
) -> GetDailyAttemptsResponse:
    """How many daily challenge attempts the caller has left today."""
    session = require_session(jwt_service, authorization)

    try:
        return await daily_attempts_use_case.execute(
            GetDailyAttemptsRequest(user_id=session.user_id)
        )
    except StorageError as e:
        logger.error(f"Failed to count attempts: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="failed to count attempts",
        )
