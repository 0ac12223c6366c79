"""Statistics routes."""

import logging

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Header, HTTPException, status

from devtyper.application.usecase.attempt import (
    GetStatsRequest,
    GetStatsUseCase,
    UserStatsResponse,
)
from devtyper.domain.error import NotFoundError, StorageError
from devtyper.domain.service import JWTService
from devtyper.interface.api.session import require_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stats", tags=["stats"], route_class=DishkaRoute)


@router.get("/me", response_model=UserStatsResponse)
async def my_stats(
    get_stats_use_case: FromDishka[GetStatsUseCase],
    jwt_service: FromDishka[JWTService],
    authorization: str | None = Header(default=None),
) -> UserStatsResponse:
    """Get the caller's aggregate statistics."""
    session = require_session(jwt_service, authorization)

    try:
        return await get_stats_use_case.execute(GetStatsRequest(user_id=session.user_id))
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No attempts recorded yet",
        )
    except StorageError as e:
        logger.error(f"Failed to read stats: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="failed to read stats",
        )
