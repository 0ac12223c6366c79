"""Bearer session helpers shared by routes."""

import logging

from fastapi import HTTPException, status

from devtyper.domain.error import UnauthenticatedError
from devtyper.domain.service import JWTService
from devtyper.domain.value import Session
from devtyper.interface.error import MalformedAuthorizationError

logger = logging.getLogger(__name__)


def parse_bearer(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer`` header.

    Raises:
        MalformedAuthorizationError: If the header uses another scheme
    """
    if not authorization:
        return None

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise MalformedAuthorizationError("Expected a bearer token")
    return token.strip()


def require_session(jwt_service: JWTService, authorization: str | None) -> Session:
    """Verify the caller's bearer token.

    Raises:
        HTTPException: 401 if the token is missing or invalid
    """
    try:
        return jwt_service.verify_session(parse_bearer(authorization))
    except (MalformedAuthorizationError, UnauthenticatedError) as e:
        logger.info(f"Rejected session: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
