"""Session token domain service."""

from uuid import UUID

import logfire

from devtyper.config import AuthSettings
from devtyper.domain.error import UnauthenticatedError
from devtyper.domain.value import Session, UserId
from devtyper.util.jwt import JWTError, verify_token

from .base import Service


class JWTService(Service):
    """Domain service for verifying hosted-auth session tokens."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize JWT service.

        Args:
            auth_settings: Authentication settings
        """
        self.auth_settings = auth_settings

    def verify_session(self, token: str | None) -> Session:
        """Verify a bearer token and return the session behind it.

        Args:
            token: JWT token string

        Returns:
            Verified session

        Raises:
            UnauthenticatedError: If token is missing, invalid or expired
        """
        if not token:
            raise UnauthenticatedError("Missing session token")

        with logfire.span("jwt_service.verify_session"):
            try:
                payload = verify_token(token, self.auth_settings)
                user_id = UserId(UUID(payload.user_id))
            except (JWTError, ValueError) as e:
                logfire.warn("Session token rejected", error=str(e))
                raise UnauthenticatedError(str(e)) from e

            logfire.info("Session token verified", user_id=str(user_id))
            return Session(user_id=user_id, email=payload.email)

    def get_session_or_none(self, token: str | None) -> Session | None:
        """Verify a bearer token without raising.

        Returns:
            Session if token is valid, None if token is missing or invalid
        """
        try:
            return self.verify_session(token)
        except UnauthenticatedError:
            return None
