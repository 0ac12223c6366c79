"""JWT token utilities.

Session tokens come from the hosted auth service (HS256, ``sub`` is the user
id). ``create_token`` mirrors that format for local development and tests.
"""

from datetime import datetime, timedelta, timezone

import jwt
from pydantic import BaseModel

from devtyper.config import AuthSettings


class TokenPayload(BaseModel):
    """Verified session token payload."""

    user_id: str
    email: str | None = None
    exp: datetime


class JWTError(Exception):
    """JWT-related error."""

    pass


def create_token(
    user_id: str,
    email: str | None,
    settings: AuthSettings,
    expires_in: timedelta = timedelta(hours=1),
) -> str:
    """Create a session token for the user.

    Args:
        user_id: User ID
        email: User email
        settings: Authentication settings
        expires_in: Token lifetime

    Returns:
        Encoded JWT token
    """
    payload = {
        "sub": user_id,
        "email": email,
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    if settings.jwt_audience:
        payload["aud"] = settings.jwt_audience

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, settings: AuthSettings) -> TokenPayload:
    """Verify and decode a session token.

    Args:
        token: JWT token to verify
        settings: Authentication settings

    Returns:
        Token payload if valid

    Raises:
        JWTError: If token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise JWTError("Token has expired")
    except jwt.InvalidTokenError:
        raise JWTError("Invalid token")

    return TokenPayload(
        user_id=payload["sub"],
        email=payload.get("email"),
        exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )
