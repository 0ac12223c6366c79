"""OAuth state token service.

State tokens are HS256 JWTs signed with a dedicated secret:

    sub   subject user id (link flow only)
    iat   issue time, seconds since epoch
    flow  "link" or "signup"
    jti   random nonce, consumed once at callback
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable
from uuid import UUID

import jwt
import logfire

from devtyper.config import AuthSettings
from devtyper.domain.error import ExpiredStateTokenError, MalformedStateTokenError
from devtyper.domain.repository.oauth_state import ConsumedStateRepository
from devtyper.domain.value import LinkFlow, StateToken, UserId

from .base import Service

STATE_ALGORITHM = "HS256"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StateTokenService(Service):
    """Issues, verifies and consumes OAuth state tokens."""

    def __init__(
        self,
        auth_settings: AuthSettings,
        consumed_state_repository: ConsumedStateRepository,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize state token service.

        Args:
            auth_settings: Authentication settings (state secret and TTL)
            consumed_state_repository: Store of used nonces
            clock: Source of the current UTC time
        """
        self.auth_settings = auth_settings
        self.consumed_state_repository = consumed_state_repository
        self.clock = clock

    @property
    def ttl(self) -> timedelta:
        return timedelta(minutes=self.auth_settings.state_ttl_minutes)

    def encode(
        self, subject_user_id: UserId | None, flow: LinkFlow = LinkFlow.LINK
    ) -> str:
        """Issue a state token.

        Args:
            subject_user_id: User the flow acts for; None for sign-up
            flow: Flow the token is valid for

        Returns:
            Opaque URL-safe token

        Raises:
            ValueError: If a link token has no subject
        """
        if flow == LinkFlow.LINK and subject_user_id is None:
            raise ValueError("Link state tokens require a subject")

        claims: dict = {
            "iat": int(self.clock().timestamp()),
            "flow": flow.value,
            "jti": secrets.token_urlsafe(16),
        }
        if subject_user_id is not None:
            claims["sub"] = str(subject_user_id)

        return jwt.encode(
            claims, self.auth_settings.state_secret, algorithm=STATE_ALGORITHM
        )

    def decode(self, token: str) -> StateToken:
        """Verify and decode a state token. Has no side effects.

        Args:
            token: Token received in the callback

        Returns:
            Decoded state

        Raises:
            MalformedStateTokenError: If the token is unsigned, tampered or incomplete
            ExpiredStateTokenError: If the token is older than the TTL
        """
        try:
            claims = jwt.decode(
                token,
                self.auth_settings.state_secret,
                algorithms=[STATE_ALGORITHM],
                options={"require": ["iat", "flow", "jti"], "verify_iat": False},
            )
            flow = LinkFlow(claims["flow"])
            issued_at = datetime.fromtimestamp(int(claims["iat"]), tz=timezone.utc)
            subject = UserId(UUID(claims["sub"])) if "sub" in claims else None
            nonce = str(claims["jti"])
        except (jwt.InvalidTokenError, ValueError, TypeError) as e:
            logfire.warn("Malformed state token", error=str(e))
            raise MalformedStateTokenError(str(e)) from e

        if flow == LinkFlow.LINK and subject is None:
            logfire.warn("Link state token without subject")
            raise MalformedStateTokenError("Link state token has no subject")

        # iat has whole-second precision; compare at the same precision
        age = self.clock().replace(microsecond=0) - issued_at
        if age > self.ttl:
            logfire.warn("Expired state token", age_seconds=age.total_seconds())
            raise ExpiredStateTokenError(age.total_seconds())

        return StateToken(
            subject_user_id=subject, issued_at=issued_at, flow=flow, nonce=nonce
        )

    async def consume(self, state: StateToken) -> bool:
        """Mark a decoded state token as used.

        Returns:
            True on first use, False on replay
        """
        with logfire.span("state_token_service.consume", flow=state.flow.value):
            first_use = await self.consumed_state_repository.consume(
                state.nonce, state.issued_at + self.ttl
            )
            if not first_use:
                logfire.warn("State token replayed", flow=state.flow.value)
            return first_use
