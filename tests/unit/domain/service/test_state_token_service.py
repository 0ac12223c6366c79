"""Unit tests for StateTokenService."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt
import pytest

from devtyper.config import AuthSettings
from devtyper.domain.error import ExpiredStateTokenError, MalformedStateTokenError
from devtyper.domain.service import StateTokenService
from devtyper.domain.value import LinkFlow, UserId
from devtyper.persistence.repository.inmemory import InMemoryConsumedStateRepository

ISSUED = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class FrozenClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


@pytest.fixture
def auth_settings():
    return AuthSettings(state_secret="state-secret-for-tests", state_ttl_minutes=10)


@pytest.fixture
def clock():
    return FrozenClock(ISSUED)


@pytest.fixture
def service(auth_settings, clock):
    return StateTokenService(
        auth_settings=auth_settings,
        consumed_state_repository=InMemoryConsumedStateRepository(),
        clock=clock,
    )


class TestEncodeDecode:
    """Tests for the token round trip."""

    def test_decode_returns_subject_within_window(self, service, clock):
        """A token decodes to its subject until the window closes."""
        # Arrange
        subject = UserId(uuid4())
        token = service.encode(subject)
        clock.advance(timedelta(minutes=9, seconds=59))

        # Act
        state = service.decode(token)

        # Assert
        assert state.subject_user_id == subject
        assert state.flow == LinkFlow.LINK
        assert state.issued_at == ISSUED
        assert state.nonce

    def test_decode_after_eleven_minutes_is_expired(self, service, clock):
        """A token issued 11 minutes ago is rejected as expired."""
        # Arrange
        token = service.encode(UserId(uuid4()))
        clock.advance(timedelta(minutes=11))

        # Act & Assert
        with pytest.raises(ExpiredStateTokenError) as exc_info:
            service.decode(token)
        assert exc_info.value.age_seconds == pytest.approx(660)

    def test_sub_second_issue_time_is_not_expired_early(self, service, clock):
        """Issued at .900 and read 599.5s later, the token is still fresh."""
        # Arrange
        clock.now = ISSUED + timedelta(milliseconds=900)
        subject = UserId(uuid4())
        token = service.encode(subject)
        clock.advance(timedelta(minutes=9, seconds=59, milliseconds=500))

        # Act
        state = service.decode(token)

        # Assert
        assert state.subject_user_id == subject

    def test_expiry_follows_whole_seconds_past_ttl(self, service, clock):
        """One whole second past the window the token is expired."""
        clock.now = ISSUED + timedelta(milliseconds=900)
        token = service.encode(UserId(uuid4()))
        clock.advance(timedelta(minutes=10, seconds=1))

        with pytest.raises(ExpiredStateTokenError):
            service.decode(token)

    def test_each_token_gets_a_fresh_nonce(self, service):
        """Two tokens for the same subject never share a nonce."""
        subject = UserId(uuid4())
        first = service.decode(service.encode(subject))
        second = service.decode(service.encode(subject))
        assert first.nonce != second.nonce

    def test_signup_token_has_no_subject(self, service):
        """Sign-up tokens carry no subject."""
        state = service.decode(service.encode(None, LinkFlow.SIGNUP))
        assert state.subject_user_id is None
        assert state.flow == LinkFlow.SIGNUP

    def test_link_token_requires_subject(self, service):
        """Link tokens cannot be issued without a subject."""
        with pytest.raises(ValueError):
            service.encode(None, LinkFlow.LINK)


class TestTampering:
    """Tests for rejecting untrusted tokens."""

    def test_token_signed_with_another_secret_is_malformed(self, service, clock):
        """A forged token naming any subject is rejected."""
        # Arrange
        forged = jwt.encode(
            {
                "sub": str(uuid4()),
                "iat": int(clock().timestamp()),
                "flow": "link",
                "jti": "forged",
            },
            "attacker-secret",
            algorithm="HS256",
        )

        # Act & Assert
        with pytest.raises(MalformedStateTokenError):
            service.decode(forged)

    @pytest.mark.parametrize(
        "token",
        ["", "not-a-token", "eyJhbGciOiJIUzI1NiJ9.e30.c2lnbmF0dXJl"],
    )
    def test_garbage_is_malformed(self, service, token):
        """Strings that are not signed state tokens are rejected."""
        with pytest.raises(MalformedStateTokenError):
            service.decode(token)

    def test_link_token_without_subject_is_malformed(self, service, auth_settings, clock):
        """A correctly signed link token with no subject is rejected."""
        token = jwt.encode(
            {"iat": int(clock().timestamp()), "flow": "link", "jti": "n"},
            auth_settings.state_secret,
            algorithm="HS256",
        )
        with pytest.raises(MalformedStateTokenError):
            service.decode(token)

    def test_unknown_flow_is_malformed(self, service, auth_settings, clock):
        """Only link and sign-up flows are accepted."""
        token = jwt.encode(
            {"iat": int(clock().timestamp()), "flow": "admin", "jti": "n"},
            auth_settings.state_secret,
            algorithm="HS256",
        )
        with pytest.raises(MalformedStateTokenError):
            service.decode(token)


class TestConsume:
    """Tests for single use."""

    @pytest.mark.asyncio
    async def test_second_consume_is_rejected(self, service):
        """A nonce can be consumed once."""
        # Arrange
        state = service.decode(service.encode(UserId(uuid4())))

        # Act
        first = await service.consume(state)
        second = await service.consume(state)

        # Assert
        assert first is True
        assert second is False
