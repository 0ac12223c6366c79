"""Domain value objects for DevTyper.

Value objects are immutable and defined by their values, not identity.
"""

from datetime import datetime
from enum import Enum

from pydantic import Field, field_validator

from devtyper.domain.value.common import ValueObject
from devtyper.domain.value.identifiers import UserId


class AttemptMode(str, Enum):
    """Practice mode an attempt was made in."""

    DAILY = "daily"
    PRACTICE = "practice"


class LinkFlow(str, Enum):
    """Flow a state token was issued for."""

    LINK = "link"  # Bind GitHub to the signed-in subject
    SIGNUP = "signup"  # Collision check before hosted sign-up


class FlowTransport(str, Enum):
    """How a GitHub flow delivers its outcome."""

    RESPONSE = "response"  # JSON body to the signed-in caller
    REDIRECT = "redirect"  # Redirect to the frontend profile page
    SIGNUP = "signup"  # Redirect to sign-in or on to hosted sign-up


class FailureReason(str, Enum):
    """Codes reported to the frontend for transient flow failures."""

    EXCHANGE_FAILED = "exchange_failed"
    IDENTITY_FETCH_FAILED = "identity_fetch_failed"
    LOOKUP_FAILED = "lookup_failed"
    UPDATE_FAILED = "update_failed"


class ProviderIdentity(ValueObject):
    """Canonical GitHub user record.

    Only the fields needed to link an account are kept.
    """

    provider_user_id: str = Field(min_length=1)  # Stable numeric GitHub id
    provider_username: str = Field(min_length=1)  # Login, can change over time
    avatar_url: str | None = None

    @field_validator("provider_user_id", mode="before")
    @classmethod
    def normalise_id(cls, v: object) -> object:
        """GitHub returns ids as integers; store them as strings."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class StateToken(ValueObject):
    """Decoded OAuth state.

    Carried through the provider redirect as a signed string.
    """

    subject_user_id: UserId | None  # None for sign-up flows
    issued_at: datetime
    flow: LinkFlow = LinkFlow.LINK
    nonce: str


class Session(ValueObject):
    """Verified hosted-auth session."""

    user_id: UserId
    email: str | None = None
