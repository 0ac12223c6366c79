"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Domain validation error."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class UnauthenticatedError(DomainError):
    """Raised when a session token is missing, invalid or expired."""

    pass


# ============================================================================
# OAuth state
# ============================================================================
class InvalidStateError(DomainError):
    """OAuth state cannot be trusted. The user has to restart the flow."""

    pass


class MalformedStateTokenError(InvalidStateError):
    """State token does not decode into the expected structure."""

    pass


class ExpiredStateTokenError(InvalidStateError):
    """State token is older than the freshness window."""

    def __init__(self, age_seconds: float):
        self.age_seconds = age_seconds
        super().__init__(f"State token expired ({age_seconds:.0f}s old)")


# ============================================================================
# Identity provider
# ============================================================================
class ProviderFailureError(DomainError):
    """Identity provider call failed. Never retried automatically."""

    pass


class ExchangeFailedError(ProviderFailureError):
    """Authorization code could not be exchanged for an access token."""

    pass


class IdentityFetchFailedError(ProviderFailureError):
    """Provider user record could not be fetched or lacks required fields."""

    pass


# ============================================================================
# Storage
# ============================================================================
class StorageError(DomainError):
    """Persistence collaborator fault."""

    pass


class LookupFailedError(StorageError):
    """Read against the identity store failed."""

    pass


class WriteFailedError(StorageError):
    """Write against the identity store failed."""

    pass


class StorageFailedError(StorageError):
    """Attempt/aggregate store failed. Nothing was recorded."""

    pass


# ============================================================================
# Business rules
# ============================================================================
class IdentityAlreadyLinkedError(DomainError):
    """External identity is already held by another profile.

    Raised by the identity store when the uniqueness constraint rejects a
    write.
    """

    def __init__(self, provider_user_id: str):
        self.provider_user_id = provider_user_id
        super().__init__(f"External identity already linked: {provider_user_id}")


class DailyLimitExceededError(DomainError):
    """User has used all daily challenge attempts for the UTC day."""

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"Daily attempts exhausted ({limit} per day)")
