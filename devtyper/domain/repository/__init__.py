"""Repository interfaces for DevTyper domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from devtyper.domain.repository.attempt import AttemptRepository
from devtyper.domain.repository.oauth_state import ConsumedStateRepository
from devtyper.domain.repository.profile import ProfileRepository

__all__ = [
    "ProfileRepository",
    "AttemptRepository",
    "ConsumedStateRepository",
]
