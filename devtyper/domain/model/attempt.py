"""Attempt entity.

One finished run through a snippet. Attempts are append-only.
"""

from datetime import datetime, timezone
from decimal import Decimal

from pydantic import Field

from devtyper.domain.model.common import DomainModel
from devtyper.domain.value import AttemptId, AttemptMode, SnippetId, UserId


class Attempt(DomainModel):
    """Attempt entity.

    Business rules:
    - wpm is non-negative
    - accuracy is a percentage between 0 and 100
    - elapsed time is a non-negative number of milliseconds
    """

    id: AttemptId
    user_id: UserId
    snippet_id: SnippetId
    mode: AttemptMode
    wpm: Decimal = Field(ge=0)
    accuracy: Decimal = Field(ge=0, le=100)
    elapsed_ms: int = Field(ge=0)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
