"""Per-user running statistics.

The aggregate is folded forward one attempt at a time. Averages are kept as
running means so the stored row always equals the mean over the attempt log.
"""

from datetime import datetime, timezone
from decimal import Decimal

from pydantic import Field

from devtyper.domain.model.attempt import Attempt
from devtyper.domain.model.common import DomainModel
from devtyper.domain.value import UserId


class UserStats(DomainModel):
    """Aggregate statistics for one user."""

    user_id: UserId
    total_attempts: int = Field(ge=1)
    avg_wpm: Decimal
    avg_accuracy: Decimal
    best_wpm: Decimal
    best_accuracy: Decimal
    total_time_ms: int = Field(ge=0)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def first(cls, attempt: Attempt) -> "UserStats":
        """Aggregate for a user's first attempt."""
        return cls(
            user_id=attempt.user_id,
            total_attempts=1,
            avg_wpm=attempt.wpm,
            avg_accuracy=attempt.accuracy,
            best_wpm=attempt.wpm,
            best_accuracy=attempt.accuracy,
            total_time_ms=attempt.elapsed_ms,
            updated_at=attempt.created_at,
        )

    def fold(self, attempt: Attempt) -> "UserStats":
        """Return the aggregate with one more attempt folded in.

        Raises:
            ValueError: If the attempt belongs to another user
        """
        if attempt.user_id != self.user_id:
            raise ValueError("Attempt belongs to a different user")

        n = self.total_attempts
        return UserStats(
            user_id=self.user_id,
            total_attempts=n + 1,
            avg_wpm=(self.avg_wpm * n + attempt.wpm) / (n + 1),
            avg_accuracy=(self.avg_accuracy * n + attempt.accuracy) / (n + 1),
            best_wpm=max(self.best_wpm, attempt.wpm),
            best_accuracy=max(self.best_accuracy, attempt.accuracy),
            total_time_ms=self.total_time_ms + attempt.elapsed_ms,
            updated_at=datetime.now(timezone.utc),
        )
