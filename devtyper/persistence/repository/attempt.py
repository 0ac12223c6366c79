"""PostgreSQL implementation of Attempt repository."""

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from devtyper.domain.error import LookupFailedError, StorageFailedError
from devtyper.domain.model import Attempt, UserStats
from devtyper.domain.repository import AttemptRepository
from devtyper.domain.value import AttemptMode, UserId
from devtyper.persistence.mappers import attempt_to_dict, row_to_user_stats
from devtyper.persistence.tables import attempts_table, user_stats_table


class PostgresAttemptRepository(AttemptRepository):
    """PostgreSQL implementation of AttemptRepository.

    The aggregate is maintained by one INSERT ... ON CONFLICT DO UPDATE.
    PostgreSQL locks the user's stats row for the duration of the upsert, so
    concurrent submissions for one user are applied one after another.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def record(self, attempt: Attempt) -> UserStats:
        """Append the attempt and fold it into the aggregate in one savepoint.

        Raises:
            StorageFailedError: If either write fails; neither is kept
        """
        t = user_stats_table
        upsert = pg_insert(t).values(
            user_id=attempt.user_id,
            total_attempts=1,
            avg_wpm=attempt.wpm,
            avg_accuracy=attempt.accuracy,
            best_wpm=attempt.wpm,
            best_accuracy=attempt.accuracy,
            total_time_ms=attempt.elapsed_ms,
            updated_at=attempt.created_at,
        )
        new = upsert.excluded
        upsert = upsert.on_conflict_do_update(
            index_elements=[t.c.user_id],
            set_={
                "total_attempts": t.c.total_attempts + 1,
                "avg_wpm": (t.c.avg_wpm * t.c.total_attempts + new.avg_wpm)
                / (t.c.total_attempts + 1),
                "avg_accuracy": (
                    t.c.avg_accuracy * t.c.total_attempts + new.avg_accuracy
                )
                / (t.c.total_attempts + 1),
                "best_wpm": func.greatest(t.c.best_wpm, new.best_wpm),
                "best_accuracy": func.greatest(t.c.best_accuracy, new.best_accuracy),
                "total_time_ms": t.c.total_time_ms + new.total_time_ms,
                "updated_at": new.updated_at,
            },
        ).returning(*t.c)

        try:
            async with self.session.begin_nested():
                await self.session.execute(
                    attempts_table.insert().values(**attempt_to_dict(attempt))
                )
                result = await self.session.execute(upsert)
                row = result.mappings().one()
        except SQLAlchemyError as e:
            raise StorageFailedError(f"Failed to record attempt: {e}") from e

        return row_to_user_stats(dict(row))

    async def find_stats(self, user_id: UserId) -> Optional[UserStats]:
        """Get a user's aggregate."""
        stmt = select(user_stats_table).where(user_stats_table.c.user_id == user_id)
        try:
            result = await self.session.execute(stmt)
            row = result.mappings().first()
        except SQLAlchemyError as e:
            raise LookupFailedError(f"Stats lookup failed: {e}") from e
        return row_to_user_stats(dict(row)) if row else None

    async def count_daily(self, user_id: UserId, day: date) -> int:
        """Count daily-mode attempts in [day 00:00 UTC, next day 00:00 UTC)."""
        start = datetime.combine(day, time.min, tzinfo=timezone.utc)
        end = start + timedelta(days=1)
        stmt = (
            select(func.count())
            .select_from(attempts_table)
            .where(attempts_table.c.user_id == user_id)
            .where(attempts_table.c.mode == AttemptMode.DAILY.value)
            .where(attempts_table.c.created_at >= start)
            .where(attempts_table.c.created_at < end)
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise LookupFailedError(f"Attempt count failed: {e}") from e
        return result.scalar_one()
