"""PostgreSQL implementation of ConsumedState repository."""

from datetime import datetime, timezone

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from devtyper.domain.error import LookupFailedError
from devtyper.domain.repository import ConsumedStateRepository
from devtyper.persistence.tables import consumed_oauth_states_table


class PostgresConsumedStateRepository(ConsumedStateRepository):
    """PostgreSQL implementation of ConsumedStateRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def consume(self, nonce: str, expires_at: datetime) -> bool:
        """Insert the nonce; a conflicting row means it was used before.

        Expired rows are purged first. Their tokens fail the freshness check
        anyway.

        Raises:
            LookupFailedError: If the store cannot be reached
        """
        t = consumed_oauth_states_table
        stmt = (
            pg_insert(t)
            .values(nonce=nonce, expires_at=expires_at)
            .on_conflict_do_nothing(index_elements=[t.c.nonce])
            .returning(t.c.nonce)
        )

        try:
            async with self.session.begin_nested():
                await self.session.execute(
                    t.delete().where(t.c.expires_at < datetime.now(timezone.utc))
                )
                result = await self.session.execute(stmt)
                inserted = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise LookupFailedError(f"State consumption failed: {e}") from e

        return inserted is not None
