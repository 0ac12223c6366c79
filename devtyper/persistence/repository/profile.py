"""PostgreSQL implementation of Profile repository."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from devtyper.domain.error import (
    IdentityAlreadyLinkedError,
    LookupFailedError,
    WriteFailedError,
)
from devtyper.domain.model import ExternalIdentity, Profile
from devtyper.domain.repository import ProfileRepository
from devtyper.domain.value import UserId
from devtyper.persistence.mappers import identity_to_dict, profile_to_dict, row_to_profile
from devtyper.persistence.tables import profiles_table


class PostgresProfileRepository(ProfileRepository):
    """PostgreSQL implementation of ProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, user_id: UserId) -> Optional[Profile]:
        """Find a profile by user ID."""
        stmt = select(profiles_table).where(profiles_table.c.id == user_id)
        return await self._find_one(stmt)

    async def find_by_github_id(self, github_id: str) -> Optional[Profile]:
        """Find the profile holding a GitHub id."""
        stmt = select(profiles_table).where(profiles_table.c.github_id == github_id)
        return await self._find_one(stmt)

    async def find_by_github_username(self, github_username: str) -> Optional[Profile]:
        """Find the profile holding a GitHub login, ignoring case."""
        stmt = select(profiles_table).where(
            func.lower(profiles_table.c.github_username) == github_username.lower()
        )
        return await self._find_one(stmt)

    async def link_github_identity(
        self, user_id: UserId, identity: ExternalIdentity
    ) -> Profile:
        """Write the GitHub identity onto a profile in a single UPDATE.

        Runs in a savepoint so a unique violation leaves the request session
        usable.

        Raises:
            IdentityAlreadyLinkedError: If another profile holds the GitHub id
            WriteFailedError: If the profile does not exist or the write fails
        """
        stmt = (
            profiles_table.update()
            .where(profiles_table.c.id == user_id)
            .values(**identity_to_dict(identity), updated_at=datetime.now(timezone.utc))
            .returning(*profiles_table.c)
        )

        try:
            async with self.session.begin_nested():
                result = await self.session.execute(stmt)
                row = result.mappings().first()
        except IntegrityError as e:
            raise IdentityAlreadyLinkedError(identity.provider_user_id) from e
        except SQLAlchemyError as e:
            raise WriteFailedError(f"Failed to link GitHub identity: {e}") from e

        if row is None:
            raise WriteFailedError(f"Profile not found: {user_id}")
        return row_to_profile(dict(row))

    async def save(self, profile: Profile) -> Profile:
        """Save a profile (create or update).

        Raises:
            IdentityAlreadyLinkedError: If another profile holds the GitHub id
            WriteFailedError: If the write fails
        """
        values = profile_to_dict(profile)
        stmt = pg_insert(profiles_table).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[profiles_table.c.id],
            set_={k: v for k, v in values.items() if k not in ("id", "created_at")},
        )

        try:
            async with self.session.begin_nested():
                await self.session.execute(stmt)
        except IntegrityError as e:
            if profile.github is not None:
                raise IdentityAlreadyLinkedError(profile.github.provider_user_id) from e
            raise WriteFailedError(f"Failed to save profile: {e}") from e
        except SQLAlchemyError as e:
            raise WriteFailedError(f"Failed to save profile: {e}") from e

        return profile

    async def _find_one(self, stmt) -> Optional[Profile]:
        try:
            result = await self.session.execute(stmt)
            row = result.mappings().first()
        except SQLAlchemyError as e:
            raise LookupFailedError(f"Profile lookup failed: {e}") from e
        return row_to_profile(dict(row)) if row else None
