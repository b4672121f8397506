"""Repositories for internal recipients (user profiles) and external people."""

from __future__ import annotations

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from mailroom.domain.people import ExternalPerson, UserProfile
from mailroom.repositories.base import LIKE_ESCAPE, BaseRepository, contains_pattern


class UserProfileRepository(BaseRepository[UserProfile]):
    model = UserProfile

    async def list_active(self) -> list[UserProfile]:
        q = (
            self._base_query()
            .where(UserProfile.is_active.is_(True))
            .order_by(UserProfile.last_name, UserProfile.first_name)
        )
        return list((await self._session.execute(q)).scalars().all())

    async def search_by_name(self, name: str, limit: int = 5) -> list[UserProfile]:
        pattern = contains_pattern(name)
        q = (
            self._base_query()
            .where(UserProfile.is_active.is_(True))
            .where(
                or_(
                    (UserProfile.first_name + " " + UserProfile.last_name).ilike(pattern, escape=LIKE_ESCAPE),
                    UserProfile.last_name.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )
            .order_by(UserProfile.last_name, UserProfile.first_name)
            .limit(limit)
        )
        return list((await self._session.execute(q)).scalars().all())


async def get_profile_by_user_id(session: AsyncSession, user_id: str) -> UserProfile | None:
    """Resolve an auth identity to its profile (not tenant-scoped: the tenant comes from it)."""
    result = await session.execute(select(UserProfile).where(UserProfile.user_id == user_id))
    return result.scalars().first()


class ExternalPersonRepository(BaseRepository[ExternalPerson]):
    model = ExternalPerson

    async def list_all(self, *, active_only: bool = False) -> list[ExternalPerson]:
        q = self._base_query().order_by(ExternalPerson.last_name, ExternalPerson.first_name)
        if active_only:
            q = q.where(ExternalPerson.is_active.is_(True))
        return list((await self._session.execute(q)).scalars().all())

    async def search_by_name(self, name: str, limit: int = 5) -> list[ExternalPerson]:
        pattern = contains_pattern(name)
        q = (
            self._base_query()
            .where(ExternalPerson.is_active.is_(True))
            .where(
                or_(
                    (ExternalPerson.first_name + " " + ExternalPerson.last_name).ilike(pattern, escape=LIKE_ESCAPE),
                    ExternalPerson.last_name.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )
            .order_by(ExternalPerson.last_name, ExternalPerson.first_name)
            .limit(limit)
        )
        return list((await self._session.execute(q)).scalars().all())
