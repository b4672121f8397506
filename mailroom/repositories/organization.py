"""Organization and mail room repositories."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from mailroom.domain.organization import MailRoom, Organization
from mailroom.repositories.base import BaseRepository


class OrganizationRepository:
    """Organizations are the tenant root, so they are scoped by their own id."""

    def __init__(self, session: AsyncSession, org_id: str):
        self._session = session
        self._org_id = org_id

    async def get(self) -> Organization | None:
        result = await self._session.execute(
            select(Organization)
            .where(Organization.id == self._org_id)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def update(self, **kwargs: Any) -> Organization | None:
        kwargs.pop("id", None)
        kwargs.setdefault("updated_at", datetime.now(timezone.utc))
        await self._session.execute(
            update(Organization).where(Organization.id == self._org_id).values(**kwargs)
        )
        await self._session.flush()
        return await self.get()


class MailRoomRepository(BaseRepository[MailRoom]):
    model = MailRoom

    async def list_all(self, *, active_only: bool = False) -> list[MailRoom]:
        q = self._base_query().order_by(MailRoom.name)
        if active_only:
            q = q.where(MailRoom.is_active.is_(True))
        return list((await self._session.execute(q)).scalars().all())
