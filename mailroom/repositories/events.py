"""Repositories for the append-only event tables: pickups, notifications, audit logs."""

from __future__ import annotations

from datetime import datetime

from mailroom.domain.audit import AuditLog
from mailroom.domain.mail_item import MailItem
from mailroom.domain.notification import Notification
from mailroom.domain.pickup import Pickup
from mailroom.repositories.base import BaseRepository


class PickupRepository(BaseRepository[Pickup]):
    model = Pickup

    async def list_for_item(self, mail_item_id: str) -> list[Pickup]:
        q = self._base_query().where(Pickup.mail_item_id == mail_item_id)
        return list((await self._session.execute(q)).scalars().all())

    async def list_recent(
        self, *, since: datetime, limit: int, mail_room_id: str | None = None
    ) -> list[Pickup]:
        q = self._base_query().where(Pickup.picked_up_at >= since)
        if mail_room_id:
            q = q.join(MailItem, Pickup.mail_item_id == MailItem.id).where(
                MailItem.mail_room_id == mail_room_id
            )
        q = q.order_by(Pickup.picked_up_at.desc()).limit(limit)
        return list((await self._session.execute(q)).scalars().all())


class NotificationRepository(BaseRepository[Notification]):
    model = Notification

    async def list_for_item(self, mail_item_id: str) -> list[Notification]:
        q = (
            self._base_query()
            .where(Notification.mail_item_id == mail_item_id)
            .order_by(Notification.created_at.desc())
        )
        return list((await self._session.execute(q)).scalars().all())

    async def list_recent(
        self, *, since: datetime, limit: int, mail_room_id: str | None = None
    ) -> list[Notification]:
        q = self._base_query().where(Notification.created_at >= since)
        if mail_room_id:
            q = q.join(MailItem, Notification.mail_item_id == MailItem.id).where(
                MailItem.mail_room_id == mail_room_id
            )
        q = q.order_by(Notification.created_at.desc()).limit(limit)
        return list((await self._session.execute(q)).scalars().all())


class AuditLogRepository(BaseRepository[AuditLog]):
    model = AuditLog

    async def list_recent(self, limit: int = 10) -> list[AuditLog]:
        q = self._base_query().order_by(AuditLog.created_at.desc()).limit(limit)
        return list((await self._session.execute(q)).scalars().all())
