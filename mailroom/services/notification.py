"""Notification recording.

Delivery is not performed here: each call appends a ``pending`` notification
row (reminders included) and moves the mail item from ``pending`` to
``notified`` the first time.
"""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from mailroom.core.exceptions import NotFoundError, ValidationError
from mailroom.core.security import RequestContext
from mailroom.domain.enums import MailItemStatus, NotificationStatus, NotificationType
from mailroom.domain.mail_item import MailItem
from mailroom.domain.mixins import utcnow
from mailroom.domain.notification import Notification
from mailroom.domain.recipient import recipient_columns
from mailroom.repositories.events import NotificationRepository
from mailroom.repositories.mail_item import MailItemRepository
from mailroom.schemas.notification import NotificationCreate

logger = logging.getLogger(__name__)


def default_message(item: MailItem) -> str:
    kind = item.type.replace("_", " ")
    room = item.mail_room.name if item.mail_room else "the mail room"
    if item.tracking_number:
        return f"Your {kind} ({item.carrier.upper()} {item.tracking_number}) is ready for pickup at {room}."
    return f"Your {kind} is ready for pickup at {room}."


class NotificationService:
    def __init__(self, session: AsyncSession, ctx: RequestContext):
        self._ctx = ctx
        self._repo = NotificationRepository(session, ctx.org_id)
        self._items = MailItemRepository(session, ctx.org_id)

    async def _get_item(self, mail_item_id: str) -> MailItem:
        item = await self._items.get_by_id(mail_item_id)
        if not item:
            raise NotFoundError("Mail item", mail_item_id)
        return item

    async def list_for_item(self, mail_item_id: str) -> list[Notification]:
        await self._get_item(mail_item_id)
        return await self._repo.list_for_item(mail_item_id)

    async def record_notification(self, data: NotificationCreate) -> Notification:
        item = await self._get_item(data.mail_item_id)
        ref = item.recipient_ref
        if data.recipient_id or data.external_recipient_id:
            if data.recipient_ref() != ref:
                raise ValidationError("Notification recipient does not match the mail item's recipient")

        destination = data.destination or self._default_destination(item, data.type)
        notification = await self._repo.create(
            mail_item_id=item.id,
            **recipient_columns(ref),
            type=data.type.value,
            destination=destination,
            message=data.message or default_message(item),
            status=NotificationStatus.PENDING.value,
        )

        if item.status == MailItemStatus.PENDING.value:
            moved = await self._items.transition(
                item.id,
                from_statuses=[MailItemStatus.PENDING.value],
                to_status=MailItemStatus.NOTIFIED.value,
                notified_at=utcnow(),
            )
            if moved:
                logger.info("Mail item %s notified via %s", item.id, data.type.value)
        else:
            logger.info("Reminder %s recorded for mail item %s (%s)", notification.id, item.id, item.status)
        return await self._repo.get_by_id(notification.id)

    @staticmethod
    def _default_destination(item: MailItem, channel: NotificationType) -> str:
        person = item.resolved_recipient
        if channel is NotificationType.SMS:
            value, field = (person.phone if person else None), "phone number"
        else:
            value, field = (person.email if person else None), "email address"
        if not value:
            raise ValidationError(f"Recipient has no {field} on file; provide a destination")
        return value
