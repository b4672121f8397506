"""Pickup recording.

The status compare-and-swap on the mail item and the pickup insert share the
request's transaction: if either fails the session is rolled back, so a pickup
row never exists for an item that is not ``picked_up`` and vice versa.
"""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from mailroom.core.exceptions import ConflictError, NotFoundError, ValidationError
from mailroom.core.security import RequestContext
from mailroom.domain.enums import MailItemStatus
from mailroom.domain.mixins import ensure_utc, utcnow
from mailroom.domain.pickup import Pickup
from mailroom.domain.recipient import recipient_columns
from mailroom.repositories.events import PickupRepository
from mailroom.repositories.mail_item import MailItemRepository
from mailroom.schemas.pickup import PickupCreate
from mailroom.services.lifecycle import is_terminal, sources_for

logger = logging.getLogger(__name__)

_PICKED_UP = MailItemStatus.PICKED_UP


class PickupService:
    def __init__(self, session: AsyncSession, ctx: RequestContext):
        self._session = session
        self._ctx = ctx
        self._repo = PickupRepository(session, ctx.org_id)
        self._items = MailItemRepository(session, ctx.org_id)

    async def get(self, pickup_id: str) -> Pickup:
        pickup = await self._repo.get_by_id(pickup_id)
        if not pickup:
            raise NotFoundError("Pickup", pickup_id)
        return pickup

    async def record_pickup(self, data: PickupCreate) -> Pickup:
        ref = data.recipient_ref()
        item = await self._items.get_by_id(data.mail_item_id)
        if not item:
            raise NotFoundError("Mail item", data.mail_item_id)
        if item.recipient_ref != ref:
            raise ValidationError("Pickup recipient does not match the mail item's recipient")
        if is_terminal(item.status):
            logger.warning("Refused pickup of mail item %s in status %s", item.id, item.status)
            raise ConflictError(f"Mail item is already {item.status}")

        picked_up_at = ensure_utc(data.picked_up_at) or utcnow()
        try:
            swapped = await self._items.transition(
                item.id,
                from_statuses=sources_for(_PICKED_UP),
                to_status=_PICKED_UP.value,
                picked_up_at=picked_up_at,
            )
            if not swapped:
                raise ConflictError("Mail item was picked up or closed by another request")
            pickup = await self._repo.create(
                mail_item_id=item.id,
                **recipient_columns(ref),
                processed_by_id=self._ctx.profile_id,
                picked_up_at=picked_up_at,
                signature=data.signature,
                photo_confirmation=data.photo_confirmation,
                notes=data.notes,
            )
        except Exception:
            await self._session.rollback()
            raise

        logger.info("Mail item %s picked up (pickup %s) by %s", item.id, pickup.id, self._ctx.profile_id)
        return await self.get(pickup.id)
