"""Mail item service: intake, scoped listings and manual status changes."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from mailroom.core.exceptions import ConflictError, NotFoundError
from mailroom.core.pagination import PaginationParams
from mailroom.core.security import RequestContext
from mailroom.domain.enums import MailItemStatus
from mailroom.domain.mail_item import MailItem
from mailroom.domain.mixins import utcnow
from mailroom.domain.recipient import InternalRecipient, RecipientRef, recipient_columns
from mailroom.repositories.mail_item import MailItemRepository
from mailroom.repositories.organization import MailRoomRepository
from mailroom.repositories.people import ExternalPersonRepository, UserProfileRepository
from mailroom.schemas.mail_item import HistoryFilters, MailItemCreate, MailItemStatusUpdate
from mailroom.services.lifecycle import ensure_manual_target, ensure_transition, sources_for

logger = logging.getLogger(__name__)


class MailItemService:
    def __init__(self, session: AsyncSession, ctx: RequestContext):
        self._ctx = ctx
        self._repo = MailItemRepository(session, ctx.org_id)
        self._rooms = MailRoomRepository(session, ctx.org_id)
        self._profiles = UserProfileRepository(session, ctx.org_id)
        self._external = ExternalPersonRepository(session, ctx.org_id)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get(self, mail_item_id: str) -> MailItem:
        item = await self._repo.get_by_id(mail_item_id)
        if not item:
            raise NotFoundError("Mail item", mail_item_id)
        return item

    async def list_pending(
        self, pagination: PaginationParams, mail_room_id: str | None = None
    ) -> tuple[list[MailItem], int]:
        return await self._repo.list_pending(
            offset=pagination.offset,
            limit=pagination.page_size,
            search=pagination.search,
            mail_room_id=mail_room_id,
        )

    async def history(
        self, pagination: PaginationParams, filters: HistoryFilters
    ) -> tuple[list[MailItem], int]:
        return await self._repo.list_history(
            offset=pagination.offset,
            limit=pagination.page_size,
            search=pagination.search,
            status=filters.status.value if filters.status else None,
            date_from=filters.date_from,
            date_to=filters.date_to,
            mail_room_id=filters.mail_room_id,
        )

    async def recent(self, limit: int = 10, mail_room_id: str | None = None) -> list[MailItem]:
        return await self._repo.list_recent(limit=limit, mail_room_id=mail_room_id)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def record_intake(self, data: MailItemCreate) -> MailItem:
        """Log a newly received item as ``pending``, processed by the caller."""
        ref = data.recipient_ref()
        if not await self._rooms.get_by_id(data.mail_room_id):
            raise NotFoundError("Mail room", data.mail_room_id)
        await self._ensure_recipient(ref)

        item = await self._repo.create(
            mail_room_id=data.mail_room_id,
            **recipient_columns(ref),
            tracking_number=data.tracking_number,
            carrier=data.carrier.value,
            type=data.type.value,
            description=data.description,
            notes=data.notes,
            is_priority=data.is_priority,
            label_image=data.label_image,
            status=MailItemStatus.PENDING.value,
            received_at=utcnow(),
            processed_by_id=self._ctx.profile_id,
        )
        logger.info(
            "Mail item %s received (%s %s, priority=%s) by %s",
            item.id, item.carrier, item.type, item.is_priority, self._ctx.profile_id,
        )
        return await self.get(item.id)

    async def change_status(self, mail_item_id: str, data: MailItemStatusUpdate) -> MailItem:
        """Manually close or park an item (returned, lost, other) or reopen it."""
        target = ensure_manual_target(data.status.value)
        item = await self.get(mail_item_id)
        previous = item.status
        ensure_transition(previous, target)

        values = {"notes": data.notes} if data.notes is not None else {}
        swapped = await self._repo.transition(
            item.id, from_statuses=sources_for(target), to_status=target.value, **values
        )
        if not swapped:
            logger.warning("Status change %s -> %s lost a race", item.id, target.value)
            raise ConflictError("Mail item was modified by another request; reload and retry")
        logger.info("Mail item %s status %s -> %s", item.id, previous, target.value)
        return await self.get(item.id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _ensure_recipient(self, ref: RecipientRef) -> None:
        if isinstance(ref, InternalRecipient):
            if not await self._profiles.get_by_id(ref.id):
                raise NotFoundError("Recipient", ref.id)
        elif not await self._external.get_by_id(ref.id):
            raise NotFoundError("External recipient", ref.id)
