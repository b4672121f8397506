"""Mail item repository: scoped listings with recipient search and status compare-and-swap."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, time, timedelta, timezone
from typing import Any

from sqlalchemy import or_, update

from mailroom.domain.enums import MailItemStatus
from mailroom.domain.mail_item import MailItem
from mailroom.domain.people import ExternalPerson, UserProfile
from mailroom.repositories.base import LIKE_ESCAPE, BaseRepository, contains_pattern

OPEN_STATUSES = (MailItemStatus.PENDING.value, MailItemStatus.NOTIFIED.value)


class MailItemRepository(BaseRepository[MailItem]):
    model = MailItem

    # ------------------------------------------------------------------
    # Query building
    # ------------------------------------------------------------------

    def _scoped(self, mail_room_id: str | None = None):
        q = self._base_query()
        if mail_room_id:
            q = q.where(MailItem.mail_room_id == mail_room_id)
        return q

    @staticmethod
    def _with_search(q, search: str):
        """Match recipient full name, tracking number or description, case-insensitively."""
        if not search:
            return q
        pattern = contains_pattern(search)
        return (
            q.outerjoin(UserProfile, MailItem.recipient_id == UserProfile.id)
            .outerjoin(ExternalPerson, MailItem.external_recipient_id == ExternalPerson.id)
            .where(
                or_(
                    (UserProfile.first_name + " " + UserProfile.last_name).ilike(pattern, escape=LIKE_ESCAPE),
                    (ExternalPerson.first_name + " " + ExternalPerson.last_name).ilike(pattern, escape=LIKE_ESCAPE),
                    MailItem.tracking_number.ilike(pattern, escape=LIKE_ESCAPE),
                    MailItem.description.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )
        )

    async def _page(self, q, offset: int, limit: int) -> tuple[list[MailItem], int]:
        total = await self._count(q)
        if total == 0:
            return [], 0
        items = (await self._session.execute(q.offset(offset).limit(limit))).scalars().all()
        return list(items), total

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    async def list_pending(
        self,
        *,
        offset: int,
        limit: int,
        search: str = "",
        mail_room_id: str | None = None,
    ) -> tuple[list[MailItem], int]:
        """Items awaiting pickup; priority first, then newest received."""
        q = self._scoped(mail_room_id).where(MailItem.status.in_(OPEN_STATUSES))
        q = self._with_search(q, search).order_by(
            MailItem.is_priority.desc(), MailItem.received_at.desc()
        )
        return await self._page(q, offset, limit)

    async def list_history(
        self,
        *,
        offset: int,
        limit: int,
        search: str = "",
        status: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        mail_room_id: str | None = None,
    ) -> tuple[list[MailItem], int]:
        """All items, newest first; date bounds are inclusive calendar days (UTC)."""
        q = self._scoped(mail_room_id)
        if status:
            q = q.where(MailItem.status == status)
        if date_from:
            q = q.where(MailItem.received_at >= _day_start(date_from))
        if date_to:
            q = q.where(MailItem.received_at < _day_start(date_to) + timedelta(days=1))
        q = self._with_search(q, search).order_by(MailItem.received_at.desc())
        return await self._page(q, offset, limit)

    async def list_recent(
        self,
        *,
        limit: int = 10,
        mail_room_id: str | None = None,
        since: datetime | None = None,
    ) -> list[MailItem]:
        q = self._scoped(mail_room_id)
        if since is not None:
            q = q.where(MailItem.received_at >= since)
        q = q.order_by(MailItem.received_at.desc()).limit(limit)
        return list((await self._session.execute(q)).scalars().all())

    # ------------------------------------------------------------------
    # Status compare-and-swap
    # ------------------------------------------------------------------

    async def transition(
        self,
        mail_item_id: str,
        *,
        from_statuses: Iterable[str],
        to_status: str,
        **values: Any,
    ) -> bool:
        """Move the item to *to_status* only if it is still in one of *from_statuses*.

        Returns False when no row matched, i.e. another writer moved it first.
        """
        result = await self._session.execute(
            update(MailItem)
            .where(MailItem.id == mail_item_id)
            .where(MailItem.org_id == self._org_id)
            .where(MailItem.status.in_(list(from_statuses)))
            .values(status=to_status, updated_at=datetime.now(timezone.utc), **values)
        )
        await self._session.flush()
        return result.rowcount == 1


def _day_start(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)
