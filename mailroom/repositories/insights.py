"""Read-only aggregate queries over mail_items for the dashboard.

Every method is a single SELECT scoped to the organization (and optionally one
mail room). Date-part and interval arithmetic differ between SQLite (local
development, tests) and PostgreSQL, so those expressions are built per dialect.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Integer, and_, cast, extract, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from mailroom.domain.enums import MailItemStatus
from mailroom.domain.mail_item import MailItem
from mailroom.repositories.mail_item import OPEN_STATUSES

_PICKED_UP = MailItemStatus.PICKED_UP.value


class InsightsRepository:
    def __init__(self, session: AsyncSession, org_id: str, mail_room_id: str | None = None):
        self._session = session
        self._org_id = org_id
        self._mail_room_id = mail_room_id

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @property
    def _dialect(self) -> str:
        return self._session.get_bind().dialect.name

    def _scope(self) -> list:
        conditions = [MailItem.org_id == self._org_id]
        if self._mail_room_id:
            conditions.append(MailItem.mail_room_id == self._mail_room_id)
        return conditions

    def _open(self) -> list:
        return [*self._scope(), MailItem.status.in_(OPEN_STATUSES)]

    def _day_of_week(self, column):
        """0 = Sunday ... 6 = Saturday."""
        if self._dialect == "sqlite":
            return cast(func.strftime("%w", column), Integer)
        return extract("dow", column)

    def _hour_of_day(self, column):
        if self._dialect == "sqlite":
            return cast(func.strftime("%H", column), Integer)
        return extract("hour", column)

    def _days_between(self, start, end):
        """Fractional days from *start* to *end*."""
        if self._dialect == "sqlite":
            return func.julianday(end) - func.julianday(start)
        return extract("epoch", end - start) / 86400.0

    async def _scalar(self, stmt):
        return (await self._session.execute(stmt)).scalar()

    # ------------------------------------------------------------------
    # Counts
    # ------------------------------------------------------------------

    async def count_open(self) -> int:
        return await self._scalar(select(func.count()).select_from(MailItem).where(*self._open())) or 0

    async def count_open_priority(self) -> int:
        stmt = (
            select(func.count())
            .select_from(MailItem)
            .where(*self._open(), MailItem.is_priority.is_(True))
        )
        return await self._scalar(stmt) or 0

    async def count_open_received_before(self, cutoff: datetime) -> int:
        stmt = (
            select(func.count())
            .select_from(MailItem)
            .where(*self._open(), MailItem.received_at < cutoff)
        )
        return await self._scalar(stmt) or 0

    async def count_picked_up_between(self, start: datetime, end: datetime) -> int:
        stmt = (
            select(func.count())
            .select_from(MailItem)
            .where(
                *self._scope(),
                MailItem.status == _PICKED_UP,
                MailItem.picked_up_at >= start,
                MailItem.picked_up_at < end,
            )
        )
        return await self._scalar(stmt) or 0

    async def latest_open_received_at(self) -> datetime | None:
        """Most recent receipt among open items; the dashboard reports its age as oldestDays."""
        return await self._scalar(select(func.max(MailItem.received_at)).where(*self._open()))

    async def avg_processing_days(self, start: datetime, end: datetime) -> float | None:
        """Mean receipt-to-pickup time of items picked up in ``[start, end)``."""
        stmt = select(
            func.avg(self._days_between(MailItem.received_at, MailItem.picked_up_at))
        ).where(
            *self._scope(),
            MailItem.status == _PICKED_UP,
            MailItem.picked_up_at.is_not(None),
            and_(MailItem.picked_up_at >= start, MailItem.picked_up_at < end),
        )
        value = await self._scalar(stmt)
        return float(value) if value is not None else None

    # ------------------------------------------------------------------
    # Groupings
    # ------------------------------------------------------------------

    async def count_by_type(self) -> list[tuple[str, int]]:
        stmt = (
            select(MailItem.type, func.count())
            .where(*self._scope())
            .group_by(MailItem.type)
        )
        return [(row[0], int(row[1])) for row in (await self._session.execute(stmt)).all()]

    async def count_by_day_of_week(self) -> list[tuple[int, int]]:
        dow = self._day_of_week(MailItem.received_at)
        stmt = select(dow, func.count()).where(*self._scope()).group_by(dow)
        return [(int(row[0]), int(row[1])) for row in (await self._session.execute(stmt)).all()]

    async def count_by_hour_of_day(self) -> list[tuple[int, int]]:
        hour = self._hour_of_day(MailItem.received_at)
        stmt = select(hour, func.count()).where(*self._scope()).group_by(hour)
        return [(int(row[0]), int(row[1])) for row in (await self._session.execute(stmt)).all()]

    async def daily_received_since(self, since: datetime) -> list[tuple[str, int]]:
        """``[(YYYY-MM-DD, count), ...]`` ordered by day."""
        day = func.date(MailItem.received_at)
        stmt = (
            select(day, func.count())
            .where(*self._scope(), MailItem.received_at >= since)
            .group_by(day)
            .order_by(day)
        )
        return [(str(row[0])[:10], int(row[1])) for row in (await self._session.execute(stmt)).all()]
