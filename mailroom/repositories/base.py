"""Generic async repository with tenant isolation."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from mailroom.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)

LIKE_ESCAPE = "\\"


def contains_pattern(text: str) -> str:
    """ILIKE pattern matching ``text`` literally anywhere; use with ``escape=LIKE_ESCAPE``."""
    for char in (LIKE_ESCAPE, "%", "_"):
        text = text.replace(char, LIKE_ESCAPE + char)
    return f"%{text}%"


class BaseRepository(Generic[ModelT]):
    """Generic CRUD repository. All queries are filtered by org_id.

    Hard-delete is intentionally never exposed: mail items, pickups and
    audit rows form the organization's audit trail.
    """

    model: type[ModelT]

    def __init__(self, session: AsyncSession, org_id: str):
        self._session = session
        self._org_id = org_id

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _base_query(self):
        """Return a SELECT filtered by org_id."""
        return select(self.model).where(self.model.org_id == self._org_id)

    async def _count(self, q) -> int:
        count_q = select(func.count()).select_from(q.order_by(None).subquery())
        return (await self._session.execute(count_q)).scalar_one()

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def get_by_id(self, entity_id: str) -> ModelT | None:
        result = await self._session.execute(
            self._base_query()
            .where(self.model.id == entity_id)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    async def create(self, **kwargs: Any) -> ModelT:
        instance = self.model(org_id=self._org_id, **kwargs)
        self._session.add(instance)
        await self._session.flush()  # populate id
        await self._session.refresh(instance)
        return instance

    async def update(self, entity_id: str, **kwargs: Any) -> ModelT | None:
        from datetime import datetime, timezone

        kwargs.pop("id", None)
        kwargs.pop("org_id", None)
        if "updated_at" not in kwargs and hasattr(self.model, "updated_at"):
            kwargs["updated_at"] = datetime.now(timezone.utc)

        await self._session.execute(
            update(self.model)
            .where(self.model.id == entity_id)
            .where(self.model.org_id == self._org_id)
            .values(**kwargs)
        )
        await self._session.flush()
        return await self.get_by_id(entity_id)
