"""Audit trail writes for administrative mutations, and the read side for the settings page."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from mailroom.core.security import RequestContext
from mailroom.domain.audit import AuditLog
from mailroom.domain.enums import AuditAction
from mailroom.repositories.events import AuditLogRepository

logger = logging.getLogger(__name__)


class AuditService:
    def __init__(self, session: AsyncSession, ctx: RequestContext):
        self._ctx = ctx
        self._repo = AuditLogRepository(session, ctx.org_id)

    async def record(
        self,
        action: AuditAction,
        table_name: str,
        record_id: str | None,
        details: dict[str, Any] | None = None,
    ) -> AuditLog:
        """Append one audit row in the caller's transaction."""
        entry = await self._repo.create(
            user_id=self._ctx.profile_id,
            ip_address=self._ctx.ip_address,
            user_agent=self._ctx.user_agent,
            action=action.value,
            table_name=table_name,
            record_id=record_id,
            details=details,
        )
        logger.debug("Audit %s %s/%s by %s", action.value, table_name, record_id, self._ctx.profile_id)
        return entry

    async def list_recent(self, limit: int = 10) -> list[AuditLog]:
        return await self._repo.list_recent(limit)
