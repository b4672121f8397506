"""Integration connector metadata. Sync itself is not implemented."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from mailroom.core.exceptions import NotFoundError
from mailroom.core.security import RequestContext
from mailroom.domain.enums import AuditAction
from mailroom.domain.integration import Integration
from mailroom.repositories.integration import IntegrationRepository
from mailroom.schemas.integration import IntegrationCreate, IntegrationUpdate
from mailroom.services.audit import AuditService


class IntegrationService:
    def __init__(self, session: AsyncSession, ctx: RequestContext):
        self._repo = IntegrationRepository(session, ctx.org_id)
        self._audit = AuditService(session, ctx)

    async def list_integrations(self) -> list[Integration]:
        return await self._repo.list_all()

    async def get_integration(self, integration_id: str) -> Integration:
        integration = await self._repo.get_by_id(integration_id)
        if not integration:
            raise NotFoundError("Integration", integration_id)
        return integration

    async def create_integration(self, data: IntegrationCreate) -> Integration:
        values = data.model_dump()
        values["type"] = data.type.value
        integration = await self._repo.create(**values)
        await self._audit.record(
            AuditAction.CREATE, "integrations", integration.id, {"name": data.name, "type": data.type.value}
        )
        return integration

    async def update_integration(self, integration_id: str, data: IntegrationUpdate) -> Integration:
        await self.get_integration(integration_id)
        changes = data.model_dump(exclude_none=True, exclude_unset=True)
        if data.type is not None:
            changes["type"] = data.type.value
        integration = await self._repo.update(integration_id, **changes)
        await self._audit.record(
            AuditAction.UPDATE, "integrations", integration_id, {"fields": sorted(changes)}
        )
        return integration  # type: ignore[return-value]
