"""Integration connector metadata and audit log endpoints (admins and managers)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from mailroom.core.deps import require_manager
from mailroom.core.security import RequestContext
from mailroom.db.base import get_db
from mailroom.schemas.integration import (
    AuditLogOut,
    IntegrationCreate,
    IntegrationOut,
    IntegrationUpdate,
)
from mailroom.services.audit import AuditService
from mailroom.services.integration import IntegrationService

router = APIRouter(prefix="/integrations", tags=["Integrations"])
audit_router = APIRouter(prefix="/audit-logs", tags=["Audit"])


def _svc(session: AsyncSession, ctx: RequestContext) -> IntegrationService:
    return IntegrationService(session, ctx)


@router.get("", response_model=list[IntegrationOut])
async def list_integrations(
    ctx: RequestContext = Depends(require_manager),
    session: AsyncSession = Depends(get_db),
):
    """Active connectors first, then by name."""
    integrations = await _svc(session, ctx).list_integrations()
    return [IntegrationOut.model_validate(i) for i in integrations]


@router.post("", response_model=IntegrationOut, status_code=status.HTTP_201_CREATED)
async def create_integration(
    body: IntegrationCreate,
    ctx: RequestContext = Depends(require_manager),
    session: AsyncSession = Depends(get_db),
):
    integration = await _svc(session, ctx).create_integration(body)
    return IntegrationOut.model_validate(integration)


@router.patch("/{integration_id}", response_model=IntegrationOut)
async def update_integration(
    integration_id: str,
    body: IntegrationUpdate,
    ctx: RequestContext = Depends(require_manager),
    session: AsyncSession = Depends(get_db),
):
    integration = await _svc(session, ctx).update_integration(integration_id, body)
    return IntegrationOut.model_validate(integration)


@audit_router.get("", response_model=list[AuditLogOut])
async def list_audit_logs(
    limit: int = Query(default=10, ge=1, le=100),
    ctx: RequestContext = Depends(require_manager),
    session: AsyncSession = Depends(get_db),
):
    entries = await AuditService(session, ctx).list_recent(limit)
    return [AuditLogOut.model_validate(e) for e in entries]
