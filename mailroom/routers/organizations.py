"""Organization settings and mail room administration endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from mailroom.core.deps import require_admin, require_manager, require_staff
from mailroom.core.security import RequestContext
from mailroom.db.base import get_db
from mailroom.schemas.organization import (
    MailRoomCreate,
    MailRoomOut,
    MailRoomUpdate,
    OrganizationOut,
    OrganizationUpdate,
)
from mailroom.services.organization import OrganizationService

router = APIRouter(prefix="/organizations", tags=["Organization"])
mailroom_router = APIRouter(prefix="/mailrooms", tags=["Mail rooms"])


def _svc(session: AsyncSession, ctx: RequestContext) -> OrganizationService:
    return OrganizationService(session, ctx)


# ------------------------------------------------------------------
# Organization
# ------------------------------------------------------------------

@router.get("/current", response_model=OrganizationOut)
async def get_current_organization(
    ctx: RequestContext = Depends(require_staff),
    session: AsyncSession = Depends(get_db),
):
    org = await _svc(session, ctx).get_organization()
    return OrganizationOut.model_validate(org)


@router.patch("/current", response_model=OrganizationOut)
async def update_current_organization(
    body: OrganizationUpdate,
    ctx: RequestContext = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
):
    """Update organization details (admins only; audited)."""
    org = await _svc(session, ctx).update_organization(body)
    return OrganizationOut.model_validate(org)


# ------------------------------------------------------------------
# Mail rooms
# ------------------------------------------------------------------

@mailroom_router.get("", response_model=list[MailRoomOut])
async def list_mail_rooms(
    active_only: bool = Query(default=False, alias="activeOnly"),
    ctx: RequestContext = Depends(require_staff),
    session: AsyncSession = Depends(get_db),
):
    rooms = await _svc(session, ctx).list_mail_rooms(active_only)
    return [MailRoomOut.model_validate(r) for r in rooms]


@mailroom_router.post("", response_model=MailRoomOut, status_code=status.HTTP_201_CREATED)
async def create_mail_room(
    body: MailRoomCreate,
    ctx: RequestContext = Depends(require_manager),
    session: AsyncSession = Depends(get_db),
):
    room = await _svc(session, ctx).create_mail_room(body)
    return MailRoomOut.model_validate(room)


@mailroom_router.get("/{mail_room_id}", response_model=MailRoomOut)
async def get_mail_room(
    mail_room_id: str,
    ctx: RequestContext = Depends(require_staff),
    session: AsyncSession = Depends(get_db),
):
    room = await _svc(session, ctx).get_mail_room(mail_room_id)
    return MailRoomOut.model_validate(room)


@mailroom_router.patch("/{mail_room_id}", response_model=MailRoomOut)
async def update_mail_room(
    mail_room_id: str,
    body: MailRoomUpdate,
    ctx: RequestContext = Depends(require_manager),
    session: AsyncSession = Depends(get_db),
):
    room = await _svc(session, ctx).update_mail_room(mail_room_id, body)
    return MailRoomOut.model_validate(room)
