"""Mail item endpoints: intake, listings, dashboard stats and manual status changes.

Static paths (``/pending``, ``/history``, ``/recent``, ``/stats``) are declared
before ``/{mail_item_id}`` so they are not captured as ids.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mailroom.core.deps import require_staff
from mailroom.core.pagination import PaginationParams
from mailroom.core.response import Page, paginated
from mailroom.core.security import RequestContext
from mailroom.db.base import get_db, get_session_factory
from mailroom.domain.enums import MailItemStatus
from mailroom.schemas.insights import DashboardStats
from mailroom.schemas.mail_item import (
    HistoryFilters,
    MailItemCreate,
    MailItemOut,
    MailItemStatusUpdate,
)
from mailroom.schemas.notification import NotificationOut
from mailroom.services.insights import InsightsService
from mailroom.services.mail_item import MailItemService
from mailroom.services.notification import NotificationService

router = APIRouter(prefix="/mail-items", tags=["Mail items"])


def _svc(session: AsyncSession, ctx: RequestContext) -> MailItemService:
    return MailItemService(session, ctx)


# ------------------------------------------------------------------
# Collection endpoints
# ------------------------------------------------------------------

@router.post("", response_model=MailItemOut, status_code=status.HTTP_201_CREATED)
async def create_mail_item(
    body: MailItemCreate,
    ctx: RequestContext = Depends(require_staff),
    session: AsyncSession = Depends(get_db),
):
    """Record intake of a new item; it starts as ``pending``."""
    item = await _svc(session, ctx).record_intake(body)
    return MailItemOut.model_validate(item)


@router.get("/pending", response_model=Page[MailItemOut])
async def list_pending(
    mailroom_id: Optional[str] = Query(default=None, alias="mailroomId"),
    pagination: PaginationParams = Depends(),
    ctx: RequestContext = Depends(require_staff),
    session: AsyncSession = Depends(get_db),
):
    """Items awaiting pickup, priority first. ``?search=`` matches recipient, tracking number or description."""
    items, total = await _svc(session, ctx).list_pending(pagination, mailroom_id)
    return paginated(
        [MailItemOut.model_validate(i) for i in items],
        total, pagination.page, pagination.page_size,
    )


@router.get("/history", response_model=Page[MailItemOut])
async def list_history(
    filter_status: Optional[MailItemStatus] = Query(default=None, alias="status"),
    date_from: Optional[date] = Query(default=None, alias="dateFrom"),
    date_to: Optional[date] = Query(default=None, alias="dateTo"),
    mailroom_id: Optional[str] = Query(default=None, alias="mailroomId"),
    pagination: PaginationParams = Depends(),
    ctx: RequestContext = Depends(require_staff),
    session: AsyncSession = Depends(get_db),
):
    """Every item regardless of status, newest first."""
    filters = HistoryFilters(
        status=filter_status, date_from=date_from, date_to=date_to, mail_room_id=mailroom_id
    )
    items, total = await _svc(session, ctx).history(pagination, filters)
    return paginated(
        [MailItemOut.model_validate(i) for i in items],
        total, pagination.page, pagination.page_size,
    )


@router.get("/recent", response_model=list[MailItemOut])
async def list_recent(
    limit: int = Query(default=10, ge=1, le=50),
    mailroom_id: Optional[str] = Query(default=None, alias="mailroomId"),
    ctx: RequestContext = Depends(require_staff),
    session: AsyncSession = Depends(get_db),
):
    items = await _svc(session, ctx).recent(limit, mailroom_id)
    return [MailItemOut.model_validate(i) for i in items]


@router.get("/stats", response_model=DashboardStats)
async def dashboard_stats(
    mailroom_id: Optional[str] = Query(default=None, alias="mailroomId"),
    ctx: RequestContext = Depends(require_staff),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    """Headline dashboard numbers, computed from the mail item table."""
    return await InsightsService(session_factory, ctx, mailroom_id).dashboard_stats()


# ------------------------------------------------------------------
# Single item endpoints
# ------------------------------------------------------------------

@router.get("/{mail_item_id}", response_model=MailItemOut)
async def get_mail_item(
    mail_item_id: str,
    ctx: RequestContext = Depends(require_staff),
    session: AsyncSession = Depends(get_db),
):
    item = await _svc(session, ctx).get(mail_item_id)
    return MailItemOut.model_validate(item)


@router.patch("/{mail_item_id}/status", response_model=MailItemOut)
async def change_status(
    mail_item_id: str,
    body: MailItemStatusUpdate,
    ctx: RequestContext = Depends(require_staff),
    session: AsyncSession = Depends(get_db),
):
    """Mark an item returned to sender, lost, other, or back to pending."""
    item = await _svc(session, ctx).change_status(mail_item_id, body)
    return MailItemOut.model_validate(item)


@router.get("/{mail_item_id}/notifications", response_model=list[NotificationOut])
async def list_notifications(
    mail_item_id: str,
    ctx: RequestContext = Depends(require_staff),
    session: AsyncSession = Depends(get_db),
):
    notifications = await NotificationService(session, ctx).list_for_item(mail_item_id)
    return [NotificationOut.model_validate(n) for n in notifications]
