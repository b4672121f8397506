"""Notification endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from mailroom.core.deps import require_staff
from mailroom.core.security import RequestContext
from mailroom.db.base import get_db
from mailroom.schemas.notification import NotificationCreate, NotificationOut
from mailroom.services.notification import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.post("", response_model=NotificationOut, status_code=status.HTTP_201_CREATED)
async def record_notification(
    body: NotificationCreate,
    ctx: RequestContext = Depends(require_staff),
    session: AsyncSession = Depends(get_db),
):
    """Log a notification (or reminder) for a mail item; the first one marks it ``notified``."""
    notification = await NotificationService(session, ctx).record_notification(body)
    return NotificationOut.model_validate(notification)
