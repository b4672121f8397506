"""Notification Pydantic schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from mailroom.domain.enums import NotificationType
from mailroom.schemas.recipient import RecipientRefIn, ResolvedRecipientOut


class NotificationCreate(RecipientRefIn):
    """Recipient fields are optional here; they default to the mail item's recipient."""

    mail_item_id: str
    type: NotificationType = NotificationType.EMAIL
    destination: Optional[str] = Field(default=None, max_length=255)
    message: Optional[str] = None


class NotificationOut(ResolvedRecipientOut):
    id: str
    org_id: str
    mail_item_id: str
    type: str
    destination: str
    message: str
    status: str
    sent_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    created_at: datetime
