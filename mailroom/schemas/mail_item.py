"""Mail item Pydantic schemas (request DTOs and response models)."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import Field

from mailroom.domain.enums import Carrier, MailItemStatus, MailItemType
from mailroom.schemas.common import CamelModel, MailRoomSummary, PersonSummary
from mailroom.schemas.recipient import RecipientRefIn, ResolvedRecipientOut


class MailItemCreate(RecipientRefIn):
    mail_room_id: str
    tracking_number: Optional[str] = Field(default=None, max_length=100)
    carrier: Carrier = Carrier.OTHER
    type: MailItemType = MailItemType.PACKAGE
    description: Optional[str] = None
    notes: Optional[str] = None
    is_priority: bool = False
    label_image: Optional[str] = None


class MailItemStatusUpdate(CamelModel):
    status: MailItemStatus
    notes: Optional[str] = None


class HistoryFilters(CamelModel):
    status: Optional[MailItemStatus] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    mail_room_id: Optional[str] = None


class MailItemOut(ResolvedRecipientOut):
    id: str
    org_id: str
    mail_room_id: str
    tracking_number: Optional[str] = None
    carrier: str
    type: str
    description: Optional[str] = None
    notes: Optional[str] = None
    is_priority: bool
    status: str
    received_at: datetime
    notified_at: Optional[datetime] = None
    picked_up_at: Optional[datetime] = None
    processed_by_id: Optional[str] = None
    processed_by: Optional[PersonSummary] = None
    mail_room: Optional[MailRoomSummary] = None
    label_image: Optional[str] = None
    created_at: datetime
    updated_at: datetime
