"""Pickup Pydantic schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from mailroom.schemas.common import PersonSummary
from mailroom.schemas.recipient import RecipientRefIn, ResolvedRecipientOut


class PickupCreate(RecipientRefIn):
    mail_item_id: str
    # Opaque encoded images (data URL or SVG markup)
    signature: Optional[str] = None
    photo_confirmation: Optional[str] = None
    notes: Optional[str] = None
    picked_up_at: Optional[datetime] = None


class PickupOut(ResolvedRecipientOut):
    id: str
    org_id: str
    mail_item_id: str
    processed_by_id: str
    processed_by: Optional[PersonSummary] = None
    picked_up_at: datetime
    signature: Optional[str] = None
    photo_confirmation: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
