"""Recipient schemas: the uniform summary shape plus internal/external people DTOs."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import AliasChoices, EmailStr, Field, field_validator

from mailroom.domain.recipient import RecipientRef, recipient_ref
from mailroom.schemas.common import CamelModel

UNKNOWN_RECIPIENT = {"id": None, "first_name": "Unknown", "last_name": "Recipient"}


class RecipientSummary(CamelModel):
    """Either kind of recipient rendered as one shape."""

    id: Optional[str] = None
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    department: Optional[str] = None
    location: Optional[str] = None
    type: Optional[Literal["internal", "external"]] = Field(
        default=None, validation_alias=AliasChoices("kind", "type")
    )


class RecipientRefIn(CamelModel):
    """Request mixin for the two wire fields that name a recipient."""

    recipient_id: Optional[str] = None
    external_recipient_id: Optional[str] = None

    def recipient_ref(self) -> RecipientRef:
        return recipient_ref(self.recipient_id, self.external_recipient_id)


class ResolvedRecipientOut(CamelModel):
    """Response mixin: the raw reference plus whichever person it resolves to."""

    recipient_id: Optional[str] = None
    external_recipient_id: Optional[str] = None
    recipient: RecipientSummary = Field(
        validation_alias=AliasChoices("resolved_recipient", "recipient")
    )

    @field_validator("recipient", mode="before")
    @classmethod
    def _unknown_when_dangling(cls, value):
        return UNKNOWN_RECIPIENT if value is None else value


# ---------------------------------------------------------------------------
# Internal recipients (user profiles)
# ---------------------------------------------------------------------------

class InternalRecipientCreate(CamelModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = None
    department: Optional[str] = None
    location: Optional[str] = None
    mail_room_id: Optional[str] = None


class InternalRecipientUpdate(CamelModel):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    department: Optional[str] = None
    location: Optional[str] = None
    mail_room_id: Optional[str] = None
    is_active: Optional[bool] = None


class UserProfileOut(CamelModel):
    id: str
    user_id: str
    org_id: str
    mail_room_id: Optional[str] = None
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    role: str
    department: Optional[str] = None
    location: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# External people
# ---------------------------------------------------------------------------

class ExternalPersonCreate(CamelModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    department: Optional[str] = None
    location: Optional[str] = None
    external_id: Optional[str] = None


class ExternalPersonUpdate(CamelModel):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    department: Optional[str] = None
    location: Optional[str] = None
    external_id: Optional[str] = None
    is_active: Optional[bool] = None


class ExternalPersonOut(CamelModel):
    id: str
    org_id: str
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    department: Optional[str] = None
    location: Optional[str] = None
    external_id: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
