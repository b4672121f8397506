"""Organization and mail room Pydantic schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import EmailStr, Field

from mailroom.schemas.common import CamelModel


class OrganizationUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    address: Optional[str] = None
    contact_name: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = None
    logo: Optional[str] = None
    settings: Optional[dict[str, Any]] = None


class OrganizationOut(CamelModel):
    id: str
    name: str
    address: Optional[str] = None
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    logo: Optional[str] = None
    settings: Optional[dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime


class MailRoomCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    location: Optional[str] = None
    is_active: bool = True


class MailRoomUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    location: Optional[str] = None
    is_active: Optional[bool] = None


class MailRoomOut(CamelModel):
    id: str
    org_id: str
    name: str
    location: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
