"""Integration and audit log Pydantic schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from mailroom.domain.enums import IntegrationType
from mailroom.schemas.common import CamelModel, PersonSummary


class IntegrationCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    type: IntegrationType = IntegrationType.CSV
    configuration: Optional[dict[str, Any]] = None
    is_active: bool = True


class IntegrationUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    type: Optional[IntegrationType] = None
    configuration: Optional[dict[str, Any]] = None
    is_active: Optional[bool] = None


class IntegrationOut(CamelModel):
    id: str
    org_id: str
    name: str
    type: str
    configuration: Optional[dict[str, Any]] = None
    last_synced_at: Optional[datetime] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class AuditLogOut(CamelModel):
    id: str
    user_id: Optional[str] = None
    user: Optional[PersonSummary] = None
    action: str
    table_name: Optional[str] = None
    record_id: Optional[str] = None
    details: Optional[dict[str, Any]] = None
    ip_address: Optional[str] = None
    created_at: datetime
