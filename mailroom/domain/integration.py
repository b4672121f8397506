"""SQLAlchemy ORM model for external sync connector configuration (metadata only)."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from mailroom.db.base import Base
from mailroom.db.types import UTCDateTime
from mailroom.domain.enums import IntegrationType
from mailroom.domain.mixins import TenantMixin, TimestampMixin, new_id


class Integration(Base, TenantMixin, TimestampMixin):
    __tablename__ = "integrations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # csv | api | other
    type: Mapped[str] = mapped_column(String(20), default=IntegrationType.CSV.value, nullable=False)
    configuration: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)
    last_synced_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
