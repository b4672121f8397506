"""SQLAlchemy ORM model for the admin audit log."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import ForeignKey, JSON, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mailroom.db.base import Base
from mailroom.db.types import UTCDateTime
from mailroom.domain.mixins import TenantMixin, new_id


class AuditLog(Base, TenantMixin):
    __tablename__ = "audit_logs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    # Who
    user_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("user_profiles.id"), index=True, nullable=True
    )
    ip_address: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)

    # What: create | update | delete | login | logout | other
    action: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    table_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    record_id: Mapped[Optional[str]] = mapped_column(String(36), index=True, nullable=True)
    details: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)

    # When (no updated_at -- audit rows are immutable)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    user: Mapped[Optional["UserProfile"]] = relationship(lazy="selectin")
