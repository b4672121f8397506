"""SQLAlchemy ORM model for notification attempts (append-only)."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mailroom.db.base import Base
from mailroom.db.types import UTCDateTime
from mailroom.domain.enums import NotificationStatus, NotificationType
from mailroom.domain.mixins import TenantMixin, TimestampMixin, new_id
from mailroom.domain.recipient import RecipientMixin, exactly_one_recipient


class Notification(Base, TenantMixin, TimestampMixin, RecipientMixin):
    __tablename__ = "notifications"
    __table_args__ = (exactly_one_recipient("notifications"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    mail_item_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("mail_items.id"), nullable=False, index=True
    )
    # email | sms | app | other
    type: Mapped[str] = mapped_column(
        String(20), default=NotificationType.EMAIL.value, nullable=False
    )
    destination: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    # sent | delivered | failed | pending
    status: Mapped[str] = mapped_column(
        String(20), default=NotificationStatus.PENDING.value, nullable=False
    )
    sent_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    delivered_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    extra: Mapped[Optional[Any]] = mapped_column("metadata", JSON, nullable=True)

    mail_item: Mapped["MailItem"] = relationship(lazy="selectin")
