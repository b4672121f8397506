"""SQLAlchemy ORM model for mail items -- one physical piece of mail or package.

Mail items are never deleted; their status only moves forward through the
lifecycle in :mod:`mailroom.services.lifecycle`.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, Boolean, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mailroom.db.base import Base
from mailroom.db.types import UTCDateTime
from mailroom.domain.enums import Carrier, MailItemStatus, MailItemType
from mailroom.domain.mixins import TenantMixin, TimestampMixin, new_id, utcnow
from mailroom.domain.recipient import RecipientMixin, exactly_one_recipient


class MailItem(Base, TenantMixin, TimestampMixin, RecipientMixin):
    __tablename__ = "mail_items"
    __table_args__ = (
        exactly_one_recipient("mail_items"),
        Index("ix_mail_items_org_status_received", "org_id", "status", "received_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    mail_room_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("mail_rooms.id"), nullable=False, index=True
    )
    tracking_number: Mapped[Optional[str]] = mapped_column(String(100), index=True, nullable=True)
    carrier: Mapped[str] = mapped_column(String(20), default=Carrier.OTHER.value, nullable=False)
    type: Mapped[str] = mapped_column(String(30), default=MailItemType.PACKAGE.value, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_priority: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # pending | notified | picked_up | returned_to_sender | lost | other
    status: Mapped[str] = mapped_column(
        String(30), default=MailItemStatus.PENDING.value, nullable=False, index=True
    )
    received_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utcnow, nullable=False
    )
    notified_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    picked_up_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)

    processed_by_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("user_profiles.id"), nullable=True
    )
    label_image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    extra: Mapped[Optional[Any]] = mapped_column("metadata", JSON, nullable=True)

    mail_room: Mapped["MailRoom"] = relationship(lazy="selectin")
    processed_by: Mapped[Optional["UserProfile"]] = relationship(
        foreign_keys=[processed_by_id], lazy="selectin"
    )
