"""SQLAlchemy ORM model for pickups (unique per mail item, immutable once written)."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mailroom.db.base import Base
from mailroom.db.types import UTCDateTime
from mailroom.domain.mixins import TenantMixin, TimestampMixin, new_id, utcnow
from mailroom.domain.recipient import RecipientMixin, exactly_one_recipient


class Pickup(Base, TenantMixin, TimestampMixin, RecipientMixin):
    __tablename__ = "pickups"
    __table_args__ = (exactly_one_recipient("pickups"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    mail_item_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("mail_items.id"), nullable=False, unique=True, index=True
    )
    processed_by_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("user_profiles.id"), nullable=False
    )
    picked_up_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utcnow, nullable=False, index=True
    )
    # Encoded images (data URLs / SVG markup), stored opaque
    signature: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    photo_confirmation: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    extra: Mapped[Optional[Any]] = mapped_column("metadata", JSON, nullable=True)

    mail_item: Mapped["MailItem"] = relationship(lazy="selectin")
    processed_by: Mapped["UserProfile"] = relationship(
        foreign_keys=[processed_by_id], lazy="selectin"
    )
