"""SQLAlchemy ORM models for tenants and their physical mail rooms."""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import JSON, Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from mailroom.db.base import Base
from mailroom.domain.mixins import TenantMixin, TimestampMixin, new_id


class Organization(Base, TimestampMixin):
    """Tenant root. Never hard-deleted."""

    __tablename__ = "organizations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    contact_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    contact_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    contact_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    logo: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    settings: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)


class MailRoom(Base, TenantMixin, TimestampMixin):
    __tablename__ = "mail_rooms"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
