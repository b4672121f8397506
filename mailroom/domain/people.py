"""SQLAlchemy ORM models for the people mail is addressed to.

``UserProfile`` is an internal person with a login (staff or recipient);
``ExternalPerson`` is a visitor or contractor without one. Mail items point at
exactly one of the two.
"""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import JSON, Boolean, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from mailroom.db.base import Base
from mailroom.domain.enums import Role
from mailroom.domain.mixins import TenantMixin, TimestampMixin, new_id


class UserProfile(Base, TenantMixin, TimestampMixin):
    __tablename__ = "user_profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    # Subject of the auth identity (session or identity-provider token)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, unique=True, index=True)
    mail_room_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("mail_rooms.id"), nullable=True
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    # admin | manager | staff | recipient
    role: Mapped[str] = mapped_column(String(20), default=Role.RECIPIENT.value, nullable=False)
    department: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    settings: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def kind(self) -> str:
        return "internal"


class ExternalPerson(Base, TenantMixin, TimestampMixin):
    __tablename__ = "external_people"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    department: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    external_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    extra: Mapped[Optional[Any]] = mapped_column("metadata", JSON, nullable=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def kind(self) -> str:
        return "external"
