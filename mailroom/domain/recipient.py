"""Recipient reference: either an internal profile or an external person.

The tables store the reference as two nullable foreign keys guarded by a CHECK
constraint; Python code works with the tagged union below instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Optional, Union

from sqlalchemy import CheckConstraint, ForeignKey, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column, relationship

from mailroom.core.exceptions import ValidationError

if TYPE_CHECKING:
    from mailroom.domain.people import ExternalPerson, UserProfile


@dataclass(frozen=True)
class InternalRecipient:
    id: str
    kind: Literal["internal"] = "internal"


@dataclass(frozen=True)
class ExternalRecipient:
    id: str
    kind: Literal["external"] = "external"


RecipientRef = Union[InternalRecipient, ExternalRecipient]


def recipient_ref(
    recipient_id: str | None, external_recipient_id: str | None
) -> RecipientRef:
    """Build a reference from the two wire/column fields; exactly one must be set."""
    if recipient_id and external_recipient_id:
        raise ValidationError(
            "Provide either recipientId or externalRecipientId, not both"
        )
    if recipient_id:
        return InternalRecipient(recipient_id)
    if external_recipient_id:
        return ExternalRecipient(external_recipient_id)
    raise ValidationError("A recipient is required (recipientId or externalRecipientId)")


def recipient_columns(ref: RecipientRef) -> dict[str, str | None]:
    """Column values for *ref* on any table with the two recipient FKs."""
    if isinstance(ref, InternalRecipient):
        return {"recipient_id": ref.id, "external_recipient_id": None}
    return {"recipient_id": None, "external_recipient_id": ref.id}


def exactly_one_recipient(table: str) -> CheckConstraint:
    return CheckConstraint(
        "(recipient_id IS NULL) <> (external_recipient_id IS NULL)",
        name=f"ck_{table}_exactly_one_recipient",
    )


class RecipientMixin:
    """Adds the two recipient foreign keys, their relationships and the union view."""

    @declared_attr
    def recipient_id(cls) -> Mapped[Optional[str]]:
        return mapped_column(
            String(36), ForeignKey("user_profiles.id"), nullable=True, index=True
        )

    @declared_attr
    def external_recipient_id(cls) -> Mapped[Optional[str]]:
        return mapped_column(
            String(36), ForeignKey("external_people.id"), nullable=True, index=True
        )

    @declared_attr
    def recipient(cls) -> Mapped[Optional[UserProfile]]:
        return relationship(
            "UserProfile", foreign_keys=f"{cls.__name__}.recipient_id", lazy="selectin"
        )

    @declared_attr
    def external_recipient(cls) -> Mapped[Optional[ExternalPerson]]:
        return relationship(
            "ExternalPerson",
            foreign_keys=f"{cls.__name__}.external_recipient_id",
            lazy="selectin",
        )

    @property
    def recipient_ref(self) -> RecipientRef:
        return recipient_ref(self.recipient_id, self.external_recipient_id)

    @property
    def resolved_recipient(self) -> UserProfile | ExternalPerson | None:
        """Whichever of the internal/external recipient rows is set."""
        return self.recipient or self.external_recipient
