"""Recipients: internal user profiles and external people, plus the combined picker list."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from mailroom.core.exceptions import NotFoundError
from mailroom.core.security import RequestContext
from mailroom.domain.enums import AuditAction, Role
from mailroom.domain.mixins import new_id
from mailroom.domain.people import ExternalPerson, UserProfile
from mailroom.repositories.organization import MailRoomRepository
from mailroom.repositories.people import ExternalPersonRepository, UserProfileRepository
from mailroom.schemas.recipient import (
    ExternalPersonCreate,
    ExternalPersonUpdate,
    InternalRecipientCreate,
    InternalRecipientUpdate,
    RecipientSummary,
)
from mailroom.services.audit import AuditService

logger = logging.getLogger(__name__)


class RecipientService:
    def __init__(self, session: AsyncSession, ctx: RequestContext):
        self._ctx = ctx
        self._profiles = UserProfileRepository(session, ctx.org_id)
        self._external = ExternalPersonRepository(session, ctx.org_id)
        self._rooms = MailRoomRepository(session, ctx.org_id)
        self._audit = AuditService(session, ctx)

    async def list_all(self) -> list[RecipientSummary]:
        """Active internal and external recipients, tagged by kind, ordered by name."""
        people: list[UserProfile | ExternalPerson] = [
            *await self._profiles.list_active(),
            *await self._external.list_all(active_only=True),
        ]
        people.sort(key=lambda p: (p.last_name.lower(), p.first_name.lower()))
        return [RecipientSummary.model_validate(p) for p in people]

    # ------------------------------------------------------------------
    # Internal recipients
    # ------------------------------------------------------------------

    async def get_internal(self, profile_id: str) -> UserProfile:
        profile = await self._profiles.get_by_id(profile_id)
        if not profile:
            raise NotFoundError("Recipient", profile_id)
        return profile

    async def create_internal(self, data: InternalRecipientCreate) -> UserProfile:
        """Add a recipient profile; the auth identity is a fresh id until they sign up."""
        await self._ensure_mail_room(data.mail_room_id)
        profile = await self._profiles.create(
            user_id=new_id(), role=Role.RECIPIENT.value, **data.model_dump()
        )
        await self._audit.record(
            AuditAction.CREATE, "user_profiles", profile.id, data.model_dump(mode="json")
        )
        logger.info("Recipient profile %s created", profile.id)
        return profile

    async def update_internal(self, profile_id: str, data: InternalRecipientUpdate) -> UserProfile:
        await self.get_internal(profile_id)
        changes = data.model_dump(exclude_none=True, exclude_unset=True)
        await self._ensure_mail_room(changes.get("mail_room_id"))
        profile = await self._profiles.update(profile_id, **changes)
        await self._audit.record(
            AuditAction.UPDATE, "user_profiles", profile_id,
            data.model_dump(mode="json", exclude_none=True, exclude_unset=True),
        )
        return profile  # type: ignore[return-value]

    # ------------------------------------------------------------------
    # External people
    # ------------------------------------------------------------------

    async def list_external(self) -> list[ExternalPerson]:
        return await self._external.list_all()

    async def get_external(self, person_id: str) -> ExternalPerson:
        person = await self._external.get_by_id(person_id)
        if not person:
            raise NotFoundError("External recipient", person_id)
        return person

    async def create_external(self, data: ExternalPersonCreate) -> ExternalPerson:
        person = await self._external.create(**data.model_dump())
        await self._audit.record(
            AuditAction.CREATE, "external_people", person.id, data.model_dump(mode="json")
        )
        return person

    async def update_external(self, person_id: str, data: ExternalPersonUpdate) -> ExternalPerson:
        await self.get_external(person_id)
        person = await self._external.update(person_id, **data.model_dump(exclude_none=True, exclude_unset=True))
        await self._audit.record(
            AuditAction.UPDATE, "external_people", person_id,
            data.model_dump(mode="json", exclude_none=True, exclude_unset=True),
        )
        return person  # type: ignore[return-value]

    async def _ensure_mail_room(self, mail_room_id: str | None) -> None:
        if mail_room_id and not await self._rooms.get_by_id(mail_room_id):
            raise NotFoundError("Mail room", mail_room_id)
