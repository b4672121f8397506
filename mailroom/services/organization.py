"""Organization settings and mail room administration (audited)."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from mailroom.core.exceptions import NotFoundError
from mailroom.core.security import RequestContext
from mailroom.domain.enums import AuditAction
from mailroom.domain.organization import MailRoom, Organization
from mailroom.repositories.organization import MailRoomRepository, OrganizationRepository
from mailroom.schemas.organization import MailRoomCreate, MailRoomUpdate, OrganizationUpdate
from mailroom.services.audit import AuditService


class OrganizationService:
    def __init__(self, session: AsyncSession, ctx: RequestContext):
        self._ctx = ctx
        self._orgs = OrganizationRepository(session, ctx.org_id)
        self._rooms = MailRoomRepository(session, ctx.org_id)
        self._audit = AuditService(session, ctx)

    # ------------------------------------------------------------------
    # Organization
    # ------------------------------------------------------------------

    async def get_organization(self) -> Organization:
        org = await self._orgs.get()
        if not org:
            raise NotFoundError("Organization", self._ctx.org_id)
        return org

    async def update_organization(self, data: OrganizationUpdate) -> Organization:
        await self.get_organization()
        changes = data.model_dump(exclude_none=True, exclude_unset=True)
        org = await self._orgs.update(**changes)
        await self._audit.record(
            AuditAction.UPDATE, "organizations", self._ctx.org_id,
            data.model_dump(mode="json", exclude_none=True, exclude_unset=True),
        )
        return org  # type: ignore[return-value]

    # ------------------------------------------------------------------
    # Mail rooms
    # ------------------------------------------------------------------

    async def list_mail_rooms(self, active_only: bool = False) -> list[MailRoom]:
        return await self._rooms.list_all(active_only=active_only)

    async def get_mail_room(self, mail_room_id: str) -> MailRoom:
        room = await self._rooms.get_by_id(mail_room_id)
        if not room:
            raise NotFoundError("Mail room", mail_room_id)
        return room

    async def create_mail_room(self, data: MailRoomCreate) -> MailRoom:
        room = await self._rooms.create(**data.model_dump())
        await self._audit.record(
            AuditAction.CREATE, "mail_rooms", room.id, data.model_dump(mode="json")
        )
        return room

    async def update_mail_room(self, mail_room_id: str, data: MailRoomUpdate) -> MailRoom:
        await self.get_mail_room(mail_room_id)
        room = await self._rooms.update(mail_room_id, **data.model_dump(exclude_none=True, exclude_unset=True))
        await self._audit.record(
            AuditAction.UPDATE, "mail_rooms", mail_room_id,
            data.model_dump(mode="json", exclude_none=True, exclude_unset=True),
        )
        return room  # type: ignore[return-value]
