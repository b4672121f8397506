"""Recipient endpoints: internal profiles, external people and the combined picker list."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from mailroom.core.deps import require_staff
from mailroom.core.security import RequestContext
from mailroom.db.base import get_db
from mailroom.schemas.recipient import (
    ExternalPersonCreate,
    ExternalPersonOut,
    ExternalPersonUpdate,
    InternalRecipientCreate,
    InternalRecipientUpdate,
    RecipientSummary,
    UserProfileOut,
)
from mailroom.services.recipients import RecipientService

router = APIRouter(prefix="/recipients", tags=["Recipients"])
external_router = APIRouter(prefix="/external-people", tags=["Recipients"])


def _svc(session: AsyncSession, ctx: RequestContext) -> RecipientService:
    return RecipientService(session, ctx)


# ------------------------------------------------------------------
# Combined list + internal recipients
# ------------------------------------------------------------------

@router.get("", response_model=list[RecipientSummary])
async def list_recipients(
    ctx: RequestContext = Depends(require_staff),
    session: AsyncSession = Depends(get_db),
):
    """Active internal and external recipients, each tagged ``internal``/``external``."""
    return await _svc(session, ctx).list_all()


@router.post("", response_model=UserProfileOut, status_code=status.HTTP_201_CREATED)
async def create_recipient(
    body: InternalRecipientCreate,
    ctx: RequestContext = Depends(require_staff),
    session: AsyncSession = Depends(get_db),
):
    profile = await _svc(session, ctx).create_internal(body)
    return UserProfileOut.model_validate(profile)


@router.get("/{profile_id}", response_model=UserProfileOut)
async def get_recipient(
    profile_id: str,
    ctx: RequestContext = Depends(require_staff),
    session: AsyncSession = Depends(get_db),
):
    profile = await _svc(session, ctx).get_internal(profile_id)
    return UserProfileOut.model_validate(profile)


@router.patch("/{profile_id}", response_model=UserProfileOut)
async def update_recipient(
    profile_id: str,
    body: InternalRecipientUpdate,
    ctx: RequestContext = Depends(require_staff),
    session: AsyncSession = Depends(get_db),
):
    profile = await _svc(session, ctx).update_internal(profile_id, body)
    return UserProfileOut.model_validate(profile)


# ------------------------------------------------------------------
# External people
# ------------------------------------------------------------------

@external_router.get("", response_model=list[ExternalPersonOut])
async def list_external_people(
    ctx: RequestContext = Depends(require_staff),
    session: AsyncSession = Depends(get_db),
):
    people = await _svc(session, ctx).list_external()
    return [ExternalPersonOut.model_validate(p) for p in people]


@external_router.post("", response_model=ExternalPersonOut, status_code=status.HTTP_201_CREATED)
async def create_external_person(
    body: ExternalPersonCreate,
    ctx: RequestContext = Depends(require_staff),
    session: AsyncSession = Depends(get_db),
):
    person = await _svc(session, ctx).create_external(body)
    return ExternalPersonOut.model_validate(person)


@external_router.patch("/{person_id}", response_model=ExternalPersonOut)
async def update_external_person(
    person_id: str,
    body: ExternalPersonUpdate,
    ctx: RequestContext = Depends(require_staff),
    session: AsyncSession = Depends(get_db),
):
    person = await _svc(session, ctx).update_external(person_id, body)
    return ExternalPersonOut.model_validate(person)
