"""Pickup endpoints: thin HTTP layer over :mod:`mailroom.services.pickup`."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from mailroom.core.deps import require_staff
from mailroom.core.security import RequestContext
from mailroom.db.base import get_db
from mailroom.schemas.pickup import PickupCreate, PickupOut
from mailroom.services.pickup import PickupService

router = APIRouter(prefix="/pickups", tags=["Pickups"])


@router.post("", response_model=PickupOut, status_code=status.HTTP_201_CREATED)
async def record_pickup(
    body: PickupCreate,
    ctx: RequestContext = Depends(require_staff),
    session: AsyncSession = Depends(get_db),
):
    """Record that the recipient collected the item and mark it ``picked_up``.

    409 if the item is already closed, 400 if the recipient does not match.
    """
    pickup = await PickupService(session, ctx).record_pickup(body)
    return PickupOut.model_validate(pickup)


@router.get("/{pickup_id}", response_model=PickupOut)
async def get_pickup(
    pickup_id: str,
    ctx: RequestContext = Depends(require_staff),
    session: AsyncSession = Depends(get_db),
):
    pickup = await PickupService(session, ctx).get(pickup_id)
    return PickupOut.model_validate(pickup)
