"""Dashboard chart and activity feed endpoints (read-only)."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mailroom.core.deps import require_staff
from mailroom.core.exceptions import ValidationError
from mailroom.core.security import RequestContext
from mailroom.db.base import get_session_factory
from mailroom.schemas.insights import ActivityItem, BusiestPeriod, DistributionEntry, MailVolume
from mailroom.services.insights import InsightsService

router = APIRouter(prefix="/insights", tags=["Insights"])
activity_router = APIRouter(prefix="/activities", tags=["Insights"])


def _parse_colors(raw: str | None) -> dict[str, str] | None:
    """``package:#112233,letter:#445566`` -> ``{"package": "#112233", ...}``."""
    if not raw:
        return None
    colors: dict[str, str] = {}
    for pair in raw.split(","):
        mail_type, sep, color = pair.partition(":")
        if not sep or not mail_type.strip() or not color.strip():
            raise ValidationError(f"Invalid color mapping '{pair}'; expected type:#rrggbb")
        colors[mail_type.strip()] = color.strip()
    return colors


@router.get("/distribution", response_model=list[DistributionEntry])
async def package_distribution(
    mailroom_id: Optional[str] = Query(default=None, alias="mailroomId"),
    colors: Optional[str] = Query(default=None, description="Override palette, e.g. package:#112233,letter:#445566"),
    ctx: RequestContext = Depends(require_staff),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    return await InsightsService(session_factory, ctx, mailroom_id).distribution(_parse_colors(colors))


@router.get("/mail-volume", response_model=MailVolume)
async def mail_volume(
    mailroom_id: Optional[str] = Query(default=None, alias="mailroomId"),
    ctx: RequestContext = Depends(require_staff),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    return await InsightsService(session_factory, ctx, mailroom_id).mail_volume()


@router.get("/busiest-periods", response_model=list[BusiestPeriod])
async def busiest_periods(
    mailroom_id: Optional[str] = Query(default=None, alias="mailroomId"),
    ctx: RequestContext = Depends(require_staff),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    return await InsightsService(session_factory, ctx, mailroom_id).busiest_periods()


@activity_router.get("/recent", response_model=list[ActivityItem])
async def recent_activity(
    limit: int = Query(default=10, ge=1, le=50),
    mailroom_id: Optional[str] = Query(default=None, alias="mailroomId"),
    ctx: RequestContext = Depends(require_staff),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    return await InsightsService(session_factory, ctx, mailroom_id).recent_activity(limit)
