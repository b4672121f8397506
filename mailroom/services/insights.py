"""Dashboard insights: headline stats, charts and the activity feed.

All reads are scoped to the caller's organization and, optionally, one mail
room. Times are UTC; ``now`` can be passed in so results are reproducible.
Every aggregate tolerates an empty table and returns zeros or empty lists.
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections import defaultdict
from collections.abc import Awaitable, Callable
from datetime import date, datetime, time, timedelta, timezone
from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mailroom.core.config import Settings, settings
from mailroom.core.security import RequestContext
from mailroom.domain.mixins import ensure_utc, utcnow
from mailroom.repositories.events import NotificationRepository, PickupRepository
from mailroom.repositories.insights import InsightsRepository
from mailroom.repositories.mail_item import MailItemRepository
from mailroom.schemas.insights import (
    ActivityItem,
    BusiestPeriod,
    DailyCount,
    DashboardStats,
    DistributionEntry,
    Insight,
    MailVolume,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

TYPE_DISPLAY_NAMES: dict[str, str] = {
    "package": "Packages",
    "large_package": "Large Packages",
    "letter": "Letters",
    "envelope": "Envelopes",
    "perishable": "Perishable",
    "signature_required": "Signature Required",
    "other": "Other",
}

DEFAULT_TYPE_COLORS: dict[str, str] = {
    "package": "#3B82F6",
    "large_package": "#2563EB",
    "letter": "#10B981",
    "envelope": "#34D399",
    "perishable": "#F59E0B",
    "signature_required": "#8B5CF6",
    "other": "#6B7280",
}
FALLBACK_COLOR = "#6B7280"

VOLUME_WINDOW_DAYS = 30
VOLUME_TITLE = "Mail Volume Insights"
BUSY_DAY_THRESHOLD_PCT = 25

# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def percent(part: int, total: int) -> int:
    return round_half_up(part * 100 / total) if total else 0


def display_name(mail_type: str) -> str:
    return TYPE_DISPLAY_NAMES.get(mail_type, mail_type[:1].upper() + mail_type[1:])


def format_hour_range(hour: int) -> str:
    """``9`` -> ``"9am-10am"``, ``23`` -> ``"11pm-12am"``."""
    def clock(h: int) -> str:
        return f"{h % 12 or 12}{'am' if h < 12 else 'pm'}"

    return f"{clock(hour)}-{clock((hour + 1) % 24)}"


def day_start(moment: datetime) -> datetime:
    return datetime.combine(moment.astimezone(timezone.utc).date(), time.min, tzinfo=timezone.utc)


def week_start(day: date) -> date:
    """Sunday on or before *day*."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def volume_insight(daily: list[tuple[str, int]]) -> Insight:
    """Week-over-week trend and busiest weekdays from ``[(YYYY-MM-DD, count), ...]``."""
    if not daily:
        return Insight(
            title=VOLUME_TITLE,
            content="Insufficient data to generate insights. Start recording mail items to see volume trends.",
            source="Based on mail activity",
        )

    weekly: dict[date, int] = defaultdict(int)
    by_weekday = [0] * 7
    for day_str, count in daily:
        day = date.fromisoformat(day_str)
        weekly[week_start(day)] += count
        by_weekday[(day.weekday() + 1) % 7] += count

    if len(weekly) < 2:
        return Insight(
            title=VOLUME_TITLE,
            content="More data needed for meaningful insights. Continue recording mail to see weekly trends.",
            source="Based on recent mail activity",
        )

    weeks = sorted(weekly)
    current, previous = weekly[weeks[-1]], weekly[weeks[-2]]
    change = round_half_up((current - previous) / previous * 100) if previous else 0

    if change > 0:
        text = f"Package volume has increased {abs(change)}% week-over-week. "
    elif change < 0:
        text = f"Package volume has decreased {abs(change)}% week-over-week. "
    else:
        text = "Package volume has remained stable week-over-week. "

    total = sum(by_weekday)
    shares = [percent(count, total) for count in by_weekday]
    busiest, second = sorted(range(7), key=lambda d: -shares[d])[:2]
    text += (
        f"{DAY_NAMES[busiest]}s ({shares[busiest]}%) and "
        f"{DAY_NAMES[second]}s ({shares[second]}%) are your busiest mail days. "
    )
    if shares[busiest] > BUSY_DAY_THRESHOLD_PCT:
        text += f"Consider scheduling additional staff on {DAY_NAMES[busiest]}s when volume peaks."
    else:
        text += "Your mail volume is fairly evenly distributed throughout the week."

    return Insight(title=VOLUME_TITLE, content=text, source="Based on the last 30 days of activity")


def _busiest(rows: list[tuple[int, int]]) -> tuple[int, int, int] | None:
    """``(key, count, total)`` of the highest count; ties go to the lower key."""
    if not rows:
        return None
    key, count = min(rows, key=lambda row: (-row[1], row[0]))
    return key, count, sum(c for _, c in rows)


def _full_name(person) -> str:
    return f"{person.first_name} {person.last_name}"


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class InsightsService:
    """Each query runs on its own session so independent aggregates can run concurrently."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        ctx: RequestContext,
        mail_room_id: str | None = None,
        config: Settings = settings,
    ):
        self._session_factory = session_factory
        self._ctx = ctx
        self._mail_room_id = mail_room_id
        self._config = config

    async def _run(self, query: Callable[[InsightsRepository], Awaitable[T]]) -> T:
        async with self._session_factory() as session:
            return await query(InsightsRepository(session, self._ctx.org_id, self._mail_room_id))

    async def dashboard_stats(self, now: datetime | None = None) -> DashboardStats:
        now = ensure_utc(now) or utcnow()
        today = day_start(now)
        yesterday = today - timedelta(days=1)
        aging_cutoff = now - timedelta(days=self._config.aging_threshold_days)
        window = timedelta(days=self._config.processing_window_days)

        (
            pending,
            priority,
            delivered_today,
            delivered_yesterday,
            aging,
            latest,
            processing,
            previous_processing,
        ) = await asyncio.gather(
            self._run(lambda r: r.count_open()),
            self._run(lambda r: r.count_open_priority()),
            self._run(lambda r: r.count_picked_up_between(today, today + timedelta(days=1))),
            self._run(lambda r: r.count_picked_up_between(yesterday, today)),
            self._run(lambda r: r.count_open_received_before(aging_cutoff)),
            self._run(lambda r: r.latest_open_received_at()),
            self._run(lambda r: r.avg_processing_days(now - window, now)),
            self._run(lambda r: r.avg_processing_days(now - 2 * window, now - window)),
        )

        oldest_days = max((now - ensure_utc(latest)).days, 0) if latest else 0
        processing = processing or 0.0
        previous_processing = previous_processing or 0.0
        return DashboardStats(
            pending_count=pending,
            priority_count=priority,
            delivered_today_count=delivered_today,
            delivered_diff=delivered_today - delivered_yesterday,
            aging_count=aging,
            oldest_days=oldest_days,
            avg_processing_days=round(processing, 1),
            processing_diff=round(processing - previous_processing, 1),
        )

    async def distribution(self, colors: dict[str, str] | None = None) -> list[DistributionEntry]:
        rows = await self._run(lambda r: r.count_by_type())
        total = sum(count for _, count in rows)
        if total == 0:
            return []
        palette = {**DEFAULT_TYPE_COLORS, **(colors or {})}
        entries = [
            DistributionEntry(
                name=display_name(mail_type),
                value=count,
                color=palette.get(mail_type, FALLBACK_COLOR),
                percentage=percent(count, total),
            )
            for mail_type, count in rows
        ]
        return sorted(entries, key=lambda e: (-e.value, e.name))

    async def busiest_periods(self) -> list[BusiestPeriod]:
        days, hours = await asyncio.gather(
            self._run(lambda r: r.count_by_day_of_week()),
            self._run(lambda r: r.count_by_hour_of_day()),
        )
        result: list[BusiestPeriod] = []
        busiest_day = _busiest(days)
        if busiest_day:
            day, count, total = busiest_day
            result.append(
                BusiestPeriod(label="Day of Week", type="day", value=percent(count, total), period=DAY_NAMES[day])
            )
        busiest_hour = _busiest(hours)
        if busiest_hour:
            hour, count, total = busiest_hour
            result.append(
                BusiestPeriod(
                    label="Time of Day", type="hour", value=percent(count, total), period=format_hour_range(hour)
                )
            )
        return result

    async def mail_volume(self, now: datetime | None = None) -> MailVolume:
        now = ensure_utc(now) or utcnow()
        since = now - timedelta(days=VOLUME_WINDOW_DAYS)
        daily = await self._run(lambda r: r.daily_received_since(since))
        return MailVolume(
            insight=volume_insight(daily),
            daily=[DailyCount(date=day, count=count) for day, count in daily],
        )

    async def recent_activity(self, limit: int = 10, now: datetime | None = None) -> list[ActivityItem]:
        """Received items, pickups and notifications in the activity window, newest first."""
        now = ensure_utc(now) or utcnow()
        since = now - timedelta(days=self._config.activity_window_days)
        org_id, room = self._ctx.org_id, self._mail_room_id

        async with self._session_factory() as session:
            items = await MailItemRepository(session, org_id).list_recent(
                limit=limit, mail_room_id=room, since=since
            )
            pickups = await PickupRepository(session, org_id).list_recent(
                since=since, limit=limit, mail_room_id=room
            )
            notifications = await NotificationRepository(session, org_id).list_recent(
                since=since, limit=limit, mail_room_id=room
            )

        activities: list[ActivityItem] = []
        for item in items:
            person = item.resolved_recipient
            if not person:
                continue
            recorder = item.processed_by.first_name if item.processed_by else "Staff"
            activities.append(
                ActivityItem(
                    id=item.id,
                    type="received",
                    description=f"Package received for {_full_name(person)}",
                    details=f"{item.carrier.upper()} {item.type} - Recorded by {recorder}",
                    timestamp=ensure_utc(item.received_at),
                    status="urgent" if item.is_priority else "new",
                )
            )
        for pickup in pickups:
            person = pickup.resolved_recipient
            if not person:
                continue
            activities.append(
                ActivityItem(
                    id=pickup.id,
                    type="pickup",
                    description=f"{_full_name(person)} picked up package",
                    details=(
                        f"{pickup.mail_item.carrier.upper()} - "
                        f"Package ID: {pickup.mail_item.tracking_number or 'N/A'}"
                    ),
                    timestamp=ensure_utc(pickup.picked_up_at),
                    status="picked_up",
                )
            )
        for notification in notifications:
            person = notification.resolved_recipient
            if not person:
                continue
            activities.append(
                ActivityItem(
                    id=notification.id,
                    type="notification",
                    description=f"Notification sent to {_full_name(person)}",
                    details=f"{notification.type.upper()} - {notification.mail_item.type}",
                    timestamp=ensure_utc(notification.created_at),
                    status="notification",
                )
            )

        activities.sort(key=lambda a: a.timestamp, reverse=True)
        return activities[:limit]
