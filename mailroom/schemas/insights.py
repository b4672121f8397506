"""Dashboard and insights response models."""

from __future__ import annotations

from datetime import datetime

from mailroom.schemas.common import CamelModel


class DashboardStats(CamelModel):
    pending_count: int = 0
    priority_count: int = 0
    delivered_today_count: int = 0
    delivered_diff: int = 0
    aging_count: int = 0
    oldest_days: int = 0
    avg_processing_days: float = 0.0
    processing_diff: float = 0.0


class DistributionEntry(CamelModel):
    name: str
    value: int
    color: str
    percentage: int


class BusiestPeriod(CamelModel):
    label: str
    type: str
    value: int
    period: str


class Insight(CamelModel):
    title: str
    content: str
    source: str


class DailyCount(CamelModel):
    date: str
    count: int


class MailVolume(CamelModel):
    insight: Insight
    daily: list[DailyCount]


class ActivityItem(CamelModel):
    id: str
    type: str
    description: str
    details: str
    timestamp: datetime
    status: str
