"""Dashboard stats, charts and volume insight text."""

from datetime import datetime, timedelta, timezone

import pytest

from mailroom.services.insights import (
    InsightsService,
    format_hour_range,
    percent,
    round_half_up,
    volume_insight,
    week_start,
)

# Saturday
NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
async def seeded_items(seed, make_item):
    """Five items across two rooms; dates chosen around NOW."""
    await make_item(
        received_at=NOW - timedelta(hours=1), type="package", is_priority=True
    )  # Sat 11:00, open
    await make_item(
        received_at=NOW - timedelta(days=7), type="letter", status="notified"
    )  # Sat 12:00, open, aging
    await make_item(
        received_at=NOW - timedelta(days=10), type="package", mail_room_id=seed.annex.id
    )  # Wed 12:00, open, aging
    await make_item(
        received_at=NOW - timedelta(days=2),
        picked_up_at=NOW - timedelta(hours=2),
        type="package",
        status="picked_up",
    )  # Thu 12:00, picked up today after 1.92 days
    await make_item(
        received_at=NOW - timedelta(days=3),
        picked_up_at=NOW - timedelta(days=1),
        type="envelope",
        status="picked_up",
    )  # Wed 12:00, picked up yesterday after 2 days


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------

def test_round_half_up_and_percent():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert percent(1, 3) == 33
    assert percent(2, 3) == 67
    assert percent(5, 0) == 0


@pytest.mark.parametrize(
    "hour,expected",
    [(0, "12am-1am"), (9, "9am-10am"), (11, "11am-12pm"), (12, "12pm-1pm"), (23, "11pm-12am")],
)
def test_format_hour_range(hour, expected):
    assert format_hour_range(hour) == expected


def test_week_start_is_sunday():
    assert week_start(NOW.date()).isoformat() == "2026-10-11"
    assert week_start(datetime(2026, 10, 11).date()).isoformat() == "2026-10-11"


def test_volume_insight_without_data():
    insight = volume_insight([])
    assert insight.content.startswith("Insufficient data to generate insights.")
    assert insight.source == "Based on mail activity"


def test_volume_insight_with_a_single_week():
    insight = volume_insight([("2026-10-12", 4), ("2026-10-13", 2)])
    assert insight.content.startswith("More data needed for meaningful insights.")
    assert insight.source == "Based on recent mail activity"


def test_volume_insight_trend_and_busy_day():
    daily = [
        ("2026-10-05", 2),   # Monday, previous week
        ("2026-10-12", 6),   # Monday
        ("2026-10-13", 1),   # Tuesday
        ("2026-10-14", 1),   # Wednesday
    ]
    insight = volume_insight(daily)

    assert insight.title == "Mail Volume Insights"
    assert insight.source == "Based on the last 30 days of activity"
    assert insight.content.startswith("Package volume has increased 300% week-over-week. ")
    assert "Mondays (80%) and Tuesdays (10%) are your busiest mail days." in insight.content
    assert insight.content.endswith("Consider scheduling additional staff on Mondays when volume peaks.")


def test_volume_insight_decrease_and_even_spread():
    # One item every day for two full weeks
    daily = [(f"2026-10-{day:02d}", 1) for day in range(4, 18)]
    insight = volume_insight(daily)

    assert "remained stable" in insight.content
    assert insight.content.endswith("fairly evenly distributed throughout the week.")

    insight = volume_insight([("2026-10-05", 4), ("2026-10-12", 3)])
    assert insight.content.startswith("Package volume has decreased 25% week-over-week. ")


# ---------------------------------------------------------------------------
# Service against the database
# ---------------------------------------------------------------------------

async def test_empty_organization_has_zero_stats(session_factory, staff_ctx):
    service = InsightsService(session_factory, staff_ctx)

    stats = await service.dashboard_stats(now=NOW)
    assert stats.model_dump() == {
        "pending_count": 0,
        "priority_count": 0,
        "delivered_today_count": 0,
        "delivered_diff": 0,
        "aging_count": 0,
        "oldest_days": 0,
        "avg_processing_days": 0.0,
        "processing_diff": 0.0,
    }
    assert await service.distribution() == []
    assert await service.busiest_periods() == []
    volume = await service.mail_volume(now=NOW)
    assert volume.daily == []
    assert volume.insight.content.startswith("Insufficient data")
    assert await service.recent_activity(now=NOW) == []


async def test_dashboard_stats(session_factory, staff_ctx, seeded_items):
    stats = await InsightsService(session_factory, staff_ctx).dashboard_stats(now=NOW)

    assert stats.pending_count == 3
    assert stats.priority_count == 1
    assert stats.delivered_today_count == 1
    assert stats.delivered_diff == 0
    assert stats.aging_count == 2
    assert stats.oldest_days == 0
    assert stats.avg_processing_days == 2.0
    assert stats.processing_diff == 2.0


async def test_dashboard_stats_for_one_mail_room(session_factory, seed, staff_ctx, seeded_items):
    service = InsightsService(session_factory, staff_ctx, seed.mail_room.id)
    stats = await service.dashboard_stats(now=NOW)

    assert stats.pending_count == 2
    assert stats.aging_count == 1
    assert stats.oldest_days == 0


async def test_oldest_days_counts_from_the_latest_open_receipt(session_factory, staff_ctx, make_item):
    await make_item(received_at=NOW - timedelta(days=1, hours=1))
    await make_item(received_at=NOW - timedelta(days=9), status="notified")
    await make_item(received_at=NOW - timedelta(hours=3), status="picked_up", picked_up_at=NOW)

    stats = await InsightsService(session_factory, staff_ctx).dashboard_stats(now=NOW)

    assert stats.pending_count == 2
    assert stats.oldest_days == 1


async def test_distribution(session_factory, staff_ctx, seeded_items):
    entries = await InsightsService(session_factory, staff_ctx).distribution(
        {"envelope": "#000000"}
    )

    assert [(e.name, e.value, e.percentage) for e in entries] == [
        ("Packages", 3, 60),
        ("Envelopes", 1, 20),
        ("Letters", 1, 20),
    ]
    assert entries[0].color == "#3B82F6"
    assert entries[1].color == "#000000"


async def test_busiest_periods(session_factory, staff_ctx, seeded_items):
    day, hour = await InsightsService(session_factory, staff_ctx).busiest_periods()

    # Saturday and Wednesday tie at two items each; the earlier weekday wins.
    assert day.model_dump() == {"label": "Day of Week", "type": "day", "value": 40, "period": "Wednesday"}
    assert hour.model_dump() == {"label": "Time of Day", "type": "hour", "value": 80, "period": "12pm-1pm"}


async def test_mail_volume(session_factory, staff_ctx, seeded_items):
    volume = await InsightsService(session_factory, staff_ctx).mail_volume(now=NOW)

    assert [(d.date, d.count) for d in volume.daily] == [
        ("2026-10-07", 1),
        ("2026-10-10", 1),
        ("2026-10-14", 1),
        ("2026-10-15", 1),
        ("2026-10-17", 1),
    ]
    assert volume.insight.content.startswith("Package volume has increased 50% week-over-week. ")


async def test_recent_activity_lists_received_items(session_factory, staff_ctx, seeded_items):
    activity = await InsightsService(session_factory, staff_ctx).recent_activity(limit=3, now=NOW)

    assert len(activity) == 3
    assert activity[0].type == "received"
    assert activity[0].status == "urgent"
    assert activity[0].description == "Package received for Jane Doe"
    assert activity[0].details == "OTHER package - Recorded by Sam"
    assert [a.timestamp for a in activity] == sorted((a.timestamp for a in activity), reverse=True)


async def test_stats_endpoint(client, staff_headers, seeded_items):
    res = await client.get("/api/mail-items/stats", headers=staff_headers)

    assert res.status_code == 200
    assert res.json()["pendingCount"] == 3
    assert res.json()["priorityCount"] == 1


async def test_distribution_endpoint_color_override(client, staff_headers, seeded_items):
    res = await client.get(
        "/api/insights/distribution?colors=package:%23111111", headers=staff_headers
    )
    assert res.status_code == 200
    assert res.json()[0] == {"name": "Packages", "value": 3, "color": "#111111", "percentage": 60}

    res = await client.get("/api/insights/distribution?colors=package", headers=staff_headers)
    assert res.status_code == 400


async def test_chart_endpoints_respond(client, staff_headers, seeded_items):
    res = await client.get("/api/insights/busiest-periods", headers=staff_headers)
    assert [p["type"] for p in res.json()] == ["day", "hour"]

    res = await client.get("/api/insights/mail-volume", headers=staff_headers)
    assert res.status_code == 200
    assert set(res.json()) == {"insight", "daily"}
