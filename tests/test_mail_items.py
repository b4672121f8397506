"""Mail item intake, listings and manual status changes through the API."""

from datetime import datetime, timedelta, timezone

from sqlalchemy import delete

from mailroom.core.config import settings
from mailroom.core.security import create_session_token
from mailroom.domain import ExternalPerson, MailRoom, UserProfile
from mailroom.domain.enums import Role
from mailroom.domain.mixins import new_id


def _intake_body(seed, **overrides) -> dict:
    body = {
        "mailRoomId": seed.mail_room.id,
        "recipientId": seed.recipient.id,
        "trackingNumber": "1Z999AA10123456784",
        "carrier": "ups",
        "type": "package",
        "description": "Small box",
    }
    body.update(overrides)
    return body


async def test_intake_creates_pending_item(client, seed, staff_headers):
    res = await client.post("/api/mail-items", json=_intake_body(seed), headers=staff_headers)

    assert res.status_code == 201
    data = res.json()
    assert data["status"] == "pending"
    assert data["recipientId"] == seed.recipient.id
    assert data["externalRecipientId"] is None
    assert data["recipient"]["firstName"] == "Jane"
    assert data["recipient"]["type"] == "internal"
    assert data["processedById"] == seed.staff.id
    assert data["mailRoom"]["name"] == "Main Lobby"
    assert data["receivedAt"]
    assert data["notifiedAt"] is None
    assert data["pickedUpAt"] is None


async def test_intake_for_external_person(client, seed, staff_headers):
    body = _intake_body(seed, recipientId=None, externalRecipientId=seed.visitor.id)
    res = await client.post("/api/mail-items", json=body, headers=staff_headers)

    assert res.status_code == 201
    assert res.json()["recipient"]["type"] == "external"
    assert res.json()["recipient"]["lastName"] == "Vance"


async def test_intake_rejects_two_recipients(client, seed, staff_headers):
    body = _intake_body(seed, externalRecipientId=seed.visitor.id)
    res = await client.post("/api/mail-items", json=body, headers=staff_headers)

    assert res.status_code == 400
    assert "not both" in res.json()["message"]


async def test_intake_requires_a_recipient(client, seed, staff_headers):
    body = _intake_body(seed, recipientId=None)
    res = await client.post("/api/mail-items", json=body, headers=staff_headers)
    assert res.status_code == 400


async def test_intake_unknown_mail_room_or_recipient(client, seed, staff_headers):
    res = await client.post(
        "/api/mail-items", json=_intake_body(seed, mailRoomId=new_id()), headers=staff_headers
    )
    assert res.status_code == 404

    res = await client.post(
        "/api/mail-items", json=_intake_body(seed, recipientId=new_id()), headers=staff_headers
    )
    assert res.status_code == 404


async def test_intake_rejects_unknown_carrier(client, seed, staff_headers):
    res = await client.post(
        "/api/mail-items", json=_intake_body(seed, carrier="pigeon"), headers=staff_headers
    )
    assert res.status_code == 400


async def test_pending_lists_priority_first_and_paginates(client, seed, staff_headers, make_item):
    now = datetime.now(timezone.utc)
    await make_item(received_at=now - timedelta(hours=1), description="newest")
    await make_item(received_at=now - timedelta(hours=5), description="urgent", is_priority=True)
    await make_item(received_at=now - timedelta(hours=3), status="notified", description="notified")
    await make_item(received_at=now - timedelta(hours=2), status="picked_up", description="gone")

    res = await client.get("/api/mail-items/pending?pageSize=2", headers=staff_headers)

    assert res.status_code == 200
    page = res.json()
    assert page["total"] == 3
    assert page["totalPages"] == 2
    assert (page["start"], page["end"]) == (1, 2)
    assert [i["description"] for i in page["items"]] == ["urgent", "newest"]

    res = await client.get("/api/mail-items/pending?pageSize=2&page=2", headers=staff_headers)
    assert [i["description"] for i in res.json()["items"]] == ["notified"]


async def test_pending_search_matches_recipient_name(client, seed, staff_headers, make_item):
    await make_item(description="for jane")
    await make_item(external_recipient_id=seed.visitor.id, description="for victor")

    res = await client.get("/api/mail-items/pending?search=victor", headers=staff_headers)

    items = res.json()["items"]
    assert [i["description"] for i in items] == ["for victor"]


async def test_pending_search_treats_wildcards_literally(client, seed, staff_headers, make_item):
    await make_item(tracking_number="REF_001", description="underscored")
    await make_item(tracking_number="REF9001", description="plain")
    await make_item(description="50% off")

    res = await client.get("/api/mail-items/pending?search=_", headers=staff_headers)
    assert [i["description"] for i in res.json()["items"]] == ["underscored"]

    res = await client.get("/api/mail-items/pending?search=%25", headers=staff_headers)
    assert [i["description"] for i in res.json()["items"]] == ["50% off"]


async def test_pending_filters_by_mail_room(client, seed, staff_headers, make_item):
    await make_item(description="lobby")
    await make_item(mail_room_id=seed.annex.id, description="annex")

    res = await client.get(
        f"/api/mail-items/pending?mailroomId={seed.annex.id}", headers=staff_headers
    )
    assert [i["description"] for i in res.json()["items"]] == ["annex"]


async def test_empty_pending_page(client, seed, staff_headers):
    res = await client.get("/api/mail-items/pending", headers=staff_headers)

    page = res.json()
    assert page["items"] == []
    assert page["total"] == 0
    assert page["totalPages"] == 0
    assert (page["start"], page["end"]) == (1, 0)


async def test_history_filters_by_status_and_dates(client, seed, staff_headers, make_item):
    await make_item(received_at=datetime(2026, 3, 1, 9, tzinfo=timezone.utc), description="march")
    await make_item(
        received_at=datetime(2026, 3, 2, 23, 30, tzinfo=timezone.utc),
        status="lost",
        description="lost",
    )
    await make_item(received_at=datetime(2026, 3, 5, 9, tzinfo=timezone.utc), description="later")

    res = await client.get(
        "/api/mail-items/history?dateFrom=2026-03-01&dateTo=2026-03-02", headers=staff_headers
    )
    assert [i["description"] for i in res.json()["items"]] == ["lost", "march"]

    res = await client.get("/api/mail-items/history?status=lost", headers=staff_headers)
    assert [i["description"] for i in res.json()["items"]] == ["lost"]


async def test_recent_returns_newest_first(client, seed, staff_headers, make_item):
    now = datetime.now(timezone.utc)
    for hours in (3, 1, 2):
        await make_item(received_at=now - timedelta(hours=hours), description=f"{hours}h")

    res = await client.get("/api/mail-items/recent?limit=2", headers=staff_headers)
    assert [i["description"] for i in res.json()] == ["1h", "2h"]


async def test_dangling_recipient_is_rendered_unknown(client, seed, staff_headers, make_item, db):
    item = await make_item(external_recipient_id=seed.visitor.id)
    # The reference is kept when the person row is gone.
    await db.execute(delete(ExternalPerson).where(ExternalPerson.id == seed.visitor.id))
    await db.commit()

    res = await client.get(f"/api/mail-items/{item.id}", headers=staff_headers)

    assert res.status_code == 200
    data = res.json()
    assert data["externalRecipientId"] == seed.visitor.id
    assert data["recipient"]["firstName"] == "Unknown"
    assert data["recipient"]["lastName"] == "Recipient"


async def test_get_unknown_item_is_404(client, seed, staff_headers):
    res = await client.get(f"/api/mail-items/{new_id()}", headers=staff_headers)
    assert res.status_code == 404
    assert "Mail item" in res.json()["message"]


async def test_items_are_invisible_to_other_organizations(client, seed, make_item, db):
    item = await make_item()
    room = MailRoom(org_id=seed.other_org.id, name="Globex Lobby")
    db.add(room)
    await db.flush()
    outsider = UserProfile(
        org_id=seed.other_org.id,
        user_id=new_id(),
        mail_room_id=room.id,
        first_name="Hank",
        last_name="Scorpio",
        email="hank@globex.test",
        role=Role.ADMIN.value,
    )
    db.add(outsider)
    await db.commit()
    headers = {"Authorization": f"Bearer {create_session_token(outsider.user_id, settings.jwt_secret)}"}

    res = await client.get(f"/api/mail-items/{item.id}", headers=headers)
    assert res.status_code == 404

    res = await client.get("/api/mail-items/pending", headers=headers)
    assert res.json()["total"] == 0


# ---------------------------------------------------------------------------
# Manual status changes
# ---------------------------------------------------------------------------

async def test_mark_item_lost_then_reopen_is_rejected(client, seed, staff_headers, make_item):
    item = await make_item()

    res = await client.patch(
        f"/api/mail-items/{item.id}/status",
        json={"status": "lost", "notes": "Not found on shelf"},
        headers=staff_headers,
    )
    assert res.status_code == 200
    assert res.json()["status"] == "lost"
    assert res.json()["notes"] == "Not found on shelf"

    res = await client.patch(
        f"/api/mail-items/{item.id}/status", json={"status": "pending"}, headers=staff_headers
    )
    assert res.status_code == 409


async def test_parked_item_can_return_to_pending(client, seed, staff_headers, make_item):
    item = await make_item(status="other")

    res = await client.patch(
        f"/api/mail-items/{item.id}/status", json={"status": "pending"}, headers=staff_headers
    )
    assert res.status_code == 200
    assert res.json()["status"] == "pending"


async def test_status_change_cannot_set_notified_or_picked_up(client, seed, staff_headers, make_item):
    item = await make_item()

    for status in ("notified", "picked_up"):
        res = await client.patch(
            f"/api/mail-items/{item.id}/status", json={"status": status}, headers=staff_headers
        )
        assert res.status_code == 400

    res = await client.patch(
        f"/api/mail-items/{item.id}/status", json={"status": "shredded"}, headers=staff_headers
    )
    assert res.status_code == 400
