"""Pickup recording: the happy path, conflicts, and atomicity of the status change."""

import pytest
from sqlalchemy.exc import IntegrityError

from mailroom.domain.enums import MailItemStatus
from mailroom.repositories.events import PickupRepository
from mailroom.repositories.mail_item import MailItemRepository
from mailroom.schemas.pickup import PickupCreate
from mailroom.services.pickup import PickupService


async def test_intake_notify_pickup_flow(client, seed, staff_headers):
    res = await client.post(
        "/api/mail-items",
        json={
            "mailRoomId": seed.mail_room.id,
            "recipientId": seed.recipient.id,
            "carrier": "fedex",
            "trackingNumber": "748912345678",
        },
        headers=staff_headers,
    )
    item_id = res.json()["id"]

    res = await client.post(
        "/api/notifications", json={"mailItemId": item_id}, headers=staff_headers
    )
    assert res.status_code == 201

    res = await client.post(
        "/api/pickups",
        json={
            "mailItemId": item_id,
            "recipientId": seed.recipient.id,
            "signature": "data:image/png;base64,iVBORw0KGgo=",
            "notes": "Collected at front desk",
        },
        headers=staff_headers,
    )
    assert res.status_code == 201
    pickup = res.json()
    assert pickup["mailItemId"] == item_id
    assert pickup["processedById"] == seed.staff.id
    assert pickup["recipient"]["firstName"] == "Jane"
    assert pickup["signature"].startswith("data:image/png")

    item = (await client.get(f"/api/mail-items/{item_id}", headers=staff_headers)).json()
    assert item["status"] == "picked_up"
    assert item["pickedUpAt"] is not None
    assert item["notifiedAt"] is not None

    res = await client.get(f"/api/pickups/{pickup['id']}", headers=staff_headers)
    assert res.status_code == 200

    res = await client.get("/api/activities/recent", headers=staff_headers)
    assert res.status_code == 200
    activity = res.json()
    assert {a["type"] for a in activity} == {"received", "notification", "pickup"}
    assert all("Jane Doe" in a["description"] for a in activity)


async def test_pickup_of_pending_item_skips_notification(client, seed, staff_headers, make_item):
    item = await make_item()

    res = await client.post(
        "/api/pickups",
        json={"mailItemId": item.id, "recipientId": seed.recipient.id},
        headers=staff_headers,
    )
    assert res.status_code == 201


async def test_second_pickup_is_a_conflict(client, seed, staff_headers, make_item):
    item = await make_item()
    body = {"mailItemId": item.id, "recipientId": seed.recipient.id}

    assert (await client.post("/api/pickups", json=body, headers=staff_headers)).status_code == 201
    res = await client.post("/api/pickups", json=body, headers=staff_headers)

    assert res.status_code == 409


@pytest.mark.parametrize("status", ["returned_to_sender", "lost"])
async def test_pickup_of_closed_item_is_a_conflict(client, seed, staff_headers, make_item, status):
    item = await make_item(status=status)

    res = await client.post(
        "/api/pickups",
        json={"mailItemId": item.id, "recipientId": seed.recipient.id},
        headers=staff_headers,
    )
    assert res.status_code == 409


async def test_pickup_by_someone_else_is_rejected(client, seed, staff_headers, make_item, db):
    item = await make_item()

    res = await client.post(
        "/api/pickups",
        json={"mailItemId": item.id, "externalRecipientId": seed.visitor.id},
        headers=staff_headers,
    )
    assert res.status_code == 400

    stored = await MailItemRepository(db, seed.org.id).get_by_id(item.id)
    assert stored.status == MailItemStatus.PENDING.value


async def test_pickup_of_unknown_item_is_404(client, seed, staff_headers):
    res = await client.post(
        "/api/pickups",
        json={"mailItemId": "missing", "recipientId": seed.recipient.id},
        headers=staff_headers,
    )
    assert res.status_code == 404


async def test_failed_pickup_insert_leaves_item_untouched(
    session_factory, seed, staff_ctx, make_item, monkeypatch
):
    item = await make_item(status="notified")

    async def failing_create(self, **kwargs):
        raise RuntimeError("insert failed")

    monkeypatch.setattr(PickupRepository, "create", failing_create)

    async with session_factory() as session:
        with pytest.raises(RuntimeError):
            await PickupService(session, staff_ctx).record_pickup(
                PickupCreate(mail_item_id=item.id, recipient_id=seed.recipient.id)
            )

    async with session_factory() as session:
        stored = await MailItemRepository(session, seed.org.id).get_by_id(item.id)
        assert stored.status == MailItemStatus.NOTIFIED.value
        assert stored.picked_up_at is None
        assert await PickupRepository(session, seed.org.id).list_for_item(item.id) == []


async def test_offset_pickup_time_is_stored_as_utc(client, seed, staff_headers, make_item):
    item = await make_item(status="notified")

    res = await client.post(
        "/api/pickups",
        json={
            "mailItemId": item.id,
            "recipientId": seed.recipient.id,
            "pickedUpAt": "2026-10-17T10:00:00+05:00",
        },
        headers=staff_headers,
    )
    assert res.status_code == 201
    assert res.json()["pickedUpAt"] == "2026-10-17T05:00:00Z"

    res = await client.get(f"/api/mail-items/{item.id}", headers=staff_headers)
    assert res.json()["pickedUpAt"] == "2026-10-17T05:00:00Z"


async def test_database_allows_one_pickup_per_item(session_factory, seed, make_item):
    item = await make_item(status="picked_up")

    async with session_factory() as session:
        repo = PickupRepository(session, seed.org.id)
        await repo.create(mail_item_id=item.id, recipient_id=seed.recipient.id, processed_by_id=seed.staff.id)
        with pytest.raises(IntegrityError):
            await repo.create(
                mail_item_id=item.id, recipient_id=seed.recipient.id, processed_by_id=seed.staff.id
            )
