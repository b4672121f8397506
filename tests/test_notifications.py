from mailroom.domain.mail_item import MailItem
from mailroom.domain.organization import MailRoom
from mailroom.services.notification import default_message


async def test_first_notification_moves_item_to_notified(client, seed, staff_headers, make_item):
    item = await make_item(tracking_number="1Z999AA10123456784", carrier="ups")

    res = await client.post(
        "/api/notifications", json={"mailItemId": item.id}, headers=staff_headers
    )

    assert res.status_code == 201
    notification = res.json()
    assert notification["type"] == "email"
    assert notification["status"] == "pending"
    assert notification["destination"] == "jane.doe@acme.example.com"
    assert notification["recipientId"] == seed.recipient.id
    assert notification["message"] == (
        "Your package (UPS 1Z999AA10123456784) is ready for pickup at Main Lobby."
    )

    stored = (await client.get(f"/api/mail-items/{item.id}", headers=staff_headers)).json()
    assert stored["status"] == "notified"
    assert stored["notifiedAt"] is not None


async def test_reminder_is_recorded_without_status_change(client, seed, staff_headers, make_item):
    item = await make_item()
    await client.post("/api/notifications", json={"mailItemId": item.id}, headers=staff_headers)

    res = await client.post(
        "/api/notifications",
        json={"mailItemId": item.id, "type": "sms", "message": "Reminder: still waiting"},
        headers=staff_headers,
    )

    assert res.status_code == 201
    assert res.json()["destination"] == "+15550001111"
    assert res.json()["message"] == "Reminder: still waiting"

    history = (
        await client.get(f"/api/mail-items/{item.id}/notifications", headers=staff_headers)
    ).json()
    assert len(history) == 2
    stored = (await client.get(f"/api/mail-items/{item.id}", headers=staff_headers)).json()
    assert stored["status"] == "notified"


async def test_missing_destination_is_rejected(client, seed, staff_headers, make_item):
    item = await make_item(external_recipient_id=seed.visitor.id)

    res = await client.post(
        "/api/notifications",
        json={"mailItemId": item.id, "type": "sms"},
        headers=staff_headers,
    )
    assert res.status_code == 400
    assert "phone number" in res.json()["message"]

    res = await client.post(
        "/api/notifications",
        json={"mailItemId": item.id, "type": "sms", "destination": "+15559998888"},
        headers=staff_headers,
    )
    assert res.status_code == 201
    assert res.json()["recipient"]["type"] == "external"


async def test_notification_for_a_different_recipient_is_rejected(
    client, seed, staff_headers, make_item
):
    item = await make_item()

    res = await client.post(
        "/api/notifications",
        json={"mailItemId": item.id, "externalRecipientId": seed.visitor.id},
        headers=staff_headers,
    )
    assert res.status_code == 400


def test_default_message_without_tracking_number():
    item = MailItem(type="large_package", carrier="other", tracking_number=None)
    item.mail_room = MailRoom(name="Annex")

    assert default_message(item) == "Your large package is ready for pickup at Annex."
