"""Shipping label parsing and the scan endpoint."""

import pytest

from mailroom.core.config import settings
from mailroom.schemas.scan import LabelScanRequest
from mailroom.services.label_parser import extract_label_fields
from mailroom.services.scan import ScanService

UPS_LABEL = """UPS GROUND
TRACKING #: 1Z 999 AA1 01 2345 678 4
Ship To: Jane Doe
123 Main St
Springfield"""


def test_ups_label():
    fields = extract_label_fields(UPS_LABEL)

    assert fields.carrier == "ups"
    assert fields.tracking_number == "1Z999AA10123456784"
    assert fields.recipient_name == "Jane Doe"


@pytest.mark.parametrize(
    "text,carrier,tracking",
    [
        ("FedEx Express\n7489 1234 5678", "fedex", "748912345678"),
        ("USPS PRIORITY MAIL\n9400 1000 0000 0000 0000 00", "usps", "9400100000000000000000"),
        ("DHL eCommerce\nWaybill 1234 5678 901", "dhl", "12345678901"),
        ("Parcel\nRef ABC123XYZ789", None, "ABC123XYZ789"),
    ],
)
def test_carrier_and_tracking_formats(text, carrier, tracking):
    fields = extract_label_fields(text)
    assert fields.carrier == carrier
    assert fields.tracking_number == tracking


def test_recipient_stops_at_end_of_line():
    fields = extract_label_fields("Attention: Mary Smith\nSuite 400")
    assert fields.recipient_name == "Mary Smith"


def test_blank_text_yields_nothing():
    assert extract_label_fields("   ").as_dict() == {
        "carrier": None,
        "tracking_number": None,
        "recipient_name": None,
    }


async def test_scan_endpoint_matches_recipient(client, seed, staff_headers):
    res = await client.post("/api/mail/scan", json={"text": UPS_LABEL}, headers=staff_headers)

    assert res.status_code == 200
    data = res.json()
    assert data["source"] == "regex"
    assert data["carrier"] == "ups"
    assert data["trackingNumber"] == "1Z999AA10123456784"
    assert data["recipientName"] == "Jane Doe"
    assert [(m["id"], m["type"]) for m in data["matches"]] == [(seed.recipient.id, "internal")]


async def test_scan_falls_back_to_surname(client, seed, staff_headers):
    res = await client.post(
        "/api/mail/scan", json={"text": "To: V Vance\nDock 3"}, headers=staff_headers
    )

    matches = res.json()["matches"]
    assert [(m["lastName"], m["type"]) for m in matches] == [("Vance", "external")]


async def test_ai_scan_without_key_is_unavailable(client, seed, staff_headers, monkeypatch):
    monkeypatch.setattr(settings, "openai_api_key", None)

    res = await client.post(
        "/api/mail/scan", json={"text": UPS_LABEL, "useAi": True}, headers=staff_headers
    )
    assert res.status_code == 503


class _FakeLabelAI:
    def __init__(self, response: dict):
        self.response = response
        self.calls = []

    async def refine(self, raw_text, machine_extraction=None):
        self.calls.append((raw_text, machine_extraction))
        return self.response


async def test_ai_refinement_overrides_regex(db, seed, staff_ctx):
    ai = _FakeLabelAI(
        {
            "confidence": 1.7,
            "data": {"carrier": "FedEx", "trackingNumber": " 748912345678 ", "recipientName": "Victor Vance"},
            "corrections": ["Carrier corrected from UPS to FedEx"],
        }
    )
    service = ScanService(db, staff_ctx, ai_factory=lambda: ai)

    result = await service.scan(LabelScanRequest(text=UPS_LABEL, use_ai=True))

    assert ai.calls[0][1]["tracking_number"] == "1Z999AA10123456784"
    assert result.source == "ai"
    assert result.carrier == "fedex"
    assert result.tracking_number == "748912345678"
    assert result.recipient_name == "Victor Vance"
    assert result.confidence == 1.0
    assert result.corrections == ["Carrier corrected from UPS to FedEx"]
    assert [m.last_name for m in result.matches] == ["Vance"]


async def test_ai_refinement_keeps_regex_fields_it_leaves_blank(db, seed, staff_ctx):
    ai = _FakeLabelAI({"confidence": "n/a", "data": {"carrier": "freight co"}})
    service = ScanService(db, staff_ctx, ai_factory=lambda: ai)

    result = await service.scan(LabelScanRequest(text=UPS_LABEL, use_ai=True))

    assert result.carrier == "other"
    assert result.tracking_number == "1Z999AA10123456784"
    assert result.recipient_name == "Jane Doe"
    assert result.confidence is None
    assert result.corrections == []
