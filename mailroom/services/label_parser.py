"""
Shipping label text parser.

Works on text already produced by OCR. Extracts three fields with regular
expressions:

* **carrier** -- first carrier whose name appears in the text.
* **tracking number** -- the carrier's own format first, then every known
  format in order, then a generic 10-30 character alphanumeric run.
* **recipient name** -- the text after ``To:``, ``Recipient:``,
  ``Deliver to:`` or ``Attention:`` on the same line.
"""

from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass

logger = logging.getLogger(__name__)

__all__ = ["LabelFields", "extract_label_fields"]

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

# Checked in order; the first hit wins.
CARRIER_PATTERNS: dict[str, re.Pattern[str]] = {
    "ups": re.compile(r"\b(ups|united parcel service)\b", re.I),
    "fedex": re.compile(r"\b(fedex|federal express)\b", re.I),
    "usps": re.compile(r"\b(usps|united states postal service|postal service)\b", re.I),
    "dhl": re.compile(r"\b(dhl)\b", re.I),
    "amazon": re.compile(r"\b(amazon|amzn)\b", re.I),
}

TRACKING_PATTERNS: dict[str, re.Pattern[str]] = {
    # 1Z9999999999999999, T999 9999 999
    "ups": re.compile(
        r"\b(1Z ?[0-9A-Z]{3} ?[0-9A-Z]{3} ?[0-9A-Z]{2} ?[0-9A-Z]{4} ?[0-9A-Z]{3} ?[0-9A-Z]"
        r"|T\d{3} ?\d{4} ?\d{3})\b",
        re.I,
    ),
    # 9999 9999 9999, 999999999999
    "fedex": re.compile(r"\b(\d{4} ?\d{4} ?\d{4}|\d{12,14})\b"),
    # 9400 1000 0000 0000 0000 00
    "usps": re.compile(
        r"\b(9[0-9]{15,21}|9[0-9]{3} ?[0-9]{4} ?[0-9]{4} ?[0-9]{4} ?[0-9]{4} ?[0-9]{2})\b"
    ),
    # 9999 9999 999
    "dhl": re.compile(r"\b(\d{4} ?\d{4} ?\d{3})\b"),
    "generic": re.compile(r"\b([A-Z0-9]{10,30})\b", re.I),
}

_RECIPIENT_RE = re.compile(
    r"\b(?:deliver to|attention|recipient|to):[ \t]*([A-Za-z][A-Za-z \t]{1,39})", re.I
)
_SPACES_RE = re.compile(r"\s+")


@dataclass
class LabelFields:
    carrier: str | None = None
    tracking_number: str | None = None
    recipient_name: str | None = None

    def as_dict(self) -> dict:
        return asdict(self)


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------

def _detect_carrier(text: str) -> str | None:
    for carrier, pattern in CARRIER_PATTERNS.items():
        if pattern.search(text):
            return carrier
    return None


def _find_tracking_number(text: str, carrier: str | None) -> str | None:
    candidates = list(TRACKING_PATTERNS.values())
    if carrier in TRACKING_PATTERNS:
        candidates.insert(0, TRACKING_PATTERNS[carrier])
    for pattern in candidates:
        match = pattern.search(text)
        if match:
            return _SPACES_RE.sub("", match.group(0))
    return None


def _find_recipient(text: str) -> str | None:
    match = _RECIPIENT_RE.search(text)
    if not match:
        return None
    name = _SPACES_RE.sub(" ", match.group(1)).strip()
    return name or None


def extract_label_fields(text: str) -> LabelFields:
    """Pull carrier, tracking number and recipient name out of OCR'd label text."""
    if not text or not text.strip():
        return LabelFields()
    carrier = _detect_carrier(text)
    fields = LabelFields(
        carrier=carrier,
        tracking_number=_find_tracking_number(text, carrier),
        recipient_name=_find_recipient(text),
    )
    logger.debug("Label fields extracted: %s", fields)
    return fields
