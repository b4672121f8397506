"""Label scan request/response models."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field

from mailroom.schemas.common import CamelModel
from mailroom.schemas.recipient import RecipientSummary


class LabelScanRequest(CamelModel):
    text: str = Field(min_length=1, max_length=20000, description="OCR output of the shipping label")
    use_ai: bool = Field(default=False, description="Refine the regex extraction with OpenAI")


class LabelScanResult(CamelModel):
    tracking_number: Optional[str] = None
    carrier: Optional[str] = None
    recipient_name: Optional[str] = None
    matches: list[RecipientSummary] = []
    source: Literal["regex", "ai"] = "regex"
    confidence: Optional[float] = None
    corrections: list[str] = []
