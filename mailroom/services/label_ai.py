"""Shipping label AI refinement: OpenAI-powered correction of the regex extraction.

Given OCR text and the regex baseline, the model returns corrected carrier,
tracking number and recipient name with an overall confidence and the list of
corrections it made.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from openai import AsyncOpenAI, OpenAIError

from mailroom.core.config import settings
from mailroom.core.exceptions import AIUnavailableError, LabelExtractionError

logger = logging.getLogger(__name__)

# ── System prompt ─────────────────────────────────────────────────────────

LABEL_EXTRACTION_PROMPT = """You read OCR text from shipping labels received by a corporate mail room.

Extract:
- carrier: one of "ups", "fedex", "usps", "dhl", "amazon", "other" (lowercase), or null.
- trackingNumber: the carrier tracking number with all spaces removed, or null.
- recipientName: the person the item is addressed to ("Ship To", "To", "Attention"), as "First Last", or null.
  Never return the sender or a company name as the recipient when a person is named.

A machine extraction may be supplied under "Machine Extraction". Use it as a baseline:
correct OCR mistakes (O/0, I/1, S/5 in tracking numbers), fill missing fields, and
normalise formatting.

Output ONLY valid JSON matching this schema:

{
  "confidence": <float 0.0-1.0>,
  "data": {
    "carrier": "<string or null>",
    "trackingNumber": "<string or null>",
    "recipientName": "<string or null>"
  },
  "corrections": ["<human-readable description of each change vs the machine extraction>"]
}

Rules:
1. Output ONLY valid JSON, no markdown, no commentary.
2. If a field cannot be determined, set it to null.
3. "corrections" is an empty array when nothing changed."""


class LabelAIService:
    """Thin async wrapper around OpenAI for shipping label extraction."""

    def __init__(self) -> None:
        if not settings.ai_enabled:
            raise AIUnavailableError()
        self.client = AsyncOpenAI(
            api_key=settings.openai_api_key,
            timeout=settings.openai_timeout,
        )
        self.model = settings.openai_model
        self.max_tokens = settings.openai_max_tokens

    # ── Core OpenAI call ──────────────────────────────────────────────────

    async def _call_openai(
        self, system_prompt: str, user_message: str
    ) -> Dict[str, Any]:
        """Send an async request to OpenAI and return parsed JSON."""
        try:
            logger.info(
                "Calling OpenAI model=%s, input_length=%d",
                self.model,
                len(user_message),
            )
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_message},
                ],
                max_completion_tokens=self.max_tokens,
                response_format={"type": "json_object"},
            )

            content = response.choices[0].message.content
            if not content:
                raise LabelExtractionError("Empty response from OpenAI")

            logger.info("OpenAI call successful")
            return json.loads(content)

        except OpenAIError as exc:
            logger.error("OpenAI API error: %s", exc)
            raise LabelExtractionError(f"OpenAI service error: {exc}") from exc
        except json.JSONDecodeError as exc:
            logger.error("Invalid JSON from OpenAI: %s", exc)
            raise LabelExtractionError(f"Invalid JSON response: {exc}") from exc

    # ── Public methods ────────────────────────────────────────────────────

    async def refine(
        self,
        raw_text: str,
        machine_extraction: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Extract label fields from *raw_text*, correcting the regex baseline.

        Returns:
            Dict with ``confidence``, ``data`` (``carrier``, ``trackingNumber``,
            ``recipientName``) and ``corrections`` keys.
        """
        parts = [f"Label Text:\n{raw_text}"]
        if machine_extraction:
            parts.append(
                f"\nMachine Extraction (baseline):\n{json.dumps(machine_extraction, indent=2)}"
            )
        return await self._call_openai(LABEL_EXTRACTION_PROMPT, "\n".join(parts))


def get_label_ai_service() -> LabelAIService:
    """Factory that creates a LabelAIService instance.

    Raises ``AIUnavailableError`` when the OpenAI key is not configured.
    """
    return LabelAIService()
