"""Label scan orchestration: regex extraction, optional AI refinement, recipient matching."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from mailroom.core.security import RequestContext
from mailroom.domain.enums import Carrier
from mailroom.repositories.people import ExternalPersonRepository, UserProfileRepository
from mailroom.schemas.recipient import RecipientSummary
from mailroom.schemas.scan import LabelScanRequest, LabelScanResult
from mailroom.services.label_ai import LabelAIService, get_label_ai_service
from mailroom.services.label_parser import extract_label_fields

logger = logging.getLogger(__name__)

MAX_MATCHES = 5


def _normalize_carrier(value: Any) -> str | None:
    if not value or not isinstance(value, str):
        return None
    value = value.strip().lower()
    return value if value in {c.value for c in Carrier} else Carrier.OTHER.value


def _safe_confidence(value: Any) -> float | None:
    try:
        return max(0.0, min(1.0, float(value)))
    except (TypeError, ValueError):
        return None


def _clean(value: Any) -> str | None:
    if not value or not isinstance(value, str):
        return None
    return value.strip() or None


class ScanService:
    def __init__(
        self,
        session: AsyncSession,
        ctx: RequestContext,
        ai_factory: Callable[[], LabelAIService] | None = None,
    ):
        self._profiles = UserProfileRepository(session, ctx.org_id)
        self._external = ExternalPersonRepository(session, ctx.org_id)
        self._ai_factory = ai_factory or get_label_ai_service

    async def scan(self, request: LabelScanRequest) -> LabelScanResult:
        fields = extract_label_fields(request.text)
        result = LabelScanResult(**fields.as_dict())

        if request.use_ai:
            ai = self._ai_factory()
            refined = await ai.refine(request.text, fields.as_dict())
            data = refined.get("data") if isinstance(refined.get("data"), dict) else {}
            result = LabelScanResult(
                carrier=_normalize_carrier(data.get("carrier")) or fields.carrier,
                tracking_number=_clean(data.get("trackingNumber")) or fields.tracking_number,
                recipient_name=_clean(data.get("recipientName")) or fields.recipient_name,
                source="ai",
                confidence=_safe_confidence(refined.get("confidence")),
                corrections=[str(c) for c in refined.get("corrections") or []],
            )

        if result.recipient_name:
            result.matches = await self.match_recipients(result.recipient_name)
        logger.info(
            "Label scanned (source=%s, carrier=%s, tracking=%s, matches=%d)",
            result.source, result.carrier, bool(result.tracking_number), len(result.matches),
        )
        return result

    async def match_recipients(self, name: str) -> list[RecipientSummary]:
        """Active recipients whose name contains *name*, falling back to the surname alone."""
        people = await self._search(name)
        surname = name.split()[-1] if name.split() else ""
        if not people and surname and surname != name:
            people = await self._search(surname)
        return [RecipientSummary.model_validate(p) for p in people[:MAX_MATCHES]]

    async def _search(self, name: str) -> list:
        return [
            *await self._profiles.search_by_name(name, limit=MAX_MATCHES),
            *await self._external.search_by_name(name, limit=MAX_MATCHES),
        ]
