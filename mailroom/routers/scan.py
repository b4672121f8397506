"""Label scan endpoint: OCR text in, suggested intake fields out.

Business logic lives in :mod:`mailroom.services.scan`. OCR itself happens on
the client; this endpoint only receives the recognised text.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mailroom.core.deps import require_staff
from mailroom.core.security import RequestContext
from mailroom.db.base import get_db
from mailroom.schemas.scan import LabelScanRequest, LabelScanResult
from mailroom.services.scan import ScanService

router = APIRouter(prefix="/mail", tags=["Label scan"])


@router.post("/scan", response_model=LabelScanResult)
async def scan_label(
    body: LabelScanRequest,
    ctx: RequestContext = Depends(require_staff),
    session: AsyncSession = Depends(get_db),
):
    """Extract carrier, tracking number and recipient from label text.

    With ``useAi=true`` the regex result is refined by OpenAI (503 when no key
    is configured, 502 when the upstream call fails).
    """
    return await ScanService(session, ctx).scan(body)
