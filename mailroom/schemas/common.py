"""Shared Pydantic schema base with camelCase aliases, plus the small nested summaries."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """All API schemas inherit from this to auto-generate camelCase aliases."""

    model_config = {
        "populate_by_name": True,
        "alias_generator": to_camel,
        "from_attributes": True,
    }


class PersonSummary(CamelModel):
    """Staff member embedded in another response (processor, audit actor)."""

    id: str
    first_name: str
    last_name: str


class MailRoomSummary(CamelModel):
    id: str
    name: str
    location: Optional[str] = None


class HealthResponse(BaseModel):
    """Health-check response returned by /health."""
    status: str = "ok"
    app: str
    env: str
