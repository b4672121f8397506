"""Standardized paginated response envelope."""


from typing import Generic, TypeVar

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from mailroom.core.pagination import page_bounds

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """Paginated list envelope: `{ items: [...], total, page, pageSize, totalPages, start, end }`"""

    items: list[T]
    total: int
    page: int
    page_size: int
    total_pages: int
    start: int
    end: int

    model_config = {
        "populate_by_name": True,
        "alias_generator": to_camel,
    }


def paginated(items: list, total: int, page: int, page_size: int) -> dict:
    """Build a paginated response dict for use with Page."""
    return {"items": items, **page_bounds(total, page, page_size, len(items))}
