"""Pagination helpers for list endpoints."""


import math

from fastapi import Query

from mailroom.core.config import settings


class PaginationParams:
    """FastAPI dependency for `?page=1&pageSize=10&search=...`."""

    def __init__(
        self,
        page: int = Query(default=1, ge=1, description="Page number (1-based)"),
        page_size: int = Query(
            default=settings.default_page_size,
            ge=1,
            le=settings.max_page_size,
            alias="pageSize",
            description="Items per page",
        ),
        search: str = Query(default="", max_length=200, description="Free-text search"),
    ):
        self.page = page
        self.page_size = page_size
        self.search = search.strip()

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def page_bounds(total: int, page: int, page_size: int, count: int) -> dict:
    """Compute the page window for a result of *count* rows out of *total*.

    ``start`` is the 1-based position of the first row on the page and ``end``
    the position of the last one, so an empty page has ``end == start - 1``.
    """
    start = (page - 1) * page_size + 1
    return {
        "total": total,
        "page": page,
        "page_size": page_size,
        "total_pages": math.ceil(total / page_size) if page_size else 0,
        "start": start,
        "end": start + count - 1,
    }
