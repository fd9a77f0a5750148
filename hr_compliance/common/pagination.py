"""Pagination helpers for list endpoints.

Compliance lists are evaluated row by row in Python (status is never a
column), so pages are cut from the evaluated list rather than with
LIMIT/OFFSET.
"""

import math
from typing import Generic, Optional, Sequence, TypeVar

from fastapi import Query
from pydantic import BaseModel

from hr_compliance.common.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

T = TypeVar("T")


# ── FastAPI dependency ──────────────────────────────────────────────

class PaginationParams:
    """Inject via ``Depends(PaginationParams)`` on any list endpoint."""

    def __init__(
        self,
        page: int = Query(default=1, ge=1, description="Page number (1-indexed)"),
        page_size: int = Query(
            default=DEFAULT_PAGE_SIZE,
            ge=1,
            le=MAX_PAGE_SIZE,
            description=f"Items per page (max {MAX_PAGE_SIZE})",
        ),
        sort: Optional[str] = Query(
            default=None,
            description='Sort key; prefix "-" for DESC (e.g. "-relevant_date")',
        ),
    ) -> None:
        self.page = page
        self.page_size = page_size
        self.sort = sort

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


# ── Pydantic response models ───────────────────────────────────────

class PaginationMeta(BaseModel):
    """Metadata block embedded in every paginated response."""

    page: int
    page_size: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class PaginatedResponse(BaseModel, Generic[T]):
    """Standard envelope: ``{"data": [...], "meta": {...}}``."""

    data: Sequence[T]
    meta: PaginationMeta


# ── In-memory helper ────────────────────────────────────────────────

def paginate_items(
    items: Sequence[T],
    page: int,
    page_size: int,
) -> tuple[list[T], PaginationMeta]:
    """Slice *items* for *page* and build the matching meta block."""
    total = len(items)
    total_pages = math.ceil(total / page_size) if total else 0
    offset = (page - 1) * page_size
    return list(items[offset:offset + page_size]), PaginationMeta(
        page=page,
        page_size=page_size,
        total=total,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )
