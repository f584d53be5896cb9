"""Query parameters and envelope construction for paginated list endpoints."""

from __future__ import annotations

import math

from fastapi import Query
from pydantic import BaseModel

from taskmanager.core.schemas import PaginatedResponse

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class PaginationParams(BaseModel):
    """Optional page/size query parameters; a plain list is returned when both are absent."""

    page: int | None = None
    size: int | None = None

    def is_paginated(self) -> bool:
        return self.page is not None or self.size is not None

    @property
    def effective_page(self) -> int:
        return self.page or 1

    @property
    def effective_size(self) -> int:
        return self.size or DEFAULT_PAGE_SIZE


def pagination_params(
    page: int | None = Query(default=None, ge=1, description="Page number (1-based)"),
    size: int | None = Query(default=None, ge=1, le=MAX_PAGE_SIZE, description="Items per page"),
) -> PaginationParams:
    """FastAPI dependency collecting pagination query parameters."""
    return PaginationParams(page=page, size=size)


def create_paginated_response[T](items: list[T], total: int, page: int, size: int) -> PaginatedResponse[T]:
    """Build the pagination envelope."""
    pages = math.ceil(total / size) if size > 0 else 0
    return PaginatedResponse(items=items, total=total, page=page, size=size, pages=pages)
