"""
Pagination Utilities.

Offset-based pagination for list endpoints.
"""

from dataclasses import dataclass
from typing import Any

from fastapi import Query
from pydantic import BaseModel

from nowen_note.backend.core.config import get_app_config
from nowen_note.backend.schemas.base import PaginatedResponse, PaginationInfo, ResponseMetadata


@dataclass
class PaginationParams:
    """Pagination parameters extracted from query string."""

    limit: int
    offset: int


def get_pagination_params(
    limit: int | None = Query(
        default=None,
        ge=1,
        description="Maximum number of items to return",
    ),
    offset: int = Query(
        default=0,
        ge=0,
        description="Number of items to skip",
    ),
) -> PaginationParams:
    """
    FastAPI dependency for pagination parameters.

    A missing limit falls back to the configured default; a larger limit
    than the configured maximum is clamped to it.

    Usage:
        @router.get("/items")
        async def list_items(
            pagination: PaginationParams = Depends(get_pagination_params),
        ):
            ...
    """
    page_config = get_app_config().application.pagination
    if limit is None:
        limit = page_config.default_limit
    return PaginationParams(limit=min(limit, page_config.max_limit), offset=offset)


def create_paginated_response(
    items: list[Any],
    item_schema: type[BaseModel],
    total: int | None = None,
    limit: int = 100,
    offset: int = 0,
    request_id: str | None = None,
) -> dict[str, Any]:
    """
    Create a standardized paginated response.

    Args:
        items: List of items (model instances or dicts)
        item_schema: Pydantic schema to validate items
        total: Total count of items (optional)
        limit: Page size limit
        offset: Current offset
        request_id: Request ID for metadata

    Returns:
        Dict matching PaginatedResponse structure
    """
    has_more = total is not None and (offset + len(items)) < total

    validated_items = [
        item_schema.model_validate(item).model_dump(mode="json")
        for item in items
    ]

    response = PaginatedResponse(
        data=validated_items,
        pagination=PaginationInfo(
            total=total,
            limit=limit,
            offset=offset,
            has_more=has_more,
        ),
        metadata=ResponseMetadata(request_id=request_id),
    )
    return response.model_dump(mode="json")
