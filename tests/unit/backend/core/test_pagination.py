"""
Unit Tests for Pagination Utilities.
"""

from datetime import datetime

from pydantic import BaseModel

from nowen_note.backend.core.pagination import create_paginated_response, get_pagination_params


class ItemSchema(BaseModel):
    id: str
    updated_at: datetime


class TestGetPaginationParams:
    """Tests for the pagination dependency."""

    def test_missing_limit_uses_configured_default(self):
        params = get_pagination_params(limit=None, offset=0)
        assert params.limit == 100
        assert params.offset == 0

    def test_limit_is_clamped_to_configured_maximum(self):
        assert get_pagination_params(limit=10_000, offset=5).limit == 500

    def test_explicit_limit_is_kept(self):
        assert get_pagination_params(limit=20, offset=40).limit == 20


class TestCreatePaginatedResponse:
    """Tests for the paginated envelope."""

    def _items(self, count: int) -> list[dict]:
        return [
            {"id": f"n-{i}", "updated_at": datetime(2026, 1, 1, 12, 0, 0)}
            for i in range(count)
        ]

    def test_has_more_when_total_exceeds_page(self):
        body = create_paginated_response(self._items(2), ItemSchema, total=5, limit=2, offset=0)

        assert body["success"] is True
        assert body["pagination"] == {"total": 5, "limit": 2, "offset": 0, "has_more": True}
        assert [item["id"] for item in body["data"]] == ["n-0", "n-1"]

    def test_last_page_has_no_more(self):
        body = create_paginated_response(self._items(1), ItemSchema, total=5, limit=2, offset=4)
        assert body["pagination"]["has_more"] is False

    def test_items_are_serialized_as_json(self):
        body = create_paginated_response(self._items(1), ItemSchema, total=1, request_id="r-1")
        assert body["data"][0]["updated_at"] == "2026-01-01T12:00:00"
        assert body["metadata"]["request_id"] == "r-1"
