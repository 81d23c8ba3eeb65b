"""
Integration Tests for Health Endpoints and Request Context.
"""

import uuid


class TestHealth:
    """Tests for /health and /health/ready."""

    async def test_liveness(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    async def test_readiness_checks_database(self, client):
        response = await client.get("/health/ready")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["checks"]["database"]["status"] == "healthy"


class TestRequestContext:
    """Tests for the request context middleware."""

    async def test_generates_request_id(self, client):
        response = await client.get("/health")

        request_id = response.headers["x-request-id"]
        assert str(uuid.UUID(request_id)) == request_id
        assert response.headers["x-response-time"].endswith("ms")

    async def test_propagates_request_id(self, client):
        response = await client.get("/health", headers={"X-Request-ID": "trace-abc"})
        assert response.headers["x-request-id"] == "trace-abc"

    async def test_request_id_in_error_metadata(self, client):
        response = await client.get("/api/v1/me", headers={"X-Request-ID": "trace-401"})

        assert response.status_code == 401
        assert response.json()["metadata"]["request_id"] == "trace-401"
        assert response.headers["x-request-id"] == "trace-401"

    async def test_generated_request_id_matches_paginated_metadata(self, client, auth_headers):
        response = await client.get("/api/v1/notes", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["metadata"]["request_id"] == response.headers["x-request-id"]
