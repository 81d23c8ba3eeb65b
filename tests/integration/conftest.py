"""
Integration Test Fixtures.

Fixtures for integration tests - real SQLite database, real services,
real FastAPI application. These build on the root conftest.py database
fixtures.
"""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from nowen_note.backend.core.database import get_db_session
from nowen_note.backend.core.security import create_access_token
from nowen_note.backend.models.user import User
from nowen_note.backend.services.seed import SeedService


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
async def client(
    db_session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client bound to the test database.

    Each request gets its own session that commits on success and rolls
    back on error, like get_db_session does in production.

    Usage:
        async def test_health_endpoint(client: AsyncClient):
            response = await client.get("/health")
            assert response.status_code == 200
    """

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with db_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    from nowen_note.backend.main import create_app

    app = create_app()
    app.dependency_overrides[get_db_session] = override_get_db_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# Account and Content Fixtures
# =============================================================================


@pytest.fixture
async def user(db_session_factory: async_sessionmaker[AsyncSession]) -> User:
    """The default admin account, committed."""
    async with db_session_factory() as session:
        async with session.begin():
            return await SeedService(session).create_default_user()


@pytest.fixture
async def demo_user(db_session_factory: async_sessionmaker[AsyncSession]) -> User:
    """The default admin account with the demo notebooks, notes and tags."""
    async with db_session_factory() as session:
        async with session.begin():
            service = SeedService(session)
            account = await service.create_default_user()
            await service.create_demo_content(account)
            return account


@pytest.fixture
def auth_headers(user: User) -> dict[str, str]:
    """
    Authorization header for the default account.

    Usage:
        async def test_protected(client: AsyncClient, auth_headers: dict):
            response = await client.get("/api/v1/me", headers=auth_headers)
    """
    token = create_access_token({"sub": user.id, "username": user.username})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def demo_headers(demo_user: User) -> dict[str, str]:
    """Authorization header for the account holding demo content."""
    token = create_access_token({"sub": demo_user.id, "username": demo_user.username})
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# API Response Assertion Helpers
# =============================================================================


class ApiAssertions:
    """Helper class for API response assertions."""

    @staticmethod
    def assert_success(response: Any, expected_status: int = 200) -> dict[str, Any]:
        """
        Assert API response is successful.

        Returns:
            Response JSON data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is True, f"Response not successful: {data}"
        return data

    @staticmethod
    def assert_error(
        response: Any,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        """
        Assert API response is an error.

        Returns:
            Response JSON data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is False, f"Response should be error: {data}"
        assert data.get("error") is not None, f"Missing error details: {data}"

        if expected_code:
            actual_code = data["error"].get("code")
            assert actual_code == expected_code, (
                f"Expected error code {expected_code}, got {actual_code}"
            )

        return data

    @staticmethod
    def assert_validation_error(
        response: Any,
        field: str | None = None,
    ) -> dict[str, Any]:
        """Assert API response is a request validation error (422)."""
        data = ApiAssertions.assert_error(response, 422, "VAL_REQUEST_INVALID")

        if field:
            errors = data["error"].get("details", {}).get("validation_errors", [])
            fields = [e.get("field", "") for e in errors]
            assert any(field in f for f in fields), (
                f"Expected validation error for field '{field}', "
                f"got errors for: {fields}"
            )

        return data


@pytest.fixture
def api() -> ApiAssertions:
    """Provide API assertion helpers."""
    return ApiAssertions()
