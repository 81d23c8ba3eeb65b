"""
Integration Tests for Auth API.

Login, legacy hash upgrade, uniform token rejection, credential changes
and the factory reset.
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from nowen_note.backend.core.security import (
    create_access_token,
    hash_password_legacy,
    is_legacy_hash,
    verify_password,
)
from nowen_note.backend.models.note import Note, notes_fts
from nowen_note.backend.models.notebook import Notebook
from nowen_note.backend.models.tag import Tag
from nowen_note.backend.models.task import Task
from nowen_note.backend.models.user import User
from nowen_note.backend.repositories.user import UserRepository

AUTH = "/api/v1/auth"


async def login(client: AsyncClient, username: str, password: str):
    return await client.post(f"{AUTH}/login", json={"username": username, "password": password})


class TestLogin:
    """Tests for POST /api/v1/auth/login."""

    async def test_default_credentials(self, client, user, api):
        response = await login(client, "admin", "admin123")

        data = api.assert_success(response)["data"]
        assert data["token_type"] == "bearer"
        assert data["user"]["username"] == "admin"
        assert "password_hash" not in data["user"]
        assert response.cookies.get("access_token") == data["token"]

    async def test_token_opens_protected_routes(self, client, user, api):
        token = (await login(client, "admin", "admin123")).json()["data"]["token"]
        client.cookies.clear()

        response = await client.get("/api/v1/me", headers={"Authorization": f"Bearer {token}"})

        assert api.assert_success(response)["data"]["id"] == user.id

    async def test_cookie_alone_authenticates(self, client, user):
        await login(client, "admin", "admin123")
        response = await client.get(f"{AUTH}/verify")
        assert response.status_code == 200

    @pytest.mark.parametrize(
        ("username", "password"),
        [("admin", "wrong-password"), ("nobody", "admin123")],
    )
    async def test_bad_credentials_share_one_message(self, client, user, api, username, password):
        body = api.assert_error(await login(client, username, password), 401, "AUTH_UNAUTHORIZED")
        assert body["error"]["message"] == "Invalid username or password"

    async def test_legacy_hash_is_upgraded(self, client, db_session_factory, api):
        async with db_session_factory() as session:
            async with session.begin():
                await UserRepository(session).create(
                    username="legacy", password_hash=hash_password_legacy("old-secret")
                )

        api.assert_success(await login(client, "legacy", "old-secret"))

        async with db_session_factory() as session:
            stored = await UserRepository(session).get_by_username("legacy")
        assert not is_legacy_hash(stored.password_hash)
        assert verify_password("old-secret", stored.password_hash)

    async def test_overlong_password_is_a_plain_mismatch(self, client, user, api):
        body = api.assert_error(await login(client, "admin", "p" * 100), 401, "AUTH_UNAUTHORIZED")
        assert body["error"]["message"] == "Invalid username or password"

    async def test_overlong_legacy_password_logs_in_without_upgrade(
        self, client, db_session_factory, api
    ):
        long_secret = "l" * 100
        async with db_session_factory() as session:
            async with session.begin():
                await UserRepository(session).create(
                    username="legacy-long", password_hash=hash_password_legacy(long_secret)
                )

        api.assert_success(await login(client, "legacy-long", long_secret))

        async with db_session_factory() as session:
            stored = await UserRepository(session).get_by_username("legacy-long")
        assert is_legacy_hash(stored.password_hash)

    async def test_logout_clears_cookie(self, client, user):
        await login(client, "admin", "admin123")
        await client.post(f"{AUTH}/logout")
        assert (await client.get(f"{AUTH}/verify")).status_code == 401


class TestTokenRejection:
    """Every kind of bad token gets the same response."""

    async def test_invalid_tokens_are_indistinguishable(self, client, user, api):
        expired = create_access_token({"sub": user.id}, expires_delta=timedelta(seconds=-30))
        unknown_user = create_access_token({"sub": "deleted-account"})
        candidates = {
            "expired": {"Authorization": f"Bearer {expired}"},
            "garbage": {"Authorization": "Bearer not.a.token"},
            "tampered": {"Authorization": f"Bearer {expired[:-3]}abc"},
            "unknown user": {"Authorization": f"Bearer {unknown_user}"},
        }

        bodies = []
        for label, headers in candidates.items():
            response = await client.get(f"{AUTH}/verify", headers=headers)
            body = api.assert_error(response, 401, "AUTH_UNAUTHORIZED")
            assert response.headers["www-authenticate"] == "Bearer", label
            bodies.append(body["error"])

        assert all(error == bodies[0] for error in bodies)

    async def test_missing_token(self, client, api):
        api.assert_error(await client.get(f"{AUTH}/verify"), 401)


class TestChangePassword:
    """Tests for POST /api/v1/auth/change-password."""

    async def test_change_password(self, client, user, auth_headers, api):
        response = await client.post(
            f"{AUTH}/change-password",
            json={"current_password": "admin123", "new_password": "s3cret!"},
            headers=auth_headers,
        )

        api.assert_success(response)
        api.assert_error(await login(client, "admin", "admin123"), 401)
        api.assert_success(await login(client, "admin", "s3cret!"))

    async def test_change_username(self, client, user, auth_headers, api):
        response = await client.post(
            f"{AUTH}/change-password",
            json={"current_password": "admin123", "new_username": "owner"},
            headers=auth_headers,
        )

        assert api.assert_success(response)["data"]["username"] == "owner"

    async def test_wrong_current_password_is_403(self, client, user, auth_headers, api):
        response = await client.post(
            f"{AUTH}/change-password",
            json={"current_password": "nope", "new_password": "s3cret!"},
            headers=auth_headers,
        )
        api.assert_error(response, 403, "AUTHZ_FORBIDDEN")

    async def test_short_password_is_400(self, client, user, auth_headers, api):
        response = await client.post(
            f"{AUTH}/change-password",
            json={"current_password": "admin123", "new_password": "abc"},
            headers=auth_headers,
        )
        api.assert_error(response, 400)

    @pytest.mark.parametrize("new_password", ["p" * 100, "密" * 30])
    async def test_password_over_bcrypt_limit_is_400(
        self, client, user, auth_headers, api, new_password
    ):
        response = await client.post(
            f"{AUTH}/change-password",
            json={"current_password": "admin123", "new_password": new_password},
            headers=auth_headers,
        )

        body = api.assert_error(response, 400, "VAL_VALIDATION_ERROR")
        assert body["error"]["details"] == {"new_password": "Maximum length is 72 bytes"}
        api.assert_success(await login(client, "admin", "admin123"))

    async def test_nothing_to_change_is_400(self, client, user, auth_headers, api):
        response = await client.post(
            f"{AUTH}/change-password",
            json={"current_password": "admin123"},
            headers=auth_headers,
        )
        api.assert_error(response, 400)

    async def test_taken_username_is_409(self, client, user, auth_headers, db_session_factory, api):
        async with db_session_factory() as session:
            async with session.begin():
                await UserRepository(session).create(username="taken", password_hash="x")

        response = await client.post(
            f"{AUTH}/change-password",
            json={"current_password": "admin123", "new_username": "taken"},
            headers=auth_headers,
        )
        api.assert_error(response, 409)


async def _counts(db_session_factory) -> dict[str, int]:
    async with db_session_factory() as session:
        counts = {}
        for label, table in (
            ("notebooks", Notebook),
            ("notes", Note),
            ("tags", Tag),
            ("tasks", Task),
            ("index", notes_fts),
        ):
            counts[label] = (
                await session.execute(select(func.count()).select_from(table))
            ).scalar_one()
        return counts


class TestFactoryReset:
    """Tests for POST /api/v1/auth/factory-reset."""

    @pytest.fixture
    async def prepared(self, client, demo_user, demo_headers):
        """Demo content plus a task, with the password changed away from the default."""
        notes = (await client.get("/api/v1/notes", headers=demo_headers)).json()["data"]
        await client.post(
            "/api/v1/tasks",
            json={"title": "Ship v1.0", "note_id": notes[0]["id"]},
            headers=demo_headers,
        )
        await client.post(
            f"{AUTH}/change-password",
            json={"current_password": "admin123", "new_username": "owner", "new_password": "changed!"},
            headers=demo_headers,
        )
        return demo_headers

    async def test_wrong_case_phrase_changes_nothing(self, client, prepared, db_session_factory, api):
        before = await _counts(db_session_factory)

        response = await client.post(
            f"{AUTH}/factory-reset", json={"confirm_text": "reset"}, headers=prepared
        )

        api.assert_error(response, 400, "VAL_VALIDATION_ERROR")
        assert await _counts(db_session_factory) == before
        api.assert_success(await login(client, "owner", "changed!"))

    async def test_empty_phrase_is_rejected(self, client, prepared, api):
        response = await client.post(f"{AUTH}/factory-reset", json={}, headers=prepared)

        body = api.assert_error(response, 400)
        assert body["error"]["message"] == "Confirmation text required"

    async def test_reset_wipes_content_and_restores_default_login(
        self, client, prepared, db_session_factory, api
    ):
        assert (await _counts(db_session_factory))["tasks"] == 1

        response = await client.post(
            f"{AUTH}/factory-reset", json={"confirm_text": "RESET"}, headers=prepared
        )

        api.assert_success(response)
        assert await _counts(db_session_factory) == {
            "notebooks": 0,
            "notes": 0,
            "tags": 0,
            "tasks": 0,
            "index": 0,
        }
        async with db_session_factory() as session:
            account = (await session.execute(select(User))).scalar_one()
        assert account.username == "admin"
        assert account.password_hash.startswith("$2")
        api.assert_success(await login(client, "admin", "admin123"))

    async def test_requires_token(self, client, user, api):
        response = await client.post(f"{AUTH}/factory-reset", json={"confirm_text": "RESET"})
        api.assert_error(response, 401)
