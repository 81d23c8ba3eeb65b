"""
Integration Tests for Search API.

Runs against the demo content so the index is populated the same way
a fresh install populates it.
"""

from httpx import AsyncClient

SEARCH = "/api/v1/search"


async def search(client: AsyncClient, headers: dict, query: str) -> list[dict]:
    response = await client.get(SEARCH, params={"q": query}, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()["data"]


class TestSearch:
    """Tests for GET /api/v1/search."""

    async def test_finds_demo_note_case_insensitively(self, client, demo_headers):
        hits = await search(client, demo_headers, "tiptap")

        assert [hit["title"] for hit in hits] == ["Tiptap 编辑器集成指南"]
        assert "<mark>" in hits[0]["snippet"]
        assert hits[0]["is_favorite"] is True

    async def test_no_match_is_an_empty_list(self, client, demo_headers):
        assert await search(client, demo_headers, "zzz_nonexistent") == []

    async def test_blank_query_is_an_empty_list(self, client, demo_headers):
        assert await search(client, demo_headers, "   ") == []

    async def test_every_word_must_match(self, client, demo_headers):
        assert len(await search(client, demo_headers, "tiptap prosemirror")) == 1
        assert await search(client, demo_headers, "tiptap zzz") == []

    async def test_prefix_match(self, client, demo_headers):
        hits = await search(client, demo_headers, "ProseMir")
        assert [hit["title"] for hit in hits] == ["Tiptap 编辑器集成指南"]

    async def test_operator_syntax_is_not_an_error(self, client, demo_headers):
        for query in ('"unbalanced', "NEAR(", "title:", "*", "AND OR NOT"):
            response = await client.get(SEARCH, params={"q": query}, headers=demo_headers)
            assert response.status_code == 200, query

    async def test_trashed_notes_are_excluded(self, client, demo_headers):
        hit = (await search(client, demo_headers, "tiptap"))[0]
        note = (await client.get(f"/api/v1/notes/{hit['id']}", headers=demo_headers)).json()["data"]

        await client.post(
            f"/api/v1/notes/{hit['id']}/trash",
            json={"version": note["version"]},
            headers=demo_headers,
        )

        assert await search(client, demo_headers, "tiptap") == []

    async def test_other_users_notes_are_invisible(self, client, demo_user, db_session_factory):
        from nowen_note.backend.core.security import create_access_token, hash_password
        from nowen_note.backend.repositories.user import UserRepository

        async with db_session_factory() as session:
            async with session.begin():
                other = await UserRepository(session).create(
                    username="guest", password_hash=hash_password("guest-pass")
                )
        headers = {"Authorization": f"Bearer {create_access_token({'sub': other.id})}"}

        assert await search(client, headers, "tiptap") == []

    async def test_requires_authentication(self, client, api):
        api.assert_error(await client.get(SEARCH, params={"q": "x"}), 401)


class TestSearchRanking:
    """Result cap and tie-breaking on equally ranked notes."""

    async def test_capped_at_fifty_with_latest_edit_first(self, client, user, auth_headers):
        notebook = (
            await client.post("/api/v1/notebooks", json={"name": "Bulk"}, headers=auth_headers)
        ).json()["data"]
        ids = []
        for _ in range(55):
            response = await client.post(
                "/api/v1/notes",
                json={
                    "notebook_id": notebook["id"],
                    "title": "kappa",
                    "content_text": "kappa lambda",
                },
                headers=auth_headers,
            )
            ids.append(response.json()["data"]["id"])

        # Same text, so only updated_at separates this note from the rest
        touched = await client.put(f"/api/v1/notes/{ids[0]}", json={"version": 1}, headers=auth_headers)
        assert touched.status_code == 200, touched.text

        hits = await search(client, auth_headers, "kappa")

        assert len(hits) == 50
        assert hits[0]["id"] == ids[0]
