"""
Integration Tests for Notebooks API.

Tests the notebook hierarchy: tree assembly, moves and subtree deletion.
"""

from httpx import AsyncClient
from sqlalchemy import func, select

from nowen_note.backend.models.note import Note, notes_fts
from nowen_note.backend.models.notebook import Notebook

NOTEBOOKS = "/api/v1/notebooks"


async def create_notebook(client: AsyncClient, headers: dict, name: str, parent_id: str | None = None) -> dict:
    response = await client.post(NOTEBOOKS, json={"name": name, "parent_id": parent_id}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestNotebookCrud:
    """Tests for basic notebook operations."""

    async def test_create_defaults(self, client, auth_headers, api):
        response = await client.post(NOTEBOOKS, json={"name": "  技术学习 "}, headers=auth_headers)

        data = api.assert_success(response, expected_status=201)["data"]
        assert data["name"] == "技术学习"
        assert data["icon"] == "📒"
        assert data["parent_id"] is None
        assert data["sort_order"] == 0

    async def test_siblings_are_appended(self, client, auth_headers):
        await create_notebook(client, auth_headers, "first")
        second = await create_notebook(client, auth_headers, "second")
        assert second["sort_order"] == 1

    async def test_blank_name_is_rejected(self, client, auth_headers):
        response = await client.post(NOTEBOOKS, json={"name": "   "}, headers=auth_headers)
        assert response.status_code == 400

    async def test_unknown_parent_is_404(self, client, auth_headers, api):
        response = await client.post(
            NOTEBOOKS, json={"name": "child", "parent_id": "missing"}, headers=auth_headers
        )
        api.assert_error(response, 404)

    async def test_rename(self, client, auth_headers, api):
        notebook = await create_notebook(client, auth_headers, "old")

        response = await client.put(
            f"{NOTEBOOKS}/{notebook['id']}", json={"name": "new", "is_expanded": False}, headers=auth_headers
        )

        data = api.assert_success(response)["data"]
        assert data["name"] == "new"
        assert data["is_expanded"] is False


class TestNotebookTree:
    """Tests for GET /api/v1/notebooks/tree."""

    async def test_three_levels(self, client, auth_headers, api):
        a = await create_notebook(client, auth_headers, "A")
        b = await create_notebook(client, auth_headers, "B", a["id"])
        c = await create_notebook(client, auth_headers, "C", b["id"])

        tree = api.assert_success(await client.get(f"{NOTEBOOKS}/tree", headers=auth_headers))["data"]

        assert [node["id"] for node in tree] == [a["id"]]
        assert tree[0]["children"][0]["id"] == b["id"]
        assert tree[0]["children"][0]["children"][0]["id"] == c["id"]

    async def test_move_to_root_with_null_parent(self, client, auth_headers):
        a = await create_notebook(client, auth_headers, "A")
        b = await create_notebook(client, auth_headers, "B", a["id"])

        await client.patch(f"{NOTEBOOKS}/{b['id']}", json={"parent_id": None}, headers=auth_headers)

        tree = (await client.get(f"{NOTEBOOKS}/tree", headers=auth_headers)).json()["data"]
        assert sorted(node["name"] for node in tree) == ["A", "B"]

    async def test_move_under_descendant_is_rejected(self, client, auth_headers, api):
        a = await create_notebook(client, auth_headers, "A")
        b = await create_notebook(client, auth_headers, "B", a["id"])
        c = await create_notebook(client, auth_headers, "C", b["id"])

        response = await client.put(f"{NOTEBOOKS}/{a['id']}", json={"parent_id": c["id"]}, headers=auth_headers)
        api.assert_error(response, 400, "VAL_VALIDATION_ERROR")

        response = await client.put(f"{NOTEBOOKS}/{a['id']}", json={"parent_id": a["id"]}, headers=auth_headers)
        api.assert_error(response, 400)


class TestNotebookDelete:
    """Deleting a notebook removes its whole subtree."""

    async def test_subtree_cascade(self, client, auth_headers, db_session_factory, api):
        parent = await create_notebook(client, auth_headers, "P")
        child = await create_notebook(client, auth_headers, "C", parent["id"])
        sibling = await create_notebook(client, auth_headers, "S")
        doomed = []
        for notebook_id in (parent["id"], child["id"]):
            response = await client.post(
                "/api/v1/notes",
                json={"notebook_id": notebook_id, "content_text": "cascade marker"},
                headers=auth_headers,
            )
            doomed.append(response.json()["data"]["id"])
        survivor = (
            await client.post(
                "/api/v1/notes",
                json={"notebook_id": sibling["id"], "content_text": "cascade marker"},
                headers=auth_headers,
            )
        ).json()["data"]["id"]

        response = await client.delete(f"{NOTEBOOKS}/{parent['id']}", headers=auth_headers)
        assert response.status_code == 204

        api.assert_error(await client.get(f"{NOTEBOOKS}/{child['id']}", headers=auth_headers), 404)
        for note_id in doomed:
            api.assert_error(await client.get(f"/api/v1/notes/{note_id}", headers=auth_headers), 404)

        hits = (await client.get("/api/v1/search", params={"q": "cascade"}, headers=auth_headers)).json()
        assert [hit["id"] for hit in hits["data"]] == [survivor]

        async with db_session_factory() as session:
            notebooks = (await session.execute(select(func.count()).select_from(Notebook))).scalar_one()
            notes = (await session.execute(select(func.count()).select_from(Note))).scalar_one()
            indexed = (await session.execute(select(func.count()).select_from(notes_fts))).scalar_one()
        assert (notebooks, notes, indexed) == (1, 1, 1)

    async def test_delete_unknown_is_404(self, client, auth_headers, api):
        api.assert_error(await client.delete(f"{NOTEBOOKS}/missing", headers=auth_headers), 404)
