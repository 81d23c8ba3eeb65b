"""
Integration Tests for Export and Import API.
"""

EXPORT = "/api/v1/export"


class TestExport:
    """Tests for GET /api/v1/export/notes."""

    async def test_exports_demo_notes_with_notebook_names(self, client, demo_headers, api):
        notes = api.assert_success(await client.get(f"{EXPORT}/notes", headers=demo_headers))["data"]

        by_title = {note["title"]: note for note in notes}
        assert len(notes) == 5
        assert by_title["Tiptap 编辑器集成指南"]["notebook_name"] == "前端笔记"
        assert by_title["Q1 目标与 OKR"]["content"].startswith('{"type": "doc"')

    async def test_trashed_notes_are_not_exported(self, client, demo_headers):
        listed = (await client.get("/api/v1/notes", headers=demo_headers)).json()["data"]
        target = listed[0]
        await client.post(
            f"/api/v1/notes/{target['id']}/trash",
            json={"version": target["version"]},
            headers=demo_headers,
        )

        notes = (await client.get(f"{EXPORT}/notes", headers=demo_headers)).json()["data"]
        assert target["id"] not in {note["id"] for note in notes}


class TestImport:
    """Tests for POST /api/v1/export/import."""

    async def test_import_into_default_notebook(self, client, auth_headers, api):
        payload = {
            "notes": [
                {"title": "From markdown", "content": '{"type":"doc"}', "content_text": "imported body"},
                {"title": "", "content_text": ""},
            ]
        }

        result = api.assert_success(
            await client.post(f"{EXPORT}/import", json=payload, headers=auth_headers),
            expected_status=201,
        )["data"]

        assert result["count"] == 2
        assert [note["title"] for note in result["notes"]] == ["From markdown", "Untitled Note"]
        notebook = (await client.get(f"/api/v1/notebooks/{result['notebook_id']}", headers=auth_headers)).json()
        assert notebook["data"]["name"] == "Imported Notes"

        hits = (await client.get("/api/v1/search", params={"q": "imported"}, headers=auth_headers)).json()
        assert [hit["title"] for hit in hits["data"]] == ["From markdown"]

    async def test_second_import_reuses_notebook(self, client, auth_headers):
        payload = {"notes": [{"title": "one"}]}
        first = (await client.post(f"{EXPORT}/import", json=payload, headers=auth_headers)).json()
        second = (await client.post(f"{EXPORT}/import", json=payload, headers=auth_headers)).json()

        assert first["data"]["notebook_id"] == second["data"]["notebook_id"]

    async def test_import_into_chosen_notebook(self, client, auth_headers):
        notebook = (await client.post("/api/v1/notebooks", json={"name": "target"}, headers=auth_headers)).json()
        payload = {"notebook_id": notebook["data"]["id"], "notes": [{"title": "x"}]}

        result = (await client.post(f"{EXPORT}/import", json=payload, headers=auth_headers)).json()

        assert result["data"]["notebook_id"] == notebook["data"]["id"]

    async def test_empty_import_is_400(self, client, auth_headers, api):
        api.assert_error(await client.post(f"{EXPORT}/import", json={"notes": []}, headers=auth_headers), 400)

    async def test_unknown_notebook_is_404(self, client, auth_headers, api):
        payload = {"notebook_id": "missing", "notes": [{"title": "x"}]}
        api.assert_error(await client.post(f"{EXPORT}/import", json=payload, headers=auth_headers), 404)
