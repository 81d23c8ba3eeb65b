"""
Integration Tests for Site Settings API.
"""

SETTINGS = "/api/v1/settings"


class TestSiteSettings:
    """Tests for GET/PUT /api/v1/settings."""

    async def test_defaults(self, client, auth_headers, api):
        data = api.assert_success(await client.get(SETTINGS, headers=auth_headers))["data"]
        assert data == {"site_title": "nowen-note", "site_favicon": ""}

    async def test_update_trims_and_truncates_title(self, client, auth_headers, api):
        response = await client.put(
            SETTINGS,
            json={"site_title": "   My very long personal notebook site   "},
            headers=auth_headers,
        )

        data = api.assert_success(response)["data"]
        assert data["site_title"] == "My very long persona"
        assert len(data["site_title"]) == 20

    async def test_omitted_keys_keep_their_value(self, client, auth_headers):
        await client.put(SETTINGS, json={"site_title": "Notes"}, headers=auth_headers)
        await client.put(SETTINGS, json={"site_favicon": "/favicon.svg"}, headers=auth_headers)

        data = (await client.get(SETTINGS, headers=auth_headers)).json()["data"]
        assert data == {"site_title": "Notes", "site_favicon": "/favicon.svg"}

    async def test_requires_authentication(self, client, api):
        api.assert_error(await client.get(SETTINGS), 401)
