"""
Ristorante API: Page Content Endpoint Tests
============================================
"""

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

UPDATED_AT = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


class TestReadPage:

    @pytest.mark.asyncio
    async def test_unknown_slug(self, test_client, mock_db_session):
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = None
        response = await test_client.get("/api/page/about")
        assert response.status_code == 200
        assert response.json() == {"slug": "about", "data": {}, "updated_at": None}

    @pytest.mark.asyncio
    async def test_admin_mirror_requires_token(self, test_client, mock_db_session, admin_headers):
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = None

        denied = await test_client.get("/api/admin/page/about")
        allowed = await test_client.get("/api/admin/page/about", headers=admin_headers)

        assert denied.status_code == 401
        assert allowed.status_code == 200
        assert allowed.json()["slug"] == "about"


class TestUpsertPage:

    @pytest.mark.asyncio
    async def test_upsert(self, test_client, mock_db_session, admin_headers):
        data = {"title": "Chi siamo", "body": ["..."]}
        mock_db_session.execute.return_value.one.return_value = SimpleNamespace(
            slug="about", data=data, updated_at=UPDATED_AT
        )

        response = await test_client.put("/api/admin/page/about", json=data, headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["slug"] == "about"
        assert body["data"] == data
        assert body["updated_at"].startswith("2025-06-01T12:00:00")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [[1, 2], "text", 42, None])
    async def test_non_object_rejected(self, test_client, mock_db_session, admin_headers, payload):
        response = await test_client.put(
            "/api/admin/page/about", json=payload, headers=admin_headers
        )
        assert response.status_code == 400
        assert response.json() == {"error": "body must be a JSON object"}
        mock_db_session.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_malformed_json_rejected(self, test_client, mock_db_session, admin_headers):
        response = await test_client.put(
            "/api/admin/page/about",
            content=b"{oops",
            headers={**admin_headers, "Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "body must be a JSON object"}

    @pytest.mark.asyncio
    async def test_requires_token(self, test_client, mock_db_session):
        response = await test_client.put("/api/admin/page/about", json={"a": 1})
        assert response.status_code == 401
        mock_db_session.execute.assert_not_called()
