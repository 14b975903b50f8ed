"""
Ristorante API: Application-Level Behaviour Tests
==================================================

What:  Routing, CORS, health and the exception handlers, through HTTP.

What we test:
    ✅ OPTIONS to any path → 204, empty body, CORS headers only
    ✅ Unknown paths, wrong methods and trailing slashes → 404 {"error": "Not found"}
    ✅ Missing configuration → 500 with a descriptive message, before auth
    ✅ Unexpected exceptions → opaque 500 that still carries CORS headers
    ✅ Health probe reports database reachability
"""

import logging
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from ristorante.config import Settings
from ristorante.database import get_database, get_db_session
from ristorante.main import create_app
from ristorante.middleware.logging import access_level

CORS = {
    "access-control-allow-origin": "*",
    "access-control-allow-methods": "GET,POST,PUT,DELETE,OPTIONS",
    "access-control-allow-headers": "content-type,authorization",
}


def assert_cors(response):
    for name, value in CORS.items():
        assert response.headers[name] == value


class TestPreflight:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/api/menu", "/api/admin/menu/3", "/does/not/exist", "/"])
    async def test_options_any_path(self, test_client, mock_db_session, path):
        response = await test_client.options(path)

        assert response.status_code == 204
        assert response.content == b""
        assert_cors(response)
        mock_db_session.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_options_skips_auth(self, test_client):
        response = await test_client.options(
            "/api/admin/reservations",
            headers={"Origin": "https://example.it", "Access-Control-Request-Method": "GET"},
        )
        assert response.status_code == 204


class TestRouting:

    @pytest.mark.asyncio
    async def test_unknown_path(self, test_client):
        response = await test_client.get("/api/nothing-here")
        assert response.status_code == 404
        assert response.json() == {"error": "Not found"}
        assert_cors(response)

    @pytest.mark.asyncio
    async def test_wrong_method_is_404(self, test_client):
        # POST-only route
        response = await test_client.get("/api/reservations")
        assert response.status_code == 404
        assert response.json() == {"error": "Not found"}

    @pytest.mark.asyncio
    async def test_wrong_method_on_admin_route(self, test_client, admin_headers):
        response = await test_client.patch("/api/admin/menu/1", headers=admin_headers)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_trailing_slash_not_redirected(self, test_client):
        response = await test_client.get("/api/menu/")
        assert response.status_code == 404
        assert response.json() == {"error": "Not found"}

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client, mock_db_session):
        mock_db_session.execute.return_value.scalars.return_value.all.return_value = []
        response = await test_client.get("/api/menu", headers={"X-Request-ID": "abc123"})
        assert response.headers["x-request-id"] == "abc123"


class TestErrorHandlers:

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_opaque_500(self, test_client):
        with patch("ristorante.routes.menu.menu_service") as mock_service:
            mock_service.list_available = AsyncMock(side_effect=RuntimeError("boom: secret detail"))
            response = await test_client.get("/api/menu")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
        assert_cors(response)


class TestMissingConfiguration:

    @pytest.fixture
    def unconfigured_app(self):
        return create_app(Settings(_env_file=None, admin_token="t", log_level="WARNING"))

    @pytest.mark.asyncio
    async def test_public_db_route(self, unconfigured_app):
        transport = ASGITransport(app=unconfigured_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/api/menu")
        assert response.status_code == 500
        assert response.json() == {"error": "DATABASE_URL missing"}

    @pytest.mark.asyncio
    async def test_reported_before_authorization(self, unconfigured_app):
        transport = ASGITransport(app=unconfigured_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post("/api/admin/menu", json={"name": "x", "price_cents": 1})
            upload = await client.post("/api/admin/gallery/upload")
        assert response.status_code == 500
        assert response.json() == {"error": "DATABASE_URL missing"}
        assert upload.status_code == 500
        assert upload.json() == {"error": "IMAGES binding missing"}

    @pytest.mark.asyncio
    async def test_image_route_without_binding(self, unconfigured_app):
        transport = ASGITransport(app=unconfigured_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/img/gallery/a.jpg")
            empty = await client.get("/img/")
        assert response.status_code == 500
        assert response.json() == {"error": "IMAGES binding missing"}
        assert empty.status_code == 404


class TestHealth:

    @staticmethod
    def fake_database(connect_error=None):
        conn = MagicMock()
        conn.execute = AsyncMock(return_value=MagicMock(scalar=MagicMock(return_value=1)))
        database = MagicMock()
        if connect_error is not None:
            database.engine.connect.side_effect = connect_error
        else:
            database.engine.connect.return_value.__aenter__ = AsyncMock(return_value=conn)
            database.engine.connect.return_value.__aexit__ = AsyncMock(return_value=False)
        return database

    @pytest.mark.asyncio
    async def test_database_up(self, app, test_client):
        app.dependency_overrides[get_database] = lambda: self.fake_database()
        response = await test_client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"ok": True, "db": True}

    @pytest.mark.asyncio
    async def test_database_unreachable(self, app, test_client):
        app.dependency_overrides[get_database] = lambda: self.fake_database(OSError("refused"))
        response = await test_client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"ok": True, "db": False}


def session_factory_for(session):
    """A stand-in for async_sessionmaker whose sessions are always `session`."""
    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=session)
    context.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=context)


class TestSessionLifecycle:
    """
    Drives the real get_db_session through app.state.database, so the
    commit/rollback outcome is part of the HTTP response.
    """

    FORM = {"name": "Mario Rossi", "phone": "3331234567", "date": "2025-06-14", "time": "20:30"}

    @pytest.fixture(autouse=True)
    def real_session_dependency(self, app, mock_db_session):
        app.dependency_overrides.pop(get_db_session, None)
        app.state.database.session_factory = session_factory_for(mock_db_session)
        mock_db_session.execute.return_value.one.return_value = SimpleNamespace(
            id=7, created_at=datetime(2025, 6, 1, 9, 0, tzinfo=timezone.utc), status="new"
        )

    @pytest.mark.asyncio
    async def test_commit_before_success_response(self, test_client, mock_db_session):
        response = await test_client.post("/api/reservations", json=self.FORM)

        assert response.status_code == 201
        mock_db_session.commit.assert_awaited_once()
        mock_db_session.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failed_commit_is_500(self, test_client, mock_db_session):
        mock_db_session.commit = AsyncMock(
            side_effect=OperationalError("COMMIT", {}, Exception("connection lost"))
        )

        response = await test_client.post("/api/reservations", json=self.FORM)

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
        mock_db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_handler_error_rolls_back(self, test_client, mock_db_session, admin_headers):
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = None

        response = await test_client.put("/api/admin/menu/5", json={"name": "X"}, headers=admin_headers)

        assert response.status_code == 404
        mock_db_session.rollback.assert_awaited_once()
        mock_db_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_validation_error_rolls_back(self, test_client, mock_db_session):
        response = await test_client.post("/api/reservations", json=dict(self.FORM, people=0))

        assert response.status_code == 400
        mock_db_session.execute.assert_not_called()
        mock_db_session.commit.assert_not_awaited()


class TestAccessLog:

    @pytest.mark.parametrize(
        "path, status, level",
        [
            ("/api/menu", 200, logging.INFO),
            ("/img/gallery/a.jpg", 200, logging.DEBUG),
            ("/img/gallery/a.jpg", 404, logging.WARNING),
            ("/api/admin/menu", 401, logging.WARNING),
            ("/api/reservations", 500, logging.ERROR),
        ],
    )
    def test_levels(self, path, status, level):
        assert access_level(path, status) == level

    @pytest.mark.asyncio
    async def test_admin_requests_tagged(self, test_client, caplog):
        with caplog.at_level(logging.INFO, logger="ristorante.access"):
            await test_client.get("/api/admin/reservations")

        records = [r for r in caplog.records if r.name == "ristorante.access"]
        assert records[-1].audience == "admin"
        assert records[-1].status == 401
        assert "Bearer" not in records[-1].getMessage()
