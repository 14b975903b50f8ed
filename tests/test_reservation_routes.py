"""
Ristorante API: Reservation Endpoint Tests
===========================================
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest

from ristorante.schemas.reservation import (
    ReservationCreated,
    ReservationListResponse,
    ReservationStatusResponse,
)

FORM = {"name": "Mario Rossi", "phone": "3331234567", "date": "2025-06-14", "time": "20:30"}
CREATED = ReservationCreated(
    id=5, created_at=datetime(2025, 6, 1, 9, 0, tzinfo=timezone.utc), status="new"
)


class TestCreateReservation:

    @pytest.mark.asyncio
    async def test_create(self, test_client):
        with patch("ristorante.routes.reservations.reservation_service") as mock_service:
            mock_service.create_reservation = AsyncMock(return_value=CREATED)
            response = await test_client.post("/api/reservations", json=dict(FORM, people=30))

        assert response.status_code == 201
        body = response.json()["reservation"]
        assert body["id"] == 5
        assert body["status"] == "new"
        assert body["created_at"].startswith("2025-06-01T09:00:00")
        assert set(body) == {"id", "created_at", "status"}
        assert mock_service.create_reservation.call_args.args[1].people == 30

    @pytest.mark.asyncio
    @pytest.mark.parametrize("people", [0, 31, "many"])
    async def test_people_out_of_range(self, test_client, mock_db_session, people):
        response = await test_client.post("/api/reservations", json=dict(FORM, people=people))
        assert response.status_code == 400
        assert response.json() == {"error": "people must be between 1 and 30"}
        mock_db_session.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_malformed_body_tolerated_as_empty(self, test_client):
        response = await test_client.post(
            "/api/reservations",
            content=b"name=Mario",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "name, phone, date and time required"}

    @pytest.mark.asyncio
    async def test_invalid_date(self, test_client):
        response = await test_client.post(
            "/api/reservations", json=dict(FORM, date="14/06/2025")
        )
        assert response.status_code == 400
        assert response.json() == {"error": "invalid date or time"}


class TestAdminReservations:

    @pytest.mark.asyncio
    async def test_list_requires_admin(self, test_client, mock_db_session):
        response = await test_client.get("/api/admin/reservations")
        assert response.status_code == 401
        mock_db_session.execute.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query, expected", [("", 50), ("?limit=10", 10), ("?limit=999", 200), ("?limit=x", 50)])
    async def test_list_limit(self, test_client, admin_headers, query, expected):
        with patch("ristorante.routes.reservations.reservation_service") as mock_service:
            mock_service.list_reservations = AsyncMock(
                return_value=ReservationListResponse(reservations=[])
            )
            response = await test_client.get(f"/api/admin/reservations{query}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"reservations": []}
        assert mock_service.list_reservations.call_args.args[1] == expected

    @pytest.mark.asyncio
    async def test_update_status(self, test_client, admin_headers):
        with patch("ristorante.routes.reservations.reservation_service") as mock_service:
            mock_service.update_status = AsyncMock(
                return_value=ReservationStatusResponse(id=5, status="confirmed")
            )
            response = await test_client.put(
                "/api/admin/reservations/5", json={"status": "confirmed"}, headers=admin_headers
            )

        assert response.status_code == 200
        assert response.json() == {"reservation": {"id": 5, "status": "confirmed"}}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", ["CONFIRMED", "seated", None])
    async def test_update_invalid_status(self, test_client, admin_headers, mock_db_session, status):
        response = await test_client.put(
            "/api/admin/reservations/5", json={"status": status}, headers=admin_headers
        )
        assert response.status_code == 400
        assert response.json() == {"error": "invalid status"}
        mock_db_session.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_missing(self, test_client, admin_headers, mock_db_session):
        mock_db_session.execute.return_value.one_or_none.return_value = None
        response = await test_client.put(
            "/api/admin/reservations/77", json={"status": "new"}, headers=admin_headers
        )
        assert response.status_code == 404
        assert response.json() == {"error": "Not found"}
