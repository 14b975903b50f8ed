"""
Ristorante API: Reservation Route Handlers
===========================================

What:  Public reservation form submission plus the admin list and status
       update.
How:   The public endpoint tolerates a malformed body (read as {}, which
       then fails the required-field check); the admin status update
       rejects malformed JSON with 400.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ristorante.auth import require_admin
from ristorante.database import get_database, get_db_session
from ristorante.http import json_response, parse_record_id, read_json_object
from ristorante.schemas.common import ErrorResponse
from ristorante.schemas.reservation import (
    ReservationCreate,
    ReservationCreatedEnvelope,
    ReservationListResponse,
    ReservationStatusEnvelope,
    ReservationStatusUpdate,
)
from ristorante.services.reservation_service import clamp_list_limit, reservation_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Reservations"])

admin_router = APIRouter(
    prefix="/api/admin",
    tags=["Reservations (admin)"],
    dependencies=[Depends(get_database), Depends(require_admin)],
    responses={401: {"description": "Missing or wrong bearer token", "model": ErrorResponse}},
)


@router.post(
    "/reservations",
    status_code=201,
    response_model=ReservationCreatedEnvelope,
    responses={400: {"description": "Missing field, bad party size or date", "model": ErrorResponse}},
    summary="Submit a reservation request",
)
async def create_reservation(request: Request, db: AsyncSession = Depends(get_db_session, scope="function")):
    body = await read_json_object(request, tolerant=True)
    payload = ReservationCreate.from_body(body)
    created = await reservation_service.create_reservation(db, payload)
    return json_response(ReservationCreatedEnvelope(reservation=created), status_code=201)


@admin_router.get(
    "/reservations",
    response_model=ReservationListResponse,
    summary="List reservations, newest first",
)
async def list_reservations(
    limit: Optional[str] = Query(
        default=None,
        description="Maximum rows (default 50, capped at 200; invalid values use the default)",
    ),
    db: AsyncSession = Depends(get_db_session, scope="function"),
):
    result = await reservation_service.list_reservations(db, clamp_list_limit(limit))
    return json_response(result)


@admin_router.put(
    "/reservations/{reservation_id}",
    response_model=ReservationStatusEnvelope,
    responses={
        400: {"description": "invalid status", "model": ErrorResponse},
        404: {"description": "No such reservation", "model": ErrorResponse},
    },
    summary="Change a reservation's status",
)
async def update_reservation_status(
    reservation_id: str,
    request: Request,
    db: AsyncSession = Depends(get_db_session, scope="function"),
):
    record_id = parse_record_id(reservation_id, "reservation")
    body = await read_json_object(request)
    payload = ReservationStatusUpdate.from_body(body)
    updated = await reservation_service.update_status(db, record_id, payload)
    return json_response(ReservationStatusEnvelope(reservation=updated))
