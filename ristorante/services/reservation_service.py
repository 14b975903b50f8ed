"""
Ristorante API: Reservation Service
====================================

What:  Public reservation intake and the admin list/status operations.
How:   One statement per call. The reservation timestamp is never built in
       Python: "<date> <time>" is handed to PostgreSQL as a literal and cast
       to TIMESTAMPTZ there, so it is interpreted in the database session
       time zone.
Who:   routes/reservations.py
"""

import logging

from sqlalchemy import cast, insert, literal, select, update
from sqlalchemy.dialects.postgresql import TIMESTAMP
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ristorante.enums import ReservationStatus
from ristorante.exceptions import DatabaseError, NotFoundError
from ristorante.models.reservation import Reservation
from ristorante.schemas.reservation import (
    ReservationCreate,
    ReservationCreated,
    ReservationListResponse,
    ReservationResponse,
    ReservationStatusResponse,
    ReservationStatusUpdate,
)

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 50
MAX_LIST_LIMIT = 200


def clamp_list_limit(raw) -> int:
    """
    `?limit=` as an int: default 50, at most 200.

    Anything that is not a positive integer falls back to the default.
    """
    if raw is None:
        return DEFAULT_LIST_LIMIT
    try:
        value = int(str(raw).strip())
    except ValueError:
        return DEFAULT_LIST_LIMIT
    if value <= 0:
        return DEFAULT_LIST_LIMIT
    return min(value, MAX_LIST_LIMIT)


class ReservationService:
    """Stateless reservation operations."""

    async def create_reservation(
        self, db: AsyncSession, payload: ReservationCreate
    ) -> ReservationCreated:
        """
        Inserts a public submission with status 'new'.

        Returns:
            Only id, created_at and status; nothing the caller sent is echoed.
        """
        statement = (
            insert(Reservation)
            .values(
                full_name=payload.full_name,
                phone=payload.phone,
                people=payload.people,
                reserved_at=cast(literal(payload.reserved_at_text), TIMESTAMP(timezone=True)),
                notes=payload.notes,
                status=ReservationStatus.NEW.value,
            )
            .returning(Reservation.id, Reservation.created_at, Reservation.status)
        )
        try:
            result = await db.execute(statement)
            row = result.one()
        except SQLAlchemyError as e:
            logger.error("Database error creating reservation: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

        logger.info(
            "Reservation created: %s (%d people at %s)",
            row.id, payload.people, payload.reserved_at_text,
        )
        return ReservationCreated(id=row.id, created_at=row.created_at, status=row.status)

    async def list_reservations(
        self, db: AsyncSession, limit: int = DEFAULT_LIST_LIMIT
    ) -> ReservationListResponse:
        """Newest first, at most `limit` rows."""
        try:
            result = await db.execute(
                select(Reservation)
                .order_by(Reservation.created_at.desc(), Reservation.id.desc())
                .limit(limit)
            )
            rows = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing reservations: %s", str(e), exc_info=True)
            raise DatabaseError(context={"limit": limit})

        return ReservationListResponse(
            reservations=[ReservationResponse.model_validate(r) for r in rows]
        )

    async def update_status(
        self, db: AsyncSession, reservation_id: int, payload: ReservationStatusUpdate
    ) -> ReservationStatusResponse:
        """
        Moves a reservation to another status. Any transition is allowed.

        Raises:
            NotFoundError: no reservation with this id
        """
        try:
            result = await db.execute(
                update(Reservation)
                .where(Reservation.id == reservation_id)
                .values(status=payload.status.value)
                .returning(Reservation.id, Reservation.status)
            )
            row = result.one_or_none()
        except SQLAlchemyError as e:
            logger.error(
                "Database error updating reservation %s: %s", reservation_id, str(e), exc_info=True
            )
            raise DatabaseError(context={"reservation_id": reservation_id})

        if row is None:
            raise NotFoundError(resource="reservation", resource_id=str(reservation_id))

        logger.info("Reservation %s status → %s", reservation_id, row.status)
        return ReservationStatusResponse(id=row.id, status=row.status)


# ── Singleton Instance ────────────────────────────────────────────────────
reservation_service = ReservationService()
