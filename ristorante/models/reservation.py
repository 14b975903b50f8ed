"""
Ristorante API: Reservation SQLAlchemy Model
=============================================

What:  ORM model for the `reservations` table.
Who:   ReservationService and Alembic.

Table Design:
    - reserved_at: TIMESTAMP WITH TIME ZONE. The caller sends a local date
      and time; the database casts "<date> <time>" in its session time zone.
    - status: VARCHAR holding a ReservationStatus value, guarded by a CHECK
      constraint as well as by the API.
    - created_at DESC index: the admin list is newest first.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, Index, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from ristorante.database import Base


class Reservation(Base):
    """
    A table booking submitted from the website.

    Lifecycle:
        1. Created by the public form with status 'new'
        2. Moved to 'confirmed' or 'cancelled' (or back) by an admin
        3. Never deleted through the API
    """

    __tablename__ = "reservations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    people: Mapped[int] = mapped_column(Integer, nullable=False)

    reserved_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="new",
        server_default=text("'new'"),
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        CheckConstraint("people BETWEEN 1 AND 30", name="ck_reservations_people"),
        CheckConstraint(
            "status IN ('new', 'confirmed', 'cancelled')",
            name="ck_reservations_status",
        ),
        Index("idx_reservations_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return (
            f"<Reservation(id={self.id}, status='{self.status}', "
            f"reserved_at='{self.reserved_at}')>"
        )
