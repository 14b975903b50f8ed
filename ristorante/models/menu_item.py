"""
Ristorante API: MenuItem SQLAlchemy Model
==========================================

What:  ORM model for the `menu_items` table.
Who:   MenuService (list/create/update/delete) and Alembic.

Table Design:
    - Serial integer primary key: identifiers appear in admin URLs only
    - Italian text columns are required-ish (empty string default); English
      variants are nullable and resolved client-side
    - price_cents: integer cents, never floats
    - allergens: TEXT[] of Allergen values, normalized before every write
    - (category, position) index: the public menu is ordered by both
"""

from typing import List, Optional

from sqlalchemy import Boolean, Index, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from ristorante.database import Base


class MenuItem(Base):
    """
    A dish or drink on the menu.

    Lifecycle:
        Created, partially updated and hard-deleted by admin only.
        Hidden from the public list while is_available is false.
    """

    __tablename__ = "menu_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # ── Bilingual Text ────────────────────────────────────────────────────
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    name_en: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    description: Mapped[str] = mapped_column(
        Text, nullable=False, default="", server_default=text("''")
    )
    description_en: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(
        String(100), nullable=False, default="", server_default=text("''")
    )
    category_en: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # ── Pricing & Ordering ────────────────────────────────────────────────
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    position: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0")
    )
    is_available: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )

    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    allergens: Mapped[List[str]] = mapped_column(
        ARRAY(Text),
        nullable=False,
        default=list,
        server_default=text("'{}'::text[]"),
    )

    __table_args__ = (
        Index("idx_menu_items_category_position", "category", "position"),
    )

    def __repr__(self) -> str:
        return f"<MenuItem(id={self.id}, name='{self.name}', price_cents={self.price_cents})>"
