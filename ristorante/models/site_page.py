"""
Ristorante API: SitePage SQLAlchemy Model
==========================================

What:  Free-form page content (home hero, opening hours, about text...)
       keyed by slug. `data` is an arbitrary JSON object the API never
       inspects.
"""

from datetime import datetime
from typing import Any, Dict

from sqlalchemy import String, text
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from ristorante.database import Base


class SitePage(Base):
    __tablename__ = "site_pages"

    slug: Mapped[str] = mapped_column(String(200), primary_key=True)

    data: Mapped[Dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        server_default=text("'{}'::jsonb"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<SitePage(slug='{self.slug}', updated_at='{self.updated_at}')>"
