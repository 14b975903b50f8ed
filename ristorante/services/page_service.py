"""
Ristorante API: Page Content Service
=====================================

What:  Get and upsert free-form page content keyed by slug.
How:   Reads are a primary-key lookup; writes are one
       INSERT ... ON CONFLICT (slug) DO UPDATE that replaces `data` and
       stamps `updated_at = now()`, returning the stored row.
Who:   routes/pages.py
"""

import logging
from typing import Any, Dict

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ristorante.exceptions import DatabaseError
from ristorante.models.site_page import SitePage
from ristorante.schemas.page import PageResponse

logger = logging.getLogger(__name__)


class PageService:

    async def get_page(self, db: AsyncSession, slug: str) -> PageResponse:
        """Stored content, or an empty placeholder for an unknown slug."""
        try:
            result = await db.execute(select(SitePage).where(SitePage.slug == slug))
            page = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error reading page %s: %s", slug, str(e), exc_info=True)
            raise DatabaseError(context={"slug": slug})

        if page is None:
            return PageResponse.empty(slug)
        return PageResponse.model_validate(page)

    async def upsert_page(self, db: AsyncSession, slug: str, data: Dict[str, Any]) -> PageResponse:
        """Replaces the whole `data` object for `slug`, creating the row if needed."""
        statement = insert(SitePage).values(slug=slug, data=data)
        statement = statement.on_conflict_do_update(
            index_elements=[SitePage.slug],
            set_={"data": statement.excluded.data, "updated_at": func.now()},
        ).returning(SitePage.slug, SitePage.data, SitePage.updated_at)

        try:
            result = await db.execute(statement)
            row = result.one()
        except SQLAlchemyError as e:
            logger.error("Database error upserting page %s: %s", slug, str(e), exc_info=True)
            raise DatabaseError(context={"slug": slug})

        logger.info("Page upserted: %s (%d top-level keys)", slug, len(data))
        return PageResponse(slug=row.slug, data=row.data, updated_at=row.updated_at)


# ── Singleton Instance ────────────────────────────────────────────────────
page_service = PageService()
