"""
Ristorante API: Page Content Route Handlers
============================================

What:  Read page content publicly or through the admin mirror, and replace
       it as admin.
How:   The upsert body must be a JSON object; malformed JSON reads as null
       and fails the same check.
"""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ristorante.auth import require_admin
from ristorante.database import get_database, get_db_session
from ristorante.exceptions import ValidationError
from ristorante.http import json_response, read_json_value
from ristorante.schemas.common import ErrorResponse
from ristorante.schemas.page import PageResponse
from ristorante.services.page_service import page_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Pages"])

admin_router = APIRouter(
    prefix="/api/admin",
    tags=["Pages (admin)"],
    dependencies=[Depends(get_database), Depends(require_admin)],
    responses={401: {"description": "Missing or wrong bearer token", "model": ErrorResponse}},
)


@router.get(
    "/page/{slug}",
    response_model=PageResponse,
    summary="Read page content",
    description='Unknown slugs answer 200 with `{"data": {}, "updated_at": null}`.',
)
async def get_page(slug: str, db: AsyncSession = Depends(get_db_session, scope="function")):
    page = await page_service.get_page(db, slug)
    return json_response(page)


@admin_router.get(
    "/page/{slug}",
    response_model=PageResponse,
    summary="Read page content (admin)",
)
async def get_page_admin(slug: str, db: AsyncSession = Depends(get_db_session, scope="function")):
    page = await page_service.get_page(db, slug)
    return json_response(page)


@admin_router.put(
    "/page/{slug}",
    response_model=PageResponse,
    responses={400: {"description": "body must be a JSON object", "model": ErrorResponse}},
    summary="Create or replace page content",
)
async def upsert_page(slug: str, request: Request, db: AsyncSession = Depends(get_db_session, scope="function")):
    data = await read_json_value(request)
    if not isinstance(data, dict):
        raise ValidationError(
            message="body must be a JSON object",
            field="body",
            context={"received": type(data).__name__},
        )
    page = await page_service.upsert_page(db, slug, data)
    return json_response(page)
