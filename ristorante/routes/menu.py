"""
Ristorante API: Menu Route Handlers
====================================

What:  Public menu listing and the admin create/update/delete endpoints.
How:   Bodies are read as raw JSON (malformed → 400 "invalid JSON body",
       non-object → {}), validated by the menu schemas and handed to
       MenuService.
"""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ristorante.auth import require_admin
from ristorante.database import get_database, get_db_session
from ristorante.http import json_response, parse_record_id, read_json_object
from ristorante.schemas.common import ErrorResponse, OkResponse
from ristorante.schemas.menu import (
    MenuItemCreate,
    MenuItemEnvelope,
    MenuItemUpdate,
    MenuListResponse,
)
from ristorante.services.menu_service import menu_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Menu"])

admin_router = APIRouter(
    prefix="/api/admin",
    tags=["Menu (admin)"],
    dependencies=[Depends(get_database), Depends(require_admin)],
    responses={401: {"description": "Missing or wrong bearer token", "model": ErrorResponse}},
)


@router.get(
    "/menu",
    response_model=MenuListResponse,
    summary="List available menu items",
    description="Items with is_available = true, ordered by category, then position.",
)
async def list_menu(db: AsyncSession = Depends(get_db_session, scope="function")):
    result = await menu_service.list_available(db)
    return json_response(result)


@admin_router.post(
    "/menu",
    status_code=201,
    response_model=MenuItemEnvelope,
    responses={400: {"description": "name and price_cents required", "model": ErrorResponse}},
    summary="Create a menu item",
)
async def create_menu_item(request: Request, db: AsyncSession = Depends(get_db_session, scope="function")):
    body = await read_json_object(request)
    payload = MenuItemCreate.from_body(body)
    item = await menu_service.create_item(db, payload)
    return json_response(MenuItemEnvelope(item=item), status_code=201)


@admin_router.put(
    "/menu/{item_id}",
    response_model=MenuItemEnvelope,
    responses={404: {"description": "No such item", "model": ErrorResponse}},
    summary="Partially update a menu item",
    description=(
        "Absent or null fields are left unchanged. `allergens`, when present "
        "at all, replaces the stored list."
    ),
)
async def update_menu_item(
    item_id: str,
    request: Request,
    db: AsyncSession = Depends(get_db_session, scope="function"),
):
    record_id = parse_record_id(item_id, "menu_item")
    body = await read_json_object(request)
    payload = MenuItemUpdate.from_body(body)
    item = await menu_service.update_item(db, record_id, payload)
    return json_response(MenuItemEnvelope(item=item))


@admin_router.delete(
    "/menu/{item_id}",
    response_model=OkResponse,
    responses={404: {"description": "No such item", "model": ErrorResponse}},
    summary="Delete a menu item",
)
async def delete_menu_item(item_id: str, db: AsyncSession = Depends(get_db_session, scope="function")):
    record_id = parse_record_id(item_id, "menu_item")
    await menu_service.delete_item(db, record_id)
    return json_response(OkResponse())
