"""
Ristorante API: Menu Service
=============================

What:  Reads and writes `menu_items` for the public menu and the admin panel.
How:   Each method issues exactly one statement on the request's session.
       Validation already happened in the schemas; this layer only maps
       "nothing matched" to NotFoundError and SQLAlchemy failures to
       DatabaseError.
Who:   routes/menu.py

Query plans:
    list_available:  WHERE is_available ORDER BY category, position
                     → idx_menu_items_category_position
    update_item:     UPDATE ... WHERE id = :id RETURNING *   (one round trip)
    delete_item:     DELETE ... WHERE id = :id RETURNING id
"""

import logging

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ristorante.exceptions import DatabaseError, NotFoundError
from ristorante.models.menu_item import MenuItem
from ristorante.schemas.menu import (
    MenuItemCreate,
    MenuItemResponse,
    MenuItemUpdate,
    MenuListResponse,
)

logger = logging.getLogger(__name__)


class MenuService:
    """
    Stateless menu operations. Every method takes the request's session.

    Error Handling Strategy:
        NotFoundError propagates as-is; any SQLAlchemyError is logged with
        its detail and re-raised as an opaque DatabaseError.
    """

    async def list_available(self, db: AsyncSession) -> MenuListResponse:
        """Every available item, ordered by category then position."""
        try:
            result = await db.execute(
                select(MenuItem)
                .where(MenuItem.is_available.is_(True))
                .order_by(MenuItem.category, MenuItem.position, MenuItem.id)
            )
            items = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing menu: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

        return MenuListResponse(
            items=[MenuItemResponse.model_validate(item) for item in items]
        )

    async def create_item(self, db: AsyncSession, payload: MenuItemCreate) -> MenuItemResponse:
        """
        Inserts a new item.

        Args:
            db: Async database session
            payload: Validated body with defaults and normalized allergens

        Returns:
            The stored item, including its new id.
        """
        item = MenuItem(**payload.to_values())
        try:
            db.add(item)
            await db.flush()  # assigns the serial id; commit happens in get_db_session
        except SQLAlchemyError as e:
            logger.error("Database error creating menu item: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

        logger.info("Menu item created: %s (%s)", item.id, item.name)
        return MenuItemResponse.model_validate(item)

    async def update_item(
        self, db: AsyncSession, item_id: int, payload: MenuItemUpdate
    ) -> MenuItemResponse:
        """
        Applies a partial update.

        Keys that are absent or null leave their column unchanged, except
        `allergens` (see MenuItemUpdate). A body that changes nothing still
        answers with the current row, or 404.

        Raises:
            NotFoundError: no item with this id
            DatabaseError: statement failed
        """
        values = payload.to_update_values()
        if values:
            statement = (
                update(MenuItem)
                .where(MenuItem.id == item_id)
                .values(**values)
                .returning(MenuItem)
            )
        else:
            statement = select(MenuItem).where(MenuItem.id == item_id)

        try:
            result = await db.execute(statement)
            item = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error updating menu item %s: %s", item_id, str(e), exc_info=True)
            raise DatabaseError(context={"item_id": item_id})

        if item is None:
            raise NotFoundError(resource="menu_item", resource_id=str(item_id))

        logger.info("Menu item updated: %s (fields: %s)", item_id, ", ".join(sorted(values)) or "none")
        return MenuItemResponse.model_validate(item)

    async def delete_item(self, db: AsyncSession, item_id: int) -> None:
        """
        Hard-deletes an item.

        Raises:
            NotFoundError: no item with this id
        """
        try:
            result = await db.execute(
                delete(MenuItem).where(MenuItem.id == item_id).returning(MenuItem.id)
            )
            deleted_id = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error deleting menu item %s: %s", item_id, str(e), exc_info=True)
            raise DatabaseError(context={"item_id": item_id})

        if deleted_id is None:
            raise NotFoundError(resource="menu_item", resource_id=str(item_id))
        logger.info("Menu item deleted: %s", item_id)


# ── Singleton Instance ────────────────────────────────────────────────────
menu_service = MenuService()
