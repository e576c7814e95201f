"""
infrastructure.persistence.shopping_list_repo - SQLite shopping list repository.

Implements the ShoppingListRepository port. Listings are ordered by
category, then ingredient name. is_checked is stored as 0/1.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import aiosqlite

from domain.entities import IngredientCategory, ShoppingListItem
from domain.exceptions import NotFoundError, RepositoryError
from domain.models import NewShoppingListItem, ShoppingListItemPatch
from infrastructure.persistence.codecs import (
    STORAGE_ERRORS,
    build_assignments,
    decode_list,
    encode_bool,
    encode_list,
    enum_value,
    new_id,
    next_timestamp,
    utc_now,
)
from infrastructure.persistence.connection import AsyncSQLiteConnection

logger = logging.getLogger(__name__)

_SELECT = """SELECT id, ingredient_name, total_amount, unit, category, is_checked,
                    meal_plan_ids, created_at, updated_at
             FROM shopping_list_items"""

_COLUMNS = {
    "ingredient_name": ("ingredient_name", None),
    "total_amount": ("total_amount", None),
    "unit": ("unit", None),
    "category": ("category", enum_value),
    "is_checked": ("is_checked", encode_bool),
    "meal_plan_ids": ("meal_plan_ids", encode_list),
}


class SQLiteShoppingListRepository:
    """Async SQLite implementation of ShoppingListRepository."""

    def __init__(self, connection: AsyncSQLiteConnection):
        self._conn = connection

    async def create(self, data: NewShoppingListItem) -> ShoppingListItem:
        item_id = new_id()
        now = utc_now()
        try:
            async with self._conn.acquire() as conn:
                await conn.execute(
                    """INSERT INTO shopping_list_items
                       (id, ingredient_name, total_amount, unit, category, is_checked,
                        meal_plan_ids, created_at, updated_at)
                       VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                    (item_id, data.ingredient_name, data.total_amount, data.unit,
                     enum_value(data.category), encode_bool(data.is_checked),
                     encode_list(data.meal_plan_ids), now, now),
                )
        except STORAGE_ERRORS as exc:
            raise RepositoryError(
                f"Failed to create shopping list item: {exc}", operation="CREATE_ERROR",
            ) from exc

        logger.info("Created shopping list item %s (%s)", item_id, data.ingredient_name)
        return ShoppingListItem(
            id=item_id,
            ingredient_name=data.ingredient_name,
            total_amount=data.total_amount,
            unit=data.unit,
            category=IngredientCategory(data.category),
            is_checked=bool(data.is_checked),
            meal_plan_ids=list(data.meal_plan_ids),
            created_at=now,
            updated_at=now,
        )

    async def find_by_id(self, item_id: str) -> Optional[ShoppingListItem]:
        try:
            async with self._conn.acquire() as conn:
                return await self._fetch(conn, item_id)
        except STORAGE_ERRORS as exc:
            raise RepositoryError(
                f"Failed to find shopping list item: {exc}",
                operation="FIND_ERROR", entity_id=item_id,
            ) from exc

    async def find_all(self) -> list[ShoppingListItem]:
        return await self._select_many(
            "ORDER BY category, ingredient_name", (), "FIND_ALL_ERROR",
        )

    async def find_by_category(self, category: IngredientCategory | str) -> list[ShoppingListItem]:
        return await self._select_many(
            "WHERE category = ? ORDER BY ingredient_name",
            (enum_value(category),),
            "FIND_BY_CATEGORY_ERROR",
        )

    async def find_unchecked(self) -> list[ShoppingListItem]:
        return await self._select_many(
            "WHERE is_checked = 0 ORDER BY category, ingredient_name",
            (),
            "FIND_UNCHECKED_ERROR",
        )

    async def update(self, patch: ShoppingListItemPatch) -> ShoppingListItem:
        """Apply the present patch fields and return the stored result."""
        try:
            async with self._conn.acquire() as conn:
                return await self._apply_update(conn, patch.id, patch.changes())
        except STORAGE_ERRORS as exc:
            raise RepositoryError(
                f"Failed to update shopping list item: {exc}",
                operation="UPDATE_ERROR", entity_id=patch.id,
            ) from exc

    async def delete(self, item_id: str) -> bool:
        try:
            async with self._conn.acquire() as conn:
                if await self._fetch(conn, item_id) is None:
                    raise NotFoundError("ShoppingListItem", item_id)
                cursor = await conn.execute(
                    "DELETE FROM shopping_list_items WHERE id = ?", (item_id,),
                )
                deleted = cursor.rowcount > 0
        except STORAGE_ERRORS as exc:
            raise RepositoryError(
                f"Failed to delete shopping list item: {exc}",
                operation="DELETE_ERROR", entity_id=item_id,
            ) from exc

        logger.info("Deleted shopping list item %s", item_id)
        return deleted

    async def toggle_checked(self, item_id: str) -> ShoppingListItem:
        """Flip is_checked. Read and write share one transaction scope."""
        try:
            async with self._conn.acquire() as conn:
                existing = await self._fetch(conn, item_id)
                if existing is None:
                    raise NotFoundError("ShoppingListItem", item_id)
                return await self._apply_update(
                    conn, item_id, {"is_checked": not existing.is_checked}, existing,
                )
        except STORAGE_ERRORS as exc:
            raise RepositoryError(
                f"Failed to toggle checked status: {exc}",
                operation="TOGGLE_CHECKED_ERROR", entity_id=item_id,
            ) from exc

    async def clear_checked_items(self) -> int:
        """Delete every checked item and return how many were removed."""
        try:
            async with self._conn.acquire() as conn:
                cursor = await conn.execute(
                    "DELETE FROM shopping_list_items WHERE is_checked = 1"
                )
                removed = cursor.rowcount
        except STORAGE_ERRORS as exc:
            raise RepositoryError(
                f"Failed to clear checked items: {exc}", operation="CLEAR_CHECKED_ERROR",
            ) from exc

        logger.info("Cleared %d checked shopping list items", removed)
        return removed

    async def delete_all(self) -> int:
        """Empty the shopping list in one transaction; returns rows removed."""
        try:
            async with self._conn.acquire() as conn:
                cursor = await conn.execute("DELETE FROM shopping_list_items")
                removed = cursor.rowcount
        except STORAGE_ERRORS as exc:
            raise RepositoryError(
                f"Failed to clear shopping list: {exc}", operation="DELETE_ALL_ERROR",
            ) from exc

        logger.info("Removed all %d shopping list items", removed)
        return removed

    # ------------------------------------------------------------------
    # Helpers (run inside an acquired transaction)
    # ------------------------------------------------------------------

    async def _apply_update(
        self,
        conn: aiosqlite.Connection,
        item_id: str,
        changes: Mapping[str, Any],
        existing: Optional[ShoppingListItem] = None,
    ) -> ShoppingListItem:
        if existing is None:
            existing = await self._fetch(conn, item_id)
        if existing is None:
            raise NotFoundError("ShoppingListItem", item_id)

        assignments, params = build_assignments(changes, _COLUMNS)
        assignments.append("updated_at = ?")
        params.append(next_timestamp(existing.updated_at))
        await conn.execute(
            f"UPDATE shopping_list_items SET {', '.join(assignments)} WHERE id = ?",
            (*params, item_id),
        )

        updated = await self._fetch(conn, item_id)
        if updated is None:
            raise RepositoryError(
                "Failed to retrieve updated shopping list item",
                operation="UPDATE_ERROR", entity_id=item_id,
            )
        return updated

    async def _select_many(
        self, clause: str, params: tuple, operation: str,
    ) -> list[ShoppingListItem]:
        try:
            async with self._conn.acquire() as conn:
                rows = await conn.execute_fetchall(f"{_SELECT} {clause}", params)
                return [self._row_to_entity(r) for r in rows]
        except STORAGE_ERRORS as exc:
            raise RepositoryError(
                f"Failed to find shopping list items: {exc}", operation=operation,
            ) from exc

    async def _fetch(self, conn: aiosqlite.Connection, item_id: str) -> Optional[ShoppingListItem]:
        rows = await conn.execute_fetchall(f"{_SELECT} WHERE id = ?", (item_id,))
        return self._row_to_entity(rows[0]) if rows else None

    @staticmethod
    def _row_to_entity(row) -> ShoppingListItem:
        return ShoppingListItem(
            id=row["id"],
            ingredient_name=row["ingredient_name"],
            total_amount=row["total_amount"],
            unit=row["unit"],
            category=IngredientCategory(row["category"]),
            is_checked=row["is_checked"] == 1,
            meal_plan_ids=decode_list(row["meal_plan_ids"]),
            created_at=row["created_at"] or "",
            updated_at=row["updated_at"] or "",
        )
