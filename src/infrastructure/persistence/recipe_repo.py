"""
infrastructure.persistence.recipe_repo - SQLite recipe repository.

Implements the RecipeRepository port. A recipe row and its ingredient rows
are written in one transaction and read back separately, then merged.
Ingredient order is insertion order (rowid).

Replacing ingredients is destructive: the whole list is deleted and the new
list inserted with fresh ids. Callers always send the complete list.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

import aiosqlite

from domain.entities import Ingredient, IngredientCategory, Recipe
from domain.exceptions import NotFoundError, RepositoryError
from domain.models import NewIngredient, NewRecipe, RecipePatch
from infrastructure.persistence.codecs import (
    STORAGE_ERRORS,
    build_assignments,
    decode_list,
    encode_list,
    enum_value,
    new_id,
    next_timestamp,
    utc_now,
)
from infrastructure.persistence.connection import AsyncSQLiteConnection

logger = logging.getLogger(__name__)

_SELECT = """SELECT id, name, instructions, cooking_time, servings, category,
                    created_at, updated_at
             FROM recipes"""

_SELECT_INGREDIENTS = """SELECT id, recipe_id, name, amount, unit, category
                         FROM ingredients"""

_COLUMNS = {
    "name": ("name", None),
    "instructions": ("instructions", encode_list),
    "cooking_time": ("cooking_time", None),
    "servings": ("servings", None),
    "category": ("category", None),
}


class SQLiteRecipeRepository:
    """Async SQLite implementation of RecipeRepository."""

    def __init__(self, connection: AsyncSQLiteConnection):
        self._conn = connection

    async def create(self, data: NewRecipe) -> Recipe:
        recipe_id = new_id()
        now = utc_now()
        try:
            async with self._conn.acquire() as conn:
                await conn.execute(
                    """INSERT INTO recipes
                       (id, name, instructions, cooking_time, servings, category,
                        created_at, updated_at)
                       VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
                    (recipe_id, data.name, encode_list(data.instructions),
                     data.cooking_time, data.servings, data.category or None, now, now),
                )
                ingredients = await self._insert_ingredients(conn, recipe_id, data.ingredients)
        except STORAGE_ERRORS as exc:
            raise RepositoryError(
                f"Failed to create recipe: {exc}", operation="CREATE_ERROR",
            ) from exc

        logger.info("Created recipe %s '%s' with %d ingredients",
                    recipe_id, data.name, len(ingredients))
        return Recipe(
            id=recipe_id,
            name=data.name,
            ingredients=ingredients,
            instructions=list(data.instructions),
            cooking_time=data.cooking_time,
            servings=data.servings,
            category=data.category or None,
            created_at=now,
            updated_at=now,
        )

    async def find_by_id(self, recipe_id: str) -> Optional[Recipe]:
        try:
            async with self._conn.acquire() as conn:
                return await self._fetch(conn, recipe_id)
        except STORAGE_ERRORS as exc:
            raise RepositoryError(
                f"Failed to find recipe: {exc}",
                operation="FIND_ERROR", entity_id=recipe_id,
            ) from exc

    async def find_all(self) -> list[Recipe]:
        try:
            async with self._conn.acquire() as conn:
                rows = await conn.execute_fetchall(f"{_SELECT} ORDER BY name")
                return [await self._hydrate(conn, r) for r in rows]
        except STORAGE_ERRORS as exc:
            raise RepositoryError(
                f"Failed to find recipes: {exc}", operation="FIND_ALL_ERROR",
            ) from exc

    async def find_by_category(self, category: str) -> list[Recipe]:
        try:
            async with self._conn.acquire() as conn:
                rows = await conn.execute_fetchall(
                    f"{_SELECT} WHERE category = ? ORDER BY name", (category,),
                )
                return [await self._hydrate(conn, r) for r in rows]
        except STORAGE_ERRORS as exc:
            raise RepositoryError(
                f"Failed to find recipes by category: {exc}",
                operation="FIND_BY_CATEGORY_ERROR",
            ) from exc

    async def find_ingredient_by_id(self, ingredient_id: str) -> Optional[Ingredient]:
        try:
            async with self._conn.acquire() as conn:
                rows = await conn.execute_fetchall(
                    f"{_SELECT_INGREDIENTS} WHERE id = ?", (ingredient_id,),
                )
                return self._row_to_ingredient(rows[0]) if rows else None
        except STORAGE_ERRORS as exc:
            raise RepositoryError(
                f"Failed to find ingredient: {exc}",
                operation="FIND_ERROR", entity_id=ingredient_id,
            ) from exc

    async def update(self, patch: RecipePatch) -> Recipe:
        """Apply present fields; a present ingredient list replaces all rows."""
        changes = patch.changes()
        try:
            async with self._conn.acquire() as conn:
                existing = await self._fetch(conn, patch.id)
                if existing is None:
                    raise NotFoundError("Recipe", patch.id)

                assignments, params = build_assignments(changes, _COLUMNS)
                assignments.append("updated_at = ?")
                params.append(next_timestamp(existing.updated_at))
                await conn.execute(
                    f"UPDATE recipes SET {', '.join(assignments)} WHERE id = ?",
                    (*params, patch.id),
                )

                if "ingredients" in changes:
                    await conn.execute(
                        "DELETE FROM ingredients WHERE recipe_id = ?", (patch.id,),
                    )
                    await self._insert_ingredients(conn, patch.id, changes["ingredients"])

                updated = await self._fetch(conn, patch.id)
        except STORAGE_ERRORS as exc:
            raise RepositoryError(
                f"Failed to update recipe: {exc}",
                operation="UPDATE_ERROR", entity_id=patch.id,
            ) from exc

        if updated is None:
            raise RepositoryError(
                "Failed to retrieve updated recipe",
                operation="UPDATE_ERROR", entity_id=patch.id,
            )
        return updated

    async def delete(self, recipe_id: str) -> bool:
        """Delete the ingredient rows, then the recipe row."""
        try:
            async with self._conn.acquire() as conn:
                rows = await conn.execute_fetchall(
                    "SELECT id FROM recipes WHERE id = ?", (recipe_id,),
                )
                if not rows:
                    raise NotFoundError("Recipe", recipe_id)
                # Explicit even though the FK cascades.
                await conn.execute("DELETE FROM ingredients WHERE recipe_id = ?", (recipe_id,))
                cursor = await conn.execute("DELETE FROM recipes WHERE id = ?", (recipe_id,))
                deleted = cursor.rowcount > 0
        except STORAGE_ERRORS as exc:
            raise RepositoryError(
                f"Failed to delete recipe: {exc}",
                operation="DELETE_ERROR", entity_id=recipe_id,
            ) from exc

        logger.info("Deleted recipe %s", recipe_id)
        return deleted

    # ------------------------------------------------------------------
    # Helpers (run inside an acquired transaction)
    # ------------------------------------------------------------------

    async def _insert_ingredients(
        self,
        conn: aiosqlite.Connection,
        recipe_id: str,
        ingredients: Iterable[NewIngredient],
    ) -> list[Ingredient]:
        stored: list[Ingredient] = []
        for item in ingredients:
            ingredient_id = new_id()
            await conn.execute(
                """INSERT INTO ingredients (id, recipe_id, name, amount, unit, category)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (ingredient_id, recipe_id, item.name, item.amount, item.unit,
                 enum_value(item.category)),
            )
            stored.append(Ingredient(
                id=ingredient_id,
                name=item.name,
                amount=item.amount,
                unit=item.unit,
                category=IngredientCategory(item.category),
            ))
        return stored

    async def _fetch(self, conn: aiosqlite.Connection, recipe_id: str) -> Optional[Recipe]:
        rows = await conn.execute_fetchall(f"{_SELECT} WHERE id = ?", (recipe_id,))
        return await self._hydrate(conn, rows[0]) if rows else None

    async def _hydrate(self, conn: aiosqlite.Connection, row) -> Recipe:
        ingredient_rows = await conn.execute_fetchall(
            f"{_SELECT_INGREDIENTS} WHERE recipe_id = ? ORDER BY rowid", (row["id"],),
        )
        return Recipe(
            id=row["id"],
            name=row["name"],
            ingredients=[self._row_to_ingredient(r) for r in ingredient_rows],
            instructions=decode_list(row["instructions"]),
            cooking_time=row["cooking_time"],
            servings=row["servings"],
            category=row["category"],
            created_at=row["created_at"] or "",
            updated_at=row["updated_at"] or "",
        )

    @staticmethod
    def _row_to_ingredient(row) -> Ingredient:
        return Ingredient(
            id=row["id"],
            name=row["name"],
            amount=row["amount"],
            unit=row["unit"],
            category=IngredientCategory(row["category"]),
        )
