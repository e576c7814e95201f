"""
infrastructure.persistence.meal_plan_repo - SQLite meal plan repository.

Implements the MealPlanRepository port. Ordering always uses the fixed
breakfast < lunch < dinner slot order, never the alphabetical one.
"""

from __future__ import annotations

import logging
from typing import Optional

import aiosqlite

from domain.entities import MealPlan, MealType
from domain.exceptions import NotFoundError, RepositoryError
from domain.models import MealPlanPatch, NewMealPlan
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

_SELECT = """SELECT id, name, date, meal_type, recipe_ids, created_at, updated_at
             FROM meal_plans"""

_MEAL_TYPE_RANK = """CASE meal_type
                        WHEN 'breakfast' THEN 1
                        WHEN 'lunch' THEN 2
                        WHEN 'dinner' THEN 3
                        ELSE 4
                     END"""

_COLUMNS = {
    "name": ("name", None),
    "date": ("date", None),
    "meal_type": ("meal_type", enum_value),
    "recipe_ids": ("recipe_ids", encode_list),
}


class SQLiteMealPlanRepository:
    """Async SQLite implementation of MealPlanRepository."""

    def __init__(self, connection: AsyncSQLiteConnection):
        self._conn = connection

    async def create(self, data: NewMealPlan) -> MealPlan:
        meal_plan_id = new_id()
        now = utc_now()
        try:
            async with self._conn.acquire() as conn:
                await conn.execute(
                    """INSERT INTO meal_plans
                       (id, name, date, meal_type, recipe_ids, created_at, updated_at)
                       VALUES (?, ?, ?, ?, ?, ?, ?)""",
                    (meal_plan_id, data.name, data.date, enum_value(data.meal_type),
                     encode_list(data.recipe_ids), now, now),
                )
        except STORAGE_ERRORS as exc:
            raise RepositoryError(
                f"Failed to create meal plan: {exc}", operation="CREATE_ERROR",
            ) from exc

        logger.info("Created meal plan %s for %s (%s)", meal_plan_id, data.date,
                    enum_value(data.meal_type))
        return MealPlan(
            id=meal_plan_id,
            name=data.name,
            date=data.date,
            meal_type=MealType(data.meal_type),
            recipe_ids=list(data.recipe_ids),
            created_at=now,
            updated_at=now,
        )

    async def find_by_id(self, meal_plan_id: str) -> Optional[MealPlan]:
        try:
            async with self._conn.acquire() as conn:
                return await self._fetch(conn, meal_plan_id)
        except STORAGE_ERRORS as exc:
            raise RepositoryError(
                f"Failed to find meal plan: {exc}",
                operation="FIND_ERROR", entity_id=meal_plan_id,
            ) from exc

    async def find_all(self) -> list[MealPlan]:
        try:
            async with self._conn.acquire() as conn:
                rows = await conn.execute_fetchall(
                    f"{_SELECT} ORDER BY date DESC, {_MEAL_TYPE_RANK}"
                )
                return [self._row_to_entity(r) for r in rows]
        except STORAGE_ERRORS as exc:
            raise RepositoryError(
                f"Failed to find meal plans: {exc}", operation="FIND_ALL_ERROR",
            ) from exc

    async def find_by_date_range(self, start_date: str, end_date: str) -> list[MealPlan]:
        """Meal plans with start_date <= date <= end_date, oldest first."""
        try:
            async with self._conn.acquire() as conn:
                rows = await conn.execute_fetchall(
                    f"""{_SELECT}
                        WHERE date >= ? AND date <= ?
                        ORDER BY date ASC, {_MEAL_TYPE_RANK}""",
                    (start_date, end_date),
                )
                return [self._row_to_entity(r) for r in rows]
        except STORAGE_ERRORS as exc:
            raise RepositoryError(
                f"Failed to find meal plans by date range: {exc}",
                operation="FIND_BY_DATE_RANGE_ERROR",
            ) from exc

    async def update(self, patch: MealPlanPatch) -> MealPlan:
        """Apply the present patch fields and return the stored result."""
        try:
            async with self._conn.acquire() as conn:
                existing = await self._fetch(conn, patch.id)
                if existing is None:
                    raise NotFoundError("MealPlan", patch.id)

                assignments, params = build_assignments(patch.changes(), _COLUMNS)
                assignments.append("updated_at = ?")
                params.append(next_timestamp(existing.updated_at))
                await conn.execute(
                    f"UPDATE meal_plans SET {', '.join(assignments)} WHERE id = ?",
                    (*params, patch.id),
                )

                updated = await self._fetch(conn, patch.id)
        except STORAGE_ERRORS as exc:
            raise RepositoryError(
                f"Failed to update meal plan: {exc}",
                operation="UPDATE_ERROR", entity_id=patch.id,
            ) from exc

        if updated is None:
            raise RepositoryError(
                "Failed to retrieve updated meal plan",
                operation="UPDATE_ERROR", entity_id=patch.id,
            )
        return updated

    async def delete(self, meal_plan_id: str) -> bool:
        """Delete one meal plan. Recipes it references are left untouched."""
        try:
            async with self._conn.acquire() as conn:
                if await self._fetch(conn, meal_plan_id) is None:
                    raise NotFoundError("MealPlan", meal_plan_id)
                cursor = await conn.execute(
                    "DELETE FROM meal_plans WHERE id = ?", (meal_plan_id,),
                )
                deleted = cursor.rowcount > 0
        except STORAGE_ERRORS as exc:
            raise RepositoryError(
                f"Failed to delete meal plan: {exc}",
                operation="DELETE_ERROR", entity_id=meal_plan_id,
            ) from exc

        logger.info("Deleted meal plan %s", meal_plan_id)
        return deleted

    async def _fetch(self, conn: aiosqlite.Connection, meal_plan_id: str) -> Optional[MealPlan]:
        rows = await conn.execute_fetchall(f"{_SELECT} WHERE id = ?", (meal_plan_id,))
        return self._row_to_entity(rows[0]) if rows else None

    @staticmethod
    def _row_to_entity(row) -> MealPlan:
        return MealPlan(
            id=row["id"],
            name=row["name"],
            date=row["date"],
            meal_type=MealType(row["meal_type"]),
            recipe_ids=decode_list(row["recipe_ids"]),
            created_at=row["created_at"] or "",
            updated_at=row["updated_at"] or "",
        )
