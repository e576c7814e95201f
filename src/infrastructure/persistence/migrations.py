"""
infrastructure.persistence.migrations - Database schema creation.

Additive only: every statement is CREATE ... IF NOT EXISTS, so running the
migrations on every start is safe. SchemaManager wraps the connection
lifecycle (initialize / close / get_handle / health_check / reset).
"""

from __future__ import annotations

import logging

import aiosqlite

from domain.exceptions import (
    InitializationError,
    NotInitializedError,
    RepositoryError,
    ShutdownError,
)
from infrastructure.persistence.codecs import STORAGE_ERRORS
from infrastructure.persistence.connection import AsyncSQLiteConnection

logger = logging.getLogger(__name__)

_CATEGORY_CHECK = "('vegetables', 'meat', 'dairy', 'grains', 'spices', 'other')"

_TABLES = [
    """CREATE TABLE IF NOT EXISTS meal_plans (
        id TEXT PRIMARY KEY NOT NULL,
        name TEXT NOT NULL,
        date TEXT NOT NULL,
        meal_type TEXT NOT NULL CHECK (meal_type IN ('breakfast', 'lunch', 'dinner')),
        recipe_ids TEXT NOT NULL DEFAULT '[]',
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )""",
    """CREATE TABLE IF NOT EXISTS recipes (
        id TEXT PRIMARY KEY NOT NULL,
        name TEXT NOT NULL,
        instructions TEXT NOT NULL DEFAULT '[]',
        cooking_time INTEGER NOT NULL,
        servings INTEGER NOT NULL,
        category TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )""",
    f"""CREATE TABLE IF NOT EXISTS ingredients (
        id TEXT PRIMARY KEY NOT NULL,
        recipe_id TEXT NOT NULL,
        name TEXT NOT NULL,
        amount REAL NOT NULL,
        unit TEXT NOT NULL,
        category TEXT NOT NULL CHECK (category IN {_CATEGORY_CHECK}),
        FOREIGN KEY (recipe_id) REFERENCES recipes(id) ON DELETE CASCADE
    )""",
    f"""CREATE TABLE IF NOT EXISTS shopping_list_items (
        id TEXT PRIMARY KEY NOT NULL,
        ingredient_name TEXT NOT NULL,
        total_amount REAL NOT NULL,
        unit TEXT NOT NULL,
        category TEXT NOT NULL CHECK (category IN {_CATEGORY_CHECK}),
        is_checked INTEGER NOT NULL DEFAULT 0 CHECK (is_checked IN (0, 1)),
        meal_plan_ids TEXT NOT NULL DEFAULT '[]',
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )""",
]

_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_meal_plans_date ON meal_plans(date)",
    "CREATE INDEX IF NOT EXISTS idx_meal_plans_meal_type ON meal_plans(meal_type)",
    "CREATE INDEX IF NOT EXISTS idx_meal_plans_date_meal_type ON meal_plans(date, meal_type)",
    "CREATE INDEX IF NOT EXISTS idx_recipes_name ON recipes(name)",
    "CREATE INDEX IF NOT EXISTS idx_recipes_category ON recipes(category)",
    "CREATE INDEX IF NOT EXISTS idx_ingredients_recipe_id ON ingredients(recipe_id)",
    "CREATE INDEX IF NOT EXISTS idx_ingredients_name ON ingredients(name)",
    "CREATE INDEX IF NOT EXISTS idx_ingredients_category ON ingredients(category)",
    "CREATE INDEX IF NOT EXISTS idx_shopping_list_items_category ON shopping_list_items(category)",
    "CREATE INDEX IF NOT EXISTS idx_shopping_list_items_is_checked ON shopping_list_items(is_checked)",
]

REQUIRED_TABLES = ("meal_plans", "recipes", "ingredients", "shopping_list_items")

# Children before parents.
_DROP_ORDER = ("shopping_list_items", "ingredients", "recipes", "meal_plans")


async def run_migrations(conn: aiosqlite.Connection) -> None:
    """Create all tables and indexes if they don't exist.

    Safe to call multiple times (uses IF NOT EXISTS).
    """
    for ddl in _TABLES:
        await conn.execute(ddl)
    for ddl in _INDEXES:
        await conn.execute(ddl)


async def list_tables(conn: aiosqlite.Connection) -> set[str]:
    rows = await conn.execute_fetchall(
        "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%'"
    )
    return {row[0] for row in rows}


class SchemaManager:
    """Creates, verifies and tears down the meal planner schema."""

    def __init__(self, connection: AsyncSQLiteConnection):
        self._connection = connection

    @property
    def connection(self) -> AsyncSQLiteConnection:
        return self._connection

    async def initialize(self) -> None:
        """Open the store and create tables/indexes. Idempotent."""
        try:
            await self._connection.open()
            async with self._connection.acquire() as conn:
                await run_migrations(conn)
        except (*STORAGE_ERRORS, OSError) as exc:
            logger.error("Database initialization failed: %s", exc)
            raise InitializationError(f"Database initialization failed: {exc}") from exc
        logger.info("All tables created (or already exist).")

    async def close(self) -> None:
        """Release the connection. No-op when already closed."""
        try:
            await self._connection.close()
        except (*STORAGE_ERRORS, OSError) as exc:
            logger.error("Database close failed: %s", exc)
            raise ShutdownError(f"Database close failed: {exc}") from exc

    def get_handle(self) -> aiosqlite.Connection:
        return self._connection.handle

    async def health_check(self) -> bool:
        """True when all required tables exist. Diagnostic only, never raises."""
        try:
            async with self._connection.acquire() as conn:
                existing = await list_tables(conn)
        except NotInitializedError:
            logger.warning("Database health check failed: database not initialized")
            return False
        except STORAGE_ERRORS as exc:
            logger.warning("Database health check failed: %s", exc)
            return False

        missing = [name for name in REQUIRED_TABLES if name not in existing]
        if missing:
            logger.warning("Missing database tables: %s", missing)
            return False
        logger.info("Database health check passed")
        return True

    async def reset(self) -> None:
        """Drop every table and recreate the schema. Deletes all data."""
        try:
            async with self._connection.acquire() as conn:
                await conn.execute("BEGIN")
                for table in _DROP_ORDER:
                    await conn.execute(f"DROP TABLE IF EXISTS {table}")
                await run_migrations(conn)
        except STORAGE_ERRORS as exc:
            logger.error("Database reset failed: %s", exc)
            raise RepositoryError(
                f"Database reset failed: {exc}", operation="RESET_ERROR"
            ) from exc
        logger.warning("Database reset: all tables dropped and recreated")
