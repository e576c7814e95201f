"""
factory - Composition root for the meal planner.

ALL dependency wiring happens here. No other module constructs its own
dependencies. Callers get fully configured repositories and services from
this factory; every one of them shares the factory's single connection.

Usage:
    from factory import ServiceFactory
    from infrastructure.config import Settings

    factory = ServiceFactory(Settings.from_env())
    await factory.initialize_database()  # one-time startup

    plans = factory.create_meal_plan_service()
    plan = await plans.create(NewMealPlan(...))

    await factory.close_database()
"""

from __future__ import annotations

import logging
from typing import Optional

import aiosqlite

from application.services.meal_plans import MealPlanService
from application.services.recipes import RecipeService
from application.services.shopping_list import ShoppingListService
from infrastructure.config import Settings
from infrastructure.logging_config import configure_logging
from infrastructure.persistence.connection import AsyncSQLiteConnection
from infrastructure.persistence.meal_plan_repo import SQLiteMealPlanRepository
from infrastructure.persistence.migrations import SchemaManager
from infrastructure.persistence.recipe_repo import SQLiteRecipeRepository
from infrastructure.persistence.shopping_list_repo import SQLiteShoppingListRepository

logger = logging.getLogger(__name__)


class ServiceFactory:
    """Composition root: owns the connection and wires repositories/services.

    Call initialize_database() once at startup and close_database() at
    shutdown. Repositories created before initialization fail with
    NotInitializedError on first use.
    """

    def __init__(self, config: Optional[Settings] = None):
        self._config = config or Settings()
        self._connection = AsyncSQLiteConnection(
            self._config.db_path, foreign_keys=self._config.foreign_keys,
        )
        self._schema = SchemaManager(self._connection)

    @classmethod
    def from_env(cls) -> ServiceFactory:
        """Build a factory from the environment and configure logging."""
        config = Settings.from_env()
        configure_logging(config.log_level)
        return cls(config)

    @property
    def config(self) -> Settings:
        return self._config

    @property
    def schema(self) -> SchemaManager:
        return self._schema

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize_database(self) -> None:
        """Open the database and create the schema. Idempotent."""
        logger.info("Initializing database at %s", self._config.db_path)
        await self._schema.initialize()

    async def close_database(self) -> None:
        await self._schema.close()

    async def reset_database(self) -> None:
        """Drop and recreate every table. All data is lost."""
        await self._schema.reset()

    async def check_database_health(self) -> bool:
        return await self._schema.health_check()

    def get_handle(self) -> aiosqlite.Connection:
        return self._schema.get_handle()

    # ------------------------------------------------------------------
    # Repositories
    # ------------------------------------------------------------------

    def create_meal_plan_repository(self) -> SQLiteMealPlanRepository:
        return SQLiteMealPlanRepository(self._connection)

    def create_recipe_repository(self) -> SQLiteRecipeRepository:
        return SQLiteRecipeRepository(self._connection)

    def create_shopping_list_repository(self) -> SQLiteShoppingListRepository:
        return SQLiteShoppingListRepository(self._connection)

    # ------------------------------------------------------------------
    # Services
    # ------------------------------------------------------------------

    def create_meal_plan_service(self) -> MealPlanService:
        return MealPlanService(meal_plan_repo=self.create_meal_plan_repository())

    def create_recipe_service(self) -> RecipeService:
        return RecipeService(recipe_repo=self.create_recipe_repository())

    def create_shopping_list_service(self) -> ShoppingListService:
        """Create a ShoppingListService able to generate lists from meal plans."""
        return ShoppingListService(
            shopping_repo=self.create_shopping_list_repository(),
            meal_plan_repo=self.create_meal_plan_repository(),
            recipe_repo=self.create_recipe_repository(),
        )
