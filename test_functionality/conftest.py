"""Shared test fixtures."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

import pytest

from domain.entities import IngredientCategory, MealType
from domain.models import NewIngredient, NewMealPlan, NewRecipe, NewShoppingListItem
from factory import ServiceFactory
from infrastructure.config import Settings


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(db_path=str(tmp_path / "meals.db"), log_level="DEBUG")


@pytest.fixture
def open_db(settings: Settings) -> Callable[[], AsyncIterator[ServiceFactory]]:
    """Async context manager yielding an initialized factory, closed afterwards."""

    @asynccontextmanager
    async def _open() -> AsyncIterator[ServiceFactory]:
        factory = ServiceFactory(settings)
        await factory.initialize_database()
        try:
            yield factory
        finally:
            await factory.close_database()

    return _open


def new_plan(
    name: str = "Plan",
    date: str = "2024-01-15",
    meal_type: MealType = MealType.BREAKFAST,
    recipe_ids: list[str] | None = None,
) -> NewMealPlan:
    return NewMealPlan(name=name, date=date, meal_type=meal_type, recipe_ids=recipe_ids or [])


def new_recipe(
    name: str = "Pancakes",
    ingredients: list[NewIngredient] | None = None,
    category: str | None = "Breakfast",
) -> NewRecipe:
    return NewRecipe(
        name=name,
        ingredients=ingredients if ingredients is not None else [
            NewIngredient("Flour", 200, "g", IngredientCategory.GRAINS),
            NewIngredient("Milk", 300, "ml", IngredientCategory.DAIRY),
            NewIngredient("Egg", 2, "pcs", IngredientCategory.OTHER),
        ],
        instructions=["Mix everything", "Fry in a pan"],
        cooking_time=20,
        servings=4,
        category=category,
    )


def new_item(
    name: str = "Tomato",
    amount: float = 3,
    unit: str = "pcs",
    category: IngredientCategory = IngredientCategory.VEGETABLES,
    is_checked: bool = False,
    meal_plan_ids: list[str] | None = None,
) -> NewShoppingListItem:
    return NewShoppingListItem(
        ingredient_name=name,
        total_amount=amount,
        unit=unit,
        category=category,
        is_checked=is_checked,
        meal_plan_ids=meal_plan_ids or [],
    )
