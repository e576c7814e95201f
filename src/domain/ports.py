"""
domain.ports - Abstract interfaces (Protocols) for the persistence boundary.

These define WHAT the system needs without specifying HOW. The SQLite
repositories in infrastructure.persistence provide the implementations;
application services depend only on these protocols.

Contract shared by every repository:
    - every method is a coroutine;
    - single lookups return None for absence, plural lookups return [];
    - update/delete/toggle on a missing id raise NotFoundError;
    - engine failures surface as RepositoryError with an operation tag.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from domain.entities import (
    Ingredient,
    IngredientCategory,
    MealPlan,
    Recipe,
    ShoppingListItem,
)
from domain.models import (
    MealPlanPatch,
    NewMealPlan,
    NewRecipe,
    NewShoppingListItem,
    RecipePatch,
    ShoppingListItemPatch,
)


@runtime_checkable
class MealPlanRepository(Protocol):
    """CRUD operations for MealPlan entities."""

    async def create(self, data: NewMealPlan) -> MealPlan: ...
    async def find_by_id(self, meal_plan_id: str) -> Optional[MealPlan]: ...
    async def find_all(self) -> list[MealPlan]: ...
    async def find_by_date_range(self, start_date: str, end_date: str) -> list[MealPlan]: ...
    async def update(self, patch: MealPlanPatch) -> MealPlan: ...
    async def delete(self, meal_plan_id: str) -> bool: ...


@runtime_checkable
class RecipeRepository(Protocol):
    """CRUD operations for Recipe entities and their owned ingredients."""

    async def create(self, data: NewRecipe) -> Recipe: ...
    async def find_by_id(self, recipe_id: str) -> Optional[Recipe]: ...
    async def find_all(self) -> list[Recipe]: ...
    async def find_by_category(self, category: str) -> list[Recipe]: ...
    async def find_ingredient_by_id(self, ingredient_id: str) -> Optional[Ingredient]: ...
    async def update(self, patch: RecipePatch) -> Recipe: ...
    async def delete(self, recipe_id: str) -> bool: ...


@runtime_checkable
class ShoppingListRepository(Protocol):
    """CRUD operations for ShoppingListItem entities."""

    async def create(self, data: NewShoppingListItem) -> ShoppingListItem: ...
    async def find_by_id(self, item_id: str) -> Optional[ShoppingListItem]: ...
    async def find_all(self) -> list[ShoppingListItem]: ...
    async def find_by_category(self, category: IngredientCategory | str) -> list[ShoppingListItem]: ...
    async def find_unchecked(self) -> list[ShoppingListItem]: ...
    async def update(self, patch: ShoppingListItemPatch) -> ShoppingListItem: ...
    async def delete(self, item_id: str) -> bool: ...
    async def toggle_checked(self, item_id: str) -> ShoppingListItem: ...
    async def clear_checked_items(self) -> int: ...
    async def delete_all(self) -> int: ...
