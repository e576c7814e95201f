"""
application.services.shopping_list - Shopping list writes and generation.

generate() turns the meal plans of a date range into shopping list items:
every ingredient of every planned recipe contributes, and with
consolidation enabled ingredients sharing a (case-insensitive) name and a
unit are summed into a single item.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Optional

from application.queries.common import round_half_up
from application.queries.shopping_list import sorted_by_category_and_name
from application.validation import (
    validate_and_raise,
    validate_generation_options,
    validate_shopping_list_item,
)
from domain.entities import IngredientCategory, MealPlan, MealType, Recipe, ShoppingListItem
from domain.exceptions import NotFoundError
from domain.models import (
    NewShoppingListItem,
    ShoppingListGenerationOptions,
    ShoppingListItemPatch,
)
from domain.ports import MealPlanRepository, RecipeRepository, ShoppingListRepository

logger = logging.getLogger(__name__)

AMOUNT_DIGITS = 3


@dataclasses.dataclass
class _Line:
    """Accumulator for one shopping list entry during generation."""
    name: str
    amount: float
    unit: str
    category: IngredientCategory
    meal_plan_ids: list[str]

    def add(self, amount: float, meal_plan_id: str) -> None:
        self.amount += amount
        if meal_plan_id not in self.meal_plan_ids:
            self.meal_plan_ids.append(meal_plan_id)


class ShoppingListService:
    """Validated shopping list operations plus generation from meal plans."""

    def __init__(
        self,
        shopping_repo: ShoppingListRepository,
        meal_plan_repo: MealPlanRepository,
        recipe_repo: RecipeRepository,
    ):
        self._repo = shopping_repo
        self._meal_plan_repo = meal_plan_repo
        self._recipe_repo = recipe_repo

    async def add_item(self, data: NewShoppingListItem) -> ShoppingListItem:
        validate_and_raise(data, validate_shopping_list_item, "ShoppingListItem")
        item = await self._repo.create(data)
        logger.info("Added '%s' to the shopping list", item.ingredient_name)
        return item

    async def list_all(self) -> list[ShoppingListItem]:
        return await self._repo.find_all()

    async def list_unchecked(self) -> list[ShoppingListItem]:
        return await self._repo.find_unchecked()

    async def update_item(self, patch: ShoppingListItemPatch) -> ShoppingListItem:
        existing = await self._repo.find_by_id(patch.id)
        if existing is None:
            raise NotFoundError("ShoppingListItem", patch.id)
        validate_and_raise(
            dataclasses.replace(existing, **patch.changes()),
            validate_shopping_list_item,
            "ShoppingListItem",
        )
        item = await self._repo.update(patch)
        logger.info("Updated shopping list item %s", item.id)
        return item

    async def toggle(self, item_id: str) -> ShoppingListItem:
        return await self._repo.toggle_checked(item_id)

    async def remove_item(self, item_id: str) -> bool:
        return await self._repo.delete(item_id)

    async def clear_checked(self) -> int:
        return await self._repo.clear_checked_items()

    async def generate(self, options: ShoppingListGenerationOptions) -> list[ShoppingListItem]:
        """Build and store the shopping list for the planned meals in range."""
        validate_and_raise(options, validate_generation_options, "ShoppingListGenerationOptions")

        plans = await self._meal_plan_repo.find_by_date_range(
            options.start_date, options.end_date,
        )
        if options.meal_types:
            wanted = {MealType(m) for m in options.meal_types}
            plans = [p for p in plans if MealType(p.meal_type) in wanted]

        lines = self._collect(plans, await self._load_recipes(plans), options.consolidate_ingredients)
        new_items = [
            NewShoppingListItem(
                ingredient_name=line.name,
                total_amount=round_half_up(line.amount, AMOUNT_DIGITS),
                unit=line.unit,
                category=line.category,
                is_checked=False,
                meal_plan_ids=line.meal_plan_ids,
            )
            for line in lines
        ]
        # Summed amounts can exceed the item limit; nothing is written then.
        for data in new_items:
            validate_and_raise(data, validate_shopping_list_item, "ShoppingListItem")

        if options.replace_existing:
            await self._repo.delete_all()

        created = [await self._repo.create(data) for data in new_items]
        logger.info(
            "Generated %d shopping list items from %d meal plans (%s to %s)",
            len(created), len(plans), options.start_date, options.end_date,
        )
        return sorted_by_category_and_name(created)

    # ------------------------------------------------------------------
    # Generation helpers
    # ------------------------------------------------------------------

    async def _load_recipes(self, plans: list[MealPlan]) -> dict[str, Recipe]:
        """Fetch each referenced recipe once; dangling ids are left out."""
        recipes: dict[str, Recipe] = {}
        missing: set[str] = set()
        for plan in plans:
            for recipe_id in plan.recipe_ids:
                if recipe_id in recipes or recipe_id in missing:
                    continue
                recipe = await self._recipe_repo.find_by_id(recipe_id)
                if recipe is None:
                    logger.warning("Meal plan %s references missing recipe %s", plan.id, recipe_id)
                    missing.add(recipe_id)
                else:
                    recipes[recipe_id] = recipe
        return recipes

    @staticmethod
    def _collect(
        plans: list[MealPlan], recipes: dict[str, Recipe], consolidate: bool,
    ) -> list[_Line]:
        lines: list[_Line] = []
        merged: dict[tuple[str, str], _Line] = {}
        for plan in plans:
            for recipe_id in plan.recipe_ids:
                recipe: Optional[Recipe] = recipes.get(recipe_id)
                if recipe is None:
                    continue
                for ingredient in recipe.ingredients:
                    key = (ingredient.name.strip().lower(), ingredient.unit)
                    if consolidate and key in merged:
                        merged[key].add(ingredient.amount, plan.id)
                        continue
                    line = _Line(
                        name=ingredient.name,
                        amount=ingredient.amount,
                        unit=ingredient.unit,
                        category=IngredientCategory(ingredient.category),
                        meal_plan_ids=[plan.id],
                    )
                    lines.append(line)
                    merged.setdefault(key, line)
        return lines
