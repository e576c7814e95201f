"""
domain.entities - Persistence-aware types (have IDs, timestamps).

No SQL concerns, no DB imports. Array-valued fields are plain lists here;
JSON encoding is the repositories' job.

Timestamps are set by the repository implementations, not by the entities
themselves.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class MealType(str, Enum):
    """Meal slot of a plan. Sorted by MEAL_TYPE_ORDER, not alphabetically."""
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"


class IngredientCategory(str, Enum):
    """Closed category set shared by ingredients and shopping-list items."""
    VEGETABLES = "vegetables"
    MEAT = "meat"
    DAIRY = "dairy"
    GRAINS = "grains"
    SPICES = "spices"
    OTHER = "other"


MEAL_TYPE_ORDER: dict[MealType, int] = {
    MealType.BREAKFAST: 1,
    MealType.LUNCH: 2,
    MealType.DINNER: 3,
}

# Aisle order used when walking the shop.
CATEGORY_PRIORITY: dict[IngredientCategory, int] = {
    IngredientCategory.VEGETABLES: 1,
    IngredientCategory.MEAT: 2,
    IngredientCategory.DAIRY: 3,
    IngredientCategory.GRAINS: 4,
    IngredientCategory.SPICES: 5,
    IngredientCategory.OTHER: 6,
}


@dataclass
class MealPlan:
    """A named assignment of recipes to a date and meal slot."""
    id: str = ""
    name: str = ""
    date: str = ""  # YYYY-MM-DD
    meal_type: MealType = MealType.BREAKFAST
    recipe_ids: list[str] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""


@dataclass
class Ingredient:
    """Quantified component of exactly one recipe."""
    id: str = ""
    name: str = ""
    amount: float = 0.0
    unit: str = ""
    category: IngredientCategory = IngredientCategory.OTHER


@dataclass
class Recipe:
    """Recipe with its owned ingredient list, in insertion order."""
    id: str = ""
    name: str = ""
    ingredients: list[Ingredient] = field(default_factory=list)
    instructions: list[str] = field(default_factory=list)
    cooking_time: int = 0  # minutes
    servings: int = 0
    category: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""


@dataclass
class ShoppingListItem:
    """Aggregated purchase need, referencing the meal plans it came from."""
    id: str = ""
    ingredient_name: str = ""
    total_amount: float = 0.0
    unit: str = ""
    category: IngredientCategory = IngredientCategory.OTHER
    is_checked: bool = False
    meal_plan_ids: list[str] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""
