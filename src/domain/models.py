"""
domain.models - Value objects for the meal planner.

Write inputs, typed partial-update patches, and the derived results
(statistics, catalogue entries, summaries) returned by the query layer.
These are plain data containers with no dependencies on infrastructure.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Optional, Union

from domain.entities import IngredientCategory, MealType, ShoppingListItem


# ---------------------------------------------------------------------------
# Presence marker for partial updates
# ---------------------------------------------------------------------------

class Unset:
    """Marks a patch field as absent, distinct from an explicit None."""

    _instance: Optional[Unset] = None

    def __new__(cls) -> Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = Unset()


@dataclass(frozen=True)
class _Patch:
    """Base for patches: ``id`` plus fields that default to UNSET."""

    def changes(self) -> dict[str, Any]:
        """Return only the fields that are present, keyed by field name."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "id" and getattr(self, f.name) is not UNSET
        }


# ---------------------------------------------------------------------------
# Create inputs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NewMealPlan:
    name: str
    date: str
    meal_type: Union[MealType, str]
    recipe_ids: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class NewIngredient:
    name: str
    amount: float
    unit: str
    category: Union[IngredientCategory, str] = IngredientCategory.OTHER


@dataclass(frozen=True)
class NewRecipe:
    name: str
    ingredients: list[NewIngredient] = field(default_factory=list)
    instructions: list[str] = field(default_factory=list)
    cooking_time: int = 0
    servings: int = 0
    category: Optional[str] = None


@dataclass(frozen=True)
class NewShoppingListItem:
    ingredient_name: str
    total_amount: float
    unit: str
    category: Union[IngredientCategory, str] = IngredientCategory.OTHER
    is_checked: bool = False
    meal_plan_ids: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Patches
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MealPlanPatch(_Patch):
    id: str
    name: Union[str, Unset] = UNSET
    date: Union[str, Unset] = UNSET
    meal_type: Union[MealType, str, Unset] = UNSET
    recipe_ids: Union[list[str], Unset] = UNSET


@dataclass(frozen=True)
class RecipePatch(_Patch):
    """``ingredients``, when present, replaces the whole ingredient list."""
    id: str
    name: Union[str, Unset] = UNSET
    ingredients: Union[list[NewIngredient], Unset] = UNSET
    instructions: Union[list[str], Unset] = UNSET
    cooking_time: Union[int, Unset] = UNSET
    servings: Union[int, Unset] = UNSET
    category: Union[str, None, Unset] = UNSET


@dataclass(frozen=True)
class ShoppingListItemPatch(_Patch):
    id: str
    ingredient_name: Union[str, Unset] = UNSET
    total_amount: Union[float, Unset] = UNSET
    unit: Union[str, Unset] = UNSET
    category: Union[IngredientCategory, str, Unset] = UNSET
    is_checked: Union[bool, Unset] = UNSET
    meal_plan_ids: Union[list[str], Unset] = UNSET


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Shopping list generation
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ShoppingListGenerationOptions:
    """Which planned meals feed a generated shopping list."""
    start_date: str
    end_date: str
    meal_types: Optional[list[MealType]] = None
    consolidate_ingredients: bool = True
    replace_existing: bool = False


# ---------------------------------------------------------------------------
# Derived results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MealPlanStats:
    total: int = 0
    by_meal_type: dict[MealType, int] = field(default_factory=dict)
    unique_dates: int = 0
    total_recipes: int = 0


@dataclass(frozen=True)
class RecipeStats:
    total: int = 0
    by_category: dict[str, int] = field(default_factory=dict)
    average_cooking_time: int = 0
    total_ingredients: int = 0
    unique_ingredients: int = 0
    average_servings: float = 0.0


@dataclass(frozen=True)
class ShoppingListStats:
    total: int = 0
    checked: int = 0
    unchecked: int = 0
    by_category: dict[IngredientCategory, int] = field(default_factory=dict)
    completion_percentage: int = 0


@dataclass(frozen=True)
class IngredientSummary:
    """One entry of the cross-recipe ingredient catalogue."""
    name: str
    category: IngredientCategory
    unit: str


@dataclass(frozen=True)
class ShoppingListExportItem:
    name: str
    amount: float
    unit: str
    category: IngredientCategory
    checked: bool

    @classmethod
    def from_item(cls, item: ShoppingListItem) -> ShoppingListExportItem:
        return cls(
            name=item.ingredient_name,
            amount=item.total_amount,
            unit=item.unit,
            category=IngredientCategory(item.category),
            checked=item.is_checked,
        )


@dataclass(frozen=True)
class ShoppingListSummary:
    items: list[ShoppingListExportItem]
    stats: ShoppingListStats
    generated_at: str
