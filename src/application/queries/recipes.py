"""
application.queries.recipes - Derivations over loaded recipes.

Pure functions over already hydrated Recipe entities (ingredients included).
Name ordering is case-insensitive, locale style (common.name_key).
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta, timezone
from typing import Optional

from application.queries.common import name_key, round_half_up
from domain.entities import IngredientCategory, Recipe
from domain.models import IngredientSummary, RecipeStats

QUICK_RECIPE_MINUTES = 30
LARGE_GROUP_SERVINGS = 6
RECENT_DAYS = 7
UNCATEGORIZED = "Uncategorized"


def find_by_id(recipes: Sequence[Recipe], recipe_id: str) -> Optional[Recipe]:
    return next((r for r in recipes if r.id == recipe_id), None)


def filter_by_ids(recipes: Sequence[Recipe], recipe_ids: Iterable[str]) -> list[Recipe]:
    wanted = set(recipe_ids)
    return [r for r in recipes if r.id in wanted]


def filter_by_category(recipes: Sequence[Recipe], category: str) -> list[Recipe]:
    return [r for r in recipes if r.category == category]


def filter_by_ingredient(recipes: Sequence[Recipe], ingredient_name: str) -> list[Recipe]:
    needle = ingredient_name.lower()
    return [r for r in recipes if any(needle in i.name.lower() for i in r.ingredients)]


def filter_by_ingredient_category(
    recipes: Sequence[Recipe], category: IngredientCategory | str,
) -> list[Recipe]:
    wanted = IngredientCategory(category)
    return [
        r for r in recipes
        if any(IngredientCategory(i.category) is wanted for i in r.ingredients)
    ]


def filter_by_max_cooking_time(recipes: Sequence[Recipe], max_minutes: int) -> list[Recipe]:
    return [r for r in recipes if r.cooking_time <= max_minutes]


def filter_by_servings(recipes: Sequence[Recipe], servings: int) -> list[Recipe]:
    return [r for r in recipes if r.servings == servings]


def quick(recipes: Sequence[Recipe]) -> list[Recipe]:
    return filter_by_max_cooking_time(recipes, QUICK_RECIPE_MINUTES)


def large_group(recipes: Sequence[Recipe]) -> list[Recipe]:
    return [r for r in recipes if r.servings >= LARGE_GROUP_SERVINGS]


def _instant(value: str) -> datetime:
    moment = datetime.fromisoformat(value)
    return moment if moment.tzinfo else moment.replace(tzinfo=timezone.utc)


def recent(recipes: Sequence[Recipe], now: Optional[str] = None) -> list[Recipe]:
    """Recipes created at or after ``now`` minus RECENT_DAYS days.

    Full timestamps are compared; naive values (including a bare date for
    ``now``) are taken as UTC.
    """
    current = _instant(now) if now else datetime.now(timezone.utc)
    cutoff = current - timedelta(days=RECENT_DAYS)
    return [r for r in recipes if r.created_at and _instant(r.created_at) >= cutoff]


def search(recipes: Sequence[Recipe], term: str) -> list[Recipe]:
    """Match name, ingredient names or instruction text, case-insensitively.

    A blank term returns every recipe, in order.
    """
    if not term.strip():
        return list(recipes)
    needle = term.lower()
    return [
        r for r in recipes
        if needle in r.name.lower()
        or any(needle in i.name.lower() for i in r.ingredients)
        or any(needle in step.lower() for step in r.instructions)
    ]


def with_all_ingredients(recipes: Sequence[Recipe], ingredient_names: Sequence[str]) -> list[Recipe]:
    """Recipes containing every given ingredient (substring match)."""
    if not ingredient_names:
        return list(recipes)
    needles = [name.lower() for name in ingredient_names]
    return [
        r for r in recipes
        if all(any(n in i.name.lower() for i in r.ingredients) for n in needles)
    ]


def exists_by_name(recipes: Sequence[Recipe], name: str) -> bool:
    wanted = name.lower()
    return any(r.name.lower() == wanted for r in recipes)


def sorted_by_name(recipes: Sequence[Recipe]) -> list[Recipe]:
    return sorted(recipes, key=lambda r: name_key(r.name))


def sorted_by_cooking_time(recipes: Sequence[Recipe]) -> list[Recipe]:
    return sorted(recipes, key=lambda r: r.cooking_time)


def sorted_by_newest(recipes: Sequence[Recipe]) -> list[Recipe]:
    return sorted(recipes, key=lambda r: r.created_at, reverse=True)


def ingredient_catalogue(recipes: Sequence[Recipe]) -> list[IngredientSummary]:
    """Distinct ingredients across recipes; the first spelling seen wins."""
    catalogue: dict[str, IngredientSummary] = {}
    for recipe in recipes:
        for ingredient in recipe.ingredients:
            key = ingredient.name.lower()
            if key not in catalogue:
                catalogue[key] = IngredientSummary(
                    name=ingredient.name,
                    category=IngredientCategory(ingredient.category),
                    unit=ingredient.unit,
                )
    return sorted(catalogue.values(), key=lambda s: name_key(s.name))


def ingredients_by_category(
    recipes: Sequence[Recipe],
) -> dict[IngredientCategory, list[IngredientSummary]]:
    """Catalogue grouped into all six categories, empty ones included."""
    grouped: dict[IngredientCategory, list[IngredientSummary]] = {
        category: [] for category in IngredientCategory
    }
    for summary in ingredient_catalogue(recipes):
        grouped[summary.category].append(summary)
    return grouped


def compute_stats(recipes: Sequence[Recipe]) -> RecipeStats:
    if not recipes:
        return RecipeStats()

    by_category: dict[str, int] = {}
    unique_ingredients: set[str] = set()
    total_ingredients = 0
    for recipe in recipes:
        category = recipe.category or UNCATEGORIZED
        by_category[category] = by_category.get(category, 0) + 1
        total_ingredients += len(recipe.ingredients)
        unique_ingredients.update(i.name.lower() for i in recipe.ingredients)

    count = len(recipes)
    return RecipeStats(
        total=count,
        by_category=by_category,
        average_cooking_time=int(round_half_up(sum(r.cooking_time for r in recipes) / count)),
        total_ingredients=total_ingredients,
        unique_ingredients=len(unique_ingredients),
        average_servings=round_half_up(sum(r.servings for r in recipes) / count, 1),
    )
