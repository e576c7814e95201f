"""
application.validation - Field-level validation in front of the repositories.

Each validate_* function accepts a mapping or a dataclass (entity, create
input or merged patch) and returns a ValidationResult listing every
violation; validate_and_raise() turns a failed result into a
ValidationError. The storage CHECK constraints stay as the second line of
defense when this layer is skipped.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Callable, Mapping

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from application.schemas import (
    IngredientInput,
    MealPlanInput,
    RecipeInput,
    SearchFiltersInput,
    ShoppingListGenerationInput,
    ShoppingListItemInput,
)
from domain.exceptions import ValidationError
from domain.models import ValidationResult


def _as_data(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if isinstance(obj, Mapping):
        return dict(obj)
    return obj


def _format_error(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    message = error.get("msg", "invalid value")
    return f"{location}: {message}" if location else message


def _validate(model: type[BaseModel], obj: Any) -> ValidationResult:
    try:
        model.model_validate(_as_data(obj))
    except PydanticValidationError as exc:
        return ValidationResult(
            is_valid=False,
            errors=[_format_error(err) for err in exc.errors()],
        )
    return ValidationResult(is_valid=True)


def validate_meal_plan(meal_plan: Any) -> ValidationResult:
    return _validate(MealPlanInput, meal_plan)


def validate_recipe(recipe: Any) -> ValidationResult:
    return _validate(RecipeInput, recipe)


def validate_ingredient(ingredient: Any) -> ValidationResult:
    return _validate(IngredientInput, ingredient)


def validate_shopping_list_item(item: Any) -> ValidationResult:
    return _validate(ShoppingListItemInput, item)


def validate_search_filters(filters: Any) -> ValidationResult:
    return _validate(SearchFiltersInput, filters)


def validate_generation_options(options: Any) -> ValidationResult:
    return _validate(ShoppingListGenerationInput, options)


def validate_and_raise(
    data: Any,
    validator: Callable[[Any], ValidationResult],
    entity_name: str,
) -> None:
    """Raise ValidationError when ``validator`` rejects ``data``."""
    result = validator(data)
    if not result.is_valid:
        raise ValidationError(
            f"{entity_name} validation failed: {', '.join(result.errors)}",
            field=entity_name,
            errors=result.errors,
        )
