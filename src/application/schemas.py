"""Pydantic models describing valid meal planner input."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, Field, StrictBool, StringConstraints, model_validator

from domain.entities import IngredientCategory, MealType


def _check_iso_date(value: str) -> str:
    try:
        datetime.fromisoformat(value)
    except ValueError:
        raise ValueError("must be an ISO-8601 date (YYYY-MM-DD)") from None
    return value


NameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
UnitStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]
Amount = Annotated[float, Field(ge=0.001, le=10000)]
IsoDate = Annotated[str, AfterValidator(_check_iso_date)]


# --- Meal plans ---

class MealPlanInput(BaseModel):
    name: NameStr
    date: IsoDate
    meal_type: MealType
    recipe_ids: list[str]


# --- Recipes ---

class IngredientInput(BaseModel):
    name: NameStr
    amount: Amount
    unit: UnitStr
    category: IngredientCategory


class RecipeInput(BaseModel):
    name: NameStr
    ingredients: list[IngredientInput] = Field(..., min_length=1)
    instructions: list[NameStr] = Field(..., min_length=1)
    cooking_time: int = Field(..., ge=1, le=1440)
    servings: int = Field(..., ge=1, le=100)
    category: Optional[NameStr] = None


# --- Shopping list ---

class ShoppingListItemInput(BaseModel):
    ingredient_name: NameStr
    total_amount: Amount
    unit: UnitStr
    category: IngredientCategory
    is_checked: StrictBool = False
    meal_plan_ids: list[str]


# --- Search / generation ---

class DateRangeInput(BaseModel):
    start: IsoDate
    end: IsoDate

    @model_validator(mode="after")
    def _start_before_end(self) -> DateRangeInput:
        if self.start[:10] > self.end[:10]:
            raise ValueError("start date must not be after end date")
        return self


class SearchFiltersInput(BaseModel):
    query: Optional[Annotated[str, StringConstraints(max_length=255)]] = None
    meal_type: Optional[MealType] = None
    date_range: Optional[DateRangeInput] = None
    category: Optional[NameStr] = None
    ingredient_category: Optional[IngredientCategory] = None


class ShoppingListGenerationInput(BaseModel):
    start_date: IsoDate
    end_date: IsoDate
    meal_types: Optional[list[MealType]] = None
    consolidate_ingredients: StrictBool = True

    @model_validator(mode="after")
    def _start_before_end(self) -> ShoppingListGenerationInput:
        if self.start_date[:10] > self.end_date[:10]:
            raise ValueError("start date must not be after end date")
        return self
