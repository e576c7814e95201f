"""Tests for the validated services and shopping list generation."""

import asyncio

import pytest

from domain.entities import IngredientCategory, MealType
from domain.exceptions import NotFoundError, ValidationError
from domain.models import (
    MealPlanPatch,
    NewIngredient,
    NewMealPlan,
    RecipePatch,
    ShoppingListGenerationOptions,
    ShoppingListItemPatch,
)
from conftest import new_item, new_plan, new_recipe


def test_meal_plan_service_rejects_invalid_input_before_storage(open_db) -> None:
    async def scenario() -> list:
        async with open_db() as factory:
            service = factory.create_meal_plan_service()
            with pytest.raises(ValidationError):
                await service.create(NewMealPlan(name="", date="2024-01-15", meal_type="dinner"))
            return await service.list_all()

    assert asyncio.run(scenario()) == []


def test_meal_plan_service_validates_merged_update(open_db) -> None:
    async def scenario() -> str:
        async with open_db() as factory:
            service = factory.create_meal_plan_service()
            plan = await service.create(new_plan(name="Dinner"))
            with pytest.raises(ValidationError):
                await service.update(MealPlanPatch(id=plan.id, date="not a date"))
            updated = await service.update(MealPlanPatch(id=plan.id, meal_type=MealType.LUNCH))
            assert updated.meal_type is MealType.LUNCH
            return (await service.get(plan.id)).date

    assert asyncio.run(scenario()) == "2024-01-15"


def test_service_update_of_missing_entity_raises_not_found(open_db) -> None:
    async def scenario() -> None:
        async with open_db() as factory:
            await factory.create_recipe_service().update(RecipePatch(id="missing", servings=2))

    with pytest.raises(NotFoundError):
        asyncio.run(scenario())


def test_recipe_service_checks_replacement_ingredients(open_db) -> None:
    async def scenario() -> int:
        async with open_db() as factory:
            service = factory.create_recipe_service()
            recipe = await service.create(new_recipe())
            with pytest.raises(ValidationError):
                await service.update(RecipePatch(id=recipe.id, ingredients=[]))
            return len((await service.get(recipe.id)).ingredients)

    assert asyncio.run(scenario()) == 3


def test_shopping_list_service_item_lifecycle(open_db) -> None:
    async def scenario() -> tuple[bool, int, list]:
        async with open_db() as factory:
            service = factory.create_shopping_list_service()
            item = await service.add_item(new_item())
            with pytest.raises(ValidationError):
                await service.update_item(ShoppingListItemPatch(id=item.id, total_amount=0))
            toggled = await service.toggle(item.id)
            cleared = await service.clear_checked()
            return toggled.is_checked, cleared, await service.list_all()

    checked, cleared, remaining = asyncio.run(scenario())

    assert checked is True
    assert cleared == 1
    assert remaining == []


def _seed(factory):
    async def seed() -> dict[str, str]:
        recipes = factory.create_recipe_repository()
        plans = factory.create_meal_plan_repository()
        salad = await recipes.create(new_recipe(name="Salad", ingredients=[
            NewIngredient("Tomato", 2, "pcs", IngredientCategory.VEGETABLES),
            NewIngredient("Feta", 100, "g", IngredientCategory.DAIRY),
        ]))
        sauce = await recipes.create(new_recipe(name="Sauce", ingredients=[
            NewIngredient("tomato", 0.5, "pcs", IngredientCategory.VEGETABLES),
            NewIngredient("Tomato", 200, "g", IngredientCategory.VEGETABLES),
        ]))
        lunch = await plans.create(new_plan(
            name="Lunch", date="2024-01-15", meal_type=MealType.LUNCH,
            recipe_ids=[salad.id, "deleted-recipe"],
        ))
        dinner = await plans.create(new_plan(
            name="Dinner", date="2024-01-16", meal_type=MealType.DINNER,
            recipe_ids=[sauce.id, salad.id],
        ))
        await plans.create(new_plan(
            name="Later", date="2024-02-01", meal_type=MealType.DINNER, recipe_ids=[salad.id],
        ))
        return {"lunch": lunch.id, "dinner": dinner.id}

    return seed()


def test_generate_consolidates_by_name_and_unit(open_db) -> None:
    async def scenario():
        async with open_db() as factory:
            ids = await _seed(factory)
            items = await factory.create_shopping_list_service().generate(
                ShoppingListGenerationOptions("2024-01-15", "2024-01-20"),
            )
            stored = await factory.create_shopping_list_repository().find_all()
            return ids, items, stored

    ids, items, stored = asyncio.run(scenario())

    summary = [(i.ingredient_name, i.total_amount, i.unit) for i in items]
    assert summary == [
        ("Feta", 200, "g"),
        ("Tomato", 4.5, "pcs"),
        ("Tomato", 200, "g"),
    ]
    tomatoes = next(i for i in items if i.unit == "pcs")
    assert tomatoes.meal_plan_ids == [ids["lunch"], ids["dinner"]]
    assert tomatoes.category is IngredientCategory.VEGETABLES
    assert all(not i.is_checked for i in items)
    assert {i.id for i in stored} == {i.id for i in items}


def test_generate_without_consolidation_keeps_each_occurrence(open_db) -> None:
    async def scenario() -> int:
        async with open_db() as factory:
            await _seed(factory)
            items = await factory.create_shopping_list_service().generate(
                ShoppingListGenerationOptions(
                    "2024-01-15", "2024-01-20", consolidate_ingredients=False,
                ),
            )
            return len(items)

    assert asyncio.run(scenario()) == 6


def test_generate_filters_meal_types_and_replaces_existing(open_db) -> None:
    async def scenario():
        async with open_db() as factory:
            await _seed(factory)
            service = factory.create_shopping_list_service()
            await service.add_item(new_item("Bread", category=IngredientCategory.GRAINS))
            items = await service.generate(ShoppingListGenerationOptions(
                "2024-01-01", "2024-12-31",
                meal_types=[MealType.LUNCH],
                replace_existing=True,
            ))
            return items, await service.list_all()

    items, stored = asyncio.run(scenario())

    assert [(i.ingredient_name, i.total_amount) for i in items] == [("Feta", 100), ("Tomato", 2)]
    assert [i.ingredient_name for i in stored] == ["Feta", "Tomato"]


def test_generate_rejects_oversized_total_before_replacing(open_db) -> None:
    async def scenario():
        async with open_db() as factory:
            recipe = await factory.create_recipe_repository().create(new_recipe(
                name="Bread", ingredients=[
                    NewIngredient("Flour", 6000, "g", IngredientCategory.GRAINS),
                ],
            ))
            plans = factory.create_meal_plan_repository()
            for date in ("2024-01-15", "2024-01-16"):
                await plans.create(new_plan(name="Bake", date=date, recipe_ids=[recipe.id]))
            service = factory.create_shopping_list_service()
            await service.add_item(new_item("Milk", category=IngredientCategory.DAIRY))
            with pytest.raises(ValidationError):
                await service.generate(ShoppingListGenerationOptions(
                    "2024-01-15", "2024-01-16", replace_existing=True,
                ))
            return await service.list_all()

    stored = asyncio.run(scenario())

    assert [i.ingredient_name for i in stored] == ["Milk"]


def test_generate_rejects_inverted_range(open_db) -> None:
    async def scenario() -> None:
        async with open_db() as factory:
            await factory.create_shopping_list_service().generate(
                ShoppingListGenerationOptions("2024-01-20", "2024-01-15"),
            )

    with pytest.raises(ValidationError):
        asyncio.run(scenario())
