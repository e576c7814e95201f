"""Tests for the pure shopping list derivations."""

import pytest

from application.queries import shopping_list as q
from domain.entities import IngredientCategory, ShoppingListItem


def _item(item_id: str, name: str, category: IngredientCategory, checked: bool = False,
          amount: float = 1, meal_plan_ids=()) -> ShoppingListItem:
    return ShoppingListItem(
        id=item_id,
        ingredient_name=name,
        total_amount=amount,
        unit="pcs",
        category=category,
        is_checked=checked,
        meal_plan_ids=list(meal_plan_ids),
    )


ITEMS = [
    _item("1", "Tomato", IngredientCategory.VEGETABLES, checked=True, amount=2, meal_plan_ids=["p1"]),
    _item("2", "Cheese", IngredientCategory.DAIRY, amount=1, meal_plan_ids=["p2"]),
    _item("3", "Apple", IngredientCategory.OTHER, meal_plan_ids=["p1", "p3"]),
    _item("4", "tomato", IngredientCategory.VEGETABLES, amount=1.5),
    _item("5", "Beef", IngredientCategory.MEAT),
]


def test_group_by_category_of_empty_list_has_all_six_keys() -> None:
    grouped = q.group_by_category([])

    assert set(grouped) == set(IngredientCategory)
    assert all(members == [] for members in grouped.values())


def test_group_by_category_sorts_by_name() -> None:
    grouped = q.group_by_category(ITEMS)

    assert [i.id for i in grouped[IngredientCategory.VEGETABLES]] == ["4", "1"]
    assert [i.id for i in q.unchecked_grouped_by_category(ITEMS)[IngredientCategory.VEGETABLES]] == ["4"]


def test_stats() -> None:
    stats = q.compute_stats(ITEMS)

    assert (stats.total, stats.checked, stats.unchecked) == (5, 1, 4)
    assert stats.by_category[IngredientCategory.VEGETABLES] == 2
    assert stats.by_category[IngredientCategory.GRAINS] == 0
    assert stats.completion_percentage == 20


@pytest.mark.parametrize(
    ("checked", "total", "expected"),
    [(0, 0, 0), (1, 3, 33), (2, 3, 67), (1, 8, 13), (3, 3, 100)],
)
def test_completion_percentage_rounding(checked: int, total: int, expected: int) -> None:
    items = [
        _item(str(n), f"Item {n}", IngredientCategory.OTHER, checked=n < checked)
        for n in range(total)
    ]

    assert q.compute_stats(items).completion_percentage == expected


def test_checked_and_unchecked() -> None:
    assert [i.id for i in q.checked(ITEMS)] == ["1"]
    assert [i.id for i in q.unchecked(ITEMS)] == ["2", "3", "4", "5"]


def test_all_checked_is_false_for_empty_list() -> None:
    assert q.all_checked([]) is False
    assert q.is_empty([]) is True
    assert q.all_checked(q.checked(ITEMS)) is True


def test_search_and_lookup() -> None:
    assert q.search(ITEMS, " ") == ITEMS
    assert [i.id for i in q.search(ITEMS, "TOM")] == ["1", "4"]
    assert q.find_by_id(ITEMS, "5") is ITEMS[4]
    assert [i.id for i in q.filter_by_category(ITEMS, "dairy")] == ["2"]


def test_sorting() -> None:
    assert [i.id for i in q.sorted_by_name(ITEMS)] == ["3", "5", "2", "4", "1"]
    assert [i.id for i in q.sorted_by_category_and_name(ITEMS)] == ["2", "5", "3", "4", "1"]


def test_name_order_ignores_case() -> None:
    items = [
        _item("c", "carrot", IngredientCategory.VEGETABLES),
        _item("t", "Tomato", IngredientCategory.VEGETABLES),
        _item("a", "apple", IngredientCategory.VEGETABLES),
    ]

    expected = ["apple", "carrot", "Tomato"]
    assert [i.ingredient_name for i in q.sorted_by_name(items)] == expected
    assert [i.ingredient_name for i in q.group_by_category(items)[IngredientCategory.VEGETABLES]] == expected
    assert [i.ingredient_name for i in q.priority_unchecked(items)] == expected


def test_meal_plan_filters() -> None:
    assert [i.id for i in q.filter_by_meal_plan_ids(ITEMS, ["p3", "p2"])] == ["2", "3"]
    assert [i.id for i in q.filter_by_meal_plan_id(ITEMS, "p1")] == ["1", "3"]


def test_categories_with_items() -> None:
    assert q.categories_with_items(ITEMS) == [
        IngredientCategory.DAIRY, IngredientCategory.MEAT,
        IngredientCategory.OTHER, IngredientCategory.VEGETABLES,
    ]
    assert IngredientCategory.VEGETABLES in q.categories_with_unchecked(ITEMS)
    assert q.categories_with_unchecked(q.checked(ITEMS)) == []


def test_total_amount_for_is_case_insensitive_exact_match() -> None:
    assert q.total_amount_for(ITEMS, "TOMATO") == 3.5
    assert q.total_amount_for(ITEMS, "tom") == 0


def test_priority_unchecked_follows_aisle_order() -> None:
    assert [i.id for i in q.priority_unchecked(ITEMS)] == ["4", "5", "2", "3"]


def test_summary_for_export() -> None:
    summary = q.summary(ITEMS, now="2024-01-15T10:00:00+00:00")

    assert summary.generated_at == "2024-01-15T10:00:00+00:00"
    assert summary.items[0].name == "Tomato"
    assert summary.items[0].checked is True
    assert summary.stats.total == 5
