"""Tests for the pure meal plan derivations."""

from application.queries import meal_plans as q
from domain.entities import MealPlan, MealType


def _plan(plan_id: str, date: str, meal_type: MealType, recipe_ids=(), name: str = "") -> MealPlan:
    return MealPlan(
        id=plan_id,
        name=name or f"Plan {plan_id}",
        date=date,
        meal_type=meal_type,
        recipe_ids=list(recipe_ids),
    )


PLANS = [
    _plan("1", "2024-01-15", MealType.DINNER, ["r1", "r2"], name="Pasta night"),
    _plan("2", "2024-01-15", MealType.BREAKFAST, ["r3"], name="Pancakes"),
    _plan("3", "2024-01-16", MealType.LUNCH, ["r1", "r4"], name="Leftover pasta"),
]


def test_stats_counts_dates_and_distinct_recipes() -> None:
    stats = q.compute_stats(PLANS)

    assert stats.total == 3
    assert stats.unique_dates == 2
    assert stats.total_recipes == 4
    assert stats.by_meal_type == {
        MealType.BREAKFAST: 1, MealType.LUNCH: 1, MealType.DINNER: 1,
    }


def test_stats_of_empty_list() -> None:
    stats = q.compute_stats([])

    assert stats.total == 0
    assert stats.by_meal_type[MealType.DINNER] == 0


def test_group_by_date_orders_each_day_by_meal_slot() -> None:
    grouped = q.group_by_date(PLANS)

    assert list(grouped) == ["2024-01-15", "2024-01-16"]
    assert [p.id for p in grouped["2024-01-15"]] == ["2", "1"]


def test_filters() -> None:
    assert [p.id for p in q.filter_by_date(PLANS, "2024-01-15")] == ["1", "2"]
    assert [p.id for p in q.filter_by_date_range(PLANS, "2024-01-16", "2024-01-31")] == ["3"]
    assert [p.id for p in q.filter_by_meal_type(PLANS, "dinner")] == ["1"]
    assert [p.id for p in q.filter_by_date_and_meal_type(PLANS, "2024-01-15", MealType.BREAKFAST)] == ["2"]
    assert q.slot_exists(PLANS, "2024-01-16", MealType.LUNCH)
    assert not q.slot_exists(PLANS, "2024-01-16", MealType.DINNER)


def test_find_by_id() -> None:
    assert q.find_by_id(PLANS, "3") is PLANS[2]
    assert q.find_by_id(PLANS, "nope") is None


def test_unique_dates_and_used_recipe_ids() -> None:
    assert q.unique_dates(PLANS) == ["2024-01-15", "2024-01-16"]
    assert q.used_recipe_ids(PLANS) == ["r1", "r2", "r3", "r4"]


def test_blank_search_is_identity() -> None:
    result = q.search(PLANS, "   ")

    assert result == PLANS
    assert result is not PLANS


def test_search_is_case_insensitive() -> None:
    assert [p.id for p in q.search(PLANS, "PASTA")] == ["1", "3"]


def test_today_and_upcoming_use_injected_date() -> None:
    assert [p.id for p in q.for_today(PLANS, today="2024-01-16")] == ["3"]
    assert [p.id for p in q.upcoming(PLANS, today="2024-01-16", days=3)] == ["3"]
    assert [p.id for p in q.upcoming(PLANS, today="2024-01-10")] == ["1", "2", "3"]


def test_current_week_runs_sunday_to_saturday() -> None:
    plans = [
        _plan("sun", "2024-01-14", MealType.LUNCH),
        _plan("sat", "2024-01-20", MealType.LUNCH),
        _plan("next", "2024-01-21", MealType.LUNCH),
        _plan("prev", "2024-01-13", MealType.LUNCH),
    ]

    # 2024-01-17 is a Wednesday.
    assert [p.id for p in q.for_current_week(plans, today="2024-01-17")] == ["sun", "sat"]


def test_inputs_are_not_mutated() -> None:
    before = [p.id for p in PLANS]

    q.group_by_date(PLANS)
    q.compute_stats(PLANS)

    assert [p.id for p in PLANS] == before
