"""
application.queries.meal_plans - Derivations over loaded meal plans.

Pure functions: no I/O, inputs are never mutated, results are new lists.
Date filters compare the YYYY-MM-DD prefix of each plan's date lexically;
callers pass dates in that form. ``today`` defaults to the current UTC date
and can be injected for deterministic results.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from domain.entities import MEAL_TYPE_ORDER, MealPlan, MealType
from domain.models import MealPlanStats


def _day(value: str) -> str:
    return value[:10]


def _today(today: Optional[str]) -> date:
    if today is not None:
        return date.fromisoformat(_day(today))
    return datetime.now(timezone.utc).date()


def _slot(plan: MealPlan) -> int:
    return MEAL_TYPE_ORDER[MealType(plan.meal_type)]


def find_by_id(plans: Sequence[MealPlan], meal_plan_id: str) -> Optional[MealPlan]:
    return next((p for p in plans if p.id == meal_plan_id), None)


def filter_by_date(plans: Sequence[MealPlan], day: str) -> list[MealPlan]:
    return [p for p in plans if p.date == day]


def filter_by_date_range(plans: Sequence[MealPlan], start: str, end: str) -> list[MealPlan]:
    """Plans whose date falls in [start, end], both bounds inclusive."""
    lo, hi = _day(start), _day(end)
    return [p for p in plans if lo <= _day(p.date) <= hi]


def filter_by_meal_type(plans: Sequence[MealPlan], meal_type: MealType | str) -> list[MealPlan]:
    wanted = MealType(meal_type)
    return [p for p in plans if MealType(p.meal_type) is wanted]


def filter_by_date_and_meal_type(
    plans: Sequence[MealPlan], day: str, meal_type: MealType | str,
) -> list[MealPlan]:
    wanted = MealType(meal_type)
    return [p for p in plans if p.date == day and MealType(p.meal_type) is wanted]


def slot_exists(plans: Sequence[MealPlan], day: str, meal_type: MealType | str) -> bool:
    return bool(filter_by_date_and_meal_type(plans, day, meal_type))


def unique_dates(plans: Sequence[MealPlan]) -> list[str]:
    return sorted({p.date for p in plans})


def group_by_date(plans: Sequence[MealPlan]) -> dict[str, list[MealPlan]]:
    """Partition by exact date string; each day ordered breakfast, lunch, dinner."""
    grouped: dict[str, list[MealPlan]] = {}
    for plan in plans:
        grouped.setdefault(plan.date, []).append(plan)
    return {day: sorted(items, key=_slot) for day, items in grouped.items()}


def for_today(plans: Sequence[MealPlan], today: Optional[str] = None) -> list[MealPlan]:
    day = _today(today).isoformat()
    return [p for p in plans if _day(p.date) == day]


def for_current_week(plans: Sequence[MealPlan], today: Optional[str] = None) -> list[MealPlan]:
    """Plans in the Sunday-to-Saturday week containing ``today``."""
    current = _today(today)
    start = current - timedelta(days=(current.weekday() + 1) % 7)
    end = start + timedelta(days=6)
    return filter_by_date_range(plans, start.isoformat(), end.isoformat())


def upcoming(
    plans: Sequence[MealPlan], today: Optional[str] = None, days: int = 7,
) -> list[MealPlan]:
    """Plans from today through ``days`` days ahead, inclusive."""
    current = _today(today)
    return filter_by_date_range(
        plans, current.isoformat(), (current + timedelta(days=days)).isoformat(),
    )


def used_recipe_ids(plans: Sequence[MealPlan]) -> list[str]:
    """Distinct recipe ids in first-seen order."""
    seen: dict[str, None] = {}
    for plan in plans:
        for recipe_id in plan.recipe_ids:
            seen.setdefault(recipe_id, None)
    return list(seen)


def compute_stats(plans: Sequence[MealPlan]) -> MealPlanStats:
    by_meal_type = {meal_type: 0 for meal_type in MealType}
    for plan in plans:
        by_meal_type[MealType(plan.meal_type)] += 1
    return MealPlanStats(
        total=len(plans),
        by_meal_type=by_meal_type,
        unique_dates=len({p.date for p in plans}),
        total_recipes=len(used_recipe_ids(plans)),
    )


def search(plans: Sequence[MealPlan], term: str) -> list[MealPlan]:
    """Case-insensitive name match. A blank term returns every plan, in order."""
    if not term.strip():
        return list(plans)
    needle = term.lower()
    return [p for p in plans if needle in p.name.lower()]
