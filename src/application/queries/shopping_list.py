"""
application.queries.shopping_list - Derivations over loaded shopping items.

Pure functions; grouping always yields every IngredientCategory key so
callers can render empty aisles. Names sort case-insensitively (see
common.name_key), unlike the code-point ORDER BY of the repository.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from typing import Optional

from application.queries.common import name_key, round_half_up
from domain.entities import CATEGORY_PRIORITY, IngredientCategory, ShoppingListItem
from domain.models import ShoppingListExportItem, ShoppingListStats, ShoppingListSummary


def _category(item: ShoppingListItem) -> IngredientCategory:
    return IngredientCategory(item.category)


def find_by_id(items: Sequence[ShoppingListItem], item_id: str) -> Optional[ShoppingListItem]:
    return next((i for i in items if i.id == item_id), None)


def checked(items: Sequence[ShoppingListItem]) -> list[ShoppingListItem]:
    return [i for i in items if i.is_checked]


def unchecked(items: Sequence[ShoppingListItem]) -> list[ShoppingListItem]:
    return [i for i in items if not i.is_checked]


def filter_by_category(
    items: Sequence[ShoppingListItem], category: IngredientCategory | str,
) -> list[ShoppingListItem]:
    wanted = IngredientCategory(category)
    return [i for i in items if _category(i) is wanted]


def group_by_category(
    items: Sequence[ShoppingListItem],
) -> dict[IngredientCategory, list[ShoppingListItem]]:
    """All six categories as keys, each list sorted by ingredient name."""
    grouped: dict[IngredientCategory, list[ShoppingListItem]] = {
        category: [] for category in IngredientCategory
    }
    for item in items:
        grouped[_category(item)].append(item)
    return {
        category: sorted(members, key=lambda i: name_key(i.ingredient_name))
        for category, members in grouped.items()
    }


def unchecked_grouped_by_category(
    items: Sequence[ShoppingListItem],
) -> dict[IngredientCategory, list[ShoppingListItem]]:
    return group_by_category(unchecked(items))


def search(items: Sequence[ShoppingListItem], term: str) -> list[ShoppingListItem]:
    """Case-insensitive ingredient name match. A blank term returns every item."""
    if not term.strip():
        return list(items)
    needle = term.lower()
    return [i for i in items if needle in i.ingredient_name.lower()]


def compute_stats(items: Sequence[ShoppingListItem]) -> ShoppingListStats:
    by_category = {category: 0 for category in IngredientCategory}
    done = 0
    for item in items:
        by_category[_category(item)] += 1
        if item.is_checked:
            done += 1

    total = len(items)
    completion = int(round_half_up(done / total * 100)) if total else 0
    return ShoppingListStats(
        total=total,
        checked=done,
        unchecked=total - done,
        by_category=by_category,
        completion_percentage=completion,
    )


def sorted_by_name(items: Sequence[ShoppingListItem]) -> list[ShoppingListItem]:
    return sorted(items, key=lambda i: name_key(i.ingredient_name))


def sorted_by_category_and_name(items: Sequence[ShoppingListItem]) -> list[ShoppingListItem]:
    """Category value, then name in locale-style order."""
    return sorted(items, key=lambda i: (_category(i).value, name_key(i.ingredient_name)))


def filter_by_meal_plan_ids(
    items: Sequence[ShoppingListItem], meal_plan_ids: Iterable[str],
) -> list[ShoppingListItem]:
    """Items sourced from at least one of the given meal plans."""
    wanted = set(meal_plan_ids)
    return [i for i in items if wanted.intersection(i.meal_plan_ids)]


def filter_by_meal_plan_id(
    items: Sequence[ShoppingListItem], meal_plan_id: str,
) -> list[ShoppingListItem]:
    return [i for i in items if meal_plan_id in i.meal_plan_ids]


def is_empty(items: Sequence[ShoppingListItem]) -> bool:
    return not items


def all_checked(items: Sequence[ShoppingListItem]) -> bool:
    return bool(items) and all(i.is_checked for i in items)


def categories_with_items(items: Sequence[ShoppingListItem]) -> list[IngredientCategory]:
    return sorted({_category(i) for i in items}, key=lambda c: c.value)


def categories_with_unchecked(items: Sequence[ShoppingListItem]) -> list[IngredientCategory]:
    return categories_with_items(unchecked(items))


def total_amount_for(items: Sequence[ShoppingListItem], ingredient_name: str) -> float:
    wanted = ingredient_name.lower()
    return sum(i.total_amount for i in items if i.ingredient_name.lower() == wanted)


def priority_unchecked(items: Sequence[ShoppingListItem]) -> list[ShoppingListItem]:
    """Unchecked items in aisle order (vegetables first), then by name."""
    return sorted(
        unchecked(items),
        key=lambda i: (CATEGORY_PRIORITY[_category(i)], name_key(i.ingredient_name)),
    )


def summary(
    items: Sequence[ShoppingListItem], now: Optional[str] = None,
) -> ShoppingListSummary:
    """Export view of the list; ``now`` overrides the generated_at stamp."""
    return ShoppingListSummary(
        items=[ShoppingListExportItem.from_item(i) for i in items],
        stats=compute_stats(items),
        generated_at=now or datetime.now(timezone.utc).isoformat(),
    )
