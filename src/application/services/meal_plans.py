"""
application.services.meal_plans - Validated meal plan writes.

Validates input with application.validation before handing it to the
MealPlanRepository; the table CHECK constraints remain the second layer.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Optional

from application.validation import validate_and_raise, validate_meal_plan
from domain.entities import MealPlan
from domain.exceptions import NotFoundError
from domain.models import MealPlanPatch, NewMealPlan
from domain.ports import MealPlanRepository

logger = logging.getLogger(__name__)


class MealPlanService:
    """Create, update and delete meal plans; reads pass straight through."""

    def __init__(self, meal_plan_repo: MealPlanRepository):
        self._repo = meal_plan_repo

    async def create(self, data: NewMealPlan) -> MealPlan:
        validate_and_raise(data, validate_meal_plan, "MealPlan")
        plan = await self._repo.create(data)
        logger.info("Planned '%s' on %s (%s)", plan.name, plan.date, plan.meal_type)
        return plan

    async def get(self, meal_plan_id: str) -> Optional[MealPlan]:
        return await self._repo.find_by_id(meal_plan_id)

    async def list_all(self) -> list[MealPlan]:
        return await self._repo.find_all()

    async def list_between(self, start_date: str, end_date: str) -> list[MealPlan]:
        return await self._repo.find_by_date_range(start_date, end_date)

    async def update(self, patch: MealPlanPatch) -> MealPlan:
        """Validate the patched plan as a whole, then store only the changes."""
        existing = await self._repo.find_by_id(patch.id)
        if existing is None:
            raise NotFoundError("MealPlan", patch.id)
        validate_and_raise(
            dataclasses.replace(existing, **patch.changes()), validate_meal_plan, "MealPlan",
        )
        plan = await self._repo.update(patch)
        logger.info("Updated meal plan %s", plan.id)
        return plan

    async def delete(self, meal_plan_id: str) -> bool:
        return await self._repo.delete(meal_plan_id)
