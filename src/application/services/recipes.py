"""
application.services.recipes - Validated recipe writes.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Optional

from application.validation import validate_and_raise, validate_recipe
from domain.entities import Recipe
from domain.exceptions import NotFoundError
from domain.models import NewRecipe, RecipePatch
from domain.ports import RecipeRepository

logger = logging.getLogger(__name__)


class RecipeService:
    def __init__(self, recipe_repo: RecipeRepository):
        self._repo = recipe_repo

    async def create(self, data: NewRecipe) -> Recipe:
        validate_and_raise(data, validate_recipe, "Recipe")
        recipe = await self._repo.create(data)
        logger.info("Added recipe '%s' (%d ingredients)", recipe.name, len(recipe.ingredients))
        return recipe

    async def get(self, recipe_id: str) -> Optional[Recipe]:
        return await self._repo.find_by_id(recipe_id)

    async def list_all(self) -> list[Recipe]:
        return await self._repo.find_all()

    async def list_by_category(self, category: str) -> list[Recipe]:
        return await self._repo.find_by_category(category)

    async def update(self, patch: RecipePatch) -> Recipe:
        """Validate the merged recipe; a present ingredient list replaces the old one."""
        existing = await self._repo.find_by_id(patch.id)
        if existing is None:
            raise NotFoundError("Recipe", patch.id)
        validate_and_raise(
            dataclasses.replace(existing, **patch.changes()), validate_recipe, "Recipe",
        )
        recipe = await self._repo.update(patch)
        logger.info("Updated recipe %s", recipe.id)
        return recipe

    async def delete(self, recipe_id: str) -> bool:
        return await self._repo.delete(recipe_id)
