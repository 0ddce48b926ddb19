"""Recipe catalog and moderation service."""

import logging
from dataclasses import dataclass, fields, replace
from typing import Protocol
from uuid import UUID

from diet_planner.domain.errors import InvalidInputError, NotFoundError
from diet_planner.domain.recipes import Recipe, RecipeDraft, RecipeQuery
from diet_planner.services.aggregation import sum_ingredient_nutrition

_logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = {item.name for item in fields(RecipeDraft)}


class RecipeCatalog(Protocol):
    """Persistence interface for catalog recipes."""

    def find_recipes(self, query: RecipeQuery, limit: int) -> list[Recipe]:
        """Return up to limit recipes matching the query."""

    def get_recipe(self, recipe_id: UUID) -> Recipe | None:
        """Return a recipe by id."""

    def get_recipes(self, recipe_ids: list[UUID]) -> list[Recipe]:
        """Return the recipes that exist among the given ids."""

    def create_recipe(self, recipe: Recipe) -> Recipe:
        """Insert a recipe and return it with its id."""

    def update_recipe(self, recipe: Recipe) -> Recipe:
        """Persist changes to a recipe."""

    def set_approval(
        self, recipe_id: UUID, approved: bool, reason: str | None
    ) -> Recipe | None:
        """Update moderation state and return the recipe, if it exists."""

    def delete_recipe(self, recipe_id: UUID) -> None:
        """Delete a recipe."""

    def list_pending(self, limit: int) -> list[Recipe]:
        """Return unapproved recipes, oldest first."""


@dataclass
class RecipeService:
    """Service for creating, browsing and moderating recipes."""

    catalog: RecipeCatalog

    def create_recipe(self, user_id: UUID | None, draft: RecipeDraft) -> Recipe:
        """Store a new recipe awaiting moderation.

        Nutrition is summed from the ingredients when the draft has none.
        """
        _validate_draft(draft)
        nutrition = draft.nutrition
        if nutrition is None:
            nutrition = sum_ingredient_nutrition(draft.ingredients).rounded(1)
        recipe = Recipe(
            id=None,
            title=draft.title.strip(),
            nutrition=nutrition,
            ingredients=list(draft.ingredients),
            instructions=list(draft.instructions),
            description=draft.description,
            dietary_tags=frozenset(draft.dietary_tags),
            cuisine=draft.cuisine,
            prep_time_min=draft.prep_time_min,
            cook_time_min=draft.cook_time_min,
            servings=draft.servings,
            difficulty=draft.difficulty,
            is_approved=False,
            created_by=user_id,
        )
        created = self.catalog.create_recipe(recipe)
        _logger.info("Recipe created: id=%s title=%s", created.id, created.title)
        return created

    def update_recipe(
        self, user_id: UUID, recipe_id: UUID, **changes: object
    ) -> Recipe:
        """Edit a recipe owned by the user.

        Changing the ingredients without supplying nutrition recomputes it.
        """
        recipe = self.get_recipe(recipe_id)
        if recipe.created_by != user_id:
            raise NotFoundError("Recipe not found", field="recipe_id")
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            field = sorted(unknown)[0]
            raise InvalidInputError(f"Unknown field {field}", field=field)
        if "dietary_tags" in changes:
            changes["dietary_tags"] = frozenset(changes["dietary_tags"])
        if "ingredients" in changes and changes.get("nutrition") is None:
            changes["nutrition"] = sum_ingredient_nutrition(
                changes["ingredients"]
            ).rounded(1)
        elif changes.get("nutrition", recipe.nutrition) is None:
            changes.pop("nutrition")
        updated = replace(recipe, **changes)
        _validate_draft(updated)
        return self.catalog.update_recipe(updated)

    def delete_recipe(self, user_id: UUID | None, recipe_id: UUID) -> None:
        """Delete a recipe owned by the user, or any recipe when user_id is None."""
        recipe = self.get_recipe(recipe_id)
        if user_id is not None and recipe.created_by != user_id:
            raise NotFoundError("Recipe not found", field="recipe_id")
        self.catalog.delete_recipe(recipe_id)
        _logger.info("Recipe deleted: id=%s user_id=%s", recipe_id, user_id)

    def get_recipe(self, recipe_id: UUID) -> Recipe:
        recipe = self.catalog.get_recipe(recipe_id)
        if recipe is None:
            raise NotFoundError("Recipe not found", field="recipe_id")
        return recipe

    def list_approved(
        self, query: RecipeQuery | None = None, limit: int = 20
    ) -> list[Recipe]:
        """Browse approved recipes."""
        query = replace(query or RecipeQuery(), approved_only=True)
        return self.catalog.find_recipes(query, limit)

    def list_pending(self, limit: int = 50) -> list[Recipe]:
        return self.catalog.list_pending(limit)

    def approve(self, recipe_id: UUID) -> Recipe:
        recipe = self.catalog.set_approval(recipe_id, approved=True, reason=None)
        if recipe is None:
            raise NotFoundError("Recipe not found", field="recipe_id")
        _logger.info("Recipe approved: id=%s", recipe_id)
        return recipe

    def reject(self, recipe_id: UUID, reason: str | None = None) -> Recipe:
        recipe = self.catalog.set_approval(recipe_id, approved=False, reason=reason)
        if recipe is None:
            raise NotFoundError("Recipe not found", field="recipe_id")
        _logger.info("Recipe rejected: id=%s reason=%s", recipe_id, reason)
        return recipe


def _validate_draft(draft: RecipeDraft | Recipe) -> None:
    if not draft.title or not draft.title.strip():
        raise InvalidInputError("Recipe title is required", field="title")
    if draft.servings <= 0:
        raise InvalidInputError("Servings must be positive", field="servings")
    if draft.prep_time_min < 0:
        raise InvalidInputError(
            "Prep time cannot be negative", field="prep_time_min"
        )
    if draft.cook_time_min < 0:
        raise InvalidInputError(
            "Cook time cannot be negative", field="cook_time_min"
        )
    for ingredient in draft.ingredients:
        if ingredient.quantity < 0:
            raise InvalidInputError(
                "Ingredient quantity cannot be negative", field="ingredients"
            )
