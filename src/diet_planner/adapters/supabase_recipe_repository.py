"""Supabase implementation of the recipe catalog."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from diet_planner.adapters.supabase_rows import (
    ingredients_from_json,
    ingredients_to_json,
    nutrition_from_json,
    nutrition_to_json,
    parse_datetime,
)
from diet_planner.domain.recipes import Recipe, RecipeQuery
from diet_planner.services.recipes import RecipeCatalog


@dataclass
class SupabaseRecipeRepository(RecipeCatalog):
    """Supabase-backed recipe catalog."""

    client: Client

    def find_recipes(self, query: RecipeQuery, limit: int) -> list[Recipe]:
        """Return recipes matching the query.

        Ingredient exclusions are checked after the fetch because ingredients
        are stored as JSON.
        """
        request = self.client.table("recipes").select("*")
        if query.approved_only:
            request = request.eq("is_approved", True)
        if query.dietary_tag:
            request = request.contains("dietary_tags", [query.dietary_tag])
        if query.cuisines:
            request = request.in_("cuisine", list(query.cuisines))
        if query.max_prep_time_min is not None:
            request = request.lte("prep_time_min", query.max_prep_time_min)
        if query.max_cook_time_min is not None:
            request = request.lte("cook_time_min", query.max_cook_time_min)
        if query.title_contains:
            request = request.ilike("title", f"%{query.title_contains}%")
        if not query.excluded_ingredients:
            request = request.limit(limit)
        response = request.order("created_at", desc=True).execute()
        recipes = [_parse_recipe(row) for row in response.data or []]
        return [recipe for recipe in recipes if query.matches(recipe)][:limit]

    def get_recipe(self, recipe_id: UUID) -> Recipe | None:
        response = (
            self.client.table("recipes")
            .select("*")
            .eq("id", str(recipe_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_recipe(response.data[0])

    def get_recipes(self, recipe_ids: list[UUID]) -> list[Recipe]:
        if not recipe_ids:
            return []
        response = (
            self.client.table("recipes")
            .select("*")
            .in_("id", [str(recipe_id) for recipe_id in recipe_ids])
            .execute()
        )
        return [_parse_recipe(row) for row in response.data or []]

    def create_recipe(self, recipe: Recipe) -> Recipe:
        response = self.client.table("recipes").insert(_to_row(recipe)).execute()
        if not response.data:
            raise RuntimeError("Failed to create recipe")
        return _parse_recipe(response.data[0])

    def update_recipe(self, recipe: Recipe) -> Recipe:
        response = (
            self.client.table("recipes")
            .update(_to_row(recipe))
            .eq("id", str(recipe.id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update recipe")
        return _parse_recipe(response.data[0])

    def set_approval(
        self, recipe_id: UUID, approved: bool, reason: str | None
    ) -> Recipe | None:
        response = (
            self.client.table("recipes")
            .update({"is_approved": approved, "rejection_reason": reason})
            .eq("id", str(recipe_id))
            .execute()
        )
        if not response.data:
            return None
        return _parse_recipe(response.data[0])

    def list_pending(self, limit: int) -> list[Recipe]:
        response = (
            self.client.table("recipes")
            .select("*")
            .eq("is_approved", False)
            .order("created_at")
            .limit(limit)
            .execute()
        )
        return [_parse_recipe(row) for row in response.data or []]

    def delete_recipe(self, recipe_id: UUID) -> None:
        self.client.table("recipes").delete().eq("id", str(recipe_id)).execute()


def _to_row(recipe: Recipe) -> dict[str, object]:
    return {
        "title": recipe.title,
        "description": recipe.description,
        "ingredients": ingredients_to_json(recipe.ingredients),
        "instructions": list(recipe.instructions),
        "nutrition": nutrition_to_json(recipe.nutrition),
        "dietary_tags": sorted(recipe.dietary_tags),
        "cuisine": recipe.cuisine,
        "prep_time_min": recipe.prep_time_min,
        "cook_time_min": recipe.cook_time_min,
        "servings": recipe.servings,
        "difficulty": str(recipe.difficulty),
        "is_approved": recipe.is_approved,
        "rejection_reason": recipe.rejection_reason,
        "created_by": str(recipe.created_by) if recipe.created_by else None,
    }


def _parse_recipe(row: dict[str, object]) -> Recipe:
    """Parse a recipe row into a domain model."""
    created_by = row.get("created_by")
    return Recipe(
        id=UUID(row["id"]),
        title=str(row.get("title", "")),
        nutrition=nutrition_from_json(row.get("nutrition")),
        ingredients=ingredients_from_json(row.get("ingredients")),
        instructions=[str(step) for step in row.get("instructions") or []],
        description=str(row.get("description") or ""),
        dietary_tags=frozenset(row.get("dietary_tags") or []),
        cuisine=row.get("cuisine"),
        prep_time_min=int(row.get("prep_time_min") or 0),
        cook_time_min=int(row.get("cook_time_min") or 0),
        servings=int(row.get("servings") or 1),
        difficulty=str(row.get("difficulty") or "easy"),
        is_approved=bool(row.get("is_approved", False)),
        rejection_reason=row.get("rejection_reason"),
        created_by=UUID(created_by) if created_by else None,
        created_at=parse_datetime(row.get("created_at")),
    )
