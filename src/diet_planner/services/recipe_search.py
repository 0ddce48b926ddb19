"""External recipe search backed by Spoonacular."""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID

from diet_planner.adapters.spoonacular_client import RecipeProviderClient
from diet_planner.domain.errors import ExternalServiceError
from diet_planner.domain.nutrition import NutritionFacts
from diet_planner.domain.profiles import DietaryPreference
from diet_planner.domain.recipes import ExternalRecipe, Recipe, RecipeDraft
from diet_planner.services.cache import Cache
from diet_planner.services.recipes import RecipeService

_NUTRIENT_NAMES = {
    "Calories": "calories",
    "Protein": "protein",
    "Carbohydrates": "carbs",
    "Fat": "fats",
    "Fiber": "fiber",
    "Sugar": "sugar",
}

_logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


@dataclass
class RecipeSearchService:
    """Search and import recipes from an external provider with caching."""

    client: RecipeProviderClient | None
    cache: Cache
    recipe_service: RecipeService
    search_ttl_seconds: int = 3600
    recipe_ttl_seconds: int = 86400
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def search(  # noqa: PLR0913
        self,
        query: str | None = None,
        number: int = 12,
        diet: str | None = None,
        cuisine: str | None = None,
        max_ready_time: int | None = None,
    ) -> list[ExternalRecipe]:
        """Search recipes, or fetch random ones when no query is given."""
        client = self._require_client()
        cache_key = (
            f"spoonacular:search:{(query or '').lower()}:{number}:"
            f"{diet}:{cuisine}:{max_ready_time}"
        )
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached

        if query:
            params: dict[str, object] = {
                "query": query,
                "number": number,
                "addRecipeInformation": "true",
                "includeNutrition": "true",
            }
            if diet:
                params["diet"] = diet
            if cuisine:
                params["cuisine"] = cuisine
            if max_ready_time:
                params["maxReadyTime"] = max_ready_time
            payload = await self._call_with_retry(
                lambda: client.search_recipes(params), action="search"
            )
            rows = payload.get("results", [])
        else:
            payload = await self._call_with_retry(
                lambda: client.random_recipes(number), action="random"
            )
            rows = payload.get("recipes", [])

        recipes = [_parse_recipe(row) for row in rows]
        self.cache.set(cache_key, recipes, ttl_seconds=self.search_ttl_seconds)
        _logger.info("Recipe search: query=%s results=%s", query, len(recipes))
        return recipes

    async def get_recipe(self, external_id: int) -> ExternalRecipe:
        """Fetch one external recipe with nutrition."""
        client = self._require_client()
        cache_key = f"spoonacular:recipe:{external_id}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, ExternalRecipe):
            return cached

        payload = await self._call_with_retry(
            lambda: client.get_recipe_information(external_id),
            action=f"recipe:{external_id}",
        )
        recipe = _parse_recipe(payload)
        self.cache.set(cache_key, recipe, ttl_seconds=self.recipe_ttl_seconds)
        return recipe

    def import_recipe(self, user_id: UUID | None, external: ExternalRecipe) -> Recipe:
        """Save an external recipe to the catalog, pending moderation."""
        draft = RecipeDraft(
            title=external.title,
            nutrition=external.nutrition,
            description=external.summary,
            dietary_tags=dietary_tags_for(external),
            prep_time_min=external.ready_in_minutes,
            servings=max(external.servings, 1),
        )
        return self.recipe_service.create_recipe(user_id, draft)

    def _require_client(self) -> RecipeProviderClient:
        if self.client is None:
            raise ExternalServiceError("Spoonacular API key not configured")
        return self.client

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call the provider with a short retry, then fail as unavailable."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "Spoonacular %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    _status_code_from_exception(exc),
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise ExternalServiceError(
                        "Failed to fetch recipes from Spoonacular"
                    ) from exc
                await asyncio.sleep(self.retry_delay_seconds)


def dietary_tags_for(external: ExternalRecipe) -> frozenset[str]:
    """Catalog dietary tags implied by the provider's diet flags."""
    tags = set()
    if external.vegan:
        tags.add(DietaryPreference.VEGAN.value)
    if external.vegetarian or external.vegan:
        tags.add(DietaryPreference.VEGETARIAN.value)
    else:
        tags.add(DietaryPreference.NON_VEGETARIAN.value)
    if external.gluten_free:
        tags.add(DietaryPreference.GLUTEN_FREE.value)
    return frozenset(tags)


def _status_code_from_exception(exc: Exception) -> str:
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"


def _parse_recipe(row: dict[str, object]) -> ExternalRecipe:
    nutrition = row.get("nutrition") or {}
    return ExternalRecipe(
        external_id=int(row["id"]),
        title=str(row.get("title", "")),
        servings=int(row.get("servings") or 1),
        ready_in_minutes=int(row.get("readyInMinutes") or 0),
        nutrition=_extract_nutrition(nutrition.get("nutrients", [])),
        diets=tuple(row.get("diets") or ()),
        vegetarian=bool(row.get("vegetarian", False)),
        vegan=bool(row.get("vegan", False)),
        gluten_free=bool(row.get("glutenFree", False)),
        summary=str(row.get("summary") or ""),
    )


def _extract_nutrition(nutrients: list[dict[str, object]]) -> NutritionFacts:
    values: dict[str, float] = {}
    for nutrient in nutrients:
        key = _NUTRIENT_NAMES.get(str(nutrient.get("name")))
        amount = nutrient.get("amount")
        if key and amount is not None:
            values[key] = float(amount)
    return NutritionFacts(**values)
