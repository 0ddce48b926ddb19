"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from diet_planner.adapters.spoonacular_client import HttpxSpoonacularClient
from diet_planner.adapters.supabase_admin_repository import SupabaseAdminRepository
from diet_planner.adapters.supabase_grocery_repository import (
    SupabaseGroceryRepository,
)
from diet_planner.adapters.supabase_meal_plan_repository import (
    SupabaseMealPlanRepository,
)
from diet_planner.adapters.supabase_nutrition_log_repository import (
    SupabaseNutritionLogRepository,
)
from diet_planner.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from diet_planner.adapters.supabase_recipe_repository import SupabaseRecipeRepository
from diet_planner.config import Settings
from diet_planner.services.admin import AdminService
from diet_planner.services.cache import InMemoryCache
from diet_planner.services.grocery import GroceryService
from diet_planner.services.meal_plans import MealPlanService
from diet_planner.services.nutrition_logs import NutritionLogService
from diet_planner.services.profiles import ProfileService
from diet_planner.services.recipe_search import RecipeSearchService
from diet_planner.services.recipes import RecipeService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    profile_service: ProfileService
    recipe_service: RecipeService
    recipe_search_service: RecipeSearchService
    meal_plan_service: MealPlanService
    grocery_service: GroceryService
    nutrition_log_service: NutritionLogService
    admin_service: AdminService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    profile_repository = SupabaseProfileRepository(supabase_client)
    recipe_repository = SupabaseRecipeRepository(supabase_client)
    meal_plan_repository = SupabaseMealPlanRepository(supabase_client)
    nutrition_log_repository = SupabaseNutritionLogRepository(supabase_client)
    grocery_repository = SupabaseGroceryRepository(supabase_client)
    admin_repository = SupabaseAdminRepository(supabase_client)

    profile_service = ProfileService(profile_repository)
    recipe_service = RecipeService(recipe_repository)
    meal_plan_service = MealPlanService(
        repository=meal_plan_repository,
        profile_repository=profile_repository,
        catalog=recipe_repository,
        candidate_pool_limit=resolved_settings.candidate_pool_limit,
    )
    grocery_service = GroceryService(
        repository=grocery_repository,
        meal_plan_service=meal_plan_service,
    )
    nutrition_log_service = NutritionLogService(
        repository=nutrition_log_repository,
        profile_repository=profile_repository,
        catalog=recipe_repository,
    )
    spoonacular_client = None
    if resolved_settings.spoonacular_enabled:
        spoonacular_client = HttpxSpoonacularClient.create(
            api_key=resolved_settings.spoonacular_api_key,
            base_url=resolved_settings.spoonacular_base_url,
        )
    recipe_search_service = RecipeSearchService(
        client=spoonacular_client,
        cache=InMemoryCache(),
        recipe_service=recipe_service,
    )
    admin_service = AdminService(
        repository=admin_repository,
        recipe_service=recipe_service,
    )

    async def close_resources() -> None:
        if spoonacular_client is not None:
            await spoonacular_client.close()

    return AppContainer(
        settings=resolved_settings,
        profile_service=profile_service,
        recipe_service=recipe_service,
        recipe_search_service=recipe_search_service,
        meal_plan_service=meal_plan_service,
        grocery_service=grocery_service,
        nutrition_log_service=nutrition_log_service,
        admin_service=admin_service,
        close_resources=close_resources,
    )
