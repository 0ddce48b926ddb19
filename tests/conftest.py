"""Shared test fixtures."""

from collections import Counter
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

import pytest

from diet_planner.adapters.spoonacular_client import RecipeProviderClient
from diet_planner.config import Settings
from diet_planner.containers import AppContainer
from diet_planner.domain.grocery import GroceryItem, GroceryItemDraft
from diet_planner.domain.meal_plans import MealPlan
from diet_planner.domain.nutrition import NutritionFacts
from diet_planner.domain.nutrition_logs import NutritionLog
from diet_planner.domain.profiles import UserProfile
from diet_planner.domain.recipes import Recipe, RecipeIngredient, RecipeQuery
from diet_planner.services.admin import AdminRepository, AdminService
from diet_planner.services.cache import InMemoryCache
from diet_planner.services.grocery import GroceryRepository, GroceryService
from diet_planner.services.meal_plans import MealPlanRepository, MealPlanService
from diet_planner.services.nutrition_logs import (
    NutritionLogRepository,
    NutritionLogService,
)
from diet_planner.services.profiles import ProfileRepository, ProfileService
from diet_planner.services.recipe_search import RecipeSearchService
from diet_planner.services.recipes import RecipeCatalog, RecipeService


def make_recipe(  # noqa: PLR0913
    title: str = "Oatmeal",
    calories: float = 400.0,
    protein: float = 20.0,
    carbs: float = 50.0,
    fats: float = 10.0,
    ingredients: list[RecipeIngredient] | None = None,
    dietary_tags: frozenset[str] = frozenset(),
    cuisine: str | None = None,
    prep_time_min: int = 10,
    cook_time_min: int = 10,
    is_approved: bool = True,
    created_by: UUID | None = None,
) -> Recipe:
    """Build an approved recipe with an id for tests."""
    return Recipe(
        id=uuid4(),
        title=title,
        nutrition=NutritionFacts(
            calories=calories, protein=protein, carbs=carbs, fats=fats
        ),
        ingredients=ingredients or [],
        dietary_tags=dietary_tags,
        cuisine=cuisine,
        prep_time_min=prep_time_min,
        cook_time_min=cook_time_min,
        is_approved=is_approved,
        created_by=created_by,
    )


def complete_profile(user_id: UUID, **overrides: object) -> UserProfile:
    """A 30 year old sedentary man maintaining 80 kg at 180 cm."""
    values: dict[str, object] = {
        "age": 30,
        "gender": "male",
        "height_cm": 180.0,
        "weight_kg": 80.0,
        "goal": "maintenance",
        "activity_level": "sedentary",
        "daily_calories": 2136,
        "protein_g": 134,
        "carbs_g": 267,
        "fats_g": 59,
    }
    values.update(overrides)
    return UserProfile(user_id=user_id, **values)


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profiles: dict[UUID, UserProfile] = field(default_factory=dict)

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        return self.profiles.get(user_id)

    def save_profile(self, profile: UserProfile) -> UserProfile:
        if profile.created_at is None:
            profile = replace(profile, created_at=datetime.now(tz=UTC))
        self.profiles[profile.user_id] = profile
        return profile


@dataclass
class InMemoryRecipeCatalog(RecipeCatalog):
    """In-memory recipe catalog for tests. Keeps insertion order."""

    recipes: dict[UUID, Recipe] = field(default_factory=dict)
    queries: list[RecipeQuery] = field(default_factory=list)

    def add(self, *recipes: Recipe) -> None:
        for recipe in recipes:
            self.recipes[recipe.id] = recipe

    def find_recipes(self, query: RecipeQuery, limit: int) -> list[Recipe]:
        self.queries.append(query)
        matches = [recipe for recipe in self.recipes.values() if query.matches(recipe)]
        return matches[:limit]

    def get_recipe(self, recipe_id: UUID) -> Recipe | None:
        return self.recipes.get(recipe_id)

    def get_recipes(self, recipe_ids: list[UUID]) -> list[Recipe]:
        return [self.recipes[item] for item in recipe_ids if item in self.recipes]

    def create_recipe(self, recipe: Recipe) -> Recipe:
        stored = replace(recipe, id=uuid4(), created_at=datetime.now(tz=UTC))
        self.recipes[stored.id] = stored
        return stored

    def update_recipe(self, recipe: Recipe) -> Recipe:
        self.recipes[recipe.id] = recipe
        return recipe

    def set_approval(
        self, recipe_id: UUID, approved: bool, reason: str | None
    ) -> Recipe | None:
        recipe = self.recipes.get(recipe_id)
        if recipe is None:
            return None
        updated = replace(recipe, is_approved=approved, rejection_reason=reason)
        self.recipes[recipe_id] = updated
        return updated

    def list_pending(self, limit: int) -> list[Recipe]:
        pending = [item for item in self.recipes.values() if not item.is_approved]
        return pending[:limit]

    def delete_recipe(self, recipe_id: UUID) -> None:
        self.recipes.pop(recipe_id, None)


@dataclass
class InMemoryMealPlanRepository(MealPlanRepository):
    """In-memory meal plan repository for tests."""

    plans: dict[UUID, MealPlan] = field(default_factory=dict)

    def create_plan(self, plan: MealPlan) -> MealPlan:
        now = datetime.now(tz=UTC)
        stored = replace(plan, id=uuid4(), created_at=now, updated_at=now)
        self.plans[stored.id] = stored
        return stored

    def get_plan(self, plan_id: UUID) -> MealPlan | None:
        return self.plans.get(plan_id)

    def list_plans(self, user_id: UUID, offset: int, limit: int) -> list[MealPlan]:
        owned = [plan for plan in self.plans.values() if plan.user_id == user_id]
        owned.reverse()
        return owned[offset : offset + limit]

    def count_plans(self, user_id: UUID) -> int:
        return sum(1 for plan in self.plans.values() if plan.user_id == user_id)

    def update_plan(self, plan: MealPlan) -> MealPlan:
        stored = replace(plan, updated_at=datetime.now(tz=UTC))
        self.plans[plan.id] = stored
        return stored

    def delete_plan(self, plan_id: UUID) -> None:
        self.plans.pop(plan_id, None)


@dataclass
class InMemoryNutritionLogRepository(NutritionLogRepository):
    """In-memory nutrition log repository keyed by (user, day)."""

    logs: dict[tuple[UUID, date], NutritionLog] = field(default_factory=dict)
    created: int = 0

    def get_log(self, user_id: UUID, log_date: date) -> NutritionLog | None:
        return self.logs.get((user_id, log_date))

    def create_log(self, log: NutritionLog) -> NutritionLog:
        key = (log.user_id, log.log_date)
        if key in self.logs:
            return self.logs[key]
        stored = replace(log, id=uuid4(), created_at=datetime.now(tz=UTC))
        self.logs[key] = stored
        self.created += 1
        return stored

    def save_log(self, log: NutritionLog) -> NutritionLog:
        self.logs[(log.user_id, log.log_date)] = log
        return log

    def list_logs(self, user_id: UUID, start: date, end: date) -> list[NutritionLog]:
        return sorted(
            (
                log
                for (owner, day), log in self.logs.items()
                if owner == user_id and start <= day <= end
            ),
            key=lambda log: log.log_date,
        )

    def list_logs_for_dates(
        self, user_id: UUID, dates: list[date]
    ) -> list[NutritionLog]:
        wanted = set(dates)
        return sorted(
            (
                log
                for (owner, day), log in self.logs.items()
                if owner == user_id and day in wanted
            ),
            key=lambda log: log.log_date,
        )


@dataclass
class InMemoryGroceryRepository(GroceryRepository):
    """In-memory grocery repository for tests."""

    items: dict[UUID, GroceryItem] = field(default_factory=dict)

    def list_items(
        self, user_id: UUID, category: str | None = None
    ) -> list[GroceryItem]:
        return [
            item
            for item in self.items.values()
            if item.user_id == user_id
            and (category is None or item.category == category)
        ]

    def get_item(self, item_id: UUID) -> GroceryItem | None:
        return self.items.get(item_id)

    def create_items(
        self, user_id: UUID, drafts: list[GroceryItemDraft]
    ) -> list[GroceryItem]:
        created = []
        for draft in drafts:
            item = GroceryItem(
                id=uuid4(),
                user_id=user_id,
                name=draft.name,
                quantity=draft.quantity,
                unit=draft.unit,
                category=draft.category,
                purchased=draft.purchased,
                notes=draft.notes,
                created_at=datetime.now(tz=UTC),
            )
            self.items[item.id] = item
            created.append(item)
        return created

    def update_item(self, item: GroceryItem) -> GroceryItem:
        self.items[item.id] = item
        return item

    def delete_item(self, item_id: UUID) -> None:
        self.items.pop(item_id, None)

    def delete_items(self, user_id: UUID) -> int:
        owned = [key for key, item in self.items.items() if item.user_id == user_id]
        for key in owned:
            del self.items[key]
        return len(owned)


@dataclass
class InMemoryAdminRepository(AdminRepository):
    """Admin repository computed from the other in-memory repositories."""

    profiles: InMemoryProfileRepository
    catalog: InMemoryRecipeCatalog
    meal_plans: InMemoryMealPlanRepository

    def count_users(self) -> int:
        return len(self.profiles.profiles)

    def count_users_since(self, since: datetime) -> int:
        return sum(
            1
            for profile in self.profiles.profiles.values()
            if profile.created_at is not None and profile.created_at >= since
        )

    def count_recipes(self, approved: bool | None = None) -> int:
        return sum(
            1
            for recipe in self.catalog.recipes.values()
            if approved is None or recipe.is_approved == approved
        )

    def count_meal_plans(self, user_id: UUID | None = None) -> int:
        return len(self._plans(user_id))

    def dietary_preference_counts(self) -> dict[str, int]:
        counts = Counter(
            profile.dietary_preference or "none"
            for profile in self.profiles.profiles.values()
        )
        return dict(counts)

    def list_profiles(self, offset: int, limit: int) -> list[UserProfile]:
        newest = list(reversed(self.profiles.profiles.values()))
        return newest[offset : offset + limit]

    def list_meal_plans(
        self, offset: int, limit: int, user_id: UUID | None = None
    ) -> list[MealPlan]:
        newest = list(reversed(self._plans(user_id)))
        return newest[offset : offset + limit]

    def profile_creation_times(self, since: datetime) -> list[datetime]:
        return [
            profile.created_at
            for profile in self.profiles.profiles.values()
            if profile.created_at is not None and profile.created_at >= since
        ]

    def recipe_activity(self, since: datetime) -> list[tuple[datetime, UUID | None]]:
        return [
            (recipe.created_at, recipe.created_by)
            for recipe in self.catalog.recipes.values()
            if recipe.created_at is not None and recipe.created_at >= since
        ]

    def meal_plan_activity(self, since: datetime) -> list[tuple[datetime, UUID]]:
        return [
            (plan.created_at, plan.user_id)
            for plan in self.meal_plans.plans.values()
            if plan.created_at is not None and plan.created_at >= since
        ]

    def _plans(self, user_id: UUID | None) -> list[MealPlan]:
        return [
            plan
            for plan in self.meal_plans.plans.values()
            if user_id is None or plan.user_id == user_id
        ]


@dataclass
class FakeSpoonacularClient(RecipeProviderClient):
    """Fake recipe provider returning canned payloads."""

    search_payload: dict[str, object] = field(default_factory=dict)
    random_payload: dict[str, object] = field(default_factory=dict)
    recipes: dict[int, dict[str, object]] = field(default_factory=dict)
    failures: int = 0
    calls: list[tuple[str, object]] = field(default_factory=list)

    async def search_recipes(self, params: dict[str, object]) -> dict[str, object]:
        self.calls.append(("search", params))
        self._maybe_fail()
        return self.search_payload

    async def random_recipes(self, number: int) -> dict[str, object]:
        self.calls.append(("random", number))
        self._maybe_fail()
        return self.random_payload

    async def get_recipe_information(self, recipe_id: int) -> dict[str, object]:
        self.calls.append(("information", recipe_id))
        self._maybe_fail()
        return self.recipes[recipe_id]

    def _maybe_fail(self) -> None:
        if self.failures > 0:
            self.failures -= 1
            raise RuntimeError("provider unavailable")


def spoonacular_recipe(
    recipe_id: int = 715538, title: str = "Bruschetta", **flags: object
) -> dict[str, object]:
    """A Spoonacular recipe payload with nutrition."""
    payload: dict[str, object] = {
        "id": recipe_id,
        "title": title,
        "servings": 2,
        "readyInMinutes": 25,
        "summary": "Fresh tomatoes on toast.",
        "diets": ["vegetarian"],
        "vegetarian": True,
        "vegan": False,
        "glutenFree": False,
        "nutrition": {
            "nutrients": [
                {"name": "Calories", "amount": 320.5, "unit": "kcal"},
                {"name": "Protein", "amount": 9.0, "unit": "g"},
                {"name": "Carbohydrates", "amount": 41.2, "unit": "g"},
                {"name": "Fat", "amount": 12.0, "unit": "g"},
                {"name": "Fiber", "amount": 4.0, "unit": "g"},
                {"name": "Sugar", "amount": 6.5, "unit": "g"},
                {"name": "Sodium", "amount": 500.0, "unit": "mg"},
            ]
        },
    }
    payload.update(flags)
    return payload


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        admin_token="admin-token",
    )


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def profile_repository() -> InMemoryProfileRepository:
    return InMemoryProfileRepository()


@pytest.fixture
def catalog() -> InMemoryRecipeCatalog:
    return InMemoryRecipeCatalog()


@pytest.fixture
def spoonacular_client() -> FakeSpoonacularClient:
    return FakeSpoonacularClient()


@pytest.fixture
def container(
    settings: Settings,
    profile_repository: InMemoryProfileRepository,
    catalog: InMemoryRecipeCatalog,
    spoonacular_client: FakeSpoonacularClient,
) -> AppContainer:
    meal_plan_repository = InMemoryMealPlanRepository()
    profile_service = ProfileService(profile_repository)
    recipe_service = RecipeService(catalog)
    meal_plan_service = MealPlanService(
        repository=meal_plan_repository,
        profile_repository=profile_repository,
        catalog=catalog,
    )
    grocery_service = GroceryService(
        repository=InMemoryGroceryRepository(),
        meal_plan_service=meal_plan_service,
    )
    nutrition_log_service = NutritionLogService(
        repository=InMemoryNutritionLogRepository(),
        profile_repository=profile_repository,
        catalog=catalog,
    )
    recipe_search_service = RecipeSearchService(
        client=spoonacular_client,
        cache=InMemoryCache(),
        recipe_service=recipe_service,
        retry_delay_seconds=0,
    )
    admin_service = AdminService(
        repository=InMemoryAdminRepository(
            profiles=profile_repository,
            catalog=catalog,
            meal_plans=meal_plan_repository,
        ),
        recipe_service=recipe_service,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        profile_service=profile_service,
        recipe_service=recipe_service,
        recipe_search_service=recipe_search_service,
        meal_plan_service=meal_plan_service,
        grocery_service=grocery_service,
        nutrition_log_service=nutrition_log_service,
        admin_service=admin_service,
        close_resources=close_resources,
    )
