"""Meal plan generation and tracking service."""

import logging
import math
import random
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from typing import Protocol
from uuid import UUID

from diet_planner.constants import (
    CANDIDATE_POOL_LIMIT,
    MAX_PLAN_DAYS,
    MIN_PLAN_DAYS,
    RECIPES_PER_DAY,
)
from diet_planner.domain.errors import (
    InvalidInputError,
    NoMatchingRecipesError,
    NotFoundError,
    ProfileIncompleteError,
)
from diet_planner.domain.grocery import GroceryLine
from diet_planner.domain.meal_plans import (
    MEAL_CATEGORIES,
    DayPlan,
    MealFeedback,
    MealPlan,
    MealPlanPage,
    MealPlanPreferences,
    MealSlot,
    PlanStatus,
    empty_meals,
)
from diet_planner.domain.profiles import DietaryPreference, UserProfile
from diet_planner.domain.recipes import Recipe, RecipeQuery
from diet_planner.services.aggregation import day_nutrition, recompute_plan
from diet_planner.services.grocery import consolidate
from diet_planner.services.profiles import ProfileRepository
from diet_planner.services.recipes import RecipeCatalog

_logger = logging.getLogger(__name__)


class MealPlanRepository(Protocol):
    """Persistence interface for meal plans."""

    def create_plan(self, plan: MealPlan) -> MealPlan:
        """Insert a meal plan and return it with its id."""

    def get_plan(self, plan_id: UUID) -> MealPlan | None:
        """Return a meal plan by id."""

    def list_plans(self, user_id: UUID, offset: int, limit: int) -> list[MealPlan]:
        """Return a user's plans, newest first."""

    def count_plans(self, user_id: UUID) -> int:
        """Return the number of plans a user has."""

    def update_plan(self, plan: MealPlan) -> MealPlan:
        """Persist changes to a meal plan."""

    def delete_plan(self, plan_id: UUID) -> None:
        """Delete a meal plan."""


def effective_dietary_preference(profile: UserProfile) -> str | None:
    """Profile preference used for filtering and titles, None when unrestricted.

    A per-request preference is stored with the plan but never relaxes or
    replaces the profile restriction.
    """
    preference = profile.dietary_preference
    if not preference or preference == DietaryPreference.NONE:
        return None
    return preference


def candidate_query(
    profile: UserProfile, preferences: MealPlanPreferences
) -> RecipeQuery:
    return RecipeQuery(
        approved_only=True,
        dietary_tag=effective_dietary_preference(profile),
        cuisines=tuple(preferences.cuisine),
        excluded_ingredients=tuple(preferences.excluded_ingredients),
        max_prep_time_min=preferences.max_prep_time_min or None,
        max_cook_time_min=preferences.max_cook_time_min or None,
    )


def plan_title(duration_days: int, dietary_preference: str | None) -> str:
    if dietary_preference:
        return f"{duration_days}-Day {dietary_preference} Meal Plan"
    return f"{duration_days}-Day Meal Plan"


def build_meal_plan_draft(  # noqa: PLR0913
    profile: UserProfile,
    duration_days: int,
    preferences: MealPlanPreferences,
    candidates: list[Recipe],
    start_date: date,
    rng: random.Random,
) -> MealPlan:
    """Assemble an unsaved plan from a candidate pool.

    Each day draws up to four distinct recipes at random and assigns them in
    order to breakfast, lunch, dinner and snacks.
    """
    if not MIN_PLAN_DAYS <= duration_days <= MAX_PLAN_DAYS:
        raise InvalidInputError(
            f"Duration must be between {MIN_PLAN_DAYS} and {MAX_PLAN_DAYS} days",
            field="duration_days",
        )
    if not candidates:
        raise NoMatchingRecipesError(
            "No recipes found matching your dietary requirements. "
            "Please adjust your preferences."
        )

    per_day = min(RECIPES_PER_DAY, len(candidates))
    days = []
    for index in range(duration_days):
        selected = rng.sample(candidates, per_day)
        meals = empty_meals()
        for category, recipe in zip(MEAL_CATEGORIES, selected, strict=False):
            meals[category] = [MealSlot(recipe_id=recipe.id)]
        days.append(
            DayPlan(
                date=start_date + timedelta(days=index),
                day_number=index + 1,
                meals=meals,
                nutrition=day_nutrition(selected),
            )
        )

    recipes_by_id = {recipe.id: recipe for recipe in candidates}
    dietary_preference = effective_dietary_preference(profile)
    plan = MealPlan(
        id=None,
        user_id=profile.user_id,
        title=plan_title(duration_days, dietary_preference),
        duration_days=duration_days,
        start_date=start_date,
        preferences=preferences,
        days=days,
        grocery_list=consolidate(days, recipes_by_id),
    )
    return recompute_plan(plan)


@dataclass
class MealPlanService:
    """Service that generates meal plans and tracks their progress."""

    repository: MealPlanRepository
    profile_repository: ProfileRepository
    catalog: RecipeCatalog
    candidate_pool_limit: int = CANDIDATE_POOL_LIMIT
    rng: random.Random = field(default_factory=random.Random)

    def generate(
        self,
        user_id: UUID,
        duration_days: int = 7,
        preferences: MealPlanPreferences | None = None,
        start_date: date | None = None,
    ) -> MealPlan:
        """Generate and persist a plan for the user's calculated targets."""
        profile = self.profile_repository.get_profile(user_id)
        if profile is None or not profile.daily_calories:
            raise ProfileIncompleteError(
                "User profile incomplete. Please complete profile first.",
                field="daily_calories",
            )
        if not MIN_PLAN_DAYS <= duration_days <= MAX_PLAN_DAYS:
            raise InvalidInputError(
                f"Duration must be between {MIN_PLAN_DAYS} and {MAX_PLAN_DAYS} days",
                field="duration_days",
            )
        preferences = preferences or MealPlanPreferences()
        query = candidate_query(profile, preferences)
        candidates = self.catalog.find_recipes(query, self.candidate_pool_limit)
        draft = build_meal_plan_draft(
            profile,
            duration_days,
            preferences,
            candidates,
            start_date or datetime.now(tz=UTC).date(),
            self.rng,
        )
        plan = self.repository.create_plan(draft)
        _logger.info(
            "Meal plan generated: user_id=%s plan_id=%s days=%s candidates=%s",
            user_id,
            plan.id,
            duration_days,
            len(candidates),
        )
        return plan

    def get_plan(self, user_id: UUID, plan_id: UUID) -> MealPlan:
        plan = self.repository.get_plan(plan_id)
        if plan is None or plan.user_id != user_id:
            raise NotFoundError("Meal plan not found", field="plan_id")
        return plan

    def list_plans(
        self, user_id: UUID, page: int = 1, limit: int = 10
    ) -> MealPlanPage:
        """Return one page of the user's plans, newest first."""
        if page < 1:
            raise InvalidInputError("Page must be at least 1", field="page")
        if limit < 1:
            raise InvalidInputError("Limit must be at least 1", field="limit")
        total = self.repository.count_plans(user_id)
        items = self.repository.list_plans(user_id, (page - 1) * limit, limit)
        return MealPlanPage(
            items=items,
            total=total,
            page=page,
            pages=math.ceil(total / limit),
        )

    def mark_meal_consumed(  # noqa: PLR0913
        self,
        user_id: UUID,
        plan_id: UUID,
        day_number: int,
        category: str,
        index: int = 0,
    ) -> MealPlan:
        """Mark one planned meal as eaten and refresh the completion rate."""
        plan = self.get_plan(user_id, plan_id)
        slot = _find_slot(plan, day_number, category, index)
        slot.consumed = True
        return self.repository.update_plan(recompute_plan(plan))

    def add_meal_feedback(  # noqa: PLR0913
        self,
        user_id: UUID,
        plan_id: UUID,
        day_number: int,
        category: str,
        rating: int,
        comment: str = "",
        index: int = 0,
    ) -> MealPlan:
        feedback = MealFeedback(rating=rating, comment=comment)
        plan = self.get_plan(user_id, plan_id)
        slot = _find_slot(plan, day_number, category, index)
        slot.feedback = feedback
        return self.repository.update_plan(recompute_plan(plan))

    def set_status(self, user_id: UUID, plan_id: UUID, status: str) -> MealPlan:
        if status not in set(PlanStatus):
            raise InvalidInputError(f"Unknown status {status}", field="status")
        plan = self.get_plan(user_id, plan_id)
        plan.status = PlanStatus(status)
        return self.repository.update_plan(recompute_plan(plan))

    def set_favorite(self, user_id: UUID, plan_id: UUID, favorite: bool) -> MealPlan:
        plan = self.get_plan(user_id, plan_id)
        plan.is_favorite = favorite
        return self.repository.update_plan(recompute_plan(plan))

    def delete_plan(self, user_id: UUID, plan_id: UUID) -> None:
        self.get_plan(user_id, plan_id)
        self.repository.delete_plan(plan_id)
        _logger.info("Meal plan deleted: user_id=%s plan_id=%s", user_id, plan_id)

    def grocery_list(self, user_id: UUID, plan_id: UUID) -> list[GroceryLine]:
        return self.get_plan(user_id, plan_id).grocery_list


def _find_slot(
    plan: MealPlan, day_number: int, category: str, index: int
) -> MealSlot:
    day = next((item for item in plan.days if item.day_number == day_number), None)
    if day is None:
        raise NotFoundError("Day not found in meal plan", field="day_number")
    if category not in set(MEAL_CATEGORIES):
        raise InvalidInputError(
            f"Unknown meal category {category}", field="category"
        )
    slots = day.meals.get(category, [])
    if not 0 <= index < len(slots):
        raise NotFoundError("Meal not found", field="index")
    return slots[index]
