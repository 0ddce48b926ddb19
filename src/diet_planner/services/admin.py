"""Admin service for the dashboard, listings, analytics and recipe moderation."""

import math
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from typing import Protocol
from uuid import UUID

from diet_planner.domain.admin import (
    AdminAnalytics,
    AdminDashboard,
    DashboardTotals,
    UserPage,
)
from diet_planner.domain.errors import InvalidInputError
from diet_planner.domain.meal_plans import MealPlan, MealPlanPage
from diet_planner.domain.profiles import UserProfile
from diet_planner.domain.recipes import Recipe
from diet_planner.services.aggregation import to_utc_day
from diet_planner.services.recipes import RecipeService

NEW_USER_WINDOW_DAYS = 30
ANALYTICS_WINDOW_DAYS = {"week": 7, "month": 30}


class AdminRepository(Protocol):
    """Persistence interface for admin reporting."""

    def count_users(self) -> int:
        """Return the number of user profiles."""

    def count_users_since(self, since: datetime) -> int:
        """Return the number of profiles created at or after since."""

    def count_recipes(self, approved: bool | None = None) -> int:
        """Return the number of recipes, optionally by approval state."""

    def count_meal_plans(self, user_id: UUID | None = None) -> int:
        """Return the number of meal plans, optionally for one user."""

    def dietary_preference_counts(self) -> dict[str, int]:
        """Return user counts keyed by dietary preference."""

    def list_profiles(self, offset: int, limit: int) -> list[UserProfile]:
        """Return user profiles, newest first."""

    def list_meal_plans(
        self, offset: int, limit: int, user_id: UUID | None = None
    ) -> list[MealPlan]:
        """Return meal plans of every user, or one user, newest first."""

    def profile_creation_times(self, since: datetime) -> list[datetime]:
        """Return creation times of profiles created at or after since."""

    def recipe_activity(self, since: datetime) -> list[tuple[datetime, UUID | None]]:
        """Return (created_at, author) for recipes created at or after since."""

    def meal_plan_activity(self, since: datetime) -> list[tuple[datetime, UUID]]:
        """Return (created_at, owner) for plans created at or after since."""


@dataclass
class AdminService:
    """Service for admin dashboards."""

    repository: AdminRepository
    recipe_service: RecipeService

    def dashboard(self) -> AdminDashboard:
        since = datetime.now(tz=UTC) - timedelta(days=NEW_USER_WINDOW_DAYS)
        return AdminDashboard(
            totals=DashboardTotals(
                users=self.repository.count_users(),
                recipes=self.repository.count_recipes(),
                meal_plans=self.repository.count_meal_plans(),
                pending_recipes=self.repository.count_recipes(approved=False),
            ),
            new_users=self.repository.count_users_since(since),
            dietary_stats=self.repository.dietary_preference_counts(),
        )

    def list_users(self, page: int = 1, limit: int = 10) -> UserPage:
        _check_page(page, limit)
        total = self.repository.count_users()
        items = self.repository.list_profiles((page - 1) * limit, limit)
        return UserPage(
            items=items, total=total, page=page, pages=math.ceil(total / limit)
        )

    def list_meal_plans(
        self, page: int = 1, limit: int = 10, user_id: UUID | None = None
    ) -> MealPlanPage:
        """Return one page of plans across users, optionally for a single user."""
        _check_page(page, limit)
        total = self.repository.count_meal_plans(user_id)
        items = self.repository.list_meal_plans((page - 1) * limit, limit, user_id)
        return MealPlanPage(
            items=items, total=total, page=page, pages=math.ceil(total / limit)
        )

    def analytics(
        self, time_range: str = "week", today: date | None = None
    ) -> AdminAnalytics:
        """Daily counts for the last 7 ("week") or 30 ("month") UTC days.

        The window ends with today. Active users are the distinct authors of
        recipes or meal plans created on a day.
        """
        window_days = ANALYTICS_WINDOW_DAYS.get(time_range)
        if window_days is None:
            raise InvalidInputError(
                "Time range must be week or month", field="time_range"
            )
        end = today or datetime.now(tz=UTC).date()
        start = end - timedelta(days=window_days - 1)
        days = [start + timedelta(days=offset) for offset in range(window_days)]
        since = datetime.combine(start, time.min, tzinfo=UTC)

        recipes = self.repository.recipe_activity(since)
        plans = self.repository.meal_plan_activity(since)
        active: dict[date, set[UUID]] = {day: set() for day in days}
        for created_at, user_id in [*recipes, *plans]:
            day = to_utc_day(created_at)
            if user_id is not None and day in active:
                active[day].add(user_id)

        return AdminAnalytics(
            time_range=time_range,
            labels=[_label(day, time_range) for day in days],
            user_growth=_daily_counts(
                days, self.repository.profile_creation_times(since)
            ),
            recipe_submissions=_daily_counts(days, (stamp for stamp, _ in recipes)),
            meal_plans_created=_daily_counts(days, (stamp for stamp, _ in plans)),
            active_users=[len(active[day]) for day in days],
        )

    def pending_recipes(self, limit: int = 50) -> list[Recipe]:
        return self.recipe_service.list_pending(limit)

    def approve_recipe(self, recipe_id: UUID) -> Recipe:
        return self.recipe_service.approve(recipe_id)

    def reject_recipe(self, recipe_id: UUID, reason: str | None = None) -> Recipe:
        return self.recipe_service.reject(recipe_id, reason)

    def delete_recipe(self, recipe_id: UUID) -> None:
        self.recipe_service.delete_recipe(None, recipe_id)


def _check_page(page: int, limit: int) -> None:
    if page < 1:
        raise InvalidInputError("Page must be at least 1", field="page")
    if limit < 1:
        raise InvalidInputError("Limit must be at least 1", field="limit")


def _daily_counts(days: list[date], stamps: Iterable[datetime]) -> list[int]:
    counts = Counter(to_utc_day(stamp) for stamp in stamps)
    return [counts[day] for day in days]


def _label(day: date, time_range: str) -> str:
    if time_range == "week":
        return day.strftime("%a")
    return f"{day.strftime('%b')} {day.day}"
