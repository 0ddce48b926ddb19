"""Daily nutrition journal and weekly progress."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import UTC, date, datetime, timedelta
from typing import Protocol
from uuid import UUID

from diet_planner.constants import FALLBACK_TARGETS, WEEKDAY_LABELS
from diet_planner.domain.errors import (
    InvalidInputError,
    InvalidMealSourceError,
    NotFoundError,
)
from diet_planner.domain.nutrition_logs import (
    CustomMeal,
    LoggedMeal,
    MealType,
    NutritionLog,
    NutritionTargets,
    WeeklyProgress,
    WeeklySummary,
)
from diet_planner.services.aggregation import (
    recompute_log,
    sum_ingredient_nutrition,
    summarize_week,
    to_utc_day,
    week_start_for,
)
from diet_planner.services.profiles import ProfileRepository
from diet_planner.services.recipes import RecipeCatalog

_logger = logging.getLogger(__name__)


class NutritionLogRepository(Protocol):
    """Persistence interface for daily nutrition logs."""

    def get_log(self, user_id: UUID, log_date: date) -> NutritionLog | None:
        """Return the log for a user and UTC day."""

    def create_log(self, log: NutritionLog) -> NutritionLog:
        """Insert a log and return it with its id."""

    def save_log(self, log: NutritionLog) -> NutritionLog:
        """Persist changes to an existing log."""

    def list_logs(self, user_id: UUID, start: date, end: date) -> list[NutritionLog]:
        """Return logs with start <= log_date <= end, oldest first."""

    def list_logs_for_dates(
        self, user_id: UUID, dates: list[date]
    ) -> list[NutritionLog]:
        """Return logs on the given days, oldest first."""


@dataclass
class NutritionLogService:
    """Service for logging meals and water and summarizing progress."""

    repository: NutritionLogRepository
    profile_repository: ProfileRepository
    catalog: RecipeCatalog

    def current_targets(self, user_id: UUID) -> NutritionTargets:
        """Profile targets, with fallbacks for any that are not set."""
        profile = self.profile_repository.get_profile(user_id)
        if profile is None:
            return NutritionTargets(**FALLBACK_TARGETS)
        return NutritionTargets(
            calories=profile.daily_calories or FALLBACK_TARGETS["calories"],
            protein=profile.protein_g or FALLBACK_TARGETS["protein"],
            carbs=profile.carbs_g or FALLBACK_TARGETS["carbs"],
            fats=profile.fats_g or FALLBACK_TARGETS["fats"],
        )

    def get_or_create_day(
        self, user_id: UUID, day: date | datetime | None = None
    ) -> NutritionLog:
        """Return the user's log for a UTC day, creating an empty one if needed."""
        log_date = _resolve_day(day)
        existing = self.repository.get_log(user_id, log_date)
        if existing is not None:
            return existing
        log = NutritionLog(
            id=None,
            user_id=user_id,
            log_date=log_date,
            targets=self.current_targets(user_id),
        )
        return self.repository.create_log(recompute_log(log))

    def log_meal(  # noqa: PLR0913
        self,
        user_id: UUID,
        meal_type: str,
        recipe_id: UUID | None = None,
        custom_meal: CustomMeal | None = None,
        notes: str | None = None,
        day: date | datetime | None = None,
    ) -> NutritionLog:
        """Append a meal to the day's log.

        A recipe meal snapshots the recipe's nutrition. A custom meal sums its
        ingredients, counting missing nutrition as zero.
        """
        if (recipe_id is None) == (custom_meal is None):
            raise InvalidMealSourceError(
                "Provide either a recipe or a custom meal", field="recipe_id"
            )
        if meal_type not in set(MealType):
            raise InvalidInputError(
                f"Unknown meal type {meal_type}", field="meal_type"
            )

        if recipe_id is not None:
            recipe = self.catalog.get_recipe(recipe_id)
            if recipe is None:
                raise NotFoundError("Recipe not found", field="recipe_id")
            nutrition = recipe.nutrition
        else:
            nutrition = sum_ingredient_nutrition(custom_meal.ingredients)

        log = self.get_or_create_day(user_id, day)
        meal = LoggedMeal(
            meal_type=MealType(meal_type),
            nutrition=nutrition,
            consumed_at=datetime.now(tz=UTC),
            recipe_id=recipe_id,
            custom_meal=custom_meal,
            notes=notes,
        )
        updated = recompute_log(replace(log, meals=[*log.meals, meal]))
        saved = self.repository.save_log(updated)
        _logger.info(
            "Meal logged: user_id=%s date=%s type=%s calories=%s",
            user_id,
            saved.log_date,
            meal_type,
            nutrition.calories,
        )
        return saved

    def update_water_intake(
        self, user_id: UUID, amount_ml: float, day: date | datetime | None = None
    ) -> NutritionLog:
        if amount_ml < 0:
            raise InvalidInputError(
                "Water intake cannot be negative", field="amount_ml"
            )
        log = self.get_or_create_day(user_id, day)
        summary = replace(log.daily_summary, water_intake_ml=amount_ml)
        updated = recompute_log(replace(log, daily_summary=summary))
        return self.repository.save_log(updated)

    def weekly_summary(
        self, user_id: UUID, week_start: date | None = None
    ) -> WeeklySummary:
        """Summarize the Monday-to-Sunday week containing week_start."""
        monday = week_start_for(week_start or _resolve_day(None))
        logs = self.repository.list_logs(user_id, monday, monday + timedelta(days=6))
        return summarize_week(monday, logs)

    def weekly_progress(
        self, user_id: UUID, week_start: date | None = None
    ) -> WeeklyProgress:
        """Per-weekday series for a week, with zeros for days without a log."""
        monday = week_start_for(week_start or _resolve_day(None))
        logs = self.repository.list_logs(user_id, monday, monday + timedelta(days=6))
        by_date = {log.log_date: log for log in logs}
        calories, protein, carbs, fats = [], [], [], []
        for offset in range(7):
            log = by_date.get(monday + timedelta(days=offset))
            summary = log.daily_summary if log else None
            calories.append(summary.total_calories if summary else 0.0)
            protein.append(summary.total_protein if summary else 0.0)
            carbs.append(summary.total_carbs if summary else 0.0)
            fats.append(summary.total_fats if summary else 0.0)
        return WeeklyProgress(
            week_start=monday,
            labels=list(WEEKDAY_LABELS),
            calories=calories,
            protein=protein,
            carbs=carbs,
            fats=fats,
            targets=self.current_targets(user_id),
        )

    def logs_for_dates(
        self, user_id: UUID, dates: Iterable[date | datetime]
    ) -> list[NutritionLog]:
        days = sorted({to_utc_day(value) for value in dates})
        if not days:
            return []
        return self.repository.list_logs_for_dates(user_id, days)

    def logs_in_range(
        self, user_id: UUID, start: date, end: date
    ) -> list[NutritionLog]:
        if end < start:
            raise InvalidInputError("End date is before start date", field="end")
        return self.repository.list_logs(user_id, start, end)


def _resolve_day(day: date | datetime | None) -> date:
    if day is None:
        return datetime.now(tz=UTC).date()
    return to_utc_day(day)
