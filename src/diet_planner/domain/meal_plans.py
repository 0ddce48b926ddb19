"""Meal plan domain models."""

import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from uuid import UUID

from diet_planner.constants import MAX_SLOTS_PER_CATEGORY
from diet_planner.domain.errors import InvalidInputError
from diet_planner.domain.grocery import GroceryLine

_SCHEDULED_TIME = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")
MIN_RATING = 1
MAX_RATING = 5


class MealCategory(StrEnum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACKS = "snacks"


MEAL_CATEGORIES = tuple(MealCategory)


class PlanStatus(StrEnum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class MealFeedback:
    """User rating of a planned meal."""

    rating: int
    comment: str = ""

    def __post_init__(self) -> None:
        if not MIN_RATING <= self.rating <= MAX_RATING:
            raise InvalidInputError(
                f"Rating must be between {MIN_RATING} and {MAX_RATING}",
                field="rating",
            )


@dataclass
class MealSlot:
    """A scheduled recipe inside a day's meal category."""

    recipe_id: UUID | None = None
    scheduled_time: str | None = None
    consumed: bool = False
    feedback: MealFeedback | None = None

    def __post_init__(self) -> None:
        if self.scheduled_time and not _SCHEDULED_TIME.match(self.scheduled_time):
            raise InvalidInputError(
                "Scheduled time must use HH:MM format", field="scheduled_time"
            )


def empty_meals() -> dict[MealCategory, list[MealSlot]]:
    """Return a meal mapping with an empty slot list per category."""
    return {category: [] for category in MEAL_CATEGORIES}


@dataclass(frozen=True)
class DayNutrition:
    """Nutrition totals of the recipes planned for one day."""

    total_calories: float = 0.0
    total_protein: float = 0.0
    total_carbs: float = 0.0
    total_fats: float = 0.0


@dataclass
class DayPlan:
    """One day of a meal plan."""

    date: date
    day_number: int
    meals: dict[MealCategory, list[MealSlot]] = field(default_factory=empty_meals)
    nutrition: DayNutrition = field(default_factory=DayNutrition)
    notes: str | None = None

    def __post_init__(self) -> None:
        for category, slots in self.meals.items():
            if len(slots) > MAX_SLOTS_PER_CATEGORY:
                raise InvalidInputError(
                    f"At most {MAX_SLOTS_PER_CATEGORY} {category} slots per day",
                    field="meals",
                )

    def slots(self) -> Iterator[tuple[MealCategory, MealSlot]]:
        """Yield every slot in category order."""
        for category in MEAL_CATEGORIES:
            for slot in self.meals.get(category, []):
                yield category, slot


@dataclass(frozen=True)
class PlanNutritionSummary:
    """Plan-wide nutrition totals."""

    total_calories: float = 0.0
    total_protein: float = 0.0
    total_carbs: float = 0.0
    total_fats: float = 0.0
    average_daily_calories: int = 0


@dataclass(frozen=True)
class MealPlanPreferences:
    """Constraints used when selecting recipes for a plan."""

    dietary_preference: str | None = None
    excluded_ingredients: tuple[str, ...] = ()
    cuisine: tuple[str, ...] = ()
    max_prep_time_min: int | None = None
    max_cook_time_min: int | None = None


@dataclass
class MealPlan:
    """A multi-day plan of recipes with derived nutrition and progress."""

    id: UUID | None
    user_id: UUID
    title: str
    duration_days: int
    start_date: date
    end_date: date | None = None
    preferences: MealPlanPreferences = field(default_factory=MealPlanPreferences)
    days: list[DayPlan] = field(default_factory=list)
    grocery_list: list[GroceryLine] = field(default_factory=list)
    nutrition_summary: PlanNutritionSummary = field(
        default_factory=PlanNutritionSummary
    )
    status: str = PlanStatus.ACTIVE
    completion_rate: int = 0
    is_favorite: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class MealPlanPage:
    """A page of a user's meal plans, newest first."""

    items: list[MealPlan]
    total: int
    page: int
    pages: int
