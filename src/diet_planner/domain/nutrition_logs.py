"""Domain models for the daily nutrition journal."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from uuid import UUID

from diet_planner.domain.nutrition import NutritionFacts
from diet_planner.domain.recipes import RecipeIngredient


class MealType(StrEnum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


@dataclass(frozen=True)
class CustomMeal:
    """A meal logged from its own ingredient list instead of a recipe."""

    name: str
    ingredients: list[RecipeIngredient] = field(default_factory=list)


@dataclass(frozen=True)
class LoggedMeal:
    """A consumed meal with nutrition frozen at log time."""

    meal_type: str
    nutrition: NutritionFacts
    consumed_at: datetime
    recipe_id: UUID | None = None
    custom_meal: CustomMeal | None = None
    notes: str | None = None


@dataclass(frozen=True)
class NutritionTargets:
    """Daily targets copied from the profile when the day was opened."""

    calories: float | None = None
    protein: float | None = None
    carbs: float | None = None
    fats: float | None = None


@dataclass(frozen=True)
class DailySummary:
    """Totals over the meals logged for one day."""

    total_calories: float = 0.0
    total_protein: float = 0.0
    total_carbs: float = 0.0
    total_fats: float = 0.0
    total_fiber: float = 0.0
    total_sugar: float = 0.0
    water_intake_ml: float = 0.0


@dataclass(frozen=True)
class GoalsMet:
    """Per-nutrient goal flags for one day."""

    calories: bool = False
    protein: bool = False
    carbs: bool = False
    fats: bool = False


@dataclass
class NutritionLog:
    """Journal entry for one user and one UTC calendar day."""

    id: UUID | None
    user_id: UUID
    log_date: date
    targets: NutritionTargets
    meals: list[LoggedMeal] = field(default_factory=list)
    daily_summary: DailySummary = field(default_factory=DailySummary)
    goals_met: GoalsMet = field(default_factory=GoalsMet)
    notes: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class WeeklySummary:
    """Totals and goal counts over a Monday-to-Sunday week."""

    week_start: date
    week_end: date
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fats: float
    average_calories: float
    days_completed: int
    goals_met: dict[str, int]


@dataclass(frozen=True)
class WeeklyProgress:
    """Per-weekday series for charting a week against targets."""

    week_start: date
    labels: list[str]
    calories: list[float]
    protein: list[float]
    carbs: list[float]
    fats: list[float]
    targets: NutritionTargets
