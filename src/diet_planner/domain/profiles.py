"""User profile and nutrition target models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class Gender(StrEnum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class Goal(StrEnum):
    WEIGHT_LOSS = "weight_loss"
    MAINTENANCE = "maintenance"
    MUSCLE_GAIN = "muscle_gain"


class ActivityLevel(StrEnum):
    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    VERY_ACTIVE = "very_active"


class DietaryPreference(StrEnum):
    VEGETARIAN = "vegetarian"
    NON_VEGETARIAN = "non-vegetarian"
    VEGAN = "vegan"
    GLUTEN_FREE = "gluten-free"
    NONE = "none"


@dataclass
class UserProfile:
    """Physical attributes, preferences and derived daily targets of a user."""

    user_id: UUID
    age: int | None = None
    gender: str | None = None
    height_cm: float | None = None
    weight_kg: float | None = None
    goal: str | None = None
    activity_level: str | None = None
    dietary_preference: str = DietaryPreference.NONE
    allergies: list[str] = field(default_factory=list)
    restrictions: list[str] = field(default_factory=list)
    daily_calories: int | None = None
    protein_g: int | None = None
    carbs_g: int | None = None
    fats_g: int | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class CalculatedTargets:
    """Output of the calorie and macro calculator."""

    bmr: int
    maintenance_calories: int
    daily_calories: int
    protein_g: int
    carbs_g: int
    fats_g: int
    bmi: float
    activity_multiplier: float
    macro_ratios: dict[str, float]


@dataclass(frozen=True)
class WeightGoalPlan:
    """Daily and weekly calorie change needed to reach a target weight."""

    daily_calorie_adjustment: int
    weekly_deficit: int
    timeframe_weeks: int
    is_aggressive: bool
