"""Calorie and macro target calculator.

Uses the Mifflin-St Jeor equation for basal metabolic rate, an activity
multiplier for maintenance calories, a fixed goal adjustment with a safe
minimum, and a goal-specific macro split converted at 4/4/9 kcal per gram.
"""

from diet_planner.constants import (
    ACTIVITY_MULTIPLIERS,
    AGGRESSIVE_TIMEFRAME_WEEKS,
    CALORIES_PER_GRAM,
    CALORIES_PER_KG_BODY_WEIGHT,
    DEFAULT_ACTIVITY_MULTIPLIER,
    GOAL_CALORIE_ADJUSTMENTS,
    GOAL_MACRO_RATIOS,
    KG_PER_LB,
    MAINTENANCE_KCAL_PER_KG,
    MAX_AGE,
    MAX_HEIGHT_CM,
    MAX_WEIGHT_KG,
    MIN_AGE,
    MIN_CALORIES_MALE,
    MIN_CALORIES_OTHER,
    MIN_HEIGHT_CM,
    MIN_WEIGHT_KG,
)
from diet_planner.domain.errors import InvalidInputError
from diet_planner.domain.nutrition import round_half_up
from diet_planner.domain.profiles import (
    CalculatedTargets,
    Gender,
    Goal,
    UserProfile,
    WeightGoalPlan,
)


def calculate_bmr(weight_kg: float, height_cm: float, age: int, gender: str) -> float:
    """Basal Metabolic Rate via Mifflin-St Jeor.

    Male:   10 × weight + 6.25 × height − 5 × age + 5
    Female: 10 × weight + 6.25 × height − 5 × age − 161
    Other:  mean of the two
    """
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    if gender == Gender.MALE:
        return base + 5
    if gender == Gender.FEMALE:
        return base - 161
    return ((base + 5) + (base - 161)) / 2


def activity_multiplier(activity_level: str | None) -> float:
    return ACTIVITY_MULTIPLIERS.get(activity_level or "", DEFAULT_ACTIVITY_MULTIPLIER)


def minimum_calories(gender: str) -> int:
    return MIN_CALORIES_MALE if gender == Gender.MALE else MIN_CALORIES_OTHER


def calculate_bmi(weight_kg: float, height_cm: float) -> float:
    height_m = height_cm / 100
    return round_half_up(weight_kg / (height_m * height_m), 1)


def compute_targets(profile: UserProfile) -> CalculatedTargets:
    """Calculate daily calorie and macro targets for a profile.

    Raises InvalidInputError naming the first missing or out-of-range field.
    """
    age = _require_in_range(profile.age, "age", MIN_AGE, MAX_AGE)
    height_cm = _require_in_range(
        profile.height_cm, "height_cm", MIN_HEIGHT_CM, MAX_HEIGHT_CM
    )
    weight_kg = _require_in_range(
        profile.weight_kg, "weight_kg", MIN_WEIGHT_KG, MAX_WEIGHT_KG
    )
    gender = _require(profile.gender, "gender")
    goal = _require(profile.goal, "goal")
    activity_level = _require(profile.activity_level, "activity_level")

    bmr = calculate_bmr(weight_kg, height_cm, age, gender)
    multiplier = activity_multiplier(activity_level)
    maintenance = bmr * multiplier

    target = maintenance + GOAL_CALORIE_ADJUSTMENTS.get(goal, 0)
    target = max(target, minimum_calories(gender))

    ratios = GOAL_MACRO_RATIOS.get(goal, GOAL_MACRO_RATIOS[Goal.MAINTENANCE])
    protein_g = target * ratios["protein"] / CALORIES_PER_GRAM["protein"]
    carbs_g = target * ratios["carbs"] / CALORIES_PER_GRAM["carbs"]
    fats_g = target * ratios["fats"] / CALORIES_PER_GRAM["fats"]

    return CalculatedTargets(
        bmr=int(round_half_up(bmr)),
        maintenance_calories=int(round_half_up(maintenance)),
        daily_calories=int(round_half_up(target)),
        protein_g=int(round_half_up(protein_g)),
        carbs_g=int(round_half_up(carbs_g)),
        fats_g=int(round_half_up(fats_g)),
        bmi=calculate_bmi(weight_kg, height_cm),
        activity_multiplier=multiplier,
        macro_ratios=dict(ratios),
    )


def calculate_weight_goal_calories(
    current_weight_kg: float, target_weight_kg: float, timeframe_weeks: int = 12
) -> WeightGoalPlan:
    """Daily calorie change to move from the current to the target weight.

    Positive adjustments are a deficit (weight loss), negative a surplus.
    """
    if timeframe_weeks <= 0:
        raise InvalidInputError(
            "Timeframe must be at least one week", field="timeframe_weeks"
        )
    total = (current_weight_kg - target_weight_kg) * CALORIES_PER_KG_BODY_WEIGHT
    weekly = total / timeframe_weeks
    return WeightGoalPlan(
        daily_calorie_adjustment=int(round_half_up(weekly / 7)),
        weekly_deficit=int(round_half_up(weekly)),
        timeframe_weeks=timeframe_weeks,
        is_aggressive=timeframe_weeks < AGGRESSIVE_TIMEFRAME_WEEKS,
    )


def estimate_maintenance_calories(weight: float, is_metric: bool = True) -> int:
    """Rough maintenance estimate of 30 kcal per kg of body weight."""
    weight_kg = weight if is_metric else weight * KG_PER_LB
    return int(round_half_up(weight_kg * MAINTENANCE_KCAL_PER_KG))


def _require(value: str | None, field: str) -> str:
    if not value:
        raise InvalidInputError(f"{field} is required", field=field)
    return value


def _require_in_range(
    value: float | None, field: str, low: float, high: float
) -> float:
    if value is None:
        raise InvalidInputError(f"{field} is required", field=field)
    if not low <= value <= high:
        raise InvalidInputError(
            f"{field} must be between {low} and {high}", field=field
        )
    return value
