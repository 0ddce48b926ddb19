"""Nutrition rollups for recipes, plan days, plans and daily logs."""

from collections.abc import Iterable
from dataclasses import replace
from datetime import UTC, date, datetime, timedelta

from diet_planner.constants import CALORIE_GOAL_HIGH, CALORIE_GOAL_LOW, MACRO_GOAL_FLOOR
from diet_planner.domain.errors import InvalidInputError
from diet_planner.domain.meal_plans import (
    DayNutrition,
    DayPlan,
    MealPlan,
    PlanNutritionSummary,
)
from diet_planner.domain.nutrition import NutritionFacts, round_half_up
from diet_planner.domain.nutrition_logs import (
    DailySummary,
    GoalsMet,
    LoggedMeal,
    NutritionLog,
    NutritionTargets,
    WeeklySummary,
)
from diet_planner.domain.recipes import Recipe, RecipeIngredient

NUTRIENTS = ("calories", "protein", "carbs", "fats")


def sum_ingredient_nutrition(
    ingredients: Iterable[RecipeIngredient],
) -> NutritionFacts:
    """Sum ingredient nutrition. Ingredients without nutrition count as zero."""
    total = NutritionFacts()
    for ingredient in ingredients:
        if ingredient.nutrition is not None:
            total = total + ingredient.nutrition
    return total


def nutrition_per_serving(facts: NutritionFacts, servings: int) -> NutritionFacts:
    if servings <= 0:
        raise InvalidInputError("Servings must be positive", field="servings")
    return NutritionFacts(
        calories=facts.calories / servings,
        protein=facts.protein / servings,
        carbs=facts.carbs / servings,
        fats=facts.fats / servings,
        fiber=facts.fiber / servings,
        sugar=facts.sugar / servings,
    ).rounded(1)


def day_nutrition(recipes: Iterable[Recipe]) -> DayNutrition:
    """Total the stored nutrition of the recipes assigned to a day."""
    calories = protein = carbs = fats = 0.0
    for recipe in recipes:
        calories += recipe.nutrition.calories
        protein += recipe.nutrition.protein
        carbs += recipe.nutrition.carbs
        fats += recipe.nutrition.fats
    return DayNutrition(
        total_calories=calories,
        total_protein=protein,
        total_carbs=carbs,
        total_fats=fats,
    )


def summarize_plan(
    days: Iterable[DayPlan], duration_days: int
) -> PlanNutritionSummary:
    calories = protein = carbs = fats = 0.0
    for day in days:
        calories += day.nutrition.total_calories
        protein += day.nutrition.total_protein
        carbs += day.nutrition.total_carbs
        fats += day.nutrition.total_fats
    average = int(round_half_up(calories / duration_days)) if duration_days else 0
    return PlanNutritionSummary(
        total_calories=calories,
        total_protein=protein,
        total_carbs=carbs,
        total_fats=fats,
        average_daily_calories=average,
    )


def completion_rate(days: Iterable[DayPlan]) -> int:
    """Percentage of slots marked consumed, 0 when the plan has none."""
    total = consumed = 0
    for day in days:
        for _, slot in day.slots():
            total += 1
            if slot.consumed:
                consumed += 1
    if total == 0:
        return 0
    return int(round_half_up(consumed / total * 100))


def recompute_plan(plan: MealPlan) -> MealPlan:
    """Return the plan with end date, nutrition summary and completion refreshed."""
    return replace(
        plan,
        end_date=plan.start_date + timedelta(days=plan.duration_days - 1),
        nutrition_summary=summarize_plan(plan.days, plan.duration_days),
        completion_rate=completion_rate(plan.days),
    )


def daily_summary(
    meals: Iterable[LoggedMeal], water_intake_ml: float = 0.0
) -> DailySummary:
    total = NutritionFacts()
    for meal in meals:
        total = total + meal.nutrition
    return DailySummary(
        total_calories=total.calories,
        total_protein=total.protein,
        total_carbs=total.carbs,
        total_fats=total.fats,
        total_fiber=total.fiber,
        total_sugar=total.sugar,
        water_intake_ml=water_intake_ml,
    )


def goals_met(summary: DailySummary, targets: NutritionTargets) -> GoalsMet:
    """Calories must land within 90-110% of target, macros reach at least 90%."""
    calories = False
    if targets.calories:
        calories = (
            targets.calories * CALORIE_GOAL_LOW
            <= summary.total_calories
            <= targets.calories * CALORIE_GOAL_HIGH
        )
    return GoalsMet(
        calories=calories,
        protein=_macro_met(summary.total_protein, targets.protein),
        carbs=_macro_met(summary.total_carbs, targets.carbs),
        fats=_macro_met(summary.total_fats, targets.fats),
    )


def _macro_met(actual: float, target: float | None) -> bool:
    if not target:
        return False
    return actual >= target * MACRO_GOAL_FLOOR


def recompute_log(log: NutritionLog) -> NutritionLog:
    """Return the log with its daily summary and goal flags refreshed.

    Water intake is carried over from the existing summary.
    """
    summary = daily_summary(log.meals, log.daily_summary.water_intake_ml)
    return replace(
        log,
        daily_summary=summary,
        goals_met=goals_met(summary, log.targets),
    )


def _actuals(summary: DailySummary) -> dict[str, float]:
    return {
        "calories": summary.total_calories,
        "protein": summary.total_protein,
        "carbs": summary.total_carbs,
        "fats": summary.total_fats,
    }


def _targets(targets: NutritionTargets) -> dict[str, float | None]:
    return {
        "calories": targets.calories,
        "protein": targets.protein,
        "carbs": targets.carbs,
        "fats": targets.fats,
    }


def progress(log: NutritionLog) -> dict[str, int]:
    """Percent of each positive target reached, capped at 100."""
    actuals = _actuals(log.daily_summary)
    result = {}
    for nutrient, target in _targets(log.targets).items():
        if target and target > 0:
            percent = int(round_half_up(actuals[nutrient] / target * 100))
            result[nutrient] = min(percent, 100)
    return result


def remaining(log: NutritionLog) -> dict[str, float]:
    actuals = _actuals(log.daily_summary)
    return {
        nutrient: max(target - actuals[nutrient], 0)
        for nutrient, target in _targets(log.targets).items()
        if target and target > 0
    }


def calorie_balance(log: NutritionLog, calories_burned: float = 0.0) -> float:
    return log.daily_summary.total_calories - calories_burned


def to_utc_day(value: date | datetime) -> date:
    """Return the UTC calendar day. Naive datetimes are taken as UTC."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.date()
        return value.astimezone(UTC).date()
    return value


def week_start_for(day: date) -> date:
    """Roll a date back to the Monday of its ISO week."""
    return day - timedelta(days=day.weekday())


def summarize_week(week_start: date, logs: Iterable[NutritionLog]) -> WeeklySummary:
    """Totals, goal counts and the per-logged-day calorie average for a week."""
    monday = week_start_for(week_start)
    sunday = monday + timedelta(days=6)
    in_week = [log for log in logs if monday <= log.log_date <= sunday]

    calories = protein = carbs = fats = 0.0
    met = dict.fromkeys(NUTRIENTS, 0)
    for log in in_week:
        calories += log.daily_summary.total_calories
        protein += log.daily_summary.total_protein
        carbs += log.daily_summary.total_carbs
        fats += log.daily_summary.total_fats
        met["calories"] += log.goals_met.calories
        met["protein"] += log.goals_met.protein
        met["carbs"] += log.goals_met.carbs
        met["fats"] += log.goals_met.fats

    days_completed = len(in_week)
    return WeeklySummary(
        week_start=monday,
        week_end=sunday,
        total_calories=calories,
        total_protein=protein,
        total_carbs=carbs,
        total_fats=fats,
        average_calories=calories / days_completed if days_completed else 0.0,
        days_completed=days_completed,
        goals_met=met,
    )
