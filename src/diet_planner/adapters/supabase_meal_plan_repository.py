"""Supabase implementation for meal plans."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from diet_planner.adapters.supabase_rows import parse_date, parse_datetime
from diet_planner.domain.grocery import GroceryLine
from diet_planner.domain.meal_plans import (
    MEAL_CATEGORIES,
    DayNutrition,
    DayPlan,
    MealFeedback,
    MealPlan,
    MealPlanPreferences,
    MealSlot,
    PlanNutritionSummary,
)
from diet_planner.services.meal_plans import MealPlanRepository


@dataclass
class SupabaseMealPlanRepository(MealPlanRepository):
    """Supabase-backed repository for meal plans.

    Days, preferences, grocery list and summary are stored as JSON columns.
    """

    client: Client

    def create_plan(self, plan: MealPlan) -> MealPlan:
        response = self.client.table("meal_plans").insert(_to_row(plan)).execute()
        if not response.data:
            raise RuntimeError("Failed to create meal plan")
        return parse_plan(response.data[0])

    def get_plan(self, plan_id: UUID) -> MealPlan | None:
        response = (
            self.client.table("meal_plans")
            .select("*")
            .eq("id", str(plan_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_plan(response.data[0])

    def list_plans(self, user_id: UUID, offset: int, limit: int) -> list[MealPlan]:
        response = (
            self.client.table("meal_plans")
            .select("*")
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        return [parse_plan(row) for row in response.data or []]

    def count_plans(self, user_id: UUID) -> int:
        response = (
            self.client.table("meal_plans")
            .select("id", count="exact")
            .eq("user_id", str(user_id))
            .execute()
        )
        return response.count or 0

    def update_plan(self, plan: MealPlan) -> MealPlan:
        response = (
            self.client.table("meal_plans")
            .update(_to_row(plan))
            .eq("id", str(plan.id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update meal plan")
        return parse_plan(response.data[0])

    def delete_plan(self, plan_id: UUID) -> None:
        self.client.table("meal_plans").delete().eq("id", str(plan_id)).execute()


def _to_row(plan: MealPlan) -> dict[str, object]:
    return {
        "user_id": str(plan.user_id),
        "title": plan.title,
        "duration_days": plan.duration_days,
        "start_date": plan.start_date.isoformat(),
        "end_date": plan.end_date.isoformat() if plan.end_date else None,
        "preferences": {
            "dietary_preference": plan.preferences.dietary_preference,
            "excluded_ingredients": list(plan.preferences.excluded_ingredients),
            "cuisine": list(plan.preferences.cuisine),
            "max_prep_time_min": plan.preferences.max_prep_time_min,
            "max_cook_time_min": plan.preferences.max_cook_time_min,
        },
        "days": [_day_to_json(day) for day in plan.days],
        "grocery_list": [
            {
                "name": line.name,
                "quantity": line.quantity,
                "unit": line.unit,
                "category": line.category,
                "purchased": line.purchased,
            }
            for line in plan.grocery_list
        ],
        "nutrition_summary": {
            "total_calories": plan.nutrition_summary.total_calories,
            "total_protein": plan.nutrition_summary.total_protein,
            "total_carbs": plan.nutrition_summary.total_carbs,
            "total_fats": plan.nutrition_summary.total_fats,
            "average_daily_calories": plan.nutrition_summary.average_daily_calories,
        },
        "status": str(plan.status),
        "completion_rate": plan.completion_rate,
        "is_favorite": plan.is_favorite,
    }


def _day_to_json(day: DayPlan) -> dict[str, object]:
    return {
        "date": day.date.isoformat(),
        "day_number": day.day_number,
        "meals": {
            str(category): [
                {
                    "recipe_id": str(slot.recipe_id) if slot.recipe_id else None,
                    "scheduled_time": slot.scheduled_time,
                    "consumed": slot.consumed,
                    "feedback": {
                        "rating": slot.feedback.rating,
                        "comment": slot.feedback.comment,
                    }
                    if slot.feedback
                    else None,
                }
                for slot in day.meals.get(category, [])
            ]
            for category in MEAL_CATEGORIES
        },
        "nutrition": {
            "total_calories": day.nutrition.total_calories,
            "total_protein": day.nutrition.total_protein,
            "total_carbs": day.nutrition.total_carbs,
            "total_fats": day.nutrition.total_fats,
        },
        "notes": day.notes,
    }


def _parse_slot(item: dict[str, object]) -> MealSlot:
    recipe_id = item.get("recipe_id")
    feedback = item.get("feedback")
    return MealSlot(
        recipe_id=UUID(recipe_id) if recipe_id else None,
        scheduled_time=item.get("scheduled_time"),
        consumed=bool(item.get("consumed", False)),
        feedback=MealFeedback(
            rating=int(feedback["rating"]), comment=str(feedback.get("comment", ""))
        )
        if feedback
        else None,
    )


def _parse_day(item: dict[str, object]) -> DayPlan:
    meals = item.get("meals") or {}
    nutrition = item.get("nutrition") or {}
    return DayPlan(
        date=date.fromisoformat(item["date"]),
        day_number=int(item["day_number"]),
        meals={
            category: [_parse_slot(slot) for slot in meals.get(category.value) or []]
            for category in MEAL_CATEGORIES
        },
        nutrition=DayNutrition(
            total_calories=float(nutrition.get("total_calories") or 0.0),
            total_protein=float(nutrition.get("total_protein") or 0.0),
            total_carbs=float(nutrition.get("total_carbs") or 0.0),
            total_fats=float(nutrition.get("total_fats") or 0.0),
        ),
        notes=item.get("notes"),
    )


def parse_plan(row: dict[str, object]) -> MealPlan:
    """Parse a meal plan row into a domain model."""
    preferences = row.get("preferences") or {}
    summary = row.get("nutrition_summary") or {}
    return MealPlan(
        id=UUID(row["id"]),
        user_id=UUID(row["user_id"]),
        title=str(row.get("title", "")),
        duration_days=int(row["duration_days"]),
        start_date=parse_date(row.get("start_date")),
        end_date=parse_date(row.get("end_date")),
        preferences=MealPlanPreferences(
            dietary_preference=preferences.get("dietary_preference"),
            excluded_ingredients=tuple(preferences.get("excluded_ingredients") or ()),
            cuisine=tuple(preferences.get("cuisine") or ()),
            max_prep_time_min=preferences.get("max_prep_time_min"),
            max_cook_time_min=preferences.get("max_cook_time_min"),
        ),
        days=[_parse_day(item) for item in row.get("days") or []],
        grocery_list=[
            GroceryLine(
                name=str(item["name"]),
                quantity=float(item.get("quantity") or 0.0),
                unit=str(item.get("unit") or "unit"),
                category=str(item.get("category") or "other"),
                purchased=bool(item.get("purchased", False)),
            )
            for item in row.get("grocery_list") or []
        ],
        nutrition_summary=PlanNutritionSummary(
            total_calories=float(summary.get("total_calories") or 0.0),
            total_protein=float(summary.get("total_protein") or 0.0),
            total_carbs=float(summary.get("total_carbs") or 0.0),
            total_fats=float(summary.get("total_fats") or 0.0),
            average_daily_calories=int(summary.get("average_daily_calories") or 0),
        ),
        status=str(row.get("status") or "active"),
        completion_rate=int(row.get("completion_rate") or 0),
        is_favorite=bool(row.get("is_favorite", False)),
        created_at=parse_datetime(row.get("created_at")),
        updated_at=parse_datetime(row.get("updated_at")),
    )
