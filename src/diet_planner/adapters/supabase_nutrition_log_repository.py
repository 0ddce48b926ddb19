"""Supabase implementation for daily nutrition logs."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from diet_planner.adapters.supabase_rows import (
    ingredients_from_json,
    ingredients_to_json,
    nutrition_from_json,
    nutrition_to_json,
    parse_date,
    parse_datetime,
)
from diet_planner.domain.nutrition_logs import (
    CustomMeal,
    DailySummary,
    GoalsMet,
    LoggedMeal,
    NutritionLog,
    NutritionTargets,
)
from diet_planner.services.nutrition_logs import NutritionLogRepository


@dataclass
class SupabaseNutritionLogRepository(NutritionLogRepository):
    """Supabase-backed repository for nutrition logs.

    The table is unique on (user_id, log_date).
    """

    client: Client

    def get_log(self, user_id: UUID, log_date: date) -> NutritionLog | None:
        response = (
            self.client.table("nutrition_logs")
            .select("*")
            .eq("user_id", str(user_id))
            .eq("log_date", log_date.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_log(response.data[0])

    def create_log(self, log: NutritionLog) -> NutritionLog:
        """Insert a log, returning the stored row if the day already exists."""
        response = (
            self.client.table("nutrition_logs")
            .upsert(
                _to_row(log), on_conflict="user_id,log_date", ignore_duplicates=True
            )
            .execute()
        )
        if response.data:
            return _parse_log(response.data[0])
        existing = self.get_log(log.user_id, log.log_date)
        if existing is None:
            raise RuntimeError("Failed to create nutrition log")
        return existing

    def save_log(self, log: NutritionLog) -> NutritionLog:
        response = (
            self.client.table("nutrition_logs")
            .update(_to_row(log))
            .eq("id", str(log.id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update nutrition log")
        return _parse_log(response.data[0])

    def list_logs(self, user_id: UUID, start: date, end: date) -> list[NutritionLog]:
        response = (
            self.client.table("nutrition_logs")
            .select("*")
            .eq("user_id", str(user_id))
            .gte("log_date", start.isoformat())
            .lte("log_date", end.isoformat())
            .order("log_date")
            .execute()
        )
        return [_parse_log(row) for row in response.data or []]

    def list_logs_for_dates(
        self, user_id: UUID, dates: list[date]
    ) -> list[NutritionLog]:
        response = (
            self.client.table("nutrition_logs")
            .select("*")
            .eq("user_id", str(user_id))
            .in_("log_date", [day.isoformat() for day in dates])
            .order("log_date")
            .execute()
        )
        return [_parse_log(row) for row in response.data or []]


def _to_row(log: NutritionLog) -> dict[str, object]:
    summary = log.daily_summary
    return {
        "user_id": str(log.user_id),
        "log_date": log.log_date.isoformat(),
        "targets": {
            "calories": log.targets.calories,
            "protein": log.targets.protein,
            "carbs": log.targets.carbs,
            "fats": log.targets.fats,
        },
        "meals": [_meal_to_json(meal) for meal in log.meals],
        "daily_summary": {
            "total_calories": summary.total_calories,
            "total_protein": summary.total_protein,
            "total_carbs": summary.total_carbs,
            "total_fats": summary.total_fats,
            "total_fiber": summary.total_fiber,
            "total_sugar": summary.total_sugar,
            "water_intake_ml": summary.water_intake_ml,
        },
        "goals_met": {
            "calories": log.goals_met.calories,
            "protein": log.goals_met.protein,
            "carbs": log.goals_met.carbs,
            "fats": log.goals_met.fats,
        },
        "notes": log.notes,
    }


def _meal_to_json(meal: LoggedMeal) -> dict[str, object]:
    custom = meal.custom_meal
    return {
        "meal_type": str(meal.meal_type),
        "nutrition": nutrition_to_json(meal.nutrition),
        "consumed_at": meal.consumed_at.isoformat(),
        "recipe_id": str(meal.recipe_id) if meal.recipe_id else None,
        "custom_meal": {
            "name": custom.name,
            "ingredients": ingredients_to_json(custom.ingredients),
        }
        if custom
        else None,
        "notes": meal.notes,
    }


def _parse_meal(item: dict[str, object]) -> LoggedMeal:
    recipe_id = item.get("recipe_id")
    custom = item.get("custom_meal")
    return LoggedMeal(
        meal_type=str(item["meal_type"]),
        nutrition=nutrition_from_json(item.get("nutrition")),
        consumed_at=parse_datetime(item.get("consumed_at")),
        recipe_id=UUID(recipe_id) if recipe_id else None,
        custom_meal=CustomMeal(
            name=str(custom.get("name", "")),
            ingredients=ingredients_from_json(custom.get("ingredients")),
        )
        if custom
        else None,
        notes=item.get("notes"),
    )


def _parse_log(row: dict[str, object]) -> NutritionLog:
    """Parse a nutrition log row into a domain model."""
    targets = row.get("targets") or {}
    summary = row.get("daily_summary") or {}
    met = row.get("goals_met") or {}
    return NutritionLog(
        id=UUID(row["id"]),
        user_id=UUID(row["user_id"]),
        log_date=parse_date(row.get("log_date")),
        targets=NutritionTargets(
            calories=targets.get("calories"),
            protein=targets.get("protein"),
            carbs=targets.get("carbs"),
            fats=targets.get("fats"),
        ),
        meals=[_parse_meal(item) for item in row.get("meals") or []],
        daily_summary=DailySummary(
            total_calories=float(summary.get("total_calories") or 0.0),
            total_protein=float(summary.get("total_protein") or 0.0),
            total_carbs=float(summary.get("total_carbs") or 0.0),
            total_fats=float(summary.get("total_fats") or 0.0),
            total_fiber=float(summary.get("total_fiber") or 0.0),
            total_sugar=float(summary.get("total_sugar") or 0.0),
            water_intake_ml=float(summary.get("water_intake_ml") or 0.0),
        ),
        goals_met=GoalsMet(
            calories=bool(met.get("calories", False)),
            protein=bool(met.get("protein", False)),
            carbs=bool(met.get("carbs", False)),
            fats=bool(met.get("fats", False)),
        ),
        notes=row.get("notes"),
        created_at=parse_datetime(row.get("created_at")),
    )
