"""Row conversion helpers shared by the Supabase repositories."""

from datetime import date, datetime

from diet_planner.domain.nutrition import NutritionFacts
from diet_planner.domain.recipes import RecipeIngredient


def parse_datetime(value: object) -> datetime | None:
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None


def parse_date(value: object) -> date | None:
    if isinstance(value, str) and value:
        return date.fromisoformat(value[:10])
    return None


def nutrition_to_json(facts: NutritionFacts) -> dict[str, float]:
    return {
        "calories": facts.calories,
        "protein": facts.protein,
        "carbs": facts.carbs,
        "fats": facts.fats,
        "fiber": facts.fiber,
        "sugar": facts.sugar,
    }


def nutrition_from_json(payload: object) -> NutritionFacts:
    """Parse a nutrition object. Missing nutrients read as zero."""
    if not isinstance(payload, dict):
        return NutritionFacts()
    return NutritionFacts(
        calories=float(payload.get("calories") or 0.0),
        protein=float(payload.get("protein") or 0.0),
        carbs=float(payload.get("carbs") or 0.0),
        fats=float(payload.get("fats") or 0.0),
        fiber=float(payload.get("fiber") or 0.0),
        sugar=float(payload.get("sugar") or 0.0),
    )


def ingredients_to_json(ingredients: list[RecipeIngredient]) -> list[dict[str, object]]:
    return [
        {
            "name": ingredient.name,
            "quantity": ingredient.quantity,
            "unit": ingredient.unit,
            "category": ingredient.category,
            "nutrition": nutrition_to_json(ingredient.nutrition)
            if ingredient.nutrition
            else None,
        }
        for ingredient in ingredients
    ]


def ingredients_from_json(payload: object) -> list[RecipeIngredient]:
    if not isinstance(payload, list):
        return []
    return [
        RecipeIngredient(
            name=str(item.get("name", "")),
            quantity=float(item.get("quantity") or 0.0),
            unit=item.get("unit"),
            category=item.get("category"),
            nutrition=nutrition_from_json(item["nutrition"])
            if item.get("nutrition")
            else None,
        )
        for item in payload
    ]
