"""Nutrition domain models."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal


@dataclass(frozen=True)
class NutritionFacts:
    """Nutrient totals for an ingredient, recipe or logged meal."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fats: float = 0.0
    fiber: float = 0.0
    sugar: float = 0.0

    def __add__(self, other: "NutritionFacts") -> "NutritionFacts":
        return NutritionFacts(
            calories=self.calories + other.calories,
            protein=self.protein + other.protein,
            carbs=self.carbs + other.carbs,
            fats=self.fats + other.fats,
            fiber=self.fiber + other.fiber,
            sugar=self.sugar + other.sugar,
        )

    def rounded(self, digits: int = 1) -> "NutritionFacts":
        """Return a copy with every value rounded half-up."""
        return NutritionFacts(
            calories=round_half_up(self.calories, digits),
            protein=round_half_up(self.protein, digits),
            carbs=round_half_up(self.carbs, digits),
            fats=round_half_up(self.fats, digits),
            fiber=round_half_up(self.fiber, digits),
            sugar=round_half_up(self.sugar, digits),
        )


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero instead of to the nearest even digit."""
    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return float(rounded)
