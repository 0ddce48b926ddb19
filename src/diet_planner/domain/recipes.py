"""Recipe catalog models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID

from diet_planner.domain.nutrition import NutritionFacts


class Difficulty(StrEnum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True)
class RecipeIngredient:
    """An ingredient line with optional nutrition for its quantity."""

    name: str
    quantity: float = 0.0
    unit: str | None = None
    category: str | None = None
    nutrition: NutritionFacts | None = None


@dataclass
class Recipe:
    """A catalog recipe. Nutrition is the precomputed total for the recipe."""

    id: UUID | None
    title: str
    nutrition: NutritionFacts
    ingredients: list[RecipeIngredient] = field(default_factory=list)
    instructions: list[str] = field(default_factory=list)
    description: str = ""
    dietary_tags: frozenset[str] = frozenset()
    cuisine: str | None = None
    prep_time_min: int = 0
    cook_time_min: int = 0
    servings: int = 1
    difficulty: str = Difficulty.EASY
    is_approved: bool = False
    rejection_reason: str | None = None
    created_by: UUID | None = None
    created_at: datetime | None = None

    @property
    def total_time_min(self) -> int:
        return self.prep_time_min + self.cook_time_min


@dataclass(frozen=True)
class RecipeDraft:
    """Content submitted when creating a recipe."""

    title: str
    ingredients: list[RecipeIngredient] = field(default_factory=list)
    instructions: list[str] = field(default_factory=list)
    nutrition: NutritionFacts | None = None
    description: str = ""
    dietary_tags: frozenset[str] = frozenset()
    cuisine: str | None = None
    prep_time_min: int = 0
    cook_time_min: int = 0
    servings: int = 1
    difficulty: str = Difficulty.EASY


@dataclass(frozen=True)
class RecipeQuery:
    """Catalog filter. Every populated criterion must hold."""

    approved_only: bool = True
    dietary_tag: str | None = None
    cuisines: tuple[str, ...] = ()
    excluded_ingredients: tuple[str, ...] = ()
    max_prep_time_min: int | None = None
    max_cook_time_min: int | None = None
    title_contains: str | None = None

    def matches(self, recipe: Recipe) -> bool:  # noqa: PLR0911
        """Return whether a recipe satisfies this query."""
        if self.approved_only and not recipe.is_approved:
            return False
        if self.dietary_tag and self.dietary_tag not in recipe.dietary_tags:
            return False
        if self.cuisines and recipe.cuisine not in self.cuisines:
            return False
        if self.excluded_ingredients:
            excluded = {name.strip().casefold() for name in self.excluded_ingredients}
            for ingredient in recipe.ingredients:
                if ingredient.name.strip().casefold() in excluded:
                    return False
        if (
            self.max_prep_time_min is not None
            and recipe.prep_time_min > self.max_prep_time_min
        ):
            return False
        if (
            self.max_cook_time_min is not None
            and recipe.cook_time_min > self.max_cook_time_min
        ):
            return False
        if (
            self.title_contains
            and self.title_contains.casefold() not in recipe.title.casefold()
        ):
            return False
        return True


@dataclass(frozen=True)
class ExternalRecipe:
    """A recipe returned by an external provider search."""

    external_id: int
    title: str
    servings: int
    ready_in_minutes: int
    nutrition: NutritionFacts
    diets: tuple[str, ...] = ()
    vegetarian: bool = False
    vegan: bool = False
    gluten_free: bool = False
    summary: str = ""
