"""Pydantic request models for the HTTP API."""

from datetime import date
from uuid import UUID

from pydantic import BaseModel, Field

from diet_planner.domain.meal_plans import MealPlanPreferences
from diet_planner.domain.nutrition import NutritionFacts
from diet_planner.domain.nutrition_logs import CustomMeal
from diet_planner.domain.recipes import RecipeDraft, RecipeIngredient


class NutritionPayload(BaseModel):
    """Nutrient amounts."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fats: float = 0.0
    fiber: float = 0.0
    sugar: float = 0.0

    def to_domain(self) -> NutritionFacts:
        return NutritionFacts(**self.model_dump())


class IngredientPayload(BaseModel):
    """Ingredient line with optional nutrition."""

    name: str = Field(min_length=1)
    quantity: float = Field(default=0.0, ge=0)
    unit: str | None = None
    category: str | None = None
    nutrition: NutritionPayload | None = None

    def to_domain(self) -> RecipeIngredient:
        return RecipeIngredient(
            name=self.name,
            quantity=self.quantity,
            unit=self.unit,
            category=self.category,
            nutrition=self.nutrition.to_domain() if self.nutrition else None,
        )


class ProfileUpdate(BaseModel):
    """Profile fields a user may change. Unset fields are left alone."""

    age: int | None = None
    gender: str | None = None
    height_cm: float | None = None
    weight_kg: float | None = None
    goal: str | None = None
    activity_level: str | None = None
    dietary_preference: str | None = None
    allergies: list[str] | None = None
    restrictions: list[str] | None = None


class CalculateRequest(BaseModel):
    """Calculator inputs."""

    age: int
    gender: str
    height_cm: float
    weight_kg: float
    goal: str
    activity_level: str


class WeightGoalRequest(BaseModel):
    current_weight_kg: float
    target_weight_kg: float
    timeframe_weeks: int = 12


class PreferencesPayload(BaseModel):
    """Meal plan recipe constraints."""

    dietary_preference: str | None = None
    excluded_ingredients: list[str] = Field(default_factory=list)
    cuisine: list[str] = Field(default_factory=list)
    max_prep_time_min: int | None = None
    max_cook_time_min: int | None = None

    def to_domain(self) -> MealPlanPreferences:
        return MealPlanPreferences(
            dietary_preference=self.dietary_preference,
            excluded_ingredients=tuple(self.excluded_ingredients),
            cuisine=tuple(self.cuisine),
            max_prep_time_min=self.max_prep_time_min,
            max_cook_time_min=self.max_cook_time_min,
        )


class GenerateMealPlanRequest(BaseModel):
    duration_days: int = 7
    preferences: PreferencesPayload = Field(default_factory=PreferencesPayload)
    start_date: date | None = None


class StatusUpdate(BaseModel):
    status: str


class FavoriteUpdate(BaseModel):
    is_favorite: bool


class MealSlotRef(BaseModel):
    """Identifies one planned meal."""

    day_number: int
    category: str
    index: int = 0


class FeedbackRequest(MealSlotRef):
    rating: int
    comment: str = ""


class CustomMealPayload(BaseModel):
    name: str = Field(min_length=1)
    ingredients: list[IngredientPayload] = Field(default_factory=list)

    def to_domain(self) -> CustomMeal:
        return CustomMeal(
            name=self.name,
            ingredients=[item.to_domain() for item in self.ingredients],
        )


class LogMealRequest(BaseModel):
    """A consumed meal referencing a recipe or carrying a custom meal."""

    meal_type: str
    recipe_id: UUID | None = None
    custom_meal: CustomMealPayload | None = None
    notes: str | None = None
    log_date: date | None = None


class WaterIntakeRequest(BaseModel):
    amount_ml: float
    log_date: date | None = None


class GroceryItemCreate(BaseModel):
    name: str
    quantity: float = 1.0
    unit: str | None = None
    category: str | None = None
    notes: str | None = None


class GroceryItemUpdate(BaseModel):
    name: str | None = None
    quantity: float | None = None
    unit: str | None = None
    category: str | None = None
    purchased: bool | None = None
    notes: str | None = None


class RecipeIngredientsRequest(BaseModel):
    ingredients: list[IngredientPayload]


class RecipeCreate(BaseModel):
    """A user-submitted recipe."""

    title: str
    description: str = ""
    ingredients: list[IngredientPayload] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    nutrition: NutritionPayload | None = None
    dietary_tags: list[str] = Field(default_factory=list)
    cuisine: str | None = None
    prep_time_min: int = 0
    cook_time_min: int = 0
    servings: int = 1
    difficulty: str = "easy"

    def to_domain(self) -> RecipeDraft:
        return RecipeDraft(
            title=self.title,
            description=self.description,
            ingredients=[item.to_domain() for item in self.ingredients],
            instructions=list(self.instructions),
            nutrition=self.nutrition.to_domain() if self.nutrition else None,
            dietary_tags=frozenset(self.dietary_tags),
            cuisine=self.cuisine,
            prep_time_min=self.prep_time_min,
            cook_time_min=self.cook_time_min,
            servings=self.servings,
            difficulty=self.difficulty,
        )


class RecipeUpdate(BaseModel):
    """Recipe fields an owner may change. Unset fields are left alone."""

    title: str | None = None
    description: str | None = None
    ingredients: list[IngredientPayload] | None = None
    instructions: list[str] | None = None
    nutrition: NutritionPayload | None = None
    dietary_tags: list[str] | None = None
    cuisine: str | None = None
    prep_time_min: int | None = None
    cook_time_min: int | None = None
    servings: int | None = None
    difficulty: str | None = None

    def to_changes(self) -> dict[str, object]:
        changes = self.model_dump(
            exclude_none=True, exclude={"ingredients", "nutrition"}
        )
        if self.ingredients is not None:
            changes["ingredients"] = [item.to_domain() for item in self.ingredients]
        if self.nutrition is not None:
            changes["nutrition"] = self.nutrition.to_domain()
        return changes


class RecipeImportRequest(BaseModel):
    external_id: int


class RejectRequest(BaseModel):
    reason: str | None = None
