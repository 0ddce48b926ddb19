"""Constants shared by the calculator, generator and tracker."""

# Calculator input ranges
MIN_AGE = 1
MAX_AGE = 120
MIN_HEIGHT_CM = 50
MAX_HEIGHT_CM = 250
MIN_WEIGHT_KG = 20
MAX_WEIGHT_KG = 300

# Activity level multipliers for maintenance calories
ACTIVITY_MULTIPLIERS = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very_active": 1.9,
}
DEFAULT_ACTIVITY_MULTIPLIER = 1.2

# Daily calorie adjustment per goal (kcal)
GOAL_CALORIE_ADJUSTMENTS = {
    "weight_loss": -500,
    "maintenance": 0,
    "muscle_gain": 300,
}

MIN_CALORIES_MALE = 1500
MIN_CALORIES_OTHER = 1200

# Fraction of daily calories from protein, carbs and fats
GOAL_MACRO_RATIOS = {
    "weight_loss": {"protein": 0.35, "carbs": 0.40, "fats": 0.25},
    "muscle_gain": {"protein": 0.30, "carbs": 0.50, "fats": 0.20},
    "maintenance": {"protein": 0.25, "carbs": 0.50, "fats": 0.25},
}

CALORIES_PER_GRAM = {
    "protein": 4,
    "carbs": 4,
    "fats": 9,
}

CALORIES_PER_KG_BODY_WEIGHT = 7700
AGGRESSIVE_TIMEFRAME_WEEKS = 8
MAINTENANCE_KCAL_PER_KG = 30
KG_PER_LB = 0.453592

# Meal plan generation
MIN_PLAN_DAYS = 1
MAX_PLAN_DAYS = 30
CANDIDATE_POOL_LIMIT = 50
RECIPES_PER_DAY = 4
MAX_SLOTS_PER_CATEGORY = 4

# Nutrition log goal bands
CALORIE_GOAL_LOW = 0.9
CALORIE_GOAL_HIGH = 1.1
MACRO_GOAL_FLOOR = 0.9

# Targets used when a profile has none
FALLBACK_TARGETS = {
    "calories": 2000,
    "protein": 150,
    "carbs": 250,
    "fats": 67,
}

DEFAULT_GROCERY_UNIT = "unit"
DEFAULT_GROCERY_CATEGORY = "other"

WEEKDAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
