"""Error types raised by the planning and tracking services."""


class DietPlannerError(Exception):
    """Base class for recoverable, caller-facing errors."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


class InvalidInputError(DietPlannerError):
    """A required value is missing or outside its allowed range."""


class ProfileIncompleteError(DietPlannerError):
    """The user's nutrition targets have not been calculated yet."""


class NoMatchingRecipesError(DietPlannerError):
    """No approved recipe satisfies the requested preferences."""


class InvalidMealSourceError(DietPlannerError):
    """A logged meal must reference exactly one of a recipe or a custom meal."""


class NotFoundError(DietPlannerError):
    """A referenced recipe, plan, day, slot or item does not exist."""


class ExternalServiceError(DietPlannerError):
    """An external recipe provider is unavailable or not configured."""
