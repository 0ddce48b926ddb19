"""Grocery list consolidation and the standalone per-user grocery list."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Protocol
from uuid import UUID

from diet_planner.constants import DEFAULT_GROCERY_CATEGORY, DEFAULT_GROCERY_UNIT
from diet_planner.domain.errors import InvalidInputError, NotFoundError
from diet_planner.domain.grocery import GroceryItem, GroceryItemDraft, GroceryLine
from diet_planner.domain.meal_plans import DayPlan
from diet_planner.domain.recipes import Recipe, RecipeIngredient

if TYPE_CHECKING:
    from diet_planner.services.meal_plans import MealPlanService

_logger = logging.getLogger(__name__)


def normalize_ingredient_name(name: str) -> str:
    return name.strip().casefold()


def consolidate(
    days: Iterable[DayPlan], recipes_by_id: Mapping[UUID, Recipe]
) -> list[GroceryLine]:
    """Merge every planned recipe's ingredients into one shopping list.

    Lines are keyed by normalized name and keep first-seen order. Quantities
    are added without reconciling units, so "2 pcs" and "100 g" of the same
    ingredient merge into one line with the first unit.
    """
    lines: dict[str, GroceryLine] = {}
    for day in days:
        for _, slot in day.slots():
            if slot.recipe_id is None:
                continue
            recipe = recipes_by_id.get(slot.recipe_id)
            if recipe is None:
                continue
            for ingredient in recipe.ingredients:
                key = normalize_ingredient_name(ingredient.name)
                existing = lines.get(key)
                if existing is None:
                    lines[key] = GroceryLine(
                        name=key,
                        quantity=ingredient.quantity or 0.0,
                        unit=ingredient.unit or DEFAULT_GROCERY_UNIT,
                        category=ingredient.category or DEFAULT_GROCERY_CATEGORY,
                    )
                else:
                    quantity = existing.quantity + (ingredient.quantity or 0.0)
                    lines[key] = replace(existing, quantity=quantity)
    return list(lines.values())


class GroceryRepository(Protocol):
    """Persistence interface for standalone grocery items."""

    def list_items(
        self, user_id: UUID, category: str | None = None
    ) -> list[GroceryItem]:
        """Return a user's grocery items, optionally for one category."""

    def get_item(self, item_id: UUID) -> GroceryItem | None:
        """Return a grocery item by id."""

    def create_items(
        self, user_id: UUID, drafts: list[GroceryItemDraft]
    ) -> list[GroceryItem]:
        """Insert grocery items and return them."""

    def update_item(self, item: GroceryItem) -> GroceryItem:
        """Persist changes to a grocery item."""

    def delete_item(self, item_id: UUID) -> None:
        """Delete a grocery item."""

    def delete_items(self, user_id: UUID) -> int:
        """Delete every grocery item of a user and return the count."""


@dataclass
class GroceryService:
    """Service for the per-user grocery list."""

    repository: GroceryRepository
    meal_plan_service: "MealPlanService | None" = None

    def list_items(self, user_id: UUID) -> list[GroceryItem]:
        return self.repository.list_items(user_id)

    def items_by_category(self, user_id: UUID, category: str) -> list[GroceryItem]:
        return self.repository.list_items(user_id, category=category)

    def add_item(  # noqa: PLR0913
        self,
        user_id: UUID,
        name: str,
        quantity: float,
        unit: str | None = None,
        category: str | None = None,
        notes: str | None = None,
    ) -> GroceryItem:
        """Add a single item to the user's list."""
        draft = _draft(name, quantity, unit, category, notes)
        return self.repository.create_items(user_id, [draft])[0]

    def update_item(
        self, user_id: UUID, item_id: UUID, **changes: object
    ) -> GroceryItem:
        """Apply field changes to an item owned by the user."""
        item = self._owned_item(user_id, item_id)
        allowed = {"name", "quantity", "unit", "category", "purchased", "notes"}
        unknown = set(changes) - allowed
        if unknown:
            field = sorted(unknown)[0]
            raise InvalidInputError(f"Unknown field {field}", field=field)
        if "name" in changes:
            changes["name"] = _clean_name(changes["name"])
        quantity = changes.get("quantity")
        if isinstance(quantity, int | float) and quantity < 0:
            raise InvalidInputError("Quantity cannot be negative", field="quantity")
        return self.repository.update_item(replace(item, **changes))

    def toggle_purchased(self, user_id: UUID, item_id: UUID) -> GroceryItem:
        item = self._owned_item(user_id, item_id)
        toggled = replace(item, purchased=not item.purchased)
        return self.repository.update_item(toggled)

    def delete_item(self, user_id: UUID, item_id: UUID) -> None:
        self._owned_item(user_id, item_id)
        self.repository.delete_item(item_id)

    def clear(self, user_id: UUID) -> int:
        """Remove every item from the user's list."""
        removed = self.repository.delete_items(user_id)
        _logger.info("Cleared grocery list: user_id=%s items=%s", user_id, removed)
        return removed

    def add_recipe_ingredients(
        self, user_id: UUID, ingredients: Iterable[RecipeIngredient]
    ) -> list[GroceryItem]:
        """Bulk insert recipe ingredients as unpurchased items."""
        drafts = [
            _draft(
                ingredient.name,
                ingredient.quantity or 0.0,
                ingredient.unit,
                ingredient.category,
                None,
            )
            for ingredient in ingredients
        ]
        if not drafts:
            return []
        return self.repository.create_items(user_id, drafts)

    def add_plan_to_list(self, user_id: UUID, plan_id: UUID) -> list[GroceryItem]:
        """Copy a meal plan's consolidated grocery list into the user's list."""
        if self.meal_plan_service is None:
            raise NotFoundError("Meal plans are unavailable", field="plan_id")
        lines = self.meal_plan_service.grocery_list(user_id, plan_id)
        drafts = [
            GroceryItemDraft(
                name=line.name,
                quantity=line.quantity,
                unit=line.unit,
                category=line.category,
            )
            for line in lines
        ]
        if not drafts:
            return []
        return self.repository.create_items(user_id, drafts)

    def _owned_item(self, user_id: UUID, item_id: UUID) -> GroceryItem:
        item = self.repository.get_item(item_id)
        if item is None or item.user_id != user_id:
            raise NotFoundError("Grocery item not found", field="item_id")
        return item


def _draft(
    name: str,
    quantity: float,
    unit: str | None,
    category: str | None,
    notes: str | None,
) -> GroceryItemDraft:
    name = _clean_name(name)
    if quantity < 0:
        raise InvalidInputError("Quantity cannot be negative", field="quantity")
    return GroceryItemDraft(
        name=name,
        quantity=quantity,
        unit=unit or DEFAULT_GROCERY_UNIT,
        category=category or DEFAULT_GROCERY_CATEGORY,
        notes=notes,
    )


def _clean_name(name: object) -> str:
    if not isinstance(name, str) or not name.strip():
        raise InvalidInputError("Item name is required", field="name")
    return name.strip()
