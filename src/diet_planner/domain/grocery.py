"""Grocery list models."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class GroceryLine:
    """A consolidated shopping line. The name is the normalized merge key."""

    name: str
    quantity: float
    unit: str
    category: str
    purchased: bool = False


@dataclass(frozen=True)
class GroceryItem:
    """A persisted entry on a user's standalone grocery list."""

    id: UUID
    user_id: UUID
    name: str
    quantity: float
    unit: str
    category: str
    purchased: bool = False
    notes: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class GroceryItemDraft:
    """Values for a grocery item that has not been stored yet."""

    name: str
    quantity: float
    unit: str
    category: str
    purchased: bool = False
    notes: str | None = None
