"""Supabase implementation for the standalone grocery list."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from diet_planner.adapters.supabase_rows import parse_datetime
from diet_planner.domain.grocery import GroceryItem, GroceryItemDraft
from diet_planner.services.grocery import GroceryRepository


@dataclass
class SupabaseGroceryRepository(GroceryRepository):
    """Supabase-backed repository for grocery items."""

    client: Client

    def list_items(
        self, user_id: UUID, category: str | None = None
    ) -> list[GroceryItem]:
        request = (
            self.client.table("grocery_items").select("*").eq("user_id", str(user_id))
        )
        if category:
            request = request.eq("category", category)
        response = request.order("purchased").order("category").execute()
        return [_parse_item(row) for row in response.data or []]

    def get_item(self, item_id: UUID) -> GroceryItem | None:
        response = (
            self.client.table("grocery_items")
            .select("*")
            .eq("id", str(item_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_item(response.data[0])

    def create_items(
        self, user_id: UUID, drafts: list[GroceryItemDraft]
    ) -> list[GroceryItem]:
        rows = [
            {
                "user_id": str(user_id),
                "name": draft.name,
                "quantity": draft.quantity,
                "unit": draft.unit,
                "category": draft.category,
                "purchased": draft.purchased,
                "notes": draft.notes,
            }
            for draft in drafts
        ]
        response = self.client.table("grocery_items").insert(rows).execute()
        if not response.data:
            raise RuntimeError("Failed to create grocery items")
        return [_parse_item(row) for row in response.data]

    def update_item(self, item: GroceryItem) -> GroceryItem:
        response = (
            self.client.table("grocery_items")
            .update(
                {
                    "name": item.name,
                    "quantity": item.quantity,
                    "unit": item.unit,
                    "category": item.category,
                    "purchased": item.purchased,
                    "notes": item.notes,
                }
            )
            .eq("id", str(item.id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update grocery item")
        return _parse_item(response.data[0])

    def delete_item(self, item_id: UUID) -> None:
        self.client.table("grocery_items").delete().eq("id", str(item_id)).execute()

    def delete_items(self, user_id: UUID) -> int:
        response = (
            self.client.table("grocery_items")
            .delete()
            .eq("user_id", str(user_id))
            .execute()
        )
        return len(response.data or [])


def _parse_item(row: dict[str, object]) -> GroceryItem:
    return GroceryItem(
        id=UUID(row["id"]),
        user_id=UUID(row["user_id"]),
        name=str(row.get("name", "")),
        quantity=float(row.get("quantity") or 0.0),
        unit=str(row.get("unit") or "unit"),
        category=str(row.get("category") or "other"),
        purchased=bool(row.get("purchased", False)),
        notes=row.get("notes"),
        created_at=parse_datetime(row.get("created_at")),
    )
