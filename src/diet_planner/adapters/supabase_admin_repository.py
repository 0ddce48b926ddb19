"""Supabase admin data access."""

from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from diet_planner.adapters.supabase_meal_plan_repository import parse_plan
from diet_planner.adapters.supabase_profile_repository import parse_profile
from diet_planner.adapters.supabase_rows import parse_datetime
from diet_planner.domain.meal_plans import MealPlan
from diet_planner.domain.profiles import UserProfile
from diet_planner.services.admin import AdminRepository


@dataclass
class SupabaseAdminRepository(AdminRepository):
    """Supabase implementation for admin queries."""

    client: Client

    def count_users(self) -> int:
        response = (
            self.client.table("profiles").select("user_id", count="exact").execute()
        )
        return response.count or 0

    def count_users_since(self, since: datetime) -> int:
        response = (
            self.client.table("profiles")
            .select("user_id", count="exact")
            .gte("created_at", since.isoformat())
            .execute()
        )
        return response.count or 0

    def count_recipes(self, approved: bool | None = None) -> int:
        request = self.client.table("recipes").select("id", count="exact")
        if approved is not None:
            request = request.eq("is_approved", approved)
        return request.execute().count or 0

    def count_meal_plans(self, user_id: UUID | None = None) -> int:
        request = self.client.table("meal_plans").select("id", count="exact")
        if user_id is not None:
            request = request.eq("user_id", str(user_id))
        return request.execute().count or 0

    def dietary_preference_counts(self) -> dict[str, int]:
        response = self.client.table("profiles").select("dietary_preference").execute()
        counts = Counter(
            row.get("dietary_preference") or "none" for row in response.data or []
        )
        return dict(counts)

    def list_profiles(self, offset: int, limit: int) -> list[UserProfile]:
        response = (
            self.client.table("profiles")
            .select("*")
            .order("created_at", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        return [parse_profile(row) for row in response.data or []]

    def list_meal_plans(
        self, offset: int, limit: int, user_id: UUID | None = None
    ) -> list[MealPlan]:
        request = self.client.table("meal_plans").select("*")
        if user_id is not None:
            request = request.eq("user_id", str(user_id))
        response = (
            request.order("created_at", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        return [parse_plan(row) for row in response.data or []]

    def profile_creation_times(self, since: datetime) -> list[datetime]:
        rows = self._created_since("profiles", "created_at", since)
        return [stamp for stamp, _ in _stamped(rows, None)]

    def recipe_activity(self, since: datetime) -> list[tuple[datetime, UUID | None]]:
        rows = self._created_since("recipes", "created_at,created_by", since)
        return _stamped(rows, "created_by")

    def meal_plan_activity(self, since: datetime) -> list[tuple[datetime, UUID]]:
        rows = self._created_since("meal_plans", "created_at,user_id", since)
        return [
            (stamp, owner)
            for stamp, owner in _stamped(rows, "user_id")
            if owner is not None
        ]

    def _created_since(
        self, table: str, columns: str, since: datetime
    ) -> list[dict[str, object]]:
        response = (
            self.client.table(table)
            .select(columns)
            .gte("created_at", since.isoformat())
            .execute()
        )
        return response.data or []


def _stamped(
    rows: list[dict[str, object]], user_column: str | None
) -> list[tuple[datetime, UUID | None]]:
    """Pair each row's creation time with its user id, skipping undated rows."""
    stamped = []
    for row in rows:
        created_at = parse_datetime(row.get("created_at"))
        if created_at is None:
            continue
        user = row.get(user_column) if user_column else None
        stamped.append((created_at, UUID(str(user)) if user else None))
    return stamped
