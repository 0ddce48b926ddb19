"""Supabase implementation for user profiles."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from diet_planner.adapters.supabase_rows import parse_datetime
from diet_planner.domain.profiles import DietaryPreference, UserProfile
from diet_planner.services.profiles import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase-backed repository for profiles."""

    client: Client

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        response = (
            self.client.table("profiles")
            .select("*")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_profile(response.data[0])

    def save_profile(self, profile: UserProfile) -> UserProfile:
        """Upsert a profile keyed by user id."""
        response = (
            self.client.table("profiles")
            .upsert(_to_row(profile), on_conflict="user_id")
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save profile")
        return parse_profile(response.data[0])


def _to_row(profile: UserProfile) -> dict[str, object]:
    return {
        "user_id": str(profile.user_id),
        "age": profile.age,
        "gender": profile.gender,
        "height_cm": profile.height_cm,
        "weight_kg": profile.weight_kg,
        "goal": profile.goal,
        "activity_level": profile.activity_level,
        "dietary_preference": str(profile.dietary_preference),
        "allergies": list(profile.allergies),
        "restrictions": list(profile.restrictions),
        "daily_calories": profile.daily_calories,
        "protein_g": profile.protein_g,
        "carbs_g": profile.carbs_g,
        "fats_g": profile.fats_g,
    }


def _optional_float(value: object) -> float | None:
    return float(value) if value is not None else None


def _optional_int(value: object) -> int | None:
    return int(value) if value is not None else None


def parse_profile(row: dict[str, object]) -> UserProfile:
    return UserProfile(
        user_id=UUID(row["user_id"]),
        age=_optional_int(row.get("age")),
        gender=row.get("gender"),
        height_cm=_optional_float(row.get("height_cm")),
        weight_kg=_optional_float(row.get("weight_kg")),
        goal=row.get("goal"),
        activity_level=row.get("activity_level"),
        dietary_preference=str(
            row.get("dietary_preference") or DietaryPreference.NONE
        ),
        allergies=list(row.get("allergies") or []),
        restrictions=list(row.get("restrictions") or []),
        daily_calories=_optional_int(row.get("daily_calories")),
        protein_g=_optional_int(row.get("protein_g")),
        carbs_g=_optional_int(row.get("carbs_g")),
        fats_g=_optional_int(row.get("fats_g")),
        created_at=parse_datetime(row.get("created_at")),
    )
