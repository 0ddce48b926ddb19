"""Profile service."""

import logging
from dataclasses import dataclass, fields, replace
from typing import Protocol
from uuid import UUID

from diet_planner.domain.errors import InvalidInputError, NotFoundError
from diet_planner.domain.profiles import CalculatedTargets, UserProfile
from diet_planner.services.calculator import compute_targets

_logger = logging.getLogger(__name__)

CALCULATOR_INPUTS = (
    "age",
    "gender",
    "height_cm",
    "weight_kg",
    "goal",
    "activity_level",
)
_TARGET_FIELDS = {"daily_calories", "protein_g", "carbs_g", "fats_g"}
_PROFILE_FIELDS = {item.name for item in fields(UserProfile)} - {
    "user_id",
    "created_at",
}


class ProfileRepository(Protocol):
    """Persistence interface for user profiles."""

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return a user's profile."""

    def save_profile(self, profile: UserProfile) -> UserProfile:
        """Insert or update a profile."""


@dataclass
class ProfileService:
    """Service for reading and updating profiles and their targets."""

    repository: ProfileRepository

    def get_profile(self, user_id: UUID) -> UserProfile:
        profile = self.repository.get_profile(user_id)
        if profile is None:
            raise NotFoundError("Profile not found", field="user_id")
        return profile

    def update_profile(
        self, user_id: UUID, **changes: object
    ) -> tuple[UserProfile, CalculatedTargets | None]:
        """Merge changes into the profile, recalculating targets when needed.

        Targets are recalculated when a calculator input changed, or when
        targets are missing and every input is present.
        """
        unknown = set(changes) - _PROFILE_FIELDS
        if unknown:
            field = sorted(unknown)[0]
            raise InvalidInputError(f"Unknown field {field}", field=field)
        locked = _TARGET_FIELDS & set(changes)
        if locked:
            raise InvalidInputError(
                "Nutrition targets are calculated", field=sorted(locked)[0]
            )

        current = self.repository.get_profile(user_id) or UserProfile(user_id=user_id)
        profile = replace(current, **changes)

        inputs_changed = any(
            getattr(current, name) != getattr(profile, name)
            for name in CALCULATOR_INPUTS
        )
        inputs_complete = all(
            getattr(profile, name) is not None for name in CALCULATOR_INPUTS
        )
        targets = None
        if inputs_changed or (profile.daily_calories is None and inputs_complete):
            targets = compute_targets(profile)
            profile = replace(
                profile,
                daily_calories=targets.daily_calories,
                protein_g=targets.protein_g,
                carbs_g=targets.carbs_g,
                fats_g=targets.fats_g,
            )
            _logger.info(
                "Targets recalculated: user_id=%s calories=%s",
                user_id,
                targets.daily_calories,
            )
        return self.repository.save_profile(profile), targets

    def calculate(self, profile: UserProfile) -> CalculatedTargets:
        """Run the calculator without persisting anything."""
        return compute_targets(profile)
