"""Tests for the profile service."""

from uuid import UUID

import pytest

from diet_planner.domain.errors import InvalidInputError, NotFoundError
from diet_planner.services.profiles import ProfileService
from tests.conftest import InMemoryProfileRepository, complete_profile


def test_get_profile_missing(
    user_id: UUID, profile_repository: InMemoryProfileRepository
) -> None:
    service = ProfileService(profile_repository)

    with pytest.raises(NotFoundError):
        service.get_profile(user_id)


def test_update_profile_calculates_targets_once_inputs_are_complete(
    user_id: UUID, profile_repository: InMemoryProfileRepository
) -> None:
    service = ProfileService(profile_repository)

    profile, targets = service.update_profile(
        user_id,
        age=30,
        gender="male",
        height_cm=180.0,
        weight_kg=80.0,
        goal="maintenance",
        activity_level="sedentary",
    )

    assert targets is not None
    assert targets.daily_calories == 2136
    assert profile.daily_calories == 2136
    assert profile.protein_g == 134
    assert profile.carbs_g == 267
    assert profile.fats_g == 59
    assert service.get_profile(user_id).daily_calories == 2136


def test_update_profile_without_input_changes_keeps_targets(
    user_id: UUID, profile_repository: InMemoryProfileRepository
) -> None:
    profile_repository.save_profile(complete_profile(user_id))
    service = ProfileService(profile_repository)

    profile, targets = service.update_profile(
        user_id, dietary_preference="vegetarian", allergies=["peanuts"]
    )

    assert targets is None
    assert profile.dietary_preference == "vegetarian"
    assert profile.allergies == ["peanuts"]
    assert profile.daily_calories == 2136


def test_update_profile_recalculates_on_goal_change(
    user_id: UUID, profile_repository: InMemoryProfileRepository
) -> None:
    profile_repository.save_profile(complete_profile(user_id))
    service = ProfileService(profile_repository)

    profile, targets = service.update_profile(user_id, goal="weight_loss")

    assert targets is not None
    assert profile.daily_calories == 1636
    assert profile.protein_g == 143


def test_update_profile_with_partial_inputs(
    user_id: UUID, profile_repository: InMemoryProfileRepository
) -> None:
    service = ProfileService(profile_repository)

    with pytest.raises(InvalidInputError) as excinfo:
        service.update_profile(user_id, age=30)

    assert excinfo.value.field == "height_cm"
    assert profile_repository.profiles == {}


def test_update_profile_rejects_target_fields(
    user_id: UUID, profile_repository: InMemoryProfileRepository
) -> None:
    service = ProfileService(profile_repository)

    with pytest.raises(InvalidInputError) as excinfo:
        service.update_profile(user_id, daily_calories=1000)
    assert excinfo.value.field == "daily_calories"

    with pytest.raises(InvalidInputError):
        service.update_profile(user_id, favourite_food="pizza")


def test_update_profile_without_inputs_creates_default(
    user_id: UUID, profile_repository: InMemoryProfileRepository
) -> None:
    service = ProfileService(profile_repository)

    profile, targets = service.update_profile(user_id, restrictions=["halal"])

    assert targets is None
    assert profile.restrictions == ["halal"]
    assert profile.dietary_preference == "none"
    assert profile.daily_calories is None
