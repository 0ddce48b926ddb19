"""Tests for meal plan generation and tracking."""

import random
from datetime import date
from uuid import UUID, uuid4

import pytest

from diet_planner.domain.errors import (
    InvalidInputError,
    NoMatchingRecipesError,
    NotFoundError,
    ProfileIncompleteError,
)
from diet_planner.domain.meal_plans import (
    MEAL_CATEGORIES,
    MealPlan,
    MealPlanPreferences,
    PlanStatus,
)
from diet_planner.domain.recipes import RecipeIngredient
from diet_planner.services.meal_plans import MealPlanService, plan_title
from tests.conftest import (
    InMemoryMealPlanRepository,
    InMemoryProfileRepository,
    InMemoryRecipeCatalog,
    complete_profile,
    make_recipe,
)


def _service(
    profiles: InMemoryProfileRepository,
    catalog: InMemoryRecipeCatalog,
    seed: int = 7,
) -> MealPlanService:
    return MealPlanService(
        repository=InMemoryMealPlanRepository(),
        profile_repository=profiles,
        catalog=catalog,
        rng=random.Random(seed),
    )


def _stock(catalog: InMemoryRecipeCatalog, count: int = 6) -> None:
    for index in range(count):
        catalog.add(
            make_recipe(
                title=f"Recipe {index}",
                calories=300 + index * 100,
                protein=10 + index,
                ingredients=[
                    RecipeIngredient(
                        name="Eggs", quantity=2, unit="pcs", category="dairy"
                    ),
                    RecipeIngredient(name=f"Item {index}", quantity=1),
                ],
                dietary_tags=frozenset({"vegetarian"}),
            )
        )


def test_generate_builds_numbered_days(
    user_id: UUID,
    profile_repository: InMemoryProfileRepository,
    catalog: InMemoryRecipeCatalog,
) -> None:
    profile_repository.save_profile(complete_profile(user_id))
    _stock(catalog)
    service = _service(profile_repository, catalog)

    plan = service.generate(user_id, 3, start_date=date(2024, 2, 28))

    assert plan.id is not None
    assert plan.title == "3-Day Meal Plan"
    assert plan.end_date == date(2024, 3, 1)
    assert [day.day_number for day in plan.days] == [1, 2, 3]
    assert [day.date for day in plan.days] == [
        date(2024, 2, 28),
        date(2024, 2, 29),
        date(2024, 3, 1),
    ]
    for day in plan.days:
        recipe_ids = [slot.recipe_id for _, slot in day.slots()]
        assert len(recipe_ids) == 4
        assert len(set(recipe_ids)) == 4
        assert [category for category, _ in day.slots()] == list(MEAL_CATEGORIES)
        expected = sum(catalog.recipes[item].nutrition.calories for item in recipe_ids)
        assert day.nutrition.total_calories == expected
    assert plan.nutrition_summary.total_calories == sum(
        day.nutrition.total_calories for day in plan.days
    )
    assert plan.completion_rate == 0
    assert plan.status == PlanStatus.ACTIVE


def test_generate_consolidates_grocery_list(
    user_id: UUID,
    profile_repository: InMemoryProfileRepository,
    catalog: InMemoryRecipeCatalog,
) -> None:
    profile_repository.save_profile(complete_profile(user_id))
    _stock(catalog, count=4)
    service = _service(profile_repository, catalog)

    plan = service.generate(user_id, 1)

    eggs = [line for line in plan.grocery_list if line.name == "eggs"]
    assert len(eggs) == 1
    assert eggs[0].quantity == 8
    assert eggs[0].unit == "pcs"
    assert eggs[0].category == "dairy"
    assert len(plan.grocery_list) == 5


def test_generate_with_small_pool_fills_leading_categories(
    user_id: UUID,
    profile_repository: InMemoryProfileRepository,
    catalog: InMemoryRecipeCatalog,
) -> None:
    profile_repository.save_profile(complete_profile(user_id))
    _stock(catalog, count=2)
    service = _service(profile_repository, catalog)

    plan = service.generate(user_id, 2)

    for day in plan.days:
        assert len(day.meals["breakfast"]) == 1
        assert len(day.meals["lunch"]) == 1
        assert day.meals["dinner"] == []
        assert day.meals["snacks"] == []


def test_generate_is_reproducible_with_seed(
    user_id: UUID,
    profile_repository: InMemoryProfileRepository,
    catalog: InMemoryRecipeCatalog,
) -> None:
    profile_repository.save_profile(complete_profile(user_id))
    _stock(catalog, count=10)

    first = _service(profile_repository, catalog, seed=42).generate(user_id, 5)
    second = _service(profile_repository, catalog, seed=42).generate(user_id, 5)

    def ids(plan: MealPlan) -> list[list[UUID | None]]:
        return [[slot.recipe_id for _, slot in day.slots()] for day in plan.days]

    assert ids(first) == ids(second)


def test_generate_filters_by_dietary_preference(
    user_id: UUID,
    profile_repository: InMemoryProfileRepository,
    catalog: InMemoryRecipeCatalog,
) -> None:
    profile_repository.save_profile(
        complete_profile(user_id, dietary_preference="vegan")
    )
    _stock(catalog)
    vegan = make_recipe(title="Tofu bowl", dietary_tags=frozenset({"vegan"}))
    catalog.add(vegan)
    service = _service(profile_repository, catalog)

    plan = service.generate(user_id, 2)

    assert plan.title == "2-Day vegan Meal Plan"
    assert catalog.queries[-1].dietary_tag == "vegan"
    for day in plan.days:
        assert [slot.recipe_id for _, slot in day.slots()] == [vegan.id]


def test_request_preference_cannot_relax_profile_restriction(
    user_id: UUID,
    profile_repository: InMemoryProfileRepository,
    catalog: InMemoryRecipeCatalog,
) -> None:
    profile_repository.save_profile(
        complete_profile(user_id, dietary_preference="vegan")
    )
    steak = make_recipe(title="Steak", dietary_tags=frozenset({"non-vegetarian"}))
    tofu = make_recipe(title="Tofu bowl", dietary_tags=frozenset({"vegan"}))
    catalog.add(steak, tofu)
    service = _service(profile_repository, catalog)
    preferences = MealPlanPreferences(dietary_preference="none")

    plan = service.generate(user_id, 1, preferences)

    planned = [slot.recipe_id for _, slot in plan.days[0].slots()]
    assert steak.id not in planned
    assert planned == [tofu.id]
    assert catalog.queries[-1].dietary_tag == "vegan"
    assert plan.title == "1-Day vegan Meal Plan"
    assert plan.preferences == preferences


def test_only_restricted_catalog_fails_despite_request_preference(
    user_id: UUID,
    profile_repository: InMemoryProfileRepository,
    catalog: InMemoryRecipeCatalog,
) -> None:
    profile_repository.save_profile(
        complete_profile(user_id, dietary_preference="vegan")
    )
    catalog.add(make_recipe(title="Steak", dietary_tags=frozenset({"non-vegetarian"})))
    service = _service(profile_repository, catalog)

    with pytest.raises(NoMatchingRecipesError):
        service.generate(user_id, 1, MealPlanPreferences(dietary_preference="none"))


def test_generate_excludes_ingredients_and_unapproved(
    user_id: UUID,
    profile_repository: InMemoryProfileRepository,
    catalog: InMemoryRecipeCatalog,
) -> None:
    profile_repository.save_profile(complete_profile(user_id))
    _stock(catalog)
    safe = make_recipe(title="Salad")
    catalog.add(safe, make_recipe(title="Draft", is_approved=False))
    service = _service(profile_repository, catalog)

    plan = service.generate(
        user_id, 1, MealPlanPreferences(excluded_ingredients=(" EGGS ",))
    )

    assert [slot.recipe_id for _, slot in plan.days[0].slots()] == [safe.id]


def test_generate_without_matches_fails(
    user_id: UUID,
    profile_repository: InMemoryProfileRepository,
    catalog: InMemoryRecipeCatalog,
) -> None:
    profile_repository.save_profile(
        complete_profile(user_id, dietary_preference="vegan")
    )
    _stock(catalog)
    service = _service(profile_repository, catalog)

    with pytest.raises(NoMatchingRecipesError) as excinfo:
        service.generate(user_id, 3)

    assert "No recipes found matching your dietary requirements" in str(excinfo.value)
    assert service.repository.plans == {}


def test_generate_requires_calculated_targets(
    user_id: UUID,
    profile_repository: InMemoryProfileRepository,
    catalog: InMemoryRecipeCatalog,
) -> None:
    _stock(catalog)
    service = _service(profile_repository, catalog)

    with pytest.raises(ProfileIncompleteError):
        service.generate(user_id, 3)

    profile_repository.save_profile(complete_profile(user_id, daily_calories=None))
    with pytest.raises(ProfileIncompleteError):
        service.generate(user_id, 3)


@pytest.mark.parametrize("duration", [0, 31])
def test_generate_rejects_duration_out_of_range(
    duration: int,
    user_id: UUID,
    profile_repository: InMemoryProfileRepository,
    catalog: InMemoryRecipeCatalog,
) -> None:
    profile_repository.save_profile(complete_profile(user_id))
    _stock(catalog)
    service = _service(profile_repository, catalog)

    with pytest.raises(InvalidInputError):
        service.generate(user_id, duration)


def test_plan_title() -> None:
    assert plan_title(7, None) == "7-Day Meal Plan"
    assert plan_title(7, "vegetarian") == "7-Day vegetarian Meal Plan"


def test_consume_and_feedback_update_completion(
    user_id: UUID,
    profile_repository: InMemoryProfileRepository,
    catalog: InMemoryRecipeCatalog,
) -> None:
    profile_repository.save_profile(complete_profile(user_id))
    _stock(catalog)
    service = _service(profile_repository, catalog)
    plan = service.generate(user_id, 2)

    updated = service.mark_meal_consumed(user_id, plan.id, 1, "breakfast")
    updated = service.mark_meal_consumed(user_id, plan.id, 2, "dinner")
    assert updated.completion_rate == 25
    assert updated.days[0].meals["breakfast"][0].consumed is True

    rated = service.add_meal_feedback(user_id, plan.id, 1, "lunch", 5, "Great")
    feedback = rated.days[0].meals["lunch"][0].feedback
    assert feedback is not None
    assert feedback.rating == 5
    assert feedback.comment == "Great"
    assert service.get_plan(user_id, plan.id).completion_rate == 25


def test_slot_lookup_errors(
    user_id: UUID,
    profile_repository: InMemoryProfileRepository,
    catalog: InMemoryRecipeCatalog,
) -> None:
    profile_repository.save_profile(complete_profile(user_id))
    _stock(catalog)
    service = _service(profile_repository, catalog)
    plan = service.generate(user_id, 1)

    with pytest.raises(NotFoundError):
        service.mark_meal_consumed(user_id, plan.id, 9, "breakfast")
    with pytest.raises(NotFoundError):
        service.mark_meal_consumed(user_id, plan.id, 1, "breakfast", index=1)
    with pytest.raises(InvalidInputError):
        service.mark_meal_consumed(user_id, plan.id, 1, "brunch")
    with pytest.raises(InvalidInputError):
        service.add_meal_feedback(user_id, plan.id, 1, "lunch", 6)


def test_plans_are_private_to_their_owner(
    user_id: UUID,
    profile_repository: InMemoryProfileRepository,
    catalog: InMemoryRecipeCatalog,
) -> None:
    profile_repository.save_profile(complete_profile(user_id))
    _stock(catalog)
    service = _service(profile_repository, catalog)
    plan = service.generate(user_id, 1)
    stranger = uuid4()

    with pytest.raises(NotFoundError):
        service.get_plan(stranger, plan.id)
    with pytest.raises(NotFoundError):
        service.delete_plan(stranger, plan.id)
    assert service.get_plan(user_id, plan.id).id == plan.id


def test_status_favorite_and_delete(
    user_id: UUID,
    profile_repository: InMemoryProfileRepository,
    catalog: InMemoryRecipeCatalog,
) -> None:
    profile_repository.save_profile(complete_profile(user_id))
    _stock(catalog)
    service = _service(profile_repository, catalog)
    plan = service.generate(user_id, 1)

    assert service.set_status(user_id, plan.id, "completed").status == "completed"
    assert service.set_favorite(user_id, plan.id, True).is_favorite is True
    with pytest.raises(InvalidInputError):
        service.set_status(user_id, plan.id, "archived")

    service.delete_plan(user_id, plan.id)
    with pytest.raises(NotFoundError):
        service.get_plan(user_id, plan.id)


def test_list_plans_paginates_newest_first(
    user_id: UUID,
    profile_repository: InMemoryProfileRepository,
    catalog: InMemoryRecipeCatalog,
) -> None:
    profile_repository.save_profile(complete_profile(user_id))
    _stock(catalog)
    service = _service(profile_repository, catalog)
    plans = [service.generate(user_id, days) for days in (1, 2, 3)]

    page = service.list_plans(user_id, page=1, limit=2)

    assert page.total == 3
    assert page.pages == 2
    assert [item.id for item in page.items] == [plans[2].id, plans[1].id]
    assert [item.id for item in service.list_plans(user_id, 2, 2).items] == [
        plans[0].id
    ]


def test_plan_nutrition_uses_stored_recipe_totals(
    user_id: UUID,
    profile_repository: InMemoryProfileRepository,
    catalog: InMemoryRecipeCatalog,
) -> None:
    profile_repository.save_profile(complete_profile(user_id))
    recipe = make_recipe(calories=450, protein=30, carbs=40, fats=15)
    catalog.add(recipe)
    service = _service(profile_repository, catalog)

    plan = service.generate(user_id, 4)

    assert plan.nutrition_summary.total_calories == 1800
    assert plan.nutrition_summary.total_protein == 120
    assert plan.nutrition_summary.average_daily_calories == 450
