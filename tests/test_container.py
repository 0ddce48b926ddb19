"""Tests for container wiring."""

import asyncio

from diet_planner.config import Settings
from diet_planner.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    assert container.meal_plan_service is not None
    assert container.nutrition_log_service.catalog is container.recipe_service.catalog
    assert container.recipe_search_service.client is None
    asyncio.run(container.close_resources())


def test_build_container_enables_spoonacular_with_key(settings) -> None:
    configured = Settings(
        **{**settings.model_dump(), "spoonacular_api_key": "real-key"}
    )
    container = build_container(configured)
    assert container.recipe_search_service.client is not None
    asyncio.run(container.close_resources())


def test_placeholder_spoonacular_key_is_disabled(settings) -> None:
    placeholder = Settings(
        **{
            **settings.model_dump(),
            "spoonacular_api_key": "your_spoonacular_api_key_here",
        }
    )
    assert placeholder.spoonacular_enabled is False
