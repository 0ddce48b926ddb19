"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date
from uuid import UUID

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from diet_planner.api.admin import router as admin_router
from diet_planner.api.schemas import (
    CalculateRequest,
    FavoriteUpdate,
    FeedbackRequest,
    GenerateMealPlanRequest,
    GroceryItemCreate,
    GroceryItemUpdate,
    LogMealRequest,
    MealSlotRef,
    ProfileUpdate,
    RecipeCreate,
    RecipeImportRequest,
    RecipeIngredientsRequest,
    RecipeUpdate,
    StatusUpdate,
    WaterIntakeRequest,
    WeightGoalRequest,
)
from diet_planner.app_logging import configure_logging
from diet_planner.containers import AppContainer
from diet_planner.domain.errors import (
    DietPlannerError,
    ExternalServiceError,
    InvalidInputError,
    InvalidMealSourceError,
    NoMatchingRecipesError,
    NotFoundError,
    ProfileIncompleteError,
)
from diet_planner.domain.profiles import UserProfile
from diet_planner.domain.recipes import RecipeQuery
from diet_planner.services.aggregation import progress, remaining
from diet_planner.services.calculator import calculate_weight_goal_calories

_ERROR_STATUS = {
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
    InvalidMealSourceError: status.HTTP_400_BAD_REQUEST,
    ProfileIncompleteError: status.HTTP_409_CONFLICT,
    NoMatchingRecipesError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ExternalServiceError: status.HTTP_502_BAD_GATEWAY,
}


async def current_user_id(x_user_id: UUID | None = Header(default=None)) -> UUID:
    """Return the authenticated user id set by the gateway."""
    if x_user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return x_user_id


def error_status(exc: DietPlannerError) -> int:
    for error_type, code in _ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return code
    return status.HTTP_400_BAD_REQUEST


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.exception_handler(DietPlannerError)
    async def handle_domain_error(
        request: Request, exc: DietPlannerError
    ) -> JSONResponse:
        code = error_status(exc)
        logger.warning(
            "%s %s failed: %s (%s)", request.method, request.url.path, exc.message, code
        )
        return JSONResponse(
            status_code=code,
            content={"detail": exc.message, "field": exc.field},
        )

    def services(request: Request) -> AppContainer:
        return request.app.state.container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    # Profile

    @app.get("/profile")
    async def get_profile(
        request: Request, user_id: UUID = Depends(current_user_id)
    ) -> dict[str, object]:
        profile = services(request).profile_service.get_profile(user_id)
        return {"profile": jsonable_encoder(profile)}

    @app.put("/profile")
    async def update_profile(
        payload: ProfileUpdate,
        request: Request,
        user_id: UUID = Depends(current_user_id),
    ) -> dict[str, object]:
        changes = payload.model_dump(exclude_none=True)
        profile, targets = services(request).profile_service.update_profile(
            user_id, **changes
        )
        return {
            "profile": jsonable_encoder(profile),
            "targets": jsonable_encoder(targets),
        }

    @app.post("/profile/calculate")
    async def calculate_targets(
        payload: CalculateRequest,
        request: Request,
        user_id: UUID = Depends(current_user_id),
    ) -> dict[str, object]:
        """Preview targets for the given inputs without saving them."""
        profile = UserProfile(user_id=user_id, **payload.model_dump())
        targets = services(request).profile_service.calculate(profile)
        return {"targets": jsonable_encoder(targets)}

    @app.post("/profile/weight-goal", dependencies=[Depends(current_user_id)])
    async def weight_goal(payload: WeightGoalRequest) -> dict[str, object]:
        plan = calculate_weight_goal_calories(
            payload.current_weight_kg,
            payload.target_weight_kg,
            payload.timeframe_weeks,
        )
        return {"plan": jsonable_encoder(plan)}

    # Meal plans

    @app.get("/meal-plans")
    async def list_meal_plans(
        request: Request,
        page: int = 1,
        limit: int = 10,
        user_id: UUID = Depends(current_user_id),
    ) -> dict[str, object]:
        result = services(request).meal_plan_service.list_plans(user_id, page, limit)
        return jsonable_encoder(result)

    @app.post("/meal-plans/generate", status_code=status.HTTP_201_CREATED)
    async def generate_meal_plan(
        payload: GenerateMealPlanRequest,
        request: Request,
        user_id: UUID = Depends(current_user_id),
    ) -> dict[str, object]:
        plan = services(request).meal_plan_service.generate(
            user_id,
            payload.duration_days,
            payload.preferences.to_domain(),
            payload.start_date,
        )
        return {"meal_plan": jsonable_encoder(plan)}

    @app.get("/meal-plans/{plan_id}")
    async def get_meal_plan(
        plan_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
    ) -> dict[str, object]:
        plan = services(request).meal_plan_service.get_plan(user_id, plan_id)
        return {"meal_plan": jsonable_encoder(plan)}

    @app.delete("/meal-plans/{plan_id}")
    async def delete_meal_plan(
        plan_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
    ) -> dict[str, str]:
        services(request).meal_plan_service.delete_plan(user_id, plan_id)
        return {"status": "deleted"}

    @app.put("/meal-plans/{plan_id}/status")
    async def update_meal_plan_status(
        plan_id: UUID,
        payload: StatusUpdate,
        request: Request,
        user_id: UUID = Depends(current_user_id),
    ) -> dict[str, object]:
        plan = services(request).meal_plan_service.set_status(
            user_id, plan_id, payload.status
        )
        return {"meal_plan": jsonable_encoder(plan)}

    @app.put("/meal-plans/{plan_id}/favorite")
    async def update_meal_plan_favorite(
        plan_id: UUID,
        payload: FavoriteUpdate,
        request: Request,
        user_id: UUID = Depends(current_user_id),
    ) -> dict[str, object]:
        plan = services(request).meal_plan_service.set_favorite(
            user_id, plan_id, payload.is_favorite
        )
        return {"meal_plan": jsonable_encoder(plan)}

    @app.get("/meal-plans/{plan_id}/grocery-list")
    async def meal_plan_grocery_list(
        plan_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
    ) -> dict[str, object]:
        lines = services(request).meal_plan_service.grocery_list(user_id, plan_id)
        return {"grocery_list": jsonable_encoder(lines)}

    @app.post("/meal-plans/{plan_id}/consume")
    async def consume_meal(
        plan_id: UUID,
        payload: MealSlotRef,
        request: Request,
        user_id: UUID = Depends(current_user_id),
    ) -> dict[str, object]:
        plan = services(request).meal_plan_service.mark_meal_consumed(
            user_id, plan_id, payload.day_number, payload.category, payload.index
        )
        return {"meal_plan": jsonable_encoder(plan)}

    @app.post("/meal-plans/{plan_id}/feedback")
    async def meal_feedback(
        plan_id: UUID,
        payload: FeedbackRequest,
        request: Request,
        user_id: UUID = Depends(current_user_id),
    ) -> dict[str, object]:
        plan = services(request).meal_plan_service.add_meal_feedback(
            user_id,
            plan_id,
            payload.day_number,
            payload.category,
            payload.rating,
            payload.comment,
            payload.index,
        )
        return {"meal_plan": jsonable_encoder(plan)}

    # Nutrition log

    @app.get("/nutrition/today")
    async def nutrition_today(
        request: Request, user_id: UUID = Depends(current_user_id)
    ) -> dict[str, object]:
        log = services(request).nutrition_log_service.get_or_create_day(user_id)
        return {
            "log": jsonable_encoder(log),
            "progress": progress(log),
            "remaining": remaining(log),
        }

    @app.post("/nutrition/log-meal", status_code=status.HTTP_201_CREATED)
    async def log_meal(
        payload: LogMealRequest,
        request: Request,
        user_id: UUID = Depends(current_user_id),
    ) -> dict[str, object]:
        log = services(request).nutrition_log_service.log_meal(
            user_id,
            payload.meal_type,
            recipe_id=payload.recipe_id,
            custom_meal=payload.custom_meal.to_domain()
            if payload.custom_meal
            else None,
            notes=payload.notes,
            day=payload.log_date,
        )
        return {"log": jsonable_encoder(log), "progress": progress(log)}

    @app.put("/nutrition/water-intake")
    async def water_intake(
        payload: WaterIntakeRequest,
        request: Request,
        user_id: UUID = Depends(current_user_id),
    ) -> dict[str, object]:
        log = services(request).nutrition_log_service.update_water_intake(
            user_id, payload.amount_ml, payload.log_date
        )
        return {"log": jsonable_encoder(log)}

    @app.get("/nutrition/weekly-summary")
    async def weekly_summary(
        request: Request,
        week_start: date | None = None,
        user_id: UUID = Depends(current_user_id),
    ) -> dict[str, object]:
        summary = services(request).nutrition_log_service.weekly_summary(
            user_id, week_start
        )
        return {"summary": jsonable_encoder(summary)}

    @app.get("/nutrition/weekly-progress")
    async def weekly_progress(
        request: Request,
        week_start: date | None = None,
        user_id: UUID = Depends(current_user_id),
    ) -> dict[str, object]:
        result = services(request).nutrition_log_service.weekly_progress(
            user_id, week_start
        )
        return {"progress": jsonable_encoder(result)}

    @app.get("/nutrition/by-dates")
    async def logs_by_dates(
        request: Request,
        dates: list[date] = Query(default=[]),
        user_id: UUID = Depends(current_user_id),
    ) -> dict[str, object]:
        logs = services(request).nutrition_log_service.logs_for_dates(user_id, dates)
        return {"logs": jsonable_encoder(logs)}

    # Grocery list

    @app.get("/grocery")
    async def list_grocery(
        request: Request, user_id: UUID = Depends(current_user_id)
    ) -> dict[str, object]:
        items = services(request).grocery_service.list_items(user_id)
        return {"items": jsonable_encoder(items)}

    @app.post("/grocery", status_code=status.HTTP_201_CREATED)
    async def add_grocery_item(
        payload: GroceryItemCreate,
        request: Request,
        user_id: UUID = Depends(current_user_id),
    ) -> dict[str, object]:
        item = services(request).grocery_service.add_item(
            user_id,
            payload.name,
            payload.quantity,
            unit=payload.unit,
            category=payload.category,
            notes=payload.notes,
        )
        return {"item": jsonable_encoder(item)}

    @app.delete("/grocery")
    async def clear_grocery(
        request: Request, user_id: UUID = Depends(current_user_id)
    ) -> dict[str, object]:
        removed = services(request).grocery_service.clear(user_id)
        return {"removed": removed}

    @app.get("/grocery/category/{category}")
    async def grocery_by_category(
        category: str, request: Request, user_id: UUID = Depends(current_user_id)
    ) -> dict[str, object]:
        items = services(request).grocery_service.items_by_category(user_id, category)
        return {"items": jsonable_encoder(items)}

    @app.post("/grocery/add-recipe-ingredients", status_code=status.HTTP_201_CREATED)
    async def add_recipe_ingredients(
        payload: RecipeIngredientsRequest,
        request: Request,
        user_id: UUID = Depends(current_user_id),
    ) -> dict[str, object]:
        items = services(request).grocery_service.add_recipe_ingredients(
            user_id, [item.to_domain() for item in payload.ingredients]
        )
        return {"items": jsonable_encoder(items)}

    @app.post("/grocery/add-meal-plan/{plan_id}", status_code=status.HTTP_201_CREATED)
    async def add_meal_plan_to_grocery(
        plan_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
    ) -> dict[str, object]:
        items = services(request).grocery_service.add_plan_to_list(user_id, plan_id)
        return {"items": jsonable_encoder(items)}

    @app.put("/grocery/{item_id}")
    async def update_grocery_item(
        item_id: UUID,
        payload: GroceryItemUpdate,
        request: Request,
        user_id: UUID = Depends(current_user_id),
    ) -> dict[str, object]:
        item = services(request).grocery_service.update_item(
            user_id, item_id, **payload.model_dump(exclude_none=True)
        )
        return {"item": jsonable_encoder(item)}

    @app.patch("/grocery/{item_id}/toggle")
    async def toggle_grocery_item(
        item_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
    ) -> dict[str, object]:
        item = services(request).grocery_service.toggle_purchased(user_id, item_id)
        return {"item": jsonable_encoder(item)}

    @app.delete("/grocery/{item_id}")
    async def delete_grocery_item(
        item_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
    ) -> dict[str, str]:
        services(request).grocery_service.delete_item(user_id, item_id)
        return {"status": "deleted"}

    # Recipes

    @app.get("/recipes")
    async def list_recipes(  # noqa: PLR0913
        request: Request,
        dietary_tag: str | None = None,
        cuisine: str | None = None,
        search: str | None = None,
        max_prep_time_min: int | None = None,
        limit: int = 20,
    ) -> dict[str, object]:
        query = RecipeQuery(
            dietary_tag=dietary_tag,
            cuisines=(cuisine,) if cuisine else (),
            title_contains=search,
            max_prep_time_min=max_prep_time_min,
        )
        recipes = services(request).recipe_service.list_approved(query, limit)
        return {"recipes": jsonable_encoder(recipes)}

    @app.post("/recipes", status_code=status.HTTP_201_CREATED)
    async def create_recipe(
        payload: RecipeCreate,
        request: Request,
        user_id: UUID = Depends(current_user_id),
    ) -> dict[str, object]:
        recipe = services(request).recipe_service.create_recipe(
            user_id, payload.to_domain()
        )
        return {"recipe": jsonable_encoder(recipe)}

    @app.get("/recipes/search")
    async def search_external_recipes(  # noqa: PLR0913
        request: Request,
        query: str | None = None,
        number: int = 12,
        diet: str | None = None,
        cuisine: str | None = None,
        max_ready_time: int | None = None,
    ) -> dict[str, object]:
        """Search Spoonacular, or return random recipes without a query."""
        recipes = await services(request).recipe_search_service.search(
            query, number, diet, cuisine, max_ready_time
        )
        return {
            "recipes": jsonable_encoder(recipes),
            "count": len(recipes),
            "source": "spoonacular",
        }

    @app.post("/recipes/import", status_code=status.HTTP_201_CREATED)
    async def import_external_recipe(
        payload: RecipeImportRequest,
        request: Request,
        user_id: UUID = Depends(current_user_id),
    ) -> dict[str, object]:
        search_service = services(request).recipe_search_service
        external = await search_service.get_recipe(payload.external_id)
        recipe = search_service.import_recipe(user_id, external)
        return {"recipe": jsonable_encoder(recipe)}

    @app.get("/recipes/{recipe_id}")
    async def get_recipe(recipe_id: UUID, request: Request) -> dict[str, object]:
        recipe = services(request).recipe_service.get_recipe(recipe_id)
        return {"recipe": jsonable_encoder(recipe)}

    @app.put("/recipes/{recipe_id}")
    async def update_recipe(
        recipe_id: UUID,
        payload: RecipeUpdate,
        request: Request,
        user_id: UUID = Depends(current_user_id),
    ) -> dict[str, object]:
        recipe = services(request).recipe_service.update_recipe(
            user_id, recipe_id, **payload.to_changes()
        )
        return {"recipe": jsonable_encoder(recipe)}

    @app.delete("/recipes/{recipe_id}")
    async def delete_recipe(
        recipe_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
    ) -> dict[str, str]:
        services(request).recipe_service.delete_recipe(user_id, recipe_id)
        return {"status": "deleted"}

    return app
