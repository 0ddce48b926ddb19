"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder

from diet_planner.api.schemas import RejectRequest  # noqa: TC001

if TYPE_CHECKING:
    from diet_planner.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/dashboard", dependencies=[Depends(require_admin)])
async def dashboard(request: Request) -> dict[str, object]:
    """Return catalog and user totals."""
    container: AppContainer = request.app.state.container
    return jsonable_encoder(container.admin_service.dashboard())


@router.get("/recipes/pending", dependencies=[Depends(require_admin)])
async def pending_recipes(request: Request, limit: int = 50) -> dict[str, object]:
    """Return recipes awaiting moderation."""
    container: AppContainer = request.app.state.container
    recipes = container.admin_service.pending_recipes(limit)
    return {"recipes": jsonable_encoder(recipes)}


@router.put("/recipes/{recipe_id}/approve", dependencies=[Depends(require_admin)])
async def approve_recipe(recipe_id: UUID, request: Request) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    recipe = container.admin_service.approve_recipe(recipe_id)
    return {"recipe": jsonable_encoder(recipe)}


@router.put("/recipes/{recipe_id}/reject", dependencies=[Depends(require_admin)])
async def reject_recipe(
    recipe_id: UUID, payload: RejectRequest, request: Request
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    recipe = container.admin_service.reject_recipe(recipe_id, payload.reason)
    return {"recipe": jsonable_encoder(recipe)}


@router.delete("/recipes/{recipe_id}", dependencies=[Depends(require_admin)])
async def delete_recipe(recipe_id: UUID, request: Request) -> dict[str, str]:
    container: AppContainer = request.app.state.container
    container.admin_service.delete_recipe(recipe_id)
    return {"status": "deleted"}


@router.get("/users", dependencies=[Depends(require_admin)])
async def list_users(
    request: Request, page: int = 1, limit: int = 10
) -> dict[str, object]:
    """Return user profiles, newest first."""
    container: AppContainer = request.app.state.container
    return jsonable_encoder(container.admin_service.list_users(page, limit))


@router.get("/meal-plans", dependencies=[Depends(require_admin)])
async def list_meal_plans(
    request: Request, page: int = 1, limit: int = 10, user_id: UUID | None = None
) -> dict[str, object]:
    """Return meal plans across users, optionally filtered to one user."""
    container: AppContainer = request.app.state.container
    plans = container.admin_service.list_meal_plans(page, limit, user_id)
    return jsonable_encoder(plans)


@router.get("/analytics", dependencies=[Depends(require_admin)])
async def analytics(request: Request, time_range: str = "week") -> dict[str, object]:
    """Return daily activity counts for the last week or month."""
    container: AppContainer = request.app.state.container
    return jsonable_encoder(container.admin_service.analytics(time_range))
