"""HTTP routes for the session, profile, today's log and the catalog."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Query, Request

from calories_daily.api.schemas import (
    CalculateRequest,
    CatalogCategoryView,
    CatalogFoodRequest,
    CatalogView,
    ClearRequest,
    CredentialsRequest,
    FoodRequest,
    GoalPreviewView,
    GoalRequest,
    MenuView,
    StateView,
    catalog_food_view,
    dashboard_view,
    goal_view,
    profile_view,
    session_view,
    today_view,
    totals_view,
)
from calories_daily.domain.daylog import compute_totals
from calories_daily.domain.errors import RemoteUnavailableError, ValidationError
from calories_daily.domain.profile import ACTIVITY_LEVELS, DEFAULT_GOAL_DELTA
from calories_daily.domain.session import SessionMode
from calories_daily.services.dashboard import build_dashboard
from calories_daily.services.day_log import make_food_entry

if TYPE_CHECKING:
    from calories_daily.containers import AppContainer

_logger = logging.getLogger(__name__)

router = APIRouter()


def build_state_view(container: AppContainer, notice: str | None = None) -> StateView:
    """Assemble the view; today's log is marked stale once the date moves on."""
    profile = container.profile_manager.profile
    reconciler = container.day_log_reconciler
    stale = reconciler.check_rollover()
    log = reconciler.log
    return StateView(
        session=session_view(container.session_controller.state),
        profile=profile_view(profile),
        goal=goal_view(profile),
        today=today_view(log, stale=stale),
        dashboard=dashboard_view(build_dashboard(profile, log)),
        notice=notice,
    )


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.get("/state")
async def get_state(request: Request) -> StateView:
    """Return the view, moving to the new day first when the date has changed."""
    container = _container(request)
    try:
        await container.day_log_reconciler.refresh_if_stale()
    except RemoteUnavailableError as exc:
        _logger.warning("Could not refresh today's log: %s", exc)
        return build_state_view(container, notice=str(exc))
    return build_state_view(container)


@router.post("/auth/signup")
async def sign_up(payload: CredentialsRequest, request: Request) -> StateView:
    """Create an account and sync it when a session is issued."""
    container = _container(request)
    state = await container.auth_service.sign_up(payload.email, payload.password)
    notice = state.error
    if state.mode == SessionMode.ANONYMOUS:
        notice = "Confirm your email address, then sign in"
    return build_state_view(container, notice=notice)


@router.post("/auth/login")
async def sign_in(payload: CredentialsRequest, request: Request) -> StateView:
    """Sign in and sync the profile and today's log."""
    container = _container(request)
    state = await container.auth_service.sign_in(payload.email, payload.password)
    return build_state_view(container, notice=state.error)


@router.post("/auth/logout")
async def sign_out(request: Request) -> StateView:
    """Sign out; today's log stays on this device."""
    container = _container(request)
    await container.auth_service.sign_out()
    return build_state_view(container)


@router.post("/profile/calculate")
async def calculate_profile(payload: CalculateRequest, request: Request) -> StateView:
    """Recompute BMR, TDEE and the goal target."""
    activity_factor = payload.activity_factor
    if payload.activity_level is not None:
        if payload.activity_level not in ACTIVITY_LEVELS:
            raise ValidationError(f"Unknown activity level: {payload.activity_level}")
        activity_factor = ACTIVITY_LEVELS[payload.activity_level]
    container = _container(request)
    await container.profile_manager.calculate(
        gender=payload.gender,
        age=payload.age,
        height_cm=payload.height_cm,
        weight_kg=payload.weight_kg,
        activity_factor=activity_factor,
    )
    return build_state_view(container)


@router.post("/profile/goal")
async def apply_goal(payload: GoalRequest, request: Request) -> StateView:
    """Change the goal and re-derive the target."""
    container = _container(request)
    await container.profile_manager.apply_goal(payload.type, payload.delta)
    return build_state_view(container)


@router.get("/profile/goal/preview")
async def preview_goal(
    request: Request,
    goal_type: str = Query(alias="type"),
    delta: float = DEFAULT_GOAL_DELTA,
) -> GoalPreviewView:
    """Return the target a goal would give without applying it."""
    container = _container(request)
    target = container.profile_manager.preview_goal(goal_type, delta)
    return GoalPreviewView(type=goal_type, delta=delta, target_kcal=target)


@router.post("/profile/save")
async def save_profile(request: Request) -> StateView:
    """Save the profile to the remote document."""
    container = _container(request)
    user = container.session_controller.state.user
    await container.profile_manager.save(user)
    return build_state_view(container, notice="Profile saved")


@router.post("/today/foods")
async def add_food(payload: FoodRequest, request: Request) -> StateView:
    """Log a manually entered food."""
    container = _container(request)
    entry = make_food_entry(
        name=payload.name,
        kcal=payload.kcal,
        protein=payload.protein,
        carb=payload.carb,
        fat=payload.fat,
    )
    await container.day_log_reconciler.add_food(entry)
    return build_state_view(container)


@router.post("/today/foods/catalog")
async def add_catalog_food(payload: CatalogFoodRequest, request: Request) -> StateView:
    """Log a catalog food, scaled to the chosen portion."""
    container = _container(request)
    entry = container.catalog_service.entry_for(payload.name, payload.size)
    await container.day_log_reconciler.add_food(entry)
    return build_state_view(container)


@router.delete("/today/foods/{index}")
async def remove_food(index: int, request: Request) -> StateView:
    """Remove the food at the given position."""
    container = _container(request)
    await container.day_log_reconciler.remove_food(index)
    return build_state_view(container)


@router.post("/today/clear")
async def clear_today(payload: ClearRequest, request: Request) -> StateView:
    """Remove every food from today's log."""
    if not payload.confirm:
        raise ValidationError("Set confirm to true to clear today's log")
    container = _container(request)
    await container.day_log_reconciler.clear()
    return build_state_view(container)


@router.post("/today/reload")
async def reload_today(request: Request) -> StateView:
    """Re-read today's log from the remote store."""
    container = _container(request)
    await container.day_log_reconciler.reload()
    return build_state_view(container, notice="Reloaded today's log")


@router.get("/catalog")
async def search_catalog(request: Request, q: str = "") -> CatalogView:
    """Search the food catalog by name."""
    container = _container(request)
    results = container.catalog_service.search(q)
    return CatalogView(
        categories=[
            CatalogCategoryView(
                name=category, foods=[catalog_food_view(food) for food in foods]
            )
            for category, foods in results.items()
        ]
    )


@router.get("/catalog/random")
async def random_menu(request: Request) -> MenuView:
    """Suggest a random one-day menu."""
    container = _container(request)
    foods = container.catalog_service.random_day_menu()
    return MenuView(
        foods=[catalog_food_view(food) for food in foods],
        totals=totals_view(compute_totals(foods)),
    )
