"""Pydantic request and response models for the HTTP API."""

from datetime import datetime

from pydantic import BaseModel, Field

from calories_daily.domain.catalog import CatalogFood, PortionSize
from calories_daily.domain.daylog import DayLog, MacroTotals
from calories_daily.domain.profile import (
    DEFAULT_ACTIVITY_FACTOR,
    DEFAULT_GOAL_DELTA,
    Profile,
)
from calories_daily.domain.session import SessionState
from calories_daily.services.dashboard import DashboardSummary


class CredentialsRequest(BaseModel):
    """Email and password for sign-up and sign-in."""

    email: str
    password: str


class CalculateRequest(BaseModel):
    """Body measurements for the BMR/TDEE calculation."""

    gender: str
    age: float | None = None
    height_cm: float | None = None
    weight_kg: float | None = None
    activity_factor: float = DEFAULT_ACTIVITY_FACTOR
    activity_level: str | None = None


class GoalRequest(BaseModel):
    """Goal direction and offset from TDEE."""

    type: str
    delta: float = DEFAULT_GOAL_DELTA


class FoodRequest(BaseModel):
    """A manually entered food."""

    name: str
    kcal: float
    protein: float = 0.0
    carb: float = 0.0
    fat: float = 0.0


class CatalogFoodRequest(BaseModel):
    """A catalog food with an optional portion size."""

    name: str
    size: PortionSize | None = None


class ClearRequest(BaseModel):
    """Confirmation for clearing today's log."""

    confirm: bool = False


class SessionView(BaseModel):
    mode: str
    user_id: str | None = None
    email: str | None = None
    error: str | None = None


class ProfileView(BaseModel):
    gender: str
    age: float | None
    height_cm: float | None
    weight_kg: float | None
    activity_factor: float
    bmr: float | None
    tdee: float | None


class GoalView(BaseModel):
    type: str
    delta: float
    target_kcal: float | None


class TotalsView(BaseModel):
    kcal: float
    protein: float
    carb: float
    fat: float


class FoodView(BaseModel):
    index: int
    name: str
    kcal: float
    protein: float
    carb: float
    fat: float
    logged_at: datetime


class TodayView(BaseModel):
    day_id: str
    foods: list[FoodView]
    totals: TotalsView
    stale: bool = False


class DashboardView(BaseModel):
    target_kcal: float | None
    eaten_kcal: float
    remaining_kcal: float | None
    progress_pct: float
    progress_bar_pct: float
    goal_label: str
    goal_hint: str | None


class StateView(BaseModel):
    """Everything the presentation layer renders."""

    session: SessionView
    profile: ProfileView
    goal: GoalView
    today: TodayView
    dashboard: DashboardView
    notice: str | None = None


class CatalogFoodView(BaseModel):
    name: str
    kcal: float
    protein: float
    carb: float
    fat: float
    category: str


class CatalogCategoryView(BaseModel):
    name: str
    foods: list[CatalogFoodView]


class CatalogView(BaseModel):
    categories: list[CatalogCategoryView] = Field(default_factory=list)


class MenuView(BaseModel):
    foods: list[CatalogFoodView]
    totals: TotalsView


class GoalPreviewView(BaseModel):
    type: str
    delta: float
    target_kcal: float | None


def session_view(state: SessionState) -> SessionView:
    """Build the session section of the state view."""
    return SessionView(
        mode=state.mode.value,
        user_id=state.user.user_id if state.user else None,
        email=state.user.email if state.user else None,
        error=state.error,
    )


def profile_view(profile: Profile) -> ProfileView:
    """Build the profile section of the state view."""
    return ProfileView(
        gender=profile.gender.value,
        age=profile.age,
        height_cm=profile.height_cm,
        weight_kg=profile.weight_kg,
        activity_factor=profile.activity_factor,
        bmr=profile.bmr,
        tdee=profile.tdee,
    )


def goal_view(profile: Profile) -> GoalView:
    """Build the goal section of the state view."""
    return GoalView(
        type=profile.goal.type.value,
        delta=profile.goal.delta,
        target_kcal=profile.goal.target_kcal,
    )


def totals_view(totals: MacroTotals) -> TotalsView:
    return TotalsView(
        kcal=totals.kcal, protein=totals.protein, carb=totals.carb, fat=totals.fat
    )


def today_view(log: DayLog, stale: bool = False) -> TodayView:
    """Build the today section; indexes match remove_food."""
    return TodayView(
        day_id=log.day_id,
        foods=[
            FoodView(
                index=index,
                name=food.name,
                kcal=food.kcal,
                protein=food.protein,
                carb=food.carb,
                fat=food.fat,
                logged_at=food.logged_at,
            )
            for index, food in enumerate(log.foods)
        ],
        totals=totals_view(log.totals),
        stale=stale,
    )


def dashboard_view(summary: DashboardSummary) -> DashboardView:
    return DashboardView(
        target_kcal=summary.target_kcal,
        eaten_kcal=summary.eaten_kcal,
        remaining_kcal=summary.remaining_kcal,
        progress_pct=summary.progress_pct,
        progress_bar_pct=summary.progress_bar_pct,
        goal_label=summary.goal_label,
        goal_hint=summary.goal_hint,
    )


def catalog_food_view(food: CatalogFood) -> CatalogFoodView:
    return CatalogFoodView(
        name=food.name,
        kcal=food.kcal,
        protein=food.protein,
        carb=food.carb,
        fat=food.fat,
        category=food.category,
    )
