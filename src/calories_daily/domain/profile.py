"""Domain models for the body profile and calorie goal."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


class Gender(StrEnum):
    """Sex used by the Mifflin-St Jeor equation."""

    MALE = "male"
    FEMALE = "female"


class GoalType(StrEnum):
    """Direction of the calorie goal."""

    MAINTAIN = "maintain"
    CUT = "cut"
    BULK = "bulk"


DEFAULT_GOAL_DELTA = 300.0
DEFAULT_ACTIVITY_FACTOR = 1.2

ACTIVITY_LEVELS: dict[str, float] = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very_active": 1.9,
}


@dataclass(frozen=True)
class Goal:
    """Calorie goal; ``target_kcal`` is derived, never set by the user."""

    type: GoalType = GoalType.MAINTAIN
    delta: float = DEFAULT_GOAL_DELTA
    target_kcal: float | None = None


@dataclass(frozen=True)
class Profile:
    """Body measurements with derived energy expenditure."""

    gender: Gender = Gender.MALE
    age: float | None = None
    height_cm: float | None = None
    weight_kg: float | None = None
    activity_factor: float = DEFAULT_ACTIVITY_FACTOR
    bmr: float | None = None
    tdee: float | None = None
    goal: Goal = field(default_factory=Goal)


@dataclass(frozen=True)
class DerivedMetrics:
    """BMR, TDEE and target computed from a profile."""

    bmr: float | None
    tdee: float | None
    target_kcal: float | None


@dataclass(frozen=True)
class ProfileDocument:
    """Remote per-user document; profile is None when the column is empty."""

    email: str
    profile: Profile | None
    created_at: datetime | None = None
    updated_at: datetime | None = None
