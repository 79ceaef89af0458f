"""Conversion between domain models and stored JSON documents.

The same document shapes are used by the local cache and the remote store.
Readers are lenient: unknown or malformed values fall back to defaults, and
the short keys written by older clients (``p``, ``c``, ``f``, ``ts``,
``height``, ``weight``, ``activity``) are still understood.
"""

import math
from datetime import UTC, datetime, timedelta

from calories_daily.domain.daylog import DayLog, FoodEntry, MacroTotals
from calories_daily.domain.profile import (
    DEFAULT_ACTIVITY_FACTOR,
    DEFAULT_GOAL_DELTA,
    Gender,
    Goal,
    GoalType,
    Profile,
)

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def food_to_document(entry: FoodEntry) -> dict[str, object]:
    """Serialize a food entry."""
    return {
        "name": entry.name,
        "kcal": entry.kcal,
        "protein": entry.protein,
        "carb": entry.carb,
        "fat": entry.fat,
        "loggedAt": round(entry.logged_at.timestamp() * 1000),
    }


def food_from_document(row: dict[str, object]) -> FoodEntry:
    """Parse a stored food entry."""
    return FoodEntry(
        name=str(row.get("name") or ""),
        kcal=_to_float(row.get("kcal")),
        protein=_to_float(_first(row, "protein", "p")),
        carb=_to_float(_first(row, "carb", "c")),
        fat=_to_float(_first(row, "fat", "f")),
        logged_at=_parse_timestamp(_first(row, "loggedAt", "ts")),
    )


def totals_to_document(totals: MacroTotals) -> dict[str, float]:
    """Serialize aggregate totals."""
    return {
        "kcal": totals.kcal,
        "protein": totals.protein,
        "carb": totals.carb,
        "fat": totals.fat,
    }


def day_log_to_document(log: DayLog) -> dict[str, object]:
    """Serialize a day log; totals are included for readers of the raw store."""
    return {
        "dayId": log.day_id,
        "foods": [food_to_document(food) for food in log.foods],
        "totals": totals_to_document(log.totals),
    }


def day_log_from_document(
    document: dict[str, object], day_id: str | None = None
) -> DayLog:
    """Parse a stored day log. Totals are recomputed from the foods."""
    foods = document.get("foods")
    rows = foods if isinstance(foods, list) else []
    resolved_day_id = day_id or str(document.get("dayId") or document.get("id") or "")
    return DayLog(
        day_id=resolved_day_id,
        foods=tuple(food_from_document(row) for row in rows if isinstance(row, dict)),
    )


def profile_to_document(profile: Profile) -> dict[str, object]:
    """Serialize a profile with its goal."""
    return {
        "gender": profile.gender.value,
        "age": profile.age,
        "heightCm": profile.height_cm,
        "weightKg": profile.weight_kg,
        "activityFactor": profile.activity_factor,
        "bmr": profile.bmr,
        "tdee": profile.tdee,
        "goal": {
            "type": profile.goal.type.value,
            "delta": profile.goal.delta,
            "targetKcal": profile.goal.target_kcal,
        },
    }


def profile_from_document(document: dict[str, object]) -> Profile:
    """Parse a stored profile."""
    goal_row = document.get("goal")
    goal_data = goal_row if isinstance(goal_row, dict) else {}
    delta = _optional_float(goal_data.get("delta"))
    activity = _optional_float(_first(document, "activityFactor", "activity"))
    return Profile(
        gender=_parse_gender(document.get("gender")),
        age=_optional_float(document.get("age")),
        height_cm=_optional_float(_first(document, "heightCm", "height")),
        weight_kg=_optional_float(_first(document, "weightKg", "weight")),
        activity_factor=activity if activity else DEFAULT_ACTIVITY_FACTOR,
        bmr=_optional_float(document.get("bmr")),
        tdee=_optional_float(document.get("tdee")),
        goal=Goal(
            type=_parse_goal_type(goal_data.get("type")),
            delta=DEFAULT_GOAL_DELTA if delta is None else delta,
            target_kcal=_optional_float(goal_data.get("targetKcal")),
        ),
    )


def _first(row: dict[str, object], *keys: str) -> object:
    for key in keys:
        if row.get(key) is not None:
            return row[key]
    return None


def _to_float(value: object) -> float:
    number = _optional_float(value)
    return 0.0 if number is None else number


def _optional_float(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _parse_timestamp(value: object) -> datetime:
    if isinstance(value, int | float) and not isinstance(value, bool):
        return _EPOCH + timedelta(milliseconds=value)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            pass
    return datetime.now(tz=UTC)


def _parse_gender(value: object) -> Gender:
    try:
        return Gender(str(value))
    except ValueError:
        return Gender.MALE


def _parse_goal_type(value: object) -> GoalType:
    try:
        return GoalType(str(value))
    except ValueError:
        return GoalType.MAINTAIN
