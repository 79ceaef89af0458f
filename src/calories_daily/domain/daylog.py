"""Domain models for the per-day food log."""

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

KCAL_DIGITS = 0
MACRO_DIGITS = 1


@dataclass(frozen=True)
class FoodEntry:
    """One logged food item. Entries are never edited in place."""

    name: str
    kcal: float
    protein: float
    carb: float
    fat: float
    logged_at: datetime


@dataclass(frozen=True)
class MacroTotals:
    """Aggregate energy and macros for a list of foods."""

    kcal: float = 0.0
    protein: float = 0.0
    carb: float = 0.0
    fat: float = 0.0


@dataclass(frozen=True)
class DayLog:
    """Food log for one calendar day.

    ``totals`` is derived from ``foods`` on construction and cannot be passed
    in, so a DayLog never carries totals that disagree with its foods.
    """

    day_id: str
    foods: tuple[FoodEntry, ...] = ()
    totals: MacroTotals = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "foods", tuple(self.foods))
        object.__setattr__(self, "totals", compute_totals(self.foods))

    @classmethod
    def empty(cls, day_id: str) -> "DayLog":
        """Return a log for the day with no foods."""
        return cls(day_id=day_id)

    def with_food(self, entry: FoodEntry) -> "DayLog":
        """Return a copy with the entry inserted first (newest first)."""
        return DayLog(day_id=self.day_id, foods=(entry, *self.foods))

    def without_food(self, index: int) -> "DayLog":
        """Return a copy without the entry at index."""
        foods = list(self.foods)
        del foods[index]
        return DayLog(day_id=self.day_id, foods=tuple(foods))

    def cleared(self) -> "DayLog":
        """Return an empty copy for the same day."""
        return DayLog.empty(self.day_id)


def day_id_for(day: date) -> str:
    """Format a date as a ``YYYY-MM-DD`` day id."""
    return day.isoformat()


def compute_totals(foods: Iterable[object]) -> MacroTotals:
    """Sum kcal and macros across foods.

    Missing or non-numeric fields count as zero. kcal is rounded to whole
    numbers and macros to one decimal, half up.
    """
    kcal = protein = carb = fat = 0.0
    for food in foods:
        kcal += _to_float(getattr(food, "kcal", None))
        protein += _to_float(getattr(food, "protein", None))
        carb += _to_float(getattr(food, "carb", None))
        fat += _to_float(getattr(food, "fat", None))
    return MacroTotals(
        kcal=round_half_up(kcal, KCAL_DIGITS),
        protein=round_half_up(protein, MACRO_DIGITS),
        carb=round_half_up(carb, MACRO_DIGITS),
        fat=round_half_up(fat, MACRO_DIGITS),
    )


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like a calculator does (0.5 goes away from zero)."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def _to_float(value: object) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0
