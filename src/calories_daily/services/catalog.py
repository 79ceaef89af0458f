"""Food catalog search, random menus and portion scaling."""

import random
from dataclasses import dataclass, field, replace
from datetime import datetime

from calories_daily.domain.catalog import (
    DAY_MENU_PLAN,
    FOOD_CATALOG,
    PORTION_MULTIPLIERS,
    CatalogFood,
    PortionSize,
)
from calories_daily.domain.daylog import (
    KCAL_DIGITS,
    MACRO_DIGITS,
    FoodEntry,
    round_half_up,
)
from calories_daily.domain.errors import ValidationError
from calories_daily.services.day_log import make_food_entry


@dataclass
class CatalogService:
    """Read-only access to the static food catalog."""

    catalog: dict[str, list[CatalogFood]] = field(
        default_factory=lambda: FOOD_CATALOG
    )
    rng: random.Random = field(default_factory=random.Random)

    def search(self, query: str = "") -> dict[str, list[CatalogFood]]:
        """Return matching foods grouped by category, skipping empty groups."""
        needle = query.strip().lower()
        results: dict[str, list[CatalogFood]] = {}
        for category, foods in self.catalog.items():
            matches = [food for food in foods if needle in food.name.lower()]
            if matches:
                results[category] = matches
        return results

    def find(self, name: str) -> CatalogFood:
        """Return the catalog food with exactly this name."""
        for foods in self.catalog.values():
            for food in foods:
                if food.name == name:
                    return food
        raise ValidationError(f"Unknown catalog food: {name}")

    def random_day_menu(self) -> list[CatalogFood]:
        """Pick a one-day menu following the per-category plan."""
        menu: list[CatalogFood] = []
        for category, count in DAY_MENU_PLAN:
            foods = self.catalog.get(category) or []
            if not foods:
                continue
            menu.extend(self.rng.choice(foods) for _ in range(count))
        return menu

    def entry_for(
        self,
        name: str,
        size: PortionSize | None = None,
        logged_at: datetime | None = None,
    ) -> FoodEntry:
        """Build a log entry for a catalog food, optionally resized."""
        food = self.find(name)
        if size is not None:
            food = scale_portion(food, size)
        return make_food_entry(
            name=food.name,
            kcal=food.kcal,
            protein=food.protein,
            carb=food.carb,
            fat=food.fat,
            logged_at=logged_at,
        )


def scale_portion(food: CatalogFood, size: PortionSize) -> CatalogFood:
    """Scale a food to a small, medium or large portion; the size joins the name."""
    factor = PORTION_MULTIPLIERS[size]
    return replace(
        food,
        name=f"{food.name} ({size.value})",
        kcal=round_half_up(food.kcal * factor, KCAL_DIGITS),
        protein=round_half_up(food.protein * factor, MACRO_DIGITS),
        carb=round_half_up(food.carb * factor, MACRO_DIGITS),
        fat=round_half_up(food.fat * factor, MACRO_DIGITS),
    )
