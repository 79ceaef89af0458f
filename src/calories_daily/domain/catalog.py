"""Static food catalog with approximate per-portion values."""

from dataclasses import dataclass
from enum import StrEnum


@dataclass(frozen=True)
class CatalogFood:
    """A ready-made food item that can be added to today's log."""

    name: str
    kcal: float
    protein: float
    carb: float
    fat: float
    category: str


class PortionSize(StrEnum):
    """Portion sizes offered for quick adds."""

    SMALL = "S"
    MEDIUM = "M"
    LARGE = "L"


PORTION_MULTIPLIERS: dict[PortionSize, float] = {
    PortionSize.SMALL: 0.75,
    PortionSize.MEDIUM: 1.0,
    PortionSize.LARGE: 1.25,
}

PROTEIN = "Protein"
CARBS = "Carbohydrates"
HEALTHY_FATS = "Healthy fats"
PRODUCE = "Vegetables & fruit"
THAI_DISHES = "Thai dishes (approx.)"


def _foods(
    category: str, rows: list[tuple[str, float, float, float, float]]
) -> list[CatalogFood]:
    return [
        CatalogFood(name=name, kcal=kcal, protein=p, carb=c, fat=f, category=category)
        for name, kcal, p, c, f in rows
    ]


FOOD_CATALOG: dict[str, list[CatalogFood]] = {
    PROTEIN: _foods(
        PROTEIN,
        [
            ("Grilled chicken breast 150g", 250, 40, 0, 6),
            ("Boiled eggs x2", 140, 12, 1, 10),
            ("Salmon 120g", 240, 25, 0, 15),
            ("Silken tofu 200g", 160, 18, 6, 7),
            ("Greek yogurt 1 cup", 130, 15, 8, 3),
            ("Tuna in spring water 1 can", 120, 26, 0, 1),
        ],
    ),
    CARBS: _foods(
        CARBS,
        [
            ("Brown rice 1 cup", 215, 5, 45, 2),
            ("Sweet potato 200g", 180, 4, 41, 0),
            ("Whole wheat bread 2 slices", 160, 8, 28, 2),
            ("Oats 50g", 190, 7, 33, 4),
            ("Banana 1 medium", 105, 1, 27, 0),
        ],
    ),
    HEALTHY_FATS: _foods(
        HEALTHY_FATS,
        [
            ("Avocado 1/2", 120, 2, 6, 11),
            ("Almonds 20 pieces", 140, 5, 5, 12),
            ("Olive oil 1 tbsp", 120, 0, 0, 14),
            ("Chia seeds 1 tbsp", 60, 2, 5, 4),
        ],
    ),
    PRODUCE: _foods(
        PRODUCE,
        [
            ("Broccoli 200g", 70, 6, 14, 1),
            ("Mixed salad", 90, 3, 12, 4),
            ("Apple 1 medium", 95, 0, 25, 0),
            ("Orange 1 medium", 60, 1, 15, 0),
        ],
    ),
    THAI_DISHES: _foods(
        THAI_DISHES,
        [
            ("Hainanese chicken rice", 650, 30, 80, 22),
            ("Basil chicken with fried egg", 720, 35, 75, 30),
            ("Pad thai", 700, 20, 95, 25),
            ("Papaya salad with grilled chicken", 520, 28, 45, 20),
            ("Tom yum goong 1 bowl", 180, 16, 12, 6),
        ],
    ),
}

# Picks per category for a one-day menu.
DAY_MENU_PLAN: list[tuple[str, int]] = [
    (PROTEIN, 2),
    (CARBS, 2),
    (HEALTHY_FATS, 1),
    (PRODUCE, 2),
    (THAI_DISHES, 1),
]
