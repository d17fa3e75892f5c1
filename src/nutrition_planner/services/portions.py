"""Portion sizing for a food against a calorie target and macro caps."""

import math
from dataclasses import dataclass

from nutrition_planner.domain.errors import DegenerateFoodError
from nutrition_planner.domain.foods import Food
from nutrition_planner.domain.nutrition import MacroTargets
from nutrition_planner.domain.plans import PortionedFood
from nutrition_planner.domain.profile import normalize_tag

_MASS_UNITS = {"g", "gram", "grams", "ml", "milliliter", "milliliters"}
_COUNT_STEP = 0.5


@dataclass(frozen=True)
class FriendlyUnit:
    """Household unit used to present a portion of a known food category."""

    singular: str
    plural: str
    grams: float
    keywords: tuple[str, ...]

    def label(self, count: float) -> str:
        return self.singular if count == 1 else self.plural


FRIENDLY_UNITS: tuple[FriendlyUnit, ...] = (
    FriendlyUnit("tablespoon", "tablespoons", 15.0, ("oil", "ghee")),
    FriendlyUnit("slice", "slices", 30.0, ("bread", "toast")),
    FriendlyUnit(
        "cup",
        "cups",
        100.0,
        ("rice", "quinoa", "oats", "oatmeal", "pasta", "couscous", "grains", "buckwheat"),
    ),
)


def friendly_unit_for(food: Food) -> FriendlyUnit | None:
    """Return the household unit for foods measured by mass, if one applies."""
    if food.serving_unit.strip().lower() not in _MASS_UNITS:
        return None
    words = set(normalize_tag(food.name).split("_"))
    for unit in FRIENDLY_UNITS:
        if words.intersection(unit.keywords):
            return unit
    return None


def calculate_portion(
    food: Food,
    target_calories: float,
    macro_caps: MacroTargets | None = None,
) -> PortionedFood:
    """Size a portion whose calories approach the target.

    Protein and carbs caps each limit the portion independently; the smallest
    of the calorie-derived and macro-derived portions wins. When a cap wins,
    the portion is rounded down so it stays under that cap, unless the
    smallest step alone exceeds it. Nutrients are scaled linearly from the
    reference serving of the rounded portion.
    """
    if food.calories <= 0:
        raise DegenerateFoodError(food.id)
    if target_calories <= 0:
        raise ValueError(f"target_calories must be positive, got {target_calories}")

    calorie_amount = target_calories / food.calories * food.serving_size
    amount = calorie_amount
    if macro_caps is not None:
        if food.protein_g > 0 and macro_caps.protein_g > 0:
            amount = min(amount, macro_caps.protein_g / food.protein_g * food.serving_size)
        if food.carbs_g > 0 and macro_caps.carbs_g > 0:
            amount = min(amount, macro_caps.carbs_g / food.carbs_g * food.serving_size)
    capped = amount < calorie_amount

    unit = friendly_unit_for(food)
    if unit is not None:
        count = _round_step(amount / unit.grams, _COUNT_STEP, down=capped)
        amount = count * unit.grams
        portion, label = count, unit.label(count)
    else:
        amount = _round_native(amount, food.serving_unit, down=capped)
        portion, label = amount, food.serving_unit

    nutrients = food.nutrients.scaled(amount / food.serving_size).rounded()
    return PortionedFood(
        food=food, portion=portion, unit=label, amount=amount, nutrients=nutrients
    )


def _round_native(amount: float, serving_unit: str, *, down: bool = False) -> float:
    """Whole grams/milliliters; half steps for count units such as eggs."""
    if serving_unit.strip().lower() in _MASS_UNITS:
        return _round_step(amount, 1.0, down=down)
    return _round_step(amount, _COUNT_STEP, down=down)


def _round_step(value: float, step: float, *, down: bool) -> float:
    """Round to a multiple of ``step``, never below one step."""
    steps = value / step
    # Tolerate float noise such as 1.9999999 when a cap lands on a step.
    whole = math.floor(steps + 1e-9) if down else round(steps)
    return max(step, whole * step)
