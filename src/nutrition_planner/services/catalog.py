"""Food catalog ingestion and candidate filtering."""

import logging
from collections.abc import Iterable, Mapping
from typing import Protocol

from nutrition_planner.domain.foods import Food
from nutrition_planner.domain.plans import MealSlot
from nutrition_planner.domain.profile import DietaryPreferences, normalize_tag

_logger = logging.getLogger(__name__)

# Legacy catalog rows carry a numeric meal group instead of meal-type tags.
_FOOD_GROUP_SLOTS = {
    1: MealSlot.BREAKFAST.value,
    2: MealSlot.MORNING_SNACK.value,
    3: MealSlot.LUNCH.value,
    4: MealSlot.AFTERNOON_SNACK.value,
    5: MealSlot.DINNER.value,
}

_SLOT_TAGS: dict[MealSlot, set[str]] = {
    MealSlot.BREAKFAST: {"breakfast"},
    MealSlot.MORNING_SNACK: {"snack", "morningsnack", "morning_snack"},
    MealSlot.LUNCH: {"lunch"},
    MealSlot.AFTERNOON_SNACK: {"snack", "afternoonsnack", "afternoon_snack"},
    MealSlot.DINNER: {"dinner"},
}

_ANY_SLOT = "any"
PRE_WORKOUT_MAX_PREP_MINUTES = 30
PRE_WORKOUT_MIN_GLYCEMIC_INDEX = 55


class FoodCatalogRepository(Protocol):
    """Read interface for the external food catalog store."""

    def list_foods(self) -> list[Food]:
        """Return every food in the catalog."""


def parse_food_record(row: Mapping[str, object]) -> Food:
    """Build a Food from a loosely-typed catalog row.

    Optional fields are resolved to explicit defaults here so that scoring and
    portioning never deal with missing values.
    """
    nutrition = row.get("nutritionix_data")
    serving_size = _to_float(row.get("serving_size"))
    serving_unit = row.get("serving_unit")
    if serving_size <= 0 and isinstance(nutrition, Mapping):
        serving_size = _to_float(nutrition.get("serving_weight_grams"))
    if serving_size <= 0:
        serving_size = 100.0
    meal_types = _to_tags(row.get("meal_types") or row.get("meal_type"))
    food_group = row.get("food_group_id")
    if isinstance(food_group, int) and food_group in _FOOD_GROUP_SLOTS:
        meal_types = meal_types | {normalize_tag(_FOOD_GROUP_SLOTS[food_group])}
    micronutrients = set(_to_tags(row.get("micronutrients")))
    for key in ("vitamins", "minerals"):
        value = row.get(key)
        if isinstance(value, Mapping):
            micronutrients.update(normalize_tag(str(name)) for name in value)
        else:
            micronutrients.update(_to_tags(value))
    glycemic_index = row.get("glycemic_index")
    prep_minutes = row.get("preparation_time_minutes")
    return Food(
        id=str(row.get("id", "")),
        name=str(row.get("name", "")).strip(),
        serving_size=serving_size,
        serving_unit=str(serving_unit or "g"),
        calories=_to_float(row.get("calories")),
        protein_g=_to_float(_first(row, "protein_g", "protein")),
        carbs_g=_to_float(_first(row, "carbs_g", "carbs")),
        fats_g=_to_float(_first(row, "fats_g", "fats", "fat_g", "fat")),
        fiber_g=_to_float(_first(row, "fiber_g", "fiber")),
        allergens=_to_tags(row.get("allergens")),
        dietary_tags=_to_tags(row.get("dietary_tags")),
        meal_types=meal_types,
        categories=_to_tags(row.get("categories") or row.get("nutritional_category")),
        micronutrients=frozenset(micronutrients),
        pre_workout_compatible=bool(row.get("pre_workout_compatible", False)),
        post_workout_compatible=bool(row.get("post_workout_compatible", False)),
        glycemic_index=(
            float(glycemic_index) if isinstance(glycemic_index, int | float) else None
        ),
        preparation_time_minutes=(
            int(prep_minutes) if isinstance(prep_minutes, int | float) else None
        ),
    )


def filter_safe_foods(
    foods: Iterable[Food], preferences: DietaryPreferences
) -> list[Food]:
    """Drop foods that conflict with allergies or dietary restrictions."""
    allergies = {normalize_tag(value) for value in preferences.allergies if value}
    restrictions = {
        normalize_tag(value) for value in preferences.dietary_restrictions if value
    }
    safe: list[Food] = []
    for food in foods:
        if allergies and _triggers_allergy(food, allergies):
            _logger.debug("Excluded %s: allergen match", food.id)
            continue
        if not restrictions <= food.dietary_tags:
            _logger.debug("Excluded %s: dietary restriction", food.id)
            continue
        safe.append(food)
    return safe


def foods_for_slot(foods: Iterable[Food], slot: MealSlot) -> list[Food]:
    """Keep foods applicable to a meal slot; untagged foods fit any slot."""
    tags = _SLOT_TAGS[slot] | {normalize_tag(slot.value)}
    return [
        food
        for food in foods
        if not food.meal_types
        or _ANY_SLOT in food.meal_types
        or food.meal_types & tags
    ]


def workout_compatible(foods: Iterable[Food], *, pre_workout: bool) -> list[Food]:
    """Keep foods suited to eating right before or right after training."""
    if not pre_workout:
        return [food for food in foods if food.post_workout_compatible]
    return [
        food
        for food in foods
        if food.pre_workout_compatible
        and (
            food.preparation_time_minutes is None
            or food.preparation_time_minutes <= PRE_WORKOUT_MAX_PREP_MINUTES
        )
        and (
            food.glycemic_index is None
            or food.glycemic_index > PRE_WORKOUT_MIN_GLYCEMIC_INDEX
        )
    ]


def _triggers_allergy(food: Food, allergies: set[str]) -> bool:
    if food.allergens & allergies:
        return True
    words = set(normalize_tag(food.name).split("_"))
    words |= {word[:-1] for word in words if word.endswith("s")}
    return any(set(allergy.split("_")) <= words for allergy in allergies)


def _first(row: Mapping[str, object], *keys: str) -> object:
    for key in keys:
        if row.get(key) is not None:
            return row[key]
    return None


def _to_float(value: object) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return 0.0
    return 0.0


def _to_tags(value: object) -> frozenset[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str):
        items: Iterable[object] = value.split(",")
    elif isinstance(value, Iterable):
        items = value
    else:
        return frozenset()
    return frozenset(normalize_tag(str(item)) for item in items if str(item).strip())
