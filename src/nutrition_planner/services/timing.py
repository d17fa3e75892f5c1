"""Shift meal intensity around a training session.

The adjuster never changes which foods a meal holds. It attaches an
IntensityAdjustment to each affected meal and returns a new plan, so the
meal aggregate stays the adjusted sum of its foods.
"""

import logging
from collections.abc import Iterable
from dataclasses import replace
from enum import StrEnum

from nutrition_planner.domain.plans import (
    SLOT_ORDER,
    IntensityAdjustment,
    Meal,
    MealPlan,
    MealSlot,
)

_logger = logging.getLogger(__name__)

MORNING_CUTOFF_HOUR = 10
EVENING_START_HOUR = 16


class TrainingWindow(StrEnum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"


# (meal before training, meal after training)
WINDOW_SLOTS: dict[TrainingWindow, tuple[MealSlot, MealSlot]] = {
    TrainingWindow.MORNING: (MealSlot.BREAKFAST, MealSlot.MORNING_SNACK),
    TrainingWindow.AFTERNOON: (MealSlot.LUNCH, MealSlot.AFTERNOON_SNACK),
    TrainingWindow.EVENING: (MealSlot.AFTERNOON_SNACK, MealSlot.DINNER),
}

PRE_WORKOUT_ADJUSTMENT = IntensityAdjustment(
    calories=1.2, protein=1.2, carbs=1.2 * 1.2, fats=1.2 * 0.8, fiber=1.2
)
POST_WORKOUT_ADJUSTMENT = IntensityAdjustment(
    calories=1.1, protein=1.1 * 1.2, carbs=1.1, fats=1.1 * 0.8, fiber=1.1
)
DISTANT_MEAL_ADJUSTMENT = IntensityAdjustment(
    calories=0.8, protein=0.8, carbs=0.8, fats=0.8, fiber=0.8
)


def parse_training_time(value: str) -> tuple[int, int]:
    """Parse ``HH:MM`` into hour and minute."""
    parts = value.strip().split(":")
    if len(parts) != 2 or not all(part.isdigit() for part in parts):
        raise ValueError(f"Training time must look like HH:MM, got {value!r}")
    hour, minute = int(parts[0]), int(parts[1])
    if not 0 <= hour <= 23 or not 0 <= minute <= 59:
        raise ValueError(f"Training time out of range: {value!r}")
    return hour, minute


def classify_training_window(training_time: str) -> TrainingWindow:
    hour, _ = parse_training_time(training_time)
    if hour < MORNING_CUTOFF_HOUR:
        return TrainingWindow.MORNING
    if hour < EVENING_START_HOUR:
        return TrainingWindow.AFTERNOON
    return TrainingWindow.EVENING


def workout_slots(training_time: str | None) -> tuple[MealSlot | None, MealSlot | None]:
    """Return the meals right before and right after training, if any."""
    if not training_time:
        return None, None
    return WINDOW_SLOTS[classify_training_window(training_time)]


def adjust_for_training(
    plan: MealPlan,
    training_time: str | None,
    *,
    conserve_budget: bool = True,
    renormalize: bool = True,
) -> MealPlan:
    """Return a new plan with meal intensities shifted around training.

    With ``renormalize`` the adjusted day is scaled back so its calories match
    the calories before adjustment; otherwise the multipliers compound freely.
    """
    pre_slot, post_slot = workout_slots(training_time)
    if pre_slot is None or post_slot is None:
        return plan

    pre_index = SLOT_ORDER.index(pre_slot)
    post_index = SLOT_ORDER.index(post_slot)
    adjusted: dict[MealSlot, Meal] = {}
    for slot, meal in plan.meals.items():
        if slot == pre_slot:
            extra = PRE_WORKOUT_ADJUSTMENT
        elif slot == post_slot:
            extra = POST_WORKOUT_ADJUSTMENT
        elif conserve_budget and _is_distant(SLOT_ORDER.index(slot), pre_index, post_index):
            extra = DISTANT_MEAL_ADJUSTMENT
        else:
            extra = IntensityAdjustment()
        adjusted[slot] = replace(meal, adjustment=meal.adjustment.combine(extra))

    if renormalize:
        before = _raw_calories(plan.meals.values())
        after = _raw_calories(adjusted.values())
        if before > 0 and after > 0:
            factor = before / after
            adjusted = {
                slot: replace(meal, adjustment=meal.adjustment.scaled(factor))
                for slot, meal in adjusted.items()
            }
            _logger.debug("Renormalized training adjustments by %.3f", factor)

    return replace(plan, meals=adjusted)


def _is_distant(index: int, pre_index: int, post_index: int) -> bool:
    return abs(index - pre_index) > 1 and abs(index - post_index) > 1


def _raw_calories(meals: Iterable[Meal]) -> float:
    return sum(meal.adjustment.apply(meal.food_nutrients).calories for meal in meals)
