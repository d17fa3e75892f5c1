"""Greedy meal assembly.

For each meal slot:
1. Take the score-ranked candidate list (stable, ties keep catalog order)
2. Walk it while budget remains, at most MAX_FOODS_PER_MEAL foods
3. Give each food a fair share of the remaining calories, capped at twice its
   reference serving; protein sources get at least 30% of the slot
4. Portion the food against that allocation and proportionally scaled macro
   caps, then spend its actual calories

The walk is best effort; exact macro adherence is checked by the validator.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence

from nutrition_planner.domain.errors import InsufficientCandidatesError
from nutrition_planner.domain.foods import Food
from nutrition_planner.domain.nutrition import MacroTargets
from nutrition_planner.domain.plans import (
    SLOT_CALORIE_SHARES,
    SLOT_ORDER,
    Meal,
    MealSlot,
    PortionedFood,
)
from nutrition_planner.services.catalog import foods_for_slot, workout_compatible
from nutrition_planner.services.portions import calculate_portion
from nutrition_planner.services.scoring import ScoredFood

MAX_FOODS_PER_MEAL = 5
MIN_CALORIES_PER_FOOD = 50.0
MAX_SERVINGS_PER_FOOD = 2.0
PROTEIN_SOURCE_MIN_SHARE = 0.30

_logger = logging.getLogger(__name__)


def slot_targets(targets: MacroTargets) -> dict[MealSlot, MacroTargets]:
    """Split daily targets across the five slots by their calorie shares."""
    return {slot: targets.scaled(SLOT_CALORIE_SHARES[slot]) for slot in SLOT_ORDER}


def allocate_calories(
    food: Food,
    remaining: float,
    slot_calories: float,
    open_positions: int,
) -> float:
    """Return the calorie allocation for the next food in a slot."""
    allocation = remaining / max(open_positions, 1)
    if food.is_protein_source:
        allocation = max(allocation, slot_calories * PROTEIN_SOURCE_MIN_SHARE)
    allocation = min(allocation, food.calories * MAX_SERVINGS_PER_FOOD)
    return min(allocation, remaining)


def optimize_meal(
    candidates: Sequence[ScoredFood],
    slot: MealSlot,
    budget: MacroTargets,
    *,
    max_foods: int = MAX_FOODS_PER_MEAL,
    min_calories_per_food: float = MIN_CALORIES_PER_FOOD,
) -> Meal:
    """Greedily select and portion foods for one slot.

    ``budget`` holds the slot's calorie budget and macro sub-targets. A slot
    that ends the walk without a single food raises
    InsufficientCandidatesError.
    """
    if not candidates:
        raise InsufficientCandidatesError(slot.value)

    selected: list[PortionedFood] = []
    remaining = budget.calories
    for index, candidate in enumerate(candidates):
        if len(selected) >= max_foods:
            break
        if remaining < min_calories_per_food:
            break
        open_positions = min(max_foods - len(selected), len(candidates) - index)
        allocation = allocate_calories(
            candidate.food, remaining, budget.calories, open_positions
        )
        if allocation < min_calories_per_food:
            continue
        caps = budget.scaled(allocation / budget.calories)
        portioned = calculate_portion(candidate.food, allocation, caps)
        selected.append(portioned)
        remaining -= portioned.nutrients.calories

    if not selected:
        raise InsufficientCandidatesError(slot.value)
    _logger.debug(
        "Optimized %s: foods=%s remaining_kcal=%.0f",
        slot.value,
        len(selected),
        remaining,
    )
    return Meal(slot=slot, foods=tuple(selected))


def order_slot_candidates(
    ranked: Sequence[ScoredFood],
    slot: MealSlot,
    *,
    preferred: Iterable[str] = (),
    deprioritized: Iterable[str] = (),
) -> list[ScoredFood]:
    """Restrict ranked foods to a slot and reorder them by preference.

    Preferred ids move to the front and deprioritized ids to the back; both
    moves are stable partitions of the score order.
    """
    slot_ids = {food.id for food in foods_for_slot((item.food for item in ranked), slot)}
    eligible = [
        item for item in ranked
        if item.food.id in slot_ids and item.food.calories > 0
    ]
    preferred_ids = set(preferred)
    deprioritized_ids = set(deprioritized)
    return sorted(
        eligible,
        key=lambda item: (
            item.food.id not in preferred_ids,
            item.food.id in deprioritized_ids,
        ),
    )


def build_day(
    ranked: Sequence[ScoredFood],
    targets: MacroTargets,
    *,
    pre_workout_slot: MealSlot | None = None,
    post_workout_slot: MealSlot | None = None,
    recent_picks: Mapping[MealSlot, set[str]] | None = None,
    max_foods: int = MAX_FOODS_PER_MEAL,
) -> dict[MealSlot, Meal]:
    """Assemble all five slots for one day.

    ``recent_picks`` holds the foods chosen for each slot on the previous day;
    they are tried last so the week varies.
    """
    recent_picks = recent_picks or {}
    budgets = slot_targets(targets)
    foods = [item.food for item in ranked]
    meals: dict[MealSlot, Meal] = {}
    for slot in SLOT_ORDER:
        preferred: list[str] = []
        if slot == pre_workout_slot:
            preferred = [f.id for f in workout_compatible(foods, pre_workout=True)]
        elif slot == post_workout_slot:
            preferred = [f.id for f in workout_compatible(foods, pre_workout=False)]
        candidates = order_slot_candidates(
            ranked,
            slot,
            preferred=preferred,
            deprioritized=recent_picks.get(slot, set()),
        )
        meals[slot] = optimize_meal(
            candidates, slot, budgets[slot], max_foods=max_foods
        )
    return meals
